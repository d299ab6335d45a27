"""
URL patterns for the token-protected admin API.
"""
from django.urls import path
from . import admin_views

urlpatterns = [
    path('login', admin_views.admin_login, name='admin_login'),
    path('login/', admin_views.admin_login),
    path('registrations', admin_views.admin_registrations, name='admin_registrations'),
    path('registrations/', admin_views.admin_registrations),
]
