"""
API URL patterns for registrations app.
"""
from django.urls import path
from . import views

urlpatterns = [
    path('register', views.register, name='register'),
    path('register/', views.register),
]
