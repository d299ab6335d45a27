"""
URL configuration for yukti_project project.
"""
from django.contrib import admin
from django.urls import path, include

urlpatterns = [
    path('django-admin/', admin.site.urls),  # Django's default admin (optional)
    path('api/admin/', include('registrations.admin_urls')),  # Token-protected admin API
    path('api/', include('registrations.api_urls')),
]
