"""
URL configuration for core project.

The `urlpatterns` list routes URLs to views. For more information please see:
    https://docs.djangoproject.com/en/5.2/topics/http/urls/
"""
from django.contrib import admin
from django.urls import path, include

from contact.views import ContactPageView

urlpatterns = [
    path('', ContactPageView.as_view(), name='home'),
    path('admin/', admin.site.urls),
    path('contact/', include('contact.urls')),  # Public contact form endpoints
]
