"""
Contact Form URL Configuration
"""
from django.urls import path
from .views import ContactFormBlockView, ContactFormSubmitView

app_name = 'contact'

urlpatterns = [
    path('submit/', ContactFormSubmitView.as_view(), name='submit'),
    path('block/', ContactFormBlockView.as_view(), name='block'),
]
