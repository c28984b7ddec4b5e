"""
HR App - Main URL Configuration
This file routes URLs to the appropriate sub-apps within the HR module.
"""
from django.urls import path, include

app_name = 'hr'

urlpatterns = [
    # Offboarding lifecycle URLs
    path('offboarding/', include('HR.offboarding.urls')),
]
