"""
URL configuration for responders.
"""

from django.urls import path

from . import views

app_name = 'responders'

urlpatterns = [
    path('location/', views.LocationUpdateView.as_view(), name='location-update'),
    path('locations/active/', views.ActiveLocationsView.as_view(), name='active-locations'),
    path('<uuid:pk>/location-history/', views.LocationHistoryView.as_view(), name='location-history'),
]
