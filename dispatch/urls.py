"""
URL configuration for dispatch.
"""

from django.urls import path

from . import views

app_name = 'dispatch'

urlpatterns = [
    path('nearby-officers/', views.NearbyOfficersView.as_view(), name='nearby-officers'),
    path('nearby-stations/', views.NearbyStationsView.as_view(), name='nearby-stations'),
    path('cases/<uuid:pk>/auto-assign/', views.AutoAssignView.as_view(), name='auto-assign'),
]
