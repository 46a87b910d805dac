"""
URL configuration for SOS cases.
"""

from django.urls import path

from . import views

app_name = 'cases'

urlpatterns = [
    path('', views.CaseListCreateView.as_view(), name='list-create'),
    path('<uuid:pk>/', views.CaseDetailView.as_view(), name='detail'),
    path('<uuid:pk>/status/', views.CaseStatusUpdateView.as_view(), name='status'),
    path('<uuid:pk>/history/', views.CaseHistoryView.as_view(), name='history'),
    path('<uuid:pk>/reassign/', views.CaseReassignView.as_view(), name='reassign'),
]
