"""
Query filters for the case list.
"""

from django_filters import rest_framework as filters

from .models import CaseStatus, SOSCase


class SOSCaseFilter(filters.FilterSet):
    """Filter for SOS cases."""

    status = filters.ChoiceFilter(choices=CaseStatus.choices)
    officer = filters.UUIDFilter(field_name='officer__id')
    created_at_after = filters.DateTimeFilter(field_name='created_at', lookup_expr='gte')
    created_at_before = filters.DateTimeFilter(field_name='created_at', lookup_expr='lte')

    class Meta:
        model = SOSCase
        fields = ['status', 'officer', 'priority']
