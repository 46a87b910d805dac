"""
Admin configuration for SOS cases.

Cases and their status logs are read-only here: lifecycle changes must go
through CaseService or the assignment engine so the log stays complete.
"""

from django.contrib import admin

from .models import CaseStatusLog, SOSCase


class CaseStatusLogInline(admin.TabularInline):
    model = CaseStatusLog
    extra = 0
    can_delete = False
    readonly_fields = ['from_status', 'to_status', 'changed_by', 'notes', 'timestamp']

    def has_add_permission(self, request, obj=None):
        return False


@admin.register(SOSCase)
class SOSCaseAdmin(admin.ModelAdmin):
    list_display = ['case_number', 'status', 'officer', 'priority', 'assigned_at', 'created_at']
    list_filter = ['status', 'priority', 'created_at']
    search_fields = ['case_number', 'address', 'officer__officer_code']
    ordering = ['-created_at']
    date_hierarchy = 'created_at'
    readonly_fields = [
        'id', 'case_number', 'reported_by', 'latitude', 'longitude', 'accuracy',
        'address', 'description', 'status', 'priority', 'officer', 'assigned_at',
        'assigned_by', 'closed_at', 'closure_notes', 'created_at', 'updated_at',
    ]
    inlines = [CaseStatusLogInline]

    def has_add_permission(self, request):
        return False

    def has_delete_permission(self, request, obj=None):
        return False
