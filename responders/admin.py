"""
Admin configuration for stations and officers.

Station and officer management happens here only; there is no API for it.
"""

from django.contrib import admin
from django.utils.html import format_html

from .models import Officer, OfficerLocationLog, OfficerStatus, Station


@admin.register(Station)
class StationAdmin(admin.ModelAdmin):
    list_display = ['name', 'district', 'state', 'latitude', 'longitude', 'is_active']
    list_filter = ['is_active', 'state', 'district']
    search_fields = ['name', 'district', 'address']
    readonly_fields = ['id', 'created_at', 'updated_at']


@admin.register(Officer)
class OfficerAdmin(admin.ModelAdmin):
    list_display = ['officer_code', 'user', 'station', 'status_badge', 'last_location_update']
    list_filter = ['status', 'station']
    search_fields = ['officer_code', 'user__identifier', 'user__name']
    readonly_fields = ['id', 'current_lat', 'current_lng', 'last_location_update', 'created_at', 'updated_at']

    def status_badge(self, obj):
        colors = {
            OfficerStatus.AVAILABLE: '#27ae60',
            OfficerStatus.ON_DUTY: '#3498db',
            OfficerStatus.BUSY: '#e67e22',
            OfficerStatus.OFF_DUTY: '#95a5a6',
        }
        return format_html(
            '<span style="background-color: {}; color: white; padding: 2px 6px; '
            'border-radius: 3px; font-size: 10px;">{}</span>',
            colors.get(obj.status, '#95a5a6'), obj.get_status_display()
        )
    status_badge.short_description = 'Status'


@admin.register(OfficerLocationLog)
class OfficerLocationLogAdmin(admin.ModelAdmin):
    list_display = ['officer', 'case', 'latitude', 'longitude', 'accuracy', 'timestamp']
    list_filter = ['timestamp']
    search_fields = ['officer__officer_code', 'case__case_number']
    readonly_fields = ['officer', 'case', 'latitude', 'longitude', 'accuracy', 'timestamp']

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False
