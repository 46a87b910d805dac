"""
Admin configuration for notifications.

READ-ONLY: notifications are only created via NotificationService.
"""

from django.contrib import admin
from django.utils.html import format_html

from .models import Notification


@admin.register(Notification)
class NotificationAdmin(admin.ModelAdmin):

    list_display = ['short_id', 'recipient', 'title', 'notification_type', 'case', 'is_read_badge', 'created_at']
    list_filter = ['notification_type', 'is_read', 'created_at']
    search_fields = ['recipient__identifier', 'title', 'message', 'case__case_number']
    ordering = ['-created_at']
    readonly_fields = [
        'id', 'recipient', 'title', 'message', 'notification_type', 'case',
        'is_read', 'read_at', 'created_at', 'updated_at',
    ]

    def short_id(self, obj):
        return str(obj.id)[:8] + '...'
    short_id.short_description = 'ID'

    def is_read_badge(self, obj):
        if obj.is_read:
            return format_html('<span style="color: #27ae60;">{}</span>', 'Read')
        return format_html('<span style="color: #e74c3c; font-weight: bold;">{}</span>', 'Unread')
    is_read_badge.short_description = 'Status'

    def has_add_permission(self, request):
        return False

    def has_delete_permission(self, request, obj=None):
        return False
