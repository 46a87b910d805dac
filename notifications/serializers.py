"""
Serializers for notifications.
"""

from rest_framework import serializers

from .models import Notification


class NotificationSerializer(serializers.ModelSerializer):

    notification_type_display = serializers.CharField(
        source='get_notification_type_display',
        read_only=True
    )
    case_id = serializers.SerializerMethodField()

    class Meta:
        model = Notification
        fields = [
            'id',
            'title',
            'message',
            'notification_type',
            'notification_type_display',
            'case_id',
            'is_read',
            'read_at',
            'created_at',
        ]
        read_only_fields = fields

    def get_case_id(self, obj):
        return str(obj.case_id) if obj.case_id else None
