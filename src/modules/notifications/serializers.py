from __future__ import annotations

from rest_framework import serializers

from modules.notifications.models import Notification


class NotificationSerializer(serializers.ModelSerializer):
    class Meta:
        model = Notification
        fields = [
            "id",
            "audience",
            "title",
            "message",
            "level",
            "link",
            "is_read",
            "created_at",
        ]
        read_only_fields = fields
