"""Notification API views."""

from __future__ import annotations

from django.core.exceptions import ValidationError
from django_filters.rest_framework import DjangoFilterBackend
from rest_framework import status
from rest_framework.decorators import action
from rest_framework.pagination import PageNumberPagination
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.viewsets import GenericViewSet

from modules.notifications.exceptions import NotificationNotFound
from modules.notifications.filters import NotificationFilter
from modules.notifications.models import Notification
from modules.notifications.serializers import NotificationSerializer
from modules.notifications.services import NotificationService


class NotificationViewSet(GenericViewSet):
    """Notifications visible to the signed-in user."""

    queryset = Notification.objects.none()
    serializer_class = NotificationSerializer
    filterset_class = NotificationFilter
    filter_backends = [DjangoFilterBackend]
    pagination_class = PageNumberPagination

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._service = NotificationService()

    def get_queryset(self):
        return self._service.list_for(self.request.user)

    def list(self, request: Request) -> Response:
        """GET /api/v1/notifications/"""
        queryset = self.filter_queryset(self.get_queryset())
        page = self.paginate_queryset(queryset)
        serializer = NotificationSerializer(page, many=True)
        return self.get_paginated_response(serializer.data)

    @action(detail=True, methods=["post"])
    def read(self, request: Request, pk: str | None = None) -> Response:
        """POST /api/v1/notifications/{pk}/read/"""
        try:
            notification = self._service.mark_read(str(pk), request.user)
        except (NotificationNotFound, ValidationError, ValueError):
            return Response(
                {"detail": "Notification not found."},
                status=status.HTTP_404_NOT_FOUND,
            )
        return Response(NotificationSerializer(notification).data)

    @action(detail=False, methods=["post"], url_path="read-all")
    def read_all(self, request: Request) -> Response:
        """POST /api/v1/notifications/read-all/"""
        count = self._service.mark_all_read(request.user)
        return Response({"success": True, "updated": count})
