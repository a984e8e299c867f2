"""
Notifications app views

Lets the authenticated user read and acknowledge their notifications.
"""
from rest_framework import viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from .models import Notification
from .serializers import NotificationSerializer
from .services import mark_all_read, mark_read


class NotificationViewSet(viewsets.ReadOnlyModelViewSet):
    """
    GET /api/notifications/ - List own notifications (?unread=true)
    GET /api/notifications/{id}/ - Retrieve one notification
    POST /api/notifications/{id}/read/ - Mark as read
    POST /api/notifications/read-all/ - Mark every notification as read
    GET /api/notifications/unread-count/ - Number of unread notifications
    """

    serializer_class = NotificationSerializer
    permission_classes = [IsAuthenticated]

    def get_queryset(self):
        queryset = Notification.objects.filter(user=self.request.user)
        if self.request.query_params.get('unread') in ('1', 'true', 'True'):
            queryset = queryset.filter(is_read=False)
        return queryset

    @action(detail=True, methods=['post'])
    def read(self, request, pk=None):
        notification = mark_read(self.get_object())
        return Response(self.get_serializer(notification).data)

    @action(detail=False, methods=['post'], url_path='read-all')
    def read_all(self, request):
        updated = mark_all_read(request.user)
        return Response({'updated': updated})

    @action(detail=False, methods=['get'], url_path='unread-count')
    def unread_count(self, request):
        count = Notification.objects.filter(user=request.user, is_read=False).count()
        return Response({'unread': count})
