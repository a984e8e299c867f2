"""
Accounts app views

ViewSet for user management.
"""
import logging

from rest_framework import viewsets
from rest_framework.decorators import action
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated, IsAdminUser

from .models import User
from .serializers import UserSerializer
from .permissions import IsAdminOrSelf

logger = logging.getLogger(__name__)


class UserViewSet(viewsets.ModelViewSet):
    """
    ViewSet for User management.

    - List/create: Staff/admin only
    - Retrieve/update: Admin or self only
    - Delete: Admin or self; deactivates the account
    - Special 'me' endpoint for current user
    """

    queryset = User.objects.select_related('organization').all()
    serializer_class = UserSerializer

    def get_permissions(self):
        """
        Instantiate and return the list of permissions that this view requires.
        """
        if self.action in ['list', 'create']:
            permission_classes = [IsAdminUser]
        elif self.action == 'me':
            permission_classes = [IsAuthenticated]
        else:
            permission_classes = [IsAuthenticated, IsAdminOrSelf]
        return [permission() for permission in permission_classes]

    def perform_destroy(self, instance):
        """
        Deactivate instead of deleting.

        Approvals and audit entries keep pointing at the user.
        """
        instance.is_active = False
        instance.save(update_fields=['is_active'])
        logger.info("User %s deactivated by user %s", instance.pk, self.request.user.pk)

    @action(detail=False, methods=['get'])
    def me(self, request):
        """
        Return the current authenticated user's data.

        GET /api/users/me/
        """
        serializer = self.get_serializer(request.user)
        return Response(serializer.data)
