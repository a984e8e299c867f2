"""
Organizations app views

Read-only listing so students can pick the organization that should verify
an experience.
"""
from rest_framework import viewsets
from rest_framework.permissions import IsAuthenticated

from .models import Organization
from .serializers import OrganizationSerializer


class OrganizationViewSet(viewsets.ReadOnlyModelViewSet):
    """
    GET /api/organizations/ - List active organizations (?search=name)
    GET /api/organizations/{id}/ - Retrieve one organization
    """

    serializer_class = OrganizationSerializer
    permission_classes = [IsAuthenticated]

    def get_queryset(self):
        queryset = Organization.objects.filter(is_active=True)
        search = self.request.query_params.get('search')
        if search:
            queryset = queryset.filter(name__icontains=search)
        return queryset
