"""
Profiles app views

ViewSet for StudentProfile management.
"""
from rest_framework import viewsets
from rest_framework.exceptions import PermissionDenied, ValidationError
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from .models import StudentProfile
from .serializers import StudentProfileSerializer


class StudentProfileViewSet(viewsets.ModelViewSet):
    """
    ViewSet for StudentProfile.

    - Students can CRUD their own profile
    - Admins can list all profiles
    """

    serializer_class = StudentProfileSerializer
    permission_classes = [IsAuthenticated]

    def get_queryset(self):
        """
        Filter queryset based on user role.
        - Admins see all profiles
        - Users see only their own profile
        """
        if self.request.user.role == 'ADMIN':
            return StudentProfile.objects.all()
        return StudentProfile.objects.filter(user=self.request.user)

    def perform_create(self, serializer):
        """Automatically set user from request."""
        if self.request.user.role != 'STUDENT':
            raise PermissionDenied('Only students have a student profile.')
        if StudentProfile.objects.filter(user=self.request.user).exists():
            raise ValidationError('Profile already exists.')
        serializer.save(user=self.request.user)

    def list(self, request, *args, **kwargs):
        """
        List profiles. For non-admin users, return their profile or empty list.
        """
        queryset = self.get_queryset()
        serializer = self.get_serializer(queryset, many=True)
        return Response(serializer.data)
