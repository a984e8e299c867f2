"""
Accounts app permissions

Custom permissions for role-based access control.
"""
from rest_framework import permissions


class IsAdminOrSelf(permissions.BasePermission):
    """
    Permission that allows:
    - Admins to access any user
    - Users to access only their own data
    """

    def has_object_permission(self, request, view, obj):
        # Admin users can access anything
        if request.user.role == 'ADMIN':
            return True

        # Users can only access their own data
        return obj == request.user


class IsStudent(permissions.BasePermission):
    """Only users with the STUDENT role."""

    message = 'Only students can perform this action.'

    def has_permission(self, request, view):
        return bool(request.user and request.user.is_authenticated and request.user.role == 'STUDENT')


class IsOrganizationMember(permissions.BasePermission):
    """
    Organization reviewers attached to an organization, or admins.
    """

    message = 'Only organization members can perform this action.'

    def has_permission(self, request, view):
        user = request.user
        if not (user and user.is_authenticated):
            return False
        if user.role == 'ADMIN':
            return True
        return user.role == 'ORGANIZATION' and user.organization_id is not None
