"""
Project-level views: health probe and the role-aware dashboard.
"""
from django.db.models import Count
from django.http import JsonResponse
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from experience.models import Experience
from notifications.models import Notification
from verification.models import VerificationRequest


def health_check(request):
    """Liveness probe."""
    return JsonResponse({'status': 'ok'})


def _counts_by_status(queryset):
    rows = queryset.order_by().values('status').annotate(total=Count('id'))
    return {row['status']: row['total'] for row in rows}


class DashboardView(APIView):
    """
    GET /api/dashboard/

    Counts for the current user's role:
    - Students: their experiences by status
    - Organization members: their organization's requests by status, plus
      the open ones assigned to them
    - Admins: everything
    """

    permission_classes = [IsAuthenticated]

    def get(self, request):
        user = request.user
        data = {
            'role': user.role,
            'unread_notifications': Notification.objects.filter(user=user, is_read=False).count(),
        }

        if user.role == 'STUDENT':
            experiences = Experience.objects.filter(student__user=user)
            data['experiences'] = _counts_by_status(experiences)
            data['public_experiences'] = experiences.filter(is_public=True).count()
        elif user.role == 'ORGANIZATION':
            requests = VerificationRequest.objects.filter(organization_id=user.organization_id)
            data['verification_requests'] = _counts_by_status(requests)
            data['assigned_to_me'] = requests.filter(assigned_to=user, status='PENDING').count()
        else:
            data['experiences'] = _counts_by_status(Experience.objects.all())
            data['verification_requests'] = _counts_by_status(VerificationRequest.objects.all())

        return Response(data)
