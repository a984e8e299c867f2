"""
Verification app views

Organization reviewers work the queue of verification requests addressed to
their organization; students follow their own requests.
"""
from django.db.models import Count
from rest_framework import viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from accounts.context import ActorContext
from accounts.permissions import IsOrganizationMember, IsStudent

from . import errors
from .engine import VerificationEngine
from .models import VerificationRequest
from .responses import error_response
from .serializers import (
    ApproveSerializer,
    AssignSerializer,
    BulkSerializer,
    RejectSerializer,
    RequestInfoSerializer,
    VerificationRequestSerializer,
)

REQUEST_RELATIONS = (
    'student', 'organization', 'experience', 'assigned_to', 'processed_by',
)


class OrganizationVerificationRequestViewSet(viewsets.ReadOnlyModelViewSet):
    """
    ViewSet for the organization review queue.

    - GET: Requests addressed to the member's organization
      (filters: status, student, assigned_to, experience)
    - GET {id}: Retrieve one request with its messages
    - POST {id}/approve/: {"note": "..."}
    - POST {id}/reject/: {"reason": "..."}
    - POST {id}/request-info/: {"message": "..."}
    - POST {id}/assign/: {"assignee": user_id}
    - POST bulk/: {"operation": "approve"|"reject", "experience_ids": [...]}
    - GET stats/: Request counts per status
    """

    serializer_class = VerificationRequestSerializer
    permission_classes = [IsAuthenticated, IsOrganizationMember]
    engine_class = VerificationEngine

    def get_engine(self):
        return self.engine_class()

    def get_queryset(self):
        """
        Scope to the member's organization.
        Admins can see all requests.
        """
        user = self.request.user
        queryset = VerificationRequest.objects.select_related(*REQUEST_RELATIONS).prefetch_related('messages')
        if user.role != 'ADMIN':
            queryset = queryset.filter(organization_id=user.organization_id)

        params = self.request.query_params
        if params.get('status'):
            queryset = queryset.filter(status=params['status'].upper())
        if params.get('student'):
            queryset = queryset.filter(student_id=params['student'])
        if params.get('assigned_to'):
            queryset = queryset.filter(assigned_to_id=params['assigned_to'])
        if params.get('experience'):
            queryset = queryset.filter(experience_id=params['experience'])
        return queryset

    @action(detail=True, methods=['post'])
    def approve(self, request, pk=None):
        serializer = ApproveSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        return self._decide(
            request, pk, 'approve', note=serializer.validated_data['note'],
        )

    @action(detail=True, methods=['post'])
    def reject(self, request, pk=None):
        serializer = RejectSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        return self._decide(
            request, pk, 'reject', reason=serializer.validated_data['reason'],
        )

    @action(detail=True, methods=['post'], url_path='request-info')
    def request_info(self, request, pk=None):
        serializer = RequestInfoSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        return self._decide(
            request, pk, 'request_more_info', message=serializer.validated_data['message'],
        )

    @action(detail=True, methods=['post'])
    def assign(self, request, pk=None):
        serializer = AssignSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        result = self.get_engine().assign(
            pk, ActorContext.from_request(request), serializer.validated_data['assignee'],
        )
        if not result.ok:
            return error_response(result.error)
        return Response(self._serialize(result.request.pk))

    @action(detail=False, methods=['post'])
    def bulk(self, request):
        """
        Approve or reject several experiences at once.

        Returns 200 with per-item failures; one bad item never blocks the rest.
        """
        serializer = BulkSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        outcome = self.get_engine().bulk(
            data['experience_ids'],
            ActorContext.from_request(request),
            data['operation'],
            note=data['note'],
            reason=data['reason'],
        )
        return Response({'successful': outcome.successful, 'failed': outcome.failed})

    @action(detail=False, methods=['get'])
    def stats(self, request):
        rows = self.get_queryset().prefetch_related(None).order_by().values('status').annotate(total=Count('id'))
        counts = {row['status']: row['total'] for row in rows}
        return Response({'total': sum(counts.values()), 'by_status': counts})

    def _decide(self, request, pk, operation, **kwargs):
        """
        Run ``operation`` on the experience behind request ``pk``.

        The request is looked up unscoped so that a reviewer from another
        organization gets UNAUTHORIZED from the engine instead of a 404.
        """
        verification_request = VerificationRequest.objects.filter(pk=pk).first()
        if verification_request is None:
            return error_response(errors.NotFound('Verification request not found.'))
        if not verification_request.is_open:
            actor = ActorContext.from_request(request)
            if not (actor.is_admin or actor.is_member_of(verification_request.organization_id)):
                return error_response(errors.Unauthorized(
                    'You are not a member of the organization handling this request.'
                ))
            return error_response(errors.InvalidState(
                f'This verification request is already {verification_request.get_status_display().lower()}.'
            ))

        engine = self.get_engine()
        result = getattr(engine, operation)(
            verification_request.experience_id,
            ActorContext.from_request(request),
            request_id=verification_request.pk,
            **kwargs,
        )
        if not result.ok:
            return error_response(result.error)
        return Response(self._serialize(verification_request.pk))

    def _serialize(self, request_id):
        instance = (
            VerificationRequest.objects.select_related(*REQUEST_RELATIONS)
            .prefetch_related('messages')
            .get(pk=request_id)
        )
        return self.get_serializer(instance).data


class StudentVerificationRequestViewSet(viewsets.ReadOnlyModelViewSet):
    """
    ViewSet for a student's own verification requests.

    - GET: List requests (filter: status)
    - GET {id}: Retrieve one request with reviewer messages
    """

    serializer_class = VerificationRequestSerializer
    permission_classes = [IsAuthenticated, IsStudent]

    def get_queryset(self):
        queryset = (
            VerificationRequest.objects.select_related(*REQUEST_RELATIONS)
            .prefetch_related('messages')
            .filter(student__user=self.request.user)
        )
        request_status = self.request.query_params.get('status')
        if request_status:
            queryset = queryset.filter(status=request_status.upper())
        return queryset
