"""
Experience app views

Student-facing experience management plus the verification entry points
(submit, withdraw) and portfolio visibility toggles.
"""
from django.core.exceptions import ValidationError as DjangoValidationError
from rest_framework import generics, status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response

from accounts.context import ActorContext
from organizations.models import Organization
from profiles.models import StudentProfile
from verification import errors
from verification.engine import VerificationEngine
from verification.responses import error_response, validation_error_response
from verification.serializers import AuditLogSerializer

from .models import Experience, VerificationStatus
from .serializers import (
    DocumentSerializer,
    ExperienceSerializer,
    PublicExperienceSerializer,
    SubmitVerificationSerializer,
)
from .services import ExperienceService

CONTENT_FIELDS = [
    'title',
    'description',
    'type',
    'level',
    'start_date',
    'end_date',
    'is_ongoing',
    'location',
    'skills',
    'achievements',
]


def _resolve_organization(value):
    """Organization for a submitted id, ``None`` when no id was given."""
    if value in (None, ''):
        return None
    try:
        organization = Organization.objects.filter(pk=int(value), is_active=True).first()
    except (TypeError, ValueError):
        organization = None
    if organization is None:
        raise errors.NotFound('Organization not found.')
    return organization


def _is_truthy(value) -> bool:
    return value in (True, 'true', 'True', '1', 1)


class ExperienceViewSet(viewsets.ModelViewSet):
    """
    ViewSet for Experience.

    - POST: Create a DRAFT experience (``submit: true`` also submits it)
    - GET: Students list their own; organization members list what was
      submitted to their organization; admins list everything
    - PUT/PATCH {id}: Edit while DRAFT or REJECTED
    - DELETE {id}: Delete while DRAFT or REJECTED
    - POST {id}/submit-verification/: Send to the organization for review
    - POST {id}/withdraw-verification/: Pull a pending submission back
    - POST {id}/publish/ and {id}/unpublish/: Portfolio visibility
    - GET/POST {id}/documents/: Supporting documents
    - GET {id}/history/: Audit trail
    """

    serializer_class = ExperienceSerializer
    permission_classes = [IsAuthenticated]
    engine_class = VerificationEngine

    def get_engine(self):
        return self.engine_class()

    def get_queryset(self):
        """
        Filter experiences by role.
        Admins can see all experiences.
        """
        user = self.request.user
        queryset = Experience.objects.select_related(
            'student', 'organization', 'verified_by',
        ).prefetch_related('documents')

        if user.role == 'ADMIN':
            return queryset
        if user.role == 'ORGANIZATION':
            return queryset.filter(organization_id=user.organization_id).exclude(
                status=VerificationStatus.DRAFT,
            )
        return queryset.filter(student__user=user)

    def create(self, request, *args, **kwargs):
        """
        Create a new experience.

        Flow:
        1. Require a student profile
        2. Validate content via ExperienceService
        3. Optionally submit straight away
        """
        actor = ActorContext.from_request(request)
        if not actor.is_student:
            return error_response(errors.Unauthorized('Only students can create experiences.'))

        student = StudentProfile.objects.filter(user=request.user).first()
        if student is None:
            return error_response(errors.ValidationError('Create your student profile first.'))

        try:
            organization = _resolve_organization(request.data.get('organization'))
            experience = ExperienceService.create_experience(student, request.data, organization)
        except errors.VerificationError as exc:
            return error_response(exc)
        except DjangoValidationError as exc:
            return validation_error_response(exc)

        payload = {}
        if _is_truthy(request.data.get('submit')):
            result = self.get_engine().submit(
                experience.pk, actor, message=request.data.get('message') or '',
            )
            if result.ok:
                experience = result.experience
            else:
                # The draft was saved; tell the client why it is not pending.
                payload['submission_error'] = result.error.as_dict()

        data = self.get_serializer(self._reload(experience)).data
        data.update(payload)
        return Response(data, status=status.HTTP_201_CREATED)

    def update(self, request, *args, **kwargs):
        partial = kwargs.pop('partial', False)
        actor = ActorContext.from_request(request)

        try:
            experience = ExperienceService.get_owned_experience(kwargs.get('pk'), actor)
            data = {}
            if partial:
                data = {name: getattr(experience, name) for name in CONTENT_FIELDS}
            data.update({name: request.data[name] for name in CONTENT_FIELDS if name in request.data})
            organization = _resolve_organization(request.data.get('organization'))
            experience = ExperienceService.update_experience(experience.pk, actor, data, organization)
        except errors.VerificationError as exc:
            return error_response(exc)
        except DjangoValidationError as exc:
            return validation_error_response(exc)

        return Response(self.get_serializer(self._reload(experience)).data)

    def destroy(self, request, *args, **kwargs):
        actor = ActorContext.from_request(request)
        try:
            ExperienceService.delete_experience(kwargs.get('pk'), actor)
        except errors.VerificationError as exc:
            return error_response(exc)
        return Response(status=status.HTTP_204_NO_CONTENT)

    @action(detail=True, methods=['post'], url_path='submit-verification')
    def submit_verification(self, request, pk=None):
        """
        POST /api/experiences/{id}/submit-verification/
        Body: {"organization": id?, "document": id?, "message": "..."}
        """
        serializer = SubmitVerificationSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        result = self.get_engine().submit(
            pk,
            ActorContext.from_request(request),
            organization_id=serializer.validated_data.get('organization'),
            document_id=serializer.validated_data.get('document'),
            message=serializer.validated_data.get('message', ''),
        )
        if not result.ok:
            return error_response(result.error)
        return Response(self.get_serializer(self._reload(result.experience)).data)

    @action(detail=True, methods=['post'], url_path='withdraw-verification')
    def withdraw_verification(self, request, pk=None):
        result = self.get_engine().withdraw(pk, ActorContext.from_request(request))
        if not result.ok:
            return error_response(result.error)
        return Response(self.get_serializer(self._reload(result.experience)).data)

    @action(detail=True, methods=['post'])
    def publish(self, request, pk=None):
        return self._set_visibility(request, pk, True)

    @action(detail=True, methods=['post'])
    def unpublish(self, request, pk=None):
        return self._set_visibility(request, pk, False)

    @action(detail=True, methods=['get', 'post'])
    def documents(self, request, pk=None):
        """
        GET lists the experience's documents; POST attaches one
        ({"url": ..., "type": ..., "title": ...}).
        """
        actor = ActorContext.from_request(request)
        try:
            if request.method == 'POST':
                document = ExperienceService.add_document(pk, actor, request.data)
                return Response(DocumentSerializer(document).data, status=status.HTTP_201_CREATED)
            experience = self.get_object()
        except errors.VerificationError as exc:
            return error_response(exc)
        except DjangoValidationError as exc:
            return validation_error_response(exc)
        return Response(DocumentSerializer(experience.documents.all(), many=True).data)

    @action(detail=True, methods=['get'])
    def history(self, request, pk=None):
        try:
            entries = ExperienceService.history(pk, ActorContext.from_request(request))
        except errors.VerificationError as exc:
            return error_response(exc)
        return Response(AuditLogSerializer(entries, many=True).data)

    def _set_visibility(self, request, pk, is_public):
        try:
            experience = ExperienceService.set_visibility(pk, ActorContext.from_request(request), is_public)
        except errors.VerificationError as exc:
            return error_response(exc)
        return Response(self.get_serializer(self._reload(experience)).data)

    @staticmethod
    def _reload(experience):
        return (
            Experience.objects.select_related('student', 'organization', 'verified_by')
            .prefetch_related('documents')
            .get(pk=experience.pk)
        )


class PublicExperienceListView(generics.ListAPIView):
    """
    GET /api/public/experiences/

    Verified, public experiences. Filters: search, type, level,
    organization, skill, featured, sort (recent|featured|title).
    """

    serializer_class = PublicExperienceSerializer
    permission_classes = [AllowAny]
    authentication_classes = []

    def get_queryset(self):
        params = self.request.query_params
        return ExperienceService.get_public_experiences({
            'search': params.get('search'),
            'type': params.get('type'),
            'level': params.get('level'),
            'organization': params.get('organization'),
            'skill': params.get('skill'),
            'featured': params.get('featured'),
            'sort': params.get('sort'),
        })
