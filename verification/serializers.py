"""
Verification app serializers
"""
from rest_framework import serializers

from .models import AuditLog, VerificationMessage, VerificationRequest


class VerificationMessageSerializer(serializers.ModelSerializer):
    author_username = serializers.CharField(source='author.username', read_only=True, default=None)

    class Meta:
        model = VerificationMessage
        fields = ['id', 'author', 'author_username', 'body', 'created_at']
        read_only_fields = fields


class VerificationRequestSerializer(serializers.ModelSerializer):
    """
    Verification request with the experience and student it concerns.
    """

    student_name = serializers.CharField(source='student.full_name', read_only=True)
    organization_name = serializers.CharField(source='organization.name', read_only=True, default=None)
    experience_status = serializers.CharField(source='experience.status', read_only=True)
    assigned_to_username = serializers.CharField(source='assigned_to.username', read_only=True, default=None)
    processed_by_username = serializers.CharField(source='processed_by.username', read_only=True, default=None)
    messages = VerificationMessageSerializer(many=True, read_only=True)

    class Meta:
        model = VerificationRequest
        fields = [
            'id',
            'type',
            'title',
            'message',
            'response_note',
            'status',
            'priority',
            'student',
            'student_name',
            'organization',
            'organization_name',
            'experience',
            'experience_status',
            'document',
            'assigned_to',
            'assigned_to_username',
            'processed_at',
            'processed_by',
            'processed_by_username',
            'due_date',
            'messages',
            'created_at',
            'updated_at',
        ]
        read_only_fields = fields


class AuditLogSerializer(serializers.ModelSerializer):
    actor_username = serializers.CharField(source='actor.username', read_only=True, default=None)

    class Meta:
        model = AuditLog
        fields = [
            'id',
            'action',
            'entity',
            'entity_id',
            'actor',
            'actor_username',
            'old_values',
            'new_values',
            'details',
            'created_at',
        ]
        read_only_fields = fields


class ApproveSerializer(serializers.Serializer):
    note = serializers.CharField(required=False, allow_blank=True, default='')


class RejectSerializer(serializers.Serializer):
    # Blank reasons reach the engine, which reports them as VALIDATION_ERROR.
    reason = serializers.CharField(required=False, allow_blank=True, default='')


class RequestInfoSerializer(serializers.Serializer):
    message = serializers.CharField(required=False, allow_blank=True, default='')


class AssignSerializer(serializers.Serializer):
    assignee = serializers.IntegerField()


class BulkSerializer(serializers.Serializer):
    operation = serializers.ChoiceField(choices=['approve', 'reject'])
    experience_ids = serializers.ListField(child=serializers.IntegerField(), allow_empty=False, max_length=100)
    note = serializers.CharField(required=False, allow_blank=True, default='')
    reason = serializers.CharField(required=False, allow_blank=True, default='')
