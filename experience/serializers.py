"""
Experience app serializers

Output serializers for Experience and Document. Writes go through
ExperienceService, which does its own validation.
"""
from rest_framework import serializers
from .models import Document, Experience


class DocumentSerializer(serializers.ModelSerializer):

    class Meta:
        model = Document
        fields = ['id', 'url', 'type', 'title', 'created_at']
        read_only_fields = fields


class ExperienceSerializer(serializers.ModelSerializer):
    """
    Full view of an experience for its student and reviewers.

    Workflow fields (status, verified_at, ...) are only ever changed by the
    verification engine.
    """

    student_name = serializers.CharField(source='student.full_name', read_only=True)
    organization_name = serializers.CharField(source='organization.name', read_only=True, default=None)
    verified_by_username = serializers.CharField(source='verified_by.username', read_only=True, default=None)
    documents = DocumentSerializer(many=True, read_only=True)

    class Meta:
        model = Experience
        fields = [
            'id',
            'student',
            'student_name',
            'organization',
            'organization_name',
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
            'status',
            'verified_at',
            'verified_by',
            'verified_by_username',
            'verification_note',
            'rejection_reason',
            'is_public',
            'is_highlighted',
            'documents',
            'created_at',
            'updated_at',
        ]
        read_only_fields = fields


class PublicExperienceSerializer(serializers.ModelSerializer):
    """What anonymous portfolio visitors see."""

    student_name = serializers.CharField(source='student.full_name', read_only=True)
    organization_name = serializers.CharField(source='organization.name', read_only=True, default=None)

    class Meta:
        model = Experience
        fields = [
            'id',
            'student_name',
            'organization_name',
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
            'verified_at',
            'is_highlighted',
        ]
        read_only_fields = fields


class SubmitVerificationSerializer(serializers.Serializer):
    organization = serializers.IntegerField(required=False, allow_null=True)
    document = serializers.IntegerField(required=False, allow_null=True)
    message = serializers.CharField(required=False, allow_blank=True, default='')
