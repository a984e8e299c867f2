"""
Profiles app serializers

Serializers for StudentProfile model.
"""
from rest_framework import serializers
from .models import StudentProfile


class StudentProfileSerializer(serializers.ModelSerializer):
    """
    Serializer for StudentProfile.

    User is read-only and automatically set from request context.
    """

    username = serializers.CharField(source='user.username', read_only=True)

    class Meta:
        model = StudentProfile
        fields = [
            'id',
            'user',
            'username',
            'full_name',
            'bio',
            'avatar_url',
            'city',
            'country',
            'linkedin_url',
            'github_url',
            'created_at',
            'updated_at',
        ]
        read_only_fields = ['id', 'user', 'created_at', 'updated_at']


class PublicStudentSerializer(serializers.ModelSerializer):
    """Fields safe to show on a public portfolio."""

    class Meta:
        model = StudentProfile
        fields = ['id', 'full_name', 'bio', 'avatar_url', 'city', 'country', 'linkedin_url', 'github_url']
        read_only_fields = fields
