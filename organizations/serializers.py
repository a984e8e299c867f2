"""
Organizations app serializers
"""
from rest_framework import serializers
from .models import Organization


class OrganizationSerializer(serializers.ModelSerializer):
    """Public representation of an organization."""

    class Meta:
        model = Organization
        fields = [
            'id',
            'name',
            'slug',
            'description',
            'website',
            'logo_url',
            'verified',
            'created_at',
        ]
        read_only_fields = fields
