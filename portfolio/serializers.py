"""
Portfolio app serializers
"""
from rest_framework import serializers

from experience.serializers import PublicExperienceSerializer
from profiles.serializers import PublicStudentSerializer

from .models import Portfolio


class PortfolioSerializer(serializers.ModelSerializer):
    """Owner's view; only presentation fields are writable."""

    class Meta:
        model = Portfolio
        fields = ['id', 'slug', 'title', 'headline', 'is_public', 'created_at', 'updated_at']
        read_only_fields = ['id', 'slug', 'created_at', 'updated_at']


class PublicPortfolioSerializer(serializers.Serializer):
    slug = serializers.CharField(source='portfolio.slug')
    title = serializers.CharField(source='portfolio.title')
    headline = serializers.CharField(source='portfolio.headline')
    student = PublicStudentSerializer()
    experiences = PublicExperienceSerializer(many=True)
