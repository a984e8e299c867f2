"""
Organizations app models

Organization entity. Members are users with role ORGANIZATION whose
``organization`` points here; they review verification requests addressed
to the organization.
"""
from django.db import models


class Organization(models.Model):
    """A university, company or club that verifies student experiences."""

    name = models.CharField(max_length=255)
    slug = models.SlugField(max_length=255, unique=True)
    description = models.TextField(blank=True)
    website = models.URLField(blank=True)
    logo_url = models.URLField(blank=True)
    verified = models.BooleanField(default=False)
    is_active = models.BooleanField(default=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return self.name

    def reviewers(self):
        """Active users that may act on this organization's verification requests."""
        return self.members.filter(role='ORGANIZATION', is_active=True)

    class Meta:
        verbose_name = 'Organization'
        verbose_name_plural = 'Organizations'
        ordering = ['name']
