"""
Portfolio app models

A student's public page: the verified experiences they chose to show.
"""
from django.db import models


class Portfolio(models.Model):
    student = models.OneToOneField(
        'profiles.StudentProfile',
        on_delete=models.CASCADE,
        related_name='portfolio',
    )
    slug = models.SlugField(max_length=80, unique=True)
    title = models.CharField(max_length=255, blank=True)
    headline = models.CharField(max_length=255, blank=True)
    is_public = models.BooleanField(default=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return self.title or self.slug

    class Meta:
        verbose_name = 'Portfolio'
        verbose_name_plural = 'Portfolios'
