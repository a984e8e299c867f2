"""
Accounts app models

Custom User model extending AbstractUser with the platform role and the
organization a reviewer belongs to.
"""
from django.contrib.auth.models import AbstractUser
from django.db import models


class User(AbstractUser):
    """
    Custom user model with role-based access.

    Extends Django's AbstractUser to add:
    - role: Student, organization reviewer or platform admin
    - organization: The organization an ORGANIZATION user acts for
    """

    STUDENT = 'STUDENT'
    ORGANIZATION = 'ORGANIZATION'
    ADMIN = 'ADMIN'

    ROLE_CHOICES = [
        (STUDENT, 'Student'),
        (ORGANIZATION, 'Organization'),
        (ADMIN, 'Admin'),
    ]

    role = models.CharField(
        max_length=20,
        choices=ROLE_CHOICES,
        default=STUDENT,
    )
    organization = models.ForeignKey(
        'organizations.Organization',
        null=True,
        blank=True,
        on_delete=models.SET_NULL,
        related_name='members',
    )

    def __str__(self):
        return f"{self.username} ({self.role})"

    class Meta:
        verbose_name = 'User'
        verbose_name_plural = 'Users'
