from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin
from .models import User


@admin.register(User)
class UserAdmin(BaseUserAdmin):
    """Admin interface for custom User model."""

    list_display = [
        'username',
        'email',
        'role',
        'organization',
        'is_staff',
    ]
    list_filter = ['role', 'is_staff', 'is_superuser']
    search_fields = ['username', 'email', 'organization__name']

    fieldsets = BaseUserAdmin.fieldsets + (
        ('Platform', {'fields': ('role', 'organization')}),
    )

    add_fieldsets = BaseUserAdmin.add_fieldsets + (
        ('Platform', {'fields': ('role', 'organization')}),
    )
