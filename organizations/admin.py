from django.contrib import admin
from .models import Organization


@admin.register(Organization)
class OrganizationAdmin(admin.ModelAdmin):
    """Admin interface for Organization."""

    list_display = ['name', 'slug', 'verified', 'is_active', 'created_at']
    list_filter = ['verified', 'is_active', 'created_at']
    search_fields = ['name', 'slug', 'website']
    prepopulated_fields = {'slug': ('name',)}
    readonly_fields = ['created_at', 'updated_at']
