from django.contrib import admin
from .models import Portfolio


@admin.register(Portfolio)
class PortfolioAdmin(admin.ModelAdmin):
    """Admin interface for Portfolio."""

    list_display = ['slug', 'student', 'is_public', 'updated_at']
    list_filter = ['is_public']
    search_fields = ['slug', 'title', 'student__full_name']
    readonly_fields = ['created_at', 'updated_at']
