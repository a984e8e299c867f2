from django.contrib import admin
from .models import StudentProfile


@admin.register(StudentProfile)
class StudentProfileAdmin(admin.ModelAdmin):
    """Admin interface for StudentProfile."""

    list_display = ['full_name', 'user', 'city', 'country', 'created_at', 'updated_at']
    list_filter = ['country', 'created_at', 'updated_at']
    search_fields = ['full_name', 'user__username', 'user__email', 'city']
    readonly_fields = ['created_at', 'updated_at']
