from django.contrib import admin
from .models import AuditLog, VerificationMessage, VerificationRequest


class VerificationMessageInline(admin.TabularInline):
    model = VerificationMessage
    extra = 0
    readonly_fields = ['author', 'body', 'created_at']


@admin.register(VerificationRequest)
class VerificationRequestAdmin(admin.ModelAdmin):
    """Admin interface for VerificationRequest."""

    list_display = ['title', 'student', 'organization', 'status', 'assigned_to', 'created_at']
    list_filter = ['status', 'organization', 'created_at']
    search_fields = ['title', 'student__full_name', 'organization__name']
    readonly_fields = [
        'status', 'experience', 'processed_at', 'processed_by', 'response_note',
        'created_at', 'updated_at',
    ]
    inlines = [VerificationMessageInline]


@admin.register(AuditLog)
class AuditLogAdmin(admin.ModelAdmin):
    """Read-only view of the audit trail."""

    list_display = ['action', 'entity', 'entity_id', 'actor', 'created_at']
    list_filter = ['action', 'entity', 'created_at']
    search_fields = ['entity_id', 'actor__username']

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False
