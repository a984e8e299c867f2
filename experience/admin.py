from django.contrib import admin
from .models import Document, Experience


class DocumentInline(admin.TabularInline):
    model = Document
    extra = 0


@admin.register(Experience)
class ExperienceAdmin(admin.ModelAdmin):
    """Admin interface for Experience."""

    list_display = ['title', 'student', 'organization', 'type', 'status', 'is_public', 'created_at']
    list_filter = ['status', 'type', 'level', 'is_public', 'is_highlighted']
    search_fields = ['title', 'description', 'student__full_name', 'organization__name']
    # Status moves through the verification engine only.
    readonly_fields = [
        'status', 'verified_at', 'verified_by', 'verification_note', 'rejection_reason',
        'is_public', 'created_at', 'updated_at',
    ]
    inlines = [DocumentInline]


@admin.register(Document)
class DocumentAdmin(admin.ModelAdmin):
    list_display = ['experience', 'type', 'title', 'created_at']
    list_filter = ['type']
    search_fields = ['title', 'url', 'experience__title']
