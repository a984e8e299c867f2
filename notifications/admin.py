from django.contrib import admin
from .models import Notification


@admin.register(Notification)
class NotificationAdmin(admin.ModelAdmin):
    """Admin interface for Notification."""

    list_display = ['title', 'user', 'type', 'is_read', 'delivery_status', 'created_at']
    list_filter = ['type', 'is_read', 'delivery_status', 'created_at']
    search_fields = ['title', 'message', 'user__username']
    readonly_fields = ['created_at', 'read_at', 'delivered_at', 'delivery_attempts']
