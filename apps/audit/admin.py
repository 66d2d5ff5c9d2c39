from django.contrib import admin

from .models import AuditLogEntry


@admin.register(AuditLogEntry)
class AuditLogEntryAdmin(admin.ModelAdmin):
    """Read-only view of the audit log."""

    list_display = ['operation_type', 'pvz_id', 'user_id', 'created_at']
    list_filter = ['operation_type', 'created_at']
    search_fields = ['pvz_id', 'user_id']
    ordering = ['-created_at']
    date_hierarchy = 'created_at'

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False
