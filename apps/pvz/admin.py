from django.contrib import admin

from .models import PVZ


@admin.register(PVZ)
class PVZAdmin(admin.ModelAdmin):
    """
    Admin interface for PVZ.

    Creation and renaming go through the API so that every change is audited.
    """

    list_display = ['city', 'id', 'created_at', 'reception_count']
    search_fields = ['city']
    ordering = ['-created_at']
    date_hierarchy = 'created_at'
    readonly_fields = ['id', 'city', 'created_at']

    def reception_count(self, obj):
        return obj.receptions.count()
    reception_count.short_description = 'Receptions'

    def has_add_permission(self, request):
        return False

    def has_delete_permission(self, request, obj=None):
        return False
