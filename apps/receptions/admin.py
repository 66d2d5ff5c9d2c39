from django.contrib import admin

from .models import Product, Reception


class ProductInline(admin.TabularInline):
    model = Product
    extra = 0
    fields = ['sequence', 'type', 'date_time']
    readonly_fields = ['sequence', 'type', 'date_time']
    ordering = ['sequence']
    can_delete = False


@admin.register(Reception)
class ReceptionAdmin(admin.ModelAdmin):
    """Receptions are changed through the API only; admin is for inspection."""

    list_display = ['id', 'pvz', 'status', 'date_time', 'product_count']
    list_filter = ['status', 'date_time']
    search_fields = ['pvz__city']
    ordering = ['-date_time']
    date_hierarchy = 'date_time'
    readonly_fields = ['id', 'pvz', 'status', 'date_time']
    inlines = [ProductInline]

    def get_queryset(self, request):
        return super().get_queryset(request).select_related('pvz')

    def product_count(self, obj):
        return obj.products.count()
    product_count.short_description = 'Products'

    def has_add_permission(self, request):
        return False


@admin.register(Product)
class ProductAdmin(admin.ModelAdmin):
    list_display = ['id', 'type', 'reception', 'sequence', 'date_time']
    list_filter = ['type']
    ordering = ['reception', 'sequence']
    readonly_fields = ['id', 'type', 'reception', 'sequence', 'date_time']

    def has_add_permission(self, request):
        return False
