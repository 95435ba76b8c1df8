from django.contrib import admin
from .models import Warehouse, Shelf, StorageZone, ZoneProduct


@admin.register(Warehouse)
class WarehouseAdmin(admin.ModelAdmin):
    list_display = ['name', 'type', 'total_volume', 'address', 'created_at']
    list_filter = ['type', 'created_at']
    search_fields = ['name', 'address']
    ordering = ['name']


@admin.register(Shelf)
class ShelfAdmin(admin.ModelAdmin):
    list_display = ['code', 'warehouse']
    list_filter = ['warehouse']
    search_fields = ['code']


@admin.register(StorageZone)
class StorageZoneAdmin(admin.ModelAdmin):
    list_display = ['label', 'shelf', 'length', 'width', 'height']
    list_filter = ['shelf__warehouse']
    search_fields = ['label']


@admin.register(ZoneProduct)
class ZoneProductAdmin(admin.ModelAdmin):
    list_display = ['zone', 'product', 'quantity', 'orientation']
    list_filter = ['orientation', 'zone__shelf__warehouse']
    search_fields = ['product__name', 'product__article', 'zone__label']
