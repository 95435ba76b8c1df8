from django.contrib import admin
from .models import EquipmentType, WarehouseEquipment


@admin.register(EquipmentType)
class EquipmentTypeAdmin(admin.ModelAdmin):
    list_display = ['name']
    search_fields = ['name']


@admin.register(WarehouseEquipment)
class WarehouseEquipmentAdmin(admin.ModelAdmin):
    list_display = ['name', 'equipment_type', 'warehouse', 'status', 'production_date', 'useful_life_years']
    list_filter = ['status', 'equipment_type', 'warehouse']
    search_fields = ['name', 'serial_number']
    readonly_fields = ['created_at', 'updated_at']
