from django.contrib import admin
from .models import Vehicle, DeliveryTask, RoutePoint, TTN, AcceptanceAct


@admin.register(Vehicle)
class VehicleAdmin(admin.ModelAdmin):
    list_display = ['registration_number', 'brand', 'model', 'type', 'status', 'current_mileage']
    list_filter = ['type', 'status']
    search_fields = ['registration_number', 'brand', 'model', 'vin']
    ordering = ['brand', 'model']


class RoutePointInline(admin.TabularInline):
    model = RoutePoint
    extra = 0


@admin.register(DeliveryTask)
class DeliveryTaskAdmin(admin.ModelAdmin):
    list_display = ['client_order', 'driver', 'vehicle', 'status', 'planned_start_time', 'ttn_number']
    list_filter = ['status', 'created_at']
    search_fields = ['client_order__order_number', 'ttn_number', 'driver__username']
    ordering = ['-created_at']
    inlines = [RoutePointInline]


@admin.register(TTN)
class TTNAdmin(admin.ModelAdmin):
    list_display = ['ttn_number', 'delivery_task', 'vehicle', 'driver', 'issue_date']
    search_fields = ['ttn_number']
    ordering = ['-issue_date']


@admin.register(AcceptanceAct)
class AcceptanceActAdmin(admin.ModelAdmin):
    list_display = ['act_number', 'client_order', 'client', 'signed', 'signed_at']
    list_filter = ['signed']
    search_fields = ['act_number', 'client_order__order_number']
    ordering = ['-act_date']
