from django.contrib import admin
from .models import Client, Supplier


@admin.register(Client)
class ClientAdmin(admin.ModelAdmin):
    list_display = ['organization_name', 'organization_type', 'inn', 'contact_person', 'phone', 'created_at']
    list_filter = ['organization_type', 'created_at']
    search_fields = ['organization_name', 'inn', 'contact_person', 'email']
    ordering = ['organization_name']


@admin.register(Supplier)
class SupplierAdmin(admin.ModelAdmin):
    list_display = ['name', 'inn', 'bank', 'contact_info', 'created_at']
    search_fields = ['name', 'inn', 'contact_info']
    ordering = ['name']
