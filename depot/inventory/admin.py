from django.contrib import admin
from .models import WriteOffAct


@admin.register(WriteOffAct)
class WriteOffActAdmin(admin.ModelAdmin):
    list_display = ['act_number', 'product', 'quantity', 'reason', 'status', 'warehouse', 'act_date']
    list_filter = ['status', 'reason', 'act_date']
    search_fields = ['act_number', 'product__name', 'product__article']
    readonly_fields = ['act_date', 'updated_at']
    ordering = ['-act_date']
