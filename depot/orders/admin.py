from django.contrib import admin
from .models import ClientOrder, OrderedProduct


class OrderedProductInline(admin.TabularInline):
    model = OrderedProduct
    extra = 0
    readonly_fields = ['total_price']


@admin.register(ClientOrder)
class ClientOrderAdmin(admin.ModelAdmin):
    list_display = ['order_number', 'client', 'status', 'total_amount', 'order_date', 'delivery_date']
    list_filter = ['status', 'order_date']
    search_fields = ['order_number', 'client__organization_name']
    ordering = ['-order_date']
    readonly_fields = ['order_number', 'order_date', 'total_amount']
    inlines = [OrderedProductInline]
