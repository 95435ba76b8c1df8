from django.contrib import admin
from .models import RequestForDelivery, RequestedProduct, Comment, Delivery, Supply


class RequestedProductInline(admin.TabularInline):
    model = RequestedProduct
    extra = 1
    fields = ['product', 'quantity']


class CommentInline(admin.TabularInline):
    model = Comment
    extra = 0
    fields = ['author', 'text', 'created_at']
    readonly_fields = ['created_at']


@admin.register(RequestForDelivery)
class RequestForDeliveryAdmin(admin.ModelAdmin):
    list_display = ['id', 'supplier', 'request_date', 'status', 'received_date']
    list_filter = ['status', 'request_date']
    search_fields = ['supplier__name']
    ordering = ['-request_date']
    inlines = [RequestedProductInline, CommentInline]
    readonly_fields = ['request_date', 'updated_at']


class SupplyInline(admin.TabularInline):
    model = Supply
    extra = 0
    fields = ['product', 'purchase_price', 'quantity', 'deficit_quantity', 'deficit_reason']


@admin.register(Delivery)
class DeliveryAdmin(admin.ModelAdmin):
    list_display = ['id', 'supplier', 'delivery_date', 'get_total_cost']
    list_filter = ['delivery_date']
    search_fields = ['supplier__name']
    inlines = [SupplyInline]

    def get_total_cost(self, obj):
        return f"{obj.total_cost:.2f}"
    get_total_cost.short_description = 'Total cost'
