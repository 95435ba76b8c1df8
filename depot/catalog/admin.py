from django.contrib import admin
from .models import GlobalProductCategory, ProductAttribute, ProductCategory, Product, ProductAttributeValue


@admin.register(GlobalProductCategory)
class GlobalProductCategoryAdmin(admin.ModelAdmin):
    list_display = ['name', 'created_at']
    search_fields = ['name']
    ordering = ['name']


@admin.register(ProductAttribute)
class ProductAttributeAdmin(admin.ModelAdmin):
    list_display = ['name', 'unit', 'data_type']
    list_filter = ['data_type']
    search_fields = ['name']
    ordering = ['name']


@admin.register(ProductCategory)
class ProductCategoryAdmin(admin.ModelAdmin):
    list_display = ['name', 'global_category']
    list_filter = ['global_category']
    search_fields = ['name']
    filter_horizontal = ['attributes']
    ordering = ['name']


class ProductAttributeValueInline(admin.TabularInline):
    model = ProductAttributeValue
    extra = 0


@admin.register(Product)
class ProductAdmin(admin.ModelAdmin):
    list_display = ['name', 'article', 'category', 'warehouse_type', 'stock_quantity', 'reserved_quantity', 'quantity_for_stock']
    list_filter = ['warehouse_type', 'category', 'created_at']
    search_fields = ['name', 'article']
    ordering = ['name']
    readonly_fields = ['created_at', 'updated_at']
    inlines = [ProductAttributeValueInline]
