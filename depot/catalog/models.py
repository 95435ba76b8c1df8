import math
from datetime import date
from decimal import Decimal, InvalidOperation
from django.db import models

PACKAGE_LENGTH = 'Package length'
PACKAGE_WIDTH = 'Package width'
PACKAGE_HEIGHT = 'Package height'
PACKAGE_DIMENSION_ATTRIBUTES = [PACKAGE_LENGTH, PACKAGE_WIDTH, PACKAGE_HEIGHT]


class WarehouseType(models.TextChoices):
    REGULAR = 'REGULAR', 'Regular'
    REFRIGERATOR = 'REFRIGERATOR', 'Refrigerator'


class GlobalProductCategory(models.Model):
    """Top-level product category"""
    name = models.CharField(max_length=200, unique=True)
    created_at = models.DateTimeField(auto_now_add=True)

    def __str__(self):
        return self.name

    class Meta:
        db_table = 'global_product_categories'
        ordering = ['name']
        verbose_name_plural = 'global product categories'


class ProductAttribute(models.Model):
    """Typed characteristic that categories can require"""
    TYPE_TEXT = 'TEXT'
    TYPE_NUMBER = 'NUMBER'
    TYPE_DATE = 'DATE'
    DATA_TYPE_CHOICES = [
        (TYPE_TEXT, 'Text'),
        (TYPE_NUMBER, 'Number'),
        (TYPE_DATE, 'Date'),
    ]

    name = models.CharField(max_length=200)
    unit = models.CharField(max_length=50, blank=True)
    data_type = models.CharField(max_length=10, choices=DATA_TYPE_CHOICES, default=TYPE_TEXT)

    def __str__(self):
        return f"{self.name} ({self.unit})" if self.unit else self.name

    class Meta:
        db_table = 'product_attributes'
        ordering = ['name']


class ProductCategory(models.Model):
    """Product category inside a global category"""
    name = models.CharField(max_length=200)
    global_category = models.ForeignKey(GlobalProductCategory, on_delete=models.CASCADE, related_name='categories')
    attributes = models.ManyToManyField(ProductAttribute, blank=True, related_name='categories', db_table='product_category_attributes')

    def __str__(self):
        return self.name

    class Meta:
        db_table = 'product_categories'
        ordering = ['name']
        verbose_name_plural = 'product categories'
        unique_together = [['name', 'global_category']]


class Product(models.Model):
    """Product master"""
    name = models.CharField(max_length=255, db_index=True)
    article = models.CharField(max_length=100, unique=True)
    stock_quantity = models.PositiveIntegerField(default=0)
    quantity_for_stock = models.PositiveIntegerField(default=0, help_text='Received but not yet placed into a storage zone')
    reserved_quantity = models.PositiveIntegerField(default=0)
    image = models.ImageField(upload_to='products/', blank=True, null=True)
    warehouse_type = models.CharField(max_length=20, choices=WarehouseType.choices, default=WarehouseType.REGULAR)
    category = models.ForeignKey(ProductCategory, on_delete=models.PROTECT, related_name='products')
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return f"{self.name} ({self.article})"

    @property
    def available_quantity(self):
        """Stock not held by reservations"""
        return self.stock_quantity - self.reserved_quantity

    def get_attribute_number(self, attribute_name):
        for value in self.attribute_values.all():
            if value.attribute.name == attribute_name:
                parsed = value.get_typed_value()
                if not isinstance(parsed, Decimal) or not parsed.is_finite():
                    return None
                number = float(parsed)
                return number if math.isfinite(number) else None
        return None

    def get_package_dimensions(self):
        """(length, width, height) in cm; an item is None when not set"""
        return tuple(self.get_attribute_number(name) for name in PACKAGE_DIMENSION_ATTRIBUTES)

    class Meta:
        db_table = 'products'
        ordering = ['name']


class ProductAttributeValue(models.Model):
    """Value of one attribute for one product, stored as text"""
    product = models.ForeignKey(Product, on_delete=models.CASCADE, related_name='attribute_values')
    attribute = models.ForeignKey(ProductAttribute, on_delete=models.CASCADE, related_name='values')
    value = models.CharField(max_length=255)

    def __str__(self):
        return f"{self.attribute.name}: {self.value}"

    def get_typed_value(self):
        """Parse the text according to the attribute type, None when unparsable"""
        raw = (self.value or '').strip()
        if self.attribute.data_type == ProductAttribute.TYPE_NUMBER:
            try:
                return Decimal(raw.replace(',', '.'))
            except InvalidOperation:
                return None
        if self.attribute.data_type == ProductAttribute.TYPE_DATE:
            try:
                return date.fromisoformat(raw)
            except ValueError:
                return None
        return raw

    class Meta:
        db_table = 'product_attribute_values'
        unique_together = [['product', 'attribute']]
