import math
from django.db import models
from depot.catalog.models import Product, WarehouseType


class Warehouse(models.Model):
    """Warehouse holding shelves of storage zones"""
    name = models.CharField(max_length=200, unique=True)
    type = models.CharField(max_length=20, choices=WarehouseType.choices, default=WarehouseType.REGULAR)
    total_volume = models.FloatField(default=0, help_text='Total volume in litres')
    address = models.TextField(blank=True)
    latitude = models.FloatField(null=True, blank=True)
    longitude = models.FloatField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return self.name

    def can_store_product(self, product):
        return self.type == product.warehouse_type

    class Meta:
        db_table = 'warehouses'
        ordering = ['name']


class Shelf(models.Model):
    code = models.CharField(max_length=20)
    warehouse = models.ForeignKey(Warehouse, on_delete=models.CASCADE, related_name='shelves')

    def __str__(self):
        return f"{self.warehouse.name} / {self.code}"

    class Meta:
        db_table = 'shelves'
        ordering = ['warehouse', 'id']
        unique_together = [['code', 'warehouse']]
        verbose_name_plural = 'shelves'


class StorageZone(models.Model):
    """Cell of a shelf; dimensions in centimetres"""
    label = models.CharField(max_length=50)
    length = models.FloatField()
    width = models.FloatField()
    height = models.FloatField()
    shelf = models.ForeignKey(Shelf, on_delete=models.CASCADE, related_name='zones')

    def __str__(self):
        return self.label

    @property
    def warehouse(self):
        return self.shelf.warehouse

    @property
    def capacity_volume(self):
        """Capacity in cubic metres"""
        return self.length * self.width * self.height / 1_000_000

    @property
    def used_volume(self):
        return sum(zp.total_volume for zp in self.products.all())

    @property
    def occupancy_percentage(self):
        capacity = self.capacity_volume
        if capacity <= 0:
            return 0.0
        used = self.used_volume
        if used <= 0:
            return 0.0
        return used / capacity * 100

    @property
    def available_volume(self):
        return max(self.capacity_volume - self.used_volume, 0.0)

    def can_store_product(self, product):
        return self.shelf.warehouse.can_store_product(product)

    class Meta:
        db_table = 'storage_zones'
        ordering = ['shelf', 'id']


class BoxOrientation(models.TextChoices):
    """How a package is turned inside a zone"""
    STANDARD = 'STANDARD', 'Standard'
    ROTATED_90 = 'ROTATED_90', 'Rotated 90 degrees'
    LAY_ON_SIDE = 'LAY_ON_SIDE', 'Laid on side'
    ROTATE_AND_LAY = 'ROTATE_AND_LAY', 'Rotated and laid on side'

    @classmethod
    def oriented_dimensions(cls, orientation, length, width, height):
        """Package dimensions along the zone's (length, width, height) axes"""
        return {
            cls.STANDARD: (length, width, height),
            cls.ROTATED_90: (width, length, height),
            cls.LAY_ON_SIDE: (length, height, width),
            cls.ROTATE_AND_LAY: (height, width, length),
        }[orientation]

    @classmethod
    def fit(cls, orientation, zone, length, width, height):
        """How many packages fit into the zone in the given orientation"""
        d0, d1, d2 = cls.oriented_dimensions(orientation, length, width, height)
        if d0 <= 0 or d1 <= 0 or d2 <= 0:
            return 0
        return (math.floor(zone.length / d0)
                * math.floor(zone.width / d1)
                * math.floor(zone.height / d2))


class ZoneProduct(models.Model):
    """Quantity of a product stored in a zone"""
    zone = models.ForeignKey(StorageZone, on_delete=models.CASCADE, related_name='products')
    product = models.ForeignKey(Product, on_delete=models.PROTECT, related_name='zone_products')
    quantity = models.PositiveIntegerField(default=0)
    orientation = models.CharField(max_length=20, choices=BoxOrientation.choices, default=BoxOrientation.STANDARD)

    def __str__(self):
        return f"{self.product.name} x{self.quantity} in {self.zone.label}"

    @property
    def volume_per_unit(self):
        """Package volume in cubic metres, 0 when a dimension is missing"""
        length, width, height = self.product.get_package_dimensions()
        if length is None or width is None or height is None:
            return 0.0
        return (length / 100) * (width / 100) * (height / 100)

    @property
    def total_volume(self):
        return self.volume_per_unit * self.quantity

    class Meta:
        db_table = 'zone_products'
        unique_together = [['zone', 'product']]
