from decimal import Decimal
from django.conf import settings
from django.db import models
from depot.catalog.models import Product
from depot.parties.models import Client


class ClientOrderStatus(models.TextChoices):
    NEW = 'NEW', 'New'
    CONFIRMED = 'CONFIRMED', 'Confirmed'
    RESERVED = 'RESERVED', 'Reserved'
    IN_PROGRESS = 'IN_PROGRESS', 'Assembling'
    READY = 'READY', 'Ready for shipment'
    SHIPPED = 'SHIPPED', 'Shipped'
    DELIVERED = 'DELIVERED', 'Delivered'
    CANCELLED = 'CANCELLED', 'Cancelled'


class ClientOrder(models.Model):
    """Order placed by a client organisation"""
    order_number = models.CharField(max_length=50, unique=True)
    order_date = models.DateTimeField(auto_now_add=True)
    delivery_date = models.DateField(null=True, blank=True)
    actual_delivery_date = models.DateTimeField(null=True, blank=True)
    status = models.CharField(max_length=20, choices=ClientOrderStatus.choices, default=ClientOrderStatus.NEW)
    total_amount = models.DecimalField(max_digits=14, decimal_places=2, default=0)
    comment = models.TextField(blank=True)
    contract_file = models.FileField(upload_to='contracts/', blank=True, null=True)
    client = models.ForeignKey(Client, on_delete=models.PROTECT, related_name='orders')
    responsible_employee = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True, blank=True, related_name='client_orders'
    )
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return self.order_number

    def calculate_total_amount(self):
        self.total_amount = sum((item.total_price for item in self.ordered_products.all()), Decimal('0'))
        return self.total_amount

    class Meta:
        db_table = 'client_orders'
        ordering = ['-order_date']
        indexes = [
            models.Index(fields=['status'], name='idx_order_status'),
        ]


class OrderedProduct(models.Model):
    client_order = models.ForeignKey(ClientOrder, on_delete=models.CASCADE, related_name='ordered_products')
    product = models.ForeignKey(Product, on_delete=models.PROTECT, related_name='ordered_items')
    quantity = models.PositiveIntegerField()
    price = models.DecimalField(max_digits=12, decimal_places=2)
    total_price = models.DecimalField(max_digits=14, decimal_places=2, default=0)

    def __str__(self):
        return f"{self.product.name} x{self.quantity}"

    def save(self, *args, **kwargs):
        self.total_price = self.price * self.quantity
        super().save(*args, **kwargs)

    class Meta:
        db_table = 'ordered_products'
        unique_together = [['client_order', 'product']]
