from decimal import Decimal
from django.conf import settings
from django.db import models
from depot.catalog.models import Product
from depot.parties.models import Supplier


class RequestStatus(models.TextChoices):
    DRAFT = 'DRAFT', 'Draft'
    PENDING_DIRECTOR = 'PENDING_DIRECTOR', 'Waiting for director approval'
    REJECTED_BY_DIRECTOR = 'REJECTED_BY_DIRECTOR', 'Rejected by director'
    PENDING_ACCOUNTANT = 'PENDING_ACCOUNTANT', 'Waiting for accountant approval'
    REJECTED_BY_ACCOUNTANT = 'REJECTED_BY_ACCOUNTANT', 'Rejected by accountant'
    APPROVED = 'APPROVED', 'Approved'
    PARTIALLY_RECEIVED = 'PARTIALLY_RECEIVED', 'Partially received'
    RECEIVED = 'RECEIVED', 'Received'
    CANCELLED = 'CANCELLED', 'Cancelled'


class Delivery(models.Model):
    """Goods actually received from a supplier"""
    supplier = models.ForeignKey(Supplier, on_delete=models.PROTECT, related_name='deliveries')
    delivery_date = models.DateField()
    created_at = models.DateTimeField(auto_now_add=True)

    def __str__(self):
        return f"Delivery #{self.pk} from {self.supplier.name}"

    @property
    def total_cost(self):
        return sum((supply.total_price for supply in self.supplies.all()), Decimal('0'))

    class Meta:
        db_table = 'deliveries'
        ordering = ['-delivery_date', '-id']
        verbose_name_plural = 'Deliveries'


class Supply(models.Model):
    """One received line of a delivery"""
    delivery = models.ForeignKey(Delivery, on_delete=models.CASCADE, related_name='supplies')
    product = models.ForeignKey(Product, on_delete=models.PROTECT, related_name='supplies')
    purchase_price = models.DecimalField(max_digits=12, decimal_places=2)
    quantity = models.PositiveIntegerField()
    deficit_quantity = models.PositiveIntegerField(default=0)
    deficit_reason = models.TextField(blank=True, null=True)

    def __str__(self):
        return f"{self.product.name} x {self.quantity}"

    @property
    def total_price(self):
        return self.purchase_price * self.quantity

    class Meta:
        db_table = 'supplies'
        verbose_name_plural = 'Supplies'


class RequestForDelivery(models.Model):
    """Request to buy goods from a supplier, approved by director and accountant"""
    supplier = models.ForeignKey(Supplier, on_delete=models.PROTECT, related_name='delivery_requests')
    request_date = models.DateTimeField(auto_now_add=True)
    received_date = models.DateField(null=True, blank=True)
    status = models.CharField(max_length=30, choices=RequestStatus.choices, default=RequestStatus.DRAFT)
    delivery = models.OneToOneField(
        Delivery, on_delete=models.SET_NULL, null=True, blank=True, related_name='request'
    )
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return f"Request #{self.pk} ({self.supplier.name})"

    class Meta:
        db_table = 'requests_for_delivery'
        ordering = ['-request_date']
        indexes = [
            models.Index(fields=['status'], name='idx_request_status'),
        ]


class RequestedProduct(models.Model):
    request = models.ForeignKey(RequestForDelivery, on_delete=models.CASCADE, related_name='requested_products')
    product = models.ForeignKey(Product, on_delete=models.PROTECT, related_name='requested_items')
    quantity = models.PositiveIntegerField()

    def __str__(self):
        return f"{self.product.name} x {self.quantity}"

    class Meta:
        db_table = 'requested_products'
        unique_together = [['request', 'product']]


class Comment(models.Model):
    """Comment left on a request when it is approved, rejected or resubmitted"""
    author = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.PROTECT, related_name='request_comments')
    text = models.TextField()
    created_at = models.DateTimeField(auto_now_add=True)
    request = models.ForeignKey(RequestForDelivery, on_delete=models.CASCADE, related_name='comments')

    def __str__(self):
        return f"{self.author.username}: {self.text[:50]}"

    class Meta:
        db_table = 'request_comments'
        ordering = ['created_at']
