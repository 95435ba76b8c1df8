from django.conf import settings
from django.db import models
from depot.catalog.models import Product
from depot.locations.models import Warehouse


class WriteOffReason(models.TextChoices):
    DEFECT = 'DEFECT', 'Defect'
    EXPIRED = 'EXPIRED', 'Expired'
    DAMAGE = 'DAMAGE', 'Damaged in storage'
    LOSS = 'LOSS', 'Shortage'
    OTHER = 'OTHER', 'Other'


class WriteOffActStatus(models.TextChoices):
    PENDING_DIRECTOR = 'PENDING_DIRECTOR', 'Waiting for director signature'
    APPROVED = 'APPROVED', 'Approved'
    REJECTED = 'REJECTED', 'Rejected'


class WriteOffAct(models.Model):
    """Act removing damaged, expired or lost goods from stock, signed by the director"""
    act_number = models.CharField(max_length=50, unique=True)
    act_date = models.DateTimeField(auto_now_add=True)
    product = models.ForeignKey(Product, on_delete=models.PROTECT, related_name='write_off_acts')
    quantity = models.PositiveIntegerField()
    reason = models.CharField(max_length=20, choices=WriteOffReason.choices)
    status = models.CharField(max_length=20, choices=WriteOffActStatus.choices,
                              default=WriteOffActStatus.PENDING_DIRECTOR)
    comment = models.TextField(blank=True)
    director_comment = models.TextField(blank=True)
    responsible_employee = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True, blank=True, related_name='write_off_acts'
    )
    warehouse = models.ForeignKey(
        Warehouse, on_delete=models.SET_NULL, null=True, blank=True, related_name='write_off_acts'
    )
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return self.act_number

    class Meta:
        db_table = 'write_off_acts'
        ordering = ['-act_date']
        indexes = [
            models.Index(fields=['status'], name='idx_write_off_status'),
        ]
