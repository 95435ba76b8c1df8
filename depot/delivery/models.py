from django.conf import settings
from django.db import models
from django.utils import timezone
from depot.orders.models import ClientOrder
from depot.parties.models import Client


class Vehicle(models.Model):
    TYPE_STANDARD = 'STANDARD'
    TYPE_REFRIGERATED = 'REFRIGERATED'
    TYPE_CHOICES = [
        (TYPE_STANDARD, 'Standard'),
        (TYPE_REFRIGERATED, 'Refrigerated'),
    ]

    class Status(models.TextChoices):
        AVAILABLE = 'AVAILABLE', 'Available'
        IN_USE = 'IN_USE', 'In use'
        MAINTENANCE = 'MAINTENANCE', 'Maintenance'
        BROKEN = 'BROKEN', 'Broken'
        DECOMMISSIONED = 'DECOMMISSIONED', 'Decommissioned'

    registration_number = models.CharField(max_length=20, unique=True)
    brand = models.CharField(max_length=100)
    model = models.CharField(max_length=100)
    year = models.PositiveIntegerField(null=True, blank=True)
    vin = models.CharField(max_length=17, blank=True)
    load_capacity = models.FloatField(null=True, blank=True, help_text='kg')
    volume_capacity = models.FloatField(null=True, blank=True, help_text='m3')
    type = models.CharField(max_length=20, choices=TYPE_CHOICES, default=TYPE_STANDARD)
    status = models.CharField(max_length=20, choices=Status.choices, default=Status.AVAILABLE)
    current_mileage = models.PositiveIntegerField(default=0)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return self.get_full_name()

    def get_full_name(self):
        return f"{self.brand} {self.model} ({self.registration_number})"

    @property
    def is_available(self):
        return self.status == self.Status.AVAILABLE

    class Meta:
        db_table = 'vehicles'
        ordering = ['brand', 'model']


class DeliveryTaskStatus(models.TextChoices):
    PENDING = 'PENDING', 'Pending'
    LOADING = 'LOADING', 'Loading'
    LOADED = 'LOADED', 'Loaded'
    IN_TRANSIT = 'IN_TRANSIT', 'In transit'
    DELIVERED = 'DELIVERED', 'Delivered'
    CANCELLED = 'CANCELLED', 'Cancelled'


class DeliveryTask(models.Model):
    """Delivery of one ready client order by a courier"""
    client_order = models.OneToOneField(ClientOrder, on_delete=models.PROTECT, related_name='delivery_task')
    driver = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.PROTECT, related_name='delivery_tasks')
    vehicle = models.ForeignKey(Vehicle, on_delete=models.PROTECT, related_name='delivery_tasks')
    status = models.CharField(max_length=20, choices=DeliveryTaskStatus.choices, default=DeliveryTaskStatus.PENDING)
    planned_start_time = models.DateTimeField(null=True, blank=True)
    planned_end_time = models.DateTimeField(null=True, blank=True)
    actual_start_time = models.DateTimeField(null=True, blank=True)
    actual_end_time = models.DateTimeField(null=True, blank=True)
    start_mileage = models.PositiveIntegerField(null=True, blank=True)
    end_mileage = models.PositiveIntegerField(null=True, blank=True)
    current_latitude = models.FloatField(null=True, blank=True)
    current_longitude = models.FloatField(null=True, blank=True)
    ttn_number = models.CharField(max_length=50, blank=True, null=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return f"Delivery of {self.client_order.order_number}"

    @property
    def total_mileage(self):
        if self.start_mileage is None or self.end_mileage is None:
            return None
        return self.end_mileage - self.start_mileage

    class Meta:
        db_table = 'delivery_tasks'
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['status'], name='idx_delivery_task_status'),
        ]


class RoutePoint(models.Model):
    TYPE_WAREHOUSE = 'WAREHOUSE'
    TYPE_DELIVERY_ADDRESS = 'DELIVERY_ADDRESS'
    TYPE_CHECKPOINT = 'CHECKPOINT'
    POINT_TYPE_CHOICES = [
        (TYPE_WAREHOUSE, 'Warehouse'),
        (TYPE_DELIVERY_ADDRESS, 'Delivery address'),
        (TYPE_CHECKPOINT, 'Checkpoint'),
    ]

    delivery_task = models.ForeignKey(DeliveryTask, on_delete=models.CASCADE, related_name='route_points')
    order_index = models.PositiveIntegerField()
    point_type = models.CharField(max_length=20, choices=POINT_TYPE_CHOICES, default=TYPE_CHECKPOINT)
    latitude = models.FloatField(null=True, blank=True)
    longitude = models.FloatField(null=True, blank=True)
    address = models.CharField(max_length=500, blank=True)
    planned_arrival_time = models.DateTimeField(null=True, blank=True)
    actual_arrival_time = models.DateTimeField(null=True, blank=True)
    is_reached = models.BooleanField(default=False)
    comment = models.TextField(blank=True)

    def __str__(self):
        return f"{self.order_index}. {self.address}"

    class Meta:
        db_table = 'route_points'
        ordering = ['delivery_task', 'order_index']


class TTN(models.Model):
    """Consignment note issued for a delivery task"""
    ttn_number = models.CharField(max_length=50, unique=True)
    issue_date = models.DateTimeField(auto_now_add=True)
    delivery_task = models.OneToOneField(DeliveryTask, on_delete=models.CASCADE, related_name='ttn')
    cargo_description = models.TextField(blank=True)
    total_weight = models.FloatField(null=True, blank=True)
    total_volume = models.FloatField(null=True, blank=True)
    comment = models.TextField(blank=True)
    vehicle = models.ForeignKey(Vehicle, on_delete=models.PROTECT, related_name='ttns')
    driver = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.PROTECT, related_name='ttns')

    def __str__(self):
        return self.ttn_number

    class Meta:
        db_table = 'ttns'
        ordering = ['-issue_date']
        verbose_name = 'TTN'
        verbose_name_plural = 'TTNs'


class AcceptanceAct(models.Model):
    """Act signed by the client's representative on delivery"""
    act_number = models.CharField(max_length=50, unique=True)
    act_date = models.DateTimeField(auto_now_add=True)
    client_order = models.OneToOneField(ClientOrder, on_delete=models.CASCADE, related_name='acceptance_act')
    client = models.ForeignKey(Client, on_delete=models.PROTECT, related_name='acceptance_acts')
    delivered_by = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.PROTECT, related_name='acceptance_acts')
    client_representative = models.CharField(max_length=255, blank=True)
    signed = models.BooleanField(default=False)
    signed_at = models.DateTimeField(null=True, blank=True)
    comment = models.TextField(blank=True)

    def __str__(self):
        return self.act_number

    def mark_as_signed(self, representative):
        self.client_representative = representative
        self.signed = True
        self.signed_at = timezone.now()

    class Meta:
        db_table = 'acceptance_acts'
        ordering = ['-act_date']
