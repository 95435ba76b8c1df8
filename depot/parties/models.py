from django.db import models


class Client(models.Model):
    """Client organization that places orders"""
    organization_type = models.CharField(max_length=50)
    organization_name = models.CharField(max_length=255)
    inn = models.CharField(max_length=12, unique=True)
    kpp = models.CharField(max_length=9, blank=True)
    ogrn = models.CharField(max_length=15, blank=True)
    legal_address = models.TextField()
    delivery_address = models.TextField(blank=True)
    delivery_latitude = models.FloatField(null=True, blank=True)
    delivery_longitude = models.FloatField(null=True, blank=True)
    contact_person = models.CharField(max_length=255, blank=True)
    phone = models.CharField(max_length=20, blank=True)
    email = models.EmailField(blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return self.get_display_name()

    def get_display_name(self):
        return f"{self.organization_name} ({self.organization_type})"

    class Meta:
        db_table = 'clients'
        ordering = ['organization_name']


class Supplier(models.Model):
    """Suppliers"""
    name = models.CharField(max_length=255)
    contact_info = models.CharField(max_length=255, blank=True)
    address = models.TextField(blank=True)
    inn = models.CharField(max_length=12, unique=True)
    kpp = models.CharField(max_length=9, blank=True)
    ogrn = models.CharField(max_length=15, blank=True)
    payment_account = models.CharField(max_length=20, blank=True)
    bik = models.CharField(max_length=9, blank=True)
    bank = models.CharField(max_length=255, blank=True)
    director_last_name = models.CharField(max_length=100, blank=True)
    director_first_name = models.CharField(max_length=100, blank=True)
    director_patronymic_name = models.CharField(max_length=100, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return self.name

    def get_director_full_name(self):
        parts = [self.director_last_name, self.director_first_name, self.director_patronymic_name]
        return ' '.join(p for p in parts if p)

    def get_director_short_name(self):
        """Director as 'Last F.P.'"""
        initials = ''.join(f'{p[0]}.' for p in [self.director_first_name, self.director_patronymic_name] if p)
        return f"{self.director_last_name} {initials}".strip()

    class Meta:
        db_table = 'suppliers'
        ordering = ['name']
