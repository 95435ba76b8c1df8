from django.contrib.auth.models import AbstractUser
from django.db import models


class User(AbstractUser):
    """Extended user model shared by employees and visitors"""
    patronymic_name = models.CharField(max_length=150, blank=True)
    phone = models.CharField(max_length=20, blank=True, null=True)
    is_active = models.BooleanField(default=True)
    need_change_pass = models.BooleanField(default=False)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def get_full_name(self):
        parts = [self.last_name, self.first_name, self.patronymic_name]
        return ' '.join(p for p in parts if p).strip() or self.username

    def get_short_name(self):
        """Last name with initials, e.g. 'Ivanov I.I.'"""
        initials = ''.join(f'{p[0]}.' for p in [self.first_name, self.patronymic_name] if p)
        if not self.last_name:
            return self.username
        return f'{self.last_name} {initials}'.strip()

    @property
    def role_name(self):
        """Name of the role group, or None"""
        group = self.groups.filter(name__startswith='ROLE_').first()
        return group.name if group else None

    class Meta:
        db_table = 'users'


class AuditLog(models.Model):
    """Audit log for business document transitions"""
    ACTION_CHOICES = [
        ('create', 'Create'),
        ('update', 'Update'),
        ('delete', 'Delete'),
        ('status_change', 'Status Change'),
        ('stock_reserve', 'Stock Reserved'),
        ('stock_release', 'Stock Released'),
        ('stock_receive', 'Stock Received'),
        ('stock_ship', 'Stock Shipped'),
        ('stock_write_off', 'Stock Written Off'),
        ('placement', 'Placement'),
        ('account_lock', 'Account Locked'),
        ('account_unlock', 'Account Unlocked'),
        ('password_reset', 'Password Reset'),
    ]

    user = models.ForeignKey(User, on_delete=models.SET_NULL, null=True, related_name='audit_logs')
    action = models.CharField(max_length=50, choices=ACTION_CHOICES)
    model_name = models.CharField(max_length=100)
    object_id = models.CharField(max_length=100)
    object_reference = models.CharField(max_length=255, blank=True, null=True, help_text="Document number (order, act, TTN)")
    changes = models.JSONField(default=dict, blank=True)
    ip_address = models.GenericIPAddressField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    def __str__(self):
        return f"{self.action} {self.model_name}#{self.object_id}"

    class Meta:
        db_table = 'audit_logs'
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['-created_at'], name='idx_audit_created'),
            models.Index(fields=['action'], name='idx_audit_action'),
            models.Index(fields=['model_name'], name='idx_audit_model'),
            models.Index(fields=['object_reference'], name='idx_audit_reference'),
        ]
