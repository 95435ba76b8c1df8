from django.db import models
from depot.core.models import User


class Notification(models.Model):
    """In-app notification addressed to one employee"""
    STATUS_NEW = 'NEW'
    STATUS_READ = 'READ'
    STATUS_CHOICES = [
        (STATUS_NEW, 'New'),
        (STATUS_READ, 'Read'),
    ]

    recipient = models.ForeignKey(User, on_delete=models.CASCADE, related_name='notifications')
    text = models.TextField()
    status = models.CharField(max_length=10, choices=STATUS_CHOICES, default=STATUS_NEW)
    visible = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)

    def __str__(self):
        return f"{self.recipient.username}: {self.text[:40]}"

    class Meta:
        db_table = 'notifications'
        ordering = ['-created_at', '-id']
        indexes = [
            models.Index(fields=['recipient', 'status'], name='idx_notif_recipient_status'),
        ]
