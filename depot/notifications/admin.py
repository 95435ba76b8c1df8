from django.contrib import admin
from .models import Notification


@admin.register(Notification)
class NotificationAdmin(admin.ModelAdmin):
    list_display = ['recipient', 'text', 'status', 'visible', 'created_at']
    list_filter = ['status', 'visible', 'created_at']
    search_fields = ['text', 'recipient__username']
    ordering = ['-created_at']
