from django.urls import path
from .views import (
    notification_list, notification_unread_count,
    notification_mark_read, notification_mark_all_read, notification_hide
)

urlpatterns = [
    path('employee/notifications/', notification_list, name='notification-list'),
    path('employee/notifications/unread-count/', notification_unread_count, name='notification-unread-count'),
    path('employee/notifications/read-all/', notification_mark_all_read, name='notification-read-all'),
    path('employee/notifications/<int:pk>/read/', notification_mark_read, name='notification-read'),
    path('employee/notifications/<int:pk>/hide/', notification_hide, name='notification-hide'),
]
