from django.urls import path
from .views import (
    request_list_create, request_detail, request_submit, request_resubmit, request_cancel,
    delivery_list_create, delivery_detail,
    manager_request_list, manager_request_detail, manager_request_approve, manager_request_reject,
    accounter_request_list, accounter_request_detail, accounter_request_approve, accounter_request_reject
)

urlpatterns = [
    # Warehouse manager
    path('employee/warehouse-manager/requests/', request_list_create, name='request-list-create'),
    path('employee/warehouse-manager/requests/<int:pk>/', request_detail, name='request-detail'),
    path('employee/warehouse-manager/requests/<int:pk>/submit/', request_submit, name='request-submit'),
    path('employee/warehouse-manager/requests/<int:pk>/resubmit/', request_resubmit, name='request-resubmit'),
    path('employee/warehouse-manager/requests/<int:pk>/cancel/', request_cancel, name='request-cancel'),
    path('employee/warehouse-manager/deliveries/', delivery_list_create, name='delivery-list-create'),
    path('employee/warehouse-manager/deliveries/<int:pk>/', delivery_detail, name='delivery-detail'),

    # Director
    path('employee/manager/requests/', manager_request_list, name='manager-request-list'),
    path('employee/manager/requests/<int:pk>/', manager_request_detail, name='manager-request-detail'),
    path('employee/manager/requests/<int:pk>/approve/', manager_request_approve, name='manager-request-approve'),
    path('employee/manager/requests/<int:pk>/reject/', manager_request_reject, name='manager-request-reject'),

    # Accountant
    path('employee/accounter/requests/', accounter_request_list, name='accounter-request-list'),
    path('employee/accounter/requests/<int:pk>/', accounter_request_detail, name='accounter-request-detail'),
    path('employee/accounter/requests/<int:pk>/approve/', accounter_request_approve, name='accounter-request-approve'),
    path('employee/accounter/requests/<int:pk>/reject/', accounter_request_reject, name='accounter-request-reject'),
]
