from django.urls import path
from .views import (
    order_list, order_detail, order_create, order_update, order_confirm, order_cancel,
    order_product_deficit, order_list_for_reservation, order_reserve,
    order_list_for_assembly, order_start_assembly, order_complete_assembly
)

urlpatterns = [
    path('employee/orders/', order_list, name='order-list'),
    path('employee/orders/<int:pk>/', order_detail, name='order-detail'),

    path('employee/manager/orders/', order_create, name='order-create'),
    path('employee/manager/orders/deficit/', order_product_deficit, name='order-product-deficit'),
    path('employee/manager/orders/<int:pk>/', order_update, name='order-update'),
    path('employee/manager/orders/<int:pk>/confirm/', order_confirm, name='order-confirm'),
    path('employee/manager/orders/<int:pk>/cancel/', order_cancel, name='order-cancel'),

    path('employee/warehouse-manager/orders/', order_list_for_reservation, name='order-list-for-reservation'),
    path('employee/warehouse-manager/orders/<int:pk>/reserve/', order_reserve, name='order-reserve'),

    path('employee/warehouse-worker/orders/', order_list_for_assembly, name='order-list-for-assembly'),
    path('employee/warehouse-worker/orders/<int:pk>/start-assembly/', order_start_assembly, name='order-start-assembly'),
    path('employee/warehouse-worker/orders/<int:pk>/complete-assembly/', order_complete_assembly, name='order-complete-assembly'),
]
