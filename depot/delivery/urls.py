from django.urls import path
from .views import (
    vehicle_list_create, vehicle_detail,
    task_list_create, task_detail, task_cancel, available_resources, order_documents,
    ttn_update, acceptance_act_update,
    task_list_for_loading, task_start_loading, task_complete_loading,
    task_list_for_accounting, task_create_ttn,
    courier_task_list, courier_task_detail, courier_task_documents, courier_start_delivery,
    courier_update_location, courier_route_point_reached, courier_complete_delivery
)

urlpatterns = [
    # Manager
    path('employee/manager/vehicles/', vehicle_list_create, name='vehicle-list-create'),
    path('employee/manager/vehicles/<int:pk>/', vehicle_detail, name='vehicle-detail'),

    # Warehouse manager
    path('employee/warehouse-manager/delivery-tasks/', task_list_create, name='delivery-task-list-create'),
    path('employee/warehouse-manager/delivery-tasks/resources/', available_resources, name='delivery-task-resources'),
    path('employee/warehouse-manager/delivery-tasks/<int:pk>/', task_detail, name='delivery-task-detail'),
    path('employee/warehouse-manager/delivery-tasks/<int:pk>/cancel/', task_cancel, name='delivery-task-cancel'),
    path('employee/warehouse-manager/orders/<int:order_pk>/documents/', order_documents, name='order-documents'),
    path('employee/warehouse-manager/ttns/<int:pk>/', ttn_update, name='ttn-update'),
    path('employee/warehouse-manager/acceptance-acts/<int:pk>/', acceptance_act_update, name='acceptance-act-update'),

    # Warehouse worker
    path('employee/warehouse-worker/delivery-tasks/', task_list_for_loading, name='delivery-task-list-for-loading'),
    path('employee/warehouse-worker/delivery-tasks/<int:pk>/start-loading/', task_start_loading, name='delivery-task-start-loading'),
    path('employee/warehouse-worker/delivery-tasks/<int:pk>/complete-loading/', task_complete_loading, name='delivery-task-complete-loading'),

    # Accountant
    path('employee/accounter/delivery-tasks/', task_list_for_accounting, name='delivery-task-list-for-accounting'),
    path('employee/accounter/delivery-tasks/<int:pk>/ttn/', task_create_ttn, name='delivery-task-create-ttn'),

    # Courier
    path('employee/courier/delivery-tasks/', courier_task_list, name='courier-task-list'),
    path('employee/courier/delivery-tasks/<int:pk>/', courier_task_detail, name='courier-task-detail'),
    path('employee/courier/delivery-tasks/<int:pk>/documents/', courier_task_documents, name='courier-task-documents'),
    path('employee/courier/delivery-tasks/<int:pk>/start/', courier_start_delivery, name='courier-start-delivery'),
    path('employee/courier/delivery-tasks/<int:pk>/location/', courier_update_location, name='courier-update-location'),
    path('employee/courier/delivery-tasks/<int:pk>/route-points/<int:point_pk>/reached/', courier_route_point_reached, name='courier-route-point-reached'),
    path('employee/courier/delivery-tasks/<int:pk>/complete/', courier_complete_delivery, name='courier-complete-delivery'),
]
