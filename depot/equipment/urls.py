from django.urls import path
from .views import (
    equipment_type_list_create, equipment_type_detail,
    equipment_list_create, equipment_detail, manager_equipment_list
)

urlpatterns = [
    path('employee/warehouse-manager/equipment-types/', equipment_type_list_create, name='equipment-type-list-create'),
    path('employee/warehouse-manager/equipment-types/<int:pk>/', equipment_type_detail, name='equipment-type-detail'),
    path('employee/warehouse-manager/equipment/', equipment_list_create, name='equipment-list-create'),
    path('employee/warehouse-manager/equipment/<int:pk>/', equipment_detail, name='equipment-detail'),
    path('employee/manager/equipment/', manager_equipment_list, name='manager-equipment-list'),
]
