from django.urls import path
from .views import (
    warehouse_list, warehouse_list_create, warehouse_detail, warehouse_shelves,
    shelf_detail, shelf_zone_create, warehouse_zones, warehouse_statistics,
    warehouse_underutilized_zones, zone_detail, product_locations,
    placement_check, placement_place, placement_remove, placement_move
)

urlpatterns = [
    path('employee/warehouses/', warehouse_list, name='warehouse-list'),

    path('employee/warehouse-manager/warehouses/', warehouse_list_create, name='warehouse-list-create'),
    path('employee/warehouse-manager/warehouses/<int:pk>/', warehouse_detail, name='warehouse-detail'),
    path('employee/warehouse-manager/warehouses/<int:pk>/shelves/', warehouse_shelves, name='warehouse-shelves'),
    path('employee/warehouse-manager/warehouses/<int:pk>/zones/', warehouse_zones, name='warehouse-zones'),
    path('employee/warehouse-manager/warehouses/<int:pk>/statistics/', warehouse_statistics, name='warehouse-statistics'),
    path('employee/warehouse-manager/warehouses/<int:pk>/underutilized-zones/', warehouse_underutilized_zones, name='warehouse-underutilized-zones'),
    path('employee/warehouse-manager/shelves/<int:pk>/', shelf_detail, name='shelf-detail'),
    path('employee/warehouse-manager/shelves/<int:pk>/zones/', shelf_zone_create, name='shelf-zone-create'),
    path('employee/warehouse-manager/zones/<int:pk>/', zone_detail, name='zone-detail'),
    path('employee/warehouse-manager/products/<int:pk>/locations/', product_locations, name='product-locations'),
    path('employee/warehouse-manager/placement/check/', placement_check, name='placement-check'),
    path('employee/warehouse-manager/placement/place/', placement_place, name='placement-place'),
    path('employee/warehouse-manager/placement/remove/', placement_remove, name='placement-remove'),
    path('employee/warehouse-manager/placement/move/', placement_move, name='placement-move'),
]
