from django.urls import path
from .views import (
    global_category_list_create, global_category_detail,
    category_list_create, category_detail,
    attribute_list_create, attribute_detail,
    product_list, product_retrieve, product_list_create, product_detail
)

urlpatterns = [
    # Any employee
    path('employee/products/', product_list, name='product-list'),
    path('employee/products/<int:pk>/', product_retrieve, name='product-retrieve'),

    # Warehouse manager
    path('employee/warehouse-manager/global-categories/', global_category_list_create, name='global-category-list-create'),
    path('employee/warehouse-manager/global-categories/<int:pk>/', global_category_detail, name='global-category-detail'),
    path('employee/warehouse-manager/categories/', category_list_create, name='category-list-create'),
    path('employee/warehouse-manager/categories/<int:pk>/', category_detail, name='category-detail'),
    path('employee/warehouse-manager/attributes/', attribute_list_create, name='attribute-list-create'),
    path('employee/warehouse-manager/attributes/<int:pk>/', attribute_detail, name='attribute-detail'),
    path('employee/warehouse-manager/products/', product_list_create, name='product-list-create'),
    path('employee/warehouse-manager/products/<int:pk>/', product_detail, name='product-detail'),
]
