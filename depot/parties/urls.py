from django.urls import path
from .views import (
    client_list, client_list_create, client_detail,
    supplier_list, supplier_list_create, supplier_detail
)

urlpatterns = [
    path('employee/clients/', client_list, name='client-list'),
    path('employee/suppliers/', supplier_list, name='supplier-list'),
    path('employee/manager/clients/', client_list_create, name='client-list-create'),
    path('employee/manager/clients/<int:pk>/', client_detail, name='client-detail'),
    path('employee/manager/suppliers/', supplier_list_create, name='supplier-list-create'),
    path('employee/manager/suppliers/<int:pk>/', supplier_detail, name='supplier-detail'),
]
