from django.urls import path
from .views import (
    act_list_create, act_detail,
    manager_act_list, manager_act_detail, manager_act_approve, manager_act_reject,
    accounter_act_list, accounter_act_detail
)

urlpatterns = [
    path('employee/warehouse-manager/write-off-acts/', act_list_create, name='write-off-act-list-create'),
    path('employee/warehouse-manager/write-off-acts/<int:pk>/', act_detail, name='write-off-act-detail'),

    path('employee/manager/write-off-acts/', manager_act_list, name='manager-write-off-act-list'),
    path('employee/manager/write-off-acts/<int:pk>/', manager_act_detail, name='manager-write-off-act-detail'),
    path('employee/manager/write-off-acts/<int:pk>/approve/', manager_act_approve, name='manager-write-off-act-approve'),
    path('employee/manager/write-off-acts/<int:pk>/reject/', manager_act_reject, name='manager-write-off-act-reject'),

    path('employee/accounter/write-off-acts/', accounter_act_list, name='accounter-write-off-act-list'),
    path('employee/accounter/write-off-acts/<int:pk>/', accounter_act_detail, name='accounter-write-off-act-detail'),
]
