from django.urls import path
from .views import (
    EmployeeTokenObtainPairView, EmployeeTokenRefreshView, employee_me, change_password,
    role_list, employee_list_create, employee_detail, employee_reset_password,
    employee_lock, employee_unlock, check_username, audit_log_list
)

urlpatterns = [
    # Auth endpoints
    path('employee/auth/login/', EmployeeTokenObtainPairView.as_view(), name='employee-token-obtain-pair'),
    path('employee/auth/refresh/', EmployeeTokenRefreshView.as_view(), name='employee-token-refresh'),
    path('employee/me/', employee_me, name='employee-me'),
    path('employee/change-password/', change_password, name='employee-change-password'),

    # Administration
    path('employee/admin/roles/', role_list, name='role-list'),
    path('employee/admin/employees/', employee_list_create, name='employee-list-create'),
    path('employee/admin/employees/check-username/', check_username, name='employee-check-username'),
    path('employee/admin/employees/<int:pk>/', employee_detail, name='employee-detail'),
    path('employee/admin/employees/<int:pk>/reset-password/', employee_reset_password, name='employee-reset-password'),
    path('employee/admin/employees/<int:pk>/lock/', employee_lock, name='employee-lock'),
    path('employee/admin/employees/<int:pk>/unlock/', employee_unlock, name='employee-unlock'),
    path('employee/admin/audit-logs/', audit_log_list, name='audit-log-list'),
]
