from django.urls import path
from .views import (
    VisitorTokenObtainPairView, VisitorTokenRefreshView, check_username, registration, reset_password,
    resend_code, verify_code, profile, change_password,
    admin_visitor_list, admin_visitor_lock, admin_visitor_unlock, admin_visitor_delete
)

urlpatterns = [
    # Public
    path('visitor/auth/login/', VisitorTokenObtainPairView.as_view(), name='visitor-token-obtain-pair'),
    path('visitor/auth/refresh/', VisitorTokenRefreshView.as_view(), name='visitor-token-refresh'),
    path('visitor/check-username/', check_username, name='visitor-check-username'),
    path('visitor/registration/', registration, name='visitor-registration'),
    path('visitor/reset-password/', reset_password, name='visitor-reset-password'),
    path('visitor/verify-code/<str:mode>/', verify_code, name='visitor-verify-code'),
    path('visitor/verify-code/<str:mode>/resend/', resend_code, name='visitor-resend-code'),

    # Visitor
    path('visitor/profile/', profile, name='visitor-profile'),
    path('visitor/change-password/', change_password, name='visitor-change-password'),

    # Administration
    path('employee/admin/visitors/', admin_visitor_list, name='admin-visitor-list'),
    path('employee/admin/visitors/<int:pk>/', admin_visitor_delete, name='admin-visitor-delete'),
    path('employee/admin/visitors/<int:pk>/lock/', admin_visitor_lock, name='admin-visitor-lock'),
    path('employee/admin/visitors/<int:pk>/unlock/', admin_visitor_unlock, name='admin-visitor-unlock'),
]
