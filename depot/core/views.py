import logging
from django.contrib.auth import get_user_model
from django.db.models import ProtectedError
from django.shortcuts import get_object_or_404
from django.utils.dateparse import parse_date
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework_simplejwt.views import TokenObtainPairView, TokenRefreshView
from . import roles
from .auth import EmployeeTokenObtainPairSerializer, EmployeeTokenRefreshSerializer
from .models import AuditLog
from .permissions import IsEmployee, IsAdminEmployee
from .serializers import (
    UserSerializer, EmployeeWriteSerializer, PasswordResetSerializer,
    ChangePasswordSerializer, AuditLogSerializer
)
from .utils import create_audit_log, paginated_response_data

logger = logging.getLogger('depot.core')
User = get_user_model()


class EmployeeTokenObtainPairView(TokenObtainPairView):
    permission_classes = [AllowAny]
    serializer_class = EmployeeTokenObtainPairSerializer


class EmployeeTokenRefreshView(TokenRefreshView):
    permission_classes = [AllowAny]
    serializer_class = EmployeeTokenRefreshSerializer


@api_view(['GET'])
@permission_classes([IsEmployee])
def employee_me(request):
    """Current employee with role and role description"""
    data = UserSerializer(request.user).data
    data['role_description'] = roles.ROLE_DESCRIPTIONS.get(data['role'])
    return Response(data)


@api_view(['POST'])
@permission_classes([IsEmployee])
def change_password(request):
    serializer = ChangePasswordSerializer(data=request.data, context={'request': request})
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    user = request.user
    user.set_password(serializer.validated_data['new_password'])
    user.need_change_pass = False
    user.save(update_fields=['password', 'need_change_pass', 'updated_at'])
    logger.info(f"{user.username} changed their password")
    return Response({'message': 'Password changed'})


# Administration
def _employees():
    return User.objects.filter(groups__name__startswith=roles.EMPLOYEE_ROLE_PREFIX).distinct()


@api_view(['GET'])
@permission_classes([IsAdminEmployee])
def role_list(request):
    return Response([
        {'name': name, 'description': roles.ROLE_DESCRIPTIONS[name]} for name in roles.EMPLOYEE_ROLES
    ])


@api_view(['GET', 'POST'])
@permission_classes([IsAdminEmployee])
def employee_list_create(request):
    """List employees other than the requesting administrator, or create one"""
    if request.method == 'GET':
        queryset = _employees().exclude(pk=request.user.pk).prefetch_related('groups')
        role = request.query_params.get('role')
        if role:
            queryset = queryset.filter(groups__name=role)
        return Response(UserSerializer(queryset.order_by('last_name', 'first_name'), many=True).data)

    serializer = EmployeeWriteSerializer(data=request.data)
    if serializer.is_valid():
        employee = serializer.save()
        create_audit_log(request=request, action='create', model_name='User', object_id=employee.pk,
                         object_reference=employee.username, changes={'role': request.data.get('role')})
        logger.info(f"Employee {employee.username} created with role {request.data.get('role')}")
        return Response(UserSerializer(employee).data, status=status.HTTP_201_CREATED)
    return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAdminEmployee])
def employee_detail(request, pk):
    employee = get_object_or_404(_employees(), pk=pk)

    if request.method == 'GET':
        return Response(UserSerializer(employee).data)
    elif request.method in ('PUT', 'PATCH'):
        serializer = EmployeeWriteSerializer(employee, data=request.data, partial=request.method == 'PATCH')
        if serializer.is_valid():
            employee = serializer.save()
            logger.info(f"Employee {employee.username} updated")
            return Response(UserSerializer(employee).data)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    else:  # DELETE
        if employee.pk == request.user.pk:
            return Response({'error': 'You cannot delete your own account'}, status=status.HTTP_400_BAD_REQUEST)
        try:
            employee.delete()
        except ProtectedError:
            logger.warning(f"Employee {employee.username} is referenced by documents and cannot be deleted")
            return Response({'error': 'Employee is referenced by documents and cannot be deleted; lock the account instead'},
                            status=status.HTTP_400_BAD_REQUEST)
        logger.info(f"Employee {employee.username} deleted")
        return Response(status=status.HTTP_204_NO_CONTENT)


@api_view(['POST'])
@permission_classes([IsAdminEmployee])
def employee_reset_password(request, pk):
    employee = get_object_or_404(_employees(), pk=pk)
    serializer = PasswordResetSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    employee.set_password(serializer.validated_data['password'])
    employee.need_change_pass = True
    employee.save(update_fields=['password', 'need_change_pass', 'updated_at'])
    create_audit_log(request=request, action='password_reset', model_name='User', object_id=employee.pk,
                     object_reference=employee.username)
    logger.info(f"Password of {employee.username} reset by {request.user.username}")
    return Response(UserSerializer(employee).data)


def _set_active(request, user, active):
    if user.pk == request.user.pk:
        return Response({'error': 'You cannot lock your own account'}, status=status.HTTP_400_BAD_REQUEST)
    user.is_active = active
    user.save(update_fields=['is_active', 'updated_at'])
    create_audit_log(request=request, action='account_unlock' if active else 'account_lock', model_name='User',
                     object_id=user.pk, object_reference=user.username)
    logger.info(f"Account {user.username} {'unlocked' if active else 'locked'} by {request.user.username}")
    return Response(UserSerializer(user).data)


@api_view(['POST'])
@permission_classes([IsAdminEmployee])
def employee_lock(request, pk):
    return _set_active(request, get_object_or_404(_employees(), pk=pk), False)


@api_view(['POST'])
@permission_classes([IsAdminEmployee])
def employee_unlock(request, pk):
    return _set_active(request, get_object_or_404(_employees(), pk=pk), True)


@api_view(['GET'])
@permission_classes([IsAdminEmployee])
def check_username(request):
    username = request.query_params.get('username', '').strip()
    return Response({'exists': bool(username) and User.objects.filter(username=username).exists()})


def _query_date(request, name):
    raw = request.query_params.get(name)
    if not raw:
        return None
    parsed = parse_date(raw)
    if parsed is None:
        raise ValueError(f"{name} must be a date in YYYY-MM-DD format")
    return parsed


@api_view(['GET'])
@permission_classes([IsAdminEmployee])
def audit_log_list(request):
    """Audit log filtered by ``action``, ``model``, ``reference`` and date range"""
    queryset = AuditLog.objects.select_related('user')

    action_filter = request.query_params.get('action')
    if action_filter:
        queryset = queryset.filter(action=action_filter)
    model_filter = request.query_params.get('model')
    if model_filter:
        queryset = queryset.filter(model_name=model_filter)
    reference = request.query_params.get('reference')
    if reference:
        queryset = queryset.filter(object_reference=reference)
    try:
        date_from = _query_date(request, 'date_from')
        date_to = _query_date(request, 'date_to')
    except ValueError as e:
        return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)
    if date_from:
        queryset = queryset.filter(created_at__date__gte=date_from)
    if date_to:
        queryset = queryset.filter(created_at__date__lte=date_to)

    try:
        return Response(paginated_response_data(request, queryset.order_by('-created_at'), AuditLogSerializer))
    except ValueError:
        return Response({'error': 'page and limit must be integers'}, status=status.HTTP_400_BAD_REQUEST)
