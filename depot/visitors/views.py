"""
Visitor chain: public registration and password recovery confirmed by a
one-time code sent by e-mail, JWT login, and the visitor's own profile.

Pending registrations, edits and resets live in the session until the
matching code is submitted to ``verify-code/<mode>/``.
"""
import logging
from django.contrib.auth import get_user_model
from django.shortcuts import get_object_or_404
from django.utils.crypto import constant_time_compare
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework_simplejwt.views import TokenObtainPairView, TokenRefreshView
from depot.core.auth import VisitorTokenObtainPairSerializer, VisitorTokenRefreshSerializer
from depot.core.permissions import IsVisitor, IsAdminEmployee
from depot.core.serializers import ChangePasswordSerializer
from depot.core.utils import create_audit_log
from . import mail, services
from .models import Visitor
from .serializers import (
    VisitorSerializer, RegistrationSerializer, ProfileSerializer, CodeSerializer, ResetPasswordSerializer
)

logger = logging.getLogger('depot.visitors')
User = get_user_model()

MODE_ACTIVATE = 'activate'
MODE_RESET = 'reset'
MODE_EDIT = 'edit'
MODES = (MODE_ACTIVATE, MODE_RESET, MODE_EDIT)

SESSION_PENDING = {
    MODE_ACTIVATE: 'pending_visitor',
    MODE_RESET: 'reset_username',
    MODE_EDIT: 'pending_edit',
}

MAIL_UNAVAILABLE = {'error': 'Could not send the e-mail. Please try again later.'}


def _otp_key(mode):
    return f'otp_{mode}'


def _code_address(mode, pending):
    """E-mail address the code of a mode is sent to"""
    if mode == MODE_RESET:
        return pending
    return pending['username']


def _start_confirmation(request, mode, pending):
    """Mail a fresh code and remember it with the pending data; False when mail fails"""
    code = mail.generate_one_time_password()
    if not mail.send_one_time_password(_code_address(mode, pending), code):
        return False
    request.session[SESSION_PENDING[mode]] = pending
    request.session[_otp_key(mode)] = code
    return True


def _clear(request, mode):
    request.session.pop(SESSION_PENDING[mode], None)
    request.session.pop(_otp_key(mode), None)


class VisitorTokenObtainPairView(TokenObtainPairView):
    permission_classes = [AllowAny]
    serializer_class = VisitorTokenObtainPairSerializer


class VisitorTokenRefreshView(TokenRefreshView):
    permission_classes = [AllowAny]
    serializer_class = VisitorTokenRefreshSerializer


@api_view(['GET'])
@permission_classes([AllowAny])
def check_username(request):
    username = request.query_params.get('username', '').strip()
    return Response({'exists': bool(username) and User.objects.filter(username=username).exists()})


@api_view(['POST'])
@permission_classes([AllowAny])
def registration(request):
    serializer = RegistrationSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    pending = services.pending_registration(serializer.validated_data)
    if not _start_confirmation(request, MODE_ACTIVATE, pending):
        return Response(MAIL_UNAVAILABLE, status=status.HTTP_503_SERVICE_UNAVAILABLE)
    logger.info(f"Registration code sent to {pending['username']}")
    return Response({'mode': MODE_ACTIVATE, 'message': 'Confirmation code sent'}, status=status.HTTP_202_ACCEPTED)


@api_view(['POST'])
@permission_classes([AllowAny])
def reset_password(request):
    serializer = ResetPasswordSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    username = serializer.validated_data['username']
    if services.find_visitor(username) is None:
        return Response({'error': 'Visitor not found'}, status=status.HTTP_404_NOT_FOUND)
    if not _start_confirmation(request, MODE_RESET, username):
        return Response(MAIL_UNAVAILABLE, status=status.HTTP_503_SERVICE_UNAVAILABLE)
    return Response({'mode': MODE_RESET, 'message': 'Confirmation code sent'}, status=status.HTTP_202_ACCEPTED)


@api_view(['POST'])
@permission_classes([AllowAny])
def resend_code(request, mode):
    if mode not in MODES:
        return Response({'error': f'Unknown mode: {mode}'}, status=status.HTTP_400_BAD_REQUEST)
    pending = request.session.get(SESSION_PENDING[mode])
    if not pending:
        return Response({'error': 'Nothing waits for confirmation'}, status=status.HTTP_400_BAD_REQUEST)
    if not _start_confirmation(request, mode, pending):
        return Response(MAIL_UNAVAILABLE, status=status.HTTP_503_SERVICE_UNAVAILABLE)
    return Response({'mode': mode, 'message': 'Confirmation code sent again'})


@api_view(['POST'])
@permission_classes([AllowAny])
def verify_code(request, mode):
    """Confirm a pending registration, password reset or profile edit"""
    if mode not in MODES:
        return Response({'error': f'Unknown mode: {mode}'}, status=status.HTTP_400_BAD_REQUEST)
    serializer = CodeSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

    expected = request.session.get(_otp_key(mode))
    pending = request.session.get(SESSION_PENDING[mode])
    if not expected or not pending or not constant_time_compare(expected, serializer.validated_data['code'].strip()):
        logger.warning(f"Invalid confirmation code for mode {mode}")
        return Response({'error': 'Invalid confirmation code'}, status=status.HTTP_400_BAD_REQUEST)

    if mode == MODE_ACTIVATE:
        if User.objects.filter(username=pending['username']).exists():
            _clear(request, mode)
            return Response({'error': f"Username '{pending['username']}' is already taken"},
                            status=status.HTTP_400_BAD_REQUEST)
        visitor = services.create_visitor(pending)
        _clear(request, mode)
        return Response(VisitorSerializer(visitor).data, status=status.HTTP_201_CREATED)

    if mode == MODE_RESET:
        visitor = services.find_visitor(pending)
        if visitor is None:
            _clear(request, mode)
            return Response({'error': 'Visitor not found'}, status=status.HTTP_404_NOT_FOUND)
        new_password = services.reset_password(visitor)
        _clear(request, mode)
        if not mail.send_reset_password(visitor.user.username, new_password):
            return Response(MAIL_UNAVAILABLE, status=status.HTTP_503_SERVICE_UNAVAILABLE)
        return Response({'message': 'Password reset. The new password has been sent by e-mail.'})

    # MODE_EDIT
    visitor = get_object_or_404(Visitor.objects.select_related('user'), user_id=pending['visitor_id'])
    changes = {k: v for k, v in pending.items() if k != 'visitor_id'}
    if User.objects.filter(username=changes['username']).exclude(pk=visitor.user_id).exists():
        _clear(request, mode)
        return Response({'error': f"Username '{changes['username']}' is already taken"},
                        status=status.HTTP_400_BAD_REQUEST)
    visitor = services.apply_profile(visitor, changes)
    _clear(request, mode)
    return Response(VisitorSerializer(visitor).data)


@api_view(['GET', 'PUT'])
@permission_classes([IsVisitor])
def profile(request):
    """The visitor's own profile; a new e-mail must be confirmed with a code"""
    visitor = get_object_or_404(Visitor.objects.select_related('user'), user=request.user)
    if request.method == 'GET':
        return Response(VisitorSerializer(visitor).data)

    serializer = ProfileSerializer(data=request.data, context={'request': request})
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    data = serializer.validated_data
    if data['username'] == request.user.username:
        visitor = services.apply_profile(visitor, data)
        return Response(VisitorSerializer(visitor).data)

    pending = services.pending_profile(data)
    pending['visitor_id'] = request.user.pk
    if not _start_confirmation(request, MODE_EDIT, pending):
        return Response(MAIL_UNAVAILABLE, status=status.HTTP_503_SERVICE_UNAVAILABLE)
    logger.info(f"Visitor {request.user.username} requested an e-mail change to {data['username']}")
    return Response({'mode': MODE_EDIT, 'message': 'Confirmation code sent to the new address'},
                    status=status.HTTP_202_ACCEPTED)


@api_view(['POST'])
@permission_classes([IsVisitor])
def change_password(request):
    serializer = ChangePasswordSerializer(data=request.data, context={'request': request})
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    user = request.user
    user.set_password(serializer.validated_data['new_password'])
    user.need_change_pass = False
    user.save(update_fields=['password', 'need_change_pass', 'updated_at'])
    return Response({'message': 'Password changed'})


# Administration
@api_view(['GET'])
@permission_classes([IsAdminEmployee])
def admin_visitor_list(request):
    visitors = Visitor.objects.select_related('user').order_by('user__last_name', 'user__first_name')
    return Response(VisitorSerializer(visitors, many=True).data)


def _set_active(request, pk, active):
    visitor = get_object_or_404(Visitor.objects.select_related('user'), user_id=pk)
    user = visitor.user
    user.is_active = active
    user.save(update_fields=['is_active', 'updated_at'])
    create_audit_log(request=request, action='account_unlock' if active else 'account_lock', model_name='User',
                     object_id=user.pk, object_reference=user.username)
    logger.info(f"Visitor {user.username} {'unlocked' if active else 'locked'} by {request.user.username}")
    return Response(VisitorSerializer(visitor).data)


@api_view(['POST'])
@permission_classes([IsAdminEmployee])
def admin_visitor_lock(request, pk):
    return _set_active(request, pk, False)


@api_view(['POST'])
@permission_classes([IsAdminEmployee])
def admin_visitor_unlock(request, pk):
    return _set_active(request, pk, True)


@api_view(['DELETE'])
@permission_classes([IsAdminEmployee])
def admin_visitor_delete(request, pk):
    visitor = get_object_or_404(Visitor.objects.select_related('user'), user_id=pk)
    username = visitor.user.username
    visitor.user.delete()
    logger.info(f"Visitor {username} deleted by {request.user.username}")
    return Response(status=status.HTTP_204_NO_CONTENT)
