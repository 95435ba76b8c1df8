import logging
from django.contrib.auth import get_user_model
from django.contrib.auth.hashers import make_password
from django.db import transaction
from django.utils.crypto import get_random_string
from depot.core import roles
from .models import Visitor

logger = logging.getLogger('depot.visitors')
User = get_user_model()

PROFILE_USER_FIELDS = ('last_name', 'first_name', 'patronymic_name', 'username')
PROFILE_VISITOR_FIELDS = ('sex', 'date_birthday', 'mobile_number')


def pending_registration(data):
    """Session-storable copy of validated registration data with the password already hashed"""
    return {
        'last_name': data['last_name'],
        'first_name': data['first_name'],
        'patronymic_name': data.get('patronymic_name', ''),
        'sex': data['sex'],
        'date_birthday': data['date_birthday'].isoformat(),
        'username': data['username'],
        'password': make_password(data['password']),
        'mobile_number': data.get('mobile_number', ''),
    }


@transaction.atomic
def create_visitor(pending):
    """Create the user and visitor profile from a confirmed registration"""
    user = User.objects.create(
        username=pending['username'],
        email=pending['username'],
        last_name=pending['last_name'],
        first_name=pending['first_name'],
        patronymic_name=pending.get('patronymic_name', ''),
        password=pending['password'],
        is_active=True,
    )
    roles.assign_role(user, roles.ROLE_VISITOR)
    visitor = Visitor.objects.create(
        user=user,
        sex=pending['sex'],
        date_birthday=pending['date_birthday'],
        mobile_number=pending.get('mobile_number', ''),
    )
    logger.info(f"Visitor {user.username} registered")
    return visitor


def find_visitor(username):
    return Visitor.objects.select_related('user').filter(user__username=username).first()


@transaction.atomic
def reset_password(visitor):
    """Set a new random password that must be changed on next login; returns it"""
    new_password = get_random_string(10)
    user = visitor.user
    user.set_password(new_password)
    user.need_change_pass = True
    user.save(update_fields=['password', 'need_change_pass', 'updated_at'])
    logger.info(f"Password of visitor {user.username} reset")
    return new_password


def pending_profile(data):
    pending = {field: data.get(field, '') for field in PROFILE_USER_FIELDS + PROFILE_VISITOR_FIELDS}
    pending['date_birthday'] = data['date_birthday'].isoformat()
    return pending


@transaction.atomic
def apply_profile(visitor, data):
    user = visitor.user
    for field in PROFILE_USER_FIELDS:
        if field in data:
            setattr(user, field, data[field])
    if 'username' in data:
        user.email = data['username']
    user.save()
    for field in PROFILE_VISITOR_FIELDS:
        if field in data:
            setattr(visitor, field, data[field])
    visitor.save()
    logger.info(f"Profile of visitor {user.username} updated")
    return visitor
