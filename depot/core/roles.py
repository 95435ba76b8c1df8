"""Role names (Django groups) and helpers for resolving a user's role"""
from django.contrib.auth import get_user_model
from django.contrib.auth.models import Group

ROLE_EMPLOYEE_ADMIN = 'ROLE_EMPLOYEE_ADMIN'
ROLE_EMPLOYEE_MANAGER = 'ROLE_EMPLOYEE_MANAGER'
ROLE_EMPLOYEE_WAREHOUSE_MANAGER = 'ROLE_EMPLOYEE_WAREHOUSE_MANAGER'
ROLE_EMPLOYEE_WAREHOUSE_WORKER = 'ROLE_EMPLOYEE_WAREHOUSE_WORKER'
ROLE_EMPLOYEE_COURIER = 'ROLE_EMPLOYEE_COURIER'
ROLE_EMPLOYEE_ACCOUNTER = 'ROLE_EMPLOYEE_ACCOUNTER'
ROLE_VISITOR = 'ROLE_VISITOR'

EMPLOYEE_ROLE_PREFIX = 'ROLE_EMPLOYEE_'

ROLE_DESCRIPTIONS = {
    ROLE_EMPLOYEE_ADMIN: 'Administrator',
    ROLE_EMPLOYEE_MANAGER: 'Director',
    ROLE_EMPLOYEE_WAREHOUSE_MANAGER: 'Warehouse manager',
    ROLE_EMPLOYEE_WAREHOUSE_WORKER: 'Warehouse worker',
    ROLE_EMPLOYEE_COURIER: 'Courier',
    ROLE_EMPLOYEE_ACCOUNTER: 'Accountant',
    ROLE_VISITOR: 'Visitor',
}

EMPLOYEE_ROLES = [name for name in ROLE_DESCRIPTIONS if name.startswith(EMPLOYEE_ROLE_PREFIX)]


def get_group_names(user):
    if not user or not user.is_authenticated:
        return []
    return list(user.groups.values_list('name', flat=True))


def get_employee_role(user):
    """Return the employee role of a user or None for non-employees"""
    for name in get_group_names(user):
        if name.startswith(EMPLOYEE_ROLE_PREFIX):
            return name
    return None


def is_employee(user):
    return get_employee_role(user) is not None


def is_visitor(user):
    return ROLE_VISITOR in get_group_names(user)


def has_role(user, *roles):
    return any(name in roles for name in get_group_names(user))


def get_employees_by_role(role_name):
    """Active employees holding the given role"""
    User = get_user_model()
    return User.objects.filter(groups__name=role_name, is_active=True).distinct()


def assign_role(user, role_name):
    """Replace the user's role groups with ``role_name``"""
    group, _ = Group.objects.get_or_create(name=role_name)
    user.groups.remove(*user.groups.filter(name__startswith='ROLE_'))
    user.groups.add(group)
