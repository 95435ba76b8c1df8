"""
DRF permission classes for the two authentication chains.

Employee endpoints live under /api/v1/employee/ and are gated by the
employee's role group; visitor endpoints under /api/v1/visitor/ require
the visitor role. A principal of one chain is refused by the other.
"""
import logging
from rest_framework.permissions import BasePermission
from . import roles

logger = logging.getLogger('depot.core')


def issued_for_other_chain(request, chain):
    """True when the request carries a JWT issued by the other chain's login"""
    token = getattr(request, 'auth', None)
    if token is None or not hasattr(token, 'get'):
        return False
    issued_for = token.get('chain')
    return issued_for is not None and issued_for != chain


class IsEmployee(BasePermission):
    """Any active user holding an employee role"""
    message = 'Employee account required.'
    required_roles = ()

    def has_permission(self, request, view):
        user = request.user
        if not user or not user.is_authenticated or not user.is_active:
            return False
        if issued_for_other_chain(request, 'employee'):
            return False
        role = roles.get_employee_role(user)
        if role is None:
            logger.warning(f"User {user.username} without employee role requested {request.path}")
            return False
        if self.required_roles and role not in self.required_roles:
            logger.warning(f"Employee {user.username} ({role}) denied access to {request.path}")
            return False
        return True


class IsAdminEmployee(IsEmployee):
    message = 'Administrator role required.'
    required_roles = (roles.ROLE_EMPLOYEE_ADMIN,)


class IsManager(IsEmployee):
    message = 'Director role required.'
    required_roles = (roles.ROLE_EMPLOYEE_MANAGER,)


class IsWarehouseManager(IsEmployee):
    message = 'Warehouse manager role required.'
    required_roles = (roles.ROLE_EMPLOYEE_WAREHOUSE_MANAGER,)


class IsWarehouseWorker(IsEmployee):
    message = 'Warehouse worker role required.'
    required_roles = (roles.ROLE_EMPLOYEE_WAREHOUSE_WORKER,)


class IsCourier(IsEmployee):
    message = 'Courier role required.'
    required_roles = (roles.ROLE_EMPLOYEE_COURIER,)


class IsAccounter(IsEmployee):
    message = 'Accountant role required.'
    required_roles = (roles.ROLE_EMPLOYEE_ACCOUNTER,)


class IsVisitor(BasePermission):
    """Active user registered through the visitor chain"""
    message = 'Visitor account required.'

    def has_permission(self, request, view):
        user = request.user
        if not user or not user.is_authenticated or not user.is_active:
            return False
        if issued_for_other_chain(request, 'visitor'):
            return False
        return roles.is_visitor(user)
