"""
Test suite for authentication, employee administration and the audit log
"""
from io import StringIO
from django.contrib.auth import get_user_model
from django.contrib.auth.models import Group
from django.core.management import call_command
from django.test import TestCase
from rest_framework import status
from depot.catalog.models import ProductAttribute
from depot.core import roles
from depot.core.auth import CHAIN_EMPLOYEE, CHAIN_VISITOR, ChainTokenObtainPairSerializer
from depot.core.models import AuditLog
from depot.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from depot.core.utils import generate_document_number
from depot.orders.models import ClientOrder

User = get_user_model()


class UserModelTests(TestCase):

    def test_names(self):
        user = TestDataFactory.create_user(first_name='Ivan', last_name='Petrov', patronymic_name='Sergeevich')
        self.assertEqual(user.get_full_name(), 'Petrov Ivan Sergeevich')
        self.assertEqual(user.get_short_name(), 'Petrov I.S.')
        nameless = TestDataFactory.create_user(username='nameless')
        self.assertEqual(nameless.get_short_name(), 'nameless')

    def test_assign_role_replaces_previous(self):
        user = TestDataFactory.create_employee(roles.ROLE_EMPLOYEE_COURIER)
        roles.assign_role(user, roles.ROLE_EMPLOYEE_ACCOUNTER)
        self.assertEqual(roles.get_group_names(user), [roles.ROLE_EMPLOYEE_ACCOUNTER])
        self.assertFalse(roles.is_visitor(user))

    def test_document_number_format(self):
        number = generate_document_number('ORD', ClientOrder, 'order_number')
        prefix, day, serial = number.split('-')
        self.assertEqual(prefix, 'ORD')
        self.assertEqual(len(day), 8)
        self.assertTrue(1000 <= int(serial) <= 9999)


class AuthChainTests(TestCase):

    def setUp(self):
        self.employee = TestDataFactory.create_employee(roles.ROLE_EMPLOYEE_COURIER, username='courier1')
        self.visitor = TestDataFactory.create_visitor(username='guest@test.com')
        self.client = AuthenticatedAPIClient()

    def test_employee_login(self):
        response = self.client.post('/api/v1/employee/auth/login/',
                                    {'username': 'courier1', 'password': 'testpass123'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertIn('access', response.data)
        self.assertEqual(response.data['role'], roles.ROLE_EMPLOYEE_COURIER)
        self.assertFalse(response.data['need_change_pass'])

    def test_visitor_cannot_login_as_employee(self):
        response = self.client.post('/api/v1/employee/auth/login/',
                                    {'username': 'guest@test.com', 'password': 'testpass123'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)
        response = self.client.post('/api/v1/visitor/auth/login/',
                                    {'username': 'courier1', 'password': 'testpass123'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_locked_account_cannot_login(self):
        self.employee.is_active = False
        self.employee.save()
        response = self.client.post('/api/v1/employee/auth/login/',
                                    {'username': 'courier1', 'password': 'testpass123'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_token_of_other_chain_is_refused(self):
        self.client.authenticate_user(self.employee, chain=CHAIN_VISITOR)
        response = self.client.get('/api/v1/employee/me/')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

        self.client.authenticate_user(self.visitor)
        response = self.client.get('/api/v1/employee/me/')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_refresh_only_on_issuing_chain(self):
        refresh = ChainTokenObtainPairSerializer.build_token(self.employee, CHAIN_EMPLOYEE)
        response = self.client.post('/api/v1/employee/auth/refresh/', {'refresh': str(refresh)}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        response = self.client.post('/api/v1/visitor/auth/refresh/', {'refresh': str(refresh)}, format='json')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_me(self):
        self.client.authenticate_user(self.employee)
        response = self.client.get('/api/v1/employee/me/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['role_description'], 'Courier')

    def test_change_password_clears_flag(self):
        self.employee.need_change_pass = True
        self.employee.save()
        self.client.authenticate_user(self.employee)
        response = self.client.post('/api/v1/employee/change-password/', {
            'old_password': 'testpass123', 'new_password': 'Brand-New-42', 'new_password_confirm': 'Brand-New-42',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.employee.refresh_from_db()
        self.assertFalse(self.employee.need_change_pass)
        self.assertTrue(self.employee.check_password('Brand-New-42'))

    def test_change_password_wrong_old(self):
        self.client.authenticate_user(self.employee)
        response = self.client.post('/api/v1/employee/change-password/', {
            'old_password': 'wrong', 'new_password': 'Brand-New-42', 'new_password_confirm': 'Brand-New-42',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)


class EmployeeAdministrationTests(TestCase):

    def setUp(self):
        self.admin = TestDataFactory.create_employee(roles.ROLE_EMPLOYEE_ADMIN)
        self.courier = TestDataFactory.create_employee(roles.ROLE_EMPLOYEE_COURIER)
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.admin)

    def test_create_employee(self):
        response = self.client.post('/api/v1/employee/admin/employees/', {
            'username': 'keeper', 'first_name': 'Oleg', 'last_name': 'Sidorov',
            'role': roles.ROLE_EMPLOYEE_WAREHOUSE_MANAGER, 'password': 'Start-Pass-17',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['role'], roles.ROLE_EMPLOYEE_WAREHOUSE_MANAGER)
        self.assertTrue(response.data['need_change_pass'])
        self.assertTrue(AuditLog.objects.filter(model_name='User', object_reference='keeper').exists())

    def test_create_employee_requires_unique_username_and_password(self):
        response = self.client.post('/api/v1/employee/admin/employees/', {
            'username': self.courier.username, 'role': roles.ROLE_EMPLOYEE_COURIER, 'password': 'Start-Pass-17',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        response = self.client.post('/api/v1/employee/admin/employees/', {
            'username': 'nopass', 'role': roles.ROLE_EMPLOYEE_COURIER,
        }, format='json')
        self.assertIn('password', response.data)

    def test_list_excludes_self_and_visitors(self):
        TestDataFactory.create_visitor()
        response = self.client.get('/api/v1/employee/admin/employees/')
        self.assertEqual([e['id'] for e in response.data], [self.courier.id])

    def test_change_role(self):
        response = self.client.patch(f'/api/v1/employee/admin/employees/{self.courier.id}/',
                                     {'role': roles.ROLE_EMPLOYEE_ACCOUNTER}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['role'], roles.ROLE_EMPLOYEE_ACCOUNTER)

    def test_reset_password(self):
        response = self.client.post(f'/api/v1/employee/admin/employees/{self.courier.id}/reset-password/',
                                    {'password': 'Temp-Pass-2024'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.courier.refresh_from_db()
        self.assertTrue(self.courier.need_change_pass)
        self.assertTrue(self.courier.check_password('Temp-Pass-2024'))

    def test_lock_and_unlock(self):
        response = self.client.post(f'/api/v1/employee/admin/employees/{self.courier.id}/lock/')
        self.assertFalse(response.data['is_active'])
        response = self.client.post(f'/api/v1/employee/admin/employees/{self.courier.id}/unlock/')
        self.assertTrue(response.data['is_active'])
        actions = set(AuditLog.objects.values_list('action', flat=True))
        self.assertEqual(actions, {'account_lock', 'account_unlock'})

    def test_cannot_lock_self(self):
        response = self.client.post(f'/api/v1/employee/admin/employees/{self.admin.id}/lock/')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_check_username(self):
        response = self.client.get(f'/api/v1/employee/admin/employees/check-username/?username={self.courier.username}')
        self.assertTrue(response.data['exists'])

    def test_audit_log_filter(self):
        self.client.post(f'/api/v1/employee/admin/employees/{self.courier.id}/lock/')
        response = self.client.get('/api/v1/employee/admin/audit-logs/?action=account_lock')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['count'], 1)
        self.assertEqual(response.data['results'][0]['object_reference'], self.courier.username)

    def test_audit_log_rejects_malformed_dates(self):
        for query in ('date_from=abc', 'date_to=2024-02-30'):
            response = self.client.get(f'/api/v1/employee/admin/audit-logs/?{query}')
            self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        response = self.client.get('/api/v1/employee/admin/audit-logs/?date_from=2000-01-01')
        self.assertEqual(response.status_code, status.HTTP_200_OK)

    def test_non_admin_denied(self):
        self.client.authenticate_user(self.courier)
        response = self.client.get('/api/v1/employee/admin/employees/')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)


class CreateRolesCommandTests(TestCase):

    def test_creates_groups_admin_and_attributes(self):
        category = TestDataFactory.create_category()
        out = StringIO()
        call_command('create_roles', stdout=out)
        self.assertEqual(set(Group.objects.values_list('name', flat=True)), set(roles.ROLE_DESCRIPTIONS))
        admin = User.objects.get(username='admin')
        self.assertTrue(admin.need_change_pass)
        self.assertTrue(admin.check_password('admin'))
        self.assertEqual(roles.get_employee_role(admin), roles.ROLE_EMPLOYEE_ADMIN)
        self.assertEqual(category.attributes.count(), 3)

        call_command('create_roles', '--admin-username', 'second', stdout=out)
        self.assertEqual(Group.objects.count(), len(roles.ROLE_DESCRIPTIONS))
        self.assertFalse(User.objects.filter(username='second').exists())
        self.assertEqual(ProductAttribute.objects.count(), 3)
