"""
Test suite for the visitor chain
Tests: registration with e-mailed code, password reset, profile edits, administration
"""
from datetime import date
from unittest import mock
from django.contrib.auth import get_user_model
from django.core import mail
from django.test import TestCase
from rest_framework import status
from depot.core import roles
from depot.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from depot.visitors.models import Visitor
from depot.visitors.serializers import latest_allowed_birthday

User = get_user_model()


def last_code():
    """The one-time code from the most recent e-mail"""
    return mail.outbox[-1].body.split()[-1]


class BirthdayLimitTests(TestCase):

    def test_fourteen_years_back(self):
        self.assertEqual(latest_allowed_birthday(date(2024, 5, 17)), date(2010, 5, 17))

    def test_leap_day(self):
        self.assertEqual(latest_allowed_birthday(date(2024, 2, 29)), date(2010, 2, 28))


class RegistrationTests(TestCase):

    def setUp(self):
        self.client = AuthenticatedAPIClient()
        self.payload = {
            'last_name': 'Smirnova',
            'first_name': 'Anna',
            'sex': Visitor.SEX_FEMALE,
            'date_birthday': '1995-03-08',
            'username': 'anna@example.com',
            'password': 'Visitor-Pass-9',
            'password_confirm': 'Visitor-Pass-9',
        }

    def test_register_and_activate(self):
        response = self.client.post('/api/v1/visitor/registration/', self.payload, format='json')
        self.assertEqual(response.status_code, status.HTTP_202_ACCEPTED)
        self.assertEqual(len(mail.outbox), 1)
        self.assertEqual(mail.outbox[0].to, ['anna@example.com'])
        code = last_code()
        self.assertEqual(len(code), 6)
        self.assertFalse(User.objects.filter(username='anna@example.com').exists())

        response = self.client.post('/api/v1/visitor/verify-code/activate/', {'code': code}, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        user = User.objects.get(username='anna@example.com')
        self.assertTrue(roles.is_visitor(user))
        self.assertTrue(user.check_password('Visitor-Pass-9'))

        response = self.client.post('/api/v1/visitor/auth/login/',
                                    {'username': 'anna@example.com', 'password': 'Visitor-Pass-9'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['role'], roles.ROLE_VISITOR)

    def test_wrong_code(self):
        self.client.post('/api/v1/visitor/registration/', self.payload, format='json')
        wrong = '000000' if last_code() != '000000' else '111111'
        response = self.client.post('/api/v1/visitor/verify-code/activate/', {'code': wrong}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertFalse(User.objects.filter(username='anna@example.com').exists())

    def test_resend_replaces_code(self):
        self.client.post('/api/v1/visitor/registration/', self.payload, format='json')
        response = self.client.post('/api/v1/visitor/verify-code/activate/resend/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(mail.outbox), 2)
        response = self.client.post('/api/v1/visitor/verify-code/activate/', {'code': last_code()}, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)

    def test_unknown_mode(self):
        response = self.client.post('/api/v1/visitor/verify-code/unlock/', {'code': '123456'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_validation(self):
        payload = dict(self.payload, password_confirm='Other-Pass-9')
        response = self.client.post('/api/v1/visitor/registration/', payload, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        payload = dict(self.payload, date_birthday=date.today().isoformat())
        response = self.client.post('/api/v1/visitor/registration/', payload, format='json')
        self.assertIn('date_birthday', response.data)
        TestDataFactory.create_visitor(username='anna@example.com')
        response = self.client.post('/api/v1/visitor/registration/', self.payload, format='json')
        self.assertIn('username', response.data)
        self.assertEqual(len(mail.outbox), 0)

    def test_mail_failure(self):
        with mock.patch('depot.visitors.mail.send_mail', side_effect=OSError('connection refused')):
            response = self.client.post('/api/v1/visitor/registration/', self.payload, format='json')
        self.assertEqual(response.status_code, status.HTTP_503_SERVICE_UNAVAILABLE)

    def test_check_username(self):
        TestDataFactory.create_visitor(username='taken@example.com')
        response = self.client.get('/api/v1/visitor/check-username/?username=taken@example.com')
        self.assertTrue(response.data['exists'])


class PasswordResetTests(TestCase):

    def setUp(self):
        self.visitor = TestDataFactory.create_visitor(username='reset@example.com')
        self.client = AuthenticatedAPIClient()

    def test_reset_flow(self):
        response = self.client.post('/api/v1/visitor/reset-password/', {'username': 'reset@example.com'},
                                    format='json')
        self.assertEqual(response.status_code, status.HTTP_202_ACCEPTED)
        response = self.client.post('/api/v1/visitor/verify-code/reset/', {'code': last_code()}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        new_password = last_code()
        self.visitor.refresh_from_db()
        self.assertTrue(self.visitor.need_change_pass)
        self.assertTrue(self.visitor.check_password(new_password))

    def test_unknown_visitor(self):
        response = self.client.post('/api/v1/visitor/reset-password/', {'username': 'nobody@example.com'},
                                    format='json')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)


class ProfileTests(TestCase):

    def setUp(self):
        self.user = TestDataFactory.create_visitor(username='me@example.com')
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)
        self.payload = {
            'last_name': 'Smirnova', 'first_name': 'Anna', 'sex': Visitor.SEX_FEMALE,
            'date_birthday': '1990-05-17', 'username': 'me@example.com', 'mobile_number': '+70000000000',
        }

    def test_get_profile(self):
        response = self.client.get('/api/v1/visitor/profile/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['username'], 'me@example.com')

    def test_edit_without_new_email_applies_at_once(self):
        response = self.client.put('/api/v1/visitor/profile/', dict(self.payload, first_name='Maria'), format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['first_name'], 'Maria')
        self.assertEqual(response.data['mobile_number'], '+70000000000')

    def test_new_email_needs_confirmation(self):
        response = self.client.put('/api/v1/visitor/profile/', dict(self.payload, username='new@example.com'),
                                   format='json')
        self.assertEqual(response.status_code, status.HTTP_202_ACCEPTED)
        self.assertEqual(mail.outbox[-1].to, ['new@example.com'])
        self.user.refresh_from_db()
        self.assertEqual(self.user.username, 'me@example.com')

        response = self.client.post('/api/v1/visitor/verify-code/edit/', {'code': last_code()}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.user.refresh_from_db()
        self.assertEqual(self.user.username, 'new@example.com')
        self.assertEqual(self.user.email, 'new@example.com')

    def test_employee_cannot_use_visitor_profile(self):
        employee = TestDataFactory.create_employee(roles.ROLE_EMPLOYEE_COURIER)
        self.client.authenticate_user(employee)
        response = self.client.get('/api/v1/visitor/profile/')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)


class VisitorAdministrationTests(TestCase):

    def setUp(self):
        self.admin = TestDataFactory.create_employee(roles.ROLE_EMPLOYEE_ADMIN)
        self.visitor = TestDataFactory.create_visitor()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.admin)

    def test_list_lock_unlock_delete(self):
        response = self.client.get('/api/v1/employee/admin/visitors/')
        self.assertEqual([v['id'] for v in response.data], [self.visitor.id])

        response = self.client.post(f'/api/v1/employee/admin/visitors/{self.visitor.id}/lock/')
        self.assertFalse(response.data['is_active'])
        response = self.client.post(f'/api/v1/employee/admin/visitors/{self.visitor.id}/unlock/')
        self.assertTrue(response.data['is_active'])

        response = self.client.delete(f'/api/v1/employee/admin/visitors/{self.visitor.id}/')
        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)
        self.assertFalse(User.objects.filter(pk=self.visitor.id).exists())

    def test_locked_visitor_cannot_login(self):
        self.client.post(f'/api/v1/employee/admin/visitors/{self.visitor.id}/lock/')
        response = self.client.post('/api/v1/visitor/auth/login/',
                                    {'username': self.visitor.username, 'password': 'testpass123'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)
