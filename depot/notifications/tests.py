"""
Test suite for employee notifications
"""
from django.test import TestCase
from rest_framework import status
from depot.core import roles
from depot.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from depot.notifications import services
from depot.notifications.models import Notification


class NotificationServiceTests(TestCase):

    def test_notify_by_role_skips_inactive(self):
        active = TestDataFactory.create_employee(roles.ROLE_EMPLOYEE_COURIER)
        TestDataFactory.create_employee(roles.ROLE_EMPLOYEE_COURIER, is_active=False)
        TestDataFactory.create_employee(roles.ROLE_EMPLOYEE_MANAGER)
        sent = services.notify_by_role(roles.ROLE_EMPLOYEE_COURIER, 'New delivery task')
        self.assertEqual(sent, 1)
        self.assertEqual(list(Notification.objects.values_list('recipient_id', flat=True)), [active.id])

    def test_notify_by_roles(self):
        TestDataFactory.create_employee(roles.ROLE_EMPLOYEE_COURIER)
        TestDataFactory.create_employee(roles.ROLE_EMPLOYEE_ACCOUNTER)
        sent = services.notify_by_roles([roles.ROLE_EMPLOYEE_COURIER, roles.ROLE_EMPLOYEE_ACCOUNTER], 'Hello')
        self.assertEqual(sent, 2)

    def test_hidden_notifications_are_not_counted(self):
        employee = TestDataFactory.create_employee(roles.ROLE_EMPLOYEE_COURIER)
        services.create_notification(employee, 'first')
        hidden = services.create_notification(employee, 'second')
        hidden.visible = False
        hidden.save()
        self.assertEqual(services.unread_count(employee), 1)
        self.assertEqual(services.mark_all_as_read(employee), 1)
        hidden.refresh_from_db()
        self.assertEqual(hidden.status, Notification.STATUS_NEW)


class NotificationAPITests(TestCase):

    def setUp(self):
        self.employee = TestDataFactory.create_employee(roles.ROLE_EMPLOYEE_WAREHOUSE_WORKER)
        self.other = TestDataFactory.create_employee(roles.ROLE_EMPLOYEE_WAREHOUSE_WORKER)
        self.first = services.create_notification(self.employee, 'Order ORD-1 is ready for assembly')
        self.second = services.create_notification(self.employee, 'Delivery task for ORD-2')
        services.create_notification(self.other, 'Not yours')
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.employee)

    def test_list_own_newest_first(self):
        response = self.client.get('/api/v1/employee/notifications/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([n['id'] for n in response.data['results']], [self.second.id, self.first.id])
        self.assertEqual(response.data['unread'], 2)

    def test_search_and_status_filter(self):
        response = self.client.get('/api/v1/employee/notifications/?search=assembly')
        self.assertEqual([n['id'] for n in response.data['results']], [self.first.id])
        response = self.client.get('/api/v1/employee/notifications/?status=ARCHIVED')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_mark_read_and_hide(self):
        response = self.client.post(f'/api/v1/employee/notifications/{self.first.id}/read/')
        self.assertEqual(response.data['status'], Notification.STATUS_READ)
        response = self.client.post(f'/api/v1/employee/notifications/{self.second.id}/hide/')
        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)
        response = self.client.get('/api/v1/employee/notifications/unread-count/')
        self.assertEqual(response.data['unread'], 0)

    def test_read_all(self):
        response = self.client.post('/api/v1/employee/notifications/read-all/')
        self.assertEqual(response.data['updated'], 2)

    def test_foreign_notification_not_found(self):
        foreign = Notification.objects.get(recipient=self.other)
        response = self.client.post(f'/api/v1/employee/notifications/{foreign.id}/read/')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
