"""
Test suite for write-off acts
Tests: act creation limits, director approval and rejection, stock and zone effects, role gating
"""
from django.test import TestCase
from rest_framework import status
from depot.core import roles
from depot.core.exceptions import BusinessRuleError
from depot.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from depot.inventory import services
from depot.inventory.models import WriteOffAct, WriteOffActStatus, WriteOffReason
from depot.locations.models import ZoneProduct
from depot.notifications.models import Notification


class WriteOffServiceTests(TestCase):

    def setUp(self):
        self.warehouse_manager = TestDataFactory.create_employee(roles.ROLE_EMPLOYEE_WAREHOUSE_MANAGER)
        self.director = TestDataFactory.create_employee(roles.ROLE_EMPLOYEE_MANAGER)
        self.accountant = TestDataFactory.create_employee(roles.ROLE_EMPLOYEE_ACCOUNTER)
        self.warehouse = TestDataFactory.create_warehouse()
        self.zone = TestDataFactory.create_zone(warehouse=self.warehouse)
        self.product = TestDataFactory.create_product(stock_quantity=20, dimensions=(10, 10, 10))
        ZoneProduct.objects.create(zone=self.zone, product=self.product, quantity=20)

    def _act(self, quantity=5):
        return services.create_act(self.product, quantity, WriteOffReason.DEFECT, 'Broken',
                                   self.warehouse_manager, self.warehouse)

    def test_create_act_numbers_and_notifies_director(self):
        act = self._act()
        self.assertTrue(act.act_number.startswith('WO-'))
        self.assertEqual(act.status, WriteOffActStatus.PENDING_DIRECTOR)
        self.assertTrue(Notification.objects.filter(recipient=self.director).exists())

    def test_create_act_more_than_placed_fails(self):
        with self.assertRaises(BusinessRuleError):
            self._act(quantity=21)

    def test_create_act_for_unplaced_product_fails(self):
        other_warehouse = TestDataFactory.create_warehouse()
        with self.assertRaises(BusinessRuleError):
            services.create_act(self.product, 1, WriteOffReason.LOSS, '', self.warehouse_manager, other_warehouse)

    def test_non_positive_quantity_fails(self):
        with self.assertRaises(BusinessRuleError):
            self._act(quantity=0)

    def test_approve_decrements_stock_and_zone(self):
        act = services.approve_act(self._act(quantity=5), user=self.director)
        self.product.refresh_from_db()
        self.assertEqual(act.status, WriteOffActStatus.APPROVED)
        self.assertEqual(self.product.stock_quantity, 15)
        self.assertEqual(ZoneProduct.objects.get(zone=self.zone, product=self.product).quantity, 15)
        self.assertTrue(Notification.objects.filter(recipient=self.accountant).exists())
        self.assertTrue(Notification.objects.filter(recipient=self.warehouse_manager).exists())

    def test_approve_whole_zone_quantity_removes_row(self):
        services.approve_act(self._act(quantity=20), user=self.director)
        self.assertFalse(ZoneProduct.objects.filter(zone=self.zone, product=self.product).exists())

    def test_approve_twice_fails(self):
        act = services.approve_act(self._act(), user=self.director)
        with self.assertRaises(BusinessRuleError):
            services.approve_act(act, user=self.director)

    def test_approve_without_stock_fails(self):
        act = self._act(quantity=5)
        self.product.stock_quantity = 2
        self.product.save()
        with self.assertRaises(BusinessRuleError):
            services.approve_act(act, user=self.director)
        act.refresh_from_db()
        self.assertEqual(act.status, WriteOffActStatus.PENDING_DIRECTOR)

    def test_reject_keeps_stock(self):
        act = services.reject_act(self._act(), 'Not confirmed', user=self.director)
        self.product.refresh_from_db()
        self.assertEqual(act.status, WriteOffActStatus.REJECTED)
        self.assertEqual(act.director_comment, 'Not confirmed')
        self.assertEqual(self.product.stock_quantity, 20)


class WriteOffAPITests(TestCase):

    def setUp(self):
        self.warehouse_manager = TestDataFactory.create_employee(roles.ROLE_EMPLOYEE_WAREHOUSE_MANAGER)
        self.director = TestDataFactory.create_employee(roles.ROLE_EMPLOYEE_MANAGER)
        self.accountant = TestDataFactory.create_employee(roles.ROLE_EMPLOYEE_ACCOUNTER)
        self.warehouse = TestDataFactory.create_warehouse()
        zone = TestDataFactory.create_zone(warehouse=self.warehouse)
        self.product = TestDataFactory.create_product(stock_quantity=10)
        ZoneProduct.objects.create(zone=zone, product=self.product, quantity=10)
        self.client = AuthenticatedAPIClient()

    def test_create_and_approve_flow(self):
        self.client.authenticate_user(self.warehouse_manager)
        response = self.client.post('/api/v1/employee/warehouse-manager/write-off-acts/', {
            'product': self.product.id,
            'warehouse': self.warehouse.id,
            'quantity': 3,
            'reason': WriteOffReason.EXPIRED,
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        pk = response.data['id']

        self.client.authenticate_user(self.director)
        response = self.client.post(f'/api/v1/employee/manager/write-off-acts/{pk}/approve/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['status'], WriteOffActStatus.APPROVED)

        self.client.authenticate_user(self.accountant)
        response = self.client.get('/api/v1/employee/accounter/write-off-acts/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([act['id'] for act in response.data], [pk])

    def test_director_reject_via_api(self):
        act = services.create_act(self.product, 2, WriteOffReason.DAMAGE, '', self.warehouse_manager,
                                  self.warehouse)
        self.client.authenticate_user(self.director)
        response = self.client.post(f'/api/v1/employee/manager/write-off-acts/{act.pk}/reject/',
                                    {'director_comment': 'Recount first'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(WriteOffAct.objects.get(pk=act.pk).status, WriteOffActStatus.REJECTED)

    def test_warehouse_manager_cannot_approve(self):
        act = services.create_act(self.product, 2, WriteOffReason.DAMAGE, '', self.warehouse_manager,
                                  self.warehouse)
        self.client.authenticate_user(self.warehouse_manager)
        response = self.client.post(f'/api/v1/employee/manager/write-off-acts/{act.pk}/approve/')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
