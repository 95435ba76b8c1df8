"""
Test suite for client orders
Tests: order creation and editing, lifecycle transitions, all-or-nothing reservation, cancellation, deficit report
"""
from datetime import date, timedelta
from decimal import Decimal
from django.test import TestCase
from rest_framework import status
from depot.core import roles
from depot.core.exceptions import BusinessRuleError
from depot.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from depot.notifications.models import Notification
from depot.orders import services
from depot.orders.models import ClientOrder, ClientOrderStatus


class ClientOrderModelTests(TestCase):

    def test_total_amount_sums_lines(self):
        product_a = TestDataFactory.create_product()
        product_b = TestDataFactory.create_product()
        order = TestDataFactory.create_order(items=[
            (product_a, 2, Decimal('10.50')),
            (product_b, 3, Decimal('4.00')),
        ])
        self.assertEqual(order.total_amount, Decimal('33.00'))
        self.assertEqual(order.ordered_products.get(product=product_a).total_price, Decimal('21.00'))


class OrderLifecycleTests(TestCase):

    def setUp(self):
        self.manager = TestDataFactory.create_employee(roles.ROLE_EMPLOYEE_MANAGER)
        self.warehouse_manager = TestDataFactory.create_employee(roles.ROLE_EMPLOYEE_WAREHOUSE_MANAGER)
        self.worker = TestDataFactory.create_employee(roles.ROLE_EMPLOYEE_WAREHOUSE_WORKER)
        self.client_org = TestDataFactory.create_client()
        self.product_a = TestDataFactory.create_product(stock_quantity=10)
        self.product_b = TestDataFactory.create_product(stock_quantity=3)

    def _order(self, quantity_b=2):
        return services.create_order(
            client=self.client_org,
            delivery_date=date.today() + timedelta(days=2),
            comment='',
            items=[
                {'product': self.product_a.id, 'quantity': 4, 'price': Decimal('100.00')},
                {'product': self.product_b.id, 'quantity': quantity_b, 'price': Decimal('50.00')},
            ],
            responsible=self.manager,
        )

    def test_create_order_assigns_number_and_total(self):
        order = self._order()
        self.assertTrue(order.order_number.startswith('ORD-'))
        self.assertEqual(order.status, ClientOrderStatus.NEW)
        self.assertEqual(order.total_amount, Decimal('500.00'))

    def test_create_order_rejects_bad_lines(self):
        with self.assertRaises(BusinessRuleError):
            services.create_order(self.client_org, None, '', [], self.manager)
        with self.assertRaises(BusinessRuleError):
            services.create_order(self.client_org, None, '', [
                {'product': self.product_a.id, 'quantity': 0, 'price': Decimal('1.00')}
            ], self.manager)
        with self.assertRaises(BusinessRuleError):
            services.create_order(self.client_org, None, '', [
                {'product': self.product_a.id, 'quantity': 1, 'price': Decimal('0')}
            ], self.manager)

    def test_update_merges_lines(self):
        order = self._order()
        product_c = TestDataFactory.create_product()
        order = services.update_order(order, None, 'changed', [
            {'product': self.product_a.id, 'quantity': 1, 'price': Decimal('100.00')},
            {'product': product_c.id, 'quantity': 2, 'price': Decimal('5.00')},
        ])
        products = set(order.ordered_products.values_list('product_id', flat=True))
        self.assertEqual(products, {self.product_a.id, product_c.id})
        self.assertEqual(order.total_amount, Decimal('110.00'))

    def test_full_lifecycle(self):
        order = self._order()
        order = services.confirm_order(order, user=self.manager)
        self.assertEqual(order.status, ClientOrderStatus.CONFIRMED)
        self.assertTrue(Notification.objects.filter(recipient=self.warehouse_manager).exists())

        order = services.reserve_products(order, user=self.warehouse_manager)
        self.product_a.refresh_from_db()
        self.assertEqual(order.status, ClientOrderStatus.RESERVED)
        self.assertEqual(self.product_a.reserved_quantity, 4)
        self.assertEqual(self.product_a.available_quantity, 6)

        order = services.start_assembly(order, user=self.worker)
        self.assertEqual(order.status, ClientOrderStatus.IN_PROGRESS)
        order = services.complete_assembly(order, user=self.worker)
        self.assertEqual(order.status, ClientOrderStatus.READY)

    def test_edit_after_confirmation_fails(self):
        order = services.confirm_order(self._order())
        with self.assertRaises(BusinessRuleError):
            services.update_order(order, None, '', [
                {'product': self.product_a.id, 'quantity': 1, 'price': Decimal('1.00')}
            ])

    def test_reservation_is_all_or_nothing(self):
        order = services.confirm_order(self._order(quantity_b=5))
        with self.assertRaises(BusinessRuleError):
            services.reserve_products(order)
        self.product_a.refresh_from_db()
        self.product_b.refresh_from_db()
        self.assertEqual(self.product_a.reserved_quantity, 0)
        self.assertEqual(self.product_b.reserved_quantity, 0)
        self.assertEqual(ClientOrder.objects.get(pk=order.pk).status, ClientOrderStatus.CONFIRMED)

    def test_cancel_reserved_releases_stock(self):
        order = services.reserve_products(services.confirm_order(self._order()))
        order = services.cancel_order(order, user=self.manager)
        self.product_a.refresh_from_db()
        self.assertEqual(order.status, ClientOrderStatus.CANCELLED)
        self.assertEqual(self.product_a.reserved_quantity, 0)

    def test_cannot_cancel_in_progress(self):
        order = services.start_assembly(services.reserve_products(services.confirm_order(self._order())))
        with self.assertRaises(BusinessRuleError):
            services.cancel_order(order)

    def test_out_of_order_transition_fails(self):
        order = self._order()
        with self.assertRaises(BusinessRuleError):
            services.reserve_products(order)
        with self.assertRaises(BusinessRuleError):
            services.complete_assembly(order)

    def test_product_deficit(self):
        self._order(quantity_b=5)
        deficit = services.product_deficit()
        self.assertEqual(len(deficit), 1)
        self.assertEqual(deficit[0]['product_id'], self.product_b.id)
        self.assertEqual(deficit[0]['deficit'], 2)


class OrderAPITests(TestCase):

    def setUp(self):
        self.manager = TestDataFactory.create_employee(roles.ROLE_EMPLOYEE_MANAGER)
        self.warehouse_manager = TestDataFactory.create_employee(roles.ROLE_EMPLOYEE_WAREHOUSE_MANAGER)
        self.courier = TestDataFactory.create_employee(roles.ROLE_EMPLOYEE_COURIER)
        self.client_org = TestDataFactory.create_client()
        self.product = TestDataFactory.create_product(stock_quantity=10)
        self.client = AuthenticatedAPIClient()

    def test_manager_creates_and_confirms(self):
        self.client.authenticate_user(self.manager)
        response = self.client.post('/api/v1/employee/manager/orders/', {
            'client': self.client_org.id,
            'items': [{'product': self.product.id, 'quantity': 2, 'price': '15.00'}],
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['total_amount'], '30.00')
        pk = response.data['id']

        response = self.client.post(f'/api/v1/employee/manager/orders/{pk}/confirm/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['status'], ClientOrderStatus.CONFIRMED)

    def test_any_employee_can_list(self):
        TestDataFactory.create_order(client=self.client_org)
        self.client.authenticate_user(self.courier)
        response = self.client.get('/api/v1/employee/orders/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['count'], 1)

    def test_status_filter_and_bad_page(self):
        TestDataFactory.create_order(client=self.client_org)
        TestDataFactory.create_order(client=self.client_org, status=ClientOrderStatus.CONFIRMED)
        self.client.authenticate_user(self.manager)
        response = self.client.get('/api/v1/employee/orders/?status=CONFIRMED')
        self.assertEqual(response.data['count'], 1)
        response = self.client.get('/api/v1/employee/orders/?status=UNKNOWN')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        response = self.client.get('/api/v1/employee/orders/?page=abc')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_reservation_list_shows_confirmed_only(self):
        TestDataFactory.create_order(client=self.client_org)
        confirmed = TestDataFactory.create_order(client=self.client_org, status=ClientOrderStatus.CONFIRMED)
        self.client.authenticate_user(self.warehouse_manager)
        response = self.client.get('/api/v1/employee/warehouse-manager/orders/')
        self.assertEqual([row['id'] for row in response.data['results']], [confirmed.id])

    def test_courier_cannot_create(self):
        self.client.authenticate_user(self.courier)
        response = self.client.post('/api/v1/employee/manager/orders/', {}, format='json')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_unauthenticated(self):
        response = self.client.get('/api/v1/employee/orders/')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)
