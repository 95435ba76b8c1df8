"""
Test suite for delivery tasks
Tests: task assignment, loading and shipping, documents, courier run, cancellation, role gating
"""
from decimal import Decimal
from django.test import TestCase
from rest_framework import status
from depot.core import roles
from depot.core.exceptions import BusinessRuleError
from depot.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from depot.delivery import services
from depot.delivery.models import Vehicle, DeliveryTask, DeliveryTaskStatus, TTN, AcceptanceAct
from depot.locations.models import ZoneProduct
from depot.notifications.models import Notification
from depot.orders.models import ClientOrderStatus


class DeliveryFixtureMixin:

    def create_fixtures(self):
        self.warehouse_manager = TestDataFactory.create_employee(roles.ROLE_EMPLOYEE_WAREHOUSE_MANAGER)
        self.worker = TestDataFactory.create_employee(roles.ROLE_EMPLOYEE_WAREHOUSE_WORKER)
        self.accountant = TestDataFactory.create_employee(roles.ROLE_EMPLOYEE_ACCOUNTER)
        self.manager = TestDataFactory.create_employee(roles.ROLE_EMPLOYEE_MANAGER)
        self.courier = TestDataFactory.create_employee(roles.ROLE_EMPLOYEE_COURIER)
        self.vehicle = TestDataFactory.create_vehicle(current_mileage=1000)
        self.product = TestDataFactory.create_product(stock_quantity=10, reserved_quantity=4)
        self.zone = TestDataFactory.create_zone()
        ZoneProduct.objects.create(zone=self.zone, product=self.product, quantity=10)
        self.order = TestDataFactory.create_order(
            items=[(self.product, 4, Decimal('25.00'))], status=ClientOrderStatus.READY
        )


class DeliveryServiceTests(DeliveryFixtureMixin, TestCase):

    def setUp(self):
        self.create_fixtures()

    def _task(self, route_points=None):
        return services.create_task(self.order, self.courier, self.vehicle, route_points=route_points,
                                    user=self.warehouse_manager)

    def test_create_task_reserves_vehicle_and_notifies(self):
        task = self._task(route_points=[{'address': 'Warehouse'}, {'address': 'Client'}])
        self.vehicle.refresh_from_db()
        self.assertEqual(task.status, DeliveryTaskStatus.PENDING)
        self.assertEqual(self.vehicle.status, Vehicle.Status.IN_USE)
        self.assertEqual(list(task.route_points.values_list('order_index', flat=True)), [1, 2])
        self.assertTrue(Notification.objects.filter(recipient=self.courier).exists())
        self.assertTrue(Notification.objects.filter(recipient=self.accountant).exists())
        self.assertTrue(Notification.objects.filter(recipient=self.worker).exists())

    def test_order_must_be_ready(self):
        self.order.status = ClientOrderStatus.IN_PROGRESS
        self.order.save()
        with self.assertRaises(BusinessRuleError):
            self._task()

    def test_driver_must_be_courier(self):
        with self.assertRaises(BusinessRuleError):
            services.create_task(self.order, self.worker, self.vehicle)

    def test_vehicle_must_be_available(self):
        self.vehicle.status = Vehicle.Status.MAINTENANCE
        self.vehicle.save()
        with self.assertRaises(BusinessRuleError):
            self._task()

    def test_second_task_for_order_refused(self):
        self._task()
        other_vehicle = TestDataFactory.create_vehicle()
        with self.assertRaises(BusinessRuleError):
            services.create_task(self.order, self.courier, other_vehicle)

    def test_cancelled_task_is_replaced(self):
        task = services.cancel_task(self._task())
        self.vehicle.refresh_from_db()
        self.assertEqual(task.status, DeliveryTaskStatus.CANCELLED)
        self.assertEqual(self.vehicle.status, Vehicle.Status.AVAILABLE)
        new_task = self._task()
        self.assertNotEqual(new_task.pk, task.pk)
        self.assertEqual(DeliveryTask.objects.filter(client_order=self.order).count(), 1)

    def test_complete_loading_ships_order(self):
        task = services.start_loading(self._task(), user=self.worker)
        self.assertEqual(task.status, DeliveryTaskStatus.LOADING)
        task = services.complete_loading(task, user=self.worker)
        self.product.refresh_from_db()
        self.order.refresh_from_db()
        self.assertEqual(task.status, DeliveryTaskStatus.LOADED)
        self.assertEqual(self.order.status, ClientOrderStatus.SHIPPED)
        self.assertEqual(self.product.stock_quantity, 6)
        self.assertEqual(self.product.reserved_quantity, 0)
        self.assertEqual(ZoneProduct.objects.get(zone=self.zone, product=self.product).quantity, 6)

    def test_loaded_task_cannot_be_cancelled(self):
        task = services.complete_loading(services.start_loading(self._task()))
        with self.assertRaises(BusinessRuleError):
            services.cancel_task(task)

    def test_ttn_is_issued_once(self):
        task = self._task()
        ttn = services.create_ttn(task, 'Boxes', 120.5, 2.0)
        task.refresh_from_db()
        self.assertTrue(ttn.ttn_number.startswith('TTN-'))
        self.assertEqual(task.ttn_number, ttn.ttn_number)
        with self.assertRaises(BusinessRuleError):
            services.create_ttn(task)

    def test_documents_for_order(self):
        self._task()
        ttn, act = services.create_documents_for_order(self.order)
        again_ttn, again_act = services.create_documents_for_order(self.order)
        self.assertEqual(ttn.pk, again_ttn.pk)
        self.assertEqual(act.pk, again_act.pk)
        self.assertTrue(act.act_number.startswith('AA-'))

    def test_courier_run(self):
        task = services.complete_loading(services.start_loading(self._task(
            route_points=[{'address': 'Client office'}]
        )))
        with self.assertRaises(BusinessRuleError):
            services.update_location(task, 55.75, 37.61)
        task = services.start_delivery(task, 1000, user=self.courier)
        self.assertEqual(task.status, DeliveryTaskStatus.IN_TRANSIT)
        services.update_location(task, 55.75, 37.61)
        point = task.route_points.first()
        point = services.mark_route_point_reached(task, point.pk)
        self.assertTrue(point.is_reached)

        with self.assertRaises(BusinessRuleError):
            services.complete_delivery(task, 900)

        task = services.complete_delivery(task, 1042, representative='Sidorov', comment='All good',
                                          user=self.courier)
        self.order.refresh_from_db()
        self.vehicle.refresh_from_db()
        act = AcceptanceAct.objects.get(client_order=self.order)
        self.assertEqual(task.status, DeliveryTaskStatus.DELIVERED)
        self.assertEqual(task.total_mileage, 42)
        self.assertEqual(self.order.status, ClientOrderStatus.DELIVERED)
        self.assertIsNotNone(self.order.actual_delivery_date)
        self.assertEqual(self.vehicle.status, Vehicle.Status.AVAILABLE)
        self.assertEqual(self.vehicle.current_mileage, 1042)
        self.assertTrue(act.signed)
        self.assertEqual(act.client_representative, 'Sidorov')


class DeliveryAPITests(DeliveryFixtureMixin, TestCase):

    def setUp(self):
        self.create_fixtures()
        self.client = AuthenticatedAPIClient()

    def test_manager_registers_vehicle(self):
        self.client.authenticate_user(self.manager)
        response = self.client.post('/api/v1/employee/manager/vehicles/', {
            'registration_number': 'x123yz77', 'brand': 'Ford', 'model': 'Transit',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['registration_number'], 'X123YZ77')

    def test_registration_number_is_unique_ignoring_case(self):
        self.client.authenticate_user(self.manager)
        response = self.client.post('/api/v1/employee/manager/vehicles/', {
            'registration_number': 'X123YZ77', 'brand': 'Ford', 'model': 'Transit',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        response = self.client.post('/api/v1/employee/manager/vehicles/', {
            'registration_number': 'x123yz77', 'brand': 'GAZ', 'model': 'Gazelle',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('registration_number', response.data)
        self.assertEqual(Vehicle.objects.filter(registration_number='X123YZ77').count(), 1)

    def test_warehouse_manager_assigns_task(self):
        self.client.authenticate_user(self.warehouse_manager)
        response = self.client.post('/api/v1/employee/warehouse-manager/delivery-tasks/', {
            'client_order': self.order.id,
            'driver': self.courier.id,
            'vehicle': self.vehicle.id,
            'route_points': [{'address': 'Client office', 'point_type': 'DELIVERY_ADDRESS'}],
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['status'], DeliveryTaskStatus.PENDING)
        self.assertEqual(len(response.data['route_points']), 1)

    def test_available_resources(self):
        self.client.authenticate_user(self.warehouse_manager)
        response = self.client.get('/api/v1/employee/warehouse-manager/delivery-tasks/resources/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([d['id'] for d in response.data['drivers']], [self.courier.id])
        self.assertEqual([v['id'] for v in response.data['vehicles']], [self.vehicle.id])

    def test_courier_sees_only_own_tasks(self):
        task = services.create_task(self.order, self.courier, self.vehicle)
        other_courier = TestDataFactory.create_employee(roles.ROLE_EMPLOYEE_COURIER)
        self.client.authenticate_user(other_courier)
        response = self.client.get('/api/v1/employee/courier/delivery-tasks/')
        self.assertEqual(response.data, [])
        response = self.client.get(f'/api/v1/employee/courier/delivery-tasks/{task.pk}/')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_courier_flow_via_api(self):
        task = services.complete_loading(services.start_loading(
            services.create_task(self.order, self.courier, self.vehicle)
        ))
        self.client.authenticate_user(self.courier)
        base = f'/api/v1/employee/courier/delivery-tasks/{task.pk}'
        response = self.client.post(f'{base}/start/', {'start_mileage': 'abc'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        response = self.client.post(f'{base}/start/', {'start_mileage': 1000}, format='json')
        self.assertEqual(response.data['status'], DeliveryTaskStatus.IN_TRANSIT)
        response = self.client.post(f'{base}/complete/', {'end_mileage': 1010}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['status'], DeliveryTaskStatus.DELIVERED)

    def test_accountant_issues_ttn(self):
        task = services.create_task(self.order, self.courier, self.vehicle)
        self.client.authenticate_user(self.accountant)
        response = self.client.post(f'/api/v1/employee/accounter/delivery-tasks/{task.pk}/ttn/',
                                    {'cargo_description': 'Boxes', 'total_weight': 50}, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(TTN.objects.get(delivery_task=task).cargo_description, 'Boxes')

    def test_worker_cannot_assign(self):
        self.client.authenticate_user(self.worker)
        response = self.client.get('/api/v1/employee/warehouse-manager/delivery-tasks/')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
