"""
Test suite for the purchasing module
Tests: request workflow transitions, approvals, deliveries against approved requests, stock effects
"""
from datetime import date
from decimal import Decimal
from django.test import TestCase
from rest_framework import status
from depot.core import roles
from depot.core.exceptions import BusinessRuleError
from depot.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from depot.notifications.models import Notification
from depot.purchasing import services, workflow
from depot.purchasing.models import RequestForDelivery, RequestStatus, Comment, Supply


class WorkflowTests(TestCase):
    """Role/state table of the request validator"""

    def test_allowed_transitions(self):
        self.assertTrue(workflow.can_transition(
            RequestStatus.DRAFT, RequestStatus.PENDING_DIRECTOR, roles.ROLE_EMPLOYEE_WAREHOUSE_MANAGER))
        self.assertTrue(workflow.can_transition(
            RequestStatus.PENDING_DIRECTOR, RequestStatus.PENDING_ACCOUNTANT, roles.ROLE_EMPLOYEE_MANAGER))
        self.assertTrue(workflow.can_transition(
            RequestStatus.PENDING_ACCOUNTANT, RequestStatus.APPROVED, roles.ROLE_EMPLOYEE_ACCOUNTER))
        self.assertTrue(workflow.can_transition(
            RequestStatus.APPROVED, RequestStatus.PARTIALLY_RECEIVED, roles.ROLE_EMPLOYEE_WAREHOUSE_MANAGER))
        self.assertTrue(workflow.can_transition(
            RequestStatus.PARTIALLY_RECEIVED, RequestStatus.RECEIVED, roles.ROLE_EMPLOYEE_WAREHOUSE_MANAGER))

    def test_wrong_role_refused(self):
        self.assertFalse(workflow.can_transition(
            RequestStatus.PENDING_DIRECTOR, RequestStatus.PENDING_ACCOUNTANT, roles.ROLE_EMPLOYEE_ACCOUNTER))
        self.assertFalse(workflow.can_transition(
            RequestStatus.DRAFT, RequestStatus.PENDING_DIRECTOR, roles.ROLE_EMPLOYEE_MANAGER))

    def test_terminal_statuses_refuse_everything(self):
        for target in RequestStatus.values:
            for role in roles.EMPLOYEE_ROLES:
                self.assertFalse(workflow.can_transition(RequestStatus.RECEIVED, target, role))
                self.assertFalse(workflow.can_transition(RequestStatus.CANCELLED, target, role))

    def test_unlisted_pairs_refused(self):
        allowed = {
            (current, target) for current, (targets, _) in workflow.TRANSITIONS.items() for target in targets
        }
        for current in RequestStatus.values:
            for target in RequestStatus.values:
                if (current, target) in allowed:
                    continue
                for role in roles.EMPLOYEE_ROLES:
                    self.assertFalse(workflow.can_transition(current, target, role))


class RequestServiceTests(TestCase):

    def setUp(self):
        self.warehouse_manager = TestDataFactory.create_employee(roles.ROLE_EMPLOYEE_WAREHOUSE_MANAGER)
        self.director = TestDataFactory.create_employee(roles.ROLE_EMPLOYEE_MANAGER)
        self.accountant = TestDataFactory.create_employee(roles.ROLE_EMPLOYEE_ACCOUNTER)
        self.supplier = TestDataFactory.create_supplier()
        self.product_a = TestDataFactory.create_product()
        self.product_b = TestDataFactory.create_product()

    def _create(self):
        return services.create_request(self.supplier, [
            {'product': self.product_a.id, 'quantity': 10},
            {'product': self.product_b.id, 'quantity': 5},
        ], user=self.warehouse_manager)

    def _approved(self):
        rfd = self._create()
        services.submit_request(rfd, user=self.warehouse_manager)
        services.director_approve(rfd, 'OK', self.director)
        return services.accountant_approve(rfd, 'Paid', self.accountant)

    def test_create_merges_duplicate_products_and_skips_invalid_lines(self):
        rfd = services.create_request(self.supplier, [
            {'product': self.product_a.id, 'quantity': 3},
            {'product': self.product_a.id, 'quantity': 4},
            {'product': None, 'quantity': 8},
            {'product': self.product_b.id, 'quantity': 0},
        ])
        lines = list(rfd.requested_products.all())
        self.assertEqual(len(lines), 1)
        self.assertEqual(lines[0].quantity, 7)
        self.assertEqual(rfd.status, RequestStatus.DRAFT)

    def test_create_without_valid_lines_fails(self):
        with self.assertRaises(BusinessRuleError):
            services.create_request(self.supplier, [{'product': self.product_a.id, 'quantity': 0}])

    def test_full_approval_chain_notifies_each_step(self):
        rfd = self._approved()
        self.assertEqual(rfd.status, RequestStatus.APPROVED)
        self.assertEqual(Comment.objects.filter(request=rfd).count(), 2)
        self.assertTrue(Notification.objects.filter(recipient=self.director).exists())
        self.assertTrue(Notification.objects.filter(recipient=self.accountant).exists())
        self.assertTrue(Notification.objects.filter(recipient=self.warehouse_manager).exists())

    def test_director_cannot_skip_to_approved(self):
        rfd = self._create()
        with self.assertRaises(BusinessRuleError):
            services.director_approve(rfd, 'too early', self.director)
        rfd.refresh_from_db()
        self.assertEqual(rfd.status, RequestStatus.DRAFT)

    def test_reject_requires_comment(self):
        rfd = self._create()
        services.submit_request(rfd, user=self.warehouse_manager)
        with self.assertRaises(BusinessRuleError):
            services.director_reject(rfd, '   ', self.director)
        rfd.refresh_from_db()
        self.assertEqual(rfd.status, RequestStatus.PENDING_DIRECTOR)

    def test_rejected_request_can_be_edited_and_resubmitted(self):
        rfd = self._create()
        services.submit_request(rfd, user=self.warehouse_manager)
        services.director_reject(rfd, 'Too expensive', self.director)
        rfd = services.update_request(rfd, self.supplier, [{'product': self.product_a.id, 'quantity': 2}])
        self.assertEqual(rfd.requested_products.count(), 1)
        rfd = services.resubmit_request(rfd, 'Reduced quantity', self.warehouse_manager)
        self.assertEqual(rfd.status, RequestStatus.PENDING_DIRECTOR)

    def test_pending_request_cannot_be_edited(self):
        rfd = self._create()
        services.submit_request(rfd, user=self.warehouse_manager)
        with self.assertRaises(BusinessRuleError):
            services.update_request(rfd, self.supplier, [{'product': self.product_a.id, 'quantity': 1}])

    def test_only_draft_can_be_deleted(self):
        rfd = self._create()
        services.submit_request(rfd, user=self.warehouse_manager)
        with self.assertRaises(BusinessRuleError):
            services.delete_request(rfd)
        draft = self._create()
        services.delete_request(draft)
        self.assertFalse(RequestForDelivery.objects.filter(pk=draft.pk).exists())

    def test_full_delivery_receives_request_and_adds_stock(self):
        rfd = self._approved()
        delivery = services.create_delivery_from_request(rfd, [
            {'product': self.product_a.id, 'quantity': 10, 'purchase_price': Decimal('12.50')},
            {'product': self.product_b.id, 'quantity': 5, 'purchase_price': Decimal('3.00')},
        ], date.today(), user=self.warehouse_manager)
        rfd.refresh_from_db()
        self.product_a.refresh_from_db()
        self.assertEqual(rfd.status, RequestStatus.RECEIVED)
        self.assertEqual(rfd.delivery, delivery)
        self.assertIsNotNone(rfd.received_date)
        self.assertEqual(self.product_a.stock_quantity, 10)
        self.assertEqual(self.product_a.quantity_for_stock, 10)
        self.assertEqual(delivery.total_cost, Decimal('140.00'))

    def test_shortfall_marks_partially_received(self):
        rfd = self._approved()
        services.create_delivery_from_request(rfd, [
            {'product': self.product_a.id, 'quantity': 7, 'purchase_price': Decimal('12.50'),
             'deficit_reason': 'Damaged boxes'},
            {'product': self.product_b.id, 'quantity': 5, 'purchase_price': Decimal('3.00')},
        ], date.today())
        rfd.refresh_from_db()
        self.assertEqual(rfd.status, RequestStatus.PARTIALLY_RECEIVED)
        self.assertIsNone(rfd.received_date)
        supply = Supply.objects.get(product=self.product_a)
        self.assertEqual(supply.deficit_quantity, 3)
        self.assertEqual(supply.deficit_reason, 'Damaged boxes')

    def test_shortfall_without_reason_fails(self):
        rfd = self._approved()
        with self.assertRaises(BusinessRuleError):
            services.create_delivery_from_request(rfd, [
                {'product': self.product_a.id, 'quantity': 7, 'purchase_price': Decimal('1.00')},
            ], date.today())
        self.product_a.refresh_from_db()
        self.assertEqual(self.product_a.stock_quantity, 0)

    def test_accepting_more_than_requested_fails(self):
        rfd = self._approved()
        with self.assertRaises(BusinessRuleError):
            services.create_delivery_from_request(rfd, [
                {'product': self.product_a.id, 'quantity': 11, 'purchase_price': Decimal('1.00')},
            ], date.today())

    def test_delivery_for_unapproved_request_fails(self):
        rfd = self._create()
        with self.assertRaises(BusinessRuleError):
            services.create_delivery_from_request(rfd, [
                {'product': self.product_a.id, 'quantity': 10, 'purchase_price': Decimal('1.00')},
            ], date.today())


class RequestAPITests(TestCase):
    """Request endpoints across the three roles"""

    def setUp(self):
        self.warehouse_manager = TestDataFactory.create_employee(roles.ROLE_EMPLOYEE_WAREHOUSE_MANAGER)
        self.director = TestDataFactory.create_employee(roles.ROLE_EMPLOYEE_MANAGER)
        self.accountant = TestDataFactory.create_employee(roles.ROLE_EMPLOYEE_ACCOUNTER)
        self.supplier = TestDataFactory.create_supplier()
        self.product = TestDataFactory.create_product()
        self.client = AuthenticatedAPIClient()

    def _create_via_api(self):
        self.client.authenticate_user(self.warehouse_manager)
        response = self.client.post('/api/v1/employee/warehouse-manager/requests/', {
            'supplier': self.supplier.id,
            'requested_products': [{'product': self.product.id, 'quantity': 4}],
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        return response.data['id']

    def test_create_and_submit(self):
        pk = self._create_via_api()
        response = self.client.post(f'/api/v1/employee/warehouse-manager/requests/{pk}/submit/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['status'], RequestStatus.PENDING_DIRECTOR)

    def test_director_approval_via_api(self):
        pk = self._create_via_api()
        self.client.post(f'/api/v1/employee/warehouse-manager/requests/{pk}/submit/')
        self.client.authenticate_user(self.director)
        response = self.client.post(f'/api/v1/employee/manager/requests/{pk}/approve/',
                                    {'comment': 'Approved'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['status'], RequestStatus.PENDING_ACCOUNTANT)
        self.assertEqual(response.data['comments'][0]['text'], 'Approved')

    def test_accountant_cannot_approve_pending_director(self):
        pk = self._create_via_api()
        self.client.post(f'/api/v1/employee/warehouse-manager/requests/{pk}/submit/')
        self.client.authenticate_user(self.accountant)
        response = self.client.post(f'/api/v1/employee/accounter/requests/{pk}/approve/',
                                    {'comment': 'Paid'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_wrong_role_gets_403(self):
        self.client.authenticate_user(self.accountant)
        response = self.client.get('/api/v1/employee/warehouse-manager/requests/')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_unknown_status_filter(self):
        self.client.authenticate_user(self.director)
        response = self.client.get('/api/v1/employee/manager/requests/?status=BOGUS')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
