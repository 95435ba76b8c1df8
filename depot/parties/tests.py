"""
Test suite for clients and suppliers
"""
from django.test import TestCase
from rest_framework import status
from depot.core import roles
from depot.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from depot.parties.models import Client


class PartiesModelTests(TestCase):

    def test_director_names(self):
        supplier = TestDataFactory.create_supplier(
            director_last_name='Ivanov', director_first_name='Petr', director_patronymic_name='Sergeevich'
        )
        self.assertEqual(supplier.get_director_full_name(), 'Ivanov Petr Sergeevich')
        self.assertEqual(supplier.get_director_short_name(), 'Ivanov P.S.')

    def test_client_display_name(self):
        client = TestDataFactory.create_client(organization_name='Horns and Hooves', organization_type='LLC')
        self.assertEqual(str(client), 'Horns and Hooves (LLC)')


class PartiesAPITests(TestCase):

    def setUp(self):
        self.manager = TestDataFactory.create_employee(roles.ROLE_EMPLOYEE_MANAGER)
        self.courier = TestDataFactory.create_employee(roles.ROLE_EMPLOYEE_COURIER)
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.manager)

    def _client_payload(self, **overrides):
        payload = {
            'organization_type': 'LLC',
            'organization_name': 'Stroymarket',
            'inn': '7701234567',
            'legal_address': 'Moscow, Lenina 1',
        }
        payload.update(overrides)
        return payload

    def test_manager_creates_client(self):
        response = self.client.post('/api/v1/employee/manager/clients/', self._client_payload(), format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['display_name'], 'Stroymarket (LLC)')

    def test_inn_format(self):
        response = self.client.post('/api/v1/employee/manager/clients/', self._client_payload(inn='12345'),
                                    format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('inn', response.data)

    def test_inn_is_unique(self):
        TestDataFactory.create_client(inn='7701234567')
        response = self.client.post('/api/v1/employee/manager/clients/', self._client_payload(), format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(Client.objects.filter(inn='7701234567').count(), 1)

    def test_client_with_orders_cannot_be_deleted(self):
        order = TestDataFactory.create_order()
        response = self.client.delete(f'/api/v1/employee/manager/clients/{order.client_id}/')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_supplier_search(self):
        TestDataFactory.create_supplier(name='Alpha Tools', inn='5001112223')
        TestDataFactory.create_supplier(name='Beta Paints', inn='5003334445')
        response = self.client.get('/api/v1/employee/manager/suppliers/?search=alpha')
        self.assertEqual([s['name'] for s in response.data], ['Alpha Tools'])
        response = self.client.get('/api/v1/employee/manager/suppliers/?search=50033')
        self.assertEqual([s['name'] for s in response.data], ['Beta Paints'])

    def test_any_employee_reads_but_cannot_write(self):
        TestDataFactory.create_client()
        self.client.authenticate_user(self.courier)
        response = self.client.get('/api/v1/employee/clients/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data), 1)
        response = self.client.post('/api/v1/employee/manager/clients/', self._client_payload(), format='json')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
