"""
Test suite for warehouse equipment
"""
from datetime import date, timedelta
from io import StringIO
from django.core.management import call_command
from django.test import TestCase
from django.utils import timezone
from rest_framework import status
from depot.core import roles
from depot.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from depot.equipment.management.commands.check_equipment_expiry import expiry_notice
from depot.equipment.models import EquipmentType, WarehouseEquipment, EquipmentStatus
from depot.notifications.models import Notification


class EquipmentModelTests(TestCase):

    def setUp(self):
        self.warehouse = TestDataFactory.create_warehouse()
        self.equipment_type = EquipmentType.objects.create(name='Forklift')

    def _equipment(self, production_date, useful_life_years=5, **extra):
        return WarehouseEquipment.objects.create(
            name=f'Item {TestDataFactory.random_string(4)}', production_date=production_date,
            useful_life_years=useful_life_years, equipment_type=self.equipment_type,
            warehouse=self.warehouse, **extra
        )

    def test_expiration_date(self):
        self.assertEqual(self._equipment(date(2020, 6, 15)).expiration_date, date(2025, 6, 15))

    def test_leap_day_production(self):
        self.assertEqual(self._equipment(date(2020, 2, 29), useful_life_years=1).expiration_date, date(2021, 2, 28))
        self.assertEqual(self._equipment(date(2020, 2, 29), useful_life_years=4).expiration_date, date(2024, 2, 29))

    def test_unknown_life(self):
        item = self._equipment(date(2020, 1, 1), useful_life_years=None)
        self.assertIsNone(item.expiration_date)
        self.assertIsNone(item.days_until_expiration())
        self.assertFalse(item.is_expired)

    def test_days_until_expiration(self):
        item = self._equipment(date(2020, 6, 15))
        self.assertEqual(item.days_until_expiration(date(2025, 6, 5)), 10)
        self.assertEqual(item.days_until_expiration(date(2025, 6, 16)), -1)

    def test_expiry_notices(self):
        item = self._equipment(date(2020, 6, 15))
        self.assertIsNone(expiry_notice(item, date(2025, 1, 1)))
        self.assertIn('within a month', expiry_notice(item, date(2025, 5, 25)))
        self.assertIn('ends in 3 days', expiry_notice(item, date(2025, 6, 12)))
        self.assertIn('expired', expiry_notice(item, date(2025, 7, 1)))


class ExpiryCommandTests(TestCase):

    def test_directors_notified_written_off_skipped(self):
        director = TestDataFactory.create_employee(roles.ROLE_EMPLOYEE_MANAGER)
        warehouse = TestDataFactory.create_warehouse()
        equipment_type = EquipmentType.objects.create(name='Rack')
        soon = timezone.localdate() + timedelta(days=5)
        produced = date(soon.year - 1, soon.month, min(soon.day, 28))
        WarehouseEquipment.objects.create(name='Rack 1', production_date=produced, useful_life_years=1,
                                          equipment_type=equipment_type, warehouse=warehouse)
        WarehouseEquipment.objects.create(name='Rack 2', production_date=date(2000, 1, 1), useful_life_years=1,
                                          equipment_type=equipment_type, warehouse=warehouse,
                                          status=EquipmentStatus.WRITTEN_OFF)
        out = StringIO()
        call_command('check_equipment_expiry', stdout=out)
        notices = list(Notification.objects.filter(recipient=director).values_list('text', flat=True))
        self.assertEqual(len(notices), 1)
        self.assertIn('Rack 1', notices[0])
        self.assertIn('1 items reported', out.getvalue())


class EquipmentAPITests(TestCase):

    def setUp(self):
        self.warehouse_manager = TestDataFactory.create_employee(roles.ROLE_EMPLOYEE_WAREHOUSE_MANAGER)
        self.director = TestDataFactory.create_employee(roles.ROLE_EMPLOYEE_MANAGER)
        self.warehouse = TestDataFactory.create_warehouse()
        self.equipment_type = EquipmentType.objects.create(name='Loader')
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.warehouse_manager)

    def _payload(self, **overrides):
        payload = {
            'name': 'Loader 7', 'serial_number': 'SN-7', 'production_date': '2022-03-01',
            'useful_life_years': 8, 'equipment_type': self.equipment_type.id, 'warehouse': self.warehouse.id,
        }
        payload.update(overrides)
        return payload

    def test_create_equipment(self):
        response = self.client.post('/api/v1/employee/warehouse-manager/equipment/', self._payload(), format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['expiration_date'], '2030-03-01')
        self.assertEqual(response.data['status'], EquipmentStatus.IN_USE)

    def test_name_unique_per_warehouse(self):
        self.client.post('/api/v1/employee/warehouse-manager/equipment/', self._payload(), format='json')
        response = self.client.post('/api/v1/employee/warehouse-manager/equipment/', self._payload(), format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        other = TestDataFactory.create_warehouse()
        response = self.client.post('/api/v1/employee/warehouse-manager/equipment/',
                                    self._payload(warehouse=other.id), format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)

    def test_type_name_case_insensitive_unique(self):
        response = self.client.post('/api/v1/employee/warehouse-manager/equipment-types/', {'name': ' loader '},
                                    format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_type_in_use_cannot_be_deleted(self):
        self.client.post('/api/v1/employee/warehouse-manager/equipment/', self._payload(), format='json')
        response = self.client.delete(f'/api/v1/employee/warehouse-manager/equipment-types/{self.equipment_type.id}/')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_director_reads_filtered_list(self):
        self.client.post('/api/v1/employee/warehouse-manager/equipment/', self._payload(), format='json')
        self.client.post('/api/v1/employee/warehouse-manager/equipment/',
                         self._payload(name='Loader 8', status=EquipmentStatus.UNDER_REPAIR), format='json')
        self.client.authenticate_user(self.director)
        response = self.client.get(f'/api/v1/employee/manager/equipment/?status={EquipmentStatus.UNDER_REPAIR}')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([e['name'] for e in response.data], ['Loader 8'])
        response = self.client.post('/api/v1/employee/warehouse-manager/equipment/', self._payload(), format='json')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
