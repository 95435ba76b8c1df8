"""
Test suite for storage locations
Tests: zone occupancy, orientation choice, placement and removal, warehouse structure, API endpoints
"""
from django.core.cache import cache
from django.test import TestCase
from rest_framework import status
from depot.catalog.models import WarehouseType, PACKAGE_LENGTH
from depot.core import roles
from depot.core.exceptions import BusinessRuleError
from depot.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from depot.locations import placement
from depot.locations.models import Warehouse, Shelf, StorageZone, ZoneProduct, BoxOrientation


class StorageZoneModelTests(TestCase):

    def setUp(self):
        self.zone = TestDataFactory.create_zone(length=100, width=50, height=40)
        self.product = TestDataFactory.create_product(dimensions=(30, 20, 10))

    def test_empty_zone_has_zero_occupancy(self):
        self.assertAlmostEqual(self.zone.capacity_volume, 0.2)
        self.assertEqual(self.zone.occupancy_percentage, 0.0)

    def test_zero_capacity_zone(self):
        zone = TestDataFactory.create_zone(length=0, width=50, height=40)
        ZoneProduct.objects.create(zone=zone, product=self.product, quantity=1)
        self.assertEqual(zone.occupancy_percentage, 0.0)

    def test_occupancy_grows_with_used_volume(self):
        zone_product = ZoneProduct.objects.create(zone=self.zone, product=self.product, quantity=10)
        self.assertAlmostEqual(self.zone.occupancy_percentage, 30.0)
        zone_product.quantity = 20
        zone_product.save()
        zone = StorageZone.objects.get(pk=self.zone.pk)
        self.assertAlmostEqual(zone.occupancy_percentage, 60.0)

    def test_missing_dimensions_mean_zero_volume(self):
        product = TestDataFactory.create_product()
        zone_product = ZoneProduct.objects.create(zone=self.zone, product=product, quantity=5)
        self.assertEqual(zone_product.total_volume, 0.0)

    def test_fit_per_orientation(self):
        fits = {o: BoxOrientation.fit(o, self.zone, 30, 20, 10) for o in BoxOrientation}
        self.assertEqual(fits[BoxOrientation.STANDARD], 24)
        self.assertEqual(fits[BoxOrientation.ROTATED_90], 20)
        self.assertEqual(fits[BoxOrientation.LAY_ON_SIDE], 30)
        self.assertEqual(fits[BoxOrientation.ROTATE_AND_LAY], 20)


class PlacementServiceTests(TestCase):

    def setUp(self):
        self.warehouse = TestDataFactory.create_warehouse()
        self.zone = TestDataFactory.create_zone(warehouse=self.warehouse, length=100, width=50, height=40)
        self.product = TestDataFactory.create_product(stock_quantity=40, quantity_for_stock=40,
                                                      dimensions=(30, 20, 10))

    def test_best_orientation_is_largest_fit(self):
        self.assertEqual(placement.find_best_orientation(self.product, self.zone, 10), BoxOrientation.LAY_ON_SIDE)
        self.assertEqual(placement.find_best_orientation(self.product, self.zone, 25), BoxOrientation.LAY_ON_SIDE)
        self.assertIsNone(placement.find_best_orientation(self.product, self.zone, 31))

    def test_non_finite_dimensions_never_fit(self):
        broken = TestDataFactory.create_product(dimensions=('NaN', 20, 10))
        self.assertEqual(placement.check_placement_possibility(broken, 1), [])
        self.assertEqual(placement.max_fitting_quantity(broken, self.zone), 0)

    def test_max_fitting_quantity(self):
        self.assertEqual(placement.max_fitting_quantity(self.product, self.zone), 30)
        self.assertEqual(placement.max_fitting_quantity(TestDataFactory.create_product(), self.zone), 0)

    def test_place_in_zone_moves_units_out_of_awaiting(self):
        result = placement.place_in_zone(self.product, self.zone, 12)
        self.product.refresh_from_db()
        self.assertEqual(result['orientation'], BoxOrientation.LAY_ON_SIDE)
        self.assertEqual(self.product.quantity_for_stock, 28)
        placement.place_in_zone(self.product, self.zone, 3)
        self.assertEqual(ZoneProduct.objects.get(zone=self.zone, product=self.product).quantity, 15)

    def test_place_more_than_awaiting_fails(self):
        with self.assertRaises(BusinessRuleError):
            placement.place_in_zone(self.product, self.zone, 41)

    def test_place_into_incompatible_warehouse_fails(self):
        cold = TestDataFactory.create_warehouse(warehouse_type=WarehouseType.REFRIGERATOR)
        cold_zone = TestDataFactory.create_zone(warehouse=cold)
        with self.assertRaises(BusinessRuleError):
            placement.place_in_zone(self.product, cold_zone, 1)

    def test_place_too_many_fails(self):
        with self.assertRaises(BusinessRuleError):
            placement.place_in_zone(self.product, self.zone, 35)

    def test_place_optimal_prefers_least_occupied(self):
        other = TestDataFactory.create_zone(warehouse=self.warehouse, length=100, width=50, height=40)
        filler = TestDataFactory.create_product(dimensions=(30, 20, 10))
        ZoneProduct.objects.create(zone=self.zone, product=filler, quantity=5)
        result = placement.place_optimal(self.product, 5)
        self.assertEqual(result['zone_id'], other.id)

    def test_place_optimal_without_fitting_zone(self):
        with self.assertRaises(BusinessRuleError):
            placement.place_optimal(self.product, 35)

    def test_remove_returns_units_to_awaiting(self):
        placement.place_in_zone(self.product, self.zone, 10)
        placement.remove_from_zone(self.product, self.zone, 10)
        self.product.refresh_from_db()
        self.assertEqual(self.product.quantity_for_stock, 40)
        self.assertFalse(ZoneProduct.objects.filter(zone=self.zone).exists())

    def test_move_between_zones(self):
        target = TestDataFactory.create_zone(warehouse=self.warehouse, length=100, width=50, height=40)
        placement.place_in_zone(self.product, self.zone, 10)
        placement.move_product(self.product, self.zone, target, 4)
        self.assertEqual(ZoneProduct.objects.get(zone=self.zone).quantity, 6)
        self.assertEqual(ZoneProduct.objects.get(zone=target).quantity, 4)

    def test_failed_move_keeps_source(self):
        tiny = TestDataFactory.create_zone(warehouse=self.warehouse, length=5, width=5, height=5)
        placement.place_in_zone(self.product, self.zone, 10)
        with self.assertRaises(BusinessRuleError):
            placement.move_product(self.product, self.zone, tiny, 4)
        self.assertEqual(ZoneProduct.objects.get(zone=self.zone).quantity, 10)
        self.assertFalse(ZoneProduct.objects.filter(zone=tiny).exists())

    def test_check_placement_possibility(self):
        TestDataFactory.create_zone(warehouse=self.warehouse, length=5, width=5, height=5)
        result = placement.check_placement_possibility(self.product, 10)
        self.assertEqual([row['zone_id'] for row in result], [self.zone.id])
        self.assertEqual(result[0]['max_quantity'], 30)

    def test_take_from_zones_limited_to_warehouse(self):
        other_zone = TestDataFactory.create_zone()
        ZoneProduct.objects.create(zone=self.zone, product=self.product, quantity=3)
        ZoneProduct.objects.create(zone=other_zone, product=self.product, quantity=3)
        taken = placement.take_from_zones(self.product, 5, warehouse=self.warehouse)
        self.assertEqual(taken, 3)
        self.assertEqual(ZoneProduct.objects.get(zone=other_zone).quantity, 3)


class WarehouseStructureTests(TestCase):

    def test_create_with_structure(self):
        warehouse = placement.create_warehouse_with_structure(
            'Main', WarehouseType.REGULAR, 'Street 1', shelf_count=2, zones_per_shelf=3,
            zone_length=100, zone_width=50, zone_height=40,
        )
        self.assertEqual(list(warehouse.shelves.values_list('code', flat=True)), ['A', 'B'])
        self.assertEqual(StorageZone.objects.filter(shelf__warehouse=warehouse).count(), 6)
        self.assertAlmostEqual(warehouse.total_volume, 1200.0)

    def test_duplicate_name_fails(self):
        TestDataFactory.create_warehouse(name='Main')
        with self.assertRaises(BusinessRuleError):
            placement.create_warehouse_with_structure('Main', WarehouseType.REGULAR, '', 1, 1, 10, 10, 10)

    def test_shelf_codes_after_alphabet(self):
        self.assertEqual(placement.shelf_code(0), 'A')
        self.assertEqual(placement.shelf_code(25), 'Z')
        self.assertEqual(placement.shelf_code(26), 'ST-27')

    def test_non_empty_warehouse_cannot_be_deleted(self):
        zone = TestDataFactory.create_zone()
        ZoneProduct.objects.create(zone=zone, product=TestDataFactory.create_product(), quantity=1)
        with self.assertRaises(BusinessRuleError):
            placement.delete_warehouse_if_empty(zone.shelf.warehouse)
        with self.assertRaises(BusinessRuleError):
            placement.delete_shelf_if_empty(zone.shelf)

    def test_statistics(self):
        zone = TestDataFactory.create_zone(length=100, width=50, height=40)
        product = TestDataFactory.create_product(dimensions=(30, 20, 10))
        ZoneProduct.objects.create(zone=zone, product=product, quantity=10)
        stats = placement.detailed_statistics(zone.shelf.warehouse)
        self.assertEqual(stats['total_zones'], 1)
        self.assertEqual(stats['total_units'], 10)
        self.assertAlmostEqual(stats['occupancy_percentage'], 30.0)
        self.assertEqual(stats['top_products'][0]['name'], product.name)


class LocationsAPITests(TestCase):

    def setUp(self):
        cache.clear()
        self.warehouse_manager = TestDataFactory.create_employee(roles.ROLE_EMPLOYEE_WAREHOUSE_MANAGER)
        self.courier = TestDataFactory.create_employee(roles.ROLE_EMPLOYEE_COURIER)
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.warehouse_manager)

    def test_create_warehouse(self):
        response = self.client.post('/api/v1/employee/warehouse-manager/warehouses/', {
            'name': 'North', 'type': WarehouseType.REGULAR, 'shelf_count': 2, 'zones_per_shelf': 2,
            'zone_length': 100, 'zone_width': 100, 'zone_height': 100,
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['shelf_count'], 2)
        self.assertEqual(Shelf.objects.filter(warehouse__name='North').count(), 2)

    def test_any_employee_lists_warehouses(self):
        TestDataFactory.create_warehouse(name='South')
        self.client.authenticate_user(self.courier)
        response = self.client.get('/api/v1/employee/warehouses/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([w['name'] for w in response.data], ['South'])

    def test_place_optimal_via_api(self):
        zone = TestDataFactory.create_zone(length=100, width=50, height=40)
        product = TestDataFactory.create_product(quantity_for_stock=10, stock_quantity=10, dimensions=(30, 20, 10))
        response = self.client.post('/api/v1/employee/warehouse-manager/placement/place/',
                                    {'product': product.id, 'quantity': 10}, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['zone_id'], zone.id)

    def test_zone_table(self):
        zone = TestDataFactory.create_zone()
        response = self.client.get(f'/api/v1/employee/warehouse-manager/warehouses/{zone.shelf.warehouse_id}/zones/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data[0]['occupancy_percentage'], 0.0)

    def test_zone_table_refreshed_after_placement(self):
        zone = TestDataFactory.create_zone(length=100, width=50, height=40)
        product = TestDataFactory.create_product(quantity_for_stock=10, stock_quantity=10, dimensions=(30, 20, 10))
        url = f'/api/v1/employee/warehouse-manager/warehouses/{zone.shelf.warehouse_id}/zones/'
        self.assertEqual(self.client.get(url).data[0]['occupancy_percentage'], 0.0)
        with self.captureOnCommitCallbacks(execute=True):
            placement.place_in_zone(product, zone, 10)
        self.assertAlmostEqual(self.client.get(url).data[0]['occupancy_percentage'], 30.0)

    def test_zone_table_refreshed_after_dimension_change(self):
        zone = TestDataFactory.create_zone(length=100, width=50, height=40)
        product = TestDataFactory.create_product(quantity_for_stock=10, stock_quantity=10, dimensions=(30, 20, 10))
        with self.captureOnCommitCallbacks(execute=True):
            placement.place_in_zone(product, zone, 10)
        url = f'/api/v1/employee/warehouse-manager/warehouses/{zone.shelf.warehouse_id}/zones/'
        self.assertAlmostEqual(self.client.get(url).data[0]['occupancy_percentage'], 30.0)

        length = product.attribute_values.get(attribute__name=PACKAGE_LENGTH)
        length.value = '60'
        with self.captureOnCommitCallbacks(execute=True):
            length.save()
        self.assertAlmostEqual(self.client.get(url).data[0]['occupancy_percentage'], 60.0)

    def test_placement_check_bad_params(self):
        response = self.client.get('/api/v1/employee/warehouse-manager/placement/check/?product=x')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_placement_check_requires_positive_quantity(self):
        TestDataFactory.create_zone(length=100, width=50, height=40)
        product = TestDataFactory.create_product(dimensions=(30, 20, 10))
        for quantity in (0, -3):
            response = self.client.get(
                f'/api/v1/employee/warehouse-manager/placement/check/?product={product.id}&quantity={quantity}'
            )
            self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        response = self.client.get(f'/api/v1/employee/warehouse-manager/placement/check/?product={product.id}&quantity=5')
        self.assertTrue(response.data['possible'])

    def test_delete_empty_warehouse(self):
        warehouse = TestDataFactory.create_warehouse()
        response = self.client.delete(f'/api/v1/employee/warehouse-manager/warehouses/{warehouse.id}/')
        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)
        self.assertFalse(Warehouse.objects.filter(pk=warehouse.id).exists())

    def test_courier_cannot_place(self):
        self.client.authenticate_user(self.courier)
        response = self.client.post('/api/v1/employee/warehouse-manager/placement/place/', {}, format='json')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
