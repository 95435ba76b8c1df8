"""
Test suite for the product catalog
Tests: typed attribute values, package dimensions, product CRUD, filters, role gating
"""
from datetime import date
from decimal import Decimal
from django.test import TestCase
from rest_framework import status
from depot.core import roles
from depot.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from depot.catalog.models import (
    GlobalProductCategory, ProductAttribute, ProductAttributeValue, Product, WarehouseType
)


class ProductModelTests(TestCase):

    def setUp(self):
        self.category = TestDataFactory.create_category()

    def _value(self, data_type, raw):
        attribute = ProductAttribute.objects.create(name=f'Attr {TestDataFactory.random_string(4)}',
                                                    data_type=data_type)
        product = TestDataFactory.create_product(category=self.category)
        return ProductAttributeValue.objects.create(product=product, attribute=attribute, value=raw)

    def test_number_value_accepts_comma(self):
        self.assertEqual(self._value(ProductAttribute.TYPE_NUMBER, '12,5').get_typed_value(), Decimal('12.5'))

    def test_unparsable_values_are_none(self):
        self.assertIsNone(self._value(ProductAttribute.TYPE_NUMBER, 'abc').get_typed_value())
        self.assertIsNone(self._value(ProductAttribute.TYPE_DATE, '31.12.2024').get_typed_value())

    def test_date_value(self):
        self.assertEqual(self._value(ProductAttribute.TYPE_DATE, '2024-12-31').get_typed_value(), date(2024, 12, 31))

    def test_package_dimensions(self):
        product = TestDataFactory.create_product(dimensions=(30, 20.5, 10))
        self.assertEqual(product.get_package_dimensions(), (30.0, 20.5, 10.0))
        self.assertEqual(TestDataFactory.create_product().get_package_dimensions(), (None, None, None))

    def test_available_quantity(self):
        product = TestDataFactory.create_product(stock_quantity=10, reserved_quantity=3)
        self.assertEqual(product.available_quantity, 7)

    def test_non_finite_dimension_is_ignored(self):
        product = TestDataFactory.create_product(dimensions=('NaN', 'Infinity', 10))
        self.assertEqual(product.get_package_dimensions(), (None, None, 10.0))


class CatalogAPITests(TestCase):

    def setUp(self):
        self.warehouse_manager = TestDataFactory.create_employee(roles.ROLE_EMPLOYEE_WAREHOUSE_MANAGER)
        self.worker = TestDataFactory.create_employee(roles.ROLE_EMPLOYEE_WAREHOUSE_WORKER)
        self.category = TestDataFactory.create_category(name='Drills')
        self.length, self.width, self.height = TestDataFactory.dimension_attributes()
        self.category.attributes.add(self.length, self.width, self.height)
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.warehouse_manager)

    def _product_payload(self, **overrides):
        payload = {
            'name': 'Cordless drill',
            'article': 'DR-100',
            'category': self.category.id,
            'warehouse_type': WarehouseType.REGULAR,
            'attribute_values': [
                {'attribute': self.length.id, 'value': '40'},
                {'attribute': self.width.id, 'value': '30'},
            ],
        }
        payload.update(overrides)
        return payload

    def test_create_product_with_attributes(self):
        response = self.client.post('/api/v1/employee/warehouse-manager/products/', self._product_payload(),
                                    format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        product = Product.objects.get(article='DR-100')
        self.assertEqual(product.attribute_values.count(), 2)
        self.assertEqual(response.data['package_dimensions'], {'length': 40.0, 'width': 30.0, 'height': None})

    def test_stock_fields_are_read_only(self):
        response = self.client.post('/api/v1/employee/warehouse-manager/products/',
                                    self._product_payload(stock_quantity=500), format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['stock_quantity'], 0)

    def test_attribute_outside_category_rejected(self):
        foreign = ProductAttribute.objects.create(name='Voltage', unit='V', data_type=ProductAttribute.TYPE_NUMBER)
        response = self.client.post('/api/v1/employee/warehouse-manager/products/', self._product_payload(
            attribute_values=[{'attribute': foreign.id, 'value': '18'}]
        ), format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('attribute_values', response.data)

    def test_values_must_match_attribute_type(self):
        release = ProductAttribute.objects.create(name='Release date', data_type=ProductAttribute.TYPE_DATE)
        self.category.attributes.add(release)
        bad_values = [
            [{'attribute': self.length.id, 'value': 'NaN'}],
            [{'attribute': self.length.id, 'value': 'Infinity'}],
            [{'attribute': self.height.id, 'value': 'abc'}],
            [{'attribute': self.width.id, 'value': '0'}],
            [{'attribute': self.width.id, 'value': '-5'}],
            [{'attribute': release.id, 'value': '31.12.2024'}],
        ]
        for values in bad_values:
            response = self.client.post('/api/v1/employee/warehouse-manager/products/',
                                        self._product_payload(attribute_values=values), format='json')
            self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST, values)
            self.assertIn('attribute_values', response.data)
        self.assertFalse(Product.objects.filter(article='DR-100').exists())

        response = self.client.post('/api/v1/employee/warehouse-manager/products/', self._product_payload(
            attribute_values=[{'attribute': release.id, 'value': '2024-12-31'}]
        ), format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)

    def test_duplicate_article_rejected(self):
        TestDataFactory.create_product(article='DR-100')
        response = self.client.post('/api/v1/employee/warehouse-manager/products/', self._product_payload(),
                                    format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_product_with_stock_cannot_be_deleted(self):
        product = TestDataFactory.create_product(stock_quantity=1)
        response = self.client.delete(f'/api/v1/employee/warehouse-manager/products/{product.id}/')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertTrue(Product.objects.filter(pk=product.id).exists())

    def test_category_with_products_cannot_be_deleted(self):
        TestDataFactory.create_product(category=self.category)
        response = self.client.delete(f'/api/v1/employee/warehouse-manager/categories/{self.category.id}/')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_global_category_with_children_cannot_be_deleted(self):
        global_category = self.category.global_category
        response = self.client.delete(f'/api/v1/employee/warehouse-manager/global-categories/{global_category.id}/')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertTrue(GlobalProductCategory.objects.filter(pk=global_category.id).exists())

    def test_duplicate_attribute_name_rejected(self):
        response = self.client.post('/api/v1/employee/warehouse-manager/attributes/', {
            'name': self.length.name.upper(), 'data_type': ProductAttribute.TYPE_NUMBER,
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_employee_product_list_filters(self):
        TestDataFactory.create_product(name='Cordless drill', category=self.category, stock_quantity=5)
        TestDataFactory.create_product(name='Hammer', stock_quantity=5, reserved_quantity=5)
        self.client.authenticate_user(self.worker)

        response = self.client.get('/api/v1/employee/products/?search=drill%20cordless')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([p['name'] for p in response.data['results']], ['Cordless drill'])

        response = self.client.get('/api/v1/employee/products/?in_stock=false')
        self.assertEqual([p['name'] for p in response.data['results']], ['Hammer'])

        response = self.client.get('/api/v1/employee/products/?limit=1&page=2')
        self.assertEqual(response.data['count'], 2)
        self.assertEqual(response.data['total_pages'], 2)
        self.assertEqual(response.data['previous'], 1)

    def test_worker_cannot_manage_catalog(self):
        self.client.authenticate_user(self.worker)
        response = self.client.post('/api/v1/employee/warehouse-manager/products/', self._product_payload(),
                                    format='json')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
