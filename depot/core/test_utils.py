"""
Test utilities and factories for creating test data
"""
from datetime import date, timedelta
from decimal import Decimal
import random
import string

from django.contrib.auth import get_user_model
from rest_framework.test import APIClient

from depot.core import roles
from depot.core.auth import CHAIN_EMPLOYEE, CHAIN_VISITOR, ChainTokenObtainPairSerializer
from depot.catalog.models import (
    GlobalProductCategory, ProductCategory, ProductAttribute, ProductAttributeValue, Product,
    PACKAGE_LENGTH, PACKAGE_WIDTH, PACKAGE_HEIGHT, WarehouseType
)
from depot.locations.models import Warehouse, Shelf, StorageZone
from depot.parties.models import Client, Supplier
from depot.orders.models import ClientOrder, OrderedProduct
from depot.delivery.models import Vehicle
from depot.visitors.models import Visitor

User = get_user_model()


class TestDataFactory:
    """Factory class for creating test data"""

    @staticmethod
    def random_string(length=10):
        """Generate a random string"""
        return ''.join(random.choices(string.ascii_letters + string.digits, k=length))

    @staticmethod
    def random_digits(length):
        return ''.join(random.choices(string.digits, k=length))

    @staticmethod
    def create_user(username=None, email=None, password='testpass123', role=None, is_active=True, **extra):
        """Create a test user, optionally holding a role group"""
        if not username:
            username = f'testuser_{TestDataFactory.random_string(6)}'
        if not email:
            email = f'{username}@test.com'
        user = User.objects.create_user(
            username=username,
            email=email,
            password=password,
            is_active=is_active,
            **extra
        )
        if role:
            roles.assign_role(user, role)
        return user

    @staticmethod
    def create_employee(role, username=None, password='testpass123', **extra):
        extra.setdefault('first_name', 'Ivan')
        extra.setdefault('last_name', 'Petrov')
        return TestDataFactory.create_user(username=username, password=password, role=role, **extra)

    @staticmethod
    def create_visitor(username=None, password='testpass123', is_active=True):
        """Create a user with the visitor role and profile"""
        if not username:
            username = f'visitor_{TestDataFactory.random_string(6).lower()}@test.com'
        user = TestDataFactory.create_user(
            username=username, email=username, password=password, role=roles.ROLE_VISITOR,
            is_active=is_active, first_name='Anna', last_name='Smirnova'
        )
        Visitor.objects.create(user=user, sex=Visitor.SEX_FEMALE, date_birthday=date(1990, 5, 17))
        return user

    @staticmethod
    def create_client(organization_name=None, inn=None, **extra):
        """Create a test client organization"""
        if not organization_name:
            organization_name = f'Client_{TestDataFactory.random_string(6)}'
        if not inn:
            inn = TestDataFactory.random_digits(10)
        extra.setdefault('organization_type', 'LLC')
        extra.setdefault('legal_address', f'Test Address {organization_name}')
        extra.setdefault('delivery_address', f'Delivery Address {organization_name}')
        return Client.objects.create(organization_name=organization_name, inn=inn, **extra)

    @staticmethod
    def create_supplier(name=None, inn=None, **extra):
        """Create a test supplier"""
        if not name:
            name = f'Supplier_{TestDataFactory.random_string(6)}'
        if not inn:
            inn = TestDataFactory.random_digits(10)
        return Supplier.objects.create(name=name, inn=inn, **extra)

    @staticmethod
    def create_category(name=None, global_category=None):
        """Create a test category inside a (new) global category"""
        if not name:
            name = f'Category_{TestDataFactory.random_string(6)}'
        if not global_category:
            global_category = GlobalProductCategory.objects.create(
                name=f'Global_{TestDataFactory.random_string(6)}'
            )
        return ProductCategory.objects.create(name=name, global_category=global_category)

    @staticmethod
    def dimension_attributes():
        """The three package dimension attributes, created on first use"""
        attributes = []
        for name in (PACKAGE_LENGTH, PACKAGE_WIDTH, PACKAGE_HEIGHT):
            attribute, _ = ProductAttribute.objects.get_or_create(
                name=name, defaults={'unit': 'cm', 'data_type': ProductAttribute.TYPE_NUMBER}
            )
            attributes.append(attribute)
        return attributes

    @staticmethod
    def create_product(name=None, article=None, category=None, stock_quantity=0, quantity_for_stock=0,
                       reserved_quantity=0, dimensions=None, warehouse_type=WarehouseType.REGULAR):
        """Create a test product; ``dimensions`` is (length, width, height) in cm"""
        if not name:
            name = f'Product_{TestDataFactory.random_string(6)}'
        if not article:
            article = f'ART-{TestDataFactory.random_string(8)}'
        if not category:
            category = TestDataFactory.create_category()
        product = Product.objects.create(
            name=name,
            article=article,
            category=category,
            stock_quantity=stock_quantity,
            quantity_for_stock=quantity_for_stock,
            reserved_quantity=reserved_quantity,
            warehouse_type=warehouse_type,
        )
        if dimensions:
            attributes = TestDataFactory.dimension_attributes()
            category.attributes.add(*attributes)
            for attribute, value in zip(attributes, dimensions):
                ProductAttributeValue.objects.create(product=product, attribute=attribute, value=str(value))
        return product

    @staticmethod
    def create_warehouse(name=None, warehouse_type=WarehouseType.REGULAR, **extra):
        """Create a test warehouse"""
        if not name:
            name = f'Warehouse_{TestDataFactory.random_string(6)}'
        extra.setdefault('address', f'Test Address {name}')
        return Warehouse.objects.create(name=name, type=warehouse_type, **extra)

    @staticmethod
    def create_zone(warehouse=None, shelf=None, label=None, length=100, width=100, height=100):
        """Create a storage zone (dimensions in cm) on a new or given shelf"""
        if not shelf:
            if not warehouse:
                warehouse = TestDataFactory.create_warehouse()
            shelf = Shelf.objects.create(code=f'S{Shelf.objects.filter(warehouse=warehouse).count() + 1}',
                                         warehouse=warehouse)
        if not label:
            label = f'{shelf.code}-{shelf.zones.count() + 1}'
        return StorageZone.objects.create(label=label, length=length, width=width, height=height, shelf=shelf)

    @staticmethod
    def create_order(client=None, items=None, responsible=None, status=None, order_number=None):
        """
        Create a client order. ``items`` is a list of (product, quantity, price);
        by default one line of a new product.
        """
        if not client:
            client = TestDataFactory.create_client()
        if items is None:
            items = [(TestDataFactory.create_product(stock_quantity=100), 5, Decimal('100.00'))]
        if not order_number:
            order_number = f'ORD-TEST-{TestDataFactory.random_digits(8)}'
        order = ClientOrder.objects.create(
            order_number=order_number,
            client=client,
            responsible_employee=responsible,
            delivery_date=date.today() + timedelta(days=3),
        )
        for product, quantity, price in items:
            OrderedProduct.objects.create(client_order=order, product=product, quantity=quantity,
                                          price=Decimal(price))
        order.calculate_total_amount()
        if status:
            order.status = status
        order.save()
        return order

    @staticmethod
    def create_vehicle(registration_number=None, **extra):
        """Create a test vehicle"""
        if not registration_number:
            registration_number = f'A{TestDataFactory.random_digits(3)}BC{TestDataFactory.random_digits(2)}'
        extra.setdefault('brand', 'GAZ')
        extra.setdefault('model', 'Gazelle')
        extra.setdefault('current_mileage', 1000)
        return Vehicle.objects.create(registration_number=registration_number, **extra)


class AuthenticatedAPIClient(APIClient):
    """APIClient with authentication helper"""

    def authenticate_user(self, user, chain=None):
        """Authenticate the client with a user, using a token of the user's own chain by default"""
        if chain is None:
            chain = CHAIN_VISITOR if roles.is_visitor(user) else CHAIN_EMPLOYEE
        refresh = ChainTokenObtainPairSerializer.build_token(user, chain)
        self.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
        return self

    def logout(self):
        """Remove authentication"""
        self.credentials()
