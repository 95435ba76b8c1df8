import math
from django.db import transaction
from rest_framework import serializers
from .models import (
    GlobalProductCategory, ProductAttribute, ProductCategory, Product, ProductAttributeValue,
    PACKAGE_DIMENSION_ATTRIBUTES,
)


class GlobalProductCategorySerializer(serializers.ModelSerializer):
    category_count = serializers.SerializerMethodField()

    class Meta:
        model = GlobalProductCategory
        fields = ['id', 'name', 'category_count', 'created_at']
        read_only_fields = ['created_at']

    def get_category_count(self, obj):
        return obj.categories.count()


class ProductAttributeSerializer(serializers.ModelSerializer):
    # Categories the attribute is attached to; assignable on create/update
    category_ids = serializers.PrimaryKeyRelatedField(
        queryset=ProductCategory.objects.all(),
        source='categories',
        many=True,
        required=False,
    )

    class Meta:
        model = ProductAttribute
        fields = ['id', 'name', 'unit', 'data_type', 'category_ids']

    def validate_name(self, value):
        queryset = ProductAttribute.objects.filter(name__iexact=value.strip())
        if self.instance:
            queryset = queryset.exclude(pk=self.instance.pk)
        if queryset.exists():
            raise serializers.ValidationError("An attribute with this name already exists")
        return value.strip()


class ProductCategorySerializer(serializers.ModelSerializer):
    global_category_name = serializers.CharField(source='global_category.name', read_only=True)
    attributes = ProductAttributeSerializer(many=True, read_only=True)
    attribute_ids = serializers.PrimaryKeyRelatedField(
        queryset=ProductAttribute.objects.all(),
        source='attributes',
        many=True,
        write_only=True,
        required=False,
    )

    class Meta:
        model = ProductCategory
        fields = ['id', 'name', 'global_category', 'global_category_name', 'attributes', 'attribute_ids']


class ProductAttributeValueSerializer(serializers.ModelSerializer):
    attribute_name = serializers.CharField(source='attribute.name', read_only=True)
    unit = serializers.CharField(source='attribute.unit', read_only=True)
    data_type = serializers.CharField(source='attribute.data_type', read_only=True)

    class Meta:
        model = ProductAttributeValue
        fields = ['id', 'attribute', 'attribute_name', 'unit', 'data_type', 'value']


class ProductSerializer(serializers.ModelSerializer):
    # For reading: category name and its global category
    category_name = serializers.CharField(source='category.name', read_only=True)
    global_category_name = serializers.CharField(source='category.global_category.name', read_only=True)
    available_quantity = serializers.IntegerField(read_only=True)
    package_dimensions = serializers.SerializerMethodField()
    attribute_values = ProductAttributeValueSerializer(many=True, required=False)

    class Meta:
        model = Product
        fields = [
            'id', 'name', 'article', 'category', 'category_name', 'global_category_name',
            'warehouse_type', 'image', 'stock_quantity', 'quantity_for_stock',
            'reserved_quantity', 'available_quantity', 'package_dimensions',
            'attribute_values', 'created_at', 'updated_at'
        ]
        # Stock figures only change through receiving, reservation and write-offs
        read_only_fields = ['stock_quantity', 'quantity_for_stock', 'reserved_quantity', 'created_at', 'updated_at']

    def get_package_dimensions(self, obj):
        length, width, height = obj.get_package_dimensions()
        return {'length': length, 'width': width, 'height': height}

    def validate(self, attrs):
        category = attrs.get('category') or (self.instance.category if self.instance else None)
        values = attrs.get('attribute_values')
        if category and values:
            allowed = set(category.attributes.values_list('id', flat=True))
            seen = set()
            for item in values:
                attribute = item['attribute']
                if attribute.id not in allowed:
                    raise serializers.ValidationError(
                        {'attribute_values': f"Attribute '{attribute.name}' is not defined for category '{category.name}'"}
                    )
                if attribute.id in seen:
                    raise serializers.ValidationError(
                        {'attribute_values': f"Attribute '{attribute.name}' is given more than once"}
                    )
                seen.add(attribute.id)
                self._check_value(attribute, item.get('value') or '')
        return attrs

    def _check_value(self, attribute, value):
        """Blank values are dropped on save; anything else must parse as the attribute type"""
        if not value.strip():
            return
        parsed = ProductAttributeValue(attribute=attribute, value=value).get_typed_value()
        if parsed is None:
            raise serializers.ValidationError(
                {'attribute_values': f"Value '{value}' is not a valid {attribute.get_data_type_display().lower()} for '{attribute.name}'"}
            )
        if attribute.data_type == ProductAttribute.TYPE_NUMBER:
            if not parsed.is_finite() or not math.isfinite(float(parsed)):
                raise serializers.ValidationError(
                    {'attribute_values': f"Value of '{attribute.name}' must be a finite number"}
                )
            if attribute.name in PACKAGE_DIMENSION_ATTRIBUTES and parsed <= 0:
                raise serializers.ValidationError(
                    {'attribute_values': f"'{attribute.name}' must be greater than zero"}
                )

    def _save_attribute_values(self, product, values):
        """Replace the product's attribute values, skipping blank ones"""
        # Individual saves; the zone table cache listens to post_save
        product.attribute_values.all().delete()
        for item in values:
            if item.get('value') and item['value'].strip():
                ProductAttributeValue.objects.create(
                    product=product, attribute=item['attribute'], value=item['value'].strip()
                )

    @transaction.atomic
    def create(self, validated_data):
        values = validated_data.pop('attribute_values', [])
        product = Product.objects.create(**validated_data)
        self._save_attribute_values(product, values)
        return product

    @transaction.atomic
    def update(self, instance, validated_data):
        values = validated_data.pop('attribute_values', None)
        for key, value in validated_data.items():
            setattr(instance, key, value)
        instance.save()
        if values is not None:
            self._save_attribute_values(instance, values)
        return instance


class ProductListSerializer(serializers.ModelSerializer):
    """Lightweight serializer for product lists and pickers"""
    category_name = serializers.CharField(source='category.name', read_only=True)
    available_quantity = serializers.IntegerField(read_only=True)

    class Meta:
        model = Product
        fields = [
            'id', 'name', 'article', 'category', 'category_name', 'warehouse_type',
            'stock_quantity', 'quantity_for_stock', 'reserved_quantity', 'available_quantity'
        ]
