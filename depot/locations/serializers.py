from rest_framework import serializers
from depot.catalog.models import WarehouseType
from .models import Warehouse, Shelf, StorageZone, ZoneProduct


class ZoneProductSerializer(serializers.ModelSerializer):
    product_name = serializers.CharField(source='product.name', read_only=True)
    article = serializers.CharField(source='product.article', read_only=True)
    total_volume = serializers.FloatField(read_only=True)

    class Meta:
        model = ZoneProduct
        fields = ['id', 'product', 'product_name', 'article', 'quantity', 'orientation', 'total_volume']


class StorageZoneSerializer(serializers.ModelSerializer):
    capacity_volume = serializers.FloatField(read_only=True)
    occupancy_percentage = serializers.FloatField(read_only=True)

    class Meta:
        model = StorageZone
        fields = ['id', 'label', 'length', 'width', 'height', 'shelf', 'capacity_volume', 'occupancy_percentage']

    def validate(self, attrs):
        for field in ('length', 'width', 'height'):
            value = attrs.get(field, getattr(self.instance, field, None))
            if value is not None and value <= 0:
                raise serializers.ValidationError({field: 'Must be greater than zero'})
        return attrs


class ShelfSerializer(serializers.ModelSerializer):
    zone_count = serializers.SerializerMethodField()

    class Meta:
        model = Shelf
        fields = ['id', 'code', 'warehouse', 'zone_count']

    def get_zone_count(self, obj):
        return obj.zones.count()


class WarehouseSerializer(serializers.ModelSerializer):
    shelf_count = serializers.SerializerMethodField()

    class Meta:
        model = Warehouse
        fields = ['id', 'name', 'type', 'total_volume', 'address', 'latitude', 'longitude',
                  'shelf_count', 'created_at', 'updated_at']
        read_only_fields = ['total_volume', 'created_at', 'updated_at']

    def get_shelf_count(self, obj):
        return obj.shelves.count()


class WarehouseCreateSerializer(serializers.Serializer):
    """Input for creating a warehouse together with its shelves and zones"""
    name = serializers.CharField(max_length=200)
    type = serializers.ChoiceField(choices=WarehouseType.choices)
    address = serializers.CharField(required=False, allow_blank=True, default='')
    latitude = serializers.FloatField(required=False, allow_null=True, default=None)
    longitude = serializers.FloatField(required=False, allow_null=True, default=None)
    shelf_count = serializers.IntegerField(min_value=1)
    zones_per_shelf = serializers.IntegerField(min_value=1)
    zone_length = serializers.FloatField(min_value=0.01)
    zone_width = serializers.FloatField(min_value=0.01)
    zone_height = serializers.FloatField(min_value=0.01)


class PlacementSerializer(serializers.Serializer):
    product = serializers.IntegerField()
    quantity = serializers.IntegerField(min_value=1)
    zone = serializers.IntegerField(required=False)


class MoveSerializer(serializers.Serializer):
    product = serializers.IntegerField()
    from_zone = serializers.IntegerField()
    to_zone = serializers.IntegerField()
    quantity = serializers.IntegerField(min_value=1)
