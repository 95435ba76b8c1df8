from rest_framework import serializers
from .models import Vehicle, DeliveryTask, RoutePoint, TTN, AcceptanceAct


class VehicleSerializer(serializers.ModelSerializer):
    full_name = serializers.CharField(source='get_full_name', read_only=True)

    class Meta:
        model = Vehicle
        fields = [
            'id', 'registration_number', 'brand', 'model', 'full_name', 'year', 'vin',
            'load_capacity', 'volume_capacity', 'type', 'status', 'current_mileage',
            'created_at', 'updated_at'
        ]
        read_only_fields = ['created_at', 'updated_at']

    def validate_registration_number(self, value):
        value = value.strip().upper()
        queryset = Vehicle.objects.filter(registration_number__iexact=value)
        if self.instance:
            queryset = queryset.exclude(pk=self.instance.pk)
        if queryset.exists():
            raise serializers.ValidationError("A vehicle with this registration number already exists")
        return value


class RoutePointSerializer(serializers.ModelSerializer):
    class Meta:
        model = RoutePoint
        fields = [
            'id', 'order_index', 'point_type', 'latitude', 'longitude', 'address',
            'planned_arrival_time', 'actual_arrival_time', 'is_reached', 'comment'
        ]
        read_only_fields = ['order_index', 'actual_arrival_time', 'is_reached']


class TTNSerializer(serializers.ModelSerializer):
    vehicle_name = serializers.CharField(source='vehicle.get_full_name', read_only=True)
    driver_name = serializers.CharField(source='driver.get_short_name', read_only=True)
    order_number = serializers.CharField(source='delivery_task.client_order.order_number', read_only=True)

    class Meta:
        model = TTN
        fields = [
            'id', 'ttn_number', 'issue_date', 'delivery_task', 'order_number', 'cargo_description',
            'total_weight', 'total_volume', 'comment', 'vehicle', 'vehicle_name', 'driver', 'driver_name'
        ]
        read_only_fields = ['ttn_number', 'issue_date', 'delivery_task', 'vehicle', 'driver']


class AcceptanceActSerializer(serializers.ModelSerializer):
    client_name = serializers.CharField(source='client.organization_name', read_only=True)
    order_number = serializers.CharField(source='client_order.order_number', read_only=True)
    delivered_by_name = serializers.CharField(source='delivered_by.get_short_name', read_only=True)

    class Meta:
        model = AcceptanceAct
        fields = [
            'id', 'act_number', 'act_date', 'client_order', 'order_number', 'client', 'client_name',
            'delivered_by', 'delivered_by_name', 'client_representative', 'signed', 'signed_at', 'comment'
        ]
        read_only_fields = fields


class DeliveryTaskSerializer(serializers.ModelSerializer):
    order_number = serializers.CharField(source='client_order.order_number', read_only=True)
    client_name = serializers.CharField(source='client_order.client.organization_name', read_only=True)
    delivery_address = serializers.CharField(source='client_order.client.delivery_address', read_only=True)
    driver_name = serializers.CharField(source='driver.get_short_name', read_only=True)
    vehicle_name = serializers.CharField(source='vehicle.get_full_name', read_only=True)
    total_mileage = serializers.IntegerField(read_only=True)
    route_points = RoutePointSerializer(many=True, read_only=True)

    class Meta:
        model = DeliveryTask
        fields = [
            'id', 'client_order', 'order_number', 'client_name', 'delivery_address',
            'driver', 'driver_name', 'vehicle', 'vehicle_name', 'status',
            'planned_start_time', 'planned_end_time', 'actual_start_time', 'actual_end_time',
            'start_mileage', 'end_mileage', 'total_mileage', 'current_latitude', 'current_longitude',
            'ttn_number', 'route_points', 'created_at'
        ]
        read_only_fields = fields


class DeliveryTaskCreateSerializer(serializers.Serializer):
    client_order = serializers.IntegerField()
    driver = serializers.IntegerField()
    vehicle = serializers.IntegerField()
    planned_start_time = serializers.DateTimeField(required=False, allow_null=True, default=None)
    planned_end_time = serializers.DateTimeField(required=False, allow_null=True, default=None)
    route_points = RoutePointSerializer(many=True, required=False, default=list)

    def validate(self, attrs):
        start, end = attrs.get('planned_start_time'), attrs.get('planned_end_time')
        if start and end and end < start:
            raise serializers.ValidationError({'planned_end_time': 'Must be after the planned start time'})
        return attrs


class DocumentInputSerializer(serializers.Serializer):
    """TTN fields and the acceptance act comment"""
    cargo_description = serializers.CharField(required=False, allow_blank=True, default='')
    total_weight = serializers.FloatField(required=False, allow_null=True, default=None, min_value=0)
    total_volume = serializers.FloatField(required=False, allow_null=True, default=None, min_value=0)
    comment = serializers.CharField(required=False, allow_blank=True, default='')


class CompleteDeliverySerializer(serializers.Serializer):
    end_mileage = serializers.IntegerField(min_value=0)
    client_representative = serializers.CharField(required=False, allow_blank=True, default='')
    comment = serializers.CharField(required=False, allow_blank=True, default='')
