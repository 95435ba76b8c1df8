from rest_framework import serializers
from .models import EquipmentType, WarehouseEquipment


class EquipmentTypeSerializer(serializers.ModelSerializer):
    equipment_count = serializers.SerializerMethodField()

    class Meta:
        model = EquipmentType
        fields = ['id', 'name', 'equipment_count']

    def get_equipment_count(self, obj):
        return obj.equipment.count()

    def validate_name(self, value):
        value = value.strip()
        queryset = EquipmentType.objects.filter(name__iexact=value)
        if self.instance:
            queryset = queryset.exclude(pk=self.instance.pk)
        if queryset.exists():
            raise serializers.ValidationError(f"Equipment type '{value}' already exists")
        return value


class WarehouseEquipmentSerializer(serializers.ModelSerializer):
    equipment_type_name = serializers.CharField(source='equipment_type.name', read_only=True)
    warehouse_name = serializers.CharField(source='warehouse.name', read_only=True)
    status_display = serializers.CharField(source='get_status_display', read_only=True)
    expiration_date = serializers.DateField(read_only=True)
    is_expired = serializers.BooleanField(read_only=True)

    class Meta:
        model = WarehouseEquipment
        fields = [
            'id', 'name', 'serial_number', 'production_date', 'useful_life_years', 'expiration_date',
            'is_expired', 'equipment_type', 'equipment_type_name', 'status', 'status_display',
            'warehouse', 'warehouse_name', 'created_at', 'updated_at'
        ]
        read_only_fields = ['created_at', 'updated_at']

    def validate(self, attrs):
        name = attrs.get('name', getattr(self.instance, 'name', None))
        warehouse = attrs.get('warehouse', getattr(self.instance, 'warehouse', None))
        queryset = WarehouseEquipment.objects.filter(warehouse=warehouse, name=name)
        if self.instance:
            queryset = queryset.exclude(pk=self.instance.pk)
        if queryset.exists():
            raise serializers.ValidationError({'name': f"Equipment '{name}' already exists in warehouse '{warehouse.name}'"})
        return attrs
