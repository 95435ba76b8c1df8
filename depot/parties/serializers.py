from rest_framework import serializers
from .models import Client, Supplier


class ClientSerializer(serializers.ModelSerializer):
    display_name = serializers.CharField(source='get_display_name', read_only=True)

    class Meta:
        model = Client
        fields = [
            'id', 'organization_type', 'organization_name', 'display_name', 'inn', 'kpp', 'ogrn',
            'legal_address', 'delivery_address', 'delivery_latitude', 'delivery_longitude',
            'contact_person', 'phone', 'email', 'created_at', 'updated_at'
        ]
        read_only_fields = ['created_at', 'updated_at']

    def validate_inn(self, value):
        if not value.isdigit() or len(value) not in (10, 12):
            raise serializers.ValidationError("INN must contain 10 or 12 digits")
        return value


class SupplierSerializer(serializers.ModelSerializer):
    director_full_name = serializers.CharField(source='get_director_full_name', read_only=True)
    director_short_name = serializers.CharField(source='get_director_short_name', read_only=True)

    class Meta:
        model = Supplier
        fields = [
            'id', 'name', 'contact_info', 'address', 'inn', 'kpp', 'ogrn',
            'payment_account', 'bik', 'bank',
            'director_last_name', 'director_first_name', 'director_patronymic_name',
            'director_full_name', 'director_short_name', 'created_at', 'updated_at'
        ]
        read_only_fields = ['created_at', 'updated_at']

    def validate_inn(self, value):
        if not value.isdigit() or len(value) not in (10, 12):
            raise serializers.ValidationError("INN must contain 10 or 12 digits")
        return value
