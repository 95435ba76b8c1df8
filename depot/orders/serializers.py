from rest_framework import serializers
from .models import ClientOrder, OrderedProduct


class OrderedProductSerializer(serializers.ModelSerializer):
    product_name = serializers.CharField(source='product.name', read_only=True)
    article = serializers.CharField(source='product.article', read_only=True)

    class Meta:
        model = OrderedProduct
        fields = ['id', 'product', 'product_name', 'article', 'quantity', 'price', 'total_price']
        read_only_fields = ['total_price']


class ClientOrderSerializer(serializers.ModelSerializer):
    client_name = serializers.CharField(source='client.get_display_name', read_only=True)
    responsible_employee_name = serializers.SerializerMethodField()
    status_display = serializers.CharField(source='get_status_display', read_only=True)
    ordered_products = OrderedProductSerializer(many=True, read_only=True)

    class Meta:
        model = ClientOrder
        fields = [
            'id', 'order_number', 'order_date', 'delivery_date', 'actual_delivery_date',
            'status', 'status_display', 'total_amount', 'comment', 'contract_file',
            'client', 'client_name', 'responsible_employee', 'responsible_employee_name',
            'ordered_products'
        ]

    def get_responsible_employee_name(self, obj):
        return obj.responsible_employee.get_short_name() if obj.responsible_employee else None


class ClientOrderListSerializer(serializers.ModelSerializer):
    """Lightweight serializer for order lists"""
    client_name = serializers.CharField(source='client.organization_name', read_only=True)

    class Meta:
        model = ClientOrder
        fields = ['id', 'order_number', 'order_date', 'delivery_date', 'status', 'total_amount', 'client', 'client_name']


class OrderItemInputSerializer(serializers.Serializer):
    product = serializers.IntegerField()
    quantity = serializers.IntegerField()
    price = serializers.DecimalField(max_digits=12, decimal_places=2)


class ClientOrderInputSerializer(serializers.Serializer):
    """Input for creating or editing an order"""
    client = serializers.IntegerField()
    delivery_date = serializers.DateField(required=False, allow_null=True, default=None)
    comment = serializers.CharField(required=False, allow_blank=True, default='')
    items = OrderItemInputSerializer(many=True)
    contract_file = serializers.FileField(required=False, allow_null=True, default=None)
