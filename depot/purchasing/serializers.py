from rest_framework import serializers
from .models import RequestForDelivery, RequestedProduct, Comment, Delivery, Supply


class RequestedProductSerializer(serializers.ModelSerializer):
    product_name = serializers.CharField(source='product.name', read_only=True)
    article = serializers.CharField(source='product.article', read_only=True)

    class Meta:
        model = RequestedProduct
        fields = ['id', 'product', 'product_name', 'article', 'quantity']


class CommentSerializer(serializers.ModelSerializer):
    author_name = serializers.CharField(source='author.get_short_name', read_only=True)

    class Meta:
        model = Comment
        fields = ['id', 'author', 'author_name', 'text', 'created_at']
        read_only_fields = fields


class RequestForDeliverySerializer(serializers.ModelSerializer):
    supplier_name = serializers.CharField(source='supplier.name', read_only=True)
    status_display = serializers.CharField(source='get_status_display', read_only=True)
    requested_products = RequestedProductSerializer(many=True, read_only=True)
    comments = CommentSerializer(many=True, read_only=True)

    class Meta:
        model = RequestForDelivery
        fields = [
            'id', 'supplier', 'supplier_name', 'request_date', 'received_date', 'status', 'status_display',
            'delivery', 'requested_products', 'comments'
        ]
        read_only_fields = fields


class RequestedProductInputSerializer(serializers.Serializer):
    product = serializers.IntegerField(required=False, allow_null=True)
    quantity = serializers.IntegerField(required=False, default=0)


class RequestInputSerializer(serializers.Serializer):
    """Supplier and product lines of a new or edited request"""
    supplier = serializers.IntegerField()
    requested_products = RequestedProductInputSerializer(many=True)


class CommentInputSerializer(serializers.Serializer):
    comment = serializers.CharField(required=False, allow_blank=True, default='')


class SupplySerializer(serializers.ModelSerializer):
    product_name = serializers.CharField(source='product.name', read_only=True)
    total_price = serializers.DecimalField(max_digits=14, decimal_places=2, read_only=True)

    class Meta:
        model = Supply
        fields = [
            'id', 'product', 'product_name', 'purchase_price', 'quantity', 'deficit_quantity',
            'deficit_reason', 'total_price'
        ]
        read_only_fields = fields


class DeliverySerializer(serializers.ModelSerializer):
    supplier_name = serializers.CharField(source='supplier.name', read_only=True)
    supplies = SupplySerializer(many=True, read_only=True)
    total_cost = serializers.DecimalField(max_digits=14, decimal_places=2, read_only=True)
    request_id = serializers.SerializerMethodField()

    class Meta:
        model = Delivery
        fields = ['id', 'supplier', 'supplier_name', 'delivery_date', 'total_cost', 'request_id', 'supplies']
        read_only_fields = fields

    def get_request_id(self, obj):
        request_for_delivery = getattr(obj, 'request', None)
        return request_for_delivery.pk if request_for_delivery else None


class SupplyInputSerializer(serializers.Serializer):
    product = serializers.IntegerField()
    quantity = serializers.IntegerField(min_value=0)
    purchase_price = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=0)
    deficit_reason = serializers.CharField(required=False, allow_blank=True, allow_null=True, default='')


class DeliveryInputSerializer(serializers.Serializer):
    request = serializers.IntegerField()
    delivery_date = serializers.DateField()
    supplies = SupplyInputSerializer(many=True)
