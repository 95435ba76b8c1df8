from rest_framework import serializers
from .models import WriteOffAct, WriteOffReason


class WriteOffActSerializer(serializers.ModelSerializer):
    product_name = serializers.CharField(source='product.name', read_only=True)
    article = serializers.CharField(source='product.article', read_only=True)
    warehouse_name = serializers.CharField(source='warehouse.name', read_only=True, default=None)
    responsible_employee_name = serializers.SerializerMethodField()
    reason_display = serializers.CharField(source='get_reason_display', read_only=True)
    status_display = serializers.CharField(source='get_status_display', read_only=True)

    class Meta:
        model = WriteOffAct
        fields = [
            'id', 'act_number', 'act_date', 'product', 'product_name', 'article', 'quantity',
            'reason', 'reason_display', 'status', 'status_display', 'comment', 'director_comment',
            'responsible_employee', 'responsible_employee_name', 'warehouse', 'warehouse_name'
        ]
        read_only_fields = fields

    def get_responsible_employee_name(self, obj):
        return obj.responsible_employee.get_short_name() if obj.responsible_employee else None


class WriteOffActInputSerializer(serializers.Serializer):
    product = serializers.IntegerField()
    warehouse = serializers.IntegerField()
    quantity = serializers.IntegerField()
    reason = serializers.ChoiceField(choices=WriteOffReason.choices)
    comment = serializers.CharField(required=False, allow_blank=True, default='')


class RejectInputSerializer(serializers.Serializer):
    director_comment = serializers.CharField(required=False, allow_blank=True, default='')
