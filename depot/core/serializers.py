from rest_framework import serializers
from django.contrib.auth.password_validation import validate_password
from . import roles
from .models import User, AuditLog


class UserSerializer(serializers.ModelSerializer):
    full_name = serializers.CharField(source='get_full_name', read_only=True)
    short_name = serializers.CharField(source='get_short_name', read_only=True)
    role = serializers.SerializerMethodField()

    class Meta:
        model = User
        fields = [
            'id', 'username', 'email', 'first_name', 'last_name', 'patronymic_name', 'full_name', 'short_name',
            'phone', 'is_active', 'need_change_pass', 'role', 'created_at', 'updated_at'
        ]
        read_only_fields = fields

    def get_role(self, obj):
        return roles.get_employee_role(obj)


class EmployeeWriteSerializer(serializers.ModelSerializer):
    """Create or edit an employee; the role is a ROLE_EMPLOYEE_* group name"""
    role = serializers.ChoiceField(choices=roles.EMPLOYEE_ROLES, write_only=True)
    password = serializers.CharField(write_only=True, required=False, validators=[validate_password])

    class Meta:
        model = User
        fields = ['username', 'first_name', 'last_name', 'patronymic_name', 'email', 'phone', 'role', 'password']

    def validate_username(self, value):
        queryset = User.objects.filter(username=value)
        if self.instance:
            queryset = queryset.exclude(pk=self.instance.pk)
        if queryset.exists():
            raise serializers.ValidationError(f"Username '{value}' is already taken")
        return value

    def validate(self, attrs):
        if self.instance is None and not attrs.get('password'):
            raise serializers.ValidationError({'password': 'This field is required.'})
        return attrs

    def create(self, validated_data):
        role = validated_data.pop('role')
        password = validated_data.pop('password')
        user = User(**validated_data, is_active=True, need_change_pass=True)
        user.set_password(password)
        user.save()
        roles.assign_role(user, role)
        return user

    def update(self, instance, validated_data):
        role = validated_data.pop('role', None)
        validated_data.pop('password', None)
        for attr, value in validated_data.items():
            setattr(instance, attr, value)
        instance.save()
        if role:
            roles.assign_role(instance, role)
        return instance


class PasswordResetSerializer(serializers.Serializer):
    password = serializers.CharField(write_only=True, validators=[validate_password])


class ChangePasswordSerializer(serializers.Serializer):
    old_password = serializers.CharField(write_only=True)
    new_password = serializers.CharField(write_only=True, validators=[validate_password])
    new_password_confirm = serializers.CharField(write_only=True)

    def validate_old_password(self, value):
        if not self.context['request'].user.check_password(value):
            raise serializers.ValidationError('Current password is incorrect')
        return value

    def validate(self, attrs):
        if attrs['new_password'] != attrs['new_password_confirm']:
            raise serializers.ValidationError({'new_password': "Passwords don't match"})
        return attrs


class AuditLogSerializer(serializers.ModelSerializer):
    username = serializers.CharField(source='user.username', read_only=True, default=None)

    class Meta:
        model = AuditLog
        fields = ['id', 'user', 'username', 'action', 'model_name', 'object_id',
                  'object_reference', 'changes', 'ip_address', 'created_at']
