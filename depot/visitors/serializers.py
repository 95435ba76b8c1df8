import datetime
from django.contrib.auth import get_user_model
from django.contrib.auth.password_validation import validate_password
from django.utils import timezone
from rest_framework import serializers
from .models import Visitor

User = get_user_model()

MINIMUM_AGE_YEARS = 14


def latest_allowed_birthday(today=None):
    today = today or timezone.localdate()
    try:
        return today.replace(year=today.year - MINIMUM_AGE_YEARS)
    except ValueError:
        return datetime.date(today.year - MINIMUM_AGE_YEARS, 2, 28)


def _validate_birthday(value):
    if value > latest_allowed_birthday():
        raise serializers.ValidationError(f'Visitors must be at least {MINIMUM_AGE_YEARS} years old')
    return value


class VisitorSerializer(serializers.ModelSerializer):
    id = serializers.IntegerField(source='user.id', read_only=True)
    username = serializers.CharField(source='user.username', read_only=True)
    first_name = serializers.CharField(source='user.first_name', read_only=True)
    last_name = serializers.CharField(source='user.last_name', read_only=True)
    patronymic_name = serializers.CharField(source='user.patronymic_name', read_only=True)
    is_active = serializers.BooleanField(source='user.is_active', read_only=True)
    need_change_pass = serializers.BooleanField(source='user.need_change_pass', read_only=True)
    date_of_registration = serializers.DateTimeField(source='user.created_at', read_only=True)

    class Meta:
        model = Visitor
        fields = [
            'id', 'username', 'last_name', 'first_name', 'patronymic_name', 'sex', 'date_birthday',
            'mobile_number', 'is_active', 'need_change_pass', 'date_of_registration'
        ]
        read_only_fields = fields


class RegistrationSerializer(serializers.Serializer):
    last_name = serializers.CharField(max_length=150)
    first_name = serializers.CharField(max_length=150)
    patronymic_name = serializers.CharField(max_length=150, required=False, allow_blank=True, default='')
    sex = serializers.ChoiceField(choices=Visitor.SEX_CHOICES)
    date_birthday = serializers.DateField(validators=[_validate_birthday])
    username = serializers.EmailField()
    password = serializers.CharField(write_only=True, validators=[validate_password])
    password_confirm = serializers.CharField(write_only=True)
    mobile_number = serializers.CharField(max_length=20, required=False, allow_blank=True, default='')

    def validate_username(self, value):
        if User.objects.filter(username=value).exists():
            raise serializers.ValidationError(f"Username '{value}' is already taken")
        return value

    def validate(self, attrs):
        if attrs['password'] != attrs['password_confirm']:
            raise serializers.ValidationError({'password': "Passwords don't match"})
        return attrs


class ProfileSerializer(serializers.Serializer):
    last_name = serializers.CharField(max_length=150)
    first_name = serializers.CharField(max_length=150)
    patronymic_name = serializers.CharField(max_length=150, required=False, allow_blank=True, default='')
    sex = serializers.ChoiceField(choices=Visitor.SEX_CHOICES)
    date_birthday = serializers.DateField(validators=[_validate_birthday])
    username = serializers.EmailField()
    mobile_number = serializers.CharField(max_length=20, required=False, allow_blank=True, default='')

    def validate_username(self, value):
        user = self.context['request'].user
        if User.objects.filter(username=value).exclude(pk=user.pk).exists():
            raise serializers.ValidationError(f"Username '{value}' is already taken")
        return value


class CodeSerializer(serializers.Serializer):
    code = serializers.CharField(max_length=20)


class ResetPasswordSerializer(serializers.Serializer):
    username = serializers.EmailField()
