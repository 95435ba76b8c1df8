from django.contrib import admin
from .models import Visitor


@admin.register(Visitor)
class VisitorAdmin(admin.ModelAdmin):
    list_display = ['user', 'sex', 'date_birthday', 'mobile_number']
    list_filter = ['sex']
    search_fields = ['user__username', 'user__last_name', 'mobile_number']
