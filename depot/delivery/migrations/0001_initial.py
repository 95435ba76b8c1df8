# Generated manually
import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('orders', '0001_initial'),
        ('parties', '0001_initial'),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='Vehicle',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('registration_number', models.CharField(max_length=20, unique=True)),
                ('brand', models.CharField(max_length=100)),
                ('model', models.CharField(max_length=100)),
                ('year', models.PositiveIntegerField(blank=True, null=True)),
                ('vin', models.CharField(blank=True, max_length=17)),
                ('load_capacity', models.FloatField(blank=True, help_text='kg', null=True)),
                ('volume_capacity', models.FloatField(blank=True, help_text='m3', null=True)),
                ('type', models.CharField(choices=[('STANDARD', 'Standard'), ('REFRIGERATED', 'Refrigerated')], default='STANDARD', max_length=20)),
                ('status', models.CharField(choices=[('AVAILABLE', 'Available'), ('IN_USE', 'In use'), ('MAINTENANCE', 'Maintenance'), ('BROKEN', 'Broken'), ('DECOMMISSIONED', 'Decommissioned')], default='AVAILABLE', max_length=20)),
                ('current_mileage', models.PositiveIntegerField(default=0)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
            ],
            options={
                'db_table': 'vehicles',
                'ordering': ['brand', 'model'],
            },
        ),
        migrations.CreateModel(
            name='DeliveryTask',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('status', models.CharField(choices=[('PENDING', 'Pending'), ('LOADING', 'Loading'), ('LOADED', 'Loaded'), ('IN_TRANSIT', 'In transit'), ('DELIVERED', 'Delivered'), ('CANCELLED', 'Cancelled')], default='PENDING', max_length=20)),
                ('planned_start_time', models.DateTimeField(blank=True, null=True)),
                ('planned_end_time', models.DateTimeField(blank=True, null=True)),
                ('actual_start_time', models.DateTimeField(blank=True, null=True)),
                ('actual_end_time', models.DateTimeField(blank=True, null=True)),
                ('start_mileage', models.PositiveIntegerField(blank=True, null=True)),
                ('end_mileage', models.PositiveIntegerField(blank=True, null=True)),
                ('current_latitude', models.FloatField(blank=True, null=True)),
                ('current_longitude', models.FloatField(blank=True, null=True)),
                ('ttn_number', models.CharField(blank=True, max_length=50, null=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('client_order', models.OneToOneField(on_delete=django.db.models.deletion.PROTECT, related_name='delivery_task', to='orders.clientorder')),
                ('driver', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='delivery_tasks', to=settings.AUTH_USER_MODEL)),
                ('vehicle', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='delivery_tasks', to='delivery.vehicle')),
            ],
            options={
                'db_table': 'delivery_tasks',
                'ordering': ['-created_at'],
                'indexes': [
                    models.Index(fields=['status'], name='idx_delivery_task_status'),
                ],
            },
        ),
        migrations.CreateModel(
            name='RoutePoint',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('order_index', models.PositiveIntegerField()),
                ('point_type', models.CharField(choices=[('WAREHOUSE', 'Warehouse'), ('DELIVERY_ADDRESS', 'Delivery address'), ('CHECKPOINT', 'Checkpoint')], default='CHECKPOINT', max_length=20)),
                ('latitude', models.FloatField(blank=True, null=True)),
                ('longitude', models.FloatField(blank=True, null=True)),
                ('address', models.CharField(blank=True, max_length=500)),
                ('planned_arrival_time', models.DateTimeField(blank=True, null=True)),
                ('actual_arrival_time', models.DateTimeField(blank=True, null=True)),
                ('is_reached', models.BooleanField(default=False)),
                ('comment', models.TextField(blank=True)),
                ('delivery_task', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='route_points', to='delivery.deliverytask')),
            ],
            options={
                'db_table': 'route_points',
                'ordering': ['delivery_task', 'order_index'],
            },
        ),
        migrations.CreateModel(
            name='TTN',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('ttn_number', models.CharField(max_length=50, unique=True)),
                ('issue_date', models.DateTimeField(auto_now_add=True)),
                ('cargo_description', models.TextField(blank=True)),
                ('total_weight', models.FloatField(blank=True, null=True)),
                ('total_volume', models.FloatField(blank=True, null=True)),
                ('comment', models.TextField(blank=True)),
                ('delivery_task', models.OneToOneField(on_delete=django.db.models.deletion.CASCADE, related_name='ttn', to='delivery.deliverytask')),
                ('driver', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='ttns', to=settings.AUTH_USER_MODEL)),
                ('vehicle', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='ttns', to='delivery.vehicle')),
            ],
            options={
                'db_table': 'ttns',
                'ordering': ['-issue_date'],
                'verbose_name': 'TTN',
                'verbose_name_plural': 'TTNs',
            },
        ),
        migrations.CreateModel(
            name='AcceptanceAct',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('act_number', models.CharField(max_length=50, unique=True)),
                ('act_date', models.DateTimeField(auto_now_add=True)),
                ('client_representative', models.CharField(blank=True, max_length=255)),
                ('signed', models.BooleanField(default=False)),
                ('signed_at', models.DateTimeField(blank=True, null=True)),
                ('comment', models.TextField(blank=True)),
                ('client', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='acceptance_acts', to='parties.client')),
                ('client_order', models.OneToOneField(on_delete=django.db.models.deletion.CASCADE, related_name='acceptance_act', to='orders.clientorder')),
                ('delivered_by', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='acceptance_acts', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'db_table': 'acceptance_acts',
                'ordering': ['-act_date'],
            },
        ),
    ]
