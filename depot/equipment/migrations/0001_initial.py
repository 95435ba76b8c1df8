# Generated manually
import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('locations', '0001_initial'),
    ]

    operations = [
        migrations.CreateModel(
            name='EquipmentType',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(max_length=255, unique=True)),
            ],
            options={
                'db_table': 'equipment_types',
                'ordering': ['name'],
            },
        ),
        migrations.CreateModel(
            name='WarehouseEquipment',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(max_length=255)),
                ('serial_number', models.CharField(blank=True, max_length=100)),
                ('production_date', models.DateField(blank=True, null=True)),
                ('useful_life_years', models.PositiveIntegerField(blank=True, null=True)),
                ('status', models.CharField(choices=[('IN_USE', 'In use'), ('UNDER_REPAIR', 'Under repair'), ('WRITTEN_OFF', 'Written off')], default='IN_USE', max_length=20)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('equipment_type', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='equipment', to='equipment.equipmenttype')),
                ('warehouse', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='equipment', to='locations.warehouse')),
            ],
            options={
                'db_table': 'warehouse_equipment',
                'ordering': ['name'],
                'unique_together': {('warehouse', 'name')},
            },
        ),
    ]
