# Generated manually
import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('catalog', '0001_initial'),
    ]

    operations = [
        migrations.CreateModel(
            name='Warehouse',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(max_length=200, unique=True)),
                ('type', models.CharField(choices=[('REGULAR', 'Regular'), ('REFRIGERATOR', 'Refrigerator')], default='REGULAR', max_length=20)),
                ('total_volume', models.FloatField(default=0, help_text='Total volume in litres')),
                ('address', models.TextField(blank=True)),
                ('latitude', models.FloatField(blank=True, null=True)),
                ('longitude', models.FloatField(blank=True, null=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
            ],
            options={
                'db_table': 'warehouses',
                'ordering': ['name'],
            },
        ),
        migrations.CreateModel(
            name='Shelf',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('code', models.CharField(max_length=20)),
                ('warehouse', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='shelves', to='locations.warehouse')),
            ],
            options={
                'db_table': 'shelves',
                'ordering': ['warehouse', 'id'],
                'verbose_name_plural': 'shelves',
                'unique_together': {('code', 'warehouse')},
            },
        ),
        migrations.CreateModel(
            name='StorageZone',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('label', models.CharField(max_length=50)),
                ('length', models.FloatField()),
                ('width', models.FloatField()),
                ('height', models.FloatField()),
                ('shelf', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='zones', to='locations.shelf')),
            ],
            options={
                'db_table': 'storage_zones',
                'ordering': ['shelf', 'id'],
            },
        ),
        migrations.CreateModel(
            name='ZoneProduct',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('quantity', models.PositiveIntegerField(default=0)),
                ('orientation', models.CharField(choices=[('STANDARD', 'Standard'), ('ROTATED_90', 'Rotated 90 degrees'), ('LAY_ON_SIDE', 'Laid on side'), ('ROTATE_AND_LAY', 'Rotated and laid on side')], default='STANDARD', max_length=20)),
                ('product', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='zone_products', to='catalog.product')),
                ('zone', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='products', to='locations.storagezone')),
            ],
            options={
                'db_table': 'zone_products',
                'unique_together': {('zone', 'product')},
            },
        ),
    ]
