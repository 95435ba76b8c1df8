# Generated manually
import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('catalog', '0001_initial'),
        ('parties', '0001_initial'),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='Delivery',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('delivery_date', models.DateField()),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('supplier', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='deliveries', to='parties.supplier')),
            ],
            options={
                'db_table': 'deliveries',
                'ordering': ['-delivery_date', '-id'],
                'verbose_name_plural': 'Deliveries',
            },
        ),
        migrations.CreateModel(
            name='Supply',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('purchase_price', models.DecimalField(decimal_places=2, max_digits=12)),
                ('quantity', models.PositiveIntegerField()),
                ('deficit_quantity', models.PositiveIntegerField(default=0)),
                ('deficit_reason', models.TextField(blank=True, null=True)),
                ('delivery', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='supplies', to='purchasing.delivery')),
                ('product', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='supplies', to='catalog.product')),
            ],
            options={
                'db_table': 'supplies',
                'verbose_name_plural': 'Supplies',
            },
        ),
        migrations.CreateModel(
            name='RequestForDelivery',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('request_date', models.DateTimeField(auto_now_add=True)),
                ('received_date', models.DateField(blank=True, null=True)),
                ('status', models.CharField(choices=[('DRAFT', 'Draft'), ('PENDING_DIRECTOR', 'Waiting for director approval'), ('REJECTED_BY_DIRECTOR', 'Rejected by director'), ('PENDING_ACCOUNTANT', 'Waiting for accountant approval'), ('REJECTED_BY_ACCOUNTANT', 'Rejected by accountant'), ('APPROVED', 'Approved'), ('PARTIALLY_RECEIVED', 'Partially received'), ('RECEIVED', 'Received'), ('CANCELLED', 'Cancelled')], default='DRAFT', max_length=30)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('delivery', models.OneToOneField(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='request', to='purchasing.delivery')),
                ('supplier', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='delivery_requests', to='parties.supplier')),
            ],
            options={
                'db_table': 'requests_for_delivery',
                'ordering': ['-request_date'],
                'indexes': [
                    models.Index(fields=['status'], name='idx_request_status'),
                ],
            },
        ),
        migrations.CreateModel(
            name='RequestedProduct',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('quantity', models.PositiveIntegerField()),
                ('product', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='requested_items', to='catalog.product')),
                ('request', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='requested_products', to='purchasing.requestfordelivery')),
            ],
            options={
                'db_table': 'requested_products',
                'unique_together': {('request', 'product')},
            },
        ),
        migrations.CreateModel(
            name='Comment',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('text', models.TextField()),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('author', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='request_comments', to=settings.AUTH_USER_MODEL)),
                ('request', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='comments', to='purchasing.requestfordelivery')),
            ],
            options={
                'db_table': 'request_comments',
                'ordering': ['created_at'],
            },
        ),
    ]
