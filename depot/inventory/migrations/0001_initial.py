# Generated manually
import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('catalog', '0001_initial'),
        ('locations', '0001_initial'),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='WriteOffAct',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('act_number', models.CharField(max_length=50, unique=True)),
                ('act_date', models.DateTimeField(auto_now_add=True)),
                ('quantity', models.PositiveIntegerField()),
                ('reason', models.CharField(choices=[('DEFECT', 'Defect'), ('EXPIRED', 'Expired'), ('DAMAGE', 'Damaged in storage'), ('LOSS', 'Shortage'), ('OTHER', 'Other')], max_length=20)),
                ('status', models.CharField(choices=[('PENDING_DIRECTOR', 'Waiting for director signature'), ('APPROVED', 'Approved'), ('REJECTED', 'Rejected')], default='PENDING_DIRECTOR', max_length=20)),
                ('comment', models.TextField(blank=True)),
                ('director_comment', models.TextField(blank=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('product', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='write_off_acts', to='catalog.product')),
                ('responsible_employee', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='write_off_acts', to=settings.AUTH_USER_MODEL)),
                ('warehouse', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='write_off_acts', to='locations.warehouse')),
            ],
            options={
                'db_table': 'write_off_acts',
                'ordering': ['-act_date'],
                'indexes': [
                    models.Index(fields=['status'], name='idx_write_off_status'),
                ],
            },
        ),
    ]
