import uuid
from django.conf import settings
from django.db import migrations, models
import django.db.models.deletion


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='ShipmentCycle',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('cutoff_date', models.DateTimeField(help_text='Checkout cutoff; joiners lapse after this moment')),
                ('flight_date', models.DateField(blank=True, null=True)),
                ('ups_next_day', models.BooleanField(default=False)),
                ('shipping_address', models.TextField(blank=True)),
                ('is_active', models.BooleanField(default=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('buyer', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='shipment_cycles', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'db_table': 'shipment_cycles',
                'ordering': ['-cutoff_date'],
                'indexes': [
                    models.Index(fields=['buyer', 'is_active'], name='shipment_cy_buyer_i_3d1f6c_idx'),
                ],
                'constraints': [
                    models.UniqueConstraint(condition=models.Q(('is_active', True)), fields=('buyer',), name='uniq_active_cycle_per_buyer'),
                ],
            },
        ),
        migrations.CreateModel(
            name='CycleOrder',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('reference', models.CharField(blank=True, max_length=64)),
                ('is_cancelled', models.BooleanField(default=False)),
                ('placed_at', models.DateTimeField(auto_now_add=True)),
                ('buyer', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='cycle_orders', to=settings.AUTH_USER_MODEL)),
                ('cycle', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='orders', to='shipments.shipmentcycle')),
            ],
            options={
                'db_table': 'cycle_orders',
                'ordering': ['-placed_at'],
                'indexes': [
                    models.Index(fields=['cycle', 'buyer'], name='cycle_order_cycle_i_8a2b4e_idx'),
                ],
            },
        ),
    ]
