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
            name='BuddyRequest',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('status', models.CharField(choices=[('pending', 'Pending'), ('approved', 'Approved'), ('rejected', 'Rejected'), ('pending_cancel', 'Pending cancel'), ('cancelled', 'Cancelled')], default='pending', max_length=20)),
                ('cutoff_date', models.DateTimeField()),
                ('flight_date', models.DateField(blank=True, null=True)),
                ('ups_next_day', models.BooleanField(default=False)),
                ('shipping_address_snapshot', models.TextField(blank=True)),
                ('order_count', models.PositiveIntegerField(default=0)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('decided_at', models.DateTimeField(blank=True, null=True)),
                ('cancel_requested_at', models.DateTimeField(blank=True, null=True)),
                ('closed_at', models.DateTimeField(blank=True, null=True)),
                ('closed_reason', models.CharField(blank=True, max_length=20)),
                ('joiner', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='buddy_requests_sent', to=settings.AUTH_USER_MODEL)),
                ('receiver', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='buddy_requests_received', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'db_table': 'buddy_requests',
                'ordering': ['-created_at'],
                'indexes': [
                    models.Index(fields=['receiver', 'status'], name='buddy_reque_receive_5c0d2a_idx'),
                    models.Index(fields=['joiner', 'status'], name='buddy_reque_joiner__9e41b7_idx'),
                ],
                'constraints': [
                    models.UniqueConstraint(condition=models.Q(('status__in', ['pending', 'approved', 'pending_cancel'])), fields=('joiner',), name='uniq_open_buddy_request_per_joiner'),
                ],
            },
        ),
    ]
