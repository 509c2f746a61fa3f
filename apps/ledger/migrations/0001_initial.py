# Generated manually for the pact ledger ledger app

import uuid
from decimal import Decimal
from django.conf import settings
from django.core.validators import MinValueValidator
from django.db import migrations, models
import django.db.models.deletion


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('groups', '0001_initial'),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='FailureEvent',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('description', models.TextField(blank=True)),
                ('proof_photo_url', models.URLField(blank=True, max_length=500)),
                ('penalty_amount', models.DecimalField(decimal_places=2, max_digits=10)),
                ('transactions_created', models.PositiveIntegerField(default=0)),
                ('total_debt', models.DecimalField(decimal_places=2, default=Decimal('0.00'), max_digits=12)),
                ('idempotency_key', models.CharField(blank=True, max_length=64, null=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('group', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='failures', to='groups.group')),
                ('user', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='failures', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'db_table': 'failure_events',
                'ordering': ['-created_at'],
                'indexes': [
                    models.Index(fields=['group', 'created_at'], name='failures_group_created_idx'),
                    models.Index(fields=['user', 'created_at'], name='failures_user_created_idx'),
                ],
                'constraints': [
                    models.UniqueConstraint(fields=('group', 'user', 'idempotency_key'), name='unique_failure_idempotency_key'),
                ],
            },
        ),
        migrations.CreateModel(
            name='Transaction',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('amount', models.DecimalField(decimal_places=2, max_digits=10, validators=[MinValueValidator(Decimal('0.01'))])),
                ('status', models.CharField(choices=[('pending', 'Pending'), ('paid', 'Paid')], default='pending', max_length=20)),
                ('description', models.TextField(blank=True)),
                ('proof_photo_url', models.URLField(blank=True, max_length=500)),
                ('settled_at', models.DateTimeField(blank=True, null=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('failure', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.CASCADE, related_name='transactions', to='ledger.failureevent')),
                ('from_user', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='debts', to=settings.AUTH_USER_MODEL)),
                ('group', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='transactions', to='groups.group')),
                ('settled_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='settled_transactions', to=settings.AUTH_USER_MODEL)),
                ('to_user', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='credits', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'db_table': 'transactions',
                'ordering': ['-created_at'],
                'indexes': [
                    models.Index(fields=['group', 'status'], name='tx_group_status_idx'),
                    models.Index(fields=['from_user', 'status'], name='tx_from_status_idx'),
                    models.Index(fields=['to_user', 'status'], name='tx_to_status_idx'),
                    models.Index(fields=['created_at'], name='tx_created_idx'),
                ],
                'constraints': [
                    models.CheckConstraint(check=models.Q(('amount__gt', 0)), name='transaction_amount_positive'),
                ],
            },
        ),
    ]
