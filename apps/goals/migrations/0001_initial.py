# Generated manually for the pact ledger goals app

import uuid
from decimal import Decimal
from django.conf import settings
from django.core.validators import MinValueValidator
from django.db import migrations, models
import django.db.models.deletion
import django.utils.timezone


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('groups', '0001_initial'),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='Goal',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('name', models.CharField(max_length=200)),
                ('description', models.TextField(blank=True)),
                ('emoji', models.CharField(default='🎯', max_length=16)),
                ('goal_type', models.CharField(choices=[('frequency', 'Every N days'), ('daily', 'Daily'), ('weekly', 'Weekly')], default='frequency', max_length=20)),
                ('frequency_days', models.PositiveIntegerField(default=1, validators=[MinValueValidator(1)])),
                ('penalty_amount', models.DecimalField(decimal_places=2, max_digits=10, validators=[MinValueValidator(Decimal('0.00'))])),
                ('is_active', models.BooleanField(default=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('created_by', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='created_goals', to=settings.AUTH_USER_MODEL)),
                ('group', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='goals', to='groups.group')),
            ],
            options={
                'db_table': 'goals',
                'ordering': ['created_at'],
                'indexes': [
                    models.Index(fields=['group', 'is_active'], name='goals_group_active_idx'),
                    models.Index(fields=['created_by'], name='goals_created_by_idx'),
                ],
                'constraints': [
                    models.CheckConstraint(check=models.Q(('frequency_days__gte', 1)), name='goal_frequency_days_positive'),
                ],
            },
        ),
        migrations.CreateModel(
            name='GoalCompletion',
            fields=[
                ('id', models.BigAutoField(primary_key=True, serialize=False)),
                ('completed_at', models.DateTimeField(default=django.utils.timezone.now)),
                ('proof_photo_url', models.URLField(blank=True, max_length=500)),
                ('notes', models.TextField(blank=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('goal', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='completions', to='goals.goal')),
                ('user', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='goal_completions', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'db_table': 'goal_completions',
                'ordering': ['-completed_at', '-id'],
                'indexes': [
                    models.Index(fields=['goal', 'user', 'completed_at'], name='completions_goal_user_idx'),
                    models.Index(fields=['completed_at'], name='completions_completed_idx'),
                ],
            },
        ),
    ]
