import django.core.validators
import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
        ('clinics', '0001_initial'),
    ]

    operations = [
        migrations.CreateModel(
            name='BranchPolicy',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('reschedule_time_limit_hours', models.PositiveIntegerField(blank=True, default=24, null=True, validators=[django.core.validators.MaxValueValidator(720)])),
                ('cancellation_hours', models.PositiveIntegerField(default=24)),
                ('max_advance_booking_days', models.PositiveIntegerField(default=30)),
                ('max_reschedules', models.PositiveIntegerField(default=3)),
                ('reminders_enabled', models.BooleanField(default=True)),
                ('reminder_hours', models.PositiveIntegerField(default=24)),
                ('version', models.PositiveIntegerField(default=1)),
                ('branch', models.OneToOneField(on_delete=django.db.models.deletion.CASCADE, related_name='policy', to='clinics.branch')),
                ('created_by', models.ForeignKey(blank=True, editable=False, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='created_branchpolicys', to=settings.AUTH_USER_MODEL)),
                ('updated_by', models.ForeignKey(blank=True, editable=False, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='updated_branchpolicys', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'verbose_name': 'Branch Policy',
                'verbose_name_plural': 'Branch Policies',
                'db_table': 'branch_policies',
            },
        ),
    ]
