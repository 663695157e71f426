import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


def audit_fields(name):
    return [
        ('created_at', models.DateTimeField(auto_now_add=True)),
        ('updated_at', models.DateTimeField(auto_now=True)),
        ('is_active', models.BooleanField(default=True)),
        ('deleted_at', models.DateTimeField(blank=True, editable=False, null=True)),
        ('created_by', models.ForeignKey(blank=True, editable=False, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name=f'created_{name}s', to=settings.AUTH_USER_MODEL)),
        ('updated_by', models.ForeignKey(blank=True, editable=False, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name=f'updated_{name}s', to=settings.AUTH_USER_MODEL)),
        ('deleted_by', models.ForeignKey(blank=True, editable=False, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name=f'deleted_{name}s', to=settings.AUTH_USER_MODEL)),
    ]


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='Branch',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(max_length=200)),
                ('code', models.CharField(max_length=20, unique=True)),
                ('address', models.TextField(blank=True)),
                ('phone', models.CharField(blank=True, max_length=20)),
                ('email', models.EmailField(blank=True, max_length=254)),
            ] + audit_fields('branch'),
            options={
                'verbose_name_plural': 'Branches',
                'db_table': 'branches',
                'ordering': ['name'],
                'indexes': [
                    models.Index(fields=['code'], name='branches_code_idx'),
                    models.Index(fields=['is_active'], name='branches_is_active_idx'),
                ],
            },
        ),
        migrations.CreateModel(
            name='Service',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(max_length=200)),
                ('description', models.TextField(blank=True)),
                ('duration_minutes', models.PositiveIntegerField(default=30)),
            ] + audit_fields('service'),
            options={
                'db_table': 'services',
                'ordering': ['name'],
            },
        ),
        migrations.CreateModel(
            name='ServicePoint',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(max_length=100)),
                ('description', models.TextField(blank=True)),
                ('branch', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='service_points', to='clinics.branch')),
            ] + audit_fields('servicepoint'),
            options={
                'db_table': 'service_points',
                'ordering': ['branch', 'name'],
                'indexes': [
                    models.Index(fields=['branch', 'is_active'], name='sp_branch_active_idx'),
                ],
            },
        ),
        migrations.CreateModel(
            name='ServicePointService',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('is_active', models.BooleanField(default=True)),
                ('service', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='service_point_links', to='clinics.service')),
                ('service_point', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='service_links', to='clinics.servicepoint')),
            ],
            options={
                'db_table': 'service_point_services',
                'constraints': [
                    models.UniqueConstraint(fields=('service_point', 'service'), name='unique_service_per_service_point'),
                ],
            },
        ),
        migrations.AddField(
            model_name='servicepoint',
            name='services',
            field=models.ManyToManyField(blank=True, related_name='service_points', through='clinics.ServicePointService', to='clinics.service'),
        ),
        migrations.CreateModel(
            name='ServiceSchedule',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('day_of_week', models.PositiveSmallIntegerField(choices=[(0, 'Sunday'), (1, 'Monday'), (2, 'Tuesday'), (3, 'Wednesday'), (4, 'Thursday'), (5, 'Friday'), (6, 'Saturday')])),
                ('start_time', models.TimeField()),
                ('end_time', models.TimeField()),
                ('service', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='schedules', to='clinics.service')),
            ] + audit_fields('serviceschedule'),
            options={
                'db_table': 'service_schedules',
                'ordering': ['service', 'day_of_week', 'start_time'],
                'indexes': [
                    models.Index(fields=['service', 'day_of_week', 'is_active'], name='sched_service_day_active_idx'),
                ],
            },
        ),
    ]
