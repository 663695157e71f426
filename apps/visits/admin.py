# apps/visits/admin.py
from django.contrib import admin

from .models import Appointment, AppointmentReschedule, QueueEntry


class AppointmentRescheduleInline(admin.TabularInline):
    model = AppointmentReschedule
    extra = 0
    readonly_fields = ['original_scheduled_at', 'new_scheduled_at', 'rescheduled_by', 'reason', 'created_at']
    can_delete = False


@admin.register(Appointment)
class AppointmentAdmin(admin.ModelAdmin):
    list_display = [
        'confirmation_code', 'patient_name', 'service', 'branch',
        'scheduled_at', 'status',
    ]
    list_filter = ['status', 'branch', 'service']
    search_fields = ['confirmation_code', 'patient_name', 'patient_email', 'patient_phone']
    date_hierarchy = 'scheduled_at'
    readonly_fields = [
        'confirmation_code', 'original_scheduled_at', 'rescheduled_at',
        'rescheduled_by', 'created_at', 'updated_at',
    ]
    inlines = [AppointmentRescheduleInline]


@admin.register(QueueEntry)
class QueueEntryAdmin(admin.ModelAdmin):
    list_display = [
        'counter', 'appointment', 'branch', 'service_point', 'status',
        'is_active', 'joined_at', 'called_at', 'completed_at',
    ]
    list_filter = ['status', 'is_active', 'branch', 'service_point']
    search_fields = ['appointment__confirmation_code', 'appointment__patient_name']
    readonly_fields = ['joined_at', 'called_at', 'completed_at', 'closed_at', 'transferred_from', 'created_at']
