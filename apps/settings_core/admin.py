from django.contrib import admin

from .models import BranchPolicy


@admin.register(BranchPolicy)
class BranchPolicyAdmin(admin.ModelAdmin):
    list_display = [
        'branch', 'reschedule_time_limit_hours', 'cancellation_hours',
        'max_advance_booking_days', 'max_reschedules', 'version', 'updated_at',
    ]
    search_fields = ['branch__name', 'branch__code']
    readonly_fields = ['version', 'created_at', 'updated_at', 'created_by', 'updated_by']
