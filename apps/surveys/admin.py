from django.contrib import admin

from .models import Survey


@admin.register(Survey)
class SurveyAdmin(admin.ModelAdmin):
    list_display = ['id', 'appointment', 'branch', 'service', 'is_completed', 'created_at']
    list_filter = ['branch', 'is_completed']
    search_fields = ['token', 'patient_name', 'appointment__confirmation_code']
    readonly_fields = ['token', 'qr_code', 'created_at']
