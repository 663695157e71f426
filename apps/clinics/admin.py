# apps/clinics/admin.py
from django.contrib import admin

from .models import Branch, Service, ServicePoint, ServicePointService, ServiceSchedule


@admin.register(Branch)
class BranchAdmin(admin.ModelAdmin):
    list_display = ['code', 'name', 'phone', 'is_active', 'created_at']
    list_filter = ['is_active']
    search_fields = ['code', 'name', 'address', 'phone', 'email']
    readonly_fields = ['created_at', 'updated_at', 'created_by', 'updated_by', 'deleted_at', 'deleted_by']


class ServiceScheduleInline(admin.TabularInline):
    model = ServiceSchedule
    extra = 0
    fields = ['day_of_week', 'start_time', 'end_time', 'is_active']


@admin.register(Service)
class ServiceAdmin(admin.ModelAdmin):
    list_display = ['name', 'duration_minutes', 'is_active']
    list_filter = ['is_active']
    search_fields = ['name']
    inlines = [ServiceScheduleInline]


class ServicePointServiceInline(admin.TabularInline):
    model = ServicePointService
    extra = 0


@admin.register(ServicePoint)
class ServicePointAdmin(admin.ModelAdmin):
    list_display = ['name', 'branch', 'is_active']
    list_filter = ['branch', 'is_active']
    search_fields = ['name', 'branch__name']
    inlines = [ServicePointServiceInline]


@admin.register(ServiceSchedule)
class ServiceScheduleAdmin(admin.ModelAdmin):
    list_display = ['service', 'day_of_week', 'start_time', 'end_time', 'is_active']
    list_filter = ['day_of_week', 'is_active']
