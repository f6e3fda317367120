from django.contrib import admin
from .models import Appointment, Service, ServiceVariant, Staff


class ServiceVariantInline(admin.TabularInline):
    model = ServiceVariant
    extra = 0


@admin.register(Service)
class ServiceAdmin(admin.ModelAdmin):
    list_display = ("id", "tenant", "name", "active")
    list_filter = ("tenant", "active")
    search_fields = ("name",)
    filter_horizontal = ("staff",)
    inlines = [ServiceVariantInline]


@admin.register(Staff)
class StaffAdmin(admin.ModelAdmin):
    list_display = ("id", "tenant", "name", "email", "role", "active")
    list_filter = ("tenant", "active")


@admin.register(Appointment)
class AppointmentAdmin(admin.ModelAdmin):
    list_display = ("id", "tenant", "client_name", "service", "staff", "start_time", "status")
    list_filter = ("tenant", "status", "service")
    search_fields = ("client_name", "client_email", "service__name")
    date_hierarchy = "start_time"
