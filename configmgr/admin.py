from django.contrib import admin
from .models import SystemSetting, Tenant


@admin.register(Tenant)
class TenantAdmin(admin.ModelAdmin):
    list_display = ("slug", "name", "timezone", "slot_step_minutes", "buffer_minutes", "active")
    list_filter = ("active", "timezone")
    search_fields = ("slug", "name")


@admin.register(SystemSetting)
class SystemSettingAdmin(admin.ModelAdmin):
    list_display = ("key", "value")
    search_fields = ("key",)
