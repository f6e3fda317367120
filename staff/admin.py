# staff/admin.py
from django.contrib import admin
from .models import CustomScheduleDay, StaffBreak, TimeOff, WorkingHours


@admin.register(WorkingHours)
class WorkingHoursAdmin(admin.ModelAdmin):
    list_display = ("staff", "day_of_week", "start", "end")
    list_filter = ("staff", "day_of_week")
    search_fields = ("staff__name",)


@admin.register(StaffBreak)
class StaffBreakAdmin(admin.ModelAdmin):
    list_display = ("staff", "day_of_week", "start", "end")
    list_filter = ("staff",)


@admin.register(CustomScheduleDay)
class CustomScheduleDayAdmin(admin.ModelAdmin):
    list_display = ("staff", "date", "intervals")
    list_filter = ("staff",)
    date_hierarchy = "date"


@admin.register(TimeOff)
class TimeOffAdmin(admin.ModelAdmin):
    list_display = ("staff", "start_date", "end_date", "reason")
    list_filter = ("staff",)
