# booking/signals.py
#
# Purpose:
# - Keep the server-side availability cache honest.
#   * Appointment saved/deleted          -> tenant's cached month indexes retired
#   * Staff availability rule changed    -> same
#   * Tenant scheduling settings changed -> same
#
# Notes:
# - Invalidation bumps a per-tenant version number (see services.month_index),
#   so no key enumeration is needed and LocMemCache works as well as Redis.
#
from django.db.models.signals import post_delete, post_save
from django.dispatch import receiver

from configmgr.models import Tenant
from staff.models import CustomScheduleDay, StaffBreak, TimeOff, WorkingHours

from .models import Appointment, Staff
from .services.month_index import invalidate_tenant_availability

RULE_MODELS = (WorkingHours, StaffBreak, CustomScheduleDay, TimeOff)


@receiver(post_save, sender=Appointment)
@receiver(post_delete, sender=Appointment)
def appointment_changed(sender, instance, **kwargs):
    invalidate_tenant_availability(instance.tenant_id)


def rule_changed(sender, instance, **kwargs):
    tenant_id = Staff.objects.filter(pk=instance.staff_id).values_list("tenant_id", flat=True).first()
    if tenant_id is not None:
        invalidate_tenant_availability(tenant_id)


for _model in RULE_MODELS:
    post_save.connect(rule_changed, sender=_model, dispatch_uid=f"rule_saved_{_model.__name__}")
    post_delete.connect(rule_changed, sender=_model, dispatch_uid=f"rule_deleted_{_model.__name__}")


@receiver(post_save, sender=Tenant)
def tenant_changed(sender, instance, created, **kwargs):
    if not created:
        invalidate_tenant_availability(instance.pk)
