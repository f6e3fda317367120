# configmgr/tenancy.py
#
# Resolves the tenant a request is scoped to. The booking site sends the
# salon slug in the X-Tenant-Slug header; a ?tenant= query parameter is
# accepted as a fallback for simple links and manual testing.
#
from django.http import Http404
from django.shortcuts import get_object_or_404

from .models import Tenant

TENANT_HEADER = "X-Tenant-Slug"


def tenant_slug_from_request(request):
    slug = request.headers.get(TENANT_HEADER) or request.GET.get("tenant") or ""
    return slug.strip()


def resolve_tenant(request) -> Tenant:
    slug = tenant_slug_from_request(request)
    if not slug:
        raise Http404("Missing tenant.")
    return get_object_or_404(Tenant, slug=slug, active=True)
