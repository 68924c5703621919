"""Resource registry: the machines and courts of each hostel."""

from __future__ import annotations

import logging

from django.core.exceptions import ValidationError  # type: ignore
from django.db import transaction  # type: ignore

from .exceptions import ResourceNotFoundError
from .models import Resource

logger = logging.getLogger(__name__)


def get_resource(resource_id, hostel_id=None) -> Resource:
    """Look up a resource, optionally only inside one hostel."""
    qs = Resource.objects.all()
    if hostel_id is not None:
        qs = qs.filter(hostel_id=hostel_id)
    try:
        return qs.get(pk=resource_id)
    except (Resource.DoesNotExist, ValidationError) as exc:
        # A malformed id cannot name any resource
        raise ResourceNotFoundError() from exc


def create_resource(hostel_id, type: str, name: str) -> Resource:
    resource = Resource.objects.create(
        hostel_id=hostel_id,
        type=type,
        name=name,
        is_operational=True,
    )
    logger.info(f"Resource {resource.name} ({resource.type}) added to hostel {hostel_id}")
    return resource


@transaction.atomic
def set_operational(
    resource_id,
    is_operational: bool,
    note: str | None = None,
    *,
    hostel_id=None,
) -> Resource:
    resource = get_resource(resource_id, hostel_id)
    resource.set_operational(is_operational, note)
    if is_operational:
        logger.info(f"Resource {resource.pk} back in service")
    else:
        logger.info(f"Resource {resource.pk} under maintenance: {resource.maintenance_note or '-'}")
    return resource


def resources_for_hostel(hostel_id, type: str | None = None):
    qs = Resource.objects.filter(hostel_id=hostel_id)
    if type:
        qs = qs.filter(type=type)
    return qs.order_by("name")
