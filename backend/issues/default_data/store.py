from __future__ import annotations

import logging
from typing import Any, Iterable, Type, TypeVar

from django.core.exceptions import ObjectDoesNotExist, ValidationError
from django.db import IntegrityError, connection, transaction
from django.db.models import Model

from ..models import Member, Principal, Project, Role, Setting
from .errors import RecordInvalid

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=Model)

# pg_advisory_xact_lock key shared by every default data load.
BOOTSTRAP_LOCK_KEY = 0x6D6F646B


def create(model: Type[M], **fields: Any) -> M:
    """Validate and insert one record, raising RecordInvalid on any failure."""
    record = model(**fields)
    label = fields.get("name") or fields.get("login") or fields.get("identifier") or fields.get("url") or model.__name__
    try:
        record.full_clean()
        with transaction.atomic():
            record.save()
    except (ValidationError, IntegrityError) as exc:
        raise RecordInvalid.from_exception(model.__name__, label, exc) from exc
    return record


def link(record: Model, relation: str, targets: Iterable[Model]) -> None:
    try:
        with transaction.atomic():
            getattr(record, relation).add(*list(targets))
    except IntegrityError as exc:
        raise RecordInvalid.from_exception(type(record).__name__, record, exc) from exc


def fetch(model: Type[M], **lookup: Any) -> M:
    try:
        return model.objects.get(**lookup)
    except ObjectDoesNotExist as exc:
        raise RecordInvalid.from_exception(model.__name__, lookup, exc) from exc


def put_setting(name: str, value: Any) -> Setting:
    try:
        setting, _ = Setting.objects.update_or_create(name=name, defaults={"value": value})
    except IntegrityError as exc:
        raise RecordInvalid.from_exception("Setting", name, exc) from exc
    return setting


def add_member(project: Project, principal: Principal, roles: Iterable[Role], editable_roles: Iterable[Role]) -> Member:
    member = create(Member, project=project, principal=principal)
    try:
        member.assign_roles(roles, editable_roles)
    except ValidationError as exc:
        raise RecordInvalid.from_exception("Member", member, exc) from exc
    return member


def acquire_bootstrap_lock() -> None:
    """Serialise concurrent loads; must run inside the load transaction."""
    if connection.vendor != "postgresql":
        return
    with connection.cursor() as cursor:
        cursor.execute("SELECT pg_advisory_xact_lock(%s)", [BOOTSTRAP_LOCK_KEY])
    logger.debug("Acquired default data advisory lock")
