"""ID mapping document for the ticket handler services.

The handlers address statuses, trackers, priorities and custom fields by
numeric id. After a default data load those ids are only known to the
database, so this module reads them back and renders the YAML file the
handlers load at startup.
"""

import logging
from typing import Any, Dict

import yaml

from ..models import CustomField, Enumeration, IssueStatus, Project, Tracker
from . import records
from .errors import RecordInvalid

logger = logging.getLogger(__name__)

STATUS_KEYS = {
    "new": "new",
    "completed": "closed",
    "applied": "applied",
    "duplicate": "duplicate",
    "inProgress": "in_progress",
}
PRIORITY_KEYS = ("low", "normal", "high", "urgent")
# The handler also declares recordTicket; no seeded tracker stands for it, so it
# is left out. Incident has no key in the handler document.
TICKET_TYPE_KEYS = {
    "ticket": "ticket",
    "appeal": "appeal",
}
FIELD_KEYS = {
    "did": "did",
    "handle": "handle",
    "displayName": "display_name",
    "addToLists": "add_to_lists",
}


def _ids_by_name(queryset, names: Dict[str, str]) -> Dict[str, int]:
    found = dict(queryset.filter(name__in=names.values()).values_list("name", "id"))
    return {key: found[name] for key, name in names.items() if name in found}


def build_id_mappings() -> Dict[str, Any]:
    identifier = records.PROJECT["identifier"]
    project = Project.objects.filter(identifier=identifier).first()
    if project is None:
        raise RecordInvalid("Project", identifier, ["not found, load the default data first"])

    status_names = {record.key: record.name for record in records.STATUSES}
    tracker_names = {record.key: record.name for record in records.TRACKERS}
    field_names = {record.key: record.name for record in records.CUSTOM_FIELDS}

    # Priority names are localized, their positions are not.
    priority_ids = dict(Enumeration.objects.filter(type="IssuePriority").values_list("position", "id"))
    priorities = {
        key: priority_ids[position]
        for position, key in enumerate(PRIORITY_KEYS, start=1)
        if position in priority_ids
    }

    document = {
        "projectId": project.pk,
        "priorities": priorities,
        "statuses": _ids_by_name(IssueStatus.objects, {k: status_names[v] for k, v in STATUS_KEYS.items()}),
        "ticketTypes": _ids_by_name(Tracker.objects, {k: tracker_names[v] for k, v in TICKET_TYPE_KEYS.items()}),
        "fields": _ids_by_name(
            CustomField.objects.filter(type="IssueCustomField"),
            {k: field_names[v] for k, v in FIELD_KEYS.items()},
        ),
        "users": [],
    }
    logger.debug("Built id mappings for project %s", project.pk)
    return document


def dump_id_mappings(stream) -> None:
    yaml.safe_dump(build_id_mappings(), stream, sort_keys=False, default_flow_style=False)


def render_id_mappings() -> str:
    return yaml.safe_dump(build_id_mappings(), sort_keys=False, default_flow_style=False)
