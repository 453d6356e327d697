from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional

from django.conf import settings
from django.db import transaction
from jsonschema import Draft202012Validator

from ..models import (
    CustomField,
    Enumeration,
    Group,
    IssueStatus,
    Member,
    Project,
    Query,
    Role,
    Tracker,
    User,
    Webhook,
    WorkflowTransition,
)
from ..permissions import permission_names, setable_permissions
from . import records, store, workflow
from .checks import no_data
from .errors import AlreadyBootstrapped, InvalidConfiguration
from .labels import LabelResolver, select_language

logger = logging.getLogger(__name__)

OPTIONS_SCHEMA: Dict[str, Any] = {
    "$schema": "https://json-schema.org/draft/2020-12/schema",
    "type": "object",
    "additionalProperties": False,
    "properties": {
        "workflow": {"type": "boolean"},
        "workflow_policies": {"type": "array"},
    },
}


@dataclass
class LoadedData:
    language: str
    roles: Dict[str, Role] = field(default_factory=dict)
    groups: Dict[str, Group] = field(default_factory=dict)
    statuses: Dict[str, IssueStatus] = field(default_factory=dict)
    trackers: Dict[str, Tracker] = field(default_factory=dict)
    priorities: Dict[str, Enumeration] = field(default_factory=dict)
    queries: List[Query] = field(default_factory=list)
    custom_fields: Dict[str, CustomField] = field(default_factory=dict)
    automation_user: Optional[User] = None
    project: Optional[Project] = None
    members: List[Member] = field(default_factory=list)
    webhook: Optional[Webhook] = None
    transition_count: int = 0

    def summary(self) -> Dict[str, Any]:
        return {
            "language": self.language,
            "roles": len(self.roles),
            "groups": len(self.groups),
            "statuses": len(self.statuses),
            "trackers": len(self.trackers),
            "workflow_transitions": self.transition_count,
            "priorities": len(self.priorities),
            "queries": len(self.queries),
            "custom_fields": len(self.custom_fields),
            "project": self.project.identifier if self.project else None,
            "members": len(self.members),
        }


def _validate_options(options: Mapping[str, Any]) -> None:
    validator = Draft202012Validator(OPTIONS_SCHEMA)
    errors = []
    for error in sorted(validator.iter_errors(dict(options)), key=lambda e: [str(p) for p in e.path]):
        path = ".".join(str(p) for p in error.path) if error.path else "options"
        errors.append(f"{path}: {error.message}")
    if errors:
        raise InvalidConfiguration("Invalid default data options", errors)


def _workflow_plan(options: Mapping[str, Any]) -> Dict:
    policies = workflow.parse_policies(options.get("workflow_policies", records.DEFAULT_WORKFLOW_POLICIES))
    return workflow.evaluate(
        policies,
        trackers=[tracker.key for tracker in records.TRACKERS],
        roles=[role.key for role in records.ROLES],
        statuses=[status.key for status in records.STATUSES],
    )


def load(lang: str = "en", options: Optional[Mapping[str, Any]] = None) -> LoadedData:
    """Load the default configuration into an empty installation.

    Raises AlreadyBootstrapped when configuration data already exists,
    InvalidConfiguration for malformed options or workflow policies (before
    touching the database) and RecordInvalid when a record fails validation,
    in which case nothing is left behind.
    """
    options = dict(options or {})
    _validate_options(options)
    enable_workflow = options.get("workflow", True) is not False
    plan = _workflow_plan(options) if enable_workflow else {}

    if not no_data():
        raise AlreadyBootstrapped()

    language = select_language(lang)
    logger.info("Loading default data (language=%s, workflow=%s)", language, enable_workflow)
    with transaction.atomic():
        store.acquire_bootstrap_lock()
        if not no_data():
            raise AlreadyBootstrapped()
        loaded = _load(LoadedData(language=language), LabelResolver(language), plan)
    logger.info("Default data loaded: %s", loaded.summary())
    return loaded


def _role_permissions(record: records.RoleRecord) -> List[str]:
    if record.permissions is records.ALL_SETABLE:
        return permission_names(setable_permissions())
    return list(record.permissions)


def _load(loaded: LoadedData, label: LabelResolver, plan: Dict) -> LoadedData:
    for position, record in enumerate(records.ROLES, start=1):
        role = store.create(
            Role,
            name=label(record.label, default=record.default_name),
            position=position,
            issues_visibility=record.issues_visibility,
            users_visibility=record.users_visibility,
            permissions=_role_permissions(record),
        )
        loaded.roles[record.key] = role

    for record in records.GROUPS:
        loaded.groups[record.key] = store.create(Group, name=record.name)

    for position, record in enumerate(records.STATUSES, start=1):
        loaded.statuses[record.key] = store.create(
            IssueStatus, name=record.name, is_closed=record.is_closed, position=position
        )

    for position, record in enumerate(records.TRACKERS, start=1):
        loaded.trackers[record.key] = store.create(
            Tracker,
            name=record.name,
            default_status=loaded.statuses.get(record.default_status),
            is_in_roadmap=record.is_in_roadmap,
            position=position,
            core_fields=list(record.core_fields),
        )

    for name, value in records.SETTINGS.items():
        store.put_setting(name, value)
    default_tracker_ids = [str(tracker.pk) for tracker in loaded.trackers.values()]
    store.put_setting("default_projects_tracker_ids", default_tracker_ids)

    if plan:
        loaded.transition_count = _create_transitions(loaded, plan)

    for position, record in enumerate(records.PRIORITIES, start=1):
        loaded.priorities[record.key] = store.create(
            Enumeration,
            type="IssuePriority",
            name=label(record.label),
            position=position,
            is_default=record.is_default,
        )

    for record in records.QUERIES:
        loaded.queries.append(
            store.create(
                Query,
                type=record.type,
                name=label(record.label),
                filters={name: dict(condition) for name, condition in record.filters.items()},
                sort_criteria=[list(criterion) for criterion in record.sort_criteria],
                visibility=record.visibility,
            )
        )

    for position, record in enumerate(records.CUSTOM_FIELDS, start=1):
        custom_field = store.create(
            CustomField, name=record.name, field_format=record.field_format, position=position, **record.options
        )
        loaded.custom_fields[record.key] = custom_field
        for tracker_key in record.trackers:
            store.link(loaded.trackers[tracker_key], "custom_fields", [custom_field])

    loaded.automation_user = store.create(User, **records.AUTOMATION_USER)

    project = store.create(
        Project,
        enabled_modules=list(records.SETTINGS["default_projects_modules"]),
        **records.PROJECT,
    )
    store.link(project, "trackers", loaded.trackers.values())
    store.link(project, "issue_custom_fields", loaded.custom_fields.values())
    loaded.project = project

    principals = [(loaded.groups[record.key], record.role) for record in records.GROUPS]
    principals.append((loaded.automation_user, records.AUTOMATION_ROLE))
    for principal, role_key in principals:
        role = loaded.roles[role_key]
        loaded.members.append(store.add_member(project, principal, roles=[role], editable_roles=[role]))

    loaded.webhook = store.create(Webhook, url=settings.MODKIT_WEBHOOK_URL, project=project)

    operator = store.fetch(User, pk=settings.MODKIT_OPERATOR_USER_ID)
    store.link(loaded.groups["admins"], "users", [operator])
    return loaded


def _create_transitions(loaded: LoadedData, plan: Dict) -> int:
    created = 0
    for (tracker_key, role_key), edges in plan.items():
        tracker = loaded.trackers[tracker_key]
        role = loaded.roles[role_key]
        ordered = sorted(edges, key=lambda edge: (loaded.statuses[edge[0]].position, loaded.statuses[edge[1]].position))
        for old_key, new_key in ordered:
            store.create(
                WorkflowTransition,
                tracker=tracker,
                role=role,
                old_status=loaded.statuses[old_key],
                new_status=loaded.statuses[new_key],
            )
            created += 1
        logger.debug("Created %d transitions for %s/%s", len(ordered), tracker_key, role_key)
    return created
