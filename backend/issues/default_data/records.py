"""Seed records for a fresh installation.

Everything here is plain data; ``loader`` turns each record into exactly one
row. Symbolic keys (``"moderator"``, ``"in_progress"``...) tie records
together and are resolved to the rows created during the same load.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple

from ..models import Query

ALL_SETABLE = None


@dataclass(frozen=True)
class RoleRecord:
    key: str
    label: str
    default_name: str
    permissions: Optional[Tuple[str, ...]]
    issues_visibility: str = "default"
    users_visibility: str = "all"


@dataclass(frozen=True)
class GroupRecord:
    key: str
    name: str
    role: str


@dataclass(frozen=True)
class StatusRecord:
    key: str
    name: str
    is_closed: bool = False


@dataclass(frozen=True)
class TrackerRecord:
    key: str
    name: str
    core_fields: Tuple[str, ...]
    default_status: str = "new"
    is_in_roadmap: bool = False


@dataclass(frozen=True)
class PriorityRecord:
    key: str
    label: str
    is_default: bool = False


@dataclass(frozen=True)
class QueryRecord:
    type: str
    label: str
    filters: Dict[str, Dict[str, Any]]
    sort_criteria: Tuple[Tuple[str, str], ...] = ()
    visibility: int = Query.VISIBILITY_PUBLIC


@dataclass(frozen=True)
class CustomFieldRecord:
    key: str
    name: str
    field_format: str
    trackers: Tuple[str, ...]
    options: Dict[str, Any] = field(default_factory=dict)


MODERATOR_PERMISSIONS = (
    "view_issues",
    "add_issues",
    "edit_issues",
    "view_private_notes",
    "set_notes_private",
    "manage_issue_relations",
    "manage_subtasks",
    "add_issue_notes",
    "save_queries",
    "view_gantt",
    "view_calendar",
    "log_time",
    "view_time_entries",
    "view_news",
    "comment_news",
    "view_documents",
    "view_wiki_pages",
    "view_wiki_edits",
    "edit_wiki_pages",
    "delete_wiki_pages",
    "view_messages",
    "add_messages",
    "view_files",
    "manage_files",
    "browse_repository",
    "view_changesets",
    "commit_access",
    "manage_related_issues",
)

TRAINEE_PERMISSIONS = (
    "view_issues",
    "add_issues",
    "add_issue_notes",
    "save_queries",
    "view_gantt",
    "view_calendar",
    "log_time",
    "view_time_entries",
    "view_news",
    "comment_news",
    "view_documents",
    "view_wiki_pages",
    "view_wiki_edits",
    "view_messages",
    "add_messages",
    "view_files",
    "browse_repository",
    "view_changesets",
)

AUTOMATION_PERMISSIONS = (
    "view_issues",
    "add_issues",
    "edit_issues",
    "view_private_notes",
    "set_notes_private",
    "manage_issue_relations",
    "manage_subtasks",
    "add_issue_notes",
    "save_queries",
    "view_messages",
    "add_messages",
    "view_files",
    "manage_files",
    "manage_related_issues",
)

ROLES = (
    RoleRecord("admin", "default_role_admin", "Admin", ALL_SETABLE, issues_visibility="all", users_visibility="all"),
    RoleRecord("moderator", "default_role_moderator", "Moderator", MODERATOR_PERMISSIONS),
    RoleRecord("trainee", "default_role_trainee", "Trainee", TRAINEE_PERMISSIONS),
    RoleRecord("automation", "default_role_automation", "Automation", AUTOMATION_PERMISSIONS),
)

GROUPS = (
    GroupRecord("admins", "Admins", role="admin"),
    GroupRecord("moderators", "Moderators", role="moderator"),
    GroupRecord("trainees", "Trainees", role="trainee"),
)

# "Closed" stays open: closed tickets can still be applied or reopened.
STATUSES = (
    StatusRecord("new", "New"),
    StatusRecord("in_progress", "In progress"),
    StatusRecord("closed", "Closed"),
    StatusRecord("rejected", "Rejected", is_closed=True),
    StatusRecord("duplicate", "Duplicate", is_closed=True),
    StatusRecord("applied", "Applied", is_closed=True),
    StatusRecord("granted", "Granted", is_closed=True),
    StatusRecord("denied", "Denied", is_closed=True),
    StatusRecord("invalid", "Invalid", is_closed=True),
)

TRACKERS = (
    TrackerRecord("ticket", "Ticket", ("assigned_to_id", "parent_issue_id", "description", "priority_id")),
    TrackerRecord("incident", "Incident", ("assigned_to_id", "parent_issue_id", "description", "priority_id", "start_date")),
    TrackerRecord("appeal", "Appeal", ("assigned_to_id", "parent_issue_id", "description", "priority_id")),
)

SETTINGS: Dict[str, Any] = {
    "app_title": "Modkit",
    "login_required": 1,
    "lost_password": 0,
    "autologin": 28,
    "issue_group_assignment": 1,
    "rest_api_enabled": 1,
    "attachment_max_size": 51200,
    "enabled_scm": [],
    "default_projects_modules": ["issue_tracking", "news", "wiki", "webhooks"],
}

DEFAULT_WORKFLOW_POLICIES = [
    *({"tracker": tracker.key, "role": "admin", "rule": "all_pairs"} for tracker in TRACKERS),
    # Tickets
    {
        "tracker": "ticket",
        "role": "moderator",
        "rule": "cross",
        "from": ["new", "in_progress", "duplicate", "invalid"],
        "to": ["in_progress", "closed", "duplicate", "invalid"],
    },
    {"tracker": "ticket", "role": "moderator", "rule": "edge", "old": "applied", "new": "in_progress"},
    {"tracker": "ticket", "role": "trainee", "rule": "cross", "from": ["new"], "to": ["in_progress"]},
    {"tracker": "ticket", "role": "automation", "rule": "cross", "from": ["closed"], "to": ["applied", "in_progress"]},
    # Incidents
    {"tracker": "incident", "role": "moderator", "rule": "edge", "old": "new", "new": "in_progress"},
    {"tracker": "incident", "role": "moderator", "rule": "cross", "from": ["in_progress"], "to": ["new", "closed"]},
    {"tracker": "incident", "role": "moderator", "rule": "edge", "old": "closed", "new": "in_progress"},
    # Appeals
    {"tracker": "appeal", "role": "moderator", "rule": "edge", "old": "new", "new": "in_progress"},
    {
        "tracker": "appeal",
        "role": "moderator",
        "rule": "cross",
        "from": ["in_progress"],
        "to": ["new", "invalid", "granted", "denied"],
    },
    {
        "tracker": "appeal",
        "role": "moderator",
        "rule": "cross",
        "from": ["invalid", "granted", "denied"],
        "to": ["in_progress"],
    },
]

PRIORITIES = (
    PriorityRecord("low", "default_priority_low"),
    PriorityRecord("normal", "default_priority_normal", is_default=True),
    PriorityRecord("high", "default_priority_high"),
    PriorityRecord("urgent", "default_priority_urgent"),
)

_OPEN_ISSUES = {"operator": "o", "values": [""]}
_ACTIVE_PROJECTS = {"operator": "=", "values": ["1"]}

QUERIES = (
    QueryRecord(
        "IssueQuery",
        "label_assigned_to_me_issues",
        {
            "status_id": _OPEN_ISSUES,
            "assigned_to_id": {"operator": "=", "values": ["me"]},
            "project.status": _ACTIVE_PROJECTS,
        },
        sort_criteria=(("priority", "desc"), ("updated_on", "desc")),
    ),
    QueryRecord(
        "IssueQuery",
        "label_reported_issues",
        {
            "status_id": _OPEN_ISSUES,
            "author_id": {"operator": "=", "values": ["me"]},
            "project.status": _ACTIVE_PROJECTS,
        },
        sort_criteria=(("updated_on", "desc"),),
    ),
    QueryRecord(
        "IssueQuery",
        "label_updated_issues",
        {
            "status_id": _OPEN_ISSUES,
            "updated_by": {"operator": "=", "values": ["me"]},
            "project.status": _ACTIVE_PROJECTS,
        },
        sort_criteria=(("updated_on", "desc"),),
    ),
    QueryRecord(
        "IssueQuery",
        "label_watched_issues",
        {
            "status_id": _OPEN_ISSUES,
            "watcher_id": {"operator": "=", "values": ["me"]},
            "project.status": _ACTIVE_PROJECTS,
        },
        sort_criteria=(("updated_on", "desc"),),
    ),
    QueryRecord(
        "ProjectQuery",
        "label_my_projects",
        {"status": {"operator": "=", "values": ["1"]}, "id": {"operator": "=", "values": ["mine"]}},
    ),
    QueryRecord(
        "ProjectQuery",
        "label_my_bookmarks",
        {"status": {"operator": "=", "values": ["1"]}, "id": {"operator": "=", "values": ["bookmarks"]}},
    ),
)

CUSTOM_FIELDS = (
    CustomFieldRecord(
        "did",
        "DID",
        "string",
        trackers=("ticket", "appeal"),
        options={
            "description": "DID of the subject account",
            "is_filter": True,
            "searchable": True,
            "regexp": "did:.*",
            "url_pattern": "https://bsky.app/profile/%value%",
        },
    ),
    CustomFieldRecord("handle", "Handle", "string", trackers=("ticket", "appeal"), options={"is_filter": True, "searchable": True}),
    CustomFieldRecord(
        "display_name", "Display name", "string", trackers=("ticket", "appeal"), options={"is_filter": True, "searchable": True}
    ),
    CustomFieldRecord(
        "add_to_lists",
        "Add to lists",
        "list",
        trackers=("ticket",),
        options={"is_filter": True, "multiple": True, "possible_values": ["dummy"]},
    ),
)

AUTOMATION_USER: Dict[str, Any] = {
    "login": "modbot",
    "firstname": "Modbot",
    "lastname": "Automation",
    "mail": "modbot@example.com",
    "admin": True,
    "language": "en",
    "mail_notification": "none",
}
AUTOMATION_ROLE = "automation"

PROJECT: Dict[str, Any] = {
    "name": "Tickets",
    "identifier": "tickets",
    "is_public": False,
}
