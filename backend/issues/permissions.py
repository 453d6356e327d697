from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, FrozenSet, Iterable, List, Optional, Tuple

REQUIRE_LOGGEDIN = "loggedin"
REQUIRE_MEMBER = "member"

BUILTIN_GIVABLE = 0
BUILTIN_NON_MEMBER = 1
BUILTIN_ANONYMOUS = 2

PROJECT_MODULES = (
    "issue_tracking",
    "time_tracking",
    "news",
    "documents",
    "files",
    "wiki",
    "repository",
    "boards",
    "calendar",
    "gantt",
    "webhooks",
)


@dataclass(frozen=True)
class Permission:
    name: str
    project_module: Optional[str] = None
    public: bool = False
    require: Optional[str] = None
    read: bool = False


def _module(project_module: Optional[str], *entries: Tuple) -> List[Permission]:
    permissions = []
    for entry in entries:
        name, options = entry[0], (entry[1] if len(entry) > 1 else {})
        permissions.append(Permission(name=name, project_module=project_module, **options))
    return permissions


PERMISSIONS: Tuple[Permission, ...] = tuple(
    _module(
        None,
        ("view_project", {"public": True, "read": True}),
        ("search_project", {"public": True, "read": True}),
        ("add_project", {"require": REQUIRE_LOGGEDIN}),
        ("edit_project", {"require": REQUIRE_MEMBER}),
        ("close_project", {"require": REQUIRE_MEMBER}),
        ("delete_project", {"require": REQUIRE_MEMBER}),
        ("select_project_publicity", {"require": REQUIRE_MEMBER}),
        ("select_project_modules", {"require": REQUIRE_MEMBER}),
        ("manage_members", {"require": REQUIRE_MEMBER}),
        ("manage_versions", {"require": REQUIRE_MEMBER}),
        ("add_subprojects", {"require": REQUIRE_MEMBER}),
        ("manage_public_queries", {"require": REQUIRE_MEMBER}),
        ("save_queries", {"require": REQUIRE_LOGGEDIN}),
    )
    + _module(
        "issue_tracking",
        ("view_issues", {"read": True}),
        ("add_issues",),
        ("edit_issues",),
        ("edit_own_issues",),
        ("copy_issues",),
        ("manage_issue_relations",),
        ("manage_subtasks",),
        ("set_issues_private",),
        ("set_own_issues_private", {"require": REQUIRE_LOGGEDIN}),
        ("add_issue_notes",),
        ("edit_issue_notes", {"require": REQUIRE_LOGGEDIN}),
        ("edit_own_issue_notes", {"require": REQUIRE_LOGGEDIN}),
        ("view_private_notes", {"read": True}),
        ("set_notes_private", {"require": REQUIRE_MEMBER}),
        ("delete_issues", {"require": REQUIRE_MEMBER}),
        ("view_issue_watchers", {"read": True}),
        ("add_issue_watchers",),
        ("delete_issue_watchers",),
        ("import_issues",),
        ("manage_categories", {"require": REQUIRE_MEMBER}),
    )
    + _module(
        "time_tracking",
        ("view_time_entries", {"read": True}),
        ("log_time", {"require": REQUIRE_LOGGEDIN}),
        ("edit_time_entries", {"require": REQUIRE_LOGGEDIN}),
        ("edit_own_time_entries", {"require": REQUIRE_LOGGEDIN}),
        ("manage_project_activities", {"require": REQUIRE_MEMBER}),
        ("log_time_for_other_users", {"require": REQUIRE_MEMBER}),
        ("import_time_entries",),
    )
    + _module(
        "news",
        ("view_news", {"public": True, "read": True}),
        ("manage_news", {"require": REQUIRE_MEMBER}),
        ("comment_news",),
    )
    + _module(
        "documents",
        ("view_documents", {"read": True}),
        ("add_documents", {"require": REQUIRE_LOGGEDIN}),
        ("edit_documents", {"require": REQUIRE_LOGGEDIN}),
        ("delete_documents", {"require": REQUIRE_LOGGEDIN}),
    )
    + _module(
        "files",
        ("view_files", {"read": True}),
        ("manage_files", {"require": REQUIRE_LOGGEDIN}),
    )
    + _module(
        "wiki",
        ("view_wiki_pages", {"read": True}),
        ("view_wiki_edits", {"read": True}),
        ("export_wiki_pages", {"read": True}),
        ("edit_wiki_pages",),
        ("rename_wiki_pages", {"require": REQUIRE_MEMBER}),
        ("delete_wiki_pages", {"require": REQUIRE_MEMBER}),
        ("delete_wiki_pages_attachments",),
        ("view_wiki_page_watchers", {"read": True}),
        ("add_wiki_page_watchers",),
        ("delete_wiki_page_watchers",),
        ("protect_wiki_pages", {"require": REQUIRE_MEMBER}),
        ("manage_wiki", {"require": REQUIRE_MEMBER}),
    )
    + _module(
        "repository",
        ("view_changesets", {"read": True}),
        ("browse_repository", {"read": True}),
        ("commit_access",),
        ("manage_related_issues",),
        ("manage_repository", {"require": REQUIRE_MEMBER}),
    )
    + _module(
        "boards",
        ("view_messages", {"read": True}),
        ("add_messages",),
        ("edit_messages", {"require": REQUIRE_MEMBER}),
        ("edit_own_messages", {"require": REQUIRE_LOGGEDIN}),
        ("delete_messages", {"require": REQUIRE_MEMBER}),
        ("delete_own_messages", {"require": REQUIRE_LOGGEDIN}),
        ("view_message_watchers", {"read": True}),
        ("add_message_watchers",),
        ("delete_message_watchers",),
        ("manage_boards", {"require": REQUIRE_MEMBER}),
    )
    + _module("calendar", ("view_calendar", {"read": True}))
    + _module("gantt", ("view_gantt", {"read": True}))
)

PERMISSIONS_BY_NAME: Dict[str, Permission] = {permission.name: permission for permission in PERMISSIONS}


def permission_names(permissions: Iterable[Permission]) -> List[str]:
    return [permission.name for permission in permissions]


def setable_permissions(builtin: int = BUILTIN_GIVABLE) -> List[Permission]:
    """Permissions that can be granted explicitly to a role of the given builtin kind.

    Public permissions are implied for everybody and never stored.
    """
    permissions = [permission for permission in PERMISSIONS if not permission.public]
    if builtin == BUILTIN_NON_MEMBER:
        permissions = [permission for permission in permissions if permission.require != REQUIRE_MEMBER]
    elif builtin == BUILTIN_ANONYMOUS:
        permissions = [permission for permission in permissions if permission.require is None]
    return permissions


def allowed_permission_names(builtin: int = BUILTIN_GIVABLE) -> FrozenSet[str]:
    names = set(PERMISSIONS_BY_NAME)
    if builtin == BUILTIN_NON_MEMBER:
        names -= {p.name for p in PERMISSIONS if p.require == REQUIRE_MEMBER}
    elif builtin == BUILTIN_ANONYMOUS:
        names -= {p.name for p in PERMISSIONS if p.require is not None}
    return frozenset(names)


def invalid_permissions(names: Iterable[str], builtin: int = BUILTIN_GIVABLE) -> List[str]:
    allowed = allowed_permission_names(builtin)
    return sorted({str(name) for name in names if str(name) not in allowed})
