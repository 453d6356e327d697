import re
from typing import Iterable
from urllib.parse import urlparse

from django.core.exceptions import ValidationError
from django.core.validators import RegexValidator
from django.db import models
from django.db.models import F, Q

from .permissions import (
    BUILTIN_ANONYMOUS,
    BUILTIN_GIVABLE,
    BUILTIN_NON_MEMBER,
    PROJECT_MODULES,
    invalid_permissions,
    permission_names,
    setable_permissions,
)

TRACKER_CORE_FIELDS = (
    "assigned_to_id",
    "category_id",
    "fixed_version_id",
    "parent_issue_id",
    "start_date",
    "due_date",
    "estimated_hours",
    "done_ratio",
    "description",
    "priority_id",
)

QUERY_OPERATORS = frozenset(
    {
        "=", "!", "o", "c", "!*", "*", ">=", "<=", "><", "<t+", ">t+", "><t+", "t+", "t", "ld",
        "w", "lw", "l2w", "m", "lm", "y", ">t-", "<t-", "><t-", "t-", "~", "!~", "^", "$",
        "=p", "=!p", "!p", "*o", "!o", "ev", "!ev", "cf",
    }
)

login_validator = RegexValidator(r"^[A-Za-z0-9_\-@.]+$", "Login may only contain letters, digits and _-@.")
identifier_validator = RegexValidator(
    r"^(?!\d+$)[a-z0-9\-_]+$",
    "Identifier must be lowercase letters, digits, dashes or underscores and not only digits.",
)


def _validate_string_list(value, field: str):
    if not isinstance(value, list) or any(not isinstance(item, str) for item in value):
        raise ValidationError({field: "Must be a list of strings."})


class Principal(models.Model):
    TYPE_CHOICES = [
        ("user", "User"),
        ("group", "Group"),
    ]

    type = models.CharField(max_length=20, choices=TYPE_CHOICES, blank=True, editable=False)
    created_at = models.DateTimeField(auto_now_add=True)

    def __str__(self) -> str:
        return f"{self.type} #{self.pk}"


class User(Principal):
    MAIL_NOTIFICATION_CHOICES = [
        ("all", "For any event on all my projects"),
        ("selected", "For any event on the selected projects only"),
        ("only_my_events", "Only for things I watch or I'm involved in"),
        ("only_assigned", "Only for things I watch or I am assigned to"),
        ("only_owner", "Only for things I watch or I am the owner of"),
        ("none", "No events"),
    ]

    login = models.CharField(max_length=60, unique=True, validators=[login_validator])
    firstname = models.CharField(max_length=30)
    lastname = models.CharField(max_length=255)
    mail = models.EmailField(max_length=254, blank=True)
    admin = models.BooleanField(default=False)
    language = models.CharField(max_length=10, blank=True, default="")
    mail_notification = models.CharField(max_length=20, choices=MAIL_NOTIFICATION_CHOICES, default="only_my_events")

    class Meta:
        ordering = ["login"]

    def __str__(self) -> str:
        return self.login

    def save(self, *args, **kwargs):
        self.type = "user"
        super().save(*args, **kwargs)


class Group(Principal):
    name = models.CharField(max_length=255, unique=True)
    users = models.ManyToManyField(User, related_name="member_groups", blank=True)

    class Meta:
        ordering = ["name"]

    def __str__(self) -> str:
        return self.name

    def save(self, *args, **kwargs):
        self.type = "group"
        super().save(*args, **kwargs)


class RoleQuerySet(models.QuerySet):
    def givable(self):
        return self.filter(builtin=BUILTIN_GIVABLE)

    def builtin(self):
        return self.exclude(builtin=BUILTIN_GIVABLE)


class Role(models.Model):
    BUILTIN_CHOICES = [
        (BUILTIN_GIVABLE, "Givable"),
        (BUILTIN_NON_MEMBER, "Non member"),
        (BUILTIN_ANONYMOUS, "Anonymous"),
    ]
    ISSUES_VISIBILITY_CHOICES = [
        ("all", "All issues"),
        ("default", "All non private issues"),
        ("own", "Issues created by or assigned to the user"),
    ]
    USERS_VISIBILITY_CHOICES = [
        ("all", "All active users"),
        ("members_of_visible_projects", "Members of visible projects"),
    ]

    name = models.CharField(max_length=255, unique=True)
    position = models.PositiveIntegerField(default=1)
    builtin = models.PositiveSmallIntegerField(choices=BUILTIN_CHOICES, default=BUILTIN_GIVABLE)
    assignable = models.BooleanField(default=True)
    issues_visibility = models.CharField(max_length=30, choices=ISSUES_VISIBILITY_CHOICES, default="default")
    users_visibility = models.CharField(max_length=30, choices=USERS_VISIBILITY_CHOICES, default="all")
    permissions = models.JSONField(default=list, blank=True)

    objects = RoleQuerySet.as_manager()

    class Meta:
        ordering = ["builtin", "position"]

    def __str__(self) -> str:
        return self.name

    def setable_permissions(self):
        return setable_permissions(self.builtin)

    def setable_permission_names(self):
        return permission_names(self.setable_permissions())

    def clean(self):
        _validate_string_list(self.permissions, "permissions")
        unknown = invalid_permissions(self.permissions, self.builtin)
        if unknown:
            raise ValidationError({"permissions": f"Not allowed for this role: {', '.join(unknown)}"})


class IssueStatus(models.Model):
    name = models.CharField(max_length=30, unique=True)
    is_closed = models.BooleanField(default=False)
    position = models.PositiveIntegerField(default=1)

    class Meta:
        ordering = ["position"]
        verbose_name_plural = "issue statuses"

    def __str__(self) -> str:
        return self.name


class CustomField(models.Model):
    TYPE_CHOICES = [
        ("IssueCustomField", "Issue custom field"),
    ]
    FORMAT_CHOICES = [
        ("string", "Text"),
        ("text", "Long text"),
        ("int", "Integer"),
        ("float", "Float"),
        ("date", "Date"),
        ("bool", "Boolean"),
        ("list", "List"),
        ("link", "Link"),
        ("user", "User"),
        ("version", "Version"),
        ("enumeration", "Key/value list"),
        ("attachment", "File"),
    ]
    CHOICE_FORMATS = frozenset({"list"})

    type = models.CharField(max_length=30, choices=TYPE_CHOICES, default="IssueCustomField")
    name = models.CharField(max_length=30)
    field_format = models.CharField(max_length=30, choices=FORMAT_CHOICES)
    description = models.TextField(blank=True)
    regexp = models.CharField(max_length=255, blank=True, default="")
    is_filter = models.BooleanField(default=False)
    searchable = models.BooleanField(default=False)
    multiple = models.BooleanField(default=False)
    possible_values = models.JSONField(default=list, blank=True)
    url_pattern = models.CharField(max_length=255, blank=True, default="")
    position = models.PositiveIntegerField(default=1)

    class Meta:
        ordering = ["type", "position"]
        unique_together = ("type", "name")

    def __str__(self) -> str:
        return self.name

    def clean(self):
        _validate_string_list(self.possible_values, "possible_values")
        if self.field_format in self.CHOICE_FORMATS and not [v for v in self.possible_values if v.strip()]:
            raise ValidationError({"possible_values": "At least one possible value is required for list fields."})
        if self.regexp:
            try:
                re.compile(self.regexp)
            except re.error as exc:
                raise ValidationError({"regexp": f"Invalid regular expression: {exc}"}) from exc


class Tracker(models.Model):
    name = models.CharField(max_length=30, unique=True)
    default_status = models.ForeignKey(IssueStatus, on_delete=models.PROTECT, related_name="default_for_trackers")
    is_in_roadmap = models.BooleanField(default=True)
    position = models.PositiveIntegerField(default=1)
    core_fields = models.JSONField(default=list, blank=True)
    description = models.TextField(blank=True)
    custom_fields = models.ManyToManyField(CustomField, related_name="trackers", blank=True)

    class Meta:
        ordering = ["position"]

    def __str__(self) -> str:
        return self.name

    def clean(self):
        _validate_string_list(self.core_fields, "core_fields")
        unknown = sorted(set(self.core_fields) - set(TRACKER_CORE_FIELDS))
        if unknown:
            raise ValidationError({"core_fields": f"Unknown core fields: {', '.join(unknown)}"})


class WorkflowTransition(models.Model):
    tracker = models.ForeignKey(Tracker, on_delete=models.CASCADE, related_name="workflow_transitions")
    role = models.ForeignKey(Role, on_delete=models.CASCADE, related_name="workflow_transitions")
    old_status = models.ForeignKey(IssueStatus, on_delete=models.CASCADE, related_name="transitions_from")
    new_status = models.ForeignKey(IssueStatus, on_delete=models.CASCADE, related_name="transitions_to")

    class Meta:
        constraints = [
            models.UniqueConstraint(
                fields=["tracker", "role", "old_status", "new_status"],
                name="unique_workflow_transition",
            ),
            models.CheckConstraint(
                condition=~Q(old_status=F("new_status")),
                name="workflow_transition_not_self",
            ),
        ]

    def __str__(self) -> str:
        return f"{self.tracker_id}/{self.role_id}: {self.old_status_id} -> {self.new_status_id}"


class Enumeration(models.Model):
    TYPE_CHOICES = [
        ("IssuePriority", "Issue priority"),
    ]

    type = models.CharField(max_length=30, choices=TYPE_CHOICES)
    name = models.CharField(max_length=30)
    position = models.PositiveIntegerField(default=1)
    is_default = models.BooleanField(default=False)
    active = models.BooleanField(default=True)

    class Meta:
        ordering = ["type", "position"]
        constraints = [
            models.UniqueConstraint(fields=["type", "name"], name="unique_enumeration_name"),
            models.UniqueConstraint(
                fields=["type"],
                condition=Q(is_default=True),
                name="single_default_enumeration",
                violation_error_message="Only one default value is allowed per enumeration type.",
            ),
        ]

    def __str__(self) -> str:
        return self.name


class Project(models.Model):
    name = models.CharField(max_length=255)
    identifier = models.CharField(max_length=100, unique=True, validators=[identifier_validator])
    description = models.TextField(blank=True)
    is_public = models.BooleanField(default=True)
    enabled_modules = models.JSONField(default=list, blank=True)
    trackers = models.ManyToManyField(Tracker, related_name="projects", blank=True)
    issue_custom_fields = models.ManyToManyField(CustomField, related_name="projects", blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["name"]

    def __str__(self) -> str:
        return self.name

    def clean(self):
        if self.identifier == "new":
            raise ValidationError({"identifier": "Identifier is reserved."})
        _validate_string_list(self.enabled_modules, "enabled_modules")
        unknown = sorted(set(self.enabled_modules) - set(PROJECT_MODULES))
        if unknown:
            raise ValidationError({"enabled_modules": f"Unknown modules: {', '.join(unknown)}"})


class Query(models.Model):
    TYPE_CHOICES = [
        ("IssueQuery", "Issue query"),
        ("ProjectQuery", "Project query"),
    ]
    VISIBILITY_PRIVATE = 0
    VISIBILITY_ROLES = 1
    VISIBILITY_PUBLIC = 2
    VISIBILITY_CHOICES = [
        (VISIBILITY_PRIVATE, "Private"),
        (VISIBILITY_ROLES, "Roles"),
        (VISIBILITY_PUBLIC, "Public"),
    ]

    type = models.CharField(max_length=30, choices=TYPE_CHOICES)
    name = models.CharField(max_length=255)
    filters = models.JSONField(default=dict, blank=True)
    sort_criteria = models.JSONField(default=list, blank=True)
    visibility = models.PositiveSmallIntegerField(choices=VISIBILITY_CHOICES, default=VISIBILITY_PRIVATE)
    project = models.ForeignKey(Project, null=True, blank=True, on_delete=models.CASCADE, related_name="queries")
    user = models.ForeignKey(User, null=True, blank=True, on_delete=models.CASCADE, related_name="queries")

    class Meta:
        ordering = ["type", "name"]
        verbose_name_plural = "queries"

    def __str__(self) -> str:
        return self.name

    def clean(self):
        if not isinstance(self.filters, dict):
            raise ValidationError({"filters": "Filters must be a mapping."})
        for field, condition in self.filters.items():
            if not isinstance(condition, dict):
                raise ValidationError({"filters": f"{field}: condition must be a mapping."})
            operator = condition.get("operator")
            if operator not in QUERY_OPERATORS:
                raise ValidationError({"filters": f"{field}: unknown operator {operator!r}."})
            values = condition.get("values")
            if not isinstance(values, list) or any(not isinstance(value, str) for value in values):
                raise ValidationError({"filters": f"{field}: values must be a list of strings."})
        if not isinstance(self.sort_criteria, list):
            raise ValidationError({"sort_criteria": "Sort criteria must be a list."})
        for criterion in self.sort_criteria:
            if (
                not isinstance(criterion, (list, tuple))
                or len(criterion) != 2
                or not isinstance(criterion[0], str)
                or criterion[1] not in ("asc", "desc")
            ):
                raise ValidationError({"sort_criteria": f"Invalid sort criterion: {criterion!r}."})


class Member(models.Model):
    project = models.ForeignKey(Project, on_delete=models.CASCADE, related_name="members")
    principal = models.ForeignKey(Principal, on_delete=models.CASCADE, related_name="memberships")
    roles = models.ManyToManyField(Role, related_name="members")
    editable_roles = models.ManyToManyField(Role, related_name="editable_by_members", blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        unique_together = ("project", "principal")

    def __str__(self) -> str:
        return f"{self.principal} in {self.project}"

    def assign_roles(self, roles: Iterable[Role], editable_roles: Iterable[Role] = ()) -> None:
        roles = list(roles)
        editable_roles = list(editable_roles)
        if not roles:
            raise ValidationError({"roles": "Role can't be empty."})
        if any(role.builtin != BUILTIN_GIVABLE for role in roles):
            raise ValidationError({"roles": "Builtin roles cannot be granted through membership."})
        granted = {role.pk for role in roles}
        outside = sorted(role.name for role in editable_roles if role.pk not in granted)
        if outside:
            raise ValidationError({"editable_roles": f"Not granted to this member: {', '.join(outside)}"})
        self.roles.set(roles)
        self.editable_roles.set(editable_roles)


class Webhook(models.Model):
    url = models.CharField(max_length=2000)
    project = models.ForeignKey(Project, on_delete=models.CASCADE, related_name="webhooks")
    active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)

    def __str__(self) -> str:
        return self.url

    def clean(self):
        parsed = urlparse(self.url or "")
        if parsed.scheme not in ("http", "https") or not parsed.netloc:
            raise ValidationError({"url": "Webhook URL must be an absolute http(s) URL."})


class Setting(models.Model):
    name = models.CharField(max_length=255, unique=True)
    value = models.JSONField(null=True, blank=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self) -> str:
        return self.name

    @classmethod
    def get_value(cls, name: str, default=None):
        row = cls.objects.filter(name=name).first()
        return row.value if row else default
