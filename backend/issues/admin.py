from django.contrib import admin

from .models import (
    CustomField,
    Enumeration,
    Group,
    IssueStatus,
    Member,
    Project,
    Query,
    Role,
    Setting,
    Tracker,
    User,
    Webhook,
    WorkflowTransition,
)


@admin.register(Role)
class RoleAdmin(admin.ModelAdmin):
    list_display = ("name", "position", "builtin", "assignable", "issues_visibility")
    list_filter = ("builtin", "assignable")
    ordering = ("builtin", "position")


@admin.register(User)
class UserAdmin(admin.ModelAdmin):
    list_display = ("login", "firstname", "lastname", "admin", "created_at")
    search_fields = ("login", "firstname", "lastname", "mail")
    readonly_fields = ("created_at",)


@admin.register(Group)
class GroupAdmin(admin.ModelAdmin):
    list_display = ("name", "created_at")
    search_fields = ("name",)
    filter_horizontal = ("users",)


@admin.register(IssueStatus)
class IssueStatusAdmin(admin.ModelAdmin):
    list_display = ("name", "is_closed", "position")
    ordering = ("position",)


@admin.register(Tracker)
class TrackerAdmin(admin.ModelAdmin):
    list_display = ("name", "default_status", "is_in_roadmap", "position")
    filter_horizontal = ("custom_fields",)


@admin.register(WorkflowTransition)
class WorkflowTransitionAdmin(admin.ModelAdmin):
    list_display = ("tracker", "role", "old_status", "new_status")
    list_filter = ("tracker", "role")


@admin.register(Enumeration)
class EnumerationAdmin(admin.ModelAdmin):
    list_display = ("name", "type", "position", "is_default", "active")
    list_filter = ("type",)


@admin.register(CustomField)
class CustomFieldAdmin(admin.ModelAdmin):
    list_display = ("name", "type", "field_format", "is_filter", "searchable")
    list_filter = ("field_format",)


@admin.register(Query)
class QueryAdmin(admin.ModelAdmin):
    list_display = ("name", "type", "visibility", "project", "user")
    list_filter = ("type", "visibility")


class MemberInline(admin.TabularInline):
    model = Member
    extra = 0
    fields = ("principal", "created_at")
    readonly_fields = ("created_at",)


class WebhookInline(admin.TabularInline):
    model = Webhook
    extra = 0
    fields = ("url", "active", "created_at")
    readonly_fields = ("created_at",)


@admin.register(Project)
class ProjectAdmin(admin.ModelAdmin):
    list_display = ("name", "identifier", "is_public", "created_at")
    search_fields = ("name", "identifier")
    filter_horizontal = ("trackers", "issue_custom_fields")
    inlines = [MemberInline, WebhookInline]


@admin.register(Setting)
class SettingAdmin(admin.ModelAdmin):
    list_display = ("name", "value", "updated_at")
    search_fields = ("name",)
