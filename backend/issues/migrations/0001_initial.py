import django.core.validators
import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):
    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Principal",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("type", models.CharField(blank=True, choices=[("user", "User"), ("group", "Group")], editable=False, max_length=20)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
            ],
        ),
        migrations.CreateModel(
            name="CustomField",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("type", models.CharField(choices=[("IssueCustomField", "Issue custom field")], default="IssueCustomField", max_length=30)),
                ("name", models.CharField(max_length=30)),
                (
                    "field_format",
                    models.CharField(
                        choices=[
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
                        ],
                        max_length=30,
                    ),
                ),
                ("description", models.TextField(blank=True)),
                ("regexp", models.CharField(blank=True, default="", max_length=255)),
                ("is_filter", models.BooleanField(default=False)),
                ("searchable", models.BooleanField(default=False)),
                ("multiple", models.BooleanField(default=False)),
                ("possible_values", models.JSONField(blank=True, default=list)),
                ("url_pattern", models.CharField(blank=True, default="", max_length=255)),
                ("position", models.PositiveIntegerField(default=1)),
            ],
            options={
                "ordering": ["type", "position"],
                "unique_together": {("type", "name")},
            },
        ),
        migrations.CreateModel(
            name="IssueStatus",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(max_length=30, unique=True)),
                ("is_closed", models.BooleanField(default=False)),
                ("position", models.PositiveIntegerField(default=1)),
            ],
            options={
                "ordering": ["position"],
                "verbose_name_plural": "issue statuses",
            },
        ),
        migrations.CreateModel(
            name="Role",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(max_length=255, unique=True)),
                ("position", models.PositiveIntegerField(default=1)),
                ("builtin", models.PositiveSmallIntegerField(choices=[(0, "Givable"), (1, "Non member"), (2, "Anonymous")], default=0)),
                ("assignable", models.BooleanField(default=True)),
                (
                    "issues_visibility",
                    models.CharField(
                        choices=[
                            ("all", "All issues"),
                            ("default", "All non private issues"),
                            ("own", "Issues created by or assigned to the user"),
                        ],
                        default="default",
                        max_length=30,
                    ),
                ),
                (
                    "users_visibility",
                    models.CharField(
                        choices=[("all", "All active users"), ("members_of_visible_projects", "Members of visible projects")],
                        default="all",
                        max_length=30,
                    ),
                ),
                ("permissions", models.JSONField(blank=True, default=list)),
            ],
            options={
                "ordering": ["builtin", "position"],
            },
        ),
        migrations.CreateModel(
            name="User",
            fields=[
                (
                    "principal_ptr",
                    models.OneToOneField(
                        auto_created=True,
                        on_delete=django.db.models.deletion.CASCADE,
                        parent_link=True,
                        primary_key=True,
                        serialize=False,
                        to="issues.principal",
                    ),
                ),
                (
                    "login",
                    models.CharField(
                        max_length=60,
                        unique=True,
                        validators=[
                            django.core.validators.RegexValidator(
                                "^[A-Za-z0-9_\\-@.]+$", "Login may only contain letters, digits and _-@."
                            )
                        ],
                    ),
                ),
                ("firstname", models.CharField(max_length=30)),
                ("lastname", models.CharField(max_length=255)),
                ("mail", models.EmailField(blank=True, max_length=254)),
                ("admin", models.BooleanField(default=False)),
                ("language", models.CharField(blank=True, default="", max_length=10)),
                (
                    "mail_notification",
                    models.CharField(
                        choices=[
                            ("all", "For any event on all my projects"),
                            ("selected", "For any event on the selected projects only"),
                            ("only_my_events", "Only for things I watch or I'm involved in"),
                            ("only_assigned", "Only for things I watch or I am assigned to"),
                            ("only_owner", "Only for things I watch or I am the owner of"),
                            ("none", "No events"),
                        ],
                        default="only_my_events",
                        max_length=20,
                    ),
                ),
            ],
            options={
                "ordering": ["login"],
            },
            bases=("issues.principal",),
        ),
        migrations.CreateModel(
            name="Group",
            fields=[
                (
                    "principal_ptr",
                    models.OneToOneField(
                        auto_created=True,
                        on_delete=django.db.models.deletion.CASCADE,
                        parent_link=True,
                        primary_key=True,
                        serialize=False,
                        to="issues.principal",
                    ),
                ),
                ("name", models.CharField(max_length=255, unique=True)),
                ("users", models.ManyToManyField(blank=True, related_name="member_groups", to="issues.user")),
            ],
            options={
                "ordering": ["name"],
            },
            bases=("issues.principal",),
        ),
        migrations.CreateModel(
            name="Tracker",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(max_length=30, unique=True)),
                ("is_in_roadmap", models.BooleanField(default=True)),
                ("position", models.PositiveIntegerField(default=1)),
                ("core_fields", models.JSONField(blank=True, default=list)),
                ("description", models.TextField(blank=True)),
                (
                    "default_status",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="default_for_trackers",
                        to="issues.issuestatus",
                    ),
                ),
                ("custom_fields", models.ManyToManyField(blank=True, related_name="trackers", to="issues.customfield")),
            ],
            options={
                "ordering": ["position"],
            },
        ),
        migrations.CreateModel(
            name="Project",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(max_length=255)),
                (
                    "identifier",
                    models.CharField(
                        max_length=100,
                        unique=True,
                        validators=[
                            django.core.validators.RegexValidator(
                                "^(?!\\d+$)[a-z0-9\\-_]+$",
                                "Identifier must be lowercase letters, digits, dashes or underscores and not only digits.",
                            )
                        ],
                    ),
                ),
                ("description", models.TextField(blank=True)),
                ("is_public", models.BooleanField(default=True)),
                ("enabled_modules", models.JSONField(blank=True, default=list)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("trackers", models.ManyToManyField(blank=True, related_name="projects", to="issues.tracker")),
                ("issue_custom_fields", models.ManyToManyField(blank=True, related_name="projects", to="issues.customfield")),
            ],
            options={
                "ordering": ["name"],
            },
        ),
        migrations.CreateModel(
            name="WorkflowTransition",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                (
                    "tracker",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE, related_name="workflow_transitions", to="issues.tracker"
                    ),
                ),
                (
                    "role",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE, related_name="workflow_transitions", to="issues.role"
                    ),
                ),
                (
                    "old_status",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE, related_name="transitions_from", to="issues.issuestatus"
                    ),
                ),
                (
                    "new_status",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE, related_name="transitions_to", to="issues.issuestatus"
                    ),
                ),
            ],
            options={
                "constraints": [
                    models.UniqueConstraint(
                        fields=("tracker", "role", "old_status", "new_status"), name="unique_workflow_transition"
                    ),
                    models.CheckConstraint(
                        condition=models.Q(("old_status", models.F("new_status")), _negated=True),
                        name="workflow_transition_not_self",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="Enumeration",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("type", models.CharField(choices=[("IssuePriority", "Issue priority")], max_length=30)),
                ("name", models.CharField(max_length=30)),
                ("position", models.PositiveIntegerField(default=1)),
                ("is_default", models.BooleanField(default=False)),
                ("active", models.BooleanField(default=True)),
            ],
            options={
                "ordering": ["type", "position"],
                "constraints": [
                    models.UniqueConstraint(fields=("type", "name"), name="unique_enumeration_name"),
                    models.UniqueConstraint(
                        condition=models.Q(("is_default", True)),
                        fields=("type",),
                        name="single_default_enumeration",
                        violation_error_message="Only one default value is allowed per enumeration type.",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="Query",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("type", models.CharField(choices=[("IssueQuery", "Issue query"), ("ProjectQuery", "Project query")], max_length=30)),
                ("name", models.CharField(max_length=255)),
                ("filters", models.JSONField(blank=True, default=dict)),
                ("sort_criteria", models.JSONField(blank=True, default=list)),
                ("visibility", models.PositiveSmallIntegerField(choices=[(0, "Private"), (1, "Roles"), (2, "Public")], default=0)),
                (
                    "project",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="queries",
                        to="issues.project",
                    ),
                ),
                (
                    "user",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="queries",
                        to="issues.user",
                    ),
                ),
            ],
            options={
                "ordering": ["type", "name"],
                "verbose_name_plural": "queries",
            },
        ),
        migrations.CreateModel(
            name="Member",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                (
                    "project",
                    models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="members", to="issues.project"),
                ),
                (
                    "principal",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE, related_name="memberships", to="issues.principal"
                    ),
                ),
                ("roles", models.ManyToManyField(related_name="members", to="issues.role")),
                ("editable_roles", models.ManyToManyField(blank=True, related_name="editable_by_members", to="issues.role")),
            ],
            options={
                "unique_together": {("project", "principal")},
            },
        ),
        migrations.CreateModel(
            name="Webhook",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("url", models.CharField(max_length=2000)),
                ("active", models.BooleanField(default=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                (
                    "project",
                    models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="webhooks", to="issues.project"),
                ),
            ],
        ),
        migrations.CreateModel(
            name="Setting",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(max_length=255, unique=True)),
                ("value", models.JSONField(blank=True, null=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
        ),
    ]
