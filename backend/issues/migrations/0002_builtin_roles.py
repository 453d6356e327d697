from django.db import migrations

BUILTIN_ROLES = (
    ("Non member", 1),
    ("Anonymous", 2),
)


def create_builtin_roles(apps, schema_editor):
    Role = apps.get_model("issues", "Role")
    for position, (name, builtin) in enumerate(BUILTIN_ROLES, start=1):
        Role.objects.get_or_create(
            builtin=builtin,
            defaults={"name": name, "position": position, "assignable": False, "permissions": []},
        )


def remove_builtin_roles(apps, schema_editor):
    Role = apps.get_model("issues", "Role")
    Role.objects.filter(builtin__in=[builtin for _, builtin in BUILTIN_ROLES]).delete()


class Migration(migrations.Migration):
    dependencies = [
        ("issues", "0001_initial"),
    ]

    operations = [
        migrations.RunPython(create_builtin_roles, remove_builtin_roles),
    ]
