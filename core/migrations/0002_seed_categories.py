from django.db import migrations

CATEGORY_NAMES = [
    "Famous People",
    "Movies & TV",
    "Musicians",
    "Games",
    "Animals",
    "Philosophy",
    "Scientists",
]


def seed_categories(apps, schema_editor):
    Category = apps.get_model("core", "Category")
    for name in CATEGORY_NAMES:
        Category.objects.get_or_create(name=name)


def unseed_categories(apps, schema_editor):
    Category = apps.get_model("core", "Category")
    Category.objects.filter(name__in=CATEGORY_NAMES, companions__isnull=True).delete()


class Migration(migrations.Migration):

    dependencies = [
        ("core", "0001_initial"),
    ]

    operations = [
        migrations.RunPython(seed_categories, unseed_categories),
    ]
