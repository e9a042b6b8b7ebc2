import uuid

import django.core.validators
import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Category",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("name", models.CharField(max_length=100, unique=True)),
            ],
            options={
                "ordering": ["name"],
                "verbose_name_plural": "categories",
            },
        ),
        migrations.CreateModel(
            name="Companion",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("user_name", models.CharField(blank=True, max_length=150)),
                ("src", models.CharField(help_text="Avatar image URL.", max_length=500)),
                ("name", models.CharField(max_length=100)),
                ("description", models.CharField(max_length=255)),
                (
                    "instructions",
                    models.TextField(
                        validators=[
                            django.core.validators.MinLengthValidator(
                                200, message="Instructions require at least 200 characters"
                            )
                        ]
                    ),
                ),
                (
                    "seed",
                    models.TextField(
                        validators=[
                            django.core.validators.MinLengthValidator(
                                200, message="Seed require at least 200 characters"
                            )
                        ]
                    ),
                ),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "category",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="companions",
                        to="core.category",
                    ),
                ),
                (
                    "user",
                    models.ForeignKey(
                        help_text="Owner of this companion.",
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="companions",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "ordering": ["-created_at"],
                "indexes": [
                    models.Index(fields=["user", "created_at"], name="companion_user_created_idx"),
                    models.Index(fields=["name"], name="companion_name_idx"),
                ],
            },
        ),
    ]
