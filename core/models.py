"""
Core data models for Companion Studio.

Notes:
- Primary keys are UUIDs so ids can travel in URLs and JSON as plain strings.
- Companion ownership lives on `user`; every lookup that serves a page or
  an API write is scoped to the requesting user.
- Length rules for `instructions` / `seed` are model validators, so both the
  HTML form and the API serializer pick them up.
"""

from uuid import uuid4

from django.conf import settings
from django.core.validators import MinLengthValidator
from django.db import models
from django.db.models import Index

INSTRUCTIONS_MIN_LENGTH = 200
SEED_MIN_LENGTH = 200


class Category(models.Model):
    """
    A tag grouping companions ("Famous People", "Scientists", ...).
    Read-only from the app's point of view; rows come from a data migration
    or the admin.
    """
    id = models.UUIDField(primary_key=True, default=uuid4, editable=False)
    name = models.CharField(max_length=100, unique=True)

    class Meta:
        ordering = ["name"]
        verbose_name_plural = "categories"

    def __str__(self) -> str:
        return self.name


class Companion(models.Model):
    """
    A user-created AI companion profile.

    `instructions` is the behavioral preamble (backstory, tone) and `seed`
    an example conversation; both must be long enough to be useful.
    `src` holds the avatar image reference: a storage URL or an external one.
    """
    id = models.UUIDField(primary_key=True, default=uuid4, editable=False)

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="companions",
        help_text="Owner of this companion.",
    )
    # Display name of the owner at write time, shown on cards.
    user_name = models.CharField(max_length=150, blank=True)

    src = models.CharField(max_length=500, help_text="Avatar image URL.")
    name = models.CharField(max_length=100)
    description = models.CharField(max_length=255)
    instructions = models.TextField(
        validators=[
            MinLengthValidator(
                INSTRUCTIONS_MIN_LENGTH,
                message="Instructions require at least 200 characters",
            )
        ],
    )
    seed = models.TextField(
        validators=[
            MinLengthValidator(
                SEED_MIN_LENGTH,
                message="Seed require at least 200 characters",
            )
        ],
    )

    category = models.ForeignKey(
        Category,
        on_delete=models.PROTECT,
        related_name="companions",
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at"]
        indexes = [
            Index(fields=["user", "created_at"], name="companion_user_created_idx"),
            Index(fields=["name"], name="companion_name_idx"),
        ]

    def __str__(self) -> str:
        return f"{self.name} ({self.category})"

