"""
Data access for companions and categories.

Pages and the JSON API go through these helpers instead of touching the ORM
directly, so the ownership rule (a user only ever sees or edits their own
companions) lives in one place.
"""

import logging
from typing import Optional
from uuid import UUID

from django.db import DatabaseError, transaction
from django.db.models import QuerySet

from ..models import Category, Companion
from .avatars import discard_stored_avatar, maybe_cache_remote_avatar

logger = logging.getLogger(__name__)

COMPANION_FIELDS = ("name", "description", "instructions", "seed", "src", "category")


def list_categories() -> QuerySet:
    """All categories, alphabetical (model ordering)."""
    return Category.objects.all()


def _parse_id(value) -> Optional[UUID]:
    if isinstance(value, UUID):
        return value
    try:
        return UUID(str(value))
    except (TypeError, ValueError):
        return None


def get_companion_for_user(user, companion_id) -> Optional[Companion]:
    """
    Return the companion with `companion_id` owned by `user`, or None.

    Malformed ids (e.g. the "new" placeholder in /companion/new/), unknown ids
    and other users' companions all come back as None so callers fall
    through to the create form.
    """
    pk = _parse_id(companion_id)
    if pk is None or not getattr(user, "is_authenticated", False):
        return None
    return (
        Companion.objects.select_related("category")
        .filter(pk=pk, user=user)
        .first()
    )


def search_companions(name: Optional[str] = None, category_id=None) -> QuerySet:
    """
    Companions for the root page, newest first.

    `name` is a case-insensitive fragment; `category_id` limits to one
    category. A malformed category id yields an empty result.
    """
    qs = Companion.objects.select_related("category")
    name = (name or "").strip()
    if name:
        qs = qs.filter(name__icontains=name)
    if category_id:
        pk = _parse_id(category_id)
        if pk is None:
            return qs.none()
        qs = qs.filter(category_id=pk)
    return qs


def _display_name(user) -> str:
    full = ""
    if hasattr(user, "get_full_name"):
        full = (user.get_full_name() or "").strip()
    return full or user.get_username()


def _apply_fields(companion: Companion, fields: dict) -> None:
    for key in COMPANION_FIELDS:
        if key in fields:
            setattr(companion, key, fields[key])


def _resolve_src(fields: dict) -> dict:
    # Mirroring is a network call; keep it outside any open transaction.
    if "src" in fields:
        fields = dict(fields, src=maybe_cache_remote_avatar(fields["src"]))
    return fields


def _save(companion: Companion, fields: dict, original_src) -> None:
    try:
        with transaction.atomic():
            _apply_fields(companion, fields)
            companion.user_name = _display_name(companion.user)
            companion.save()
    except DatabaseError:
        if fields.get("src") != (original_src or "").strip():
            discard_stored_avatar(fields.get("src"))
        raise


def create_companion(user, **fields) -> Companion:
    resolved = _resolve_src(fields)
    companion = Companion(user=user)
    _save(companion, resolved, fields.get("src"))
    logger.info("Created companion %s for user %s.", companion.pk, user.pk)
    return companion


def update_companion(companion: Companion, **fields) -> Companion:
    resolved = _resolve_src(fields)
    _save(companion, resolved, fields.get("src"))
    logger.info("Updated companion %s.", companion.pk)
    return companion
