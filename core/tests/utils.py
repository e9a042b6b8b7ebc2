"""Shared builders for the core test-suite."""

from django.contrib.auth import get_user_model

from core.models import Category, Companion

User = get_user_model()

INSTRUCTIONS = (
    "You are Albert Einstein. You are a renowned physicist known for your "
    "theory of relativity. Your work has shaped modern physics and you have a "
    "deep passion for explaining complex ideas in simple terms. You are curious, "
    "playful and humble when you talk about the universe."
)
SEED = (
    "Human: Hi Albert, what's on your mind today?\n"
    "Albert: *with a twinkle in his eye* Just pondering the mysteries of the "
    "universe, as always. Life is a delightful puzzle, isn't it?\n"
    "Human: Sure is. What are you working on?\n"
    "Albert: *nods* Unifying the forces of nature, one thought experiment at a time.\n"
)

# 1x1 transparent GIF; small enough to inline, valid for Pillow.
TINY_GIF = (
    b"GIF89a\x01\x00\x01\x00\x80\x00\x00\x00\x00\x00\xff\xff\xff!\xf9\x04\x01"
    b"\x00\x00\x00\x00,\x00\x00\x00\x00\x01\x00\x01\x00\x00\x02\x02D\x01\x00;"
)


def make_user(username="alice", password="pass12345"):
    return User.objects.create_user(username=username, password=password)


def make_category(name="Scientists (test)"):
    return Category.objects.create(name=name)


def companion_values(category, **overrides):
    """Form/JSON values for a valid companion."""
    values = {
        "name": "Albert Einstein",
        "description": "Theoretical physicist",
        "instructions": INSTRUCTIONS,
        "seed": SEED,
        "src": "https://img.test/einstein.png",
        "category": str(category.pk),
    }
    values.update(overrides)
    return values


def api_payload(category, **overrides):
    values = companion_values(category)
    values["categoryId"] = values.pop("category")
    values.update(overrides)
    return values


def make_companion(user, category, **overrides):
    fields = companion_values(category)
    fields["category"] = category
    fields.update(overrides)
    return Companion.objects.create(user=user, user_name=user.get_username(), **fields)
