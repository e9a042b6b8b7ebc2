from django.apps import AppConfig


class CoreConfig(AppConfig):
    """App configuration for the core application (companions, categories and their pages/API)."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "core"
