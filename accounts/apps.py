from django.apps import AppConfig


class AccountsConfig(AppConfig):
    """Django app configuration for the Accounts app.

    Sign-up lives here; sign-in/sign-out come from django.contrib.auth.urls.
    """

    default_auto_field = "django.db.models.BigAutoField"
    name = "accounts"
