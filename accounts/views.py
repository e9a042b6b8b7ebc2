import logging

from django.contrib import messages
from django.contrib.auth import login
from django.contrib.auth.forms import UserCreationForm
from django.shortcuts import render, redirect
from django.views.decorators.http import require_http_methods

logger = logging.getLogger(__name__)


@require_http_methods(["GET", "POST"])
def sign_up(request):
    """Create an account and sign the new user straight in."""
    if request.user.is_authenticated:
        return redirect("core:home")

    if request.method == "POST":
        form = UserCreationForm(request.POST)
        if form.is_valid():
            user = form.save()
            login(request, user, backend="django.contrib.auth.backends.ModelBackend")
            logger.info("New account %s signed up.", user.pk)
            messages.success(request, f"Welcome, {user.get_username()}!")
            return redirect("core:home")
        messages.error(request, "Please correct the errors below.")
    else:
        form = UserCreationForm()
    return render(request, "accounts/sign_up.html", {"form": form})
