# ---- stdlib -----------------------------------------------------------------
import logging

# ---- Django ------------------------------------------------------------------
from django.contrib import messages
from django.contrib.auth.decorators import login_required
from django.db import DatabaseError
from django.shortcuts import render, redirect
from django.views.decorators.http import require_http_methods

# ---- App forms & services ----------------------------------------------------
from .forms import CompanionForm
from .services import companions
from .services.avatars import discard_stored_avatar, store_uploaded_avatar

# ---- Logging -----------------------------------------------------------------
logger = logging.getLogger(__name__)


# =============================================================================
# Root page
# =============================================================================

def home(request):
    """Search input, category list and the matching companions."""
    name = (request.GET.get("name") or "").strip()
    category_id = (request.GET.get("categoryId") or "").strip()

    categories = companions.list_categories()
    results = companions.search_companions(name=name, category_id=category_id)
    return render(
        request,
        "core/home.html",
        {
            "categories": categories,
            "companions": results,
            "search_name": name,
            "selected_category": category_id,
        },
    )


# =============================================================================
# Companion create / edit page
# =============================================================================

@login_required
@require_http_methods(["GET", "POST"])
def companion_detail(request, companion_id: str):
    """
    Render the companion form: the user's own companion when `companion_id`
    matches one, an empty create form otherwise.

    With JavaScript the form submits to the JSON API; this view also accepts
    a plain POST so the page works without it.
    """
    companion = companions.get_companion_for_user(request.user, companion_id)
    categories = companions.list_categories()

    if request.method == "POST":
        form = CompanionForm(
            request.POST, request.FILES, initial_data=companion, categories=categories
        )
        if form.is_valid():
            fields = form.companion_fields()
            image = form.cleaned_data.get("image")
            stored_src = None
            try:
                if image:
                    stored_src = fields["src"] = store_uploaded_avatar(image)
                if companion is None:
                    companions.create_companion(request.user, **fields)
                else:
                    companions.update_companion(companion, **fields)
            except (DatabaseError, OSError) as e:
                logger.exception("Could not save companion.")
                discard_stored_avatar(stored_src)
                messages.error(request, str(e) or "Something went wrong.")
            else:
                messages.success(request, "Success!")
                return redirect("core:home")
        else:
            messages.error(request, "Please correct the errors below.")
    else:
        form = CompanionForm(initial_data=companion, categories=categories)

    return render(
        request,
        "core/companion_form.html",
        {"form": form, "companion": companion, "categories": categories},
    )

