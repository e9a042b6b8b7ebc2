from django.urls import path

from . import api_views, views

app_name = "core"

urlpatterns = [
    # Root: search + category list
    path("", views.home, name="home"),

    # Companion form page; "new" (or any id the user doesn't own) renders the create form
    path("companion/<str:companion_id>/", views.companion_detail, name="companion_detail"),

    # JSON API used by the form
    path("api/companion", api_views.CompanionCreateView.as_view(), name="api_companion_create"),
    path(
        "api/companion/<str:companion_id>",
        api_views.CompanionDetailView.as_view(),
        name="api_companion_detail",
    ),
    path("api/uploads/presign", api_views.AvatarPresignView.as_view(), name="api_avatar_presign"),
]
