from django.conf import settings
from django.conf.urls.static import static
from django.contrib import admin
from django.urls import path, include

urlpatterns = [
    path("admin/", admin.site.urls),

    # Core app (namespaced): pages + JSON API
    path("", include(("core.urls", "core"), namespace="core")),

    # Django auth (provides 'login', 'logout', password URLs)
    path("accounts/", include("django.contrib.auth.urls")),

    path("accounts/", include(("accounts.urls", "accounts"), namespace="accounts")),
]

if settings.DEBUG:
    # serve uploaded avatars from MEDIA_ROOT during local development
    urlpatterns += static(settings.MEDIA_URL, document_root=settings.MEDIA_ROOT)
