from django.contrib import admin
from .models import Category, Companion


@admin.register(Category)
class CategoryAdmin(admin.ModelAdmin):
    list_display = ("name", "companion_count")
    search_fields = ("name",)

    @admin.display(description="Companions")
    def companion_count(self, obj):
        return obj.companions.count()


@admin.register(Companion)
class CompanionAdmin(admin.ModelAdmin):
    """Admin configuration for Companion objects (list/search filters)."""

    list_display = ("name", "category", "user", "created_at", "updated_at")
    search_fields = ("name", "description", "user__username")
    list_filter = ("category", "created_at")
    autocomplete_fields = ("category",)
    readonly_fields = ("id", "user_name", "created_at", "updated_at")
