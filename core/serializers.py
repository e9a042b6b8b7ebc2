from rest_framework import serializers

from .forms import REQUIRED_MESSAGES
from .models import Category, Companion, INSTRUCTIONS_MIN_LENGTH, SEED_MIN_LENGTH


def _messages(field: str, *codes: str) -> dict:
    return {code: REQUIRED_MESSAGES[field] for code in codes}


class CompanionSerializer(serializers.ModelSerializer):
    """
    Wire shape of a companion: `{name, description, instructions, seed, src,
    categoryId}` in, the same plus `id`/`userId`/timestamps out.
    """
    categoryId = serializers.PrimaryKeyRelatedField(
        source="category",
        queryset=Category.objects.all(),
        pk_field=serializers.UUIDField(error_messages=_messages("category", "invalid")),
        error_messages=_messages(
            "category", "required", "null", "does_not_exist", "incorrect_type"
        ),
    )
    userId = serializers.IntegerField(source="user_id", read_only=True)
    userName = serializers.CharField(source="user_name", read_only=True)
    createdAt = serializers.DateTimeField(source="created_at", read_only=True)
    updatedAt = serializers.DateTimeField(source="updated_at", read_only=True)

    name = serializers.CharField(
        max_length=100, error_messages=_messages("name", "required", "blank", "null")
    )
    description = serializers.CharField(
        max_length=255, error_messages=_messages("description", "required", "blank", "null")
    )
    instructions = serializers.CharField(
        trim_whitespace=False,
        min_length=INSTRUCTIONS_MIN_LENGTH,
        error_messages=_messages("instructions", "required", "blank", "null", "min_length"),
    )
    seed = serializers.CharField(
        trim_whitespace=False,
        min_length=SEED_MIN_LENGTH,
        error_messages=_messages("seed", "required", "blank", "null", "min_length"),
    )
    src = serializers.CharField(
        max_length=500, error_messages=_messages("src", "required", "blank", "null")
    )

    class Meta:
        model = Companion
        fields = [
            "id",
            "userId",
            "userName",
            "src",
            "name",
            "description",
            "instructions",
            "seed",
            "categoryId",
            "createdAt",
            "updatedAt",
        ]
        read_only_fields = ["id"]

    def to_companion_fields(self) -> dict:
        """validated_data keyed by model field names, for the service layer."""
        return dict(self.validated_data)
