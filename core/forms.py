from django import forms
from django.urls import reverse

from .models import Category, Companion, INSTRUCTIONS_MIN_LENGTH, SEED_MIN_LENGTH

PREAMBLE = (
    "You are Steve Jobs. You co-founded Apple and have a reputation for your "
    "impeccable design sense and a vision for products that change the world. "
    "You're charismatic and known for your signature black turtleneck. You are "
    "characterized by intense passion and unwavering focus. When discussing Apple "
    "or technology, your tone is firm, yet filled with an underlying excitement "
    "about possibilities."
)

SEED_CHAT = (
    "Human: Hi Steve, what's the next big thing for Apple?\n"
    "Steve: *intensely* We don't just create products. We craft experiences, "
    "ways to change the world.\n"
    "Human: Your dedication is palpable.\n"
    "Steve: *with fervor* Remember, those who are crazy enough to think they "
    "can change the world are the ones who do.\n"
)

# Shared with the API serializer so both entry points report the same text.
REQUIRED_MESSAGES = {
    "name": "Name is required",
    "description": "Description is required",
    "instructions": "Instructions require at least 200 characters",
    "seed": "Seed require at least 200 characters",
    "src": "Image is required",
    "category": "Category is required",
}


class CategoryChoiceField(forms.ModelChoiceField):
    """ModelChoiceField whose malformed ids (not just unknown ones) fail as `invalid_choice`."""

    def to_python(self, value):
        try:
            return super().to_python(value)
        except forms.ValidationError as exc:
            if getattr(exc, "code", None) == "invalid_choice":
                raise
            raise forms.ValidationError(
                self.error_messages["invalid_choice"], code="invalid_choice"
            ) from exc


class CompanionForm(forms.ModelForm):
    """
    Create/edit form for a Companion.

    `initial_data` is the companion being edited (None when creating). It
    decides where the browser submits: PATCH to the record's API endpoint,
    or POST to the collection endpoint.

    `src` is normally filled by the upload widget; a file in `image` is
    accepted instead and stored by the view.
    """
    src = forms.CharField(
        required=False,
        max_length=500,
        widget=forms.HiddenInput(attrs={"data-avatar-src": "1"}),
    )
    image = forms.ImageField(
        required=False,
        widget=forms.ClearableFileInput(attrs={"class": "form-control", "accept": "image/*"}),
    )
    instructions = forms.CharField(
        strip=False,
        min_length=INSTRUCTIONS_MIN_LENGTH,
        error_messages={
            "required": REQUIRED_MESSAGES["instructions"],
            "min_length": REQUIRED_MESSAGES["instructions"],
        },
        help_text="Describe in detail your companion's backstory and relevant details.",
        widget=forms.Textarea(attrs={
            "rows": 7,
            "class": "form-control",
            "placeholder": PREAMBLE,
        }),
    )
    seed = forms.CharField(
        strip=False,
        min_length=SEED_MIN_LENGTH,
        label="Example Conversation",
        error_messages={
            "required": REQUIRED_MESSAGES["seed"],
            "min_length": REQUIRED_MESSAGES["seed"],
        },
        help_text="Describe in detail your companion's backstory and relevant details.",
        widget=forms.Textarea(attrs={
            "rows": 7,
            "class": "form-control",
            "placeholder": SEED_CHAT,
        }),
    )

    class Meta:
        model = Companion
        fields = ["src", "name", "description", "category", "instructions", "seed"]
        field_classes = {"category": CategoryChoiceField}
        labels = {"category": "Category"}
        help_texts = {
            "name": "This is what your AI companion will be named",
            "category": "Select a category for your AI",
        }
        error_messages = {
            "name": {"required": REQUIRED_MESSAGES["name"]},
            "description": {"required": REQUIRED_MESSAGES["description"]},
            "category": {
                "required": REQUIRED_MESSAGES["category"],
                "invalid_choice": REQUIRED_MESSAGES["category"],
            },
        }
        widgets = {
            "name": forms.TextInput(attrs={"class": "form-control", "placeholder": "Guess who"}),
            "description": forms.TextInput(attrs={"class": "form-control", "placeholder": "description"}),
            "category": forms.Select(attrs={"class": "form-select"}),
        }

    def __init__(self, *args, initial_data=None, categories=None, **kwargs):
        if initial_data is not None:
            kwargs.setdefault("instance", initial_data)
        super().__init__(*args, **kwargs)
        self.initial_data = initial_data
        self.fields["category"].queryset = categories if categories is not None else Category.objects.all()
        self.fields["category"].empty_label = "Select a category"

    # ---- submission target ---------------------------------------------------

    @property
    def is_edit(self) -> bool:
        return self.initial_data is not None

    @property
    def submit_method(self) -> str:
        return "PATCH" if self.is_edit else "POST"

    @property
    def submit_url(self) -> str:
        if self.is_edit:
            return reverse("core:api_companion_detail", args=[self.initial_data.pk])
        return reverse("core:api_companion_create")

    @property
    def submit_label(self) -> str:
        return "Edit your companion" if self.is_edit else "Create your companion"

    # ---- validation ------------------------------------------------------------

    def clean_name(self):
        name = (self.cleaned_data.get("name") or "").strip()
        if not name:
            raise forms.ValidationError(REQUIRED_MESSAGES["name"])
        return name

    def clean_src(self):
        return (self.cleaned_data.get("src") or "").strip()

    def clean(self):
        cleaned = super().clean()
        if not cleaned.get("src") and not cleaned.get("image"):
            self.add_error("src", REQUIRED_MESSAGES["src"])
        return cleaned

    def companion_fields(self) -> dict:
        """Validated values in the shape the service layer expects."""
        return {
            key: self.cleaned_data[key]
            for key in ("name", "description", "instructions", "seed", "src", "category")
        }
