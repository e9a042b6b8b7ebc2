from django import template
from django.http import QueryDict

register = template.Library()


@register.filter
def chunk(seq, size: int):
    """Split companions into rows of `size` cards for the grid."""
    try:
        size = int(size)
    except (TypeError, ValueError):
        size = 3
    size = max(size, 1)
    seq = list(seq or [])
    return [seq[i : i + size] for i in range(0, len(seq), size)]


@register.simple_tag(takes_context=True)
def query_with(context, **kwargs):
    """
    Current query string with `kwargs` replaced; empty values drop the key.

    Usage: <a href="?{% query_with categoryId=category.id %}">
    Keeps the search term when picking a category (and vice versa).
    """
    request = context.get("request")
    params = request.GET.copy() if request is not None else QueryDict(mutable=True)
    for key, value in kwargs.items():
        if value in (None, ""):
            params.pop(key, None)
        else:
            params[key] = str(value)
    return params.urlencode()
