"""Per job class configuration lookup."""

from typing import Any

from .models import JobOccurrence

_MISSING = object()


def get_instance_property(occurrence: JobOccurrence, name: str, default: Any = None) -> Any:
    """Resolve a configuration property from the job instance.

    A method of that name is called with the occurrence, an attribute is
    returned as is, and anything else falls back to ``default``.
    """
    instance = occurrence.instance
    if instance is None:
        return default

    value = getattr(instance, name, _MISSING)
    if value is _MISSING:
        return default
    if callable(value) and not isinstance(value, type):
        return value(occurrence)
    return value
