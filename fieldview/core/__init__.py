"""Core models shared by every fieldview component."""

from .models import (
    AccessResult,
    AttributeDescriptor,
    AttributeMeta,
    Entry,
    Modifier,
    RenderSettings,
    Visibility,
)

__all__ = [
    "AccessResult",
    "AttributeDescriptor",
    "AttributeMeta",
    "Entry",
    "Modifier",
    "RenderSettings",
    "Visibility",
]
