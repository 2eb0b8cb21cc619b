"""Core models for fieldview.

- Visibility / Modifier: the tier and modifier vocabulary of an attribute
- AttributeMeta: explicit per-attribute metadata declared by a class
- AttributeDescriptor: one inspectable attribute plus its accessor
- AccessResult: outcome of reading an attribute value
- Entry: one rendered key/value pair
- RenderSettings: output formatting knobs
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable

from pydantic import BaseModel, ConfigDict, Field


# =============================================================================
# Vocabulary
# =============================================================================


class Visibility(str, Enum):
    PUBLIC = "public"
    PROTECTED = "protected"
    PACKAGE = "package"
    PRIVATE = "private"


class Modifier(str, Enum):
    FINAL = "final"
    TRANSIENT = "transient"
    VOLATILE = "volatile"


class AttributeMeta(BaseModel):
    """Explicit metadata for one attribute.

    Declared through ``fieldview.attribute(...)`` on dataclass fields or
    through a class-level ``__fieldview__`` table. Anything left unset falls
    back to what the introspector infers.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    visibility: Visibility | None = None
    final: bool = False
    transient: bool = False
    volatile: bool = False

    def modifiers(self) -> frozenset[Modifier]:
        flags = set()
        if self.final:
            flags.add(Modifier.FINAL)
        if self.transient:
            flags.add(Modifier.TRANSIENT)
        if self.volatile:
            flags.add(Modifier.VOLATILE)
        return frozenset(flags)


# =============================================================================
# Attributes and values
# =============================================================================


@dataclass(frozen=True)
class AccessResult:
    """Value read from an attribute, or the exception that prevented it."""

    value: Any = None
    error: Exception | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def capture(cls, accessor: Callable[[Any], Any], instance: Any) -> "AccessResult":
        """Call ``accessor(instance)``, turning any exception into a failed result."""
        try:
            return cls(value=accessor(instance))
        except Exception as exc:
            return cls(error=exc)


class AttributeDescriptor(BaseModel):
    """One inspectable attribute of a target object.

    ``declared_type`` is compared by identity in type rules, so a rule for
    ``int`` never matches a ``bool`` attribute.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    name: str
    declared_type: type = object
    visibility: Visibility = Visibility.PUBLIC
    modifiers: frozenset[Modifier] = Field(default_factory=frozenset)
    accessor: Callable[[Any], Any]

    def has(self, modifier: Modifier) -> bool:
        return modifier in self.modifiers

    def read(self, instance: Any) -> AccessResult:
        """Read this attribute from ``instance``, capturing any failure."""
        return AccessResult.capture(self.accessor, instance)


@dataclass(frozen=True)
class Entry:
    """A rendered ``key=value`` pair.

    ``attribute`` holds the original attribute name, or None for custom
    entries that do not correspond to any attribute.
    """

    key: str
    text: str
    attribute: str | None = None


# =============================================================================
# Rendering
# =============================================================================


class RenderSettings(BaseModel):
    """Formatting of the rendered string."""

    model_config = ConfigDict(validate_assignment=True)

    identity_hash: bool = False
    hash_symbol: str = "@"
    separator: str = ","
    equality: str = "="
