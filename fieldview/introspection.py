"""Attribute discovery for arbitrary Python objects.

The ``Introspector`` protocol is the seam between the rendering pipeline and
the object being described. ``ReflectiveIntrospector`` implements it with
Python's own introspection:

Discovery order (duplicates dropped):
1. dataclass fields, in declaration order (base classes first)
2. ``__slots__`` entries along the MRO (base classes first)
3. remaining instance ``__dict__`` keys, in insertion order

Visibility comes from explicit metadata when present, otherwise from the
naming convention: ``__x`` (name-mangled) is private, ``_x`` is protected,
anything else is public. The package tier can only be declared explicitly.
"""

from __future__ import annotations

import dataclasses
import logging
import types
import typing
from operator import attrgetter
from typing import Any, Annotated, ClassVar, Final, Iterator, Protocol

from .core.models import (
    AccessResult,
    AttributeDescriptor,
    AttributeMeta,
    Modifier,
    Visibility,
)

logger = logging.getLogger(__name__)

# Key under which attribute() stores AttributeMeta in dataclass field metadata
METADATA_KEY = "fieldview"

# Class attribute holding a {name: {...}} metadata table
CLASS_TABLE_ATTR = "__fieldview__"

_SKIPPED_SLOTS = frozenset({"__dict__", "__weakref__"})


class Introspector(Protocol):
    """Produces the attribute descriptors of an object, in natural order."""

    def describe(self, target: Any) -> list[AttributeDescriptor]: ...


def attribute(
    default: Any = dataclasses.MISSING,
    *,
    visibility: Visibility | str | None = None,
    final: bool = False,
    transient: bool = False,
    volatile: bool = False,
    **field_kwargs: Any,
) -> Any:
    """Declare a dataclass field with fieldview metadata.

    Works like ``dataclasses.field`` and accepts its keyword arguments:

        @dataclass
        class Account:
            owner: str = "joe"
            balance: int = attribute(0, visibility="protected")
            session: str = attribute("", transient=True)
    """
    metadata = dict(field_kwargs.pop("metadata", None) or {})
    metadata[METADATA_KEY] = AttributeMeta(
        visibility=visibility, final=final, transient=transient, volatile=volatile
    )
    return dataclasses.field(default=default, metadata=metadata, **field_kwargs)


# =============================================================================
# Naming and type helpers
# =============================================================================


def _demangle(cls: type, stored_name: str) -> str:
    """Map a name-mangled attribute (``_Cls__x``) back to ``__x``."""
    for klass in cls.__mro__:
        prefix = f"_{klass.__name__.lstrip('_')}__"
        if stored_name.startswith(prefix) and len(stored_name) > len(prefix):
            return "__" + stored_name[len(prefix) :]
    return stored_name


def _mangle(klass: type, name: str) -> str:
    if name.startswith("__") and not name.endswith("__"):
        return f"_{klass.__name__.lstrip('_')}{name}"
    return name


def _infer_visibility(name: str) -> Visibility:
    if name.startswith("__") and not name.endswith("__"):
        return Visibility.PRIVATE
    if name.startswith("_"):
        return Visibility.PROTECTED
    return Visibility.PUBLIC


def _type_hints(cls: type) -> dict[str, Any]:
    """Resolved annotations of ``cls``, skipping classes that fail to resolve."""
    try:
        return typing.get_type_hints(cls, include_extras=True)
    except (AttributeError, NameError, TypeError) as exc:
        logger.debug("Could not resolve annotations of %s: %s", cls.__name__, exc)

    hints: dict[str, Any] = {}
    for klass in reversed(cls.__mro__):
        try:
            own = typing.get_type_hints(klass, include_extras=True)
        except (AttributeError, NameError, TypeError):
            continue
        hints.update(own)
    return hints


def _unwrap(hint: Any) -> tuple[Any, bool]:
    """Strip Annotated/Final wrappers. Returns (inner hint, is_final)."""
    is_final = False
    while True:
        if hint is Final:
            return None, True
        origin = typing.get_origin(hint)
        if origin is Annotated or origin is Final:
            is_final = is_final or origin is Final
            hint = typing.get_args(hint)[0]
            continue
        return hint, is_final


def _declared_from_hint(hint: Any) -> type | None:
    """Concrete class named by an annotation, or None if it names no single class."""
    if hint is None or hint is Any:
        return None
    origin = typing.get_origin(hint)
    if origin is None:
        return hint if isinstance(hint, type) else None
    if isinstance(origin, type) and origin not in (
        types.UnionType,
        typing.Union,
        ClassVar,
    ):
        return origin
    return None


def _class_table(cls: type) -> dict[str, AttributeMeta]:
    """Merge ``__fieldview__`` tables along the MRO, subclasses winning."""
    table: dict[str, AttributeMeta] = {}
    for klass in reversed(cls.__mro__):
        own = klass.__dict__.get(CLASS_TABLE_ATTR)
        if not own:
            continue
        for name, spec in own.items():
            table[name] = (
                spec
                if isinstance(spec, AttributeMeta)
                else AttributeMeta.model_validate(spec)
            )
    return table


# =============================================================================
# Reflective introspector
# =============================================================================


class ReflectiveIntrospector:
    """Discovers attributes of plain objects, dataclasses and slotted classes."""

    def describe(self, target: Any) -> list[AttributeDescriptor]:
        cls = type(target)
        hints = _type_hints(cls)
        table = _class_table(cls)
        frozen = dataclasses.is_dataclass(cls) and cls.__dataclass_params__.frozen

        descriptors: list[AttributeDescriptor] = []
        for stored_name, field_meta in self._discover(target):
            name = _demangle(cls, stored_name)
            meta = field_meta or table.get(name) or table.get(stored_name)
            accessor = attrgetter(stored_name)
            hint, final_hint = _unwrap(hints.get(stored_name))

            modifiers = set(meta.modifiers()) if meta else set()
            if frozen or final_hint:
                modifiers.add(Modifier.FINAL)

            visibility = (
                meta.visibility
                if meta and meta.visibility is not None
                else _infer_visibility(name)
            )

            declared_type = _declared_from_hint(hint)
            if declared_type is None:
                probe = AccessResult.capture(accessor, target)
                declared_type = type(probe.value) if probe.ok else object

            descriptors.append(
                AttributeDescriptor(
                    name=name,
                    declared_type=declared_type,
                    visibility=visibility,
                    modifiers=frozenset(modifiers),
                    accessor=accessor,
                )
            )
        return descriptors

    @staticmethod
    def _discover(target: Any) -> Iterator[tuple[str, AttributeMeta | None]]:
        seen: set[str] = set()
        cls = type(target)

        if dataclasses.is_dataclass(target):
            for f in dataclasses.fields(target):
                seen.add(f.name)
                yield f.name, f.metadata.get(METADATA_KEY)

        for klass in reversed(cls.__mro__):
            slots = klass.__dict__.get("__slots__", ())
            if isinstance(slots, str):
                slots = (slots,)
            for slot in slots:
                if slot in _SKIPPED_SLOTS:
                    continue
                stored = _mangle(klass, slot)
                if stored not in seen:
                    seen.add(stored)
                    yield stored, None

        instance_dict = getattr(target, "__dict__", None)
        if isinstance(instance_dict, dict):
            for stored in instance_dict:
                if stored not in seen:
                    seen.add(stored)
                    yield stored, None
