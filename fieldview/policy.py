"""Inclusion policy: which attributes of an object get rendered.

``InclusionRules`` holds the rule state; ``Include`` is the fluent builder
callers use to fill it in. Every builder method returns the builder so
rules can be chained:

    Include.create().publics().ensure("secret").exclude(int)

Rule families:
- names / types: plain sets, matched by attribute name or exact declared type
- values: matched against the attribute's value after a successful read
- name+type and name+type+value: maps keyed by attribute name, so only the
  last rule registered for a name survives
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

from .errors import PolicyError
from .ordering import Comparator, SortKey, as_sort_key

logger = logging.getLogger(__name__)

_UNSET: Any = object()


def values_equal(left: Any, right: Any) -> bool:
    """Strict equality used by value rules.

    Values must share the exact same type, so ``1`` matches neither ``True``
    nor ``1.0``. A comparison that raises counts as no match.
    """
    if left is right:
        return True
    if type(left) is not type(right):
        return False
    try:
        return bool(left == right)
    except Exception as exc:
        logger.debug("Treating failed comparison as no match: %r", exc)
        return False


def contains_value(values: list[Any], candidate: Any) -> bool:
    return any(values_equal(value, candidate) for value in values)


@dataclass
class InclusionRules:
    """Complete rule state of an inclusion policy.

    Visibility flags grant inclusion by tier; keep flags only ever remove an
    inclusion the visibility flags granted.
    """

    publics: bool = False
    protecteds: bool = False
    packages: bool = False
    privates: bool = False
    keep_finals: bool = True
    keep_transients: bool = True
    keep_volatiles: bool = True

    exclude_names: set[str] = field(default_factory=set)
    exclude_types: set[type] = field(default_factory=set)
    exclude_values: list[Any] = field(default_factory=list)
    ensure_names: set[str] = field(default_factory=set)
    ensure_types: set[type] = field(default_factory=set)
    ensure_values: list[Any] = field(default_factory=list)

    exclude_by_name_and_type: dict[str, type] = field(default_factory=dict)
    ensure_by_name_and_type: dict[str, type] = field(default_factory=dict)
    exclude_by_name_type_and_value: dict[str, tuple[type, Any]] = field(
        default_factory=dict
    )
    ensure_by_name_type_and_value: dict[str, tuple[type, Any]] = field(
        default_factory=dict
    )

    renamed_keys: dict[str, str] = field(default_factory=dict)
    custom_entries: dict[str, Any] = field(default_factory=dict)
    field_order: SortKey | None = None
    omit_null_values: bool = False

    def display_name(self, name: str) -> str:
        return self.renamed_keys.get(name, name)


class Include:
    """Fluent builder for an ``InclusionRules`` instance.

    An empty Include shows nothing until told to. Use ``publics()``,
    ``protecteds()``, ``packages()`` and ``privates()`` to enable whole
    visibility tiers, then carve exceptions with ``ensure`` / ``exclude``.
    Exclude rules always outrank ensure rules, and both outrank the
    visibility tiers.
    """

    def __init__(
        self,
        publics: bool = False,
        protecteds: bool = False,
        packages: bool = False,
        privates: bool = False,
    ):
        self.rules = InclusionRules(
            publics=publics,
            protecteds=protecteds,
            packages=packages,
            privates=privates,
        )

    @classmethod
    def create(cls) -> "Include":
        """Create an empty Include that shows nothing until told to."""
        return cls()

    # ── Ensure / exclude ──

    def ensure(
        self, target: str | type, declared_type: type | None = None, value: Any = _UNSET
    ) -> "Include":
        """Force inclusion of matching attributes.

        - ``ensure(name)``: any attribute with this name
        - ``ensure(type)``: any attribute whose declared type is exactly ``type``
        - ``ensure(name, type)``: the named attribute, if it has this type
        - ``ensure(name, type, value)``: as above, and only while its value
          equals ``value``
        """
        r = self.rules
        self._add_rule(
            "ensure",
            target,
            declared_type,
            value,
            r.ensure_names,
            r.ensure_types,
            r.ensure_by_name_and_type,
            r.ensure_by_name_type_and_value,
        )
        return self

    def exclude(
        self, target: str | type, declared_type: type | None = None, value: Any = _UNSET
    ) -> "Include":
        """Force exclusion of matching attributes. Mirrors ``ensure``."""
        r = self.rules
        self._add_rule(
            "exclude",
            target,
            declared_type,
            value,
            r.exclude_names,
            r.exclude_types,
            r.exclude_by_name_and_type,
            r.exclude_by_name_type_and_value,
        )
        return self

    def ensure_value(self, value: Any) -> "Include":
        """Force inclusion of any attribute currently holding ``value``."""
        if not contains_value(self.rules.ensure_values, value):
            self.rules.ensure_values.append(value)
        return self

    def exclude_value(self, value: Any) -> "Include":
        """Force exclusion of any attribute currently holding ``value``."""
        if not contains_value(self.rules.exclude_values, value):
            self.rules.exclude_values.append(value)
        return self

    def ignore(self, target: str | type) -> "Include":
        """Forget every ensure and exclude rule registered for a name or type."""
        r = self.rules
        if isinstance(target, type):
            r.ensure_types.discard(target)
            r.exclude_types.discard(target)
        elif isinstance(target, str):
            r.ensure_names.discard(target)
            r.exclude_names.discard(target)
            r.ensure_by_name_and_type.pop(target, None)
            r.exclude_by_name_and_type.pop(target, None)
            r.ensure_by_name_type_and_value.pop(target, None)
            r.exclude_by_name_type_and_value.pop(target, None)
        else:
            raise PolicyError(
                f"ignore() expects an attribute name or a type, got {target!r}"
            )
        return self

    def ignore_value(self, value: Any) -> "Include":
        """Forget every ensure and exclude rule registered for a value."""
        r = self.rules
        r.ensure_values[:] = [v for v in r.ensure_values if not values_equal(v, value)]
        r.exclude_values[:] = [
            v for v in r.exclude_values if not values_equal(v, value)
        ]
        return self

    # ── Visibility tiers ──

    def publics(self, enabled: bool = True) -> "Include":
        self.rules.publics = enabled
        return self

    def protecteds(self, enabled: bool = True) -> "Include":
        self.rules.protecteds = enabled
        return self

    def packages(self, enabled: bool = True) -> "Include":
        self.rules.packages = enabled
        return self

    def privates(self, enabled: bool = True) -> "Include":
        self.rules.privates = enabled
        return self

    def all_visibilities(self, enabled: bool = True) -> "Include":
        """Toggle every visibility tier at once."""
        return (
            self.publics(enabled)
            .protecteds(enabled)
            .packages(enabled)
            .privates(enabled)
        )

    # ── Modifier filters ──

    def keep_finals(self, keep: bool) -> "Include":
        """When False, final attributes that would have appeared are dropped.

        Only ever removes inclusion granted by the visibility tiers.
        """
        self.rules.keep_finals = keep
        return self

    def keep_transients(self, keep: bool) -> "Include":
        self.rules.keep_transients = keep
        return self

    def keep_volatiles(self, keep: bool) -> "Include":
        self.rules.keep_volatiles = keep
        return self

    # ── Output shaping ──

    def map(self, original_name: str, new_name: str) -> "Include":
        """Display attribute ``original_name`` under ``new_name``.

        Rules keep matching on the original name.
        """
        self.rules.renamed_keys[original_name] = new_name
        return self

    def unmap(self, original_name: str) -> "Include":
        self.rules.renamed_keys.pop(original_name, None)
        return self

    def custom(self, name: str, value: Any) -> "Include":
        """Add a synthetic entry that bypasses every inclusion rule."""
        self.rules.custom_entries[name] = value
        return self

    def field_comparator(
        self, comparator: Comparator | None = None, *, key: SortKey | None = None
    ) -> "Include":
        """Order attributes before they are read.

        Accepts a two-argument comparator over descriptors or a key function.
        Calling with neither restores discovery order.
        """
        self.rules.field_order = as_sort_key(comparator, key)
        return self

    def omit_null_values(self, omit: bool = True) -> "Include":
        """Drop attributes whose value is None. Custom entries are kept."""
        self.rules.omit_null_values = omit
        return self

    # ── Internals ──

    @staticmethod
    def _add_rule(
        verb: str,
        target: Any,
        declared_type: Any,
        value: Any,
        names: set[str],
        types: set[type],
        by_name_and_type: dict[str, type],
        by_name_type_and_value: dict[str, tuple[type, Any]],
    ) -> None:
        if isinstance(target, type):
            if declared_type is not None or value is not _UNSET:
                raise PolicyError(
                    f"{verb}({target.__name__}) takes no further arguments; "
                    f"use {verb}(name, type, value) for value rules"
                )
            types.add(target)
            return

        if not isinstance(target, str):
            raise PolicyError(
                f"{verb}() expects an attribute name or a type, got {target!r}"
            )

        if declared_type is None:
            if value is not _UNSET:
                raise PolicyError(
                    f"{verb}({target!r}, value=...) needs a type; "
                    f"use {verb}_value(value) to match on value alone"
                )
            names.add(target)
        elif not isinstance(declared_type, type):
            raise PolicyError(
                f"{verb}({target!r}, ...) expects a type as second argument, "
                f"got {declared_type!r}"
            )
        elif value is _UNSET:
            by_name_and_type[target] = declared_type
        else:
            by_name_type_and_value[target] = (declared_type, value)
