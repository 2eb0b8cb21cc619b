"""Turn an object's attributes into rendered entries."""

from __future__ import annotations

import logging
from typing import Any, Callable, Iterable

from .core.models import AttributeDescriptor, Entry
from .decision import decide
from .ordering import SortKey, order_attributes
from .policy import InclusionRules
from .renderer import format_failure, format_value

logger = logging.getLogger(__name__)


def _format_safely(formatter: Callable[[Any], str], value: Any, key: str) -> str:
    """Format ``value``, rendering a failing formatter as a placeholder."""
    try:
        return formatter(value)
    except Exception as exc:
        logger.debug("Could not format %s: %r", key, exc)
        return format_failure(exc)


def collect_entries(
    target: Any,
    descriptors: Iterable[AttributeDescriptor],
    rules: InclusionRules,
    *,
    field_order: SortKey | None = None,
    formatter: Callable[[Any], str] = format_value,
) -> list[Entry]:
    """Read, filter and format every attribute, then append custom entries.

    ``field_order`` overrides the ordering configured on ``rules``.

    Unreadable attributes are still subject to name, type and visibility
    rules; if included they render as ``{ErrorType:message}``, as does any
    value (custom entries included) whose formatting raises.
    """
    entries: list[Entry] = []
    ordered = order_attributes(descriptors, field_order or rules.field_order)

    for descriptor in ordered:
        result = descriptor.read(target)
        if not result.ok:
            logger.debug(
                "Could not read %s.%s: %r",
                type(target).__name__,
                descriptor.name,
                result.error,
            )

        if not decide(rules, descriptor, result):
            continue

        if not result.ok:
            text = format_failure(result.error)
        elif result.value is None and rules.omit_null_values:
            continue
        else:
            text = _format_safely(formatter, result.value, descriptor.name)

        entries.append(
            Entry(
                key=rules.display_name(descriptor.name),
                text=text,
                attribute=descriptor.name,
            )
        )

    for name, value in rules.custom_entries.items():
        entries.append(Entry(key=name, text=_format_safely(formatter, value, name)))

    return entries
