"""Inclusion decisions for individual attributes.

Precedence policy (first match wins):
1. Value is excluded
2. Name or type is excluded
3. Name+type or name+type+value exclusion matches
4. Value is ensured
5. Name or type is ensured
6. Name+type or name+type+value ensure matches
7. Visibility tier is enabled and no keep flag removes the attribute

Value-based steps only apply when the attribute could be read.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Literal

from .core.models import AccessResult, AttributeDescriptor, Modifier, Visibility
from .policy import InclusionRules, contains_value, values_equal

logger = logging.getLogger(__name__)


DecisionReason = Literal[
    "exclude_value",
    "exclude_name",
    "exclude_type",
    "exclude_name_type",
    "exclude_name_type_value",
    "ensure_value",
    "ensure_name",
    "ensure_type",
    "ensure_name_type",
    "ensure_name_type_value",
    "visibility",
    "modifier",
    "hidden",
]


@dataclass(frozen=True)
class InclusionDecision:
    """Outcome of evaluating one attribute against an inclusion policy."""

    included: bool
    reason: DecisionReason


def _matches_keyed_rules(
    by_name_and_type: dict[str, type],
    by_name_type_and_value: dict[str, tuple[type, Any]],
    descriptor: AttributeDescriptor,
    result: AccessResult,
) -> Literal["name_type", "name_type_value"] | None:
    if by_name_and_type.get(descriptor.name) is descriptor.declared_type:
        return "name_type"
    rule = by_name_type_and_value.get(descriptor.name)
    if rule is not None and result.ok:
        rule_type, required = rule
        if rule_type is descriptor.declared_type and values_equal(
            required, result.value
        ):
            return "name_type_value"
    return None


def _visibility_default(
    rules: InclusionRules, descriptor: AttributeDescriptor
) -> InclusionDecision:
    tiers = {
        Visibility.PRIVATE: rules.privates,
        Visibility.PACKAGE: rules.packages,
        Visibility.PROTECTED: rules.protecteds,
        Visibility.PUBLIC: rules.publics,
    }
    if not tiers[descriptor.visibility]:
        return InclusionDecision(included=False, reason="hidden")

    if (
        (not rules.keep_finals and descriptor.has(Modifier.FINAL))
        or (not rules.keep_transients and descriptor.has(Modifier.TRANSIENT))
        or (not rules.keep_volatiles and descriptor.has(Modifier.VOLATILE))
    ):
        return InclusionDecision(included=False, reason="modifier")

    return InclusionDecision(included=True, reason="visibility")


def explain(
    rules: InclusionRules, descriptor: AttributeDescriptor, result: AccessResult
) -> InclusionDecision:
    """Decide whether an attribute is shown, and say which rule decided it."""
    name = descriptor.name
    declared_type = descriptor.declared_type

    if result.ok and contains_value(rules.exclude_values, result.value):
        decision = InclusionDecision(included=False, reason="exclude_value")
    elif name in rules.exclude_names:
        decision = InclusionDecision(included=False, reason="exclude_name")
    elif declared_type in rules.exclude_types:
        decision = InclusionDecision(included=False, reason="exclude_type")
    elif matched := _matches_keyed_rules(
        rules.exclude_by_name_and_type,
        rules.exclude_by_name_type_and_value,
        descriptor,
        result,
    ):
        decision = InclusionDecision(included=False, reason=f"exclude_{matched}")
    elif result.ok and contains_value(rules.ensure_values, result.value):
        decision = InclusionDecision(included=True, reason="ensure_value")
    elif name in rules.ensure_names:
        decision = InclusionDecision(included=True, reason="ensure_name")
    elif declared_type in rules.ensure_types:
        decision = InclusionDecision(included=True, reason="ensure_type")
    elif matched := _matches_keyed_rules(
        rules.ensure_by_name_and_type,
        rules.ensure_by_name_type_and_value,
        descriptor,
        result,
    ):
        decision = InclusionDecision(included=True, reason=f"ensure_{matched}")
    else:
        decision = _visibility_default(rules, descriptor)

    logger.debug(
        "%s attribute %r (%s)",
        "Including" if decision.included else "Skipping",
        name,
        decision.reason,
    )
    return decision


def decide(
    rules: InclusionRules, descriptor: AttributeDescriptor, result: AccessResult
) -> bool:
    """Return True if the attribute should be rendered."""
    return explain(rules, descriptor, result).included
