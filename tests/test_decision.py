"""Tests for inclusion decision precedence."""

import pytest

from fieldview import AccessResult, AttributeDescriptor, Include, Modifier, Visibility
from fieldview.decision import decide, explain


def _attr(
    name="count",
    declared_type=int,
    visibility=Visibility.PUBLIC,
    modifiers=(),
) -> AttributeDescriptor:
    return AttributeDescriptor(
        name=name,
        declared_type=declared_type,
        visibility=visibility,
        modifiers=frozenset(modifiers),
        accessor=lambda obj: getattr(obj, name),
    )


OK_3 = AccessResult(value=3)
FAILED = AccessResult(error=PermissionError("denied"))


def _reason(include: Include, attr: AttributeDescriptor, result=OK_3) -> str:
    return explain(include.rules, attr, result).reason


class TestPrecedence:
    def test_exclude_value_first(self):
        include = Include.create().publics().ensure("count").exclude_value(3)
        decision = explain(include.rules, _attr(), OK_3)
        assert not decision.included
        assert decision.reason == "exclude_value"

    def test_exclude_name_beats_ensure_value(self):
        include = Include.create().ensure_value(3).exclude("count")
        assert _reason(include, _attr()) == "exclude_name"

    def test_exclude_type_beats_ensure_name(self):
        include = Include.create().ensure("count").exclude(int)
        assert _reason(include, _attr()) == "exclude_type"

    def test_exclude_name_type_beats_ensure_name(self):
        include = Include.create().ensure("count").exclude("count", int)
        assert _reason(include, _attr()) == "exclude_name_type"

    def test_exclude_name_type_value(self):
        include = Include.create().publics().exclude("count", int, 3)
        assert _reason(include, _attr()) == "exclude_name_type_value"
        assert decide(include.rules, _attr(), AccessResult(value=4))

    def test_ensure_value_beats_ensure_name_and_visibility(self):
        include = Include.create().ensure_value(3).ensure("count")
        assert _reason(include, _attr()) == "ensure_value"

    def test_ensure_type(self):
        include = Include.create().ensure(int)
        assert _reason(include, _attr(visibility=Visibility.PRIVATE)) == "ensure_type"

    def test_ensure_name_type_and_value(self):
        include = Include.create().ensure("count", int, 3)
        assert _reason(include, _attr()) == "ensure_name_type_value"
        assert not decide(include.rules, _attr(), AccessResult(value=5))

    def test_visibility_default(self):
        include = Include.create().protecteds()
        assert decide(include.rules, _attr(visibility=Visibility.PROTECTED), OK_3)
        assert _reason(include, _attr(visibility=Visibility.PUBLIC)) == "hidden"

    def test_package_tier(self):
        include = Include.create().packages()
        assert decide(include.rules, _attr(visibility=Visibility.PACKAGE), OK_3)
        assert not decide(include.rules, _attr(visibility=Visibility.PRIVATE), OK_3)


class TestKeyedRules:
    def test_type_must_match_exactly(self):
        include = Include.create().ensure("flag", int)
        flag = _attr(name="flag", declared_type=bool)
        assert not decide(include.rules, flag, AccessResult(value=True))

    def test_type_set_does_not_match_subclasses(self):
        include = Include.create().ensure(int)
        flag = _attr(name="flag", declared_type=bool)
        assert not decide(include.rules, flag, AccessResult(value=True))

    def test_last_rule_per_name_wins(self):
        include = (
            Include.create().ensure("count", float, 3.0).ensure("count", int, 3)
        )
        assert decide(include.rules, _attr(), OK_3)

        include = (
            Include.create().ensure("count", int, 3).ensure("count", float, 3.0)
        )
        assert not decide(include.rules, _attr(), OK_3)

    def test_value_rules_use_strict_equality(self):
        include = Include.create().ensure_value(1)
        flag = _attr(name="flag", declared_type=bool)
        assert not decide(include.rules, flag, AccessResult(value=True))
        assert not decide(include.rules, _attr(), AccessResult(value=1.0))
        assert decide(include.rules, _attr(), AccessResult(value=1))


class TestFailedReads:
    def test_value_rules_never_match_failures(self):
        include = Include.create().exclude_value(None).ensure_value(None)
        assert _reason(include, _attr(), FAILED) == "hidden"

    def test_name_type_value_rule_needs_successful_read(self):
        include = Include.create().ensure("count", int, None)
        assert not decide(include.rules, _attr(), FAILED)

    def test_name_and_visibility_rules_still_apply(self):
        assert decide(Include.create().ensure("count").rules, _attr(), FAILED)
        assert decide(Include.create().publics().rules, _attr(), FAILED)
        assert not decide(
            Include.create().publics().exclude("count").rules, _attr(), FAILED
        )


class TestModifiers:
    @pytest.mark.parametrize(
        "modifier, setter",
        [
            (Modifier.FINAL, "keep_finals"),
            (Modifier.TRANSIENT, "keep_transients"),
            (Modifier.VOLATILE, "keep_volatiles"),
        ],
    )
    def test_keep_flags_remove_visible_attributes(self, modifier, setter):
        attr = _attr(modifiers=[modifier])
        include = getattr(Include.create().publics(), setter)(False)
        decision = explain(include.rules, attr, OK_3)
        assert not decision.included
        assert decision.reason == "modifier"

    def test_keep_flags_do_not_touch_ensured_attributes(self):
        attr = _attr(modifiers=[Modifier.FINAL])
        include = Include.create().ensure("count").keep_finals(False)
        assert decide(include.rules, attr, OK_3)

    def test_keep_flags_never_grant_inclusion(self):
        include = Include.create().keep_finals(True).keep_volatiles(True)
        assert not decide(include.rules, _attr(), OK_3)


def test_decisions_are_logged(caplog):
    include = Include.create().exclude("count")
    with caplog.at_level("DEBUG", logger="fieldview.decision"):
        decide(include.rules, _attr(), OK_3)
    assert "Skipping attribute 'count' (exclude_name)" in caplog.text
