"""Final string assembly.

Output shape:

    ClassName[<hash_symbol><hex identity>]{key=value,key=value}

The identity segment only appears when ``RenderSettings.identity_hash`` is on.
"""

from __future__ import annotations

from typing import Any, Iterable

from .core.models import Entry, RenderSettings

NULL_TEXT = "null"
OPEN = "{"
CLOSE = "}"

# Exact builtin container types whose items are formatted individually
_BRACKETS = {
    list: ("[", "]"),
    tuple: ("(", ")"),
    set: ("{", "}"),
    frozenset: ("{", "}"),
    dict: ("{", "}"),
}


def identity_of(target: Any) -> str:
    """Hex fingerprint of an object's identity."""
    return format(id(target), "x")


def format_value(value: Any) -> str:
    """Text form of one attribute value.

    Values whose type defines ``__describe__`` render through it, so nested
    describable objects reuse the same pipeline. Plain lists, tuples, sets
    and dicts format their items the same way:

        [Pet{name=Rex}, null]
        {owner=Pet{name=Rex}}

    A container holding itself renders as ``[...]``. Reference cycles between
    describable objects are not detected.
    """
    return _format(value, set())


def _format(value: Any, active: set[int]) -> str:
    if value is None:
        return NULL_TEXT
    if value is True:
        return "true"
    if value is False:
        return "false"
    describe = getattr(type(value), "__describe__", None)
    if callable(describe):
        return describe(value)
    if type(value) in _BRACKETS:
        return _format_container(value, active)
    return str(value)


def _format_container(value: Any, active: set[int]) -> str:
    opening, closing = _BRACKETS[type(value)]
    if id(value) in active:
        return f"{opening}...{closing}"

    active.add(id(value))
    try:
        if isinstance(value, dict):
            items = [
                f"{_format(k, active)}={_format(v, active)}" for k, v in value.items()
            ]
        else:
            items = [_format(item, active) for item in value]
    finally:
        active.discard(id(value))
    return f"{opening}{', '.join(items)}{closing}"


def format_failure(error: BaseException) -> str:
    """Placeholder shown in place of a value that could not be read."""
    return f"{{{type(error).__name__}:{error}}}"


def render_absent() -> str:
    return NULL_TEXT


def render(
    class_name: str,
    identity: str | None,
    entries: Iterable[Entry],
    settings: RenderSettings,
) -> str:
    """Assemble the final string from already filtered, ordered entries."""
    parts = [class_name]
    if settings.identity_hash and identity is not None:
        parts.append(f"{settings.hash_symbol}{identity}")
    body = settings.separator.join(
        f"{entry.key}{settings.equality}{entry.text}" for entry in entries
    )
    parts.append(f"{OPEN}{body}{CLOSE}")
    return "".join(parts)
