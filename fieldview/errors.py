"""Exceptions raised by fieldview.

Rendering itself never raises for attribute access problems; those are
captured per attribute and rendered inline. These exceptions cover misuse
of the public API.
"""


class FieldViewError(Exception):
    """Base class for fieldview errors."""


class PolicyError(FieldViewError, TypeError):
    """Raised when an Include rule is given arguments it cannot interpret."""
