"""Public entry points.

Usage:
    from fieldview import Include, of

    class Person:
        def __str__(self):
            return of(self).generate()

    of(joe).generate()
    # 'Person{first_name=Joe,last_name=Schmoe}'

    of(joe, Include.create().privates().exclude("password")).identity_hash().generate()
    # 'Person@7f3a1c2b9d10{_ssn=...}'
"""

from __future__ import annotations

from typing import Any

from .collector import collect_entries
from .config import get_config
from .core.models import Entry, RenderSettings, Visibility
from .introspection import Introspector, ReflectiveIntrospector
from .ordering import Comparator, SortKey, as_sort_key, order_entries
from .policy import Include
from .renderer import identity_of, render, render_absent

_REFLECTIVE = ReflectiveIntrospector()


def default_include() -> Include:
    """Include showing the visibility tiers configured as defaults (public only)."""
    tiers = set(get_config().policy.visibilities)
    return Include(
        publics=Visibility.PUBLIC.value in tiers,
        protecteds=Visibility.PROTECTED.value in tiers,
        packages=Visibility.PACKAGE.value in tiers,
        privates=Visibility.PRIVATE.value in tiers,
    )


class ObjectDescriber:
    """Render-ready handle for one object.

    Formatting setters return the describer so they chain, and are read when
    ``generate()`` runs. Each ``generate()`` call builds its output from
    scratch, so a describer can be reused and nested calls do not interfere.
    """

    def __init__(
        self,
        target: Any,
        include: Include,
        *,
        field_order: SortKey | None = None,
        introspector: Introspector | None = None,
        settings: RenderSettings | None = None,
    ):
        self.target = target
        self.include = include
        self.settings = (
            settings.model_copy()
            if settings is not None
            else get_config().render.to_settings()
        )
        self._field_order = field_order
        self._entry_order: SortKey | None = None
        self._introspector = introspector or _REFLECTIVE

    # ── Formatting setters ──

    def identity_hash(self, enabled: bool = True) -> "ObjectDescriber":
        """Append ``<hash_symbol><hex identity>`` after the class name."""
        self.settings.identity_hash = enabled
        return self

    def hash_symbol(self, symbol: str) -> "ObjectDescriber":
        self.settings.hash_symbol = symbol
        return self

    def separator(self, separator: str) -> "ObjectDescriber":
        self.settings.separator = separator
        return self

    def equality(self, symbol: str) -> "ObjectDescriber":
        self.settings.equality = symbol
        return self

    def entry_comparator(
        self, comparator: Comparator | None = None, *, key: SortKey | None = None
    ) -> "ObjectDescriber":
        """Order the final entries, custom entries included.

        When set, this alone decides the output order.
        """
        self._entry_order = as_sort_key(comparator, key)
        return self

    # ── Generation ──

    def entries(self) -> list[Entry]:
        """Filtered and ordered entries that ``generate()`` would render."""
        if self.target is None:
            return []
        descriptors = self._introspector.describe(self.target)
        entries = collect_entries(
            self.target,
            descriptors,
            self.include.rules,
            field_order=self._field_order,
        )
        return order_entries(entries, self._entry_order)

    def generate(self) -> str:
        if self.target is None:
            return render_absent()
        return render(
            type(self.target).__name__,
            identity_of(self.target),
            self.entries(),
            self.settings,
        )

    def __str__(self) -> str:
        return self.generate()


def of(
    target: Any,
    include: Include | None = None,
    field_comparator: Comparator | None = None,
    *,
    introspector: Introspector | None = None,
) -> ObjectDescriber:
    """Build a describer for ``target``.

    Without ``include`` only public attributes are shown (see
    ``default_include``). ``field_comparator`` orders attributes before
    they are read without touching ``include``.
    """
    return ObjectDescriber(
        target,
        include if include is not None else default_include(),
        field_order=as_sort_key(field_comparator),
        introspector=introspector,
    )


def describe(target: Any, include: Include | None = None) -> str:
    """Shortcut for ``of(target, include).generate()``."""
    return of(target, include).generate()


class Describable:
    """Mixin giving a class a fieldview-based ``__str__``.

    Override ``describe_policy`` to choose what is shown:

        class Person(Describable):
            def describe_policy(self):
                return Include.create().publics().exclude("password")
    """

    def describe_policy(self) -> Include:
        return default_include()

    def __describe__(self) -> str:
        return of(self, self.describe_policy()).generate()

    def __str__(self) -> str:
        return self.__describe__()
