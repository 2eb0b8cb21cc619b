"""fieldview: rule-based, human-readable descriptions of Python objects.

    from fieldview import Include, of

    of(joe).generate()
    # 'Person{first_name=Joe,last_name=Schmoe,age=23.4}'

    of(joe, Include.create().privates().keep_volatiles(False)).generate()

Which attributes appear is decided by an Include policy: exclude rules beat
ensure rules, which beat the visibility tiers.
"""

__version__ = "0.1.0"

from .core.models import (
    AccessResult,
    AttributeDescriptor,
    AttributeMeta,
    Entry,
    Modifier,
    RenderSettings,
    Visibility,
)
from .config import (
    FieldViewConfig,
    PolicyDefaults,
    RenderDefaults,
    configure,
    get_config,
    reset_config,
)
from .decision import InclusionDecision, decide, explain
from .errors import FieldViewError, PolicyError
from .helper import Describable, ObjectDescriber, default_include, describe, of
from .introspection import Introspector, ReflectiveIntrospector, attribute
from .policy import Include, InclusionRules

__all__ = [
    "__version__",
    # Models
    "AccessResult",
    "AttributeDescriptor",
    "AttributeMeta",
    "Entry",
    "Modifier",
    "RenderSettings",
    "Visibility",
    # Config
    "FieldViewConfig",
    "PolicyDefaults",
    "RenderDefaults",
    "configure",
    "get_config",
    "reset_config",
    # Policy and decisions
    "Include",
    "InclusionRules",
    "InclusionDecision",
    "decide",
    "explain",
    # Introspection
    "Introspector",
    "ReflectiveIntrospector",
    "attribute",
    # Entry points
    "Describable",
    "ObjectDescriber",
    "default_include",
    "describe",
    "of",
    # Errors
    "FieldViewError",
    "PolicyError",
]
