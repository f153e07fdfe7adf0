"""Rule implementations: read the ResolutionStore and produce Diagnostics."""

from .duplicate_names import DuplicateClientNameRule, is_visible
from .unnamed_types import NoUnnamedTypesRule


def get_default_rules() -> list:
    """Return all rules, in the order their diagnostics are reported."""
    return [
        DuplicateClientNameRule(),
        NoUnnamedTypesRule(),
    ]


__all__ = [
    "DuplicateClientNameRule",
    "NoUnnamedTypesRule",
    "get_default_rules",
    "is_visible",
]
