"""Rule table and field validation."""

from .rules import build_rules
from .validator import check_rule, validate_properties, validate_property

__all__ = [
    "build_rules",
    "check_rule",
    "validate_properties",
    "validate_property",
]
