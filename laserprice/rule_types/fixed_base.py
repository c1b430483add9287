from __future__ import annotations

from ..engine.context import RuleType
from .base import Rule, register


@register
class FixedBaseRule(Rule):
    """Flat base price for the line."""

    type_name = RuleType.FIXED_BASE.value
    label = "Base"

    def delta(self, metrics, base) -> float:
        return self.value
