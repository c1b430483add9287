from __future__ import annotations

from ..engine.context import RuleType
from .base import Rule, register


@register
class PerItemRule(Rule):
    type_name = RuleType.PER_ITEM.value
    label = "Per item"

    def delta(self, metrics, base) -> float:
        qty = metrics.quantity if metrics.quantity is not None else base.quantity
        return qty * self.value
