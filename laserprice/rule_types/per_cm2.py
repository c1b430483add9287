from __future__ import annotations

from ..engine.context import RuleType
from .base import Rule, register


@register
class PerCm2Rule(Rule):
    type_name = RuleType.PER_CM2.value
    label = "Per cm²"

    def delta(self, metrics, base) -> float:
        area_cm2 = metrics.area_cm2 if metrics.area_cm2 is not None else base.area_cm2
        return area_cm2 * self.value
