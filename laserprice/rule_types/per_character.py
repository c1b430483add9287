from __future__ import annotations

from ..engine.context import RuleType
from .base import Rule, register


@register
class PerCharacterRule(Rule):
    """value per priced personalization character (0 when not counted)."""

    type_name = RuleType.PER_CHARACTER.value
    label = "Per character"

    def delta(self, metrics, base) -> float:
        count = metrics.character_count or 0
        return count * self.value
