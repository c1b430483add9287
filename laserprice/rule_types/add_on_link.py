from __future__ import annotations

from ..engine.context import RuleType
from .base import Rule, register


@register
class AddOnLinkRule(Rule):
    """
    Flat amount. Does not look up the add-on catalog; the add-on cost
    stage is independent of template rules.
    """

    type_name = RuleType.ADD_ON_LINK.value
    label = "Add-on"

    def delta(self, metrics, base) -> float:
        return self.value
