from __future__ import annotations

from ..engine.context import RuleType
from .base import Rule, register


@register
class LayerMultiplierRule(Rule):
    """
    value per layer. Templates without a layer count price as 1 layer.
    """

    type_name = RuleType.LAYER_MULTIPLIER.value
    label = "Layers"

    def delta(self, metrics, base) -> float:
        layers = metrics.layers_count if metrics.layers_count is not None else 1
        return layers * self.value
