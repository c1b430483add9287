# Ensure registration happens by importing modules
from ..engine.context import RuleType
from .base import BaseMetrics, Rule, RuleResult, rule_registry  # noqa
from . import (  # noqa
    fixed_base,
    per_character,
    per_cm2,
    per_item,
    layer_multiplier,
    add_on_link,
)

_unregistered = sorted(t.value for t in RuleType if t.value not in rule_registry)
if _unregistered:
    raise RuntimeError(f"Rule types without implementation: {_unregistered}")
