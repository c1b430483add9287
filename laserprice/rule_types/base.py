from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Dict, Optional, Type

from ..engine.context import TemplatePricingMetrics

# Decisions (avoid string typos)
DECISION_APPLIED = "APPLIED"
DECISION_SKIPPED = "SKIPPED"

UNKNOWN_RULE_LABEL = "Rule"


@dataclass(frozen=True)
class BaseMetrics:
    """Geometry-derived fallbacks from the cost stage."""

    area_cm2: float
    quantity: int


@dataclass(frozen=True)
class RuleResult:
    """
    Result of applying a template pricing rule.
    - decision: APPLIED / SKIPPED
    - delta: price contribution (can be negative)
    - meta: explainability payload
    """

    decision: str
    delta: float
    meta: Dict[str, Any]

    @staticmethod
    def applied(delta: float, meta: Optional[Dict[str, Any]] = None) -> "RuleResult":
        return RuleResult(decision=DECISION_APPLIED, delta=delta, meta=meta or {})

    @staticmethod
    def skipped(meta: Optional[Dict[str, Any]] = None) -> "RuleResult":
        return RuleResult(decision=DECISION_SKIPPED, delta=0.0, meta=meta or {})


class Rule:
    """
    Base class for all template pricing rules.
    Subclasses implement delta(metrics, base); apply() turns it into a RuleResult.
    A zero (or NaN) contribution is SKIPPED: no line, no amount.
    """

    type_name: str = "base"
    label: str = UNKNOWN_RULE_LABEL

    def __init__(self, rule_id: str, value: float, priority: int = 0):
        self.rule_id = str(rule_id)
        self.value = float(value)
        self.priority = int(priority)

    def delta(self, metrics: TemplatePricingMetrics, base: BaseMetrics) -> float:
        raise NotImplementedError

    def apply(self, metrics: TemplatePricingMetrics, base: BaseMetrics) -> RuleResult:
        delta = self.delta(metrics, base)
        if not delta or math.isnan(delta):
            return RuleResult.skipped({"reason": "zero_delta"})
        return RuleResult.applied(delta, {"ruleType": self.type_name, "value": self.value})


# Registry: rule_type -> Rule class
rule_registry: Dict[str, Type[Rule]] = {}


def register(rule_cls: Type[Rule]) -> Type[Rule]:
    """
    Decorator to register a rule by its type_name.
    Fails fast on duplicate registrations.
    """
    key = getattr(rule_cls, "type_name", None)
    if not key or key == Rule.type_name:
        raise ValueError(f"Rule class {rule_cls.__name__} has no type_name")

    if key in rule_registry and rule_registry[key] is not rule_cls:
        raise ValueError(
            f"Duplicate rule registration for type '{key}': "
            f"{rule_registry[key].__name__} vs {rule_cls.__name__}"
        )

    rule_registry[key] = rule_cls
    return rule_cls
