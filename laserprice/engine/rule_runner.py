from __future__ import annotations

from typing import Dict, List, Optional, Type

from ..core.logging_config import logger
from ..rule_types.base import DECISION_APPLIED, BaseMetrics, Rule, rule_registry
from .context import (
    TemplateLine,
    TemplatePricing,
    TemplatePricingResult,
    TemplatePricingRuleInput,
)


class TemplateRuleRunner:
    """
    Deterministic template pricing.

    Behavior:
    - rules sorted by ascending priority; ties keep input order (stable sort)
    - every rule contributes a delta to a running price
    - zero/NaN deltas are skipped: no line, no amount
    - unknown rule types contribute 0
    - input rules are never mutated or reordered in place
    """

    def __init__(self, registry: Optional[Dict[str, Type[Rule]]] = None):
        self.registry = rule_registry if registry is None else registry

    def build_rule(self, rule_in: TemplatePricingRuleInput) -> Optional[Rule]:
        rule_cls = self.registry.get(rule_in.rule_type)
        if rule_cls is None:
            return None
        return rule_cls(rule_id=rule_in.id, value=rule_in.value, priority=rule_in.priority)

    def run(self, template_pricing: TemplatePricing, base: BaseMetrics) -> TemplatePricingResult:
        metrics = template_pricing.metrics
        ordered = sorted(template_pricing.rules, key=lambda r: r.priority)

        price = 0.0
        lines: List[TemplateLine] = []

        for rule_in in ordered:
            rule = self.build_rule(rule_in)
            if rule is None:
                logger.debug("template_rule_unknown_type", rule_id=rule_in.id, rule_type=rule_in.rule_type)
                continue

            result = rule.apply(metrics, base)
            logger.debug(
                "template_rule_evaluated",
                rule_id=rule_in.id,
                decision=result.decision,
                delta=result.delta,
                **result.meta,
            )
            if result.decision != DECISION_APPLIED:
                continue

            price += result.delta
            lines.append(TemplateLine(rule_id=rule_in.id, label=rule.label, amount=result.delta))

        return TemplatePricingResult(template_base_price=price, lines=tuple(lines))
