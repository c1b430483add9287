from __future__ import annotations

from dataclasses import replace
from typing import Any, Optional

from ..core.logging_config import logger
from ..rule_types.base import BaseMetrics
from ..schemas.price_input_v1 import validate_price_input
from .context import (
    CostResult,
    PriceBreakdown,
    PricingContext,
    TemplateLine,
    TemplatePricing,
    TemplatePricingResult,
    round2,
)
from .cost_calculator import compute_costs, margin_price
from .rule_runner import TemplateRuleRunner


def _assemble(
    costs: CostResult,
    *,
    recommended_price: float,
    margin_percent: float,
    template_result: Optional[TemplatePricingResult] = None,
) -> PriceBreakdown:
    """Round every money field to cents."""
    template_lines = None
    template_base_price = None
    if template_result is not None:
        template_base_price = round2(template_result.template_base_price)
        template_lines = tuple(
            TemplateLine(rule_id=l.rule_id, label=l.label, amount=round2(l.amount))
            for l in template_result.lines
        )

    return PriceBreakdown(
        material_cost=round2(costs.material_cost),
        machine_cost=round2(costs.machine_cost),
        labor_cost=round2(costs.labor_cost),
        add_ons=tuple(replace(a, cost=round2(a.cost)) for a in costs.add_ons),
        margin_percent=margin_percent,
        total_cost=round2(costs.total_cost),
        recommended_price=round2(recommended_price),
        template_base_price=template_base_price,
        template_lines=template_lines,
    )


class PriceEngine:
    """
    Two-stage pricing pipeline:
      1. compute_costs -> CostResult (always)
      2. apply_template_rules -> PriceBreakdown (only with >= 1 template rule)
    Without template rules the recommended price comes from the target margin.
    """

    def __init__(self, runner: Optional[TemplateRuleRunner] = None):
        self.runner = runner or TemplateRuleRunner()

    def price_from_costs(self, costs: CostResult) -> PriceBreakdown:
        return _assemble(
            costs,
            recommended_price=margin_price(costs.total_cost, costs.target_margin_percent),
            margin_percent=costs.target_margin_percent,
        )

    def apply_template_rules(
        self, costs: CostResult, template_pricing: TemplatePricing
    ) -> PriceBreakdown:
        base = BaseMetrics(area_cm2=costs.area_cm2, quantity=costs.quantity)
        result = self.runner.run(template_pricing, base)

        recommended = result.template_base_price
        if recommended > 0:
            profit = recommended - costs.total_cost
            margin_percent = round2((profit / recommended) * 100)
        else:
            margin_percent = costs.target_margin_percent

        logger.debug(
            "template_pricing_applied",
            rules=len(template_pricing.rules),
            lines=len(result.lines),
            template_base_price=recommended,
        )

        return _assemble(
            costs,
            recommended_price=recommended,
            margin_percent=margin_percent,
            template_result=result,
        )

    def calculate(self, raw_input: Any, ctx: PricingContext) -> PriceBreakdown:
        qin = validate_price_input(raw_input)
        costs = compute_costs(qin, ctx)

        tpl = ctx.template_pricing
        if tpl is not None and len(tpl.rules) > 0:
            return self.apply_template_rules(costs, tpl)
        return self.price_from_costs(costs)


_default_engine = PriceEngine()


def calculate_price(raw_input: Any, ctx: PricingContext) -> PriceBreakdown:
    """Validate raw_input and price it against a pre-resolved context."""
    return _default_engine.calculate(raw_input, ctx)
