from __future__ import annotations

import math

from ..calculators import (
    Unpriceable,
    apply_waste,
    calc_add_ons,
    calc_machine_cost,
    calc_material_cost,
    material_cost_amount,
)
from ..core.logging_config import logger
from ..schemas.price_input_v1 import PriceCalculationInputV1
from .context import CostResult, PricingContext


def compute_costs(qin: PriceCalculationInputV1, ctx: PricingContext) -> CostResult:
    """
    Stage 1: manufacturing costs for one order line.

    - area = width * height * quantity (mm² -> m²)
    - material cost by unit type, then waste factor (always applied)
    - machine cost from minutes and hourly rate
    - add-ons against the waste-adjusted material + machine base
    """
    area_mm2 = qin.width_mm * qin.height_mm * qin.quantity
    area_m2 = area_mm2 / 1_000_000

    material = calc_material_cost(ctx.material, area_m2)
    if isinstance(material, Unpriceable):
        logger.warning(
            "material_unpriceable",
            material_id=ctx.material.id,
            unit_type=ctx.material.unit_type,
            reason=material.reason,
        )

    material_cost = apply_waste(material_cost_amount(material), qin.waste_percent)
    machine_cost = calc_machine_cost(qin.machine_minutes, qin.machine_hourly_cost)

    labor_cost, applied = calc_add_ons(
        ctx.add_ons,
        qin.add_on_ids,
        qin.quantity,
        material_cost + machine_cost,
    )

    return CostResult(
        quantity=qin.quantity,
        area_m2=area_m2,
        material_cost=material_cost,
        machine_cost=machine_cost,
        labor_cost=labor_cost,
        add_ons=tuple(applied),
        target_margin_percent=qin.target_margin_percent,
    )


def margin_price(total_cost: float, target_margin_percent: float) -> float:
    """
    total_cost / (1 - margin/100).
    A 100% margin is not clamped: inf for a positive cost, nan for zero cost.
    """
    divisor = 1 - target_margin_percent / 100
    if divisor == 0:
        logger.warning(
            "target_margin_full",
            target_margin_percent=target_margin_percent,
            total_cost=total_cost,
        )
        if total_cost == 0:
            return math.nan
        return math.copysign(math.inf, total_cost)
    return total_cost / divisor
