from __future__ import annotations

from typing import Iterable, List, Tuple

from ..engine.context import AddOnCostType, AddOnSnapshot, AppliedAddOn


def calc_add_on_cost(add_on: AddOnSnapshot, quantity: int, base_cost: float) -> float:
    """
    base_cost = waste-adjusted material cost + machine cost.
    PERCENT add-ons are computed against that base only (never compounded).
    """
    if add_on.cost_type == AddOnCostType.FIXED:
        return add_on.value
    if add_on.cost_type == AddOnCostType.PER_ITEM:
        return add_on.value * quantity
    if add_on.cost_type == AddOnCostType.PERCENT:
        return (base_cost * add_on.value) / 100
    return 0.0


def calc_add_ons(
    add_ons: Iterable[AddOnSnapshot],
    selected_ids: Iterable[str],
    quantity: int,
    base_cost: float,
) -> Tuple[float, List[AppliedAddOn]]:
    """
    Returns (labor_cost, applied). Order follows `add_ons` (the catalog),
    not `selected_ids`.
    """
    selected = frozenset(selected_ids)

    labor_cost = 0.0
    applied: List[AppliedAddOn] = []
    for add_on in add_ons:
        if add_on.id not in selected:
            continue

        cost = calc_add_on_cost(add_on, quantity, base_cost)
        labor_cost += cost
        applied.append(AppliedAddOn(id=add_on.id, name=add_on.name, cost=cost))

    return labor_cost, applied
