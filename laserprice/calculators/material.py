from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from ..engine.context import MaterialSnapshot, UnitType


@dataclass(frozen=True)
class Resolved:
    amount: float


@dataclass(frozen=True)
class Unpriceable:
    reason: str


MaterialCostResult = Union[Resolved, Unpriceable]


def calc_material_cost(material: MaterialSnapshot, area_m2: float) -> MaterialCostResult:
    """
    Base material cost (before waste).
      - M2: area_m2 * costPerM2
      - SHEET: fraction of a sheet * costPerSheet
    Missing catalog data never raises; it comes back as Unpriceable.
    """
    if material.unit_type == UnitType.M2:
        if not material.cost_per_m2:
            return Unpriceable("missing_cost_per_m2")
        return Resolved(area_m2 * material.cost_per_m2)

    if material.unit_type == UnitType.SHEET:
        if not (material.cost_per_sheet and material.sheet_width_mm and material.sheet_height_mm):
            return Unpriceable("missing_sheet_fields")
        sheet_area_m2 = (material.sheet_width_mm * material.sheet_height_mm) / 1_000_000
        sheets_used = area_m2 / sheet_area_m2
        return Resolved(sheets_used * material.cost_per_sheet)

    return Unpriceable(f"unknown_unit_type:{material.unit_type}")


def material_cost_amount(result: MaterialCostResult) -> float:
    # external contract: unpriceable degrades to 0
    return result.amount if isinstance(result, Resolved) else 0.0


def apply_waste(material_cost: float, waste_percent: float) -> float:
    return material_cost * (1 + waste_percent / 100)
