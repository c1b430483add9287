from __future__ import annotations

import math
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Dict, Optional, Tuple


# -----------------------------
# Money
# -----------------------------


def round2(value: float) -> float:
    """
    Round half up on cents: floor(value * 100 + 0.5) / 100.
    inf/nan pass through unchanged.
    """
    if not math.isfinite(value):
        return value
    return math.floor(value * 100 + 0.5) / 100


def _opt_float(value: Any) -> Optional[float]:
    if value is None:
        return None
    return float(value)


def type_key(value: Any) -> str:
    """Enum member or raw string -> plain string value."""
    if isinstance(value, Enum):
        return str(value.value)
    return str(value)


# -----------------------------
# Enums (avoid string typos)
# -----------------------------


class UnitType(str, Enum):
    M2 = "M2"
    SHEET = "SHEET"


class AddOnCostType(str, Enum):
    FIXED = "FIXED"
    PER_ITEM = "PER_ITEM"
    PERCENT = "PERCENT"


class RuleType(str, Enum):
    FIXED_BASE = "FIXED_BASE"
    PER_CHARACTER = "PER_CHARACTER"
    PER_CM2 = "PER_CM2"
    PER_ITEM = "PER_ITEM"
    LAYER_MULTIPLIER = "LAYER_MULTIPLIER"
    ADD_ON_LINK = "ADD_ON_LINK"


# -----------------------------
# Input snapshots (resolved by caller)
# -----------------------------


@dataclass(frozen=True)
class MaterialSnapshot:
    id: str
    unit_type: str
    cost_per_m2: Optional[float] = None
    cost_per_sheet: Optional[float] = None
    sheet_width_mm: Optional[float] = None
    sheet_height_mm: Optional[float] = None
    default_waste_percent: Optional[float] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "unit_type", type_key(self.unit_type))

    @staticmethod
    def from_dict(d: Dict[str, Any]) -> "MaterialSnapshot":
        return MaterialSnapshot(
            id=str(d["id"]),
            unit_type=str(d.get("unitType") or ""),
            cost_per_m2=_opt_float(d.get("costPerM2")),
            cost_per_sheet=_opt_float(d.get("costPerSheet")),
            sheet_width_mm=_opt_float(d.get("sheetWidthMm")),
            sheet_height_mm=_opt_float(d.get("sheetHeightMm")),
            default_waste_percent=_opt_float(d.get("defaultWastePercent")),
        )


@dataclass(frozen=True)
class AddOnSnapshot:
    id: str
    name: str
    cost_type: str
    value: float

    def __post_init__(self) -> None:
        object.__setattr__(self, "cost_type", type_key(self.cost_type))

    @staticmethod
    def from_dict(d: Dict[str, Any]) -> "AddOnSnapshot":
        return AddOnSnapshot(
            id=str(d["id"]),
            name=str(d.get("name") or d["id"]),
            cost_type=str(d["costType"]),
            value=float(d.get("value", 0)),
        )


@dataclass(frozen=True)
class TemplatePricingRuleInput:
    id: str
    rule_type: str
    value: float
    priority: int = 0

    def __post_init__(self) -> None:
        object.__setattr__(self, "rule_type", type_key(self.rule_type))


@dataclass(frozen=True)
class TemplatePricingMetrics:
    """Per-item metrics; None means "not provided" (evaluator falls back)."""

    character_count: Optional[int] = None
    area_cm2: Optional[float] = None
    quantity: Optional[int] = None
    layers_count: Optional[int] = None


@dataclass(frozen=True)
class TemplatePricing:
    rules: Tuple[TemplatePricingRuleInput, ...]
    metrics: TemplatePricingMetrics = field(default_factory=TemplatePricingMetrics)

    def __post_init__(self) -> None:
        # accept any iterable, store immutable
        object.__setattr__(self, "rules", tuple(self.rules))


@dataclass(frozen=True)
class PricingContext:
    material: MaterialSnapshot
    add_ons: Tuple[AddOnSnapshot, ...] = ()
    template_pricing: Optional[TemplatePricing] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "add_ons", tuple(self.add_ons))


# -----------------------------
# Stage results
# -----------------------------


@dataclass(frozen=True)
class AppliedAddOn:
    id: str
    name: str
    cost: float


@dataclass(frozen=True)
class CostResult:
    """Stage 1 output. Amounts are unrounded; rounding happens at assembly."""

    quantity: int
    area_m2: float
    material_cost: float
    machine_cost: float
    labor_cost: float
    add_ons: Tuple[AppliedAddOn, ...]
    target_margin_percent: float

    @property
    def total_cost(self) -> float:
        return self.material_cost + self.machine_cost + self.labor_cost

    @property
    def area_cm2(self) -> float:
        return self.area_m2 * 10_000


@dataclass(frozen=True)
class TemplateLine:
    rule_id: Optional[str]
    label: str
    amount: float


@dataclass(frozen=True)
class TemplatePricingResult:
    template_base_price: float
    lines: Tuple[TemplateLine, ...] = ()


# -----------------------------
# Output (contract v1)
# -----------------------------


@dataclass(frozen=True)
class PriceBreakdown:
    material_cost: float
    machine_cost: float
    labor_cost: float
    add_ons: Tuple[AppliedAddOn, ...]
    margin_percent: float
    total_cost: float
    recommended_price: float
    template_base_price: Optional[float] = None
    template_lines: Optional[Tuple[TemplateLine, ...]] = None

    @property
    def has_template_pricing(self) -> bool:
        return self.template_lines is not None

    def with_recommended_price(self, price: float) -> "PriceBreakdown":
        return replace(self, recommended_price=price)

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {
            "materialCost": self.material_cost,
            "machineCost": self.machine_cost,
            "laborCost": self.labor_cost,
            "addOns": [{"id": a.id, "name": a.name, "cost": a.cost} for a in self.add_ons],
            "marginPercent": self.margin_percent,
            "totalCost": self.total_cost,
            "recommendedPrice": self.recommended_price,
        }
        if self.template_lines is not None:
            out["templateBasePrice"] = self.template_base_price
            out["templateLines"] = [
                {"ruleId": l.rule_id, "label": l.label, "amount": l.amount}
                for l in self.template_lines
            ]
        return out
