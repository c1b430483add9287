# laserprice/schemas/price_output_v1.py
from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class _CamelModel(BaseModel):
    model_config = ConfigDict(
        extra="forbid",
        alias_generator=to_camel,
        populate_by_name=True,
    )


class AddOnLineV1(_CamelModel):
    id: str
    name: str
    cost: float


class TemplateLineV1(_CamelModel):
    rule_id: Optional[str] = None
    label: str
    amount: float


class PriceBreakdownV1(_CamelModel):
    """
    Output lock for a price snapshot:
    - money fields are already rounded to cents by the engine
    - template fields are only present when template rules applied
    """

    material_cost: float
    machine_cost: float
    labor_cost: float
    add_ons: List[AddOnLineV1]
    margin_percent: float
    total_cost: float
    recommended_price: float
    template_base_price: Optional[float] = None
    template_lines: Optional[List[TemplateLineV1]] = None


class TemplateItemQuoteV1(_CamelModel):
    dry_run: bool = True
    template_id: str
    template_variant_id: Optional[str] = None
    material_id: str
    quantity: int
    width_mm: int
    height_mm: int
    title: str
    personalization: Dict[str, Any]
    derived_fields: Dict[str, Any]
    price: PriceBreakdownV1
