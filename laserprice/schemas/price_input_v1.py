# laserprice/schemas/price_input_v1.py
from __future__ import annotations

from typing import Any, Dict, List, Tuple

from pydantic import BaseModel, ConfigDict, Field, ValidationError, constr
from pydantic.alias_generators import to_camel

from laserprice.core.settings import settings
from laserprice.errors import PriceValidationError


class PriceCalculationInputV1(BaseModel):
    """
    Validated pricing request for one order line.
    Wire names are camelCase (materialId, widthMm, ...); snake_case works too.
    """

    model_config = ConfigDict(
        extra="forbid",
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )

    material_id: constr(strip_whitespace=True, min_length=1)  # type: ignore
    quantity: int = Field(ge=1)
    width_mm: int = Field(ge=1)
    height_mm: int = Field(ge=1)
    waste_percent: float = Field(
        default_factory=lambda: settings.DEFAULT_WASTE_PERCENT,
        ge=0,
        allow_inf_nan=False,
    )
    machine_minutes: float = Field(default=0.0, ge=0, allow_inf_nan=False)
    machine_hourly_cost: float = Field(default=0.0, ge=0, allow_inf_nan=False)
    add_on_ids: Tuple[str, ...] = ()
    target_margin_percent: float = Field(
        default_factory=lambda: settings.DEFAULT_TARGET_MARGIN_PERCENT,
        ge=0,
        lt=100,
        allow_inf_nan=False,
    )


def _field_name(loc: Tuple[Any, ...]) -> str:
    return ".".join(str(p) for p in loc) or "input"


def validate_price_input(raw: Any) -> PriceCalculationInputV1:
    """
    Parse a raw pricing request. Raises PriceValidationError naming every
    offending field; never coerces out-of-range values.
    """
    if isinstance(raw, PriceCalculationInputV1):
        return raw

    try:
        return PriceCalculationInputV1.model_validate(raw)
    except ValidationError as e:
        fields: List[str] = []
        details: List[Dict[str, Any]] = []
        for err in e.errors():
            name = _field_name(tuple(err.get("loc") or ()))
            if name not in fields:
                fields.append(name)
            details.append({"field": name, "type": err.get("type"), "msg": err.get("msg")})

        raise PriceValidationError(
            f"Invalid pricing input: {', '.join(fields)}",
            fields=fields,
            errors=details,
        ) from e
