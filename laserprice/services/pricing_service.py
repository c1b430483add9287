from __future__ import annotations

from typing import Any, Mapping

from ..engine.context import PriceBreakdown, PricingContext
from ..engine.price_engine import calculate_price
from ..engine.template_catalog import TemplateCatalog
from ..schemas.price_input_v1 import validate_price_input

# wire name, field name
_WASTE_KEYS = ("wastePercent", "waste_percent")
_OPTIONAL_KEYS = (
    _WASTE_KEYS,
    ("machineMinutes", "machine_minutes"),
    ("machineHourlyCost", "machine_hourly_cost"),
    ("addOnIds", "add_on_ids"),
    ("targetMarginPercent", "target_margin_percent"),
)


def preview_price(request: Any, catalog: TemplateCatalog) -> PriceBreakdown:
    """
    Price a free-form order line against the catalog.

    Optional keys may be absent or null:
    - wastePercent: material default, else settings
    - machineMinutes / machineHourlyCost: 0
    - addOnIds: none
    - targetMarginPercent: settings
    The request is validated before any catalog lookup.
    """
    raw = request
    if isinstance(request, Mapping):
        raw = dict(request)
        for names in _OPTIONAL_KEYS:
            for name in names:
                if name in raw and raw[name] is None:
                    del raw[name]

    waste_given = isinstance(raw, Mapping) and any(k in raw for k in _WASTE_KEYS)
    qin = validate_price_input(raw)

    material = catalog.material(qin.material_id)
    add_ons = catalog.resolve_add_ons(qin.add_on_ids)

    if not waste_given and material.default_waste_percent is not None:
        qin = qin.model_copy(update={"waste_percent": material.default_waste_percent})

    return calculate_price(qin, PricingContext(material=material, add_ons=add_ons))
