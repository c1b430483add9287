from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Sequence

from ..core.logging_config import logger
from ..core.settings import settings
from ..engine.context import PriceBreakdown, PricingContext, TemplatePricing, round2
from ..engine.price_engine import calculate_price
from ..engine.rule_filter import build_template_metrics, filter_template_rules
from ..engine.template_catalog import TemplateCatalog
from ..errors import MissingMaterialError, PriceValidationError


@dataclass(frozen=True)
class TemplateItemQuote:
    """Dry-run order line built from a product template (nothing is persisted)."""

    template_id: str
    template_variant_id: Optional[str]
    material_id: str
    quantity: int
    width_mm: int
    height_mm: int
    title: str
    personalization: Dict[str, Any]
    derived_fields: Dict[str, Any]
    price: PriceBreakdown
    dry_run: bool = field(default=True)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "dryRun": self.dry_run,
            "templateId": self.template_id,
            "templateVariantId": self.template_variant_id,
            "materialId": self.material_id,
            "quantity": self.quantity,
            "widthMm": self.width_mm,
            "heightMm": self.height_mm,
            "title": self.title,
            "personalization": dict(self.personalization),
            "derivedFields": dict(self.derived_fields),
            "price": self.price.to_dict(),
        }


def _normalize_quantity(quantity: Any) -> int:
    if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity <= 0:
        return 1
    return quantity


def price_template_item(
    catalog: TemplateCatalog,
    template_id: str,
    *,
    variant_id: Optional[str] = None,
    material_id: Optional[str] = None,
    quantity: Optional[int] = None,
    personalization: Optional[Mapping[str, Any]] = None,
    price_override: Optional[float] = None,
) -> TemplateItemQuote:
    """
    Price one personalized item of a template.

    Resolution order:
    - material: explicit -> variant default -> template default
    - dimensions: variant -> template base -> settings default
    - waste: material default -> settings default
    """
    template = catalog.template(template_id)
    variant = catalog.variant(template, variant_id)

    resolved_material_id = (
        material_id
        or (variant.default_material_id if variant else None)
        or template.default_material_id
    )
    if not resolved_material_id:
        raise MissingMaterialError(
            f"Template {template.id} has no material; pass material_id",
            {"template": template.id},
        )
    material = catalog.material(resolved_material_id)

    qty = _normalize_quantity(quantity)
    values: Dict[str, Any] = dict(personalization or {})

    width_mm = (variant.width_mm if variant else None) or template.base_width_mm or settings.DEFAULT_ITEM_WIDTH_MM
    height_mm = (variant.height_mm if variant else None) or template.base_height_mm or settings.DEFAULT_ITEM_HEIGHT_MM

    waste = material.default_waste_percent
    if waste is None:
        waste = settings.DEFAULT_WASTE_PERCENT

    rules = filter_template_rules(template.pricing_rules, variant.id if variant else None, values)
    metrics = build_template_metrics(values, template.fields, template.layers_count, qty)

    ctx = PricingContext(
        material=material,
        add_ons=(),
        template_pricing=TemplatePricing(rules=rules, metrics=metrics) if rules else None,
    )
    breakdown = calculate_price(
        {
            "materialId": material.id,
            "quantity": qty,
            "widthMm": width_mm,
            "heightMm": height_mm,
            "wastePercent": waste,
            "machineMinutes": 0,
            "machineHourlyCost": 0,
            "addOnIds": [],
            "targetMarginPercent": settings.DEFAULT_TARGET_MARGIN_PERCENT,
        },
        ctx,
    )

    if price_override is not None:
        if isinstance(price_override, bool) or not math.isfinite(price_override):
            raise PriceValidationError(
                "priceOverride must be a finite number", fields=["priceOverride"]
            )
        breakdown = breakdown.with_recommended_price(round2(float(price_override)))

    title = f"{template.name} – {variant.name}" if variant else template.name

    logger.debug(
        "template_item_priced",
        template_id=template.id,
        variant_id=variant.id if variant else None,
        rules=len(rules),
        recommended_price=breakdown.recommended_price,
    )

    return TemplateItemQuote(
        template_id=template.id,
        template_variant_id=variant.id if variant else None,
        material_id=material.id,
        quantity=qty,
        width_mm=width_mm,
        height_mm=height_mm,
        title=title,
        personalization=values,
        derived_fields={
            "templateId": template.id,
            "templateVariantId": variant.id if variant else None,
            "quantity": qty,
            "widthMm": width_mm,
            "heightMm": height_mm,
            "layersCount": template.layers_count,
            "characterCount": metrics.character_count,
        },
        price=breakdown,
    )


def price_template_items_bulk(
    catalog: TemplateCatalog,
    template_id: str,
    items: Sequence[Mapping[str, Any]],
    *,
    variant_id: Optional[str] = None,
    material_id: Optional[str] = None,
) -> List[TemplateItemQuote]:
    """One quote per {quantity, personalization} item, same template/variant/material."""
    if not items:
        raise PriceValidationError("At least one item is required", fields=["items"])

    return [
        price_template_item(
            catalog,
            template_id,
            variant_id=variant_id,
            material_id=material_id,
            quantity=item.get("quantity"),
            personalization=item.get("personalization"),
        )
        for item in items
    ]
