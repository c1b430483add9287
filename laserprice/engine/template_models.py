from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional, Tuple

from .context import TemplatePricingRuleInput, type_key

FIELD_TYPE_TEXT = "TEXT"


@dataclass(frozen=True)
class TemplateField:
    key: str
    field_type: str = FIELD_TYPE_TEXT
    affects_pricing: bool = False

    @staticmethod
    def from_dict(d: Dict[str, Any]) -> "TemplateField":
        return TemplateField(
            key=str(d["key"]),
            field_type=str(d.get("fieldType") or FIELD_TYPE_TEXT),
            affects_pricing=bool(d.get("affectsPricing", False)),
        )


@dataclass(frozen=True)
class TemplateVariant:
    id: str
    name: str
    width_mm: Optional[int] = None
    height_mm: Optional[int] = None
    default_material_id: Optional[str] = None

    @staticmethod
    def from_dict(d: Dict[str, Any]) -> "TemplateVariant":
        return TemplateVariant(
            id=str(d["id"]),
            name=str(d.get("name") or d["id"]),
            width_mm=d.get("widthMm"),
            height_mm=d.get("heightMm"),
            default_material_id=d.get("defaultMaterialId"),
        )


@dataclass(frozen=True)
class TemplatePricingRule:
    """
    Stored template rule. variant_id / applies_when scope the rule;
    to_input() strips the scope for the evaluator.
    """

    id: str
    rule_type: str
    value: float
    priority: int = 0
    variant_id: Optional[str] = None
    applies_when: Optional[Mapping[str, Any]] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "rule_type", type_key(self.rule_type))

    @staticmethod
    def from_dict(d: Dict[str, Any]) -> "TemplatePricingRule":
        return TemplatePricingRule(
            id=str(d["id"]),
            rule_type=str(d["ruleType"]),
            value=float(d.get("value", 0)),
            priority=int(d.get("priority", 0)),
            variant_id=d.get("variantId"),
            applies_when=d.get("appliesWhenJson"),
        )

    def to_input(self) -> TemplatePricingRuleInput:
        return TemplatePricingRuleInput(
            id=self.id,
            rule_type=self.rule_type,
            value=self.value,
            priority=self.priority,
        )


@dataclass(frozen=True)
class ProductTemplate:
    id: str
    name: str
    base_width_mm: Optional[int] = None
    base_height_mm: Optional[int] = None
    layers_count: Optional[int] = None
    default_material_id: Optional[str] = None
    fields: Tuple[TemplateField, ...] = ()
    variants: Tuple[TemplateVariant, ...] = ()
    pricing_rules: Tuple[TemplatePricingRule, ...] = field(default_factory=tuple)

    @staticmethod
    def from_dict(d: Dict[str, Any]) -> "ProductTemplate":
        return ProductTemplate(
            id=str(d["id"]),
            name=str(d.get("name") or d["id"]),
            base_width_mm=d.get("baseWidthMm"),
            base_height_mm=d.get("baseHeightMm"),
            layers_count=d.get("layersCount"),
            default_material_id=d.get("defaultMaterialId"),
            fields=tuple(TemplateField.from_dict(x) for x in d.get("fields") or []),
            variants=tuple(TemplateVariant.from_dict(x) for x in d.get("variants") or []),
            pricing_rules=tuple(
                TemplatePricingRule.from_dict(x) for x in d.get("pricingRules") or []
            ),
        )

    def find_variant(self, variant_id: str) -> Optional[TemplateVariant]:
        for v in self.variants:
            if v.id == variant_id:
                return v
        return None
