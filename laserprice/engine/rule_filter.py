from __future__ import annotations

from typing import Any, Iterable, List, Mapping, Optional

from .context import TemplatePricingMetrics, TemplatePricingRuleInput
from .template_models import FIELD_TYPE_TEXT, TemplateField, TemplatePricingRule

_MISSING = object()


def strict_equals(actual: Any, expected: Any) -> bool:
    """
    Equality without coercion:
    - bools only equal bools (True != 1)
    - containers only match the very same object
    - an absent key never matches (not even None)
    """
    if actual is _MISSING:
        return False
    if isinstance(expected, (dict, list)) or isinstance(actual, (dict, list)):
        return actual is expected
    if _is_number(actual) and _is_number(expected):
        return actual == expected
    return type(actual) is type(expected) and actual == expected


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def matches_condition(
    condition: Optional[Mapping[str, Any]], personalization: Optional[Mapping[str, Any]]
) -> bool:
    """Every key in condition must strictly equal the personalization value."""
    if not isinstance(condition, Mapping):
        return True

    values = personalization or {}
    for key, expected in condition.items():
        actual = values.get(key, _MISSING)
        if not strict_equals(actual, expected):
            return False
    return True


def filter_template_rules(
    rules: Iterable[TemplatePricingRule],
    variant_id: Optional[str],
    personalization: Optional[Mapping[str, Any]],
) -> List[TemplatePricingRuleInput]:
    """
    Keep rules that apply to this variant + personalization.
    - variant-scoped rules need an exact variant match
    - unscoped rules apply to every variant (and to "no variant")
    Input order is preserved; the evaluator sorts by priority.
    """
    out: List[TemplatePricingRuleInput] = []
    for rule in rules:
        if rule.variant_id and rule.variant_id != variant_id:
            continue
        if not matches_condition(rule.applies_when, personalization):
            continue
        out.append(rule.to_input())
    return out


def count_priced_characters(
    personalization: Optional[Mapping[str, Any]], fields: Iterable[TemplateField]
) -> int:
    values = personalization or {}
    count = 0
    for f in fields:
        if not f.affects_pricing or f.field_type != FIELD_TYPE_TEXT:
            continue
        raw = values.get(f.key)
        if isinstance(raw, str):
            count += len(raw.strip())
    return count


def build_template_metrics(
    personalization: Optional[Mapping[str, Any]],
    fields: Iterable[TemplateField],
    layers_count: Optional[int],
    quantity: int,
) -> TemplatePricingMetrics:
    layers = layers_count if _is_number(layers_count) else None
    return TemplatePricingMetrics(
        character_count=count_priced_characters(personalization, fields),
        quantity=quantity,
        layers_count=layers,
    )
