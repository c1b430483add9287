from __future__ import annotations

import pytest

import laserprice.rule_types  # noqa: F401 (register all rules)

from laserprice.core.settings import settings
from laserprice.engine.context import (
    AddOnSnapshot,
    MaterialSnapshot,
    PricingContext,
    TemplatePricingMetrics,
)
from laserprice.engine.template_catalog import TemplateCatalog
from laserprice.rule_types.base import BaseMetrics


@pytest.fixture
def m2_material():
    return MaterialSnapshot(id="mat-m2", unit_type="M2", cost_per_m2=10.0)


@pytest.fixture
def sheet_material():
    return MaterialSnapshot(
        id="mat-sheet",
        unit_type="SHEET",
        cost_per_sheet=20.0,
        sheet_width_mm=1000,
        sheet_height_mm=1000,
    )


@pytest.fixture
def add_ons():
    return (
        AddOnSnapshot(id="wrap", name="Gift wrap", cost_type="FIXED", value=7.0),
        AddOnSnapshot(id="hook", name="Hook", cost_type="PER_ITEM", value=2.0),
        AddOnSnapshot(id="rush", name="Rush", cost_type="PERCENT", value=10.0),
    )


@pytest.fixture
def base_input():
    # 1 m², no waste, no machine time
    return {
        "materialId": "mat-m2",
        "quantity": 1,
        "widthMm": 1000,
        "heightMm": 1000,
        "wastePercent": 0,
        "machineMinutes": 0,
        "machineHourlyCost": 0,
        "addOnIds": [],
        "targetMarginPercent": 40,
    }


@pytest.fixture
def m2_ctx(m2_material):
    return PricingContext(material=m2_material)


@pytest.fixture
def metrics():
    return TemplatePricingMetrics(character_count=5, area_cm2=None, quantity=3, layers_count=2)


@pytest.fixture
def base_metrics():
    return BaseMetrics(area_cm2=64.0, quantity=3)


@pytest.fixture
def demo_catalog():
    # The catalog shipped with the package (also validates the JSON schema)
    return TemplateCatalog.from_yaml_file(settings.TEMPLATE_CATALOG_PATH)


@pytest.fixture
def catalog_dict():
    return {
        "catalogVersion": "test",
        "materials": [
            {"id": "acrylic", "unitType": "M2", "costPerM2": 50, "defaultWastePercent": 0},
            {"id": "plywood", "unitType": "M2", "costPerM2": 20},
        ],
        "addOns": [
            {"id": "wrap", "name": "Gift wrap", "costType": "FIXED", "value": 3},
        ],
        "templates": [
            {
                "id": "tag",
                "name": "Name Tag",
                "defaultMaterialId": "plywood",
                "baseWidthMm": 100,
                "baseHeightMm": 50,
                "layersCount": 2,
                "fields": [
                    {"key": "name", "fieldType": "TEXT", "affectsPricing": True},
                    {"key": "note", "fieldType": "TEXT", "affectsPricing": False},
                    {"key": "color", "fieldType": "SELECT", "affectsPricing": True},
                ],
                "variants": [
                    {"id": "small", "name": "Small", "widthMm": 50, "heightMm": 20},
                    {
                        "id": "clear",
                        "name": "Clear",
                        "defaultMaterialId": "acrylic",
                    },
                ],
                "pricingRules": [
                    {"id": "base", "ruleType": "FIXED_BASE", "value": 10, "priority": 0},
                    {"id": "chars", "ruleType": "PER_CHARACTER", "value": 1, "priority": 5},
                    {
                        "id": "small-extra",
                        "ruleType": "FIXED_BASE",
                        "value": 2,
                        "priority": 10,
                        "variantId": "small",
                    },
                    {
                        "id": "red-extra",
                        "ruleType": "FIXED_BASE",
                        "value": 4,
                        "priority": 20,
                        "appliesWhenJson": {"color": "red"},
                    },
                ],
            },
            {
                "id": "blank",
                "name": "Blank Coaster",
                "fields": [],
                "variants": [],
                "pricingRules": [],
            },
        ],
    }


@pytest.fixture
def catalog(catalog_dict):
    return TemplateCatalog.from_dict(catalog_dict)
