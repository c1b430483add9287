"""Pricing engine for laser-cut products."""

__version__ = "0.1.0"

from .engine.context import (  # noqa: E402
    AddOnSnapshot,
    MaterialSnapshot,
    PriceBreakdown,
    PricingContext,
    TemplatePricing,
    TemplatePricingMetrics,
    TemplatePricingRuleInput,
)
from .engine.price_engine import PriceEngine, calculate_price  # noqa: E402
from .errors import (  # noqa: E402
    MissingMaterialError,
    PriceValidationError,
    PricingError,
    TemplateCatalogError,
    TemplateLookupError,
)

__all__ = [
    "__version__",
    "AddOnSnapshot",
    "MaterialSnapshot",
    "PriceBreakdown",
    "PricingContext",
    "TemplatePricing",
    "TemplatePricingMetrics",
    "TemplatePricingRuleInput",
    "PriceEngine",
    "calculate_price",
    "MissingMaterialError",
    "PriceValidationError",
    "PricingError",
    "TemplateCatalogError",
    "TemplateLookupError",
]
