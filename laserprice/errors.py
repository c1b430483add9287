from __future__ import annotations

from typing import Any, Dict, List, Optional


class PricingError(Exception):
    """
    Base for every error raised by the pricing package.
    - code: stable machine-readable code (UPPER_SNAKE)
    - message: human readable
    - meta: extra context for logs / API responses
    """

    code: str = "PRICING_ERROR"

    def __init__(self, message: str, meta: Optional[Dict[str, Any]] = None):
        self.message = str(message)
        self.meta = meta or {}
        super().__init__(f"{self.code}: {self.message}")


class PriceValidationError(PricingError, ValueError):
    """Raw pricing input failed schema constraints."""

    code = "VALIDATION_FAILED"

    def __init__(
        self,
        message: str,
        fields: Optional[List[str]] = None,
        errors: Optional[List[Dict[str, Any]]] = None,
    ):
        self.fields = list(fields or [])
        self.errors = list(errors or [])
        super().__init__(message, {"fields": self.fields})


class TemplateCatalogError(PricingError):
    """Template catalog could not be parsed or is inconsistent."""

    code = "CATALOG_INVALID"


class TemplateLookupError(PricingError, LookupError):
    """Unknown template, variant, material or add-on id."""

    code = "NOT_FOUND"

    def __init__(self, kind: str, key: str):
        self.kind = kind
        self.key = key
        super().__init__(f"{kind} not found: {key}", {"kind": kind, "id": key})


class MissingMaterialError(PricingError):
    """A template item resolved no material id."""

    code = "MATERIAL_REQUIRED"
