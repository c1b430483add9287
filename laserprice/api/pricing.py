from __future__ import annotations

import time
from typing import Any, Dict, List

from fastapi import APIRouter, Body, Depends, HTTPException, Request

from laserprice.core.logging_config import logger
from laserprice.engine.template_catalog import TemplateCatalog
from laserprice.errors import (
    MissingMaterialError,
    PriceValidationError,
    PricingError,
    TemplateLookupError,
)
from laserprice.schemas.price_output_v1 import PriceBreakdownV1, TemplateItemQuoteV1
from laserprice.schemas.template_request_v1 import (
    TemplateBulkRequestV1,
    TemplateItemRequestV1,
)
from laserprice.services.pricing_service import preview_price
from laserprice.services.template_pricing import (
    price_template_item,
    price_template_items_bulk,
)

router = APIRouter(prefix="/api/pricing", tags=["pricing"])


def get_catalog(request: Request) -> TemplateCatalog:
    """Active catalog; create_app() stores a CatalogLoader on app.state."""
    return request.app.state.catalog_loader.get()


# ----------------------------
# Helpers
# ----------------------------
def _status_for(e: PricingError) -> int:
    if isinstance(e, TemplateLookupError):
        return 404
    if isinstance(e, (PriceValidationError, MissingMaterialError)):
        return 400
    return 500


def _http_error(e: PricingError, status_code: int) -> HTTPException:
    detail: Dict[str, Any] = {"message": e.message, "code": e.code}
    if status_code == 400:
        detail["fields"] = list(getattr(e, "fields", []))
    return HTTPException(status_code=status_code, detail=detail)


def _log_obs(
    *,
    request: Request,
    endpoint: str,
    duration_ms: float,
    result: str,
    event: str,
    status_code: int,
    **extra: Any,
) -> None:
    request_id = getattr(request.state, "request_id", None) or request.headers.get(
        "X-Request-ID", "unknown"
    )

    logger.bind(
        request_id=request_id,
        endpoint=endpoint,
        duration_ms=duration_ms,
        result=result,
        status_code=status_code,
        **extra,
    ).info(event)


def _elapsed_ms(t0: float) -> float:
    return round((time.time() - t0) * 1000, 2)


# ----------------------------
# 1) Free-form preview
# ----------------------------
@router.post("/preview", response_model=PriceBreakdownV1, response_model_exclude_none=True)
def pricing_preview(
    request: Request,
    payload: Dict[str, Any] = Body(...),
    catalog: TemplateCatalog = Depends(get_catalog),
) -> Dict[str, Any]:
    t0 = time.time()
    endpoint = "/api/pricing/preview"

    try:
        breakdown = preview_price(payload, catalog)
    except PricingError as e:
        status_code = _status_for(e)
        _log_obs(
            request=request,
            endpoint=endpoint,
            duration_ms=_elapsed_ms(t0),
            result="error",
            event="pricing_preview",
            status_code=status_code,
            error_code=e.code,
        )
        raise _http_error(e, status_code) from e

    _log_obs(
        request=request,
        endpoint=endpoint,
        duration_ms=_elapsed_ms(t0),
        result="ok",
        event="pricing_preview",
        status_code=200,
        material_id=payload.get("materialId"),
        recommended_price=breakdown.recommended_price,
    )
    return breakdown.to_dict()


# ----------------------------
# 2) Template item preview
# ----------------------------
@router.post(
    "/templates/{template_id}/preview",
    response_model=TemplateItemQuoteV1,
    response_model_exclude_none=True,
)
def template_preview(
    template_id: str,
    payload: TemplateItemRequestV1,
    request: Request,
    catalog: TemplateCatalog = Depends(get_catalog),
) -> Dict[str, Any]:
    t0 = time.time()
    endpoint = f"/api/pricing/templates/{template_id}/preview"

    try:
        quote = price_template_item(
            catalog,
            template_id,
            variant_id=payload.variant_id,
            material_id=payload.material_id,
            quantity=payload.quantity,
            personalization=payload.personalization,
            price_override=payload.price_override,
        )
    except PricingError as e:
        status_code = _status_for(e)
        _log_obs(
            request=request,
            endpoint=endpoint,
            duration_ms=_elapsed_ms(t0),
            result="error",
            event="template_pricing_preview",
            status_code=status_code,
            template_id=template_id,
            error_code=e.code,
        )
        raise _http_error(e, status_code) from e

    _log_obs(
        request=request,
        endpoint=endpoint,
        duration_ms=_elapsed_ms(t0),
        result="ok",
        event="template_pricing_preview",
        status_code=200,
        template_id=template_id,
        line_count=1,
    )
    return quote.to_dict()


# ----------------------------
# 3) Template bulk preview
# ----------------------------
@router.post(
    "/templates/{template_id}/bulk-preview",
    response_model=List[TemplateItemQuoteV1],
    response_model_exclude_none=True,
)
def template_bulk_preview(
    template_id: str,
    payload: TemplateBulkRequestV1,
    request: Request,
    catalog: TemplateCatalog = Depends(get_catalog),
) -> List[Dict[str, Any]]:
    t0 = time.time()
    endpoint = f"/api/pricing/templates/{template_id}/bulk-preview"

    try:
        quotes = price_template_items_bulk(
            catalog,
            template_id,
            [item.model_dump() for item in payload.items],
            variant_id=payload.variant_id,
            material_id=payload.material_id,
        )
    except PricingError as e:
        status_code = _status_for(e)
        _log_obs(
            request=request,
            endpoint=endpoint,
            duration_ms=_elapsed_ms(t0),
            result="error",
            event="template_pricing_preview",
            status_code=status_code,
            template_id=template_id,
            error_code=e.code,
        )
        raise _http_error(e, status_code) from e

    _log_obs(
        request=request,
        endpoint=endpoint,
        duration_ms=_elapsed_ms(t0),
        result="ok",
        event="template_pricing_preview",
        status_code=200,
        template_id=template_id,
        line_count=len(quotes),
    )
    return [q.to_dict() for q in quotes]
