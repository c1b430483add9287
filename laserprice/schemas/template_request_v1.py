# laserprice/schemas/template_request_v1.py
from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class _CamelRequest(BaseModel):
    model_config = ConfigDict(
        extra="forbid",
        alias_generator=to_camel,
        populate_by_name=True,
    )


class TemplateItemRequestV1(_CamelRequest):
    variant_id: Optional[str] = None
    material_id: Optional[str] = None
    quantity: Optional[int] = None
    personalization: Dict[str, Any] = Field(default_factory=dict)
    price_override: Optional[float] = Field(default=None, allow_inf_nan=False)


class BulkItemV1(_CamelRequest):
    quantity: Optional[int] = None
    personalization: Dict[str, Any] = Field(default_factory=dict)


class TemplateBulkRequestV1(_CamelRequest):
    variant_id: Optional[str] = None
    material_id: Optional[str] = None
    items: List[BulkItemV1] = Field(default_factory=list)
