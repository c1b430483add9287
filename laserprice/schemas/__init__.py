from .price_input_v1 import PriceCalculationInputV1, validate_price_input  # noqa
from .price_output_v1 import (  # noqa
    AddOnLineV1,
    PriceBreakdownV1,
    TemplateItemQuoteV1,
    TemplateLineV1,
)
from .template_request_v1 import (  # noqa
    BulkItemV1,
    TemplateBulkRequestV1,
    TemplateItemRequestV1,
)
