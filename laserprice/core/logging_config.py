# laserprice/core/logging_config.py
import logging
import sys

import structlog

from laserprice.core.settings import settings


def setup_logging(level: str | None = None) -> None:
    """
    JSON log lines on stdout for the pricing service.

    Engine warnings (material_unpriceable, target_margin_full), catalog
    reload events and one event per API request all go through here.
    `level` overrides settings.LOG_LEVEL.
    """
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, (level or settings.LOG_LEVEL).upper(), logging.INFO),
    )

    structlog.configure(
        processors=[
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.JSONRenderer(),
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )


# shared by engine, catalog and api modules
logger = structlog.get_logger(settings.APP_NAME)
