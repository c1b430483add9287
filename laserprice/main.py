# laserprice/main.py
from typing import Optional

from fastapi import FastAPI

from laserprice import __version__
from laserprice.api.pricing import router as pricing_router
from laserprice.core.logging_config import logger, setup_logging
from laserprice.core.settings import settings
from laserprice.engine.template_catalog import CatalogLoader


def create_app(catalog_path: Optional[str] = None) -> FastAPI:
    """Wire logging, the template catalog and the pricing routes."""
    setup_logging()

    app = FastAPI(title=settings.APP_NAME, version=__version__)
    app.state.catalog_loader = CatalogLoader(catalog_path or settings.TEMPLATE_CATALOG_PATH)
    app.include_router(pricing_router)

    @app.get("/health", include_in_schema=True)
    def health() -> dict:
        return {"status": "ok"}

    logger.info("startup", service=settings.APP_NAME, version=__version__)
    return app


app = create_app()
