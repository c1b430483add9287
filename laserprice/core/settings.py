# laserprice/core/settings.py
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

PACKAGE_ROOT = Path(__file__).resolve().parents[1]


class Settings(BaseSettings):
    APP_NAME: str = "laserprice"
    LOG_LEVEL: str = "INFO"

    # --- Pricing defaults ---
    DEFAULT_WASTE_PERCENT: float = 15.0
    DEFAULT_TARGET_MARGIN_PERCENT: float = 40.0

    # --- Template items ---
    DEFAULT_ITEM_WIDTH_MM: int = 100
    DEFAULT_ITEM_HEIGHT_MM: int = 100
    TEMPLATE_CATALOG_PATH: str = str(PACKAGE_ROOT / "catalog" / "templates.yaml")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


settings = Settings()  # reads .env
