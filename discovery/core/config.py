"""Application configuration helpers."""

import logging
import os
from dataclasses import dataclass
from functools import lru_cache
from typing import List

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

_TRUTHY = {"1", "true", "yes"}


@dataclass(frozen=True)
class Settings:
    google_places_api_key: str
    airtable_token: str
    airtable_base_id: str
    hunter_api_key: str = ""
    airtable_table: str = "Business Intelligence"
    app_env: str = "production"
    serverless: bool = False
    enrichment_timeout: float = 8.0
    worker_port: int = 9000

    @property
    def is_production(self) -> bool:
        return self.app_env.lower() == "production"

    def missing_credentials(self) -> List[str]:
        """Names of the required environment variables that are not set."""
        missing = []
        if not self.google_places_api_key:
            missing.append("GOOGLE_PLACES_API_KEY or GOOGLE_PLACES_API")
        if not self.airtable_token:
            missing.append("AIRTABLE_PERSONAL_ACCESS_TOKEN")
        if not self.airtable_base_id:
            missing.append("AIRTABLE_BASE_ID")
        return missing


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Load settings from environment variables with sensible defaults."""
    load_dotenv()

    google_places_api_key = os.getenv("GOOGLE_PLACES_API_KEY") or os.getenv("GOOGLE_PLACES_API", "")
    airtable_token = os.getenv("AIRTABLE_PERSONAL_ACCESS_TOKEN", "")
    airtable_base_id = os.getenv("AIRTABLE_BASE_ID", "")
    hunter_api_key = os.getenv("HUNTER_API_KEY", "")
    airtable_table = os.getenv("AIRTABLE_TABLE_NAME") or "Business Intelligence"
    app_env = os.getenv("APP_ENV", "production").strip() or "production"
    serverless = os.getenv("VERCEL") == "1" or os.getenv("SERVERLESS", "false").lower() in _TRUTHY
    enrichment_timeout = float(os.getenv("ENRICHMENT_TIMEOUT_SECONDS", "8"))
    worker_port = int(os.getenv("WORKER_PORT", "9000"))

    if not google_places_api_key:
        logger.warning("GOOGLE_PLACES_API_KEY is not configured; Google Places requests will fail.")
    if not airtable_token or not airtable_base_id:
        logger.warning("Airtable credentials are not configured; discovered leads cannot be saved.")
    if not hunter_api_key:
        logger.warning("HUNTER_API_KEY is not configured; email lookup is disabled.")

    return Settings(
        google_places_api_key=google_places_api_key,
        airtable_token=airtable_token,
        airtable_base_id=airtable_base_id,
        hunter_api_key=hunter_api_key,
        airtable_table=airtable_table,
        app_env=app_env,
        serverless=serverless,
        enrichment_timeout=enrichment_timeout,
        worker_port=worker_port,
    )
