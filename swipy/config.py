from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

# Load .env from project root
load_dotenv(Path(__file__).resolve().parent.parent / ".env")

_DEFAULT_CATALOG_CSV = Path(__file__).resolve().parent / "data" / "restaurants.csv"


@dataclass(frozen=True)
class Settings:
    catalog_csv: Path = Path(os.getenv("SWIPY_CATALOG_CSV", str(_DEFAULT_CATALOG_CSV)))
    catalog_page_size: int = int(os.getenv("SWIPY_CATALOG_PAGE_SIZE", "20"))
    catalog_cache_ttl: float = float(os.getenv("SWIPY_CATALOG_CACHE_TTL", "300"))
    notification_cap: int = int(os.getenv("SWIPY_NOTIFICATION_CAP", "50"))
    poll_interval: float = float(os.getenv("SWIPY_POLL_INTERVAL", "10"))
    heartbeat_interval: float = float(os.getenv("SWIPY_HEARTBEAT_INTERVAL", "30"))
    api_base_url: str = os.getenv("SWIPY_API_BASE_URL", "http://localhost:5001")
    request_timeout: float = 10.0


DEFAULT_SETTINGS = Settings()
