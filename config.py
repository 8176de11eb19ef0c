import logging
import os
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import load_dotenv

PROJECT_ROOT = Path(__file__).resolve().parent

DEFAULT_ORIGINS = [
    "http://localhost:3000",
    "http://localhost:5173",
    "https://asin-watcher-frontend.mathias2413.workers.dev",
    "https://asin-watcher-frontendt2.mathias2413.workers.dev",
]
DEFAULT_ORIGIN_REGEX = r"^chrome-extension://.*"


def _parse_cors_origins(value: str | None):
    if not value:
        return list(DEFAULT_ORIGINS)
    items = []
    for part in value.split(","):
        v = part.strip()
        if not v:
            continue
        # Browsers send the origin without a trailing slash
        if v.endswith("/"):
            v = v[:-1]
        items.append(v)
    return items or list(DEFAULT_ORIGINS)


@dataclass
class Settings:
    data_file: Path = PROJECT_ROOT / "data" / "deals.json"
    cors_origins: list = field(default_factory=lambda: list(DEFAULT_ORIGINS))
    cors_origin_regex: str | None = DEFAULT_ORIGIN_REGEX
    host: str = "0.0.0.0"
    port: int = 3001
    log_level: str = "INFO"


def load_settings() -> Settings:
    load_dotenv()
    data_file = os.getenv("DEALS_DATA_FILE")
    return Settings(
        data_file=Path(data_file) if data_file else PROJECT_ROOT / "data" / "deals.json",
        cors_origins=_parse_cors_origins(os.getenv("FRONTEND_ORIGIN")),
        cors_origin_regex=os.getenv("CORS_ORIGIN_REGEX", DEFAULT_ORIGIN_REGEX) or None,
        host=os.getenv("BACKEND_HOST", "0.0.0.0"),
        port=int(os.getenv("BACKEND_PORT", "3001")),
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
    )


def setup_logging(level: str = "INFO"):
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )
