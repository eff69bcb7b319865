"""
DataForSEO credentials must be defined in a .env file in the backend root:

DATAFORSEO_LOGIN=your_login
DATAFORSEO_PASSWORD=your_password

Optional:

PORT=3000
API_KEY=shared_secret          # enables the bearer-token gate
DATAFORSEO_ENDPOINT=https://...  # override the ranked keywords URL
LOG_LEVEL=INFO

The app loads environment variables automatically using python-dotenv.
Settings are read once at startup and handed to create_app().
"""

import logging
import os
from pathlib import Path

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict

DEFAULT_ENDPOINT = "https://api.dataforseo.com/v3/dataforseo_labs/google/ranked_keywords/live"
DEFAULT_PORT = 3000

logger = logging.getLogger(__name__)


class Settings(BaseModel):
    """Process-wide configuration."""

    model_config = ConfigDict(frozen=True)

    dataforseo_login: str = ""
    dataforseo_password: str = ""
    port: int = DEFAULT_PORT
    api_key: str | None = None
    endpoint: str = DEFAULT_ENDPOINT
    log_level: str = "INFO"

    @property
    def auth_enabled(self) -> bool:
        return bool(self.api_key)

    def missing_credentials(self) -> list[str]:
        missing_keys = []
        if not self.dataforseo_login:
            missing_keys.append("DATAFORSEO_LOGIN")
        if not self.dataforseo_password:
            missing_keys.append("DATAFORSEO_PASSWORD")
        return missing_keys


def _parse_port(raw: str) -> int:
    try:
        return int(raw)
    except (TypeError, ValueError):
        logger.warning("CONFIG: invalid PORT=%r, using %d.", raw, DEFAULT_PORT)
        return DEFAULT_PORT


def load_settings(env_file: Path | None = None) -> Settings:
    """Load .env (if present) and build Settings from the environment."""
    load_dotenv(dotenv_path=env_file or Path(__file__).resolve().parent / ".env")

    return Settings(
        dataforseo_login=os.getenv("DATAFORSEO_LOGIN", "").strip(),
        dataforseo_password=os.getenv("DATAFORSEO_PASSWORD", "").strip(),
        port=_parse_port(os.getenv("PORT", "").strip() or str(DEFAULT_PORT)),
        api_key=os.getenv("API_KEY", "").strip() or None,
        endpoint=os.getenv("DATAFORSEO_ENDPOINT", "").strip() or DEFAULT_ENDPOINT,
        log_level=os.getenv("LOG_LEVEL", "INFO").strip().upper() or "INFO",
    )


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
