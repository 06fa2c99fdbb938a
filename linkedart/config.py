import logging
import os
from dataclasses import dataclass
from functools import lru_cache

from dotenv import load_dotenv

load_dotenv()

logger = logging.getLogger(__name__)

# --------------------------------------------------
# DEFAULTS
# --------------------------------------------------

DEFAULT_REQUEST_TIMEOUT = 20.0
DEFAULT_MAX_DEPTH = 3
DEFAULT_MAX_URLS = 5
DEFAULT_USER_AGENT = "linkedart-analyzer/1.0 (+https://linked.art)"
LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"


@dataclass(frozen=True)
class Settings:
    request_timeout: float = DEFAULT_REQUEST_TIMEOUT
    max_depth: int = DEFAULT_MAX_DEPTH
    max_urls: int = DEFAULT_MAX_URLS
    user_agent: str = DEFAULT_USER_AGENT
    log_level: str = "INFO"


def _env_number(name: str, default, cast):
    raw = os.getenv(name)

    if raw is None or not raw.strip():
        return default

    try:
        return cast(raw)
    except ValueError:
        logger.warning(f"Ignoring malformed {name}={raw!r}, using {default}")
        return default


def load_settings() -> Settings:
    return Settings(
        request_timeout=_env_number(
            "LINKEDART_REQUEST_TIMEOUT", DEFAULT_REQUEST_TIMEOUT, float
        ),
        max_depth=_env_number("LINKEDART_MAX_DEPTH", DEFAULT_MAX_DEPTH, int),
        max_urls=_env_number("LINKEDART_MAX_URLS", DEFAULT_MAX_URLS, int),
        user_agent=os.getenv("LINKEDART_USER_AGENT", DEFAULT_USER_AGENT),
        log_level=os.getenv("LINKEDART_LOG_LEVEL", "INFO").upper(),
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Process-wide settings, read once from the environment (and .env).
    """
    return load_settings()


def configure_logging(level: str = None):
    logging.basicConfig(
        level=level or get_settings().log_level,
        format=LOG_FORMAT
    )
