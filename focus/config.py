"""Configuration settings for the dashboard."""
import os
from pathlib import Path
from typing import Optional

from focus.exceptions import ConfigurationError

# Project root directory
PROJECT_ROOT = Path(__file__).parent.parent

# API Configuration
API_URL: Optional[str] = os.getenv("FOCUS_API_URL") or os.getenv("NEXT_PUBLIC_API_URL")
REQUEST_TIMEOUT = float(os.getenv("FOCUS_REQUEST_TIMEOUT", "30"))

# Retry Configuration
RETRY_WAIT = float(os.getenv("FOCUS_RETRY_WAIT", "1.0"))  # First sleep after a retryable failure
BACKOFF_MULTIPLIER = 2
MAX_RETRIES = int(os.getenv("FOCUS_MAX_RETRIES", "3"))
RETRY_STATUS_CODES = (429, 500, 502, 503, 504)

# Pagination Configuration
TOKENS_PAGE_SIZE = 20
TRANSACTIONS_PAGE_SIZE = 50

# Cache Configuration
# 0 keeps snapshots for the life of the server process
MARKET_CAP_CACHE_TTL = float(os.getenv("FOCUS_MARKET_CAP_CACHE_TTL", "0"))

# Async Configuration
USE_ASYNC = os.getenv("USE_ASYNC_FETCH", "true").lower() == "true"
MAX_CONCURRENT = int(os.getenv("MAX_CONCURRENT_REQUESTS", "10"))

# Display Configuration
DISPLAY_TIMEZONE = os.getenv("FOCUS_DISPLAY_TZ", "UTC")

# Logging Configuration
LOG_DIR = PROJECT_ROOT / "logs"
LOG_DIR.mkdir(exist_ok=True)

# Dash App Configuration
DASH_PORT = int(os.getenv("PORT", "8052"))  # Use PORT env var for cloud deployment
DASH_DEBUG = os.getenv("DASH_DEBUG", "False").lower() == "true"


def get_api_url() -> str:
    """Return the backend base URL or raise if it was never configured."""
    if not API_URL:
        raise ConfigurationError("FOCUS_API_URL is not defined")
    return API_URL.rstrip("/")
