"""Paths, constants, and HTTP settings."""

from pathlib import Path

from platformdirs import user_cache_dir

APP_NAME = "ipinfobot"

# ipinfo.io lookup service
IPINFO_BASE_URL = "https://ipinfo.io"
IPINFO_TOKEN_ENV = "IPINFO_TOKEN"

# Telegram Bot API
TELEGRAM_API_URL = "https://api.telegram.org"
BOT_TOKEN_ENV = "BOT_TOKEN"
POLL_TIMEOUT = 30  # long-poll seconds for getUpdates
POLL_RETRY_DELAY = 5.0  # seconds to wait after a failed poll
ANSWER_CACHE_TIME = 1500  # seconds Telegram may cache an inline answer
MAX_MESSAGE_LENGTH = 4096  # characters of message text after entity parsing
MAP_URL = "https://www.openstreetmap.org/?mlat={latitude}&mlon={longitude}"

# Local storage
CACHE_DIR = Path(user_cache_dir(APP_NAME))
CACHE_DB_PATH = CACHE_DIR / "responses.db"
CACHE_TTL = 24 * 60 * 60  # seconds
CACHE_PURGE_INTERVAL = 60 * 60  # seconds between automatic purges of expired rows

# Workers
WORKER_COUNT = 4
MAX_PENDING_QUERIES = 64

# HTTP
USER_AGENT = "ipinfobot/0.1.0 (+https://github.com/example/ipinfobot)"
REQUEST_TIMEOUT = 10
