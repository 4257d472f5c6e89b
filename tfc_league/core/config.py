import os

# =====================================
# Global configuration for TFC League
# =====================================

BASE_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))


def _flag(name: str, default: str = "") -> bool:
    return os.environ.get(name, default).lower() in ("1", "true", "yes")


# TEST_MODE:
# Local development over plain http. Session cookies are issued without the Secure flag.
TEST_MODE = _flag("TEST_MODE")

# AUTO_SEED:
# Populate an empty database with a demo tournament on startup.
AUTO_SEED = _flag("AUTO_SEED", "1")

# --- Database ---
DB_PATH = os.environ.get("DB_PATH", os.path.join(BASE_DIR, "tfc_league.db"))
DATABASE_URL = os.environ.get("DATABASE_URL", f"sqlite:///{DB_PATH}")                   # Sync engine (routes/seeding)
ASYNC_DATABASE_URL = os.environ.get("ASYNC_DATABASE_URL", f"sqlite+aiosqlite:///{DB_PATH}")  # Async engine (startup)
SQL_ECHO = _flag("SQL_ECHO")

# --- Telegram ---
TELEGRAM_BOT_TOKEN = os.environ.get("TELEGRAM_BOT_TOKEN", "")
TELEGRAM_CHAT_ID = os.environ.get("TELEGRAM_CHAT_ID", "")
TELEGRAM_API_BASE = os.environ.get("TELEGRAM_API_BASE", "https://api.telegram.org")
TELEGRAM_TIMEOUT_SECONDS = float(os.environ.get("TELEGRAM_TIMEOUT_SECONDS", "10"))

# Telegram WebApp initData older than this is rejected (seconds)
TMA_INIT_DATA_MAX_AGE = int(os.environ.get("TMA_INIT_DATA_MAX_AGE", str(24 * 60 * 60)))

# --- Sessions ---
SESSION_COOKIE_NAME = "tfc_session"
SESSION_SECRET = os.environ.get("SESSION_SECRET", "dev-session-secret")
SESSION_MAX_AGE = int(os.environ.get("SESSION_MAX_AGE", str(60 * 60 * 24 * 30)))  # 30 days

# --- Display ---
DEFAULT_TZ = os.environ.get("DEFAULT_TZ", "Asia/Tashkent")

# --- Stats ---
LEADERBOARD_LIMIT = 20   # top scorers / assists / clean sheets
FORM_LENGTH = 5          # last N finished matches shown as form

# --- Fixture generation ---
# Weekdays used when spreading generated rounds over the calendar
FIXTURE_WEEKDAYS = [
    d.strip() for d in os.environ.get("FIXTURE_WEEKDAYS", "Saturday,Sunday").split(",") if d.strip()
]
FIXTURE_KICKOFF_TIME = (18, 0)  # 18:00 local time

WEEKDAY_NAMES = ["monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday"]


def parse_weekdays(names) -> list:
    """
    Weekday names ("Saturday", "sat", "SUN") to date.weekday() numbers, sorted and unique.
    Raises ValueError for a name that is not an English weekday or its 3+ letter prefix.
    """
    days = set()
    for name in names:
        key = name.strip().lower()
        matches = [i for i, day in enumerate(WEEKDAY_NAMES) if len(key) >= 3 and day.startswith(key)]
        if not matches:
            raise ValueError(f"Unknown fixture weekday: {name!r}")
        days.add(matches[0])
    return sorted(days)
