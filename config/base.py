"""Settings shared by every environment. Each value can be overridden from the environment / .env."""

import os


def _flag(name: str, default: str) -> bool:
    return bool(int(os.getenv(name, default)))


def _list(name: str, default: str) -> tuple:
    return tuple(item.strip() for item in os.getenv(name, default).split(",") if item.strip())


DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "timeclock"),
}

# Wall-clock zone for display strings, day boundaries and the auto clock-out trigger
TIMEZONE = os.getenv("TIMEZONE", "America/Los_Angeles")

DISCORD_WEBHOOK_URL = os.getenv("DISCORD_WEBHOOK_URL") or None
DISCORD_TIMEOUT_SECONDS = float(os.getenv("DISCORD_TIMEOUT_SECONDS", "5"))

AUTO_CLOCK_OUT_ENABLED = _flag("AUTO_CLOCK_OUT_ENABLED", "1")
AUTO_CLOCK_OUT_TIME = os.getenv("AUTO_CLOCK_OUT_TIME", "19:00")
AUTO_CLOCK_OUT_POLL_SECONDS = int(os.getenv("AUTO_CLOCK_OUT_POLL_SECONDS", "60"))

SESSION_TTL_MINUTES = int(os.getenv("SESSION_TTL_MINUTES", "480"))
ENFORCE_TRANSITIONS = _flag("ENFORCE_TRANSITIONS", "1")

EMPLOYEE_TAGS = _list("EMPLOYEE_TAGS", "Admin,Team Lead,MX,EG,PH,Closer,Dialer,New Agent")

# Used by AUTO_SEED_DB / scripts/seed_db.py when no admin account exists yet
ADMIN_USERNAME = os.getenv("ADMIN_USERNAME", "admin")
ADMIN_PASSWORD = os.getenv("ADMIN_PASSWORD", "admin123")

COOKIE_SECURE = False
