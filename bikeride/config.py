import os

from dotenv import load_dotenv

load_dotenv()


def _as_bool(value: str) -> bool:
    return value.strip().lower() in ("1", "true", "yes", "on")


# ----- Database -----
DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./bikeride.db")

# ----- Auth / JWT -----
SECRET_KEY = os.getenv("SECRET_KEY", "CHANGE_THIS_SECRET_IN_REAL_PROJECT")
ALGORITHM = os.getenv("JWT_ALGORITHM", "HS256")
ACCESS_TOKEN_EXPIRE_MINUTES = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", "60"))

# Shared code a user must enter to become an admin
ADMIN_SETUP_CODE = os.getenv("ADMIN_SETUP_CODE", "BIKERIDE2024")

# ----- Rate limiting -----
RATE_LIMIT = os.getenv("RATE_LIMIT", "60/minute")
RATE_LIMIT_ENABLED = _as_bool(os.getenv("RATE_LIMIT_ENABLED", "true"))

# ----- Circuit breaker around store writes -----
BREAKER_FAIL_MAX = int(os.getenv("BREAKER_FAIL_MAX", "3"))
BREAKER_RESET_TIMEOUT = int(os.getenv("BREAKER_RESET_TIMEOUT", "60"))

# ----- Logging -----
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
LOG_FILE = os.getenv("LOG_FILE")  # e.g. logs/bikeride.log

# ----- Catalog -----
FEATURED_BIKES_LIMIT = int(os.getenv("FEATURED_BIKES_LIMIT", "3"))
