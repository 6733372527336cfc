"""Runtime configuration read from the environment"""
import os
from typing import Optional


def get_env(var_name: str, default=None, required: bool = False):
    value = os.environ.get(var_name, default)
    if required and value in (None, ""):
        raise RuntimeError(f"Missing required environment variable: {var_name}")
    return value


def _optional_int(var_name: str) -> Optional[int]:
    value = get_env(var_name)
    if value in (None, ""):
        return None
    return int(value)


# Auth
SECRET_KEY = get_env("RESERVATION_SECRET_KEY", "change-me-in-production")
ALGORITHM = get_env("RESERVATION_JWT_ALGORITHM", "HS256")
ACCESS_TOKEN_EXPIRE_MINUTES = int(get_env("RESERVATION_TOKEN_EXPIRE_MINUTES", "30"))

# Booking
CURRENCY = get_env("RESERVATION_CURRENCY", "USD")
MAX_STAY_NIGHTS = _optional_int("RESERVATION_MAX_STAY_NIGHTS")

# Logging
LOG_LEVEL = get_env("RESERVATION_LOG_LEVEL", "INFO").upper()
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
