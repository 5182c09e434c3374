# rasoi/config.py
"""
Runtime settings, read from environment variables.

Other modules read these as attributes of this module (``config.DB_URL``)
so tests can point them somewhere else with monkeypatch.
"""

import os


def _flag(name: str, default: str = "0") -> bool:
    return os.getenv(name, default).strip().lower() in {"1", "true", "yes", "on"}


DB_URL = os.getenv("RASOI_DB_URL", "sqlite:///rasoi.sqlite")  # file in project root

JWT_SECRET = os.getenv("RASOI_JWT_SECRET", "change-me-in-production-rasoi-secret")
JWT_ALGORITHM = "HS256"
JWT_EXPIRES_HOURS = int(os.getenv("RASOI_JWT_EXPIRES_HOURS", "24"))

# "today" for issued/due dates is resolved in the shop's local zone
TIMEZONE = os.getenv("RASOI_TIMEZONE", "Asia/Kolkata")
INVOICE_DUE_DAYS = int(os.getenv("RASOI_INVOICE_DUE_DAYS", "7"))

DEBUG = _flag("RASOI_DEBUG")
LOG_LEVEL = os.getenv("RASOI_LOG_LEVEL", "INFO").upper()

CORS_ORIGINS = [
    origin.strip()
    for origin in os.getenv("RASOI_CORS_ORIGINS", "*").split(",")
    if origin.strip()
]

ADMIN_NAME = os.getenv("RASOI_ADMIN_NAME", "Admin")
ADMIN_EMAIL = os.getenv("RASOI_ADMIN_EMAIL", "admin@rasoi.com")
ADMIN_PASSWORD = os.getenv("RASOI_ADMIN_PASSWORD", "admin123")
