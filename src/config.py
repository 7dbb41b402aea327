"""Configuration module for the LIFF Group Tool API.

This module provides centralized configuration management, including directory
paths, API server settings, authentication, the LINE Messaging API and
calendar export defaults. All configuration values can be overridden via
environment variables.
"""

import os
from pathlib import Path
from typing import List

from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

# --- Directory Configuration ---

# Root directory of the project
ROOT_DIR = Path(__file__).parent.parent.resolve()

# Data directory name
DATA_DIR_NAME = "data"
DATA_DIR = ROOT_DIR / DATA_DIR_NAME

# --- API Server Configuration ---

API_HOST: str = os.getenv("API_HOST", "0.0.0.0")
API_PORT: int = int(os.getenv("API_PORT", "8787"))

# CORS allowed origins (comma-separated list). The LIFF frontend is served
# from LINE's in-app browser, so every origin is allowed by default.
_CORS_ALLOWED_ORIGINS_STR: str = os.getenv("CORS_ALLOWED_ORIGINS", "*")
CORS_ALLOWED_ORIGINS: List[str] = [
    origin.strip()
    for origin in _CORS_ALLOWED_ORIGINS_STR.split(",")
    if origin.strip()
]

# --- Database Configuration ---

DATABASE_URL: str = os.getenv(
    "DATABASE_URL", f"sqlite:///{DATA_DIR}/liff_group_tool.db"
)

# --- Logging Configuration ---

LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()

# --- Authentication Configuration ---

JWT_SECRET_KEY: str = os.getenv("JWT_SECRET_KEY", "your-secret-key-change-in-production")
JWT_ALGORITHM: str = os.getenv("JWT_ALGORITHM", "HS256")
ACCESS_TOKEN_EXPIRE_MINUTES: int = int(
    os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", str(60 * 24 * 7))  # 7 days
)

# --- Access Key Configuration ---

ACCESS_KEY_DEFAULT_EXPIRES_DAYS: int = int(
    os.getenv("ACCESS_KEY_DEFAULT_EXPIRES_DAYS", "7")
)
ACCESS_KEY_MAX_EXPIRES_DAYS: int = int(os.getenv("ACCESS_KEY_MAX_EXPIRES_DAYS", "365"))

# --- LINE Messaging API Configuration ---

LINE_API_BASE: str = os.getenv("LINE_API_BASE", "https://api.line.me")
LINE_REQUEST_TIMEOUT: float = float(os.getenv("LINE_REQUEST_TIMEOUT", "10"))
LIFF_URL_BASE: str = os.getenv("LIFF_URL_BASE", "https://liff.line.me")

# Message text that makes the bot answer with the LIFF deep link
WEBHOOK_TRIGGER_TEXT: str = os.getenv("WEBHOOK_TRIGGER_TEXT", "LIFF起動")

# --- Tenant Resolution Configuration ---

# What to do when an inbound LINE group is not registered to any channel:
#   "oldest_active" - answer with the oldest active channel (single-tenant
#                     deployments registered before groups were tracked)
#   "none"          - do not answer at all
TENANT_POLICY_OLDEST_ACTIVE = "oldest_active"
TENANT_POLICY_NONE = "none"
DEFAULT_TENANT_POLICY: str = os.getenv(
    "DEFAULT_TENANT_POLICY", TENANT_POLICY_OLDEST_ACTIVE
).lower()

# --- Calendar Export Configuration ---

ICS_PRODID: str = os.getenv("ICS_PRODID", "-//LIFF Family Tool//JP")
ICS_UID_DOMAIN: str = os.getenv("ICS_UID_DOMAIN", "liff-family-tool")
ICS_EVENT_DURATION_MINUTES: int = 60
ICS_DEFAULT_FILENAME: str = "schedule.ics"
