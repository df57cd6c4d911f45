"""Runtime settings - tunable parameters for the schema pipeline and caches.

All values read from environment variables with the defaults below.
Import from here instead of hardcoding.

Infrastructure config (API host, database URL, credentials) stays in
design2api/config.py.
"""

from __future__ import annotations

import os


def _int(key: str, default: int) -> int:
    return int(os.getenv(key, str(default)))


def _float(key: str, default: float) -> float:
    return float(os.getenv(key, str(default)))


def _str(key: str, default: str) -> str:
    return os.getenv(key, default)


def _bool(key: str, default: bool) -> bool:
    return os.getenv(key, str(default)).lower() in ("true", "1", "yes")


# =====================================================================
# Schema inference (OpenAI chat completions)
# =====================================================================

SCHEMA_MODEL = _str("SCHEMA_MODEL", "gpt-4o-mini-2024-07-18")

# Low but non-zero: favors repeatable output without fully greedy decoding
SCHEMA_TEMPERATURE = _float("SCHEMA_TEMPERATURE", 0.3)

# Declared for parity with the model config; no call path retries on it
SCHEMA_MAX_RETRIES = _int("SCHEMA_MAX_RETRIES", 2)

# Ask the API for response_format={"type": "json_object"}
SCHEMA_FORCE_JSON_OBJECT = _bool("SCHEMA_FORCE_JSON_OBJECT", False)


# =====================================================================
# Local caches
# =====================================================================

CACHE_TTL_SECONDS = _int("CACHE_TTL_SECONDS", 60 * 60)

IMAGE_CACHE_KEY = "figmaImageCache"
SCHEMA_CACHE_KEY = "figmaSchemaCache"


# =====================================================================
# HTTP clients (Figma API)
# =====================================================================

FIGMA_HTTP_TIMEOUT = _float("FIGMA_HTTP_TIMEOUT", 60.0)
FIGMA_IMAGE_FORMAT = _str("FIGMA_IMAGE_FORMAT", "png")


# =====================================================================
# Settings persistence
# =====================================================================

SETTINGS_COOKIE_NAME = _str("SETTINGS_COOKIE_NAME", "design2api_settings")
SETTINGS_COOKIE_MAX_AGE = _int("SETTINGS_COOKIE_MAX_AGE", 60 * 60 * 24 * 30)

# Set true behind HTTPS; browsers drop Secure cookies on plain http
SETTINGS_COOKIE_SECURE = _bool("SETTINGS_COOKIE_SECURE", False)

# persist_mode: "cookie" (default) | "env_file"
#   cookie   - encrypted, HTTP-only cookie only
#   env_file - cookie plus a plaintext overwrite of ENV_FILE_PATH
SETTINGS_PERSIST_MODE = _str("SETTINGS_PERSIST_MODE", "cookie")
