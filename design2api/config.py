"""Design2API configuration constants - single source of truth for infra env vars."""

import os

# Server binding - used by `python -m app` / uvicorn
API_HOST = os.getenv("API_HOST", "0.0.0.0")
API_PORT = int(os.getenv("API_PORT", "8000"))

# Local key-value store (image/schema caches)
DATABASE_URL = os.getenv("DATABASE_URL", "sqlite+aiosqlite:///./design2api.db")

# Figma REST API
FIGMA_API_BASE = os.getenv("FIGMA_API_BASE", "https://api.figma.com")

# Fallback credentials, used only when the request carries no settings cookie
FIGMA_ACCESS_TOKEN = os.getenv("FIGMA_ACCESS_TOKEN", "")
FIGMA_FILE_ID = os.getenv("FIGMA_FILE_ID", "")
OPENAI_API_KEY = os.getenv("OPENAI_API_KEY", "")

# Settings cookie encryption - 64 hex chars (32 bytes). Empty → per-process random key
ENCRYPTION_KEY = os.getenv("ENCRYPTION_KEY", "")

# Plaintext settings file written in env_file persist mode
ENV_FILE_PATH = os.getenv("ENV_FILE_PATH", ".env.local")

# Comma-separated list of allowed browser origins
CORS_ORIGINS = os.getenv("CORS_ORIGINS", "http://localhost:3000,http://127.0.0.1:3000")
