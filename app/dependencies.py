"""FastAPI dependencies - settings cipher, per-request credentials, storage."""

from __future__ import annotations

import json
import logging
from functools import lru_cache
from typing import Optional

from fastapi import Depends, Request
from pydantic import ValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_session
from app.repositories.local_storage import LocalStorageRepository
from design2api import settings
from design2api.credentials import Credentials
from design2api.encryption import SettingsCipher, SettingsDecryptError, load_encryption_key

logger = logging.getLogger("design2api.app.dependencies")


@lru_cache(maxsize=1)
def get_cipher() -> SettingsCipher:
    """Process-wide cipher; the key is resolved once."""
    return SettingsCipher(load_encryption_key())


def read_cookie_credentials(request: Request, cipher: SettingsCipher) -> Optional[Credentials]:
    """Decrypt the settings cookie. Missing or unreadable → None."""
    token = request.cookies.get(settings.SETTINGS_COOKIE_NAME)
    if not token:
        return None
    try:
        return Credentials.model_validate(json.loads(cipher.decrypt(token)))
    except (SettingsDecryptError, ValueError, ValidationError) as e:
        logger.warning(f"Ignoring unreadable settings cookie: {e}")
        return None


def get_credentials(
    request: Request,
    cipher: SettingsCipher = Depends(get_cipher),
) -> Credentials:
    """Credentials for this request: cookie first, environment fallback."""
    return read_cookie_credentials(request, cipher) or Credentials.from_env()


async def get_storage(
    session: AsyncSession = Depends(get_session),
) -> LocalStorageRepository:
    return LocalStorageRepository(session)
