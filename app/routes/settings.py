"""Settings endpoints - encrypted, cookie-persisted user credentials.

GET    /api/settings  read back the decrypted settings
POST   /api/settings  validate + store (cookie; plus env file in env_file mode)
DELETE /api/settings  forget them
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Request, Response
from pydantic import BaseModel

from app.dependencies import get_cipher, read_cookie_credentials
from design2api import settings
from design2api.credentials import Credentials, write_env_file
from design2api.encryption import SettingsCipher

logger = logging.getLogger("design2api.routes.settings")

router = APIRouter(prefix="/api/settings", tags=["settings"])


class SettingsResponse(BaseModel):
    configured: bool
    settings: Credentials


class SettingsSaveResponse(BaseModel):
    success: bool
    persist_mode: str


@router.get("", response_model=SettingsResponse, response_model_by_alias=True)
async def read_settings(
    request: Request,
    cipher: SettingsCipher = Depends(get_cipher),
):
    stored = read_cookie_credentials(request, cipher)
    return SettingsResponse(configured=stored is not None, settings=stored or Credentials())


@router.post("", response_model=SettingsSaveResponse)
async def save_settings(
    payload: Credentials,
    response: Response,
    cipher: SettingsCipher = Depends(get_cipher),
):
    """Store credentials. All three fields are required."""
    missing = payload.missing_fields()
    if missing:
        raise HTTPException(
            status_code=400,
            detail=f"Missing required settings: {', '.join(missing)}",
        )

    mode = settings.SETTINGS_PERSIST_MODE
    if mode == "env_file":
        try:
            write_env_file(payload)
        except OSError as e:
            logger.error(f"Error updating settings file: {e}")
            raise HTTPException(status_code=500, detail="Failed to update settings")

    response.set_cookie(
        key=settings.SETTINGS_COOKIE_NAME,
        value=cipher.encrypt(payload.to_json()),
        max_age=settings.SETTINGS_COOKIE_MAX_AGE,
        httponly=True,
        samesite="strict",
        secure=settings.SETTINGS_COOKIE_SECURE,
    )
    logger.info(f"save_settings: stored settings (mode={mode})")
    return SettingsSaveResponse(success=True, persist_mode=mode)


@router.delete("", response_model=SettingsSaveResponse)
async def clear_settings(response: Response):
    response.delete_cookie(
        key=settings.SETTINGS_COOKIE_NAME,
        httponly=True,
        samesite="strict",
        secure=settings.SETTINGS_COOKIE_SECURE,
    )
    return SettingsSaveResponse(success=True, persist_mode=settings.SETTINGS_PERSIST_MODE)
