"""AES-256-GCM encryption for the settings cookie.

Wire format: base64( iv[12] || auth_tag[16] || ciphertext ).
"""

from __future__ import annotations

import base64
import binascii
import logging
import os
from typing import Optional

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives.ciphers.aead import AESGCM

from design2api import config

logger = logging.getLogger("design2api.encryption")

KEY_LENGTH = 32
IV_LENGTH = 12
AUTH_TAG_LENGTH = 16


class EncryptionKeyError(ValueError):
    """Raised when ENCRYPTION_KEY is not a 64-character hex string."""


class SettingsDecryptError(ValueError):
    """Raised when a payload cannot be decoded or fails authentication."""


def load_encryption_key(hex_key: Optional[str] = None) -> bytes:
    """Resolve the 32-byte key.

    Empty → a random key for this process only; cookies written before a
    restart become unreadable.
    """
    hex_key = config.ENCRYPTION_KEY if hex_key is None else hex_key
    if not hex_key:
        logger.warning(
            "ENCRYPTION_KEY not set - using a per-process random key. "
            "Saved settings will not survive a restart."
        )
        return os.urandom(KEY_LENGTH)

    if len(hex_key) != KEY_LENGTH * 2:
        raise EncryptionKeyError("ENCRYPTION_KEY must be 64 characters (32 bytes) hex string")

    try:
        return bytes.fromhex(hex_key)
    except ValueError as e:
        raise EncryptionKeyError("ENCRYPTION_KEY must be a valid hex string") from e


class SettingsCipher:
    """Encrypts and decrypts UTF-8 strings with a fixed key."""

    def __init__(self, key: bytes):
        if len(key) != KEY_LENGTH:
            raise EncryptionKeyError(f"Encryption key must be {KEY_LENGTH} bytes, got {len(key)}")
        self._aead = AESGCM(key)

    def encrypt(self, text: str) -> str:
        iv = os.urandom(IV_LENGTH)
        # AESGCM appends the tag; the wire format puts it before the ciphertext
        sealed = self._aead.encrypt(iv, text.encode("utf-8"), None)
        ciphertext, tag = sealed[:-AUTH_TAG_LENGTH], sealed[-AUTH_TAG_LENGTH:]
        return base64.b64encode(iv + tag + ciphertext).decode("ascii")

    def decrypt(self, encrypted: str) -> str:
        try:
            buf = base64.b64decode(encrypted, validate=True)
        except (binascii.Error, ValueError) as e:
            raise SettingsDecryptError("Encrypted payload is not valid base64") from e

        if len(buf) < IV_LENGTH + AUTH_TAG_LENGTH:
            raise SettingsDecryptError("Encrypted payload is too short")

        iv = buf[:IV_LENGTH]
        tag = buf[IV_LENGTH:IV_LENGTH + AUTH_TAG_LENGTH]
        ciphertext = buf[IV_LENGTH + AUTH_TAG_LENGTH:]

        try:
            plain = self._aead.decrypt(iv, ciphertext + tag, None)
        except InvalidTag as e:
            raise SettingsDecryptError("Encrypted payload failed authentication") from e
        return plain.decode("utf-8")
