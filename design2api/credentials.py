"""User-supplied credentials and their persistence helpers.

Credentials are an explicit value object handed to every client call; no
module keeps a shared copy. Two persistence paths exist:

- encrypted cookie (see design2api.encryption and app.routes.settings)
- plaintext env file, overwritten wholesale on every save
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from design2api import config

logger = logging.getLogger("design2api.credentials")


class Credentials(BaseModel):
    """Figma token + file id + model API key.

    JSON field names follow the browser client (camelCase); Python code uses
    snake_case attributes.
    """

    model_config = ConfigDict(populate_by_name=True)

    figma_access_token: str = Field("", alias="figmaAccessToken")
    figma_file_id: str = Field("", alias="figmaFileId")
    openai_api_key: str = Field("", alias="openaiApiKey")

    @property
    def has_figma(self) -> bool:
        return bool(self.figma_access_token and self.figma_file_id)

    def missing_fields(self) -> List[str]:
        """Return the JSON names of empty fields."""
        missing = []
        for name, field in Credentials.model_fields.items():
            if not getattr(self, name).strip():
                missing.append(field.alias or name)
        return missing

    def to_json(self) -> str:
        return self.model_dump_json(by_alias=True)

    @classmethod
    def from_env(cls) -> "Credentials":
        """Fallback credentials from environment configuration."""
        return cls(
            figma_access_token=config.FIGMA_ACCESS_TOKEN,
            figma_file_id=config.FIGMA_FILE_ID,
            openai_api_key=config.OPENAI_API_KEY,
        )


def render_env_file(credentials: Credentials) -> str:
    return (
        f"FIGMA_ACCESS_TOKEN={credentials.figma_access_token}\n"
        f"FIGMA_FILE_ID={credentials.figma_file_id}\n"
        f"OPENAI_API_KEY={credentials.openai_api_key}"
    )


def write_env_file(
    credentials: Credentials,
    path: Optional[Union[str, Path]] = None,
) -> Path:
    """Overwrite the env file with all three settings.

    No partial update: every save rewrites the whole file. Values are stored
    in plaintext.
    """
    env_path = Path(path or config.ENV_FILE_PATH)
    if not env_path.is_absolute():
        env_path = Path(os.getcwd()) / env_path
    env_path.write_text(render_env_file(credentials), encoding="utf-8")
    logger.info(f"write_env_file: wrote settings to {env_path}")
    return env_path
