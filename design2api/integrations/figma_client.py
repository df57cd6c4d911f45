"""Figma REST API client for the design-to-API flow.

Fetches the document tree, specific nodes, and rendered node images from a
Figma file using a Personal Access Token.

Credentials are passed in explicitly; nothing is read from a shared
singleton, so two sessions can hold two clients side by side.

Usage:
    client = FigmaClient(Credentials(figma_access_token="...", figma_file_id="..."))
    data = await client.get_file()
    url = await client.get_image("12:34")
"""

import logging
from enum import Enum
from typing import Any, Dict, List, Optional

import httpx

from design2api import config, settings
from design2api.credentials import Credentials

from .figma_types import DesignNode

logger = logging.getLogger("design2api.integrations.figma")


class FigmaErrorKind(str, Enum):
    CREDENTIALS_MISSING = "credentials_missing"
    UNAUTHORIZED = "unauthorized"
    NOT_FOUND = "not_found"
    RATE_LIMITED = "rate_limited"
    NETWORK = "network"
    RENDER_ERROR = "render_error"
    HTTP_ERROR = "http_error"


class FigmaClientError(Exception):
    """Raised when a Figma API call fails.

    `kind` and `status_code` are set where the failure is observed, so
    callers branch on them instead of parsing the message.
    """

    def __init__(
        self,
        message: str,
        kind: FigmaErrorKind = FigmaErrorKind.HTTP_ERROR,
        status_code: Optional[int] = None,
    ):
        super().__init__(message)
        self.kind = kind
        self.status_code = status_code


_USER_MESSAGES = {
    FigmaErrorKind.CREDENTIALS_MISSING: "Figma credentials are not set. Configure them in settings.",
    FigmaErrorKind.UNAUTHORIZED: "The Figma access token is invalid. Check it in settings.",
    FigmaErrorKind.NOT_FOUND: "The Figma file could not be found. Check the file ID.",
    FigmaErrorKind.RATE_LIMITED: "Figma is rate limiting requests. Try again shortly.",
}

_GENERIC_MESSAGE = "Failed to load the Figma file. Check your settings."


def describe_figma_error(err: FigmaClientError) -> str:
    """User-facing message for a Figma failure; generic fallback otherwise."""
    return _USER_MESSAGES.get(err.kind, _GENERIC_MESSAGE)


class FigmaClient:
    """Async Figma REST API client.

    Args:
        credentials: Token + file id. Checked on every call, not here.
        timeout: HTTP request timeout in seconds.
    """

    def __init__(
        self,
        credentials: Credentials,
        timeout: float = settings.FIGMA_HTTP_TIMEOUT,
        base_url: str = config.FIGMA_API_BASE,
    ):
        self._credentials = credentials
        self._client: Optional[httpx.AsyncClient] = None
        self._timeout = timeout
        self._base_url = base_url

    @property
    def file_id(self) -> str:
        return self._credentials.figma_file_id

    def _require_credentials(self) -> None:
        if not self._credentials.has_figma:
            raise FigmaClientError(
                "Figma credentials not set. Please configure them in settings.",
                kind=FigmaErrorKind.CREDENTIALS_MISSING,
            )

    async def _get_client(self) -> httpx.AsyncClient:
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                base_url=self._base_url,
                headers={"X-Figma-Token": self._credentials.figma_access_token},
                timeout=self._timeout,
                limits=httpx.Limits(max_connections=5, max_keepalive_connections=3),
            )
        return self._client

    async def close(self) -> None:
        if self._client and not self._client.is_closed:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> "FigmaClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

    async def _get(self, path: str, params: Optional[Dict] = None) -> Dict[str, Any]:
        """Make a GET request to the Figma API."""
        self._require_credentials()
        client = await self._get_client()
        try:
            resp = await client.get(path, params=params)
        except httpx.TimeoutException as e:
            raise FigmaClientError(
                f"Figma API timeout: {path}", kind=FigmaErrorKind.NETWORK
            ) from e
        except httpx.TransportError as e:
            raise FigmaClientError(
                f"Figma API connection error: {path}", kind=FigmaErrorKind.NETWORK
            ) from e

        status = resp.status_code
        if status in (401, 403):
            raise FigmaClientError(
                f"{status}: Invalid Figma access token",
                kind=FigmaErrorKind.UNAUTHORIZED,
                status_code=status,
            )
        if status == 404:
            raise FigmaClientError(
                f"404: Figma resource not found: {path}",
                kind=FigmaErrorKind.NOT_FOUND,
                status_code=status,
            )
        if status == 429:
            raise FigmaClientError(
                "429: Figma API rate limit exceeded. Retry later.",
                kind=FigmaErrorKind.RATE_LIMITED,
                status_code=status,
            )
        if status < 200 or status >= 300:
            raise FigmaClientError(
                f"{status}: Figma API request failed: {resp.text[:200]}",
                kind=FigmaErrorKind.HTTP_ERROR,
                status_code=status,
            )

        return resp.json()

    # ------------------------------------------------------------------
    # Core API methods
    # ------------------------------------------------------------------

    async def get_file(self) -> Dict[str, Any]:
        """Fetch the whole Figma file (raw JSON).

        GET /v1/files/:key
        """
        data = await self._get(f"/v1/files/{self.file_id}")
        logger.info(
            f"get_file: file={self.file_id}, name={data.get('name', '')!r}, "
            f"pages={len(data.get('document', {}).get('children', []))}"
        )
        return data

    async def get_file_nodes(self, node_ids: List[str]) -> Dict[str, Any]:
        """Fetch specific nodes from the Figma file.

        GET /v1/files/:key/nodes?ids=...
        """
        ids_param = ",".join(node_ids)
        data = await self._get(f"/v1/files/{self.file_id}/nodes", params={"ids": ids_param})
        logger.info(
            f"get_file_nodes: file={self.file_id}, requested={len(node_ids)}, "
            f"returned={len(data.get('nodes') or {})}"
        )
        return data

    async def get_node(self, node_id: str) -> DesignNode:
        """Fetch one node subtree and parse it."""
        data = await self.get_file_nodes([node_id])
        entry = (data.get("nodes") or {}).get(node_id)
        if not entry or not entry.get("document"):
            raise FigmaClientError(
                f"404: Figma node not found: {node_id}",
                kind=FigmaErrorKind.NOT_FOUND,
                status_code=404,
            )
        return DesignNode.model_validate(entry["document"])

    async def get_image(
        self,
        node_id: str,
        fmt: str = settings.FIGMA_IMAGE_FORMAT,
    ) -> Optional[str]:
        """Render one node via Figma's image export API.

        GET /v1/images/:key?ids=...&format=png

        Returns the CDN URL, or None when Figma could not render the node.
        """
        data = await self._get(
            f"/v1/images/{self.file_id}",
            params={"ids": node_id, "format": fmt},
        )

        if data.get("err"):
            raise FigmaClientError(
                f"Figma image render error: {data['err']}",
                kind=FigmaErrorKind.RENDER_ERROR,
            )

        url = (data.get("images") or {}).get(node_id)
        logger.info(f"get_image: file={self.file_id}, node={node_id}, rendered={bool(url)}")
        return url
