"""HTTP client for the ContextForge folder API."""

import asyncio
import logging
from typing import Any, Dict, List, Optional

import httpx

from .config import ClientConfig

logger = logging.getLogger(__name__)

# Retry configuration for transient failures (connection errors, 5xx).
MAX_RETRIES = 3
RETRY_BASE_DELAY = 1.0  # seconds; exponential: 1s, 2s, 4s

_UNSET: Any = object()


class ApiError(Exception):
    """A 4xx answer from the server, built from its JSON error body."""

    def __init__(self, status_code: int, error: str, message: str, details: Optional[dict] = None):
        super().__init__(f"{status_code} {error}: {message}")
        self.status_code = status_code
        self.error = error
        self.message = message
        self.details = details or {}

    @classmethod
    def from_response(cls, resp: httpx.Response) -> "ApiError":
        try:
            body = resp.json()
        except ValueError:
            body = {}
        if not isinstance(body, dict):
            body = {}
        return cls(
            status_code=resp.status_code,
            error=body.get("error", "HTTP_ERROR"),
            message=body.get("message") or resp.reason_phrase,
            details=body.get("details") or {},
        )


class FolderClient:
    """Async client wrapping the folder endpoints under ``/api/folders``.

    Usage:
        async with FolderClient(ClientConfig.load()) as client:
            folder = await client.create_folder("Work")
            await client.add_items(folder["id"], ["item-1", "item-2"])
    """

    def __init__(
        self,
        config: ClientConfig,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        retry_base_delay: float = RETRY_BASE_DELAY,
    ) -> None:
        self.config = config
        self.retry_base_delay = retry_base_delay
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    async def __aenter__(self) -> "FolderClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

    async def _get_client(self) -> httpx.AsyncClient:
        if self._client is None or self._client.is_closed:
            headers: Dict[str, str] = {}
            if self.config.api_key:
                headers["Authorization"] = f"Bearer {self.config.api_key}"
            self._client = httpx.AsyncClient(
                base_url=self.config.api_url,
                headers=headers,
                timeout=self.config.timeout,
                transport=self._transport,
            )
        return self._client

    async def _request_with_retry(
        self,
        method: str,
        path: str,
        **kwargs: Any,
    ) -> httpx.Response:
        """Execute an HTTP request with retry on transient failures.

        Retries on connection errors and 5xx server errors with exponential
        backoff. Client errors (4xx) are not retried and raise ApiError.
        """
        client = await self._get_client()
        last_exc: Optional[Exception] = None

        for attempt in range(MAX_RETRIES):
            try:
                resp = await client.request(method, path, **kwargs)
                if resp.status_code < 400:
                    return resp
                if resp.status_code < 500:
                    raise ApiError.from_response(resp)
                # 5xx: retry
                last_exc = httpx.HTTPStatusError(
                    f"Server error {resp.status_code}",
                    request=resp.request,
                    response=resp,
                )
            except (httpx.ConnectError, httpx.TimeoutException) as exc:
                last_exc = exc

            if attempt < MAX_RETRIES - 1:
                delay = self.retry_base_delay * (2 ** attempt)
                logger.warning(
                    "Request %s %s failed (attempt %d/%d), retrying in %.1fs: %s",
                    method, path, attempt + 1, MAX_RETRIES, delay, last_exc,
                )
                await asyncio.sleep(delay)

        raise last_exc  # type: ignore[misc]

    # -- Folders ------------------------------------------------------------

    async def list_folders(
        self, parent_id: Optional[str] = None, flat: bool = False, include_items: bool = False
    ) -> List[Dict[str, Any]]:
        """Maps to GET /api/folders."""
        params: Dict[str, Any] = {"flat": str(flat).lower(), "include_items": str(include_items).lower()}
        if parent_id:
            params["parent_id"] = parent_id
        resp = await self._request_with_retry("GET", "/api/folders", params=params)
        return resp.json()

    async def get_tree(self) -> List[Dict[str, Any]]:
        resp = await self._request_with_retry("GET", "/api/folders/tree")
        return resp.json()

    async def get_folder(self, folder_id: str) -> Dict[str, Any]:
        """Folder with parent, children and items. Maps to GET /api/folders/{id}."""
        resp = await self._request_with_retry("GET", f"/api/folders/{folder_id}")
        return resp.json()

    async def create_folder(self, name: str, parent_id: Optional[str] = None, **attrs: Any) -> Dict[str, Any]:
        body = {"name": name, "parent_id": parent_id, **attrs}
        resp = await self._request_with_retry("POST", "/api/folders", json=body)
        return resp.json()

    async def update_folder(
        self,
        folder_id: str,
        name: Optional[str] = None,
        parent_id: Optional[str] = _UNSET,
        **attrs: Any,
    ) -> Dict[str, Any]:
        """Maps to PATCH /api/folders/{id}. Pass ``parent_id=None`` to move to the root."""
        body: Dict[str, Any] = dict(attrs)
        if name is not None:
            body["name"] = name
        if parent_id is not _UNSET:
            body["parent_id"] = parent_id
        resp = await self._request_with_retry("PATCH", f"/api/folders/{folder_id}", json=body)
        return resp.json()

    async def delete_folder(self, folder_id: str, force: bool = False) -> bool:
        resp = await self._request_with_retry(
            "DELETE", f"/api/folders/{folder_id}", params={"force": str(force).lower()},
        )
        return resp.json().get("success", False)

    # -- Templates ----------------------------------------------------------

    async def list_templates(self, category: Optional[str] = None, include_public: bool = True) -> List[Dict[str, Any]]:
        params: Dict[str, Any] = {"include_public": str(include_public).lower()}
        if category:
            params["category"] = category
        resp = await self._request_with_retry("GET", "/api/folders/templates", params=params)
        return resp.json()

    async def create_template(self, name: str, structure: Dict[str, Any], **fields: Any) -> Dict[str, Any]:
        body = {"name": name, "structure": structure, **fields}
        resp = await self._request_with_retry("POST", "/api/folders/templates", json=body)
        return resp.json()

    # -- Items --------------------------------------------------------------

    async def add_items(self, folder_id: str, item_ids: List[str], position: Optional[int] = None) -> int:
        body: Dict[str, Any] = {"item_ids": item_ids}
        if position is not None:
            body["position"] = position
        resp = await self._request_with_retry("POST", f"/api/folders/{folder_id}/items", json=body)
        return resp.json()["added_items"]

    async def move_items(
        self,
        folder_id: str,
        target_folder_id: str,
        item_ids: List[str],
        position: Optional[int] = None,
    ) -> int:
        body: Dict[str, Any] = {
            "action": "move",
            "item_ids": item_ids,
            "target_folder_id": target_folder_id,
        }
        if position is not None:
            body["position"] = position
        resp = await self._request_with_retry("PATCH", f"/api/folders/{folder_id}/items", json=body)
        return resp.json()["moved_items"]

    async def reorder_items(self, folder_id: str, positions: Dict[str, int]) -> int:
        """Set explicit positions, given as ``{item_id: position}``."""
        body = {
            "action": "reorder",
            "item_positions": [
                {"item_id": item_id, "position": position} for item_id, position in positions.items()
            ],
        }
        resp = await self._request_with_retry("PATCH", f"/api/folders/{folder_id}/items", json=body)
        return resp.json()["reordered_items"]

    async def remove_items(self, folder_id: str, item_ids: List[str]) -> int:
        resp = await self._request_with_retry(
            "DELETE", f"/api/folders/{folder_id}/items", params={"item_ids": ",".join(item_ids)},
        )
        return resp.json()["removed_items"]

    async def close(self) -> None:
        """Close the underlying HTTP client."""
        if self._client and not self._client.is_closed:
            await self._client.aclose()
