"""HTTP plumbing shared by the PDF Craft API clients."""

import asyncio
import time
from collections.abc import Awaitable, Callable
from typing import Any, Optional, TypeVar

import httpx
from pydantic import BaseModel, ValidationError

from pdf_craft.core.config import Settings, get_settings
from pdf_craft.core.exceptions import APIException, ConfigurationException, ProtocolException
from pdf_craft.core.logging import get_logger

logger = get_logger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)

_ENVELOPE_KEYS = {"data", "success", "message", "code"}


def unwrap_envelope(payload: Any) -> Any:
    """Return ``payload["data"]`` when the response is a ``{"data": ...}`` envelope."""
    if isinstance(payload, dict) and "data" in payload and set(payload) <= _ENVELOPE_KEYS:
        return payload["data"]
    return payload


def parse_model(model: type[ModelT], payload: Any, context: str) -> ModelT:
    """Validate a response payload, raising ProtocolException on mismatch."""
    try:
        return model.model_validate(payload)
    except ValidationError as e:
        raise ProtocolException(
            f"Invalid {context} response: {e.error_count()} validation error(s)",
            details={"context": context, "errors": e.errors(include_url=False)},
        ) from e


class BaseAPIClient:
    """Async HTTP client with bearer authentication and error mapping."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        settings: Optional[Settings] = None,
        http_client: Optional[httpx.AsyncClient] = None,
        transfer_client: Optional[httpx.AsyncClient] = None,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ) -> None:
        """Initialize client.

        Args:
            api_key: Bearer token (default from settings)
            base_url: API base URL (default from settings)
            timeout: Request timeout in seconds (default from settings)
            settings: Settings instance (default: cached environment settings)
            http_client: Pre-built client for API calls
            transfer_client: Pre-built client for part uploads to pre-signed URLs
            clock: Monotonic clock used when polling
            sleep: Coroutine used for polling and retry waits

        Raises:
            ConfigurationException: If no API key is available
        """
        self.settings = settings or get_settings()
        self.api_key = api_key or self.settings.api_key
        if not self.api_key:
            raise ConfigurationException(
                "API key is required; pass api_key or set PDF_CRAFT_API_KEY"
            )

        self.base_url = base_url.rstrip("/") if base_url else self.settings.api_root
        self.timeout = timeout or self.settings.request_timeout

        self._client = http_client
        self._transfer_client = transfer_client
        self._owns_client = http_client is None
        self._owns_transfer_client = transfer_client is None
        self._clock = clock
        self._sleep = sleep

    async def __aenter__(self) -> "BaseAPIClient":
        """Enter async context manager."""
        await self._ensure_client()
        return self

    async def __aexit__(self, *args: Any) -> None:
        """Exit async context manager."""
        await self.close()

    @property
    def _headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
            "Accept": "application/json",
            "User-Agent": self.settings.user_agent,
        }

    async def _ensure_client(self) -> httpx.AsyncClient:
        """Ensure HTTP client is initialized."""
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self.timeout, follow_redirects=True)
            self._owns_client = True
        return self._client

    async def _ensure_transfer_client(self) -> httpx.AsyncClient:
        """Ensure the unauthenticated client for pre-signed uploads is initialized."""
        if self._transfer_client is None:
            self._transfer_client = httpx.AsyncClient(timeout=self.settings.upload_timeout)
            self._owns_transfer_client = True
        return self._transfer_client

    async def close(self) -> None:
        """Close HTTP clients this instance created."""
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None
        if self._transfer_client is not None and self._owns_transfer_client:
            await self._transfer_client.aclose()
            self._transfer_client = None

    def _url(self, path: str) -> str:
        if path.startswith(("http://", "https://")):
            return path
        return f"{self.base_url}/{path.lstrip('/')}"

    async def _request(self, method: str, path: str, **kwargs: Any) -> Any:
        """Make an API request and return the decoded JSON body.

        Args:
            method: HTTP method
            path: Path relative to base_url, or an absolute URL
            **kwargs: Additional arguments for httpx

        Returns:
            Decoded JSON body

        Raises:
            APIException: On non-2xx status or transport failure
            ProtocolException: If the body is not JSON
        """
        client = await self._ensure_client()
        url = self._url(path)

        logger.debug("making_request", method=method, url=url)

        try:
            response = await client.request(method, url, headers=self._headers, **kwargs)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            logger.warning("http_error", method=method, url=url, status=status)
            raise APIException(
                f"HTTP error {status} for {method} {url}",
                status_code=status,
                details={"url": url, "body": e.response.text[:500]},
            ) from e
        except httpx.RequestError as e:
            logger.warning("request_error", method=method, url=url, error=str(e))
            raise APIException(
                f"Request failed: {e}",
                details={"url": url, "error": str(e)},
            ) from e

        logger.debug("request_success", method=method, url=url, status=response.status_code)

        try:
            return response.json()
        except ValueError as e:
            raise ProtocolException(
                f"Response from {url} is not valid JSON",
                details={"url": url, "body": response.text[:500]},
            ) from e
