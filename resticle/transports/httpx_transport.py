"""
httpx transport for resticle.

Sends ``ResourceRequest``s with ``httpx.AsyncClient`` and decodes the
response according to the request's ``response_type``.

HTTP client lifecycle:
    By default a fresh client is created for each request and closed
    afterward. For connection reuse, pass a shared client; the caller then
    owns it and must close it.

    async with httpx.AsyncClient(base_url="https://api.example.com") as client:
        factory = ResourceFactory(HttpxTransport(http_client=client))
        users = factory.get(Users)
        user = await users.get({"id": 42})
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

import httpx

from resticle.core.definitions import ResponseContentType
from resticle.core.exceptions import TransportError

from .protocol import BaseTransport

if TYPE_CHECKING:
    from resticle.config.schemas import FactorySettings
    from resticle.core.request import ResourceRequest

logger = logging.getLogger(__name__)


class HttpxTransport(BaseTransport):
    """
    Transport backed by ``httpx.AsyncClient``.

    Error statuses (>= 400) and client-level failures are raised as
    ``TransportError`` so ``response_error`` interceptors can handle them.

    ``with_credentials`` has no equivalent in httpx: cookies are governed by
    the client's cookie jar, so the flag is only recorded on the request.
    """

    def __init__(
        self,
        *,
        base_url: str = "",
        timeout: float = 30.0,
        http_client: httpx.AsyncClient | None = None,
    ):
        """
        Initialize the transport.

        Args:
            base_url: Prepended to relative request paths
            timeout: Request timeout in seconds (owned clients only)
            http_client: Optional shared HTTP client (caller manages lifecycle)
        """
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._shared_client = http_client

    @classmethod
    def from_settings(
        cls,
        settings: FactorySettings | None = None,
        **kwargs: Any,
    ) -> HttpxTransport:
        """Create a transport using the timeout from ``FactorySettings`` (env by default)."""
        if settings is None:
            from resticle.config.settings import get_settings

            settings = get_settings()
        return cls(timeout=settings.timeout, **kwargs)

    async def request(self, req: ResourceRequest) -> Any:
        if self._shared_client is not None:
            client = self._shared_client
            close_after = False
        else:
            client = httpx.AsyncClient(timeout=self._timeout)
            close_after = True

        url = self._build_url(req.path)
        method = req.method.value

        try:
            response = await client.request(
                method,
                url,
                headers={k: str(v) for k, v in req.headers.items()},
                **self._body_kwargs(req.body),
            )

            logger.info(f"[httpx_transport] {method} {url} -> {response.status_code}")

            if response.status_code >= 400:
                error_text = response.text[:500]
                logger.warning(
                    f"[httpx_transport] Error {response.status_code}: {error_text}"
                )
                raise TransportError(
                    f"{method} {url} failed",
                    status_code=response.status_code,
                    body=error_text,
                    request=req,
                )

            try:
                return self._extract(response, req.response_type)
            except ValueError as e:
                raise TransportError(
                    f"{method} {url} returned invalid JSON",
                    status_code=response.status_code,
                    body=response.text[:500],
                    request=req,
                ) from e

        except httpx.TimeoutException as e:
            logger.error(f"[httpx_transport] Timeout after {self._timeout}s: {url}")
            raise TransportError(
                f"Request timed out after {self._timeout}s", request=req
            ) from e

        except httpx.HTTPError as e:
            logger.error(f"[httpx_transport] Request failed: {e}")
            raise TransportError(f"Request failed: {e}", request=req) from e

        finally:
            if close_after:
                await client.aclose()

    def _build_url(self, path: str) -> str:
        if not self._base_url or path.startswith(("http://", "https://")):
            return path
        return f"{self._base_url}/{path.lstrip('/')}"

    @staticmethod
    def _body_kwargs(body: Any) -> dict[str, Any]:
        if body is None:
            return {}
        if isinstance(body, (bytes, str)):
            return {"content": body}
        if hasattr(body, "model_dump"):
            # pydantic models
            return {"json": body.model_dump(mode="json")}
        return {"json": body}

    @staticmethod
    def _extract(response: httpx.Response, response_type: ResponseContentType) -> Any:
        if response_type is ResponseContentType.BYTES:
            return response.content
        if response_type is ResponseContentType.TEXT:
            return response.text
        if not response.content:
            return None
        return response.json()

    def __repr__(self) -> str:
        return f"HttpxTransport(base_url={self._base_url!r})"
