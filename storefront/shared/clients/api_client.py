import asyncio
from dataclasses import dataclass
from typing import Any, Callable, Optional

import httpx

from storefront.config.logger import get_logger
from storefront.shared.logger import StoreLogger
from storefront.shared.metrics import ApiMetrics, MetricsCollector


class ApiError(Exception):
    """
    A failed backend call.

    `response_data` is the decoded JSON body when the server answered
    (e.g. `{"error": "Out of stock"}`), `None` for transport failures.
    """

    def __init__(
        self,
        message: Optional[str] = None,
        status_code: Optional[int] = None,
        response_data: Any = None,
    ):
        super().__init__(message or "")
        self.message = message
        self.status_code = status_code
        self.response_data = response_data


@dataclass
class ApiResponse:
    data: Any
    status_code: int


class ApiClient:
    """Async JSON client for the storefront backend, built on httpx."""

    def __init__(
        self,
        base_url: str,
        timeout: float = 10.0,
        token_provider: Optional[Callable[[], Optional[str]]] = None,
        logger: Optional[StoreLogger] = None,
        metrics: Optional[MetricsCollector] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url
        self.timeout = timeout
        self.token_provider = token_provider or (lambda: None)
        self.logger = logger or get_logger("ApiClient")
        self.metrics = metrics or MetricsCollector(self.logger)
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                timeout=httpx.Timeout(self.timeout),
                headers={"Accept": "application/json"},
                transport=self._transport,
            )
            self.logger.debug("HTTP client created", extra={"base_url": self.base_url})
        return self._client

    def _auth_headers(self) -> dict:
        token = self.token_provider()
        return {"Authorization": f"Bearer {token}"} if token else {}

    async def get(self, path: str) -> ApiResponse:
        return await self._request("GET", path)

    async def post(self, path: str, body: Any = None) -> ApiResponse:
        return await self._request("POST", path, body)

    async def _request(self, method: str, path: str, body: Any = None) -> ApiResponse:
        client = self._get_client()
        self.metrics.increment(ApiMetrics.REQUESTS)
        self.logger.debug("API request", extra={"method": method, "path": path})

        try:
            response = await client.request(
                method,
                path,
                json=body if method != "GET" else None,
                headers=self._auth_headers(),
            )
        except asyncio.CancelledError:
            raise
        except httpx.HTTPError as exc:
            self.metrics.increment(ApiMetrics.FAILED_REQUESTS)
            self.metrics.increment(ApiMetrics.TRANSPORT_ERRORS)
            self.logger.error(
                "API transport error",
                extra={"method": method, "path": path, "error": str(exc)},
            )
            raise ApiError(str(exc) or None) from exc

        data = _decode_json(response)
        if response.is_error:
            self.metrics.increment(ApiMetrics.FAILED_REQUESTS)
            self.metrics.increment(ApiMetrics.HTTP_ERRORS)
            self.logger.error(
                "API request failed",
                extra={"method": method, "path": path, "status": response.status_code},
            )
            raise ApiError(
                f"Request failed with status code {response.status_code}",
                status_code=response.status_code,
                response_data=data,
            )

        self.logger.info(
            "API request completed",
            extra={"method": method, "path": path, "status": response.status_code},
        )
        return ApiResponse(data=data, status_code=response.status_code)

    async def close(self):
        if self._client is not None:
            await self._client.aclose()
            self._client = None
            self.logger.info("HTTP client closed")

    async def __aenter__(self) -> "ApiClient":
        self._get_client()
        return self

    async def __aexit__(self, exc_type, exc, tb):
        await self.close()


def _decode_json(response: httpx.Response) -> Any:
    if not response.content:
        return None
    try:
        return response.json()
    except ValueError:
        return None
