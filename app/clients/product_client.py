import logging
from typing import Optional, Sequence
import httpx
from pydantic import TypeAdapter
from app.core.config import Settings, settings
from app.schemas.product_schema import (
    StockCheckRequest,
    StockCheckResponse,
    StockUpdateRequest,
)

logger = logging.getLogger(__name__)

CHECK_STOCK_PATH = "/api/products/check-stock"
UPDATE_STOCK_PATH = "/api/products/update-stock"

_stock_check_list = TypeAdapter(list[StockCheckResponse])

# global variable for the pooled http-client shared by all requests
_http_client: Optional[httpx.AsyncClient] = None


async def create_product_http_client(config: Settings = settings) -> httpx.AsyncClient:
    """
    Create the global async HTTP client bound to the Product Service.
    Called once during application startup.
    """
    global _http_client
    if _http_client is None:
        _http_client = httpx.AsyncClient(
            base_url=config.product_service_url,
            timeout=httpx.Timeout(config.product_service_timeout_s),
        )
        logger.info(
            "Product Service client created: base_url=%s timeout=%.1fs",
            config.product_service_url,
            config.product_service_timeout_s,
        )
    return _http_client


async def close_product_http_client() -> None:
    """
    Gracefully close the pooled connections on shutdown.
    """
    global _http_client
    if _http_client is not None:
        await _http_client.aclose()
        _http_client = None


class ProductServiceClient:
    """
    Calls the two stock endpoints of the Product Service.
    Non-2xx answers surface as httpx.HTTPStatusError and connection
    problems/timeouts as httpx.RequestError, the caller decides what they mean.
    """

    def __init__(self, http_client: httpx.AsyncClient) -> None:
        self._http = http_client

    async def check_stock(self, requests: Sequence[StockCheckRequest]) -> list[StockCheckResponse]:
        payload = [r.model_dump(by_alias=True) for r in requests]
        logger.info("Calling Product Service at URL: %s", self._url(CHECK_STOCK_PATH))
        logger.info("Stock check request: %s", payload)
        response = await self._http.post(CHECK_STOCK_PATH, json=payload)
        response.raise_for_status()
        verdicts = _stock_check_list.validate_json(response.content)
        logger.info("Stock check response: %s", verdicts)
        return verdicts

    async def update_stock(self, requests: Sequence[StockUpdateRequest]) -> None:
        payload = [r.model_dump(by_alias=True) for r in requests]
        logger.info("Calling Product Service at URL: %s", self._url(UPDATE_STOCK_PATH))
        logger.info("Stock update request: %s", payload)
        response = await self._http.post(UPDATE_STOCK_PATH, json=payload)
        response.raise_for_status()
        logger.info("Stock update response: %s", response.status_code)

    def _url(self, path: str) -> str:
        # httpx keeps a trailing slash on base_url and appends request paths to it
        return f"{self._http.base_url}{path.lstrip('/')}"
