"""Pytest fixtures: an in-process fake of the Product Service stock endpoints."""

import json
from typing import Any, Optional

import httpx
import pytest
import pytest_asyncio
from fastapi.testclient import TestClient

from app.api.orders_api import order_processor_from_app
from app.clients.product_client import (
    CHECK_STOCK_PATH,
    UPDATE_STOCK_PATH,
    ProductServiceClient,
)
from app.main import app
from app.services.order_processor import OrderProcessor

PRODUCT_SERVICE_URL = "http://products.test"


class FakeProductService:
    """
    Answers check-stock with one verdict per requested product (sufficient
    unless listed in `insufficient`) and update-stock with 200.
    Set `check_reply`/`update_reply` to (status, body) to override the answer,
    or `check_error`/`update_error` to an httpx exception class to fail the call.
    """

    def __init__(self) -> None:
        self.calls: dict[str, list[Any]] = {CHECK_STOCK_PATH: [], UPDATE_STOCK_PATH: []}
        self.insufficient: set[str] = set()
        self.check_reply: Optional[tuple[int, Any]] = None
        self.update_reply: Optional[tuple[int, Any]] = None
        self.check_error: Optional[type[httpx.TransportError]] = None
        self.update_error: Optional[type[httpx.TransportError]] = None
        self.clients: list[httpx.AsyncClient] = []

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handle)

    def http_client(self) -> httpx.AsyncClient:
        client = httpx.AsyncClient(base_url=PRODUCT_SERVICE_URL, transport=self.transport)
        self.clients.append(client)
        return client

    def handle(self, request: httpx.Request) -> httpx.Response:
        path = request.url.path
        self.calls[path].append(json.loads(request.content))
        if path == CHECK_STOCK_PATH:
            if self.check_error is not None:
                raise self.check_error("timed out", request=request)
            if self.check_reply is not None:
                return _reply(*self.check_reply)
            verdicts = [
                {"productId": item["productId"], "sufficientStock": item["productId"] not in self.insufficient}
                for item in self.calls[path][-1]
            ]
            return httpx.Response(200, json=verdicts)
        if self.update_error is not None:
            raise self.update_error("timed out", request=request)
        if self.update_reply is not None:
            return _reply(*self.update_reply)
        return httpx.Response(200)

    @property
    def check_calls(self) -> list[Any]:
        return self.calls[CHECK_STOCK_PATH]

    @property
    def update_calls(self) -> list[Any]:
        return self.calls[UPDATE_STOCK_PATH]


def _reply(status_code: int, body: Any) -> httpx.Response:
    if isinstance(body, str):
        return httpx.Response(status_code, text=body)
    return httpx.Response(status_code, json=body)


@pytest.fixture
def product_service() -> FakeProductService:
    return FakeProductService()


@pytest_asyncio.fixture
async def processor(product_service: FakeProductService):
    async with product_service.http_client() as http:
        yield OrderProcessor(ProductServiceClient(http))


@pytest.fixture
def api_client(product_service: FakeProductService):
    async def processor_override():
        async with product_service.http_client() as http:
            yield OrderProcessor(ProductServiceClient(http))

    app.dependency_overrides[order_processor_from_app] = processor_override
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
