"""Shared test fixtures for the storefront agent test suite."""

import asyncio
import json
from typing import Any, Dict, List, Optional

import httpx
import pytest

from storefront_agent.config import Config
from storefront_agent.coordinator import InMemoryDurableStore, StockCoordinator
from storefront_agent.integrations.commerce_layer import CommerceLayerAuth

CL_DOMAIN = "test-org.commercelayer.io"
AUTH_URL = "https://auth.test"


class FakeClock:
    """Callable clock the tests move forward by hand."""

    def __init__(self, start: float = 1_700_000_000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeCommerceLayer:
    """httpx.MockTransport handler standing in for the auth and stock endpoints."""

    def __init__(self):
        self.stock: Dict[str, List[Any]] = {}
        self.token_status = 200
        self.stock_status = 200
        self.expires_in = 14400
        self.stock_delay = 0.01
        self.raise_on_stock: Optional[Exception] = None
        self.token_requests: List[dict] = []
        self.stock_requests: List[httpx.Request] = []
        self._issued = 0

    @property
    def stock_calls(self) -> List[str]:
        return [r.url.params["filter[q][code_eq]"] for r in self.stock_requests]

    async def handler(self, request: httpx.Request) -> httpx.Response:
        if request.url.path == "/oauth/token":
            self.token_requests.append(json.loads(request.content))
            if self.token_status != 200:
                return httpx.Response(self.token_status, text="invalid_client")
            self._issued += 1
            return httpx.Response(200, json={
                "access_token": f"token-{self._issued}",
                "token_type": "bearer",
                "expires_in": self.expires_in
            })

        if request.url.path == "/api/stock_items":
            self.stock_requests.append(request)
            await asyncio.sleep(self.stock_delay)
            if self.raise_on_stock is not None:
                raise self.raise_on_stock
            if self.stock_status != 200:
                return httpx.Response(self.stock_status, text="upstream exploded")
            sku = request.url.params["filter[q][code_eq]"]
            data = [
                {"id": f"{sku}-{i}", "attributes": {"sku_code": sku, "quantity": quantity}}
                for i, quantity in enumerate(self.stock.get(sku, []))
            ]
            return httpx.Response(200, json={"data": data})

        return httpx.Response(404, text="not found")


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def fake_cl() -> FakeCommerceLayer:
    return FakeCommerceLayer()


@pytest.fixture
def http_client(fake_cl: FakeCommerceLayer):
    client = httpx.AsyncClient(transport=httpx.MockTransport(fake_cl.handler))
    yield client
    loop = asyncio.new_event_loop()
    try:
        loop.run_until_complete(client.aclose())
    finally:
        loop.close()


@pytest.fixture
def store() -> InMemoryDurableStore:
    return InMemoryDurableStore()


@pytest.fixture
def auth(http_client: httpx.AsyncClient) -> CommerceLayerAuth:
    return CommerceLayerAuth(
        client_id="client-id",
        client_secret="client-secret",
        domain=CL_DOMAIN,
        http_client=http_client,
        auth_url=AUTH_URL
    )


@pytest.fixture
def coordinator(auth, store, clock) -> StockCoordinator:
    return StockCoordinator("openai", auth, store, clock=clock)


@pytest.fixture
def config(tmp_path) -> Config:
    return Config(
        CL_CLIENT_ID="client-id",
        CL_CLIENT_SECRET="client-secret",
        CL_DOMAIN=CL_DOMAIN,
        CL_AUTH_URL=AUTH_URL,
        DURABLE_STORE_PATH=str(tmp_path / "store")
    )
