"""Unit tests for StockCoordinator and CoordinatorRegistry."""

import pytest

from storefront_agent.coordinator import (
    CoordinatorRegistry,
    FileDurableStore,
    InMemoryDurableStore,
)


@pytest.fixture
def registry(config, http_client) -> CoordinatorRegistry:
    return CoordinatorRegistry(config, http_client=http_client, store_factory=lambda name: InMemoryDurableStore())


class TestCoordinatorRegistry:

    def test_same_name_returns_same_instance(self, registry) -> None:
        assert registry.get() is registry.get("openai")

    def test_different_names_are_isolated(self, registry) -> None:
        assert registry.get("openai") is not registry.get("other")

    def test_default_store_is_file_backed(self, config, http_client, tmp_path) -> None:
        coordinator = CoordinatorRegistry(config, http_client=http_client).get()

        assert isinstance(coordinator.store, FileDurableStore)
        assert coordinator.store.directory == tmp_path / "store" / "openai"

    def test_settings_flow_into_cache(self, config, http_client) -> None:
        config.STOCK_CACHE_TTL_SECONDS = 5.0
        coordinator = CoordinatorRegistry(config, http_client=http_client).get()

        assert coordinator.stock_cache.ttl == 5.0
        assert coordinator.token_manager.refresh_buffer == 300.0
        assert coordinator.auth.base_url == "https://test-org.commercelayer.io"


class TestStockCoordinator:

    @pytest.mark.asyncio
    async def test_get_commerce_layer_token_returns_string(self, coordinator) -> None:
        assert await coordinator.get_commerce_layer_token() == "token-1"

    @pytest.mark.asyncio
    async def test_stock_and_token_share_one_credential(self, coordinator, fake_cl) -> None:
        token = await coordinator.get_commerce_layer_token()
        await coordinator.check_stock("X")

        assert fake_cl.stock_requests[0].headers["Authorization"] == f"Bearer {token}"
        assert len(fake_cl.token_requests) == 1

    @pytest.mark.asyncio
    async def test_restart_reuses_durable_state(self, config, http_client, fake_cl, tmp_path) -> None:
        fake_cl.stock["X"] = [2]
        await CoordinatorRegistry(config, http_client=http_client).get().check_stock("X")

        restarted = CoordinatorRegistry(config, http_client=http_client).get()
        entry = await restarted.check_stock("X")
        token = await restarted.get_commerce_layer_token()

        assert entry.quantity == 2
        assert token == "token-1"
        assert fake_cl.stock_calls == ["X"]
        assert len(fake_cl.token_requests) == 1
