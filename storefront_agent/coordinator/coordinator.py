"""Coordinator façade and the registry that addresses it by name."""

import logging
import time
from typing import Callable, Dict, Optional

import httpx

from ..config import Config
from ..database.models import StockEntry
from ..integrations.commerce_layer.auth import CommerceLayerAuth
from ..integrations.commerce_layer.stock import CommerceLayerStock
from .stock_cache import TieredStockCache
from .store import DurableStore, FileDurableStore
from .token_manager import TokenManager

logger = logging.getLogger(__name__)


class StockCoordinator:
    """Owns the Commerce Layer token and the stock cache for one deployment."""

    def __init__(self, name: str, auth: CommerceLayerAuth, store: DurableStore,
                 stock_ttl: float = 60.0, max_entries: int = 1024,
                 refresh_buffer: float = 300.0,
                 clock: Callable[[], float] = time.time):
        self.name = name
        self.auth = auth
        self.store = store
        self.token_manager = TokenManager(auth, store, refresh_buffer=refresh_buffer, clock=clock)
        self.stock_cache = TieredStockCache(
            CommerceLayerStock(auth),
            self.token_manager,
            store,
            ttl=stock_ttl,
            max_entries=max_entries,
            clock=clock
        )

    @classmethod
    def from_config(cls, name: str, config: Config, http_client: httpx.AsyncClient,
                    store: Optional[DurableStore] = None) -> 'StockCoordinator':
        auth = CommerceLayerAuth(
            client_id=config.CL_CLIENT_ID,
            client_secret=config.CL_CLIENT_SECRET,
            domain=config.CL_DOMAIN,
            http_client=http_client,
            auth_url=config.CL_AUTH_URL
        )
        if store is None:
            store = FileDurableStore(f"{config.DURABLE_STORE_PATH}/{name}")
        return cls(
            name,
            auth,
            store,
            stock_ttl=config.STOCK_CACHE_TTL_SECONDS,
            max_entries=config.STOCK_CACHE_MAX_ENTRIES,
            refresh_buffer=config.TOKEN_REFRESH_BUFFER_SECONDS
        )

    async def get_commerce_layer_token(self) -> str:
        credential = await self.token_manager.get_token()
        return credential.token

    async def check_stock(self, sku_code: str) -> StockEntry:
        return await self.stock_cache.check_stock(sku_code)


class CoordinatorRegistry:
    """Constructs one coordinator per logical name and hands out that instance.

    Create one registry at application start-up and pass it to callers; every
    caller asking for the same name shares one token and one stock cache.
    """

    def __init__(self, config: Config, http_client: Optional[httpx.AsyncClient] = None,
                 store_factory: Optional[Callable[[str], DurableStore]] = None):
        self.config = config
        self._owns_client = http_client is None
        self.http_client = http_client or httpx.AsyncClient(timeout=config.HTTP_TIMEOUT_SECONDS)
        self._store_factory = store_factory
        self._coordinators: Dict[str, StockCoordinator] = {}

    def get(self, name: Optional[str] = None) -> StockCoordinator:
        name = name or self.config.COORDINATOR_NAME
        coordinator = self._coordinators.get(name)
        if coordinator is None:
            logger.info(f"Creating coordinator '{name}'")
            store = self._store_factory(name) if self._store_factory else None
            coordinator = StockCoordinator.from_config(name, self.config, self.http_client, store=store)
            self._coordinators[name] = coordinator
        return coordinator

    async def aclose(self) -> None:
        if self._owns_client:
            await self.http_client.aclose()
