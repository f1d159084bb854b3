"""Read-through stock cache: inflight -> memory -> durable store -> upstream."""

import logging
import time
from collections import OrderedDict
from typing import Callable, Optional

from pydantic import ValidationError

from ..database.models import CacheRecord, StockEntry
from ..integrations.commerce_layer.stock import CommerceLayerStock
from .inflight import InflightDeduplicator
from .store import DurableStore
from .token_manager import TokenManager

logger = logging.getLogger(__name__)


def stock_key(sku_code: str) -> str:
    return f"stock:{sku_code}"


class TieredStockCache:
    """Serves stock lookups through four tiers, first hit wins.

    1. a fetch already in flight for the SKU is joined
    2. a fresh record in memory is returned
    3. a fresh record in the durable store is promoted to memory and returned
    4. otherwise stock is fetched upstream and written to memory and the
       durable store before returning

    Failed fetches leave both tiers untouched and the inflight entry cleared.
    """

    def __init__(self, stock_api: CommerceLayerStock, token_manager: TokenManager,
                 store: DurableStore, ttl: float = 60.0, max_entries: int = 1024,
                 clock: Callable[[], float] = time.time):
        self.stock_api = stock_api
        self.token_manager = token_manager
        self.store = store
        self.ttl = ttl
        self.max_entries = max_entries
        self._clock = clock
        self._memory: "OrderedDict[str, CacheRecord]" = OrderedDict()
        self._inflight = InflightDeduplicator()

    @property
    def inflight(self) -> InflightDeduplicator:
        return self._inflight

    def __len__(self) -> int:
        return len(self._memory)

    async def check_stock(self, sku_code: str) -> StockEntry:
        if self._inflight.is_inflight(sku_code):
            return await self._inflight.join(sku_code)

        cached = self._memory.get(sku_code)
        if cached and cached.is_fresh(self._clock()):
            logger.debug(f"Memory hit for {sku_code}")
            return cached.data

        stored = await self._load_stored(sku_code)
        if stored and stored.is_fresh(self._clock()):
            # a fetch may have landed a newer record while the store was read
            current = self._memory.get(sku_code)
            if current and current.is_fresh(self._clock()) and current.expires_at >= stored.expires_at:
                return current.data
            logger.debug(f"Durable store hit for {sku_code}")
            self._remember(sku_code, stored)
            return stored.data

        # run() re-checks for a fetch registered while the store was read
        return await self._inflight.run(sku_code, lambda: self._fetch_and_cache(sku_code))

    async def _fetch_and_cache(self, sku_code: str) -> StockEntry:
        credential = await self.token_manager.get_token()

        logger.info(f"Fetching stock for {sku_code} from Commerce Layer")
        entry = await self.stock_api.get_stock(sku_code, credential.token)

        record = CacheRecord(data=entry, expires_at=self._clock() + self.ttl)
        # memory only takes the record once the durable write succeeded
        await self.store.put(stock_key(sku_code), record.model_dump(by_alias=True))
        self._remember(sku_code, record)
        return entry

    async def _load_stored(self, sku_code: str) -> Optional[CacheRecord]:
        raw = await self.store.get(stock_key(sku_code))
        if raw is None:
            return None
        try:
            return CacheRecord.model_validate(raw)
        except ValidationError as e:
            logger.warning(f"Ignoring unparseable stock record for {sku_code}: {e}")
            return None

    def _remember(self, sku_code: str, record: CacheRecord) -> None:
        self._memory[sku_code] = record
        self._memory.move_to_end(sku_code)
        if len(self._memory) > self.max_entries:
            self._sweep()

    def _sweep(self) -> None:
        """Drop expired records, then the oldest ones while over max_entries."""
        now = self._clock()
        for key in [k for k, record in self._memory.items() if not record.is_fresh(now)]:
            del self._memory[key]
        while len(self._memory) > self.max_entries:
            evicted, _ = self._memory.popitem(last=False)
            logger.debug(f"Evicted {evicted} from memory tier")
