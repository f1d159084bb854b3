"""Stock & token coordinator package."""

from .coordinator import StockCoordinator, CoordinatorRegistry
from .inflight import InflightDeduplicator
from .stock_cache import TieredStockCache
from .store import DurableStore, InMemoryDurableStore, FileDurableStore
from .token_manager import TokenManager

__all__ = [
    'StockCoordinator',
    'CoordinatorRegistry',
    'InflightDeduplicator',
    'TieredStockCache',
    'DurableStore',
    'InMemoryDurableStore',
    'FileDurableStore',
    'TokenManager',
]
