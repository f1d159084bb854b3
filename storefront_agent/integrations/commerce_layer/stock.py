"""Commerce Layer stock items API integration."""

import logging
from typing import List, Dict
from ...database.models import StockEntry
from ..errors import UpstreamAPIError
from .auth import CommerceLayerAuth

logger = logging.getLogger(__name__)


class CommerceLayerStock:
    """Handles Commerce Layer stock item queries."""

    def __init__(self, auth: CommerceLayerAuth):
        self.auth = auth

    async def list_stock_items(self, sku_code: str, token: str) -> List[Dict]:
        """Get every stock item (one per stock location) for a SKU code."""
        params = {"filter[q][code_eq]": sku_code}
        response = await self.auth.make_request("/api/stock_items", token, params=params)
        return response.get("data") or []

    async def get_stock(self, sku_code: str, token: str) -> StockEntry:
        """Get aggregated stock for a SKU across all stock locations."""
        items = await self.list_stock_items(sku_code, token)

        if not items:
            logger.info(f"No stock items found for {sku_code}")
            return StockEntry.from_quantity(sku_code, 0)

        try:
            total_quantity = sum(int((item.get("attributes") or {}).get("quantity") or 0) for item in items)
        except (TypeError, ValueError, AttributeError) as e:
            logger.error(f"Unexpected stock payload for {sku_code}: {e}")
            raise UpstreamAPIError(body=f"invalid stock quantity for {sku_code}: {e}") from e

        logger.debug(f"{sku_code}: {len(items)} stock items, total quantity {total_quantity}")

        return StockEntry.from_quantity(sku_code, max(total_quantity, 0))
