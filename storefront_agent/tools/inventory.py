"""Inventory-related tools for the shopping assistant agent."""

import asyncio
import logging
from typing import List
from ..coordinator import StockCoordinator
from ..integrations.errors import CommerceLayerError

logger = logging.getLogger(__name__)


class InventoryTools:
    """Agent-facing inventory tools bound to one coordinator."""

    def __init__(self, coordinator: StockCoordinator):
        self.coordinator = coordinator

    async def check_stock(self, sku_code: str) -> dict:
        """
        Check the stock availability and quantity for a specific product SKU code.

        Args:
            sku_code: The SKU code of the product to check stock for

        Returns:
            Dictionary with skuCode, quantity and available
        """
        logger.info(f"Checking stock for SKU: {sku_code}")

        try:
            entry = await self.coordinator.check_stock(sku_code)
            return entry.to_result()

        except CommerceLayerError as e:
            logger.error(f"Error checking stock for {sku_code}: {e}")
            return {"skuCode": sku_code, "available": False, "error": str(e)}

    async def get_low_stock_products(self, sku_codes: List[str], threshold: int = 10) -> dict:
        """
        Get products that are low in stock.

        Args:
            sku_codes: SKU codes to inspect
            threshold: Stock quantity threshold for "low stock"

        Returns:
            Dictionary with low stock products
        """
        logger.info(f"Getting low stock products with threshold: {threshold}")

        results = await asyncio.gather(*(self.check_stock(code) for code in sku_codes))

        low_stock = [r for r in results if "error" not in r and r["quantity"] < threshold]
        errors = [r for r in results if "error" in r]

        return {
            "low_stock_products": low_stock,
            "threshold": threshold,
            "errors": errors
        }
