# api/main.py
from contextlib import asynccontextmanager
from typing import List, Optional
from fastapi import FastAPI, HTTPException, Query, Request
from fastapi.middleware.cors import CORSMiddleware
from storefront_agent.config import Config, configure_logging
from storefront_agent.coordinator import CoordinatorRegistry, StockCoordinator
from storefront_agent.integrations.errors import CommerceLayerError
from storefront_agent.tools.inventory import InventoryTools
import logging

logger = logging.getLogger(__name__)


def create_app(config: Optional[Config] = None, registry: Optional[CoordinatorRegistry] = None) -> FastAPI:
    config = config or Config()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        configure_logging(config)
        owned = registry is None
        app.state.registry = registry or CoordinatorRegistry(config)
        try:
            yield
        finally:
            if owned:
                await app.state.registry.aclose()

    app = FastAPI(title="Storefront Agent API", lifespan=lifespan)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],  # Restrict in production
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    def get_coordinator(request: Request) -> StockCoordinator:
        return request.app.state.registry.get()

    @app.get("/api/health")
    async def health_check():
        """Basic health check"""
        return {"status": "healthy", "service": "storefront-agent-api"}

    @app.get("/api/stock/{sku_code}")
    async def check_stock(sku_code: str, request: Request):
        """Stock availability for one SKU, served through the coordinator cache."""
        try:
            entry = await get_coordinator(request).check_stock(sku_code)
            return entry.to_result()
        except CommerceLayerError as e:
            logger.error(f"Stock lookup failed for {sku_code}: {e}")
            raise HTTPException(
                status_code=502,
                detail={"error": type(e).__name__, "upstream_status": e.status_code, "body": e.body}
            )

    @app.get("/api/low-stock")
    async def low_stock(request: Request, sku: Optional[List[str]] = Query(default=None), threshold: int = 10):
        """Low-stock report for the given SKU codes."""
        if not sku:
            raise HTTPException(status_code=400, detail="Missing required query parameter: sku")
        tools = InventoryTools(get_coordinator(request))
        return await tools.get_low_stock_products(sku, threshold=threshold)

    return app


app = create_app()

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8001)
