# storefront_agent/database/models.py

from typing import Dict, Any
from pydantic import BaseModel, ConfigDict, Field, model_validator


class Credential(BaseModel):
    """Bearer token issued by the Commerce Layer auth endpoint."""
    model_config = ConfigDict(frozen=True)

    token: str
    expires_at: float  # absolute epoch seconds

    def is_valid(self, now: float, buffer: float = 300.0) -> bool:
        """A credential is only usable while more than `buffer` seconds remain."""
        return self.expires_at - now > buffer


class StockEntry(BaseModel):
    """Aggregated stock for one SKU across all stock locations."""
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    sku_code: str = Field(alias="skuCode")
    quantity: int = Field(ge=0)
    available: bool

    @model_validator(mode="after")
    def _check_availability(self) -> "StockEntry":
        if self.available != (self.quantity > 0):
            raise ValueError("available must equal quantity > 0")
        return self

    @classmethod
    def from_quantity(cls, sku_code: str, quantity: int) -> "StockEntry":
        return cls(sku_code=sku_code, quantity=quantity, available=quantity > 0)

    def to_result(self) -> Dict[str, Any]:
        """Shape returned to callers: {skuCode, quantity, available}."""
        return self.model_dump(by_alias=True)


class CacheRecord(BaseModel):
    """A StockEntry with the absolute time after which it must not be served."""
    model_config = ConfigDict(frozen=True)

    data: StockEntry
    expires_at: float

    def is_fresh(self, now: float) -> bool:
        return now < self.expires_at
