"""Commerce Layer access token lifecycle."""

import logging
import time
from typing import Callable, Optional

from pydantic import ValidationError

from ..database.models import Credential
from ..integrations.commerce_layer.auth import CommerceLayerAuth
from .inflight import InflightDeduplicator
from .store import DurableStore

logger = logging.getLogger(__name__)

TOKEN_KEY = "token"


class TokenManager:
    """Hands out a bearer credential with at least `refresh_buffer` seconds left.

    Lookup order is memory, then the durable store, then a client-credentials
    exchange. A fresh credential replaces the old one in memory and is
    mirrored to the durable store so a restarted coordinator can reuse it.
    """

    def __init__(self, auth: CommerceLayerAuth, store: DurableStore,
                 refresh_buffer: float = 300.0,
                 clock: Callable[[], float] = time.time):
        self.auth = auth
        self.store = store
        self.refresh_buffer = refresh_buffer
        self._clock = clock
        self._credential: Optional[Credential] = None
        self._refreshes = InflightDeduplicator()

    @property
    def credential(self) -> Optional[Credential]:
        return self._credential

    async def get_token(self) -> Credential:
        credential = self._credential
        if credential and credential.is_valid(self._clock(), self.refresh_buffer):
            return credential

        return await self._refreshes.run(TOKEN_KEY, self._load_or_exchange)

    async def _load_or_exchange(self) -> Credential:
        now = self._clock()

        stored = await self._load_stored()
        if stored and stored.is_valid(now, self.refresh_buffer):
            logger.debug("Adopted stored Commerce Layer token")
            self._credential = stored
            return stored

        logger.info("Requesting new Commerce Layer token")
        data = await self.auth.exchange_token()

        credential = Credential(token=data["access_token"], expires_at=now + data["expires_in"])
        self._credential = credential
        await self.store.put(TOKEN_KEY, credential.model_dump())

        logger.info(f"Commerce Layer token refreshed, expires in {data['expires_in']:.0f}s")
        return credential

    async def _load_stored(self) -> Optional[Credential]:
        raw = await self.store.get(TOKEN_KEY)
        if raw is None:
            return None
        try:
            return Credential.model_validate(raw)
        except ValidationError as e:
            logger.warning(f"Ignoring unparseable stored token: {e}")
            return None
