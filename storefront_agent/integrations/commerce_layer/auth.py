import httpx
import logging
from typing import Optional, Dict

from ..errors import UpstreamAuthError, UpstreamAPIError

logger = logging.getLogger(__name__)


class CommerceLayerAuth:
    def __init__(self, client_id: str, client_secret: str, domain: str,
                 http_client: httpx.AsyncClient,
                 auth_url: str = "https://auth.commercelayer.io"):
        """
        Initialize Commerce Layer auth.
        Args:
            client_id: Integration client id
            client_secret: Integration client secret
            domain: Organization API domain (e.g., 'my-org.commercelayer.io')
            http_client: Shared async client; timeouts are configured on it
            auth_url: Base URL of the OAuth endpoint
        """
        # Clean domain - scheme is always https
        self.domain = domain.replace("https://", "").rstrip("/")
        self.client_id = client_id
        self.client_secret = client_secret
        self.auth_url = auth_url.rstrip("/")
        self.base_url = f"https://{self.domain}"
        self.http_client = http_client

    def get_headers(self, token: str) -> dict:
        return {
            "Accept": "application/vnd.api+json",
            "Authorization": f"Bearer {token}"
        }

    async def exchange_token(self) -> Dict:
        """Exchange client credentials for an access token.

        Returns the raw payload with ``access_token`` and ``expires_in`` (seconds).
        """
        payload = {
            "grant_type": "client_credentials",
            "client_id": self.client_id,
            "client_secret": self.client_secret
        }

        try:
            response = await self.http_client.post(
                f"{self.auth_url}/oauth/token",
                json=payload,
                headers={"Content-Type": "application/json"}
            )
        except httpx.TransportError as e:
            logger.error(f"Commerce Layer token request failed: {e}")
            raise UpstreamAuthError(body=str(e)) from e

        if not response.is_success:
            logger.error(f"Commerce Layer token error: {response.status_code} {response.text}")
            raise UpstreamAuthError(response.status_code, response.text)

        try:
            data = response.json()
            return {"access_token": data["access_token"], "expires_in": float(data["expires_in"])}
        except (ValueError, KeyError, TypeError) as e:
            raise UpstreamAuthError(response.status_code, response.text) from e

    async def make_request(self, path: str, token: str, params: Optional[Dict] = None) -> Dict:
        """Make authenticated GET request to the Commerce Layer API."""
        url = f"{self.base_url}{path}"

        try:
            response = await self.http_client.get(url, headers=self.get_headers(token), params=params)
        except httpx.TransportError as e:
            logger.error(f"Commerce Layer API request failed: {e}")
            raise UpstreamAPIError(body=str(e)) from e

        if not response.is_success:
            logger.error(f"Commerce Layer API error: {response.status_code} {response.text}")
            raise UpstreamAPIError(response.status_code, response.text)

        try:
            return response.json()
        except ValueError as e:
            raise UpstreamAPIError(response.status_code, response.text) from e
