"""OAuth client-credentials token cache for the Caspio REST API."""

import logging
import time
from collections.abc import Callable

import httpx

from bestagent.utils.exceptions import AuthError

logger = logging.getLogger(__name__)


class TokenCache:
    """Holds a Caspio bearer token and refreshes it lazily.

    One instance is created at application start-up and shared by every
    request. Concurrent callers may both refresh an expired token; the
    exchange is idempotent, so no locking is done.
    """

    def __init__(
        self,
        token_url: str,
        client_id: str,
        client_secret: str,
        http_client: httpx.Client,
        expiry_margin: int = 60,
        clock: Callable[[], float] = time.monotonic,
    ):
        """Initialize the cache.

        Args:
            token_url: OAuth token endpoint
            client_id: OAuth client ID
            client_secret: OAuth client secret
            http_client: Shared HTTP client
            expiry_margin: Seconds subtracted from the token TTL
            clock: Monotonic clock in seconds
        """
        self.token_url = token_url
        self.client_id = client_id
        self.client_secret = client_secret
        self.http_client = http_client
        self.expiry_margin = expiry_margin
        self._clock = clock
        self._token: str | None = None
        self._expires_at: float = 0.0

    @property
    def is_valid(self) -> bool:
        return self._token is not None and self._clock() < self._expires_at

    def get_token(self) -> str:
        """Return the cached token, exchanging credentials if it has expired.

        Raises:
            AuthError: If credentials are missing or the exchange fails
        """
        if self.is_valid:
            return self._token  # type: ignore[return-value]
        return self._refresh()

    def invalidate(self) -> None:
        """Forget the cached token."""
        self._token = None
        self._expires_at = 0.0

    def _refresh(self) -> str:
        if not self.client_id or not self.client_secret:
            raise AuthError("Caspio credentials are not configured")

        try:
            response = self.http_client.post(
                self.token_url,
                data={
                    "grant_type": "client_credentials",
                    "client_id": self.client_id,
                    "client_secret": self.client_secret,
                },
            )
        except httpx.RequestError as e:
            raise AuthError(f"Caspio auth request failed: {e}") from e

        if not response.is_success:
            raise AuthError(f"Caspio auth failed: {response.status_code}")

        try:
            data = response.json()
        except ValueError as e:
            raise AuthError(f"Caspio auth returned invalid JSON: {e}") from e

        token = data.get("access_token") if isinstance(data, dict) else None
        if not token:
            raise AuthError("Caspio auth response has no access_token")

        try:
            expires_in = float(data.get("expires_in", 0))
        except (TypeError, ValueError) as e:
            raise AuthError(f"Caspio auth response has a bad expires_in: {e}") from e

        self._token = token
        self._expires_at = self._clock() + expires_in - self.expiry_margin

        logger.info("Caspio token refreshed (expires in %ds)", int(expires_in))
        return token
