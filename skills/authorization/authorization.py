"""
Authorization providers - gate billable features behind a selected key.

Video generation costs money, so the video panel only opens once the
user has picked a billable key. Providers answer three questions:

- has_authorization(): is a key selected right now?
- request_authorization(): ask for one (may or may not succeed)
- current_key(): the key billable calls must use (None = the server's own)
"""

import logging
from typing import Optional, Protocol

from config import VEO_API_KEY

logger = logging.getLogger(__name__)


class AuthorizationProvider(Protocol):
    async def has_authorization(self) -> bool: ...

    async def request_authorization(self) -> bool: ...

    def current_key(self) -> Optional[str]: ...


class SelectedKeyAuthorizationProvider:
    """
    Authorization backed by a key the user selects at runtime.

    request_authorization() falls back to VEO_API_KEY from the environment
    when nothing has been selected yet. The selected key is the one every
    video call is billed to.
    """

    def __init__(self, env_key: Optional[str] = VEO_API_KEY):
        self._env_key = env_key
        self._selected_key: Optional[str] = None

    def select_key(self, key: str) -> None:
        key = (key or "").strip()
        if not key:
            raise ValueError("API key cannot be empty")
        self._selected_key = key
        logger.info(f"[Authorization] Key selected: ***{key[-4:]}")

    def clear(self) -> None:
        self._selected_key = None
        logger.info("[Authorization] Key cleared")

    def current_key(self) -> Optional[str]:
        return self._selected_key

    async def has_authorization(self) -> bool:
        return bool(self._selected_key)

    async def request_authorization(self) -> bool:
        if not self._selected_key and self._env_key:
            self.select_key(self._env_key)
        return await self.has_authorization()


class StaticAuthorizationProvider:
    """Fixed answer, for local runs where no billing gate applies."""

    def __init__(self, authorized: bool = True, key: Optional[str] = None):
        self.authorized = authorized
        self.key = key

    def current_key(self) -> Optional[str]:
        return self.key

    async def has_authorization(self) -> bool:
        return self.authorized

    async def request_authorization(self) -> bool:
        return self.authorized
