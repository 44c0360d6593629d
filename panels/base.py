"""
Panel controller base - the request/response/display cycle shared by panels.

Every panel holds its current input, a loading flag and the last result.
A trigger sets loading, awaits one operation, stores the result (or a
friendly fallback) and clears loading. A trigger that arrives while the
panel is loading is ignored, so at most one request is in flight per panel.
"""

import logging
from typing import Any, Awaitable, Callable, Optional, TypeVar

from skills.generation_client.generation_client import GenerationClient

logger = logging.getLogger(__name__)

T = TypeVar("T")


class PanelController:
    """State holder for one feature screen."""

    name = "panel"
    fallback_message = "Something went wrong. Please try again!"
    clear_on_start = True  # Hide the previous result while loading

    def __init__(self, client: Optional[GenerationClient]):
        self.client = client
        self.input: str = ""
        self.loading: bool = False
        self.result: Any = None
        self.error: Optional[str] = None

    async def run(self, action: Callable[[], Awaitable[T]]) -> Optional[T]:
        """
        Run one guarded cycle of `action`.

        Returns the stored result, or None when the panel was already busy.
        """
        if self.loading:
            logger.info(f"[Panel:{self.name}] Busy, ignoring trigger")
            return None

        self.loading = True
        self.error = None
        if self.clear_on_start:
            self.result = None

        try:
            self.result = await action()
        except Exception as e:
            logger.error(f"[Panel:{self.name}] Action failed: {e}")
            self.error = self.fallback_message
            self.result = self.failure_result(e)
        finally:
            self.loading = False

        return self.result

    def failure_result(self, error: Exception) -> Any:
        """What to show after a failed action."""
        return self.fallback_message

    def to_dict(self) -> dict:
        return {
            "panel": self.name,
            "input": self.input,
            "loading": self.loading,
            "result": self.result,
            "error": self.error,
        }
