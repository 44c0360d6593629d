"""Generation client skill - capability-dispatched Gemini calls."""
from .generation_client import GenerationClient, NOT_CONFIGURED_MESSAGE

__all__ = ["GenerationClient", "NOT_CONFIGURED_MESSAGE"]
