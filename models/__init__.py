"""
Data models for Joy Panels.

- Generation requests (one dataclass per capability) and their results
- Generation jobs (long-running video operations)
- Chat transcripts (append-only conversation with Nate)
"""

from .chat import ChatMessage, ChatTranscript
from .generation import (
    Capability,
    ChatRequest,
    GenerationRequest,
    ImageRequest,
    ImageResult,
    SpeechRequest,
    SpeechResult,
    TextRequest,
    TextResult,
    VideoRequest,
    VideoResult,
)
from .job import GenerationJob, JobState

__all__ = [
    "ChatMessage",
    "ChatTranscript",
    "Capability",
    "ChatRequest",
    "GenerationRequest",
    "ImageRequest",
    "ImageResult",
    "SpeechRequest",
    "SpeechResult",
    "TextRequest",
    "TextResult",
    "VideoRequest",
    "VideoResult",
    "GenerationJob",
    "JobState",
]
