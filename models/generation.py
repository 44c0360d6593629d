"""
Generation request and result models.

Each request kind carries its own parameters and names the capability
that serves it. The client dispatches on `request.capability`, so adding
a new kind means adding a dataclass here and a handler in the client.
"""

import base64
from dataclasses import dataclass
from enum import Enum
from io import BytesIO
from pathlib import Path
from typing import Optional
import wave

from config import (
    IMAGE_ASPECT_RATIOS,
    IMAGE_SIZES,
    TTS_VOICE,
    VIDEO_ASPECT_RATIOS,
    VIDEO_RESOLUTION,
)
from .chat import ChatMessage

# Audio format returned by Gemini TTS
SAMPLE_RATE = 24000
CHANNELS = 1
SAMPLE_WIDTH = 2  # 16-bit


class Capability(str, Enum):
    """One distinct kind of generation the remote service offers."""

    FAST_TEXT = "fast_text"
    THINKING_TEXT = "thinking_text"
    CHAT = "chat"
    SPEECH = "speech"
    IMAGE = "image"
    VIDEO = "video"


def _require_prompt(prompt: str, kind: str) -> None:
    if not prompt or not prompt.strip():
        raise ValueError(f"{kind} prompt cannot be empty")


@dataclass(frozen=True)
class TextRequest:
    """A single-shot text prompt, optionally with a thinking budget."""

    prompt: str
    thinking_budget: Optional[int] = None
    model: Optional[str] = None  # Overrides the capability default
    fallback: str = ""  # Returned when the model answers with no text

    def __post_init__(self):
        _require_prompt(self.prompt, "Text")

    @property
    def capability(self) -> Capability:
        if self.thinking_budget:
            return Capability.THINKING_TEXT
        return Capability.FAST_TEXT


@dataclass(frozen=True)
class ChatRequest:
    """A chat turn: prior history plus the new user message."""

    message: str
    system_instruction: str
    history: tuple[ChatMessage, ...] = ()
    thinking: bool = False

    def __post_init__(self):
        _require_prompt(self.message, "Chat")
        # Freeze whatever sequence the caller handed us
        object.__setattr__(self, "history", tuple(self.history))

    @property
    def capability(self) -> Capability:
        return Capability.CHAT


@dataclass(frozen=True)
class SpeechRequest:
    """Text to be read aloud."""

    text: str
    voice: str = TTS_VOICE

    def __post_init__(self):
        _require_prompt(self.text, "Speech")

    @property
    def capability(self) -> Capability:
        return Capability.SPEECH


@dataclass(frozen=True)
class ImageRequest:
    """Still image prompt with shape parameters."""

    prompt: str
    aspect_ratio: str = "1:1"
    image_size: str = "1K"

    def __post_init__(self):
        _require_prompt(self.prompt, "Image")
        if self.aspect_ratio not in IMAGE_ASPECT_RATIOS:
            raise ValueError(f"Unsupported aspect ratio: {self.aspect_ratio}")
        if self.image_size not in IMAGE_SIZES:
            raise ValueError(f"Unsupported image size: {self.image_size}")

    @property
    def capability(self) -> Capability:
        return Capability.IMAGE


@dataclass(frozen=True)
class VideoRequest:
    """Video prompt. Served as a long-running job."""

    prompt: str
    aspect_ratio: str = "16:9"
    resolution: str = VIDEO_RESOLUTION

    def __post_init__(self):
        _require_prompt(self.prompt, "Video")
        if self.aspect_ratio not in VIDEO_ASPECT_RATIOS:
            raise ValueError(f"Unsupported aspect ratio: {self.aspect_ratio}")

    @property
    def capability(self) -> Capability:
        return Capability.VIDEO


# =============================================================================
# Results
# =============================================================================


@dataclass
class TextResult:
    """Generated text."""
    text: str


@dataclass
class SpeechResult:
    """Raw PCM audio from TTS."""
    pcm: bytes
    sample_rate: int = SAMPLE_RATE

    @property
    def duration_seconds(self) -> float:
        return len(self.pcm) / (self.sample_rate * CHANNELS * SAMPLE_WIDTH)

    def to_wav(self) -> bytes:
        """Wrap the PCM data in a WAV container for playback."""
        buffer = BytesIO()
        with wave.open(buffer, "wb") as wf:
            wf.setnchannels(CHANNELS)
            wf.setsampwidth(SAMPLE_WIDTH)
            wf.setframerate(self.sample_rate)
            wf.writeframes(self.pcm)
        return buffer.getvalue()


@dataclass
class ImageResult:
    """Generated image bytes plus what we know about them."""
    data: bytes
    mime_type: str = "image/png"
    width: int = 0
    height: int = 0

    @property
    def data_uri(self) -> str:
        """Embeddable `data:` URI, as the browser expects it."""
        encoded = base64.b64encode(self.data).decode("ascii")
        return f"data:{self.mime_type};base64,{encoded}"


@dataclass
class VideoResult:
    """A fetched video stored locally."""
    path: Path
    uri: str
    size_bytes: int = 0
    job_id: Optional[str] = None

    @property
    def name(self) -> str:
        return self.path.name


GenerationRequest = TextRequest | ChatRequest | SpeechRequest | ImageRequest | VideoRequest
