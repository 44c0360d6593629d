"""
Chat transcript model - the conversation with Nate.

The transcript is append-only: messages are never edited or removed,
only added in the order they happened.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Iterator, Literal
import uuid


@dataclass(frozen=True)
class ChatMessage:
    """A single message in the chat."""

    role: Literal["user", "model"]
    text: str
    is_thinking: bool = False  # Answered in deep thought mode
    id: str = field(default_factory=lambda: str(uuid.uuid4())[:8])
    created_at: datetime = field(default_factory=datetime.now)

    def __post_init__(self):
        if self.role not in ("user", "model"):
            raise ValueError(f"Unknown chat role: {self.role}")

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "role": self.role,
            "text": self.text,
            "is_thinking": self.is_thinking,
            "created_at": self.created_at.isoformat(),
        }


class ChatTranscript:
    """Ordered, append-only sequence of chat messages."""

    def __init__(self):
        self._messages: list[ChatMessage] = []

    def append(self, message: ChatMessage) -> ChatMessage:
        self._messages.append(message)
        return message

    def add_user(self, text: str) -> ChatMessage:
        return self.append(ChatMessage(role="user", text=text))

    def add_model(self, text: str, is_thinking: bool = False) -> ChatMessage:
        return self.append(ChatMessage(role="model", text=text, is_thinking=is_thinking))

    @property
    def messages(self) -> tuple[ChatMessage, ...]:
        """Snapshot of the transcript (callers cannot mutate it)."""
        return tuple(self._messages)

    def __len__(self) -> int:
        return len(self._messages)

    def __iter__(self) -> Iterator[ChatMessage]:
        return iter(tuple(self._messages))

    def __getitem__(self, index: int) -> ChatMessage:
        return self._messages[index]

    def to_list(self) -> list[dict]:
        return [m.to_dict() for m in self._messages]
