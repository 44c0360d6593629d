"""
Chat panel - a conversation with Nate.

The user message is appended before the call and Nate's answer after it.
Answers given in deep thought mode are flagged, using the mode that was
active when the message was sent.
"""

import logging
from typing import Optional

from models.chat import ChatMessage, ChatTranscript
from .base import PanelController

logger = logging.getLogger(__name__)


class ChatPanel(PanelController):
    name = "chat"
    fallback_message = "I'm having a bit of trouble connecting right now. Can we try again?"
    clear_on_start = False

    def __init__(self, client):
        super().__init__(client)
        self.transcript = ChatTranscript()
        self.thinking: bool = False  # Deep thought mode toggle

    async def send(self, text: str = None) -> Optional[ChatMessage]:
        """Send `text` (or the current input) and append Nate's reply."""
        text = (self.input if text is None else text).strip()
        if not text or self.loading:
            return None

        thinking = self.thinking
        history = self.transcript.messages
        self.transcript.add_user(text)
        self.input = ""

        async def reply() -> ChatMessage:
            answer = await self.client.chat_reply(history, text, thinking=thinking)
            return self.transcript.add_model(answer, is_thinking=thinking)

        return await self.run(reply)

    def reset(self) -> bool:
        """Start a new conversation. Refused while a reply is pending."""
        if self.loading:
            return False
        self.transcript = ChatTranscript()
        self.error = None
        logger.info(f"[Panel:{self.name}] New conversation")
        return True

    def failure_result(self, error: Exception) -> ChatMessage:
        return self.transcript.add_model(self.fallback_message)

    def to_dict(self) -> dict:
        return {
            "panel": self.name,
            "loading": self.loading,
            "thinking": self.thinking,
            "error": self.error,
            "messages": self.transcript.to_list(),
        }
