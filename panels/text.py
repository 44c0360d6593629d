"""
Text panels - tip of the day, magic facts, mood pal, giggle time, poetry.
"""

import logging
from typing import Optional

from agent.prompts import Prompts
from models.generation import SpeechRequest, SpeechResult
from .base import PanelController

logger = logging.getLogger(__name__)

MOODS = {
    "Happy": "🤩",
    "Stressed": "😤",
    "Sad": "😢",
    "Tired": "😴",
    "Anxious": "😰",
    "Hopeful": "✨",
}

POEM_STYLES = ["Haiku", "Limerick", "Rhyme", "Sonnet"]


class TipPanel(PanelController):
    """Self-care tip shown on the home screen."""

    name = "tip"
    fallback_message = "Loading magical wisdom..."

    async def load(self) -> Optional[str]:
        return await self.run(lambda: self.client.fast_text(Prompts.TIP_OF_THE_DAY))


class FactPanel(PanelController):
    """Cute animal facts, optionally about a chosen animal."""

    name = "facts"
    fallback_message = "Oops! The magic animals are sleeping. Try again!"
    clear_on_start = False

    async def discover(self, topic: str = None) -> Optional[str]:
        if topic is not None:
            self.input = topic
        prompt = Prompts.fact(self.input)
        return await self.run(lambda: self.client.fast_text(prompt))


class MoodPanel(PanelController):
    """A supportive message for the mood the user picks."""

    name = "mood"
    fallback_message = "I'm having trouble thinking right now, but remember you are awesome!"

    async def choose(self, mood: str) -> Optional[str]:
        if mood not in MOODS:
            raise ValueError(f"Unknown mood: {mood}. Choose from {list(MOODS)}")
        self.input = mood
        return await self.run(lambda: self.client.mood_message(mood))


class StoryPanel(PanelController):
    """
    Short funny stories, with read-aloud.

    Reading aloud has its own loading flag so a story can be read while
    the panel shows it.
    """

    name = "story"
    fallback_message = ""
    audio_fallback_message = "Could not play audio."

    def __init__(self, client):
        super().__init__(client)
        self.audio_loading: bool = False
        self.audio: Optional[SpeechResult] = None
        self.audio_error: Optional[str] = None

    async def tell(self) -> Optional[str]:
        async def new_story():
            self.audio = None
            return await self.client.fast_text(Prompts.FUNNY_STORY)

        return await self.run(new_story)

    async def read_aloud(self) -> Optional[SpeechResult]:
        if not self.result or self.audio_loading:
            return None

        self.audio_loading = True
        self.audio_error = None
        try:
            self.audio = await self.client.generate(SpeechRequest(text=self.result))
        except Exception as e:
            logger.error(f"[Panel:{self.name}] Speech failed: {e}")
            self.audio = None
            self.audio_error = self.audio_fallback_message
        finally:
            self.audio_loading = False

        return self.audio

    def to_dict(self) -> dict:
        data = super().to_dict()
        data.update({
            "audio_loading": self.audio_loading,
            "audio_error": self.audio_error,
            "audio_seconds": self.audio.duration_seconds if self.audio else None,
        })
        return data


class PoemPanel(PanelController):
    """Short poems in one of a few styles."""

    name = "poem"
    fallback_message = "The muse is sleeping..."

    async def compose(self, style: str, topic: str = None) -> Optional[str]:
        if style not in POEM_STYLES:
            raise ValueError(f"Unknown poem style: {style}. Choose from {POEM_STYLES}")
        if topic is not None:
            self.input = topic
        topic = self.input.strip()
        if not topic:
            return None
        return await self.run(lambda: self.client.poem(topic, style))
