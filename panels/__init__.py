"""
Panel controllers - one per feature screen.

A PanelSet holds every panel for one user session, all sharing one
GenerationClient.
"""

import random

from skills.authorization.authorization import (
    AuthorizationProvider,
    SelectedKeyAuthorizationProvider,
)
from skills.generation_client.generation_client import GenerationClient

from .base import PanelController
from .chat import ChatPanel
from .media import ImagePanel, VideoPanel
from .spinner import WHEELS, SpinnerPanel
from .text import MOODS, POEM_STYLES, FactPanel, MoodPanel, PoemPanel, StoryPanel, TipPanel


class PanelSet:
    """All panels of one session."""

    def __init__(
        self,
        client: GenerationClient,
        authorization: AuthorizationProvider = None,
        rng: random.Random = None,
    ):
        self.client = client
        self.authorization = authorization or SelectedKeyAuthorizationProvider()

        self.tip = TipPanel(client)
        self.facts = FactPanel(client)
        self.mood = MoodPanel(client)
        self.story = StoryPanel(client)
        self.chat = ChatPanel(client)
        self.poem = PoemPanel(client)
        self.image = ImagePanel(client)
        self.video = VideoPanel(client, self.authorization)
        self.spinner = SpinnerPanel(rng=rng)

    def all(self) -> list[PanelController]:
        return [
            self.tip, self.facts, self.mood, self.story, self.chat,
            self.poem, self.image, self.video, self.spinner,
        ]


__all__ = [
    "PanelController",
    "PanelSet",
    "TipPanel",
    "FactPanel",
    "MoodPanel",
    "StoryPanel",
    "ChatPanel",
    "PoemPanel",
    "ImagePanel",
    "VideoPanel",
    "SpinnerPanel",
    "MOODS",
    "POEM_STYLES",
    "WHEELS",
]
