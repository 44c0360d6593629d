"""
Media panels - Dream Painter (images) and Motion Magic (video).

Failures here are reported as an alert-style error with no result,
rather than a fallback text shown in place of the result.
"""

import logging
from typing import Optional

from models.generation import ImageRequest, ImageResult, VideoRequest, VideoResult
from skills.authorization.authorization import AuthorizationProvider
from skills.errors import AuthorizationRequiredError
from skills.job_poller.job_poller import CancelToken
from .base import PanelController

logger = logging.getLogger(__name__)


class ImagePanel(PanelController):
    name = "image"
    fallback_message = "Failed to generate image. Please try again."

    def __init__(self, client):
        super().__init__(client)
        self.aspect_ratio = "1:1"
        self.image_size = "1K"

    async def paint(
        self,
        prompt: str = None,
        aspect_ratio: str = None,
        image_size: str = None,
    ) -> Optional[ImageResult]:
        if prompt is not None:
            self.input = prompt
        if not self.input.strip():
            return None

        # Invalid shape parameters raise here, before anything is sent
        request = ImageRequest(
            prompt=self.input,
            aspect_ratio=aspect_ratio or self.aspect_ratio,
            image_size=image_size or self.image_size,
        )
        self.aspect_ratio = request.aspect_ratio
        self.image_size = request.image_size

        return await self.run(lambda: self.client.generate(request))

    def failure_result(self, error: Exception) -> None:
        return None

    def to_dict(self) -> dict:
        data = super().to_dict()
        image = self.result
        data.update({
            "aspect_ratio": self.aspect_ratio,
            "image_size": self.image_size,
            "result": image.data_uri if image else None,
            "width": image.width if image else None,
            "height": image.height if image else None,
        })
        return data


class VideoPanel(PanelController):
    """
    Veo video generation behind a billable-key gate.

    Jobs run with the key the authorization provider selected, so the
    video is billed to it. A failed generation resets the gate, so the key
    has to be checked (or selected) again before the next attempt.
    """

    name = "video"
    fallback_message = "Failed to generate video. Ensure you have a paid key selected."

    def __init__(self, client, authorization: AuthorizationProvider):
        super().__init__(client)
        self.authorization = authorization
        self.authorized: bool = False
        self.aspect_ratio = "16:9"
        self._cancel_token: Optional[CancelToken] = None

    async def check_authorization(self) -> bool:
        self.authorized = await self.authorization.has_authorization()
        return self.authorized

    async def select_authorization(self) -> bool:
        await self.authorization.request_authorization()
        return await self.check_authorization()

    async def direct(self, prompt: str = None, aspect_ratio: str = None) -> Optional[VideoResult]:
        if not self.authorized:
            raise AuthorizationRequiredError("To use video generation, you must select a paid API key.")

        if prompt is not None:
            self.input = prompt
        if not self.input.strip():
            return None

        request = VideoRequest(prompt=self.input, aspect_ratio=aspect_ratio or self.aspect_ratio)
        self.aspect_ratio = request.aspect_ratio

        async def film() -> VideoResult:
            # Pick up the latest selected key on every run
            key = self.authorization.current_key()
            client = self.client.for_key(key) if key else self.client
            self._cancel_token = CancelToken()
            try:
                return await client.generate(request, cancel_token=self._cancel_token)
            finally:
                self._cancel_token = None

        return await self.run(film)

    def cancel(self) -> None:
        """Stop waiting on an in-flight video job, if any."""
        if self._cancel_token is not None:
            logger.info(f"[Panel:{self.name}] Cancelling video job")
            self._cancel_token.cancel()

    def failure_result(self, error: Exception) -> None:
        self.authorized = False
        return None

    def to_dict(self) -> dict:
        data = super().to_dict()
        video = self.result
        data.update({
            "authorized": self.authorized,
            "aspect_ratio": self.aspect_ratio,
            "result": f"/api/videos/{video.name}" if video else None,
        })
        return data
