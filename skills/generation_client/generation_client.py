"""
Generation Client Skill - one entry point for every Gemini capability.

    client.generate(TextRequest(...))    -> TextResult
    client.generate(ChatRequest(...))    -> TextResult
    client.generate(SpeechRequest(...))  -> SpeechResult
    client.generate(ImageRequest(...))   -> ImageResult
    client.generate(VideoRequest(...))   -> VideoResult

Requests are dispatched on their capability. The underlying genai.Client is
created on first use and cached for the lifetime of this object.

NOTE: Veo uses the async operations pattern (generate_videos + polling), so
video requests go through the JobPoller with this client as its JobService.
"""

import asyncio
import base64
import logging
from io import BytesIO
from typing import Any, Callable, Optional, Sequence

import requests
from google import genai
from google.genai import types
from PIL import Image, UnidentifiedImageError

from config import (
    CHAT_MODEL,
    FAST_TEXT_MODEL,
    GEMINI_API_KEY,
    IMAGE_MODEL,
    TEXT_MODEL,
    THINKING_BUDGET,
    THINKING_MODEL,
    TTS_MODEL,
    VEO_MODEL,
)
from agent.prompts import Prompts
from models.chat import ChatMessage
from models.generation import (
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
from skills.errors import NoResultError, ServiceUnavailableError
from skills.job_poller.job_poller import CancelToken, JobPoller, JobStatus

logger = logging.getLogger(__name__)

NOT_CONFIGURED_MESSAGE = "API key not configured. This feature requires a valid Gemini API key."

# Seconds allowed for downloading a finished video
VIDEO_DOWNLOAD_TIMEOUT_SECONDS = 120


class GenerationClient:
    """
    Gemini-backed generation for all panels.

    Construct one and pass it to whoever needs it. An empty `api_key`
    means "not configured": every call then raises ServiceUnavailableError,
    except the text helpers, which answer with NOT_CONFIGURED_MESSAGE.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        genai_client: genai.Client = None,
        http_get: Callable[..., Any] = None,
        client_factory: Callable[[str], genai.Client] = None,
    ):
        self.api_key = GEMINI_API_KEY if api_key is None else api_key
        self._client = genai_client
        self._client_factory = client_factory or (lambda key: genai.Client(api_key=key))
        self._http_get = http_get or requests.get
        self.poller = JobPoller(self)

        self._handlers = {
            Capability.FAST_TEXT: self._generate_text,
            Capability.THINKING_TEXT: self._generate_text,
            Capability.CHAT: self._generate_chat,
            Capability.SPEECH: self._generate_speech,
            Capability.IMAGE: self._generate_image,
            Capability.VIDEO: self._generate_video,
        }

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key) or self._client is not None

    def _get_client(self) -> genai.Client:
        """Return the cached genai client, creating it on first use."""
        if self._client is None:
            if not self.api_key:
                logger.error("[Client] GEMINI_API_KEY is not set")
                raise ServiceUnavailableError(
                    "GEMINI_API_KEY not set. Configure it in your environment or .env file."
                )
            self._client = self._client_factory(self.api_key)
            logger.info("[Client] Gemini client created")
        return self._client

    def for_key(self, api_key: str) -> "GenerationClient":
        """
        A new client whose every call, downloads included, uses `api_key`.

        Used for billable features where the user picks the key. The
        transport and poll settings carry over; the Gemini handle does not.
        """
        client = GenerationClient(
            api_key=api_key,
            http_get=self._http_get,
            client_factory=self._client_factory,
        )
        client.poller = self.poller.bind(client)
        logger.info(f"[Client] Using selected key ***{api_key[-4:]}")
        return client

    async def generate(
        self,
        request: GenerationRequest,
        cancel_token: Optional[CancelToken] = None,
    ):
        """Run `request` against the capability it names."""
        handler = self._handlers.get(request.capability)
        if handler is None:
            raise ValueError(f"Unsupported capability: {request.capability}")

        logger.info(f"[Client] {request.capability.value} request")
        return await handler(request, cancel_token)

    # =========================================================================
    # Capability handlers
    # =========================================================================

    async def _generate_text(self, request: TextRequest, cancel_token=None) -> TextResult:
        client = self._get_client()

        if request.thinking_budget:
            model = request.model or THINKING_MODEL
            config = types.GenerateContentConfig(
                thinking_config=types.ThinkingConfig(thinking_budget=request.thinking_budget),
            )
        else:
            model = request.model or FAST_TEXT_MODEL
            config = None

        response = await asyncio.to_thread(
            client.models.generate_content,
            model=model,
            contents=request.prompt,
            config=config,
        )
        return TextResult(text=response.text or request.fallback)

    async def _generate_chat(self, request: ChatRequest, cancel_token=None) -> TextResult:
        client = self._get_client()

        contents = [
            types.Content(role=message.role, parts=[types.Part.from_text(text=message.text)])
            for message in request.history
        ]
        contents.append(types.Content(role="user", parts=[types.Part.from_text(text=request.message)]))

        if request.thinking:
            model = THINKING_MODEL
            config = types.GenerateContentConfig(
                system_instruction=request.system_instruction,
                thinking_config=types.ThinkingConfig(thinking_budget=THINKING_BUDGET),
            )
        else:
            model = CHAT_MODEL
            config = types.GenerateContentConfig(system_instruction=request.system_instruction)

        response = await asyncio.to_thread(
            client.models.generate_content,
            model=model,
            contents=contents,
            config=config,
        )
        fallback = Prompts.THINKING_FALLBACK if request.thinking else Prompts.FAST_TEXT_FALLBACK
        return TextResult(text=response.text or fallback)

    async def _generate_speech(self, request: SpeechRequest, cancel_token=None) -> SpeechResult:
        client = self._get_client()

        def call_tts():
            return client.models.generate_content(
                model=TTS_MODEL,
                contents=request.text,
                config=types.GenerateContentConfig(
                    response_modalities=["AUDIO"],
                    speech_config=types.SpeechConfig(
                        voice_config=types.VoiceConfig(
                            prebuilt_voice_config=types.PrebuiltVoiceConfig(
                                voice_name=request.voice,
                            )
                        )
                    ),
                ),
            )

        response = await asyncio.to_thread(call_tts)

        audio_data = None
        for part in _response_parts(response):
            if part.inline_data and part.inline_data.data:
                audio_data = part.inline_data.data
                break

        if not audio_data:
            raise NoResultError("No audio data returned")

        # The SDK hands back bytes; raw REST payloads are still base64 text
        if isinstance(audio_data, str):
            audio_data = base64.b64decode(audio_data)

        result = SpeechResult(pcm=audio_data)
        logger.info(f"[Client] Speech generated ({result.duration_seconds:.2f}s, voice {request.voice})")
        return result

    async def _generate_image(self, request: ImageRequest, cancel_token=None) -> ImageResult:
        client = self._get_client()

        config = types.GenerateContentConfig(
            image_config=types.ImageConfig(
                aspect_ratio=request.aspect_ratio,
                image_size=request.image_size,
            )
        )
        response = await asyncio.to_thread(
            client.models.generate_content,
            model=IMAGE_MODEL,
            contents=request.prompt,
            config=config,
        )

        for part in _response_parts(response):
            # Skip thought images if present
            if getattr(part, "thought", False):
                continue
            if part.inline_data is not None and part.inline_data.data:
                data = part.inline_data.data
                if isinstance(data, str):
                    data = base64.b64decode(data)
                try:
                    with Image.open(BytesIO(data)) as image:
                        width, height = image.size
                except UnidentifiedImageError as e:
                    raise NoResultError(f"Image data could not be decoded: {e}") from e

                logger.info(f"[Client] Image generated: {width}x{height} ({request.aspect_ratio}, {request.image_size})")
                return ImageResult(
                    data=data,
                    mime_type=part.inline_data.mime_type or "image/png",
                    width=width,
                    height=height,
                )

        raise NoResultError("No image generated")

    async def _generate_video(
        self,
        request: VideoRequest,
        cancel_token: Optional[CancelToken] = None,
    ) -> VideoResult:
        # Fail fast before the poller starts a job
        self._get_client()
        return await self.poller.run(request, cancel_token)

    # =========================================================================
    # JobService (used by the JobPoller for video)
    # =========================================================================

    async def submit_job(self, request: VideoRequest) -> JobStatus:
        client = self._get_client()

        def start_veo_operation():
            """Start Veo video generation (returns operation for polling)."""
            return client.models.generate_videos(
                model=VEO_MODEL,
                prompt=request.prompt,
                config=types.GenerateVideosConfig(
                    number_of_videos=1,
                    resolution=request.resolution,
                    aspect_ratio=request.aspect_ratio,
                ),
            )

        operation = await asyncio.to_thread(start_veo_operation)
        logger.info(f"[Client] Veo operation started: {operation.name}")
        return _operation_status(operation)

    async def poll_job(self, handle: Any) -> JobStatus:
        client = self._get_client()
        operation = await asyncio.to_thread(client.operations.get, handle)
        return _operation_status(operation)

    async def fetch_result(self, locator: str) -> bytes:
        """Download a finished video. The URI only answers with the API key attached."""

        def download():
            response = self._http_get(
                locator,
                params={"key": self.api_key},
                timeout=VIDEO_DOWNLOAD_TIMEOUT_SECONDS,
            )
            response.raise_for_status()
            return response.content

        logger.info("[Client] Downloading video...")
        return await asyncio.to_thread(download)

    # =========================================================================
    # Text helpers (never raise for a missing key)
    # =========================================================================

    async def _text_or_notice(self, request) -> str:
        try:
            result = await self.generate(request)
        except ServiceUnavailableError:
            logger.warning(f"[Client] {request.capability.value} skipped: API key not configured")
            return NOT_CONFIGURED_MESSAGE
        return result.text

    async def fast_text(self, prompt: str) -> str:
        return await self._text_or_notice(
            TextRequest(prompt=prompt, fallback=Prompts.FAST_TEXT_FALLBACK)
        )

    async def thinking_text(self, prompt: str) -> str:
        return await self._text_or_notice(
            TextRequest(
                prompt=prompt,
                thinking_budget=THINKING_BUDGET,
                fallback=Prompts.THINKING_FALLBACK,
            )
        )

    async def mood_message(self, mood: str) -> str:
        return await self._text_or_notice(
            TextRequest(prompt=Prompts.mood(mood), model=TEXT_MODEL, fallback=Prompts.MOOD_FALLBACK)
        )

    async def poem(self, topic: str, style: str) -> str:
        return await self._text_or_notice(
            TextRequest(prompt=Prompts.poem(topic, style), model=TEXT_MODEL, fallback=Prompts.POEM_FALLBACK)
        )

    async def chat_reply(
        self,
        history: Sequence[ChatMessage],
        message: str,
        thinking: bool = False,
    ) -> str:
        return await self._text_or_notice(
            ChatRequest(
                message=message,
                system_instruction=Prompts.NATE_PERSONA,
                history=tuple(history),
                thinking=thinking,
            )
        )


def _response_parts(response) -> list:
    """Parts of the first candidate, or [] when the response is empty."""
    candidates = getattr(response, "candidates", None) or []
    if not candidates or candidates[0].content is None:
        return []
    return candidates[0].content.parts or []


def _operation_status(operation) -> JobStatus:
    """Translate a Veo operation into a JobStatus."""
    locator = None
    response = operation.response
    if operation.done and response and response.generated_videos:
        video = response.generated_videos[0].video
        locator = video.uri if video else None

    return JobStatus(
        job_id=operation.name or "",
        handle=operation,
        done=bool(operation.done),
        locator=locator,
        error=str(operation.error) if operation.error else None,
    )
