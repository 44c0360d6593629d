"""
Test: Generation Client

Verifies that:
1. Requests are dispatched on their capability with the right model/config
2. Without a credential, text helpers answer with the fixed notice and
   media capabilities raise ServiceUnavailableError
3. Empty speech/image responses are hard failures
4. Video runs through the job poller and the credential-bearing download,
   billed to the selected key when one is given
5. The Gemini handle is created lazily, once

Run: pytest tests/test_generation_client.py
"""

import asyncio
import base64
import sys
from pathlib import Path

import pytest

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

import config
from agent.prompts import Prompts
from models.chat import ChatMessage
from models.generation import (
    ChatRequest,
    ImageRequest,
    SpeechRequest,
    TextRequest,
    VideoRequest,
)
from skills.errors import JobFailedError, NoResultError, ServiceUnavailableError
from skills.generation_client import generation_client as generation_client_module
from skills.generation_client.generation_client import NOT_CONFIGURED_MESSAGE, GenerationClient
from skills.job_poller.job_poller import JobPoller
from tests.fakes import (
    FakeClientFactory,
    FakeGenAIClient,
    FakeHttpGet,
    inline_part,
    operation,
    parts_response,
    png_bytes,
    text_part,
    text_response,
)


def unconfigured_client():
    return GenerationClient(api_key="")


# =============================================================================
# Missing credential
# =============================================================================


@pytest.mark.parametrize("call", [
    lambda c: c.fast_text("Tell me a fact"),
    lambda c: c.thinking_text("Why is the sky blue?"),
    lambda c: c.mood_message("Happy"),
    lambda c: c.poem("otters", "Haiku"),
    lambda c: c.chat_reply([], "hello", thinking=True),
])
def test_text_helpers_return_notice_without_key(call):
    client = unconfigured_client()
    assert asyncio.run(call(client)) == NOT_CONFIGURED_MESSAGE


@pytest.mark.parametrize("request_", [
    SpeechRequest(text="Once upon a time"),
    ImageRequest(prompt="A rainbow cat"),
    VideoRequest(prompt="A dancing panda"),
    TextRequest(prompt="raw request"),
])
def test_generate_without_key_is_service_unavailable(request_):
    client = unconfigured_client()
    assert not client.is_configured
    with pytest.raises(ServiceUnavailableError):
        asyncio.run(client.generate(request_))


def test_genai_client_created_lazily_and_cached(monkeypatch):
    created = []

    def fake_client_factory(api_key):
        created.append(api_key)
        return FakeGenAIClient(responses=[text_response("one"), text_response("two")])

    monkeypatch.setattr(generation_client_module.genai, "Client", fake_client_factory)

    client = GenerationClient(api_key="test-key")
    assert created == []

    asyncio.run(client.fast_text("first"))
    asyncio.run(client.fast_text("second"))
    assert created == ["test-key"]


# =============================================================================
# Text and chat
# =============================================================================


def test_fast_text_uses_fast_model():
    fake = FakeGenAIClient(responses=[text_response("Otters hold hands while sleeping 🦦")])
    client = GenerationClient(api_key="test-key", genai_client=fake)

    text = asyncio.run(client.fast_text("Tell me a fact about otters"))

    assert text == "Otters hold hands while sleeping 🦦"
    call = fake.models.calls[0]
    assert call["model"] == config.FAST_TEXT_MODEL
    assert call["contents"] == "Tell me a fact about otters"
    assert call["config"] is None


def test_thinking_text_sets_budget():
    fake = FakeGenAIClient(responses=[text_response("Deep answer")])
    client = GenerationClient(api_key="test-key", genai_client=fake)

    asyncio.run(client.thinking_text("What is joy?"))

    call = fake.models.calls[0]
    assert call["model"] == config.THINKING_MODEL
    assert call["config"].thinking_config.thinking_budget == config.THINKING_BUDGET


def test_empty_text_falls_back():
    fake = FakeGenAIClient(responses=[text_response(""), text_response(None)])
    client = GenerationClient(api_key="test-key", genai_client=fake)

    assert asyncio.run(client.mood_message("Tired")) == Prompts.MOOD_FALLBACK
    assert asyncio.run(client.poem("clouds", "Limerick")) == Prompts.POEM_FALLBACK
    assert fake.models.calls[0]["model"] == config.TEXT_MODEL


def test_chat_sends_history_and_persona():
    fake = FakeGenAIClient(responses=[text_response("Hi friend!")])
    client = GenerationClient(api_key="test-key", genai_client=fake)
    history = [
        ChatMessage(role="user", text="hello"),
        ChatMessage(role="model", text="hey there"),
    ]

    reply = asyncio.run(client.chat_reply(history, "how are you?"))

    assert reply == "Hi friend!"
    call = fake.models.calls[0]
    assert call["model"] == config.CHAT_MODEL
    assert [c.role for c in call["contents"]] == ["user", "model", "user"]
    assert call["contents"][-1].parts[0].text == "how are you?"
    assert call["config"].system_instruction == Prompts.NATE_PERSONA
    assert call["config"].thinking_config is None


def test_thinking_chat_uses_thinking_model():
    fake = FakeGenAIClient(responses=[text_response("Hmm, let me think")])
    client = GenerationClient(api_key="test-key", genai_client=fake)

    asyncio.run(client.generate(ChatRequest(
        message="Explain rainbows",
        system_instruction=Prompts.NATE_PERSONA,
        thinking=True,
    )))

    call = fake.models.calls[0]
    assert call["model"] == config.THINKING_MODEL
    assert call["config"].thinking_config.thinking_budget == config.THINKING_BUDGET


# =============================================================================
# Speech and image
# =============================================================================


def test_speech_returns_pcm():
    pcm = b"\x00\x01" * 2400
    fake = FakeGenAIClient(responses=[parts_response(inline_part(pcm))])
    client = GenerationClient(api_key="test-key", genai_client=fake)

    result = asyncio.run(client.generate(SpeechRequest(text="A funny story")))

    assert result.pcm == pcm
    assert result.duration_seconds == pytest.approx(0.1)
    call = fake.models.calls[0]
    assert call["model"] == config.TTS_MODEL
    assert call["config"].speech_config.voice_config.prebuilt_voice_config.voice_name == "Kore"


def test_speech_decodes_base64_payload():
    pcm = b"\x10\x20\x30\x40"
    encoded = base64.b64encode(pcm).decode("ascii")
    fake = FakeGenAIClient(responses=[parts_response(inline_part(encoded))])
    client = GenerationClient(api_key="test-key", genai_client=fake)

    result = asyncio.run(client.generate(SpeechRequest(text="Hello")))

    assert result.pcm == pcm


def test_speech_without_audio_fails():
    fake = FakeGenAIClient(responses=[parts_response(text_part("no audio here"))])
    client = GenerationClient(api_key="test-key", genai_client=fake)

    with pytest.raises(NoResultError, match="No audio"):
        asyncio.run(client.generate(SpeechRequest(text="Hello")))


def test_image_returns_first_inline_part():
    data = png_bytes(8, 6)
    fake = FakeGenAIClient(responses=[
        parts_response(text_part("Here you go!"), inline_part(data, "image/png")),
    ])
    client = GenerationClient(api_key="test-key", genai_client=fake)

    result = asyncio.run(client.generate(ImageRequest(prompt="A cozy cottage", aspect_ratio="4:3", image_size="2K")))

    assert result.data == data
    assert (result.width, result.height) == (8, 6)
    assert result.data_uri.startswith("data:image/png;base64,")
    call = fake.models.calls[0]
    assert call["model"] == config.IMAGE_MODEL
    assert call["config"].image_config.aspect_ratio == "4:3"
    assert call["config"].image_config.image_size == "2K"


def test_image_without_image_part_fails():
    fake = FakeGenAIClient(responses=[parts_response(text_part("I can only describe it"))])
    client = GenerationClient(api_key="test-key", genai_client=fake)

    with pytest.raises(NoResultError, match="No image"):
        asyncio.run(client.generate(ImageRequest(prompt="A cozy cottage")))


# =============================================================================
# Video
# =============================================================================


async def _no_wait(seconds):
    return None


def test_video_polls_then_downloads_with_key(tmp_path):
    uri = "https://generativelanguage.googleapis.com/v1beta/files/xyz:download?alt=media"
    fake = FakeGenAIClient(
        start_operations=[operation(done=False)],
        poll_results=[operation(done=False), operation(done=True, uri=uri)],
    )
    http_get = FakeHttpGet(content=b"mp4-data")
    client = GenerationClient(api_key="test-key", genai_client=fake, http_get=http_get)
    client.poller = JobPoller(client, poll_interval=0, output_dir=tmp_path, sleep=_no_wait)

    result = asyncio.run(client.generate(VideoRequest(prompt="Penguins sliding", aspect_ratio="9:16")))

    assert result.path.read_bytes() == b"mp4-data"
    assert result.uri == uri
    assert len(fake.operations.calls) == 2
    assert http_get.calls == [{"url": uri, "params": {"key": "test-key"}, "timeout": 120}]

    video_config = fake.models.video_calls[0]["config"]
    assert video_config.aspect_ratio == "9:16"
    assert video_config.number_of_videos == 1
    assert video_config.resolution == "1080p"


def test_video_download_failure_surfaces_once(tmp_path):
    fake = FakeGenAIClient(
        start_operations=[operation(done=False)],
        poll_results=[operation(done=True, uri="https://example.test/video?alt=media")],
    )
    client = GenerationClient(
        api_key="test-key",
        genai_client=fake,
        http_get=FakeHttpGet(status_code=403),
    )
    client.poller = JobPoller(client, poll_interval=0, output_dir=tmp_path, sleep=_no_wait)

    with pytest.raises(JobFailedError):
        asyncio.run(client.generate(VideoRequest(prompt="Penguins sliding")))


def test_video_done_without_uri_is_no_result(tmp_path):
    fake = FakeGenAIClient(
        start_operations=[operation(done=False)],
        poll_results=[operation(done=True, uri=None)],
    )
    http_get = FakeHttpGet()
    client = GenerationClient(api_key="test-key", genai_client=fake, http_get=http_get)
    client.poller = JobPoller(client, poll_interval=0, output_dir=tmp_path, sleep=_no_wait)

    with pytest.raises(NoResultError):
        asyncio.run(client.generate(VideoRequest(prompt="Penguins sliding")))

    assert http_get.calls == []


def test_video_for_selected_key_uses_that_key_throughout(tmp_path):
    uri = "https://generativelanguage.googleapis.com/v1beta/files/sel:download?alt=media"
    server_handle = FakeGenAIClient()
    factory = FakeClientFactory(FakeGenAIClient(
        start_operations=[operation(done=False)],
        poll_results=[operation(done=True, uri=uri)],
    ))
    http_get = FakeHttpGet(content=b"paid-mp4")
    server = GenerationClient(
        api_key="server-free-key",
        genai_client=server_handle,
        http_get=http_get,
        client_factory=factory,
    )
    server.poller = JobPoller(server, poll_interval=0, output_dir=tmp_path, sleep=_no_wait)

    keyed = server.for_key("paid-key-5678")
    result = asyncio.run(keyed.generate(VideoRequest(prompt="Penguins sliding")))

    assert result.path.parent == tmp_path
    assert factory.keys == ["paid-key-5678"]
    assert http_get.calls[0]["params"] == {"key": "paid-key-5678"}
    assert server_handle.models.video_calls == []
    assert keyed.poller.service is keyed
    assert server.api_key == "server-free-key"


if __name__ == "__main__":
    sys.exit(pytest.main([__file__, "-v"]))
