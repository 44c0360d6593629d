"""
API Server for Joy Panels.

This FastAPI server exposes each panel as a small JSON endpoint:
1. Text panels (tip, facts, mood, story, poem) and chat with Nate
2. Read-aloud audio, Dream Painter images and Motion Magic videos
3. Fun Wheels spins

Panel state is kept per session (X-Session-Id header) in memory.

Run with: uvicorn ui.api_server:app --reload --port 8000
"""

import logging
import os
import time
from collections import OrderedDict
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Optional

from fastapi import FastAPI, Header, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse, Response
from pydantic import BaseModel

# Add parent directory to path for imports
import sys
sys.path.insert(0, str(Path(__file__).parent.parent))

from config import FAST_TEXT_MODEL, LOGS_DIR, MAX_SESSIONS, VIDEOS_DIR
from panels import MOODS, POEM_STYLES, WHEELS, PanelController, PanelSet
from skills.errors import AuthorizationRequiredError
from skills.generation_client.generation_client import GenerationClient

# =============================================================================
# Setup Logging: File + Console
# =============================================================================

LOGS_DIR.mkdir(exist_ok=True)

# Generate session log filename with timestamp
_session_start = time.strftime("%Y%m%d_%H%M%S")
_log_file = LOGS_DIR / f"server_{_session_start}.log"

# Configure logging to both file and console
# Use force=True to override any existing handlers (uvicorn issue)
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    handlers=[
        logging.FileHandler(_log_file, mode='a'),
        logging.StreamHandler()
    ],
    force=True
)
logger = logging.getLogger("api_server")
logger.setLevel(logging.INFO)
logger.info(f"Server session started. Log file: {_log_file}")

# One client for the whole server; the Gemini handle inside is created lazily
generation_client = GenerationClient()

# =============================================================================
# Session State
# =============================================================================

_sessions: OrderedDict[str, PanelSet] = OrderedDict()  # keyed by session_id, oldest first


def _get_panels(session_id: Optional[str]) -> PanelSet:
    """Get or create the panels for a session, evicting the least recently used."""
    session_id = session_id or "default"
    panels = _sessions.get(session_id)
    if panels is not None:
        _sessions.move_to_end(session_id)
        return panels

    panels = _sessions[session_id] = PanelSet(generation_client)
    logger.info(f"New session: {session_id}")

    while len(_sessions) > MAX_SESSIONS:
        old_id, old_panels = _sessions.popitem(last=False)
        old_panels.video.cancel()
        logger.info(f"Evicted session: {old_id}")
    return panels


def _ensure_idle(panel: PanelController) -> None:
    if panel.loading:
        raise HTTPException(status_code=409, detail=f"{panel.name} is busy, wait for the current request")


@asynccontextmanager
async def lifespan(app: FastAPI):
    yield
    # Stop waiting on any video jobs still polling
    for panels in _sessions.values():
        panels.video.cancel()


# Initialize FastAPI app
app = FastAPI(
    title="Joy Panels API",
    description="Fun panels powered by Gemini",
    version="0.1.0",
    lifespan=lifespan,
)

# CORS middleware for local development
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# =============================================================================
# Request Models
# =============================================================================


class FactRequest(BaseModel):
    topic: Optional[str] = None


class MoodRequest(BaseModel):
    mood: str


class ChatSendRequest(BaseModel):
    message: str
    thinking: bool = False


class PoemRequest(BaseModel):
    topic: str
    style: str = "Haiku"


class ImageGenerationRequest(BaseModel):
    prompt: str
    aspect_ratio: str = "1:1"
    image_size: str = "1K"


class VideoGenerationRequest(BaseModel):
    prompt: str
    aspect_ratio: str = "16:9"


class AuthorizationRequest(BaseModel):
    api_key: Optional[str] = None  # Billable key; omitted = use the environment


class SpinRequest(BaseModel):
    wheel: Optional[str] = None  # "self_care" or "fun"
    options: Optional[list[str]] = None  # Custom wheel


# =============================================================================
# Endpoints
# =============================================================================


@app.get("/api/health")
async def health():
    """Health check endpoint."""
    return {
        "status": "healthy",
        "model": FAST_TEXT_MODEL,
        "api_key_configured": generation_client.is_configured,
    }


@app.get("/api/options")
async def options():
    """Choices the panels accept."""
    return {"moods": MOODS, "poem_styles": POEM_STYLES, "wheels": WHEELS}


@app.get("/api/tip")
async def tip(x_session_id: Optional[str] = Header(None)):
    panels = _get_panels(x_session_id)
    _ensure_idle(panels.tip)
    await panels.tip.load()
    return panels.tip.to_dict()


@app.post("/api/facts")
async def facts(request: FactRequest, x_session_id: Optional[str] = Header(None)):
    panels = _get_panels(x_session_id)
    _ensure_idle(panels.facts)
    await panels.facts.discover(request.topic)
    return panels.facts.to_dict()


@app.post("/api/mood")
async def mood(request: MoodRequest, x_session_id: Optional[str] = Header(None)):
    panels = _get_panels(x_session_id)
    _ensure_idle(panels.mood)
    try:
        await panels.mood.choose(request.mood)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return panels.mood.to_dict()


@app.post("/api/story")
async def story(x_session_id: Optional[str] = Header(None)):
    panels = _get_panels(x_session_id)
    _ensure_idle(panels.story)
    await panels.story.tell()
    return panels.story.to_dict()


@app.post("/api/story/speech")
async def story_speech(x_session_id: Optional[str] = Header(None)):
    """Read the current story aloud. Returns a WAV file."""
    panels = _get_panels(x_session_id)
    if not panels.story.result:
        raise HTTPException(status_code=400, detail="Tell a story first")
    if panels.story.audio_loading:
        raise HTTPException(status_code=409, detail="Audio is already loading")

    audio = await panels.story.read_aloud()
    if audio is None:
        raise HTTPException(status_code=502, detail=panels.story.audio_error or "Could not play audio.")
    return Response(content=audio.to_wav(), media_type="audio/wav")


@app.get("/api/chat")
async def chat_history(x_session_id: Optional[str] = Header(None)):
    return _get_panels(x_session_id).chat.to_dict()


@app.delete("/api/chat")
async def new_chat(x_session_id: Optional[str] = Header(None)):
    """Start a new conversation with Nate."""
    panels = _get_panels(x_session_id)
    _ensure_idle(panels.chat)
    panels.chat.reset()
    return panels.chat.to_dict()


@app.post("/api/chat")
async def chat(request: ChatSendRequest, x_session_id: Optional[str] = Header(None)):
    panels = _get_panels(x_session_id)
    _ensure_idle(panels.chat)
    if not request.message.strip():
        raise HTTPException(status_code=400, detail="Message cannot be empty")

    panels.chat.thinking = request.thinking
    await panels.chat.send(request.message)
    return panels.chat.to_dict()


@app.post("/api/poem")
async def poem(request: PoemRequest, x_session_id: Optional[str] = Header(None)):
    panels = _get_panels(x_session_id)
    _ensure_idle(panels.poem)
    if not request.topic.strip():
        raise HTTPException(status_code=400, detail="Topic cannot be empty")
    try:
        await panels.poem.compose(request.style, request.topic)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return panels.poem.to_dict()


@app.post("/api/image")
async def image(request: ImageGenerationRequest, x_session_id: Optional[str] = Header(None)):
    panels = _get_panels(x_session_id)
    _ensure_idle(panels.image)
    if not request.prompt.strip():
        raise HTTPException(status_code=400, detail="Prompt cannot be empty")
    try:
        await panels.image.paint(request.prompt, request.aspect_ratio, request.image_size)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    if panels.image.error:
        raise HTTPException(status_code=502, detail=panels.image.error)
    return panels.image.to_dict()


@app.get("/api/video/authorization")
async def video_authorization(x_session_id: Optional[str] = Header(None)):
    panels = _get_panels(x_session_id)
    authorized = await panels.video.check_authorization()
    return {"authorized": authorized}


@app.post("/api/video/authorization")
async def select_video_authorization(
    request: AuthorizationRequest,
    x_session_id: Optional[str] = Header(None),
):
    """Select a billable key for video generation."""
    panels = _get_panels(x_session_id)
    if request.api_key:
        select_key = getattr(panels.authorization, "select_key", None)
        if select_key is None:
            raise HTTPException(status_code=400, detail="This server does not accept selected keys")
        try:
            select_key(request.api_key)
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e))

    authorized = await panels.video.select_authorization()
    return {"authorized": authorized}


@app.post("/api/video")
async def video(request: VideoGenerationRequest, x_session_id: Optional[str] = Header(None)):
    panels = _get_panels(x_session_id)
    _ensure_idle(panels.video)
    if not request.prompt.strip():
        raise HTTPException(status_code=400, detail="Prompt cannot be empty")
    try:
        await panels.video.direct(request.prompt, request.aspect_ratio)
    except AuthorizationRequiredError as e:
        raise HTTPException(status_code=403, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    if panels.video.error:
        raise HTTPException(status_code=502, detail=panels.video.error)
    return panels.video.to_dict()


@app.get("/api/videos/{name}")
async def get_video(name: str):
    """Serve a generated video."""
    video_path = (VIDEOS_DIR / name).resolve()
    if video_path.parent != VIDEOS_DIR.resolve() or not video_path.is_file():
        raise HTTPException(status_code=404, detail="Video not found")
    return FileResponse(video_path, media_type="video/mp4")


@app.post("/api/spin")
async def spin(request: SpinRequest, x_session_id: Optional[str] = Header(None)):
    panels = _get_panels(x_session_id)
    _ensure_idle(panels.spinner)
    try:
        if request.options:
            winner = await panels.spinner.spin(request.options)
        else:
            winner = await panels.spinner.spin_wheel(request.wheel or "self_care")
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return {"winner": winner, "spins": panels.spinner.spins}


# =============================================================================
# Main
# =============================================================================

if __name__ == "__main__":
    import uvicorn

    print("\n" + "=" * 60)
    print("Joy Panels API Server")
    print("=" * 60)
    print(f"Model: {FAST_TEXT_MODEL}")
    print(f"API Docs: http://localhost:8000/docs")
    print("=" * 60 + "\n")

    is_production = os.getenv("JOY_PANELS_ENV") == "production"
    uvicorn.run(
        "ui.api_server:app",
        host="0.0.0.0",
        port=8000,
        reload=not is_production,
    )
