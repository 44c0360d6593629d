"""
Configuration for Joy Panels.

Model Selection:
- Fast text: gemini-flash-lite-latest (tips, facts, stories, chat)
- Standard text: gemini-2.5-flash (mood messages, poems)
- Deep thought: gemini-3-pro-preview with a thinking budget

API Access:
- GEMINI_API_KEY (or GOOGLE_API_KEY) from Google AI Studio
- VEO_API_KEY: optional billable key for video generation
"""

import os
from pathlib import Path
from dotenv import load_dotenv

# Load environment variables
load_dotenv()

# =============================================================================
# Model Configuration
# =============================================================================

FAST_TEXT_MODEL = os.getenv("FAST_TEXT_MODEL", "gemini-flash-lite-latest")
TEXT_MODEL = os.getenv("TEXT_MODEL", "gemini-2.5-flash")
THINKING_MODEL = os.getenv("THINKING_MODEL", "gemini-3-pro-preview")
CHAT_MODEL = os.getenv("CHAT_MODEL", "gemini-3-pro-preview")
TTS_MODEL = os.getenv("TTS_MODEL", "gemini-2.5-flash-preview-tts")
IMAGE_MODEL = os.getenv("IMAGE_MODEL", "gemini-3-pro-image-preview")
VEO_MODEL = os.getenv("VEO_MODEL", "veo-3.1-fast-generate-preview")

# Thinking mode token budget
THINKING_BUDGET = int(os.getenv("THINKING_BUDGET", "32768"))

# Cheerful default voice
TTS_VOICE = os.getenv("TTS_VOICE", "Kore")

# =============================================================================
# API Configuration
# =============================================================================

GEMINI_API_KEY = os.getenv("GEMINI_API_KEY") or os.getenv("GOOGLE_API_KEY")

# Billable key for Veo (optional, can also be selected at runtime)
VEO_API_KEY = os.getenv("VEO_API_KEY")

# =============================================================================
# Paths
# =============================================================================

PROJECT_ROOT = Path(__file__).parent.resolve()  # Always absolute
# Always resolve OUTPUT_DIR relative to PROJECT_ROOT, not CWD
_output_env = os.getenv("OUTPUT_DIR")
if _output_env:
    OUTPUT_DIR = (PROJECT_ROOT / _output_env).resolve()
else:
    OUTPUT_DIR = PROJECT_ROOT / "assets" / "outputs"
VIDEOS_DIR = OUTPUT_DIR / "videos"
LOGS_DIR = PROJECT_ROOT / "logs"

# Ensure directories exist
for dir_path in [OUTPUT_DIR, VIDEOS_DIR]:
    dir_path.mkdir(parents=True, exist_ok=True)

# =============================================================================
# Generation Settings
# =============================================================================

IMAGE_ASPECT_RATIOS = ["1:1", "3:4", "4:3", "9:16", "16:9"]
IMAGE_SIZES = ["1K", "2K", "4K"]

VIDEO_ASPECT_RATIOS = ["16:9", "9:16"]
VIDEO_RESOLUTION = "1080p"

# Veo polling: one status query every interval, bounded by attempts and wall clock
VIDEO_POLL_INTERVAL_SECONDS = float(os.getenv("VIDEO_POLL_INTERVAL_SECONDS", "5"))
VIDEO_MAX_POLL_ATTEMPTS = int(os.getenv("VIDEO_MAX_POLL_ATTEMPTS", "120"))
VIDEO_MAX_WAIT_SECONDS = float(os.getenv("VIDEO_MAX_WAIT_SECONDS", "600"))

# Seconds the wheel "spins" before a winner is shown
SPIN_DURATION_SECONDS = float(os.getenv("SPIN_DURATION_SECONDS", "2"))

# Server keeps panels for at most this many sessions (least recently used go first)
MAX_SESSIONS = int(os.getenv("MAX_SESSIONS", "100"))

# =============================================================================
# Logging
# =============================================================================

import logging

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
logging.basicConfig(
    level=getattr(logging, LOG_LEVEL),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)

# =============================================================================
# Print Configuration (for debugging)
# =============================================================================


def print_config():
    """Print current configuration for debugging."""
    print(f"""
Joy Panels Configuration
========================
Fast model: {FAST_TEXT_MODEL}
Thinking model: {THINKING_MODEL} (budget {THINKING_BUDGET})
Video model: {VEO_MODEL}
API key: {"configured" if GEMINI_API_KEY else "Not set"}
Veo key: {"configured" if VEO_API_KEY else "Not set"}
Output Dir: {OUTPUT_DIR}
Max sessions: {MAX_SESSIONS}
Log Level: {LOG_LEVEL}
""")


if __name__ == "__main__":
    print_config()
