"""Configuration constants and environment variable loading for LogoMotion Studio."""

import os
from dotenv import load_dotenv

load_dotenv()

# ==================== API KEYS ====================
# API_KEY is the name the hosted studio injects; GEMINI_API_KEY wins when both are set.
GEMINI_API_KEY = os.getenv("GEMINI_API_KEY") or os.getenv("API_KEY")
GEMINI_BASE_URL = os.getenv(
    "GEMINI_BASE_URL", "https://generativelanguage.googleapis.com/v1beta"
)
BILLING_DOCS_URL = "https://ai.google.dev/gemini-api/docs/billing"

# ==================== MODELS ====================
LOGO_IMAGE_MODEL = os.getenv("LOGO_IMAGE_MODEL", "gemini-3-pro-image-preview")
VEO_MODEL = os.getenv("VEO_MODEL", "veo-3.1-fast-generate-preview")

# ==================== IMAGE GENERATION ====================
LOGO_ASPECT_RATIO = "1:1"  # Logos are square
DEFAULT_IMAGE_MIME_TYPE = "image/png"
IMAGE_REQUEST_TIMEOUT = float(os.getenv("IMAGE_REQUEST_TIMEOUT", "120"))

# ==================== VIDEO GENERATION ====================
DEFAULT_MOTION_PROMPT = "Animate this logo cinematically"
VIDEO_COUNT = 1
VIDEO_RESOLUTION = "720p"
VIDEO_MIME_TYPE = "video/mp4"
VIDEO_SUBMIT_TIMEOUT = float(os.getenv("VIDEO_SUBMIT_TIMEOUT", "60"))
VIDEO_POLL_TIMEOUT = float(os.getenv("VIDEO_POLL_TIMEOUT", "30"))
VIDEO_DOWNLOAD_TIMEOUT = float(os.getenv("VIDEO_DOWNLOAD_TIMEOUT", "120"))

# ==================== POLLING ====================
VEO_POLL_INTERVAL = float(os.getenv("VEO_POLL_INTERVAL", "5"))
# 120 polls at 5s is ten minutes. Zero or less polls until the job reports done.
VEO_MAX_POLL_ATTEMPTS = int(os.getenv("VEO_MAX_POLL_ATTEMPTS", "120"))

# ==================== SERVER ====================
SERVER_HOST = os.getenv("LOGOMOTION_HOST", "0.0.0.0")
SERVER_PORT = int(os.getenv("LOGOMOTION_PORT", "8000"))

# ==================== USER MESSAGES ====================
IMAGE_ERROR_MESSAGE = "Failed to generate logo. Please try again."
VIDEO_ERROR_MESSAGE = "Failed to animate logo. It might take a while or verify your quota."
VIDEO_TIMEOUT_MESSAGE = "Animation timed out. The video job did not finish in time."
KEY_NOT_CONNECTED_MESSAGE = "API key still not connected. Select a key to continue."
