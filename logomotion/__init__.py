"""LogoMotion Studio.

Designs a logo from a text description with the Gemini image model, then
animates it with Veo 3.1 Fast, behind an API key gate.
"""

from logomotion.animator import LogoAnimator
from logomotion.image_generator import LogoImageGenerator
from logomotion.key_gate import ApiKeyGate, SessionKeyHost, TerminalKeyHost
from logomotion.models import (
    GeneratedImage,
    GeneratedVideo,
    GenerationOptions,
    ImageSize,
    SlotStatus,
    VideoAspectRatio,
)
from logomotion.workspace import LogoWorkspace

__all__ = [
    "ApiKeyGate",
    "SessionKeyHost",
    "TerminalKeyHost",
    "LogoImageGenerator",
    "LogoAnimator",
    "LogoWorkspace",
    "GeneratedImage",
    "GeneratedVideo",
    "GenerationOptions",
    "ImageSize",
    "SlotStatus",
    "VideoAspectRatio",
]
