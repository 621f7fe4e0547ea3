"""Logo workspace orchestrator

TWO-SLOT WORKFLOW:
The workspace holds the state behind the studio page and sequences the two
generation calls:

1. LOGO:    prompt + resolution -> Gemini image model -> GeneratedImage
2. ANIMATE: logo + motion prompt + aspect ratio -> Veo job -> polled -> GeneratedVideo

RULES:
- A blank logo prompt never reaches the image model
- Animation needs a ready logo
- A new logo discards the current logo and any animation
- One request in flight per slot, nothing is queued or cancelled
- Each slot keeps its own error message
- Any failure of a call ends its slot in FAILED, never stuck in flight
"""

import logging
from typing import Optional

from logomotion.animator import LogoAnimator
from logomotion.config import (
    IMAGE_ERROR_MESSAGE,
    VIDEO_ERROR_MESSAGE,
    VIDEO_TIMEOUT_MESSAGE,
)
from logomotion.errors import PollTimeout
from logomotion.image_generator import LogoImageGenerator
from logomotion.models import (
    GeneratedImage,
    GeneratedVideo,
    GenerationOptions,
    ImageSize,
    SlotStatus,
    VideoAspectRatio,
)

logger = logging.getLogger(__name__)


class LogoWorkspace:
    """Orchestrates logo generation and animation for one interactive session."""

    def __init__(self, image_generator: LogoImageGenerator, animator: LogoAnimator):
        self.image_generator = image_generator
        self.animator = animator

        # Inputs
        self.logo_prompt = ""
        self.animation_prompt = ""
        self.options = GenerationOptions()

        # Image slot
        self.image_status = SlotStatus.IDLE
        self.image: Optional[GeneratedImage] = None
        self.image_error: Optional[str] = None

        # Video slot
        self.video_status = SlotStatus.IDLE
        self.video: Optional[GeneratedVideo] = None
        self.video_error: Optional[str] = None

        # Bumped by every logo request; animations started for an older logo are dropped
        self.generation = 0

    @classmethod
    def from_api_key(cls, api_key: Optional[str], **client_kwargs) -> "LogoWorkspace":
        """Build a workspace whose clients both carry ``api_key``."""
        return cls(
            image_generator=LogoImageGenerator(api_key=api_key, **client_kwargs),
            animator=LogoAnimator(api_key=api_key, **client_kwargs),
        )

    @property
    def is_generating_image(self) -> bool:
        return self.image_status == SlotStatus.REQUESTING

    @property
    def is_generating_video(self) -> bool:
        return self.video_status in (SlotStatus.REQUESTING, SlotStatus.POLLING)

    @property
    def can_generate_logo(self) -> bool:
        return bool(self.logo_prompt.strip()) and not self.is_generating_image

    @property
    def can_animate(self) -> bool:
        return (
            self.image is not None
            and self.image_status == SlotStatus.READY
            and not self.is_generating_video
        )

    # ==================== SLOT 1: LOGO ====================

    async def generate_logo(
        self,
        prompt: Optional[str] = None,
        image_size: Optional[ImageSize] = None,
    ) -> Optional[GeneratedImage]:
        """Generate a new logo, discarding the current logo and animation.

        Returns:
            The new image, or None if nothing was requested or the request failed.
        """
        if prompt is not None:
            self.logo_prompt = prompt
        if image_size is not None:
            self.options.image_size = ImageSize.parse(image_size)

        if not self.logo_prompt.strip():
            logger.debug("Ignoring logo request with a blank prompt")
            return None
        if self.is_generating_image:
            logger.debug("Logo request already in flight")
            return None

        self.generation += 1
        self.image_status = SlotStatus.REQUESTING
        self.image = None
        self.image_error = None
        self.video = None
        self.video_status = SlotStatus.IDLE
        self.video_error = None

        try:
            image = await self.image_generator.generate_logo(
                self.logo_prompt, self.options.image_size
            )
        except Exception as e:
            logger.error(f"Error generating logo: {e}")
            self.image_status = SlotStatus.FAILED
            self.image_error = IMAGE_ERROR_MESSAGE
            return None

        self.image = image
        self.image_status = SlotStatus.READY
        return image

    # ==================== SLOT 2: ANIMATION ====================

    async def animate_logo(
        self,
        prompt: Optional[str] = None,
        aspect_ratio: Optional[VideoAspectRatio] = None,
    ) -> Optional[GeneratedVideo]:
        """Animate the current logo.

        Returns:
            The finished video, or None if animation was not possible, failed,
            or a newer logo replaced the one being animated.
        """
        if prompt is not None:
            self.animation_prompt = prompt
        if aspect_ratio is not None:
            self.options.aspect_ratio = VideoAspectRatio.parse(aspect_ratio)

        if not self.can_animate:
            logger.debug("Ignoring animation request: no ready logo or already animating")
            return None

        generation = self.generation
        image = self.image
        self.video_status = SlotStatus.REQUESTING
        self.video = None
        self.video_error = None

        try:
            operation = await self.animator.submit(
                image.base64,
                self.animation_prompt,
                self.options.aspect_ratio,
                image.mime_type,
            )
            if self._is_current(generation):
                self.video_status = SlotStatus.POLLING
            uri = await self.animator.wait_for_video(operation)
            qualified = self.animator.qualify_video_uri(uri)
        except Exception as e:
            if not self._is_current(generation):
                logger.info(f"Dropping failure from a replaced logo: {e}")
                return None
            logger.error(f"Error generating video: {e}")
            self.video_status = SlotStatus.FAILED
            self.video_error = (
                VIDEO_TIMEOUT_MESSAGE if isinstance(e, PollTimeout) else VIDEO_ERROR_MESSAGE
            )
            return None

        if not self._is_current(generation):
            logger.info("Dropping animation for a replaced logo")
            return None

        self.video = GeneratedVideo(uri=qualified)
        self.video_status = SlotStatus.READY
        return self.video

    def _is_current(self, generation: int) -> bool:
        return generation == self.generation

    # ==================== STATE ====================

    def snapshot(self) -> dict:
        """JSON-safe view of the workspace for the page."""
        return {
            "logo_prompt": self.logo_prompt,
            "animation_prompt": self.animation_prompt,
            "image_size": self.options.image_size.value,
            "aspect_ratio": self.options.aspect_ratio.value,
            "image": {
                "status": self.image_status.value,
                "is_generating": self.is_generating_image,
                "error": self.image_error,
                "url": self.image.url if self.image else None,
                "mime_type": self.image.mime_type if self.image else None,
            },
            "video": {
                "status": self.video_status.value,
                "is_generating": self.is_generating_video,
                "error": self.video_error,
                "url": self.video.uri if self.video else None,
                "mime_type": self.video.mime_type if self.video else None,
            },
            "can_generate_logo": self.can_generate_logo,
            "can_animate": self.can_animate,
        }
