"""Value types shared by the remote clients, the workspace and the web API."""

from base64 import b64decode
from dataclasses import dataclass
from enum import Enum

from logomotion.config import DEFAULT_IMAGE_MIME_TYPE, VIDEO_MIME_TYPE


class ImageSize(str, Enum):
    """Logo resolution tiers, valued by the size string the image model expects."""
    LOW = "1K"
    MEDIUM = "2K"
    HIGH = "4K"

    @property
    def tag(self) -> str:
        return self.name.lower()

    @classmethod
    def parse(cls, value) -> "ImageSize":
        """Accept a member, a tag ("medium") or a size string ("2K")."""
        if isinstance(value, cls):
            return value
        text = str(value).strip()
        for member in cls:
            if text.lower() == member.tag or text.upper() == member.value:
                return member
        raise ValueError(f"Unknown image size: {value!r}")


class VideoAspectRatio(str, Enum):
    """Aspect ratios the video model accepts."""
    LANDSCAPE = "16:9"
    PORTRAIT = "9:16"

    @property
    def label(self) -> str:
        return f"{self.name.title()} ({self.value})"

    @classmethod
    def parse(cls, value) -> "VideoAspectRatio":
        """Accept a member, a ratio ("9:16") or a name ("portrait")."""
        if isinstance(value, cls):
            return value
        text = str(value).strip()
        for member in cls:
            if text == member.value or text.upper() == member.name:
                return member
        raise ValueError(f"Unknown aspect ratio: {value!r}")


class SlotStatus(str, Enum):
    """Lifecycle of one generation slot (image or video)."""
    IDLE = "idle"
    REQUESTING = "requesting"
    POLLING = "polling"
    READY = "ready"
    FAILED = "failed"


@dataclass
class GenerationOptions:
    """Current resolution and aspect ratio selections."""
    image_size: ImageSize = ImageSize.LOW
    aspect_ratio: VideoAspectRatio = VideoAspectRatio.LANDSCAPE


@dataclass(frozen=True)
class GeneratedImage:
    """A logo returned by the image model."""
    base64: str
    mime_type: str = DEFAULT_IMAGE_MIME_TYPE

    @property
    def url(self) -> str:
        """Data URL the page can display directly."""
        return f"data:{self.mime_type};base64,{self.base64}"

    @property
    def data(self) -> bytes:
        return b64decode(self.base64)

    @property
    def filename(self) -> str:
        extension = self.mime_type.split("/")[-1].lower()
        if extension == "jpeg":
            extension = "jpg"
        return f"logo.{extension}"


@dataclass(frozen=True)
class GeneratedVideo:
    """A finished animation, referenced by its key-qualified URI."""
    uri: str
    mime_type: str = VIDEO_MIME_TYPE

    filename = "logo-motion.mp4"
