"""Logo animation via Veo 3.1 Fast. Submits the logo and polls for completion."""

import asyncio
import logging
from typing import Awaitable, Callable, Optional

import httpx

from logomotion.config import (
    DEFAULT_IMAGE_MIME_TYPE,
    DEFAULT_MOTION_PROMPT,
    VEO_MAX_POLL_ATTEMPTS,
    VEO_MODEL,
    VEO_POLL_INTERVAL,
    VIDEO_COUNT,
    VIDEO_DOWNLOAD_TIMEOUT,
    VIDEO_POLL_TIMEOUT,
    VIDEO_RESOLUTION,
    VIDEO_SUBMIT_TIMEOUT,
)
from logomotion.errors import NoVideoURI, PollTimeout, RemoteCallFailure
from logomotion.gemini_client import GeminiClient
from logomotion.models import VideoAspectRatio

logger = logging.getLogger(__name__)


def _as_dict(value) -> dict:
    return value if isinstance(value, dict) else {}


def _video_response(operation: dict) -> dict:
    return _as_dict(_as_dict(operation.get("response")).get("generateVideoResponse"))


def extract_video_uri(operation: dict) -> Optional[str]:
    """Pull the first generated video URI out of a finished operation."""
    # REST shape first, then the SDK-style shape
    samples = _video_response(operation).get("generatedSamples")
    if not samples:
        samples = _as_dict(operation.get("response")).get("generatedVideos")

    if not samples or not isinstance(samples, list):
        return None
    uri = _as_dict(_as_dict(samples[0]).get("video")).get("uri")
    return uri if isinstance(uri, str) and uri else None


def qualify_uri(uri: str, api_key: str) -> str:
    """Add the API key as a query parameter so the URI is fetchable on its own."""
    return str(httpx.URL(uri).copy_merge_params({"key": api_key}))


class LogoAnimator(GeminiClient):
    """Submits a logo image to Veo and polls the long-running operation."""

    def __init__(
        self,
        *args,
        model: Optional[str] = None,
        poll_interval: Optional[float] = None,
        max_poll_attempts: Optional[int] = None,
        sleep: Optional[Callable[[float], Awaitable[None]]] = None,
        **kwargs,
    ):
        super().__init__(*args, **kwargs)
        self.model = model or VEO_MODEL
        self.poll_interval = VEO_POLL_INTERVAL if poll_interval is None else poll_interval
        self.max_poll_attempts = (
            VEO_MAX_POLL_ATTEMPTS if max_poll_attempts is None else max_poll_attempts
        )
        self._sleep = sleep or asyncio.sleep

    def build_payload(
        self,
        image_base64: str,
        prompt: str,
        aspect_ratio: VideoAspectRatio,
        mime_type: str = DEFAULT_IMAGE_MIME_TYPE,
    ) -> dict:
        return {
            "instances": [
                {
                    "prompt": prompt.strip() if prompt and prompt.strip() else DEFAULT_MOTION_PROMPT,
                    "image": {
                        "bytesBase64Encoded": image_base64,
                        "mimeType": mime_type,
                    },
                }
            ],
            "parameters": {
                "sampleCount": VIDEO_COUNT,
                "aspectRatio": VideoAspectRatio.parse(aspect_ratio).value,
                "resolution": VIDEO_RESOLUTION,
            },
        }

    async def submit(
        self,
        image_base64: str,
        prompt: str = "",
        aspect_ratio: VideoAspectRatio = VideoAspectRatio.LANDSCAPE,
        mime_type: str = DEFAULT_IMAGE_MIME_TYPE,
    ) -> dict:
        """Start one video generation job and return its operation handle."""
        ratio = VideoAspectRatio.parse(aspect_ratio)
        logger.info(f"Submitting logo to {self.model} ({ratio.value}, {VIDEO_RESOLUTION})")

        operation = await self._request_json(
            "POST",
            f"models/{self.model}:predictLongRunning",
            payload=self.build_payload(image_base64, prompt, ratio, mime_type),
            timeout=VIDEO_SUBMIT_TIMEOUT,
        )

        if not operation.get("done") and not operation.get("name"):
            raise RemoteCallFailure(f"No operation name returned: {str(operation)[:200]}")

        logger.info(f"Animation operation started: {operation.get('name')}")
        return operation

    async def wait_for_video(self, operation: dict) -> str:
        """Poll until the operation is done and return the raw video URI.

        Waits ``poll_interval`` seconds before every status check. Any error
        while polling aborts the wait.

        Raises:
            PollTimeout: ``max_poll_attempts`` checks went by without completion.
            RemoteCallFailure: A status check failed or the operation reported an error.
            NoVideoURI: The finished operation carried no video reference.
        """
        operation_name = operation.get("name", "")
        attempts = 0

        while not operation.get("done"):
            if self.max_poll_attempts > 0 and attempts >= self.max_poll_attempts:
                logger.error(f"Veo polling timed out after {attempts} attempts")
                raise PollTimeout(
                    f"Video operation not done after {attempts} polls",
                    operation_name=operation_name,
                    attempts=attempts,
                )

            await self._sleep(self.poll_interval)
            attempts += 1
            operation = await self._request_json(
                "GET",
                operation_name,
                timeout=VIDEO_POLL_TIMEOUT,
            )
            logger.debug(f"Poll {attempts}: done={bool(operation.get('done'))}")

        error = operation.get("error")
        if error:
            message = error.get("message") if isinstance(error, dict) else str(error)
            logger.error(f"Veo operation failed: {message}")
            raise RemoteCallFailure(f"Video operation failed: {message}")

        uri = extract_video_uri(operation)
        if not uri:
            reasons = _video_response(operation).get("raiMediaFilteredReasons")
            detail = ""
            if isinstance(reasons, list) and reasons:
                detail = f" Filtered: {'; '.join(map(str, reasons))}"
            raise NoVideoURI(f"Video generation failed or returned no URI.{detail}")

        logger.info(f"Animation complete after {attempts} polls")
        return uri

    def qualify_video_uri(self, uri: str) -> str:
        return qualify_uri(uri, self._require_api_key())

    async def animate_logo(
        self,
        image_base64: str,
        prompt: str = "",
        aspect_ratio: VideoAspectRatio = VideoAspectRatio.LANDSCAPE,
        mime_type: str = DEFAULT_IMAGE_MIME_TYPE,
    ) -> str:
        """Animate a logo end to end.

        Returns:
            Key-qualified URI of the generated video.
        """
        operation = await self.submit(image_base64, prompt, aspect_ratio, mime_type)
        uri = await self.wait_for_video(operation)
        return self.qualify_video_uri(uri)

    async def download_video(self, uri: str) -> bytes:
        """Download a key-qualified video URI."""
        try:
            async with self._client(VIDEO_DOWNLOAD_TIMEOUT, follow_redirects=True) as client:
                response = await client.get(uri)
                response.raise_for_status()
                return response.content
        except httpx.HTTPError as e:
            logger.error(f"Video download failed: {e}")
            raise RemoteCallFailure(f"Video download failed: {e}") from e
