"""
LogoMotion Studio - Logo Generator and Animator

Locally-hosted tool for designing a logo from a text description and
animating it. Uses Google Gemini for the logo and Veo 3.1 Fast for the
animation.

Usage:
    python -m logomotion serve
    Then open http://localhost:8000 in your browser.
"""

import asyncio
import logging
from pathlib import Path
from typing import Callable, Optional

from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import HTMLResponse, Response
from pydantic import BaseModel

from logomotion.config import BILLING_DOCS_URL, KEY_NOT_CONNECTED_MESSAGE
from logomotion.errors import LogoMotionError
from logomotion.key_gate import ApiKeyGate, SessionKeyHost
from logomotion.models import ImageSize, VideoAspectRatio
from logomotion.workspace import LogoWorkspace

logger = logging.getLogger(__name__)

BASE_DIR = Path(__file__).parent


# ──────────────────────────────────────────────
# Request bodies
# ──────────────────────────────────────────────

class ConnectRequest(BaseModel):
    api_key: Optional[str] = None


class LogoRequest(BaseModel):
    prompt: str
    image_size: Optional[str] = None


class AnimationRequest(BaseModel):
    prompt: Optional[str] = None
    aspect_ratio: Optional[str] = None


# ──────────────────────────────────────────────
# Session
# ──────────────────────────────────────────────

class StudioSession:
    """The single interactive session: one gate, one workspace once unlocked."""

    def __init__(
        self,
        host=None,
        workspace_factory: Callable[[Optional[str]], LogoWorkspace] = LogoWorkspace.from_api_key,
    ):
        self.gate = ApiKeyGate(host if host is not None else SessionKeyHost())
        self.workspace_factory = workspace_factory
        self.workspace: Optional[LogoWorkspace] = None
        self.workspace_key: Optional[str] = None
        self.mounted = False
        # Strong references to background animations
        self.tasks: set[asyncio.Task] = set()

    def _open_workspace(self) -> None:
        """Build the workspace for the selected key, rebuilding it when the key changes."""
        if not self.gate.unlocked:
            return
        api_key = self.gate.selected_api_key
        if self.workspace is not None and api_key == self.workspace_key:
            return
        if self.workspace is not None:
            logger.info("API key changed, starting a fresh workspace")
        self.workspace = self.workspace_factory(api_key)
        self.workspace_key = api_key

    def track(self, task: asyncio.Task) -> None:
        self.tasks.add(task)
        task.add_done_callback(self._task_done)

    def _task_done(self, task: asyncio.Task) -> None:
        self.tasks.discard(task)
        if task.cancelled():
            return
        error = task.exception()
        if error is not None:
            logger.error(f"Background animation crashed: {error!r}")

    async def mount(self) -> None:
        """Run the initial key check once."""
        if not self.mounted:
            self.mounted = True
            await self.gate.verify()
            self._open_workspace()

    async def connect(self, api_key: Optional[str] = None) -> bool:
        offer = getattr(self.gate.host, "offer_key", None)
        if offer is not None:
            offer(api_key)
        connected = await self.gate.connect()
        self._open_workspace()
        return connected

    def status(self, message: Optional[str] = None) -> dict:
        return {
            "connected": self.gate.unlocked,
            "message": message,
            "billing_docs_url": BILLING_DOCS_URL,
        }

    def require_workspace(self) -> LogoWorkspace:
        if self.workspace is None:
            raise HTTPException(status_code=403, detail="Connect an API key first")
        return self.workspace


def _parse_option(parser, value, label: str):
    try:
        return parser(value)
    except ValueError:
        raise HTTPException(status_code=400, detail=f"Unknown {label}: {value}")


def _session(request: Request) -> StudioSession:
    return request.app.state.session


# ──────────────────────────────────────────────
# App
# ──────────────────────────────────────────────

def create_app(session: Optional[StudioSession] = None) -> FastAPI:
    app = FastAPI(title="LogoMotion Studio")
    app.state.session = session or StudioSession()

    @app.get("/", response_class=HTMLResponse)
    async def index():
        """Serve the main page."""
        html_path = BASE_DIR / "templates" / "index.html"
        return HTMLResponse(content=html_path.read_text())

    @app.get("/healthz")
    async def healthz():
        return {"status": "ok"}

    @app.get("/api/session")
    async def get_session(request: Request):
        session = _session(request)
        await session.mount()
        return session.status()

    @app.post("/api/session/connect")
    async def connect_session(body: ConnectRequest, request: Request):
        """Select a key, then check again."""
        session = _session(request)
        session.mounted = True
        connected = await session.connect(body.api_key)
        return session.status(None if connected else KEY_NOT_CONNECTED_MESSAGE)

    @app.get("/api/workspace")
    async def get_workspace(request: Request):
        return _session(request).require_workspace().snapshot()

    @app.post("/api/logo")
    async def generate_logo(body: LogoRequest, request: Request):
        """Generate a logo and wait for it."""
        workspace = _session(request).require_workspace()
        if not body.prompt.strip():
            raise HTTPException(status_code=400, detail="Describe the logo first")
        if workspace.is_generating_image:
            raise HTTPException(status_code=409, detail="A logo is already being generated")

        image_size = None
        if body.image_size:
            image_size = _parse_option(ImageSize.parse, body.image_size, "image size")

        await workspace.generate_logo(body.prompt, image_size)
        return workspace.snapshot()

    @app.post("/api/animation", status_code=202)
    async def animate_logo(body: AnimationRequest, request: Request):
        """Start animating the current logo. Poll /api/workspace for the result."""
        session = _session(request)
        workspace = session.require_workspace()

        aspect_ratio = None
        if body.aspect_ratio:
            aspect_ratio = _parse_option(VideoAspectRatio.parse, body.aspect_ratio, "aspect ratio")
        if not workspace.can_animate:
            raise HTTPException(status_code=409, detail="Generate a logo before animating it")

        task = asyncio.create_task(workspace.animate_logo(body.prompt, aspect_ratio))
        session.track(task)
        # Let the task claim the video slot before answering
        await asyncio.sleep(0)
        return workspace.snapshot()

    @app.get("/api/logo/download")
    async def download_logo(request: Request):
        workspace = _session(request).require_workspace()
        if workspace.image is None:
            raise HTTPException(status_code=404, detail="No logo generated yet")
        image = workspace.image
        return Response(
            content=image.data,
            media_type=image.mime_type,
            headers={"Content-Disposition": f'attachment; filename="{image.filename}"'},
        )

    @app.get("/api/animation/download")
    async def download_animation(request: Request):
        workspace = _session(request).require_workspace()
        if workspace.video is None:
            raise HTTPException(status_code=404, detail="No animation generated yet")
        video = workspace.video
        try:
            content = await workspace.animator.download_video(video.uri)
        except LogoMotionError as e:
            logger.error(f"Error downloading animation: {e}")
            raise HTTPException(status_code=502, detail="Failed to download the animation")
        return Response(
            content=content,
            media_type=video.mime_type,
            headers={"Content-Disposition": f'attachment; filename="{video.filename}"'},
        )

    return app


app = create_app()
