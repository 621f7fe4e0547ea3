"""Tests for logomotion.app - session gating and the workspace API."""

from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi.testclient import TestClient

from logomotion.app import StudioSession, create_app
from logomotion.config import KEY_NOT_CONNECTED_MESSAGE
from logomotion.errors import RemoteCallFailure
from logomotion.key_gate import SessionKeyHost
from logomotion.models import GeneratedImage, ImageSize, SlotStatus, VideoAspectRatio
from logomotion.workspace import LogoWorkspace


def _fake_clients():
    image_generator = MagicMock()
    image_generator.generate_logo = AsyncMock(
        return_value=GeneratedImage(base64="QUJD", mime_type="image/png")
    )
    animator = MagicMock()
    animator.submit = AsyncMock(return_value={"name": "operations/op1", "done": False})
    animator.wait_for_video = AsyncMock(return_value="https://x.test/v?alt=media")
    animator.qualify_video_uri = MagicMock(side_effect=lambda uri: f"{uri}&key=k")
    animator.download_video = AsyncMock(return_value=b"mp4-bytes")
    return image_generator, animator


@pytest.fixture
def clients():
    return _fake_clients()


@pytest.fixture
def keys():
    return []


def _make_client(api_key, clients, keys):
    image_generator, animator = clients

    def factory(key):
        keys.append(key)
        return LogoWorkspace(image_generator, animator)

    session = StudioSession(host=SessionKeyHost(api_key=api_key), workspace_factory=factory)
    return TestClient(create_app(session))


@pytest.fixture
def connected(clients, keys):
    with _make_client("env-key", clients, keys) as client:
        assert client.get("/api/session").json()["connected"] is True
        yield client


# ---------------------------------------------------------------------------
# Session gate
# ---------------------------------------------------------------------------

class TestSession:
    def test_configured_key_unlocks_on_mount(self, clients, keys):
        with _make_client("env-key", clients, keys) as client:
            body = client.get("/api/session").json()
            assert body["connected"] is True
            assert "checking" not in body
            assert keys == ["env-key"]

    def test_no_key_stays_gated(self, clients, keys):
        with _make_client("", clients, keys) as client:
            assert client.get("/api/session").json()["connected"] is False
            assert client.get("/api/workspace").status_code == 403
            assert keys == []

    def test_connect_with_key(self, clients, keys):
        with _make_client("", clients, keys) as client:
            client.get("/api/session")
            body = client.post("/api/session/connect", json={"api_key": "picked-key"}).json()

            assert body["connected"] is True
            assert body["message"] is None
            assert keys == ["picked-key"]
            assert client.get("/api/workspace").status_code == 200

    def test_connect_without_key_reports_message(self, clients, keys):
        with _make_client("", clients, keys) as client:
            body = client.post("/api/session/connect", json={}).json()

            assert body["connected"] is False
            assert body["message"] == KEY_NOT_CONNECTED_MESSAGE

    def test_new_key_rebuilds_workspace(self, clients, keys):
        with _make_client("env-key", clients, keys) as client:
            client.get("/api/session")
            client.post("/api/logo", json={"prompt": "fox"})

            body = client.post("/api/session/connect", json={"api_key": "other-key"}).json()

            assert body["connected"] is True
            assert keys == ["env-key", "other-key"]
            assert client.get("/api/workspace").json()["image"]["url"] is None

    def test_same_key_keeps_workspace(self, clients, keys):
        with _make_client("env-key", clients, keys) as client:
            client.get("/api/session")
            client.post("/api/session/connect", json={"api_key": "env-key"})
            assert keys == ["env-key"]


# ---------------------------------------------------------------------------
# Logo
# ---------------------------------------------------------------------------

class TestLogo:
    def test_generate(self, connected, clients):
        image_generator, _ = clients
        response = connected.post("/api/logo", json={"prompt": "minimalist fox head", "image_size": "medium"})

        assert response.status_code == 200
        state = response.json()
        assert state["image"]["url"] == "data:image/png;base64,QUJD"
        assert state["can_animate"] is True
        image_generator.generate_logo.assert_awaited_once_with("minimalist fox head", ImageSize.MEDIUM)

    def test_blank_prompt(self, connected, clients):
        image_generator, _ = clients
        assert connected.post("/api/logo", json={"prompt": "   "}).status_code == 400
        image_generator.generate_logo.assert_not_called()

    def test_unknown_size(self, connected):
        response = connected.post("/api/logo", json={"prompt": "fox", "image_size": "huge"})
        assert response.status_code == 400

    def test_failure_shows_message(self, connected, clients):
        image_generator, _ = clients
        image_generator.generate_logo.side_effect = RemoteCallFailure("500")

        state = connected.post("/api/logo", json={"prompt": "fox"}).json()

        assert state["image"]["status"] == "failed"
        assert state["image"]["error"] == "Failed to generate logo. Please try again."

    def test_malformed_reply_frees_slot(self, connected, clients):
        image_generator, _ = clients
        image_generator.generate_logo.side_effect = AttributeError("'str' object has no attribute 'get'")

        assert connected.post("/api/logo", json={"prompt": "fox"}).json()["image"]["status"] == "failed"
        assert connected.post("/api/logo", json={"prompt": "fox"}).status_code == 200
        assert image_generator.generate_logo.await_count == 2

    def test_in_flight_conflict(self, connected, clients):
        image_generator, _ = clients
        connected.app.state.session.workspace.image_status = SlotStatus.REQUESTING

        assert connected.post("/api/logo", json={"prompt": "fox"}).status_code == 409
        image_generator.generate_logo.assert_not_called()

    def test_download(self, connected):
        assert connected.get("/api/logo/download").status_code == 404
        connected.post("/api/logo", json={"prompt": "fox"})

        response = connected.get("/api/logo/download")

        assert response.status_code == 200
        assert response.content == b"ABC"
        assert response.headers["content-type"] == "image/png"
        assert 'filename="logo.png"' in response.headers["content-disposition"]


# ---------------------------------------------------------------------------
# Animation
# ---------------------------------------------------------------------------

class TestAnimation:
    def test_requires_logo(self, connected, clients):
        _, animator = clients
        assert connected.post("/api/animation", json={}).status_code == 409
        animator.submit.assert_not_called()

    def test_animate_and_download(self, connected, clients):
        _, animator = clients
        connected.post("/api/logo", json={"prompt": "fox"})

        response = connected.post("/api/animation", json={"prompt": "", "aspect_ratio": "9:16"})
        assert response.status_code == 202

        state = connected.get("/api/workspace").json()
        assert state["video"]["status"] == "ready"
        assert state["video"]["url"] == "https://x.test/v?alt=media&key=k"
        assert state["aspect_ratio"] == "9:16"
        animator.submit.assert_awaited_once_with("QUJD", "", VideoAspectRatio.PORTRAIT, "image/png")

        download = connected.get("/api/animation/download")
        assert download.status_code == 200
        assert download.content == b"mp4-bytes"
        assert 'filename="logo-motion.mp4"' in download.headers["content-disposition"]

    def test_download_failure(self, connected, clients):
        _, animator = clients
        animator.download_video.side_effect = RemoteCallFailure("404")
        connected.post("/api/logo", json={"prompt": "fox"})
        connected.post("/api/animation", json={})

        assert connected.get("/api/animation/download").status_code == 502

    def test_in_flight_conflict(self, connected, clients):
        _, animator = clients
        connected.post("/api/logo", json={"prompt": "fox"})
        connected.app.state.session.workspace.video_status = SlotStatus.POLLING

        assert connected.post("/api/animation", json={}).status_code == 409
        animator.submit.assert_not_called()

    def test_malformed_reply_frees_slot(self, connected, clients):
        _, animator = clients
        animator.wait_for_video.side_effect = AttributeError("'NoneType' object has no attribute 'get'")
        connected.post("/api/logo", json={"prompt": "fox"})

        assert connected.post("/api/animation", json={}).status_code == 202

        state = connected.get("/api/workspace").json()
        assert state["video"]["status"] == "failed"
        assert state["can_animate"] is True

    def test_unknown_aspect_ratio(self, connected):
        connected.post("/api/logo", json={"prompt": "fox"})
        assert connected.post("/api/animation", json={"aspect_ratio": "4:3"}).status_code == 400


def test_healthz(clients, keys):
    with _make_client("", clients, keys) as client:
        assert client.get("/healthz").json() == {"status": "ok"}


def test_index_served(clients, keys):
    with _make_client("", clients, keys) as client:
        response = client.get("/")
        assert response.status_code == 200
        assert "LogoMotion Studio" in response.text
