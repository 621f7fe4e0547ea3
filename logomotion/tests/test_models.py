"""Tests for logomotion.models - option parsing and derived references."""

import pytest

from logomotion.models import GeneratedImage, GeneratedVideo, ImageSize, VideoAspectRatio


class TestImageSize:
    @pytest.mark.parametrize("value, expected", [
        ("low", ImageSize.LOW),
        ("medium", ImageSize.MEDIUM),
        ("HIGH", ImageSize.HIGH),
        ("2K", ImageSize.MEDIUM),
        ("4k", ImageSize.HIGH),
        (ImageSize.LOW, ImageSize.LOW),
    ])
    def test_parse(self, value, expected):
        assert ImageSize.parse(value) is expected

    def test_unknown(self):
        with pytest.raises(ValueError):
            ImageSize.parse("8K")

    def test_tag(self):
        assert ImageSize.MEDIUM.tag == "medium"


class TestVideoAspectRatio:
    @pytest.mark.parametrize("value, expected", [
        ("16:9", VideoAspectRatio.LANDSCAPE),
        ("9:16", VideoAspectRatio.PORTRAIT),
        ("portrait", VideoAspectRatio.PORTRAIT),
    ])
    def test_parse(self, value, expected):
        assert VideoAspectRatio.parse(value) is expected

    def test_unknown(self):
        with pytest.raises(ValueError):
            VideoAspectRatio.parse("1:1")

    def test_label(self):
        assert VideoAspectRatio.PORTRAIT.label == "Portrait (9:16)"


class TestGeneratedImage:
    def test_data_url(self):
        assert GeneratedImage("AAAA", "image/png").url == "data:image/png;base64,AAAA"

    def test_filename_follows_mime(self):
        assert GeneratedImage("AAAA", "image/jpeg").filename == "logo.jpg"
        assert GeneratedImage("AAAA").filename == "logo.png"

    def test_immutable(self):
        image = GeneratedImage("AAAA")
        with pytest.raises(AttributeError):
            image.base64 = "BBBB"


def test_video_defaults_to_mp4():
    video = GeneratedVideo("https://x.test/v?key=k")
    assert video.mime_type == "video/mp4"
    assert video.filename == "logo-motion.mp4"
