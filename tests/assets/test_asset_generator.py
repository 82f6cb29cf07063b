"""Tests for image generation and rate-limit backoff."""

from __future__ import annotations

import base64
import threading
from pathlib import Path
from types import SimpleNamespace

import httpx
import openai
import pytest

from hacksubmit.assets.generator import (
    SCENE_PREFIX,
    AssetGenerator,
    ImageGenerationError,
    build_image_prompt,
    with_role,
)
from hacksubmit.config import ImageConfig


def _status_error(cls, status: int):
    request = httpx.Request("POST", "https://api.openai.com/v1/images/generations")
    response = httpx.Response(status, request=request)
    return cls("error", response=response, body=None)


class FakeImages:
    """Stands in for ``client.images``; fails with the queued errors first."""

    def __init__(self, errors=()):
        self.errors = list(errors)
        self.calls = []
        self._lock = threading.Lock()

    def generate(self, **kwargs):
        with self._lock:
            self.calls.append(kwargs)
            if self.errors:
                raise self.errors.pop(0)
            index = len(self.calls)
        items = [
            SimpleNamespace(url=f"https://img/{index}/{n}", b64_json=None)
            for n in range(kwargs["n"])
        ]
        return SimpleNamespace(data=items)


def _generator(tmp_path: Path, images: FakeImages, **config):
    sleeps = []
    generator = AssetGenerator(
        SimpleNamespace(images=images),
        tmp_path / "assets",
        config=ImageConfig(**config),
        sleep=sleeps.append,
        downloader=lambda url: f"bytes:{url}".encode(),
    )
    return generator, sleeps


def test_build_image_prompt_uses_first_three_sentences() -> None:
    prompt = build_image_prompt("First part. Second part! Third part? Fourth part.")

    assert prompt == f"{SCENE_PREFIX}: First part.  Second part.  Third part"


def test_build_image_prompt_truncates_description() -> None:
    prompt = build_image_prompt("a" * 2000)

    assert prompt == f"{SCENE_PREFIX}: " + "a" * 950


def test_request_images_backs_off_exponentially_until_exhausted(tmp_path: Path) -> None:
    errors = [_status_error(openai.RateLimitError, 429) for _ in range(10)]
    images = FakeImages(errors)
    generator, sleeps = _generator(tmp_path, images)

    with pytest.raises(ImageGenerationError):
        generator.request_images("prompt")

    assert len(images.calls) == 5
    assert sleeps == [1, 2, 4, 8, 16]


def test_request_images_recovers_after_rate_limit(tmp_path: Path) -> None:
    errors = [_status_error(openai.RateLimitError, 429) for _ in range(2)]
    images = FakeImages(errors)
    generator, sleeps = _generator(tmp_path, images)

    result = generator.request_images("prompt", 2)

    assert result == [b"bytes:https://img/3/0", b"bytes:https://img/3/1"]
    assert sleeps == [1, 2]
    assert images.calls[-1]["n"] == 2


def test_request_images_does_not_retry_other_errors(tmp_path: Path) -> None:
    images = FakeImages([_status_error(openai.BadRequestError, 400)])
    generator, sleeps = _generator(tmp_path, images)

    with pytest.raises(openai.BadRequestError):
        generator.request_images("prompt")

    assert len(images.calls) == 1
    assert sleeps == []


def test_request_images_decodes_inline_data(tmp_path: Path) -> None:
    class InlineImages(FakeImages):
        def generate(self, **kwargs):
            self.calls.append(kwargs)
            encoded = base64.b64encode(b"raw-image").decode()
            return SimpleNamespace(data=[SimpleNamespace(url=None, b64_json=encoded)])

    generator, _ = _generator(tmp_path, InlineImages())

    assert generator.request_images("prompt") == [b"raw-image"]


def test_generate_writes_fixed_filenames(tmp_path: Path) -> None:
    images = FakeImages()
    generator, _ = _generator(tmp_path, images, screenshot_count=2, model="dall-e-2")
    asset_dir = tmp_path / "assets"
    asset_dir.mkdir()
    (asset_dir / "logo.png").write_bytes(b"old logo")

    description = "A tool that submits projects. It is fast."
    image_set = generator.generate(description)

    assert image_set.logo == asset_dir / "logo.png"
    assert image_set.cover == asset_dir / "cover.png"
    assert image_set.screenshots == [asset_dir / "screenshot1.png", asset_dir / "screenshot2.png"]
    assert (asset_dir / "logo.png").read_bytes() != b"old logo"
    for path in image_set.paths():
        assert path.read_bytes().startswith(b"bytes:https://img/")

    base = build_image_prompt(description)
    prompts = sorted(call["prompt"] for call in images.calls)
    assert prompts == sorted(
        [with_role(base, "Logo"), with_role(base, "Cover image"), with_role(base, "Screenshot")]
    )
    screenshot_call = next(call for call in images.calls if call["prompt"].endswith("Screenshot"))
    assert screenshot_call["n"] == 2
    assert all(call["model"] == "dall-e-2" for call in images.calls)


def test_generate_without_client_fails(tmp_path: Path) -> None:
    generator = AssetGenerator(None, tmp_path)

    with pytest.raises(ImageGenerationError):
        generator.generate("Description.")


def test_staged_returns_existing_files_only(tmp_path: Path) -> None:
    (tmp_path / "logo.png").write_bytes(b"logo")
    (tmp_path / "screenshot1.png").write_bytes(b"shot")
    generator = AssetGenerator(None, tmp_path, config=ImageConfig(screenshot_count=2))

    image_set = generator.staged()

    assert image_set.logo == tmp_path / "logo.png"
    assert image_set.cover is None
    assert image_set.screenshots == [tmp_path / "screenshot1.png"]
    assert image_set.paths() == [tmp_path / "logo.png", tmp_path / "screenshot1.png"]
