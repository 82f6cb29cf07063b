"""Marketing image generation with rate-limit backoff."""

from __future__ import annotations

import base64
import re
import time
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Callable, List, Sequence

import requests
from openai import APIStatusError, OpenAI

from ..config import ImageConfig
from ..logging import get_logger
from ..models import ImageSet

SCENE_PREFIX = "User interface screenshot of a web application"
PROMPT_MAX_CHARS = 950
PROMPT_SENTENCES = 3

LOGO_ROLE = "Logo"
COVER_ROLE = "Cover image"
SCREENSHOT_ROLE = "Screenshot"

LOGO_FILENAME = "logo.png"
COVER_FILENAME = "cover.png"

_SENTENCE_SPLIT_RE = re.compile(r"[.!?]+")


class ImageGenerationError(RuntimeError):
    """Raised when image generation keeps getting rate limited."""


def build_image_prompt(description: str) -> str:
    """Condense the first sentences of ``description`` into an image prompt."""
    sentences = [piece for piece in _SENTENCE_SPLIT_RE.split(description) if piece]
    short_description = ". ".join(sentences[:PROMPT_SENTENCES])
    return f"{SCENE_PREFIX}: {short_description[:PROMPT_MAX_CHARS]}".strip()


def with_role(prompt: str, role: str) -> str:
    return f"{prompt}. {role}"


def screenshot_filename(index: int) -> str:
    return f"screenshot{index}.png"


def _download(url: str) -> bytes:
    response = requests.get(url, timeout=60)
    response.raise_for_status()
    return response.content


class AssetGenerator:
    """Requests logo, cover and screenshot images and stores them under fixed names."""

    def __init__(
        self,
        client: OpenAI | None,
        output_dir: Path,
        *,
        config: ImageConfig | None = None,
        sleep: Callable[[float], None] = time.sleep,
        downloader: Callable[[str], bytes] = _download,
    ) -> None:
        self.client = client
        self.output_dir = output_dir
        self.config = config or ImageConfig()
        self._sleep = sleep
        self._download = downloader
        self.logger = get_logger("assets")

    def request_images(self, prompt: str, count: int = 1) -> List[bytes]:
        """Generate ``count`` images for ``prompt``, backing off on HTTP 429."""
        if self.client is None:
            raise ImageGenerationError("Image generation requested without an OpenAI client.")
        for attempt in range(self.config.max_attempts):
            try:
                response = self.client.images.generate(
                    model=self.config.model,
                    prompt=prompt,
                    n=count,
                    size=self.config.size,
                )
            except APIStatusError as exc:
                if exc.status_code != 429:
                    raise
                delay = 2**attempt
                self.logger.warning(
                    "Image request rate limited (attempt %d/%d); retrying in %ds",
                    attempt + 1,
                    self.config.max_attempts,
                    delay,
                )
                self._sleep(delay)
                continue
            return [self._image_bytes(item) for item in response.data or []]
        raise ImageGenerationError(
            f"Image generation still rate limited after {self.config.max_attempts} attempts"
        )

    def generate(self, description: str) -> ImageSet:
        """Generate the full image set for ``description`` and write it to disk."""
        self.output_dir.mkdir(parents=True, exist_ok=True)
        prompt = build_image_prompt(description)
        self.logger.info("Using image generation prompt: %s", prompt)

        with ThreadPoolExecutor(max_workers=2) as pool:
            logo_future = pool.submit(self._generate_single, with_role(prompt, LOGO_ROLE), LOGO_FILENAME)
            cover_future = pool.submit(self._generate_single, with_role(prompt, COVER_ROLE), COVER_FILENAME)
            logo = logo_future.result()
            cover = cover_future.result()

        screenshots: List[Path] = []
        count = self.config.screenshot_count
        if count > 0:
            images = self.request_images(with_role(prompt, SCREENSHOT_ROLE), count)
            names = [screenshot_filename(index) for index in range(1, len(images) + 1)]
            screenshots = self._write_all(images, names)

        return ImageSet(logo=logo, cover=cover, screenshots=screenshots)

    def staged(self) -> ImageSet:
        """Return pre-existing images from the output directory."""
        logo = self.output_dir / LOGO_FILENAME
        cover = self.output_dir / COVER_FILENAME
        screenshots = [
            self.output_dir / screenshot_filename(index)
            for index in range(1, self.config.screenshot_count + 1)
        ]
        present = [path for path in screenshots if path.is_file()]
        if len(present) < len(screenshots):
            self.logger.warning(
                "Only %d of %d staged screenshots found in %s",
                len(present),
                len(screenshots),
                self.output_dir,
            )
        return ImageSet(
            logo=logo if logo.is_file() else None,
            cover=cover if cover.is_file() else None,
            screenshots=present,
        )

    def _generate_single(self, prompt: str, filename: str) -> Path | None:
        images = self.request_images(prompt, 1)
        if not images:
            self.logger.warning("Image API returned no data for %s", filename)
            return None
        return self._write_all(images[:1], [filename])[0]

    def _write_all(self, images: Sequence[bytes], names: Sequence[str]) -> List[Path]:
        paths: List[Path] = []
        for data, name in zip(images, names):
            path = self.output_dir / name
            path.write_bytes(data)
            self.logger.debug("Wrote %s (%d bytes)", path, len(data))
            paths.append(path)
        return paths

    def _image_bytes(self, item: object) -> bytes:
        url = getattr(item, "url", None)
        if url:
            return self._download(url)
        encoded = getattr(item, "b64_json", None)
        if encoded:
            return base64.b64decode(encoded)
        raise ImageGenerationError("Image API returned neither a URL nor image data")


__all__ = [
    "AssetGenerator",
    "ImageGenerationError",
    "build_image_prompt",
    "screenshot_filename",
    "with_role",
]
