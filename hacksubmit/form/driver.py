"""Playwright automation of the hackathon project submission form."""

from __future__ import annotations

import time
from pathlib import Path
from typing import Callable, Optional

from playwright.sync_api import Page, sync_playwright

from ..config import FormConfig
from ..logging import get_logger
from ..models import GeneratedContent, ImageSet
from . import constants as c


class FormTimeoutError(RuntimeError):
    """Raised when the form does not become ready within the configured bound."""


def form_url(base_url: str, event_path: str) -> str:
    return f"{base_url.rstrip('/')}/{event_path.lstrip('/')}"


class FormDriver:
    """Fills the submission form step by step; any failed interaction aborts the run."""

    def __init__(
        self,
        config: FormConfig | None = None,
        *,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.config = config or FormConfig()
        self._clock = clock
        self.logger = get_logger("form")

    def run(
        self,
        base_url: str,
        content: GeneratedContent,
        images: ImageSet,
        *,
        repo_url: str,
        video: Optional[Path] = None,
    ) -> None:
        """Launch Chromium, submit the form and close the browser."""
        with sync_playwright() as playwright:
            browser = playwright.chromium.launch(headless=self.config.headless)
            try:
                page = browser.new_page()
                self.submit(page, base_url, content, images, repo_url=repo_url, video=video)
            finally:
                browser.close()

    def submit(
        self,
        page: Page,
        base_url: str,
        content: GeneratedContent,
        images: ImageSet,
        *,
        repo_url: str,
        video: Optional[Path] = None,
    ) -> None:
        url = form_url(base_url, self.config.event_path)
        self.logger.info("Opening %s", url)
        page.goto(url)
        self._pause(page)

        self.create_project_if_needed(page, content)
        self.fill_details(page, content, repo_url=repo_url)
        page.get_by_role("button", name=c.SAVE_AND_CONTINUE).click()

        self.upload_media(page, images, video=video)
        self.wait_until_ready(page)
        page.get_by_role("button", name=c.SAVE_AND_CONTINUE).click()
        self.logger.info("Submission form completed")
        self._pause(page)

    def create_project_if_needed(self, page: Page, content: GeneratedContent) -> bool:
        create_button = page.get_by_role("button", name=c.CREATE_PROJECT_BUTTON)
        if not create_button.is_visible():
            self.logger.debug("Project already exists; skipping creation")
            return False
        self.logger.info("Creating project %s", content.project_name)
        page.get_by_placeholder(c.PROJECT_NAME_PLACEHOLDER).fill(content.project_name)
        page.get_by_label(c.CATEGORY_LABEL).select_option(label=self.config.category)
        page.get_by_label(c.EMOJI_LABEL).fill(self.config.emoji)
        page.get_by_role("checkbox").first.check()
        create_button.click()
        return True

    def fill_details(self, page: Page, content: GeneratedContent, *, repo_url: str) -> None:
        self.logger.info("Filling project details")
        page.get_by_placeholder(c.SHORT_DESCRIPTION_PLACEHOLDER).fill(
            content.brief_description[: c.SHORT_DESCRIPTION_LIMIT]
        )
        page.get_by_placeholder(c.DESCRIPTION_PLACEHOLDER).fill(content.detailed_description)
        page.get_by_placeholder(c.HOW_ITS_MADE_PLACEHOLDER).fill(content.detailed_description)
        page.get_by_placeholder(c.GITHUB_PLACEHOLDER).fill(repo_url)
        if self.config.tech_stack:
            page.get_by_label(c.TECH_STACK_LABEL).select_option(label=list(self.config.tech_stack))

    def upload_media(self, page: Page, images: ImageSet, *, video: Optional[Path] = None) -> None:
        if images.logo is not None:
            page.locator(c.LOGO_INPUT).set_input_files(str(images.logo))
        if images.cover is not None:
            page.locator(c.COVER_INPUT).set_input_files(str(images.cover))
        if images.screenshots:
            page.locator(c.SCREENSHOTS_INPUT).set_input_files(
                [str(path) for path in images.screenshots]
            )
        if video is not None:
            self.logger.info("Uploading video %s", video)
            page.locator(c.VIDEO_INPUT).set_input_files(str(video))
        self.logger.info("Uploaded %d images", len(images.paths()))

    def wait_until_ready(self, page: Page) -> None:
        """Poll until uploads finish and the continue button is enabled."""
        progress = page.locator(c.UPLOAD_PROGRESS).first
        button = page.get_by_role("button", name=c.SAVE_AND_CONTINUE)
        deadline = self._clock() + self.config.processing_timeout
        while True:
            if not progress.is_visible() and button.is_visible() and button.is_enabled():
                return
            if self._clock() >= deadline:
                raise FormTimeoutError(
                    f"Form still processing after {self.config.processing_timeout:.0f}s"
                )
            self.logger.debug("Waiting for upload processing")
            page.wait_for_timeout(c.POLL_INTERVAL_MS)

    def _pause(self, page: Page) -> None:
        if self.config.pause and not self.config.headless:
            self.logger.info("Paused for inspection; resume from the Playwright inspector")
            page.pause()


__all__ = ["FormDriver", "FormTimeoutError", "form_url"]
