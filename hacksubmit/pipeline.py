"""End-to-end submission pipeline: clone, summarize, draft, illustrate, submit."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

from openai import OpenAI

from .assets.generator import AssetGenerator
from .config import HackSubmitConfig
from .content.generator import ContentGenerator
from .form.driver import FormDriver
from .git.fetcher import RepositoryFetcher
from .llm.runner import LLMRunner
from .logging import get_logger
from .models import GeneratedContent, ImageSet, SubmissionResult
from .repo_summarizer import RepoSummarizer

VIDEO_SCRIPT_FILENAME = "video_script.txt"


class SubmissionPipeline:
    """Runs every stage once, in order, with explicitly supplied clients."""

    def __init__(
        self,
        config: HackSubmitConfig,
        *,
        fetcher: RepositoryFetcher,
        summarizer: RepoSummarizer,
        content_generator: ContentGenerator,
        asset_generator: AssetGenerator,
        form_driver: FormDriver,
    ) -> None:
        self.config = config
        self.fetcher = fetcher
        self.summarizer = summarizer
        self.content_generator = content_generator
        self.asset_generator = asset_generator
        self.form_driver = form_driver
        self.logger = get_logger("pipeline")

    @classmethod
    def from_config(cls, config: HackSubmitConfig) -> "SubmissionPipeline":
        """Construct the OpenAI client once and share it between text and image stages.

        SDK retries are disabled: text requests are never retried and image
        requests follow :class:`AssetGenerator`'s own backoff.
        """
        client = OpenAI(
            api_key=config.llm.api_key,
            base_url=config.llm.base_url,
            timeout=config.llm.request_timeout,
            max_retries=0,
        )
        runner = LLMRunner.from_config(config.llm, client=client)
        return cls(
            config,
            fetcher=RepositoryFetcher(token=config.github_token),
            summarizer=RepoSummarizer(),
            content_generator=ContentGenerator(
                runner, structured_output=config.pipeline.structured_output
            ),
            asset_generator=AssetGenerator(
                client if config.images.enabled else None,
                config.asset_dir,
                config=config.images,
            ),
            form_driver=FormDriver(config.form),
        )

    def run(self, base_url: str, repo_url: str) -> SubmissionResult:
        summary = self.summarize_repository(repo_url)
        content = self.content_generator.generate(summary, repo_url=repo_url)
        self.logger.info("Generated README:\n%s", content.readme)
        self.logger.info("Detailed description:\n%s", content.detailed_description)

        images = self.prepare_images(content)
        script_path = self.write_video_script(content) if self.config.pipeline.video_script else None

        self.form_driver.run(
            base_url,
            content,
            images,
            repo_url=repo_url,
            video=self._video_path(),
        )
        return SubmissionResult(content=content, images=images, video_script_path=script_path)

    def summarize_repository(self, repo_url: str) -> str:
        """Clone ``repo_url``, summarize it and delete the working copy."""
        path = self.fetcher.clone(repo_url)
        try:
            summary = self.summarizer.summarize(path)
        except Exception:
            if self.config.pipeline.cleanup_on_failure:
                self.fetcher.remove(path)
            else:
                self.logger.warning("Summarization failed; working copy left at %s", path)
            raise
        self.fetcher.remove(path)
        return summary

    def prepare_images(self, content: GeneratedContent) -> ImageSet:
        if self.config.images.enabled:
            self.logger.info("Generating images")
            return self.asset_generator.generate(content.detailed_description)
        self.logger.info("Image generation disabled; using staged images")
        return self.asset_generator.staged()

    def write_video_script(self, content: GeneratedContent) -> Path:
        script = self.content_generator.create_video_script(content)
        directory = self.config.asset_dir
        directory.mkdir(parents=True, exist_ok=True)
        path = directory / VIDEO_SCRIPT_FILENAME
        path.write_text(script + "\n", encoding="utf-8")
        self.logger.info("Video script written to %s", path)
        return path

    def _video_path(self) -> Optional[Path]:
        video = self.config.form.video_path
        if video is not None and not video.is_file():
            self.logger.warning("Video file %s not found; skipping video upload", video)
            return None
        return video


__all__ = ["SubmissionPipeline", "VIDEO_SCRIPT_FILENAME"]
