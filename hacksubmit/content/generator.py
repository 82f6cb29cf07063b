"""Drafts README, descriptions and video scripts from a repository summary."""

from __future__ import annotations

import json
import re
from typing import Any, Dict
from urllib.parse import urlsplit

from pydantic import ValidationError

from ..llm.runner import LLMRunner
from ..logging import get_logger
from ..models import GeneratedContent, ReadmePayload
from . import prompts

_JSON_OBJECT_RE = re.compile(r"\{[\s\S]*\}")
_CONTROL_CHARS_RE = re.compile(r"[\x00-\x1f\x7f-\x9f]")
_SENTENCE_END_RE = re.compile(r"(?<=[.!?])\s+")


class ContentParseError(RuntimeError):
    """Raised when the model's structured response cannot be used."""


def extract_json_object(raw: str) -> Dict[str, Any]:
    """Return the outermost ``{...}`` block of ``raw`` decoded as a dict.

    The match is greedy from the first ``{`` to the last ``}``. Control
    characters are removed before decoding since models often emit raw
    newlines inside string values.
    """
    match = _JSON_OBJECT_RE.search(raw or "")
    if match is None:
        raise ContentParseError("No JSON object found in model response")
    cleaned = _CONTROL_CHARS_RE.sub("", match.group(0))
    try:
        payload = json.loads(cleaned)
    except json.JSONDecodeError as exc:
        raise ContentParseError(f"Model response is not valid JSON: {exc}") from exc
    if not isinstance(payload, dict):
        raise ContentParseError("Model response JSON is not an object")
    return payload


def project_name_from_url(repo_url: str) -> str:
    path = urlsplit(repo_url).path if "://" in repo_url else repo_url.split(":", 1)[-1]
    name = path.rstrip("/").rsplit("/", 1)[-1]
    if name.endswith(".git"):
        name = name[: -len(".git")]
    return name or "Project"


def first_sentence(text: str) -> str:
    stripped = text.strip()
    if not stripped:
        return ""
    return _SENTENCE_END_RE.split(stripped, maxsplit=1)[0]


class ContentGenerator:
    """Issues the text-generation requests that fill the submission form."""

    def __init__(self, runner: LLMRunner, *, structured_output: bool = True) -> None:
        self.runner = runner
        self.structured_output = structured_output
        self.logger = get_logger("content")

    def create_readme(self, summary: str) -> ReadmePayload:
        """Request the JSON README payload and validate it."""
        raw = self.runner.run(
            prompts.STRUCTURED_README_PROMPT.format(summary=summary),
            system=prompts.README_SYSTEM_PROMPT,
            json_mode=True,
        )
        payload = extract_json_object(raw)
        try:
            return ReadmePayload.model_validate(payload)
        except ValidationError as exc:
            raise ContentParseError(f"Model response is missing required fields: {exc}") from exc

    def create_plain_readme(self, summary: str) -> str:
        raw = self.runner.run(
            prompts.PLAIN_README_PROMPT.format(summary=summary),
            system=prompts.README_SYSTEM_PROMPT,
        )
        return raw or prompts.NO_README

    def create_detailed_description(self, summary: str) -> str:
        raw = self.runner.run(
            prompts.DESCRIPTION_PROMPT.format(summary=summary),
            system=prompts.DESCRIPTION_SYSTEM_PROMPT,
        )
        return raw or prompts.NO_DETAILED_DESCRIPTION

    def create_video_script(self, content: GeneratedContent) -> str:
        raw = self.runner.run(
            prompts.VIDEO_SCRIPT_PROMPT.format(
                project_name=content.project_name,
                description=content.detailed_description,
            ),
            system=prompts.VIDEO_SCRIPT_SYSTEM_PROMPT,
        )
        return (raw or prompts.NO_VIDEO_SCRIPT).strip()

    def generate(self, summary: str, *, repo_url: str = "") -> GeneratedContent:
        """Produce every text field for the submission from ``summary``."""
        if self.structured_output:
            self.logger.info("Requesting structured README")
            payload = self.create_readme(summary)
            project_name = payload.project_name
            brief_description = payload.brief_description
            readme = payload.readme_content
            self.logger.info("Requesting detailed description")
            detailed_description = self.create_detailed_description(summary)
        else:
            self.logger.info("Requesting README")
            readme = self.create_plain_readme(summary)
            self.logger.info("Requesting detailed description")
            detailed_description = self.create_detailed_description(summary)
            project_name = project_name_from_url(repo_url)
            brief_description = first_sentence(detailed_description)

        return GeneratedContent(
            project_name=project_name.strip(),
            brief_description=brief_description.strip(),
            readme=readme.strip(),
            detailed_description=detailed_description.strip(),
        )


__all__ = [
    "ContentGenerator",
    "ContentParseError",
    "extract_json_object",
    "first_sentence",
    "project_name_from_url",
]
