"""Tests for README and description generation."""

from __future__ import annotations

import pytest

from hacksubmit.content import prompts
from hacksubmit.content.generator import (
    ContentGenerator,
    ContentParseError,
    extract_json_object,
    first_sentence,
    project_name_from_url,
)
from hacksubmit.llm.runner import LLMRunner
from hacksubmit.models import GeneratedContent


class ScriptedRunner:
    """Returns queued responses and records every request."""

    def __init__(self, *responses: str) -> None:
        self.responses = list(responses)
        self.requests = []

    def __call__(self, request):
        self.requests.append(request)
        return self.responses.pop(0)


def _generator(*responses: str, structured_output: bool = True):
    scripted = ScriptedRunner(*responses)
    runner = LLMRunner("test-model", runner=scripted)
    return ContentGenerator(runner, structured_output=structured_output), scripted


def test_extract_json_object_ignores_surrounding_prose() -> None:
    raw = 'Sure! Here is the JSON:\n{"a": 1, "nested": {"b": [1, 2]}}\nHope this helps.'

    assert extract_json_object(raw) == {"a": 1, "nested": {"b": [1, 2]}}


def test_extract_json_object_strips_control_characters() -> None:
    raw = '{"readmeContent": "line one\nline two\ttabbed"}'

    assert extract_json_object(raw) == {"readmeContent": "line oneline twotabbed"}


def test_extract_json_object_requires_braces() -> None:
    with pytest.raises(ContentParseError):
        extract_json_object("no object here")


def test_extract_json_object_rejects_invalid_json() -> None:
    with pytest.raises(ContentParseError):
        extract_json_object("{not: valid}")


def test_generate_returns_structured_fields() -> None:
    generator, scripted = _generator(
        '{"projectName":"X","briefDescription":"Y","readmeContent":"Z"}',
        "  A detailed description.  \n",
    )

    content = generator.generate("- Functions: foo, bar")

    assert content == GeneratedContent(
        project_name="X",
        brief_description="Y",
        readme="Z",
        detailed_description="A detailed description.",
    )
    readme_request, description_request = scripted.requests
    assert readme_request.json_mode is True
    assert "- Functions: foo, bar" in readme_request.prompt
    assert readme_request.system == prompts.README_SYSTEM_PROMPT
    assert description_request.json_mode is False
    assert "- Functions: foo, bar" in description_request.prompt


def test_generate_trims_only_surrounding_whitespace() -> None:
    generator, _ = _generator(
        '{"projectName":"  My  App ","briefDescription":"\\n Does things. ","readmeContent":"# Title\\n\\nBody\\n"}',
        "desc",
    )

    content = generator.generate("summary")

    assert content.project_name == "My  App"
    assert content.brief_description == "Does things."
    assert content.readme == "# Title\n\nBody"


def test_generate_fails_when_fields_are_missing() -> None:
    generator, _ = _generator('{"projectName":"X"}', "unused")

    with pytest.raises(ContentParseError):
        generator.generate("summary")


def test_generate_fails_without_json() -> None:
    generator, scripted = _generator("I cannot help with that.", "unused")

    with pytest.raises(ContentParseError):
        generator.generate("summary")
    assert len(scripted.requests) == 1


def test_detailed_description_falls_back_when_empty() -> None:
    generator, _ = _generator("")

    assert generator.create_detailed_description("summary") == prompts.NO_DETAILED_DESCRIPTION


def test_plain_mode_derives_name_and_brief_description() -> None:
    generator, scripted = _generator(
        "# README\n",
        "Submits projects automatically. It also drafts text.",
        structured_output=False,
    )

    content = generator.generate(
        "summary", repo_url="https://github.com/henrikkv/hackathon-submit.git"
    )

    assert content.project_name == "hackathon-submit"
    assert content.brief_description == "Submits projects automatically."
    assert content.readme == "# README"
    assert all(request.json_mode is False for request in scripted.requests)


def test_video_script_uses_project_details() -> None:
    generator, scripted = _generator("  Scene 1: the dashboard.  ")
    content = GeneratedContent("Demo", "brief", "readme", "It does a lot.")

    script = generator.create_video_script(content)

    assert script == "Scene 1: the dashboard."
    assert "Demo" in scripted.requests[0].prompt
    assert "It does a lot." in scripted.requests[0].prompt


@pytest.mark.parametrize(
    ("url", "expected"),
    [
        ("https://github.com/org/repo", "repo"),
        ("https://github.com/org/repo.git/", "repo"),
        ("git@github.com:org/tool.git", "tool"),
    ],
)
def test_project_name_from_url(url: str, expected: str) -> None:
    assert project_name_from_url(url) == expected


def test_first_sentence_handles_single_sentence() -> None:
    assert first_sentence("  Only one sentence  ") == "Only one sentence"
    assert first_sentence("") == ""
