"""Adapter around the OpenAI chat completions API."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Optional

from openai import OpenAI

from ..config import LLMConfig


@dataclass
class LLMRequest:
    """Represents one chat completion request."""

    prompt: str
    system: Optional[str]
    model: str
    temperature: Optional[float]
    max_tokens: Optional[int]
    json_mode: bool


class LLMRunner:
    """Executes prompts against the configured text model."""

    DEFAULT_MODEL = "gpt-4o"

    def __init__(
        self,
        model: str | None = None,
        *,
        client: OpenAI | None = None,
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None,
        runner: Callable[[LLMRequest], str] | None = None,
    ) -> None:
        self.model = model or self.DEFAULT_MODEL
        self.temperature = temperature
        self.max_tokens = max_tokens
        self._client = client
        if runner is not None:
            self._runner = runner
        else:
            if client is None:
                raise ValueError("LLMRunner needs either an OpenAI client or a runner callable.")
            self._runner = self._chat_runner

    @classmethod
    def from_config(cls, config: LLMConfig, client: OpenAI | None = None) -> "LLMRunner":
        if client is None:
            client = OpenAI(
                api_key=config.api_key,
                base_url=config.base_url,
                timeout=config.request_timeout,
                max_retries=0,
            )
        return cls(
            config.model,
            client=client,
            temperature=config.temperature,
            max_tokens=config.max_tokens,
        )

    def run(self, prompt: str, *, system: str | None = None, json_mode: bool = False) -> str:
        """Send the prompt and return the response text (possibly empty)."""
        request = LLMRequest(
            prompt=prompt,
            system=system,
            model=self.model,
            temperature=self.temperature,
            max_tokens=self.max_tokens,
            json_mode=json_mode,
        )
        return self._runner(request)

    def _chat_runner(self, request: LLMRequest) -> str:
        if self._client is None:
            raise RuntimeError("No OpenAI client configured for chat completions.")
        kwargs: dict[str, object] = {
            "model": request.model,
            "messages": self._build_messages(request.system, request.prompt),
        }
        if request.temperature is not None:
            kwargs["temperature"] = request.temperature
        if request.max_tokens is not None:
            kwargs["max_tokens"] = request.max_tokens
        if request.json_mode:
            kwargs["response_format"] = {"type": "json_object"}

        response = self._client.chat.completions.create(**kwargs)
        if not response.choices:
            return ""
        return response.choices[0].message.content or ""

    @staticmethod
    def _build_messages(system: str | None, prompt: str) -> list[dict[str, str]]:
        messages: list[dict[str, str]] = []
        if system:
            messages.append({"role": "system", "content": system})
        messages.append({"role": "user", "content": prompt})
        return messages


__all__ = ["LLMRequest", "LLMRunner"]
