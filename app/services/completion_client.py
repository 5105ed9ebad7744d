"""Thin wrapper around the Anthropic Messages API."""
from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from functools import lru_cache
from typing import Any

from anthropic import Anthropic, APIError

from app.config import get_settings
from app.services.errors import ConfigurationError, UpstreamEmptyResponseError, UpstreamServiceError


logger = logging.getLogger(__name__)

JSON_PREFILL = "{"


@dataclass(frozen=True)
class CompletionOptions:
    """Sampling settings for one kind of request."""

    max_tokens: int = 2048
    temperature: float = 0.7
    force_json: bool = False


# Structured output should not drift; coaching prose can.
DATA_ANALYSIS_OPTIONS = CompletionOptions(max_tokens=2048, temperature=0.3, force_json=True)
INSIGHTS_OPTIONS = CompletionOptions(max_tokens=2048, temperature=0.7)


class CompletionClient:
    """Sends a single-turn prompt to Claude and returns the reply text."""

    def __init__(
        self,
        api_key: str | None,
        model: str,
        client: Any | None = None,
        data_analysis_options: CompletionOptions = DATA_ANALYSIS_OPTIONS,
        insights_options: CompletionOptions = INSIGHTS_OPTIONS,
    ) -> None:
        self.api_key = api_key
        self.model = model
        self.data_analysis_options = data_analysis_options
        self.insights_options = insights_options
        if client is not None:
            self._client = client
        elif api_key:
            self._client = Anthropic(api_key=api_key)
        else:
            self._client = None

    @classmethod
    def from_settings(cls) -> "CompletionClient":
        settings = get_settings()
        return cls(
            api_key=settings.anthropic_api_key,
            model=settings.anthropic_model,
            data_analysis_options=CompletionOptions(
                max_tokens=settings.ai_max_tokens,
                temperature=settings.data_analysis_temperature,
                force_json=True,
            ),
            insights_options=CompletionOptions(
                max_tokens=settings.ai_max_tokens,
                temperature=settings.insights_temperature,
            ),
        )

    @property
    def is_configured(self) -> bool:
        return self._client is not None

    def ensure_configured(self) -> None:
        """Fail before any network call when no credential is available."""
        if not self.is_configured:
            raise ConfigurationError("AI API key is not configured (set ANTHROPIC_API_KEY)")

    async def complete(self, prompt: str, options: CompletionOptions, *, step: int | None = None) -> str:
        """
        Request a completion for ``prompt``.

        When ``options.force_json`` is set the assistant turn is prefilled
        with ``{`` so the model can only continue a JSON object; the brace is
        restored on the returned text.

        Raises:
            ConfigurationError: no API key.
            UpstreamEmptyResponseError: the reply had no text content.
            UpstreamServiceError: the SDK call failed (connection, timeout,
                rejected key, rate limit or server error).
        """
        self.ensure_configured()

        messages: list[dict[str, str]] = [{"role": "user", "content": prompt}]
        if options.force_json:
            messages.append({"role": "assistant", "content": JSON_PREFILL})

        request_payload = {
            "model": self.model,
            "max_tokens": options.max_tokens,
            "temperature": options.temperature,
            "messages": messages,
        }

        logger.debug(
            "Requesting completion | step=%s model=%s temperature=%.1f json=%s prompt_chars=%d",
            step,
            self.model,
            options.temperature,
            options.force_json,
            len(prompt),
        )
        try:
            response = await asyncio.to_thread(self._client.messages.create, **request_payload)
        except APIError as exc:
            logger.warning("Completion request failed | step=%s error=%s", step, exc.message)
            raise UpstreamServiceError(exc.message, step) from exc

        text = self._extract_text(response)
        if not text.strip():
            raise UpstreamEmptyResponseError(step)

        if options.force_json and not text.lstrip().startswith(JSON_PREFILL):
            text = JSON_PREFILL + text
        return text

    @staticmethod
    def _extract_text(response: Any) -> str:
        """Concatenate the text blocks of a Messages API response."""
        blocks = getattr(response, "content", None) or []
        parts = []
        for block in blocks:
            text = getattr(block, "text", None)
            if isinstance(text, str):
                parts.append(text)
        return "".join(parts)


@lru_cache()
def get_completion_client() -> CompletionClient:
    """Process-wide client, built once from settings."""

    return CompletionClient.from_settings()
