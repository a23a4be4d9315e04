# llm_client.py
from __future__ import annotations
import logging
from typing import Optional

from openai import OpenAI, OpenAIError

from config import CompletionSettings
from errors import UpstreamUnavailable

LOG = logging.getLogger("llm_client")

SYSTEM_PROMPT = (
    "You are a career coach and ATS resume expert. "
    "You MUST respond with a single JSON object only, no markdown, no explanation."
)


class CompletionClient:
    """Thin wrapper over the OpenAI SDK pointed at an OpenAI-compatible endpoint.

    The SDK client is created lazily so the app can start without a
    credential; the first ``complete`` call then fails with UpstreamUnavailable.
    """

    def __init__(self, settings: CompletionSettings, client: Optional[OpenAI] = None):
        self.settings = settings
        self._client = client

    def _get_client(self) -> OpenAI:
        if self._client is None:
            if not self.settings.configured:
                raise UpstreamUnavailable(
                    "The analysis service is not configured: OPENROUTER_API_KEY or OPENAI_API_KEY must be set."
                )
            self._client = OpenAI(
                base_url=self.settings.base_url,
                api_key=self.settings.api_key,
                timeout=self.settings.timeout,
                max_retries=self.settings.max_retries,
            )
        return self._client

    def complete(self, prompt: str) -> str:
        client = self._get_client()
        LOG.info("Calling LLM model=%s, prompt length=%d", self.settings.model, len(prompt))
        try:
            completion = client.chat.completions.create(
                model=self.settings.model,
                messages=[
                    {"role": "system", "content": SYSTEM_PROMPT},
                    {"role": "user", "content": prompt},
                ],
            )
        except OpenAIError as e:
            LOG.error("LLM call failed: %s", e)
            raise UpstreamUnavailable(
                f"The analysis service could not be reached: {e.__class__.__name__}. Please try again later."
            ) from e

        content = completion.choices[0].message.content if completion.choices else None
        if not content:
            LOG.error("LLM returned an empty completion")
            raise UpstreamUnavailable("The analysis service returned an empty response. Please try again later.")
        LOG.info("LLM response length=%d chars", len(content))
        LOG.debug("Raw LLM response snippet: %s...", content[:200])
        return content
