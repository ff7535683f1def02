"""
LLM completion client - Claude (Anthropic SDK) or OpenAI (REST)
"""
import json
import logging
import re
from typing import Any, Optional

import anthropic
import requests

from seo_writer.config import (
    ANTHROPIC_API_KEY,
    CLAUDE_MODEL,
    LLM_MAX_TOKENS,
    LLM_PROVIDER,
    LLM_TIMEOUT,
    OPENAI_API_KEY,
    OPENAI_MODEL,
)
from seo_writer.errors import NetworkError, PreconditionError, SchemaError, UpstreamError

logger = logging.getLogger(__name__)

OPENAI_CHAT_URL = "https://api.openai.com/v1/chat/completions"


class LLMClient:
    """
    Single-call completion client.
    Exactly one HTTP round trip per call; failures are mapped onto the
    NetworkError / UpstreamError / SchemaError taxonomy and never retried.
    """

    def __init__(
        self,
        provider: Optional[str] = None,
        openai_api_key: Optional[str] = None,
        anthropic_api_key: Optional[str] = None,
    ):
        self.openai_api_key = OPENAI_API_KEY if openai_api_key is None else openai_api_key
        self.anthropic_api_key = ANTHROPIC_API_KEY if anthropic_api_key is None else anthropic_api_key
        self.provider = provider or LLM_PROVIDER

        # Determine which provider to use
        if self.provider == "claude" and self.anthropic_api_key:
            self.active_provider = "claude"
        elif self.openai_api_key:
            self.active_provider = "openai"
        elif self.anthropic_api_key:
            self.active_provider = "claude"
        else:
            self.active_provider = None

    def complete(self, system: str, user: str, temperature: float = 0.7, json_mode: bool = False) -> str:
        """
        Run one chat completion and return the text of the first choice.

        Args:
            system: System prompt
            user: User prompt
            temperature: Sampling temperature
            json_mode: Ask the provider for a JSON object when it supports it

        Returns:
            Completion text ("" when the provider returned no content)
        """
        if not self.active_provider:
            raise PreconditionError("No LLM API key configured. Please set OPENAI_API_KEY or ANTHROPIC_API_KEY.")

        if self.active_provider == "claude":
            return self._call_claude(system, user, temperature)
        return self._call_openai(system, user, temperature, json_mode)

    def _call_claude(self, system: str, user: str, temperature: float) -> str:
        """Call Claude API"""
        client = anthropic.Anthropic(api_key=self.anthropic_api_key, timeout=LLM_TIMEOUT, max_retries=0)
        try:
            message = client.messages.create(
                model=CLAUDE_MODEL,
                max_tokens=LLM_MAX_TOKENS,
                system=system,
                temperature=temperature,
                messages=[{"role": "user", "content": user}],
            )
        except anthropic.APIConnectionError as e:
            logger.warning("Claude request failed: %s", e)
            raise NetworkError(f"Could not reach Claude API: {e}") from e
        except anthropic.APIStatusError as e:
            logger.warning("Claude returned HTTP %s", e.status_code)
            raise UpstreamError(f"Claude API error ({e.status_code})", status_code=e.status_code, body=str(e)) from e

        if not message.content:
            return ""
        return getattr(message.content[0], "text", "") or ""

    def _call_openai(self, system: str, user: str, temperature: float, json_mode: bool) -> str:
        """Call OpenAI API"""
        payload = {
            "model": OPENAI_MODEL,
            "messages": [
                {"role": "system", "content": system},
                {"role": "user", "content": user},
            ],
            "temperature": temperature,
        }
        if json_mode:
            payload["response_format"] = {"type": "json_object"}

        try:
            response = requests.post(
                OPENAI_CHAT_URL,
                headers={
                    "Authorization": f"Bearer {self.openai_api_key}",
                    "Content-Type": "application/json",
                },
                json=payload,
                timeout=LLM_TIMEOUT,
            )
        except requests.exceptions.RequestException as e:
            logger.warning("OpenAI request failed: %s", e)
            raise NetworkError(f"Could not reach OpenAI API: {e}") from e

        if not response.ok:
            logger.warning("OpenAI returned HTTP %s", response.status_code)
            raise UpstreamError(
                f"OpenAI API error ({response.status_code})",
                status_code=response.status_code,
                body=response.text,
            )

        try:
            result = response.json()
            return result["choices"][0]["message"]["content"] or ""
        except (ValueError, KeyError, IndexError, TypeError) as e:
            raise SchemaError(f"Unexpected OpenAI response shape: {e}") from e


def parse_json_response(response_text: str) -> Any:
    """Parse JSON from LLM response, tolerating a surrounding code fence"""
    # Try direct parse
    try:
        return json.loads(response_text)
    except (TypeError, ValueError):
        pass

    # Try to extract from markdown code blocks
    json_match = re.search(r'```(?:json)?\s*(\{.*?\})\s*```', response_text or "", re.DOTALL)
    if not json_match:
        # Try to find JSON object
        json_match = re.search(r'(\{.*\})', response_text or "", re.DOTALL)

    if json_match:
        try:
            return json.loads(json_match.group(1))
        except ValueError as e:
            raise SchemaError(f"Could not parse JSON from LLM response: {e}") from e

    raise SchemaError("Could not parse JSON from LLM response")


def get_llm_client() -> LLMClient:
    """Get LLM client instance"""
    return LLMClient()
