"""Claude API integration for recipe generation and modification.

Single request/response per call: no streaming, no retries. Failures are
surfaced to the caller as UpstreamUnavailable.
"""

import json
import logging
import re

from anthropic import Anthropic, APIError

from .config import get_settings
from .errors import RecipeValidationError, UpstreamUnavailable

logger = logging.getLogger(__name__)

# Models sometimes wrap JSON in a markdown fence despite instructions
_CODE_FENCE = re.compile(r"^```(?:json)?\s*(.*?)\s*```$", re.DOTALL)


# =============================================================================
# Logging
# =============================================================================


def _log_llm(message: str, level: str = "info"):
    """Log completion calls with container log visibility."""
    print(f"[LLM] {message}", flush=True)
    if level == "debug":
        logger.debug(message)
    elif level == "warning":
        logger.warning(message)
    elif level == "error":
        logger.error(message)
    else:
        logger.info(message)


# =============================================================================
# Response Helpers
# =============================================================================


def _extract_text_from_response(response) -> str:
    """Concatenate the text blocks of a Claude response."""
    parts = [block.text for block in response.content if hasattr(block, "text")]
    if not parts:
        block_types = [type(b).__name__ for b in response.content]
        _log_llm(f"No text in response, block types: {block_types}", "warning")
    return "".join(parts)


def parse_json_object(text: str) -> dict:
    """Parse the JSON object in a completion.

    Tolerates a surrounding markdown code fence and prose before/after the
    outermost braces.

    Raises:
        RecipeValidationError: If no JSON object can be parsed.
    """
    text = text.strip()
    fenced = _CODE_FENCE.match(text)
    if fenced:
        text = fenced.group(1)

    try:
        payload = json.loads(text)
    except json.JSONDecodeError:
        start, end = text.find("{"), text.rfind("}")
        if start == -1 or end <= start:
            raise RecipeValidationError("Completion did not contain a JSON object", payload=text)
        try:
            payload = json.loads(text[start : end + 1])
        except json.JSONDecodeError as e:
            raise RecipeValidationError(f"Completion JSON could not be parsed: {e}", payload=text)

    if not isinstance(payload, dict):
        raise RecipeValidationError("Completion JSON was not an object", payload=payload)
    return payload


# =============================================================================
# Client
# =============================================================================


class CompletionClient:
    """Thin wrapper over the Anthropic Messages API."""

    def __init__(self, client: Anthropic | None = None, settings=None):
        self.settings = settings or get_settings()
        self.client = client or Anthropic(api_key=self.settings.anthropic_api_key)

    def _create(self, system: str, prompt: str, temperature: float, max_tokens: int, model: str):
        try:
            response = self.client.messages.create(
                model=model,
                max_tokens=max_tokens,
                timeout=self.settings.llm_timeout_seconds,
                temperature=temperature,
                system=system,
                messages=[{"role": "user", "content": prompt}],
            )
        except APIError as e:
            _log_llm(f"Completion failed: {type(e).__name__}: {e}", "error")
            raise UpstreamUnavailable("Completion service unavailable") from e

        _log_llm(
            f"model={response.model} stop_reason={response.stop_reason} "
            f"in={response.usage.input_tokens} out={response.usage.output_tokens}"
        )
        return response

    def complete_json(
        self, system: str, prompt: str, temperature: float, model: str | None = None
    ) -> dict:
        """Request a completion and parse it as a JSON object.

        Raises:
            UpstreamUnavailable: If the API call fails.
            RecipeValidationError: If the reply is not a JSON object.
        """
        response = self._create(
            system,
            prompt,
            temperature,
            self.settings.generation_max_tokens,
            model or self.settings.generation_model,
        )
        return parse_json_object(_extract_text_from_response(response))

    def complete_text(
        self,
        system: str,
        prompt: str,
        temperature: float,
        max_tokens: int | None = None,
        model: str | None = None,
    ) -> str:
        """Request a free-text completion.

        Raises:
            UpstreamUnavailable: If the API call fails.
        """
        response = self._create(
            system,
            prompt,
            temperature,
            max_tokens or self.settings.suggestion_max_tokens,
            model or self.settings.suggestion_model,
        )
        return _extract_text_from_response(response).strip()


_client: CompletionClient | None = None


def get_completion_client() -> CompletionClient:
    """FastAPI dependency returning the process-wide completion client."""
    global _client
    if _client is None:
        _client = CompletionClient()
    return _client
