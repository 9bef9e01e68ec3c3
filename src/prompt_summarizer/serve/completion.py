"""Chat-completions client for OpenAI-compatible APIs."""
from __future__ import annotations
import logging
from typing import Any

import httpx

from prompt_summarizer.common.errors import CompletionAPIError
from prompt_summarizer.common.templates import GenerationConfig

LOGGER = logging.getLogger("prompt_summarizer.serve.completion")

DEFAULT_MODEL = "gpt-4"
DEFAULT_TEMPERATURE = 0.7
DEFAULT_MAX_TOKENS = 150
DEFAULT_SYSTEM_PROMPT = "You are a helpful assistant that generates concise summaries."


class CompletionClient:
    """
    Issues single chat-completion calls.

    One instance is shared by all requests; the underlying ``httpx.Client``
    is thread-safe and must be released with :meth:`close`.

    Args:
        api_key: Bearer credential for the API.
        base_url: API root, e.g. ``https://api.openai.com/v1``.
        system_prompt: System turn sent with every call.
        timeout: HTTP timeout in seconds.
        transport: Optional httpx transport (tests use ``httpx.MockTransport``).
    """

    def __init__(
        self,
        api_key: str | None,
        base_url: str = "https://api.openai.com/v1",
        system_prompt: str = DEFAULT_SYSTEM_PROMPT,
        timeout: float = 60.0,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.system_prompt = system_prompt
        headers = {"Authorization": f"Bearer {api_key}"} if api_key else {}
        self._client = httpx.Client(
            base_url=base_url,
            headers=headers,
            timeout=timeout,
            transport=transport,
        )

    def generate(self, prompt: str, config: GenerationConfig | None = None) -> str:
        """
        Generate a completion for ``prompt``.

        Raises:
            CompletionAPIError: The API answered with an error or an
                unexpected body.
            httpx.HTTPError: Transport failure, propagated as-is.
        """
        config = config or GenerationConfig()
        payload: dict[str, Any] = {
            "model": config.model if config.model is not None else DEFAULT_MODEL,
            "messages": [
                {"role": "system", "content": self.system_prompt},
                {"role": "user", "content": prompt},
            ],
            "temperature": (
                config.temperature if config.temperature is not None else DEFAULT_TEMPERATURE
            ),
            "max_tokens": config.max_tokens if config.max_tokens is not None else DEFAULT_MAX_TOKENS,
        }

        r = self._client.post("chat/completions", json=payload)
        if r.is_error:
            raise _api_error(r)

        try:
            content = r.json()["choices"][0]["message"]["content"]
        except (ValueError, KeyError, IndexError, TypeError) as e:
            raise CompletionAPIError(
                "Malformed completion response", status_code=r.status_code
            ) from e
        if not isinstance(content, str):
            raise CompletionAPIError("Completion response has no text content", status_code=r.status_code)
        return content

    def close(self) -> None:
        self._client.close()


def _api_error(r: httpx.Response) -> CompletionAPIError:
    """Build an error from the provider's ``{"error": {...}}`` body."""
    try:
        body = r.json()
    except ValueError:
        body = None
    err = body.get("error") if isinstance(body, dict) else None
    if not isinstance(err, dict):
        return CompletionAPIError(
            f"Completion API returned HTTP {r.status_code}", status_code=r.status_code
        )
    LOGGER.debug("Completion API error body: %s", err)
    return CompletionAPIError(
        err.get("message") or f"Completion API returned HTTP {r.status_code}",
        status_code=r.status_code,
        error_type=err.get("type"),
        code=err.get("code"),
    )
