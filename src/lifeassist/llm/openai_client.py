"""OpenAI Chat Completions client: one blocking request per call."""

from __future__ import annotations

import logging

log = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://api.openai.com"


class AssistantError(Exception):
    """Base error for a failed assistant request."""


class MissingAPIKeyError(AssistantError):
    """Raised before any network call when no API key is configured."""


class ChatAPIError(AssistantError):
    """HTTP, network, or malformed-response failure from the API."""


def build_user_prompt(prompt: str, context: str = "") -> str:
    """Prefix the prompt with the context block when there is one."""
    return f"{context}\n\n{prompt}" if context else prompt


class ChatCompletionClient:
    """Wrapper around the OpenAI Chat Completions HTTP API.

    No retry and no streaming: each complete() is a single POST that either
    returns the first choice's text or raises ChatAPIError.
    """

    def __init__(
        self,
        api_key: str = "",
        model: str = "gpt-4o-mini",
        config: dict | None = None,
    ) -> None:
        config = config or {}
        self._api_key = api_key
        self._model = model
        self._base_url = (config.get("base_url") or DEFAULT_BASE_URL).rstrip("/")
        # None means wait as long as the server takes
        self._timeout = config.get("timeout")

    @property
    def model(self) -> str:
        return self._model

    @property
    def base_url(self) -> str:
        return self._base_url

    @property
    def endpoint(self) -> str:
        return f"{self._base_url}/v1/chat/completions"

    def is_configured(self) -> bool:
        return bool(self._api_key)

    def complete(
        self,
        system_prompt: str,
        user_prompt: str,
        context: str = "",
        model: str | None = None,
    ) -> str:
        """Send a system prompt and a user prompt (with optional context).

        Args:
            system_prompt: Instruction for the system role.
            user_prompt: The user's text.
            context: Text placed before the user's text, separated by a blank line.
            model: Override the default model for this call.

        Returns:
            The first choice's message content, stripped.

        Raises:
            MissingAPIKeyError: If no API key is configured.
            ChatAPIError: If the request fails or the response is malformed.
        """
        if not self._api_key:
            raise MissingAPIKeyError(
                "OpenAI API Key not set. Please configure it in the settings "
                "(ala config set-key)."
            )

        import httpx

        use_model = model or self._model
        log.debug("POST %s model=%s", self.endpoint, use_model)
        try:
            resp = httpx.post(
                self.endpoint,
                headers={
                    "Authorization": f"Bearer {self._api_key}",
                    "Content-Type": "application/json",
                },
                json={
                    "model": use_model,
                    "messages": [
                        {"role": "system", "content": system_prompt},
                        {"role": "user", "content": build_user_prompt(user_prompt, context)},
                    ],
                },
                timeout=self._timeout,
            )
            resp.raise_for_status()
            data = resp.json()
        except httpx.HTTPStatusError as e:
            raise ChatAPIError(
                f"OpenAI API Error: {e.response.status_code} {_error_message(e.response)}"
            ) from e
        except httpx.HTTPError as e:
            raise ChatAPIError(f"OpenAI API unreachable: {e}") from e
        except ValueError as e:
            raise ChatAPIError(f"OpenAI API returned invalid JSON: {e}") from e

        return _first_choice_text(data)


def _error_message(response) -> str:
    """Pull error.message out of an error response body."""
    try:
        body = response.json()
    except ValueError:
        return "Unknown error"
    if isinstance(body, dict):
        error = body.get("error")
        if isinstance(error, dict) and error.get("message"):
            return str(error["message"])
    return "Unknown error"


def _first_choice_text(data) -> str:
    try:
        content = data["choices"][0]["message"]["content"]
    except (KeyError, IndexError, TypeError):
        content = None
    if not isinstance(content, str):
        log.error("Unexpected API response structure: %r", data)
        raise ChatAPIError("Unexpected API response structure from OpenAI.")
    return content.strip()
