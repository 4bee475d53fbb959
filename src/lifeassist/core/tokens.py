"""Token estimation using a characters-per-token heuristic."""

from __future__ import annotations

import math

from lifeassist.core.models import TokenStatus

# A bit more conservative than the usual 4 characters per token
CHARS_PER_TOKEN = 3.5

# Combined context + prompt ceiling; leaves room for the system prompt and reply
MAX_CONTEXT_TOKENS = 15000


def estimate_tokens(text: str, chars_per_token: float = CHARS_PER_TOKEN) -> int:
    """Estimate token count as ceil(len / chars_per_token)."""
    if not text:
        return 0
    return math.ceil(len(text) / chars_per_token)


def token_status(
    context: str,
    prompt: str,
    max_tokens: int = MAX_CONTEXT_TOKENS,
    chars_per_token: float = CHARS_PER_TOKEN,
) -> TokenStatus:
    return TokenStatus(
        context_tokens=estimate_tokens(context, chars_per_token),
        prompt_tokens=estimate_tokens(prompt, chars_per_token),
        max_tokens=max_tokens,
    )


def exceeds_limit(
    context: str,
    prompt: str,
    max_tokens: int = MAX_CONTEXT_TOKENS,
    chars_per_token: float = CHARS_PER_TOKEN,
) -> bool:
    """True when the concatenated context and prompt are over the ceiling."""
    return estimate_tokens(context + prompt, chars_per_token) > max_tokens
