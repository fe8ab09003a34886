"""Text normalisation and keyword helpers shared by the organizer."""

from __future__ import annotations

import re
from collections import Counter
from typing import Any

from magic_ideas.models import Idea

# Anything that is not a lowercase letter, digit or whitespace splits words.
_NON_WORD_RE = re.compile(r"[^a-z0-9\s]")

# Minimum token length; shorter tokens ("a", "to", "is") are noise.
MIN_TOKEN_LEN = 3

# Hard cap on tokens per text so long transcripts stay cheap.
MAX_TOKENS = 200


def tokenize(
    text: Any,
    *,
    min_length: int = MIN_TOKEN_LEN,
    max_tokens: int = MAX_TOKENS,
) -> list[str]:
    """Lowercase, turn punctuation into spaces, drop short tokens.

    Never raises: ``None`` and non-string input produce ``[]``.
    """
    if not isinstance(text, str) or not text:
        return []
    cleaned = _NON_WORD_RE.sub(" ", text.lower())
    tokens = [tok for tok in cleaned.split() if len(tok) >= min_length]
    return tokens[:max_tokens]


def idea_text(idea: Idea) -> str:
    """Combine title and content into the text every heuristic reads."""
    return f"{idea.title} {idea.content}"


def token_set(text: Any, **kwargs: int) -> frozenset[str]:
    return frozenset(tokenize(text, **kwargs))


def keyword_frequencies(tokens: list[str]) -> Counter[str]:
    """Count tokens; iteration order is first occurrence."""
    return Counter(tokens)


def top_keywords(tokens: list[str], n: int) -> list[str]:
    """Return the ``n`` most frequent tokens, ties broken by first occurrence."""
    freq = keyword_frequencies(tokens)
    # sorted() is stable and Counter keeps insertion order
    ranked = sorted(freq.items(), key=lambda kv: kv[1], reverse=True)
    return [term for term, _count in ranked[:n]]


def dominant_keyword(tokens: list[str]) -> str | None:
    top = top_keywords(tokens, 1)
    return top[0] if top else None
