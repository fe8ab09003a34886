"""Priority scoring for saved ideas.

A transparent linear heuristic: novelty and length reward substantive
content, usage and recency reward ideas that see real use, and starring or
pinning lets the user push an idea up directly. Each term is clamped to
``[0, max]`` before summing so no single signal dominates.
"""

from __future__ import annotations

import math
from datetime import UTC, datetime

from magic_ideas.config import DEFAULT_CONFIG, OrganizerConfig
from magic_ideas.models import (
    REHEARSAL_TYPES,
    VISUAL_TYPES,
    Idea,
    PriorityBreakdown,
    UsageContext,
    as_utc,
)
from magic_ideas.text import idea_text, tokenize

NOVELTY_MAX = 25.0
LENGTH_MAX = 20.0
USAGE_MAX = 25.0
USAGE_PER_SHOW = 8.0
RECENCY_MAX = 15.0
STARRED_BONUS = 10.0
PINNED_BONUS = 6.0
VISUAL_BIAS = 6.0
REHEARSAL_BIAS = 4.0


def _clamp(value: float, upper: float) -> float:
    return max(0.0, min(upper, value))


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def days_since(then: datetime, now: datetime) -> float:
    """Whole-and-fractional days from ``then`` to ``now``; never negative."""
    delta = as_utc(now) - as_utc(then)
    return max(0.0, delta.total_seconds() / 86400.0)


def type_bias(idea_type: str) -> float:
    kind = idea_type.strip().lower()
    if kind in VISUAL_TYPES:
        return VISUAL_BIAS
    if kind in REHEARSAL_TYPES:
        return REHEARSAL_BIAS
    return 0.0


def score_breakdown(
    idea: Idea,
    usage: UsageContext | None = None,
    now: datetime | None = None,
    config: OrganizerConfig | None = None,
) -> PriorityBreakdown:
    """Compute every priority term for one idea.

    Args:
        idea: The idea to score.
        usage: Usage signals; all-defaults when None.
        now: Reference time for recency; current UTC time when None.
        config: Tokenizer settings; defaults when None.

    Returns:
        PriorityBreakdown with each clamped term, the rounded total and
        short human-readable reasons.
    """
    cfg = config or DEFAULT_CONFIG
    usage = usage or UsageContext()
    reference = now or datetime.now(tz=UTC)

    distinct = len(
        set(
            tokenize(
                idea_text(idea),
                min_length=cfg.tokenizer.min_token_length,
                max_tokens=cfg.tokenizer.max_tokens,
            )
        )
    )
    novelty = _clamp(distinct / 2.0, NOVELTY_MAX)
    length = _clamp(math.sqrt(len(idea.content)) / 2.0, LENGTH_MAX)
    usage_term = _clamp(usage.used_in_count * USAGE_PER_SHOW, USAGE_MAX)

    recency = 0.0
    if usage.last_opened_at is not None:
        days = days_since(usage.last_opened_at, reference)
        recency = _clamp(RECENCY_MAX / (1.0 + days), RECENCY_MAX)

    starred = STARRED_BONUS if usage.is_starred else 0.0
    pinned = PINNED_BONUS if usage.is_pinned else 0.0
    bias = type_bias(idea.type)

    total = _round_half_up(novelty + length + usage_term + recency + starred + pinned + bias)

    reasons: list[str] = []
    if usage.used_in_count:
        reasons.append(f"used in {usage.used_in_count} show(s)")
    if starred:
        reasons.append("starred")
    if pinned:
        reasons.append("pinned")
    if recency >= RECENCY_MAX / 2:
        reasons.append("opened recently")
    if novelty >= NOVELTY_MAX:
        reasons.append("rich vocabulary")
    if bias:
        reasons.append(f"{idea.type} bonus")

    return PriorityBreakdown(
        novelty=novelty,
        length=length,
        usage=usage_term,
        recency=recency,
        starred=starred,
        pinned=pinned,
        type_bias=bias,
        total=total,
        reasons=reasons,
    )


def priority_score(
    idea: Idea,
    usage: UsageContext | None = None,
    now: datetime | None = None,
    config: OrganizerConfig | None = None,
) -> int:
    """Return the rounded priority score, roughly within ``[0, 100]``."""
    return score_breakdown(idea, usage, now=now, config=config).total
