"""Duplicate detection over the idea library.

Pairs are compared with Jaccard similarity over bag-of-words token sets.
The scan is bounded: content of very different lengths is never compared,
and scanning stops as soon as ``max_pairs`` pairs have been recorded, so
the result is a best-effort surfacing of likely duplicates in input order
rather than an exhaustive report.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Sequence

from magic_ideas.config import DEFAULT_CONFIG, OrganizerConfig
from magic_ideas.models import DuplicatePair, Idea
from magic_ideas.text import idea_text, token_set

logger = logging.getLogger(__name__)


def jaccard(a: frozenset[str] | set[str], b: frozenset[str] | set[str]) -> float:
    """``|A ∩ B| / |A ∪ B|``; 0.0 when either set is empty."""
    if not a or not b:
        return 0.0
    return len(a & b) / len(a | b)


def _round2(value: float) -> float:
    return math.floor(value * 100 + 0.5) / 100


def _normalized_title(idea: Idea) -> str:
    return idea.title.strip().lower()


def _length_mismatch(a: str, b: str, min_ratio: float) -> bool:
    shorter, longer = sorted((len(a), len(b)))
    return shorter < longer * min_ratio


def find_duplicates(
    ideas: Sequence[Idea],
    config: OrganizerConfig | None = None,
) -> list[DuplicatePair]:
    """Find likely duplicate pairs, capped at ``config.duplicates.max_pairs``.

    Identical non-empty titles (case-insensitive, trimmed) short-circuit to
    a score of 1.0 regardless of content. Otherwise both contents must be
    non-empty and of comparable length, and the Jaccard similarity of
    ``title + content`` tokens must reach the threshold.

    Args:
        ideas: Ideas in stable display order.
        config: Thresholds and caps; defaults when None.

    Returns:
        ``DuplicatePair`` list with ``a`` before ``b`` in input order.
    """
    cfg = config or DEFAULT_CONFIG
    dup_cfg = cfg.duplicates
    tok_kwargs = {
        "min_length": cfg.tokenizer.min_token_length,
        "max_tokens": cfg.tokenizer.max_tokens,
    }

    pairs: list[DuplicatePair] = []
    if dup_cfg.max_pairs <= 0:
        return pairs

    token_cache: dict[int, frozenset[str]] = {}

    def tokens_for(index: int) -> frozenset[str]:
        if index not in token_cache:
            token_cache[index] = token_set(idea_text(ideas[index]), **tok_kwargs)
        return token_cache[index]

    compared = 0
    for i in range(len(ideas)):
        first = ideas[i]
        for j in range(i + 1, len(ideas)):
            second = ideas[j]

            title_a = _normalized_title(first)
            if title_a and title_a == _normalized_title(second):
                pairs.append(DuplicatePair(a=first.id, b=second.id, score=1.0))
            elif (
                first.content
                and second.content
                and not _length_mismatch(
                    first.content, second.content, dup_cfg.min_length_ratio
                )
            ):
                compared += 1
                sim = jaccard(tokens_for(i), tokens_for(j))
                if sim >= dup_cfg.threshold:
                    pairs.append(DuplicatePair(a=first.id, b=second.id, score=_round2(sim)))

            if len(pairs) >= dup_cfg.max_pairs:
                logger.debug(
                    "Duplicate scan stopped at %d pairs (%d comparisons)",
                    len(pairs),
                    compared,
                )
                return pairs

    logger.debug("Duplicate scan found %d pairs (%d comparisons)", len(pairs), compared)
    return pairs
