"""Per-idea tag suggestions from dominant keywords and priority labels."""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from datetime import datetime

from magic_ideas.config import DEFAULT_CONFIG, OrganizerConfig
from magic_ideas.models import Idea, TagSuggestion, UsageContext
from magic_ideas.scoring import priority_score
from magic_ideas.text import idea_text, tokenize, top_keywords

HIGH_VALUE_LABEL = "high-value"
REPERTOIRE_LABEL = "repertoire"


def _canonical_vocabulary(vocabulary: Iterable[str]) -> dict[str, str]:
    """Map lowercase tag -> first-seen casing."""
    canon: dict[str, str] = {}
    for tag in vocabulary:
        if isinstance(tag, str) and tag.strip():
            canon.setdefault(tag.lower(), tag)
    return canon


def _suggest_for(
    idea: Idea,
    usage: UsageContext,
    canon: dict[str, str],
    now: datetime | None,
    cfg: OrganizerConfig,
) -> list[str]:
    tag_cfg = cfg.tags
    stopwords = tag_cfg.stopword_set
    own = {t.lower() for t in idea.tags}

    tokens = tokenize(
        idea_text(idea),
        min_length=cfg.tokenizer.min_token_length,
        max_tokens=cfg.tokenizer.max_tokens,
    )
    keywords = [
        canon.get(tok, tok)
        for tok in top_keywords(tokens, tag_cfg.top_keywords)
        if tok not in stopwords and tok not in own
    ]

    labels: list[str] = []
    if priority_score(idea, usage, now=now, config=cfg) >= tag_cfg.high_value_threshold:
        labels.insert(0, HIGH_VALUE_LABEL)
    if usage.used_in_count >= tag_cfg.repertoire_min_uses:
        labels.insert(0, REPERTOIRE_LABEL)

    suggested: list[str] = []
    seen: set[str] = set()
    for tag in [*labels, *keywords]:
        if len(suggested) >= tag_cfg.max_suggestions:
            break
        folded = tag.lower()
        if folded in seen or folded in own:
            continue
        seen.add(folded)
        suggested.append(tag)
    return suggested


def suggest_tags(
    ideas: Sequence[Idea],
    vocabulary: Iterable[str] = (),
    usage_by_id: Mapping[str, UsageContext] | None = None,
    now: datetime | None = None,
    config: OrganizerConfig | None = None,
) -> list[TagSuggestion]:
    """Suggest up to ``max_suggestions`` new tags for the leading ideas.

    Heuristic labels (``repertoire``, ``high-value``) come first, then
    keyword candidates. A keyword that matches an existing vocabulary tag
    takes that tag's casing. Tags the idea already has are never proposed.

    Args:
        ideas: Ideas in display order; only the first ``max_ideas`` are used.
        vocabulary: Tags already in use across the library.
        usage_by_id: Usage signals keyed by idea id.
        now: Reference time for the priority score's recency term.
        config: Limits and stopwords; defaults when None.

    Returns:
        One ``TagSuggestion`` per idea with at least one suggestion.
    """
    cfg = config or DEFAULT_CONFIG
    usage_by_id = usage_by_id or {}
    canon = _canonical_vocabulary(vocabulary)

    results: list[TagSuggestion] = []
    for idea in ideas[: cfg.tags.max_ideas]:
        usage = usage_by_id.get(idea.id) or UsageContext()
        suggested = _suggest_for(idea, usage, canon, now, cfg)
        if suggested:
            results.append(TagSuggestion(idea_id=idea.id, suggested=suggested))
    return results
