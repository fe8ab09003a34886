"""Greedy cluster assignment for the organization view.

Each idea lands in exactly one cluster. The key is picked with a fixed
precedence: the idea's first tag (as the user entered it), then its
declared type, then the most frequent keyword of its text.
"""

from __future__ import annotations

from collections.abc import Sequence

from magic_ideas.config import DEFAULT_CONFIG, OrganizerConfig
from magic_ideas.models import Cluster, Idea
from magic_ideas.text import dominant_keyword, idea_text, tokenize

TAG_PREFIX = "tag:"
TYPE_PREFIX = "type:"
KEYWORD_PREFIX = "kw:"
FALLBACK_KEYWORD = "misc"


def cluster_key(idea: Idea, config: OrganizerConfig | None = None) -> str:
    """Return the single cluster key for an idea."""
    if idea.tags:
        return TAG_PREFIX + idea.tags[0]
    if idea.type:
        return TYPE_PREFIX + idea.type
    cfg = config or DEFAULT_CONFIG
    tokens = tokenize(
        idea_text(idea),
        min_length=cfg.tokenizer.min_token_length,
        max_tokens=cfg.tokenizer.max_tokens,
    )
    return KEYWORD_PREFIX + (dominant_keyword(tokens) or FALLBACK_KEYWORD)


def cluster_label(key: str) -> str:
    """Human label: ``Type: X`` for type keys, ``Theme: X`` otherwise."""
    if key.startswith(TYPE_PREFIX):
        return f"Type: {key[len(TYPE_PREFIX):]}"
    for prefix in (TAG_PREFIX, KEYWORD_PREFIX):
        if key.startswith(prefix):
            return f"Theme: {key[len(prefix):]}"
    return f"Theme: {key}"


def clusterize(
    ideas: Sequence[Idea],
    config: OrganizerConfig | None = None,
) -> list[Cluster]:
    """Group ideas by cluster key.

    Returns:
        Clusters sorted by member count descending; equal sizes keep the
        order in which their key was first seen.
    """
    members: dict[str, list[str]] = {}
    for idea in ideas:
        members.setdefault(cluster_key(idea, config), []).append(idea.id)

    clusters = [
        Cluster(key=key, label=cluster_label(key), idea_ids=ids)
        for key, ids in members.items()
    ]
    clusters.sort(key=lambda c: len(c.idea_ids), reverse=True)
    return clusters
