"""Single entry point that runs every organization heuristic over a library."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from datetime import UTC, datetime
from typing import Any

from pydantic import ValidationError

from magic_ideas.clustering import clusterize
from magic_ideas.config import DEFAULT_CONFIG, OrganizerConfig
from magic_ideas.models import Idea, OrganizationResult, UsageContext
from magic_ideas.similarity import find_duplicates
from magic_ideas.tagging import suggest_tags

logger = logging.getLogger(__name__)


def coerce_ideas(raw_ideas: Iterable[Any] | None) -> list[Idea]:
    """Turn raw records into ``Idea`` models, skipping non-records."""
    ideas: list[Idea] = []
    for position, raw in enumerate(raw_ideas or []):
        if isinstance(raw, Idea):
            ideas.append(raw)
            continue
        if not isinstance(raw, Mapping):
            logger.warning("Skipping idea record %d: not an object", position)
            continue
        try:
            ideas.append(Idea.model_validate(dict(raw)))
        except ValidationError as exc:
            logger.warning("Skipping idea record %d: %s", position, exc)
    return ideas


def coerce_usage(raw_usage: Mapping[Any, Any] | None) -> dict[str, UsageContext]:
    """Normalise a usage mapping; unreadable entries fall back to defaults."""
    if not isinstance(raw_usage, Mapping):
        return {}
    usage: dict[str, UsageContext] = {}
    for key, value in raw_usage.items():
        if isinstance(value, UsageContext):
            usage[str(key)] = value
        elif isinstance(value, Mapping):
            usage[str(key)] = UsageContext.model_validate(dict(value))
        else:
            usage[str(key)] = UsageContext()
    return usage


def tag_vocabulary(ideas: Iterable[Idea]) -> list[str]:
    """Every tag in the library, first-seen order, no repeats."""
    return list(dict.fromkeys(tag for idea in ideas for tag in idea.tags))


def organize(
    ideas: Iterable[Any] | None,
    usage_by_id: Mapping[Any, Any] | None = None,
    *,
    now: datetime | None = None,
    config: OrganizerConfig | None = None,
) -> OrganizationResult:
    """Cluster, de-duplicate and tag an idea library in one pass.

    Pure and total: inputs are never mutated, identical inputs (with the
    same ``now``) give identical results, and malformed records are read
    with default values instead of raising.

    Args:
        ideas: ``Idea`` models or raw mappings, in display order.
        usage_by_id: ``UsageContext`` (or mapping) keyed by idea id.
        now: Reference time for recency; current UTC time when None.
        config: Engine settings; defaults when None.

    Returns:
        A freshly built OrganizationResult.
    """
    cfg = config or DEFAULT_CONFIG
    reference = now or datetime.now(tz=UTC)
    library = coerce_ideas(ideas)
    usage = coerce_usage(usage_by_id)

    clusters = clusterize(library, config=cfg)
    duplicates = find_duplicates(library, config=cfg)
    suggestions = suggest_tags(
        library,
        tag_vocabulary(library),
        usage,
        now=reference,
        config=cfg,
    )

    logger.debug(
        "Organized %d ideas: %d clusters, %d duplicate pairs, %d tag suggestions",
        len(library),
        len(clusters),
        len(duplicates),
        len(suggestions),
    )
    return OrganizationResult(
        clusters=clusters,
        duplicates=duplicates,
        tag_suggestions=suggestions,
    )
