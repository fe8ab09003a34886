"""Filtering, sorting and sectioning for the saved-ideas library view."""

from __future__ import annotations

import re
from collections.abc import Iterable, Mapping, Sequence
from datetime import UTC, datetime
from enum import Enum

from magic_ideas.config import OrganizerConfig
from magic_ideas.models import REHEARSAL_TYPES, Idea, UsageContext
from magic_ideas.scoring import priority_score


class SortMode(str, Enum):
    RECENT = "recent"
    TITLE = "title"
    MOST_USED = "most_used"
    LAST_OPENED = "last_opened"
    AI_SCORE = "ai_score"


class LibrarySection(str, Enum):
    SAVED_NOTES = "saved_notes"
    BLUEPRINTS = "blueprints"
    VIDEO_ANALYSES = "video_analyses"
    REHEARSAL_SESSIONS = "rehearsal_sessions"


SECTION_TITLES: dict[LibrarySection, str] = {
    LibrarySection.SAVED_NOTES: "Saved Notes",
    LibrarySection.BLUEPRINTS: "Blueprints",
    LibrarySection.VIDEO_ANALYSES: "Video Analyses",
    LibrarySection.REHEARSAL_SESSIONS: "Rehearsal Sessions",
}

_HEADING_RE = re.compile(r"^#{1,3}\s+(.*)$")


def all_tags(ideas: Iterable[Idea]) -> list[str]:
    """Sorted, unique tags across the library."""
    return sorted({tag for idea in ideas for tag in idea.tags})


def filter_ideas(
    ideas: Iterable[Idea],
    *,
    idea_type: str | None = None,
    tag: str | None = None,
    query: str = "",
) -> list[Idea]:
    """Keep ideas matching the type, the exact tag and the search query.

    The query is a case-insensitive substring match against title,
    content and any tag.
    """
    q = (query or "").strip().lower()
    kept: list[Idea] = []
    for idea in ideas:
        if idea_type and idea.type != idea_type:
            continue
        if tag and tag not in idea.tags:
            continue
        if q and not (
            q in idea.title.lower()
            or q in idea.content.lower()
            or any(q in t.lower() for t in idea.tags)
        ):
            continue
        kept.append(idea)
    return kept


def _epoch(value: datetime | None) -> float | None:
    return value.timestamp() if value is not None else None


def sort_ideas(
    ideas: Iterable[Idea],
    sort_by: SortMode | str = SortMode.RECENT,
    usage_by_id: Mapping[str, UsageContext] | None = None,
    now: datetime | None = None,
    config: OrganizerConfig | None = None,
) -> list[Idea]:
    """Return a new list ordered by ``sort_by``.

    Ideas with no value for the sort field (no creation time, never
    opened) go last. Ties keep input order.
    """
    mode = SortMode(sort_by)
    usage_by_id = usage_by_id or {}
    items = list(ideas)

    def usage_for(idea: Idea) -> UsageContext:
        return usage_by_id.get(idea.id) or UsageContext()

    if mode is SortMode.TITLE:
        return sorted(items, key=lambda i: i.title.lower())
    if mode is SortMode.MOST_USED:
        return sorted(items, key=lambda i: usage_for(i).used_in_count, reverse=True)
    if mode is SortMode.AI_SCORE:
        reference = now or datetime.now(tz=UTC)
        scores = {
            id(i): priority_score(i, usage_for(i), now=reference, config=config)
            for i in items
        }
        return sorted(items, key=lambda i: scores[id(i)], reverse=True)

    if mode is SortMode.LAST_OPENED:
        stamps = {id(i): _epoch(usage_for(i).last_opened_at) for i in items}
    else:
        stamps = {id(i): _epoch(i.created_at) for i in items}
    dated = [i for i in items if stamps[id(i)] is not None]
    undated = [i for i in items if stamps[id(i)] is None]
    dated.sort(key=lambda i: stamps[id(i)], reverse=True)
    return dated + undated


def split_leading_heading(content: str) -> tuple[str | None, str]:
    """Split a leading markdown heading (``#`` to ``###``) off the content.

    Returns:
        ``(heading, rest)``; heading is None when the first non-empty line
        is not a heading, and rest is then the content unchanged.
    """
    lines = (content or "").splitlines()
    first_idx = next((n for n, line in enumerate(lines) if line.strip()), None)
    if first_idx is None:
        return None, ""
    match = _HEADING_RE.match(lines[first_idx].strip())
    if not match:
        return None, content
    rest = "\n".join(lines[:first_idx] + lines[first_idx + 1 :]).lstrip()
    return match.group(1).strip(), rest


def classify_section(idea: Idea) -> LibrarySection:
    """Bucket an idea into one of the library view's sections."""
    if idea.type.lower() in REHEARSAL_TYPES:
        return LibrarySection.REHEARSAL_SESSIONS

    heading, _rest = split_leading_heading(idea.content)
    title = (idea.title or heading or "").lower()
    tags = [t.lower() for t in idea.tags]

    if "blueprint" in title or any("blueprint" in t for t in tags):
        return LibrarySection.BLUEPRINTS
    if (
        ("video" in title and "analysis" in title)
        or any("analysis" in t for t in tags)
        or any("video" in t for t in tags)
    ):
        return LibrarySection.VIDEO_ANALYSES
    return LibrarySection.SAVED_NOTES


def group_sections(ideas: Sequence[Idea]) -> dict[LibrarySection, list[Idea]]:
    """All four sections, in display order, each keeping input order."""
    buckets: dict[LibrarySection, list[Idea]] = {section: [] for section in LibrarySection}
    for idea in ideas:
        buckets[classify_section(idea)].append(idea)
    return buckets
