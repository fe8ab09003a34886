"""Data models for the idea library and the organization results."""

from __future__ import annotations

import math
from datetime import UTC, datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field, model_validator


class IdeaType(str, Enum):
    TEXT = "text"
    IMAGE = "image"
    REHEARSAL = "rehearsal"


# Type strings that count as the visual/blueprint category.
VISUAL_TYPES = frozenset({IdeaType.IMAGE.value, "visual", "visual-blueprint", "blueprint"})
REHEARSAL_TYPES = frozenset({IdeaType.REHEARSAL.value, "rehearsal-transcript"})

# Numeric timestamps above this are epoch milliseconds, not seconds.
_EPOCH_MS_CUTOFF = 1e11


def as_utc(value: datetime) -> datetime:
    """Attach UTC to naive datetimes, convert aware ones."""
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


def coerce_timestamp(value: Any) -> datetime | None:
    """Best-effort conversion of a stored timestamp into an aware datetime.

    Accepts datetimes, ISO-8601 strings and epoch numbers (seconds or
    milliseconds). Anything unreadable becomes ``None``.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, datetime):
        try:
            return as_utc(value)
        except OverflowError:
            return None
    if isinstance(value, (int, float)):
        if not math.isfinite(value):
            return None
        seconds = value / 1000.0 if abs(value) > _EPOCH_MS_CUTOFF else float(value)
        try:
            return datetime.fromtimestamp(seconds, tz=UTC)
        except (OverflowError, OSError, ValueError):
            return None
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        try:
            return as_utc(datetime.fromisoformat(text.replace("Z", "+00:00")))
        except (OverflowError, ValueError):
            return None
    return None


def _coerce_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    return str(value)


def _coerce_count(value: Any) -> int:
    """Non-negative integer, with anything non-finite or negative as 0."""
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, str):
        try:
            value = float(value.strip())
        except ValueError:
            return 0
    if isinstance(value, (int, float)) and math.isfinite(value) and value > 0:
        return int(value)
    return 0


def _coerce_flag(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in ("true", "1", "yes")
    return bool(value)


def _first_present(data: dict[str, Any], *keys: str) -> Any:
    for key in keys:
        if data.get(key) is not None:
            return data[key]
    return None


class Idea(BaseModel):
    """A single saved artifact in the personal library.

    ``content`` is free text; for images it may be a data URI and for
    rehearsals a serialized transcript. The engine reads it as opaque text.
    """

    id: str
    type: str = ""
    title: str = ""
    content: str = ""
    tags: list[str] = Field(default_factory=list)
    created_at: datetime | None = None

    @model_validator(mode="before")
    @classmethod
    def _normalize(cls, data: Any) -> Any:
        """Fill defaults for missing or malformed fields before validation."""
        if not isinstance(data, dict):
            return data
        raw_tags = data.get("tags")
        tags: list[str] = []
        if isinstance(raw_tags, (list, tuple)):
            tags = [t for t in raw_tags if isinstance(t, str) and t.strip()]
        return {
            "id": _coerce_text(data.get("id")),
            "type": _coerce_text(data.get("type")).strip(),
            "title": _coerce_text(data.get("title")),
            "content": _coerce_text(data.get("content")),
            "tags": tags,
            "created_at": coerce_timestamp(
                _first_present(data, "created_at", "createdAt", "timestamp")
            ),
        }


class UsageContext(BaseModel):
    """Per-idea usage signals, computed outside the engine."""

    used_in_count: int = 0
    last_opened_at: datetime | None = None
    is_starred: bool = False
    is_pinned: bool = False

    @model_validator(mode="before")
    @classmethod
    def _normalize(cls, data: Any) -> Any:
        """Accept camelCase keys and clamp bad counts to zero."""
        if not isinstance(data, dict):
            return data
        return {
            "used_in_count": _coerce_count(
                _first_present(data, "used_in_count", "usedInCount")
            ),
            "last_opened_at": coerce_timestamp(
                _first_present(data, "last_opened_at", "lastOpenedAt")
            ),
            "is_starred": _coerce_flag(_first_present(data, "is_starred", "isStarred")),
            "is_pinned": _coerce_flag(_first_present(data, "is_pinned", "isPinned")),
        }


class Cluster(BaseModel):
    """A named group of ideas sharing one cluster key."""

    key: str
    label: str
    idea_ids: list[str] = Field(default_factory=list)


class DuplicatePair(BaseModel):
    a: str
    b: str
    score: float


class TagSuggestion(BaseModel):
    idea_id: str
    suggested: list[str] = Field(default_factory=list)


class PriorityBreakdown(BaseModel):
    """Every term of a priority score, for showing why an idea ranks high."""

    novelty: float = 0.0
    length: float = 0.0
    usage: float = 0.0
    recency: float = 0.0
    starred: float = 0.0
    pinned: float = 0.0
    type_bias: float = 0.0
    total: int = 0
    reasons: list[str] = Field(default_factory=list)


class OrganizationResult(BaseModel):
    """Output of one ``organize`` run. Never persisted by the engine."""

    clusters: list[Cluster] = Field(default_factory=list)
    duplicates: list[DuplicatePair] = Field(default_factory=list)
    tag_suggestions: list[TagSuggestion] = Field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        """Render the JSON shape consumed by the UI (camelCase keys)."""
        return {
            "clusters": [
                {"key": c.key, "label": c.label, "ideaIds": list(c.idea_ids)}
                for c in self.clusters
            ],
            "duplicates": [
                {"a": d.a, "b": d.b, "score": d.score} for d in self.duplicates
            ],
            "tagSuggestions": [
                {"ideaId": s.idea_id, "suggested": list(s.suggested)}
                for s in self.tag_suggestions
            ],
        }
