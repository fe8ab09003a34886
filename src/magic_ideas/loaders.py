"""Read idea libraries and usage files from JSON, write results back."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from magic_ideas.errors import LibraryLoadError
from magic_ideas.models import Idea, OrganizationResult, UsageContext
from magic_ideas.organizer import coerce_ideas, coerce_usage

logger = logging.getLogger(__name__)


def _read_json(path: Path) -> Any:
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError as exc:
        raise LibraryLoadError(path, "file not found") from exc
    except json.JSONDecodeError as exc:
        raise LibraryLoadError(path, f"invalid JSON ({exc.msg})") from exc
    except OSError as exc:
        raise LibraryLoadError(path, str(exc)) from exc


def load_ideas(path: str | Path) -> list[Idea]:
    """Load ideas from a JSON list or an object with an ``ideas`` list.

    Raises:
        LibraryLoadError: The file is missing, not JSON, or has no list.
    """
    path = Path(path)
    data = _read_json(path)
    if isinstance(data, dict):
        data = data.get("ideas")
    if not isinstance(data, list):
        raise LibraryLoadError(path, "expected a list of ideas")
    ideas = coerce_ideas(data)
    logger.info("Loaded %d ideas from %s", len(ideas), path)
    return ideas


def load_usage(path: str | Path) -> dict[str, UsageContext]:
    """Load per-idea usage context from a JSON object keyed by idea id.

    Raises:
        LibraryLoadError: The file is missing, not JSON, or not an object.
    """
    path = Path(path)
    data = _read_json(path)
    if not isinstance(data, dict):
        raise LibraryLoadError(path, "expected an object keyed by idea id")
    return coerce_usage(data)


def write_result(result: OrganizationResult, path: str | Path) -> Path:
    """Write the result's JSON rendering to ``path``."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(
        json.dumps(result.to_dict(), indent=2, ensure_ascii=False) + "\n",
        encoding="utf-8",
    )
    return path
