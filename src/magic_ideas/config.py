"""Organizer configuration loaded from .magic-ideas.toml and env vars.

Loading order: defaults → TOML file → env vars. The defaults reproduce
the engine's published constants, so ``OrganizerConfig()`` is what every
engine function uses when no config is passed.
"""

from __future__ import annotations

import logging
import os
import tomllib
from pathlib import Path

from pydantic import BaseModel, Field, ValidationError

logger = logging.getLogger(__name__)

CONFIG_FILENAME = ".magic-ideas.toml"
CONFIG_SEARCH_PATHS = [
    Path(CONFIG_FILENAME),
    Path.home() / ".config" / "magic-ideas" / "config.toml",
]


class TokenizerConfig(BaseModel):
    """[tokenizer] section."""

    min_token_length: int = Field(default=3, ge=1)
    max_tokens: int = Field(default=200, ge=1)


class DuplicatesConfig(BaseModel):
    """[duplicates] section."""

    threshold: float = Field(default=0.82, ge=0.0, le=1.0)
    max_pairs: int = Field(default=12, ge=0)
    min_length_ratio: float = Field(default=0.5, ge=0.0, le=1.0)


class TagsConfig(BaseModel):
    """[tags] section."""

    max_ideas: int = Field(default=40, ge=0)
    max_suggestions: int = Field(default=4, ge=0)
    top_keywords: int = Field(default=6, ge=0)
    stopwords: list[str] = Field(
        default_factory=lambda: ["with", "from", "this", "that", "your"]
    )
    extra_stopwords: list[str] = Field(default_factory=list)
    high_value_threshold: int = Field(default=70, ge=0)
    repertoire_min_uses: int = Field(default=2, ge=1)

    @property
    def stopword_set(self) -> frozenset[str]:
        return frozenset(w.lower() for w in [*self.stopwords, *self.extra_stopwords])


class OrganizerConfig(BaseModel):
    """Top-level configuration for the organization engine."""

    tokenizer: TokenizerConfig = Field(default_factory=TokenizerConfig)
    duplicates: DuplicatesConfig = Field(default_factory=DuplicatesConfig)
    tags: TagsConfig = Field(default_factory=TagsConfig)


DEFAULT_CONFIG = OrganizerConfig()


def load_config(path: str | Path | None = None) -> OrganizerConfig:
    """Build the organizer config from a TOML file plus env overrides.

    With no ``path``, the first existing entry of ``CONFIG_SEARCH_PATHS``
    is used (project file, then the per-user file). A missing, unparsable
    or out-of-range file is logged and replaced by the defaults; the
    ``MAGIC_IDEAS_*`` env vars are applied either way.
    """
    if path is not None:
        candidates = [Path(path)]
    else:
        candidates = [p for p in CONFIG_SEARCH_PATHS if p.exists()][:1]

    config = OrganizerConfig()
    for toml_path in candidates:
        if not toml_path.exists():
            logger.warning("Config file not found: %s", toml_path)
            continue
        data = _read_toml(toml_path)
        if not data:
            continue
        try:
            config = OrganizerConfig.model_validate(data)
        except ValidationError as exc:
            logger.warning("Invalid config in %s, using defaults: %s", toml_path, exc)
            continue
        logger.info("Loaded config from %s", toml_path)

    return _apply_env_vars(config)


def _read_toml(toml_path: Path) -> dict[str, object]:
    try:
        with open(toml_path, "rb") as f:
            return tomllib.load(f)
    except (tomllib.TOMLDecodeError, OSError) as exc:
        logger.warning("Failed to parse %s: %s", toml_path, exc)
        return {}


def _apply_env_vars(config: OrganizerConfig) -> OrganizerConfig:
    """Overlay MAGIC_IDEAS_* variables; a bad value leaves its field alone."""
    overrides: list[tuple[str, str, str, object]] = []

    env_mapping: dict[str, tuple[str, str]] = {
        "MAGIC_IDEAS_DUPLICATE_THRESHOLD": ("duplicates", "threshold"),
        "MAGIC_IDEAS_MAX_DUPLICATES": ("duplicates", "max_pairs"),
        "MAGIC_IDEAS_MAX_TAG_IDEAS": ("tags", "max_ideas"),
    }
    for env_var, (section, field) in env_mapping.items():
        value = os.environ.get(env_var)
        if value is not None:
            overrides.append((env_var, section, field, value.strip()))

    stopwords_raw = os.environ.get("MAGIC_IDEAS_STOPWORDS")
    if stopwords_raw is not None:
        extra = [w.strip().lower() for w in stopwords_raw.split(",") if w.strip()]
        overrides.append(
            ("MAGIC_IDEAS_STOPWORDS", "tags", "extra_stopwords",
             [*config.tags.extra_stopwords, *extra])
        )

    for env_var, section, field, value in overrides:
        data = config.model_dump()
        data[section][field] = value
        try:
            config = OrganizerConfig.model_validate(data)
        except ValidationError:
            logger.warning("Ignoring invalid %s=%r", env_var, value)

    return config
