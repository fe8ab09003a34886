"""Tests for OrganizerConfig, TOML loading and env overrides."""

from pathlib import Path

import pytest
from pydantic import ValidationError

import magic_ideas.config as config_module
from magic_ideas.config import (
    CONFIG_FILENAME,
    DuplicatesConfig,
    OrganizerConfig,
    TagsConfig,
    load_config,
)


@pytest.fixture(autouse=True)
def _isolate(monkeypatch, tmp_path):
    """Keep the real home config and env vars out of every test."""
    monkeypatch.setattr(
        config_module,
        "CONFIG_SEARCH_PATHS",
        [Path(CONFIG_FILENAME), tmp_path / "no-such" / "config.toml"],
    )
    for key in (
        "MAGIC_IDEAS_DUPLICATE_THRESHOLD",
        "MAGIC_IDEAS_MAX_DUPLICATES",
        "MAGIC_IDEAS_MAX_TAG_IDEAS",
        "MAGIC_IDEAS_STOPWORDS",
    ):
        monkeypatch.delenv(key, raising=False)


class TestDefaults:
    def test_duplicates(self):
        cfg = OrganizerConfig()
        assert cfg.duplicates.threshold == 0.82
        assert cfg.duplicates.max_pairs == 12
        assert cfg.duplicates.min_length_ratio == 0.5

    def test_tags(self):
        cfg = OrganizerConfig()
        assert cfg.tags.max_ideas == 40
        assert cfg.tags.max_suggestions == 4
        assert cfg.tags.top_keywords == 6
        assert cfg.tags.high_value_threshold == 70
        assert cfg.tags.repertoire_min_uses == 2
        assert cfg.tags.stopword_set == frozenset({"with", "from", "this", "that", "your"})

    def test_tokenizer(self):
        cfg = OrganizerConfig()
        assert cfg.tokenizer.min_token_length == 3
        assert cfg.tokenizer.max_tokens == 200


class TestLoadConfig:
    def test_load_from_explicit_path(self, tmp_path):
        toml_path = tmp_path / ".magic-ideas.toml"
        toml_path.write_text(
            '[duplicates]\nthreshold = 0.9\n\n[tags]\nextra_stopwords = ["trick"]\n'
        )
        cfg = load_config(toml_path)
        assert cfg.duplicates.threshold == 0.9
        assert cfg.duplicates.max_pairs == 12
        assert "trick" in cfg.tags.stopword_set

    def test_missing_path_returns_defaults(self, tmp_path):
        assert load_config(tmp_path / "nonexistent.toml") == OrganizerConfig()

    def test_invalid_toml_returns_defaults(self, tmp_path):
        toml_path = tmp_path / "broken.toml"
        toml_path.write_text("[duplicates\nthreshold = ")
        assert load_config(toml_path) == OrganizerConfig()

    def test_searches_cwd(self, tmp_path, monkeypatch):
        (tmp_path / ".magic-ideas.toml").write_text("[tags]\nmax_ideas = 10\n")
        monkeypatch.chdir(tmp_path)
        assert load_config().tags.max_ideas == 10

    def test_global_config(self, tmp_path, monkeypatch):
        global_path = tmp_path / "global.toml"
        global_path.write_text("[duplicates]\nmax_pairs = 3\n")
        monkeypatch.setattr(
            config_module, "CONFIG_SEARCH_PATHS", [Path(CONFIG_FILENAME), global_path]
        )
        monkeypatch.chdir(tmp_path)
        assert load_config().duplicates.max_pairs == 3


class TestEnvOverrides:
    def test_numeric_overrides(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        monkeypatch.setenv("MAGIC_IDEAS_DUPLICATE_THRESHOLD", "0.7")
        monkeypatch.setenv("MAGIC_IDEAS_MAX_DUPLICATES", "20")
        monkeypatch.setenv("MAGIC_IDEAS_MAX_TAG_IDEAS", "5")
        cfg = load_config()
        assert cfg.duplicates.threshold == 0.7
        assert cfg.duplicates.max_pairs == 20
        assert cfg.tags.max_ideas == 5

    def test_invalid_value_ignored(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        monkeypatch.setenv("MAGIC_IDEAS_MAX_DUPLICATES", "many")
        assert load_config().duplicates.max_pairs == 12

    def test_stopwords_appended(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        monkeypatch.setenv("MAGIC_IDEAS_STOPWORDS", "Deck, trick,")
        cfg = load_config()
        assert cfg.tags.extra_stopwords == ["deck", "trick"]
        assert "with" in cfg.tags.stopword_set


class TestInvalidValues:
    def test_wrong_type_in_toml_falls_back_to_defaults(self, tmp_path, caplog):
        toml_path = tmp_path / "bad.toml"
        toml_path.write_text('[duplicates]\nthreshold = "high"\n')
        with caplog.at_level("WARNING", logger="magic_ideas.config"):
            cfg = load_config(toml_path)
        assert cfg == OrganizerConfig()
        assert "Invalid config" in caplog.text

    def test_out_of_range_in_toml_falls_back_to_defaults(self, tmp_path):
        toml_path = tmp_path / "bad.toml"
        toml_path.write_text("[tags]\nmax_ideas = -1\n")
        assert load_config(toml_path).tags.max_ideas == 40

    def test_negative_env_value_ignored(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        monkeypatch.setenv("MAGIC_IDEAS_MAX_TAG_IDEAS", "-1")
        monkeypatch.setenv("MAGIC_IDEAS_MAX_DUPLICATES", "3")
        cfg = load_config()
        assert cfg.tags.max_ideas == 40
        assert cfg.duplicates.max_pairs == 3

    def test_threshold_env_out_of_range_ignored(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        monkeypatch.setenv("MAGIC_IDEAS_DUPLICATE_THRESHOLD", "1.5")
        assert load_config().duplicates.threshold == 0.82

    @pytest.mark.parametrize(
        "build",
        [
            lambda: DuplicatesConfig(threshold=1.2),
            lambda: DuplicatesConfig(max_pairs=-1),
            lambda: TagsConfig(max_ideas=-1),
            lambda: TagsConfig(repertoire_min_uses=0),
        ],
    )
    def test_model_bounds(self, build):
        with pytest.raises(ValidationError):
            build()
