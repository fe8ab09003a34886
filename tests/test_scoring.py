"""Tests for priority scoring."""

from datetime import UTC, datetime, timedelta

import pytest

from magic_ideas.models import Idea, UsageContext
from magic_ideas.scoring import (
    days_since,
    priority_score,
    score_breakdown,
    type_bias,
)

NOW = datetime(2026, 3, 1, 12, 0, tzinfo=UTC)


def _make_idea(content: str = "", idea_type: str = "text", title: str = "") -> Idea:
    return Idea(id="idea-1", type=idea_type, title=title, content=content)


class TestTerms:
    def test_empty_idea_scores_zero(self):
        assert priority_score(_make_idea(), now=NOW) == 0

    def test_length_and_novelty(self):
        # one 400-char token: novelty 0.5, length sqrt(400)/2 = 10
        breakdown = score_breakdown(_make_idea("x" * 400), now=NOW)
        assert breakdown.novelty == 0.5
        assert breakdown.length == 10.0
        assert breakdown.total == 11

    def test_length_is_capped(self):
        breakdown = score_breakdown(_make_idea("y" * 10000), now=NOW)
        assert breakdown.length == 20.0

    def test_novelty_is_capped(self):
        content = " ".join(f"word{n}" for n in range(80))
        assert score_breakdown(_make_idea(content), now=NOW).novelty == 25.0

    def test_usage_term(self):
        idea = _make_idea()
        assert score_breakdown(idea, UsageContext(used_in_count=3), now=NOW).usage == 24.0
        assert score_breakdown(idea, UsageContext(used_in_count=4), now=NOW).usage == 25.0

    def test_recency_term(self):
        idea = _make_idea()
        just_now = UsageContext(last_opened_at=NOW)
        two_days = UsageContext(last_opened_at=NOW - timedelta(days=2))
        assert score_breakdown(idea, just_now, now=NOW).recency == 15.0
        assert score_breakdown(idea, two_days, now=NOW).recency == 5.0

    def test_recency_without_last_opened(self):
        assert score_breakdown(_make_idea(), UsageContext(), now=NOW).recency == 0.0

    def test_future_last_opened_counts_as_now(self):
        usage = UsageContext(last_opened_at=NOW + timedelta(days=3))
        assert score_breakdown(_make_idea(), usage, now=NOW).recency == 15.0

    def test_starred_and_pinned(self):
        usage = UsageContext(is_starred=True, is_pinned=True)
        breakdown = score_breakdown(_make_idea(), usage, now=NOW)
        assert breakdown.starred == 10.0
        assert breakdown.pinned == 6.0
        assert breakdown.total == 16
        assert "starred" in breakdown.reasons
        assert "pinned" in breakdown.reasons

    @pytest.mark.parametrize(
        ("idea_type", "expected"),
        [
            ("image", 6.0),
            ("visual", 6.0),
            ("visual-blueprint", 6.0),
            ("rehearsal", 4.0),
            ("rehearsal-transcript", 4.0),
            ("text", 0.0),
            ("", 0.0),
        ],
    )
    def test_type_bias(self, idea_type, expected):
        assert type_bias(idea_type) == expected


class TestDaysSince:
    def test_naive_timestamps_read_as_utc(self):
        assert days_since(datetime(2026, 2, 28, 12, 0), NOW) == 1.0

    def test_never_negative(self):
        assert days_since(NOW + timedelta(hours=5), NOW) == 0.0


class TestProperties:
    def test_usage_monotonic(self):
        idea = _make_idea("The ambitious card routine with a signed card." * 3)
        scores = [
            priority_score(idea, UsageContext(used_in_count=n), now=NOW) for n in range(8)
        ]
        assert scores == sorted(scores)

    def test_used_and_starred_beats_plain(self):
        idea = _make_idea("m" * 250 + " " + "n" * 249)
        assert len(idea.content) == 500
        boosted = priority_score(
            idea, UsageContext(used_in_count=3, is_starred=True), now=NOW
        )
        plain = priority_score(idea, UsageContext(), now=NOW)
        assert boosted > plain

    def test_missing_usage_equals_default_usage(self):
        idea = _make_idea("Linking rings routine")
        assert priority_score(idea, None, now=NOW) == priority_score(
            idea, UsageContext(), now=NOW
        )

    def test_deterministic(self):
        idea = _make_idea("Coin matrix under four cards", idea_type="image")
        usage = UsageContext(used_in_count=1, last_opened_at=NOW - timedelta(days=1))
        assert score_breakdown(idea, usage, now=NOW) == score_breakdown(idea, usage, now=NOW)
