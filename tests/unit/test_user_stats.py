"""
Unit Tests - User-Stage Statistics
"""
import pytest

from conftest import make_event
from game_balance.analytics import calculate_user_stage_stats


class TestCalculateUserStageStats:
    """Tests for calculate_user_stage_stats"""

    def test_user_counts(self, two_stage_events):
        stats = {s.stage_id: s for s in calculate_user_stage_stats(two_stage_events)}

        stage = stats["2001"]
        assert stage.unique_users == 3
        assert stage.total_tries == 5
        assert stage.total_attempts == 5
        assert stage.total_clears == 2
        assert stage.total_fails == 3
        assert stage.users_cleared == 2
        assert stage.users_failed == 2
        assert stage.users_with_voluntary_exit == 2
        assert stage.users_with_repeat_play == 0

    def test_two_clear_rates(self, two_stage_events):
        """User clear rate and per-outcome clear probability differ"""
        stage = {s.stage_id: s for s in calculate_user_stage_stats(two_stage_events)}["2001"]

        assert stage.user_clear_rate == pytest.approx(200 / 3)
        assert stage.clear_probability == pytest.approx(40.0)
        assert stage.average_attempts_per_user == pytest.approx(5 / 3)

    def test_second_stage(self, two_stage_events):
        stage = {s.stage_id: s for s in calculate_user_stage_stats(two_stage_events)}["2002"]

        assert stage.unique_users == 2
        assert stage.user_clear_rate == pytest.approx(100.0)
        assert stage.clear_probability == pytest.approx(200 / 3)
        assert stage.average_attempts_per_user == pytest.approx(1.5)

    def test_attempts_ignore_try_logging(self):
        events = [make_event("try", user_id="u1") for _ in range(4)] + [make_event("clear", user_id="u1")]

        stage = calculate_user_stage_stats(events)[0]

        assert stage.total_tries == 4
        assert stage.total_attempts == 1

    def test_anonymous_events_ignored(self):
        events = [
            make_event("clear", "2001", "u1"),
            make_event("fail", "2001", last_level=2),
            make_event("fail", "2002", last_level=2),
        ]

        stats = calculate_user_stage_stats(events)

        assert [s.stage_id for s in stats] == ["2001"]
        assert stats[0].total_fails == 0

    def test_repeat_play_users(self):
        events = [
            make_event("clear", user_id="u1", is_repeat_play=True),
            make_event("clear", user_id="u1", is_repeat_play=True),
            make_event("clear", user_id="u2"),
        ]

        assert calculate_user_stage_stats(events)[0].users_with_repeat_play == 1
