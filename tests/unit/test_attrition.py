"""
Unit Tests - Stage and User Attrition
"""
import pytest

from conftest import make_event
from game_balance.analytics import calculate_stage_attrition, calculate_user_attrition
from game_balance.analytics.utils import compute_attrition


class TestComputeAttrition:
    """Tests for the shared attrition helper"""

    def test_first_position_has_no_loss(self):
        steps = compute_attrition([10, 8])

        assert steps[0].drop_count == 0
        assert steps[0].drop_rate == 0.0
        assert steps[0].cumulative_drop_rate == 0.0

    def test_step_and_cumulative_loss(self):
        steps = compute_attrition([10, 8, 2])

        assert [s.drop_count for s in steps] == [0, 2, 6]
        assert steps[2].drop_rate == pytest.approx(75.0)
        assert steps[2].cumulative_drop_count == 8
        assert steps[2].cumulative_drop_rate == pytest.approx(80.0)

    def test_growth_is_not_negative_loss(self):
        steps = compute_attrition([4, 9, 3])

        assert [s.drop_count for s in steps] == [0, 0, 6]
        assert steps[1].cumulative_drop_count == 0
        assert steps[2].cumulative_drop_count == 1

    def test_zero_previous_count(self):
        steps = compute_attrition([0, 0])

        assert steps[1].drop_rate == 0.0

    def test_empty(self):
        assert compute_attrition([]) == []


class TestStageAttrition:
    """Tests for attempt attrition"""

    def test_between_stages(self, two_stage_events):
        rows = calculate_stage_attrition(two_stage_events)

        assert [r.stage_id for r in rows] == ["2001", "2002"]
        assert [r.attempts for r in rows] == [5, 3]
        assert rows[0].attrition_count == 0
        assert rows[1].attrition_count == 2
        assert rows[1].attrition_rate == pytest.approx(40.0)

    def test_numeric_order(self):
        events = [make_event("try", "2100"), make_event("try", "2015"), make_event("try", "2015")]

        rows = calculate_stage_attrition(events)

        assert [r.stage_id for r in rows] == ["2015", "2100"]
        assert rows[1].attrition_count == 1


class TestUserAttrition:
    """Tests for unique-user attrition"""

    def test_quitting_user_counts_as_drop(self, two_stage_events):
        """u3 quits 2001 and never reaches 2002"""
        rows = calculate_user_attrition(two_stage_events)

        assert [r.unique_users for r in rows] == [3, 2]
        assert rows[1].user_attrition_count == 1
        assert rows[1].user_attrition_rate == pytest.approx(100 / 3)
        assert rows[1].cumulative_attrition_rate == pytest.approx(100 / 3)

    def test_cumulative_users_is_running_union(self, two_stage_events):
        extra = [make_event("try", "2003", "u9")]

        rows = calculate_user_attrition(two_stage_events + extra)

        assert [r.cumulative_users for r in rows] == [3, 3, 4]

    def test_events_without_user_ignored(self):
        events = [
            make_event("try", "2001", "u1"),
            make_event("try", "2001"),
            make_event("try", "2002"),
        ]

        rows = calculate_user_attrition(events)

        assert [r.stage_id for r in rows] == ["2001"]
        assert rows[0].unique_users == 1

    def test_more_users_later_is_not_attrition(self):
        events = [
            make_event("try", "2001", "u1"),
            make_event("try", "2002", "u1"),
            make_event("try", "2002", "u2"),
        ]

        rows = calculate_user_attrition(events)

        assert rows[1].user_attrition_count == 0
        assert rows[1].cumulative_attrition_rate == 0.0

    def test_first_row_has_no_attrition(self, two_stage_events):
        first = calculate_user_attrition(two_stage_events)[0]

        assert first.user_attrition_count == 0
        assert first.user_attrition_rate == 0.0
