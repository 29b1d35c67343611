"""
Unit Tests - Event Model and Classifiers
"""
import pytest

from conftest import make_event
from game_balance.models.events import (
    EventAction,
    is_clear,
    is_fail,
    is_first_clear,
    is_repeat_play,
    is_try,
    is_voluntary_exit,
)


class TestClassifiers:
    """Tests for the action classifiers"""

    @pytest.mark.parametrize("action", [a.value for a in EventAction])
    def test_exactly_one_class(self, action):
        """Every action belongs to exactly one of try, clear and fail"""
        event = make_event(action)

        assert [is_try(event), is_clear(event), is_fail(event)].count(True) == 1

    def test_first_clear_is_clear(self):
        """A first clear counts as a clear"""
        event = make_event("clearIsFirst")

        assert is_first_clear(event)
        assert is_clear(event)

    def test_first_fail_is_fail(self):
        """A first fail counts as a fail"""
        assert is_fail(make_event("failIsFirst"))

    def test_plain_clear_is_not_first_clear(self):
        assert not is_first_clear(make_event("clear"))

    def test_voluntary_exit_requires_fail(self):
        """Exit type on a non-fail event is not a voluntary exit"""
        fail = make_event("fail", exit_type="voluntary_exit")
        clear = make_event("clear", exit_type="voluntary_exit")

        assert is_voluntary_exit(fail)
        assert not is_voluntary_exit(clear)

    def test_other_exit_type_is_not_voluntary(self):
        assert not is_voluntary_exit(make_event("fail", exit_type="timeout"))

    def test_repeat_play_flag(self):
        assert is_repeat_play(make_event("clear", is_repeat_play=True))
        assert not is_repeat_play(make_event("clear", is_repeat_play=False))
        assert not is_repeat_play(make_event("clear"))

    def test_stage_id_is_label(self):
        assert make_event("try", "3005").stage_id == "3005"
