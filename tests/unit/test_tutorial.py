"""
Unit Tests - Tutorial Funnel
"""
import pytest

from game_balance.config.settings import TutorialSettings
from game_balance.tutorial import (
    TUTORIAL_STEPS,
    TutorialEvent,
    TutorialFunnelData,
    build_tutorial_report,
    calculate_tutorial_funnel,
    calculate_tutorial_step_stats,
    describe_step,
    filter_funnel_outliers,
    filter_unique_user_events,
    get_tutorial_step_ids,
    get_tutorial_unique_user_count,
    list_tutorial_files,
    parse_tutorial_rows,
    short_step_description,
    tutorial_completion_rate,
    tutorial_phases,
)


def tap(step, user=None, action="tap"):
    return TutorialEvent(step_number=step, category=f"tutorial_{step} (App)", action=action, user_id=user)


def funnel_row(step, users, rate=0.0):
    return TutorialFunnelData(
        step_id=step,
        step_number=int(step),
        unique_users=users,
        dropoff_count=0,
        dropoff_rate=rate,
        cumulative_dropoff_rate=0.0,
    )


@pytest.fixture
def tutorial_events():
    """Ten players; two leave after step 04, one after step 05"""
    events = [tap("01", f"u{i}") for i in range(10)]
    events += [tap("04", f"u{i}") for i in range(10)]
    events += [tap("04", "u0")]
    events += [tap("05", f"u{i}") for i in range(8)]
    events += [tap("06", f"u{i}") for i in range(7)]
    events += [tap("07", f"u{i}") for i in range(7)]
    return events


class TestParseTutorialRows:
    """Tests for tutorial row parsing"""

    def test_extracts_step_number(self):
        rows = [
            {"Event Category": "tutorial_02 (App)", "Event Action": "tap", "User ID": "u1"},
            {"Event Category": "Tutorial_15", "Event Action": "tap", "User ID": ""},
            {"Event Category": "stage (App)", "Event Action": "clear", "User ID": "u1"},
            {"Event Category": None, "Event Action": "tap", "User ID": "u1"},
        ]

        events = parse_tutorial_rows(rows)

        assert [e.step_number for e in events] == ["02", "15"]
        assert events[0].user_id == "u1"
        assert events[1].user_id is None


class TestFilterUniqueUserEvents:
    """Tests for per-(user, step) deduplication"""

    def test_keep_first(self):
        events = [tap("04", "u1", "a"), tap("04", "u1", "b"), tap("05", "u1", "c")]

        kept = filter_unique_user_events(events)

        assert [e.action for e in kept] == ["a", "c"]

    def test_keep_last(self):
        events = [tap("04", "u1", "a"), tap("04", "u1", "b"), tap("05", "u1", "c")]

        kept = filter_unique_user_events(events, keep_first=False)

        assert [e.action for e in kept] == ["b", "c"]

    def test_anonymous_events_all_kept(self):
        events = [tap("04"), tap("04"), tap("04", "u1"), tap("04", "u1")]

        assert len(filter_unique_user_events(events)) == 3


class TestTutorialStats:
    """Tests for step stats and funnel"""

    def test_step_stats(self, tutorial_events):
        stats = calculate_tutorial_step_stats(tutorial_events)

        assert [s.step_id for s in stats] == ["01", "04", "05", "06", "07"]
        assert stats[1].total_events == 11
        assert stats[1].unique_users == 10

    def test_event_count_proxy_without_users(self):
        stats = calculate_tutorial_step_stats([tap("02"), tap("02"), tap("03")])

        assert [s.unique_users for s in stats] == [2, 1]

    def test_numeric_step_order(self):
        events = [tap("10", "u1"), tap("9", "u1"), tap("02", "u1")]

        assert get_tutorial_step_ids(events) == ["02", "9", "10"]

    def test_funnel(self, tutorial_events):
        funnel = calculate_tutorial_funnel(tutorial_events)

        assert [r.unique_users for r in funnel] == [10, 10, 8, 7, 7]
        assert funnel[2].dropoff_count == 2
        assert funnel[2].dropoff_rate == pytest.approx(20.0)
        assert funnel[3].dropoff_rate == pytest.approx(12.5)
        assert funnel[4].cumulative_dropoff_rate == pytest.approx(30.0)
        assert funnel[0].dropoff_rate == 0.0

    def test_unique_user_count(self, tutorial_events):
        assert get_tutorial_unique_user_count(tutorial_events) == 10
        assert get_tutorial_unique_user_count([tap("02"), tap("03")]) == 2


class TestFilterFunnelOutliers:
    """Tests for the funnel outlier filter"""

    def test_outliers_dropped(self):
        funnel = [
            funnel_row("01", 100),
            funnel_row("04", 100),
            funnel_row("05", 90, 10.0),
            funnel_row("06", 2, 97.8),
            funnel_row("07", 80),
            funnel_row("08", 78, 2.5),
            funnel_row("23", 78),
            funnel_row("63", 5),
        ]

        kept = filter_funnel_outliers(funnel, TutorialSettings())

        assert [r.step_id for r in kept] == ["04", "05", "08"]
        assert tutorial_completion_rate(kept) == pytest.approx(78.0)

    def test_first_row_always_kept(self):
        funnel = [funnel_row("04", 50, 99.0), funnel_row("05", 49, 2.0)]

        kept = filter_funnel_outliers(funnel, TutorialSettings())

        assert [r.step_id for r in kept] == ["04", "05"]

    def test_completion_rate_empty(self):
        assert tutorial_completion_rate([]) == 0.0


class TestBuildTutorialReport:
    """Tests for build_tutorial_report"""

    def test_report(self, tutorial_events):
        report = build_tutorial_report(tutorial_events, config=TutorialSettings())

        assert report.total_events == 42
        assert report.unique_users == 10
        assert [r.step_id for r in report.filtered_funnel] == ["04", "05", "06", "07"]
        assert [r.step_id for r in report.danger_steps] == ["05", "06"]
        assert report.completion_rate == pytest.approx(70.0)
        assert report.filtered_out_steps == 0

    def test_without_dedupe(self, tutorial_events):
        report = build_tutorial_report(tutorial_events, dedupe=False, config=TutorialSettings())

        assert report.total_events == 43
        assert report.step_stats[1].total_events == 11

    def test_special_steps_reported(self):
        events = [tap("04", "u1"), tap("63", "u1")]

        report = build_tutorial_report(events, config=TutorialSettings())

        assert [s.step_id for s in report.special_steps] == ["63"]
        assert [r.step_id for r in report.filtered_funnel] == ["04"]

    def test_to_dict(self, tutorial_events):
        data = build_tutorial_report(tutorial_events, config=TutorialSettings()).to_dict()

        assert data["funnel"][0]["step_id"] == "01"


class TestTutorialSteps:
    """Tests for the step catalogue"""

    def test_catalogue_complete(self):
        assert len(TUTORIAL_STEPS) == 63
        assert list(TUTORIAL_STEPS)[0] == "01"
        assert list(TUTORIAL_STEPS)[-1] == "63"

    def test_describe_step(self):
        assert describe_step("24") == "24. First tap on unclaimed button"
        assert describe_step("04") == "4. First battle card pick 1"
        assert describe_step("99") == "Tutorial 99"

    @pytest.mark.parametrize("step_id,expected", [
        ("01", "1. Text1"),
        ("05", "5. First battle card2"),
        ("40", "40. Second battle card2"),
        ("27", "27. hero menu"),
        ("26", "26. Clear treasure chest..."),
        ("99", "99"),
    ])
    def test_short_description(self, step_id, expected):
        assert short_step_description(step_id) == expected

    def test_phases(self):
        phases = tutorial_phases()

        assert len(phases) == 1
        assert phases[0]["phase"] == "Initial launch"
        assert [s.number for s in phases[0]["steps"]] == list(range(1, 64))


class TestListTutorialFiles:
    """Tests for tutorial export discovery"""

    def test_newest_first(self, tmp_path):
        older = "game_2025-01-01_00_00_00+00_00-2025-01-07_23_59_59+00_00_a@b.com_1_x.csv"
        newer = "game_2025-02-01_00_00_00+00_00-2025-02-07_23_59_59+00_00_a@b.com_2_y.csv"
        for name in (older, newer, "random.csv"):
            (tmp_path / name).write_text("Event Category\n")

        files = list_tutorial_files(tmp_path)

        assert [f.file_name for f in files] == [newer, older]
        assert files[0].display_name == "2025-02-01 ~ 2025-02-07"

    def test_missing_directory(self, tmp_path):
        assert list_tutorial_files(tmp_path / "missing") == []
