"""Streaks and the consistency heatmap."""
from focusflow.utils.dates import date_range, is_valid_date


class TestRecordCompletion:

    def test_first_completion(self, activity, alice):
        tracker = activity.record_completion(alice.id, "2024-05-01")
        assert tracker.total_solved == 1
        assert tracker.current_streak == 1
        assert tracker.heatmap == {"2024-05-01": 1}

    def test_consecutive_days_extend_streak(self, activity, alice):
        for day in ["2024-05-01", "2024-05-02", "2024-05-03"]:
            tracker = activity.record_completion(alice.id, day)
        assert tracker.current_streak == 3
        assert tracker.max_streak == 3

    def test_same_day_keeps_streak(self, activity, alice):
        activity.record_completion(alice.id, "2024-05-01")
        tracker = activity.record_completion(alice.id, "2024-05-01")
        assert tracker.current_streak == 1
        assert tracker.total_solved == 2
        assert tracker.heatmap["2024-05-01"] == 2

    def test_gap_resets_streak_but_keeps_max(self, activity, alice):
        activity.record_completion(alice.id, "2024-05-01")
        activity.record_completion(alice.id, "2024-05-02")
        tracker = activity.record_completion(alice.id, "2024-05-05")
        assert tracker.current_streak == 1
        assert tracker.max_streak == 2


class TestHeatmap:

    def test_zero_filled(self, activity, alice):
        activity.record_completion(alice.id, "2024-05-02")
        cells = activity.heatmap(alice.id, "2024-05-03", 3)
        assert cells == [
            {"date": "2024-05-01", "count": 0},
            {"date": "2024-05-02", "count": 1},
            {"date": "2024-05-03", "count": 0},
        ]

    def test_date_helpers(self):
        assert date_range("2024-03-01", 2) == ["2024-02-29", "2024-03-01"]
        assert is_valid_date("2024-02-29")
        assert not is_valid_date("2024-02-30")
        assert not is_valid_date("05/01/2024")
