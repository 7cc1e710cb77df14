"""Tests for the progress analytics builders."""

from __future__ import annotations

from datetime import date, datetime, timedelta

import pytest

from progress import (
    MOOD_CATEGORIES,
    RANGE_OPTIONS,
    DateWindow,
    build_dashboard,
    build_distribution,
    build_journal_activity,
    build_mood_series,
    compute_average_mood,
    format_day_label,
    has_mood_data,
    parse_journal_day,
    resolve_window,
)

TODAY = date(2026, 3, 10)


def _day(offset: int) -> str:
    return (TODAY + timedelta(days=offset)).isoformat()


def _mood(offset: int, mood: str) -> dict:
    return {"date": _day(offset), "mood": mood}


def _journal(ts: str) -> dict:
    return {"id": ts, "title": "t", "content": "c", "date": ts, "tags": []}


@pytest.fixture()
def week() -> DateWindow:
    return resolve_window("7days", TODAY)


# ---- resolve_window ----


@pytest.mark.parametrize("token,days", sorted(RANGE_OPTIONS.items()))
def test_window_spans_exact_day_count(token, days):
    window = resolve_window(token, TODAY)
    assert window.days == days
    assert window.end_date == TODAY
    assert (window.end_date - window.start_date).days == days - 1


def test_window_ignores_time_of_day():
    late = resolve_window("7days", datetime(2026, 3, 10, 23, 59))
    early = resolve_window("7days", datetime(2026, 3, 10, 0, 1))
    assert late == early
    assert late.start_date == date(2026, 3, 4)


def test_window_unknown_token_raises():
    with pytest.raises(ValueError):
        resolve_window("14days", TODAY)


def test_window_crosses_month_boundary():
    window = resolve_window("7days", date(2026, 3, 2))
    assert window.start_date == date(2026, 2, 24)


# ---- build_mood_series ----


@pytest.mark.parametrize("token", sorted(RANGE_OPTIONS))
def test_mood_series_one_point_per_day(token):
    window = resolve_window(token, TODAY)
    series = build_mood_series([_mood(0, "good")], window)
    dates = [p["date"] for p in series]
    assert len(series) == window.days
    assert dates == sorted(set(dates))
    assert dates[0] == window.start_date.isoformat()
    assert dates[-1] == TODAY.isoformat()


def test_mood_series_scenario(week):
    history = [_mood(-2, "good"), _mood(0, "great")]
    values = [p["value"] for p in build_mood_series(history, week)]
    assert values == [None, None, None, None, 4, None, 5]
    assert compute_average_mood(history, week) == 4.5


def test_mood_series_gaps_are_none_not_zero(week):
    history = [_mood(-6, "awful"), _mood(0, "bad")]
    values = [p["value"] for p in build_mood_series(history, week)]
    assert values[0] == 1
    assert values[-1] == 2
    assert values[1:6] == [None] * 5


def test_mood_series_boundaries(week):
    history = [_mood(-7, "great"), _mood(-6, "good"), _mood(0, "okay"), _mood(1, "bad")]
    values = [p["value"] for p in build_mood_series(history, week)]
    assert values[0] == 4
    assert values[-1] == 3
    assert [v for v in values if v is not None] == [4, 3]


def test_mood_series_duplicate_date_last_wins(week):
    history = [_mood(0, "awful"), _mood(0, "great")]
    assert build_mood_series(history, week)[-1]["value"] == 5


def test_mood_series_skips_malformed_records(week):
    history = [
        {"date": "not-a-date", "mood": "good"},
        {"date": _day(0), "mood": "ecstatic"},
        {"mood": "good"},
        _mood(-1, "okay"),
    ]
    values = [p["value"] for p in build_mood_series(history, week)]
    assert values[-1] is None
    assert values[-2] == 3


def test_mood_series_skips_non_string_moods(week):
    history = [
        {"date": _day(0), "mood": {"x": 1}},
        {"date": _day(-2), "mood": ["good"]},
        _mood(-1, "good"),
    ]
    values = [p["value"] for p in build_mood_series(history, week)]
    assert values[-1] is None
    assert values[-2] == 4
    assert values[-3] is None
    assert compute_average_mood(history, week) == 4.0
    assert sum(b["count"] for b in build_distribution(history, week)) == 1


@pytest.mark.parametrize("raw", ["2026-03-10garbage", "2026-03-10T08:00:00", " 2026-03-10"])
def test_mood_series_rejects_dates_with_trailing_text(week, raw):
    values = [p["value"] for p in build_mood_series([{"date": raw, "mood": "great"}], week)]
    assert values == [None] * 7


def test_mood_series_display_labels(week):
    series = build_mood_series([], week)
    assert series[-1]["display_label"] == "Mar 10"
    assert series[0]["display_label"] == "Mar 4"


def test_mood_series_idempotent(week):
    history = [_mood(-3, "good"), _mood(-1, "bad")]
    assert build_mood_series(history, week) == build_mood_series(history, week)


def test_other_builders_idempotent(week):
    history = [_mood(-3, "good"), _mood(-1, "bad"), _mood(0, "great")]
    journal = [_journal("2026-03-09T10:00:00"), _journal("2026-03-10T11:00:00")]
    assert build_distribution(history, week) == build_distribution(history, week)
    assert build_journal_activity(journal, week) == build_journal_activity(journal, week)
    assert compute_average_mood(history, week) == compute_average_mood(history, week)
    assert build_dashboard(history, journal, "7days", TODAY) == build_dashboard(
        history, journal, "7days", TODAY
    )


# ---- build_distribution ----


def test_distribution_always_has_five_buckets_in_order(week):
    buckets = build_distribution([], week)
    assert [b["category"] for b in buckets] == MOOD_CATEGORIES
    assert all(b["count"] == 0 for b in buckets)
    assert not has_mood_data(buckets)


def test_distribution_only_okay(week):
    history = [_mood(-1, "okay"), _mood(-2, "okay"), _mood(-3, "okay")]
    counts = {b["category"]: b["count"] for b in build_distribution(history, week)}
    assert counts == {"great": 0, "good": 0, "okay": 3, "bad": 0, "awful": 0}


def test_distribution_sum_matches_in_window_records(week):
    history = [_mood(-10, "great"), _mood(-3, "good"), _mood(-1, "bad"), _mood(0, "good")]
    buckets = build_distribution(history, week)
    assert sum(b["count"] for b in buckets) == 3
    assert has_mood_data(buckets)


def test_distribution_percent_relative_to_logged_days(week):
    history = [_mood(-1, "great"), _mood(0, "bad")]
    percents = {b["category"]: b["percent"] for b in build_distribution(history, week)}
    assert percents["great"] == 50
    assert percents["bad"] == 50
    assert percents["okay"] == 0


def test_distribution_labels_capitalized(week):
    labels = [b["label"] for b in build_distribution([], week)]
    assert labels == ["Great", "Good", "Okay", "Bad", "Awful"]


# ---- build_journal_activity ----


@pytest.mark.parametrize("token", sorted(RANGE_OPTIONS))
def test_journal_activity_one_point_per_day(token):
    window = resolve_window(token, TODAY)
    activity = build_journal_activity([], window)
    dates = [p["date"] for p in activity]
    assert len(activity) == window.days
    assert dates == sorted(set(dates))
    assert all(p["value"] == 0 for p in activity)


def test_journal_activity_counts_per_day(week):
    records = [
        _journal("2026-03-10T08:00:00"),
        _journal("2026-03-10T21:30:00"),
        _journal("2026-03-08T12:00:00"),
    ]
    values = [p["value"] for p in build_journal_activity(records, week)]
    assert values == [0, 0, 0, 0, 1, 0, 2]


def test_journal_activity_boundaries(week):
    records = [
        _journal("2026-03-03T23:59:59"),
        _journal("2026-03-04T00:00:00"),
        _journal("2026-03-10T23:59:59"),
        _journal("2026-03-11T00:00:00"),
    ]
    values = [p["value"] for p in build_journal_activity(records, week)]
    assert values[0] == 1
    assert values[-1] == 1
    assert sum(values) == 2


def test_journal_activity_skips_bad_dates(week):
    records = [_journal("yesterday"), {"id": "x", "title": "t", "content": "c"}]
    assert sum(p["value"] for p in build_journal_activity(records, week)) == 0


def test_parse_journal_day_accepts_z_suffix():
    # Converted to local time, so the day may shift by one depending on the zone
    day = parse_journal_day("2026-03-10T12:00:00Z")
    assert day is not None
    assert abs((day - date(2026, 3, 10)).days) <= 1


def test_parse_journal_day_naive_keeps_calendar_day():
    assert parse_journal_day("2026-03-10T23:30:00") == date(2026, 3, 10)


# ---- compute_average_mood ----


def test_average_great_and_good(week):
    assert compute_average_mood([_mood(-1, "great"), _mood(0, "good")], week) == 4.5


def test_average_empty_window_is_none(week):
    assert compute_average_mood([_mood(-30, "great")], week) is None
    assert compute_average_mood([], week) is None


def test_average_rounds_to_one_decimal(week):
    history = [_mood(-2, "great"), _mood(-1, "great"), _mood(0, "okay")]
    assert compute_average_mood(history, week) == 4.3


# ---- build_dashboard ----


def test_dashboard_bundles_outputs():
    history = [_mood(-2, "good"), _mood(0, "great")]
    journal = [_journal("2026-03-09T10:00:00")]
    dash = build_dashboard(history, journal, "7days", TODAY)

    assert dash["range"] == "7days"
    assert dash["days"] == 7
    assert dash["start_date"] == "2026-03-04"
    assert dash["end_date"] == "2026-03-10"
    assert dash["average_mood"] == 4.5
    assert dash["has_mood_data"] is True
    assert dash["has_mood_series"] is True
    assert dash["has_journal_activity"] is True
    assert dash["total_journal_entries"] == 1
    assert len(dash["mood_series"]) == 7
    assert len(dash["mood_distribution"]) == 5


def test_dashboard_empty():
    dash = build_dashboard([], [], "90days", TODAY)
    assert dash["average_mood"] is None
    assert dash["has_mood_data"] is False
    assert dash["has_mood_series"] is False
    assert dash["has_journal_activity"] is False
    assert len(dash["journal_activity"]) == 90


def test_format_day_label_no_zero_padding():
    assert format_day_label(date(2026, 1, 5)) == "Jan 5"
