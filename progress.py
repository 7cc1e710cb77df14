"""
Progress analytics for the wellness tracker.
Turns raw mood and journal records into gap-filled daily series over a trailing window.
"""

import logging
from datetime import date, datetime, timedelta
from typing import Optional, Dict, Any, List, Iterator, NamedTuple, Union

logger = logging.getLogger(__name__)

# Ordered by severity, great -> awful. Bucket and legend order follow this.
MOOD_CATEGORIES = ["great", "good", "okay", "bad", "awful"]

MOOD_SCORES = {
    "great": 5,
    "good": 4,
    "okay": 3,
    "bad": 2,
    "awful": 1
}

RANGE_OPTIONS = {
    "7days": 7,
    "30days": 30,
    "90days": 90
}

DEFAULT_RANGE = "7days"


class DateWindow(NamedTuple):
    days: int
    start_date: date
    end_date: date


# =============================================================================
# Date Window
# =============================================================================

def window_days(token: str) -> int:
    """Day count for a range token. Raises ValueError for unknown tokens."""
    try:
        return RANGE_OPTIONS[token]
    except KeyError:
        raise ValueError(f"Unknown range {token!r}. Use one of: {', '.join(RANGE_OPTIONS)}") from None


def resolve_window(token: str, now: Union[date, datetime]) -> DateWindow:
    """
    Resolve a range token into an inclusive span ending on now's calendar day.
    The span always holds exactly `days` distinct dates.
    """
    days = window_days(token)
    end_date = now.date() if isinstance(now, datetime) else now
    start_date = end_date - timedelta(days=days - 1)
    return DateWindow(days, start_date, end_date)


def iter_window_days(window: DateWindow) -> Iterator[date]:
    """Yield every calendar day in the window, oldest first."""
    for offset in range(window.days):
        yield window.start_date + timedelta(days=offset)


def in_window(day: date, window: DateWindow) -> bool:
    return window.start_date <= day <= window.end_date


def format_day_label(day: date) -> str:
    """Short display label like 'Mar 5'. Display only, never parsed back."""
    return f"{day.strftime('%b')} {day.day}"


# =============================================================================
# Record Parsing
# =============================================================================

def parse_mood_date(value: Any) -> Optional[date]:
    """Parse a mood record's YYYY-MM-DD date."""
    if not isinstance(value, str):
        return None
    try:
        return datetime.strptime(value, "%Y-%m-%d").date()
    except ValueError:
        return None


def parse_journal_day(value: Any) -> Optional[date]:
    """
    Reduce a journal timestamp to its calendar day.
    Aware timestamps are converted to local time first; naive ones are taken as local.
    """
    if not isinstance(value, str) or not value.strip():
        return None

    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"

    try:
        dt = datetime.fromisoformat(text)
    except ValueError:
        return None

    if dt.tzinfo is not None:
        dt = dt.astimezone()
    return dt.date()


def filter_mood_records(records: List[Dict[str, Any]], window: DateWindow) -> List[Dict[str, Any]]:
    """
    Keep mood records whose date falls inside the window, in input order.
    Records with a bad date or unknown mood are skipped.
    """
    selected = []
    for record in records:
        if not isinstance(record, dict):
            continue

        day = parse_mood_date(record.get("date"))
        if day is None:
            logger.debug(f"Skipping mood record with bad date: {record.get('date')!r}")
            continue

        mood = record.get("mood")
        if not isinstance(mood, str) or mood not in MOOD_SCORES:
            logger.debug(f"Skipping mood record with unknown mood: {mood!r}")
            continue

        if in_window(day, window):
            selected.append(record)
    return selected


# =============================================================================
# Builders
# =============================================================================

def build_mood_series(records: List[Dict[str, Any]], window: DateWindow) -> List[Dict[str, Any]]:
    """
    Daily mood score series over the window.
    Days without a record get value None, never 0.
    """
    scores_by_day: Dict[date, int] = {}
    for record in filter_mood_records(records, window):
        # Later records win if a date is duplicated
        scores_by_day[parse_mood_date(record["date"])] = MOOD_SCORES[record["mood"]]

    return [
        {
            "date": day.isoformat(),
            "display_label": format_day_label(day),
            "value": scores_by_day.get(day)
        }
        for day in iter_window_days(window)
    ]


def build_distribution(records: List[Dict[str, Any]], window: DateWindow) -> List[Dict[str, Any]]:
    """
    Count in-window records per mood category.
    All five categories are always present. Percentages are relative to the
    number of logged days, not the window length.
    """
    counts = {mood: 0 for mood in MOOD_CATEGORIES}
    for record in filter_mood_records(records, window):
        counts[record["mood"]] += 1

    total = sum(counts.values())
    return [
        {
            "category": mood,
            "label": mood.capitalize(),
            "count": counts[mood],
            "percent": round(counts[mood] / total * 100) if total else 0
        }
        for mood in MOOD_CATEGORIES
    ]


def has_mood_data(distribution: List[Dict[str, Any]]) -> bool:
    return any(bucket["count"] > 0 for bucket in distribution)


def build_journal_activity(records: List[Dict[str, Any]], window: DateWindow) -> List[Dict[str, Any]]:
    """Daily journal entry counts over the window, zero-filled."""
    counts_by_day: Dict[date, int] = {}
    for record in records:
        if not isinstance(record, dict):
            continue

        day = parse_journal_day(record.get("date"))
        if day is None:
            logger.debug(f"Skipping journal record with bad date: {record.get('date')!r}")
            continue

        if in_window(day, window):
            counts_by_day[day] = counts_by_day.get(day, 0) + 1

    return [
        {
            "date": day.isoformat(),
            "display_label": format_day_label(day),
            "value": counts_by_day.get(day, 0)
        }
        for day in iter_window_days(window)
    ]


def compute_average_mood(records: List[Dict[str, Any]], window: DateWindow) -> Optional[float]:
    """Mean mood score over the window to one decimal, or None when nothing was logged."""
    selected = filter_mood_records(records, window)
    if not selected:
        return None

    total = sum(MOOD_SCORES[record["mood"]] for record in selected)
    return round(total / len(selected), 1)


# =============================================================================
# Dashboard
# =============================================================================

def build_dashboard(
    mood_records: List[Dict[str, Any]],
    journal_records: List[Dict[str, Any]],
    token: str,
    now: Union[date, datetime]
) -> Dict[str, Any]:
    """Bundle every derived output for one window into a JSON-ready dict."""
    window = resolve_window(token, now)

    mood_series = build_mood_series(mood_records, window)
    distribution = build_distribution(mood_records, window)
    journal_activity = build_journal_activity(journal_records, window)

    return {
        "range": token,
        "days": window.days,
        "start_date": window.start_date.isoformat(),
        "end_date": window.end_date.isoformat(),
        "average_mood": compute_average_mood(mood_records, window),
        "mood_series": mood_series,
        "mood_distribution": distribution,
        "journal_activity": journal_activity,
        "has_mood_data": has_mood_data(distribution),
        "has_mood_series": any(point["value"] is not None for point in mood_series),
        "has_journal_activity": any(point["value"] > 0 for point in journal_activity),
        "total_journal_entries": sum(point["value"] for point in journal_activity)
    }
