"""
Record mutations for moods, journal entries and affirmations.
Every helper takes a collection list and returns a new list; callers persist it.
"""

import random
import logging
import uuid
from datetime import date, datetime
from typing import Optional, Dict, Any, List, Tuple

from progress import MOOD_SCORES

logger = logging.getLogger(__name__)

MAX_TITLE_LENGTH = 200
MAX_CONTENT_LENGTH = 50000  # Characters
MAX_TAGS = 20
MAX_TAG_LENGTH = 30
MAX_NOTE_LENGTH = 1000
MAX_AFFIRMATION_LENGTH = 300


class RecordNotFound(LookupError):
    """Raised when a mood, journal entry or affirmation does not exist."""


def _new_id() -> str:
    return uuid.uuid4().hex


# =============================================================================
# Moods
# =============================================================================

def find_mood(history: List[Dict[str, Any]], day: date) -> Optional[Dict[str, Any]]:
    """Return the mood record for a day, if one was logged."""
    day_key = day.isoformat()
    for record in history:
        if record.get("date") == day_key:
            return record
    return None


def _clean_note(note: Optional[str]) -> Optional[str]:
    if note is None:
        return None
    if not isinstance(note, str):
        raise ValueError("Note must be a string")
    note = note.strip()
    if len(note) > MAX_NOTE_LENGTH:
        raise ValueError(f"Note exceeds maximum length of {MAX_NOTE_LENGTH} characters")
    return note or None


def log_mood(
    history: List[Dict[str, Any]],
    mood: str,
    note: Optional[str] = None,
    today: Optional[date] = None
) -> List[Dict[str, Any]]:
    """
    Log today's mood. Any record already logged for today is replaced,
    so the history holds at most one mood per day.
    """
    if not isinstance(mood, str) or mood not in MOOD_SCORES:
        raise ValueError(f"Unknown mood {mood!r}. Use one of: {', '.join(MOOD_SCORES)}")

    today = today or date.today()
    day_key = today.isoformat()

    entry: Dict[str, Any] = {"date": day_key, "mood": mood}
    cleaned = _clean_note(note)
    if cleaned:
        entry["note"] = cleaned

    updated = [record for record in history if record.get("date") != day_key]
    updated.append(entry)
    logger.info(f"Logged mood {mood!r} for {day_key}")
    return updated


def update_mood_note(
    history: List[Dict[str, Any]],
    note: Optional[str],
    today: Optional[date] = None
) -> List[Dict[str, Any]]:
    """Set or clear the note on today's mood. Raises RecordNotFound if none is logged."""
    today = today or date.today()
    if find_mood(history, today) is None:
        raise RecordNotFound("No mood logged for today")

    cleaned = _clean_note(note)
    day_key = today.isoformat()
    updated = []
    for record in history:
        if record.get("date") == day_key:
            record = {k: v for k, v in record.items() if k != "note"}
            if cleaned:
                record["note"] = cleaned
        updated.append(record)
    return updated


# =============================================================================
# Journal
# =============================================================================

def normalize_tags(tags: Any) -> List[str]:
    """Strip tags, drop blanks and duplicates, keep first-seen order."""
    if tags is None:
        return []
    if not isinstance(tags, list):
        raise ValueError("Tags must be a list")

    seen = set()
    out: List[str] = []
    for tag in tags:
        tag = str(tag).strip()
        if not tag or tag in seen:
            continue
        if len(tag) > MAX_TAG_LENGTH:
            raise ValueError(f"Tags are limited to {MAX_TAG_LENGTH} characters")
        seen.add(tag)
        out.append(tag)

    if len(out) > MAX_TAGS:
        raise ValueError(f"Maximum {MAX_TAGS} tags allowed")
    return out


def validate_journal_fields(title: Any, content: Any) -> Tuple[str, str]:
    """Title and content are both required."""
    if not isinstance(title, str) or not isinstance(content, str):
        raise ValueError("Title and content must be strings")

    title = title.strip()
    content = content.strip()
    if not title or not content:
        raise ValueError("Please add both a title and content for your journal entry.")
    if len(title) > MAX_TITLE_LENGTH:
        raise ValueError(f"Title exceeds maximum length of {MAX_TITLE_LENGTH} characters")
    if len(content) > MAX_CONTENT_LENGTH:
        raise ValueError(f"Content exceeds maximum length of {MAX_CONTENT_LENGTH} characters")
    return title, content


def create_journal_entry(
    entries: List[Dict[str, Any]],
    title: str,
    content: str,
    tags: Optional[List[str]] = None,
    now: Optional[datetime] = None
) -> Tuple[List[Dict[str, Any]], Dict[str, Any]]:
    title, content = validate_journal_fields(title, content)
    now = now or datetime.now()

    entry = {
        "id": _new_id(),
        "title": title,
        "content": content,
        "date": now.isoformat(timespec="seconds"),
        "tags": normalize_tags(tags)
    }
    logger.info(f"Created journal entry {entry['id']}")
    return entries + [entry], entry


def update_journal_entry(
    entries: List[Dict[str, Any]],
    entry_id: str,
    title: str,
    content: str,
    tags: Optional[List[str]] = None,
    now: Optional[datetime] = None
) -> Tuple[List[Dict[str, Any]], Dict[str, Any]]:
    """Edit an entry in place; its id and list position are kept, its date refreshed."""
    title, content = validate_journal_fields(title, content)
    clean_tags = normalize_tags(tags)
    now = now or datetime.now()

    updated = []
    edited = None
    for entry in entries:
        if entry.get("id") == entry_id:
            entry = {
                **entry,
                "title": title,
                "content": content,
                "tags": clean_tags,
                "date": now.isoformat(timespec="seconds")
            }
            edited = entry
        updated.append(entry)

    if edited is None:
        raise RecordNotFound(f"Journal entry {entry_id!r} not found")

    logger.info(f"Updated journal entry {entry_id}")
    return updated, edited


def delete_journal_entry(entries: List[Dict[str, Any]], entry_id: str) -> List[Dict[str, Any]]:
    updated = [entry for entry in entries if entry.get("id") != entry_id]
    if len(updated) == len(entries):
        raise RecordNotFound(f"Journal entry {entry_id!r} not found")
    logger.info(f"Deleted journal entry {entry_id}")
    return updated


# =============================================================================
# Affirmations
# =============================================================================

def add_affirmation(
    items: List[Dict[str, Any]],
    text: Any,
    now: Optional[datetime] = None
) -> Tuple[List[Dict[str, Any]], Dict[str, Any]]:
    if not isinstance(text, str) or not text.strip():
        raise ValueError("Affirmation text is required")
    text = text.strip()
    if len(text) > MAX_AFFIRMATION_LENGTH:
        raise ValueError(f"Affirmation exceeds maximum length of {MAX_AFFIRMATION_LENGTH} characters")

    item = {
        "id": _new_id(),
        "text": text,
        "favorite": False,
        "createdAt": (now or datetime.now()).isoformat(timespec="seconds")
    }
    return items + [item], item


def toggle_favorite(
    items: List[Dict[str, Any]],
    item_id: str
) -> Tuple[List[Dict[str, Any]], Dict[str, Any]]:
    updated = []
    toggled = None
    for item in items:
        if item.get("id") == item_id:
            item = {**item, "favorite": not item.get("favorite", False)}
            toggled = item
        updated.append(item)

    if toggled is None:
        raise RecordNotFound(f"Affirmation {item_id!r} not found")
    return updated, toggled


def delete_affirmation(items: List[Dict[str, Any]], item_id: str) -> List[Dict[str, Any]]:
    updated = [item for item in items if item.get("id") != item_id]
    if len(updated) == len(items):
        raise RecordNotFound(f"Affirmation {item_id!r} not found")
    return updated


def filter_affirmations(items: List[Dict[str, Any]], favorites_only: bool = False) -> List[Dict[str, Any]]:
    if favorites_only:
        return [item for item in items if item.get("favorite")]
    return list(items)


def pick_affirmation(
    items: List[Dict[str, Any]],
    favorites_only: bool = False,
    exclude_id: Optional[str] = None,
    rng: Optional[random.Random] = None
) -> Optional[Dict[str, Any]]:
    """
    Pick a random affirmation, avoiding exclude_id when there is another choice.
    Returns None when nothing matches the filter.
    """
    rng = rng or random.Random()
    candidates = filter_affirmations(items, favorites_only)
    if not candidates:
        return None

    if exclude_id and len(candidates) > 1:
        others = [item for item in candidates if item.get("id") != exclude_id]
        if others:
            candidates = others

    return rng.choice(candidates)
