"""
Local record store for the wellness tracker.
One JSON file holds every collection as a named list; nothing leaves the device.
"""

import os
import json
import logging
from datetime import datetime
from typing import Dict, Any, List

logger = logging.getLogger(__name__)

MOOD_KEY = "moodHistory"
JOURNAL_KEY = "journalEntries"
AFFIRMATIONS_KEY = "affirmations"

COLLECTION_KEYS = (MOOD_KEY, JOURNAL_KEY, AFFIRMATIONS_KEY)


# =============================================================================
# Raw File Access
# =============================================================================

def load_all(path: str) -> Dict[str, Any]:
    """
    Load the whole store with error handling.
    A missing, unreadable or corrupt file yields empty collections, never an error.
    """
    empty = {key: [] for key in COLLECTION_KEYS}

    if not os.path.exists(path):
        return empty

    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        logger.error(f"JSON decode error in {path}: {e}")
        return empty
    except OSError as e:
        logger.error(f"File read error for {path}: {e}")
        return empty

    if not isinstance(data, dict):
        logger.warning(f"Invalid store format in {path}, ignoring contents")
        return empty

    for key in COLLECTION_KEYS:
        if not isinstance(data.get(key), list):
            if key in data:
                logger.warning(f"Collection {key!r} is not a list, treating as empty")
            data[key] = []

    return data


def save_all(path: str, data: Dict[str, Any]) -> bool:
    """Save the whole store atomically, keeping the previous file as a backup."""
    tmp_file = f"{path}.tmp"
    backup_file = f"{path}.bak"

    try:
        parent = os.path.dirname(path)
        if parent:
            os.makedirs(parent, exist_ok=True)

        with open(tmp_file, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2, ensure_ascii=False)

        if os.path.exists(path):
            try:
                os.replace(path, backup_file)
            except OSError:
                pass  # Backup is optional

        os.replace(tmp_file, path)
        return True

    except OSError as e:
        logger.error(f"Save error for {path}: {e}")
        if os.path.exists(tmp_file):
            try:
                os.remove(tmp_file)
            except OSError:
                pass
        return False


def clear_all(path: str) -> bool:
    """Reset every collection to empty."""
    data = {key: [] for key in COLLECTION_KEYS}
    data["metadata"] = {"cleared_at": datetime.now().isoformat()}
    return save_all(path, data)


# =============================================================================
# Collections
# =============================================================================

def load_collection(path: str, key: str) -> List[Dict[str, Any]]:
    """Load one named collection; malformed items are dropped."""
    items = load_all(path).get(key, [])
    records = [item for item in items if isinstance(item, dict)]
    if len(records) != len(items):
        logger.warning(f"Dropped {len(items) - len(records)} malformed item(s) from {key!r}")
    return records


def save_collection(path: str, key: str, records: List[Dict[str, Any]]) -> bool:
    """Replace one named collection, leaving the others untouched."""
    data = load_all(path)
    data[key] = list(records)
    data.setdefault("metadata", {})["updated_at"] = datetime.now().isoformat()
    return save_all(path, data)


def load_mood_records(path: str) -> List[Dict[str, Any]]:
    return load_collection(path, MOOD_KEY)


def save_mood_records(path: str, records: List[Dict[str, Any]]) -> bool:
    return save_collection(path, MOOD_KEY, records)


def load_journal_records(path: str) -> List[Dict[str, Any]]:
    return load_collection(path, JOURNAL_KEY)


def save_journal_records(path: str, records: List[Dict[str, Any]]) -> bool:
    return save_collection(path, JOURNAL_KEY, records)


def load_affirmations(path: str) -> List[Dict[str, Any]]:
    return load_collection(path, AFFIRMATIONS_KEY)


def save_affirmations(path: str, records: List[Dict[str, Any]]) -> bool:
    return save_collection(path, AFFIRMATIONS_KEY, records)
