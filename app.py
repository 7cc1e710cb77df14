"""
Wellness Tracker - Mood logging, journaling, affirmations and progress insights
Privacy-first design: All data stays local, no cloud uploads.
"""

import os
import logging
from datetime import date, datetime
from functools import wraps

from flask import Flask, request, jsonify
from flask_cors import CORS
from dotenv import load_dotenv

import store
import entries
from progress import RANGE_OPTIONS, DEFAULT_RANGE, build_dashboard

# Load environment variables
load_dotenv()


def resolve_log_level(name: str) -> str:
    """Map a LOG_LEVEL name to a known level, falling back to INFO."""
    level = (name or "").strip().upper()
    if not isinstance(logging.getLevelName(level), int):
        return "INFO"
    return level


# Configure logging
logging.basicConfig(
    level=resolve_log_level(os.getenv("LOG_LEVEL", "INFO")),
    format='%(asctime)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

# Initialize Flask app
app = Flask(__name__)
CORS(app)

# Constants
DATA_FILE = os.getenv("WELLNESS_DATA_FILE", "wellness_data.json")
PORT = int(os.getenv("WELLNESS_PORT", "5000"))
DEBUG = os.getenv("WELLNESS_DEBUG", "false").lower() == "true"

app.config["DATA_FILE"] = DATA_FILE


def data_file() -> str:
    return app.config["DATA_FILE"]


def today() -> date:
    return date.today()


# =============================================================================
# Request Helpers
# =============================================================================

def handle_errors(f):
    """Decorator for consistent error handling."""
    @wraps(f)
    def wrapper(*args, **kwargs):
        try:
            return f(*args, **kwargs)
        except ValueError as e:
            return jsonify({"error": str(e)}), 400
        except entries.RecordNotFound as e:
            return jsonify({"error": str(e)}), 404
        except Exception as e:
            logger.error(f"Error in {f.__name__}: {e}")
            return jsonify({"error": "An unexpected error occurred"}), 500
    return wrapper


def get_body() -> dict:
    body = request.get_json(silent=True)
    if not body or not isinstance(body, dict):
        raise ValueError("No data provided")
    return body


def save_failed(what: str):
    return jsonify({"error": f"Failed to save {what}"}), 500


# =============================================================================
# Mood Routes
# =============================================================================

@app.route("/api/moods", methods=["GET"])
@handle_errors
def get_moods():
    """Get mood history plus today's mood, if logged."""
    history = store.load_mood_records(data_file())
    return jsonify({
        "history": sorted(history, key=lambda r: str(r.get("date", ""))),
        "today": entries.find_mood(history, today())
    })


@app.route("/api/moods/today", methods=["POST", "PUT"])
@handle_errors
def log_today_mood():
    """Log or replace today's mood."""
    body = get_body()
    history = store.load_mood_records(data_file())
    history = entries.log_mood(history, body.get("mood"), body.get("note"), today=today())

    if not store.save_mood_records(data_file(), history):
        return save_failed("mood")

    entry = entries.find_mood(history, today())
    return jsonify({
        "saved": True,
        "entry": entry,
        "ask_for_note": "note" not in entry
    })


@app.route("/api/moods/today/note", methods=["PUT"])
@handle_errors
def update_today_note():
    """Add or change the note on today's mood."""
    body = get_body()
    history = store.load_mood_records(data_file())
    history = entries.update_mood_note(history, body.get("note"), today=today())

    if not store.save_mood_records(data_file(), history):
        return save_failed("note")
    return jsonify({"saved": True, "entry": entries.find_mood(history, today())})


# =============================================================================
# Journal Routes
# =============================================================================

@app.route("/api/journal", methods=["GET"])
@handle_errors
def get_journal():
    """Get all journal entries, newest first."""
    records = store.load_journal_records(data_file())
    return jsonify(sorted(records, key=lambda r: str(r.get("date", "")), reverse=True))


@app.route("/api/journal", methods=["POST"])
@handle_errors
def create_journal():
    """Create a journal entry; title and content are required."""
    body = get_body()
    records = store.load_journal_records(data_file())
    records, entry = entries.create_journal_entry(
        records, body.get("title"), body.get("content"), body.get("tags")
    )

    if not store.save_journal_records(data_file(), records):
        return save_failed("entry")
    return jsonify({"saved": True, "entry": entry}), 201


@app.route("/api/journal/<entry_id>", methods=["PUT"])
@handle_errors
def update_journal(entry_id: str):
    """Edit a journal entry, keeping its id."""
    body = get_body()
    records = store.load_journal_records(data_file())
    records, entry = entries.update_journal_entry(
        records, entry_id, body.get("title"), body.get("content"), body.get("tags")
    )

    if not store.save_journal_records(data_file(), records):
        return save_failed("entry")
    return jsonify({"saved": True, "entry": entry})


@app.route("/api/journal/<entry_id>", methods=["DELETE"])
@handle_errors
def delete_journal(entry_id: str):
    """Delete a journal entry."""
    records = store.load_journal_records(data_file())
    records = entries.delete_journal_entry(records, entry_id)

    if not store.save_journal_records(data_file(), records):
        return save_failed("journal")
    return jsonify({"deleted": True})


# =============================================================================
# Affirmation Routes
# =============================================================================

def favorites_only() -> bool:
    """Read the all/favorites filter from the query string."""
    mode = request.args.get("filter", "all")
    if mode not in ("all", "favorites"):
        raise ValueError("Filter must be 'all' or 'favorites'")
    return mode == "favorites"


@app.route("/api/affirmations", methods=["GET"])
@handle_errors
def get_affirmations():
    """Get affirmations, optionally only favorites."""
    items = store.load_affirmations(data_file())
    return jsonify(entries.filter_affirmations(items, favorites_only()))


@app.route("/api/affirmations", methods=["POST"])
@handle_errors
def create_affirmation():
    """Add a new affirmation."""
    body = get_body()
    items = store.load_affirmations(data_file())
    items, item = entries.add_affirmation(items, body.get("text"))

    if not store.save_affirmations(data_file(), items):
        return save_failed("affirmation")
    return jsonify({"saved": True, "affirmation": item}), 201


@app.route("/api/affirmations/<item_id>/favorite", methods=["POST"])
@handle_errors
def favorite_affirmation(item_id: str):
    """Toggle the favorite flag on an affirmation."""
    items = store.load_affirmations(data_file())
    items, item = entries.toggle_favorite(items, item_id)

    if not store.save_affirmations(data_file(), items):
        return save_failed("affirmation")
    return jsonify({"saved": True, "affirmation": item})


@app.route("/api/affirmations/<item_id>", methods=["DELETE"])
@handle_errors
def remove_affirmation(item_id: str):
    """Delete an affirmation."""
    items = store.load_affirmations(data_file())
    items = entries.delete_affirmation(items, item_id)

    if not store.save_affirmations(data_file(), items):
        return save_failed("affirmations")
    return jsonify({"deleted": True})


@app.route("/api/affirmations/random", methods=["GET"])
@handle_errors
def random_affirmation():
    """Pick a random affirmation, avoiding the one currently shown."""
    items = store.load_affirmations(data_file())
    item = entries.pick_affirmation(items, favorites_only(), request.args.get("exclude"))
    if item is None:
        return jsonify({"affirmation": None, "message": "No affirmations to show yet."})
    return jsonify({"affirmation": item})


# =============================================================================
# Progress Route
# =============================================================================

@app.route("/api/progress", methods=["GET"])
@handle_errors
def get_progress():
    """Get dashboard series for the last 7, 30 or 90 days."""
    token = request.args.get("range", DEFAULT_RANGE)
    if token not in RANGE_OPTIONS:
        return jsonify({
            "error": f"Invalid range. Use one of: {', '.join(RANGE_OPTIONS)}"
        }), 400

    # Both collections are read once; the builders work on this snapshot
    mood_records = store.load_mood_records(data_file())
    journal_records = store.load_journal_records(data_file())

    return jsonify(build_dashboard(mood_records, journal_records, token, today()))


# =============================================================================
# Data Management Routes
# =============================================================================

@app.route("/api/export", methods=["GET"])
@handle_errors
def export_data():
    """Export all wellness data."""
    data = store.load_all(data_file())
    data["exported_at"] = datetime.now().isoformat()
    data["version"] = "1.0"
    return jsonify(data)


@app.route("/api/clear", methods=["DELETE"])
@handle_errors
def clear_data():
    """Clear all wellness data."""
    if store.clear_all(data_file()):
        logger.info("All wellness data cleared")
        return jsonify({"cleared": True})
    return jsonify({"error": "Failed to clear data"}), 500


@app.route("/api/privacy", methods=["GET"])
def privacy_info():
    """Return privacy information."""
    return jsonify({
        "data_location": "local",
        "cloud_sync": False,
        "data_sharing": "none",
        "message": "Your wellness data is private. Everything stays on your device. No cloud uploads, no tracking."
    })


# =============================================================================
# Main
# =============================================================================

if __name__ == "__main__":
    logger.info("Starting Wellness Tracker server...")
    logger.info(f"Data file: {os.path.abspath(data_file())}")
    app.run(debug=DEBUG, port=PORT)
