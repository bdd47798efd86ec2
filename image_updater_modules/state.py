"""
State file management for Product Image Updater.

Handles operation_state.json, which remembers the tracked image update
operation between CLI invocations.
"""

import os
import json
import logging
from datetime import datetime

# File paths
APP_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
OPERATION_STATE_FILE = os.path.join(APP_DIR, "operation_state.json")


def load_operation_state():
    """Load the tracked operation snapshot, or an empty snapshot."""
    try:
        if os.path.exists(OPERATION_STATE_FILE):
            with open(OPERATION_STATE_FILE, 'r', encoding='utf-8') as f:
                return json.load(f)
    except json.JSONDecodeError as e:
        logging.warning(f"Failed to parse operation_state.json: {e}. Starting fresh.")
    except IOError as e:
        logging.warning(f"Failed to read operation_state.json: {e}. Starting fresh.")

    return {"operation": None, "uploaded_file": None}


def save_operation_state(snapshot):
    """Save the tracked operation snapshot."""
    try:
        data = dict(snapshot)
        data["last_updated"] = datetime.now().isoformat()
        with open(OPERATION_STATE_FILE, 'w', encoding='utf-8') as f:
            json.dump(data, f, indent=4)
    except IOError as e:
        logging.error(f"Failed to write operation_state.json: {e}")


def clear_operation_state():
    """Forget the tracked operation."""
    try:
        if os.path.exists(OPERATION_STATE_FILE):
            os.remove(OPERATION_STATE_FILE)
            logging.info("Cleared operation_state.json")
    except OSError as e:
        logging.error(f"Failed to remove operation_state.json: {e}")
