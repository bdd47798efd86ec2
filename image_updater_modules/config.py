"""
Configuration and logging management for Product Image Updater.
"""

import os
import sys
import json
import logging

# Version
SCRIPT_VERSION = "1.0.0 - Product Image Updater (CSV round trip)"
APP_TITLE = "Product Image Updater"

# File paths
APP_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
CONFIG_FILE = os.path.join(APP_DIR, "config.json")

# Fallbacks used when neither the environment nor config.json provide a value
DEFAULT_API_BASE_URL = "http://localhost:3000"
DEFAULT_APP_PASSWORD = "changeme"
DEFAULT_APP_URL = "http://localhost:5173"

# Environment variables that override config.json
ENV_OVERRIDES = ["API_BASE_URL", "APP_PASSWORD", "APP_URL", "SHOPIFY_API_KEY"]


def default_config():
    """Return a fresh copy of the default configuration."""
    return {
        "_SERVER SETTINGS": "Backend REST API and application settings.",
        "API_BASE_URL": DEFAULT_API_BASE_URL,
        "APP_PASSWORD": DEFAULT_APP_PASSWORD,
        "APP_URL": DEFAULT_APP_URL,
        "SHOPIFY_API_KEY": "",
        "REQUEST_TIMEOUT": 30,
        "_PAGINATION SETTINGS": "Page sizes used when talking to the backend.",
        "SEARCH_PAGE_SIZE": 50,
        "COLLECTIONS_PAGE_SIZE": 10,
        "PRODUCTS_PAGE_SIZE": 50,
        "NATIVE_COLLECTION_SEARCH": False,
        "_OPERATION SETTINGS": "Status polling after processing image updates.",
        "POLL_INTERVAL": 2,
        "MAX_POLLS": 30,
        "_USER SETTINGS": "These are user settings specified in the main UI.",
        "DOWNLOAD_DIR": "",
        "LOG_FILE": "",
        "WINDOW_GEOMETRY": "1100x850"
    }


def load_config():
    """Load configuration from config.json or create with defaults."""
    default = default_config()

    try:
        if not os.path.exists(CONFIG_FILE):
            with open(CONFIG_FILE, "w", encoding="utf-8") as f:
                json.dump(default, f, indent=4)
            return default
        else:
            with open(CONFIG_FILE, "r", encoding="utf-8") as f:
                loaded_config = json.load(f)

            # Ensure all new fields exist
            missing = [key for key in default if key not in loaded_config]
            for key in missing:
                loaded_config[key] = default[key]

            if missing:
                logging.info(f"Added missing config fields: {', '.join(missing)}")
                save_config(loaded_config)

            return loaded_config
    except json.JSONDecodeError as e:
        logging.error(f"Failed to parse config.json: {e}. Using defaults.")
        return default
    except IOError as e:
        logging.error(f"Failed to read/write config.json: {e}. Using defaults.")
        return default


def save_config(config):
    """Save configuration to config.json."""
    try:
        with open(CONFIG_FILE, "w", encoding="utf-8") as f:
            json.dump(config, f, indent=4)
    except IOError as e:
        logging.error(f"Failed to write config.json: {e}")


def resolve_runtime_config(cfg, environ=None):
    """
    Resolve the settings consumed at startup.

    Environment variables win over config.json, and config.json wins over the
    built-in defaults. The returned dictionary is a copy; config.json is not
    rewritten with environment values.

    Args:
        cfg: Configuration dictionary as returned by load_config()
        environ: Mapping to read overrides from (defaults to os.environ)

    Returns:
        New configuration dictionary with overrides applied
    """
    if environ is None:
        environ = os.environ

    resolved = default_config()
    resolved.update(cfg or {})

    for key in ENV_OVERRIDES:
        value = environ.get(key, "").strip()
        if value:
            resolved[key] = value

    if not str(resolved.get("API_BASE_URL") or "").strip():
        resolved["API_BASE_URL"] = DEFAULT_API_BASE_URL
    resolved["API_BASE_URL"] = str(resolved["API_BASE_URL"]).strip().rstrip("/")

    if not resolved.get("APP_PASSWORD"):
        resolved["APP_PASSWORD"] = DEFAULT_APP_PASSWORD
    if not resolved.get("APP_URL"):
        resolved["APP_URL"] = DEFAULT_APP_URL

    if resolved["APP_PASSWORD"] == DEFAULT_APP_PASSWORD:
        logging.warning("Using the default application password. Set APP_PASSWORD to change it.")

    return resolved


def setup_logging(log_path: str, level: int = logging.INFO):
    """
    Configure logging to file and console.

    Args:
        log_path: Path to log file (console only when empty)
        level: Console logging level (typically INFO)
    """
    try:
        for h in logging.root.handlers[:]:
            logging.root.removeHandler(h)

        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(level)
        console_handler.setFormatter(
            logging.Formatter("%(asctime)s | %(levelname)s | %(message)s")
        )
        logging.root.addHandler(console_handler)

        if log_path:
            file_handler = logging.FileHandler(log_path, encoding="utf-8")
            file_handler.setLevel(logging.DEBUG)
            file_handler.setFormatter(
                logging.Formatter("%(asctime)s | %(levelname)s | %(name)s | %(message)s")
            )
            logging.root.addHandler(file_handler)

        logging.root.setLevel(logging.DEBUG)

        install_global_exception_logging()
    except Exception as e:
        print(f"Failed to setup logging: {e}", file=sys.stderr)
        raise


def install_global_exception_logging():
    """Log all unhandled exceptions to the log file."""
    def _log_excepthook(exctype, value, tb):
        logging.critical(
            "Unhandled exception",
            exc_info=(exctype, value, tb)
        )
        sys.__excepthook__(exctype, value, tb)

    sys.excepthook = _log_excepthook


def log_and_status(status_fn, msg: str, level: str = "info", ui_msg: str = None):
    """
    Log a message to log file, console, AND UI status field.

    Args:
        status_fn: Function to update UI status field
        msg: Detailed message for log file and console
        level: Log level - "info", "warning", or "error"
        ui_msg: Optional user-friendly message for UI
    """
    if ui_msg is None:
        ui_msg = msg

    # Always log to file/console first
    if level == "error":
        logging.error(msg)
    elif level == "warning":
        logging.warning(msg)
    else:
        logging.info(msg)

    # Then try to update UI
    if status_fn is not None:
        try:
            status_fn(ui_msg)
        except Exception as e:
            logging.warning(f"status_fn raised while logging message: {e}", exc_info=True)
            # Print to console as fallback
            print(f"[STATUS] {ui_msg}")
