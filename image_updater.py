#!/usr/bin/env python3
"""
Product Image Updater - Main Entry Point

Version 1.0.0

Desktop window for searching Shopify collections, selecting products and
bulk-updating their images through a CSV round trip.
For the command-line interface, use main.py instead.
"""

import argparse
import sys
import logging

# Import the GUI module and version
try:
    from image_updater_modules.config import SCRIPT_VERSION, load_config, setup_logging
    from image_updater_modules.gui import build_gui
except ImportError as e:
    print(f"Error importing image_updater_modules: {e}")
    print("Make sure the image_updater_modules package is in the same directory as this script.")
    sys.exit(1)


def main():
    """Main entry point for the application."""
    parser = argparse.ArgumentParser(description="Product Image Updater")
    parser.add_argument("--shop", help="Shop domain, e.g. mystore.myshopify.com")
    parser.add_argument("--host", help="Embedding host parameter passed by the Shopify admin")
    args = parser.parse_args()

    print(f"Starting {SCRIPT_VERSION}")
    setup_logging(load_config().get("LOG_FILE", ""))

    try:
        build_gui(shop=args.shop, host=args.host)
    except Exception as e:
        print(f"Fatal error: {e}", file=sys.stderr)
        logging.exception("Fatal error in main:")
        sys.exit(1)


if __name__ == "__main__":
    main()
