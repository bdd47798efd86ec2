#!/usr/bin/env python3
"""
Product Image Updater - CLI Entry Point

Version 1.0.0

Command-line interface for bulk-updating Shopify product images through the
image-updater backend: search collections, pick products, create an operation,
download the CSV template, upload the edited CSV and process it.
For the GUI interface, run image_updater.py instead.
"""

import argparse
import getpass
import logging
import os
import sys

import requests

# Add current directory to path for imports
sys.path.insert(0, os.path.dirname(__file__))

from image_updater_modules import server_api
from image_updater_modules.auth import PasswordGate, IncorrectPasswordError
from image_updater_modules.config import (
    load_config, resolve_runtime_config, setup_logging, SCRIPT_VERSION
)
from image_updater_modules.csv_template import read_image_update_csv, summarize_rows
from image_updater_modules.host_context import select_host_context
from image_updater_modules.operation import ImageUpdateWorkflow, OperationStateError, CsvFileError
from image_updater_modules.selection import SelectionModel
from image_updater_modules.server_api import ApiRequestError, EmptySelectionError
from image_updater_modules.state import load_operation_state, save_operation_state, clear_operation_state
from image_updater_modules.utils import format_timestamp, pluralize


def print_status(message: str) -> None:
    """Status callback for CLI mode - prints to stdout."""
    print(message)


def print_operation(operation) -> None:
    print(f"Operation:      {operation.operation_id}")
    print(f"Status:         {operation.status.upper()}")
    print(f"Collection:     {operation.collection_name or operation.collection_id}")
    print(f"Products:       {operation.products_count}")
    print(f"Images updated: {operation.images_updated}")
    print(f"Created:        {format_timestamp(operation.timestamp)}")
    if operation.completed_at:
        print(f"Completed:      {format_timestamp(operation.completed_at)}")
    if operation.error_message:
        print(f"Error:          {operation.error_message}")


def load_workflow(cfg):
    workflow = ImageUpdateWorkflow(cfg, status_fn=print_status)
    workflow.restore(load_operation_state())
    return workflow


def load_all_products(selection, collection_id, cfg):
    """Load every page of a collection's products into the selection."""
    page_size = cfg["PRODUCTS_PAGE_SIZE"]
    page = server_api.get_products_from_collection(collection_id, cfg, limit=page_size)
    selection.load_collection(collection_id, page.items)

    seen_cursors = set()
    while page.has_next_page and page.end_cursor and page.end_cursor not in seen_cursors:
        seen_cursors.add(page.end_cursor)
        page = server_api.get_products_from_collection(collection_id, cfg, limit=page_size, after=page.end_cursor)
        selection.append_products(page.items)

    if page.has_next_page:
        logging.warning(
            f"Product listing for {collection_id} stopped without a usable cursor; "
            f"only {len(selection.products)} products loaded"
        )
        print(f"Warning: only {pluralize(len(selection.products), 'product')} could be loaded "
              f"from collection {collection_id}", file=sys.stderr)
    logging.info(f"Loaded {len(selection.products)} products from collection {collection_id}")


# ============================================================================
# COMMANDS
# ============================================================================

def cmd_search(args, cfg, host):
    page = server_api.search_collections(
        args.query, cfg, limit=args.limit or cfg["COLLECTIONS_PAGE_SIZE"], after=args.after
    )
    print(f"Found {pluralize(len(page.items), 'collection')}:")
    for collection in page.items:
        print(f"  {collection.id}  {collection.title} ({pluralize(collection.products_count, 'product')})")
    if page.has_next_page:
        print(f"More results: --after {page.end_cursor}")
    return 0


def cmd_collection(args, cfg, host):
    collection = server_api.get_collection(args.collection_id, cfg)
    print(f"{collection.title} [{collection.handle}]")
    print(f"ID:       {collection.id}")
    print(f"Products: {collection.products_count}")
    if collection.description:
        print(collection.description)
    return 0


def cmd_products(args, cfg, host):
    page = server_api.get_products_from_collection(
        args.collection_id, cfg, limit=args.limit or cfg["PRODUCTS_PAGE_SIZE"], after=args.after
    )
    for product in page.items:
        line = (f"  {product.id}  {product.title} [{product.status}] "
                f"{pluralize(len(product.images), 'image')}, {pluralize(len(product.variants), 'variant')}")
        url = host.storefront_url(product.handle)
        if url:
            line += f"  {url}"
        print(line)
        for variant in product.orphaned_variants():
            print(f"    ⚠️ Variant {variant.id} references missing image {variant.image_id}")
    if page.has_next_page:
        print(f"More products: --after {page.end_cursor}")
    return 0


def cmd_create(args, cfg, host):
    workflow = load_workflow(cfg)
    if workflow.is_active:
        print(f"Error: operation {workflow.operation.operation_id} is still {workflow.state}. "
              f"Finish it or run 'reset --force'.", file=sys.stderr)
        return 2
    if workflow.can_start_new():
        workflow.start_new()

    selection = SelectionModel()
    load_all_products(selection, args.collection_id, cfg)

    if args.all:
        selection.select_all()
    else:
        for product_id in args.products or []:
            try:
                selection.toggle(product_id)
            except KeyError:
                print(f"Error: product {product_id} is not in collection {args.collection_id}", file=sys.stderr)
                return 2

    operation = workflow.create(args.collection_id, selection.selected_ids)
    save_operation_state(workflow.snapshot())
    print_operation(operation)
    return 0


def cmd_status(args, cfg, host):
    workflow = load_workflow(cfg)
    if workflow.operation is None:
        print("No operation is being tracked.")
        return 0
    workflow.refresh()
    if args.wait:
        workflow.wait_for_completion()
    save_operation_state(workflow.snapshot())
    print_operation(workflow.operation)
    return 0


def cmd_download(args, cfg, host):
    workflow = load_workflow(cfg)
    dest_dir = args.dir or cfg.get("DOWNLOAD_DIR") or os.getcwd()
    path = workflow.download_csv(dest_dir)
    summary = summarize_rows(read_image_update_csv(path))
    print(f"{pluralize(summary['rows'], 'row')} for {pluralize(summary['products'], 'product')}")
    print("Fill in the 'New Image URL' column, then run: upload <file>")
    return 0


def cmd_upload(args, cfg, host):
    workflow = load_workflow(cfg)
    workflow.upload_csv(args.file)
    save_operation_state(workflow.snapshot())
    return 0


def cmd_process(args, cfg, host):
    workflow = load_workflow(cfg)
    try:
        result, _ = workflow.process()
        if args.wait:
            workflow.wait_for_completion()
    finally:
        save_operation_state(workflow.snapshot())
    print_operation(workflow.operation)
    if result.get("success") is False or workflow.state == "failed":
        return 1
    return 0


def cmd_preview(args, cfg, host):
    if not os.path.isfile(args.file):
        print(f"Error: file does not exist: {args.file}", file=sys.stderr)
        return 2
    summary = summarize_rows(read_image_update_csv(args.file))
    print(f"Rows:                {summary['rows']}")
    print(f"Products:            {summary['products']}")
    print(f"New image URLs:      {summary['new_urls']}")
    print(f"Outside Shopify CDN: {summary['external_urls']}")
    print(f"Not http(s) URLs:    {summary['invalid_urls']}")
    return 0


def cmd_history(args, cfg, host):
    operations = server_api.get_operation_history(cfg)
    if not operations:
        print("No operations found.")
    for operation in operations:
        print(f"  {operation.operation_id}  {format_timestamp(operation.timestamp)}  "
              f"{operation.status.upper():<10} {operation.collection_name}  "
              f"{operation.images_updated}/{pluralize(operation.products_count, 'product')}")
    return 0


def cmd_rollback(args, cfg, host):
    result = server_api.rollback_operation(args.operation_id, cfg)
    print(result.get("message") or "Rollback requested.")
    return 0 if result.get("success", True) else 1


def cmd_repeat(args, cfg, host):
    result = server_api.repeat_operation(args.operation_id, cfg)
    print(result.get("message") or "Repeat requested.")
    return 0 if result.get("success", True) else 1


def cmd_reset(args, cfg, host):
    workflow = load_workflow(cfg)
    if workflow.is_active and not args.force:
        print(f"Error: operation {workflow.operation.operation_id} is still {workflow.state}. "
              f"Use --force to forget it.", file=sys.stderr)
        return 2
    clear_operation_state()
    print("Operation tracking cleared.")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Product Image Updater - bulk update Shopify product images via CSV",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s search summer
  %(prog)s create gid://shopify/Collection/123 --all
  %(prog)s download --dir ./csv
  %(prog)s upload ./csv/image-updates-abc.csv
  %(prog)s process --wait
        """
    )
    parser.add_argument("--password", "-p", help="Application password (prompted when omitted)")
    parser.add_argument("--shop", help="Shop domain, e.g. mystore.myshopify.com")
    parser.add_argument("--host", help="Embedding host parameter passed by the Shopify admin")
    parser.add_argument("--log", "-l", help="Path to log file (optional)")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable verbose output")
    parser.add_argument("--version", action="version", version=f"%(prog)s {SCRIPT_VERSION}")

    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("search", help="Search collections by title or handle")
    p.add_argument("query", nargs="?", default="")
    p.add_argument("--limit", type=int)
    p.add_argument("--after", help="Cursor returned by a previous search")
    p.set_defaults(func=cmd_search)

    p = sub.add_parser("collection", help="Show one collection")
    p.add_argument("collection_id")
    p.set_defaults(func=cmd_collection)

    p = sub.add_parser("products", help="List products in a collection")
    p.add_argument("collection_id")
    p.add_argument("--limit", type=int)
    p.add_argument("--after")
    p.set_defaults(func=cmd_products)

    p = sub.add_parser("create", help="Create an image update operation")
    p.add_argument("collection_id")
    group = p.add_mutually_exclusive_group(required=True)
    group.add_argument("--all", action="store_true", help="Select every loaded product")
    group.add_argument("--products", nargs="+", metavar="PRODUCT_ID")
    p.set_defaults(func=cmd_create)

    p = sub.add_parser("status", help="Re-fetch the tracked operation")
    p.add_argument("--wait", action="store_true", help="Poll until the operation finishes")
    p.set_defaults(func=cmd_status)

    p = sub.add_parser("download", help="Download the CSV template")
    p.add_argument("--dir", help="Directory to save the CSV into")
    p.set_defaults(func=cmd_download)

    p = sub.add_parser("upload", help="Upload the edited CSV")
    p.add_argument("file")
    p.set_defaults(func=cmd_upload)

    p = sub.add_parser("process", help="Apply the uploaded CSV")
    p.add_argument("--wait", action="store_true", help="Poll until the operation finishes")
    p.set_defaults(func=cmd_process)

    p = sub.add_parser("preview", help="Summarize a CSV file locally")
    p.add_argument("file")
    p.set_defaults(func=cmd_preview)

    sub.add_parser("history", help="List past operations").set_defaults(func=cmd_history)

    p = sub.add_parser("rollback", help="Revert a past operation")
    p.add_argument("operation_id")
    p.set_defaults(func=cmd_rollback)

    p = sub.add_parser("repeat", help="Re-run a past operation")
    p.add_argument("operation_id")
    p.set_defaults(func=cmd_repeat)

    p = sub.add_parser("reset", help="Forget the tracked operation")
    p.add_argument("--force", action="store_true")
    p.set_defaults(func=cmd_reset)

    return parser


def main(argv=None) -> int:
    """CLI entry point."""
    args = build_parser().parse_args(argv)

    setup_logging(args.log, logging.DEBUG if args.verbose else logging.WARNING)

    cfg = resolve_runtime_config(load_config())

    gate = PasswordGate(cfg["APP_PASSWORD"])

    try:
        gate.authenticate(args.password if args.password is not None else getpass.getpass("Password: "))
        host = select_host_context(cfg, shop=args.shop, host=args.host)
        return args.func(args, cfg, host)
    except KeyboardInterrupt:
        print("\nInterrupted by user.", file=sys.stderr)
        return 130
    except IncorrectPasswordError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2
    except (OperationStateError, EmptySelectionError, CsvFileError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2
    except ApiRequestError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except (ValueError, KeyError) as e:
        logging.exception("Unexpected server response:")
        print(f"Error: unexpected server response: {e}", file=sys.stderr)
        return 1
    except requests.exceptions.RequestException as e:
        logging.exception("Network error:")
        print(f"Network error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
