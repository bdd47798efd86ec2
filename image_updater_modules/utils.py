"""
Utility functions for Product Image Updater.
"""

import mimetypes
from datetime import datetime
from urllib.parse import urlparse

CSV_MIME_TYPE = "text/csv"

# Built-in table only, so platform registries cannot remap .csv
_MIME_TYPES = mimetypes.MimeTypes()


def is_shopify_cdn_url(url):
    """Check if URL is from Shopify CDN."""
    try:
        if not url or not isinstance(url, str):
            return False
        parsed = urlparse(url.lower())
        shopify_domains = ['cdn.shopify.com', 'shopify.com']
        return any(domain in parsed.netloc for domain in shopify_domains)
    except Exception:
        return False


def is_http_url(url):
    """Check if value looks like an absolute http(s) URL."""
    if not url or not isinstance(url, str):
        return False
    parsed = urlparse(url.strip())
    return parsed.scheme in ("http", "https") and bool(parsed.netloc)


def gid_to_id(gid):
    """
    Extract the trailing numeric part of a Shopify GID.

    Examples:
        'gid://shopify/Collection/123' -> '123'
        '123' -> '123'
    """
    if not gid:
        return ""
    return str(gid).rstrip("/").rsplit("/", 1)[-1]


def is_csv_file(path):
    """Check the MIME type guessed from the file name is text/csv."""
    if not path:
        return False
    mime_type, _ = _MIME_TYPES.guess_type(str(path))
    return mime_type == CSV_MIME_TYPE


def csv_filename_for_operation(operation_id):
    """File name used when saving a downloaded CSV template."""
    return f"image-updates-{gid_to_id(operation_id)}.csv"


def pluralize(count, singular, plural=None):
    """Format '1 product' / '2 products'."""
    if count == 1:
        return f"{count} {singular}"
    return f"{count} {plural or singular + 's'}"


def format_timestamp(value):
    """
    Render an ISO-8601 timestamp for display.

    Unparseable values are returned unchanged.
    """
    if not value:
        return ""
    try:
        parsed = datetime.fromisoformat(str(value).replace("Z", "+00:00"))
    except ValueError:
        return str(value)
    return parsed.strftime("%Y-%m-%d %H:%M:%S")
