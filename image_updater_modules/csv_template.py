"""
CSV template handling for image update operations.

The CSV is produced by the server, edited by a person, and sent back. These
helpers only read it for previews; the server remains the sole validator of
uploaded contents.
"""

import csv
import io
from typing import Dict, List

from .models import ImageUpdateCSVRow
from .utils import is_http_url, is_shopify_cdn_url

CSV_HEADERS = {
    "product_id": "Product ID",
    "product_handle": "Product Handle",
    "current_image_id": "Current Image ID",
    "collection_name": "Collection Name",
    "new_image_url": "New Image URL",
}

HEADER_ROW = list(CSV_HEADERS.values())


def parse_image_update_csv(data) -> List[ImageUpdateCSVRow]:
    """
    Parse CSV text or bytes into rows.

    Unknown columns are ignored; missing columns read as empty strings.
    A UTF-8 byte order mark is tolerated.

    Args:
        data: CSV content as str or bytes

    Returns:
        List of ImageUpdateCSVRow in file order
    """
    if isinstance(data, bytes):
        data = data.decode("utf-8-sig")
    else:
        data = data.lstrip("\ufeff")

    reader = csv.DictReader(io.StringIO(data))
    rows = []
    for record in reader:
        values = {
            field_name: (record.get(header) or "").strip()
            for field_name, header in CSV_HEADERS.items()
        }
        if not any(values.values()):
            continue
        rows.append(ImageUpdateCSVRow(**values))
    return rows


def read_image_update_csv(path) -> List[ImageUpdateCSVRow]:
    """Parse a CSV file from disk."""
    with open(path, "rb") as f:
        return parse_image_update_csv(f.read())


def write_image_update_csv(rows: List[ImageUpdateCSVRow], path) -> None:
    """Write rows with the exact header names the server expects."""
    with open(path, "w", newline="", encoding="utf-8") as f:
        writer = csv.writer(f)
        writer.writerow(HEADER_ROW)
        for row in rows:
            writer.writerow([getattr(row, field_name) for field_name in CSV_HEADERS])


def summarize_rows(rows: List[ImageUpdateCSVRow]) -> Dict:
    """
    Count what an uploaded CSV would ask the server to do.

    Returns:
        Dictionary with:
        - rows: total data rows
        - products: distinct product ids
        - new_urls: rows with a non-empty New Image URL
        - external_urls: new URLs not hosted on the Shopify CDN
        - invalid_urls: new URLs that are not absolute http(s) URLs
    """
    new_urls = [row.new_image_url for row in rows if row.new_image_url]
    return {
        "rows": len(rows),
        "products": len({row.product_id for row in rows}),
        "new_urls": len(new_urls),
        "external_urls": sum(1 for url in new_urls if is_http_url(url) and not is_shopify_cdn_url(url)),
        "invalid_urls": sum(1 for url in new_urls if not is_http_url(url)),
    }
