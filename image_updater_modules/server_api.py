"""
Backend REST API operations for Product Image Updater.

This module contains all functions that talk to the image-updater backend.
Every function takes the runtime configuration dictionary (see
config.resolve_runtime_config) for the base URL and request timeout.

Failures are not swallowed here: a non-2xx response raises ApiRequestError,
transport errors from requests and JSON decode errors propagate unchanged.
There is no retry or backoff.
"""

import os
import logging
import requests

from .models import Collection, Product, ImageUpdateOperation, Page

COLLECTIONS_ENDPOINT = "/api/collections"
PRODUCTS_ENDPOINT = "/api/products"
IMAGE_UPDATES_ENDPOINT = "/api/image-updates"
OPERATIONS_ENDPOINT = "/api/operations"


class ApiRequestError(Exception):
    """Raised when the backend answers outside the 2xx range."""

    def __init__(self, status_code, status_text, method="GET", url=""):
        self.status_code = status_code
        self.status_text = status_text
        self.method = method
        self.url = url
        super().__init__(f"API request failed: {status_code} {status_text}")


class EmptySelectionError(ValueError):
    """Raised when an operation is requested for zero products."""


def _api_url(cfg, endpoint):
    base_url = str(cfg.get("API_BASE_URL", "")).strip().rstrip("/")
    return f"{base_url}{endpoint}"


def _make_request(method, endpoint, cfg, params=None, json_body=None, files=None):
    """
    Send one request to the backend and return the raw response.

    Args:
        method: HTTP method
        endpoint: Path below the API base URL
        cfg: Configuration dictionary
        params: Optional query parameters (None values are dropped)
        json_body: Optional JSON payload
        files: Optional multipart files mapping

    Returns:
        requests.Response with a 2xx status

    Raises:
        ApiRequestError: Response status outside the 2xx range
    """
    url = _api_url(cfg, endpoint)
    headers = {}
    if files is None:
        headers["Content-Type"] = "application/json"

    if params:
        params = {key: value for key, value in params.items() if value is not None}

    logging.debug(f"{method} {url} params={params}")

    response = requests.request(
        method,
        url,
        params=params or None,
        json=json_body,
        files=files,
        headers=headers,
        timeout=cfg.get("REQUEST_TIMEOUT", 30)
    )

    if not 200 <= response.status_code < 300:
        logging.error(f"{method} {endpoint} failed: {response.status_code} {response.reason}")
        raise ApiRequestError(response.status_code, response.reason, method=method, url=url)

    return response


def _get_json(endpoint, cfg, params=None):
    return _make_request("GET", endpoint, cfg, params=params).json()


def _post_json(endpoint, cfg, json_body=None):
    return _make_request("POST", endpoint, cfg, json_body=json_body).json()


# ============================================================================
# COLLECTIONS
# ============================================================================

def list_collections(cfg, limit=10, after=None):
    """
    Fetch one page of collections using server-side pagination.

    Args:
        cfg: Configuration dictionary
        limit: Page size
        after: Server cursor from a previous page

    Returns:
        Page of Collection objects
    """
    result = _get_json(COLLECTIONS_ENDPOINT, cfg, params={"limit": str(limit), "after": after})
    collections = [Collection.from_dict(c) for c in result.get("collections", [])]
    return Page.from_response(collections, result.get("pageInfo"))


def fetch_all_collections(cfg, page_size=None):
    """
    Fetch every collection by following pageInfo.endCursor until hasNextPage is false.

    Args:
        cfg: Configuration dictionary
        page_size: Upstream page size (defaults to SEARCH_PAGE_SIZE)

    Returns:
        List of all Collection objects in server order
    """
    page_size = page_size or cfg.get("SEARCH_PAGE_SIZE", 50)
    all_collections = []
    seen_cursors = set()
    cursor = None
    pages = 0

    while True:
        page = list_collections(cfg, limit=page_size, after=cursor)
        pages += 1
        all_collections.extend(page.items)

        if not page.has_next_page:
            break

        if not page.end_cursor or page.end_cursor in seen_cursors:
            logging.warning(
                f"Collection listing reported more pages without a usable cursor "
                f"after {pages} pages; stopping with {len(all_collections)} collections"
            )
            break

        seen_cursors.add(page.end_cursor)
        cursor = page.end_cursor

    logging.info(f"Fetched {len(all_collections)} collections in {pages} pages")
    return all_collections


def _decode_offset(after):
    if after is None or after == "":
        return 0
    try:
        offset = int(after)
    except (TypeError, ValueError):
        logging.warning(f"Ignoring invalid search cursor {after!r}; starting from the first result")
        return 0
    return max(offset, 0)


def search_collections(query, cfg, limit=10, after=None):
    """
    Search collections by title or handle.

    An empty query returns the unfiltered first page straight from the server.
    Otherwise, unless NATIVE_COLLECTION_SEARCH is enabled, every collection is
    fetched page by page, filtered in memory (case-insensitive substring on
    title or handle) and paginated client-side. The client-side cursor is the
    numeric offset of the next result encoded as a string, so it is only
    meaningful within the same search.

    Args:
        query: Search text
        cfg: Configuration dictionary
        limit: Maximum number of collections to return
        after: Cursor from a previous call with the same query

    Returns:
        Page of Collection objects
    """
    query = (query or "").strip()

    if not query:
        return list_collections(cfg, limit=limit, after=after)

    if cfg.get("NATIVE_COLLECTION_SEARCH"):
        result = _get_json(
            COLLECTIONS_ENDPOINT, cfg,
            params={"query": query, "limit": str(limit), "after": after}
        )
        collections = [Collection.from_dict(c) for c in result.get("collections", [])]
        return Page.from_response(collections, result.get("pageInfo"))

    filtered = [c for c in fetch_all_collections(cfg) if c.matches(query)]

    start = _decode_offset(after)
    end = start + limit
    has_next = end < len(filtered)

    logging.info(f"Search '{query}' matched {len(filtered)} collections")
    return Page(
        items=filtered[start:end],
        has_next_page=has_next,
        end_cursor=str(end) if has_next else None
    )


def get_collection(collection_id, cfg):
    """Fetch a single collection by id."""
    result = _get_json(f"{COLLECTIONS_ENDPOINT}/{collection_id}", cfg)
    return Collection.from_dict(result["collection"])


# ============================================================================
# PRODUCTS
# ============================================================================

def get_products_from_collection(collection_id, cfg, limit=20, after=None):
    """
    Fetch one page of products belonging to a collection.

    Args:
        collection_id: Collection GID
        cfg: Configuration dictionary
        limit: Page size
        after: Server cursor from a previous page

    Returns:
        Page of Product objects
    """
    logging.debug(f"Getting products from collection {collection_id} (limit={limit}, after={after})")
    result = _get_json(
        PRODUCTS_ENDPOINT, cfg,
        params={"collection_id": collection_id, "limit": str(limit), "after": after}
    )
    products = [Product.from_dict(p) for p in result.get("products", [])]
    return Page.from_response(products, result.get("pageInfo"))


# ============================================================================
# IMAGE UPDATE OPERATIONS
# ============================================================================

def create_image_update_operation(collection_id, product_ids, cfg):
    """
    Create an image update operation for the given products.

    Args:
        collection_id: Collection GID the products were selected from
        product_ids: Non-empty list of product ids
        cfg: Configuration dictionary

    Returns:
        The new ImageUpdateOperation (status pending)

    Raises:
        EmptySelectionError: product_ids is empty (no request is sent)
    """
    product_ids = list(product_ids)
    if not product_ids:
        raise EmptySelectionError("Select at least one product before creating an operation")

    result = _post_json(
        f"{IMAGE_UPDATES_ENDPOINT}/operation", cfg,
        json_body={"collection_id": collection_id, "product_ids": product_ids}
    )
    operation = ImageUpdateOperation.from_dict(result["operation"])
    logging.info(f"Created operation {operation.operation_id} for {len(product_ids)} products")
    return operation


def get_image_update_operation(operation_id, cfg):
    """Re-fetch the authoritative record of an operation."""
    result = _get_json(f"{IMAGE_UPDATES_ENDPOINT}/operation/{operation_id}", cfg)
    return ImageUpdateOperation.from_dict(result["operation"])


def download_image_update_csv(operation_id, cfg):
    """
    Download the CSV template of a pending operation.

    Returns:
        Raw CSV bytes
    """
    response = _make_request("GET", f"{IMAGE_UPDATES_ENDPOINT}/operation/{operation_id}/csv", cfg)
    logging.info(f"Downloaded CSV for operation {operation_id} ({len(response.content)} bytes)")
    return response.content


def upload_image_update_csv(operation_id, csv_path, cfg):
    """
    Upload an edited CSV for a pending operation as multipart form data.

    The server validates the CSV contents; nothing is checked here.

    Args:
        operation_id: Operation id
        csv_path: Path of the CSV file to send (form field "csv")
        cfg: Configuration dictionary

    Returns:
        Dictionary with 'success' and 'message'
    """
    filename = os.path.basename(csv_path)
    with open(csv_path, "rb") as f:
        response = _make_request(
            "POST", f"{IMAGE_UPDATES_ENDPOINT}/operation/{operation_id}/upload", cfg,
            files={"csv": (filename, f, "text/csv")}
        )
    logging.info(f"Uploaded {filename} for operation {operation_id}")
    return response.json()


def process_image_updates(operation_id, cfg):
    """
    Ask the server to apply the uploaded CSV.

    The returned message is advisory; re-fetch the operation for its status.
    """
    return _post_json(f"{IMAGE_UPDATES_ENDPOINT}/operation/{operation_id}/process", cfg)


# ============================================================================
# OPERATION HISTORY
# ============================================================================

def get_operation_history(cfg):
    """List past operations, most recent first as ordered by the server."""
    result = _get_json(f"{OPERATIONS_ENDPOINT}/history", cfg)
    return [ImageUpdateOperation.from_dict(op) for op in result.get("operations", [])]


def rollback_operation(operation_id, cfg):
    """Revert the image changes made by a past operation."""
    result = _post_json(f"{OPERATIONS_ENDPOINT}/{operation_id}/rollback", cfg)
    logging.info(f"Rollback requested for operation {operation_id}: {result.get('message', '')}")
    return result


def repeat_operation(operation_id, cfg):
    """Re-run a past operation."""
    result = _post_json(f"{OPERATIONS_ENDPOINT}/{operation_id}/repeat", cfg)
    logging.info(f"Repeat requested for operation {operation_id}: {result.get('message', '')}")
    return result
