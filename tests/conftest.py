"""
Pytest configuration and shared fixtures for Product Image Updater tests.
"""

import pytest
import json
import tempfile
from pathlib import Path
from unittest.mock import Mock


# ============================================================================
# SAMPLE DATA FIXTURES
# ============================================================================

@pytest.fixture
def base_cfg():
    """Runtime configuration pointing at a fake backend."""
    return {
        "API_BASE_URL": "https://api.example.test",
        "APP_PASSWORD": "letmein",
        "APP_URL": "https://app.example.test",
        "SHOPIFY_API_KEY": "",
        "REQUEST_TIMEOUT": 30,
        "SEARCH_PAGE_SIZE": 50,
        "COLLECTIONS_PAGE_SIZE": 10,
        "PRODUCTS_PAGE_SIZE": 50,
        "NATIVE_COLLECTION_SEARCH": False,
        "POLL_INTERVAL": 0,
        "MAX_POLLS": 5,
        "DOWNLOAD_DIR": "",
        "LOG_FILE": "",
    }


def make_collection(index, title=None, handle=None):
    return {
        "id": f"gid://shopify/Collection/{index}",
        "title": title or f"Collection {index}",
        "handle": handle or f"collection-{index}",
        "description": "",
        "products_count": index,
    }


@pytest.fixture
def sample_collections():
    """Seven collections with a mix of titles and handles."""
    return [
        make_collection(1, "Summer Sale", "summer-sale"),
        make_collection(2, "Winter Boots", "winter-boots"),
        make_collection(3, "Beachwear", "summer-beach"),
        make_collection(4, "Accessories", "accessories"),
        make_collection(5, "SUMMER hats", "hats"),
        make_collection(6, "Outlet", "outlet"),
        make_collection(7, "Gifts", "gifts"),
    ]


@pytest.fixture
def sample_products():
    """Two products; the first has a variant linked to its second image."""
    return [
        {
            "id": "gid://shopify/Product/101",
            "title": "Linen Shirt",
            "handle": "linen-shirt",
            "status": "active",
            "vendor": "Acme",
            "product_type": "Shirts",
            "tags": ["summer"],
            "images": [
                {"id": "gid://shopify/ProductImage/2", "src": "https://cdn.shopify.com/b.jpg", "alt": "", "position": 2},
                {"id": "gid://shopify/ProductImage/1", "src": "https://cdn.shopify.com/a.jpg", "alt": "front", "position": 1},
            ],
            "variants": [
                {
                    "id": "gid://shopify/ProductVariant/11",
                    "title": "Blue / M",
                    "price": "39.00",
                    "sku": "LS-BL-M",
                    "inventory_quantity": 4,
                    "selected_options": [{"name": "Color", "value": "Blue"}, {"name": "Size", "value": "M"}],
                    "image_id": "gid://shopify/ProductImage/2",
                }
            ],
            "options": [{"id": "1", "name": "Color", "position": 1, "values": ["Blue"]}],
            "created_at": "2025-05-01T10:00:00Z",
            "updated_at": "2025-05-02T10:00:00Z",
        },
        {
            "id": "gid://shopify/Product/102",
            "title": "Straw Hat",
            "handle": "straw-hat",
            "status": "draft",
            "vendor": "Acme",
            "product_type": "Hats",
            "tags": [],
            "images": [],
            "variants": [{"id": "gid://shopify/ProductVariant/21", "title": "Default Title", "price": "19.00"}],
            "options": [],
        },
    ]


@pytest.fixture
def operation_payload():
    """Factory for operation records in the server's camelCase shape."""
    def _make(status="pending", **overrides):
        data = {
            "operationId": "op-123",
            "timestamp": "2025-06-01T12:00:00Z",
            "shopDomain": "acme.myshopify.com",
            "collectionId": "c1",
            "collectionName": "Summer",
            "status": status,
            "productsCount": 2,
            "imagesUpdated": 0,
        }
        data.update(overrides)
        return data
    return _make


@pytest.fixture
def template_csv_bytes():
    """CSV template as the server returns it for two products."""
    return (
        "Product ID,Product Handle,Current Image ID,Collection Name,New Image URL\r\n"
        "gid://shopify/Product/101,linen-shirt,gid://shopify/ProductImage/1,Summer,\r\n"
        "gid://shopify/Product/102,straw-hat,,Summer,\r\n"
    ).encode("utf-8")


# ============================================================================
# TEMPORARY FILE FIXTURES
# ============================================================================

@pytest.fixture
def temp_dir():
    """Create a temporary directory for test files."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def temp_config_file(temp_dir):
    """Create a temporary config.json file."""
    config_path = temp_dir / "config.json"
    config_data = {
        "API_BASE_URL": "https://api.example.test/",
        "APP_PASSWORD": "letmein",
        "LOG_FILE": str(temp_dir / "test.log")
    }
    with open(config_path, 'w') as f:
        json.dump(config_data, f, indent=4)
    return config_path


@pytest.fixture
def mock_state_files(monkeypatch, temp_dir):
    """Point the operation state file at the temp directory."""
    import image_updater_modules.state as state_module

    monkeypatch.setattr(state_module, 'OPERATION_STATE_FILE', str(temp_dir / 'operation_state.json'))
    return temp_dir


# ============================================================================
# MOCK API FIXTURES
# ============================================================================

@pytest.fixture
def make_response():
    """Factory for mocked requests.Response objects."""
    def _make(status_code=200, json_data=None, content=b"", reason="OK"):
        response = Mock()
        response.status_code = status_code
        response.reason = reason
        response.content = content
        response.json.return_value = json_data if json_data is not None else {}
        return response
    return _make


@pytest.fixture
def mock_status_fn():
    """Mock status function that collects status messages."""
    messages = []

    def status_fn(msg):
        messages.append(msg)

    status_fn.messages = messages
    return status_fn
