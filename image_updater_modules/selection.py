"""
Product selection for the currently loaded collection.

The selection is pure client state: a set of product ids that is always a
subset of the loaded products and is emptied whenever another collection is
loaded.
"""

import logging
from typing import Iterable, List, Optional

from .models import Product


class SelectionModel:
    """Tracks which loaded products are chosen for the next operation."""

    def __init__(self):
        self.collection_id: Optional[str] = None
        self._products: List[Product] = []
        self._selected = set()

    def load_collection(self, collection_id: str, products: Iterable[Product]) -> None:
        """Replace the loaded products and clear the selection."""
        self.collection_id = collection_id
        self._products = list(products)
        self._selected = set()
        logging.debug(f"Loaded {len(self._products)} products for collection {collection_id}")

    def append_products(self, products: Iterable[Product]) -> None:
        """Add a further page of products from the same collection."""
        known = {p.id for p in self._products}
        self._products.extend(p for p in products if p.id not in known)

    @property
    def products(self) -> List[Product]:
        return list(self._products)

    @property
    def loaded_ids(self) -> List[str]:
        return [p.id for p in self._products]

    @property
    def selected_ids(self) -> List[str]:
        """Selected ids in the order the products were loaded."""
        return [p.id for p in self._products if p.id in self._selected]

    @property
    def selected_products(self) -> List[Product]:
        return [p for p in self._products if p.id in self._selected]

    @property
    def count(self) -> int:
        return len(self._selected)

    def is_selected(self, product_id: str) -> bool:
        return product_id in self._selected

    def toggle(self, product_id: str) -> bool:
        """
        Flip the selection of one product.

        Returns:
            True if the product is selected afterwards

        Raises:
            KeyError: product_id is not among the loaded products
        """
        if product_id not in self.loaded_ids:
            raise KeyError(f"Product {product_id} is not loaded")

        if product_id in self._selected:
            self._selected.discard(product_id)
            return False
        self._selected.add(product_id)
        return True

    def select_all(self) -> None:
        self._selected = set(self.loaded_ids)

    def clear_all(self) -> None:
        self._selected = set()
