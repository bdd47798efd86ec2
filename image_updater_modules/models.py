"""
Data models for Product Image Updater.

Plain data classes built from the backend's JSON payloads. Collections and
products are read-only on the client; ImageUpdateOperation is the only record
whose status the client tracks over time.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional


OPERATION_STATUSES = ("pending", "processing", "completed", "failed")
TERMINAL_STATUSES = ("completed", "failed")


@dataclass
class CollectionImage:
    src: str
    alt: str = ""


@dataclass
class Collection:
    """Merchant-defined grouping of products."""
    id: str
    title: str
    handle: str = ""
    description: str = ""
    products_count: int = 0
    image: Optional[CollectionImage] = None

    @classmethod
    def from_dict(cls, data: Dict) -> "Collection":
        image = data.get("image")
        return cls(
            id=data["id"],
            title=data.get("title") or "",
            handle=data.get("handle") or "",
            description=data.get("description") or "",
            products_count=int(data.get("products_count") or 0),
            image=CollectionImage(src=image.get("src") or "", alt=image.get("alt") or "") if image else None,
        )

    def matches(self, query: str) -> bool:
        """Case-insensitive substring match on title or handle."""
        needle = query.lower()
        return needle in self.title.lower() or needle in self.handle.lower()


@dataclass
class ProductImage:
    id: str
    src: str
    alt: str = ""
    position: int = 0

    @classmethod
    def from_dict(cls, data: Dict) -> "ProductImage":
        return cls(
            id=str(data["id"]),
            src=data.get("src") or "",
            alt=data.get("alt") or "",
            position=int(data.get("position") or 0),
        )


@dataclass
class SelectedOption:
    name: str
    value: str


@dataclass
class ProductOption:
    id: str
    name: str
    position: int = 0
    values: List[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Dict) -> "ProductOption":
        return cls(
            id=str(data.get("id") or ""),
            name=data.get("name") or "",
            position=int(data.get("position") or 0),
            values=list(data.get("values") or []),
        )


@dataclass
class ProductVariant:
    """Product variant. image_id is a weak reference into the owning product's images."""
    id: str
    title: str = ""
    price: str = ""
    compare_at_price: str = ""
    sku: str = ""
    inventory_quantity: int = 0
    weight: float = 0
    weight_unit: str = ""
    selected_options: List[SelectedOption] = field(default_factory=list)
    image_id: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict) -> "ProductVariant":
        image_id = data.get("image_id")
        return cls(
            id=str(data["id"]),
            title=data.get("title") or "",
            price=data.get("price") or "",
            compare_at_price=data.get("compare_at_price") or "",
            sku=data.get("sku") or "",
            inventory_quantity=int(data.get("inventory_quantity") or 0),
            weight=data.get("weight") or 0,
            weight_unit=data.get("weight_unit") or "",
            selected_options=[
                SelectedOption(name=opt.get("name") or "", value=opt.get("value") or "")
                for opt in data.get("selected_options") or []
            ],
            image_id=str(image_id) if image_id else None,
        )


@dataclass
class Product:
    id: str
    title: str
    handle: str = ""
    status: str = "active"
    vendor: str = ""
    product_type: str = ""
    tags: List[str] = field(default_factory=list)
    variants: List[ProductVariant] = field(default_factory=list)
    images: List[ProductImage] = field(default_factory=list)
    options: List[ProductOption] = field(default_factory=list)
    created_at: str = ""
    updated_at: str = ""

    @classmethod
    def from_dict(cls, data: Dict) -> "Product":
        return cls(
            id=str(data["id"]),
            title=data.get("title") or "",
            handle=data.get("handle") or "",
            status=data.get("status") or "active",
            vendor=data.get("vendor") or "",
            product_type=data.get("product_type") or "",
            tags=list(data.get("tags") or []),
            variants=[ProductVariant.from_dict(v) for v in data.get("variants") or []],
            images=[ProductImage.from_dict(i) for i in data.get("images") or []],
            options=[ProductOption.from_dict(o) for o in data.get("options") or []],
            created_at=data.get("created_at") or "",
            updated_at=data.get("updated_at") or "",
        )

    @property
    def ordered_images(self) -> List[ProductImage]:
        # sorted() is stable, so equal positions keep server order
        return sorted(self.images, key=lambda image: image.position)

    @property
    def main_image(self) -> Optional[ProductImage]:
        ordered = self.ordered_images
        return ordered[0] if ordered else None

    def orphaned_variants(self) -> List[ProductVariant]:
        """Variants whose image_id no longer points at one of this product's images."""
        image_ids = {image.id for image in self.images}
        return [v for v in self.variants if v.image_id and v.image_id not in image_ids]


@dataclass
class ImageUpdateOperation:
    """One bulk image-update job, as reported by the server."""
    operation_id: str
    status: str
    timestamp: str = ""
    shop_domain: str = ""
    collection_id: str = ""
    collection_name: str = ""
    products_count: int = 0
    images_updated: int = 0
    error_message: Optional[str] = None
    completed_at: Optional[str] = None
    user_id: Optional[str] = None
    user_name: Optional[str] = None
    before_snapshot_key: Optional[str] = None
    after_snapshot_key: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict) -> "ImageUpdateOperation":
        status = data.get("status", "pending")
        if status not in OPERATION_STATUSES:
            raise ValueError(f"Unknown operation status: {status!r}")

        return cls(
            operation_id=data["operationId"],
            status=status,
            timestamp=data.get("timestamp") or data.get("created_at") or "",
            shop_domain=data.get("shopDomain") or "",
            collection_id=data.get("collectionId") or "",
            collection_name=data.get("collectionName") or "",
            products_count=int(data.get("productsCount") or 0),
            images_updated=int(data.get("imagesUpdated") or 0),
            error_message=data.get("errorMessage") or None,
            completed_at=data.get("completed_at") or data.get("completedAt"),
            user_id=data.get("userId"),
            user_name=data.get("userName"),
            before_snapshot_key=data.get("beforeSnapshotS3Key"),
            after_snapshot_key=data.get("afterSnapshotS3Key"),
        )

    def to_dict(self) -> Dict:
        """Serialize back to the server's camelCase shape."""
        data = {
            "operationId": self.operation_id,
            "status": self.status,
            "timestamp": self.timestamp,
            "shopDomain": self.shop_domain,
            "collectionId": self.collection_id,
            "collectionName": self.collection_name,
            "productsCount": self.products_count,
            "imagesUpdated": self.images_updated,
        }
        optional = {
            "errorMessage": self.error_message,
            "completed_at": self.completed_at,
            "userId": self.user_id,
            "userName": self.user_name,
            "beforeSnapshotS3Key": self.before_snapshot_key,
            "afterSnapshotS3Key": self.after_snapshot_key,
        }
        data.update({key: value for key, value in optional.items() if value is not None})
        return data

    @property
    def is_terminal(self) -> bool:
        return self.status in TERMINAL_STATUSES

    @property
    def is_active(self) -> bool:
        return not self.is_terminal


@dataclass
class ImageUpdateCSVRow:
    """One row of the human-edited CSV. current_image_id keeps variant-image joins resolvable."""
    product_id: str
    product_handle: str
    current_image_id: str
    collection_name: str
    new_image_url: str = ""


@dataclass
class Page:
    """A page of results plus the cursor needed to fetch the next one."""
    items: list
    has_next_page: bool = False
    end_cursor: Optional[str] = None

    @classmethod
    def from_response(cls, items: list, page_info: Optional[Dict]) -> "Page":
        page_info = page_info or {}
        return cls(
            items=items,
            has_next_page=bool(page_info.get("hasNextPage")),
            end_cursor=page_info.get("endCursor") or None,
        )
