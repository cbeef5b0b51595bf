# src/models/product.py

"""Product and match-result models shared by matcher, cache and UI."""

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any


class Store(str, Enum):
    """Retailer a product listing links out to."""

    AMAZON = "Amazon"
    WALMART = "Walmart"
    TEMU = "Temu"
    OTHER = "Other"

    @classmethod
    def parse(cls, value: str) -> "Store":
        """Map a stored label to a Store, unknown labels become OTHER."""
        try:
            return cls(value)
        except ValueError:
            return cls.OTHER


class Provenance(str, Enum):
    """Where a MatchResult came from."""

    PRIMARY = "primary-source"
    FALLBACK = "fallback-list"
    CACHE = "cache"


@dataclass
class Product:
    """A single shoppable listing with an outbound affiliate link."""

    id: str
    title: str
    price: float
    rating: float
    review_count: int
    image_url: str
    store: Store
    affiliate_url: str
    original_price: float | None = None
    discount: int | None = None

    def __post_init__(self) -> None:
        if self.price < 0:
            msg = f"Product {self.id!r} has negative price {self.price}"
            raise ValueError(msg)
        if not 0 <= self.rating <= 5:
            msg = f"Product {self.id!r} has rating {self.rating} outside 0-5"
            raise ValueError(msg)

    @property
    def discount_percentage(self) -> int | None:
        """Percent off, derived from prices when both are known.

        ``original_price`` wins over the stored ``discount``: store
        variants are re-priced copies whose stored discount no longer
        matches their price.
        """
        if self.original_price is not None and self.original_price > 0:
            return round(
                (self.original_price - self.price)
                / self.original_price
                * 100
            )
        return self.discount

    @property
    def has_markdown(self) -> bool:
        """Whether a percent-off badge should be shown."""
        pct = self.discount_percentage
        return pct is not None and pct > 0

    @property
    def savings(self) -> float:
        """Amount saved against the original price (0 without one)."""
        if self.original_price is None:
            return 0.0
        return max(self.original_price - self.price, 0.0)

    def to_dict(self) -> dict[str, Any]:
        """Serialise using the persisted (camelCase) field names."""
        return {
            "id": self.id,
            "title": self.title,
            "price": self.price,
            "originalPrice": self.original_price,
            "rating": self.rating,
            "reviewCount": self.review_count,
            "imageUrl": self.image_url,
            "store": self.store.value,
            "affiliateUrl": self.affiliate_url,
            "discount": self.discount,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Product":
        """Inverse of :meth:`to_dict`; raises KeyError/ValueError on bad data."""
        original = data.get("originalPrice")
        discount = data.get("discount")
        return cls(
            id=str(data["id"]),
            title=str(data["title"]),
            price=float(data["price"]),
            rating=float(data["rating"]),
            review_count=int(data["reviewCount"]),
            image_url=str(data.get("imageUrl", "")),
            store=Store.parse(str(data.get("store", "Other"))),
            affiliate_url=str(data["affiliateUrl"]),
            original_price=float(original) if original is not None else None,
            discount=int(discount) if discount is not None else None,
        )


@dataclass
class MatchResult:
    """Ordered products plus a confidence score and provenance tag."""

    products: list[Product] = field(
        default_factory=lambda: list[Product]()
    )
    confidence: float = 0.0
    source: Provenance = Provenance.PRIMARY

    def with_source(self, source: Provenance) -> "MatchResult":
        """Copy of this result re-tagged with another provenance."""
        return replace(self, products=list(self.products), source=source)

    def to_dict(self) -> dict[str, Any]:
        return {
            "products": [p.to_dict() for p in self.products],
            "confidence": self.confidence,
            "source": self.source.value,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "MatchResult":
        return cls(
            products=[Product.from_dict(p) for p in data["products"]],
            confidence=float(data["confidence"]),
            source=Provenance(data["source"]),
        )
