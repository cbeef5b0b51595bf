# src/services/product_matcher.py

"""Match keywords to shoppable products with a confidence score."""

import asyncio
import logging
from collections.abc import Sequence
from dataclasses import dataclass, replace
from typing import Protocol

from src.config.settings import Settings
from src.filters.product_validator import ProductValidator
from src.filters.similarity import similarity
from src.models.link_metadata import Platform
from src.models.product import MatchResult, Product, Provenance, Store
from src.services.fallback_catalog import (
    get_trending_products,
    trending_ids,
)

logger = logging.getLogger("trendbuy.matcher")

_IMG = "https://images.unsplash.com/{}?w=400&h=400&fit=crop"


class ProductSource(Protocol):
    """Primary product search collaborator (query -> listings)."""

    async def search(self, query: str) -> list[Product]: ...


@dataclass(frozen=True)
class ProductRule:
    """Emit ``template`` when the query contains the trigger terms."""

    triggers: tuple[str, ...]
    template: Product
    require_all: bool = False

    def matches(self, query: str) -> bool:
        check = all if self.require_all else any
        return check(term in query for term in self.triggers)


PRODUCT_RULES: tuple[ProductRule, ...] = (
    ProductRule(
        triggers=("earbuds", "headphones", "airpods"),
        template=Product(
            id="earbuds-1",
            title=(
                "Wireless Bluetooth Earbuds with Charging Case "
                "- Premium Sound Quality"
            ),
            price=29.99,
            original_price=79.99,
            rating=4.5,
            review_count=12453,
            image_url=_IMG.format("photo-1590658165737-15a047b1c24c"),
            store=Store.AMAZON,
            affiliate_url="https://amazon.com/affiliate-link-1",
            discount=62,
        ),
    ),
    ProductRule(
        triggers=("skincare", "serum", "face"),
        template=Product(
            id="skincare-1",
            title=(
                "Vitamin C Serum for Face - Anti-Aging Skincare "
                "with Hyaluronic Acid"
            ),
            price=19.95,
            original_price=39.99,
            rating=4.7,
            review_count=8921,
            image_url=_IMG.format("photo-1556228720-195a672e8a03"),
            store=Store.AMAZON,
            affiliate_url="https://amazon.com/affiliate-link-2",
            discount=50,
        ),
    ),
    ProductRule(
        triggers=("led", "lights", "strip"),
        template=Product(
            id="led-1",
            title="LED Strip Lights 50ft - Smart WiFi Color Changing Room Lights",
            price=24.99,
            original_price=49.99,
            rating=4.6,
            review_count=15632,
            image_url=_IMG.format("photo-1558618666-fbd51c2cd44d"),
            store=Store.AMAZON,
            affiliate_url="https://amazon.com/affiliate-link-3",
            discount=50,
        ),
    ),
    ProductRule(
        triggers=("phone", "case"),
        require_all=True,
        template=Product(
            id="case-1",
            title="Clear Phone Case with Camera Protection - Shockproof Design",
            price=12.99,
            original_price=24.99,
            rating=4.4,
            review_count=6789,
            image_url=_IMG.format("photo-1512499617640-c74ae3a79d37"),
            store=Store.AMAZON,
            affiliate_url="https://amazon.com/affiliate-link-4",
            discount=48,
        ),
    ),
)

# (store, price factor, rating delta, outbound link)
STORE_VARIANTS: tuple[tuple[Store, float, float, str], ...] = (
    (Store.WALMART, 0.9, 0.0, "https://walmart.com/affiliate-link"),
    (Store.TEMU, 0.7, -0.2, "https://temu.com/affiliate-link"),
)


def store_variants(product: Product) -> list[Product]:
    """Alternate-seller copies of *product* for price comparison."""
    variants: list[Product] = []
    for store, factor, rating_delta, link in STORE_VARIANTS:
        variants.append(
            replace(
                product,
                id=f"{product.id}-{store.value.lower()}",
                price=round(product.price * factor, 2),
                rating=round(max(product.rating + rating_delta, 0.0), 1),
                store=store,
                affiliate_url=link,
            )
        )
    return variants


class SimulatedProductSource:
    """Keyword-rule product lookup after a non-blocking delay."""

    def __init__(
        self,
        rules: Sequence[ProductRule] = PRODUCT_RULES,
        delay: float | None = None,
    ) -> None:
        self.rules = rules
        self.delay = (
            Settings.PRODUCT_SEARCH_DELAY if delay is None else delay
        )

    async def search(self, query: str) -> list[Product]:
        await asyncio.sleep(self.delay)

        products = [
            rule.template for rule in self.rules if rule.matches(query)
        ]
        if products:
            products.extend(store_variants(products[0]))
        return products


def needs_confirmation(confidence: float) -> bool:
    """Whether the user should confirm a match before acting on it."""
    return confidence < Settings.CONFIRMATION_THRESHOLD


def confirmation_message(
    keywords: Sequence[str], products: Sequence[Product]
) -> str:
    top_title = products[0].title if products else ""
    keyword_str = " ".join(keywords[:2])
    return (
        f'We found "{top_title}" for "{keyword_str}". '
        "Is this what you were looking for?"
    )


class ProductMatcher:
    """Primary lookup first, curated catalog second.

    ``match`` never raises: any failure (including a timeout) comes back
    as an empty, zero-confidence primary-source result.
    """

    def __init__(
        self,
        product_source: ProductSource | None = None,
        catalog: Sequence[Product] | None = None,
        timeout: float = Settings.PRODUCT_SEARCH_TIMEOUT,
    ) -> None:
        self.product_source = (
            product_source
            if product_source is not None
            else SimulatedProductSource()
        )
        self.catalog = catalog
        self.timeout = timeout

    async def match(
        self,
        keywords: Sequence[str],
        platform: Platform = Platform.OTHER,
    ) -> MatchResult:
        query = " ".join(keywords).lower()

        try:
            found = await asyncio.wait_for(
                self.product_source.search(query), self.timeout
            )
            products, _ = ProductValidator.validate(found)

            if products:
                result = MatchResult(
                    products=products,
                    confidence=self._confidence(query, products),
                    source=Provenance.PRIMARY,
                )
            else:
                result = MatchResult(
                    products=self._search_fallback(query, platform),
                    confidence=Settings.FALLBACK_CONFIDENCE,
                    source=Provenance.FALLBACK,
                )
        except Exception:
            logger.error(
                "Product search failed for '%s'", query, exc_info=True
            )
            return MatchResult(
                products=[], confidence=0.0, source=Provenance.PRIMARY
            )

        logger.info(
            "Matched '%s' (%s): %d products via %s, confidence=%.2f",
            query,
            platform.value,
            len(result.products),
            result.source.value,
            result.confidence,
        )
        return result

    @staticmethod
    def _confidence(query: str, products: Sequence[Product]) -> float:
        """Mean query/title similarity plus a small primary bonus."""
        scores = [similarity(query, p.title.lower()) for p in products]
        mean = sum(scores) / len(scores)
        return min(mean + Settings.PRIMARY_CONFIDENCE_BONUS, 1.0)

    def _search_fallback(
        self, query: str, platform: Platform
    ) -> list[Product]:
        """Catalog entries similar to the query, platform trends first."""
        candidates = (
            list(self.catalog)
            if self.catalog is not None
            else get_trending_products()
        )
        matched = [
            p
            for p in candidates
            if similarity(query, p.title.lower())
            > Settings.FALLBACK_SIMILARITY_THRESHOLD
        ]
        trending = trending_ids(platform)
        matched.sort(key=lambda p: p.id not in trending)
        return matched
