# src/services/fallback_catalog.py

"""Curated trending products used when the primary lookup finds nothing."""

from src.models.link_metadata import Platform
from src.models.product import Product, Store

_IMG = "https://images.unsplash.com/{}?w=400&h=400&fit=crop"

TRENDING_PRODUCTS: tuple[Product, ...] = (
    Product(
        id="trending-skincare-1",
        title="The INKEY List Hyaluronic Acid Serum - Viral TikTok Skincare",
        price=12.99,
        original_price=18.99,
        rating=4.6,
        review_count=24531,
        image_url=_IMG.format("photo-1556228720-195a672e8a03"),
        store=Store.AMAZON,
        affiliate_url="https://amazon.com/trending-skincare-1",
        discount=32,
    ),
    Product(
        id="trending-tech-1",
        title="Anker Wireless Earbuds - Featured in Tech TikTok",
        price=39.99,
        original_price=79.99,
        rating=4.5,
        review_count=18642,
        image_url=_IMG.format("photo-1590658165737-15a047b1c24c"),
        store=Store.AMAZON,
        affiliate_url="https://amazon.com/trending-tech-1",
        discount=50,
    ),
    Product(
        id="trending-home-1",
        title="Govee LED Strip Lights - Instagram Room Transformation",
        price=22.99,
        original_price=45.99,
        rating=4.7,
        review_count=31247,
        image_url=_IMG.format("photo-1558618666-fbd51c2cd44d"),
        store=Store.AMAZON,
        affiliate_url="https://amazon.com/trending-home-1",
        discount=50,
    ),
    Product(
        id="trending-fashion-1",
        title="Crossbody Phone Case - TikTok Fashion Must-Have",
        price=15.99,
        original_price=29.99,
        rating=4.3,
        review_count=9876,
        image_url=_IMG.format("photo-1512499617640-c74ae3a79d37"),
        store=Store.AMAZON,
        affiliate_url="https://amazon.com/trending-fashion-1",
        discount=47,
    ),
    Product(
        id="trending-kitchen-1",
        title="Ninja Foodi Personal Blender - YouTube Kitchen Haul Favorite",
        price=79.99,
        original_price=99.99,
        rating=4.8,
        review_count=15432,
        image_url=_IMG.format("photo-1585515656618-7a1c2d5e2d30"),
        store=Store.AMAZON,
        affiliate_url="https://amazon.com/trending-kitchen-1",
        discount=20,
    ),
    Product(
        id="trending-wellness-1",
        title="Jade Facial Roller and Gua Sha Set - Wellness TikTok",
        price=14.99,
        original_price=34.99,
        rating=4.4,
        review_count=7654,
        image_url=_IMG.format("photo-1596755389378-c31d21fd1273"),
        store=Store.AMAZON,
        affiliate_url="https://amazon.com/trending-wellness-1",
        discount=57,
    ),
)

# Platform -> category -> product ids trending there
PLATFORM_TRENDS: dict[Platform, dict[str, list[str]]] = {
    Platform.TIKTOK: {
        "skincare": ["trending-skincare-1", "trending-wellness-1"],
        "tech": ["trending-tech-1"],
        "home": ["trending-home-1"],
        "fashion": ["trending-fashion-1"],
    },
    Platform.INSTAGRAM: {
        "fashion": ["trending-fashion-1"],
        "home": ["trending-home-1"],
        "wellness": ["trending-wellness-1"],
    },
    Platform.YOUTUBE: {
        "tech": ["trending-tech-1"],
        "kitchen": ["trending-kitchen-1"],
        "home": ["trending-home-1"],
    },
}


def get_trending_products(
    platform: Platform | None = None,
    category: str | None = None,
) -> list[Product]:
    """Catalog products, narrowed to one platform category when known.

    Unknown platform/category pairs return the whole catalog.
    """
    if platform is None or category is None:
        return list(TRENDING_PRODUCTS)
    ids = PLATFORM_TRENDS.get(platform, {}).get(category)
    if not ids:
        return list(TRENDING_PRODUCTS)
    return [p for p in TRENDING_PRODUCTS if p.id in ids]


def trending_ids(platform: Platform) -> set[str]:
    """Every product id trending on *platform*, across categories."""
    return {
        pid
        for ids in PLATFORM_TRENDS.get(platform, {}).values()
        for pid in ids
    }

