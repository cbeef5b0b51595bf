# src/services/link_interpreter.py

"""Turn a pasted social/shop link into keywords and a confidence score."""

import asyncio
import logging
import re
from typing import Protocol
from urllib.parse import urlparse

from src.config.settings import Settings
from src.models.link_metadata import LinkMetadata, PageMetadata, Platform

logger = logging.getLogger("trendbuy.interpreter")

# Evaluated in order, first match wins.
PLATFORM_RULES: tuple[tuple[re.Pattern[str], Platform], ...] = (
    (re.compile(r"tiktok\.com|vm\.tiktok\.com", re.I), Platform.TIKTOK),
    (re.compile(r"instagram\.com|instagr\.am", re.I), Platform.INSTAGRAM),
    (re.compile(r"youtube\.com|youtu\.be", re.I), Platform.YOUTUBE),
    (
        re.compile(r"amazon\.(com|co\.uk|ca|de|fr|it|es|in|au|br|mx)", re.I),
        Platform.AMAZON,
    ),
)

PRODUCT_PATTERNS: tuple[re.Pattern[str], ...] = (
    re.compile(r"(\w+\s+)?(?:earbuds?|headphones?|airpods?)"),
    re.compile(r"(\w+\s+)?(?:skincare|serum|moisturizer|cleanser)"),
    re.compile(r"(\w+\s+)?(?:phone\s+case|case|cover)"),
    re.compile(r"(\w+\s+)?(?:led\s+lights?|strip\s+lights?)"),
    re.compile(r"(\w+\s+)?(?:bluetooth|wireless|usb)"),
    re.compile(r"(\w+\s+)?(?:gadget|device|tech)"),
)

COMMERCE_INDICATORS: tuple[str, ...] = (
    "buy", "purchase", "product", "review", "haul", "unboxing",
    "best", "top", "under", "$", "price", "deal", "sale",
)

BASE_CONFIDENCE = 0.3
COMMERCE_BONUS = 0.3
KEYWORD_BONUS = 0.2
FALLBACK_CONFIDENCE = 0.2
PLATFORM_BONUS: dict[Platform, float] = {
    Platform.AMAZON: 0.4,
    Platform.TIKTOK: 0.1,
    Platform.INSTAGRAM: 0.1,
    Platform.YOUTUBE: 0.1,
}

_AMAZON_SLUG_RE = re.compile(r"/([^/]+)/dp/\w+")
_SLUG_SEGMENT_RE = re.compile(r"^[a-z]+(?:-[a-z0-9]+)+$", re.I)


class MetadataSource(Protocol):
    """Looks up a title/description for a URL."""

    async def fetch(self, url: str) -> PageMetadata: ...


class SimulatedMetadataSource:
    """Canned metadata per platform after a non-blocking delay."""

    def __init__(self, delay: float | None = None) -> None:
        self.delay = Settings.METADATA_DELAY if delay is None else delay

    async def fetch(self, url: str) -> PageMetadata:
        await asyncio.sleep(self.delay)

        if "tiktok" in url:
            return PageMetadata(
                title=(
                    "Amazing skincare routine that changed my life! "
                    "#skincare #glowup"
                ),
                description=(
                    "Check out this incredible product that "
                    "transformed my skin..."
                ),
            )
        if "youtube" in url:
            return PageMetadata(
                title="AMAZON HAUL 2024 - Best Tech Gadgets Under $50!",
                description=(
                    "I found the coolest tech gadgets on Amazon for "
                    "under $50. Links in description!"
                ),
            )
        if "instagram" in url:
            return PageMetadata(
                title="New wireless earbuds are a game changer! 🎧",
                description=(
                    "These bluetooth earbuds have the best sound "
                    "quality for the price"
                ),
            )
        return PageMetadata()


def detect_platform(url: str) -> Platform:
    """Classify *url* with :data:`PLATFORM_RULES`."""
    for pattern, platform in PLATFORM_RULES:
        if pattern.search(url):
            return platform
    return Platform.OTHER


def extract_keywords(text: str, platform: Platform) -> list[str]:
    """Up to ``MAX_KEYWORDS`` product phrases found in *text*."""
    lowered = text.lower()
    found: dict[str, None] = {}

    for pattern in PRODUCT_PATTERNS:
        for match in pattern.finditer(lowered):
            found.setdefault(match.group(0).strip(), None)

    if platform is Platform.TIKTOK and "skincare" in lowered:
        found.setdefault("skincare routine", None)
        found.setdefault("face serum", None)

    if "amazon haul" in lowered:
        found.setdefault("tech gadgets", None)
        found.setdefault("amazon finds", None)

    return list(found)[: Settings.MAX_KEYWORDS]


def url_hints(url: str, platform: Platform) -> list[str]:
    """Product-name hints mined from the URL path itself."""
    if platform is Platform.AMAZON:
        match = _AMAZON_SLUG_RE.search(url)
        if match:
            return [match.group(1).replace("-", " ")]

    path = urlparse(url).path
    hints = [
        segment.replace("-", " ").lower()
        for segment in path.split("/")
        if _SLUG_SEGMENT_RE.match(segment)
    ]
    return hints[: Settings.MAX_KEYWORDS]


def has_commerce_intent(text: str) -> bool:
    lowered = text.lower()
    return any(word in lowered for word in COMMERCE_INDICATORS)


def score_confidence(
    metadata: PageMetadata,
    keywords: list[str],
    platform: Platform,
) -> float:
    """Base score plus commerce, keyword and platform bonuses, in [0, 1]."""
    confidence = BASE_CONFIDENCE
    if has_commerce_intent(metadata.text):
        confidence += COMMERCE_BONUS
    if keywords:
        confidence += KEYWORD_BONUS
    confidence += PLATFORM_BONUS.get(platform, 0.0)
    return min(max(confidence, 0.0), 1.0)


class LinkInterpreter:
    """Classify a link, mine keywords, score how product-like it is.

    ``interpret`` never raises: a failing or slow metadata source drops
    to URL-based extraction with a low fixed confidence.
    """

    def __init__(
        self,
        metadata_source: MetadataSource | None = None,
        timeout: float = Settings.METADATA_TIMEOUT,
    ) -> None:
        self.metadata_source = (
            metadata_source
            if metadata_source is not None
            else SimulatedMetadataSource()
        )
        self.timeout = timeout

    async def interpret(self, url: str) -> LinkMetadata:
        platform = detect_platform(url)

        try:
            metadata = await asyncio.wait_for(
                self.metadata_source.fetch(url), self.timeout
            )
            if not isinstance(metadata, PageMetadata):
                msg = f"Metadata source returned {type(metadata).__name__}"
                raise TypeError(msg)
            keywords = extract_keywords(metadata.text, platform)
        except Exception as exc:
            logger.warning(
                "Failed to fetch metadata for %s (%s), "
                "falling back to URL parsing",
                url,
                exc.__class__.__name__,
                exc_info=not isinstance(exc, TimeoutError),
            )
            return self._fallback(url, platform)

        if not keywords:
            keywords = url_hints(url, platform)

        result = LinkMetadata(
            platform=platform,
            keywords=keywords,
            confidence=score_confidence(metadata, keywords, platform),
            title=metadata.title,
            description=metadata.description,
        )
        logger.info(
            "Interpreted %s as %s: keywords=%s confidence=%.2f",
            url,
            platform.value,
            keywords,
            result.confidence,
        )
        return result

    def _fallback(self, url: str, platform: Platform) -> LinkMetadata:
        hints = url_hints(url, platform)
        return LinkMetadata(
            platform=platform,
            keywords=hints,
            confidence=FALLBACK_CONFIDENCE,
            product_name=hints[0] if hints else None,
        )
