# src/models/link_metadata.py

"""Ephemeral models produced while interpreting a pasted link."""

from dataclasses import dataclass, field
from enum import Enum


class Platform(str, Enum):
    """Coarse classification of where a link points."""

    TIKTOK = "tiktok"
    INSTAGRAM = "instagram"
    YOUTUBE = "youtube"
    AMAZON = "amazon"
    OTHER = "other"


@dataclass
class PageMetadata:
    """Descriptive text a metadata source found for a URL."""

    title: str | None = None
    description: str | None = None

    @property
    def text(self) -> str:
        """Title and description joined, for keyword mining."""
        return f"{self.title or ''} {self.description or ''}".strip()


@dataclass
class LinkMetadata:
    """Interpretation of a link: platform, keywords, confidence.

    Produced and consumed within a single search; never persisted.
    """

    platform: Platform
    keywords: list[str] = field(
        default_factory=lambda: list[str]()
    )
    confidence: float = 0.0
    title: str | None = None
    description: str | None = None
    product_name: str | None = None
