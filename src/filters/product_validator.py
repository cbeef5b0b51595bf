# src/filters/product_validator.py

"""Product validation: drop listings the UI cannot show or link to."""

import logging

from src.models.product import Product

logger = logging.getLogger("trendbuy.filters")


class ProductValidator:
    """Drop products with missing essential fields."""

    @staticmethod
    def validate(
        products: list[Product],
    ) -> tuple[list[Product], int]:
        """Drop products with blank titles, ids or affiliate links.

        Returns the valid products and the count of dropped items.
        Price and rating ranges are already enforced by ``Product``.
        """
        valid: list[Product] = []
        dropped = 0

        for product in products:
            if not product.title.strip() or not product.id.strip():
                logger.debug(
                    "Dropped product with empty title or id "
                    "(store=%s, link=%s)",
                    product.store.value,
                    product.affiliate_url,
                )
                dropped += 1
                continue
            if not product.affiliate_url.strip():
                logger.debug(
                    "Dropped product without affiliate link "
                    "(id=%s)",
                    product.id,
                )
                dropped += 1
                continue
            valid.append(product)

        if dropped:
            logger.info(
                "Validation dropped %d invalid products",
                dropped,
            )

        return valid, dropped
