# promo_publisher/filters/product_validator.py

"""Product validation, dropping unusable candidates before dedup."""

import logging

from promo_publisher.models.product import Product

logger = logging.getLogger("promo_publisher.filters")


class ProductValidator:
    """Validate products and drop those that cannot be published."""

    @staticmethod
    def validate(
        products: list[Product],
    ) -> tuple[list[Product], int]:
        """Drop products without id, name or link, or with a negative price.

        A zero price is kept: it still renders as a valid post.
        Returns the valid products and the count of dropped items.
        """
        valid: list[Product] = []
        dropped = 0

        for product in products:
            if not product.id.strip():
                logger.debug(
                    "Dropped product without id (source=%s, name=%s)",
                    product.source,
                    product.name,
                )
                dropped += 1
                continue
            if not product.name.strip():
                logger.debug(
                    "Dropped product with empty name (id=%s)",
                    product.id,
                )
                dropped += 1
                continue
            if not product.link.strip():
                logger.debug(
                    "Dropped product without link (id=%s)",
                    product.id,
                )
                dropped += 1
                continue
            if product.price < 0:
                logger.debug(
                    "Dropped product with negative price "
                    "(id=%s, price=%s)",
                    product.id,
                    product.price,
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
