# promo_publisher/filters/deduplicator.py

"""Candidate deduplication: across sources and against posting history."""

import logging
from dataclasses import dataclass, field

from promo_publisher.config.settings import Settings
from promo_publisher.models.product import Product
from promo_publisher.storage.posted_products_db import PostedProductsDB

logger = logging.getLogger("promo_publisher.filters")


def merge_by_id(
    *batches: list[Product],
) -> tuple[list[Product], int]:
    """Concatenate source batches, keeping the first product per id.

    Batches are taken in the order given (partner before marketplace),
    so an earlier source always wins an id collision.

    Returns the merged list and the count of dropped duplicates.
    """
    seen: set[str] = set()
    kept: list[Product] = []
    removed = 0

    for batch in batches:
        for product in batch:
            if product.id in seen:
                removed += 1
                continue
            seen.add(product.id)
            kept.append(product)

    if removed:
        logger.info(
            "Merge removed %d duplicate product ids", removed,
        )
    return kept, removed


@dataclass
class FilterResult:
    """Outcome of filtering candidates against the dedup store."""

    success: bool
    new_products: list[Product] = field(
        default_factory=lambda: list[Product]()
    )
    already_posted_count: int = 0
    error: str | None = None


class DedupFilter:
    """Drop candidates already published and cap the remainder."""

    def __init__(
        self,
        store: PostedProductsDB,
        max_candidates: int | None = None,
    ) -> None:
        self.store = store
        self.max_candidates = (
            max_candidates if max_candidates is not None
            else Settings.MAX_CANDIDATES
        )

    def filter(self, candidates: list[Product]) -> FilterResult:
        """Partition *candidates* with one batched store lookup.

        Candidate order is preserved; at most ``max_candidates`` new
        products are returned.  A store failure fails closed: nothing
        is offered for publishing.
        """
        if not candidates:
            return FilterResult(success=True)

        check = self.store.check_posted([p.id for p in candidates])
        if not check.success:
            return FilterResult(success=False, error=check.error)

        posted = set(check.already_posted_ids)
        fresh = [p for p in candidates if p.id not in posted]
        already = len(candidates) - len(fresh)

        logger.info(
            "Dedup filter: %d new, %d already posted, keeping %d",
            len(fresh),
            already,
            min(len(fresh), self.max_candidates),
        )
        return FilterResult(
            success=True,
            new_products=fresh[:self.max_candidates],
            already_posted_count=already,
        )
