# promo_publisher/services/pipeline.py

"""Fetch, dedup, enrich and publish: one scheduled promo run."""

import asyncio
import importlib
import logging
import random
from dataclasses import dataclass, field
from typing import Any

from promo_publisher.config.settings import Settings
from promo_publisher.filters.deduplicator import DedupFilter, merge_by_id
from promo_publisher.filters.product_validator import ProductValidator
from promo_publisher.models.product import Product
from promo_publisher.publishers.base_publisher import (
    BasePublisher,
    PublishResult,
)
from promo_publisher.services.copywriter import CopyWriter
from promo_publisher.sources.base_source import BaseSource
from promo_publisher.storage.posted_products_db import PostedProductsDB

logger = logging.getLogger("promo_publisher.pipeline")


@dataclass
class PipelineResult:
    """Summary of one pipeline run."""

    success: bool
    count: int = 0
    keyword: str = ""
    fetched_count: int = 0
    candidate_count: int = 0
    new_count: int = 0
    published: list[PublishResult] = field(
        default_factory=lambda: list[PublishResult]()
    )
    errors: list[str] = field(
        default_factory=lambda: list[str]()
    )


def _load_class(dotted_path: str) -> type[Any]:
    """Dynamically import a class from its dotted module path."""
    module_path, class_name = dotted_path.rsplit(".", 1)
    module = importlib.import_module(module_path)
    cls: type[Any] = getattr(module, class_name)
    return cls


def build_sources() -> list[BaseSource]:
    """Instantiate every registered source in merge order."""
    return [
        _load_class(src["source"])()
        for src in Settings.AVAILABLE_SOURCES
    ]


def build_publishers(
    channels: list[str] | None = None,
) -> list[BasePublisher]:
    """Instantiate the publishers for *channels* (default: enabled ones)."""
    wanted = channels if channels is not None else Settings.ENABLED_CHANNELS
    return [
        _load_class(pub["publisher"])()
        for pub in Settings.AVAILABLE_PUBLISHERS
        if pub["id"] in wanted
    ]


class PromoPipeline:
    """Coordinates sources, dedup store, copy generation and publishers.

    The dedup store is injected; sources, copywriter and publishers
    default to the registered implementations.  Runs are sequential
    except for copy generation, which fans out concurrently.
    """

    def __init__(
        self,
        store: PostedProductsDB,
        sources: list[BaseSource] | None = None,
        copywriter: CopyWriter | None = None,
        publishers: list[BasePublisher] | None = None,
        max_candidates: int | None = None,
        publish_delay: float | None = None,
        rng: random.Random | None = None,
    ) -> None:
        self.store = store
        self.sources = sources if sources is not None else build_sources()
        self.copywriter = copywriter or CopyWriter()
        self.publishers = (
            publishers if publishers is not None else build_publishers()
        )
        self.dedup_filter = DedupFilter(store, max_candidates)
        self.publish_delay = (
            publish_delay if publish_delay is not None
            else Settings.PUBLISH_DELAY
        )
        self._rng = rng or random.Random()

    # ── Steps ────────────────────────────────────────────

    def pick_keyword(self) -> str:
        return self._rng.choice(Settings.KEYWORDS)

    def pick_store(self) -> dict[str, str | None]:
        return self._rng.choice(Settings.LOMADEE_STORES)

    async def fetch(
        self,
        keyword: str,
        store_id: str | None,
        errors: list[str],
    ) -> list[Product]:
        """Query every source in order and merge the batches by id."""
        batches: list[list[Product]] = []
        for source in self.sources:
            name = getattr(source, "source_name", type(source).__name__)
            try:
                batch: list[Product] = await asyncio.to_thread(
                    source.search,
                    keyword,
                    Settings.FETCH_LIMIT,
                    Settings.FETCH_SORT,
                    store_id,
                )
            except Exception as exc:
                errors.append(f"{name}: {exc}")
                logger.error(
                    "Source %s failed for '%s': %s",
                    name,
                    keyword,
                    exc,
                    exc_info=True,
                )
                continue
            logger.info(
                "Source %s returned %d products", name, len(batch),
            )
            batches.append(batch)

        merged, _ = merge_by_id(*batches)
        return merged

    async def publish(
        self,
        products: list[Product],
        errors: list[str],
    ) -> list[PublishResult]:
        """Publish each product on each channel and record successes.

        Consecutive channel calls are spaced by ``publish_delay``.
        """
        results: list[PublishResult] = []
        first_call = True
        for product in products:
            for publisher in self.publishers:
                if not first_call and self.publish_delay > 0:
                    await asyncio.sleep(self.publish_delay)
                first_call = False

                result = await asyncio.to_thread(
                    publisher.publish, product
                )
                results.append(result)
                if not result.success:
                    errors.append(
                        f"{result.channel} {product.id}: {result.error}"
                    )
                    continue

                stored = await asyncio.to_thread(
                    self.store.mark_posted,
                    product,
                    telegram=result.channel == "telegram",
                    whatsapp=result.channel == "whatsapp",
                    twitter=result.channel == "twitter",
                )
                if not stored.success:
                    errors.append(f"store {product.id}: {stored.error}")
        return results

    # ── Entry point ──────────────────────────────────────

    async def run(self) -> PipelineResult:
        """Run fetch → dedup → enrich → publish once."""
        keyword = self.pick_keyword()
        store = self.pick_store()
        logger.info(
            "Pipeline run: keyword '%s', store %s (%s)",
            keyword,
            store["name"],
            store["id"] or "geral",
        )
        result = PipelineResult(success=False, keyword=keyword)

        fetched = await self.fetch(keyword, store["id"], result.errors)
        result.fetched_count = len(fetched)
        candidates, _ = ProductValidator.validate(fetched)
        result.candidate_count = len(candidates)
        if not candidates:
            logger.warning("No candidates for '%s'", keyword)
            return result

        filtered = await asyncio.to_thread(
            self.dedup_filter.filter, candidates
        )
        if not filtered.success:
            result.errors.append(filtered.error or "Dedup filter failed")
            return result
        result.new_count = len(filtered.new_products)
        if not filtered.new_products:
            logger.info("All candidates for '%s' already posted", keyword)
            result.success = True
            return result

        enriched = await self.copywriter.enrich(filtered.new_products)
        result.published = await self.publish(enriched, result.errors)
        result.count = sum(1 for r in result.published if r.success)
        result.success = True

        logger.info(
            "Pipeline run done: %d posts from %d new products "
            "(%d fetched, %d errors)",
            result.count,
            result.new_count,
            result.fetched_count,
            len(result.errors),
        )
        return result
