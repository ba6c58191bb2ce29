# promo_publisher/storage/posted_products_db.py

"""SQLite-backed dedup store of products already published."""

import logging
import sqlite3
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from pathlib import Path

from promo_publisher.config.settings import Settings
from promo_publisher.models.posted_product import PostedProduct
from promo_publisher.models.product import Product

logger = logging.getLogger("promo_publisher.store")

# SQLite's historical default for SQLITE_MAX_VARIABLE_NUMBER is 999
_MAX_IN_PARAMS = 500

_SCHEMA = """\
CREATE TABLE IF NOT EXISTS posted_products (
    product_id      TEXT    PRIMARY KEY,
    product_name    TEXT    NOT NULL DEFAULT '',
    product_link    TEXT    NOT NULL DEFAULT '',
    product_price   REAL    NOT NULL DEFAULT 0,
    posted_telegram INTEGER NOT NULL DEFAULT 0,
    posted_whatsapp INTEGER NOT NULL DEFAULT 0,
    posted_twitter  INTEGER NOT NULL DEFAULT 0,
    posted_at       TEXT    NOT NULL
);

CREATE INDEX IF NOT EXISTS idx_posted_products_posted_at
    ON posted_products(posted_at);
"""

_UPSERT = """\
INSERT INTO posted_products (
    product_id, product_name, product_link, product_price,
    posted_telegram, posted_whatsapp, posted_twitter, posted_at
)
VALUES (?, ?, ?, ?, ?, ?, ?, ?)
ON CONFLICT(product_id) DO UPDATE SET
    posted_telegram = posted_products.posted_telegram
                      OR excluded.posted_telegram,
    posted_whatsapp = posted_products.posted_whatsapp
                      OR excluded.posted_whatsapp,
    posted_twitter  = posted_products.posted_twitter
                      OR excluded.posted_twitter,
    posted_at       = excluded.posted_at
"""


@dataclass
class CheckResult:
    """Outcome of a batched already-posted lookup."""

    success: bool
    new_ids: list[str] = field(default_factory=lambda: list[str]())
    already_posted_ids: list[str] = field(
        default_factory=lambda: list[str]()
    )
    error: str | None = None


@dataclass
class StoreResult:
    """Outcome of a write to the dedup store."""

    success: bool
    error: str | None = None


@dataclass
class RecentResult:
    """Outcome of a recently-posted listing."""

    success: bool
    products: list[PostedProduct] = field(
        default_factory=lambda: list[PostedProduct]()
    )
    error: str | None = None


class PostedProductsDB:
    """Dedup store keyed by product id with per-channel posted flags.

    Every operation acquires its own connection through
    :meth:`connection`, so one instance can be handed to the pipeline
    and to tests without sharing a live handle between them.
    """

    def __init__(
        self, db_path: Path | None = None,
    ) -> None:
        self.db_path = db_path or Settings.DB_PATH
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        with self.connection() as conn:
            conn.executescript(_SCHEMA)
        logger.debug("PostedProductsDB ready at %s", self.db_path)

    @contextmanager
    def connection(self) -> Iterator[sqlite3.Connection]:
        """Yield a connection; commit on success, roll back on error."""
        conn = sqlite3.connect(str(self.db_path), timeout=10.0)
        try:
            conn.execute("PRAGMA journal_mode=WAL")
            yield conn
            conn.commit()
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()

    # ── Lookup ───────────────────────────────────────────

    def check_posted(self, product_ids: list[str]) -> CheckResult:
        """Split *product_ids* into new and already-posted ids.

        Input order is preserved in both output lists.
        """
        if not product_ids:
            return CheckResult(success=True)

        unique_ids = list(dict.fromkeys(product_ids))
        posted: set[str] = set()
        try:
            with self.connection() as conn:
                for start in range(0, len(unique_ids), _MAX_IN_PARAMS):
                    chunk = unique_ids[start:start + _MAX_IN_PARAMS]
                    placeholders = ", ".join("?" for _ in chunk)
                    rows = conn.execute(
                        "SELECT product_id FROM posted_products "
                        f"WHERE product_id IN ({placeholders})",
                        chunk,
                    ).fetchall()
                    posted.update(r[0] for r in rows)
        except sqlite3.Error as exc:
            logger.error(
                "Failed to check posted products: %s", exc,
                exc_info=True,
            )
            return CheckResult(
                success=False,
                error=f"Failed to check products: {exc}",
            )

        result = CheckResult(
            success=True,
            new_ids=[i for i in product_ids if i not in posted],
            already_posted_ids=[i for i in product_ids if i in posted],
        )
        logger.info(
            "Posted check: %d new, %d already posted",
            len(result.new_ids),
            len(result.already_posted_ids),
        )
        return result

    # ── Recording ────────────────────────────────────────

    def mark_posted(
        self,
        product: Product,
        telegram: bool = False,
        whatsapp: bool = False,
        twitter: bool = False,
        posted_at: datetime | None = None,
    ) -> StoreResult:
        """Upsert *product*, OR-merging the channel flags.

        Flags already set are never cleared; ``posted_at`` is refreshed
        on every call.
        """
        ts = (posted_at or datetime.now()).isoformat()
        try:
            with self.connection() as conn:
                conn.execute(
                    _UPSERT,
                    (
                        product.id,
                        product.name,
                        product.link,
                        product.price,
                        int(telegram),
                        int(whatsapp),
                        int(twitter),
                        ts,
                    ),
                )
        except sqlite3.Error as exc:
            logger.error(
                "Failed to mark %s as posted: %s", product.id, exc,
                exc_info=True,
            )
            return StoreResult(
                success=False,
                error=f"Failed to mark product as posted: {exc}",
            )

        logger.info(
            "Marked %s as posted (telegram=%s, whatsapp=%s, twitter=%s)",
            product.id,
            telegram,
            whatsapp,
            twitter,
        )
        return StoreResult(success=True)

    # ── Querying ─────────────────────────────────────────

    def get_posted(self, product_id: str) -> PostedProduct | None:
        """Return the stored record for *product_id*, if any."""
        with self.connection() as conn:
            row = conn.execute(
                "SELECT product_id, product_name, product_link, "
                "       product_price, posted_telegram, posted_whatsapp, "
                "       posted_twitter, posted_at "
                "FROM posted_products WHERE product_id = ?",
                (product_id,),
            ).fetchone()
        return _row_to_posted(row) if row else None

    def get_recently_posted(
        self,
        limit: int = 50,
        hours_ago: float = 24,
        now: datetime | None = None,
    ) -> RecentResult:
        """List products posted within the last *hours_ago* hours, newest first."""
        cutoff = (
            (now or datetime.now()) - timedelta(hours=hours_ago)
        ).isoformat()
        try:
            with self.connection() as conn:
                rows = conn.execute(
                    "SELECT product_id, product_name, product_link, "
                    "       product_price, posted_telegram, "
                    "       posted_whatsapp, posted_twitter, posted_at "
                    "FROM posted_products "
                    "WHERE posted_at > ? "
                    "ORDER BY posted_at DESC "
                    "LIMIT ?",
                    (cutoff, limit),
                ).fetchall()
        except sqlite3.Error as exc:
            logger.error(
                "Failed to list recently posted products: %s", exc,
                exc_info=True,
            )
            return RecentResult(
                success=False,
                error=f"Failed to get recently posted products: {exc}",
            )

        products = [_row_to_posted(r) for r in rows]
        logger.debug("Fetched %d recently posted products", len(products))
        return RecentResult(success=True, products=products)


def _row_to_posted(row: tuple[object, ...]) -> PostedProduct:
    """Build a PostedProduct from a ``posted_products`` row."""
    return PostedProduct(
        product_id=str(row[0]),
        product_name=str(row[1]),
        product_link=str(row[2]),
        product_price=float(str(row[3] or 0)),
        posted_telegram=bool(row[4]),
        posted_whatsapp=bool(row[5]),
        posted_twitter=bool(row[6]),
        posted_at=datetime.fromisoformat(str(row[7])),
    )
