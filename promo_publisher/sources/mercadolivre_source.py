# promo_publisher/sources/mercadolivre_source.py

"""Source for the Mercado Livre Brasil (MLB) public search API."""

from typing import Any

from pydantic import ValidationError

from promo_publisher.models.product import Product
from promo_publisher.sources.base_source import BaseSource
from promo_publisher.sources.schemas import (
    MercadoLivreItem,
    MercadoLivreSearchResponse,
)

# Prefix keeping marketplace ids apart from partner ids
ID_PREFIX = "ml:"


class MercadoLivreSource(BaseSource):
    """Search Mercado Livre listings.

    The public API rejects obvious bots with 403, so requests go out
    through the browser-impersonating session and a blocked request is
    repeated once through cloudscraper.
    """

    STORE_NAME = "Mercado Livre"
    # Only these sort ids are accepted; anything else gets a 400
    SORT_OPTIONS: frozenset[str] = frozenset(
        {"relevance", "price_asc", "price_desc"}
    )

    def __init__(self) -> None:
        super().__init__("mercadolivre")

    @staticmethod
    def _upgrade_thumbnail(url: str | None) -> str:
        """Serve thumbnails over https at the larger ``-V`` size."""
        if not url:
            return ""
        return url.replace("http://", "https://").replace("-I.jpg", "-V.jpg")

    def _parse_item(self, raw: Any) -> Product | None:
        """Parse one search result, or None if unusable."""
        try:
            item = MercadoLivreItem.model_validate(raw)
        except ValidationError as exc:
            self.logger.debug(
                "[mercadolivre] Skipping malformed item: %s", exc,
            )
            return None

        price = item.price or 0.0
        discount: float | None = None
        if item.original_price and item.original_price > price:
            discount = round(
                (1 - price / item.original_price) * 100
            )
        return Product(
            id=f"{ID_PREFIX}{item.id}",
            name=item.title,
            price=price,
            link=item.permalink,
            store=self.STORE_NAME,
            image=self._upgrade_thumbnail(item.thumbnail),
            original_price=item.original_price,
            discount=discount,
            source=self.source_name,
        )

    def search(
        self,
        keyword: str,
        limit: int = 20,
        sort: str | None = None,
        store_id: str | None = None,
    ) -> list[Product]:
        """Search Mercado Livre for *keyword*; never raises.

        ``store_id`` is accepted for interface parity and ignored, as is
        any *sort* the API does not know.
        """
        try:
            params: dict[str, Any] = {"q": keyword, "limit": limit}
            if sort in self.SORT_OPTIONS:
                params["sort"] = sort

            data = self._get_json(
                self.settings.MERCADOLIVRE_SEARCH_URL,
                params=params,
                browser_fallback=True,
            )
            if data is None:
                return []

            try:
                envelope = MercadoLivreSearchResponse.model_validate(data)
            except ValidationError as exc:
                self.logger.error(
                    "[mercadolivre] Unexpected search payload: %s", exc,
                )
                return []

            products = [
                p for p in map(self._parse_item, envelope.results)
                if p is not None
            ]
            self.logger.info(
                "[mercadolivre] '%s' returned %d products",
                keyword,
                len(products),
            )
            return products[:limit]
        except Exception as e:
            self.logger.error(
                "[mercadolivre] Search failed: %s", e, exc_info=True
            )
            return []
