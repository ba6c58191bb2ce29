# promo_publisher/sources/lomadee_source.py

"""Source for the Lomadee affiliate network (partner offers)."""

from typing import Any

from pydantic import ValidationError

from promo_publisher.models.product import Product
from promo_publisher.sources.base_source import BaseSource
from promo_publisher.sources.schemas import (
    LomadeeOffer,
    LomadeeOffersResponse,
    LomadeeProduct,
    LomadeeProductsResponse,
)


class LomadeeSource(BaseSource):
    """Search Lomadee partner offers.

    The affiliate products endpoint is queried first, scoped to a store
    when one is given and widened to all stores if that comes back
    empty.  If it still has nothing, the legacy v3 offer search is
    tried; its payload uses different field names and is normalised to
    the same Product shape.
    """

    def __init__(
        self,
        api_key: str | None = None,
        app_token: str | None = None,
        source_id: str | None = None,
    ) -> None:
        super().__init__("lomadee")
        self.api_key = (
            api_key if api_key is not None
            else self.settings.LOMADEE_API_KEY
        )
        self.app_token = (
            app_token if app_token is not None
            else self.settings.LOMADEE_APP_TOKEN
        )
        self.source_id = (
            source_id if source_id is not None
            else self.settings.LOMADEE_SOURCE_ID
        )

    # ── Parsing ──────────────────────────────────────────

    def _parse_product(self, raw: Any) -> Product | None:
        """Parse one affiliate-products entry, or None if unusable."""
        try:
            item = LomadeeProduct.model_validate(raw)
        except ValidationError as exc:
            self.logger.debug(
                "[lomadee] Skipping malformed product: %s", exc,
            )
            return None
        if not item.id:
            return None
        price = item.price or 0.0
        return Product(
            id=item.id,
            name=item.name or "Produto sem nome",
            price=price,
            link=item.link or "",
            store=item.store or self.settings.DEFAULT_STORE_NAME,
            image=item.image or "",
            original_price=item.original_price,
            discount=item.discount or None,
            category=item.category or "",
            source=self.source_name,
        )

    def _parse_offer(self, raw: Any) -> Product | None:
        """Parse one legacy offer-search entry, or None if unusable."""
        try:
            offer = LomadeeOffer.model_validate(raw)
        except ValidationError as exc:
            self.logger.debug(
                "[lomadee] Skipping malformed offer: %s", exc,
            )
            return None
        return Product(
            id=offer.id,
            name=offer.name,
            price=offer.price or 0.0,
            link=offer.link,
            store=offer.store or self.settings.DEFAULT_STORE_NAME,
            image=offer.thumbnail or "",
            original_price=offer.price_from,
            discount=offer.discount or None,
            category=offer.category or "",
            source=self.source_name,
        )

    # ── Endpoints ────────────────────────────────────────

    def _search_products(
        self,
        keyword: str,
        limit: int,
        sort: str | None,
        store_id: str | None,
    ) -> list[Product]:
        """Query the affiliate products endpoint."""
        params: dict[str, Any] = {
            "search": keyword,
            "page": 1,
            "limit": limit,
        }
        if sort:
            params["sort"] = sort
        if store_id:
            params["storeId"] = store_id

        data = self._get_json(
            self.settings.LOMADEE_PRODUCTS_URL,
            params=params,
            headers={
                "x-api-key": self.api_key,
                "Content-Type": "application/json",
            },
        )
        if data is None:
            return []
        try:
            envelope = LomadeeProductsResponse.model_validate(data)
        except ValidationError as exc:
            self.logger.error(
                "[lomadee] Unexpected products payload: %s", exc,
            )
            return []

        products = [
            p for p in map(self._parse_product, envelope.data)
            if p is not None
        ]
        return products[:limit]

    def _search_offers(
        self,
        keyword: str,
        limit: int,
        sort: str | None,
    ) -> list[Product]:
        """Query the legacy v3 offer search."""
        if not self.app_token:
            self.logger.debug(
                "[lomadee] No LOMADEE_APP_TOKEN, skipping offer search"
            )
            return []

        params: dict[str, Any] = {"keyword": keyword, "size": limit}
        if self.source_id:
            params["sourceId"] = self.source_id
        if sort:
            params["sort"] = sort

        data = self._get_json(
            self.settings.LOMADEE_OFFERS_URL.format(
                app_token=self.app_token
            ),
            params=params,
        )
        if data is None:
            return []
        try:
            envelope = LomadeeOffersResponse.model_validate(data)
        except ValidationError as exc:
            self.logger.error(
                "[lomadee] Unexpected offers payload: %s", exc,
            )
            return []

        products = [
            p for p in map(self._parse_offer, envelope.offers)
            if p is not None
        ]
        return products[:limit]

    # ── Public API ───────────────────────────────────────

    def search(
        self,
        keyword: str,
        limit: int = 20,
        sort: str | None = None,
        store_id: str | None = None,
    ) -> list[Product]:
        """Search Lomadee for *keyword*; never raises."""
        if not self.api_key:
            self.logger.error("[lomadee] Missing LOMADEE_API_KEY")
            return []

        try:
            products = self._search_products(
                keyword, limit, sort, store_id,
            )
            if not products and store_id:
                self.logger.info(
                    "[lomadee] Store %s empty for '%s', "
                    "trying general search",
                    store_id,
                    keyword,
                )
                products = self._search_products(
                    keyword, limit, sort, None,
                )
            if not products:
                self.logger.info(
                    "[lomadee] No products for '%s', "
                    "falling back to offer search",
                    keyword,
                )
                products = self._search_offers(keyword, limit, sort)

            self.logger.info(
                "[lomadee] '%s' returned %d products",
                keyword,
                len(products),
            )
            return products
        except Exception as e:
            self.logger.error(
                "[lomadee] Search failed: %s", e, exc_info=True
            )
            return []
