# promo_publisher/sources/schemas.py

"""Response schemas for the product search APIs.

Each provider payload is validated here before it is turned into a
:class:`~promo_publisher.models.product.Product`.  Envelopes are parsed
first; entries are then parsed one by one so a single malformed entry
can be skipped without discarding the whole page.
"""

from typing import Any

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    field_validator,
)


def _name_of(value: Any) -> Any:
    """Flatten ``{"name": ...}`` objects some endpoints use for store/category."""
    if isinstance(value, dict):
        return value.get("name") or value.get("title") or ""
    return value


class _Lenient(BaseModel):
    model_config = ConfigDict(
        extra="ignore",
        coerce_numbers_to_str=True,
        populate_by_name=True,
    )


# ── Lomadee affiliate products (primary) ─────────────────


class LomadeeProduct(_Lenient):
    """One entry of ``GET /affiliate/products``.

    The beta API has shipped several field spellings; the first one
    present wins.
    """

    id: str | None = Field(
        default=None, validation_alias=AliasChoices("id", "productId"),
    )
    name: str | None = Field(
        default=None,
        validation_alias=AliasChoices("name", "title", "productName"),
    )
    price: float | None = Field(
        default=None,
        validation_alias=AliasChoices("price", "salePrice", "priceFrom"),
    )
    original_price: float | None = Field(
        default=None,
        validation_alias=AliasChoices("originalPrice", "priceFrom"),
    )
    discount: float | None = Field(
        default=None,
        validation_alias=AliasChoices("discount", "discountPercent"),
    )
    link: str | None = Field(
        default=None,
        validation_alias=AliasChoices(
            "link", "url", "deepLink", "affiliateLink",
        ),
    )
    image: str | None = Field(
        default=None,
        validation_alias=AliasChoices("image", "thumbnail", "imageUrl"),
    )
    store: str | None = Field(
        default=None,
        validation_alias=AliasChoices("store", "storeName", "advertiser"),
    )
    category: str | None = Field(
        default=None,
        validation_alias=AliasChoices("category", "categoryName"),
    )

    @field_validator("store", "category", mode="before")
    @classmethod
    def flatten_named(cls, value: Any) -> Any:
        return _name_of(value)


class LomadeeProductsResponse(_Lenient):
    """Envelope of ``GET /affiliate/products``."""

    data: list[Any] = Field(default_factory=list)


# ── Lomadee v3 offer search (secondary) ──────────────────


class LomadeeOffer(_Lenient):
    """One entry of the legacy ``/v3/{token}/offer/_search`` endpoint."""

    id: str
    name: str
    price: float | None = None
    price_from: float | None = Field(
        default=None, validation_alias=AliasChoices("priceFrom"),
    )
    discount: float | None = None
    link: str = ""
    thumbnail: str | None = None
    category: str | None = None
    store: str | None = None

    @field_validator("store", "category", mode="before")
    @classmethod
    def flatten_named(cls, value: Any) -> Any:
        return _name_of(value)


class LomadeeOffersResponse(_Lenient):
    """Envelope of the legacy offer search."""

    offers: list[Any] = Field(default_factory=list)


# ── Mercado Livre search ─────────────────────────────────


class MercadoLivreItem(_Lenient):
    """One entry of ``GET /sites/MLB/search``."""

    id: str
    title: str
    price: float | None = None
    original_price: float | None = None
    permalink: str = ""
    thumbnail: str | None = None


class MercadoLivreSearchResponse(_Lenient):
    """Envelope of ``GET /sites/MLB/search``."""

    results: list[Any] = Field(default_factory=list)
