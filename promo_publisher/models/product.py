# promo_publisher/models/product.py

"""Product data model shared by sources, filters, copy and publishers."""

from dataclasses import dataclass


@dataclass
class Product:
    """A promotional product candidate fetched during one pipeline run.

    ``id`` is unique across sources: marketplace ids carry a source
    prefix so they can never collide with partner ids.
    """

    id: str
    name: str
    price: float
    link: str
    store: str = ""
    image: str = ""
    original_price: float | None = None
    discount: float | None = None
    category: str = ""
    source: str = ""
    generated_message: str | None = None

    @property
    def has_discount(self) -> bool:
        """True when a real markdown from ``original_price`` exists."""
        return (
            self.original_price is not None
            and self.original_price > self.price
        )
