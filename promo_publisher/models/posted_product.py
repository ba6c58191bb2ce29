# promo_publisher/models/posted_product.py

"""Persistent record of a product already published to the channels."""

from dataclasses import dataclass
from datetime import datetime


@dataclass
class PostedProduct:
    """One row of the ``posted_products`` dedup table."""

    product_id: str
    product_name: str
    product_link: str
    product_price: float
    posted_telegram: bool
    posted_whatsapp: bool
    posted_twitter: bool
    posted_at: datetime
