# promo_publisher/sources/base_source.py

"""Abstract base class for all product search sources."""

import json
import logging
from abc import ABC, abstractmethod
from typing import Any

import cloudscraper  # type: ignore[import-untyped]
from curl_cffi import requests as curl_requests

from promo_publisher.config.settings import Settings
from promo_publisher.models.product import Product


class BaseSource(ABC):
    """Abstract base class for product search API adapters.

    Subclasses implement :meth:`search`, which must never raise: any
    network, HTTP or payload problem degrades to an empty list.
    """

    # Status codes that mean "blocked as a bot" rather than "no data"
    _BOT_BLOCK_STATUSES: tuple[int, ...] = (403,)

    def __init__(self, source_name: str) -> None:
        self.source_name = source_name
        self.logger = logging.getLogger(
            f"promo_publisher.sources.{source_name}"
        )
        self.settings = Settings()
        self.session = curl_requests.Session(
            impersonate=self.settings.IMPERSONATE_BROWSER
        )
        self._request_timeout: int = self.settings.REQUEST_TIMEOUT

    def _get_json(
        self,
        url: str,
        params: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
        browser_fallback: bool = False,
    ) -> Any | None:
        """GET *url* once and decode the JSON body.

        Returns ``None`` on transport errors, non-200 responses and
        undecodable bodies.  With *browser_fallback*, a bot-block
        status is answered by one request through cloudscraper.
        """
        merged_headers: dict[str, str] = {
            **self.settings.DEFAULT_HEADERS,
            **(headers or {}),
        }
        try:
            resp = self.session.get(
                url,
                params=params,
                headers=merged_headers,
                timeout=self._request_timeout,
            )
        except Exception as exc:
            self.logger.error(
                "[%s] Request error for %s: %s",
                self.source_name,
                url,
                exc,
                exc_info=True,
            )
            return None

        status: int = resp.status_code
        text: str = resp.text
        if status in self._BOT_BLOCK_STATUSES and browser_fallback:
            self.logger.info(
                "[%s] HTTP %d, falling back to cloudscraper",
                self.source_name,
                status,
            )
            fallback = self._get_with_cloudscraper(
                url, params, merged_headers,
            )
            if fallback is None:
                return None
            status, text = fallback

        if status != 200:
            self.logger.warning(
                "[%s] HTTP %d from %s: %s",
                self.source_name,
                status,
                url,
                text[:200],
            )
            return None

        try:
            return json.loads(text)
        except ValueError as exc:
            self.logger.error(
                "[%s] Invalid JSON from %s: %s",
                self.source_name,
                url,
                exc,
            )
            return None

    def _get_with_cloudscraper(
        self,
        url: str,
        params: dict[str, Any] | None,
        headers: dict[str, str],
    ) -> tuple[int, str] | None:
        """Repeat a blocked GET through cloudscraper's challenge solver."""
        try:
            _cs: Any = cloudscraper
            scraper: Any = _cs.create_scraper()
            fallback_resp: Any = scraper.get(
                url,
                params=params,
                headers=headers,
                timeout=self._request_timeout,
            )
            return int(fallback_resp.status_code), str(fallback_resp.text)
        except Exception as exc:
            self.logger.error(
                "[%s] cloudscraper fallback also failed: %s",
                self.source_name,
                exc,
                exc_info=True,
            )
            return None

    @abstractmethod
    def search(
        self,
        keyword: str,
        limit: int = 20,
        sort: str | None = None,
        store_id: str | None = None,
    ) -> list[Product]:
        """Search for products and return normalised Product objects."""
        ...
