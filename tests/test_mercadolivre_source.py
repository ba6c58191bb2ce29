# tests/test_mercadolivre_source.py

"""Tests for the Mercado Livre marketplace source."""

import json
import unittest
from unittest.mock import MagicMock, patch

from promo_publisher.sources.mercadolivre_source import (
    ID_PREFIX,
    MercadoLivreSource,
)

_PAYLOAD = {
    "results": [
        {
            "id": "MLB111",
            "title": "Fone Bluetooth",
            "price": 75.0,
            "original_price": 100.0,
            "permalink": "https://produto.mercadolivre.com.br/MLB111",
            "thumbnail": "http://http2.mlstatic.com/D_111-I.jpg",
        },
        {
            "id": "MLB222",
            "title": "Cabo USB",
            "price": 19.9,
            "original_price": None,
            "permalink": "https://produto.mercadolivre.com.br/MLB222",
        },
        {"title": "sem id"},
    ]
}


def _response(status: int, body: str) -> MagicMock:
    resp = MagicMock()
    resp.status_code = status
    resp.text = body
    return resp


class TestMercadoLivreSource(unittest.TestCase):
    """Verify parsing and the bot-block fallback."""

    def setUp(self) -> None:
        """Create a source with a mocked session."""
        self.source = MercadoLivreSource()
        self.source.session = MagicMock()

    def test_parses_results(self) -> None:
        """Valid results become prefixed Product objects."""
        self.source.session.get.return_value = _response(
            200, json.dumps(_PAYLOAD)
        )
        products = self.source.search("fone")
        self.assertEqual(
            [p.id for p in products],
            [f"{ID_PREFIX}MLB111", f"{ID_PREFIX}MLB222"],
        )
        first = products[0]
        self.assertEqual(first.store, "Mercado Livre")
        self.assertEqual(first.source, "mercadolivre")
        self.assertEqual(first.discount, 25)
        self.assertEqual(
            first.image, "https://http2.mlstatic.com/D_111-V.jpg"
        )
        self.assertIsNone(products[1].discount)
        self.assertEqual(products[1].image, "")

    def test_non_object_results_skipped(self) -> None:
        """A string or null result does not discard the page."""
        payload = {"results": ["junk", None, *_PAYLOAD["results"]]}
        self.source.session.get.return_value = _response(
            200, json.dumps(payload)
        )
        products = self.source.search("fone")
        self.assertEqual(
            [p.id for p in products],
            [f"{ID_PREFIX}MLB111", f"{ID_PREFIX}MLB222"],
        )

    def test_unknown_sort_not_sent(self) -> None:
        """Sorts the API does not support are dropped."""
        self.source.session.get.return_value = _response(200, "{}")
        self.source.search("fone", limit=5, sort="discount")
        params = self.source.session.get.call_args.kwargs["params"]
        self.assertEqual(params, {"q": "fone", "limit": 5})

    def test_supported_sort_sent(self) -> None:
        """Supported sorts are passed through."""
        self.source.session.get.return_value = _response(200, "{}")
        self.source.search("fone", sort="price_asc")
        params = self.source.session.get.call_args.kwargs["params"]
        self.assertEqual(params["sort"], "price_asc")

    @patch("promo_publisher.sources.base_source.cloudscraper")
    def test_403_falls_back_to_cloudscraper(
        self, mock_cs: MagicMock,
    ) -> None:
        """A blocked request is repeated through cloudscraper."""
        self.source.session.get.return_value = _response(403, "forbidden")
        mock_cs.create_scraper.return_value.get.return_value = _response(
            200, json.dumps(_PAYLOAD)
        )
        products = self.source.search("fone")
        self.assertEqual(len(products), 2)

    def test_http_error_returns_empty(self) -> None:
        """A server error gives an empty list."""
        self.source.session.get.return_value = _response(500, "down")
        self.assertEqual(self.source.search("fone"), [])

    def test_unexpected_envelope_returns_empty(self) -> None:
        """A payload whose results are not a list is rejected."""
        self.source.session.get.return_value = _response(
            200, json.dumps({"results": "nope"})
        )
        self.assertEqual(self.source.search("fone"), [])


if __name__ == "__main__":
    unittest.main()
