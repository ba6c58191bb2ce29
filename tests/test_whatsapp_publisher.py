# tests/test_whatsapp_publisher.py

"""Tests for the WhatsApp Cloud API publisher."""

import unittest
from unittest.mock import MagicMock

from promo_publisher.models.product import Product
from promo_publisher.publishers.whatsapp_publisher import WhatsAppPublisher


def _product(**overrides: object) -> Product:
    fields: dict[str, object] = {
        "id": "A1",
        "name": "Fone *Bluetooth*",
        "price": 80.0,
        "link": "https://loja.example/A1",
        "store": "Loja X",
    }
    fields.update(overrides)
    return Product(**fields)  # type: ignore[arg-type]


def _response(data: object, status: int = 200) -> MagicMock:
    resp = MagicMock()
    resp.status_code = status
    resp.json.return_value = data
    return resp


class TestWhatsAppPublisher(unittest.TestCase):
    """Verify configuration, payload and error handling."""

    def _publisher(self, recipient: str = "5511999999999") -> WhatsAppPublisher:
        publisher = WhatsAppPublisher(
            access_token="secret",
            phone_number_id="1234",
            recipient_number=recipient,
            group_id="grupo-1",
        )
        publisher.session = MagicMock()
        return publisher

    def test_unconfigured_makes_no_request(self) -> None:
        """Missing credentials fail before any network call."""
        publisher = WhatsAppPublisher()
        publisher.session = MagicMock()
        result = publisher.publish(_product())
        self.assertFalse(result.success)
        self.assertIn("Missing WhatsApp configuration", result.error or "")
        self.assertIn("WHATSAPP_ACCESS_TOKEN", result.error or "")
        publisher.session.post.assert_not_called()

    def test_group_alone_is_enough(self) -> None:
        """A group id satisfies the destination requirement."""
        publisher = WhatsAppPublisher(
            access_token="secret", phone_number_id="1234",
            recipient_number="", group_id="grupo-1",
        )
        self.assertEqual(publisher.missing_config(), [])

    def test_template_uses_whatsapp_markup(self) -> None:
        """The canned text uses WhatsApp bold and a plain link."""
        text = self._publisher().build_text(_product())
        self.assertIn("*OFERTA IMPERDÍVEL!*", text)
        self.assertIn("*Preço: R$ 80,00*", text)
        self.assertIn("Compre aqui: https://loja.example/A1", text)

    def test_direct_message_payload(self) -> None:
        """With a recipient, the message goes to that number."""
        publisher = self._publisher()
        publisher.session.post.return_value = _response(
            {"messages": [{"id": "wamid.1"}]}
        )
        result = publisher.publish(_product())
        self.assertTrue(result.success)
        self.assertEqual(result.message_id, "wamid.1")

        call = publisher.session.post.call_args
        self.assertEqual(
            call.args[0], "https://graph.facebook.com/v18.0/1234/messages"
        )
        body = call.kwargs["json"]
        self.assertEqual(body["messaging_product"], "whatsapp")
        self.assertEqual(body["recipient_type"], "individual")
        self.assertEqual(body["to"], "5511999999999")
        self.assertTrue(body["text"]["preview_url"])
        self.assertEqual(
            call.kwargs["headers"]["Authorization"], "Bearer secret"
        )

    def test_group_payload(self) -> None:
        """Without a recipient, the message goes to the group."""
        publisher = self._publisher(recipient="")
        publisher.session.post.return_value = _response(
            {"messages": [{"id": "wamid.2"}]}
        )
        publisher.publish(_product())
        body = publisher.session.post.call_args.kwargs["json"]
        self.assertEqual(body["to"], "grupo-1")
        self.assertNotIn("recipient_type", body)

    def test_accepted_without_message_object(self) -> None:
        """An accepted send with an odd messages list is still a success."""
        for messages in (["wamid.3"], [], None):
            with self.subTest(messages=messages):
                publisher = self._publisher()
                publisher.session.post.return_value = _response(
                    {"messages": messages}
                )
                result = publisher.publish(_product())
                self.assertTrue(result.success)
                self.assertIsNone(result.message_id)

    def test_api_error_reported(self) -> None:
        """A Graph API error object becomes a failed result."""
        publisher = self._publisher()
        publisher.session.post.return_value = _response(
            {"error": {"message": "Invalid OAuth access token"}},
            status=401,
        )
        result = publisher.publish(_product())
        self.assertFalse(result.success)
        self.assertIn("Invalid OAuth access token", result.error or "")

    def test_http_error_without_body(self) -> None:
        """An error status with a non-object body still fails."""
        publisher = self._publisher()
        publisher.session.post.return_value = _response(None, status=502)
        result = publisher.publish(_product())
        self.assertFalse(result.success)
        self.assertIn("HTTP 502", result.error or "")


if __name__ == "__main__":
    unittest.main()
