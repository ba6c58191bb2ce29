# promo_publisher/publishers/whatsapp_publisher.py

"""Publisher for WhatsApp via the WhatsApp Business Cloud API."""

from promo_publisher.models.product import Product
from promo_publisher.publishers.base_publisher import (
    BasePublisher,
    PublishResult,
)

API_URL = "https://graph.facebook.com/{version}/{phone_number_id}/messages"


class WhatsAppPublisher(BasePublisher):
    """Send products as text messages with link preview.

    Messages go to ``WHATSAPP_RECIPIENT_NUMBER`` when set; otherwise
    they are broadcast to ``WHATSAPP_GROUP_ID``.
    """

    channel = "whatsapp"
    label = "WhatsApp"

    def __init__(
        self,
        access_token: str | None = None,
        phone_number_id: str | None = None,
        recipient_number: str | None = None,
        group_id: str | None = None,
    ) -> None:
        super().__init__()
        self.access_token = (
            access_token if access_token is not None
            else self.settings.WHATSAPP_ACCESS_TOKEN
        )
        self.phone_number_id = (
            phone_number_id if phone_number_id is not None
            else self.settings.WHATSAPP_PHONE_NUMBER_ID
        )
        self.recipient_number = (
            recipient_number if recipient_number is not None
            else self.settings.WHATSAPP_RECIPIENT_NUMBER
        )
        self.group_id = (
            group_id if group_id is not None
            else self.settings.WHATSAPP_GROUP_ID
        )

    def missing_config(self) -> list[str]:
        missing: list[str] = []
        if not self.access_token:
            missing.append("WHATSAPP_ACCESS_TOKEN")
        if not self.phone_number_id:
            missing.append("WHATSAPP_PHONE_NUMBER_ID")
        if not (self.recipient_number or self.group_id):
            missing.append(
                "WHATSAPP_RECIPIENT_NUMBER or WHATSAPP_GROUP_ID"
            )
        return missing

    def _payload(self, text: str) -> dict[str, object]:
        """Cloud API message body for a direct or group send."""
        payload: dict[str, object] = {
            "messaging_product": "whatsapp",
            "type": "text",
            "text": {"preview_url": True, "body": text},
        }
        if self.recipient_number:
            payload["recipient_type"] = "individual"
            payload["to"] = self.recipient_number
        else:
            payload["to"] = self.group_id
        return payload

    def _send(self, product: Product, text: str) -> PublishResult:
        url = API_URL.format(
            version=self.settings.WHATSAPP_API_VERSION,
            phone_number_id=self.phone_number_id,
        )
        resp = self._post_json(
            url,
            self._payload(text),
            headers={"Authorization": f"Bearer {self.access_token}"},
        )
        data = resp.json()
        error = data.get("error") if isinstance(data, dict) else None
        if resp.status_code >= 400 or error or not isinstance(data, dict):
            message = (
                error.get("message") if isinstance(error, dict) else None
            ) or f"HTTP {resp.status_code}: {data}"
            return PublishResult(
                success=False,
                channel=self.channel,
                error=f"WhatsApp API error: {message}",
            )

        # The message is accepted at this point, even without a usable id
        messages = data.get("messages")
        first = messages[0] if isinstance(messages, list) and messages else None
        message_id = first.get("id") if isinstance(first, dict) else None
        return PublishResult(
            success=True,
            channel=self.channel,
            message_id=str(message_id) if message_id else None,
        )
