# promo_publisher/publishers/telegram_publisher.py

"""Publisher for a Telegram channel via the Bot API."""

import html
from urllib.parse import quote_plus

from promo_publisher.models.product import Product
from promo_publisher.publishers.base_publisher import (
    BasePublisher,
    PublishResult,
    truncate_text,
)

API_URL = "https://api.telegram.org/bot{token}/{method}"

# Bot API limits
CAPTION_LIMIT = 1024
MESSAGE_LIMIT = 4096


class TelegramPublisher(BasePublisher):
    """Post products to a Telegram channel as photo or text messages.

    Messages use HTML parse mode; every dynamic string is escaped so
    product names with ``*``, ``_`` or ``<`` cannot break the markup.
    """

    channel = "telegram"
    label = "Telegram"

    def __init__(
        self,
        bot_token: str | None = None,
        channel_id: str | None = None,
        amazon_partner_tag: str | None = None,
    ) -> None:
        super().__init__()
        self.bot_token = (
            bot_token if bot_token is not None
            else self.settings.TELEGRAM_BOT_TOKEN
        )
        self.channel_id = (
            channel_id if channel_id is not None
            else self.settings.TELEGRAM_CHANNEL_ID
        )
        self.amazon_partner_tag = (
            amazon_partner_tag if amazon_partner_tag is not None
            else self.settings.AMAZON_PARTNER_TAG
        )

    def missing_config(self) -> list[str]:
        missing: list[str] = []
        if not self.bot_token:
            missing.append("TELEGRAM_BOT_TOKEN")
        if not self.channel_id:
            missing.append("TELEGRAM_CHANNEL_ID")
        return missing

    # ── Formatting ───────────────────────────────────────

    def _bold(self, text: str) -> str:
        return f"<b>{text}</b>"

    def _strike(self, text: str) -> str:
        return f"<s>{text}</s>"

    def _italic(self, text: str) -> str:
        return f"<i>{text}</i>"

    def _escape(self, text: str) -> str:
        return html.escape(text, quote=False)

    def _link_line(self, product: Product) -> str:
        href = html.escape(product.link, quote=True)
        return f'🛒 <a href="{href}">COMPRAR AGORA</a>'

    def amazon_search_link(self, product: Product) -> str:
        """Amazon search URL for the product name tagged with the partner id."""
        return (
            "https://www.amazon.com.br/s?k="
            f"{quote_plus(product.name)}&tag={quote_plus(self.amazon_partner_tag)}"
        )

    def build_text(self, product: Product) -> str:
        text = super().build_text(product)
        if self.amazon_partner_tag:
            link = html.escape(self.amazon_search_link(product), quote=True)
            text += f"\n\n🔎 {self._bold('Ver na Amazon:')}\n{link}"
        return text

    # ── Sending ──────────────────────────────────────────

    def _send(self, product: Product, text: str) -> PublishResult:
        body: dict[str, object] = {
            "chat_id": self.channel_id,
            "parse_mode": "HTML",
            "disable_web_page_preview": False,
        }
        if product.image and len(text) <= CAPTION_LIMIT:
            method = "sendPhoto"
            body["photo"] = product.image
            body["caption"] = text
        else:
            method = "sendMessage"
            body["text"] = truncate_text(text, MESSAGE_LIMIT)

        self.logger.debug(
            "[telegram] %s for %s (%d chars)",
            method,
            product.id,
            len(text),
        )
        resp = self._post_json(
            API_URL.format(token=self.bot_token, method=method), body,
        )
        data = resp.json()
        if not isinstance(data, dict) or not data.get("ok"):
            description = (
                data.get("description") if isinstance(data, dict)
                else None
            ) or f"HTTP {resp.status_code}"
            return PublishResult(
                success=False,
                channel=self.channel,
                error=f"Telegram API error: {description}",
            )

        result = data.get("result") or {}
        message_id = result.get("message_id")
        return PublishResult(
            success=True,
            channel=self.channel,
            message_id=str(message_id) if message_id is not None else None,
        )
