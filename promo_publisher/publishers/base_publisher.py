# promo_publisher/publishers/base_publisher.py

"""Abstract base class for all channel publishers."""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass

from curl_cffi import requests as curl_requests

from promo_publisher.config.settings import Settings
from promo_publisher.models.product import Product


def format_brl(value: float) -> str:
    """Format *value* as Brazilian reais, e.g. ``R$ 1.299,90``."""
    us_style = f"{value:,.2f}"
    swapped = (
        us_style.replace(",", "_").replace(".", ",").replace("_", ".")
    )
    return f"R$ {swapped}"


def format_percent(value: float) -> str:
    """Render a discount percentage without a trailing ``.0``."""
    return f"{value:g}"


def truncate_text(text: str, max_length: int) -> str:
    """Cut *text* to *max_length* characters, ending with an ellipsis."""
    if len(text) <= max_length:
        return text
    return text[:max_length - 3] + "..."


@dataclass
class PublishResult:
    """Outcome of one publish attempt on one channel."""

    success: bool
    channel: str
    message_id: str | None = None
    error: str | None = None


class BasePublisher(ABC):
    """Format a Product for one channel and send it once.

    :meth:`publish` never raises and never retries.  Missing
    credentials short-circuit before any network call.
    """

    channel: str = ""
    label: str = ""

    def __init__(self) -> None:
        self.logger = logging.getLogger(
            f"promo_publisher.publishers.{self.channel}"
        )
        self.settings = Settings()
        self.session = curl_requests.Session()
        self._request_timeout: int = self.settings.REQUEST_TIMEOUT

    # ── Configuration ────────────────────────────────────

    @abstractmethod
    def missing_config(self) -> list[str]:
        """Names of the required settings that are unset."""
        ...

    def is_configured(self) -> bool:
        """True when every required credential is present."""
        return not self.missing_config()

    # ── Formatting ───────────────────────────────────────

    def _bold(self, text: str) -> str:
        return f"*{text}*"

    def _strike(self, text: str) -> str:
        return f"~{text}~"

    def _italic(self, text: str) -> str:
        return f"_{text}_"

    def _escape(self, text: str) -> str:
        return text

    def _link_line(self, product: Product) -> str:
        return f"🛒 Compre aqui: {product.link}"

    def render_template(self, product: Product) -> str:
        """Canned promo text used when no generated copy is available."""
        lines = [
            f"🔥 {self._bold('OFERTA IMPERDÍVEL!')}",
            "",
            f"📦 {self._bold(self._escape(product.name))}",
            "",
        ]
        if product.store:
            lines.append(f"🏪 Loja: {self._escape(product.store)}")

        price = format_brl(product.price)
        if product.has_discount and product.original_price is not None:
            original = format_brl(product.original_price)
            lines.append(f"💰 De: {self._strike(original)}")
            lines.append(f"🏷️ {self._bold(f'Por: {price}')}")
            if product.discount and product.discount > 0:
                off = f"{format_percent(product.discount)}% OFF"
                lines.append(f"📉 Desconto: {self._bold(off)}")
        else:
            lines.append(f"💰 {self._bold(f'Preço: {price}')}")

        lines += [
            "",
            self._link_line(product),
            "",
            f"⚡ {self._italic('Corre que é por tempo limitado!')}",
        ]
        return "\n".join(lines)

    def build_text(self, product: Product) -> str:
        """Channel text: generated copy when present, else the template.

        Generated copy that carries no link gets the product link
        appended.
        """
        generated = (product.generated_message or "").strip()
        if not generated:
            return self.render_template(product)
        text = self._escape(generated)
        if "http" not in text:
            text += f"\n👇 Oferta Principal:\n{self._escape(product.link)}"
        return text

    # ── Sending ──────────────────────────────────────────

    def _post_json(
        self,
        url: str,
        payload: dict[str, object],
        headers: dict[str, str] | None = None,
    ) -> curl_requests.Response:
        """POST *payload* as JSON once; transport errors propagate."""
        return self.session.post(
            url,
            json=payload,
            headers={
                "Content-Type": "application/json",
                **(headers or {}),
            },
            timeout=self._request_timeout,
        )

    @abstractmethod
    def _send(self, product: Product, text: str) -> PublishResult:
        """Deliver *text* for *product*; may raise on transport errors."""
        ...

    def publish(self, product: Product) -> PublishResult:
        """Send *product* to this channel and report the outcome."""
        missing = self.missing_config()
        if missing:
            self.logger.warning(
                "[%s] Missing configuration (%s), skipping",
                self.channel,
                ", ".join(missing),
            )
            return PublishResult(
                success=False,
                channel=self.channel,
                error=(
                    f"Missing {self.label} configuration. "
                    f"Required: {', '.join(missing)}"
                ),
            )

        try:
            text = self.build_text(product)
            result = self._send(product, text)
        except Exception as exc:
            self.logger.error(
                "[%s] Exception while publishing %s: %s",
                self.channel,
                product.id,
                exc,
                exc_info=True,
            )
            return PublishResult(
                success=False,
                channel=self.channel,
                error=f"Failed to send {self.label} message: {exc}",
            )

        if result.success:
            self.logger.info(
                "[%s] Published %s (message id %s)",
                self.channel,
                product.id,
                result.message_id,
            )
        else:
            self.logger.error(
                "[%s] Publish of %s failed: %s",
                self.channel,
                product.id,
                result.error,
            )
        return result
