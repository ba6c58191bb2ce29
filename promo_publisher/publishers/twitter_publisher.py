# promo_publisher/publishers/twitter_publisher.py

"""Publisher for Twitter/X via the v2 tweets endpoint."""

from promo_publisher.models.product import Product
from promo_publisher.publishers.base_publisher import (
    BasePublisher,
    PublishResult,
    format_brl,
    format_percent,
    truncate_text,
)
from promo_publisher.publishers.oauth1 import OAuth1Signer, RequestSigner

TWEETS_URL = "https://api.twitter.com/2/tweets"
TWEET_LIMIT = 280
NAME_LIMIT = 80


class TwitterPublisher(BasePublisher):
    """Post a plain-text tweet per product, signed with OAuth 1.0a."""

    channel = "twitter"
    label = "Twitter"

    def __init__(
        self,
        api_key: str | None = None,
        api_secret: str | None = None,
        access_token: str | None = None,
        access_token_secret: str | None = None,
        signer: RequestSigner | None = None,
    ) -> None:
        super().__init__()
        self.api_key = (
            api_key if api_key is not None
            else self.settings.TWITTER_API_KEY
        )
        self.api_secret = (
            api_secret if api_secret is not None
            else self.settings.TWITTER_API_SECRET
        )
        self.access_token = (
            access_token if access_token is not None
            else self.settings.TWITTER_ACCESS_TOKEN
        )
        self.access_token_secret = (
            access_token_secret if access_token_secret is not None
            else self.settings.TWITTER_ACCESS_TOKEN_SECRET
        )
        self._signer = signer

    def missing_config(self) -> list[str]:
        credentials = {
            "TWITTER_API_KEY": self.api_key,
            "TWITTER_API_SECRET": self.api_secret,
            "TWITTER_ACCESS_TOKEN": self.access_token,
            "TWITTER_ACCESS_TOKEN_SECRET": self.access_token_secret,
        }
        return [name for name, value in credentials.items() if not value]

    @property
    def signer(self) -> RequestSigner:
        if self._signer is None:
            self._signer = OAuth1Signer(
                consumer_key=self.api_key,
                consumer_secret=self.api_secret,
                token=self.access_token,
                token_secret=self.access_token_secret,
            )
        return self._signer

    # ── Formatting ───────────────────────────────────────

    def render_template(self, product: Product) -> str:
        lines = [
            "🔥 OFERTA!",
            "",
            truncate_text(product.name, NAME_LIMIT),
            "",
        ]
        if product.store:
            lines.append(f"🏪 {product.store}")
        price = format_brl(product.price)
        if product.has_discount and product.discount:
            lines.append(
                f"💰 {price} ({format_percent(product.discount)}% OFF)"
            )
        else:
            lines.append(f"💰 {price}")
        lines += ["", f"🛒 {product.link}"]
        return truncate_text("\n".join(lines), TWEET_LIMIT)

    def build_text(self, product: Product) -> str:
        """Tweet text, always within the character limit.

        Generated copy is shortened first so an appended link is never
        cut off.
        """
        generated = (product.generated_message or "").strip()
        if not generated:
            return self.render_template(product)
        if "http" in generated:
            return truncate_text(generated, TWEET_LIMIT)
        suffix = f"\n\n🛒 {product.link}"
        room = max(TWEET_LIMIT - len(suffix), 0)
        return truncate_text(generated, room) + suffix

    # ── Sending ──────────────────────────────────────────

    def _send(self, product: Product, text: str) -> PublishResult:
        auth = self.signer.authorization_header("POST", TWEETS_URL)
        resp = self._post_json(
            TWEETS_URL,
            {"text": text},
            headers={"Authorization": auth},
        )
        data = resp.json()
        if not 200 <= resp.status_code < 300:
            return PublishResult(
                success=False,
                channel=self.channel,
                error=f"Twitter API error: HTTP {resp.status_code}: {data}",
            )

        tweet = data.get("data") if isinstance(data, dict) else None
        tweet_id = tweet.get("id") if isinstance(tweet, dict) else None
        return PublishResult(
            success=True,
            channel=self.channel,
            message_id=str(tweet_id) if tweet_id else None,
        )
