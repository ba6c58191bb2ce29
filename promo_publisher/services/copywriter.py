# promo_publisher/services/copywriter.py

"""Marketing copy generation through the OpenAI chat completions API."""

import asyncio
import logging
from typing import Any

from openai import AsyncOpenAI

from promo_publisher.config.settings import Settings
from promo_publisher.models.product import Product
from promo_publisher.publishers.base_publisher import format_brl

logger = logging.getLogger("promo_publisher.copywriter")

SYSTEM_PROMPT = (
    "Você é um especialista em Marketing Digital focado em promoções "
    "no Telegram. Crie legendas curtas (no máximo 3 linhas) e urgentes "
    "para ofertas. Regras: use emojis chamativos (🔥, 🚨); o preço é "
    "obrigatório e deve aparecer exatamente como informado; termine "
    "com uma chamada para ação clara (ex: \"Toque para comprar\")."
)

PROMPT_TEMPLATE = (
    "Post Telegram curto. Produto: {name}. Preço: {price}. "
    "Loja: {store}. Link: {link}. Emojis!"
)


def build_prompt(product: Product) -> str:
    """User prompt for one product."""
    return PROMPT_TEMPLATE.format(
        name=product.name,
        price=format_brl(product.price),
        store=product.store,
        link=product.link,
    )


class CopyWriter:
    """Generate a short promo caption per product.

    Requests run concurrently, at most ``concurrency`` at a time.  A
    failure on one product leaves ``generated_message`` empty for that
    product only; :meth:`enrich` itself never raises.
    """

    def __init__(
        self,
        client: Any | None = None,
        model: str | None = None,
        concurrency: int | None = None,
    ) -> None:
        self.model = model or Settings.OPENAI_MODEL
        self.concurrency = max(
            1, concurrency or Settings.COPY_CONCURRENCY
        )
        if client is not None:
            self.client: Any | None = client
        elif Settings.OPENAI_API_KEY:
            self.client = AsyncOpenAI(
                api_key=Settings.OPENAI_API_KEY,
                base_url=Settings.OPENAI_BASE_URL or None,
            )
        else:
            self.client = None

    async def generate(self, product: Product) -> str:
        """Ask the model for one caption; errors propagate."""
        if self.client is None:
            return ""
        resp = await self.client.chat.completions.create(
            model=self.model,
            max_tokens=Settings.OPENAI_MAX_TOKENS,
            messages=[
                {"role": "system", "content": SYSTEM_PROMPT},
                {"role": "user", "content": build_prompt(product)},
            ],
        )
        content = resp.choices[0].message.content
        return (content or "").strip()

    async def enrich(self, products: list[Product]) -> list[Product]:
        """Fill ``generated_message`` on every product, in place."""
        if not products:
            return products
        if self.client is None:
            logger.warning(
                "No OpenAI API key configured, using canned templates"
            )
            for product in products:
                product.generated_message = ""
            return products

        semaphore = asyncio.Semaphore(self.concurrency)

        async def enrich_one(product: Product) -> None:
            async with semaphore:
                try:
                    product.generated_message = await self.generate(
                        product
                    )
                except Exception as exc:
                    logger.error(
                        "Copy generation failed for %s: %s",
                        product.id,
                        exc,
                        exc_info=True,
                    )
                    product.generated_message = ""

        await asyncio.gather(*(enrich_one(p) for p in products))

        generated = sum(1 for p in products if p.generated_message)
        logger.info(
            "Generated copy for %d of %d products",
            generated,
            len(products),
        )
        return products
