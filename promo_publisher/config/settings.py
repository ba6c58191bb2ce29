# promo_publisher/config/settings.py

"""Central configuration for the promo publisher service."""

import os
from pathlib import Path

from curl_cffi.requests import BrowserTypeLiteral
from dotenv import load_dotenv

load_dotenv()


def _env(name: str, default: str = "") -> str:
    """Read an environment variable, stripping surrounding whitespace."""
    return os.getenv(name, default).strip()


def _env_list(name: str, default: str) -> list[str]:
    """Read a comma-separated environment variable as a list."""
    return [
        item.strip().lower()
        for item in _env(name, default).split(",")
        if item.strip()
    ]


class Settings:
    """Central configuration for the promo publisher service."""

    # --- HTTP ---
    REQUEST_TIMEOUT: int = 15           # Seconds before a request times out
    IMPERSONATE_BROWSER: BrowserTypeLiteral = "chrome131"
    DEFAULT_HEADERS: dict[str, str] = {
        "Accept": "application/json",
        "Accept-Language": "pt-BR,pt;q=0.9,en-US;q=0.8",
    }

    # --- Pipeline ---
    FETCH_LIMIT: int = 50               # Products requested per source
    FETCH_SORT: str = "discount"
    MAX_CANDIDATES: int = 3             # Products published per run
    PUBLISH_DELAY: float = 4.0          # Seconds between channel calls
    COPY_CONCURRENCY: int = 3           # Parallel LLM requests
    DEFAULT_STORE_NAME: str = "Loja Parceira"

    # --- Scheduling ---
    SCHEDULE_INTERVAL_MINUTES: float = float(
        _env("SCHEDULE_INTERVAL_MINUTES", "30")
    )
    STARTUP_DELAY: float = 10.0

    # --- Lomadee (partner affiliate API) ---
    LOMADEE_API_KEY: str = _env("LOMADEE_API_KEY")
    LOMADEE_APP_TOKEN: str = _env("LOMADEE_APP_TOKEN")
    LOMADEE_SOURCE_ID: str = _env("LOMADEE_SOURCE_ID")
    LOMADEE_PRODUCTS_URL: str = (
        "https://api-beta.lomadee.com.br/affiliate/products"
    )
    LOMADEE_OFFERS_URL: str = (
        "https://api.lomadee.com/v3/{app_token}/offer/_search"
    )
    LOMADEE_STORES: list[dict[str, str | None]] = [
        {"id": "5632", "name": "Magalu"},
        {"id": "5636", "name": "Casas Bahia"},
        {"id": "5766", "name": "Amazon"},
        {"id": "6116", "name": "AliExpress"},
        {"id": "5693", "name": "Nike"},
        {"id": "6373", "name": "Girafa"},
        {"id": None, "name": "Busca Geral"},
    ]

    # --- Mercado Livre (marketplace search) ---
    MERCADOLIVRE_SEARCH_URL: str = (
        "https://api.mercadolibre.com/sites/MLB/search"
    )

    # --- Copy generation ---
    OPENAI_API_KEY: str = _env(
        "AI_INTEGRATIONS_OPENAI_API_KEY", _env("OPENAI_API_KEY")
    )
    OPENAI_BASE_URL: str = _env("AI_INTEGRATIONS_OPENAI_BASE_URL")
    OPENAI_MODEL: str = _env("OPENAI_MODEL", "gpt-4o")
    OPENAI_MAX_TOKENS: int = int(_env("OPENAI_MAX_TOKENS", "220"))

    # --- Channels ---
    ENABLED_CHANNELS: list[str] = _env_list(
        "ENABLED_CHANNELS", "telegram,whatsapp,twitter"
    )
    TELEGRAM_BOT_TOKEN: str = _env("TELEGRAM_BOT_TOKEN")
    TELEGRAM_CHANNEL_ID: str = _env("TELEGRAM_CHANNEL_ID")
    AMAZON_PARTNER_TAG: str = _env("AMAZON_PARTNER_TAG")
    WHATSAPP_ACCESS_TOKEN: str = _env("WHATSAPP_ACCESS_TOKEN")
    WHATSAPP_PHONE_NUMBER_ID: str = _env("WHATSAPP_PHONE_NUMBER_ID")
    WHATSAPP_RECIPIENT_NUMBER: str = _env("WHATSAPP_RECIPIENT_NUMBER")
    WHATSAPP_GROUP_ID: str = _env("WHATSAPP_GROUP_ID")
    WHATSAPP_API_VERSION: str = "v18.0"
    TWITTER_API_KEY: str = _env("TWITTER_API_KEY")
    TWITTER_API_SECRET: str = _env("TWITTER_API_SECRET")
    TWITTER_ACCESS_TOKEN: str = _env("TWITTER_ACCESS_TOKEN")
    TWITTER_ACCESS_TOKEN_SECRET: str = _env("TWITTER_ACCESS_TOKEN_SECRET")

    # --- Paths ---
    BASE_DIR: Path = Path(__file__).resolve().parent.parent.parent
    DATA_DIR: Path = BASE_DIR / "data"
    DB_PATH: Path = Path(
        _env("POSTED_DB_PATH", str(DATA_DIR / "posted_products.db"))
    )
    LOGS_DIR: Path = BASE_DIR / "logs"

    # --- Search keywords (one is drawn per run) ---
    KEYWORDS: list[str] = [
        "Smartphone", "iPhone", "Samsung Galaxy", "Notebook",
        "Smartwatch", "Monitor Gamer", "Teclado", "Mouse", "Headset",
        "Caixa de som JBL", "TV 4K", "Alexa", "Tablet", "SSD",
        "Placa de vídeo", "Processador", "Webcam", "Impressora",
        "Drone", "Câmera", "PlayStation 5", "Xbox", "Nintendo Switch",
        "Kindle", "Cadeira Gamer", "Airfryer", "Fogão", "Geladeira",
        "Micro-ondas", "Cafeteira", "Ventilador", "Ar-condicionado",
        "Fone de ouvido", "Tênis", "Relógio", "Perfume",
        "Whey Protein", "Bicicleta",
    ]

    # --- Sources (merge order: partner first, marketplace second) ---
    AVAILABLE_SOURCES: list[dict[str, str]] = [
        {
            "id": "lomadee",
            "label": "Lomadee",
            "source": "promo_publisher.sources.lomadee_source.LomadeeSource",
        },
        {
            "id": "mercadolivre",
            "label": "Mercado Livre",
            "source": (
                "promo_publisher.sources.mercadolivre_source."
                "MercadoLivreSource"
            ),
        },
    ]

    # --- Channel publishers ---
    AVAILABLE_PUBLISHERS: list[dict[str, str]] = [
        {
            "id": "telegram",
            "label": "Telegram",
            "publisher": (
                "promo_publisher.publishers.telegram_publisher."
                "TelegramPublisher"
            ),
        },
        {
            "id": "whatsapp",
            "label": "WhatsApp",
            "publisher": (
                "promo_publisher.publishers.whatsapp_publisher."
                "WhatsAppPublisher"
            ),
        },
        {
            "id": "twitter",
            "label": "Twitter/X",
            "publisher": (
                "promo_publisher.publishers.twitter_publisher."
                "TwitterPublisher"
            ),
        },
    ]
