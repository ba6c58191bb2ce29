# tests/conftest.py

"""Shared pytest fixtures for all tests."""

from collections.abc import Generator
from unittest.mock import patch

import pytest

from promo_publisher.config.settings import Settings

_CREDENTIALS = (
    "LOMADEE_API_KEY",
    "LOMADEE_APP_TOKEN",
    "LOMADEE_SOURCE_ID",
    "OPENAI_API_KEY",
    "OPENAI_BASE_URL",
    "TELEGRAM_BOT_TOKEN",
    "TELEGRAM_CHANNEL_ID",
    "AMAZON_PARTNER_TAG",
    "WHATSAPP_ACCESS_TOKEN",
    "WHATSAPP_PHONE_NUMBER_ID",
    "WHATSAPP_RECIPIENT_NUMBER",
    "WHATSAPP_GROUP_ID",
    "TWITTER_API_KEY",
    "TWITTER_API_SECRET",
    "TWITTER_ACCESS_TOKEN",
    "TWITTER_ACCESS_TOKEN_SECRET",
)


@pytest.fixture(autouse=True)
def blank_credentials() -> Generator[None, None, None]:
    """Blank every credential so a local .env can never reach a real API."""
    patches = [patch.object(Settings, name, "") for name in _CREDENTIALS]
    for p in patches:
        p.start()
    yield
    for p in reversed(patches):
        p.stop()
