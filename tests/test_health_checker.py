# tests/test_health_checker.py

"""Tests for the source and channel health checker."""

import unittest
from unittest.mock import MagicMock, patch

from promo_publisher.config.settings import Settings
from promo_publisher.models.product import Product
from promo_publisher.services.health_checker import (
    HealthChecker,
    HealthResult,
    probe_source,
)

_SOURCE = {
    "id": "lomadee",
    "label": "Lomadee",
    "source": "promo_publisher.sources.lomadee_source.LomadeeSource",
}


def _module_with(adapter: MagicMock) -> MagicMock:
    """A fake module exposing LomadeeSource -> *adapter*."""
    return MagicMock(LomadeeSource=MagicMock(return_value=adapter))


class TestProbeSource(unittest.TestCase):
    """Tests for the per-source health probe function."""

    @patch("promo_publisher.services.health_checker.importlib")
    def test_ok_status(self, mock_importlib: MagicMock) -> None:
        """A fast non-empty search is 'ok'."""
        adapter = MagicMock()
        adapter.search.return_value = [
            Product(id="1", name="Celular", price=1.0, link="http://x/1"),
        ]
        mock_importlib.import_module.return_value = _module_with(adapter)

        result = probe_source(_SOURCE)
        self.assertEqual(result.status, "ok")
        self.assertEqual(result.source_id, "lomadee")
        adapter.search.assert_called_once_with("celular", limit=1)

    @patch("promo_publisher.services.health_checker.importlib")
    def test_down_on_empty_results(
        self, mock_importlib: MagicMock,
    ) -> None:
        """An empty search is 'down'."""
        adapter = MagicMock()
        adapter.search.return_value = []
        mock_importlib.import_module.return_value = _module_with(adapter)

        result = probe_source(_SOURCE)
        self.assertEqual(result.status, "down")
        self.assertIn("No results", result.message)

    @patch("promo_publisher.services.health_checker.time")
    @patch("promo_publisher.services.health_checker.importlib")
    def test_slow_status(
        self, mock_importlib: MagicMock, mock_time: MagicMock,
    ) -> None:
        """A search over five seconds is 'slow'."""
        adapter = MagicMock()
        adapter.search.return_value = [
            Product(id="1", name="Celular", price=1.0, link="http://x/1"),
        ]
        mock_importlib.import_module.return_value = _module_with(adapter)
        mock_time.monotonic.side_effect = [100.0, 106.0]

        result = probe_source(_SOURCE)
        self.assertEqual(result.status, "slow")
        self.assertAlmostEqual(result.latency_ms, 6000.0)

    @patch("promo_publisher.services.health_checker.importlib")
    def test_down_on_import_error(
        self, mock_importlib: MagicMock,
    ) -> None:
        """A source that cannot be loaded is 'down'."""
        mock_importlib.import_module.side_effect = ImportError("nope")

        result = probe_source(_SOURCE)
        self.assertEqual(result.status, "down")
        self.assertEqual(result.latency_ms, 0.0)
        self.assertIn("Failed to load source", result.message)


class TestCheckChannels(unittest.TestCase):
    """Channel credential reporting."""

    def test_all_channels_reported_unconfigured(self) -> None:
        """With blank credentials every channel lists what is missing."""
        statuses = {s.channel: s for s in HealthChecker().check_channels()}
        self.assertEqual(
            set(statuses), {"telegram", "whatsapp", "twitter"}
        )
        for status in statuses.values():
            self.assertFalse(status.configured)
            self.assertTrue(status.missing)
        self.assertIn("TELEGRAM_BOT_TOKEN", statuses["telegram"].missing)

    def test_only_requested_channels(self) -> None:
        """A channel subset limits the report."""
        statuses = HealthChecker(channels=["twitter"]).check_channels()
        self.assertEqual([s.channel for s in statuses], ["twitter"])
        self.assertIn("TWITTER_API_KEY", statuses[0].missing)

    @patch.object(Settings, "TELEGRAM_BOT_TOKEN", "token")
    @patch.object(Settings, "TELEGRAM_CHANNEL_ID", "@promos")
    def test_configured_channel(self) -> None:
        """A channel with every credential is reported configured."""
        statuses = HealthChecker(channels=["telegram"]).check_channels()
        self.assertTrue(statuses[0].configured)
        self.assertEqual(statuses[0].missing, [])


class TestHealthChecker(unittest.IsolatedAsyncioTestCase):
    """Tests for the concurrent source probes."""

    @patch("promo_publisher.services.health_checker.probe_source")
    async def test_check_sources_probes_every_source(
        self, mock_probe: MagicMock,
    ) -> None:
        """Every registered source is probed once, in order."""
        mock_probe.side_effect = lambda src: HealthResult(
            source_id=src["id"], status="ok", latency_ms=1.0, message="",
        )
        results = await HealthChecker().check_sources()
        self.assertEqual(
            [r.source_id for r in results], ["lomadee", "mercadolivre"]
        )
        self.assertEqual(mock_probe.call_count, 2)

    @patch("promo_publisher.services.health_checker.probe_source")
    async def test_custom_source_list(self, mock_probe: MagicMock) -> None:
        """Only the sources handed to the checker are probed."""
        mock_probe.return_value = HealthResult(
            source_id="lomadee", status="down", latency_ms=0.0,
            message="No results",
        )
        results = await HealthChecker(sources=[_SOURCE]).check_sources()
        self.assertEqual(len(results), 1)
        mock_probe.assert_called_once_with(_SOURCE)


if __name__ == "__main__":
    unittest.main()
