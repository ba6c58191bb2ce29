# promo_publisher/services/health_checker.py

"""Source connectivity and channel configuration health check."""

import asyncio
import importlib
import logging
import time
from dataclasses import dataclass

from promo_publisher.config.settings import Settings
from promo_publisher.services.pipeline import build_publishers

logger = logging.getLogger("promo_publisher.health")

_PROBE_KEYWORD = "celular"
_SLOW_MS = 5000


@dataclass
class HealthResult:
    """Result of a single source health check."""

    source_id: str
    status: str  # "ok", "slow", "down"
    latency_ms: float
    message: str


@dataclass
class ChannelStatus:
    """Whether a channel publisher has its credentials."""

    channel: str
    configured: bool
    missing: list[str]


def probe_source(source: dict[str, str]) -> HealthResult:
    """Run a one-product search against a registered source.

    Sources never raise, so an empty result is reported as ``down``.
    """
    source_id = source["id"]
    dotted_path = source["source"]

    try:
        module_path, class_name = dotted_path.rsplit(".", 1)
        module = importlib.import_module(module_path)
        adapter = getattr(module, class_name)()
    except Exception as exc:
        return HealthResult(
            source_id=source_id,
            status="down",
            latency_ms=0.0,
            message=f"Failed to load source: {exc}",
        )

    start = time.monotonic()
    products = adapter.search(_PROBE_KEYWORD, limit=1)
    elapsed_ms = (time.monotonic() - start) * 1000

    if not products:
        return HealthResult(
            source_id=source_id,
            status="down",
            latency_ms=elapsed_ms,
            message="No results (see log for the upstream error)",
        )
    if elapsed_ms > _SLOW_MS:
        return HealthResult(
            source_id=source_id,
            status="slow",
            latency_ms=elapsed_ms,
            message="High latency",
        )
    return HealthResult(
        source_id=source_id,
        status="ok",
        latency_ms=elapsed_ms,
        message="",
    )


class HealthChecker:
    """Probes registered sources and reports channel credentials.

    Nothing is published: sources get one tiny search each and
    publishers are only asked which settings they are missing.
    """

    def __init__(
        self,
        sources: list[dict[str, str]] | None = None,
        channels: list[str] | None = None,
    ) -> None:
        self.sources = (
            sources if sources is not None else Settings.AVAILABLE_SOURCES
        )
        self.channels = (
            channels if channels is not None
            else [p["id"] for p in Settings.AVAILABLE_PUBLISHERS]
        )

    async def check_sources(self) -> list[HealthResult]:
        """Probe every source concurrently, in registry order."""
        results: list[HealthResult] = list(
            await asyncio.gather(*(
                asyncio.to_thread(probe_source, src) for src in self.sources
            ))
        )
        down = [r.source_id for r in results if r.status == "down"]
        logger.info(
            "Source health: %d probed, down: %s",
            len(results),
            ", ".join(down) or "none",
        )
        for r in results:
            logger.debug(
                "Probe %s -> %s in %.0fms %s",
                r.source_id, r.status, r.latency_ms, r.message,
            )
        return results

    def check_channels(self) -> list[ChannelStatus]:
        """Credential status of every channel, enabled or not."""
        statuses: list[ChannelStatus] = []
        for publisher in build_publishers(self.channels):
            missing = publisher.missing_config()
            statuses.append(ChannelStatus(
                channel=publisher.channel,
                configured=not missing,
                missing=missing,
            ))
        unconfigured = [s.channel for s in statuses if not s.configured]
        if unconfigured:
            logger.info(
                "Channels missing credentials: %s", ", ".join(unconfigured)
            )
        return statuses
