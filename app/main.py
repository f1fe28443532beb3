#!/usr/bin/env python3
"""
Main / entry point for the TC4400 modem exporter.

"""
import asyncio
import sys

import structlog
from aiohttp import ClientSession, ClientTimeout, web
from err.exceptions import ConfigError
from prometheus_client import CollectorRegistry
from tc4400.metrics import register_runtime_collectors
from tc4400.scrape import TC4400Exporter
from tc4400.server import build_app
from util.config import Config, load_config
from util.const import EXPORTER_NAME, EXPORTER_VERSION, REQUEST_HEADERS, LogLevel

log = structlog.get_logger(__name__)


def configure_logging(log_level: LogLevel) -> None:
    structlog.configure(
        wrapper_class=structlog.make_filtering_bound_logger(log_level.value)
    )


async def serve(config: Config) -> None:
    """Run the exporter until cancelled."""
    log.info("Starting", exporter=EXPORTER_NAME, version=EXPORTER_VERSION)

    registry = CollectorRegistry()
    register_runtime_collectors(registry)

    log.debug("Setting up connection to modem...", timeout=config.client_timeout)
    async with ClientSession(
        headers=REQUEST_HEADERS,
        timeout=ClientTimeout(total=config.client_timeout),
    ) as client:
        exporter = TC4400Exporter(client, config.scrape_uri, registry)
        log.info("Scraping modem", base_uri=str(exporter.base_uri))

        runner = web.AppRunner(build_app(exporter, config.telemetry_path))
        await runner.setup()
        try:
            site = web.TCPSite(runner, config.listen_host, config.listen_port)
            await site.start()
            log.info(
                "Metrics server started",
                host=config.listen_host or "0.0.0.0",
                port=config.listen_port,
                path=config.telemetry_path,
            )
            # Polls are driven by incoming requests; nothing left to do but wait
            await asyncio.Event().wait()
        finally:
            await runner.cleanup()


def run(argv=None) -> int:
    try:
        config = load_config(argv)
    except ConfigError as e:
        log.error("Invalid configuration", error=e)
        return 1

    configure_logging(config.log_level)
    try:
        asyncio.run(serve(config))
    except OSError as e:
        # Most likely the listen address is taken / not ours to bind
        log.error("Could not start metrics server", error=e)
        return 1
    except KeyboardInterrupt:
        log.info("Shutting down")
    return 0


if __name__ == "__main__":
    sys.exit(run())
