"""Tests for the HTTP endpoint prometheus scrapes."""

from __future__ import annotations

import pytest
from aiohttp import ClientSession, test_utils
from prometheus_client import CONTENT_TYPE_LATEST
from yarl import URL

from tc4400.scrape import TC4400Exporter
from tc4400.server import build_app
from tests.helpers import make_modem_app, parse_exposition


@pytest.mark.asyncio
async def test_metrics_endpoint_polls_every_request(registry, statsifc_html, cmconnectionstatus_html):
    seen = []
    modem = make_modem_app({"statsifc.html": statsifc_html, "cmconnectionstatus.html": cmconnectionstatus_html}, seen)
    async with test_utils.TestServer(modem) as modem_server, ClientSession() as session:
        exporter = TC4400Exporter(session, modem_server.make_url("/"), registry)
        async with test_utils.TestClient(test_utils.TestServer(build_app(exporter, "/metrics"))) as client:
            first = await client.get("/metrics")
            assert first.status == 200
            assert first.headers["Content-Type"] == CONTENT_TYPE_LATEST
            samples = parse_exposition(await first.text())

            second = await client.get("/metrics")
            second_samples = parse_exposition(await second.text())

    assert samples[("tc4400_up", frozenset())] == 1.0
    assert samples[("tc4400_downstream_width_hz", frozenset({("channel", "01")}))] == 6400000.0
    assert second_samples[("tc4400_exporter_scrapes_total", frozenset())] == 2.0
    assert len(seen) == 4


@pytest.mark.asyncio
async def test_custom_telemetry_path_and_landing_page(registry):
    async with ClientSession() as session:
        exporter = TC4400Exporter(session, URL("http://127.0.0.1:1/"), registry, pages=())
        async with test_utils.TestClient(test_utils.TestServer(build_app(exporter, "/probe"))) as client:
            landing = await client.get("/")
            body = await landing.text()
            probe = await client.get("/probe")
            probe_body = await probe.text()
            missing = await client.get("/metrics")

    assert landing.status == 200
    assert 'href="/probe"' in body
    assert probe.status == 200
    assert "tc4400_up 1.0" in probe_body
    assert missing.status == 404
