"""Helpers shared by the TC4400 exporter tests."""

from __future__ import annotations

import asyncio
from pathlib import Path

from aiohttp import web
from prometheus_client.parser import text_string_to_metric_families

FIXTURES_ROOT = Path(__file__).parent / "fixtures"


def load_fixture(filename: str) -> bytes:
    """Raw bytes of a saved modem page, the same thing the exporter gets off the wire."""
    path = FIXTURES_ROOT / filename
    if not path.exists():
        raise FileNotFoundError(f"Fixture not found: {path}")
    return path.read_bytes()


def parse_exposition(text: str | bytes) -> dict[tuple[str, frozenset], float]:
    """Exposition text -> {(sample name, labels): value}"""
    if isinstance(text, bytes):
        text = text.decode("utf-8")
    samples = {}
    for family in text_string_to_metric_families(text):
        for sample in family.samples:
            samples[(sample.name, frozenset(sample.labels.items()))] = sample.value
    return samples


def make_modem_app(pages: dict, requests: list, delay: float = 0) -> web.Application:
    """A stand-in for the modem's web server.

    `pages` maps page name -> body (200) or (status, body). Anything else is a 404.
    Every request is appended to `requests` as (path, Authorization header).
    """

    async def handler(request: web.Request) -> web.Response:
        requests.append((request.path, request.headers.get("Authorization")))
        if delay:
            await asyncio.sleep(delay)
        page = pages.get(request.match_info["page"])
        if page is None:
            return web.Response(status=404, text="Not Found")
        status, body = page if isinstance(page, tuple) else (200, page)
        return web.Response(status=status, body=body, content_type="text/html")

    app = web.Application()
    app.router.add_get("/{page}", handler)
    return app


