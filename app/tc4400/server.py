"""
The HTTP side facing prometheus.

prometheus_client's start_http_server() can't move the metrics path and runs collection in its own
    threads, so we serve from aiohttp on the same loop the modem session lives on.
"""

import structlog
from aiohttp import web
from prometheus_client import CONTENT_TYPE_LATEST
from tc4400.scrape import TC4400Exporter

log = structlog.get_logger(__name__)

LANDING_PAGE = """<html>
<head><title>TC4400 Exporter</title></head>
<body>
<h1>TC4400 Exporter</h1>
<p><a href="{telemetry_path}">Metrics</a></p>
</body>
</html>
"""


def build_app(exporter: TC4400Exporter, telemetry_path: str = "/metrics") -> web.Application:
    """Metrics on `telemetry_path` and a landing page on / that links to it"""

    async def metrics_handler(request: web.Request) -> web.Response:
        log.debug("Metrics requested", remote=request.remote)
        body = await exporter.render()
        return web.Response(body=body, headers={"Content-Type": CONTENT_TYPE_LATEST})

    async def landing_handler(_request: web.Request) -> web.Response:
        return web.Response(
            text=LANDING_PAGE.format(telemetry_path=telemetry_path), content_type="text/html"
        )

    app = web.Application()
    app.router.add_get(telemetry_path, metrics_handler)
    if telemetry_path != "/":
        app.router.add_get("/", landing_handler)
    return app
