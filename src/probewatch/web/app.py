"""FastAPI application exposing the status overview and liveness endpoint."""

import html
import logging

from fastapi import APIRouter, FastAPI, Request, Response
from fastapi.responses import HTMLResponse

from probewatch.checks.state import StateEvent
from probewatch.notifier.status import StatusSink

logger = logging.getLogger(__name__)

status_router = APIRouter()

_PAGE_TEMPLATE = """<html>
<head>
	<title>Server Status</title>
</head>
<body>

<table>
	<tr>
		<th>Check</th>
		<th>Status</th>
		<th>Reason</th>
	</tr>
{rows}
</table>

</body>
</html>
"""

_ROW_TEMPLATE = """	<tr style="background-color: {color}">
		<td style="padding-left: {indent}em; padding-right: 1em">{marker}{name}</td>
		<td>{label}</td>
		<td>{reason}</td>
	</tr>"""


def render_status_page(events: list[StateEvent]) -> str:
    """Render the overview table, one row per check in id order."""
    rows = []
    for event in sorted(events, key=lambda e: e.identity.id):
        indent = 2 * event.identity.depth
        rows.append(
            _ROW_TEMPLATE.format(
                color="green" if event.ok else "red",
                indent=indent,
                marker="| " if indent > 0 else "",
                name=html.escape(event.identity.name),
                label="OK" if event.ok else "Failed",
                reason=html.escape(event.reason),
            ),
        )
    return _PAGE_TEMPLATE.format(rows="\n".join(rows))


@status_router.get("/", response_class=HTMLResponse)
def status_overview(request: Request) -> Response:
    """Overview of every known check."""
    status_sink: StatusSink = request.app.state.status_sink
    try:
        page = render_status_page(status_sink.snapshot())
    except Exception:
        logger.exception("Cannot render status page.")
        return Response(status_code=500)
    return HTMLResponse(content=page, media_type="text/html")


@status_router.get("/health")
def health(request: Request) -> Response:
    """200 if every tracked check is healthy, 503 otherwise."""
    status_sink: StatusSink = request.app.state.status_sink
    return Response(status_code=200 if status_sink.all_ok() else 503)


def create_app(status_sink: StatusSink) -> FastAPI:
    """Create the read-only status application backed by ``status_sink``."""
    app = FastAPI(title="Probewatch", docs_url=None, redoc_url=None, openapi_url=None)
    app.state.status_sink = status_sink
    app.include_router(status_router)
    return app
