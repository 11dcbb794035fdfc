"""HTTP status surface for Probewatch."""

from probewatch.web.app import create_app, render_status_page
from probewatch.web.server import StatusServer, parse_listen_address

__all__ = ["StatusServer", "create_app", "parse_listen_address", "render_status_page"]
