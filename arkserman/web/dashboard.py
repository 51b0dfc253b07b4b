"""Flask dashboard listing game server units with start/stop controls."""

import logging
import posixpath
import signal
import threading

from flask import Flask, Response, redirect, render_template, url_for
from sdbus.exceptions import SdBusBaseError
from werkzeug.serving import make_server

from ..core import supervision_client
from ..core.status_aggregator import StatusAggregator
from ..utils.constants import APP_TITLE, FAVICON, ROOT_TEMPLATE, STATIC_DIR, STATUS_COLORS, TEMPLATES_DIR

logger = logging.getLogger(__name__)

# Errors from the bus surface verbatim as a 500 response.
SUPERVISION_ERRORS = (SdBusBaseError, OSError)


def reply_error(message: str) -> Response:
    return Response(message, status=500, mimetype="text/plain")


def create_app(config_manager=None, aggregator=None, start=None, stop=None) -> Flask:
    """Build the dashboard application.

    Args:
        config_manager: Optional ConfigManager holding naming settings
        aggregator: StatusAggregator, one is built when omitted
        start: Callable starting a unit by name
        stop: Callable stopping a unit by name

    Returns:
        Flask application
    """
    app = Flask(
        __name__,
        template_folder=str(TEMPLATES_DIR),
        static_folder=str(STATIC_DIR),
        static_url_path="/static",
    )
    if aggregator is None:
        aggregator = StatusAggregator(config_manager)
    if start is None:
        start = supervision_client.start_unit
    if stop is None:
        stop = supervision_client.stop_unit

    # Load once at startup so a broken install fails before serving.
    app.jinja_env.get_template(ROOT_TEMPLATE)

    @app.route("/")
    def serve_root():
        try:
            units = aggregator.list_managed_units()
        except SUPERVISION_ERRORS as e:
            logger.error(f"Failed to list units: {e}")
            return reply_error(str(e))
        return render_template(
            ROOT_TEMPLATE,
            title=APP_TITLE,
            servers=units,
            status_colors=STATUS_COLORS,
        )

    def rpc(verb: str, action, unit_path: str):
        unit_name = posixpath.basename(unit_path.rstrip("/"))
        try:
            action(unit_name)
        except SUPERVISION_ERRORS as e:
            logger.error(f"Failed to {verb} {unit_name}: {e}")
            return reply_error(str(e))
        return redirect(url_for("serve_root"), code=302)

    @app.route("/rpc/start/<path:unit_path>", methods=["POST"])
    def rpc_start(unit_path):
        return rpc("start", start, unit_path)

    @app.route("/rpc/stop/<path:unit_path>", methods=["POST"])
    def rpc_stop(unit_path):
        return rpc("stop", stop, unit_path)

    @app.route("/favicon.ico")
    def favicon():
        return redirect(url_for("static", filename=FAVICON), code=303)

    return app


def parse_bind(bind: str):
    """Split a bind address; an empty host listens on all interfaces."""
    host, _, port = bind.rpartition(":")
    if not port.isdigit():
        raise ValueError(f"expected host:port, got {bind!r}")
    return host.strip("[]") or "0.0.0.0", int(port)


def serve(app: Flask, bind: str, quiet: bool = False) -> None:
    """Serve the dashboard until SIGINT or SIGTERM.

    Args:
        app: Flask application
        bind: host:port to listen on
        quiet: Suppress per-request log lines
    """
    if quiet:
        logging.getLogger("werkzeug").setLevel(logging.WARNING)

    host, port = parse_bind(bind)
    server = make_server(host, port, app, threaded=True)

    def shutdown(signum, _frame):
        logger.info(f"Received {signal.Signals(signum).name}, shutting down")
        threading.Thread(target=server.shutdown, daemon=True).start()

    signal.signal(signal.SIGINT, shutdown)
    signal.signal(signal.SIGTERM, shutdown)

    logger.info(f"Serving on {bind}")
    try:
        server.serve_forever()
    finally:
        server.server_close()
