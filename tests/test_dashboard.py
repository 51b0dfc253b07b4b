import logging

import pytest

from arkserman.core.status_aggregator import StatusAggregator
from arkserman.web.dashboard import create_app, parse_bind

from .fakes import FakeConnection, connector


class Recorder:
    def __init__(self, error=None):
        self.calls = []
        self.error = error

    def __call__(self, name):
        self.calls.append(name)
        if self.error:
            raise self.error
        return "/org/freedesktop/systemd1/job/7"


@pytest.fixture
def make_client(fake_connection):
    def make(conn=None, start=None, stop=None):
        aggregator = StatusAggregator(connect=connector(conn or fake_connection))
        app = create_app(aggregator=aggregator, start=start or Recorder(), stop=stop or Recorder())
        app.testing = True
        return app.test_client()
    return make


def test_root_renders_table(make_client):
    resp = make_client().get("/")

    assert resp.status_code == 200
    assert resp.mimetype == "text/html"
    body = resp.get_data(as_text=True)
    assert "island" in body
    assert "523.5 MB" in body
    assert "1.2 s" in body
    assert "/rpc/stop/ark-island.service" in body
    assert "/rpc/start/ark-ragnarok.service" in body
    assert "ark-serman" not in body.split("<tbody>")[1]
    assert body.index("center") < body.index("island") < body.index("ragnarok")


def test_root_without_units(make_client):
    resp = make_client(conn=FakeConnection()).get("/")
    assert resp.status_code == 200
    assert "No server units found." in resp.get_data(as_text=True)


def test_root_failure_returns_plain_text_500(make_client):
    conn = FakeConnection(fail_on={"list_units": OSError("Connection refused")})
    resp = make_client(conn=conn).get("/")

    assert resp.status_code == 500
    assert resp.mimetype == "text/plain"
    assert resp.get_data(as_text=True) == "Connection refused"


def test_rpc_start_redirects_to_root(make_client):
    start = Recorder()
    resp = make_client(start=start).post("/rpc/start/ark-island.service")

    assert resp.status_code == 302
    assert resp.headers["Location"].endswith("/")
    assert start.calls == ["ark-island.service"]


def test_rpc_stop_redirects_to_root(make_client):
    stop = Recorder()
    resp = make_client(stop=stop).post("/rpc/stop/ark-island.service")

    assert resp.status_code == 302
    assert stop.calls == ["ark-island.service"]


def test_rpc_uses_final_path_segment(make_client):
    start = Recorder()
    make_client(start=start).post("/rpc/start/extra/ark-center.service")
    make_client(start=start).post("/rpc/start/ark-island.service/")
    assert start.calls == ["ark-center.service", "ark-island.service"]


def test_rpc_failure_returns_plain_text_500(make_client):
    stop = Recorder(error=OSError("Unit ark-nope.service not loaded."))
    resp = make_client(stop=stop).post("/rpc/stop/ark-nope.service")

    assert resp.status_code == 500
    assert resp.mimetype == "text/plain"
    assert resp.get_data(as_text=True) == "Unit ark-nope.service not loaded."


def test_rpc_requires_post(make_client):
    assert make_client().get("/rpc/start/ark-island.service").status_code == 405


def test_favicon_redirects_to_static(make_client):
    client = make_client()
    resp = client.get("/favicon.ico")
    assert resp.status_code == 303
    assert resp.headers["Location"].endswith("/static/ark.svg")

    resp = client.get("/static/style.css")
    assert resp.status_code == 200
    resp.close()


@pytest.mark.parametrize(
    "bind, expected",
    [
        (":8070", ("0.0.0.0", 8070)),
        ("127.0.0.1:9000", ("127.0.0.1", 9000)),
        ("[::1]:8080", ("::1", 8080)),
    ],
)
def test_parse_bind(bind, expected):
    assert parse_bind(bind) == expected


@pytest.mark.parametrize("bind", ["localhost", "localhost:", "localhost:http"])
def test_parse_bind_rejects_bad_port(bind):
    with pytest.raises(ValueError, match="host:port"):
        parse_bind(bind)


def test_root_colors_state_cell(make_client):
    body = make_client().get("/").get_data(as_text=True)
    assert "background: #e74c3c" in body
    assert "background: #2ecc71" in body


def test_serve_quiet_only_silences_request_log(monkeypatch):
    from arkserman.web import dashboard

    class FakeServer:
        def serve_forever(self):
            pass

        def server_close(self):
            self.closed = True

    server = FakeServer()
    monkeypatch.setattr(dashboard, "make_server", lambda host, port, app, threaded: server)
    monkeypatch.setattr(dashboard.signal, "signal", lambda signum, handler: None)
    werkzeug_logger = logging.getLogger("werkzeug")
    monkeypatch.setattr(werkzeug_logger, "level", logging.NOTSET)

    dashboard.serve(object(), ":8070", quiet=True)

    assert werkzeug_logger.level == logging.WARNING
    assert server.closed
