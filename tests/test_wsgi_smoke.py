import importlib
import signal
import sys
import threading

import pytest


@pytest.fixture
def wsgi(monkeypatch, tmp_path):
    monkeypatch.setenv("DATABASE_URL", f"sqlite:///{tmp_path / 'quiz.db'}")
    sys.modules.pop("wsgi", None)
    return importlib.import_module("wsgi")


def test_wsgi_imports_app(wsgi):
    assert hasattr(wsgi, "app") and wsgi.app is not None
    assert "quiz" in wsgi.app.extensions


def test_wsgi_exits_without_database_url(wsgi, monkeypatch):
    monkeypatch.delenv("DATABASE_URL", raising=False)
    with pytest.raises(SystemExit) as exc:
        wsgi.build_app()
    assert exc.value.code == 1


def test_wsgi_exits_on_placeholder_url(wsgi, monkeypatch):
    monkeypatch.setenv("DATABASE_URL", "sqlitecloud://your-project.sqlite.cloud:8860/quiz")
    with pytest.raises(SystemExit) as exc:
        wsgi.build_app()
    assert exc.value.code == 1


def test_wsgi_exits_when_database_unreachable(wsgi, monkeypatch, tmp_path):
    monkeypatch.setenv("DATABASE_URL", f"sqlite:///{tmp_path / 'missing' / 'dir' / 'quiz.db'}")
    with pytest.raises(SystemExit) as exc:
        wsgi.build_app()
    assert exc.value.code == 1


def test_serve_stops_on_signal_then_closes_database(wsgi, monkeypatch):
    handlers = {}
    events = []

    class _FakeServer:
        def __init__(self):
            self.stopped = threading.Event()

        def serve_forever(self):
            handlers[signal.SIGTERM](signal.SIGTERM, None)
            assert self.stopped.wait(5)
            events.append("stopped")

        def shutdown(self):
            self.stopped.set()

        def server_close(self):
            events.append("server_closed")

    server = _FakeServer()
    monkeypatch.setattr(wsgi, "make_server", lambda host, port, app, threaded: server)
    monkeypatch.setattr(wsgi.signal, "signal", lambda sig, handler: handlers.__setitem__(sig, handler))
    monkeypatch.setattr(wsgi, "close_database", lambda app: events.append("db_closed"))

    wsgi.serve()

    assert set(handlers) == {signal.SIGINT, signal.SIGTERM}
    assert events == ["stopped", "server_closed", "db_closed"]
