"""WSGI entrypoint.

Gunicorn / production: `gunicorn wsgi:app`.
Local dev: `python wsgi.py` (threaded server on Config.PORT, Ctrl+C to stop).
"""
import logging
import signal
import sys
import threading

from werkzeug.serving import make_server

from app import create_app
from config import ConfigurationError
from models import DatabaseUnavailableError, close_database

logger = logging.getLogger(__name__)


def build_app():
    """Create the app or exit with status 1 when it cannot serve."""
    try:
        return create_app()
    except ConfigurationError as e:
        logger.critical("Configuration error: %s", e)
        sys.exit(1)
    except DatabaseUnavailableError as e:
        logger.critical("Failed to connect: %s", e)
        sys.exit(1)


app = build_app()


def serve(application=None, host="0.0.0.0", port=None):
    """Run a threaded server until SIGINT/SIGTERM, then close the database handle."""
    application = application or app
    port = port or application.config["PORT"]
    server = make_server(host, port, application, threaded=True)

    def _shutdown(signum, frame):
        logger.info("Shutting down (signal %s)...", signum)
        # shutdown() blocks until serve_forever returns, so it can't run on the serving thread
        threading.Thread(target=server.shutdown, daemon=True).start()

    signal.signal(signal.SIGINT, _shutdown)
    signal.signal(signal.SIGTERM, _shutdown)

    logger.info("Quiz App running: http://localhost:%s", port)
    logger.info("Questions are marked as 'used' ONLY when answered correctly!")
    try:
        server.serve_forever()
    finally:
        server.server_close()
        close_database(application)


if __name__ == "__main__":
    serve()
