"""Test configuration and shared fixtures.

Provide isolated settings, an on-disk service list pointing at a local
upstream HTTP server, and client fixtures. No test depends on environment
files or on network access beyond the loopback interface.
"""
import json
import threading
import time
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from pathlib import Path
from typing import Generator

import pytest
from fastapi.testclient import TestClient

from statuspage.config import Settings
from statuspage.main import create_app

# Nothing listens on port 1; connecting there is refused immediately.
CLOSED_PORT = 1

# ==============================================================================
# UPSTREAM SERVER
# ==============================================================================


class _UpstreamHandler(BaseHTTPRequestHandler):
    """Answer GETs as configured on the server.

    Every response waits `server.delay` seconds first. When `server.redirect`
    is set, `/` answers 302 to `/next` and only `/next` gets `status_code`.
    """

    def do_GET(self):
        time.sleep(self.server.delay)
        if self.server.redirect and self.path == "/":
            self.send_response(302)
            self.send_header("Location", "/next")
        else:
            self.send_response(self.server.status_code)
        self.send_header("Content-Length", "0")
        self.end_headers()

    def log_message(self, format, *args):
        pass


@pytest.fixture
def upstream() -> Generator[ThreadingHTTPServer, None, None]:
    """Run a loopback HTTP server for probes to hit.

    Set `upstream.status_code` to change what it answers (200 by default),
    `upstream.delay` to slow each response down and `upstream.redirect` to
    put one redirect hop in front of it.
    """
    server = ThreadingHTTPServer(("127.0.0.1", 0), _UpstreamHandler)
    server.status_code = 200
    server.delay = 0.0
    server.redirect = False
    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()

    yield server

    server.shutdown()
    server.server_close()
    thread.join(timeout=5)


# ==============================================================================
# CONFIGURATION FIXTURES
# ==============================================================================


@pytest.fixture
def config_file(tmp_path: Path, upstream: ThreadingHTTPServer) -> Path:
    """Write a service list with one reachable and one closed service."""
    path = tmp_path / "config.json"
    path.write_text(json.dumps({
        "servers": [
            {
                "serviceId": "local",
                "serviceName": "Local Upstream",
                "ipAddress": "127.0.0.1",
                "port": upstream.server_address[1],
                "protocol": "http",
            },
            {
                "serviceId": "closed",
                "serviceName": "Closed Port",
                "ipAddress": "127.0.0.1",
                "port": CLOSED_PORT,
                "protocol": "http",
            },
        ]
    }))
    return path


@pytest.fixture
def static_dir(tmp_path: Path) -> Path:
    path = tmp_path / "html"
    path.mkdir()
    (path / "index.html").write_text("<h1>Service Status</h1>")
    return path


@pytest.fixture
def mock_settings(config_file: Path, static_dir: Path) -> Settings:
    """Provide isolated test configuration.

    Returns:
        Settings: Development settings pointing at the test service list and
            static directory, with `.env` loading disabled.
    """
    return Settings(
        ENVIRONMENT="development",
        LOG_LEVEL="debug",
        CONFIG_PATH=str(config_file),
        STATIC_DIR=str(static_dir),
        _env_file=None,
    )


@pytest.fixture
def client(mock_settings: Settings) -> Generator[TestClient, None, None]:
    """Provide an HTTP test client with the lifespan already run.

    Yields:
        TestClient: Client for an application that has loaded the test
            service list and is ready.
    """
    with TestClient(create_app(mock_settings)) as test_client:
        yield test_client
