import threading

import pytest

from staticserve.config import load_config
from staticserve.server import HTTPRequestHandler, TCPServer


@pytest.fixture
def site(tmp_path):
    """A served root with a few pages, and a secret next to it"""
    root = tmp_path / "www"
    root.mkdir()
    (root / "index.html").write_bytes(b"<h1>home</h1>")
    (root / "about.html").write_bytes(b"<h1>about</h1>")
    (root / "style.css").write_bytes(b"body { color: red; }")
    (root / "notes").write_bytes(b"plain notes")
    (root / "docs").mkdir()
    (root / "docs" / "guide.htm").write_bytes(b"<h1>guide</h1>")

    (tmp_path / "secret.txt").write_bytes(b"top secret")
    return root.resolve()


@pytest.fixture
def config(site):
    return load_config(str(site))


@pytest.fixture
def serve():
    """Start servers on ephemeral ports; all are stopped after the test"""
    running = []

    def start(root, debug=False):
        config = load_config(str(root), host="127.0.0.1", port=0, debug=debug)
        server = TCPServer(config, HTTPRequestHandler)
        thread = threading.Thread(target=server.serve_forever, kwargs={"poll_interval": 0.05})
        thread.daemon = True
        thread.start()
        running.append((server, thread))
        return server

    yield start

    for server, thread in running:
        server.shutdown()
        server.server_close()
        thread.join(timeout=5)


@pytest.fixture
def live_server(serve, site):
    return serve(site)


@pytest.fixture
def base_url(live_server):
    host, port = live_server.server_address[:2]
    return "http://%s:%d" % (host, port)
