import http.client
import logging
import socket

import requests

from staticserve.server import HTTPRequestHandler


def _raw_exchange(server, payload):
    """Send raw bytes and read until the server closes the connection"""
    with socket.create_connection(server.server_address[:2], timeout=5) as sock:
        sock.sendall(payload)
        chunks = []
        while True:
            chunk = sock.recv(65536)
            if not chunk:
                break
            chunks.append(chunk)
    return b"".join(chunks)


def _raw_get(server, target, method="GET"):
    conn = http.client.HTTPConnection(*server.server_address[:2], timeout=5)
    try:
        conn.request(method, target)
        response = conn.getresponse()
        return response.status, response.headers, response.read()
    finally:
        conn.close()


def test_index(base_url):
    response = requests.get(base_url + "/", timeout=5)

    assert response.status_code == 200
    assert response.content == b"<h1>home</h1>"
    assert response.headers["Content-Type"] == "text/html; charset=utf-8"
    assert response.headers["Cache-Control"] == "public, max-age=3600"
    assert response.headers["Server"].startswith("staticserve/")
    assert response.headers["Content-Length"] == str(len(b"<h1>home</h1>"))
    assert "Date" in response.headers


def test_fallback(base_url):
    response = requests.get(base_url + "/docs/guide", timeout=5)
    assert response.status_code == 200
    assert response.content == b"<h1>guide</h1>"


def test_missing_page(base_url):
    response = requests.get(base_url + "/missing.page", timeout=5)
    assert response.status_code == 404
    assert response.text == "File not found"


def test_traversal_to_sibling(live_server, site):
    status, _, body = _raw_get(live_server, "/../secret.txt")

    assert status == 403
    assert body == b"Access denied"
    assert str(site).encode() not in body


def test_head_has_no_body(live_server):
    status, headers, body = _raw_get(live_server, "/style.css", method="HEAD")

    assert status == 200
    assert body == b""
    assert headers["Content-Length"] == str(len(b"body { color: red; }"))
    assert headers["Content-Type"] == "text/css; charset=utf-8"


def test_pipelined_requests_answered_in_order(live_server):
    payload = (
        b"GET /about HTTP/1.1\r\nHost: test\r\n\r\n"
        b"GET /notes HTTP/1.1\r\nHost: test\r\n\r\n"
        b"GET /style.css HTTP/1.1\r\nHost: test\r\nConnection: close\r\n\r\n"
    )
    data = _raw_exchange(live_server, payload)

    assert data.count(b"HTTP/1.1 200 OK") == 3
    first = data.index(b"<h1>about</h1>")
    second = data.index(b"plain notes")
    third = data.index(b"body { color: red; }")
    assert first < second < third


def test_request_body_is_skipped(live_server):
    payload = (
        b"POST /about HTTP/1.1\r\nHost: test\r\nContent-Length: 5\r\n\r\nhello"
        b"GET /notes HTTP/1.1\r\nHost: test\r\nConnection: close\r\n\r\n"
    )
    data = _raw_exchange(live_server, payload)

    assert data.count(b"HTTP/1.1 200 OK") == 2
    assert b"plain notes" in data


def test_http10_closes_by_default(live_server):
    data = _raw_exchange(live_server, b"GET /about HTTP/1.0\r\n\r\n")

    assert data.startswith(b"HTTP/1.1 200 OK")
    assert b"connection: close" in data.lower()


def test_keep_alive_session(base_url):
    with requests.Session() as session:
        for _ in range(3):
            response = session.get(base_url + "/about", timeout=5)
            assert response.status_code == 200
            assert response.headers.get("Connection", "").lower() != "close"


def test_malformed_request_line(live_server):
    data = _raw_exchange(live_server, b"garbage\r\n")
    assert data.startswith(b"HTTP/1.1 400")


def test_bad_content_length(live_server):
    data = _raw_exchange(live_server, b"GET / HTTP/1.1\r\nContent-Length: nope\r\n\r\n")
    assert data.startswith(b"HTTP/1.1 400")


def test_traversal_to_etc_passwd_is_forbidden(serve, tmp_path):
    root = tmp_path / "srv" / "www"
    root.mkdir(parents=True)
    (root / "index.html").write_bytes(b"<h1>srv</h1>")
    (tmp_path / "etc").mkdir()
    (tmp_path / "etc" / "passwd").write_bytes(b"root:x:0:0")
    server = serve(root)

    status, _, body = _raw_get(server, "/../../etc/passwd")

    assert status == 403
    assert b"root:" not in body
    assert str(tmp_path).encode() not in body


def test_debug_server_reports_os_error(serve, site):
    server = serve(site, debug=True)
    status, _, body = _raw_get(server, "/missing.page")

    assert status == 404
    assert body.startswith(b"File not found: ")


def test_chunked_request_body_is_refused(live_server):
    payload = (
        b"POST /about HTTP/1.1\r\nHost: test\r\nTransfer-Encoding: chunked\r\n\r\n"
        b"5\r\nhello\r\n0\r\n\r\n"
        b"GET /notes HTTP/1.1\r\nHost: test\r\n\r\n"
    )
    data = _raw_exchange(live_server, payload)

    assert data.startswith(b"HTTP/1.1 400")
    assert b"connection: close" in data.lower()
    assert data.count(b"HTTP/1.1 ") == 1
    assert b"plain notes" not in data


def test_stall_inside_headers_logs_warning(live_server, monkeypatch, caplog):
    monkeypatch.setattr(HTTPRequestHandler, "timeout", 0.2)

    with caplog.at_level(logging.WARNING, logger="staticserve"):
        data = _raw_exchange(live_server, b"GET /about HTTP/1.1\r\nHost: te")

    assert data == b""
    dropped = [r for r in caplog.records if "dropped" in r.getMessage()]
    assert dropped and dropped[0].levelno == logging.WARNING
    assert not [r for r in caplog.records if r.levelno >= logging.ERROR]
