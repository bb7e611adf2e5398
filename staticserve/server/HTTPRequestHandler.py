import io
import socket
import threading

from staticserve.config import CONNECTION_TIMEOUT
from staticserve.http import HTTPStatus, MessageError, Request, Response
from staticserve.http.HTTPMessage import MAX_LINE, parse_headers, parse_request_line
from staticserve.utils.logger import logger

from .responder import respond


class HTTPRequestHandler:
    """
    Serve one client connection.
    Requests on the connection are answered one at a time, in arrival order,
    until the client or the server decides to close it.
    """

    timeout = CONNECTION_TIMEOUT

    def __init__(self, request, client_address, server):
        self.request = request
        self.client_address = client_address
        self.server = server
        self.config = server.config

        self.rfile = self.request.makefile("rb", -1)
        self.wfile = _SocketWriter(self.request)

        try:
            self.handle()
        except (ConnectionError, socket.timeout) as e:
            logger.warning("Connection %s dropped: %s", threading.current_thread().name, e)
        except Exception:
            logger.exception("Error serving connection %s", threading.current_thread().name)
        finally:
            self.finish()

    def setup(self):
        """Fresh request and response for the next message on the connection"""
        self._request = Request()
        self._response = Response(self.wfile)

        self.close_connection = True

    def handle(self):
        """Handle the http requests"""
        self.setup()
        self.handle_one_request()
        while not self.close_connection:
            self.setup()
            self.handle_one_request()

    def handle_one_request(self):
        """Handle a single HTTP request"""
        # wait for the next request, but not forever
        self.request.settimeout(self.timeout)
        try:
            raw = self.rfile.readline(MAX_LINE + 1)
        except socket.timeout:
            logger.info("Connection %s timeout", threading.current_thread().name)
            return

        if not raw:
            # client closed the connection
            return
        if len(raw) > MAX_LINE:
            self._response.error(HTTPStatus.REQUEST_URI_TOO_LONG)
            return

        start_line = str(raw, "iso-8859-1").rstrip("\r\n")
        try:
            # GET /path HTTP/1.1
            command, target, version = parse_request_line(start_line)
            self._request.cmd, self._request.target, self._request.version = command, target, version
            self._request.headers = parse_headers(self.rfile)
            if self._request.get_header("Transfer-Encoding"):
                # chunked bodies cannot be skipped by length; refuse and close
                raise MessageError("Transfer-Encoding request bodies are not supported")
            # bodies are never interpreted; drop them so the next request stays framed
            self.discard_body(self._request.content_length)
        except MessageError as e:
            logger.warning("%s", e)
            self._response.error(HTTPStatus.BAD_REQUEST)
            return

        status, headers, body = respond(self.config, command, target)
        logger.info("%s %s %d", command, target, status)

        self.close_connection = not self._request.keep_alive
        self._response.set_status_line(status)
        for k, v in headers.items():
            self._response.add_header(k, v)
        if self.close_connection:
            self._response.add_header("Connection", "close")
        self._response.send(body, include_body=command != "HEAD")

    def discard_body(self, length):
        while length > 0:
            chunk = self.rfile.read(min(length, 65536))
            if not chunk:
                raise ConnectionError("client closed while sending the request body")
            length -= len(chunk)

    def finish(self):
        """Release the socket and its file objects"""
        self.rfile.close()
        self.request.close()


class _SocketWriter(io.BufferedIOBase):
    """
    Simple writable BufferedIOBase implementation for a socket
    Does not hold data in a buffer, avoiding any need to call flush().
    """

    def __init__(self, sock):
        self._sock = sock

    def writable(self):
        return True

    def write(self, b):
        if isinstance(b, str):
            b = b.encode()

        self._sock.sendall(b)
        with memoryview(b) as view:
            return view.nbytes

    def fileno(self):
        return self._sock.fileno()
