from http import HTTPStatus

from staticserve import utils

MAX_LINE = 65536
MAX_HEADERS = 100


class MessageError(Exception):
    """The client sent something that is not an HTTP/1.x request"""


def parse_request_line(line):
    """ Split `GET /path HTTP/1.1` into its three parts """
    parts = line.split()
    if len(parts) != 3:
        raise MessageError("Malformed request line: %r" % line)

    command, target, version = parts
    if not version.startswith("HTTP/1."):
        raise MessageError("Unsupported protocol version: %r" % version)
    return command, target, version


def parse_headers(fp):
    """ Parse the header section to a dict with lowercase keys """
    headers = {}

    while True:
        line = fp.readline(MAX_LINE + 1)
        if len(line) > MAX_LINE:
            raise MessageError("Header line too long")
        # Header will end with \r\n
        if line in (b"\r\n", b"\n", b""):
            break

        if len(headers) >= MAX_HEADERS:
            raise MessageError("Too many headers")

        k, sep, v = str(line, "iso-8859-1").rstrip("\r\n").partition(":")
        if not sep:
            raise MessageError("Malformed header line: %r" % line)
        headers[k.strip().lower()] = v.strip()

    return headers


class Request:
    """ Request from client """

    def __init__(self):
        self.cmd = None
        self.target = None
        self.version = None
        self.headers = {}

    def get_header(self, k):
        return self.headers.get(k.lower())

    @property
    def keep_alive(self):
        """Whether the client wants the connection kept open after this request"""
        conn = (self.get_header("Connection") or "").lower()
        if conn == "close":
            return False
        if conn == "keep-alive":
            return True
        return self.version == "HTTP/1.1"

    @property
    def content_length(self):
        value = self.get_header("Content-Length")
        if value is None:
            return 0
        try:
            length = int(value)
        except ValueError:
            raise MessageError("Invalid Content-Length: %r" % value)
        if length < 0:
            raise MessageError("Invalid Content-Length: %r" % value)
        return length


class Response:
    """ Response to client """
    HTTP_VERSION = "HTTP/1.1"

    def __init__(self, stream=None):
        self.status = None
        self.msg = None

        self.headers = {}

        self.stream = stream

    def set_status_line(self, status, msg=None):
        self.status = status
        self.msg = msg if msg else HTTPStatus(status).phrase
        self.add_header("Date", utils.formatdate(usegmt=True))

    def add_header(self, k, v):
        self.headers[k.lower()] = v

    def remove_header(self, k):
        return self.headers.pop(k.lower(), None)

    def header_encode(self, header):
        return header.encode("latin-1", "strict")

    def error(self, status, msg=None):
        """ Send a short plain-text error and ask the client to close """
        body = (msg or HTTPStatus(status).phrase).encode("utf-8")
        self.set_status_line(status)
        self.add_header("Content-Type", "text/plain; charset=utf-8")
        self.add_header("Connection", "close")
        self.send(body)

    def write_headers(self):
        """ Write header to buffer """
        buffer = [("%s %d %s\r\n" % (Response.HTTP_VERSION, self.status, self.msg))] + \
            [("%s: %s\r\n" % (k, v)) for k, v in self.headers.items()] + \
            ["\r\n"]
        self.stream.write(b"".join(map(self.header_encode, buffer)))

        self.headers.clear()

    def send(self, body, include_body=True):
        """
        Write the status line, headers and body.
        `include_body` is false for HEAD: the headers still describe the body.
        """
        self.add_header("Content-Length", len(body))
        self.write_headers()
        if include_body and body:
            self.stream.write(body)
