from http import HTTPStatus

from .HTTPMessage import MessageError, Request, Response, parse_headers, parse_request_line
from .mime import MIME_TABLE, content_type_for

__all__ = [
    "HTTPStatus",
    "MessageError",
    "Request",
    "Response",
    "parse_headers",
    "parse_request_line",
    "MIME_TABLE",
    "content_type_for",
]
