from .HTTPRequestHandler import HTTPRequestHandler
from .TCPServer import TCPServer
from .resolver import Forbidden, InternalError, NotFound, ResolveError, resolve
from .responder import respond

__all__ = [
    "HTTPRequestHandler",
    "TCPServer",
    "ResolveError",
    "NotFound",
    "Forbidden",
    "InternalError",
    "resolve",
    "respond",
]
