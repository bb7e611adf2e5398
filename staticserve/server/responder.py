from http import HTTPStatus

from staticserve import utils
from staticserve.config import CACHE_CONTROL, SERVER_NAME
from staticserve.http.mime import content_type_for
from staticserve.utils.logger import logger

from .resolver import ResolveError, resolve

__all__ = ["respond", "error_text"]

ERROR_CONTENT_TYPE = "text/plain; charset=utf-8"


def error_text(message, err, debug=False):
    """Client-facing error text; the OS error is only appended in debug mode"""
    if debug and err:
        return "%s: %s" % (message, err)
    return message


def _error(status, message, err, debug):
    body = error_text(message, err, debug).encode("utf-8")
    headers = {
        "Content-Type": ERROR_CONTENT_TYPE,
        "Server": SERVER_NAME,
    }
    return status, headers, body


def respond(config, method, target):
    """
    Produce `(status, headers, body)` for one request.

    The method is not inspected: every request resolves its path the same way.
    """
    path, _ = utils.parse_url(target)

    try:
        found = resolve(config.root, path)
    except ResolveError as e:
        return _error(e.status, e.message, e.detail, config.debug)

    try:
        with open(found, "rb") as f:
            content = f.read()
    except OSError as e:
        # removed or replaced between resolve and open
        logger.error("Error reading file at %s: %s", found, e)
        return _error(HTTPStatus.NOT_FOUND, "File not found", str(e), config.debug)

    headers = {
        "Content-Type": content_type_for(found),
        "Cache-Control": CACHE_CONTROL,
        "Server": SERVER_NAME,
    }
    return HTTPStatus.OK, headers, content
