"""
Map an untrusted request path onto a file below the served root.

The search runs on the joined, not yet canonical path so that the `.html`
and `.htm` fallbacks can be probed; only the file that was actually found
is canonicalized and checked against the root. The returned `Path` is the
object the caller must open, with no further name resolution in between.
"""
import errno
import pathlib
import stat
from http import HTTPStatus

from staticserve.config import DEFAULT_DOCUMENT, FALLBACK_EXTENSIONS
from staticserve.utils.logger import logger

__all__ = ["ResolveError", "NotFound", "Forbidden", "InternalError", "resolve"]

# errors that only mean "there is no such file here"
_MISSING_ERRNOS = (errno.ENOENT, errno.ENOTDIR, errno.ELOOP, errno.ENAMETOOLONG)


class ResolveError(Exception):
    """
    A request path that does not lead to a servable file.
    `detail` is diagnostic text for the server log, never for production clients.
    """

    status = HTTPStatus.INTERNAL_SERVER_ERROR
    message = "Internal server error"

    def __init__(self, detail=None):
        super().__init__(detail or self.message)
        self.detail = detail


class NotFound(ResolveError):
    status = HTTPStatus.NOT_FOUND
    message = "File not found"


class Forbidden(ResolveError):
    status = HTTPStatus.FORBIDDEN
    message = "Access denied"


class InternalError(ResolveError):
    pass


def _is_regular_file(path):
    """Like `Path.is_file`, but unexpected errors propagate"""
    try:
        st = path.stat()
    except ValueError:
        # embedded null byte
        return False
    except OSError as e:
        if e.errno in _MISSING_ERRNOS:
            return False
        raise
    return stat.S_ISREG(st.st_mode)


def _with_extension(path, ext):
    if path.name in ("", ".", ".."):
        return None
    if path.name.endswith("."):
        # `about.` has an empty extension: `about.html`, not `about..html`
        return path.with_name(path.name[:-1] + ext)
    try:
        return path.with_suffix(ext)
    except ValueError:
        # no name to put an extension on, e.g. the filesystem root
        return None


def _search(candidate):
    """Return the first existing file among the candidate and its fallbacks"""
    if _is_regular_file(candidate):
        return candidate

    for ext in FALLBACK_EXTENSIONS:
        fallback = _with_extension(candidate, ext)
        if fallback is not None and _is_regular_file(fallback):
            logger.debug("Falling back from %s to %s", candidate, fallback)
            return fallback

    return None


def canonical_root(served_root):
    """Canonical form of the served root, or `InternalError`"""
    try:
        root = pathlib.Path(served_root).resolve(strict=True)
    except (OSError, RuntimeError) as e:
        logger.error("Cannot canonicalize served root %s: %s", served_root, e)
        raise InternalError(str(e)) from e

    if not root.is_dir():
        logger.error("Served root %s is not a directory", root)
        raise InternalError("served root is not a directory")
    return root


def resolve(served_root, raw_path):
    """
    Resolve `raw_path` against `served_root`.

    Returns the canonical `Path` of an existing regular file inside the
    served root. Raises `NotFound` when neither the path nor its `.html` /
    `.htm` fallbacks exist, `Forbidden` when the match escapes the root or
    cannot be canonicalized, and `InternalError` when the root itself is
    unusable or the filesystem fails unexpectedly.
    """
    relative = raw_path.replace("\\", "/").lstrip("/")
    if not relative:
        relative = DEFAULT_DOCUMENT

    root = canonical_root(served_root)
    candidate = root / relative
    logger.debug("Resolving %r as %s", raw_path, candidate)

    try:
        found = _search(candidate)
    except OSError as e:
        logger.error("Error while searching for %s: %s", candidate, e)
        raise InternalError(str(e)) from e

    if found is None:
        logger.debug("No file for %r", raw_path)
        raise NotFound("no such file: %s" % relative)

    try:
        matched = found.resolve(strict=True)
    except (OSError, RuntimeError) as e:
        logger.error("Cannot canonicalize %s: %s", found, e)
        raise Forbidden(str(e)) from e

    if matched != root and root not in matched.parents:
        logger.warning("Attempted directory traversal attack: %s", raw_path)
        raise Forbidden()

    logger.debug("Resolved %r to %s", raw_path, matched)
    return matched
