import time
import urllib.parse

__all__ = [
    "formatdate",
    "parse_url",
]


def formatdate(timeval=None, usegmt=False):
    """Returns a date string as specified by RFC 2822, e.g.:

    Fri, 09 Nov 2001 01:08:47 -0000

    Optional timeval if given is a floating point time value as accepted by
    gmtime(), otherwise the current time is used.

    Optional argument usegmt means that the timezone is written out as
    an ascii string, not numeric one (so "GMT" instead of "+0000"). This
    is needed for HTTP.
    """
    if timeval is None:
        timeval = time.time()

    tuple_time = time.gmtime(timeval)
    date_str = time.strftime("%a, %d %b %Y %H:%M:%S", tuple_time)
    if usegmt:
        date_str += " GMT"
    else:
        date_str += " +0000"

    return date_str


def parse_url(url):
    """
    parse a request target to its percent-decoded path and query dictionary
    """
    # `//host/x` would otherwise be read as a network location
    if url.startswith("//"):
        url = "/" + url.lstrip("/")
    parts = urllib.parse.urlsplit(url)
    path = urllib.parse.unquote(parts.path)
    # Prevent wrong separators from Windows clients
    path = path.replace("\\", "/")
    query = urllib.parse.parse_qs(parts.query)
    return path, query
