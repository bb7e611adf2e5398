import os
import pathlib
from collections import namedtuple

__all__ = [
    "SERVER_NAME",
    "CACHE_CONTROL",
    "DEFAULT_DOCUMENT",
    "FALLBACK_EXTENSIONS",
    "DEFAULT_HOST",
    "DEFAULT_PORT",
    "CONNECTION_TIMEOUT",
    "ConfigError",
    "ServerConfig",
    "load_config",
]

SERVER_NAME = "staticserve/0.1"
CACHE_CONTROL = "public, max-age=3600"

# Served when the request path is empty, e.g. `GET /`
DEFAULT_DOCUMENT = "index.html"
# Tried in order when the requested file does not exist
FALLBACK_EXTENSIONS = (".html", ".htm")

DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 3000

# If the server not receives any request during `CONNECTION_TIMEOUT` seconds on a
# kept-alive connection, the connection is closed.
CONNECTION_TIMEOUT = 20


class ConfigError(Exception):
    """The server cannot start with the given settings."""


ServerConfig = namedtuple("ServerConfig", ["root", "host", "port", "debug"])


def load_config(serve_path="./", host=DEFAULT_HOST, port=DEFAULT_PORT, debug=False):
    """
    Build the process-wide configuration.
    The served root is canonicalized here, once; a root that does not exist,
    is not a directory or cannot be listed raises `ConfigError`.
    """
    base = pathlib.Path(os.getcwd(), serve_path)
    try:
        root = base.resolve(strict=True)
    except (OSError, RuntimeError) as e:
        raise ConfigError("cannot resolve served root %s: %s" % (base, e)) from e

    if not root.is_dir():
        raise ConfigError("served root %s is not a directory" % root)
    if not os.access(root, os.R_OK | os.X_OK):
        raise ConfigError("served root %s is not accessible" % root)

    if not 0 <= int(port) <= 65535:
        raise ConfigError("invalid port %r" % port)

    return ServerConfig(root=root, host=host, port=int(port), debug=bool(debug))
