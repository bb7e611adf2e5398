import types

__all__ = ["MIME_TABLE", "DEFAULT_TYPE", "HTML_TYPE", "content_type_for"]

HTML_TYPE = "text/html; charset=utf-8"
DEFAULT_TYPE = "application/octet-stream"

# lowercased extension, without the dot -> Content-Type
MIME_TABLE = types.MappingProxyType(
    {
        "html": HTML_TYPE,
        "htm": HTML_TYPE,
        # extension-less documents such as `about` are served as pages
        "": HTML_TYPE,
        "css": "text/css; charset=utf-8",
        "js": "text/javascript; charset=utf-8",
        "mjs": "text/javascript; charset=utf-8",
        "json": "application/json; charset=utf-8",
        "map": "application/json; charset=utf-8",
        "svg": "image/svg+xml",
        "png": "image/png",
        "jpg": "image/jpeg",
        "jpeg": "image/jpeg",
        "gif": "image/gif",
        "webp": "image/webp",
        "ico": "image/x-icon",
        "txt": "text/plain; charset=utf-8",
        "log": "text/plain; charset=utf-8",
        "wasm": "application/wasm",
    }
)


def content_type_for(path):
    """Content-Type for a file, chosen only by its lowercased extension"""
    ext = path.suffix.lower().lstrip(".")
    return MIME_TABLE.get(ext, DEFAULT_TYPE)
