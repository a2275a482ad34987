"""Path helpers shared by link and embed resolution.

Everything here works on POSIX-style strings, never on the filesystem.
"""

import posixpath
import re

# Characters that are unsafe in file names on at least one common platform
_ILLEGAL_CHARS = re.compile(r'[/?<>\\:*|"]')
_CONTROL_CHARS = re.compile(r"[\x00-\x1f\x80-\x9f]")
_RESERVED_NAME = re.compile(r"^\.+$")
_WINDOWS_RESERVED_NAME = re.compile(
    r"^(con|prn|aux|nul|com[0-9]|lpt[0-9])(\..*)?$", re.IGNORECASE
)
_WINDOWS_TRAILING = re.compile(r"[. ]+$")

MAX_FILENAME_BYTES = 255


def normalize_path(path: str) -> str:
    """Collapse redundant separators and up-level references.

    Unlike ``posixpath.normpath`` this keeps a trailing slash, turns an
    empty path into ``"."`` and never leaves a double leading slash.

    Args:
        path: POSIX-style path string

    Returns:
        Normalized path string
    """
    if not path:
        return "."

    normalized = posixpath.normpath(path)
    if normalized.startswith("//"):
        normalized = "/" + normalized.lstrip("/")
    if path.endswith("/") and not normalized.endswith("/"):
        normalized += "/"
    return normalized


def sanitize_filename(name: str) -> str:
    """Make a single path segment safe to use as a file name.

    Removes characters that are illegal on common filesystems and control
    characters, drops names made only of dots and Windows device names,
    strips trailing dots and spaces, and truncates to 255 UTF-8 bytes.
    Returns an empty string when nothing safe is left.
    """
    safe = _ILLEGAL_CHARS.sub("", name)
    safe = _CONTROL_CHARS.sub("", safe)
    if _RESERVED_NAME.match(safe) or _WINDOWS_RESERVED_NAME.match(safe):
        return ""
    safe = _WINDOWS_TRAILING.sub("", safe)

    encoded = safe.encode("utf-8")
    if len(encoded) > MAX_FILENAME_BYTES:
        safe = encoded[:MAX_FILENAME_BYTES].decode("utf-8", errors="ignore")
    return safe


def sanitize_path(path: str) -> str:
    """Sanitize each ``/``-separated segment of a path and rejoin them."""
    return "/".join(sanitize_filename(segment) for segment in path.split("/"))


def file_extension(path: str) -> str:
    """Lower-cased extension of the last path segment, without the dot.

    A leading dot (``.gitignore``) is not treated as an extension.
    """
    return posixpath.splitext(path)[1][1:].lower()


def strip_extension(path: str) -> str:
    """File name of the last path segment with its extension removed."""
    return posixpath.splitext(posixpath.basename(path))[0]
