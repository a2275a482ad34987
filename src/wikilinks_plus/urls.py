"""URL normalization and joining for wikilink hrefs and embed sources.

Base URLs come in two canonical shapes:
- absolute: leading and trailing slash (``/blog/``)
- relative: trailing slash and no leading slash (``./``, ``assets/``)
"""

import re
from collections.abc import Iterable

from .paths import normalize_path


def url_join(
    *parts: str, leading_slash: bool = True, trailing_slash: bool = False
) -> str:
    """Join URL parts with single slashes.

    Empty parts are skipped and duplicate slashes collapse. Anything after
    the first ``?`` is kept as the query string.

    Args:
        *parts: URL fragments to join in order
        leading_slash: Force a leading slash
        trailing_slash: Force a trailing slash; otherwise none is kept

    Returns:
        Joined URL string
    """
    joined = "/".join(part for part in parts if part)
    path, has_query, query = joined.partition("?")

    url = "/".join(segment for segment in path.split("/") if segment)
    if leading_slash:
        url = "/" + url

    if trailing_slash and not url.endswith("/"):
        url += "/"
    if has_query:
        url += "?" + query
    return url


def normalize_absolute_url(url: str) -> str:
    """Normalize a base URL to the absolute shape, e.g. ``a//b/../c`` -> ``/a/c/``."""
    url = normalize_path(url)
    if not url.startswith("/"):
        url = normalize_path("/" + url)
    return url_join(url, leading_slash=True, trailing_slash=True)


def normalize_relative_url(url: str) -> str:
    """Normalize a base URL to the relative shape.

    Leading slashes are removed, ``./`` is prepended and the result is
    path-normalized, so ``/assets`` becomes ``assets/`` and an empty value
    becomes ``./``.
    """
    url = url.lstrip("/")
    if not url.startswith("./"):
        url = "./" + url
    url = normalize_path(url)
    if url == ".":
        url = "./"
    return url_join(url, leading_slash=False, trailing_slash=True)


def normalize_extensions(extensions: Iterable[str] | str) -> tuple[str, ...]:
    """Normalize file extensions: ``' .PNG'`` -> ``'png'``."""
    if isinstance(extensions, str):
        extensions = [extensions]
    return tuple(re.sub(r"^\.", "", ext.strip().lower()) for ext in extensions)


def build_url(base_url: str, target: str, suffix: str = "", absolute: bool = False) -> str:
    """Build the final href/src for a wikilink target.

    Args:
        base_url: Normalized absolute or relative base URL
        target: Post-processed, slash-normalized target path
        suffix: Appended to the joined path as written (``.html``, ``?v=2``)
        absolute: Force a leading slash

    Returns:
        URL string, never with a slash added at the end
    """
    url = url_join(base_url, target, leading_slash=absolute, trailing_slash=False)
    if suffix.startswith("?") and "?" in url:
        suffix = "&" + suffix[1:]
    return url + suffix
