"""Obsidian-style wikilinks and image embeds for markdown parsers."""

__version__ = "0.1.0"

from .config import ImageEmbedOptions, PageLinkOptions, WikilinksOptions, resolve_options
from .diagnostics import Diagnostic, DiagnosticCollector
from .mdit import wikilinks_plus_plugin

__all__ = [
    "Diagnostic",
    "DiagnosticCollector",
    "ImageEmbedOptions",
    "PageLinkOptions",
    "WikilinksOptions",
    "__version__",
    "resolve_options",
    "wikilinks_plus_plugin",
]
