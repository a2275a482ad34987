"""Markdown rendering with wikilinks for either supported parser."""

from pathlib import Path

import frontmatter
import markdown
from markdown_it import MarkdownIt

from .config import WikilinksError, WikilinksOptions
from .diagnostics import DiagnosticReporter
from .extension import WikilinksPlusExtension
from .logging import warning
from .mdit import wikilinks_plus_plugin

MARKDOWN_IT = "markdown-it"
PYTHON_MARKDOWN = "markdown"
ENGINES = (MARKDOWN_IT, PYTHON_MARKDOWN)

# Extensions loaded alongside wikilinks for Python-Markdown
MARKDOWN_EXTENSIONS = [
    "extra",  # tables, footnotes, etc.
    "sane_lists",
]


class FrontmatterError(WikilinksError):
    """Raised when a markdown file's frontmatter cannot be parsed."""


def parse_markdown_file(filepath: Path, strict: bool = False) -> tuple[dict, str]:
    """Parse a markdown file with YAML frontmatter.

    Args:
        filepath: Path to the markdown file
        strict: Raise instead of warning when the frontmatter is invalid

    Returns:
        Tuple of (metadata dict, markdown content string)

    Raises:
        FrontmatterError: If strict and the file cannot be parsed
    """
    try:
        with open(filepath, "r", encoding="utf-8") as f:
            post = frontmatter.load(f)
        return dict(post.metadata), post.content
    except Exception as e:
        if strict:
            raise FrontmatterError(f"YAML parsing error in {filepath}: {e}") from e
        warning(f"YAML parsing error in {filepath}: {e}")
        return {}, ""


def create_markdown_it(
    options: dict | WikilinksOptions | None = None,
    reporter: DiagnosticReporter | None = None,
) -> MarkdownIt:
    """Create a CommonMark markdown-it parser with the wikilink rule."""
    return MarkdownIt("commonmark").use(wikilinks_plus_plugin, options, reporter)


def create_markdown(
    options: dict | WikilinksOptions | None = None,
    reporter: DiagnosticReporter | None = None,
) -> markdown.Markdown:
    """Create a Python-Markdown converter with the wikilink extension."""
    wikilinks = WikilinksPlusExtension(options=options or {}, reporter=reporter)
    return markdown.Markdown(extensions=[*MARKDOWN_EXTENSIONS, wikilinks])


def render_markdown(
    content: str,
    options: dict | WikilinksOptions | None = None,
    engine: str = MARKDOWN_IT,
    reporter: DiagnosticReporter | None = None,
) -> str:
    """Render markdown to HTML.

    A new parser is built for every call.

    Args:
        content: Markdown content
        options: Wikilink options
        engine: ``"markdown-it"`` or ``"markdown"``
        reporter: Receives diagnostics (default: log them)

    Returns:
        HTML string

    Raises:
        ValueError: If the engine is not one of ENGINES
    """
    if engine == MARKDOWN_IT:
        return create_markdown_it(options, reporter).render(content)
    if engine == PYTHON_MARKDOWN:
        return create_markdown(options, reporter).convert(content)
    raise ValueError(f"Unknown engine '{engine}', expected one of {', '.join(ENGINES)}")
