"""Python-Markdown extension for wikilinks and image embeds.

Converts ``[[page|label]]`` to ``<a href="...">label</a>`` and
``![[image.png|alt|300x200]]`` to ``<img src="..." alt="alt" style="...">``,
using the same options and resolution rules as the markdown-it-py plugin.
"""

import html
import re
import xml.etree.ElementTree as etree

from markdown import Extension
from markdown.inlinepatterns import InlineProcessor
from markdown.util import ETX, INLINE_PLACEHOLDER_RE, STX, AtomicString

from .config import resolve_options
from .core import ResolvedImage, resolve_link, resolve_wikilink, scan_wikilink
from .diagnostics import log_diagnostic

# Only finds where a construct may start; scan_wikilink does the rest
WIKILINK_START_PATTERN = r"!?\[\["

# Backslash escapes are stashed as STX + ord(char) + ETX
ESCAPED_CHAR_RE = re.compile(rf"{STX}(\d+){ETX}")


class WikilinksPlusInlineProcessor(InlineProcessor):
    """Inline processor producing ``<a>`` and ``<img>`` elements."""

    def __init__(self, md, options, reporter):
        super().__init__(WIKILINK_START_PATTERN, md)
        self.options = options
        self.reporter = reporter

    def source_text(self, text):
        """Put back the escapes and code spans already stashed in ``text``.

        The backtick and escape patterns run first and leave placeholders
        behind; wikilink targets and plain labels are resolved from the
        text as written.
        """
        try:
            stash = self.md.treeprocessors["inline"].stashed_nodes
        except KeyError:  # pragma: no cover
            return text

        def restore_escape(m):
            return "\\" + chr(int(m.group(1)))

        def restore(m):
            value = stash.get(m.group(1))
            if value is None:
                return m.group(0)
            if isinstance(value, str):
                return ESCAPED_CHAR_RE.sub(restore_escape, value)
            if value.tag == "code":
                return f"`{html.unescape(value.text or '')}`"
            return "".join(value.itertext())

        return INLINE_PLACEHOLDER_RE.sub(restore, text)

    def handleMatch(self, m, data):
        """Resolve the construct starting at the match, if it is complete."""
        match = scan_wikilink(data, m.start(0))
        if match is None:
            return None, None, None

        written = scan_wikilink(self.source_text(data[match.start : match.end]), 0)
        result = resolve_wikilink(written or match, self.options, self.reporter)

        if isinstance(result, ResolvedImage):
            el = etree.Element("img", dict(result.attributes))
        elif result.format_label:
            el = etree.Element("a", {"href": result.href})
            # Stashed markup stays in the label and renders with it
            label = resolve_link(match.parts, match.raw_target, self.options.page_link)
            el.text = label.label
        else:
            el = etree.Element("a", {"href": result.href})
            el.text = AtomicString(result.label)

        return el, match.start, match.end


class WikilinksPlusExtension(Extension):
    """Markdown extension for Obsidian-style wikilinks and image embeds."""

    def __init__(self, **kwargs):
        self.config = {
            "options": [{}, "Nested option mapping or WikilinksOptions"],
            "reporter": [log_diagnostic, "Callable receiving diagnostics"],
        }
        super().__init__(**kwargs)

    def extendMarkdown(self, md):
        """Register the inline processor ahead of the stock link patterns."""
        reporter = self.getConfig("reporter")
        if reporter is None:
            reporter = log_diagnostic
        options = resolve_options(self.getConfig("options"), reporter=reporter)

        processor = WikilinksPlusInlineProcessor(md, options, reporter)
        md.inlinePatterns.register(processor, "wikilinks_plus", 175)


def makeExtension(**kwargs):
    """Entry point for markdown extension."""
    return WikilinksPlusExtension(**kwargs)
