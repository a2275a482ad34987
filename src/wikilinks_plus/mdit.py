"""markdown-it-py plugin for wikilinks and image embeds.

Usage:
    from markdown_it import MarkdownIt
    from wikilinks_plus.mdit import wikilinks_plus_plugin

    md = MarkdownIt().use(wikilinks_plus_plugin, {"page_link": {"uri_suffix": ".html"}})
    md.render("See [[Some Page|this page]] and ![[diagram.png|Overview|400x300]]")
"""

from collections.abc import Mapping, Sequence
from typing import Any

from markdown_it import MarkdownIt
from markdown_it.renderer import RendererHTML
from markdown_it.rules_inline import StateInline
from markdown_it.token import Token
from markdown_it.utils import OptionsDict

from .config import WikilinksOptions, resolve_options
from .core import ResolvedImage, ResolvedLink, resolve_wikilink, scan_wikilink
from .diagnostics import DiagnosticReporter, log_diagnostic

RULE_NAME = "wikilinks"

# token.meta flag for images produced by this plugin
EMBED_META_KEY = "wikilink_embed"


def _push_link(state: StateInline, md: MarkdownIt, link: ResolvedLink) -> None:
    link_open = state.push("link_open", "a", 1)
    link_open.attrSet("href", link.href)
    link_open.markup = "[["

    if link.format_label:
        label = state.push("html_inline", "", 0)
        label.content = md.renderInline(link.label, state.env)
    else:
        label = state.push("text", "", 0)
        label.content = link.label

    link_close = state.push("link_close", "a", -1)
    link_close.markup = "]]"


def _push_image(state: StateInline, image: ResolvedImage) -> None:
    token = state.push("image", "img", 0)
    for name, value in image.attributes.items():
        token.attrSet(name, value)
    token.markup = "![["
    token.meta[EMBED_META_KEY] = True
    token.children = []

    if image.alt is not None:
        token.content = image.alt
        alt = Token("text", "", 0)
        alt.content = image.alt
        token.children.append(alt)


def make_wikilinks_rule(
    md: MarkdownIt, options: WikilinksOptions, reporter: DiagnosticReporter
):
    """Build the inline rule bound to one parser and one set of options."""

    def wikilinks_rule(state: StateInline, silent: bool) -> bool:
        match = scan_wikilink(state.src, state.pos, state.posMax)
        if match is None:
            return False
        # Emitting tokens is the only way to know the construct is valid
        if silent:
            return False

        result = resolve_wikilink(match, options, reporter)
        state.pos = match.end

        if isinstance(result, ResolvedImage):
            _push_image(state, result)
        else:
            _push_link(state, md, result)
        return True

    return wikilinks_rule


def render_embed_image(
    self: RendererHTML,
    tokens: Sequence[Token],
    idx: int,
    options: OptionsDict,
    env: dict,
) -> str:
    """Render images from embeds as-is, so a missing alt stays missing.

    Every other image goes through the stock renderer.
    """
    token = tokens[idx]
    if not token.meta.get(EMBED_META_KEY):
        return RendererHTML.image(self, tokens, idx, options, env)
    return self.renderToken(tokens, idx, options, env)


def wikilinks_plus_plugin(
    md: MarkdownIt,
    options: Mapping[str, Any] | WikilinksOptions | None = None,
    reporter: DiagnosticReporter | None = None,
) -> None:
    """Register the wikilink rule with a MarkdownIt instance.

    The rule runs before the stock ``link`` rule so ``[[...]]`` is never
    read as a reference link.

    Args:
        md: MarkdownIt instance to extend
        options: Nested option mapping or resolved options
        reporter: Receives soft-error diagnostics (default: log them)
    """
    reporter = reporter if reporter is not None else log_diagnostic
    resolved = resolve_options(options, reporter=reporter)

    md.inline.ruler.before(
        "link", RULE_NAME, make_wikilinks_rule(md, resolved, reporter)
    )
    md.add_render_rule("image", render_embed_image)
