"""Parser-independent wikilink scanning and resolution.

The markdown-it-py rule and the Python-Markdown extension both find a
construct with :func:`scan_wikilink` and turn it into a
:class:`ResolvedLink` or :class:`ResolvedImage` with :func:`resolve_wikilink`;
they only differ in how the result becomes output.
"""

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any

from .config import ImageEmbedOptions, PageLinkOptions, WikilinksOptions
from .diagnostics import UNKNOWN_EMBED_TYPE, Diagnostic, DiagnosticReporter
from .embeds import (
    AttributeContext,
    Dimensions,
    EmbedType,
    check_embed_type,
    determine_alt_text,
    split_embed_fields,
)
from .paths import normalize_path
from .urls import build_url

EMBED_OPEN = "![["
LINK_OPEN = "[["
CLOSE = "]]"


@dataclass(frozen=True)
class WikilinkMatch:
    """A ``[[...]]`` or ``![[...]]`` construct found in the source."""

    is_embed: bool
    content: str  # stripped text between the delimiters
    start: int
    end: int  # index just past the closing ]]

    @property
    def parts(self) -> list[str]:
        return self.content.split("|")

    @property
    def raw_target(self) -> str:
        return self.parts[0].strip()


@dataclass(frozen=True)
class ResolvedLink:
    href: str
    label: str
    format_label: bool  # render the label as inline markdown


@dataclass(frozen=True)
class ResolvedImage:
    src: str
    alt: str | None  # None: no alt attribute at all
    dimensions: Dimensions | None
    attributes: Mapping[str, str]  # every <img> attribute, in output order


def scan_wikilink(src: str, pos: int, pos_max: int | None = None) -> WikilinkMatch | None:
    """Look for a wikilink or embed starting exactly at ``pos``.

    Args:
        src: Source text
        pos: Position the construct must start at
        pos_max: End of the region the construct must fit in (default: end
            of ``src``); the closing ``]]`` may not cross it

    Returns:
        The match, or None if there is no complete, non-empty construct
    """
    if pos_max is None:
        pos_max = len(src)

    if src.startswith(EMBED_OPEN, pos):
        is_embed = True
        content_start = pos + len(EMBED_OPEN)
    elif src.startswith(LINK_OPEN, pos):
        is_embed = False
        content_start = pos + len(LINK_OPEN)
    else:
        return None

    close = src.find(CLOSE, content_start, pos_max)
    if close == -1:
        return None

    content = src[content_start:close].strip()
    if not content:
        return None

    return WikilinkMatch(
        is_embed=is_embed, content=content, start=pos, end=close + len(CLOSE)
    )


def resolve_link(
    parts: Sequence[str], raw_target: str, options: PageLinkOptions
) -> ResolvedLink:
    """Resolve ``[[target|label]]`` into an href and a label.

    Without a label field the target doubles as the label. Extra pipes are
    kept as part of the label.
    """
    label = "|".join(parts[1:]) if len(parts) > 1 else raw_target

    target = normalize_path(options.post_process_link_target(raw_target))
    href = build_url(
        options.base_url,
        target,
        options.uri_suffix,
        absolute=options.force_all_links_absolute,
    )

    return ResolvedLink(
        href=href,
        label=options.post_process_link_label(label),
        format_label=options.allow_link_label_formatting,
    )


def _extra_attributes(
    html_attributes: Any, context: AttributeContext
) -> dict[str, str]:
    if callable(html_attributes):
        extra = html_attributes(context)
    else:
        extra = html_attributes
    if not extra:
        return {}
    return {name: str(value) for name, value in extra.items() if value is not None}


def resolve_image_embed(
    parts: Sequence[str],
    raw_target: str,
    options: ImageEmbedOptions,
    reporter: DiagnosticReporter,
) -> ResolvedImage:
    """Resolve ``![[image.png|alt|WxH]]`` into ``<img>`` attributes.

    Attribute order is ``src``, then extra attributes from
    ``html_attributes``, then the computed ``alt`` (only if the extras did
    not set one and there is alt text) and ``style`` for dimensions. An
    extra ``src`` replaces the computed one.
    """
    raw_alt_text, dimensions = split_embed_fields(parts)

    image_target = raw_target
    if options.post_process_image_target:
        image_target = options.post_process_image_target(raw_target)
    image_target = normalize_path(image_target.replace("\\", "/"))

    src = build_url(
        options.base_url,
        image_target,
        options.uri_suffix,
        absolute=options.force_all_image_urls_absolute,
    )

    alt = determine_alt_text(raw_alt_text, raw_target, options, reporter)
    if alt is not None:
        alt = alt.strip()

    context = AttributeContext(
        original_href=src,
        alt_text=alt,
        dimensions=dimensions,
        embed_type=EmbedType.IMAGE,
    )
    attributes = {"src": src, **_extra_attributes(options.html_attributes, context)}
    if "alt" not in attributes and alt is not None:
        attributes["alt"] = alt
    if dimensions is not None:
        attributes["style"] = dimensions.style

    return ResolvedImage(
        src=attributes["src"],
        alt=attributes.get("alt"),
        dimensions=dimensions,
        attributes=MappingProxyType(attributes),
    )


def classify(match: WikilinkMatch, options: WikilinksOptions) -> EmbedType:
    """Embed kind of a match; plain ``[[...]]`` links are always links."""
    if not match.is_embed:
        return EmbedType.LINK
    return check_embed_type(match.raw_target, options.image_embed.image_file_ext)


def resolve_wikilink(
    match: WikilinkMatch, options: WikilinksOptions, reporter: DiagnosticReporter
) -> ResolvedLink | ResolvedImage:
    """Resolve a match according to its embed kind.

    An embed kind without a handler is reported and rendered as a link.
    """
    parts = match.parts
    raw_target = parts[0].strip()
    embed_type = classify(match, options)

    if embed_type == EmbedType.IMAGE:
        return resolve_image_embed(parts, raw_target, options.image_embed, reporter)
    if embed_type != EmbedType.LINK:
        reporter(
            Diagnostic(
                UNKNOWN_EMBED_TYPE,
                f"Unexpected embed type '{embed_type}' for '{raw_target}', "
                "falling back to a wikilink",
            )
        )
    return resolve_link(parts, raw_target, options.page_link)
