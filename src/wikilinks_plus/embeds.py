"""Embed classification and image field resolution.

An embed is written ``![[target|alt text|WxH]]``. The target decides what
kind of embed it is; the remaining pipe-separated fields are alt text and,
when the last field looks like ``300x200``, display dimensions.
"""

import re
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from enum import Enum
from typing import NamedTuple

from .config import ImageEmbedOptions
from .diagnostics import INVALID_DEFAULT_ALT_TEXT, Diagnostic, DiagnosticReporter
from .paths import file_extension, strip_extension

_NUMBER = re.compile(r"^\s*(\d+(\.\d*)?|\.\d+)\s*$")


class EmbedType(str, Enum):
    """What a ``[[...]]`` or ``![[...]]`` construct renders as."""

    IMAGE = "image"
    LINK = "link"


class Dimensions(NamedTuple):
    """Display size of an image embed, as written (``"300"``, ``"200"``)."""

    width: str
    height: str

    @property
    def style(self) -> str:
        return f"width: {self.width}px; height: {self.height}px;"


@dataclass(frozen=True)
class AttributeContext:
    """Passed to an ``html_attributes`` hook."""

    original_href: str
    alt_text: str | None
    dimensions: Dimensions | None
    embed_type: EmbedType


def is_dimension(value: str) -> bool:
    """Check for ``NUMxNUM`` (case-insensitive ``x``), e.g. ``200x200``."""
    sides = value.lower().split("x")
    if len(sides) != 2:
        return False
    return all(_NUMBER.match(side) for side in sides)


def parse_dimensions(value: str) -> Dimensions | None:
    """Parse ``NUMxNUM`` into :class:`Dimensions`, or None if it is not one."""
    if not is_dimension(value):
        return None
    width, height = value.lower().split("x")
    return Dimensions(width.strip(), height.strip())


def check_embed_type(raw_target: str, image_file_ext: Iterable[str]) -> EmbedType:
    """Classify an embed target by its file extension.

    Args:
        raw_target: Target as written inside ``![[...]]``
        image_file_ext: Normalized extensions that count as images

    Returns:
        ``EmbedType.IMAGE`` for a listed extension, ``EmbedType.LINK`` otherwise
    """
    if file_extension(raw_target) in image_file_ext:
        return EmbedType.IMAGE
    return EmbedType.LINK


def split_embed_fields(parts: Sequence[str]) -> tuple[str, Dimensions | None]:
    """Split the pipe-separated fields of an image embed.

    ``parts[0]`` is the target. A trailing ``NUMxNUM`` field is always taken
    as dimensions; everything between the target and it is alt text. With no
    dimensions, every field after the target is alt text, so alt text may
    contain ``|``.

    Returns:
        Tuple of (raw alt text, dimensions or None)
    """
    if len(parts) < 2:
        return "", None

    dimensions = parse_dimensions(parts[-1])
    if dimensions is not None:
        return "|".join(parts[1:-1]).strip(), dimensions
    return "|".join(parts[1:]).strip(), None


def determine_alt_text(
    raw_alt_text: str | None,
    image_target: str,
    options: ImageEmbedOptions,
    reporter: DiagnosticReporter,
) -> str | None:
    """Work out the alt text of an image embed.

    - Alt text written in the markdown is post-processed and used.
    - Otherwise ``default_alt_text`` decides: ``False`` gives None (no alt
      attribute at all), ``True`` the file name without extension, and a
      string that string (``""`` gives an empty alt attribute).
    - Any other ``default_alt_text`` is reported and treated like ``True``.
    """
    post_process = options.post_process_alt_text
    default = options.default_alt_text

    if raw_alt_text:
        return post_process(raw_alt_text)

    if default is False:
        return None
    if default is True:
        return post_process(strip_extension(image_target))
    if isinstance(default, str):
        return post_process(default) if default else ""

    reporter(
        Diagnostic(
            INVALID_DEFAULT_ALT_TEXT,
            "image_embed.default_alt_text should be a string or a boolean, "
            f"got {type(default).__name__}; using the file name as alt text",
        )
    )
    return post_process(strip_extension(image_target))
