"""Options for the wikilink rule.

Options are two frozen profiles, one for page links (``[[page]]``) and one
for image embeds (``![[image.png]]``). User values are merged over the
defaults by :func:`resolve_options`; base URLs and the extension list are
normalized when a profile is constructed.
"""

import tomllib
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field, fields, replace
from pathlib import Path
from types import MappingProxyType
from typing import Any, TypeVar

from .diagnostics import UNKNOWN_OPTION, Diagnostic, DiagnosticReporter, log_diagnostic
from .paths import sanitize_path
from .urls import normalize_absolute_url, normalize_extensions, normalize_relative_url

T = TypeVar("T")

CONFIG_DIR = ".wikilinks"
CONFIG_FILE = "config.toml"

DEFAULT_IMAGE_EXTENSIONS = ("bmp", "gif", "jpeg", "jpg", "png", "svg", "webp")


class WikilinksError(Exception):
    """Base class for wikilinks-plus errors."""


class ConfigError(WikilinksError):
    """Raised when an options file cannot be read."""


def _strip(value: str) -> str:
    return value.strip()


def _passthrough(value: str) -> str:
    return value


def _sanitize_image_target(target: str) -> str:
    return sanitize_path(target.strip())


# Called with an embeds.AttributeContext
AttributeHook = Callable[[Any], Mapping[str, Any] | None]


@dataclass(frozen=True)
class PageLinkOptions:
    """Options for ``[[page]]`` links."""

    absolute_base_url: str = "/"
    relative_base_url: str = "./"
    force_all_links_absolute: bool = False
    post_process_link_target: Callable[[str], str] = _strip
    post_process_link_label: Callable[[str], str] = _strip
    allow_link_label_formatting: bool = True
    uri_suffix: str = ""  # e.g. ".html"

    def __post_init__(self):
        object.__setattr__(
            self, "absolute_base_url", normalize_absolute_url(self.absolute_base_url)
        )
        object.__setattr__(
            self, "relative_base_url", normalize_relative_url(self.relative_base_url)
        )

    @property
    def base_url(self) -> str:
        if self.force_all_links_absolute:
            return self.absolute_base_url
        return self.relative_base_url


@dataclass(frozen=True)
class ImageEmbedOptions:
    """Options for ``![[image.png]]`` embeds."""

    absolute_base_url: str = "/"
    relative_base_url: str = "./"
    force_all_image_urls_absolute: bool = False
    uri_suffix: str = ""  # e.g. "?v=123"
    # Extra <img> attributes: a mapping, or a hook returning one
    html_attributes: Mapping[str, Any] | AttributeHook = field(default_factory=dict)
    post_process_image_target: Callable[[str], str] | None = _sanitize_image_target
    post_process_alt_text: Callable[[str], str] = _strip
    image_file_ext: tuple[str, ...] = DEFAULT_IMAGE_EXTENSIONS
    # False: no alt when missing, True: file name, str: that text
    default_alt_text: bool | str = False

    def __post_init__(self):
        object.__setattr__(
            self, "absolute_base_url", normalize_absolute_url(self.absolute_base_url)
        )
        object.__setattr__(
            self, "relative_base_url", normalize_relative_url(self.relative_base_url)
        )
        object.__setattr__(
            self, "image_file_ext", normalize_extensions(self.image_file_ext)
        )
        if isinstance(self.html_attributes, Mapping):
            object.__setattr__(
                self, "html_attributes", MappingProxyType(dict(self.html_attributes))
            )

    @property
    def base_url(self) -> str:
        if self.force_all_image_urls_absolute:
            return self.absolute_base_url
        return self.relative_base_url


# Options holding callables; these cannot come from a TOML file
HOOK_OPTIONS = {
    "post_process_link_target",
    "post_process_link_label",
    "post_process_image_target",
    "post_process_alt_text",
    "html_attributes",
}


def _find_similar(key: str, valid_keys: set[str], threshold: float = 0.6) -> str | None:
    """Find the closest valid key by Levenshtein ratio, if close enough."""

    def levenshtein_ratio(s1: str, s2: str) -> float:
        m, n = len(s1), len(s2)
        if m == 0 or n == 0:
            return 0.0

        previous = list(range(n + 1))
        for i in range(1, m + 1):
            current = [i] + [0] * n
            for j in range(1, n + 1):
                cost = 0 if s1[i - 1] == s2[j - 1] else 1
                current[j] = min(
                    previous[j] + 1, current[j - 1] + 1, previous[j - 1] + cost
                )
            previous = current

        return 1.0 - (previous[n] / max(m, n))

    best_match = None
    best_ratio = 0.0
    for valid in sorted(valid_keys):
        ratio = levenshtein_ratio(key.lower(), valid.lower())
        if ratio > best_ratio:
            best_ratio = ratio
            best_match = valid

    return best_match if best_ratio >= threshold else None


def _report_unknown_keys(
    data: Mapping,
    valid_keys: set[str],
    section: str,
    reporter: DiagnosticReporter,
    source: Path | None = None,
) -> None:
    """Report keys that do not name an option, with a suggestion if one is close."""
    for key in sorted(set(data) - valid_keys):
        location = f" in {source}" if source else ""
        msg = f"Unknown option '{key}' in [{section}]{location}"

        similar = _find_similar(key, valid_keys)
        if similar:
            msg += f". Did you mean '{similar}'?"

        reporter(Diagnostic(UNKNOWN_OPTION, msg))


def _load_dataclass(
    cls: type[T],
    data: Mapping | T | None,
    section: str,
    reporter: DiagnosticReporter,
    source: Path | None = None,
) -> T:
    """Build an options dataclass from user values merged over its defaults.

    Unknown keys are reported and ignored. An instance of ``cls`` is
    returned unchanged.
    """
    if isinstance(data, cls):
        return data
    data = data or {}

    valid_keys = {f.name for f in fields(cls)}
    _report_unknown_keys(data, valid_keys, section, reporter, source)

    kwargs = {key: value for key, value in data.items() if key in valid_keys}
    return cls(**kwargs)


@dataclass(frozen=True)
class WikilinksOptions:
    """Complete, read-only options for the wikilink rule."""

    page_link: PageLinkOptions = field(default_factory=PageLinkOptions)
    image_embed: ImageEmbedOptions = field(default_factory=ImageEmbedOptions)

    def with_absolute_urls(self) -> "WikilinksOptions":
        """Copy of these options with page and image URLs forced absolute."""
        return replace(
            self,
            page_link=replace(self.page_link, force_all_links_absolute=True),
            image_embed=replace(self.image_embed, force_all_image_urls_absolute=True),
        )

    @classmethod
    def load(
        cls, config_path: Path, reporter: DiagnosticReporter | None = None
    ) -> "WikilinksOptions":
        """Load options from a TOML file.

        The file may hold ``[page_link]`` and ``[image_embed]`` tables.
        Hook options cannot be set from a file and keep their defaults.

        Args:
            config_path: Path to the TOML file
            reporter: Receives unknown-key diagnostics (default: log them)

        Returns:
            Loaded options; defaults if the file does not exist

        Raises:
            ConfigError: If the file is not valid TOML
        """
        reporter = reporter if reporter is not None else log_diagnostic

        if not config_path.exists():
            return resolve_options(None, reporter=reporter)

        try:
            with open(config_path, "rb") as f:
                data = tomllib.load(f)
        except (OSError, tomllib.TOMLDecodeError) as e:
            raise ConfigError(f"Could not read {config_path}: {e}") from e

        for section in ("page_link", "image_embed"):
            table = data.get(section)
            if not isinstance(table, dict):
                continue
            for key in sorted(HOOK_OPTIONS & set(table)):
                reporter(
                    Diagnostic(
                        UNKNOWN_OPTION,
                        f"Option '{key}' in [{section}] of {config_path} "
                        "can only be set from Python; ignoring it",
                    )
                )
                del table[key]

        return resolve_options(data, reporter=reporter, source=config_path)

    @staticmethod
    def find_config(start_path: Path) -> Path | None:
        """Find ``.wikilinks/config.toml`` in start_path or one of its parents."""
        current = start_path.resolve()

        while True:
            config_path = current / CONFIG_DIR / CONFIG_FILE
            if config_path.exists():
                return config_path

            parent = current.parent
            if parent == current:
                return None
            current = parent


def resolve_options(
    user_options: Mapping | WikilinksOptions | None = None,
    reporter: DiagnosticReporter | None = None,
    source: Path | None = None,
) -> WikilinksOptions:
    """Merge user options over the defaults.

    Args:
        user_options: ``{"page_link": {...}, "image_embed": {...}}``; each
            section may also be a ready-made options instance
        reporter: Receives unknown-key diagnostics (default: log them)
        source: File the options came from, for diagnostics

    Returns:
        Frozen, normalized options

    When ``image_embed.post_process_alt_text`` is not given, alt text is
    passed through as written instead of being stripped.
    """
    if isinstance(user_options, WikilinksOptions):
        return user_options

    reporter = reporter if reporter is not None else log_diagnostic
    user_options = user_options or {}
    _report_unknown_keys(
        user_options, {"page_link", "image_embed"}, "top-level", reporter, source
    )

    page_link = _load_dataclass(
        PageLinkOptions, user_options.get("page_link"), "page_link", reporter, source
    )

    image_data = user_options.get("image_embed")
    if not isinstance(image_data, ImageEmbedOptions):
        image_data = dict(image_data or {})
        if image_data.get("post_process_alt_text") is None:
            image_data["post_process_alt_text"] = _passthrough
    image_embed = _load_dataclass(
        ImageEmbedOptions, image_data, "image_embed", reporter, source
    )

    return WikilinksOptions(page_link=page_link, image_embed=image_embed)
