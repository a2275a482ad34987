"""Soft-error reporting for the wikilink rule.

Nothing in the rule raises on odd input. Conditions worth telling the user
about are wrapped in a :class:`Diagnostic` and handed to a reporter, which is
any callable accepting one. The default reporter logs a warning.
"""

from collections.abc import Callable
from dataclasses import dataclass

from .logging import warning

UNKNOWN_EMBED_TYPE = "unknown-embed-type"
INVALID_DEFAULT_ALT_TEXT = "invalid-default-alt-text"
UNKNOWN_OPTION = "unknown-option"


@dataclass(frozen=True)
class Diagnostic:
    """A recoverable problem found while configuring or parsing."""

    code: str
    message: str

    def __str__(self) -> str:
        return f"{self.message} [{self.code}]"


DiagnosticReporter = Callable[[Diagnostic], None]


def log_diagnostic(diagnostic: Diagnostic) -> None:
    """Default reporter: log the diagnostic as a warning."""
    warning(str(diagnostic))


class DiagnosticCollector:
    """Reporter that keeps diagnostics in memory instead of logging them."""

    def __init__(self) -> None:
        self.diagnostics: list[Diagnostic] = []

    def __call__(self, diagnostic: Diagnostic) -> None:
        self.diagnostics.append(diagnostic)

    @property
    def codes(self) -> list[str]:
        return [d.code for d in self.diagnostics]

    def clear(self) -> None:
        self.diagnostics.clear()
