"""Enumerations for LGEngine type-safe constants.

Uses StrEnum (Python 3.11+) for automatic string conversion.
StrEnum members are strings themselves, eliminating boilerplate __str__ methods.

Python 3.13+.
"""

from enum import StrEnum


class BranchKind(StrEnum):
    """Kind of conditional branch in a template body.

    StrEnum provides automatic string conversion: str(BranchKind.IF) == "IF"
    """

    IF = "IF"
    """First branch: - IF: ${condition}"""

    ELSEIF = "ELSEIF"
    """Alternative branch: - ELSEIF: ${condition}"""

    ELSE = "ELSE"
    """Default branch: - ELSE:"""


class LoadStatus(StrEnum):
    """Outcome of loading one resource from a provider."""

    SUCCESS = "success"
    """Resource content read and accepted."""

    SKIPPED = "skipped"
    """Resource listed but ignored (wrong extension)."""

    ERROR = "error"
    """Resource could not be read."""


__all__ = [
    "BranchKind",
    "LoadStatus",
]
