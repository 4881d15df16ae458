"""Expression tree nodes.

Python 3.13+. Zero external dependencies.
"""

from __future__ import annotations

from dataclasses import dataclass

__all__ = [
    "Binary",
    "Call",
    "Index",
    "Literal",
    "Member",
    "Name",
    "Node",
    "Unary",
]


@dataclass(frozen=True, slots=True)
class Literal:
    """Number, string, boolean or null constant."""

    value: str | int | float | bool | None


@dataclass(frozen=True, slots=True)
class Name:
    """Identifier looked up in template parameters, then in the data."""

    name: str


@dataclass(frozen=True, slots=True)
class Member:
    """``target.name`` access."""

    target: Node
    name: str


@dataclass(frozen=True, slots=True)
class Index:
    """``target[key]`` access."""

    target: Node
    key: Node


@dataclass(frozen=True, slots=True)
class Call:
    """Call of a built-in function or template by (possibly dotted) name."""

    function: str
    arguments: tuple[Node, ...]


@dataclass(frozen=True, slots=True)
class Unary:
    """Prefix ``!`` or ``-``."""

    operator: str
    operand: Node


@dataclass(frozen=True, slots=True)
class Binary:
    """Infix operator application."""

    operator: str
    left: Node
    right: Node


type Node = Literal | Name | Member | Index | Call | Unary | Binary
