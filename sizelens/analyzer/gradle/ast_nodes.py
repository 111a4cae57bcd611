"""AST node types for Gradle build scripts written in the Groovy DSL.

The tree is deliberately generic: every ``name args { ... }`` shape is a
:class:`Call`, every ``name = value`` is an :class:`Assignment`, and anything
else is kept as an opaque value so later passes can ignore it.
"""

from dataclasses import dataclass, field
from typing import Union


# --- Value nodes ---

@dataclass
class StringLiteral:
    value: str
    interpolated: bool = False  # double-quoted string containing "$"
    line: int = 0


@dataclass
class IntLiteral:
    value: int
    line: int = 0


@dataclass
class FloatLiteral:
    value: float
    line: int = 0


@dataclass
class BoolLiteral:
    value: bool
    line: int = 0


@dataclass
class NullLiteral:
    line: int = 0


@dataclass
class Identifier:
    """Bare or dotted name, e.g. ``minSdk`` or ``rootProject.ext.minSdk``."""
    name: str
    line: int = 0


@dataclass
class ListLiteral:
    values: list = field(default_factory=list)
    line: int = 0


@dataclass
class MapLiteral:
    entries: dict = field(default_factory=dict)  # str -> Value
    line: int = 0


@dataclass
class Closure:
    params: list = field(default_factory=list)  # list of parameter names
    body: list = field(default_factory=list)  # list of Node
    line: int = 0


@dataclass
class Operation:
    """Any expression the extractor does not interpret (a + b, a ? b : c, x[i])."""
    operator: str
    operands: list = field(default_factory=list)
    line: int = 0


@dataclass
class Call:
    """Method call, optionally with a trailing closure body.

    ``receiver`` holds the previous link of a call chain, so
    ``id 'x' version '1'`` is ``Call('version', receiver=Call('id'))``.
    """
    name: str
    positional_args: list = field(default_factory=list)
    named_args: dict = field(default_factory=dict)
    body: list | None = None
    receiver: "Value | None" = None
    line: int = 0

    def chain(self) -> list["Call"]:
        """Return the call chain from the innermost receiver outwards."""
        links: list[Call] = []
        node: Value | None = self
        while isinstance(node, Call):
            links.append(node)
            node = node.receiver
        links.reverse()
        return links


Value = Union[
    StringLiteral, IntLiteral, FloatLiteral, BoolLiteral, NullLiteral,
    Identifier, ListLiteral, MapLiteral, Closure, Operation, Call,
]


# --- Statement nodes ---

@dataclass
class Assignment:
    name: str
    value: Value
    operator: str = "="
    line: int = 0


@dataclass
class ExpressionStatement:
    value: Value
    line: int = 0


Node = Union[Call, Assignment, ExpressionStatement]


@dataclass
class Script:
    statements: list = field(default_factory=list)  # list of Node


def first_argument(call: Call) -> Value | None:
    """Get the only positional argument of a call, or None."""
    if len(call.positional_args) == 1 and not call.named_args:
        return call.positional_args[0]
    return None
