"""Scalar variable bindings visible to a build script."""

import re
from collections.abc import Iterator, Mapping

from sizelens.analyzer.gradle.ast_nodes import (
    Assignment,
    BoolLiteral,
    Call,
    FloatLiteral,
    Identifier,
    IntLiteral,
    Node,
    Operation,
    Script,
    StringLiteral,
    Value,
)
from sizelens.analyzer.model.build_context import ScalarValue
from sizelens.core.logger.logger import get_logger

DEFAULT_MAX_DEPTH = 10

# Qualifiers that do not change which binding a name refers to.
_SCOPE_PREFIXES = ("rootProject.", "project.", "ext.", "extra.")

# Blocks whose assignments are collected besides the top level.
_BINDING_BLOCKS = {"ext", "buildscript"}

_NAME_PATH = r"[A-Za-z_][\w]*(?:\.[A-Za-z_][\w]*)*"
_PLACEHOLDER_PATTERN = re.compile(r"\$\{([^}]*)\}|\$(" + _NAME_PATH + ")")
_NAME_PATH_PATTERN = re.compile(r"^\s*(" + _NAME_PATH + r")\s*$")

logger = get_logger(__name__)


def normalize_name(name: str) -> str:
    """Strip scope qualifiers: ``rootProject.ext.minSdk`` -> ``minSdk``."""
    stripped = True
    while stripped:
        stripped = False
        for prefix in _SCOPE_PREFIXES:
            if name.startswith(prefix) and len(name) > len(prefix):
                name = name[len(prefix):]
                stripped = True
    return name


def _render(value: ScalarValue) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


class VariableTable(Mapping):
    """Read-only mapping of variable name to resolved scalar value.

    Lookups that miss the local bindings fall back to the parent scope.
    """

    def __init__(
        self,
        bindings: Mapping[str, ScalarValue] | None = None,
        parent: Mapping[str, ScalarValue] | None = None,
    ) -> None:
        """Initialize the table.

        Args:
            bindings: Resolved local bindings.
            parent: Bindings of the enclosing project, consulted on a miss.
        """
        self._bindings: dict[str, ScalarValue] = dict(bindings or {})
        self._parent: dict[str, ScalarValue] = dict(parent or {})

    @classmethod
    def resolve(
        cls,
        script: Script,
        parent: Mapping[str, ScalarValue] | None = None,
        max_depth: int = DEFAULT_MAX_DEPTH,
    ) -> "VariableTable":
        """Collect and resolve the scalar bindings of a script.

        Identifier-to-identifier bindings are followed for at most
        ``max_depth`` rounds; anything still unresolved (cycles, dangling
        references, non-scalar values) is left out of the table.

        Args:
            script: Parsed build script.
            parent: Bindings inherited from the parent project.
            max_depth: Maximum resolution rounds.

        Returns:
            Resolved variable table.
        """
        raw: dict[str, Value] = {}
        _collect(script.statements, raw)

        table = cls(parent=parent)
        pending: dict[str, Value] = {}
        for name, value in raw.items():
            if isinstance(value, (IntLiteral, FloatLiteral, BoolLiteral)):
                table._bindings[name] = value.value
            elif isinstance(value, StringLiteral) and not value.interpolated:
                table._bindings[name] = value.value
            else:
                pending[name] = value

        for _ in range(max_depth):
            if not pending:
                break
            progressed = False
            for name, value in list(pending.items()):
                resolved = table._resolve_pending(value, raw)
                if resolved is not None:
                    table._bindings[name] = resolved
                    del pending[name]
                    progressed = True
            if not progressed:
                break

        if pending:
            logger.debug(f"Unresolved variables: {sorted(pending)}")
        return table

    def _resolve_pending(self, value: Value, raw: Mapping[str, Value]) -> ScalarValue | None:
        if isinstance(value, Identifier):
            name = normalize_name(value.name)
            if name in self._bindings:
                return self._bindings[name]
            if name in raw:
                # Local binding exists but is not resolved yet
                return None
            return self._parent.get(name)
        if isinstance(value, StringLiteral):
            return self._interpolate(value.value, raw)
        return None

    def lookup(self, name: str) -> ScalarValue | None:
        """Look up a possibly qualified variable name."""
        name = normalize_name(name)
        if name in self._bindings:
            return self._bindings[name]
        return self._parent.get(name)

    def resolve_value(self, value: Value | None) -> ScalarValue | None:
        """Get the scalar a value node stands for, or None if unknown."""
        if isinstance(value, (IntLiteral, FloatLiteral, BoolLiteral)):
            return value.value
        if isinstance(value, StringLiteral):
            if value.interpolated:
                return self.interpolate(value.value)
            return value.value
        if isinstance(value, Identifier):
            return self.lookup(value.name)
        return None

    def interpolate(self, text: str) -> str | None:
        """Substitute ``$name`` and ``${name}`` placeholders.

        Returns:
            The substituted text, or None if any placeholder is unresolved.
        """
        return self._interpolate(text, {})

    def _interpolate(self, text: str, raw: Mapping[str, Value]) -> str | None:
        parts: list[str] = []
        position = 0
        for match in _PLACEHOLDER_PATTERN.finditer(text):
            if match.group(1) is not None:
                path = _NAME_PATH_PATTERN.match(match.group(1))
                if not path:
                    return None
                name = path.group(1)
            else:
                name = match.group(2)

            normalized = normalize_name(name)
            if normalized in self._bindings:
                value: ScalarValue | None = self._bindings[normalized]
            elif normalized in raw:
                return None
            else:
                value = self._parent.get(normalized)
            if value is None:
                return None

            parts.append(text[position:match.start()])
            parts.append(_render(value))
            position = match.end()
        parts.append(text[position:])
        return "".join(parts)

    def exported(self) -> dict[str, ScalarValue]:
        """Get the bindings a child module should inherit."""
        merged = dict(self._parent)
        merged.update(self._bindings)
        return merged

    def __getitem__(self, name: str) -> ScalarValue:
        value = self.lookup(name)
        if value is None:
            raise KeyError(name)
        return value

    def __iter__(self) -> Iterator[str]:
        return iter(self.exported())

    def __len__(self) -> int:
        return len(self.exported())

    def __repr__(self) -> str:
        return f"VariableTable({self._bindings!r}, parent={self._parent!r})"


def _collect(statements: list[Node], raw: dict[str, Value]) -> None:
    for node in statements:
        if isinstance(node, Assignment) and node.operator == "=":
            # Later assignments rebind the name
            names = [node.name]
            value = node.value
            while isinstance(value, Operation) and value.operator == "=":
                names.append(value.operands[0].name)
                value = value.operands[1]
            for name in names:
                raw[normalize_name(name)] = value
        elif (
            isinstance(node, Call)
            and node.name in _BINDING_BLOCKS
            and node.body is not None
            and node.receiver is None
        ):
            _collect(node.body, raw)
