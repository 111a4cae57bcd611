"""Recursive descent parser turning Gradle (Groovy DSL) text into an AST.

Only the syntax is checked here. Statements that Gradle gives meaning to
(``android { ... }``, ``minSdkVersion 15``, ``apply plugin: 'x'``) and
statements it does not (``println 'hi'``, ``if (x) { ... }``) come out as the
same generic :class:`Call` / :class:`Assignment` shapes.
"""

from contextlib import contextmanager
from typing import Iterator

from sizelens.analyzer.gradle.ast_nodes import (
    Assignment,
    BoolLiteral,
    Call,
    Closure,
    ExpressionStatement,
    FloatLiteral,
    Identifier,
    IntLiteral,
    ListLiteral,
    MapLiteral,
    Node,
    NullLiteral,
    Operation,
    Script,
    StringLiteral,
    Value,
)
from sizelens.analyzer.gradle.lexer import (
    EOF,
    IDENT,
    NEWLINE,
    NUMBER,
    OP,
    STRING,
    Token,
    tokenize,
)
from sizelens.core.exceptions.errors import GradleParseError

DEFAULT_MAX_DEPTH = 100

_ASSIGNMENT_OPERATORS = {
    "=", "+=", "-=", "*=", "/=", "%=", "**=", "&=", "|=", "^=", "<<=", ">>=",
}

_BINARY_PRECEDENCE = {
    "||": 1,
    "&&": 2,
    "|": 3,
    "^": 4,
    "&": 5,
    "==": 6, "!=": 6, "<=>": 6, "=~": 6, "==~": 6, "===": 6, "!==": 6,
    "<": 7, ">": 7, "<=": 7, ">=": 7, "in": 7, "instanceof": 7, "as": 7,
    "<<": 8, ">>": 8, ">>>": 8, "..": 8, "..<": 8,
    "+": 9, "-": 9,
    "*": 10, "/": 10, "%": 10,
    "**": 11,
}

_KEYWORD_OPERATORS = {"in", "instanceof", "as"}
# Identifiers that never start a command argument or chain link
_ARGUMENT_STOPS = _KEYWORD_OPERATORS | {"else"}
_MODIFIERS = {"final", "static", "private", "public", "protected", "abstract", "synchronized"}
_UNARY_OPERATORS = {"!", "-", "+", "~", "++", "--"}
_MEMBER_ACCESS = (".", "?.", "*.")


class AstBuilder:
    """Builds a :class:`Script` from build script text."""

    def __init__(self, max_depth: int = DEFAULT_MAX_DEPTH) -> None:
        """Initialize the builder.

        Args:
            max_depth: Maximum nesting of blocks and expressions.
        """
        self.max_depth = max_depth
        self.tokens: list[Token] = []
        self.pos = 0
        self.depth = 0

    def build(self, text: str) -> Script:
        """Parse build script text.

        Args:
            text: Build script source.

        Returns:
            Root of the AST.

        Raises:
            GradleParseError: If the text is not a syntactically valid script.
        """
        self.tokens = tokenize(text)
        self.pos = 0
        self.depth = 0
        try:
            return Script(statements=self._parse_statements(closing=None))
        except RecursionError as e:
            raise self._error("Nesting too deep", self._peek()) from e

    # ------------------------------------------------------------------
    # Cursor helpers
    # ------------------------------------------------------------------

    def _peek(self, offset: int = 0) -> Token:
        index = min(self.pos + offset, len(self.tokens) - 1)
        return self.tokens[index]

    def _advance(self) -> Token:
        token = self._peek()
        if token.kind != EOF:
            self.pos += 1
        return token

    def _at_op(self, *values: str) -> bool:
        return self._peek().is_op(*values)

    def _expect_op(self, value: str) -> Token:
        token = self._peek()
        if not token.is_op(value):
            raise self._error(f"Expected '{value}'", token)
        return self._advance()

    def _expect_ident(self) -> Token:
        token = self._peek()
        if token.kind != IDENT:
            raise self._error("Expected identifier", token)
        return self._advance()

    def _skip_newlines(self) -> None:
        while self._peek().kind == NEWLINE:
            self._advance()

    def _skip_separators(self) -> None:
        while self._peek().kind == NEWLINE or self._at_op(";"):
            self._advance()

    def _peek_past_newlines(self) -> Token:
        offset = 0
        while self._peek(offset).kind == NEWLINE:
            offset += 1
        return self._peek(offset)

    def _error(self, message: str, token: Token) -> GradleParseError:
        if token.kind == EOF:
            found = "end of input"
        elif token.kind == NEWLINE:
            found = "end of line"
        else:
            found = repr(token.value)
        return GradleParseError(
            f"{message}, found {found}",
            line=token.line,
            column=token.column,
        )

    @contextmanager
    def _nested(self) -> Iterator[None]:
        self.depth += 1
        if self.depth > self.max_depth:
            raise self._error("Nesting too deep", self._peek())
        try:
            yield
        finally:
            self.depth -= 1

    def _skip_balanced(self, opening: str, closing: str) -> None:
        """Skip a bracketed token run starting at the current opening token."""
        start = self._expect_op(opening)
        level = 1
        while level:
            token = self._advance()
            if token.kind == EOF:
                raise self._error(f"Unbalanced '{opening}' opened at line {start.line}", token)
            if token.is_op(opening):
                level += 1
            elif token.is_op(closing):
                level -= 1

    # ------------------------------------------------------------------
    # Statements
    # ------------------------------------------------------------------

    def _parse_statements(self, closing: str | None) -> list[Node]:
        statements: list[Node] = []
        with self._nested():
            while True:
                self._skip_separators()
                token = self._peek()
                if token.kind == EOF:
                    if closing is not None:
                        raise self._error(f"Expected '{closing}'", token)
                    break
                if closing is not None and token.is_op(closing):
                    break

                statements.append(self._parse_statement())

                token = self._peek()
                if token.kind in (NEWLINE, EOF) or token.is_op(";"):
                    continue
                if closing is not None and token.is_op(closing):
                    continue
                raise self._error("Unexpected token", token)
        return statements

    def _parse_block(self) -> list[Node]:
        self._expect_op("{")
        body = self._parse_statements(closing="}")
        self._expect_op("}")
        return body

    def _parse_statement(self) -> Node:
        token = self._peek()

        if token.is_op("@"):
            self._skip_annotation()
            self._skip_newlines()
            return self._parse_statement()

        if token.kind == IDENT:
            keyword = token.value
            if self._peek(1).is_op(":"):
                # Label: outer: for (...) { ... }
                self._advance()
                self._advance()
                self._skip_newlines()
                return self._parse_statement()
            if keyword == "if":
                return self._parse_if()
            if keyword in ("for", "while"):
                return self._parse_loop()
            if keyword == "try":
                return self._parse_try()
            if keyword == "switch":
                return self._parse_switch()
            if keyword in ("return", "throw"):
                return self._parse_jump()
            if keyword in ("break", "continue"):
                self._advance()
                return Call(name=keyword, line=token.line)
            if keyword in ("import", "package"):
                return self._parse_import()
            if keyword in ("class", "interface", "enum"):
                return self._parse_type_declaration()
            if keyword == "def" or keyword in _MODIFIERS:
                return self._parse_declaration()
            following = self._peek(1)
            if (
                following.kind == IDENT
                and following.value not in _KEYWORD_OPERATORS
                and self._peek(2).is_op("=")
            ):
                # Typed declaration: String name = value
                self._advance()
                return self._parse_assignment_to(self._advance().value, token.line)

        return self._parse_expression_statement()

    def _parse_expression_statement(self) -> Node:
        start = self._peek()
        if start.kind == OP and start.value in _UNARY_OPERATORS:
            return ExpressionStatement(value=self._parse_expression(), line=start.line)
        target = self._parse_postfix()

        if self._peek().kind == OP and self._peek().value in _ASSIGNMENT_OPERATORS:
            operator = self._advance().value
            self._skip_newlines()
            value = self._parse_expression()
            return Assignment(
                name=_target_name(target),
                value=value,
                operator=operator,
                line=start.line,
            )

        if isinstance(target, Identifier) and self._starts_command_argument():
            target = self._parse_command_chain(target)
        elif isinstance(target, Call) and self._continues_chain():
            target = self._parse_chain_links(target)

        target = self._parse_binary_tail(target, 0)
        target = self._parse_ternary_tail(target)

        if isinstance(target, Call):
            return target
        return ExpressionStatement(value=target, line=start.line)

    def _parse_assignment_to(self, name: str, line: int) -> Assignment:
        self._expect_op("=")
        self._skip_newlines()
        return Assignment(name=name, value=self._parse_expression(), line=line)

    def _parse_declaration(self) -> Node:
        start = self._peek()
        while self._peek().kind == IDENT and (
            self._peek().value == "def" or self._peek().value in _MODIFIERS
        ):
            self._advance()

        if self._at_op("("):
            # def (a, b) = [1, 2]
            self._skip_balanced("(", ")")
            self._expect_op("=")
            self._skip_newlines()
            value = self._parse_expression()
            return ExpressionStatement(value=Operation("def", [value], line=start.line), line=start.line)

        name = self._expect_ident().value
        if self._peek().kind == IDENT:
            # Typed declaration: the first identifier was the type
            name = self._advance().value
        if self._at_op("<"):
            self._skip_balanced("<", ">")
            name = self._expect_ident().value

        if self._at_op("("):
            self._skip_balanced("(", ")")
            if self._peek().is_ident("throws"):
                while not self._at_op("{") and self._peek().kind not in (EOF, NEWLINE):
                    self._advance()
            body = self._parse_block()
            return Call(name="def", positional_args=[Identifier(name, line=start.line)], body=body, line=start.line)

        if self._at_op("="):
            return self._parse_assignment_to(name, start.line)
        return Assignment(name=name, value=NullLiteral(line=start.line), line=start.line)

    def _parse_type_declaration(self) -> Call:
        keyword = self._advance()
        name = self._expect_ident()
        while not self._at_op("{"):
            if self._peek().kind == EOF:
                raise self._error("Expected '{'", self._peek())
            self._advance()
        self._skip_balanced("{", "}")
        return Call(
            name=keyword.value,
            positional_args=[Identifier(name.value, line=name.line)],
            body=[],
            line=keyword.line,
        )

    def _parse_import(self) -> Call:
        keyword = self._advance()
        parts = [self._expect_ident().value]
        while self._at_op("."):
            self._advance()
            if self._at_op("*"):
                self._advance()
                parts.append("*")
                break
            parts.append(self._expect_ident().value)
        if self._peek().is_ident("as"):
            self._advance()
            self._expect_ident()
        return Call(
            name=keyword.value,
            positional_args=[Identifier(".".join(parts), line=keyword.line)],
            line=keyword.line,
        )

    def _parse_jump(self) -> Call:
        keyword = self._advance()
        args: list[Value] = []
        token = self._peek()
        if not (token.kind in (NEWLINE, EOF) or token.is_op(";", "}")):
            args.append(self._parse_expression())
        return Call(name=keyword.value, positional_args=args, line=keyword.line)

    def _parse_if(self) -> Call:
        keyword = self._advance()
        self._expect_op("(")
        self._skip_newlines()
        condition = self._parse_expression()
        self._skip_newlines()
        self._expect_op(")")
        body = self._parse_branch()
        call = Call(name="if", positional_args=[condition], body=body, line=keyword.line)

        if self._peek_past_newlines().is_ident("else"):
            self._skip_newlines()
            else_token = self._advance()
            self._skip_newlines()
            if self._peek().is_ident("if"):
                else_body: list[Node] = [self._parse_if()]
            else:
                else_body = self._parse_branch()
            call.named_args["else"] = Closure(body=else_body, line=else_token.line)
        return call

    def _parse_loop(self) -> Call:
        keyword = self._advance()
        self._skip_balanced("(", ")")
        return Call(name=keyword.value, body=self._parse_branch(), line=keyword.line)

    def _parse_try(self) -> Call:
        keyword = self._advance()
        self._skip_newlines()
        body = self._parse_block()
        while self._peek_past_newlines().is_ident("catch", "finally"):
            self._skip_newlines()
            clause = self._advance()
            if clause.value == "catch":
                self._skip_balanced("(", ")")
            self._skip_newlines()
            body.extend(self._parse_block())
        return Call(name="try", body=body, line=keyword.line)

    def _parse_switch(self) -> Call:
        keyword = self._advance()
        self._skip_balanced("(", ")")
        self._skip_newlines()
        self._skip_balanced("{", "}")
        return Call(name="switch", body=[], line=keyword.line)

    def _parse_branch(self) -> list[Node]:
        self._skip_newlines()
        if self._at_op("{"):
            return self._parse_block()
        return [self._parse_statement()]

    def _skip_annotation(self) -> None:
        self._expect_op("@")
        self._expect_ident()
        while self._at_op("."):
            self._advance()
            self._expect_ident()
        if self._at_op("("):
            self._skip_balanced("(", ")")

    # ------------------------------------------------------------------
    # Command expressions: name arg, arg ... [{ body }]
    # ------------------------------------------------------------------

    def _starts_command_argument(self) -> bool:
        token = self._peek()
        if token.kind in (STRING, NUMBER):
            return True
        if token.kind == IDENT:
            return token.value not in _ARGUMENT_STOPS
        return False

    def _parse_command_chain(self, target: Identifier) -> Call:
        positional, named = self._parse_command_arguments()
        call = Call(
            name=target.name,
            positional_args=positional,
            named_args=named,
            line=target.line,
        )
        return self._parse_chain_links(call)

    def _continues_chain(self) -> bool:
        token = self._peek()
        return token.kind == IDENT and token.value not in _ARGUMENT_STOPS

    def _parse_chain_links(self, call: Call) -> Call:
        # a b c d  ==  a(b).c(d)
        while self._continues_chain():
            name_token = self._advance()
            link = Call(name=str(name_token.value), receiver=call, line=name_token.line)
            if self._at_op("("):
                self._parse_call_arguments(link)
            elif self._starts_command_argument():
                link.positional_args, link.named_args = self._parse_command_arguments()
            if self._at_op("{"):
                link.body = self._parse_closure().body
            call = link
        return call

    def _parse_command_arguments(self) -> tuple[list[Value], dict[str, Value]]:
        positional: list[Value] = []
        named: dict[str, Value] = {}
        while True:
            self._parse_argument(positional, named)
            if not self._at_op(","):
                break
            self._advance()
            self._skip_newlines()
        return positional, named

    def _parse_argument(self, positional: list[Value], named: dict[str, Value]) -> None:
        token = self._peek()
        if token.is_op("*"):
            self._advance()
            if self._at_op(":"):
                # Spread map entry: [*: defaults]
                self._advance()
                self._skip_newlines()
                named["*"] = self._parse_expression()
            else:
                positional.append(Operation("*", [self._parse_expression()], line=token.line))
            return
        if token.kind in (IDENT, STRING, NUMBER) and self._peek(1).is_op(":"):
            self._advance()
            self._advance()
            self._skip_newlines()
            named[str(token.value)] = self._parse_expression()
        else:
            positional.append(self._parse_expression())

    def _parse_call_arguments(self, call: Call) -> None:
        self._expect_op("(")
        self._skip_newlines()
        while not self._at_op(")"):
            self._parse_argument(call.positional_args, call.named_args)
            self._skip_newlines()
            if self._at_op(","):
                self._advance()
                self._skip_newlines()
            elif not self._at_op(")"):
                raise self._error("Expected ',' or ')'", self._peek())
        self._expect_op(")")

    # ------------------------------------------------------------------
    # Expressions
    # ------------------------------------------------------------------

    def _parse_expression(self) -> Value:
        with self._nested():
            left = self._parse_unary()
            left = self._parse_binary_tail(left, 0)
            left = self._parse_ternary_tail(left)
            if self._at_op(*_ASSIGNMENT_OPERATORS) and _is_assignable(left):
                # a = b = 3 assigns right to left
                operator = self._advance().value
                self._skip_newlines()
                target = Identifier(_target_name(left), line=_line_of(left))
                return Operation(operator, [target, self._parse_expression()], line=_line_of(left))
            return left

    def _parse_ternary_tail(self, condition: Value) -> Value:
        if self._at_op("?:"):
            self._advance()
            self._skip_newlines()
            return Operation("?:", [condition, self._parse_expression()], line=_line_of(condition))
        if self._at_op("?"):
            self._advance()
            self._skip_newlines()
            when_true = self._parse_expression()
            self._skip_newlines()
            self._expect_op(":")
            self._skip_newlines()
            when_false = self._parse_expression()
            return Operation("?", [condition, when_true, when_false], line=_line_of(condition))
        return condition

    def _parse_binary_tail(self, left: Value, min_precedence: int) -> Value:
        while True:
            token = self._peek()
            if token.kind not in (OP, IDENT):
                return left
            operator = token.value
            precedence = _BINARY_PRECEDENCE.get(operator)
            if token.kind == IDENT and operator not in _KEYWORD_OPERATORS:
                return left
            if precedence is None or precedence < min_precedence:
                return left
            self._advance()
            self._skip_newlines()

            if operator in ("as", "instanceof"):
                right: Value = self._parse_type_name()
            else:
                right = self._parse_unary()
                # ** binds right-to-left, everything else left-to-right
                next_min = precedence if operator == "**" else precedence + 1
                right = self._parse_binary_tail(right, next_min)
            left = Operation(operator, [left, right], line=_line_of(left))

    def _parse_type_name(self) -> Identifier:
        first = self._expect_ident()
        parts = [first.value]
        while self._at_op("."):
            self._advance()
            parts.append(self._expect_ident().value)
        if self._at_op("<"):
            self._skip_balanced("<", ">")
        while self._at_op("[") and self._peek(1).is_op("]"):
            self._advance()
            self._advance()
        return Identifier(".".join(parts), line=first.line)

    def _parse_unary(self) -> Value:
        token = self._peek()
        if token.kind == OP and token.value in _UNARY_OPERATORS:
            self._advance()
            with self._nested():
                operand = self._parse_unary()
            if token.value == "-" and isinstance(operand, IntLiteral):
                return IntLiteral(-operand.value, line=token.line)
            if token.value == "-" and isinstance(operand, FloatLiteral):
                return FloatLiteral(-operand.value, line=token.line)
            return Operation(token.value, [operand], line=token.line)
        return self._parse_postfix()

    def _parse_postfix(self) -> Value:
        value = self._parse_primary()
        while True:
            token = self._peek()

            if token.is_op("("):
                value = self._call_from(value, token)
                self._parse_call_arguments(value)
                if self._at_op("{"):
                    value.body = self._parse_closure().body
            elif token.is_op("{") and _accepts_body(value):
                if not isinstance(value, Call):
                    value = self._call_from(value, token)
                value.body = self._parse_closure().body
            elif token.is_op("["):
                self._advance()
                self._skip_newlines()
                index = self._parse_expression()
                self._skip_newlines()
                self._expect_op("]")
                value = Operation("[]", [value, index], line=_line_of(value))
            elif token.is_op("++", "--"):
                self._advance()
                value = Operation(f"post{token.value}", [value], line=_line_of(value))
            elif token.is_op(".&", "::"):
                self._advance()
                member = self._expect_ident()
                value = Operation(token.value, [value, Identifier(member.value, line=member.line)], line=_line_of(value))
            elif self._peek_past_newlines().is_op(*_MEMBER_ACCESS):
                self._skip_newlines()
                operator = self._advance().value
                member = self._parse_member_name()
                if operator == "." and isinstance(value, Identifier):
                    value = Identifier(f"{value.name}.{member}", line=value.line)
                else:
                    value = Operation(".", [value, Identifier(member, line=token.line)], line=_line_of(value))
            else:
                return value

    def _parse_member_name(self) -> str:
        token = self._peek()
        if token.kind in (IDENT, STRING):
            self._advance()
            return str(token.value)
        if token.is_op("@"):
            self._advance()
            return "@" + self._expect_ident().value
        raise self._error("Expected member name", token)

    def _call_from(self, value: Value, token: Token) -> Call:
        if isinstance(value, Identifier):
            return Call(name=value.name, line=value.line)
        if isinstance(value, Operation) and value.operator == "." and isinstance(value.operands[1], Identifier):
            return Call(name=value.operands[1].name, receiver=value.operands[0], line=value.line)
        return Call(name="call", receiver=value, line=token.line)

    def _parse_primary(self) -> Value:
        token = self._peek()

        if token.kind == STRING:
            self._advance()
            return StringLiteral(str(token.value), interpolated=token.interpolated, line=token.line)

        if token.kind == NUMBER:
            self._advance()
            if isinstance(token.value, float):
                return FloatLiteral(token.value, line=token.line)
            return IntLiteral(int(token.value), line=token.line)

        if token.kind == IDENT:
            if token.value in ("true", "false"):
                self._advance()
                return BoolLiteral(token.value == "true", line=token.line)
            if token.value == "null":
                self._advance()
                return NullLiteral(line=token.line)
            if token.value == "new":
                return self._parse_new()
            self._advance()
            return Identifier(str(token.value), line=token.line)

        if token.is_op("("):
            if self._at_cast():
                return self._parse_cast()
            self._advance()
            self._skip_newlines()
            value = self._parse_expression()
            self._skip_newlines()
            self._expect_op(")")
            return value

        if token.is_op("["):
            return self._parse_collection()

        if token.is_op("{"):
            return self._parse_closure()

        raise self._error("Unexpected token", token)

    def _at_cast(self) -> bool:
        # (Type) operand, (java.util.List<String>) operand, (int[]) operand
        if self._peek(1).kind != IDENT:
            return False
        offset = 2
        while not self._peek(offset).is_op(")"):
            token = self._peek(offset)
            if token.kind != IDENT and not token.is_op(".", "<", ">", ">>", ",", "?", "[", "]"):
                return False
            offset += 1
        operand = self._peek(offset + 1)
        if operand.kind in (STRING, NUMBER) or operand.is_op("("):
            return True
        return operand.kind == IDENT and operand.value not in _ARGUMENT_STOPS

    def _parse_cast(self) -> Operation:
        opening = self._expect_op("(")
        type_name = self._parse_type_name()
        self._expect_op(")")
        with self._nested():
            operand = self._parse_unary()
        return Operation("as", [operand, type_name], line=opening.line)

    def _parse_new(self) -> Operation:
        keyword = self._advance()
        type_name = self._parse_type_name()
        call = Call(name=type_name.name, line=keyword.line)
        if self._at_op("("):
            self._parse_call_arguments(call)
        elif self._at_op("["):
            self._skip_balanced("[", "]")
        if self._at_op("{"):
            # Anonymous class body
            self._skip_balanced("{", "}")
        return Operation("new", [call], line=keyword.line)

    def _parse_collection(self) -> Value:
        opening = self._expect_op("[")
        self._skip_newlines()

        if self._at_op(":") and self._peek(1).is_op("]"):
            self._advance()
            self._advance()
            return MapLiteral(line=opening.line)

        values: list[Value] = []
        entries: dict[str, Value] = {}
        while not self._at_op("]"):
            self._parse_argument(values, entries)
            self._skip_newlines()
            if self._at_op(","):
                self._advance()
                self._skip_newlines()
            elif not self._at_op("]"):
                raise self._error("Expected ',' or ']'", self._peek())
        self._expect_op("]")

        if entries and values:
            raise self._error("Cannot mix list elements and map entries", opening)
        if entries:
            return MapLiteral(entries=entries, line=opening.line)
        return ListLiteral(values=values, line=opening.line)

    def _parse_closure(self) -> Closure:
        opening = self._expect_op("{")
        params: list[str] = []
        if self._closure_has_parameters():
            last_name: str | None = None
            while not self._at_op("->"):
                token = self._advance()
                if token.kind == IDENT:
                    last_name = str(token.value)
                elif token.is_op(",") and last_name:
                    params.append(last_name)
                    last_name = None
            if last_name:
                params.append(last_name)
            self._advance()
        body = self._parse_statements(closing="}")
        self._expect_op("}")
        return Closure(params=params, body=body, line=opening.line)

    def _closure_has_parameters(self) -> bool:
        offset = 0
        while True:
            token = self._peek(offset)
            if token.is_op("->"):
                return True
            if token.kind == IDENT or token.is_op(",", ".", "<", ">", "[", "]", "?"):
                offset += 1
                continue
            return False


def _accepts_body(value: Value) -> bool:
    """Check whether a trailing ``{ ... }`` is a block passed to ``value``."""
    if isinstance(value, Identifier):
        return True
    if isinstance(value, Call):
        return value.body is None
    return (
        isinstance(value, Operation)
        and value.operator == "."
        and isinstance(value.operands[1], Identifier)
    )


def _is_assignable(value: Value) -> bool:
    if isinstance(value, Identifier):
        return True
    return isinstance(value, Operation) and value.operator in (".", "[]")


def _line_of(value: Value) -> int:
    return getattr(value, "line", 0)


def _target_name(target: Value) -> str:
    """Render an assignment target as a dotted name."""
    if isinstance(target, Identifier):
        return target.name
    if isinstance(target, Operation):
        if target.operator == "." and len(target.operands) == 2:
            return f"{_target_name(target.operands[0])}.{_target_name(target.operands[1])}"
        if target.operator == "[]" and len(target.operands) == 2:
            index = target.operands[1]
            if isinstance(index, StringLiteral):
                return f"{_target_name(target.operands[0])}.{index.value}"
    if isinstance(target, Call):
        return f"{target.name}()"
    return "<expression>"


def build_ast(text: str, max_depth: int = DEFAULT_MAX_DEPTH) -> Script:
    """Parse build script text into an AST.

    Raises:
        GradleParseError: If the text is not a syntactically valid script.
    """
    return AstBuilder(max_depth=max_depth).build(text)
