"""Tokenizer for Groovy-DSL Gradle build scripts."""

from dataclasses import dataclass

from sizelens.core.exceptions.errors import GradleParseError

IDENT = "IDENT"
STRING = "STRING"
NUMBER = "NUMBER"
OP = "OP"
NEWLINE = "NEWLINE"
EOF = "EOF"

# Longest operators first so that greedy matching picks them up.
_OPERATORS = sorted(
    [
        "...", "..<", "**=", "<=>", "===", "!==", "==~", ">>>", ">>=", "<<=",
        "?.", "*.", "?:", ".&", ".@", "..", "->", "==", "!=", "<=", ">=",
        "&&", "||", "++", "--", "+=", "-=", "*=", "/=", "%=", "&=", "|=",
        "^=", "=~", "<<", ">>", "**", "::",
        "{", "}", "(", ")", "[", "]", ",", ";", ":", ".", "=", "+", "-",
        "*", "/", "%", "<", ">", "!", "&", "|", "^", "~", "?", "@",
    ],
    key=len,
    reverse=True,
)

_DIGITS = "0123456789"

# Tokens after which a "/" opens a slashy string rather than dividing
_VALUE_END_OPERATORS = {")", "]", "}", "++", "--"}
_OPERAND_KEYWORDS = {"return", "in", "case", "assert", "throw", "else"}

_ESCAPES = {
    "n": "\n",
    "t": "\t",
    "r": "\r",
    "b": "\b",
    "f": "\f",
    "\\": "\\",
    "'": "'",
    '"': '"',
    "$": "$",
}


@dataclass
class Token:
    kind: str
    value: str | int | float
    line: int
    column: int
    interpolated: bool = False

    def is_op(self, *values: str) -> bool:
        return self.kind == OP and self.value in values

    def is_ident(self, *values: str) -> bool:
        return self.kind == IDENT and (not values or self.value in values)


class Lexer:
    """Converts build script text into a flat token list.

    Newlines are kept as tokens because they terminate statements; comments
    and a leading shebang line are dropped.
    """

    def __init__(self, text: str) -> None:
        self.text = text
        self.pos = 0
        self.line = 1
        self.column = 1
        self.tokens: list[Token] = []

    def tokenize(self) -> list[Token]:
        """Tokenize the whole text.

        Returns:
            Token list terminated by an EOF token.

        Raises:
            GradleParseError: On an unterminated string/comment or an
                unexpected character.
        """
        text = self.text
        if text.startswith("#!"):
            self._skip_line()

        while self.pos < len(text):
            char = text[self.pos]

            if char in " \t\f\r":
                self._advance()
            elif char == "\n":
                self._emit(NEWLINE, "\n", self.line, self.column)
                self._advance()
            elif char == "\\" and self._peek(1) in ("\n", "\r"):
                # Line continuation
                self._advance()
                while self.pos < len(text) and text[self.pos] in "\r\n":
                    stop = text[self.pos] == "\n"
                    self._advance()
                    if stop:
                        break
            elif text.startswith("//", self.pos):
                self._skip_line()
            elif text.startswith("/*", self.pos):
                self._skip_block_comment()
            elif char in "'\"":
                self._read_string()
            elif char == "/" and self._at_operand_position():
                self._read_slashy_string()
            elif char in _DIGITS:
                self._read_number()
            elif char.isalpha() or char in "_$":
                self._read_identifier()
            else:
                self._read_operator()

        self._emit(EOF, "", self.line, self.column)
        return self.tokens

    def _peek(self, offset: int = 0) -> str:
        index = self.pos + offset
        if index < len(self.text):
            return self.text[index]
        return ""

    def _advance(self, count: int = 1) -> None:
        for _ in range(count):
            if self.text[self.pos] == "\n":
                self.line += 1
                self.column = 1
            else:
                self.column += 1
            self.pos += 1

    def _emit(
        self,
        kind: str,
        value: str | int | float,
        line: int,
        column: int,
        interpolated: bool = False,
    ) -> None:
        self.tokens.append(Token(kind, value, line, column, interpolated))

    def _error(self, message: str, line: int | None = None, column: int | None = None) -> GradleParseError:
        line = self.line if line is None else line
        column = self.column if column is None else column
        return GradleParseError(message, line=line, column=column)

    def _skip_line(self) -> None:
        while self.pos < len(self.text) and self.text[self.pos] != "\n":
            self._advance()

    def _skip_block_comment(self) -> None:
        line, column = self.line, self.column
        end = self.text.find("*/", self.pos + 2)
        if end == -1:
            raise self._error("Unterminated comment", line, column)
        self._advance(end + 2 - self.pos)

    def _read_string(self) -> None:
        line, column = self.line, self.column
        quote = self.text[self.pos]
        triple = self.text.startswith(quote * 3, self.pos)
        delimiter = quote * 3 if triple else quote
        self._advance(len(delimiter))

        chars: list[str] = []
        interpolated = False
        brace_depth = 0
        while True:
            if self.pos >= len(self.text):
                raise self._error("Unterminated string", line, column)
            char = self.text[self.pos]

            if brace_depth == 0 and self.text.startswith(delimiter, self.pos):
                self._advance(len(delimiter))
                break
            if char == "\n" and not triple and brace_depth == 0:
                raise self._error("Unterminated string", line, column)

            if char == "\\" and brace_depth == 0:
                chars.append(self._read_escape())
                continue

            if quote == '"' and char == "$":
                following = self._peek(1)
                if following == "{":
                    interpolated = True
                    brace_depth += 1
                    chars.append("${")
                    self._advance(2)
                    continue
                if following.isalpha() or following == "_":
                    interpolated = True
            elif brace_depth and char == "{":
                brace_depth += 1
            elif brace_depth and char == "}":
                brace_depth -= 1

            chars.append(char)
            self._advance()

        self._emit(STRING, "".join(chars), line, column, interpolated)

    def _at_operand_position(self) -> bool:
        if not self.tokens:
            return True
        last = self.tokens[-1]
        if last.kind == NEWLINE:
            return True
        if last.kind == OP:
            return last.value not in _VALUE_END_OPERATORS
        return last.kind == IDENT and last.value in _OPERAND_KEYWORDS

    def _read_slashy_string(self) -> None:
        line, column = self.line, self.column
        self._advance()
        chars: list[str] = []
        interpolated = False
        while True:
            if self.pos >= len(self.text):
                raise self._error("Unterminated string", line, column)
            char = self.text[self.pos]
            if char == "/":
                self._advance()
                break
            if char == "\\" and self._peek(1) == "/":
                chars.append("/")
                self._advance(2)
                continue
            if char == "$":
                following = self._peek(1)
                if following and (following.isalpha() or following in "_{"):
                    interpolated = True
            chars.append(char)
            self._advance()
        self._emit(STRING, "".join(chars), line, column, interpolated)

    def _read_escape(self) -> str:
        following = self._peek(1)
        if following == "u":
            digits = self.text[self.pos + 2:self.pos + 6]
            if len(digits) == 4 and all(c in "0123456789abcdefABCDEF" for c in digits):
                self._advance(6)
                return chr(int(digits, 16))
        if following == "\n":
            self._advance(2)
            return ""
        if following == "":
            raise self._error("Unterminated string")
        self._advance(2)
        return _ESCAPES.get(following, following)

    def _read_number(self) -> None:
        line, column = self.line, self.column
        text = self.text
        start = self.pos

        if text.startswith(("0x", "0X"), start):
            end = start + 2
            while end < len(text) and (text[end] in "0123456789abcdefABCDEF_"):
                end += 1
            digits = text[start + 2:end].replace("_", "")
            if not digits:
                raise self._error("Malformed hexadecimal literal", line, column)
            value: int | float = int(digits, 16)
            if end < len(text) and text[end] in "lLiIgG":
                end += 1
            self._advance(end - start)
            self._emit(NUMBER, value, line, column)
            return

        end = start
        while end < len(text) and (text[end] in _DIGITS or text[end] == "_"):
            end += 1
        is_float = False
        # "1..5" is a range, not a decimal point
        if end + 1 < len(text) and text[end] == "." and text[end + 1] in _DIGITS:
            is_float = True
            end += 1
            while end < len(text) and (text[end] in _DIGITS or text[end] == "_"):
                end += 1
        if end < len(text) and text[end] in "eE":
            exponent = end + 1
            if exponent < len(text) and text[exponent] in "+-":
                exponent += 1
            if exponent < len(text) and text[exponent] in _DIGITS:
                is_float = True
                end = exponent
                while end < len(text) and text[end] in _DIGITS:
                    end += 1

        literal = text[start:end].replace("_", "")
        if end < len(text) and text[end] in "lLiIgGdDfF":
            if text[end] in "dDfF":
                is_float = True
            end += 1

        value = float(literal) if is_float else int(literal)
        self._advance(end - start)
        self._emit(NUMBER, value, line, column)

    def _read_identifier(self) -> None:
        line, column = self.line, self.column
        end = self.pos
        while end < len(self.text) and (self.text[end].isalnum() or self.text[end] in "_$"):
            end += 1
        name = self.text[self.pos:end]
        self._advance(end - self.pos)
        self._emit(IDENT, name, line, column)

    def _read_operator(self) -> None:
        for operator in _OPERATORS:
            if self.text.startswith(operator, self.pos):
                self._emit(OP, operator, self.line, self.column)
                self._advance(len(operator))
                return
        raise self._error(f"Unexpected character {self.text[self.pos]!r}")


def tokenize(text: str) -> list[Token]:
    """Tokenize build script text."""
    return Lexer(text).tokenize()
