"""
Tokenizer turning JSON text into a lazy stream of tokens.

Character-by-character scanning that owns line/column tracking. String
escapes are decoded and numbers classified here, so the parser only deals
with structure. Lexical failures become INVALID tokens carrying the error;
the parser decides when to surface them.
"""

from collections.abc import Iterator
from dataclasses import dataclass
from enum import Enum
from typing import Any

from ._profile import ProfileContext
from ._utf8_mapper import UTF8PositionMapper
from .errors import ErrorKind
from .errors import ParseError
from .errors import Position
from .value import NumberKind

WHITESPACE = frozenset(" \t\n\r")
DIGITS = frozenset("0123456789")
HEX_DIGITS = frozenset("0123456789abcdefABCDEF")
CONTROL_LIMIT = 0x20

# Escape table shared with the serializer
ESCAPE_DECODE = {
    '"': '"',
    "\\": "\\",
    "/": "/",
    "b": "\b",
    "f": "\f",
    "n": "\n",
    "r": "\r",
    "t": "\t",
}

_HIGH_SURROGATES = range(0xD800, 0xDC00)
_LOW_SURROGATES = range(0xDC00, 0xE000)
_SURROGATE_BASE = 0x10000


class TokenKind(Enum):
    """Kinds of lexical token."""

    LBRACE = "{"
    RBRACE = "}"
    LBRACKET = "["
    RBRACKET = "]"
    COLON = ":"
    COMMA = ","
    TRUE = "true"
    FALSE = "false"
    NULL = "null"
    STRING = "string"
    NUMBER = "number"
    EOF = "eof"
    INVALID = "invalid"


_PUNCTUATION = {
    "{": TokenKind.LBRACE,
    "}": TokenKind.RBRACE,
    "[": TokenKind.LBRACKET,
    "]": TokenKind.RBRACKET,
    ":": TokenKind.COLON,
    ",": TokenKind.COMMA,
}

_KEYWORDS = (
    ("true", TokenKind.TRUE),
    ("false", TokenKind.FALSE),
    ("null", TokenKind.NULL),
)


@dataclass(frozen=True, slots=True)
class Token:
    """
    Represents a JSON token with position information.

    ``value`` holds the decoded payload: the unescaped text for strings, an
    int or float for numbers, and the raw source text for everything else.
    INVALID tokens additionally carry the error kind and, for genuine lexical
    failures, a message; an unrecognized character has no message so the
    parser can describe it in context.
    """

    kind: TokenKind
    value: Any
    start: Position
    end: Position
    line: int
    column: int
    byte_offset: int
    number_kind: NumberKind | None = None
    error: ErrorKind | None = None
    message: str | None = None


class JsonLexer:
    """
    Tokenizes JSON input in a single forward pass.

    Handles whitespace, strings, numbers, keywords, and structural tokens.
    Lines are counted on LF only; a lone CR is ordinary whitespace.
    """

    def __init__(self, text: str) -> None:
        self.text = text
        self.pos = 0
        self.length = len(text)
        self.line = 1
        self.line_start = 0
        self._mapper = UTF8PositionMapper(text)

    def peek(self) -> str:
        """Returns current character without advancing."""
        return self.text[self.pos] if self.pos < self.length else "\0"

    def column_of(self, pos: Position) -> int:
        """1-based column of a position on the current line."""
        return pos - self.line_start + 1

    def skip_whitespace(self) -> None:
        """Skips whitespace characters according to JSON spec."""
        with ProfileContext("skip_whitespace"):
            text = self.text
            while self.pos < self.length and text[self.pos] in WHITESPACE:
                if text[self.pos] == "\n":
                    self.line += 1
                    self.line_start = self.pos + 1
                self.pos += 1

    def _token(
        self,
        kind: TokenKind,
        value: Any,
        start: Position,
        number_kind: NumberKind | None = None,
    ) -> Token:
        return Token(
            kind,
            value,
            start,
            self.pos,
            self.line,
            self.column_of(start),
            self._mapper.char_to_byte(start),
            number_kind,
        )

    def _invalid(
        self, start: Position, error: ErrorKind, message: str | None
    ) -> Token:
        return Token(
            TokenKind.INVALID,
            self.text[start : self.pos],
            start,
            self.pos,
            self.line,
            self.column_of(start),
            self._mapper.char_to_byte(start),
            error=error,
            message=message,
        )

    def _scan_unicode_escape(self, at: Position) -> int | None:
        """Reads the four hex digits after ``\\u``; None if malformed."""
        digits = self.text[at : at + 4]
        if len(digits) != 4 or not all(d in HEX_DIGITS for d in digits):
            return None
        return int(digits, 16)

    def scan_string(self) -> Token:
        """Scans a JSON string token, decoding escapes."""
        with ProfileContext("scan_string"):
            text = self.text
            start = self.pos
            self.pos += 1  # opening quote
            chunks: list[str] = []
            run_start = self.pos

            while self.pos < self.length:
                char = text[self.pos]
                if char == '"':
                    chunks.append(text[run_start : self.pos])
                    self.pos += 1
                    return self._token(TokenKind.STRING, "".join(chunks), start)

                if char == "\\":
                    if self.pos + 1 >= self.length:
                        break
                    chunks.append(text[run_start : self.pos])
                    escape_pos = self.pos
                    decoded = self.scan_escape()
                    if decoded is None:
                        self.pos = min(escape_pos + 2, self.length)
                        return self._invalid(
                            escape_pos,
                            ErrorKind.INVALID_ESCAPE,
                            "Invalid \\escape",
                        )
                    chunks.append(decoded)
                    run_start = self.pos
                    continue

                code = ord(char)
                if char in "\n\r":
                    return self._invalid(
                        start,
                        ErrorKind.UNTERMINATED_STRING,
                        "Unterminated string starting at",
                    )
                if code < CONTROL_LIMIT:
                    self.pos += 1
                    return self._invalid(
                        self.pos - 1,
                        ErrorKind.UNEXPECTED_TOKEN,
                        "Invalid control character in string",
                    )
                if 0xD800 <= code <= 0xDFFF:
                    self.pos += 1
                    return self._invalid(
                        self.pos - 1,
                        ErrorKind.MALFORMED_UTF8,
                        "Surrogate code point is not valid UTF-8",
                    )
                self.pos += 1

            return self._invalid(
                start,
                ErrorKind.UNTERMINATED_STRING,
                "Unterminated string starting at",
            )

    def scan_escape(self) -> str | None:
        """Decodes the escape at the current backslash and advances past it."""
        text = self.text
        marker = text[self.pos + 1] if self.pos + 1 < self.length else ""
        if marker in ESCAPE_DECODE:
            self.pos += 2
            return ESCAPE_DECODE[marker]
        if marker != "u":
            return None

        code = self._scan_unicode_escape(self.pos + 2)
        if code is None:
            return None
        if code in _LOW_SURROGATES:
            return None
        if code in _HIGH_SURROGATES:
            # A high surrogate must be followed by an escaped low surrogate
            follow = self.pos + 6
            if text[follow : follow + 2] != "\\u":
                return None
            low = self._scan_unicode_escape(follow + 2)
            if low is None or low not in _LOW_SURROGATES:
                return None
            self.pos += 12
            return chr(
                _SURROGATE_BASE + ((code - 0xD800) << 10) + (low - 0xDC00)
            )
        self.pos += 6
        return chr(code)

    def _scan_digits(self) -> bool:
        """Consumes a run of ASCII digits; False if there were none."""
        begin = self.pos
        while self.pos < self.length and self.text[self.pos] in DIGITS:
            self.pos += 1
        return self.pos > begin

    def scan_number(self) -> Token:
        """Scans a JSON number token and classifies its sub-kind."""
        with ProfileContext("scan_number"):
            start = self.pos
            is_float = False

            if self.peek() == "-":
                self.pos += 1

            # Integer part: a lone zero or a non-zero digit run
            if self.peek() == "0":
                self.pos += 1
                if self.peek() in DIGITS:
                    self._scan_digits()
                    return self._invalid(
                        start,
                        ErrorKind.INVALID_NUMBER,
                        "Leading zeros not allowed",
                    )
            elif not self._scan_digits():
                return self._invalid(
                    start, ErrorKind.INVALID_NUMBER, "Invalid number"
                )

            if self.peek() == ".":
                self.pos += 1
                is_float = True
                if not self._scan_digits():
                    return self._invalid(
                        start,
                        ErrorKind.INVALID_NUMBER,
                        "Invalid decimal number",
                    )

            if self.peek() in ("e", "E"):
                self.pos += 1
                is_float = True
                if self.peek() in ("+", "-"):
                    self.pos += 1
                if not self._scan_digits():
                    return self._invalid(
                        start, ErrorKind.INVALID_NUMBER, "Invalid exponent"
                    )

            literal = self.text[start : self.pos]
            if is_float:
                value: int | float = float(literal)
                if value in (float("inf"), float("-inf")):
                    return self._invalid(
                        start, ErrorKind.INVALID_NUMBER, "Number out of range"
                    )
                return self._token(
                    TokenKind.NUMBER, value, start, NumberKind.FLOAT
                )

            try:
                value = int(literal)
            except ValueError:
                # Exceeds the interpreter's integer string conversion limit
                return self._invalid(
                    start, ErrorKind.INVALID_NUMBER, "Number too large"
                )
            return self._token(
                TokenKind.NUMBER, value, start, NumberKind.INTEGER
            )

    def scan_keyword(self) -> Token:
        """Scans the keyword tokens: true, false, null."""
        start = self.pos
        for word, kind in _KEYWORDS:
            if self.text.startswith(word, start):
                self.pos += len(word)
                return self._token(kind, word, start)
        self.pos += 1
        return self._invalid(start, ErrorKind.UNEXPECTED_TOKEN, None)

    def next_token(self) -> Token:
        """Returns the next token; EOF once the input is exhausted."""
        self.skip_whitespace()

        if self.pos >= self.length:
            return self._token(TokenKind.EOF, "", self.pos)

        char = self.text[self.pos]
        start = self.pos

        # Structural tokens
        kind = _PUNCTUATION.get(char)
        if kind is not None:
            self.pos += 1
            return self._token(kind, char, start)

        # String tokens
        if char == '"':
            return self.scan_string()

        # Number tokens
        if char in DIGITS or char == "-":
            return self.scan_number()

        # Keyword tokens
        if char in "tfn":
            return self.scan_keyword()

        self.pos += 1
        return self._invalid(start, ErrorKind.UNEXPECTED_TOKEN, None)

    def tokens(self) -> Iterator[Token]:
        """Yields tokens lazily, ending with a single EOF token."""
        while True:
            token = self.next_token()
            yield token
            if token.kind is TokenKind.EOF:
                return


def unescape_string(s: str) -> str:
    """
    Decodes the JSON escape sequences in the body of a string literal.

    ``s`` is the text between the quotes. Characters other than backslash
    escapes are copied as they are.
    """
    lexer = JsonLexer(s)
    chunks: list[str] = []
    run_start = 0
    index = s.find("\\")
    while index != -1:
        chunks.append(s[run_start:index])
        lexer.pos = index
        decoded = lexer.scan_escape()
        if decoded is None:
            raise ParseError(
                ErrorKind.INVALID_ESCAPE, "Invalid \\escape", s, index
            )
        chunks.append(decoded)
        run_start = lexer.pos
        index = s.find("\\", run_start)
    chunks.append(s[run_start:])
    return "".join(chunks)
