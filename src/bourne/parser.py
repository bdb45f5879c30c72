"""
Recursive descent parser building Value trees from JSON text.

One token of lookahead, one recursive call per nesting level. The first
lexical or structural problem stops parsing with a ParseError; there is no
recovery and no partial result.
"""

import logging
from dataclasses import dataclass
from typing import Any

from ._config import DEFAULT_MAX_DEPTH
from ._profile import ProfileContext
from ._utf8_mapper import UTF8PositionMapper
from .errors import ErrorKind
from .errors import ParseError
from .lexer import JsonLexer
from .lexer import Token
from .lexer import TokenKind
from .value import JsonObject
from .value import Kind
from .value import Value

logger = logging.getLogger(__name__)

_BOM = "\ufeff"


@dataclass(frozen=True)
class ParseConfig:
    """
    Configures JSON parsing behavior with immutable settings.

    ``max_depth`` bounds how many arrays and objects may be open at once,
    keeping recursion finite on adversarial input.
    """

    max_depth: int = DEFAULT_MAX_DEPTH

    def __post_init__(self) -> None:
        if isinstance(self.max_depth, bool) or not isinstance(
            self.max_depth, int
        ):
            raise TypeError("max_depth must be an integer")
        if self.max_depth < 1:
            raise ValueError("max_depth must be at least 1")


class JsonParser:
    """
    Recursive descent parser over a JsonLexer token stream.

    Lexical failures reported by the lexer are raised as soon as the failing
    token becomes the lookahead.
    """

    def __init__(self, lexer: JsonLexer, config: ParseConfig) -> None:
        self.lexer = lexer
        self.config = config
        self.depth = 0
        self._tokens = lexer.tokens()
        self.current_token: Token | None = None

    def _error(self, kind: ErrorKind, msg: str, token: Token) -> ParseError:
        return ParseError(
            kind,
            msg,
            self.lexer.text,
            token.start,
            lineno=token.line,
            colno=token.column,
            byte_offset=token.byte_offset,
        )

    def _unexpected(self, msg: str, token: Token) -> ParseError:
        """Error for a token that does not fit the grammar here."""
        kind = (
            ErrorKind.UNEXPECTED_EOF
            if token.kind is TokenKind.EOF
            else ErrorKind.UNEXPECTED_TOKEN
        )
        return self._error(kind, msg, token)

    def advance_token(self) -> Token:
        """Advances to next token and returns it."""
        token = next(self._tokens)
        if token.kind is TokenKind.INVALID and token.message is not None:
            kind = token.error or ErrorKind.UNEXPECTED_TOKEN
            raise self._error(kind, token.message, token)
        self.current_token = token
        return token

    @property
    def token(self) -> Token:
        if self.current_token is None:
            raise RuntimeError("advance_token() must be called first")
        return self.current_token

    def expect_token(self, kind: TokenKind, msg: str) -> Token:
        """Expects a specific token kind and advances."""
        token = self.token
        if token.kind is not kind:
            raise self._unexpected(msg, token)
        self.advance_token()
        return token

    def _enter(self, token: Token) -> None:
        self.depth += 1
        if self.depth > self.config.max_depth:
            raise self._error(
                ErrorKind.DEPTH_EXCEEDED,
                f"Maximum nesting depth of {self.config.max_depth} exceeded",
                token,
            )

    def parse_value(self) -> Value:
        """Parses any JSON value based on current token."""
        token = self.token
        match token.kind:
            case TokenKind.LBRACE:
                return self.parse_object()
            case TokenKind.LBRACKET:
                return self.parse_array()
            case TokenKind.STRING:
                self.advance_token()
                return Value._trusted(Kind.STRING, token.value)
            case TokenKind.NUMBER:
                self.advance_token()
                return Value._trusted(
                    Kind.NUMBER, token.value, token.number_kind
                )
            case TokenKind.TRUE:
                self.advance_token()
                return Value._trusted(Kind.BOOL, True)
            case TokenKind.FALSE:
                self.advance_token()
                return Value._trusted(Kind.BOOL, False)
            case TokenKind.NULL:
                self.advance_token()
                return Value._trusted(Kind.NULL, None)
            case _:
                raise self._unexpected("Expecting value", token)

    def _parse_object_key(self) -> str:
        """Parses object key and validates it's a proper string token."""
        token = self.token
        if token.kind is not TokenKind.STRING:
            raise self._unexpected(
                "Expecting property name enclosed in double quotes", token
            )
        self.advance_token()
        return token.value

    def _handle_continuation(self, closer: TokenKind, container: str) -> bool:
        """Consumes ',' or the closing token; True if another member follows."""
        token = self.token
        if token.kind is closer:
            self.advance_token()
            return False
        if token.kind is TokenKind.COMMA:
            self.advance_token()
            if self.token.kind is closer:
                raise self._error(
                    ErrorKind.UNEXPECTED_TOKEN,
                    f"Illegal trailing comma before end of {container}",
                    token,
                )
            return True
        raise self._unexpected("Expecting ',' delimiter", token)

    def parse_object(self) -> Value:
        """Parses a JSON object; duplicate keys keep the last value."""
        with ProfileContext("parse_object"):
            self._enter(self.token)
            self.advance_token()
            items: dict[str, Value] = {}

            if self.token.kind is TokenKind.RBRACE:
                self.advance_token()
            else:
                while True:
                    key = self._parse_object_key()
                    self.expect_token(
                        TokenKind.COLON, "Expecting ':' delimiter"
                    )
                    items[key] = self.parse_value()
                    if not self._handle_continuation(
                        TokenKind.RBRACE, "object"
                    ):
                        break

            self.depth -= 1
            return Value._trusted(Kind.OBJECT, JsonObject._wrap(items))

    def parse_array(self) -> Value:
        """Parses a JSON array."""
        with ProfileContext("parse_array"):
            self._enter(self.token)
            self.advance_token()
            values: list[Value] = []

            if self.token.kind is TokenKind.RBRACKET:
                self.advance_token()
            else:
                while True:
                    values.append(self.parse_value())
                    if not self._handle_continuation(
                        TokenKind.RBRACKET, "array"
                    ):
                        break

            self.depth -= 1
            return Value._trusted(Kind.ARRAY, values)

    def parse_document(self) -> Value:
        """Parses exactly one value spanning the whole input."""
        self.advance_token()
        try:
            result = self.parse_value()
        except RecursionError as exc:
            raise self._error(
                ErrorKind.DEPTH_EXCEEDED,
                "Nesting exceeds the interpreter recursion limit",
                self.token,
            ) from exc

        # Check for extra data after valid JSON
        if self.token.kind is not TokenKind.EOF:
            raise self._error(
                ErrorKind.TRAILING_CONTENT, "Extra data", self.token
            )
        return result


def decode_input(s: str | bytes | bytearray) -> str:
    """Returns the document as text, decoding bytes as strict UTF-8."""
    if isinstance(s, str):
        return s
    if isinstance(s, bytes | bytearray):
        try:
            return bytes(s).decode("utf-8")
        except UnicodeDecodeError as e:
            # Everything before the bad sequence decodes the same either way
            text = bytes(s).decode("utf-8", "replace")
            pos = UTF8PositionMapper(text).byte_to_char(e.start)
            raise ParseError(
                ErrorKind.MALFORMED_UTF8,
                "Invalid UTF-8 byte sequence",
                text[:pos],
                pos,
                byte_offset=e.start,
            ) from e
    msg = f"the JSON object must be str, bytes or bytearray, not {type(s).__name__}"
    raise TypeError(msg)


def parse(s: str | bytes | bytearray, **kwargs: Any) -> Value:
    """
    Parses a complete JSON document into a Value.

    Accepts text or UTF-8 encoded bytes. Raises ParseError on the first
    problem found.
    """
    config = ParseConfig(**kwargs)
    text = decode_input(s)

    with ProfileContext("parse", len(text)):
        # Reject a UTF-8 BOM per JSON specification
        if text.startswith(_BOM):
            raise ParseError(
                ErrorKind.UNEXPECTED_TOKEN,
                "JSON input should not contain BOM (Byte Order Mark)",
                text,
                0,
            )

        parser = JsonParser(JsonLexer(text), config)
        try:
            result = parser.parse_document()
        except ParseError as exc:
            logger.debug("Rejected JSON document (%s): %s", exc.kind.value, exc)
            raise

    logger.debug("Parsed %d characters into %s", len(text), result.kind.value)
    return result
