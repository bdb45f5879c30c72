"""
Error taxonomy for parsing, serialization and value mutation.

Parse failures carry a kind plus the precise source position at which they
were detected. Typed accessor mismatches on values are not errors: they
return None.
"""

from enum import Enum
from typing import TypeAlias

Position: TypeAlias = int


class ErrorKind(Enum):
    """Classifies why a document was rejected."""

    MALFORMED_UTF8 = "malformed_utf8"
    UNEXPECTED_TOKEN = "unexpected_token"
    UNTERMINATED_STRING = "unterminated_string"
    INVALID_ESCAPE = "invalid_escape"
    INVALID_NUMBER = "invalid_number"
    UNEXPECTED_EOF = "unexpected_eof"
    TRAILING_CONTENT = "trailing_content"
    DEPTH_EXCEEDED = "depth_exceeded"


class BourneError(Exception):
    """Base class for every error raised by this package."""


class ParseError(BourneError, ValueError):
    """
    Handles JSON parsing failures with precise position and context information.

    Error state containing the failure kind, character position, line/column
    numbers and UTF-8 byte offset to help users identify and fix JSON syntax
    issues. Immutable once raised.
    """

    def __init__(
        self,
        kind: ErrorKind,
        msg: str,
        doc: str = "",
        pos: Position = 0,
        *,
        lineno: int | None = None,
        colno: int | None = None,
        byte_offset: int | None = None,
    ) -> None:
        if not isinstance(kind, ErrorKind):
            raise TypeError("kind must be an ErrorKind")
        if not isinstance(msg, str):
            raise TypeError("msg must be a string")
        if not isinstance(pos, int) or pos < 0:
            raise ValueError("pos must be a non-negative integer")

        self.kind = kind
        self.msg = msg
        self.doc = doc
        self.pos = pos

        # Compute line and column numbers from position when not supplied
        if lineno is None:
            lineno = doc.count("\n", 0, pos) + 1 if doc else 1
        if colno is None:
            colno = pos - doc.rfind("\n", 0, pos) if doc else pos + 1
        if byte_offset is None:
            byte_offset = len(
                doc[:pos].encode("utf-8", "surrogatepass")
            )
        self.lineno = lineno
        self.colno = colno
        self.byte_offset = byte_offset

        super().__init__(f"{msg} at line {self.lineno}, column {self.colno}")

    def __reduce__(self):  # type: ignore[no-untyped-def]
        return (
            _rebuild_parse_error,
            (
                self.kind,
                self.msg,
                self.doc,
                self.pos,
                self.lineno,
                self.colno,
                self.byte_offset,
            ),
        )


def _rebuild_parse_error(
    kind: ErrorKind,
    msg: str,
    doc: str,
    pos: Position,
    lineno: int,
    colno: int,
    byte_offset: int,
) -> ParseError:
    return ParseError(
        kind,
        msg,
        doc,
        pos,
        lineno=lineno,
        colno=colno,
        byte_offset=byte_offset,
    )


# Familiar name for callers coming from the standard library json module
JSONDecodeError = ParseError


class DepthLimitError(BourneError, ValueError):
    """Raised when a value is nested deeper than the configured limit."""

    RECURSION_MSG = "Nesting exceeds the interpreter recursion limit"

    def __init__(self, max_depth: int, msg: str | None = None) -> None:
        self.max_depth = max_depth
        if msg is None:
            msg = f"Maximum nesting depth of {max_depth} exceeded"
        super().__init__(msg)


class PushToNonArrayError(BourneError, TypeError):
    """Attempted to push to a Value that was not an array."""

    def __init__(self) -> None:
        super().__init__("Attempted to push to a Value that was not an array.")


class InsertToNonObjectError(BourneError, TypeError):
    """Attempted to insert into a Value that was not an object."""

    def __init__(self) -> None:
        super().__init__(
            "Attempted to insert into a Value that was not an object."
        )
