"""
Serialization of Value trees to JSON text.

Compact output has no insignificant whitespace. Pretty output puts every
array element and object member on its own line, indented by a configurable
unit per nesting level.
"""

import re
from dataclasses import dataclass
from typing import IO
from typing import Any

from ._config import DEFAULT_MAX_DEPTH
from .errors import DepthLimitError
from .lexer import ESCAPE_DECODE
from .value import JsonObject
from .value import Kind
from .value import NumberKind
from .value import Value

# Escape table shared with the lexer; "/" decodes but is never re-escaped
ESCAPE_ENCODE = {
    char: "\\" + marker
    for marker, char in ESCAPE_DECODE.items()
    if marker != "/"
}
_ESCAPE = re.compile(r'[\x00-\x1f"\\]')
_ESCAPE_ASCII = re.compile(r'[\x00-\x1f"\\]|[^\x00-\x7f]')
_BMP_LIMIT = 0x10000


def _escape_char(char: str) -> str:
    named = ESCAPE_ENCODE.get(char)
    if named is not None:
        return named
    code = ord(char)
    if code < _BMP_LIMIT:
        return f"\\u{code:04x}"
    # Outside the basic plane: encode as a UTF-16 surrogate pair
    code -= _BMP_LIMIT
    high = 0xD800 | (code >> 10)
    low = 0xDC00 | (code & 0x3FF)
    return f"\\u{high:04x}\\u{low:04x}"


def escape_string(s: str, ensure_ascii: bool = False) -> str:
    """
    Escapes a string for use between JSON double quotes.

    Quote, backslash and control characters are always escaped; other
    non-ASCII characters only when ``ensure_ascii`` is set.
    """
    pattern = _ESCAPE_ASCII if ensure_ascii else _ESCAPE
    return pattern.sub(lambda m: _escape_char(m.group()), s)


@dataclass(frozen=True)
class Indent:
    """Indentation unit: ``count`` spaces or ``count`` tabs per level."""

    char: str
    count: int

    def __post_init__(self) -> None:
        if self.char not in (" ", "\t"):
            raise ValueError("indent char must be a space or a tab")
        if isinstance(self.count, bool) or not isinstance(self.count, int):
            raise TypeError("indent count must be an integer")
        if self.count < 0:
            raise ValueError("indent count must not be negative")

    @classmethod
    def spaces(cls, count: int) -> "Indent":
        return cls(" ", count)

    @classmethod
    def tabs(cls, count: int) -> "Indent":
        return cls("\t", count)

    def __str__(self) -> str:
        return self.char * self.count


DEFAULT_INDENT = Indent.spaces(4)


@dataclass(frozen=True)
class FormatConfig:
    """
    Configures JSON serialization with immutable settings.

    ``indent=None`` selects single-line output, compact unless ``spacing``
    asks for a space after each ``:`` and ``,``. Any other ``indent`` selects
    pretty output; an int there means that many spaces.
    """

    indent: Indent | int | None = None
    trailing_newline: bool = False
    spacing: bool = False
    ensure_ascii: bool = False
    max_depth: int = DEFAULT_MAX_DEPTH

    def __post_init__(self) -> None:
        if not isinstance(self.trailing_newline, bool):
            raise TypeError("trailing_newline must be a boolean")
        if not isinstance(self.spacing, bool):
            raise TypeError("spacing must be a boolean")
        if not isinstance(self.ensure_ascii, bool):
            raise TypeError("ensure_ascii must be a boolean")
        if isinstance(self.max_depth, bool) or not isinstance(
            self.max_depth, int
        ):
            raise TypeError("max_depth must be an integer")
        if self.max_depth < 1:
            raise ValueError("max_depth must be at least 1")

        if isinstance(self.indent, int) and not isinstance(self.indent, bool):
            object.__setattr__(self, "indent", Indent.spaces(self.indent))
        elif self.indent is not None and not isinstance(self.indent, Indent):
            raise TypeError("indent must be an Indent, an int or None")


def format_number(value: Value) -> str:
    """Integers without a decimal point; floats in shortest round-trip form."""
    if value.number_kind is NumberKind.INTEGER:
        return str(value.as_int())
    # repr of a finite float always carries "." or an exponent
    return repr(value.as_float())


class JsonFormatter:
    """Writes Values as text according to a FormatConfig."""

    def __init__(self, config: FormatConfig) -> None:
        self.config = config
        self.pretty = config.indent is not None
        self.unit = str(config.indent) if config.indent is not None else ""
        if self.pretty:
            self.item_separator, self.key_separator = ",", ": "
        elif config.spacing:
            self.item_separator, self.key_separator = ", ", ": "
        else:
            self.item_separator, self.key_separator = ",", ":"

    def format(self, value: Value) -> str:
        out: list[str] = []
        try:
            self.write_value(out, value, 0)
        except RecursionError as exc:
            raise DepthLimitError(
                self.config.max_depth, DepthLimitError.RECURSION_MSG
            ) from exc
        if self.config.trailing_newline:
            out.append("\n")
        return "".join(out)

    def _encode_string(self, s: str) -> str:
        return '"' + escape_string(s, self.config.ensure_ascii) + '"'

    def _open(self, level: int) -> None:
        if level >= self.config.max_depth:
            raise DepthLimitError(self.config.max_depth)

    def write_value(self, out: list[str], value: Value, level: int) -> None:
        match value.kind:
            case Kind.NULL:
                out.append("null")
            case Kind.BOOL:
                out.append("true" if value.as_bool() else "false")
            case Kind.NUMBER:
                out.append(format_number(value))
            case Kind.STRING:
                out.append(self._encode_string(value._payload))
            case Kind.ARRAY:
                self.write_array(out, value._payload, level)
            case Kind.OBJECT:
                self.write_object(out, value._payload, level)

    def write_array(
        self, out: list[str], items: list[Value], level: int
    ) -> None:
        self._open(level)
        if not items:
            out.append("[]")
            return

        out.append("[")
        inner = "\n" + self.unit * (level + 1) if self.pretty else ""
        for index, item in enumerate(items):
            if index:
                out.append(self.item_separator)
            out.append(inner)
            self.write_value(out, item, level + 1)
        if self.pretty:
            out.append("\n" + self.unit * level)
        out.append("]")

    def write_object(
        self, out: list[str], members: JsonObject, level: int
    ) -> None:
        self._open(level)
        if not members:
            out.append("{}")
            return

        out.append("{")
        inner = "\n" + self.unit * (level + 1) if self.pretty else ""
        for index, (key, item) in enumerate(members.items()):
            if index:
                out.append(self.item_separator)
            out.append(inner)
            out.append(self._encode_string(key))
            out.append(self.key_separator)
            self.write_value(out, item, level + 1)
        if self.pretty:
            out.append("\n" + self.unit * level)
        out.append("}")


_COMPACT = JsonFormatter(FormatConfig())


def _as_value(obj: Any, max_depth: int) -> Value:
    if isinstance(obj, Value):
        return obj
    return Value.from_python(obj, max_depth)


def compact(value: Value, *, max_depth: int = DEFAULT_MAX_DEPTH) -> str:
    """
    Minimal single-line rendering; the same text as ``str(value)``.

    Pass ``max_depth`` to render trees parsed under a raised limit.
    """
    if max_depth == DEFAULT_MAX_DEPTH:
        return _COMPACT.format(_as_value(value, max_depth))
    formatter = JsonFormatter(FormatConfig(max_depth=max_depth))
    return formatter.format(_as_value(value, max_depth))


def dumps(obj: Value | Any, **kwargs: Any) -> str:
    """
    Serializes a Value to a JSON string with configurable formatting.

    Plain Python data is converted with ``Value.from_python`` first. Keyword
    arguments are the fields of FormatConfig.
    """
    config = FormatConfig(**kwargs)
    return JsonFormatter(config).format(_as_value(obj, config.max_depth))


def pretty(
    obj: Value | Any,
    indent: Indent | int = DEFAULT_INDENT,
    trailing_newline: bool = False,
    **kwargs: Any,
) -> str:
    """Indented rendering, four spaces per level unless told otherwise."""
    return dumps(
        obj, indent=indent, trailing_newline=trailing_newline, **kwargs
    )


def dump(obj: Value | Any, fp: IO[str], **kwargs: Any) -> None:
    """
    Serializes a Value to a file-like object.
    """
    if not hasattr(fp, "write"):
        raise TypeError("fp must have a write() method")

    fp.write(dumps(obj, **kwargs))
