"""
JSON value library: an in-memory value model, a parser and a serializer.

Parse text into a Value tree, build or inspect Values through their typed
constructors and accessors, and render them back as compact or pretty JSON.
Integers and floats stay distinct through a round trip.
"""

import logging
from typing import IO
from typing import Any

from ._config import DEFAULT_MAX_DEPTH
from ._profile import HotPathStats
from ._profile import ProfileContext
from ._profile import clear_hot_path_stats
from ._profile import get_hot_path_stats
from ._profile import log_hot_path_stats
from .errors import BourneError
from .errors import DepthLimitError
from .errors import ErrorKind
from .errors import InsertToNonObjectError
from .errors import JSONDecodeError
from .errors import ParseError
from .errors import PushToNonArrayError
from .format import DEFAULT_INDENT
from .format import FormatConfig
from .format import Indent
from .format import JsonFormatter
from .format import compact
from .format import dump
from .format import dumps
from .format import escape_string
from .format import pretty
from .lexer import JsonLexer
from .lexer import Token
from .lexer import TokenKind
from .lexer import unescape_string
from .parser import JsonParser
from .parser import ParseConfig
from .parser import parse
from .value import JsonObject
from .value import Kind
from .value import NumberKind
from .value import Value

__version__ = "0.1.0"

logging.getLogger(__name__).addHandler(logging.NullHandler())


def loads(s: str | bytes | bytearray, **kwargs: Any) -> Value:
    """
    Parses a JSON document into a Value with strict standards compliance.

    Keyword arguments are the fields of ParseConfig.
    """
    return parse(s, **kwargs)


def load(fp: IO[str] | IO[bytes], **kwargs: Any) -> Value:
    """
    Parses JSON from a file-like object opened in text or binary mode.
    """
    if not hasattr(fp, "read"):
        raise TypeError("fp must have a read() method")

    return parse(fp.read(), **kwargs)


def json(obj: Any, max_depth: int = DEFAULT_MAX_DEPTH) -> Value:
    """
    Builds a Value from a Python literal.

    ``json({"a": [1, 2.0, None]})`` is shorthand for assembling the same tree
    with the Value constructors.
    """
    return Value.from_python(obj, max_depth)


__all__ = [
    "DEFAULT_INDENT",
    "BourneError",
    "DepthLimitError",
    "ErrorKind",
    "FormatConfig",
    "HotPathStats",
    "Indent",
    "InsertToNonObjectError",
    "JSONDecodeError",
    "JsonFormatter",
    "JsonLexer",
    "JsonObject",
    "JsonParser",
    "Kind",
    "NumberKind",
    "ParseConfig",
    "ParseError",
    "ProfileContext",
    "PushToNonArrayError",
    "Token",
    "TokenKind",
    "Value",
    "clear_hot_path_stats",
    "compact",
    "dump",
    "dumps",
    "escape_string",
    "get_hot_path_stats",
    "json",
    "load",
    "loads",
    "log_hot_path_stats",
    "parse",
    "pretty",
    "unescape_string",
]
