"""
In-memory representation of JSON values.

A Value is a closed tagged union over the six JSON kinds. Every Value owns its
children exclusively and trees are acyclic: the public mutation paths refuse
to place a container inside itself.
"""

from __future__ import annotations

import math
import re
from collections.abc import Iterable
from collections.abc import Iterator
from collections.abc import Mapping
from collections.abc import MutableMapping
from enum import Enum
from typing import Any

from . import _config
from .errors import DepthLimitError
from .errors import InsertToNonObjectError
from .errors import PushToNonArrayError

_SURROGATE = re.compile("[\ud800-\udfff]")


class Kind(Enum):
    """The six JSON value kinds."""

    NULL = "null"
    BOOL = "bool"
    NUMBER = "number"
    STRING = "string"
    ARRAY = "array"
    OBJECT = "object"


class NumberKind(Enum):
    """Lexical family of a number, kept independent of its magnitude."""

    INTEGER = "integer"
    FLOAT = "float"


def _check_text(s: str, what: str) -> str:
    if not isinstance(s, str):
        msg = f"{what} must be str, not {type(s).__name__}"
        raise TypeError(msg)
    if _SURROGATE.search(s):
        msg = f"{what} contains a surrogate code point and cannot be UTF-8"
        raise ValueError(msg)
    return s


def _check_member(value: Any) -> Value:
    if not isinstance(value, Value):
        msg = f"JSON containers hold Value, not {type(value).__name__}"
        raise TypeError(msg)
    return value


def _contains_container(root: Value, container: object) -> bool:
    """True if the tree under root holds the given list or JsonObject."""
    stack = [root]
    while stack:
        node = stack.pop()
        if node._payload is container:
            return True
        if node.kind is Kind.ARRAY:
            stack.extend(node._payload)
        elif node.kind is Kind.OBJECT:
            stack.extend(node._payload._items.values())
    return False


class JsonObject(MutableMapping[str, "Value"]):
    """
    Mapping from string keys to Values backing the Object variant.

    Keys are unique; assigning an existing key replaces its value in place.
    Iteration order depends on the import-time policy: insertion order when
    order preservation is on, otherwise sorted key order. Equality never
    depends on order.
    """

    __slots__ = ("_items",)

    def __init__(
        self,
        pairs: Mapping[str, Value] | Iterable[tuple[str, Value]] = (),
    ) -> None:
        self._items: dict[str, Value] = {}
        if isinstance(pairs, Mapping):
            pairs = pairs.items()
        for key, value in pairs:
            self[key] = value

    @classmethod
    def _wrap(cls, items: dict[str, Value]) -> JsonObject:
        """Adopts an already validated dict without copying."""
        obj = cls.__new__(cls)
        obj._items = items
        return obj

    def __getitem__(self, key: str) -> Value:
        return self._items[key]

    def __setitem__(self, key: str, value: Value) -> None:
        _check_text(key, "keys")
        _check_member(value)
        if _contains_container(value, self):
            raise ValueError("Circular reference detected")
        self._items[key] = value

    def __delitem__(self, key: str) -> None:
        del self._items[key]

    def __contains__(self, key: object) -> bool:
        return key in self._items

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[str]:
        if _config.PRESERVE_ORDER:
            return iter(self._items)
        return iter(sorted(self._items))

    def __eq__(self, other: object) -> bool:
        if isinstance(other, JsonObject):
            return self._items == other._items
        return NotImplemented

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        inner = ", ".join(f"{key!r}: {self._items[key]!r}" for key in self)
        return "{" + inner + "}"


class Value:
    """
    One JSON value: null, bool, number, string, array or object.

    Build values with the classmethod constructors (``Value.integer(3)``,
    ``Value.array([...])``, ...). Typed accessors such as ``as_int`` return
    None instead of raising when the value is of another kind.
    """

    __slots__ = ("_number_kind", "_payload", "kind")

    kind: Kind
    _number_kind: NumberKind | None
    _payload: Any

    def __init__(self) -> None:
        raise TypeError("use the Value.<kind>() constructors")

    @classmethod
    def _trusted(
        cls,
        kind: Kind,
        payload: Any,
        number_kind: NumberKind | None = None,
    ) -> Value:
        """Builds a value from a payload the caller has already validated."""
        value = cls.__new__(cls)
        value.kind = kind
        value._payload = payload
        value._number_kind = number_kind
        return value

    # Constructors

    @classmethod
    def null(cls) -> Value:
        return cls._trusted(Kind.NULL, None)

    @classmethod
    def boolean(cls, b: bool) -> Value:
        if not isinstance(b, bool):
            msg = f"expected bool, not {type(b).__name__}"
            raise TypeError(msg)
        return cls._trusted(Kind.BOOL, b)

    @classmethod
    def integer(cls, n: int) -> Value:
        if isinstance(n, bool) or not isinstance(n, int):
            msg = f"expected int, not {type(n).__name__}"
            raise TypeError(msg)
        return cls._trusted(Kind.NUMBER, int(n), NumberKind.INTEGER)

    @classmethod
    def float(cls, x: float) -> Value:
        """
        Builds a float-kind number.

        Integers are accepted and widened, so ``Value.float(1)`` is the number
        ``1.0``. NaN and the infinities have no JSON spelling and are rejected.
        """
        if isinstance(x, bool) or not isinstance(x, int | float):
            msg = f"expected float, not {type(x).__name__}"
            raise TypeError(msg)
        msg = "Out of range float values are not JSON compliant"
        try:
            x = float(x)
        except OverflowError:
            raise ValueError(msg) from None
        if not math.isfinite(x):
            raise ValueError(msg)
        return cls._trusted(Kind.NUMBER, x, NumberKind.FLOAT)

    @classmethod
    def number(cls, n: int | float) -> Value:
        """Builds an integer or float number according to the Python type."""
        if isinstance(n, int) and not isinstance(n, bool):
            return cls.integer(n)
        return cls.float(n)

    @classmethod
    def string(cls, s: str) -> Value:
        return cls._trusted(Kind.STRING, _check_text(s, "strings"))

    @classmethod
    def array(cls, items: Iterable[Value] = ()) -> Value:
        return cls._trusted(
            Kind.ARRAY, [_check_member(item) for item in items]
        )

    @classmethod
    def object(
        cls,
        pairs: Mapping[str, Value] | Iterable[tuple[str, Value]] = (),
    ) -> Value:
        """Builds an object; later duplicates of a key overwrite earlier ones."""
        return cls._trusted(Kind.OBJECT, JsonObject(pairs))

    @classmethod
    def from_python(
        cls, obj: Any, max_depth: int = _config.DEFAULT_MAX_DEPTH
    ) -> Value:
        """
        Converts native Python data into a Value tree.

        Accepts None, bool, int, float, str, lists and tuples, and mappings
        with str keys. Existing Value instances are taken as they are.
        Containers nested deeper than ``max_depth`` raise DepthLimitError.
        """
        try:
            return _from_python(obj, set(), 0, max_depth)
        except RecursionError as exc:
            raise DepthLimitError(
                max_depth, DepthLimitError.RECURSION_MSG
            ) from exc

    # Predicates

    def is_null(self) -> bool:
        return self.kind is Kind.NULL

    def is_bool(self) -> bool:
        return self.kind is Kind.BOOL

    def is_number(self) -> bool:
        return self.kind is Kind.NUMBER

    def is_integer(self) -> bool:
        return self._number_kind is NumberKind.INTEGER

    def is_float(self) -> bool:
        return self._number_kind is NumberKind.FLOAT

    def is_string(self) -> bool:
        return self.kind is Kind.STRING

    def is_array(self) -> bool:
        return self.kind is Kind.ARRAY

    def is_object(self) -> bool:
        return self.kind is Kind.OBJECT

    @property
    def number_kind(self) -> NumberKind | None:
        return self._number_kind

    # Typed accessors

    def as_bool(self) -> bool | None:
        return self._payload if self.kind is Kind.BOOL else None

    def as_int(self) -> int | None:
        if self._number_kind is NumberKind.INTEGER:
            return self._payload
        return None

    def as_float(self) -> float | None:
        if self._number_kind is NumberKind.FLOAT:
            return self._payload
        return None

    def as_number(self) -> int | float | None:
        return self._payload if self.kind is Kind.NUMBER else None

    def as_str(self) -> str | None:
        return self._payload if self.kind is Kind.STRING else None

    def as_array(self) -> list[Value] | None:
        """A copy of the elements; use ``push`` to add to the array."""
        return list(self._payload) if self.kind is Kind.ARRAY else None

    def as_object(self) -> JsonObject | None:
        return self._payload if self.kind is Kind.OBJECT else None

    def get(self, key: str | int) -> Value | None:
        """Returns an object member or array element, or None if absent."""
        if self.kind is Kind.OBJECT and isinstance(key, str):
            return self._payload.get(key)
        if (
            self.kind is Kind.ARRAY
            and isinstance(key, int)
            and not isinstance(key, bool)
            and -len(self._payload) <= key < len(self._payload)
        ):
            return self._payload[key]
        return None

    # Mutation

    def push(self, value: Value) -> None:
        """Appends to an array value."""
        if self.kind is not Kind.ARRAY:
            raise PushToNonArrayError
        _check_member(value)
        if _contains_container(value, self._payload):
            raise ValueError("Circular reference detected")
        self._payload.append(value)

    def insert(self, key: str, value: Value) -> None:
        """Sets a member of an object value, replacing any existing one."""
        if self.kind is not Kind.OBJECT:
            raise InsertToNonObjectError
        self._payload[key] = value

    # Conversion

    def to_python(self) -> Any:
        """Converts back to plain Python data (dicts, lists, scalars)."""
        if self.kind is Kind.ARRAY:
            return [item.to_python() for item in self._payload]
        if self.kind is Kind.OBJECT:
            return {key: item.to_python() for key, item in self._payload.items()}
        return self._payload

    def pretty(self, **kwargs: Any) -> str:
        """Renders as indented JSON; see ``bourne.format.pretty``."""
        from .format import pretty

        return pretty(self, **kwargs)

    def __str__(self) -> str:
        """Compact JSON under the default depth limit; see ``compact``."""
        from .format import compact

        return compact(self)

    def __repr__(self) -> str:
        match self.kind:
            case Kind.NULL:
                return "Value.null()"
            case Kind.BOOL:
                return f"Value.boolean({self._payload!r})"
            case Kind.NUMBER if self._number_kind is NumberKind.INTEGER:
                return f"Value.integer({self._payload!r})"
            case Kind.NUMBER:
                return f"Value.float({self._payload!r})"
            case Kind.STRING:
                return f"Value.string({self._payload!r})"
            case Kind.ARRAY:
                return f"Value.array({self._payload!r})"
            case Kind.OBJECT:
                return f"Value.object({self._payload!r})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Value):
            return NotImplemented
        if self.kind is not other.kind:
            return False
        if self._number_kind is not other._number_kind:
            return False
        return bool(self._payload == other._payload)

    __hash__ = None  # type: ignore[assignment]


def _from_python(
    obj: Any, active: set[int], level: int, max_depth: int
) -> Value:
    if isinstance(obj, Value):
        return obj
    if obj is None:
        return Value.null()
    if isinstance(obj, bool):
        return Value.boolean(obj)
    if isinstance(obj, int | float):
        return Value.number(obj)
    if isinstance(obj, str):
        return Value.string(obj)

    if isinstance(obj, Mapping | list | tuple):
        if level >= max_depth:
            raise DepthLimitError(max_depth)
        marker = id(obj)
        if marker in active:
            raise ValueError("Circular reference detected")
        active.add(marker)
        try:
            if isinstance(obj, Mapping):
                items: dict[str, Value] = {}
                for key, item in obj.items():
                    if not isinstance(key, str):
                        msg = f"keys must be strings, not {type(key).__name__}"
                        raise TypeError(msg)
                    items[_check_text(key, "keys")] = _from_python(
                        item, active, level + 1, max_depth
                    )
                return Value._trusted(Kind.OBJECT, JsonObject._wrap(items))
            values = [
                _from_python(item, active, level + 1, max_depth)
                for item in obj
            ]
            return Value._trusted(Kind.ARRAY, values)
        finally:
            active.discard(marker)

    msg = f"Object of type {type(obj).__name__} is not JSON serializable"
    raise TypeError(msg)
