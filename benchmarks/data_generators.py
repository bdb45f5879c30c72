"""
Test data generators for JSON benchmarks.

Each generator builds native Python data from a seeded random source so that
every library is measured on identical input across runs:
- Different sizes (small/large objects, long arrays)
- Different shapes (flat, deeply nested, mixed)
- String-heavy content with escapes and non-ASCII text
- Number-heavy content mixing integers and floats
"""

import random
import string
from collections.abc import Callable
from typing import Any

import bourne

SEED = 20240115
_ESCAPABLE = '"\\/\b\f\n\r\t'
_ESCAPE_PROBABILITY = 0.3
_NON_ASCII = "éüßøñ日本語中文😀🎉"


def _word(rng: random.Random, length: int) -> str:
    return "".join(rng.choices(string.ascii_letters, k=length))


def _timestamp(rng: random.Random) -> str:
    return (
        f"2024-{rng.randint(1, 12):02d}-{rng.randint(1, 28):02d}"
        f"T{rng.randint(0, 23):02d}:{rng.randint(0, 59):02d}:00Z"
    )


def small_object(rng: random.Random) -> dict[str, Any]:
    """A small record (< 1KB) with basic key-value pairs."""
    return {
        "id": rng.randint(10_000, 99_999),
        "name": f"{_word(rng, 6)} {_word(rng, 8)}",
        "email": f"{_word(rng, 8)}@example.com",
        "active": rng.random() < 0.5,
        "balance": round(rng.uniform(0, 5000), 2),
        "metadata": {"created": _timestamp(rng), "source": "api"},
    }


def large_object(rng: random.Random) -> dict[str, Any]:
    """A user profile (> 10KB) with transaction and activity history."""
    return {
        "user_id": rng.randint(1_000_000, 9_999_999),
        "profile": {
            "first_name": _word(rng, 10),
            "last_name": _word(rng, 12),
            "address": {
                "street": f"{rng.randint(1, 9999)} {_word(rng, 8)} St",
                "city": _word(rng, 12),
                "zip": f"{rng.randint(10000, 99999)}",
            },
            "notifications": {
                channel: rng.random() < 0.5
                for channel in ("email", "sms", "push")
            },
        },
        "transactions": [
            {
                "id": f"txn_{i:06d}",
                "amount": round(rng.uniform(1.0, 1000.0), 2),
                "currency": rng.choice(["USD", "EUR", "GBP", "JPY"]),
                "timestamp": _timestamp(rng),
                "status": rng.choice(["completed", "pending", "failed"]),
            }
            for i in range(50)
        ],
        "activity_log": [
            {
                "timestamp": _timestamp(rng),
                "action": rng.choice(["login", "logout", "purchase", "view"]),
                "ip_address": ".".join(
                    str(rng.randint(1, 255)) for _ in range(4)
                ),
            }
            for _ in range(30)
        ],
    }


def mixed_array(rng: random.Random) -> list[Any]:
    """A long array of every value kind."""
    makers: list[Callable[[int], Any]] = [
        lambda i: rng.randint(-1000, 1000),
        lambda i: round(rng.uniform(-100.0, 100.0), 3),
        lambda i: _word(rng, rng.randint(5, 30)),
        lambda i: rng.random() < 0.5,
        lambda i: None,
        lambda i: {"index": i, "value": _word(rng, 10)},
    ]
    return [rng.choice(makers)(i) for i in range(200)]


def nested_structure(rng: random.Random) -> dict[str, Any]:
    """A tree eight levels deep with fan-out at every level."""

    def branch(depth: int) -> dict[str, Any]:
        if depth <= 0:
            return {"value": _word(rng, 10)}
        return {
            "level": depth,
            "items": [branch(depth - 1) for _ in range(2)],
            "nested": branch(depth - 1),
        }

    return branch(8)


def string_heavy(rng: random.Random) -> dict[str, Any]:
    """Strings full of characters that must be escaped, plus non-ASCII."""

    def noisy(length: int) -> str:
        return "".join(
            rng.choice(_ESCAPABLE)
            if rng.random() < _ESCAPE_PROBABILITY
            else rng.choice(string.ascii_letters + " ")
            for _ in range(length)
        )

    return {
        "strings": [noisy(50) for _ in range(100)],
        "unicode": ["".join(rng.choices(_NON_ASCII, k=20)) for _ in range(50)],
        "paths": {
            f"key_{i}": f"C:\\Users\\{_word(rng, 8)}\\file_{i}.txt"
            for i in range(20)
        },
    }


def number_heavy(rng: random.Random) -> list[Any]:
    """Integers of every size alongside floats in fixed and exponent form."""
    return [
        [
            rng.randint(-(2**40), 2**40),
            rng.uniform(-1, 1),
            rng.uniform(-1, 1) * 10.0 ** rng.randint(-300, 300),
        ]
        for _ in range(300)
    ]


GENERATORS: dict[str, Callable[[random.Random], Any]] = {
    "small_object": small_object,
    "large_object": large_object,
    "mixed_array": mixed_array,
    "nested_structure": nested_structure,
    "string_heavy": string_heavy,
    "number_heavy": number_heavy,
}


def generate_test_data(data_type: str) -> Any:
    """Returns the native Python data for a benchmark data type."""
    if data_type not in GENERATORS:
        raise ValueError(f"Unknown data type: {data_type}")

    return GENERATORS[data_type](random.Random(SEED))


def generate_document(data_type: str) -> str:
    """Returns the compact JSON text for a benchmark data type."""
    return bourne.dumps(generate_test_data(data_type))
