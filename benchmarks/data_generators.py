"""
Test documents for tokenizing benchmarks.

Each generator stresses a different part of the automaton:
- Structural tokens (deep nesting, many small containers)
- Number frames and their lookahead replay
- String frames with escapes and surrogate pairs
- Multi-byte UTF-8 for the byte-level decoder
"""

import json
import random
import string
from typing import Any

# Fixed seed so every run tokenizes the same documents
_SEED = 20240115
_ESCAPE_PROBABILITY = 0.3

DATA_TYPES = (
    "small_object",
    "number_array",
    "nested_structure",
    "string_heavy",
    "multibyte_text",
)


def generate_test_data(data_type: str) -> str:
    """Generates a JSON document of the given kind."""
    generators = {
        "small_object": _generate_small_object,
        "number_array": _generate_number_array,
        "nested_structure": _generate_nested_structure,
        "string_heavy": _generate_string_heavy,
        "multibyte_text": _generate_multibyte_text,
    }

    if data_type not in generators:
        raise ValueError(f"Unknown data type: {data_type}")

    return generators[data_type](random.Random(_SEED))


def _generate_small_object(rng: random.Random) -> str:
    """Generates a small record (< 1KB) with one of each value kind."""
    data = {
        "id": rng.randint(10000, 99999),
        "name": _random_string(rng, 12),
        "active": True,
        "deleted": False,
        "parent": None,
        "balance": round(rng.uniform(-1000.0, 1000.0), 2),
        "tags": [_random_string(rng, 5) for _ in range(4)],
        "metadata": {"created": "2024-01-15T10:30:00Z", "source": "api"},
    }
    return json.dumps(data)


def _generate_number_array(rng: random.Random) -> str:
    """Generates a long array of integers, decimals and exponents."""
    numbers: list[str] = []
    for _ in range(2000):
        kind = rng.randint(0, 3)
        if kind == 0:
            numbers.append(str(rng.randint(-(10**9), 10**9)))
        elif kind == 1:
            numbers.append(f"{rng.uniform(-1e3, 1e3):.6f}")
        elif kind == 2:
            numbers.append(f"{rng.uniform(1, 10):.4f}e{rng.randint(-30, 30)}")
        else:
            numbers.append("0")
    return "[" + ",".join(numbers) + "]"


def _generate_nested_structure(rng: random.Random) -> str:
    """Generates objects and arrays nested several levels deep."""

    def create_nested(depth: int) -> dict[str, Any]:
        if depth <= 0:
            return {"leaf": _random_string(rng, 6)}

        return {
            "level": depth,
            "items": [create_nested(depth - 1) for _ in range(2)],
            "empty": [[], {}],
            "flag": rng.choice([True, False, None]),
        }

    return json.dumps(create_nested(8), indent=2)


def _generate_string_heavy(rng: random.Random) -> str:
    """Generates strings full of escapes, including surrogate pairs."""
    escapes = ['\\"', "\\\\", "\\/", "\\b", "\\f", "\\n", "\\r", "\\t"]

    def create_escaped_string() -> str:
        chars = []
        for _ in range(60):
            if rng.random() < _ESCAPE_PROBABILITY:
                chars.append(rng.choice(escapes))
            else:
                chars.append(
                    rng.choice(string.ascii_letters + string.digits + " ")
                )
        return '"' + "".join(chars) + '"'

    def create_unicode_escape() -> str:
        if rng.random() < 0.5:
            return f'"\\u{rng.randint(0x00A0, 0xD7FF):04x}"'
        # Astral character written as an escaped surrogate pair
        code = rng.randint(0x10000, 0x10FFFF) - 0x10000
        high = 0xD800 + (code >> 10)
        low = 0xDC00 + (code & 0x3FF)
        return f'"\\u{high:04x}\\u{low:04x}"'

    strings = [create_escaped_string() for _ in range(100)]
    unicode = [create_unicode_escape() for _ in range(100)]
    return '{"strings": [' + ", ".join(strings) + '], "unicode": [' + (
        ", ".join(unicode) + "]}"
    )


def _generate_multibyte_text(rng: random.Random) -> str:
    """Generates raw non-ASCII text of every UTF-8 sequence length."""
    alphabet = (
        [chr(c) for c in range(0x00E0, 0x0100)]
        + [chr(c) for c in range(0x3041, 0x3097)]
        + [chr(c) for c in range(0x1F600, 0x1F650)]
    )

    paragraphs = [
        "".join(rng.choices(alphabet, k=rng.randint(20, 80)))
        for _ in range(100)
    ]
    return json.dumps({"paragraphs": paragraphs}, ensure_ascii=False)


def _random_string(rng: random.Random, length: int) -> str:
    """Generates a random ASCII string of specified length."""
    return "".join(rng.choices(string.ascii_letters, k=length))
