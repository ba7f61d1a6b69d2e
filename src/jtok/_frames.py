"""
Parse frames for the tokenizer's pushdown automaton.

Each frame is the paused state of one nested construct. The tokenizer keeps
them on a plain list used as a LIFO stack and mutates only the top one.
"""

from dataclasses import dataclass
from dataclasses import field
from enum import Enum

from jtok._types import Mark
from jtok._types import TokenType


class StringState(Enum):
    CHAR_POINT = "char_point"
    ESCAPED_CHAR = "escaped_char"
    HEX = "hex"


class ObjectState(Enum):
    END_OR_FIELD_NAME = "end_or_field_name"
    FIELD_NAME = "field_name"
    # Key read, waiting for ':' and the value behind it.
    FIELD_VALUE = "field_value"
    END_OR_NEXT = "end_or_next"


class ArrayState(Enum):
    END_OR_VALUE = "end_or_value"
    END_OR_NEXT = "end_or_next"


class NumberState(Enum):
    """
    Positions in the JSON number grammar.

    The buffer is a valid numeral prefix in every state; only the terminal
    states may be ended by a character the grammar does not consume.
    """

    SIGN = "sign"
    LEADING_ZERO = "leading_zero"
    INTEGER = "integer"
    DOT = "dot"
    FRACTION = "fraction"
    EXPONENT_MARK = "exponent_mark"
    EXPONENT_SIGN = "exponent_sign"
    EXPONENT = "exponent"


NUMBER_TERMINAL_STATES = frozenset(
    {
        NumberState.LEADING_ZERO,
        NumberState.INTEGER,
        NumberState.FRACTION,
        NumberState.EXPONENT,
    }
)


@dataclass
class HexAccumulator:
    """Collects the four hex digits of a \\uXXXX escape."""

    remaining: int = 4
    value: int = 0

    def push(self, nibble: int) -> bool:
        """Adds one nibble, returns True once all four digits are in."""
        self.value = (self.value << 4) | nibble
        self.remaining -= 1
        return self.remaining == 0


@dataclass
class ValueFrame:
    """Expects the start of any JSON value."""


@dataclass
class StringFrame:
    start: Mark
    state: StringState = StringState.CHAR_POINT
    buffer: list[str] = field(default_factory=list)
    hex: HexAccumulator = field(default_factory=HexAccumulator)
    high_surrogate: int | None = None


@dataclass
class ObjectFrame:
    state: ObjectState = ObjectState.END_OR_FIELD_NAME
    # Last ',' seen, reported when it turns out to be a trailing comma.
    separator: Mark | None = None


@dataclass
class ArrayFrame:
    state: ArrayState = ArrayState.END_OR_VALUE
    separator: Mark | None = None


@dataclass
class LiteralFrame:
    """
    Matches the rest of true, false or null.

    matched counts the characters of literal already consumed; the
    expected suffix is literal[matched:].
    """

    token_type: TokenType
    literal: str
    start: Mark
    matched: int = 1

    @property
    def remaining(self) -> str:
        return self.literal[self.matched :]


@dataclass
class NumberFrame:
    start: Mark
    state: NumberState
    buffer: list[str] = field(default_factory=list)


type Frame = (
    ValueFrame
    | StringFrame
    | ObjectFrame
    | ArrayFrame
    | LiteralFrame
    | NumberFrame
)
