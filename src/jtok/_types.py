"""
Token, position and configuration types shared by the decoder and tokenizer.
"""

from dataclasses import dataclass
from dataclasses import field
from enum import Enum

type Position = int


class TokenType(Enum):
    """
    Kinds of lexical events emitted by the tokenizer.

    Structural kinds carry no payload; STRING and NUMBER carry the decoded
    text and float value respectively.
    """

    OBJECT_START = "object_start"
    OBJECT_END = "object_end"
    ARRAY_START = "array_start"
    ARRAY_END = "array_end"
    STRING = "string"
    NUMBER = "number"
    TRUE = "true"
    FALSE = "false"
    NULL = "null"


@dataclass(frozen=True)
class Token:
    """
    One structural or scalar event, handed to the consumer once.

    The start offset is informational and ignored by equality, so tokens
    from different documents compare by kind and payload alone.
    """

    type: TokenType
    value: str | float | None = None
    start: Position = field(default=0, compare=False)

    @classmethod
    def string(cls, text: str, start: Position = 0) -> "Token":
        return cls(TokenType.STRING, text, start)

    @classmethod
    def number(cls, value: float, start: Position = 0) -> "Token":
        return cls(TokenType.NUMBER, value, start)


OBJECT_START = Token(TokenType.OBJECT_START)
OBJECT_END = Token(TokenType.OBJECT_END)
ARRAY_START = Token(TokenType.ARRAY_START)
ARRAY_END = Token(TokenType.ARRAY_END)
TRUE = Token(TokenType.TRUE)
FALSE = Token(TokenType.FALSE)
NULL = Token(TokenType.NULL)


@dataclass(frozen=True)
class Mark:
    """Character offset (0-based) with its line and column (1-based)."""

    pos: Position
    lineno: int
    colno: int


@dataclass(frozen=True)
class TokenizeConfig:
    """
    Configures tokenizing behavior with immutable settings.

    multiple_values accepts a sequence of concatenated top-level documents,
    combine_surrogates joins escaped UTF-16 surrogate pairs into one
    character, and the two limits bound nesting and buffer growth.
    """

    multiple_values: bool = False
    combine_surrogates: bool = True
    max_depth: int | None = None
    max_token_length: int | None = None

    def __post_init__(self) -> None:
        if not isinstance(self.multiple_values, bool):
            raise TypeError("multiple_values must be a boolean")
        if not isinstance(self.combine_surrogates, bool):
            raise TypeError("combine_surrogates must be a boolean")
        for name in ("max_depth", "max_token_length"):
            limit = getattr(self, name)
            if limit is None:
                continue
            if not isinstance(limit, int) or isinstance(limit, bool):
                raise TypeError(f"{name} must be an integer or None")
            if limit < 1:
                raise ValueError(f"{name} must be at least 1")
