"""
Fault taxonomy for the token stream and the UTF-8 decoder.

Every fault is a ValueError carrying the position where tokenizing stopped,
so callers can report it the same way regardless of which stage failed.
"""

from jtok._types import Mark
from jtok._types import Position


class JSONDecodeError(ValueError):
    """
    Base fault for everything that can end a token stream early.

    Holds the message, the 0-based character offset and the 1-based
    line and column of the character the automaton was looking at.
    """

    def __init__(
        self, msg: str, pos: Position = 0, lineno: int = 1, colno: int = 1
    ) -> None:
        if not isinstance(msg, str):
            raise TypeError("msg must be a string")
        if not isinstance(pos, int) or pos < 0:
            raise ValueError("pos must be a non-negative integer")

        self.msg = msg
        self.pos = pos
        self.lineno = lineno
        self.colno = colno

        super().__init__(self._format())

    @classmethod
    def at(cls, msg: str, mark: Mark) -> "JSONDecodeError":
        """Builds the fault for a recorded position."""
        return cls(msg, mark.pos, mark.lineno, mark.colno)

    def _format(self) -> str:
        return f"{self.msg} at line {self.lineno}, column {self.colno}"


class JSONSyntaxError(JSONDecodeError):
    """A character (or end of input) that the grammar does not allow here."""


class NumericConversionError(JSONDecodeError):
    """A grammatically valid numeral that does not fit a 64-bit float."""


class PrematureTermination(JSONDecodeError):
    """The consumer closed the stream before the input was exhausted."""


class ResourceLimitError(JSONDecodeError):
    """A configured nesting depth or token length was exceeded."""


class UTF8DecodeError(JSONDecodeError):
    """
    Malformed UTF-8 in the byte source.

    Unlike the other faults, pos is a byte offset into the raw input.
    """

    def _format(self) -> str:
        return f"{self.msg} at byte {self.pos}"
