"""
Pull-driven JSON tokenizer built on an explicit-stack pushdown automaton.

The automaton reads one character at a time and dispatches it to the frame
on top of the stack. Frames stand in for the call stack of a recursive
descent parser, which lets tokenizing stop after any character and resume
on the next pull.
"""

import itertools
import logging
import math
from collections.abc import Callable
from collections.abc import Iterable
from collections.abc import Iterator
from enum import Enum
from typing import Any

from jtok._errors import JSONDecodeError
from jtok._errors import JSONSyntaxError
from jtok._errors import NumericConversionError
from jtok._errors import PrematureTermination
from jtok._errors import ResourceLimitError
from jtok._frames import NUMBER_TERMINAL_STATES
from jtok._frames import ArrayFrame
from jtok._frames import ArrayState
from jtok._frames import Frame
from jtok._frames import HexAccumulator
from jtok._frames import LiteralFrame
from jtok._frames import NumberFrame
from jtok._frames import NumberState
from jtok._frames import ObjectFrame
from jtok._frames import ObjectState
from jtok._frames import StringFrame
from jtok._frames import StringState
from jtok._frames import ValueFrame
from jtok._profile import ProfileContext
from jtok._types import Mark
from jtok._types import Token
from jtok._types import TokenizeConfig
from jtok._types import TokenType

logger = logging.getLogger(__name__)

_WHITESPACE = frozenset(" \t\n\r")
_HEX_DIGITS = frozenset("0123456789abcdefABCDEF")
_CONTROL_LIMIT = 0x20

_ESCAPES = {
    '"': '"',
    "\\": "\\",
    "/": "/",
    "b": "\b",
    "f": "\f",
    "n": "\n",
    "r": "\r",
    "t": "\t",
}

_LITERALS = {
    "t": (TokenType.TRUE, "true"),
    "f": (TokenType.FALSE, "false"),
    "n": (TokenType.NULL, "null"),
}

_EXPECT_VALUE = "Expecting value"
_EXPECT_COMMA = "Expecting ',' delimiter"
_EXPECT_COLON = "Expecting ':' delimiter"
_EXPECT_NAME = "Expecting property name enclosed in double quotes"

# Message for a number that stops in a non-terminal state.
_NUMBER_TAIL_ERRORS = {
    NumberState.SIGN: "Invalid number",
    NumberState.DOT: "Invalid decimal number",
    NumberState.EXPONENT_MARK: "Invalid exponent",
    NumberState.EXPONENT_SIGN: "Invalid exponent",
}


def _is_digit(char: str) -> bool:
    # ASCII only; str.isdigit() accepts other scripts.
    return "0" <= char <= "9"


class StreamStatus(Enum):
    ACTIVE = "active"
    ENDED = "ended"
    FAULTED = "faulted"


class TokenStream:
    """
    Lazy sequence of JSON tokens over a character source.

    Tokens are computed only when pulled, through next_token() or iteration,
    and the automaton reads exactly as many characters as the next token
    needs plus at most one lookahead character that ends a number.

    Once the input ends next_token() keeps returning None. Once a fault has
    been raised every later call raises the same fault. close() tells the
    stream that no more tokens are wanted.

    close_source marks a source created on the caller's behalf, such as a
    UTF-8 decoder or a chunk reader, which close() may close as well.
    """

    def __init__(
        self,
        chars: str | Iterable[str],
        config: TokenizeConfig | None = None,
        *,
        close_source: bool = False,
    ) -> None:
        self.config = config if config is not None else TokenizeConfig()
        self._source = chars
        self._close_source = close_source
        self._chars: Iterator[str] = (
            iter(chars)
            if isinstance(chars, str)
            else itertools.chain.from_iterable(chars)
        )

        self._stack: list[Frame] = (
            [] if self.config.multiple_values else [ValueFrame()]
        )
        self._depth = 0
        self._replay: str | None = None
        self._exhausted = False

        self._status = StreamStatus.ACTIVE
        self._fault: Exception | None = None

        # Position of the character being dispatched, and of the next one.
        self._pos = 0
        self._line = 1
        self._col = 1
        self._offset = 0
        self._lineno = 1
        self._line_start = 0

        self._handlers: dict[type, Callable[[Any, str], Token | None]] = {
            ValueFrame: self._on_value,
            StringFrame: self._on_string,
            ObjectFrame: self._on_object,
            ArrayFrame: self._on_array,
            LiteralFrame: self._on_literal,
            NumberFrame: self._on_number,
        }

    @property
    def status(self) -> StreamStatus:
        return self._status

    @property
    def fault(self) -> Exception | None:
        """The fault that ended the stream, if it ended with one."""
        return self._fault

    @property
    def depth(self) -> int:
        """Number of objects and arrays currently open."""
        return self._depth

    @property
    def position(self) -> Mark:
        """Position of the next character to be read."""
        return self._eof_mark()

    def __iter__(self) -> "TokenStream":
        return self

    def __next__(self) -> Token:
        token = self.next_token()
        if token is None:
            raise StopIteration
        return token

    def __enter__(self) -> "TokenStream":
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.close()

    def next_token(self) -> Token | None:
        """
        Returns the next token, or None once the input has ended.

        Raises the stream's fault on this and every later call if the input
        is malformed, the character source fails or the stream was closed
        early.
        """
        if self._status is StreamStatus.ENDED:
            return None
        if self._fault is not None:
            raise self._fault

        with ProfileContext("next_token") as profile:
            start = self._offset
            try:
                token = self._advance()
            except Exception as exc:
                self._fail(exc)
                raise
            profile.chars = self._offset - start

        if token is None:
            self._status = StreamStatus.ENDED
            self._release()
            logger.debug(
                "Token stream ended after %d characters", self._offset
            )
        return token

    def close(self) -> None:
        """
        Stops the stream before its input is exhausted.

        An active stream becomes faulted with PrematureTermination and drops
        its frames. The character source is closed only when the stream was
        opened with close_source=True; caller-owned files stay open.
        """
        if self._status is not StreamStatus.ACTIVE:
            return
        self._fail(
            PrematureTermination.at(
                "Token stream closed before end of input", self._eof_mark()
            )
        )
        if self._close_source:
            close = getattr(self._source, "close", None)
            if close is not None:
                close()

    def _fail(self, exc: Exception) -> None:
        self._status = StreamStatus.FAULTED
        self._fault = exc
        self._release()
        logger.debug("Token stream faulted: %s", exc)

    def _release(self) -> None:
        self._stack.clear()
        self._replay = None
        self._depth = 0

    def _advance(self) -> Token | None:
        while True:
            if self._replay is not None:
                char = self._replay
                self._replay = None
            else:
                if self._exhausted:
                    return self._end_of_input()
                next_char = next(self._chars, None)
                if next_char is None:
                    self._exhausted = True
                    return self._end_of_input()
                char = next_char
                self._consume(char)

            if self._stack:
                frame = self._stack[-1]
                token = self._handlers[type(frame)](frame, char)
            else:
                token = self._between_values(char)

            if token is not None:
                return token

    def _consume(self, char: str) -> None:
        self._pos = self._offset
        self._offset += 1
        self._line = self._lineno
        self._col = self._pos - self._line_start + 1
        if char == "\n":
            self._lineno += 1
            self._line_start = self._offset

    def _here(self) -> Mark:
        return Mark(self._pos, self._line, self._col)

    def _eof_mark(self) -> Mark:
        return Mark(
            self._offset, self._lineno, self._offset - self._line_start + 1
        )

    def _syntax_error(
        self, msg: str, mark: Mark | None = None
    ) -> JSONDecodeError:
        if mark is None:
            mark = self._here()
        return JSONSyntaxError.at(msg, mark)

    def _replace(self, frame: Frame) -> None:
        self._stack[-1] = frame

    def _open_container(self, frame: ObjectFrame | ArrayFrame) -> None:
        limit = self.config.max_depth
        if limit is not None and self._depth >= limit:
            raise ResourceLimitError.at(
                "Maximum nesting depth exceeded", self._here()
            )
        self._depth += 1
        self._replace(frame)

    def _close_container(self, token_type: TokenType) -> Token:
        self._stack.pop()
        self._depth -= 1
        return Token(token_type, None, self._pos)

    def _append(self, frame: StringFrame | NumberFrame, char: str) -> None:
        frame.buffer.append(char)
        limit = self.config.max_token_length
        if limit is not None and len(frame.buffer) > limit:
            raise ResourceLimitError.at(
                "Token exceeds maximum length", frame.start
            )

    def _between_values(self, char: str) -> Token | None:
        if char in _WHITESPACE:
            return None
        if not self.config.multiple_values:
            raise self._syntax_error("Extra data")
        self._stack.append(ValueFrame())
        self._replay = char
        return None

    def _on_value(self, frame: ValueFrame, char: str) -> Token | None:
        if char in _WHITESPACE:
            return None

        mark = self._here()
        if char == "{":
            self._open_container(ObjectFrame())
            return Token(TokenType.OBJECT_START, None, mark.pos)
        if char == "[":
            self._open_container(ArrayFrame())
            return Token(TokenType.ARRAY_START, None, mark.pos)
        if char == '"':
            self._replace(StringFrame(mark))
            return None
        if char == "-":
            self._replace(NumberFrame(mark, NumberState.SIGN, ["-"]))
            return None
        if char == "0":
            self._replace(NumberFrame(mark, NumberState.LEADING_ZERO, ["0"]))
            return None
        if _is_digit(char):
            self._replace(NumberFrame(mark, NumberState.INTEGER, [char]))
            return None
        if char in _LITERALS:
            token_type, literal = _LITERALS[char]
            self._replace(LiteralFrame(token_type, literal, mark))
            return None

        if char == "]" and len(self._stack) > 1:
            parent = self._stack[-2]
            if isinstance(parent, ArrayFrame) and parent.separator is not None:
                raise self._syntax_error(
                    "Illegal trailing comma before end of array",
                    parent.separator,
                )
        if char == "\ufeff" and mark.pos == 0:
            raise self._syntax_error(
                "JSON input should not contain BOM (Byte Order Mark)"
            )
        raise self._syntax_error(_EXPECT_VALUE)

    def _on_string(self, frame: StringFrame, char: str) -> Token | None:
        state = frame.state

        if state is StringState.CHAR_POINT:
            if char == "\\":
                frame.state = StringState.ESCAPED_CHAR
                return None
            self._flush_surrogate(frame)
            if char == '"':
                self._stack.pop()
                return Token.string("".join(frame.buffer), frame.start.pos)
            if ord(char) < _CONTROL_LIMIT:
                raise self._syntax_error("Invalid control character in string")
            self._append(frame, char)
            return None

        if state is StringState.ESCAPED_CHAR:
            if char == "u":
                frame.state = StringState.HEX
                frame.hex = HexAccumulator()
                return None
            if char not in _ESCAPES:
                raise self._syntax_error(f"Invalid escape sequence: \\{char}")
            self._flush_surrogate(frame)
            self._append(frame, _ESCAPES[char])
            frame.state = StringState.CHAR_POINT
            return None

        if char not in _HEX_DIGITS:
            raise self._syntax_error("Invalid \\uXXXX escape")
        if frame.hex.push(int(char, 16)):
            self._append_code_unit(frame, frame.hex.value)
            frame.state = StringState.CHAR_POINT
        return None

    def _append_code_unit(self, frame: StringFrame, unit: int) -> None:
        high = frame.high_surrogate
        if high is not None:
            frame.high_surrogate = None
            if 0xDC00 <= unit <= 0xDFFF:
                pair = 0x10000 + ((high - 0xD800) << 10) + (unit - 0xDC00)
                self._append(frame, chr(pair))
                return
            self._append(frame, chr(high))

        if self.config.combine_surrogates and 0xD800 <= unit <= 0xDBFF:
            frame.high_surrogate = unit
        else:
            self._append(frame, chr(unit))

    def _flush_surrogate(self, frame: StringFrame) -> None:
        # A high surrogate not followed by a \u escape stays unpaired.
        if frame.high_surrogate is not None:
            self._append(frame, chr(frame.high_surrogate))
            frame.high_surrogate = None

    def _on_number(self, frame: NumberFrame, char: str) -> Token | None:
        state = frame.state
        digit = _is_digit(char)

        if state is NumberState.SIGN:
            if char == "0":
                next_state = NumberState.LEADING_ZERO
            elif digit:
                next_state = NumberState.INTEGER
            else:
                raise self._syntax_error("Invalid number")
        elif state is NumberState.LEADING_ZERO:
            if digit:
                raise self._syntax_error("Leading zeros not allowed")
            elif char == ".":
                next_state = NumberState.DOT
            elif char in "eE":
                next_state = NumberState.EXPONENT_MARK
            else:
                return self._end_number(frame, char)
        elif state is NumberState.INTEGER:
            if digit:
                next_state = state
            elif char == ".":
                next_state = NumberState.DOT
            elif char in "eE":
                next_state = NumberState.EXPONENT_MARK
            else:
                return self._end_number(frame, char)
        elif state is NumberState.DOT:
            if not digit:
                raise self._syntax_error("Invalid decimal number")
            next_state = NumberState.FRACTION
        elif state is NumberState.FRACTION:
            if digit:
                next_state = state
            elif char in "eE":
                next_state = NumberState.EXPONENT_MARK
            else:
                return self._end_number(frame, char)
        elif state is NumberState.EXPONENT_MARK:
            if char in "+-":
                next_state = NumberState.EXPONENT_SIGN
            elif digit:
                next_state = NumberState.EXPONENT
            else:
                raise self._syntax_error("Invalid exponent")
        elif state is NumberState.EXPONENT_SIGN:
            if not digit:
                raise self._syntax_error("Invalid exponent")
            next_state = NumberState.EXPONENT
        else:
            if not digit:
                return self._end_number(frame, char)
            next_state = state

        frame.state = next_state
        self._append(frame, char)
        return None

    def _end_number(self, frame: NumberFrame, lookahead: str) -> Token:
        # The lookahead is not part of the number; it is replayed against
        # the parent frame on the next pull without being read again.
        token = self._emit_number(frame)
        self._replay = lookahead
        return token

    def _emit_number(self, frame: NumberFrame) -> Token:
        text = "".join(frame.buffer)
        try:
            value = float(text)
        except ValueError as e:
            raise NumericConversionError.at(
                "Invalid number", frame.start
            ) from e
        if math.isinf(value):
            raise NumericConversionError.at("Number out of range", frame.start)
        self._stack.pop()
        return Token.number(value, frame.start.pos)

    def _on_literal(self, frame: LiteralFrame, char: str) -> Token | None:
        if char != frame.remaining[0]:
            raise self._syntax_error("Invalid literal", frame.start)
        frame.matched += 1
        if frame.remaining:
            return None
        self._stack.pop()
        return Token(frame.token_type, None, frame.start.pos)

    def _on_array(self, frame: ArrayFrame, char: str) -> Token | None:
        if char in _WHITESPACE:
            return None

        if frame.state is ArrayState.END_OR_VALUE:
            if char == "]":
                return self._close_container(TokenType.ARRAY_END)
            frame.state = ArrayState.END_OR_NEXT
            self._stack.append(ValueFrame())
            self._replay = char
            return None

        if char == ",":
            frame.separator = self._here()
            self._stack.append(ValueFrame())
            return None
        if char == "]":
            return self._close_container(TokenType.ARRAY_END)
        raise self._syntax_error(_EXPECT_COMMA)

    def _on_object(self, frame: ObjectFrame, char: str) -> Token | None:
        if char in _WHITESPACE:
            return None
        state = frame.state

        if state is ObjectState.END_OR_NEXT:
            if char == ",":
                frame.separator = self._here()
                frame.state = ObjectState.FIELD_NAME
                return None
            if char == "}":
                return self._close_container(TokenType.OBJECT_END)
            raise self._syntax_error(_EXPECT_COMMA)

        if state is ObjectState.FIELD_VALUE:
            if char != ":":
                raise self._syntax_error(_EXPECT_COLON)
            frame.state = ObjectState.END_OR_NEXT
            self._stack.append(ValueFrame())
            return None

        if char == '"':
            frame.state = ObjectState.FIELD_VALUE
            self._stack.append(StringFrame(self._here()))
            return None
        if state is ObjectState.END_OR_FIELD_NAME and char == "}":
            return self._close_container(TokenType.OBJECT_END)
        if char == "}" and frame.separator is not None:
            raise self._syntax_error(
                "Illegal trailing comma before end of object", frame.separator
            )
        raise self._syntax_error(_EXPECT_NAME)

    def _end_of_input(self) -> Token | None:
        if not self._stack:
            return None

        frame = self._stack[-1]
        mark = self._eof_mark()

        if isinstance(frame, NumberFrame):
            if frame.state in NUMBER_TERMINAL_STATES:
                return self._emit_number(frame)
            raise self._syntax_error(_NUMBER_TAIL_ERRORS[frame.state], mark)
        if isinstance(frame, StringFrame):
            raise self._syntax_error(
                "Unterminated string starting at", frame.start
            )
        if isinstance(frame, LiteralFrame):
            raise self._syntax_error("Invalid literal", frame.start)
        if isinstance(frame, ArrayFrame):
            if frame.state is ArrayState.END_OR_VALUE:
                raise self._syntax_error(_EXPECT_VALUE, mark)
            raise self._syntax_error(_EXPECT_COMMA, mark)
        if isinstance(frame, ObjectFrame):
            if frame.state is ObjectState.FIELD_VALUE:
                raise self._syntax_error(_EXPECT_COLON, mark)
            if frame.state is ObjectState.END_OR_NEXT:
                raise self._syntax_error(_EXPECT_COMMA, mark)
            raise self._syntax_error(_EXPECT_NAME, mark)
        raise self._syntax_error(_EXPECT_VALUE, mark)
