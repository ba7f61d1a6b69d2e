"""Streaming UTF-8 decoder producing one Unicode scalar value at a time."""

from collections import deque
from collections.abc import Iterable
from collections.abc import Iterator
from typing import IO
from typing import Final

from jtok._errors import UTF8DecodeError

REPLACEMENT_CHAR: Final = "\ufffd"
DEFAULT_CHUNK_SIZE: Final = 65536
ERROR_MODES: Final = ("strict", "replace", "ignore")

# Narrowed range for the byte after leads whose full continuation range
# would admit overlong forms, surrogates or code points above U+10FFFF.
_SECOND_BYTE_RANGES: Final = {
    0xE0: (0xA0, 0xBF, "Overlong encoding"),
    0xED: (0x80, 0x9F, "Encoded surrogate"),
    0xF0: (0x90, 0xBF, "Overlong encoding"),
    0xF4: (0x80, 0x8F, "Code point out of range"),
}

type ByteSource = (
    bytes | bytearray | memoryview | IO[bytes] | Iterable[int | bytes]
)


def iter_bytes(
    source: ByteSource, chunk_size: int = DEFAULT_CHUNK_SIZE
) -> Iterator[int]:
    """
    Flattens a byte source into a lazy sequence of byte values.

    Accepts bytes-like objects, binary file-like objects (read chunk by
    chunk) and iterables of ints or bytes chunks.
    """
    if isinstance(source, str):
        raise TypeError("UTF8Decoder requires bytes, not str")

    if isinstance(source, bytes | bytearray):
        yield from source
    elif isinstance(source, memoryview):
        yield from source.tobytes()
    elif hasattr(source, "read"):
        while True:
            chunk = source.read(chunk_size)
            if not chunk:
                return
            if isinstance(chunk, str):
                raise TypeError("UTF8Decoder requires a binary stream")
            yield from chunk
    else:
        for item in source:
            if isinstance(item, int):
                yield item
            else:
                yield from item


class UTF8Decoder:
    """
    Incremental UTF-8 decoder.

    Works as an iterator of one-character strings over a byte source, or
    push-style through feed() and finish(). Sequence state survives between
    bytes, so a multi-byte character may be split across reads or chunks.

    Malformed input (invalid start bytes, missing continuation bytes,
    overlong forms, encoded surrogates, code points above U+10FFFF and
    sequences cut off by end of input) raises UTF8DecodeError in "strict"
    mode, becomes U+FFFD in "replace" mode and is dropped in "ignore" mode.
    A sequence is rejected at the first byte that cannot continue it, so
    replace mode emits one U+FFFD per maximal invalid subpart, as the
    utf-8 codec does.
    """

    def __init__(
        self,
        source: ByteSource | None = None,
        errors: str = "strict",
        chunk_size: int = DEFAULT_CHUNK_SIZE,
    ) -> None:
        if errors not in ERROR_MODES:
            raise ValueError(f"unknown errors mode: {errors!r}")

        self.errors = errors
        self._bytes: Iterator[int] | None = (
            iter_bytes(source, chunk_size) if source is not None else None
        )
        self._ready: deque[str] = deque()
        self._exhausted = False

        self._offset = 0
        self._start = 0
        self._lead_byte = 0
        self._length = 0
        self._remaining = 0
        self._code_point = 0

    @property
    def byte_offset(self) -> int:
        """Number of bytes consumed so far."""
        return self._offset

    def __iter__(self) -> "UTF8Decoder":
        return self

    def __next__(self) -> str:
        if self._bytes is None:
            raise TypeError("decoder was created without a byte source")

        while not self._ready:
            if self._exhausted:
                raise StopIteration
            byte = next(self._bytes, None)
            if byte is None:
                self._exhausted = True
                self._ready.extend(self.finish())
            else:
                self._ready.extend(self.feed(byte))
        return self._ready.popleft()

    def feed(self, byte: int) -> str:
        """
        Consumes one byte and returns the characters it completes.

        Returns "" while a multi-byte sequence is still open. In replace mode
        a byte that interrupts a sequence yields U+FFFD followed by whatever
        the byte decodes to on its own.
        """
        offset = self._offset
        self._offset += 1

        if self._remaining:
            if byte & 0xC0 == 0x80:
                if self._remaining == self._length - 1:
                    bounds = _SECOND_BYTE_RANGES.get(self._lead_byte)
                    if bounds is not None and not (
                        bounds[0] <= byte <= bounds[1]
                    ):
                        self._remaining = 0
                        bad = self._invalid(bounds[2], self._start)
                        return bad + self._lead(byte, offset)
                self._code_point = (self._code_point << 6) | (byte & 0x3F)
                self._remaining -= 1
                if self._remaining:
                    return ""
                return chr(self._code_point)

            self._remaining = 0
            bad = self._invalid("Invalid continuation byte", offset)
            return bad + self._lead(byte, offset)

        return self._lead(byte, offset)

    def finish(self) -> str:
        """Signals end of input; reports a sequence left open."""
        if self._remaining:
            self._remaining = 0
            return self._invalid("Truncated UTF-8 sequence", self._start)
        return ""

    def close(self) -> None:
        """Releases the byte source."""
        self._exhausted = True
        self._ready.clear()
        close = getattr(self._bytes, "close", None)
        if close is not None:
            close()

    def _lead(self, byte: int, offset: int) -> str:
        if byte < 0x80:
            return chr(byte)
        if byte in (0xC0, 0xC1):
            return self._invalid("Overlong encoding", offset)
        if 0xF5 <= byte <= 0xF7:
            return self._invalid("Code point out of range", offset)

        if byte & 0xE0 == 0xC0:
            length, bits = 2, byte & 0x1F
        elif byte & 0xF0 == 0xE0:
            length, bits = 3, byte & 0x0F
        elif byte & 0xF8 == 0xF0:
            length, bits = 4, byte & 0x07
        else:
            return self._invalid("Invalid start byte", offset)

        self._start = offset
        self._lead_byte = byte
        self._length = length
        self._remaining = length - 1
        self._code_point = bits
        return ""

    def _invalid(self, reason: str, offset: int) -> str:
        if self.errors == "strict":
            raise UTF8DecodeError(reason, offset)
        if self.errors == "replace":
            return REPLACEMENT_CHAR
        return ""
