"""
Streaming JSON tokenizer.

Turns a character or byte stream into a lazy sequence of JSON lexical tokens
without materializing the document. Bytes are decoded by an incremental
UTF-8 decoder; characters drive a pushdown automaton that emits one token
per pull.
"""

from collections.abc import Iterable
from collections.abc import Iterator
from typing import IO
from typing import Any

from jtok._errors import JSONDecodeError
from jtok._errors import JSONSyntaxError
from jtok._errors import NumericConversionError
from jtok._errors import PrematureTermination
from jtok._errors import ResourceLimitError
from jtok._errors import UTF8DecodeError
from jtok._profile import HotPathStats
from jtok._profile import clear_hot_path_stats
from jtok._profile import get_hot_path_stats
from jtok._tokenizer import StreamStatus
from jtok._tokenizer import TokenStream
from jtok._types import ARRAY_END
from jtok._types import ARRAY_START
from jtok._types import FALSE
from jtok._types import NULL
from jtok._types import OBJECT_END
from jtok._types import OBJECT_START
from jtok._types import TRUE
from jtok._types import Mark
from jtok._types import Token
from jtok._types import TokenizeConfig
from jtok._types import TokenType
from jtok._utf8_decoder import DEFAULT_CHUNK_SIZE
from jtok._utf8_decoder import ByteSource
from jtok._utf8_decoder import UTF8Decoder

__version__ = "0.1.0"


def tokenize(chars: str | Iterable[str], **kwargs: Any) -> TokenStream:
    """
    Opens a token stream over characters.

    Accepts a str or any iterable of strings, single characters or chunks.
    Keyword arguments configure the stream through TokenizeConfig.
    """
    if isinstance(chars, bytes | bytearray | memoryview):
        raise TypeError(
            "tokenize() requires str, not bytes; use tokenize_bytes()"
        )

    config = TokenizeConfig(**kwargs)
    return TokenStream(chars, config)


def tokenize_bytes(
    data: ByteSource, *, errors: str = "strict", **kwargs: Any
) -> TokenStream:
    """
    Opens a token stream over UTF-8 encoded bytes.

    Accepts bytes-like objects, binary file-like objects and iterables of
    ints or bytes chunks. errors selects how malformed UTF-8 is handled:
    "strict", "replace" or "ignore".
    """
    config = TokenizeConfig(**kwargs)
    return TokenStream(UTF8Decoder(data, errors), config, close_source=True)


def _read_chunks(fp: IO[Any], first: Any, chunk_size: int) -> Iterator[Any]:
    chunk = first
    while chunk:
        yield chunk
        chunk = fp.read(chunk_size)


def load(
    fp: IO[str] | IO[bytes],
    *,
    errors: str = "strict",
    chunk_size: int = DEFAULT_CHUNK_SIZE,
    **kwargs: Any,
) -> TokenStream:
    """
    Opens a token stream over a text or binary file-like object.

    The file is read lazily, chunk_size units at a time, as tokens are
    pulled. Binary files are decoded as UTF-8 with the given errors mode.
    Closing the stream does not close fp.
    """
    if not hasattr(fp, "read"):
        raise TypeError("fp must have a read() method")
    if not isinstance(chunk_size, int) or chunk_size < 1:
        raise ValueError("chunk_size must be a positive integer")

    config = TokenizeConfig(**kwargs)
    first = fp.read(chunk_size)
    if isinstance(first, str):
        return TokenStream(
            _read_chunks(fp, first, chunk_size), config, close_source=True
        )

    decoder = UTF8Decoder(_read_chunks(fp, first, chunk_size), errors)
    return TokenStream(decoder, config, close_source=True)


__all__ = [
    "ARRAY_END",
    "ARRAY_START",
    "DEFAULT_CHUNK_SIZE",
    "FALSE",
    "NULL",
    "OBJECT_END",
    "OBJECT_START",
    "TRUE",
    "ByteSource",
    "HotPathStats",
    "JSONDecodeError",
    "JSONSyntaxError",
    "Mark",
    "NumericConversionError",
    "PrematureTermination",
    "ResourceLimitError",
    "StreamStatus",
    "Token",
    "TokenStream",
    "TokenType",
    "TokenizeConfig",
    "UTF8DecodeError",
    "UTF8Decoder",
    "clear_hot_path_stats",
    "get_hot_path_stats",
    "load",
    "tokenize",
    "tokenize_bytes",
]
