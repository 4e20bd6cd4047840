"""Compress file contents and turn them into text that can live in source code.

The pipeline is ``raw bytes -> gzip -> text`` and back.  Compression is
always gzip (DEFLATE with gzip framing).  The text step is pluggable through
:class:`TextEncoding`; two strategies are provided:

``base64`` (:data:`RADIX64`)
    The standard Base-64 alphabet with ``=`` padding.  Output is plain ASCII
    and grows by 4/3.

``base256`` (:data:`RADIX256`)
    One character per byte: byte ``b`` becomes ``chr(ord('a') + b)``, so
    output stays the same length as the compressed data.  The characters
    span U+0061..U+0160, which includes the C1 control range, so the text
    must be written out with escapes (``repr``) when embedded in source.

The gzip header carries a modification time.  It is pinned to zero so that
encoding the same bytes twice yields the same text.

Decoding is strict.  A character outside the encoding's alphabet, a broken
DEFLATE stream, a truncated member or a CRC/length mismatch all raise
:class:`CorruptEntryError`; decoding never hands back altered bytes.
"""

from __future__ import annotations

import base64
import binascii
import gzip
import zlib
from dataclasses import dataclass
from typing import Callable

__all__ = [
    "CodecError",
    "CompressionError",
    "CorruptEntryError",
    "TextEncoding",
    "RADIX64",
    "RADIX256",
    "ENCODINGS",
    "DEFAULT_ENCODING",
    "DEFAULT_LEVEL",
    "EntryCodec",
    "compress_bytes",
    "decompress_bytes",
    "get_encoding",
    "encode",
    "decode",
]

DEFAULT_ENCODING = "base256"
DEFAULT_LEVEL = 9

# Offset of the radix-256 alphabet.
BASE256_ORIGIN = ord("a")


class CodecError(ValueError):
    """Base class for encode/decode failures."""


class CompressionError(CodecError):
    """The compressor rejected the input or failed to finish the stream."""


class CorruptEntryError(CodecError):
    """Encoded text could not be turned back into the original bytes."""


def _label(name: str | None) -> str:
    return f" for {name!r}" if name else ""


# -----------------------------------------------------------------------------
# Compression
#
def compress_bytes(data: bytes, level: int = DEFAULT_LEVEL, *, name: str | None = None) -> bytes:
    """Gzip ``data`` into a single member with a zeroed timestamp."""
    if not isinstance(data, (bytes, bytearray, memoryview)):
        raise TypeError("data must be bytes-like")
    if not 0 <= level <= 9:
        raise ValueError(f"compression level must be between 0 and 9, got {level}")
    try:
        return gzip.compress(bytes(data), compresslevel=level, mtime=0)
    except (zlib.error, OSError) as exc:
        raise CompressionError(f"couldn't compress{_label(name)}: {exc}") from exc


def decompress_bytes(data: bytes, *, name: str | None = None) -> bytes:
    """Gunzip ``data``; any malformed or truncated stream is an error."""
    if not isinstance(data, (bytes, bytearray, memoryview)):
        raise TypeError("data must be bytes-like")
    if not data:
        raise CorruptEntryError(f"empty gzip stream{_label(name)}")
    try:
        return gzip.decompress(bytes(data))
    except (OSError, EOFError, zlib.error) as exc:
        raise CorruptEntryError(f"couldn't decompress{_label(name)}: {exc}") from exc


# -----------------------------------------------------------------------------
# Text encodings
#
def _b64_encode(data: bytes) -> str:
    return base64.b64encode(data).decode("ascii")


def _b64_decode(text: str) -> bytes:
    try:
        return base64.b64decode(text.encode("ascii"), validate=True)
    except UnicodeEncodeError as exc:
        raise ValueError(f"non-ASCII character at position {exc.start}") from exc
    except binascii.Error as exc:
        raise ValueError(str(exc)) from exc


def _b256_encode(data: bytes) -> str:
    return "".join(chr(BASE256_ORIGIN + b) for b in data)


def _b256_decode(text: str) -> bytes:
    out = bytearray(len(text))
    for i, ch in enumerate(text):
        value = ord(ch) - BASE256_ORIGIN
        if not 0 <= value <= 0xFF:
            raise ValueError(f"character U+{ord(ch):04X} at position {i} is outside the base256 range")
        out[i] = value
    return bytes(out)


@dataclass(frozen=True)
class TextEncoding:
    """A reversible mapping between compressed bytes and embeddable text."""

    name: str
    to_text: Callable[[bytes], str]
    from_text: Callable[[str], bytes]

    def encode(self, data: bytes) -> str:
        return self.to_text(bytes(data))

    def decode(self, text: str, *, name: str | None = None) -> bytes:
        try:
            return self.from_text(text)
        except ValueError as exc:
            raise CorruptEntryError(f"invalid {self.name} text{_label(name)}: {exc}") from exc


RADIX64 = TextEncoding("base64", _b64_encode, _b64_decode)
RADIX256 = TextEncoding("base256", _b256_encode, _b256_decode)

ENCODINGS: dict[str, TextEncoding] = {
    RADIX64.name: RADIX64,
    RADIX256.name: RADIX256,
}


def get_encoding(encoding: str | TextEncoding) -> TextEncoding:
    if isinstance(encoding, TextEncoding):
        return encoding
    try:
        return ENCODINGS[encoding]
    except KeyError:
        choices = ", ".join(sorted(ENCODINGS))
        raise ValueError(f"unknown encoding {encoding!r} (choose from {choices})") from None


# -----------------------------------------------------------------------------
# Codec
#
@dataclass(frozen=True)
class EntryCodec:
    """Compression level plus text encoding, applied to one entry at a time."""

    encoding: TextEncoding = RADIX256
    level: int = DEFAULT_LEVEL

    def __post_init__(self) -> None:
        if not 0 <= self.level <= 9:
            raise ValueError(f"compression level must be between 0 and 9, got {self.level}")

    @classmethod
    def named(cls, encoding: str = DEFAULT_ENCODING, level: int = DEFAULT_LEVEL) -> "EntryCodec":
        return cls(get_encoding(encoding), level)

    def compress(self, raw: bytes, *, name: str | None = None) -> bytes:
        return compress_bytes(raw, self.level, name=name)

    def encode(self, raw: bytes, *, name: str | None = None) -> str:
        return self.encoding.encode(self.compress(raw, name=name))

    def decode(self, text: str, *, name: str | None = None) -> bytes:
        return decompress_bytes(self.encoding.decode(text, name=name), name=name)


def encode(raw: bytes, encoding: str | TextEncoding = DEFAULT_ENCODING, level: int = DEFAULT_LEVEL) -> str:
    """Compress ``raw`` and return it as text in the given encoding."""
    return EntryCodec(get_encoding(encoding), level).encode(raw)


def decode(text: str, encoding: str | TextEncoding = DEFAULT_ENCODING) -> bytes:
    """Inverse of :func:`encode`."""
    return EntryCodec(get_encoding(encoding)).decode(text)
