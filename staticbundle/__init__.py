"""Embed directory trees into generated Python modules.

``staticbundle`` walks one or more directories, gzips every file, turns the
compressed bytes into text and writes a package with one module per
directory.  The generated modules only need the standard library: they
decode their table on first use and serve the files from memory.

Example
-------

From the command line::

    python -m staticbundle static templates

creates ``staticfs/static.py`` and ``staticfs/templates.py``.  Then::

    from staticfs import GetStatic

    stream, found = GetStatic("css/site.css")

The pieces are usable on their own as well::

    from staticbundle import encode, decode

    text = encode(b"hello", "base64")
    assert decode(text, "base64") == b"hello"
"""

from .builder import Bundle, EncodedEntry, build_bundle
from .codec import (
    RADIX64,
    RADIX256,
    CodecError,
    CompressionError,
    CorruptEntryError,
    EntryCodec,
    TextEncoding,
    decode,
    encode,
)
from .naming import derive_file_stem, derive_identifier
from .render import render, render_module, render_package_init
from .walk import ReadFailure, SourceEntry, iter_source_entries

__all__ = [
    "Bundle",
    "EncodedEntry",
    "build_bundle",
    "RADIX64",
    "RADIX256",
    "CodecError",
    "CompressionError",
    "CorruptEntryError",
    "EntryCodec",
    "TextEncoding",
    "decode",
    "encode",
    "derive_file_stem",
    "derive_identifier",
    "render",
    "render_module",
    "render_package_init",
    "ReadFailure",
    "SourceEntry",
    "iter_source_entries",
]
