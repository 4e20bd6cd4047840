"""Assemble the encoded entries of one root directory into a :class:`Bundle`.

The builder is the only place where per-file problems are absorbed: an
unreadable file or a compression failure is reported, the file is left out
and the bundle is marked as failed.  The caller then decides whether to
write it.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable

from .codec import CodecError, EntryCodec
from .naming import derive_file_stem, derive_identifier
from .report import Reporter
from .walk import ReadFailure, SourceEntry


@dataclass(frozen=True)
class EncodedEntry:
    path: str
    text: str


@dataclass
class Bundle:
    """Everything the renderer needs for one root directory."""

    root: str
    root_identifier: str
    file_stem: str
    package_name: str
    encoding: str
    entries: dict[str, EncodedEntry] = field(default_factory=dict)
    failures: list[str] = field(default_factory=list)
    raw_size: int = 0
    compressed_size: int = 0
    encoded_size: int = 0

    @property
    def ok(self) -> bool:
        return not self.failures

    def texts(self) -> dict[str, str]:
        """Path -> encoded text, sorted by path."""
        return {path: self.entries[path].text for path in sorted(self.entries)}


def build_bundle(
    root: str,
    items: Iterable[SourceEntry | ReadFailure],
    *,
    codec: EntryCodec,
    package_name: str,
    name_source: str | None = None,
    reporter: Reporter | None = None,
) -> Bundle:
    """Encode every item and collect the results.

    ``name_source`` overrides the string the stem and identifier are derived
    from; it defaults to ``root``.
    """
    reporter = reporter or Reporter(quiet=True)
    source = root if name_source is None else name_source
    bundle = Bundle(
        root=root,
        root_identifier=derive_identifier(source),
        file_stem=derive_file_stem(source),
        package_name=package_name,
        encoding=codec.encoding.name,
    )

    for item in items:
        if isinstance(item, ReadFailure):
            reporter.error(str(item))
            bundle.failures.append(str(item))
            continue

        if item.path in bundle.entries:
            message = f"duplicate entry {item.path!r}"
            reporter.error(message)
            bundle.failures.append(message)
            continue

        try:
            compressed = codec.compress(item.raw, name=item.path)
        except CodecError as exc:
            reporter.error(str(exc))
            bundle.failures.append(str(exc))
            continue
        text = codec.encoding.encode(compressed)

        encoded_size = len(text.encode("utf-8"))
        bundle.raw_size += len(item.raw)
        bundle.compressed_size += len(compressed)
        bundle.encoded_size += encoded_size
        bundle.entries[item.path] = EncodedEntry(item.path, text)
        reporter.file_row(len(item.raw), encoded_size, item.path)

    return bundle
