"""Walk a directory tree and read every regular file under it.

:func:`iter_source_entries` yields one item per file, in sorted order:
a :class:`SourceEntry` when the file could be read, or a
:class:`ReadFailure` when it (or a directory on the way) could not.  Read
problems are reported per item instead of aborting the walk, so the caller
decides what a failure means for the whole bundle.
"""

from __future__ import annotations

import fnmatch
import os
import stat
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator, Sequence


@dataclass(frozen=True)
class SourceEntry:
    """One file: its bundle key and its raw contents."""

    path: str
    raw: bytes


@dataclass(frozen=True)
class ReadFailure:
    """A file or directory that could not be read."""

    path: str
    error: OSError

    def __str__(self) -> str:
        return f"couldn't read {self.path!r}: {self.error}"


def is_excluded(key: str, patterns: Sequence[str]) -> bool:
    """Match ``key`` and each of its components against fnmatch ``patterns``."""
    if not patterns:
        return False
    names = [key, *key.split("/")]
    return any(fnmatch.fnmatchcase(name, pat) for name in names for pat in patterns)


def _key(rel_parts: Sequence[str], prefix: str) -> str:
    key = "/".join(part for part in rel_parts if part and part != os.curdir)
    if prefix:
        return f"{prefix}/{key}" if key else prefix
    return key


def iter_source_entries(
    root: Path | str,
    *,
    full_paths: bool = False,
    exclude: Sequence[str] = (),
    skip_dirs: Sequence[Path | str] = (),
) -> Iterator[SourceEntry | ReadFailure]:
    """Yield the files under ``root`` (recursively).

    Parameters
    ----------
    root : Path or str
        Directory to walk.  Must exist.
    full_paths : bool, optional
        Key entries by the path as reached from ``root`` as given
        (``static/css/site.css``) instead of relative to it (``css/site.css``).
    exclude : sequence of str, optional
        fnmatch patterns.  A file is skipped when its key or any component of
        it matches; a matching directory is not descended into.
    skip_dirs : sequence of Path or str, optional
        Directories never descended into, compared after resolving symlinks.
        Used to keep the generated package out of its own input.

    Only regular files (or symlinks to them) are read; FIFOs, sockets and
    device nodes are skipped.
    """
    root_str = os.fspath(root)
    if not os.path.isdir(root_str):
        raise NotADirectoryError(f"not a directory: {root_str}")

    prefix = Path(root_str).as_posix().rstrip("/") if full_paths else ""
    if prefix in (".", ""):
        prefix = ""

    skipped = {os.path.realpath(d) for d in skip_dirs}
    walk_errors: list[OSError] = []

    for dirpath, dirnames, filenames in os.walk(root_str, onerror=walk_errors.append):
        while walk_errors:
            exc = walk_errors.pop(0)
            where = exc.filename or dirpath
            rel = os.path.relpath(where, root_str)
            yield ReadFailure(_key(rel.split(os.sep), prefix) or root_str, exc)

        rel_dir = os.path.relpath(dirpath, root_str)
        rel_parts = [] if rel_dir == os.curdir else rel_dir.split(os.sep)

        # Prune in place so os.walk skips excluded directories; sort for a stable order.
        dirnames[:] = sorted(
            d
            for d in dirnames
            if not is_excluded(_key([*rel_parts, d], ""), exclude)
            and not (skipped and os.path.realpath(os.path.join(dirpath, d)) in skipped)
        )

        for filename in sorted(filenames):
            rel_key = _key([*rel_parts, filename], "")
            if is_excluded(rel_key, exclude):
                continue
            key = _key([*rel_parts, filename], prefix)
            file_path = os.path.join(dirpath, filename)
            try:
                if not stat.S_ISREG(os.stat(file_path).st_mode):
                    continue
                with open(file_path, "rb") as f_in:
                    data = f_in.read()
            except OSError as exc:
                yield ReadFailure(key, exc)
                continue
            yield SourceEntry(key, data)

    # Errors raised while listing the last directories visited.
    for exc in walk_errors:
        rel = os.path.relpath(exc.filename or root_str, root_str)
        yield ReadFailure(_key(rel.split(os.sep), prefix) or root_str, exc)
