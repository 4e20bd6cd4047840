"""Progress and error output.

Informational lines go to stdout prefixed with ``[info]``; errors go to
stderr prefixed with ``[error]``.  ``quiet`` silences the former only.
"""

from __future__ import annotations

import sys
from dataclasses import dataclass, field
from typing import TextIO


def fmt_size(n: float) -> str:
    for unit in ("B", "KB", "MB", "GB"):
        if n < 1024:
            return f"{n:.1f} {unit}" if unit != "B" else f"{int(n)} {unit}"
        n /= 1024
    return f"{n:.1f} TB"


@dataclass
class Reporter:
    quiet: bool = False
    out: TextIO = field(default_factory=lambda: sys.stdout)
    err: TextIO = field(default_factory=lambda: sys.stderr)

    def info(self, message: str) -> None:
        if not self.quiet:
            print(f"[info] {message}", file=self.out)

    def error(self, message: str) -> None:
        print(f"[error] {message}", file=self.err)

    def file_row(self, raw_size: int, encoded_size: int, path: str) -> None:
        # e.g. "[info]    5.3 KB  ->    2.0 KB  'css/site.css'"
        self.info(f"{fmt_size(raw_size):>10}  ->  {fmt_size(encoded_size):>10}  {path!r}")
