"""CLI entrypoint.

Usage::

    python -m staticbundle [options] DIR [DIR ...]

Every directory becomes one module inside the package directory
(``./staticfs`` by default).  A directory that fails is reported and skipped;
the others are still written.
"""

from __future__ import annotations

import argparse
import os
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import Sequence

from .builder import Bundle, build_bundle
from .codec import DEFAULT_ENCODING, DEFAULT_LEVEL, ENCODINGS, EntryCodec
from .naming import derive_file_stem, derive_identifier, module_name_for, python_name
from .render import accessor_names, render_module, render_package_init
from .report import Reporter, fmt_size
from .walk import iter_source_entries

DEFAULT_PACKAGE = "staticfs"


@dataclass(frozen=True)
class BundleOptions:
    dirs: tuple[str, ...]
    package_name: str = DEFAULT_PACKAGE
    output_dir: Path = Path(".")
    encoding: str = DEFAULT_ENCODING
    level: int = DEFAULT_LEVEL
    full_paths: bool = False
    exclude: tuple[str, ...] = ()
    with_list: bool = True
    quiet: bool = False

    @property
    def package_dir(self) -> Path:
        return self.output_dir / self.package_name

    def codec(self) -> EntryCodec:
        return EntryCodec.named(self.encoding, self.level)


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="staticbundle",
        description=(
            "Compress every file under the given directories and embed them "
            "in a generated Python package."
        ),
    )

    p.add_argument("dirs", nargs="*", metavar="DIR", help="Directories to embed.")

    p.add_argument(
        "-p",
        "--pkgname",
        default=DEFAULT_PACKAGE,
        help=f"Name of the package to create (default: {DEFAULT_PACKAGE}).",
    )

    p.add_argument(
        "-o",
        "--output-dir",
        type=Path,
        default=Path("."),
        help="Directory in which the package directory is created (default: current directory).",
    )

    p.add_argument(
        "-e",
        "--encoding",
        default=DEFAULT_ENCODING,
        choices=sorted(ENCODINGS),
        help=f"Text encoding of the embedded data (default: {DEFAULT_ENCODING}).",
    )

    p.add_argument(
        "-l",
        "--level",
        type=int,
        default=DEFAULT_LEVEL,
        help=f"gzip compression level 0 to 9 (default: {DEFAULT_LEVEL}).",
    )

    p.add_argument(
        "--full-paths",
        action="store_true",
        help="Key files by their path as given on the command line instead of relative to the directory.",
    )

    p.add_argument(
        "-x",
        "--exclude",
        action="append",
        default=[],
        metavar="PATTERN",
        help="Skip files and directories matching this glob (repeatable).",
    )

    p.add_argument(
        "--no-list",
        action="store_true",
        help="Do not generate the List<Name> accessor.",
    )

    p.add_argument(
        "-q",
        "--quiet",
        action="store_true",
        help="Only print errors.",
    )

    return p


def parse_options(argv: Sequence[str] | None = None) -> BundleOptions:
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.dirs:
        parser.error("need to specify at least one directory")
    if not args.pkgname.isidentifier():
        parser.error(f"package name must be a valid identifier: {args.pkgname!r}")
    if not 0 <= args.level <= 9:
        parser.error(f"--level must be between 0 and 9, got {args.level}")

    return BundleOptions(
        dirs=tuple(args.dirs),
        package_name=args.pkgname,
        output_dir=args.output_dir,
        encoding=args.encoding,
        level=args.level,
        full_paths=args.full_paths,
        exclude=tuple(args.exclude),
        with_list=not args.no_list,
        quiet=args.quiet,
    )


def name_source_for(root: str) -> str:
    """Pick the string names are derived from.

    Arguments such as ``.`` or ``../`` contain no letters; fall back to the
    resolved directory name for those.
    """
    if derive_file_stem(root) and derive_identifier(root):
        return root
    return Path(root).resolve().name


def write_text_atomic(path: Path, text: str) -> None:
    fd, tmp = tempfile.mkstemp(prefix=f".{path.stem}.", suffix=".tmp", dir=path.parent)
    try:
        with os.fdopen(fd, "w", encoding="utf-8", newline="\n") as f_out:
            f_out.write(text)
        os.replace(tmp, path)
    except BaseException:
        try:
            os.unlink(tmp)
        except OSError:
            pass
        raise


def write_root(
    root: str,
    options: BundleOptions,
    reporter: Reporter,
    taken: dict[str, str],
    claimed: dict[str, str],
) -> Bundle:
    """Build and write the module for one root directory.

    ``taken`` maps module names already written in this run to their root,
    ``claimed`` does the same for root identifiers (which name the
    accessors); both are updated on success.  Raises ``OSError`` or
    ``ValueError`` when the root cannot be processed at all.
    """
    items = iter_source_entries(
        root,
        full_paths=options.full_paths,
        exclude=options.exclude,
        skip_dirs=(options.package_dir,),
    )
    bundle = build_bundle(
        root,
        items,
        codec=options.codec(),
        package_name=options.package_name,
        name_source=name_source_for(root),
        reporter=reporter,
    )
    if not bundle.ok:
        raise ValueError(f"{len(bundle.failures)} file(s) could not be embedded")
    if not bundle.root_identifier:
        raise ValueError("no letters to derive a name from")

    module = module_name_for(bundle.file_stem)
    if module in taken:
        raise ValueError(f"module name {module!r} is already used by {taken[module]!r}")
    ident = python_name(bundle.root_identifier)
    if ident in claimed:
        raise ValueError(f"name {ident!r} is already used by {claimed[ident]!r}")

    dest = options.package_dir / f"{module}.py"
    get_name, *_ = accessor_names(bundle.root_identifier, with_list=options.with_list)
    reporter.info(
        f"{len(bundle.entries)} file(s), {fmt_size(bundle.raw_size)} -> "
        f"{fmt_size(bundle.compressed_size)} compressed, {fmt_size(bundle.encoded_size)} encoded"
    )
    if options.with_list:
        reporter.info(
            f"saving to {str(dest)!r}, usable with function {get_name} and List{bundle.root_identifier}"
        )
    else:
        reporter.info(f"saving to {str(dest)!r}, usable with function {get_name}")

    write_text_atomic(dest, render_module(bundle, with_list=options.with_list))
    taken[module] = root
    claimed[ident] = root
    return bundle


def run(options: BundleOptions, reporter: Reporter) -> int:
    try:
        options.package_dir.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        reporter.error(f"Couldn't create package directory: {exc}")
        return 1
    reporter.info(f"Using directory {str(options.package_dir)!r} for package {options.package_name!r}")

    taken: dict[str, str] = {}
    claimed: dict[str, str] = {}
    written: list[tuple[str, str]] = []
    failed = 0
    for root in options.dirs:
        try:
            bundle = write_root(root, options, reporter, taken, claimed)
        except (OSError, ValueError) as exc:
            reporter.error(f"Failed to snapshot {root!r}, {exc}")
            failed += 1
            continue
        written.append((module_name_for(bundle.file_stem), bundle.root_identifier))

    if written:
        init_path = options.package_dir / "__init__.py"
        try:
            write_text_atomic(
                init_path,
                render_package_init(options.package_name, written, with_list=options.with_list),
            )
        except OSError as exc:
            reporter.error(f"Couldn't write {str(init_path)!r}: {exc}")
            return 1

    if failed:
        reporter.error(f"{failed} of {len(options.dirs)} root(s) failed")
        return 1
    return 0


def main(argv: list[str] | None = None) -> int:
    options = parse_options(argv)
    return run(options, Reporter(quiet=options.quiet))
