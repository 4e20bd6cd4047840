"""Turn a bundle into Python source.

Each root directory becomes one standalone module that depends only on the
standard library.  For a root identifier ``Static`` the module exposes:

``LoadStatic()``
    Decodes every embedded entry on first call (under a lock) and returns a
    read-only ``path -> bytes`` mapping.  Later calls return the same
    mapping.  If any entry fails to decode, the error propagates and nothing
    is published, so no lookup is ever served from a half-decoded table.

``GetStatic(path)``
    ``(io.BytesIO, True)`` for a known path, ``(io.BytesIO(b""), False)``
    otherwise.

``ListStatic()``
    A fresh ``io.BytesIO`` for every entry, keyed by path.

Encoded texts are written with :func:`repr`, which escapes the control
characters the base256 alphabet can produce, so the literal round-trips
every code point exactly.
"""

from __future__ import annotations

import io
from typing import Any, Iterable, Mapping

from .builder import Bundle
from .naming import python_name

GENERATED_HEADER = "# Code generated by staticbundle. DO NOT EDIT."

# Source of the per-encoding text decoder embedded in every module.  The
# gzip step is shared and follows it.
_TEXT_DECODERS = {
    "base64": (
        "import base64",
        [
            "def _from_text(text):",
            "    return base64.b64decode(text.encode(\"ascii\"), validate=True)",
        ],
    ),
    "base256": (
        None,
        [
            "def _from_text(text):",
            "    return bytes(ord(ch) - 97 for ch in text)",
        ],
    ),
}


def _docstring_body(text: str) -> str:
    # Body of a """-quoted literal whose value is exactly ``text``.
    return text.replace("\\", "\\\\").replace('"', '\\"')


def accessor_names(root_identifier: str, *, with_list: bool = True) -> list[str]:
    root_identifier = python_name(root_identifier)
    names = [f"Get{root_identifier}", f"Load{root_identifier}"]
    if with_list:
        names.insert(1, f"List{root_identifier}")
    return names


def render(
    package_name: str,
    root_identifier: str,
    entries: Mapping[str, str],
    *,
    encoding: str,
    with_list: bool = True,
    source: str | None = None,
) -> str:
    """Render one module embedding ``entries`` (path -> encoded text)."""
    root_identifier = python_name(root_identifier)
    if not root_identifier.isidentifier():
        raise ValueError(f"invalid root identifier: {root_identifier!r}")
    try:
        text_import, text_decoder = _TEXT_DECODERS[encoding]
    except KeyError:
        raise ValueError(f"no runtime decoder for encoding {encoding!r}") from None

    get_name = f"Get{root_identifier}"
    list_name = f"List{root_identifier}"
    load_name = f"Load{root_identifier}"
    table = f"_COMPRESSED_{root_identifier}"
    cache = f"_DECOMPRESSED_{root_identifier}"
    lock = f"_LOCK_{root_identifier}"
    decode = f"_decode_{root_identifier}"

    buf = io.StringIO()

    def p(*args: Any) -> None:
        print(*args, file=buf)

    p(GENERATED_HEADER)
    p(f"# Package: {package_name}")
    if source is not None:
        p(f"# Source directory: {source!r}")
    p(f"# Encoding: gzip + {encoding}")
    doc = [f"Files embedded at build time, served by {get_name}.", ""]
    if entries:
        doc.append("Entries:")
        doc.extend(f"    {path!r}" for path in sorted(entries))
    else:
        doc.append("No entries.")
    p('"""' + _docstring_body("\n".join(doc)) + '\n"""')
    p()
    p("from __future__ import annotations")
    p()
    imports = ["import gzip", "import io", "import threading", "import types", "import zlib"]
    if text_import:
        imports.insert(0, text_import)
    for line in imports:
        p(line)
    p()
    p(f"__all__ = {accessor_names(root_identifier, with_list=with_list)!r}")
    p()
    p(f"{table} = (")
    for path in sorted(entries):
        p(f"    ({path!r}, {entries[path]!r}),")
    p(")")
    p()
    p(f"{cache} = None")
    p(f"{lock} = threading.Lock()")
    p()
    p()
    for line in text_decoder:
        p(line)
    p()
    p()
    p(f"def {decode}(name, text):")
    p("    try:")
    p("        data = _from_text(text)")
    p("    except ValueError as exc:")
    p(f"        raise ValueError(f\"couldn't decode {encoding} data for {{name!r}}: {{exc}}\") from exc")
    p("    if not data:")
    p("        raise ValueError(f\"empty gzip stream for {name!r}\")")
    p("    try:")
    p("        return gzip.decompress(data)")
    p("    except (OSError, EOFError, zlib.error) as exc:")
    p("        raise ValueError(f\"couldn't decompress gzip data in {name!r}: {exc}\") from exc")
    p()
    p()
    p(f"def {load_name}():")
    p('    """Decode every embedded entry once and return the read-only mapping."""')
    p(f"    global {cache}")
    p(f"    if {cache} is None:")
    p(f"        with {lock}:")
    p(f"            if {cache} is None:")
    p("                decoded = {}")
    p(f"                for name, text in {table}:")
    p(f"                    decoded[name] = {decode}(name, text)")
    p(f"                {cache} = types.MappingProxyType(decoded)")
    p(f"    return {cache}")
    p()
    p()
    p(f"def {get_name}(filename):")
    p('    """Look up an embedded file.')
    p()
    p("    Returns an io.BytesIO over its contents and True if found, an empty")
    p("    stream and False otherwise.")
    p('    """')
    p(f"    data = {load_name}().get(filename)")
    p("    if data is None:")
    p('        return io.BytesIO(b""), False')
    p("    return io.BytesIO(data), True")
    if with_list:
        p()
        p()
        p(f"def {list_name}():")
        p('    """Return every embedded file as a fresh io.BytesIO, keyed by path."""')
        p(f"    return {{name: io.BytesIO(data) for name, data in {load_name}().items()}}")
    return buf.getvalue()


def render_module(bundle: Bundle, *, with_list: bool = True) -> str:
    return render(
        bundle.package_name,
        bundle.root_identifier,
        bundle.texts(),
        encoding=bundle.encoding,
        with_list=with_list,
        source=bundle.root,
    )


def render_package_init(package_name: str, modules: Iterable[tuple[str, str]], *, with_list: bool = True) -> str:
    """Render the package ``__init__.py``.

    ``modules`` holds ``(module name, root identifier)`` pairs.
    """
    buf = io.StringIO()

    def p(*args: Any) -> None:
        print(*args, file=buf)

    exported: list[str] = []
    p(GENERATED_HEADER)
    p(f'"""Embedded files of package {package_name}."""')
    p()
    for module, identifier in sorted(modules):
        names = accessor_names(identifier, with_list=with_list)
        exported.extend(names)
        p(f"from .{module} import {', '.join(names)}")
    p()
    p(f"__all__ = {sorted(exported)!r}")
    return buf.getvalue()
