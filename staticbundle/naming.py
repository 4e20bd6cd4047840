"""Derive output names from a directory argument.

Two pure functions turn an arbitrary path string into names for the
generated code:

* :func:`derive_file_stem` gives the snake form used as the base filename
  of the generated module (``my-assets/dir`` -> ``my_assets_dir``).
* :func:`derive_identifier` gives the camel form appended to the accessor
  prefixes (``my-assets/dir`` -> ``MyAssetsDir``, used as ``GetMyAssetsDir``).

Only letters survive.  Everything else is a word boundary.
"""

from __future__ import annotations

import keyword
import unicodedata

SEPARATOR = "_"


def derive_file_stem(path: str) -> str:
    """Return the snake-case stem for ``path``.

    Every run of non-letters collapses to one separator.  Runs at the start
    or the end of the input produce nothing, so the result never starts or
    ends with a separator and never doubles one.
    """
    out: list[str] = []
    pending = False
    for ch in path:
        if ch.isalpha():
            if pending and out:
                out.append(SEPARATOR)
            pending = False
            out.append(ch)
        else:
            pending = True
    return "".join(out)


def derive_identifier(path: str) -> str:
    """Return the camel-case identifier for ``path``.

    The first letter of every word is uppercased and separators are dropped.
    """
    out: list[str] = []
    capitalize = True
    for ch in path:
        if not ch.isalpha():
            capitalize = True
            continue
        if capitalize:
            out.append(ch.upper())
            capitalize = False
        else:
            out.append(ch)
    return "".join(out)


def python_name(name: str) -> str:
    """Return ``name`` the way the Python parser spells it (NFKC-normalized).

    Identifiers in source are normalized on import, so ``\ufb01les`` (with the
    ligature) is looked up as ``files``.
    """
    return unicodedata.normalize("NFKC", name)


def module_name_for(stem: str) -> str:
    """Map a file stem to an importable module name."""
    if not stem:
        raise ValueError("cannot name a module after an empty stem")
    name = python_name(stem)
    if not name.isidentifier():
        raise ValueError(f"{stem!r} does not make a valid module name")
    if keyword.iskeyword(name):
        return name + SEPARATOR
    return name
