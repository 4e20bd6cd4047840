import importlib
import importlib.util
import sys

import pytest


@pytest.fixture
def load_module():
    """Import a generated module straight from its file."""
    loaded = []

    def _load(path, name=None):
        name = name or f"_generated_{path.stem}_{len(loaded)}"
        spec = importlib.util.spec_from_file_location(name, path)
        module = importlib.util.module_from_spec(spec)
        sys.modules[name] = module
        loaded.append(name)
        spec.loader.exec_module(module)
        return module

    yield _load

    for name in loaded:
        sys.modules.pop(name, None)


@pytest.fixture
def import_package(monkeypatch):
    """Import a generated package from ``parent`` and forget it afterwards."""
    imported = []

    def _import(parent, package):
        monkeypatch.syspath_prepend(str(parent))
        importlib.invalidate_caches()
        imported.append(package)
        return importlib.import_module(package)

    yield _import

    for package in imported:
        for name in list(sys.modules):
            if name == package or name.startswith(package + "."):
                del sys.modules[name]


@pytest.fixture
def make_tree(tmp_path):
    """Create files from a ``{relative path: bytes or str}`` mapping."""

    def _make(root_name, files):
        root = tmp_path / root_name
        root.mkdir(parents=True, exist_ok=True)
        for rel, content in files.items():
            target = root / rel
            target.parent.mkdir(parents=True, exist_ok=True)
            if isinstance(content, str):
                content = content.encode("utf-8")
            target.write_bytes(content)
        return root

    return _make
