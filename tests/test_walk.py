import os
import socket

import pytest

from staticbundle.walk import ReadFailure, SourceEntry, is_excluded, iter_source_entries


def test_keys_are_relative_and_slash_separated(make_tree):
    root = make_tree("static", {"a.txt": "hello", "sub/b.txt": "", "sub/deeper/c.bin": b"\x00\xff"})

    items = list(iter_source_entries(root))

    assert items == [
        SourceEntry("a.txt", b"hello"),
        SourceEntry("sub/b.txt", b""),
        SourceEntry("sub/deeper/c.bin", b"\x00\xff"),
    ]


def test_full_paths_keep_the_argument_prefix(make_tree, monkeypatch, tmp_path):
    make_tree("static", {"a.txt": "hello", "sub/b.txt": "bye"})
    monkeypatch.chdir(tmp_path)

    keys = [item.path for item in iter_source_entries("./static/", full_paths=True)]

    assert keys == ["static/a.txt", "static/sub/b.txt"]


def test_full_paths_with_current_directory(make_tree, monkeypatch):
    root = make_tree("static", {"a.txt": "hello"})
    monkeypatch.chdir(root)

    keys = [item.path for item in iter_source_entries(".", full_paths=True)]

    assert keys == ["a.txt"]


def test_empty_directory_yields_nothing(tmp_path):
    (tmp_path / "empty" / "nested").mkdir(parents=True)
    assert list(iter_source_entries(tmp_path / "empty")) == []


def test_missing_root_is_an_error(tmp_path):
    with pytest.raises(NotADirectoryError):
        list(iter_source_entries(tmp_path / "nope"))


def test_file_root_is_an_error(tmp_path):
    target = tmp_path / "file.txt"
    target.write_text("x")
    with pytest.raises(NotADirectoryError):
        list(iter_source_entries(target))


def test_exclude_patterns(make_tree):
    root = make_tree(
        "site",
        {
            "index.html": "<html/>",
            "app.pyc": b"\x00",
            "node_modules/lib/x.js": "x",
            "js/app.js": "y",
            "js/app.js.map": "{}",
        },
    )

    keys = [item.path for item in iter_source_entries(root, exclude=("*.pyc", "node_modules", "*.map"))]

    assert keys == ["index.html", "js/app.js"]


def test_is_excluded_matches_components():
    assert is_excluded("a/.git/config", [".git"])
    assert is_excluded("docs/readme.md", ["docs/*"])
    assert not is_excluded("docs/readme.md", ["*.txt"])
    assert not is_excluded("anything", [])


@pytest.mark.skipif(not hasattr(os, "symlink"), reason="symlinks not supported")
def test_unreadable_file_is_reported_and_walk_continues(make_tree):
    root = make_tree("static", {"a.txt": "hello", "z.txt": "last"})
    try:
        (root / "m.txt").symlink_to(root / "missing.txt")
    except OSError:
        pytest.skip("cannot create symlinks here")

    items = list(iter_source_entries(root))

    assert items[0] == SourceEntry("a.txt", b"hello")
    assert isinstance(items[1], ReadFailure)
    assert items[1].path == "m.txt"
    assert isinstance(items[1].error, OSError)
    assert "m.txt" in str(items[1])
    assert items[2] == SourceEntry("z.txt", b"last")


@pytest.mark.skipif(not hasattr(os, "mkfifo"), reason="named pipes not supported")
def test_fifo_is_skipped(make_tree):
    root = make_tree("static", {"a.txt": "hello"})
    os.mkfifo(root / "pipe")

    assert list(iter_source_entries(root)) == [SourceEntry("a.txt", b"hello")]


@pytest.mark.skipif(not hasattr(socket, "AF_UNIX"), reason="unix sockets not supported")
def test_unix_socket_is_skipped(make_tree):
    root = make_tree("static", {"a.txt": "hello"})
    sock = socket.socket(socket.AF_UNIX, socket.SOCK_STREAM)
    try:
        try:
            sock.bind(str(root / "sock"))
        except OSError:
            pytest.skip("cannot bind a unix socket here")

        items = list(iter_source_entries(root))
    finally:
        sock.close()

    assert items == [SourceEntry("a.txt", b"hello")]


def test_skip_dirs_are_not_descended_into(make_tree, monkeypatch):
    root = make_tree("site", {"a.txt": "x", "gen/__init__.py": "", "gen/site.py": "", "other/b.txt": "y"})
    monkeypatch.chdir(root)

    keys = [item.path for item in iter_source_entries(".", skip_dirs=[root / "gen"])]

    assert keys == ["a.txt", "other/b.txt"]
