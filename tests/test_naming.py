import pytest

from staticbundle.naming import SEPARATOR, derive_file_stem, derive_identifier, module_name_for

SAMPLES = [
    "",
    "a",
    "-",
    "static",
    "my-assets/dir",
    "./static/",
    "../../web//public__html/",
    "__init__",
    "2024",
    "a1b2c3",
    "  spaced out  ",
    "trailing-",
    "-leading",
    "x-",
    "dir.with.dots",
    "Ünïcode-päth/ok",
    "C:\\Users\\me\\assets",
]


@pytest.mark.parametrize(
    "path, expected",
    [
        ("my-assets/dir", "my_assets_dir"),
        ("static", "static"),
        ("./static/", "static"),
        ("a--b", "a_b"),
        ("-a-", "a"),
        ("x-", "x"),
        ("a", "a"),
        ("web/public_html", "web_public_html"),
        ("", ""),
        ("1234", ""),
        ("./", ""),
    ],
)
def test_derive_file_stem(path, expected):
    assert derive_file_stem(path) == expected


@pytest.mark.parametrize(
    "path, expected",
    [
        ("static", "Static"),
        ("my-assets/dir", "MyAssetsDir"),
        ("helloWorld", "HelloWorld"),
        ("a1b", "AB"),
        ("./static/", "Static"),
        ("x", "X"),
        ("", ""),
        ("../..", ""),
    ],
)
def test_derive_identifier(path, expected):
    assert derive_identifier(path) == expected


@pytest.mark.parametrize("path", SAMPLES)
def test_file_stem_has_no_stray_separators(path):
    stem = derive_file_stem(path)
    assert not stem.startswith(SEPARATOR)
    assert not stem.endswith(SEPARATOR)
    assert SEPARATOR * 2 not in stem


@pytest.mark.parametrize("path", SAMPLES)
def test_identifier_is_letters_only(path):
    ident = derive_identifier(path)
    assert all(ch.isalpha() for ch in ident)
    if ident and ident[0].isascii():
        assert ident[0].isupper()


@pytest.mark.parametrize("path", SAMPLES)
def test_derivation_is_deterministic(path):
    assert derive_file_stem(path) == derive_file_stem(path)
    assert derive_identifier(path) == derive_identifier(path)


def test_stem_and_identifier_keep_the_same_letters():
    path = "my-assets/dir"
    assert derive_file_stem(path).replace(SEPARATOR, "").lower() == derive_identifier(path).lower()


def test_module_name_for_keywords():
    assert module_name_for("static") == "static"
    assert module_name_for("class") == "class_"
    assert module_name_for("import") == "import_"


def test_module_name_for_empty_stem():
    with pytest.raises(ValueError):
        module_name_for("")


def test_module_name_for_is_nfkc_normalized():
    # "ﬁ" is the "fi" ligature; the import system would look for "files".
    assert module_name_for("ﬁles") == "files"
    assert module_name_for("ｓtatic") == "static"


def test_module_name_for_rejects_non_identifiers():
    with pytest.raises(ValueError):
        module_name_for("a-b")
