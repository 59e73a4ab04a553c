import re

import pytest

from patfilter.core.evaluator import (
    DEFAULT_EVALUATOR, Evaluator, effective_position, extension, pad, parent_path, substring,
)
from patfilter.core.models import (
    BaseName, Extension, FileName, Lowercase, Pad, ParentPath, RegexMatch, RegexReplace,
    RemoveNonAscii, Replace, ReplaceEmpty, Substring, ToEnd, ToIndex, ToLength, Transliterate,
    Trim, Uppercase,
)
from patfilter.core.tables import CharTables, build_tables


def ev(flt, value):
    return DEFAULT_EVALUATOR.evaluate(flt, value)


def test_effective_position():
    assert effective_position(2, 5) == 2
    assert effective_position(-1, 5) == 5
    assert effective_position(-5, 5) == 1


@pytest.mark.parametrize("start, end, expected", [
    (2, ToIndex(3), "bc"),
    (-2, ToIndex(-3), "cd"),
    (2, ToLength(3), "bcd"),
    (2, ToEnd(), "bcde"),
    (2, None, "b"),
    (-1, None, "e"),
    (2, ToIndex(-1), "bcde"),
    (-2, ToLength(3), "bcd"),
    (-2, ToEnd(), "abcd"),
    (-3, ToIndex(-2), ""),
    (4, ToIndex(2), ""),
    (2, ToIndex(10), "bcde"),
    (-10, None, "a"),
    (3, ToLength(100), "cde"),
])
def test_substring(start, end, expected):
    assert substring("abcde", start, end) == expected


def test_substring_of_empty_value():
    assert substring("", 1, ToEnd()) == ""
    assert substring("", -1) == ""


def test_substring_counts_code_points():
    assert substring("čďéf", 2, ToIndex(3)) == "ďé"
    assert substring("a😀b", -2) == "😀"


@pytest.mark.parametrize("value", ["a", "abcde", "čďé😀x"])
def test_substring_length_law(value):
    n = len(value)
    for a in range(1, n + 1):
        for b in range(a, n + 1):
            assert len(substring(value, a, ToIndex(b))) == b - a + 1
        assert substring(value, a) == substring(value, a, ToIndex(a))
    assert substring(value, -1) == value[-1]


def test_trim_only_strips_ends():
    assert ev(Trim(), "  a  b\t\n") == "a  b"


def test_trim_strips_unicode_white_space_only():
    assert ev(Trim(), "\u3000\xa0ab\u2028") == "ab"
    assert ev(Trim(), "\x1cab\x1f") == "\x1cab\x1f"


def test_case_filters_use_full_unicode_mapping():
    assert ev(Lowercase(), "aBčĎ") == "abčď"
    assert ev(Uppercase(), "ábčdÁBČD") == "ÁBČDÁBČD"
    assert ev(Uppercase(), "straße") == "STRASSE"


def test_transliterate():
    assert ev(Transliterate(), "aBčĎ") == "aBcD"
    assert ev(Transliterate(), "ábčdÁBČD") == "abcdABCD"


def test_transliterate_special_cases_and_drops():
    assert ev(Transliterate(), "Straße Øl") == "Strasse Ol"
    assert ev(Transliterate(), "ﬁx ﬂy") == "fix fly"
    assert ev(Transliterate(), "a北b") == "ab"


def test_transliterate_skips_compatibility_forms():
    assert ev(Transliterate(), "½ Привет") == " "
    assert ev(Transliterate(), "x²") == "x"


def test_transliterate_uses_injected_tables():
    evaluator = Evaluator(CharTables(ascii_special_cases={"č": "ch"}))
    assert evaluator.evaluate(Transliterate(), "čd") == "chd"


def test_default_tables_are_read_only():
    tables = build_tables()
    with pytest.raises(TypeError):
        tables.ascii_special_cases["x"] = "y"


@pytest.mark.parametrize("flt, expected", [
    (ParentPath(), "root/parent"),
    (FileName(), "file.ext"),
    (BaseName(), "file"),
    (Extension(), "ext"),
    (Extension(with_dot=True), ".ext"),
])
def test_path_filters(flt, expected):
    assert ev(flt, "root/parent/file.ext") == expected


@pytest.mark.parametrize("value, parent", [
    ("file.ext", ""),
    ("/file.ext", "/"),
    ("/", ""),
    ("", ""),
    ("a/b/", "a"),
])
def test_parent_path_edges(value, parent):
    assert parent_path(value) == parent


def test_extension_edges():
    assert extension("archive.tar.gz") == "gz"
    assert extension(".bashrc") == ""
    assert extension("noext", with_dot=True) == ""
    assert ev(BaseName(), ".bashrc") == ".bashrc"


def test_remove_non_ascii():
    assert ev(RemoveNonAscii(), "aBčĎ") == "aB"
    assert ev(RemoveNonAscii(), "ábčdÁBČD") == "bdBD"


@pytest.mark.parametrize("value, side, mask, count, expected", [
    ("abc", "left", "123456", None, "123abc"),
    ("abc", "right", "123456", None, "abc456"),
    ("ab", "left", "0123", None, "01ab"),
    ("ab", "right", "0123", None, "ab23"),
    ("abcdef", "left", "000", None, "abcdef"),
    ("abc", "right", "XY", 3, "abcYXY"),
    ("abc", "left", "XY", 3, "XYXabc"),
    ("abc", "left", "XY", 4, "XYXYabc"),
    ("abc", "left", "XY", 0, "abc"),
])
def test_pad(value, side, mask, count, expected):
    assert pad(value, side, mask, count) == expected
    assert ev(Pad(side, mask, count), value) == expected


def test_pad_is_idempotent_with_zero_count():
    once = pad("abc", "left", "XY", 5)
    assert pad(once, "left", "XY", 0) == once


def test_replace():
    assert ev(Replace("ab", "x"), "abcd_abcd") == "xcd_abcd"
    assert ev(Replace("ab", "x", all=True), "abcd_abcd") == "xcd_xcd"
    assert ev(Replace("ab", "", all=True), "abcd_abcd") == "cd_cd"


def test_replace_empty():
    assert ev(ReplaceEmpty("xyz"), "") == "xyz"
    assert ev(ReplaceEmpty("xyz"), "a") == "a"


def test_regex_filters():
    digits = re.compile("[0-9]+")
    assert ev(RegexMatch(digits), "ab12cd345") == "12"
    assert ev(RegexMatch(digits), "abc") == ""
    assert ev(RegexReplace(digits, "#"), "ab12cd345") == "ab#cd345"
    assert ev(RegexReplace(digits, "#", all=True), "ab12cd345") == "ab#cd#"
    assert ev(RegexReplace(re.compile("(a)(b)"), r"\2\1"), "abab") == "baab"


def test_unsupported_filter_type():
    with pytest.raises(TypeError):
        ev(object(), "abc")
