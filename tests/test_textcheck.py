import pytest

from easeprobe.textcheck import TextChecker, check_empty

TEXT = "easeprobe hello world"


def test_check_text_passes_and_fails():
    tc = TextChecker(contain="hello", not_contain="bad")
    tc.check(TEXT)

    tc.contain, tc.not_contain = "hello", "world"
    with pytest.raises(ValueError, match="the output contains"):
        tc.check(TEXT)

    tc.contain, tc.not_contain = "", "world"
    with pytest.raises(ValueError):
        tc.check(TEXT)

    tc.contain, tc.not_contain = "hello", ""
    tc.check(TEXT)

    tc.contain, tc.not_contain = "good", ""
    with pytest.raises(ValueError, match="does not contain"):
        tc.check(TEXT)

    tc.contain, tc.not_contain = "", "bad"
    tc.check(TEXT)

    tc.contain, tc.not_contain = "good", "bad"
    with pytest.raises(ValueError):
        tc.check(TEXT)


WORD = r"word[0-9]+"
TIME = "[0-9]?[0-9]:[0-9][0-9]"
HTML = r"<\/?[\w\s]*>|<.+[\W]>"
OR = r"word1|word2"


@pytest.mark.parametrize(
    "pattern, text, match",
    [
        (WORD, "word word10 word", True),
        (WORD, "word word word", False),
        (TIME, "easeprobe hello world 12:34", True),
        (TIME, "easeprobe hello world 1234", False),
        (HTML, "<p>test hello world </p>", True),
        (HTML, "test hello world", False),
        (OR, "word1 easeprobe word2", True),
        (OR, "word2 easeprobe word1", True),
        (OR, "word3 easeprobe word1", True),
        (OR, "word2 easeprobe word3", True),
        (OR, "word easeprobe word3", False),
        (OR, "word easeprobe hello world", False),
    ],
)
def test_check_regexp(pattern, text, match):
    tc = TextChecker(contain=pattern, regexp=True)
    tc.config()
    if match:
        tc.check_regexp(text)
    else:
        with pytest.raises(ValueError, match="does not match the pattern"):
            tc.check_regexp(text)

    tc.contain = ""
    tc.not_contain = pattern
    tc.config()
    if match:
        with pytest.raises(ValueError, match="the output match the pattern"):
            tc.check_regexp(text)
    else:
        tc.check_regexp(text)
    assert tc.regexp is True


def test_unsupported_regexp():
    unsupported = "(?=.*word1)(?=.*word2)"
    tc = TextChecker(contain=unsupported, regexp=True)
    with pytest.raises(ValueError, match="invalid or unsupported Perl syntax"):
        tc.config()

    tc.contain = ""
    tc.not_contain = unsupported
    with pytest.raises(ValueError, match="invalid or unsupported Perl syntax"):
        tc.config()


def test_text_checker():
    checker = TextChecker(contain="hello", not_contain="", regexp=False)
    checker.config()
    checker.check("hello world")
    assert "Text Mode" in str(checker)

    checker = TextChecker(contain="[0-9]+$", not_contain="", regexp=True)
    checker.config()
    checker.check("hello world 2022")
    assert "RegExp Mode" in str(checker)

    checker = TextChecker(contain="", not_contain=HTML, regexp=True)
    checker.config()
    with pytest.raises(ValueError):
        checker.check("<p>test hello world </p>")


def test_str_shows_patterns():
    checker = TextChecker(contain="a", not_contain="b")
    assert str(checker) == "Text Mode - Contain:[a], NotContain:[b]"


@pytest.mark.parametrize(
    "value, expected",
    [
        ("a", "a"),
        ("    ", "empty"),
        ("  \t", "empty"),
        ("\n\r\t", "empty"),
        ("  \n\r\t  ", "empty"),
    ],
)
def test_check_empty(value, expected):
    assert check_empty(value) == expected