"""Checks a probe's text output against expected and forbidden content."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Optional, Pattern

_LOOKAROUNDS = ("(?<=", "(?<!", "(?=", "(?!")
_BACKREF_DIGITS = "123456789"


def _unsupported_syntax(pattern: str) -> Optional[str]:
    """Return a description of syntax the regular-expression dialect rejects, if any."""
    i = 0
    in_class = False
    length = len(pattern)
    while i < length:
        ch = pattern[i]
        if ch == "\\":
            nxt = pattern[i + 1 : i + 2]
            if not in_class and nxt and nxt in _BACKREF_DIGITS:
                return f"invalid escape sequence: `\\{nxt}`"
            i += 2
            continue
        if in_class:
            if ch == "]":
                in_class = False
        elif ch == "[":
            in_class = True
            j = i + 1
            if pattern[j : j + 1] == "^":
                j += 1
            if pattern[j : j + 1] == "]":
                j += 1
            i = j
            continue
        elif ch == "(":
            for prefix in _LOOKAROUNDS:
                if pattern.startswith(prefix, i):
                    return f"invalid or unsupported Perl syntax: `{prefix}`"
        i += 1
    return None


def _compile(pattern: str) -> Pattern[str]:
    problem = _unsupported_syntax(pattern)
    if problem is not None:
        raise ValueError(f"error parsing regexp: {problem}")
    try:
        return re.compile(pattern, re.ASCII)
    except re.error as exc:
        raise ValueError(f"error parsing regexp: {exc}") from exc


@dataclass
class TextChecker:
    """Verifies that output contains one string and does not contain another."""

    contain: str = ""
    not_contain: str = ""
    regexp: bool = False

    _contain_re: Optional[Pattern[str]] = field(
        default=None, init=False, repr=False, compare=False
    )
    _not_contain_re: Optional[Pattern[str]] = field(
        default=None, init=False, repr=False, compare=False
    )

    def config(self) -> None:
        """Compile the patterns when running in regular-expression mode."""
        if not self.regexp:
            return

        if not self.contain:
            self._contain_re = None
        else:
            try:
                self._contain_re = _compile(self.contain)
            except ValueError:
                self._contain_re = None
                raise

        if not self.not_contain:
            self._not_contain_re = None
        else:
            try:
                self._not_contain_re = _compile(self.not_contain)
            except ValueError:
                self._not_contain_re = None
                raise

    def check(self, text: str) -> None:
        """Raise ValueError if the text fails the configured check."""
        if self.regexp:
            self.check_regexp(text)
        else:
            self.check_text(text)

    def check_text(self, output: str) -> None:
        """Check the output with plain substring matching."""
        if self.contain and self.contain not in output:
            raise ValueError(f"the output does not contain [{self.contain}]")
        if self.not_contain and self.not_contain in output:
            raise ValueError(f"the output contains [{self.not_contain}]")

    def check_regexp(self, output: str) -> None:
        """Check the output with the compiled regular expressions."""
        if (
            self.contain
            and self._contain_re is not None
            and not self._contain_re.search(output)
        ):
            raise ValueError(f"the output does not match the pattern [{self.contain}]")
        if (
            self.not_contain
            and self._not_contain_re is not None
            and self._not_contain_re.search(output)
        ):
            raise ValueError(f"the output match the pattern [{self.not_contain}]")

    def __str__(self) -> str:
        mode = "RegExp Mode" if self.regexp else "Text Mode"
        return f"{mode} - Contain:[{self.contain}], NotContain:[{self.not_contain}]"


def check_empty(s: str) -> str:
    """Return "empty" for a blank string, otherwise the string itself."""
    if not s.strip():
        return "empty"
    return s