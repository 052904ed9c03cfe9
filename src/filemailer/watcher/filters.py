"""Extension allow-list matching."""

import re
from collections.abc import Iterable

EXTENSION_SEPARATOR = "."


def file_extension(name: str) -> str:
    """
    Return the extension of a file name, dot included.

    Everything from the last dot counts, so a dot-file such as ".zip" has
    the extension ".zip". Names without a dot have no extension.
    """
    index = name.rfind(EXTENSION_SEPARATOR)
    return name[index:] if index >= 0 else ""


def extension_matches(patterns: Iterable[str], extension: str) -> bool:
    """
    Check whether a file extension is accepted by any allow-list pattern.

    A single leading separator is stripped from ``extension`` first, so
    patterns are written without it ("zip", not ".zip"). Each pattern is a
    regular expression searched anywhere in the extension; authors anchor
    it themselves ("^zip$") when they want an exact match. Patterns that do
    not compile never match and do not stop later patterns from being tried.

    Args:
        patterns: Regular expressions, tried in order
        extension: Extension of the candidate file, with or without the dot

    Returns:
        True on the first matching pattern, False otherwise
    """
    if extension.startswith(EXTENSION_SEPARATOR):
        extension = extension[len(EXTENSION_SEPARATOR):]

    for pattern in patterns:
        try:
            if re.search(pattern, extension):
                return True
        except re.error:
            continue

    return False


def invalid_patterns(patterns: Iterable[str]) -> list[str]:
    """Return the patterns that are not valid regular expressions."""
    invalid = []
    for pattern in patterns:
        try:
            re.compile(pattern)
        except re.error:
            invalid.append(pattern)
    return invalid
