"""Helpers that pull typed values out of predicate arguments."""
import re
import string
from typing import Any, List, Optional

from routedoc.constants import MAX_ENUM_RANGE_SIZE
from routedoc.descriptors.predicates import ValueRange


def is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def extract_numeric(arg: Any) -> Optional[float]:
    """Number argument, or None."""
    return arg if is_number(arg) else None


def extract_range(arg: Any) -> Optional[ValueRange]:
    if isinstance(arg, ValueRange):
        return arg
    if isinstance(arg, range) and arg.step == 1:
        return ValueRange(arg.start, arg.stop, exclude_end=True)
    return None


def extract_list(arg: Any) -> Optional[List[Any]]:
    """
    List argument for membership predicates.

    Non-numeric bounded ranges expand into their members; numeric ranges
    return None (they become minimum/maximum instead).
    """
    if isinstance(arg, ValueRange):
        return range_to_enum_list(arg)
    if isinstance(arg, (list, tuple)):
        return list(arg)
    if isinstance(arg, (set, frozenset)):
        return sorted(arg, key=repr)
    return None


def range_to_enum_list(value_range: ValueRange) -> Optional[List[Any]]:
    """Members of a non-numeric range, or None when numeric, unbounded or too large."""
    if not value_range.is_bounded() or value_range.is_numeric():
        return None

    begin, end = value_range.begin, value_range.end
    if not (isinstance(begin, str) and isinstance(end, str)):
        return None

    members = _string_range(begin, end)
    if members is None:
        return None
    if value_range.exclude_end and members and members[-1] == end:
        members = members[:-1]
    if len(members) > MAX_ENUM_RANGE_SIZE:
        return None
    return members


def _string_range(begin: str, end: str) -> Optional[List[str]]:
    # single characters step by code point; same-length lowercase words step like odometers
    if len(begin) == 1 and len(end) == 1:
        if ord(end) < ord(begin) or ord(end) - ord(begin) >= MAX_ENUM_RANGE_SIZE:
            return None
        return [chr(c) for c in range(ord(begin), ord(end) + 1)]

    if len(begin) != len(end) or begin > end:
        return None
    alphabet = _alphabet_for(begin + end)
    if alphabet is None:
        return None

    members = [begin]
    current = begin
    while current != end:
        current = _successor(current, alphabet)
        if current is None or len(members) >= MAX_ENUM_RANGE_SIZE:
            return None
        members.append(current)
    return members


def _alphabet_for(text: str) -> Optional[str]:
    for alphabet in (string.ascii_lowercase, string.ascii_uppercase, string.digits):
        if all(c in alphabet for c in text):
            return alphabet
    return None


def _successor(word: str, alphabet: str) -> Optional[str]:
    chars = list(word)
    for i in range(len(chars) - 1, -1, -1):
        position = alphabet.index(chars[i])
        if position + 1 < len(alphabet):
            chars[i] = alphabet[position + 1]
            return "".join(chars)
        chars[i] = alphabet[0]
    return None


def extract_literal(arg: Any) -> Any:
    if isinstance(arg, (list, tuple)) and len(arg) == 1:
        return arg[0]
    return arg


def extract_pattern(arg: Any) -> Optional[str]:
    """Source text of a regex argument."""
    if isinstance(arg, re.Pattern):
        return arg.pattern
    if isinstance(arg, str):
        return arg
    return None
