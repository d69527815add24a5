"""
Regex matching operations

Stateless find / highlight / replace / inspect functions. Every function
works only on its arguments, so they are safe to call from any number of
threads at once.
"""
from typing import List, Optional, Pattern as RegexPattern
import re

from .base import Flags, MatchResult, compile_pattern
from .exceptions import PatternSyntaxError, ReplacementError


def find_matches(text: Optional[str], pattern: Optional[str], flags: Flags = 0) -> List[str]:
    """
    Find all non-overlapping matches of a pattern, left to right

    Args:
        text: Text to search in
        pattern: Regex pattern source
        flags: MatchFlag combination

    Returns:
        Matched substrings in order of occurrence; empty when text or
        pattern is empty

    Raises:
        PatternSyntaxError: If the pattern does not compile
    """
    if not text or not pattern:
        return []

    compiled = compile_pattern(pattern, flags)
    return [match.group(0) for match in compiled.finditer(text)]


def count_matches(text: Optional[str], pattern: Optional[str], flags: Flags = 0) -> int:
    """Count the matches find_matches would return"""
    if not text or not pattern:
        return 0

    compiled = compile_pattern(pattern, flags)
    return sum(1 for _ in compiled.finditer(text))


def highlight_matches(
    text: Optional[str],
    pattern: Optional[str],
    prefix: Optional[str],
    suffix: Optional[str],
    flags: Flags = 0
) -> Optional[str]:
    """
    Wrap every match as prefix + match + suffix

    Unmatched spans are copied verbatim. A missing pattern, prefix or suffix
    leaves the text unchanged.

    Raises:
        PatternSyntaxError: If the pattern does not compile
    """
    if text is None:
        return None

    if not pattern or prefix is None or suffix is None:
        return text

    compiled = compile_pattern(pattern, flags)

    parts = []
    last_end = 0
    for match in compiled.finditer(text):
        parts.append(text[last_end:match.start()])
        parts.append(prefix)
        parts.append(match.group(0))
        parts.append(suffix)
        last_end = match.end()
    parts.append(text[last_end:])

    return "".join(parts)


def replace_all(
    text: Optional[str],
    pattern: Optional[str],
    replacement: Optional[str],
    flags: Flags = 0
) -> Optional[str]:
    """
    Replace every match of a pattern

    The replacement may reference groups as $n or ${name}; a backslash makes
    the next character literal ("\\$" for a dollar sign).

    Raises:
        PatternSyntaxError: If the pattern does not compile
        ReplacementError: If the replacement references a missing group
    """
    if text is None or replacement is None:
        return text

    if not pattern:
        return text

    compiled = compile_pattern(pattern, flags)
    template = expand_replacement(replacement, compiled)

    try:
        return compiled.sub(template, text)
    except re.error as e:
        raise ReplacementError(replacement, e.msg) from e


def is_valid_pattern(pattern: Optional[str]) -> bool:
    """Check whether a pattern is non-empty and compiles"""
    if not pattern:
        return False

    try:
        compile_pattern(pattern)
        return True
    except PatternSyntaxError:
        return False


def get_detailed_matches(
    text: Optional[str],
    pattern: Optional[str],
    flags: Flags = 0
) -> List[MatchResult]:
    """
    Get every match with its offsets and captured groups

    Group 0 is the whole match; groups 1..n follow the declaration order of
    the capturing groups. Groups that did not participate are None.

    Raises:
        PatternSyntaxError: If the pattern does not compile
    """
    if not text or not pattern:
        return []

    compiled = compile_pattern(pattern, flags)
    return [MatchResult.from_match(match) for match in compiled.finditer(text)]


def expand_replacement(replacement: str, compiled: RegexPattern) -> str:
    """
    Convert a dollar-style replacement into a template for re.sub

    $n takes as many digits as still name an existing group, so "$10" with a
    single group is group 1 followed by a literal "0".

    Raises:
        ReplacementError: On a malformed or out-of-range group reference
    """
    parts = []
    i = 0
    length = len(replacement)

    while i < length:
        char = replacement[i]

        if char == "\\":
            i += 1
            if i >= length:
                raise ReplacementError(replacement, "character to be escaped is missing")
            parts.append(_literal(replacement[i]))
            i += 1

        elif char == "$":
            i += 1
            if i >= length:
                raise ReplacementError(replacement, "illegal group reference: group index is missing")

            if replacement[i] == "{":
                close = replacement.find("}", i)
                if close == -1:
                    raise ReplacementError(replacement, "named group reference is missing trailing '}'")
                name = replacement[i + 1:close]
                if not name:
                    raise ReplacementError(replacement, "named group reference has an empty name")
                if name not in compiled.groupindex:
                    raise ReplacementError(replacement, f"no group with name {{{name}}}")
                parts.append(f"\\g<{name}>")
                i = close + 1

            elif "0" <= replacement[i] <= "9":
                group = int(replacement[i])
                i += 1
                while i < length and "0" <= replacement[i] <= "9":
                    candidate = group * 10 + int(replacement[i])
                    if candidate > compiled.groups:
                        break
                    group = candidate
                    i += 1
                if group > compiled.groups:
                    raise ReplacementError(replacement, f"no group {group}")
                parts.append(f"\\g<{group}>")

            else:
                raise ReplacementError(replacement, "illegal group reference")

        else:
            parts.append(_literal(char))
            i += 1

    return "".join(parts)


def _literal(char: str) -> str:
    # re.sub templates treat backslash as an escape
    return "\\\\" if char == "\\" else char
