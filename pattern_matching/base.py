"""
Base types for pattern matching
"""
from dataclasses import dataclass, asdict
from typing import Any, Dict, Optional, Pattern as RegexPattern, Tuple, Union
from enum import IntFlag
import re

from .exceptions import PatternSyntaxError


class MatchFlag(IntFlag):
    """Regex matching options understood by the engine"""
    NONE = 0
    MULTILINE = re.MULTILINE  # ^ and $ also match at embedded line boundaries
    CASE_INSENSITIVE = re.IGNORECASE


SUPPORTED_FLAGS = MatchFlag.MULTILINE | MatchFlag.CASE_INSENSITIVE

Flags = Union[MatchFlag, int]


def to_regex_flags(flags: Optional[Flags]) -> int:
    """Mask a flag set down to the bits the engine recognizes"""
    if not flags:
        return 0
    return int(flags) & int(SUPPORTED_FLAGS)


def compile_pattern(pattern: str, flags: Optional[Flags] = 0) -> RegexPattern:
    """
    Compile a pattern with the supported flags

    Raises:
        PatternSyntaxError: If the pattern does not compile
    """
    try:
        return re.compile(pattern, to_regex_flags(flags))
    except re.error as e:
        raise PatternSyntaxError(pattern, e.msg, e.pos) from e
    except (OverflowError, RecursionError) as e:
        raise PatternSyntaxError(pattern, str(e) or type(e).__name__) from e


@dataclass(frozen=True)
class MatchResult:
    """A single match occurrence with its captured groups"""
    text: str
    start: int
    end: int
    groups: Tuple[Optional[str], ...] = ()

    @classmethod
    def from_match(cls, match: "re.Match") -> "MatchResult":
        return cls(
            text=match.group(0),
            start=match.start(),
            end=match.end(),
            groups=(match.group(0),) + match.groups()
        )

    @property
    def group_count(self) -> int:
        """Number of capturing groups, not counting the whole match"""
        return max(len(self.groups) - 1, 0)

    def group(self, index: int) -> Optional[str]:
        """Captured value at index, or None when absent or out of range"""
        if 0 <= index < len(self.groups):
            return self.groups[index]
        return None

    def to_dict(self) -> Dict[str, Any]:
        return {
            'text': self.text,
            'start': self.start,
            'end': self.end,
            'groups': list(self.groups)
        }

    def __str__(self):
        return f"Match: '{self.text}', pos: {self.start}-{self.end}"


@dataclass(frozen=True)
class PatternEntry:
    """A named, reusable regex configuration, immutable once created"""
    name: str
    pattern: str
    multiline: bool = False
    case_insensitive: bool = False

    @property
    def flags(self) -> MatchFlag:
        flags = MatchFlag.NONE
        if self.multiline:
            flags |= MatchFlag.MULTILINE
        if self.case_insensitive:
            flags |= MatchFlag.CASE_INSENSITIVE
        return flags

    def compile(self) -> RegexPattern:
        """Compile the entry's pattern with its own flags"""
        return compile_pattern(self.pattern, self.flags)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, record: Dict[str, Any]) -> "PatternEntry":
        """
        Build an entry from a persisted record

        Raises:
            ValueError: If the record is not pattern-entry shaped
        """
        if not isinstance(record, dict):
            raise ValueError(f"Pattern record must be a mapping, got {type(record).__name__}")

        expected = {'name': str, 'pattern': str, 'multiline': bool, 'case_insensitive': bool}
        missing = set(expected) - set(record)
        if missing:
            raise ValueError(f"Pattern record missing fields: {sorted(missing)}")

        for key, expected_type in expected.items():
            if not isinstance(record[key], expected_type):
                raise ValueError(
                    f"Pattern record field '{key}' must be {expected_type.__name__}, "
                    f"got {type(record[key]).__name__}"
                )

        return cls(
            name=record['name'],
            pattern=record['pattern'],
            multiline=record['multiline'],
            case_insensitive=record['case_insensitive']
        )

    def copy(self) -> "PatternEntry":
        return PatternEntry(
            name=self.name,
            pattern=self.pattern,
            multiline=self.multiline,
            case_insensitive=self.case_insensitive
        )

    def __str__(self):
        return self.name
