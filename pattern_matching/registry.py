"""
Pattern Registry

Keeps named, reusable regex configurations, validates them before they are
accepted, and persists them in a structured JSON document or in a
human-readable text export.
"""
from typing import Dict, Iterable, Iterator, List, Optional, Tuple, Union
from pathlib import Path
import json

import yaml

from .base import PatternEntry
from .common import COMMON_PATTERNS
from .exceptions import PatternSyntaxError
from .matcher import find_matches, is_valid_pattern
from config import settings
from logger import get_logger

logger = get_logger(__name__)

PathLike = Union[str, Path]

SAVE_FORMAT = "pattern-registry"
SAVE_FORMAT_VERSION = 1


class PatternRegistry:
    """
    In-memory collection of named pattern entries

    The registry does no locking of its own. Share it between threads only
    behind a lock held by the caller, or hand workers a snapshot().

    Example:
        registry = PatternRegistry()
        registry.add(PatternEntry("Year", r"\\b\\d{4}\\b"))

        matches = registry.process_text_with_all_patterns(text)
        registry.save_to_file("saved_patterns.json")
    """

    def __init__(self, entries: Optional[Iterable[PatternEntry]] = None):
        self._entries: Dict[str, PatternEntry] = {}

        for entry in entries or []:
            if not self.add(entry):
                logger.warning(f"Skipped initial pattern entry: {entry!r}")

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, name: object) -> bool:
        return name in self._entries

    def __iter__(self) -> Iterator[PatternEntry]:
        return iter(list(self._entries.values()))

    def add(self, entry: Optional[PatternEntry]) -> bool:
        """
        Add a new pattern entry

        Returns:
            True if the entry was added; False when it is missing a name or
            pattern, its name is taken, or its pattern does not compile
        """
        if entry is None or not entry.name or not entry.pattern:
            logger.warning("Rejected pattern entry without a name or pattern")
            return False

        if entry.name in self._entries:
            logger.warning(f"Rejected duplicate pattern name: {entry.name}")
            return False

        if not is_valid_pattern(entry.pattern):
            logger.warning(f"Rejected invalid pattern for '{entry.name}': {entry.pattern}")
            return False

        self._entries[entry.name] = entry
        logger.info(f"Added pattern: {entry.name}")
        return True

    def remove(self, name: Optional[str]) -> bool:
        """Remove a pattern entry by name"""
        if not name:
            return False

        if self._entries.pop(name, None) is None:
            logger.warning(f"Cannot remove non-existent pattern: {name}")
            return False

        logger.info(f"Removed pattern: {name}")
        return True

    def update(self, name: Optional[str], new_entry: Optional[PatternEntry]) -> bool:
        """
        Replace the entry stored under name

        The new entry may carry a different name; the entry is then re-keyed
        under that name and keeps its position. Renaming onto the name of
        another existing entry is rejected.

        Returns:
            True if the entry was replaced
        """
        if not name or new_entry is None or not new_entry.pattern:
            return False

        if not is_valid_pattern(new_entry.pattern):
            logger.warning(f"Rejected invalid pattern update for '{name}': {new_entry.pattern}")
            return False

        if name not in self._entries:
            logger.warning(f"Cannot update non-existent pattern: {name}")
            return False

        if not new_entry.name:
            return False

        if new_entry.name != name and new_entry.name in self._entries:
            logger.warning(f"Cannot rename pattern '{name}' to existing name '{new_entry.name}'")
            return False

        if new_entry.name == name:
            self._entries[name] = new_entry
        else:
            self._entries = {
                (new_entry.name if key == name else key): (new_entry if key == name else entry)
                for key, entry in self._entries.items()
            }
            logger.info(f"Renamed pattern '{name}' to '{new_entry.name}'")

        logger.info(f"Updated pattern: {new_entry.name}")
        return True

    def get(self, name: Optional[str]) -> Optional[PatternEntry]:
        """Get a pattern entry by name"""
        if not name:
            return None
        return self._entries.get(name)

    def all_entries(self) -> List[PatternEntry]:
        """All entries in insertion order"""
        return list(self._entries.values())

    def names(self) -> List[str]:
        return list(self._entries.keys())

    def find_by_name_substring(self, name_filter: Optional[str] = None) -> List[PatternEntry]:
        """
        Get entries whose name contains name_filter, ignoring case

        A filter of None returns every entry.
        """
        if name_filter is None:
            return self.all_entries()

        needle = name_filter.lower()
        return [entry for entry in self._entries.values() if needle in entry.name.lower()]

    def snapshot(self) -> Tuple[PatternEntry, ...]:
        """Independent copies of all entries, safe to hand to worker threads"""
        return tuple(entry.copy() for entry in self._entries.values())

    def clear(self):
        self._entries.clear()
        logger.info("Cleared pattern registry")

    def save_to_file(self, path: Optional[PathLike] = None) -> bool:
        """
        Save every entry as a JSON document

        Args:
            path: Destination file (defaults to the configured patterns file)

        Returns:
            True if saved successfully
        """
        path = Path(path) if path is not None else Path(settings.patterns_file)

        document = {
            "format": SAVE_FORMAT,
            "version": SAVE_FORMAT_VERSION,
            "patterns": [entry.to_dict() for entry in self._entries.values()]
        }

        try:
            with open(path, 'w', encoding='utf-8') as f:
                json.dump(document, f, indent=2, ensure_ascii=False)
        except OSError as e:
            logger.error(f"Error saving patterns to {path}: {e}")
            return False

        logger.info(f"Saved {len(self._entries)} patterns to {path}")
        return True

    def load_from_file(self, path: Optional[PathLike] = None) -> bool:
        """
        Replace all entries with those stored in a saved JSON document

        Returns:
            False, leaving the registry untouched, if the file is missing,
            unreadable or does not hold a list of pattern records
        """
        path = Path(path) if path is not None else Path(settings.patterns_file)

        if not path.exists() or not path.is_file():
            logger.warning(f"Pattern file not found: {path}")
            return False

        try:
            with open(path, 'r', encoding='utf-8') as f:
                document = json.load(f)
        except (OSError, ValueError, RecursionError) as e:
            logger.error(f"Error loading patterns from {path}: {e}")
            return False

        try:
            entries = self._entries_from_document(document)
        except ValueError as e:
            logger.error(f"Invalid pattern file {path}: {e}")
            return False

        self._entries = entries
        logger.info(f"Loaded {len(entries)} patterns from {path}")
        return True

    @staticmethod
    def _entries_from_document(document) -> Dict[str, PatternEntry]:
        if not isinstance(document, dict) or document.get("format") != SAVE_FORMAT:
            raise ValueError("not a saved pattern registry")

        if document.get("version") != SAVE_FORMAT_VERSION:
            raise ValueError(f"unsupported version: {document.get('version')}")

        records = document.get("patterns")
        if not isinstance(records, list):
            raise ValueError("'patterns' must be a list")

        entries: Dict[str, PatternEntry] = {}
        for record in records:
            entry = PatternEntry.from_dict(record)
            if entry.name in entries:
                raise ValueError(f"duplicate pattern name: {entry.name}")
            entries[entry.name] = entry

        return entries

    def export_to_text_file(self, path: Optional[PathLike]) -> bool:
        """
        Export entries as Name/Pattern/Multiline/Case Insensitive blocks

        Returns:
            True if exported; False if the registry is empty, no path was
            given, or writing failed
        """
        if path is None or not self._entries:
            return False

        try:
            with open(path, 'w', encoding='utf-8') as f:
                for entry in self._entries.values():
                    f.write(f"Name: {entry.name}\n")
                    f.write(f"Pattern: {entry.pattern}\n")
                    f.write(f"Multiline: {str(entry.multiline).lower()}\n")
                    f.write(f"Case Insensitive: {str(entry.case_insensitive).lower()}\n")
                    f.write("\n")
        except OSError as e:
            logger.error(f"Error exporting patterns to {path}: {e}")
            return False

        logger.info(f"Exported {len(self._entries)} patterns to {path}")
        return True

    def import_from_text_file(self, path: Optional[PathLike]) -> int:
        """
        Import entries from a text export

        Each block is passed through add(), so duplicate names and invalid
        patterns are skipped. The last block does not need a trailing blank
        line.

        Returns:
            Number of entries added
        """
        if path is None:
            return 0

        path = Path(path)
        if not path.exists() or not path.is_file():
            logger.warning(f"Pattern export file not found: {path}")
            return 0

        import_count = 0
        block = _TextBlock()

        try:
            with open(path, 'r', encoding='utf-8') as f:
                for raw_line in f:
                    line = raw_line.strip()

                    if not line:
                        if block.complete and self.add(block.to_entry()):
                            import_count += 1
                        block = _TextBlock()
                        continue

                    block.read_line(line)

            if block.complete and self.add(block.to_entry()):
                import_count += 1

        except (OSError, UnicodeDecodeError) as e:
            logger.error(f"Error importing patterns from {path}: {e}")
            return import_count

        logger.info(f"Imported {import_count} patterns from {path}")
        return import_count

    def import_from_yaml_file(self, path: PathLike) -> int:
        """
        Import entries from a YAML pattern configuration

        Expected layout:
            patterns:
              - name: Year
                pattern: '\\b\\d{4}\\b'
                multiline: false
                case_insensitive: false

        Returns:
            Number of entries added
        """
        path = Path(path)
        if not path.exists() or not path.is_file():
            logger.warning(f"Pattern config not found: {path}")
            return 0

        try:
            with open(path, 'r', encoding='utf-8') as f:
                config = yaml.safe_load(f) or {}
        except (OSError, UnicodeDecodeError, yaml.YAMLError) as e:
            logger.error(f"Error loading pattern config from {path}: {e}")
            return 0

        records = config.get("patterns", []) if isinstance(config, dict) else config
        if not isinstance(records, list):
            logger.error(f"Pattern config {path} has no pattern list")
            return 0

        import_count = 0
        for record in records:
            if not isinstance(record, dict):
                logger.warning(f"Skipping malformed pattern record in {path}: {record!r}")
                continue

            entry = PatternEntry(
                name=str(record.get("name") or ""),
                pattern=str(record.get("pattern") or ""),
                multiline=_parse_bool(record.get("multiline", False)),
                case_insensitive=_parse_bool(record.get("case_insensitive", False))
            )
            if self.add(entry):
                import_count += 1

        logger.info(f"Imported {import_count} patterns from {path}")
        return import_count

    def process_text_with_all_patterns(self, text: Optional[str]) -> Dict[str, List[str]]:
        """
        Run every entry against text

        An entry whose pattern fails to compile maps to an empty list instead
        of aborting the run.

        Returns:
            Dict mapping entry name to its matches
        """
        return match_all_entries(list(self._entries.values()), text)


def _parse_bool(value) -> bool:
    """Read an imported flag; a string is true only if it reads 'true'"""
    if isinstance(value, str):
        return value.strip().lower() == "true"
    return bool(value)


class _TextBlock:
    """Fields collected for one entry of a text export"""

    def __init__(self):
        self.name: Optional[str] = None
        self.pattern: Optional[str] = None
        self.multiline = False
        self.case_insensitive = False

    @property
    def complete(self) -> bool:
        return self.name is not None and self.pattern is not None

    def read_line(self, line: str):
        key, sep, value = line.partition(":")
        if not sep:
            return

        value = value.strip()
        if key == "Name":
            self.name = value
        elif key == "Pattern":
            self.pattern = value
        elif key == "Multiline":
            self.multiline = _parse_bool(value)
        elif key == "Case Insensitive":
            self.case_insensitive = _parse_bool(value)

    def to_entry(self) -> PatternEntry:
        return PatternEntry(
            name=self.name,
            pattern=self.pattern,
            multiline=self.multiline,
            case_insensitive=self.case_insensitive
        )


def create_common_pattern_collection() -> PatternRegistry:
    """Create a registry pre-seeded with commonly used patterns"""
    registry = PatternRegistry(
        PatternEntry(
            name=name,
            pattern=details["pattern"],
            multiline=details.get("multiline", False),
            case_insensitive=details.get("case_insensitive", False)
        )
        for name, details in COMMON_PATTERNS.items()
    )
    logger.info(f"Created common pattern collection with {len(registry)} patterns")
    return registry


def match_all_entries(entries: Iterable[PatternEntry], text: Optional[str]) -> Dict[str, List[str]]:
    """
    Find the matches of each entry in text

    Works on any iterable of entries, such as a registry snapshot handed to
    a worker thread. An entry whose pattern fails to compile maps to an
    empty list.
    """
    entries = list(entries)
    if not text or not entries:
        return {}

    results: Dict[str, List[str]] = {}

    for entry in entries:
        try:
            results[entry.name] = find_matches(text, entry.pattern, entry.flags)
        except PatternSyntaxError as e:
            logger.error(f"Invalid pattern '{entry.name}': {e}")
            results[entry.name] = []

    return results
