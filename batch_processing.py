"""
Batch file processing

Applies the matching and analysis operations to a caller-supplied list of
files. Each file is handled by its own task in a thread pool; tasks share
nothing and report back through their return values.
"""
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Union

from pattern_matching import (
    PatternSyntaxError,
    TextProcessingError,
    InvalidArgumentError,
    compile_pattern,
    find_matches,
    highlight_matches,
    replace_all
)
from text_analysis import (
    word_frequency_analysis,
    summarize_text,
    format_matches,
    format_word_frequency,
    format_summary
)
from config import settings
from logger import get_logger
from metrics import batch_files

logger = get_logger(__name__)

PathLike = Union[str, Path]


def read_file(path: PathLike) -> str:
    """Read a whole text file"""
    with open(path, 'r', encoding='utf-8') as f:
        return f.read()


def write_file(path: PathLike, content: str):
    with open(path, 'w', encoding='utf-8') as f:
        f.write(content)


def processed_file_name(name: str) -> str:
    """Insert '.processed' before the extension, or append it"""
    stem, dot, extension = name.rpartition(".")
    if not dot:
        return f"{name}.processed"
    return f"{stem}.processed.{extension}"


def prepare_output_dir(output_dir: PathLike) -> Path:
    """
    Create the output directory if needed

    Raises:
        NotADirectoryError: If the path exists and is not a directory
    """
    output_dir = Path(output_dir)
    if not output_dir.exists():
        output_dir.mkdir(parents=True)

    if not output_dir.is_dir():
        raise NotADirectoryError(f"Output path is not a directory: {output_dir}")

    return output_dir


def filter_file_by_line_pattern(path: PathLike, pattern: str, flags: int = 0) -> str:
    """
    Keep only the lines of a file that contain a match

    Raises:
        PatternSyntaxError: If the pattern does not compile
        OSError: If the file cannot be read
    """
    compiled = compile_pattern(pattern, flags)
    kept = []

    with open(path, 'r', encoding='utf-8') as f:
        for line in f:
            line = line.rstrip('\r\n')
            if compiled.search(line):
                kept.append(line + "\n")

    return "".join(kept)


def replace_in_file(path: PathLike, pattern: str, replacement: str, flags: int = 0) -> str:
    """Return a file's content with every match replaced"""
    return replace_all(read_file(path), pattern, replacement, flags)


def count_occurrences_in_file(path: PathLike, pattern: str, flags: int = 0) -> int:
    compiled = compile_pattern(pattern, flags)
    return sum(1 for _ in compiled.finditer(read_file(path)))


def grep_files(paths: Iterable[PathLike], pattern: str, flags: int = 0) -> str:
    """
    Collect matching lines from several files as 'name:line: text' rows

    Raises:
        PatternSyntaxError: If the pattern does not compile
        OSError: If a file cannot be read
    """
    compiled = compile_pattern(pattern, flags)
    rows = []

    for path in paths:
        path = Path(path)
        with open(path, 'r', encoding='utf-8') as f:
            for line_number, line in enumerate(f, 1):
                line = line.rstrip('\r\n')
                if compiled.search(line):
                    rows.append(f"{path.name}:{line_number}: {line}\n")

    return "".join(rows)


def batch_replace_in_files(
    paths: List[PathLike],
    output_dir: PathLike,
    pattern: str,
    replacement: str,
    flags: int = 0,
    max_workers: Optional[int] = None
) -> int:
    """
    Replace matches in many files in parallel

    Each result is written under output_dir with the input file's name. A
    file that cannot be read, written or replaced is logged and skipped.

    Returns:
        Number of files written

    Raises:
        PatternSyntaxError: If the pattern does not compile
        NotADirectoryError: If output_dir is not a directory
    """
    compile_pattern(pattern, flags)
    output_dir = prepare_output_dir(output_dir)

    def replace_one(path: PathLike) -> bool:
        path = Path(path)
        try:
            content = replace_in_file(path, pattern, replacement, flags)
            write_file(output_dir / path.name, content)
        except (OSError, UnicodeDecodeError, TextProcessingError) as e:
            logger.error(f"Error processing file {path.name}: {e}")
            batch_files.labels('failed').inc()
            return False

        batch_files.labels('processed').inc()
        return True

    workers = max_workers or settings.batch_max_workers
    with ThreadPoolExecutor(max_workers=workers) as executor:
        return sum(executor.map(replace_one, paths))


class FileStatus(Enum):
    """Outcome of one file in a batch"""
    PROCESSED = "processed"
    FAILED = "failed"


@dataclass
class BatchOptions:
    """
    Operations to apply to every file of a batch.

    Regex operations run in order find -> highlight -> replace on the file
    content; analyses always run on the original content.
    """
    pattern: str = ""
    flags: int = 0
    find: bool = False
    highlight: bool = False
    replace: bool = False
    prefix: str = "[["
    suffix: str = "]]"
    replacement: str = ""
    word_frequency: bool = False
    summarize: bool = False
    min_word_length: int = field(default_factory=lambda: settings.default_min_word_length)
    max_sentences: int = field(default_factory=lambda: settings.default_max_sentences)
    frequency_limit: int = field(default_factory=lambda: settings.frequency_report_limit)

    @property
    def regex_operations(self) -> bool:
        return self.find or self.highlight or self.replace

    @property
    def analysis_operations(self) -> bool:
        return self.word_frequency or self.summarize

    def validate(self):
        """
        Check the options before any file is touched

        Raises:
            InvalidArgumentError: For a missing operation, pattern or
                out-of-range number
            PatternSyntaxError: If the pattern does not compile
        """
        if not self.regex_operations and not self.analysis_operations:
            raise InvalidArgumentError("Please select at least one operation to perform")

        if self.regex_operations:
            if not self.pattern:
                raise InvalidArgumentError("Please enter a regex pattern", field="pattern")
            compile_pattern(self.pattern, self.flags)

        if self.min_word_length < 0:
            raise InvalidArgumentError("Invalid minimum word length", field="min_word_length")

        if self.max_sentences < 1:
            raise InvalidArgumentError("Invalid maximum sentences count", field="max_sentences")


@dataclass
class FileResult:
    """Result of processing one file"""
    path: Path
    status: FileStatus
    output_path: Optional[Path] = None
    matches: Optional[List[str]] = None
    word_frequency: Optional[Dict[str, int]] = None
    summary: Optional[str] = None
    error: Optional[str] = None

    def render(self, frequency_limit: Optional[int] = None) -> str:
        name = self.path.name

        if self.status == FileStatus.FAILED:
            return f"\nError in {name}: {self.error}\n"

        parts = []
        if self.matches is not None:
            parts.append("\n" + format_matches(name, self.matches))

        if self.word_frequency is not None or self.summary is not None:
            parts.append(f"\n--- Analysis Results for: {name} ---\n")
            if self.word_frequency:
                parts.append("\n" + format_word_frequency(self.word_frequency, frequency_limit))
            if self.summary is not None:
                parts.append("\n" + format_summary(self.summary))

        return "".join(parts)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "path": str(self.path),
            "status": self.status.value,
            "output_path": str(self.output_path) if self.output_path else None,
            "matches": self.matches,
            "word_frequency": self.word_frequency,
            "summary": self.summary,
            "error": self.error
        }


@dataclass
class BatchReport:
    """Per-file results of a batch, in input order"""
    results: List[FileResult] = field(default_factory=list)
    frequency_limit: Optional[int] = None

    @property
    def processed_count(self) -> int:
        return sum(1 for r in self.results if r.status == FileStatus.PROCESSED)

    @property
    def failed_count(self) -> int:
        return sum(1 for r in self.results if r.status == FileStatus.FAILED)

    def render(self) -> str:
        """Combine every file's result into one text report"""
        body = "".join(result.render(self.frequency_limit) for result in self.results)
        footer = f"\nProcessed {self.processed_count} of {len(self.results)} files"
        if self.failed_count:
            footer += f" ({self.failed_count} failed)"
        return body + footer + "\n"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "processed": self.processed_count,
            "failed": self.failed_count,
            "files": [result.to_dict() for result in self.results]
        }


class BatchProcessor:
    """
    Runs the same operations over many files with a worker pool

    Example:
        options = BatchOptions(pattern=r"\\d+", find=True, word_frequency=True)
        report = BatchProcessor(options).run(paths, "out")
        print(report.render())
    """

    def __init__(self, options: BatchOptions, max_workers: Optional[int] = None):
        self.options = options
        self.max_workers = max_workers or settings.batch_max_workers

    def run(self, paths: Iterable[PathLike], output_dir: Optional[PathLike] = None) -> BatchReport:
        """
        Process every file and collect a report

        Raises:
            InvalidArgumentError: For invalid options, an empty file list or
                a missing output directory when regex operations are selected
            PatternSyntaxError: If the pattern does not compile
            NotADirectoryError: If output_dir is not a directory
        """
        paths = [Path(p) for p in paths]
        if not paths:
            raise InvalidArgumentError("No files selected for batch processing")

        self.options.validate()

        target_dir = None
        if self.options.regex_operations:
            if output_dir is None:
                raise InvalidArgumentError("Please select an output directory", field="output_dir")
            target_dir = prepare_output_dir(output_dir)

        logger.info(f"Batch processing started: {len(paths)} files")

        with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
            results = list(executor.map(lambda p: self._process_file(p, target_dir), paths))

        report = BatchReport(results=results, frequency_limit=self.options.frequency_limit)
        logger.info(
            f"Batch processing finished: {report.processed_count}/{len(paths)} files processed"
        )
        return report

    def _process_file(self, path: Path, output_dir: Optional[Path]) -> FileResult:
        options = self.options

        try:
            content = read_file(path)
        except (OSError, UnicodeDecodeError) as e:
            return self._failed(path, f"Could not read file: {e}")

        result = FileResult(path=path, status=FileStatus.PROCESSED)
        output = content

        try:
            if options.find:
                result.matches = find_matches(output, options.pattern, options.flags)
            if options.highlight:
                output = highlight_matches(
                    output, options.pattern, options.prefix, options.suffix, options.flags
                )
            if options.replace:
                output = replace_all(output, options.pattern, options.replacement, options.flags)
        except PatternSyntaxError as e:
            return self._failed(path, f"Invalid regex pattern: {e}")
        except TextProcessingError as e:
            return self._failed(path, str(e))

        if options.word_frequency:
            result.word_frequency = word_frequency_analysis(content, options.min_word_length)
        if options.summarize:
            result.summary = summarize_text(content, options.max_sentences)

        if output_dir is not None:
            output_path = output_dir / processed_file_name(path.name)
            try:
                write_file(output_path, output)
            except OSError as e:
                return self._failed(path, f"Could not write output: {e}")
            result.output_path = output_path

        batch_files.labels('processed').inc()
        return result

    def _failed(self, path: Path, error: str) -> FileResult:
        logger.error(f"Error processing file {path.name}: {error}")
        batch_files.labels('failed').inc()
        return FileResult(path=path, status=FileStatus.FAILED, error=error)
