"""
Tests for batch file processing
"""

import pytest

from batch_processing import (
    BatchOptions,
    BatchProcessor,
    FileStatus,
    batch_replace_in_files,
    count_occurrences_in_file,
    filter_file_by_line_pattern,
    grep_files,
    processed_file_name,
    prepare_output_dir,
    replace_in_file
)
from pattern_matching import InvalidArgumentError, MatchFlag, PatternSyntaxError


@pytest.fixture
def sample_files(tmp_path):
    """Two readable text files"""
    first = tmp_path / "first.txt"
    first.write_text("Order 12 shipped.\nNo numbers here.\nOrder 7 pending.\n", encoding="utf-8")

    second = tmp_path / "second.log"
    second.write_text("error code 500\nall good\n", encoding="utf-8")

    return [first, second]


class TestFileHelpers:
    """Test the single-file helpers"""

    def test_processed_file_name(self):
        assert processed_file_name("notes.txt") == "notes.processed.txt"
        assert processed_file_name("archive.tar.gz") == "archive.tar.processed.gz"
        assert processed_file_name("README") == "README.processed"

    def test_prepare_output_dir(self, tmp_path):
        created = prepare_output_dir(tmp_path / "out" / "nested")
        assert created.is_dir()

        not_a_dir = tmp_path / "file.txt"
        not_a_dir.write_text("x")
        with pytest.raises(NotADirectoryError):
            prepare_output_dir(not_a_dir)

    def test_filter_file_by_line_pattern(self, sample_files):
        result = filter_file_by_line_pattern(sample_files[0], r"\d+")
        assert result == "Order 12 shipped.\nOrder 7 pending.\n"

    def test_replace_in_file(self, sample_files):
        result = replace_in_file(sample_files[0], r"Order (\d+)", "#$1")
        assert result.startswith("#12 shipped.")

    def test_count_occurrences_in_file(self, sample_files):
        assert count_occurrences_in_file(sample_files[0], r"order", MatchFlag.CASE_INSENSITIVE) == 2
        assert count_occurrences_in_file(sample_files[1], r"\d+") == 1

    def test_grep_files(self, sample_files):
        result = grep_files(sample_files, r"\d+")
        assert result.splitlines() == [
            "first.txt:1: Order 12 shipped.",
            "first.txt:3: Order 7 pending.",
            "second.log:1: error code 500"
        ]

    def test_missing_file_propagates(self, tmp_path):
        with pytest.raises(OSError):
            count_occurrences_in_file(tmp_path / "missing.txt", "x")

    def test_invalid_pattern(self, sample_files):
        with pytest.raises(PatternSyntaxError):
            grep_files(sample_files, "(")


class TestBatchReplace:
    """Test batch_replace_in_files"""

    def test_writes_each_file(self, sample_files, tmp_path):
        out = tmp_path / "out"
        written = batch_replace_in_files(sample_files, out, r"\d+", "N", max_workers=2)

        assert written == 2
        assert (out / "first.txt").read_text(encoding="utf-8").startswith("Order N shipped.")
        assert (out / "second.log").read_text(encoding="utf-8") == "error code N\nall good\n"

    def test_unreadable_files_are_skipped(self, sample_files, tmp_path):
        paths = sample_files + [tmp_path / "missing.txt"]
        assert batch_replace_in_files(paths, tmp_path / "out", r"\d+", "N") == 2

    def test_invalid_pattern_fails_fast(self, sample_files, tmp_path):
        with pytest.raises(PatternSyntaxError):
            batch_replace_in_files(sample_files, tmp_path / "out", "[", "N")
        assert not (tmp_path / "out").exists()


class TestBatchProcessor:
    """Test BatchProcessor and its report"""

    def test_regex_operations_write_processed_files(self, sample_files, tmp_path):
        options = BatchOptions(pattern=r"\d+", find=True, highlight=True, replace=True,
                               prefix="<", suffix=">", replacement="[$0]")
        report = BatchProcessor(options, max_workers=2).run(sample_files, tmp_path / "out")

        assert report.processed_count == 2
        assert report.failed_count == 0

        first = report.results[0]
        assert first.status == FileStatus.PROCESSED
        assert first.matches == ["12", "7"]
        assert first.output_path == tmp_path / "out" / "first.processed.txt"
        assert first.output_path.read_text(encoding="utf-8").startswith("Order <[12]> shipped.")

        assert report.results[1].output_path.name == "second.processed.log"

    def test_analysis_runs_on_original_content(self, tmp_path):
        path = tmp_path / "story.txt"
        path.write_text("apple apple banana", encoding="utf-8")

        options = BatchOptions(pattern="apple", replace=True, replacement="pear", word_frequency=True)
        report = BatchProcessor(options).run([path], tmp_path / "out")

        result = report.results[0]
        assert result.word_frequency == {"apple": 2, "banana": 1}
        assert result.output_path.read_text(encoding="utf-8") == "pear pear banana"

    def test_analysis_only_needs_no_output_dir(self, sample_files):
        options = BatchOptions(word_frequency=True, summarize=True, max_sentences=1)
        report = BatchProcessor(options).run(sample_files)

        assert report.processed_count == 2
        assert report.results[0].output_path is None
        assert report.results[0].word_frequency["order"] == 2

    def test_failures_are_recorded_per_file(self, sample_files, tmp_path):
        paths = [sample_files[0], tmp_path / "missing.txt"]
        options = BatchOptions(pattern=r"\d+", find=True)
        report = BatchProcessor(options).run(paths, tmp_path / "out")

        assert report.processed_count == 1
        assert report.failed_count == 1
        assert report.results[1].status == FileStatus.FAILED
        assert "Could not read file" in report.results[1].error

    def test_render_report(self, sample_files, tmp_path):
        options = BatchOptions(pattern=r"\d+", find=True, word_frequency=True)
        rendered = BatchProcessor(options).run(sample_files, tmp_path / "out").render()

        assert "--- Matches in first.txt ---" in rendered
        assert "--- Analysis Results for: second.log ---" in rendered
        assert "Word Frequency Analysis:" in rendered
        assert rendered.rstrip().endswith("Processed 2 of 2 files")

    def test_report_to_dict(self, sample_files, tmp_path):
        options = BatchOptions(pattern="Order", find=True)
        data = BatchProcessor(options).run(sample_files, tmp_path / "out").to_dict()

        assert data["processed"] == 2
        assert data["files"][0]["matches"] == ["Order", "Order"]
        assert data["files"][1]["status"] == "processed"

    @pytest.mark.parametrize("options", [
        BatchOptions(),
        BatchOptions(find=True),
        BatchOptions(word_frequency=True, min_word_length=-1),
        BatchOptions(summarize=True, max_sentences=0)
    ])
    def test_invalid_options(self, options, sample_files, tmp_path):
        with pytest.raises(InvalidArgumentError):
            BatchProcessor(options).run(sample_files, tmp_path / "out")

    def test_invalid_pattern(self, sample_files, tmp_path):
        with pytest.raises(PatternSyntaxError):
            BatchProcessor(BatchOptions(pattern="(", find=True)).run(sample_files, tmp_path / "out")

    def test_regex_operations_require_output_dir(self, sample_files):
        with pytest.raises(InvalidArgumentError) as exc:
            BatchProcessor(BatchOptions(pattern="x", find=True)).run(sample_files)
        assert exc.value.field == "output_dir"

    def test_empty_file_list(self, tmp_path):
        with pytest.raises(InvalidArgumentError):
            BatchProcessor(BatchOptions(word_frequency=True)).run([], tmp_path)
