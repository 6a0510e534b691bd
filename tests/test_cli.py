"""Tests for CLI commands."""

from __future__ import annotations

import logging
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest
from typer.testing import CliRunner

from docseek.cli import _setup_logging, app
from docseek.index.storage import SnapshotStore


runner = CliRunner()


def _result_lines(output: str) -> list:
    return [line for line in output.splitlines() if line[:1].isdigit()]


@pytest.fixture
def text_corpus(tmp_path: Path) -> Path:
    (tmp_path / "one.txt").write_text("Apple banana apple")
    (tmp_path / "two.txt").write_text("banana banana")
    (tmp_path / "skip.md").write_text("apple apple apple")
    return tmp_path


class TestSetupLogging:
    """Tests for _setup_logging helper."""

    def test_setup_logging_verbose(self) -> None:
        """Verbose mode sets DEBUG level."""
        with patch("docseek.cli.logging.basicConfig") as mock_config:
            _setup_logging(verbose=True)
            mock_config.assert_called_once()
            assert mock_config.call_args[1]["level"] == logging.DEBUG

    def test_setup_logging_normal(self) -> None:
        """Normal mode sets INFO level."""
        with patch("docseek.cli.logging.basicConfig") as mock_config:
            _setup_logging(verbose=False)
            mock_config.assert_called_once()
            assert mock_config.call_args[1]["level"] == logging.INFO


class TestSearchCommand:
    """Tests for the search command."""

    @patch("docseek.ingestion.reader.fitz")
    def test_search_pdfs_end_to_end(self, mock_fitz: MagicMock, tmp_path: Path) -> None:
        """Two PDFs, query apple: one.pdf ranks first with 1.0."""
        (tmp_path / "one.pdf").write_bytes(b"%PDF-1.4 fake")
        (tmp_path / "two.pdf").write_bytes(b"%PDF-1.4 fake")
        texts = {"one.pdf": "apple banana apple", "two.pdf": "banana banana"}

        def open_pdf(path):
            page = MagicMock()
            page.get_text.return_value = texts[Path(path).name]
            doc = MagicMock()
            doc.__len__ = MagicMock(return_value=1)
            doc.__getitem__ = MagicMock(return_value=page)
            return doc

        mock_fitz.open.side_effect = open_pdf

        result = runner.invoke(app, ["search", "pdf", str(tmp_path), "apple"])

        assert result.exit_code == 0, result.output
        assert "Reindexing data" in result.stdout
        lines = _result_lines(result.stdout)
        assert len(lines) == 2
        assert lines[0].startswith("1: ") and lines[0].endswith("one.pdf, 1.0")
        assert lines[1].startswith("2: ") and lines[1].endswith("two.pdf, 0.0")
        assert (tmp_path / ".data.json").exists()

    def test_search_reuses_fresh_snapshot(self, text_corpus: Path) -> None:
        """The second run searches the saved snapshot."""
        first = runner.invoke(app, ["search", "txt", str(text_corpus), "apple"])
        (text_corpus / "one.txt").unlink()

        second = runner.invoke(app, ["search", "txt", str(text_corpus), "apple"])

        assert first.exit_code == 0, first.output
        assert second.exit_code == 0, second.output
        assert "Searching for apple" in second.stdout
        assert _result_lines(second.stdout) == _result_lines(first.stdout)

    def test_search_lowercases_query(self, text_corpus: Path) -> None:
        result = runner.invoke(app, ["search", ".TXT", str(text_corpus), "APPLE"])

        assert result.exit_code == 0, result.output
        lines = _result_lines(result.stdout)
        assert lines[0].endswith("one.txt, 1.0")
        assert not any("skip.md" in line for line in lines)

    def test_search_top_k(self, text_corpus: Path) -> None:
        result = runner.invoke(app, ["search", "txt", str(text_corpus), "banana", "--top-k", "1"])

        assert result.exit_code == 0, result.output
        lines = _result_lines(result.stdout)
        assert len(lines) == 1
        assert lines[0].endswith("two.txt, 1.5")

    def test_search_empty_directory(self, tmp_path: Path) -> None:
        result = runner.invoke(app, ["search", "pdf", str(tmp_path), "apple"])

        assert result.exit_code == 0, result.output
        assert "No documents indexed" in result.stdout

    def test_search_missing_query(self, tmp_path: Path) -> None:
        """Missing positional arguments are usage errors."""
        result = runner.invoke(app, ["search", "pdf", str(tmp_path)])

        assert result.exit_code == 2

    def test_search_missing_directory(self, tmp_path: Path) -> None:
        result = runner.invoke(app, ["search", "pdf", str(tmp_path / "missing"), "apple"])

        assert result.exit_code == 2

    def test_search_malformed_snapshot(self, text_corpus: Path) -> None:
        """A corrupt snapshot aborts the run."""
        (text_corpus / ".data.json").write_text("not json")

        result = runner.invoke(app, ["search", "txt", str(text_corpus), "apple"])

        assert result.exit_code == 1
        assert "Malformed snapshot" in result.stdout

    def test_search_undecodable_snapshot(self, text_corpus: Path) -> None:
        """A snapshot that is not UTF-8 is reported, not raised."""
        (text_corpus / ".data.json").write_bytes(b"\xff\xfe[\x80]")

        result = runner.invoke(app, ["search", "txt", str(text_corpus), "apple"])

        assert result.exit_code == 1
        assert not isinstance(result.exception, UnicodeDecodeError)
        assert "Malformed snapshot" in result.stdout

    @patch("docseek.ingestion.reader.fitz")
    def test_search_announces_reindex_before_indexing(self, mock_fitz: MagicMock, tmp_path: Path) -> None:
        """The reindex message is printed before documents are read."""
        (tmp_path / "broken.pdf").write_bytes(b"not a pdf")
        mock_fitz.open.side_effect = RuntimeError("cannot open broken document")

        result = runner.invoke(app, ["search", "pdf", str(tmp_path), "apple"])

        assert result.exit_code == 1
        assert "Reindexing data" in result.stdout
        assert result.stdout.index("Reindexing data") < result.stdout.index("Error:")

    def test_search_invalid_filetype(self, text_corpus: Path) -> None:
        result = runner.invoke(app, ["search", ".", str(text_corpus), "apple"])

        assert result.exit_code == 1
        assert "filetype" in result.stdout


class TestIndexCommand:
    """Tests for the index command."""

    def test_index_rebuilds(self, text_corpus: Path) -> None:
        (text_corpus / ".data.json").write_text("[]")

        result = runner.invoke(app, ["index", "txt", str(text_corpus)])

        assert result.exit_code == 0, result.output
        assert "Indexed: 2" in result.stdout
        assert '"secs_since_epoch"' in (text_corpus / ".data.json").read_text()

    def test_index_verbose(self, text_corpus: Path) -> None:
        """Verbose flag is accepted."""
        result = runner.invoke(app, ["index", "txt", str(text_corpus), "--verbose"])

        assert result.exit_code == 0, result.output


class TestStatusCommand:
    """Tests for the status command."""

    def test_status_absent(self, tmp_path: Path) -> None:
        result = runner.invoke(app, ["status", str(tmp_path)])

        assert result.exit_code == 0, result.output
        assert "State: absent, documents: 0" in result.stdout

    def test_status_fresh(self, text_corpus: Path) -> None:
        runner.invoke(app, ["index", "txt", str(text_corpus)])

        result = runner.invoke(app, ["status", str(text_corpus)])

        assert result.exit_code == 0, result.output
        assert "State: fresh, documents: 2" in result.stdout

    def test_status_reads_snapshot_once(self, text_corpus: Path) -> None:
        runner.invoke(app, ["index", "txt", str(text_corpus)])

        with patch.object(SnapshotStore, "load", autospec=True, side_effect=SnapshotStore.load) as mock_load:
            result = runner.invoke(app, ["status", str(text_corpus)])

        assert result.exit_code == 0, result.output
        assert "State: fresh, documents: 2" in result.stdout
        assert mock_load.call_count == 1

    def test_status_malformed(self, tmp_path: Path) -> None:
        (tmp_path / ".data.json").write_text("{")

        result = runner.invoke(app, ["status", str(tmp_path)])

        assert result.exit_code == 1
