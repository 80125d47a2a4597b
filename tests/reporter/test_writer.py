"""Tests for ReportWriter."""

import os
import sys
from pathlib import Path

import pytest

from bldd.models import AggregationStore, ArchitectureTag
from bldd.reporter import ReportWriter, build_report_content

TITLE = "Report on dynamic used libraries by ELF executables"


def _content():
    store = AggregationStore()
    store.record(ArchitectureTag.X86_64, "libc.so", "/bin/a")
    return build_report_content(store, title=TITLE)


def test_writes_text_report(tmp_path):
    writer = ReportWriter(str(tmp_path / "out"))

    path = writer.write(_content(), "txt").unwrap()

    assert path == tmp_path / "out.txt"
    assert path.read_text().startswith(TITLE + "\n")
    assert "-> /bin/a\n" in path.read_text()


def test_writes_both_formats(tmp_path):
    writer = ReportWriter(str(tmp_path / "out"))

    results = writer.write_all(_content(), ["txt", "pdf"])

    assert list(results) == ["txt", "pdf"]
    assert all(result.is_ok() for result in results.values())
    assert (tmp_path / "out.pdf").read_bytes().startswith(b"%PDF")


def test_blocked_format_does_not_stop_others(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    (tmp_path / "report.txt").mkdir()

    results = ReportWriter("report").write_all(_content(), ["txt", "pdf"])

    error = results["txt"].unwrap_err()
    assert error.format == "txt"
    assert error.path == "report.txt"
    assert (tmp_path / "report.txt").is_dir()
    assert results["pdf"].unwrap() == Path("report.pdf")
    assert (tmp_path / "report.pdf").is_file()
    assert not list(tmp_path.glob(".report.txt.*.tmp"))


def test_unsupported_format(tmp_path):
    result = ReportWriter(str(tmp_path / "out")).write(_content(), "html")
    assert result.is_err()
    assert result.unwrap_err().message == "unsupported report format"


@pytest.mark.skipif(sys.platform == "win32", reason="POSIX byte file names")
def test_undecodable_path_written_as_raw_bytes(tmp_path):
    raw = os.fsdecode(b"/usr/bin/caf\xe9")
    store = AggregationStore()
    store.record(ArchitectureTag.X86_64, "libc.so", "/usr/bin/ok")
    store.record(ArchitectureTag.X86_64, "libc.so", raw)
    content = build_report_content(store, title=TITLE)

    results = ReportWriter(str(tmp_path / "rep")).write_all(content, ["txt", "pdf"])

    assert results["txt"].is_ok()
    assert results["pdf"].is_ok()
    data = (tmp_path / "rep.txt").read_bytes()
    assert b"-> /usr/bin/ok\n" in data
    assert b"-> /usr/bin/caf\xe9\n" in data
