"""Tests for report content assembly and text rendering."""

from bldd.models import AggregationStore, ArchitectureTag
from bldd.reporter import build_report_content, render_text

TITLE = "Report on dynamic used libraries by ELF executables"


def _store():
    store = AggregationStore()
    store.record(ArchitectureTag.X86_64, "libm.so", "/bin/b")
    store.record(ArchitectureTag.X86_64, "libc.so", "/bin/a")
    store.record(ArchitectureTag.X86_64, "libc.so", "/bin/b")
    store.record(ArchitectureTag.AARCH64, "libc.so", "/arm/a")
    return store


class TestBuildReportContent:
    """Tests for build_report_content."""

    def test_structure(self):
        content = build_report_content(_store(), title=TITLE)

        assert content.title == TITLE
        assert content.total_executables == 4
        assert [arch.name for arch in content.architectures] == ["x86_64", "aarch64"]

        x86 = content.architectures[0]
        assert x86.header == "---------- x86_64 ----------"
        assert [lib.name for lib in x86.libraries] == ["libc.so", "libm.so"]
        assert x86.libraries[0].executables == ("/bin/a", "/bin/b")
        assert x86.libraries[0].header == "libc.so (2 execs)"

    def test_snapshot_detached_from_store(self):
        store = _store()
        content = build_report_content(store, title=TITLE)

        store.record(ArchitectureTag.X86_64, "libc.so", "/bin/c")

        assert content.architectures[0].libraries[0].count == 2
        assert list(store.get(ArchitectureTag.X86_64).libraries) == ["libm.so", "libc.so"]

    def test_empty_store(self):
        content = build_report_content(AggregationStore(), title=TITLE)
        assert content.architectures == ()
        assert content.total_executables == 0


class TestRenderText:
    """Tests for the plain-text report."""

    def test_layout(self):
        text = render_text(build_report_content(_store(), title=TITLE))

        assert text == (
            f"{TITLE}\n"
            + "-" * 60 + "\n"
            "---------- x86_64 ----------\n"
            "libc.so (2 execs)\n"
            "-> /bin/a\n"
            "-> /bin/b\n"
            "\n"
            "libm.so (1 execs)\n"
            "-> /bin/b\n"
            "\n"
            "---------- aarch64 ----------\n"
            "libc.so (1 execs)\n"
            "-> /arm/a\n"
            "\n"
        )

    def test_empty_report_has_only_title(self):
        text = render_text(build_report_content(AggregationStore(), title=TITLE))
        assert text == f"{TITLE}\n" + "-" * 60 + "\n"

    def test_paths_not_escaped(self):
        store = AggregationStore()
        store.record(ArchitectureTag.X86, "libc.so", "/opt/a&b/<tool>")

        text = render_text(build_report_content(store, title=TITLE))

        assert "-> /opt/a&b/<tool>\n" in text
