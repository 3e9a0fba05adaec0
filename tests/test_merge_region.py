"""Tests for region merges and their format-kind shortcuts."""

import tempfile
from functools import partial
from pathlib import Path

import pytest

from notemerge.adapters.buffers import BufferPool
from notemerge.adapters.fs_storage import FsRemover
from notemerge.adapters.naming import DenoteNaming
from notemerge.adapters.scan_index import ScanIndex
from notemerge.config import MergeSettings
from notemerge.core.errors import PreconditionError, ResourceError
from notemerge.core.model import FormatKind, Region
from notemerge.merge import REGION_WRAPPERS, Merger

DST = "20240101T100000"
SRC = "20240102T100000"


def _merger(vault: Path, **settings) -> Merger:
    naming = DenoteNaming()
    return Merger(
        naming,
        ScanIndex(vault, naming),
        BufferPool(),
        FsRemover(vault / ".trash"),
        MergeSettings(**settings),
    )


def _markdown_pair(vault: Path) -> tuple[Path, Path]:
    dst = vault / f"{DST}--dest.md"
    dst.write_text("---\ntitle: Dest\n---\n\nExisting.\n")
    src = vault / f"{SRC}--src.md"
    src.write_text("---\ntitle: Src\n---\n\nsay hello there\n")
    return dst, src


def _region_of(path: Path, needle: str) -> Region:
    start = path.read_text().index(needle)
    return Region(start, start + len(needle))


def test_markdown_quote_scenario():
    """The fragment is quoted in the destination and linked from the source."""
    with tempfile.TemporaryDirectory() as tmpdir:
        vault = Path(tmpdir)
        dst, src = _markdown_pair(vault)
        merger = _merger(vault, auto_save=True)

        report = merger.merge_region(
            dst, src, _region_of(src, "hello"), FormatKind.MARKDOWN_QUOTE
        )

        assert dst.read_text() == (
            "---\ntitle: Dest\n---\n\nExisting.\n"
            "\n"
            f"> MERGED REGION: [Src](denote:{SRC})\n"
            "> hello\n"
        )
        assert src.read_text() == f"---\ntitle: Src\n---\n\nsay [Dest](denote:{DST}) there\n"
        assert report.operation == "region"
        assert not report.failed


def test_region_merge_uses_each_files_flavor_for_links():
    with tempfile.TemporaryDirectory() as tmpdir:
        vault = Path(tmpdir)
        dst = vault / f"{DST}--dest.org"
        dst.write_text("#+title: Dest\n\n* Notes\n")
        src = vault / f"{SRC}--src.txt"
        src.write_text("title: Src\n\nkeep\nmove me\nkeep too\n")
        merger = _merger(vault, auto_save=True, region_annotation=None)

        merger.merge_region(dst, src, _region_of(src, "move me\n"), FormatKind.SRC_BLOCK)

        assert dst.read_text() == (
            "#+title: Dest\n\n* Notes\n"
            "\n"
            f"[[denote:{SRC}][Src]]\n"
            "#+begin_src\nmove me\n#+end_src\n"
        )
        assert src.read_text() == f"title: Src\n\nkeep\n[[denote:{DST}][Dest]]keep too\n"


def test_region_merge_without_auto_save_edits_buffers_only():
    with tempfile.TemporaryDirectory() as tmpdir:
        vault = Path(tmpdir)
        dst, src = _markdown_pair(vault)
        original = src.read_text()
        merger = _merger(vault)

        report = merger.merge_region(dst, src, _region_of(src, "hello"))

        assert src.read_text() == original
        assert "hello" not in merger.buffers.get(src).text
        assert merger.buffers.get(dst).text.endswith("hello\n")
        assert "remember to save" in report.message


def test_region_taken_from_open_buffer():
    """Offsets refer to the caller's buffer, which may differ from disk."""
    with tempfile.TemporaryDirectory() as tmpdir:
        vault = Path(tmpdir)
        dst, src = _markdown_pair(vault)
        merger = _merger(vault, auto_save=True)
        buf = merger.buffers.open(src)
        buf.edit(buf.text + "unsaved tail\n")
        start = buf.text.index("unsaved tail")

        merger.merge_region(dst, src, Region(start, start + len("unsaved tail")))

        assert dst.read_text().endswith(f"MERGED REGION: [Src](denote:{SRC})\nunsaved tail\n")
        assert src.read_text().endswith(f"[Dest](denote:{DST})\n")


def test_auto_discard_drops_destination_buffer():
    with tempfile.TemporaryDirectory() as tmpdir:
        vault = Path(tmpdir)
        dst, src = _markdown_pair(vault)
        merger = _merger(vault, auto_save=True, auto_discard=True)

        merger.merge_region(dst, src, _region_of(src, "hello"))

        assert merger.buffers.get(dst) is None


def test_auto_discard_keeps_destination_with_unsaved_changes():
    with tempfile.TemporaryDirectory() as tmpdir:
        vault = Path(tmpdir)
        dst, src = _markdown_pair(vault)
        merger = _merger(vault, auto_save=True, auto_discard=True)
        merger.buffers.open(dst).edit("user draft\n")

        merger.merge_region(dst, src, _region_of(src, "hello"))

        assert merger.buffers.get(dst) is not None


@pytest.mark.parametrize("region", [Region(5, 5), Region(9, 3)])
def test_empty_region_rejected(region):
    with tempfile.TemporaryDirectory() as tmpdir:
        vault = Path(tmpdir)
        dst, src = _markdown_pair(vault)
        with pytest.raises(PreconditionError):
            _merger(vault).merge_region(dst, src, region)


def test_blank_fragment_leaves_source_untouched():
    with tempfile.TemporaryDirectory() as tmpdir:
        vault = Path(tmpdir)
        dst, src = _markdown_pair(vault)
        merger = _merger(vault, auto_save=True)
        blank = _region_of(src, "\n\n")

        with pytest.raises(PreconditionError):
            merger.merge_region(dst, src, blank)
        assert merger.buffers.get(src) is None
        assert "hello" in src.read_text()


def test_region_past_end_rejected():
    with tempfile.TemporaryDirectory() as tmpdir:
        vault = Path(tmpdir)
        dst, src = _markdown_pair(vault)
        with pytest.raises(PreconditionError):
            _merger(vault).merge_region(dst, src, Region(0, 10_000))


def test_kind_not_available_for_destination_flavor():
    with tempfile.TemporaryDirectory() as tmpdir:
        vault = Path(tmpdir)
        dst, src = _markdown_pair(vault)
        merger = _merger(vault, auto_save=True)

        with pytest.raises(PreconditionError):
            merger.merge_region(dst, src, _region_of(src, "hello"), FormatKind.SRC_BLOCK)
        assert "hello" in src.read_text()


def test_unknown_kind_merges_as_plain():
    with tempfile.TemporaryDirectory() as tmpdir:
        vault = Path(tmpdir)
        dst, src = _markdown_pair(vault)
        _merger(vault, auto_save=True).merge_region(dst, src, _region_of(src, "hello"), "nope")

        assert dst.read_text().endswith(f"\nMERGED REGION: [Src](denote:{SRC})\nhello\n")


def test_same_file_rejected():
    with tempfile.TemporaryDirectory() as tmpdir:
        vault = Path(tmpdir)
        _dst, src = _markdown_pair(vault)
        with pytest.raises(PreconditionError):
            _merger(vault).merge_region(src, src, _region_of(src, "hello"))


def test_wrapper_table_covers_every_kind():
    assert len(REGION_WRAPPERS) == 7
    assert set(REGION_WRAPPERS.values()) == set(FormatKind)


def test_region_wrapper_binds_kind():
    with tempfile.TemporaryDirectory() as tmpdir:
        vault = Path(tmpdir)
        dst, src = _markdown_pair(vault)
        merger = _merger(vault, auto_save=True)

        wrapper = merger.region_wrapper("merge-region-markdown-fence")
        assert isinstance(wrapper, partial)
        assert wrapper.keywords == {"kind": FormatKind.MARKDOWN_FENCE}

        wrapper(dst, src, _region_of(src, "hello"))
        assert dst.read_text().endswith(
            f"\nMERGED REGION: [Src](denote:{SRC})\n```\nhello\n```\n"
        )


def test_unknown_wrapper_name():
    with tempfile.TemporaryDirectory() as tmpdir:
        with pytest.raises(KeyError):
            _merger(Path(tmpdir)).region_wrapper("merge-region-rst")


def test_failed_destination_write_leaves_source_on_disk(monkeypatch):
    """The fragment stays in the source when the destination cannot be saved."""
    with tempfile.TemporaryDirectory() as tmpdir:
        vault = Path(tmpdir)
        dst, src = _markdown_pair(vault)
        original = src.read_text()

        def fail_for_destination(path, contents):
            if path == dst:
                raise OSError(28, "No space left on device", str(path))
            path.write_text(contents)

        monkeypatch.setattr("notemerge.adapters.buffers.atomic_write", fail_for_destination)
        merger = _merger(vault, auto_save=True)

        with pytest.raises(ResourceError) as excinfo:
            merger.merge_region(dst, src, _region_of(src, "hello"))

        assert excinfo.value.path == dst
        assert src.read_text() == original


def test_source_that_is_not_utf8_is_a_resource_error():
    with tempfile.TemporaryDirectory() as tmpdir:
        vault = Path(tmpdir)
        dst, _src = _markdown_pair(vault)
        src = vault / "20240103T100000--bad.md"
        src.write_bytes(b"say \xff\xfe there\n")

        with pytest.raises(ResourceError) as excinfo:
            _merger(vault, auto_save=True).merge_region(dst, src, Region(0, 3))

        assert excinfo.value.path == src
        assert dst.read_text() == "---\ntitle: Dest\n---\n\nExisting.\n"
