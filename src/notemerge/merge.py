"""Merge orchestration: whole-file merge and region merge."""

import logging
import os
from collections.abc import Callable
from functools import partial
from pathlib import Path

from .config import MergeSettings
from .core.errors import PreconditionError, ResourceError, RewriteError
from .core.extract import extract_body
from .core.model import FormatKind, MergeReport, Region
from .core.ports import BacklinkIndex, BufferStore, NamingScheme, Remover
from .core.rewrite import rewrite_identifier
from .format.headings import format_heading
from .format.links import render_link
from .format.region import format_region, render_region_annotation

logger = logging.getLogger(__name__)

# Command name -> fixed format kind for the region merge shortcuts.
REGION_WRAPPERS: dict[str, FormatKind] = {
    "merge-region-plain": FormatKind.PLAIN,
    "merge-region-plain-indented": FormatKind.PLAIN_INDENTED,
    "merge-region-org-src": FormatKind.SRC_BLOCK,
    "merge-region-org-quote": FormatKind.QUOTE_BLOCK,
    "merge-region-org-example": FormatKind.EXAMPLE_BLOCK,
    "merge-region-markdown-quote": FormatKind.MARKDOWN_QUOTE,
    "merge-region-markdown-fence": FormatKind.MARKDOWN_FENCE,
}


def append_section(text: str, addition: str) -> str:
    """Append `addition` after a blank line separator."""
    if text and not text.endswith("\n"):
        text += "\n"
    return text + "\n" + addition


def _require_file(path: Path) -> None:
    if not path.is_file():
        raise ResourceError(path, "no such file")


def _require_writable(path: Path) -> None:
    if not os.access(path, os.W_OK):
        raise PreconditionError(f"File is not writable: {path}")


class Merger:
    """Runs merges against a naming scheme, backlink index and buffer store."""

    def __init__(
        self,
        naming: NamingScheme,
        index: BacklinkIndex,
        buffers: BufferStore,
        remover: Remover,
        settings: MergeSettings | None = None,
    ):
        self.naming = naming
        self.index = index
        self.buffers = buffers
        self.remover = remover
        self.settings = settings or MergeSettings()

    def merge_file(
        self,
        destination: Path,
        source: Path,
        *,
        interactive: bool = False,
        confirm: Callable[[Path], bool] | None = None,
    ) -> MergeReport:
        """Append `source` to `destination`, relink backlinks, delete `source`.

        Args:
            destination: Note that receives the contents
            source: Note that is merged and then removed
            interactive: Skip the writability check; interactive callers
                only offer writable files
            confirm: Optional per-file confirmation for link rewrites

        Returns:
            MergeReport naming rewritten files and files that failed
        """
        _require_file(destination)
        _require_file(source)
        if destination.resolve() == source.resolve():
            raise PreconditionError("Cannot merge a file into itself")
        flavor = self.naming.get_flavor(destination)
        if self.naming.get_flavor(source) is not flavor:
            raise PreconditionError(
                f"Flavors differ: {source.name} and {destination.name}"
            )
        if not interactive:
            _require_writable(destination)
            _require_writable(source)

        try:
            body = extract_body(source)
            title = self.naming.extract_title(source)
        except (OSError, UnicodeDecodeError) as e:
            raise ResourceError(source, str(e)) from e
        source_id = self.naming.extract_identifier(source)
        destination_id = self.naming.extract_identifier(destination)
        if source_id == destination_id:
            raise PreconditionError(f"Both files have identifier {source_id}")

        heading = format_heading(title, flavor, self.settings.file_annotation)
        try:
            with self.buffers.acquire(destination) as dst_buf:
                dst_buf.edit(append_section(dst_buf.text, heading + body))
                if self.settings.auto_save:
                    self.buffers.persist(dst_buf)
        except OSError as e:
            raise ResourceError(destination, str(e)) from e
        logger.info("Appended %s to %s", source.name, destination.name)

        report = MergeReport(
            operation="file",
            source=source,
            destination=destination,
            saved=self.settings.auto_save,
        )
        for path in self._files_to_relink(source, destination, source_id):
            try:
                rewrite_identifier(
                    path,
                    source_id,
                    destination_id,
                    buffers=self.buffers,
                    naming=self.naming,
                    save=self.settings.auto_save,
                    discard=self.settings.auto_discard,
                    confirm=confirm,
                )
            except Exception as e:  # cancellation included; keep going
                error = RewriteError(path, str(e))
                logger.warning("Links not updated: %s", error)
                report.failed[path] = error.reason
            else:
                report.rewritten.append(path)

        # The source goes away below; its contents must be on disk first.
        dst_buf = self.buffers.get(destination)
        if dst_buf is not None and dst_buf.modified:
            try:
                self.buffers.persist(dst_buf)
            except OSError as e:
                raise ResourceError(destination, str(e)) from e

        src_buf = self.buffers.get(source)
        if src_buf is not None:
            self.buffers.discard(src_buf, force=True)
        try:
            self.remover.remove(source, prefer_trash=self.settings.trash)
        except OSError as e:
            raise ResourceError(source, str(e)) from e
        self.index.rebuild()

        logger.info(report.message)
        return report

    def _files_to_relink(self, source: Path, destination: Path, source_id: str) -> list[Path]:
        files = {p.resolve(): p for p in self.index.backlink_files(source_id)}
        files.pop(source.resolve(), None)
        # The appended body may contain links to its own identifier.
        dst_buf = self.buffers.get(destination)
        pattern = self.naming.link_pattern(self.naming.get_flavor(destination), source_id)
        if dst_buf is not None and pattern.search(dst_buf.text):
            files.setdefault(destination.resolve(), destination)
        return sorted(files.values())

    def merge_region(
        self,
        destination: Path,
        source: Path,
        region: Region,
        kind: FormatKind | str | None = FormatKind.PLAIN,
    ) -> MergeReport:
        """Move `region` of `source` to the end of `destination`.

        The region is replaced in `source` by a link to `destination`, and
        the moved text is formatted according to `kind` with a link back to
        `source`.
        """
        kind = FormatKind.parse(kind)
        if region.empty or region.start < 0:
            raise PreconditionError("No region selected")
        _require_file(source)
        _require_file(destination)
        if destination.resolve() == source.resolve():
            raise PreconditionError("Destination must differ from the source file")
        _require_writable(destination)
        dst_flavor = self.naming.get_flavor(destination)
        if not kind.allowed_for(dst_flavor):
            raise PreconditionError(
                f"Format {kind.value} is not available for {dst_flavor.value} files"
            )

        settings = self.settings
        try:
            with (
                self.buffers.acquire(source) as src_buf,
                self.buffers.acquire(destination) as dst_buf,
            ):
                if region.end > len(src_buf.text):
                    raise PreconditionError("Region extends past the end of the file")
                text = src_buf.text
                fragment = text[region.start:region.end]
                annotation = render_region_annotation(
                    settings.region_annotation,
                    render_link(source, destination, self.naming),
                )
                block = format_region(fragment, kind, annotation, settings.tab_width)
                forward = render_link(destination, source, self.naming)

                # Destination first: a failed write must not lose the fragment.
                dst_had_unsaved = dst_buf.modified
                dst_buf.edit(append_section(dst_buf.text, block))
                if settings.auto_save:
                    self.buffers.persist(dst_buf)

                src_buf.edit(text[:region.start] + forward + text[region.end:])
                if settings.auto_save:
                    self.buffers.persist(src_buf)

                if settings.auto_discard and not dst_had_unsaved:
                    self.buffers.discard(dst_buf)
        except OSError as e:
            path = Path(e.filename) if e.filename else destination
            raise ResourceError(path, str(e)) from e

        report = MergeReport(
            operation="region",
            source=source,
            destination=destination,
            saved=settings.auto_save,
        )
        logger.info(report.message)
        return report

    def region_wrapper(self, name: str) -> Callable[..., MergeReport]:
        """Return merge_region with the format kind fixed by `name`."""
        return partial(self.merge_region, kind=REGION_WRAPPERS[name])
