import logging
from collections import defaultdict
from collections.abc import Iterator
from pathlib import Path

from ..core.model import NoteId
from ..core.ports import BacklinkIndex, NamingScheme
from .naming import EXTENSIONS

logger = logging.getLogger(__name__)


def iter_note_files(root: Path) -> Iterator[Path]:
    """Yield note files under `root`, skipping dot-directories."""
    if not root.exists():
        return
    for p in sorted(root.rglob("*")):
        rel = p.relative_to(root)
        if any(part.startswith(".") for part in rel.parts):
            continue
        if p.is_file() and p.suffix.lower() in EXTENSIONS:
            yield p


class ScanIndex(BacklinkIndex):
    """
    Linear scan of the vault. Cached until rebuild(); safe to rebuild at
    any time.
    """

    def __init__(self, root: Path, naming: NamingScheme):
        self.root = root
        self.naming = naming
        self._links_in: dict[NoteId, set[Path]] | None = None

    def rebuild(self) -> None:
        self._links_in = self._scan()

    def _scan(self) -> dict[NoteId, set[Path]]:
        links_in: dict[NoteId, set[Path]] = defaultdict(set)
        for path in iter_note_files(self.root):
            try:
                text = path.read_text(encoding="utf-8")
            except (OSError, UnicodeDecodeError) as e:
                logger.warning("Skipping unreadable file %s: %s", path, e)
                continue
            pattern = self.naming.link_pattern(self.naming.get_flavor(path))
            for m in pattern.finditer(text):
                links_in[m.group("id")].add(path)
        return links_in

    def backlink_files(self, identifier: NoteId) -> set[Path]:
        links_in = self._links_in
        if links_in is None:
            links_in = self._links_in = self._scan()
        return set(links_in.get(identifier, ()))
