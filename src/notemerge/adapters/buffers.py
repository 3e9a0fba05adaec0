"""In-memory editable copies of note files."""

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path

from ..core.errors import ResourceError
from ..core.ports import BufferStore
from .fs_storage import atomic_write

logger = logging.getLogger(__name__)


@dataclass
class Buffer:
    path: Path
    text: str
    modified: bool = False  # unsaved changes

    def edit(self, text: str) -> None:
        if text != self.text:
            self.text = text
            self.modified = True


class BufferPool(BufferStore):
    """
    Buffers keyed by resolved path. Callers may open and edit buffers
    themselves before handing the pool to the merge engine.
    """

    def __init__(self) -> None:
        self._buffers: dict[Path, Buffer] = {}

    def __contains__(self, path: Path) -> bool:
        return path.resolve() in self._buffers

    def __len__(self) -> int:
        return len(self._buffers)

    def get(self, path: Path) -> Buffer | None:
        return self._buffers.get(path.resolve())

    def open(self, path: Path) -> Buffer:
        """Return the existing buffer for `path` or load one from disk."""
        key = path.resolve()
        buf = self._buffers.get(key)
        if buf is None:
            try:
                text = path.read_text(encoding="utf-8")
            except UnicodeDecodeError as e:
                raise ResourceError(path, f"not valid UTF-8: {e.reason}") from e
            buf = Buffer(path=path, text=text)
            self._buffers[key] = buf
            logger.debug("Loaded buffer for %s", path)
        return buf

    @contextmanager
    def acquire(self, path: Path) -> Iterator[Buffer]:
        created = path not in self
        buf = self.open(path)
        try:
            yield buf
        except BaseException:
            if created and not buf.modified:
                self._buffers.pop(path.resolve(), None)
            raise

    def persist(self, buffer: Buffer) -> None:
        atomic_write(buffer.path, buffer.text)
        buffer.modified = False
        logger.debug("Saved %s", buffer.path)

    def discard(self, buffer: Buffer, force: bool = False) -> bool:
        """Drop `buffer` from the pool. Unsaved buffers are kept unless forced."""
        if buffer.modified and not force:
            logger.debug("Keeping unsaved buffer %s", buffer.path)
            return False
        self._buffers.pop(buffer.path.resolve(), None)
        return True

    def modified_buffers(self) -> list[Buffer]:
        return [b for b in self._buffers.values() if b.modified]

    def save_all(self) -> list[Path]:
        saved = []
        for buf in self.modified_buffers():
            self.persist(buf)
            saved.append(buf.path)
        return saved
