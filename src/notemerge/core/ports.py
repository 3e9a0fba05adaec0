from contextlib import AbstractContextManager
from pathlib import Path
from re import Pattern
from typing import Protocol

from .model import Flavor, NoteId


class NamingScheme(Protocol):
    """
    Reads identifiers, flavors and titles off note files. Never validates
    or creates names.
    """

    def get_flavor(self, path: Path) -> Flavor:
        pass

    def extract_identifier(self, path: Path) -> NoteId:
        pass

    def extract_title(self, path: Path) -> str:
        pass

    def link_pattern(self, flavor: Flavor, identifier: NoteId | None = None) -> Pattern[str]:
        pass


class BacklinkIndex(Protocol):
    """
    Reverse lookup: which files reference an identifier. The indexing
    strategy is up to the implementation.
    """

    def backlink_files(self, identifier: NoteId) -> set[Path]:
        pass

    def rebuild(self) -> None:
        pass


class Buffer(Protocol):
    path: Path
    text: str
    modified: bool


class BufferStore(Protocol):
    """
    Editable in-memory copies of files. A buffer may already be held by the
    caller; the engine never assumes it owns one.
    """

    def get(self, path: Path) -> Buffer | None:
        pass

    def acquire(self, path: Path) -> AbstractContextManager[Buffer]:
        pass

    def persist(self, buffer: Buffer) -> None:
        pass

    def discard(self, buffer: Buffer, force: bool = False) -> bool:
        pass


class Remover(Protocol):
    def remove(self, path: Path, prefer_trash: bool = False) -> Path | None:
        pass
