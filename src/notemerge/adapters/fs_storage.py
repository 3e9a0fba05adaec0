import shutil
from pathlib import Path

from ..core.ports import Remover


def atomic_write(path: Path, contents: str) -> None:
    """Write via a temp file in the same directory, then replace."""
    tmp_path = path.with_name(path.name + ".tmp")
    try:
        tmp_path.write_text(contents, encoding="utf-8")
        tmp_path.replace(path)
    except Exception:
        if tmp_path.exists():
            tmp_path.unlink()
        raise


class FsRemover(Remover):
    def __init__(self, trash_dir: Path):
        self.trash_dir = trash_dir

    def _trash_path(self, path: Path) -> Path:
        candidate = self.trash_dir / path.name
        n = 1
        while candidate.exists():
            candidate = self.trash_dir / f"{path.stem}.{n}{path.suffix}"
            n += 1
        return candidate

    def remove(self, path: Path, prefer_trash: bool = False) -> Path | None:
        """Delete `path`, or move it into the trash directory.

        Returns:
            The new location when trashed, otherwise None
        """
        if prefer_trash:
            self.trash_dir.mkdir(parents=True, exist_ok=True)
            dst = self._trash_path(path)
            shutil.move(str(path), str(dst))
            return dst
        path.unlink()
        return None
