"""Runtime wiring helper for CLI applications."""

from dataclasses import dataclass
from pathlib import Path

from .adapters.buffers import BufferPool
from .adapters.fs_storage import FsRemover
from .adapters.naming import DenoteNaming
from .adapters.scan_index import ScanIndex
from .config import NotemergeConfig, load_config
from .merge import Merger


@dataclass
class Runtime:
    """Container for all wired components."""
    merger: Merger
    naming: DenoteNaming
    index: ScanIndex
    buffers: BufferPool
    config: NotemergeConfig


def build_runtime(
    vault_path: Path | None = None,
    config_path: Path | None = None,
) -> Runtime:
    """Build and wire all components for a vault."""
    config = load_config(config_path=config_path, vault_path=vault_path)

    if vault_path is None:
        vault_path = config.vault.root

    naming = DenoteNaming()
    index = ScanIndex(vault_path, naming)
    buffers = BufferPool()
    remover = FsRemover(vault_path / ".trash")
    merger = Merger(naming, index, buffers, remover, config.merge)

    return Runtime(
        merger=merger,
        naming=naming,
        index=index,
        buffers=buffers,
        config=config,
    )
