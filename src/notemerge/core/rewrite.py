"""Rewrite links from one identifier to another inside a single file."""

import logging
import re
from collections.abc import Callable
from pathlib import Path

from .errors import RewriteCancelled
from .model import NoteId
from .ports import BufferStore, NamingScheme

logger = logging.getLogger(__name__)


def replace_identifier(text: str, pattern: re.Pattern[str], new_id: NoteId) -> tuple[str, int]:
    """Replace the "id" group of every match of `pattern` in `text`.

    Link decoration around the identifier (brackets, descriptions, search
    options) is left as it was.

    Returns:
        Tuple of (new_text, number_of_replacements)
    """
    count = 0

    def swap(m: re.Match[str]) -> str:
        nonlocal count
        count += 1
        whole = m.group(0)
        start, end = m.start("id") - m.start(), m.end("id") - m.start()
        return whole[:start] + new_id + whole[end:]

    return pattern.sub(swap, text), count


def rewrite_identifier(
    path: Path,
    old_id: NoteId,
    new_id: NoteId,
    *,
    buffers: BufferStore,
    naming: NamingScheme,
    save: bool = False,
    discard: bool = False,
    confirm: Callable[[Path], bool] | None = None,
) -> int:
    """Point every link to `old_id` in the file at `path` to `new_id`.

    The file's buffer is reused when already open. A buffer that held
    unsaved changes before this call is never discarded.

    Raises:
        RewriteCancelled: if `confirm` declines the change
    """
    pattern = naming.link_pattern(naming.get_flavor(path), old_id)
    with buffers.acquire(path) as buf:
        had_unsaved = buf.modified
        new_text, count = replace_identifier(buf.text, pattern, new_id)
        if count and confirm is not None and not confirm(path):
            raise RewriteCancelled(f"Rewrite of {path.name} declined")
        buf.edit(new_text)
        logger.debug("Rewrote %d link(s) in %s", count, path)
        if save and buf.modified:
            buffers.persist(buf)
        if discard and not had_unsaved:
            buffers.discard(buf)
    return count
