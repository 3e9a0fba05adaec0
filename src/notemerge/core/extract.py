"""Body extraction: drop the leading metadata block of a note."""

from pathlib import Path


def split_metadata(text: str) -> tuple[str, str]:
    """
    Split note text at the first blank line.

    The metadata block runs from the top up to and including the first
    line that is empty or whitespace only. Without such a line the whole
    text is body.

    Examples:
        >>> split_metadata("#+title: x\\n\\nbody\\n")
        ('#+title: x\\n\\n', 'body\\n')
        >>> split_metadata("no front matter")
        ('', 'no front matter')
    """
    offset = 0
    for line in text.splitlines(keepends=True):
        offset += len(line)
        if not line.strip():
            return text[:offset], text[offset:]
    return "", text


def extract_body(path: Path) -> str:
    """Return everything after the metadata block of the file at `path`."""
    text = path.read_text(encoding="utf-8")
    _meta, body = split_metadata(text)
    return body
