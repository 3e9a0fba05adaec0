"""Formatting of text regions moved between notes."""

from collections.abc import Callable

from ..core.errors import PreconditionError
from ..core.model import FormatKind


def render_region_annotation(annotation: str | None, link: str) -> str:
    """Build the annotation line placed above a merged region."""
    if annotation:
        return f"{annotation}: {link}\n"
    return f"{link}\n"


def _plain(fragment: str, annotation: str, tab_width: int) -> str:
    return annotation + fragment


def _plain_indented(fragment: str, annotation: str, tab_width: int) -> str:
    indent = " " * tab_width
    first, *rest = fragment.splitlines(keepends=True)
    return annotation + first + "".join(indent + line for line in rest)


def _org_block(name: str) -> Callable[[str, str, int], str]:
    def wrap(fragment: str, annotation: str, tab_width: int) -> str:
        return f"{annotation}#+begin_{name}\n{fragment}#+end_{name}\n"

    return wrap


def _markdown_quote(fragment: str, annotation: str, tab_width: int) -> str:
    lines = fragment.splitlines(keepends=True)
    if annotation:
        lines.insert(0, annotation)
    return "".join(f"> {line}" for line in lines)


def _markdown_fence(fragment: str, annotation: str, tab_width: int) -> str:
    return f"{annotation}```\n{fragment}```\n"


FORMATTERS: dict[FormatKind, Callable[[str, str, int], str]] = {
    FormatKind.PLAIN: _plain,
    FormatKind.PLAIN_INDENTED: _plain_indented,
    FormatKind.SRC_BLOCK: _org_block("src"),
    FormatKind.QUOTE_BLOCK: _org_block("quote"),
    FormatKind.EXAMPLE_BLOCK: _org_block("example"),
    FormatKind.MARKDOWN_QUOTE: _markdown_quote,
    FormatKind.MARKDOWN_FENCE: _markdown_fence,
}


def format_region(
    fragment: str,
    kind: FormatKind | str | None,
    annotation: str = "",
    tab_width: int = 4,
) -> str:
    """Wrap a text fragment in the structure named by `kind`.

    Args:
        fragment: Text being moved; must contain non-whitespace characters
        kind: Format kind; unknown values are treated as plain
        annotation: Rendered annotation line (ending in a newline) or ""
        tab_width: Indent width used by plain-indented

    Returns:
        The formatted block, always ending in a newline
    """
    if not fragment.strip():
        raise PreconditionError("Cannot merge a blank region")
    if not fragment.endswith("\n"):
        fragment += "\n"
    formatter = FORMATTERS[FormatKind.parse(kind)]
    return formatter(fragment, annotation, tab_width)
