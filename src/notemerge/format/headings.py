"""Headings inserted above merged file contents."""

from ..core.errors import UnsupportedFlavorError
from ..core.model import Flavor


def _annotated(label: str, annotation: str | None) -> str:
    return f"{annotation}: {label}" if annotation else label


def format_heading(label: str, flavor: Flavor, annotation: str | None = None) -> str:
    """Build a top-level heading for `label` in the syntax of `flavor`.

    The text flavor underlines the whole heading line, annotation
    included, so the dashes line up with what is displayed above them
    rather than with the bare label.

    Args:
        label: Heading text, usually the merged note's title
        flavor: Markup dialect of the file receiving the heading
        annotation: Optional prefix, rendered as "annotation: label"

    Returns:
        The heading followed by the flavor's paragraph separator

    Raises:
        UnsupportedFlavorError: for anything but org, markdown or text
    """
    text = _annotated(label, annotation)
    if flavor is Flavor.ORG:
        return f"* {text}\n\n"
    if flavor is Flavor.MARKDOWN:
        return f"# {text}\n\n"
    if flavor is Flavor.TEXT:
        return f"{text}\n{'-' * len(text)}\n"
    raise UnsupportedFlavorError(flavor)
