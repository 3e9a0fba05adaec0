"""Link rendering and matching for identifier-based links."""

import re
from pathlib import Path
from re import Pattern

from ..core.errors import UnsupportedFlavorError
from ..core.model import Flavor, NoteId
from ..core.ports import NamingScheme

ID_RE = r"\d{8}T\d{6}"

# Org and plain text share the bracketed form.
_ORG_LINK = "[[denote:{id}][{title}]]"
_MD_LINK = "[{title}](denote:{id})"

LINK_TEMPLATES: dict[Flavor, str] = {
    Flavor.ORG: _ORG_LINK,
    Flavor.MARKDOWN: _MD_LINK,
    Flavor.TEXT: _ORG_LINK,
}

# {id} is substituted with the identifier expression; group "id" spans it.
_ORG_PATTERN = r"\[\[denote:(?P<id>{id})(?:::[^\]]*)?\](?:\[[^\]]*\])?\]"
_MD_PATTERN = r"\[[^\]]*\]\(denote:(?P<id>{id})(?:::[^)]*)?\)"

LINK_PATTERNS: dict[Flavor, str] = {
    Flavor.ORG: _ORG_PATTERN,
    Flavor.MARKDOWN: _MD_PATTERN,
    Flavor.TEXT: _ORG_PATTERN,
}


def link_pattern(flavor: Flavor, identifier: NoteId | None = None) -> Pattern[str]:
    """Compile the link matcher for `flavor`.

    With `identifier`, only links to that identifier match. The identifier
    itself is always captured as group "id".
    """
    try:
        template = LINK_PATTERNS[flavor]
    except KeyError:
        raise UnsupportedFlavorError(flavor) from None
    id_expr = re.escape(identifier) if identifier else ID_RE
    return re.compile(template.replace("{id}", id_expr))


def format_link(identifier: NoteId, title: str, flavor: Flavor) -> str:
    try:
        template = LINK_TEMPLATES[flavor]
    except KeyError:
        raise UnsupportedFlavorError(flavor) from None
    # Brackets would terminate the description early.
    title = title.replace("[", "(").replace("]", ")")
    return template.format(id=identifier, title=title)


def render_link(target: Path, referencer: Path, naming: NamingScheme) -> str:
    """Render a link to `target` for embedding in `referencer`.

    The referencer's flavor decides the syntax; the target's title is the
    description.
    """
    flavor = naming.get_flavor(referencer)
    return format_link(
        naming.extract_identifier(target),
        naming.extract_title(target),
        flavor,
    )
