import re
from pathlib import Path
from re import Pattern

from ..core.errors import PreconditionError, UnsupportedFlavorError
from ..core.model import Flavor, NoteId
from ..core.ports import NamingScheme
from ..format.links import ID_RE, link_pattern
from .yaml_codec import OrgKeywords, TextFields, decode_markdown

EXTENSIONS: dict[str, Flavor] = {
    ".org": Flavor.ORG,
    ".md": Flavor.MARKDOWN,
    ".txt": Flavor.TEXT,
}

_ID = re.compile(ID_RE)
_TITLE_SEGMENT = re.compile(r"--(?P<title>.*?)(?=__|==|$)")


def desluggify(slug: str) -> str:
    """
    Turn a filename title slug back into display text.

    Examples:
        >>> desluggify("parallel-transport")
        'Parallel transport'
    """
    text = slug.replace("-", " ").strip()
    return text[:1].upper() + text[1:]


class DenoteNaming(NamingScheme):
    """
    Files named ID==SIGNATURE--title-slug__keywords.ext, where the
    identifier is a YYYYMMDDTHHMMSS timestamp.
    """

    def get_flavor(self, path: Path) -> Flavor:
        try:
            return EXTENSIONS[path.suffix.lower()]
        except KeyError:
            raise UnsupportedFlavorError(path.suffix or path.name) from None

    def extract_identifier_or_none(self, path: Path) -> NoteId | None:
        m = _ID.search(path.stem)
        return m.group(0) if m else None

    def extract_identifier(self, path: Path) -> NoteId:
        identifier = self.extract_identifier_or_none(path)
        if identifier is None:
            raise PreconditionError(f"No identifier in file name: {path.name}")
        return identifier

    def extract_title(self, path: Path) -> str:
        if path.exists():
            title = self._frontmatter_title(path)
            if title:
                return title
        m = _TITLE_SEGMENT.search(path.stem)
        if m and m.group("title"):
            return desluggify(m.group("title"))
        return path.stem

    def _frontmatter_title(self, path: Path) -> str | None:
        text = path.read_text(encoding="utf-8")
        flavor = self.get_flavor(path)
        if flavor is Flavor.ORG:
            meta, _ = OrgKeywords().decode(text)
        elif flavor is Flavor.MARKDOWN:
            meta = decode_markdown(text)
        else:
            meta, _ = TextFields().decode(text)
        title = meta.get("title")
        return str(title).strip() if title else None

    def link_pattern(self, flavor: Flavor, identifier: NoteId | None = None) -> Pattern[str]:
        return link_pattern(flavor, identifier)
