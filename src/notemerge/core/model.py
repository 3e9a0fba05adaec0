from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

NoteId = str


class Flavor(Enum):
    ORG = "org"  # outline markup
    MARKDOWN = "markdown"
    TEXT = "text"


class FormatKind(Enum):
    PLAIN = "plain"
    PLAIN_INDENTED = "plain-indented"
    SRC_BLOCK = "src-block"
    QUOTE_BLOCK = "quote-block"
    EXAMPLE_BLOCK = "example-block"
    MARKDOWN_QUOTE = "markdown-quote"
    MARKDOWN_FENCE = "markdown-fence"

    @classmethod
    def parse(cls, value: "FormatKind | str | None") -> "FormatKind":
        """Return the matching kind, or PLAIN for anything unrecognised."""
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            return cls.PLAIN

    def allowed_for(self, flavor: Flavor) -> bool:
        return flavor in KIND_FLAVORS[self]


_ANY = frozenset(Flavor)

KIND_FLAVORS: dict[FormatKind, frozenset[Flavor]] = {
    FormatKind.PLAIN: _ANY,
    FormatKind.PLAIN_INDENTED: _ANY,
    FormatKind.SRC_BLOCK: frozenset({Flavor.ORG}),
    FormatKind.QUOTE_BLOCK: frozenset({Flavor.ORG}),
    FormatKind.EXAMPLE_BLOCK: frozenset({Flavor.ORG}),
    FormatKind.MARKDOWN_QUOTE: frozenset({Flavor.MARKDOWN}),
    FormatKind.MARKDOWN_FENCE: frozenset({Flavor.MARKDOWN}),
}


@dataclass(frozen=True)
class Region:
    start: int  # character offsets into the buffer text
    end: int

    @property
    def empty(self) -> bool:
        return self.end <= self.start


@dataclass
class MergeReport:
    """Outcome of a merge, including per-file rewrite failures."""

    operation: str  # "file" | "region"
    source: Path
    destination: Path
    rewritten: list[Path] = field(default_factory=list)
    failed: dict[Path, str] = field(default_factory=dict)
    saved: bool = False

    @property
    def partial(self) -> bool:
        return bool(self.failed)

    @property
    def message(self) -> str:
        if self.operation == "file":
            msg = f"Merged {self.source.name} into {self.destination.name}"
            if self.rewritten:
                msg += f"; updated links in {len(self.rewritten)} file(s)"
        else:
            msg = f"Moved region of {self.source.name} into {self.destination.name}"
        if self.failed:
            names = ", ".join(sorted(p.name for p in self.failed))
            msg += f"; links NOT updated in: {names}"
        if not self.saved:
            msg += "; remember to save the affected files"
        return msg
