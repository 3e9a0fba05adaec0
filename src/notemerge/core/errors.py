"""Exception hierarchy for merge operations."""

from pathlib import Path


class MergeError(Exception):
    """Base class for all merge failures."""


class PreconditionError(MergeError):
    """Raised before any mutation when a merge cannot proceed."""


class UnsupportedFlavorError(PreconditionError):
    def __init__(self, flavor: object):
        super().__init__(f"Unsupported note flavor: {flavor}")
        self.flavor = flavor


class ResourceError(MergeError):
    """A file could not be read, written or removed."""

    def __init__(self, path: Path, reason: str):
        super().__init__(f"{path}: {reason}")
        self.path = path
        self.reason = reason


class RewriteCancelled(MergeError):
    """The confirmation step for a single file was declined."""


class RewriteError(MergeError):
    """Rewriting links in one backlinking file failed."""

    def __init__(self, path: Path, reason: str):
        super().__init__(f"{path}: {reason}")
        self.path = path
        self.reason = reason
