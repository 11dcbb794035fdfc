"""Check identities: display names and their dotted-path ids."""

import re
from dataclasses import dataclass

_NON_WORD_CHAR = re.compile(r"\W", re.ASCII)
_SEPARATOR_CHAIN = re.compile(r"_+")


def build_id(name: str) -> str:
    """Build a URL and log safe slug from a check name.

    The name is lowercased, non-word characters become underscores and runs
    of underscores are collapsed, e.g. ``"example.com"`` becomes
    ``"example_com"``.
    """
    slug = _NON_WORD_CHAR.sub("_", name.lower())
    return _SEPARATOR_CHAIN.sub("_", slug)


@dataclass(frozen=True)
class CheckIdentity:
    """Name and tree-unique id of a check."""

    name: str
    id: str

    @classmethod
    def create(cls, name: str, parent: "CheckIdentity | None" = None) -> "CheckIdentity":
        """Create the identity of a check nested below ``parent``."""
        check_id = build_id(name)
        if parent is not None:
            check_id = f"{parent.id}.{check_id}"
        return cls(name=name, id=check_id)

    @property
    def depth(self) -> int:
        """Nesting depth, zero for top-level checks."""
        return self.id.count(".")
