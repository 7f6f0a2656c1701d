from __future__ import annotations

from enum import StrEnum


class ExtractionLevel(StrEnum):
    """How much of a probe result is kept. Each level includes the ones before it."""
    basic = "basic"
    extended = "extended"
    full = "full"

    @property
    def rank(self) -> int:
        return _RANK[self]

    def includes(self, other: "ExtractionLevel | str") -> bool:
        return self.rank >= ExtractionLevel(other).rank


_RANK = {
    ExtractionLevel.basic: 0,
    ExtractionLevel.extended: 1,
    ExtractionLevel.full: 2,
}
