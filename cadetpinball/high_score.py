"""The five-entry high score table and its checksummed storage."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, List, Optional

from .options import Settings

TABLE_SIZE = 5
EMPTY_SCORE = -999
MAX_NAME_LENGTH = 31
_DEFAULT_VERIFICATION = 7


@dataclass
class HighScoreEntry:
    name: str = ""
    score: int = EMPTY_SCORE


def _signed_char_sum(text: str) -> int:
    return sum(b - 256 if b >= 128 else b for b in text.encode("utf-8"))


class HighScoreTable:
    """High scores ordered from best to worst."""

    def __init__(self):
        self.entries: List[HighScoreEntry] = []
        self.clear()

    def __iter__(self) -> Iterator[HighScoreEntry]:
        return iter(self.entries)

    def __len__(self) -> int:
        return len(self.entries)

    def __getitem__(self, position: int) -> HighScoreEntry:
        return self.entries[position]

    def clear(self) -> None:
        self.entries = [HighScoreEntry() for _ in range(TABLE_SIZE)]

    def _checksum(self) -> int:
        return sum(_signed_char_sum(e.name) + e.score for e in self.entries)

    def read(self, settings: Settings) -> None:
        """Load the table; a wrong checksum leaves it cleared."""
        self.clear()
        for position, entry in enumerate(self.entries):
            entry.name = settings.get_string(f"{position}.Name", "")[:MAX_NAME_LENGTH]
            entry.score = settings.get_int(f"{position}.Score", entry.score)
        if self._checksum() != settings.get_int("Verification", _DEFAULT_VERIFICATION):
            self.clear()

    def write(self, settings: Settings) -> None:
        for position, entry in enumerate(self.entries):
            settings.set_string(f"{position}.Name", entry.name)
            settings.set_int(f"{position}.Score", entry.score)
        settings.set_int("Verification", self._checksum())

    def get_score_position(self, score: int) -> Optional[int]:
        """Position the score would take in the table, or None."""
        if score <= 0:
            return None
        return next((i for i, e in enumerate(self.entries) if e.score < score), None)

    def place_new_score_into(self, score: int, name: str,
                             position: Optional[int]) -> Optional[int]:
        """Insert the score at position, pushing lower entries down."""
        if position is None or position < 0:
            return position
        if position >= TABLE_SIZE:
            raise ValueError("high score position out of range")
        self.entries.insert(position, HighScoreEntry(name[:MAX_NAME_LENGTH], score))
        del self.entries[TABLE_SIZE:]
        return position