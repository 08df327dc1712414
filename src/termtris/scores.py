"""High score persistence.

Scores live in a small JSON file (``scores.json`` in the working directory by
default) holding a list of entries sorted from best to worst::

    [{"score": 1200, "date": "2026-10-19T20:15:03"}, ...]

Bare integers are accepted when reading so hand-edited files keep working.
Problems with the file are never fatal: unreadable data is treated as an empty
list and a failed write is reported back to the caller.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, Union


LOGGER = logging.getLogger(__name__)

DEFAULT_SCORES_FILE = "scores.json"
MAX_ENTRIES = 10


@dataclass(frozen=True)
class ScoreEntry:
    """One finished game."""

    score: int
    date: Optional[str] = None
    name: Optional[str] = None

    @classmethod
    def from_raw(cls, raw: Any) -> "ScoreEntry":
        """Build an entry from a decoded JSON value.

        Raises:
            ValueError: If ``raw`` is neither a non-negative integer nor a
                mapping with one under ``"score"``.
        """

        if isinstance(raw, dict):
            score = raw.get("score")
            date = raw.get("date")
            name = raw.get("name")
        else:
            score, date, name = raw, None, None
        if isinstance(score, bool) or not isinstance(score, int) or score < 0:
            raise ValueError(f"Invalid score entry: {raw!r}")
        return cls(
            score=score,
            date=str(date) if date is not None else None,
            name=str(name) if name is not None else None,
        )

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"score": self.score}
        if self.date is not None:
            data["date"] = self.date
        if self.name is not None:
            data["name"] = self.name
        return data


@dataclass(frozen=True)
class RecordResult:
    """Outcome of :meth:`ScoreStore.record`.

    ``rank`` is the 1-based position in the saved list, or ``None`` when the
    score did not make the table.
    """

    entry: ScoreEntry
    rank: Optional[int]
    saved: bool


class ScoreStore:
    """Ranked, bounded list of past scores backed by a JSON file."""

    def __init__(
        self, path: Union[str, Path] = DEFAULT_SCORES_FILE, limit: int = MAX_ENTRIES
    ) -> None:
        if limit <= 0:
            raise ValueError("Score table limit must be positive")
        self.path = Path(path)
        self.limit = limit

    def load(self) -> List[ScoreEntry]:
        """Return the stored entries, best first.

        A missing file yields an empty list silently; an unreadable or
        malformed one yields an empty list with a warning.  Individual bad
        entries are skipped.
        """

        entries, _ = self._load()
        return entries

    def _load(self) -> Tuple[List[ScoreEntry], bool]:
        # The flag is False when an existing file could not be parsed and
        # must not be overwritten.
        try:
            text = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return [], True
        except OSError as exc:
            LOGGER.warning("Could not read scores from %s: %s", self.path, exc)
            return [], False

        try:
            data = json.loads(text)
        except ValueError as exc:
            LOGGER.warning("Ignoring malformed score file %s: %s", self.path, exc)
            return [], False
        if not isinstance(data, list):
            LOGGER.warning("Ignoring score file %s: expected a list", self.path)
            return [], False

        entries: List[ScoreEntry] = []
        for raw in data:
            try:
                entries.append(ScoreEntry.from_raw(raw))
            except ValueError as exc:
                LOGGER.warning("Skipping entry in %s: %s", self.path, exc)
        return _ranked(entries)[: self.limit], True

    def record(
        self,
        score: int,
        *,
        name: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> RecordResult:
        """Add ``score`` to the table and write it back to disk.

        An existing file that cannot be read or parsed is left untouched and
        the result reports ``saved=False``.
        """

        if score < 0:
            raise ValueError("Score must be non-negative")
        when = (now or datetime.now()).isoformat(timespec="seconds")
        entry = ScoreEntry(score=int(score), date=when, name=name)

        entries, clean = self._load()
        if not clean:
            LOGGER.warning("Not saving score %d: %s would be overwritten", entry.score, self.path)
            return RecordResult(entry=entry, rank=None, saved=False)
        entries.append(entry)
        entries = _ranked(entries)[: self.limit]
        rank = next((i + 1 for i, e in enumerate(entries) if e is entry), None)

        saved = self._write(entries)
        return RecordResult(entry=entry, rank=rank, saved=saved)

    def _write(self, entries: List[ScoreEntry]) -> bool:
        payload = json.dumps([e.to_dict() for e in entries], indent=2)
        tmp_name: Optional[str] = None
        try:
            fd, tmp_name = tempfile.mkstemp(prefix=".scores-", suffix=".tmp", dir=self.path.parent)
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                handle.write(payload + "\n")
            os.replace(tmp_name, self.path)
        except OSError as exc:
            LOGGER.warning("Could not save scores to %s: %s", self.path, exc)
            if tmp_name is not None and os.path.exists(tmp_name):
                os.unlink(tmp_name)
            return False
        return True


def _ranked(entries: List[ScoreEntry]) -> List[ScoreEntry]:
    # Stable sort keeps earlier games ahead of later ones with the same score.
    return sorted(entries, key=lambda e: e.score, reverse=True)


def format_scores(entries: List[ScoreEntry]) -> str:
    """Return a printable table of ``entries``."""

    if not entries:
        return "No scores recorded yet."
    lines = [f"{'Rank':>4}  {'Score':>8}  Date", "-" * 36]
    for rank, entry in enumerate(entries, start=1):
        when = entry.date or "-"
        suffix = f"  {entry.name}" if entry.name else ""
        lines.append(f"{rank:>4}  {entry.score:>8}  {when}{suffix}")
    return "\n".join(lines)
