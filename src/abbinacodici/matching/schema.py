"""Schemi e tipi per l'abbinamento."""

from __future__ import annotations

import math
from dataclasses import dataclass

NO_MATCH_CODE = "-"
NO_MATCH_DESCRIPTION = "Nessuna corrispondenza trovata"


def to_percent(similarity: float) -> int:
    """Percentuale intera, con le metà arrotondate per eccesso (66.5 → 67)."""
    return math.floor(similarity * 100 + 0.5)


@dataclass(frozen=True)
class CodeRecord:
    """Un codice del catalogo con la sua descrizione e il file di provenienza."""

    code: str
    description: str
    source: str


@dataclass(frozen=True)
class MatchResult:
    """Risultato dell'abbinamento per una descrizione."""

    original_description: str
    matched_code: str
    matched_description: str
    similarity: float
    matched: bool
    source: str | None = None

    def __repr__(self) -> str:
        return f"MatchResult({self.original_description[:30]!r} -> {self.matched_code}, {self.similarity:.2f})"

    @classmethod
    def unmatched(cls, description: str) -> MatchResult:
        return cls(
            original_description=description,
            matched_code=NO_MATCH_CODE,
            matched_description=NO_MATCH_DESCRIPTION,
            similarity=0.0,
            matched=False,
        )

    @property
    def percent(self) -> int:
        """Similarità in percentuale intera (arrotondata)."""
        return to_percent(self.similarity)


@dataclass(frozen=True)
class LookupResult:
    """Miglior codice per una ricerca singola."""

    code: str
    description: str
    similarity: float
    source: str
