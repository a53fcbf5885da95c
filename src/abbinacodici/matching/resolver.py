"""Motore di abbinamento: miglior codice per ogni descrizione, soglia di accettazione."""

from __future__ import annotations

import logging
from collections.abc import Sequence

from abbinacodici.config import DEFAULT_THRESHOLD
from abbinacodici.matching.schema import CodeRecord, LookupResult, MatchResult
from abbinacodici.matching.scorers import score
from abbinacodici.normalize import truncate

logger = logging.getLogger(__name__)


def best_candidate(description: str, codes: Sequence[CodeRecord]) -> tuple[CodeRecord | None, float]:
    """
    Record con la similarità più alta per una descrizione.

    A parità di punteggio vince il primo record incontrato.

    Returns:
        (record, punteggio), (None, 0.0) se nessun record ha punteggio > 0.
    """
    best: CodeRecord | None = None
    best_score = 0.0
    for record in codes:
        sc = score(description, record.description)
        if sc > best_score:
            best_score = sc
            best = record
    return best, best_score


def resolve_matches(
    codes: Sequence[CodeRecord],
    descriptions: Sequence[str],
    *,
    threshold: float = DEFAULT_THRESHOLD,
) -> list[MatchResult]:
    """
    Abbina ogni descrizione al codice più simile del catalogo.

    Confronto completo descrizioni × codici, senza indici.

    Returns:
        Un MatchResult per descrizione, nello stesso ordine.
    """
    results: list[MatchResult] = []
    for i, description in enumerate(descriptions, start=1):
        best, best_score = best_candidate(description, codes)
        if best is not None and best_score >= threshold:
            result = MatchResult(
                original_description=description,
                matched_code=best.code,
                matched_description=best.description,
                similarity=best_score,
                matched=True,
                source=best.source,
            )
            logger.info("  %d. %r → %s (%d%%)", i, truncate(description), result.matched_code, result.percent)
        else:
            result = MatchResult.unmatched(description)
            logger.info("  %d. %r → non trovato", i, truncate(description))
        results.append(result)
    return results


def lookup(
    query: str,
    codes: Sequence[CodeRecord],
    *,
    threshold: float = DEFAULT_THRESHOLD,
) -> LookupResult | None:
    """Ricerca singola: il miglior codice per una descrizione libera, o None sotto soglia."""
    if not query.strip() or not codes:
        return None
    best, best_score = best_candidate(query, codes)
    if best is None or best_score < threshold:
        return None
    return LookupResult(code=best.code, description=best.description, similarity=best_score, source=best.source)
