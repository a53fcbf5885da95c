"""Calcolo della similarità tra due descrizioni."""

from __future__ import annotations

from abbinacodici.normalize import fold_text

# Termini di ruolo organizzativo, con peso doppio.
KEY_TERMS = ("direttore", "tecnico", "responsabile", "capo", "ingegnere", "architetto", "coordinatore")
KEY_TERM_WEIGHT = 2.0
DEFAULT_WEIGHT = 1.0

CONTAINS_SCORE = 0.9
PARTIAL_TOKEN_FACTOR = 0.7
MIN_PARTIAL_TOKEN_LEN = 4  # le parole di 3 lettere o meno si confrontano solo per uguaglianza
TOKEN_BLEND = 0.9
LENGTH_BLEND = 0.1


def token_weight(token: str) -> float:
    """Peso di una parola: doppio se contiene un termine chiave."""
    return KEY_TERM_WEIGHT if any(term in token for term in KEY_TERMS) else DEFAULT_WEIGHT


def token_match(token: str, candidates: list[str]) -> float:
    """
    Frazione del peso ottenuta da una parola contro le parole dell'altro testo.

    1 per la prima parola uguale, PARTIAL_TOKEN_FACTOR per la prima parola che
    la contiene o ne è contenuta (se entrambe sono abbastanza lunghe), 0 altrimenti.
    """
    for other in candidates:
        if token == other:
            return 1.0
        if token in other or other in token:
            if len(token) >= MIN_PARTIAL_TOKEN_LEN and len(other) >= MIN_PARTIAL_TOKEN_LEN:
                return PARTIAL_TOKEN_FACTOR
    return 0.0


def length_ratio(a: str, b: str) -> float:
    longest = max(len(a), len(b))
    if longest == 0:
        return 0.0
    return min(len(a), len(b)) / longest


def score(a: str, b: str) -> float:
    """
    Similarità (0-1) tra due descrizioni.

    Non simmetrica: il peso totale e i confronti sono guidati dalle parole di a.

    Args:
        a: Descrizione da abbinare.
        b: Descrizione candidata del catalogo.

    Returns:
        1.0 se uguali (senza distinzione di maiuscole), 0.9 se una contiene
        l'altra, altrimenti 0.9 * sovrapposizione pesata + 0.1 * rapporto di lunghezza.
    """
    s1 = fold_text(a)
    s2 = fold_text(b)

    if s1 == s2:
        return 1.0
    if s1 in s2 or s2 in s1:
        return CONTAINS_SCORE

    words1 = s1.split()
    words2 = s2.split()

    match_score = 0.0
    total_weight = 0.0
    for word in words1:
        weight = token_weight(word)
        total_weight += weight
        match_score += weight * token_match(word, words2)

    base = match_score / total_weight if total_weight > 0 else 0.0
    return base * TOKEN_BLEND + length_ratio(s1, s2) * LENGTH_BLEND
