"""Normalizzazione di testo e celle."""

from __future__ import annotations

import math
from typing import Any


def safe_str(val: Any) -> str:
    """Converte una cella in stringa per confronto/memorizzazione (None, NaN, ±inf → "")."""
    if val is None or (isinstance(val, float) and (math.isnan(val) or math.isinf(val))):
        return ""
    return str(val)


def cell_text(val: Any) -> str:
    """Testo di una cella, senza spazi iniziali/finali."""
    return safe_str(val).strip()


def fold_text(s: str | None) -> str:
    """
    Porta un testo in minuscolo per il confronto.

    Nessun'altra normalizzazione (accenti, spazi multipli): le descrizioni
    vengono confrontate così come estratte.
    """
    if not s:
        return ""
    return s.lower()


def truncate(s: str, length: int = 40) -> str:
    """Tronca un testo per i messaggi di log."""
    return s if len(s) <= length else s[:length] + "..."
