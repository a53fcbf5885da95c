"""Estrazione delle descrizioni da abbinare (file di testo o foglio di calcolo)."""

from __future__ import annotations

import re
from collections.abc import Sequence
from pathlib import Path

from abbinacodici.columns import (
    DESCRIPTION_HEADER_KEYS,
    Row,
    best_column,
    column_values,
    has_header,
    text_length_score,
)
from abbinacodici.config import DEFAULT_SAMPLE_ROWS, DocumentReadError

MARKER = "CODICE"
MARKER_PREFIX = re.compile(r"^CODICE\s*[A-Z0-9]+\s*", re.IGNORECASE)

SUPPORTED_TEXT_EXTENSIONS = (".txt",)


def is_text(path: str | Path) -> bool:
    return Path(path).suffix.lower() in SUPPORTED_TEXT_EXTENSIONS


def read_text_file(path: str | Path) -> str:
    """
    Legge un file di testo UTF-8 (BOM ammesso).

    Raises:
        DocumentReadError: Se il file è assente o non decodificabile.
    """
    path = Path(path)
    if not path.exists():
        raise DocumentReadError(f"File non trovato: {path}")
    try:
        return path.read_text(encoding="utf-8-sig")
    except (OSError, UnicodeDecodeError) as e:
        raise DocumentReadError(f"Impossibile leggere {path}: {e}") from e


def extract_descriptions_from_text(text: str) -> list[str]:
    """
    Estrae le descrizioni da un testo con righe "CODICE <token> ...".

    Ogni riga che inizia con CODICE apre una nuova descrizione (privata del
    marcatore e del token); le righe successive non vuote vi si accodano.
    Le righe prima del primo marcatore formano una descrizione a sé.
    """
    descriptions: list[str] = []
    current = ""

    for raw in text.split("\n"):
        line = raw.strip()
        if line.startswith(MARKER):
            if current:
                descriptions.append(current.strip())
            current = MARKER_PREFIX.sub("", line, count=1)
        elif line:
            current += " " + line

    if current:
        descriptions.append(current.strip())

    return [d for d in descriptions if d]


def extract_descriptions_from_grid(
    grid: Sequence[Row],
    *,
    sample_rows: int = DEFAULT_SAMPLE_ROWS,
) -> list[str]:
    """
    Estrae le descrizioni dalla colonna descrittiva di una griglia.

    Colonna per intestazione ("descri"/"testo"), altrimenti la colonna con più
    testo sulle prime sample_rows righe di dati. Senza intestazione riconosciuta
    la riga 0 è trattata come dati.
    """
    if not grid:
        return []
    desc_col = best_column(
        grid,
        header_keys=DESCRIPTION_HEADER_KEYS,
        score=text_length_score,
        n_sample=sample_rows,
    )
    if desc_col is None:
        return []
    start_row = 1 if has_header(grid, DESCRIPTION_HEADER_KEYS) else 0
    return [d for d in column_values(grid, desc_col, start_row) if d]
