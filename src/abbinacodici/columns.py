"""Individuazione euristica delle colonne di una griglia senza tipi."""

from __future__ import annotations

import re
from collections.abc import Callable, Sequence

from abbinacodici.config import DEFAULT_SAMPLE_ROWS
from abbinacodici.normalize import cell_text, safe_str

CODE_HEADER_KEYS = ("codice", "code")
DESCRIPTION_HEADER_KEYS = ("descri", "testo")
CODE_CELL_PATTERN = re.compile(r"^[A-Z]{1,}[0-9]{6,}")

Row = Sequence[str]


def header_matches(header: str, keys: Sequence[str]) -> bool:
    h = safe_str(header).lower()
    return any(k in h for k in keys)


def find_header_column(grid: Sequence[Row], keys: Sequence[str]) -> int | None:
    """Indice della prima colonna la cui intestazione (riga 0) contiene una delle chiavi."""
    if not grid:
        return None
    for idx, header in enumerate(grid[0]):
        if header_matches(header, keys):
            return idx
    return None


def has_header(grid: Sequence[Row], keys: Sequence[str]) -> bool:
    return find_header_column(grid, keys) is not None


def sample_rows(grid: Sequence[Row], n: int = DEFAULT_SAMPLE_ROWS) -> Sequence[Row]:
    """Le prime n righe di dati (dalla riga 1), usate dalle euristiche di contenuto."""
    return grid[1 : 1 + n]


def _cell(row: Row, col: int) -> str:
    return safe_str(row[col]) if col < len(row) else ""


def best_column(
    grid: Sequence[Row],
    *,
    header_keys: Sequence[str],
    score: Callable[[Sequence[str]], float],
    n_sample: int = DEFAULT_SAMPLE_ROWS,
    exclude: Sequence[int] = (),
) -> int | None:
    """
    Colonna migliore per un predicato: prima per intestazione, poi per contenuto.

    Args:
        grid: Griglia di celle, riga 0 = intestazione eventuale.
        header_keys: Sottostringhe cercate nell'intestazione (senza distinzione di maiuscole).
        score: Punteggio di una colonna a partire dalle sue celle campionate.
            Vince la prima colonna con il punteggio massimo, purché > 0.
        n_sample: Numero di righe di dati campionate.
        exclude: Colonne da non considerare nel ripiego sul contenuto.

    Returns:
        Indice della colonna, o None se nessuna è adatta.
    """
    by_header = find_header_column(grid, header_keys)
    if by_header is not None:
        return by_header
    if not grid:
        return None

    rows = sample_rows(grid, n_sample)
    best: int | None = None
    best_score = 0.0
    for col in range(len(grid[0])):
        if col in exclude:
            continue
        sc = score([_cell(row, col) for row in rows])
        if sc > best_score:
            best_score = sc
            best = col
    return best


def code_cell_score(cells: Sequence[str]) -> float:
    """1 se almeno una cella ha l'aspetto di un codice, altrimenti 0."""
    return 1.0 if any(CODE_CELL_PATTERN.match(c) for c in cells) else 0.0


def text_length_score(cells: Sequence[str]) -> float:
    """Lunghezza totale del testo delle celle."""
    return float(sum(len(c) for c in cells))


def column_values(grid: Sequence[Row], col: int | None, start_row: int) -> list[str]:
    """Celle (ripulite) di una colonna a partire da start_row; "" se la colonna manca."""
    if col is None:
        return ["" for _ in grid[start_row:]]
    return [cell_text(row[col]) if col < len(row) else "" for row in grid[start_row:]]
