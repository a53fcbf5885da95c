"""Estrazione dei codici dai cataloghi (testo da PDF o griglia da foglio di calcolo)."""

from __future__ import annotations

import re
from collections.abc import Sequence
from dataclasses import dataclass

from abbinacodici.columns import (
    CODE_HEADER_KEYS,
    DESCRIPTION_HEADER_KEYS,
    Row,
    best_column,
    code_cell_score,
    column_values,
    find_header_column,
    has_header,
    text_length_score,
)
from abbinacodici.config import DEFAULT_SAMPLE_ROWS
from abbinacodici.matching.schema import CodeRecord

# In ordine di priorità: il primo che trova una corrispondenza vince.
CODE_PATTERNS = (
    re.compile(r"\b(P[0-9]{9,})\b"),
    re.compile(r"\b(BONI\.[A-Z0-9]+\.[A-Z0-9]+)\b"),
    re.compile(r"\b([A-Z]{2,}[0-9]{6,})\b"),
)


@dataclass(frozen=True)
class CodeLine:
    """Riga che apre un nuovo codice: il codice e il resto della riga."""

    code: str
    remainder: str


def classify_line(line: str) -> CodeLine | None:
    """
    Cerca un codice in una riga già ripulita.

    Returns:
        CodeLine con il codice e la riga privata della sua prima occorrenza,
        oppure None se la riga non contiene codici.
    """
    for pattern in CODE_PATTERNS:
        m = pattern.search(line)
        if m:
            code = m.group(1)
            return CodeLine(code=code, remainder=line.replace(code, "", 1).strip())
    return None


def extract_codes_from_text(text: str, source: str) -> list[CodeRecord]:
    """
    Estrae i codici da un testo riga per riga (tipicamente l'uscita di extract_pdf_text).

    Una riga con codice chiude il record aperto e ne apre uno nuovo; le righe
    senza codice proseguono la descrizione del record aperto. Le righe vuote
    sono ignorate e non chiudono il record.
    """
    codes: list[CodeRecord] = []
    current_code = ""
    current_desc = ""

    def _emit() -> None:
        description = current_desc.strip()
        if current_code and description:
            codes.append(CodeRecord(code=current_code, description=description, source=source))

    for raw in text.split("\n"):
        line = raw.strip()
        if not line:
            continue
        found = classify_line(line)
        if found is not None:
            _emit()
            current_code = found.code
            current_desc = found.remainder
        elif current_code:
            current_desc += " " + line

    _emit()
    return codes


def extract_codes_from_grid(
    grid: Sequence[Row],
    source: str,
    *,
    sample_rows: int = DEFAULT_SAMPLE_ROWS,
) -> list[CodeRecord]:
    """
    Estrae i codici da una griglia (primo foglio di un catalogo tabellare).

    Colonne per intestazione ("codice"/"code", "descri"/"testo"). Se anche una
    sola delle due manca, entrambe sono ricavate dal contenuto delle prime
    sample_rows righe di dati; la colonna trovata per intestazione resta solo
    se il contenuto non ne indica un'altra. Se nessuna intestazione di codice
    è riconosciuta, la riga 0 è trattata come dati.
    """
    if not grid:
        return []

    code_col = find_header_column(grid, CODE_HEADER_KEYS)
    desc_col = find_header_column(grid, DESCRIPTION_HEADER_KEYS)
    if code_col is None or desc_col is None:
        by_content = best_column(grid, header_keys=(), score=code_cell_score, n_sample=sample_rows)
        if by_content is not None:
            code_col = by_content
        by_content = best_column(
            grid,
            header_keys=(),
            score=text_length_score,
            n_sample=sample_rows,
            exclude=() if code_col is None else (code_col,),
        )
        if by_content is not None:
            desc_col = by_content
    if code_col is None or desc_col is None:
        return []

    start_row = 1 if has_header(grid, CODE_HEADER_KEYS) else 0
    return [
        CodeRecord(code=code, description=description, source=source)
        for code, description in zip(
            column_values(grid, code_col, start_row),
            column_values(grid, desc_col, start_row),
        )
        if code and description
    ]
