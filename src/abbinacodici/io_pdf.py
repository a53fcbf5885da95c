"""Estrazione del testo dai PDF, riga per riga."""

from __future__ import annotations

import io
import logging
from collections.abc import Iterable
from pathlib import Path

import pdfplumber

from abbinacodici.config import DEFAULT_Y_TOLERANCE, DocumentReadError

logger = logging.getLogger(__name__)


class PdfFileError(DocumentReadError):
    """Errore di lettura di un PDF (file assente, PDF danneggiato)."""


def group_lines(items: Iterable[tuple[str, float]], y_tolerance: float = DEFAULT_Y_TOLERANCE) -> str:
    """
    Ricostruisce le righe visive da una sequenza di (testo, y) nell'ordine del flusso.

    Un elemento resta sulla riga corrente finché |Δy| <= y_tolerance rispetto
    all'elemento precedente; altrimenti la riga corrente viene chiusa con "\\n".
    Ogni elemento è seguito da uno spazio. A fine sequenza una riga non vuota
    viene chiusa.
    """
    text = ""
    line = ""
    last_y: float | None = None
    for item_text, y in items:
        if last_y is not None and abs(y - last_y) > y_tolerance:
            text += line + "\n"
            line = ""
        line += item_text + " "
        last_y = y
    if line.strip():
        text += line + "\n"
    return text


def _page_items(page: pdfplumber.page.Page) -> list[tuple[str, float]]:
    # use_text_flow: ordine del flusso del contenuto, come viene scritto nel PDF
    words = page.extract_words(use_text_flow=True, keep_blank_chars=True)
    return [(w["text"], float(w["bottom"])) for w in words]


def extract_pdf_text(source: str | Path | bytes, *, y_tolerance: float = DEFAULT_Y_TOLERANCE) -> str:
    """
    Estrae il testo di un PDF come righe separate da "\\n".

    Args:
        source: Percorso del file o contenuto binario del PDF.
        y_tolerance: Scarto verticale massimo tra parole della stessa riga.

    Returns:
        Testo di tutte le pagine, nell'ordine del documento.

    Raises:
        PdfFileError: Se il file è assente o il PDF non è leggibile.
    """
    if isinstance(source, bytes):
        stream: str | Path | io.BytesIO = io.BytesIO(source)
        name = "<bytes>"
    else:
        stream = Path(source)
        name = str(source)
        if not stream.exists():
            raise PdfFileError(f"File non trovato: {stream}")

    try:
        with pdfplumber.open(stream) as pdf:
            parts = []
            for i, page in enumerate(pdf.pages):
                parts.append(group_lines(_page_items(page), y_tolerance))
                logger.debug("Pagina %d/%d letta: %s", i + 1, len(pdf.pages), name)
    except Exception as e:
        raise PdfFileError(f"Impossibile leggere il PDF {name}: {e}") from e
    return "".join(parts)
