"""Fixture condivise."""

from collections.abc import Callable
from pathlib import Path

import pandas as pd
import pytest
from reportlab.pdfgen import canvas


@pytest.fixture
def make_pdf(tmp_path: Path) -> Callable[..., Path]:
    """Crea un PDF con una riga di testo per elemento; ogni lista interna è una pagina."""

    def _make(pages: list[list[str]], name: str = "catalogo.pdf") -> Path:
        path = tmp_path / name
        c = canvas.Canvas(str(path))
        for lines in pages:
            y = 750
            for line in lines:
                c.drawString(72, y, line)
                y -= 20
            c.showPage()
        c.save()
        return path

    return _make


@pytest.fixture
def make_xlsx(tmp_path: Path) -> Callable[..., Path]:
    """Crea un xlsx a partire da un dict di colonne (intestazione = chiavi)."""

    def _make(columns: dict[str, list], name: str = "catalogo.xlsx") -> Path:
        path = tmp_path / name
        pd.DataFrame(columns).to_excel(path, index=False, engine="openpyxl")
        return path

    return _make
