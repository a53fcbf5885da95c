"""Esportazione dei risultati (CSV, xlsx) e riepilogo."""

from __future__ import annotations

import csv
from collections.abc import Sequence
from datetime import date, datetime
from pathlib import Path

import pandas as pd

from abbinacodici import __version__
from abbinacodici.config import Config
from abbinacodici.io_excel import save_xlsx
from abbinacodici.matching.schema import MatchResult

RESULT_COLUMNS = [
    "Descrizione Originale",
    "Codice Abbinato",
    "Descrizione Codice",
    "Similarità %",
    "Abbinato",
    "File Sorgente",
]
YES = "Sì"
NO = "No"
MISSING_SOURCE = "-"


def default_csv_name(day: date | None = None) -> str:
    """Nome predefinito del file CSV: abbinamenti_AAAA-MM-GG.csv."""
    return f"abbinamenti_{(day or date.today()).isoformat()}.csv"


def build_results_df(results: Sequence[MatchResult]) -> pd.DataFrame:
    """Una riga per risultato, con le colonne dell'esportazione CSV."""
    rows = [
        (
            r.original_description,
            r.matched_code,
            r.matched_description,
            r.percent,
            YES if r.matched else NO,
            r.source or MISSING_SOURCE,
        )
        for r in results
    ]
    return pd.DataFrame(rows, columns=RESULT_COLUMNS)


def export_csv(results: Sequence[MatchResult], filepath: str | Path) -> Path:
    """
    Scrive i risultati in CSV: UTF-8 con BOM, virgola, tutti i campi tra virgolette.

    Returns:
        Percorso del file scritto.
    """
    path = Path(filepath)
    build_results_df(results).to_csv(
        path,
        index=False,
        encoding="utf-8-sig",
        quoting=csv.QUOTE_ALL,
        lineterminator="\n",
    )
    return path


def build_report_df(results: Sequence[MatchResult], config: Config) -> pd.DataFrame:
    """
    Costruisce il DataFrame per il foglio REPORT.

    Contiene: numero di descrizioni, abbinate, non abbinate, parametri, data e versione.
    """
    n_total = len(results)
    n_matched = sum(1 for r in results if r.matched)

    rows = [
        ("nb_descrizioni", n_total),
        ("nb_abbinate", n_matched),
        ("nb_non_abbinate", n_total - n_matched),
        ("", ""),
        ("Parametri", ""),
        ("threshold", config.threshold),
        ("y_tolerance", config.y_tolerance),
        ("sample_rows", config.sample_rows),
        ("", ""),
        ("Cataloghi", ""),
    ]
    for i, f in enumerate(config.catalog_files):
        rows.append((f"catalog_{i}", Path(f).name))
    rows.append(("query_file", Path(config.query_file).name if config.query_file else ""))
    rows.extend(
        [
            ("", ""),
            ("version", __version__),
            ("timestamp", datetime.now().isoformat()),
        ]
    )
    return pd.DataFrame(rows, columns=["Key", "Value"])


def export_xlsx(results: Sequence[MatchResult], config: Config, filepath: str | Path) -> Path:
    """Scrive i fogli Abbinamenti e REPORT in un file xlsx."""
    path = Path(filepath)
    save_xlsx(path, {"Abbinamenti": build_results_df(results), "REPORT": build_report_df(results, config)})
    return path


def print_report_console(results: Sequence[MatchResult]) -> None:
    """Stampa un riepilogo sulla console."""
    n_total = len(results)
    n_matched = sum(1 for r in results if r.matched)

    print("\n=== AbbinaCodici Report ===")
    print(f"  Descrizioni:      {n_total}")
    print(f"  Abbinate:         {n_matched}")
    print(f"  Non abbinate:     {n_total - n_matched}")
    for i, r in enumerate(results, start=1):
        if r.matched:
            print(f"  {i}. {r.original_description[:40]} → {r.matched_code} ({r.percent}%)")
        else:
            print(f"  {i}. {r.original_description[:40]} → non trovato")
    print(f"  Versione:         {__version__}")
    print("===========================\n")
