"""Test del modulo report."""

from datetime import date
from pathlib import Path

import pandas as pd
import pytest

from abbinacodici.config import Config
from abbinacodici.matching.schema import MatchResult
from abbinacodici.report import (
    build_report_df,
    build_results_df,
    default_csv_name,
    export_csv,
    export_xlsx,
    print_report_console,
)


@pytest.fixture
def sample_results() -> list[MatchResult]:
    return [
        MatchResult("Direttore tecnico del cantiere", "P000000001", "Direttore Tecnico Cantiere", 0.8367, True, "a.pdf"),
        MatchResult.unmatched('Zebra "a righe"'),
    ]


def test_build_results_df(sample_results: list[MatchResult]) -> None:
    df = build_results_df(sample_results)
    assert list(df.columns) == [
        "Descrizione Originale",
        "Codice Abbinato",
        "Descrizione Codice",
        "Similarità %",
        "Abbinato",
        "File Sorgente",
    ]
    assert df.iloc[0].tolist() == [
        "Direttore tecnico del cantiere",
        "P000000001",
        "Direttore Tecnico Cantiere",
        84,
        "Sì",
        "a.pdf",
    ]
    assert df.iloc[1]["Codice Abbinato"] == "-"
    assert df.iloc[1]["Abbinato"] == "No"
    assert df.iloc[1]["File Sorgente"] == "-"
    assert df.iloc[1]["Similarità %"] == 0


def test_export_csv(tmp_path: Path, sample_results: list[MatchResult]) -> None:
    path = export_csv(sample_results, tmp_path / "out.csv")
    raw = path.read_bytes()
    assert raw.startswith(b"\xef\xbb\xbf")
    lines = raw.decode("utf-8-sig").split("\n")
    assert lines[0] == (
        '"Descrizione Originale","Codice Abbinato","Descrizione Codice","Similarità %","Abbinato","File Sorgente"'
    )
    assert lines[1] == '"Direttore tecnico del cantiere","P000000001","Direttore Tecnico Cantiere","84","Sì","a.pdf"'
    assert lines[2].startswith('"Zebra ""a righe""","-"')


def test_default_csv_name() -> None:
    assert default_csv_name(date(2024, 3, 5)) == "abbinamenti_2024-03-05.csv"


def test_build_report_df_counts(sample_results: list[MatchResult]) -> None:
    config = Config(catalog_files=["/x/a.pdf"], query_file="/x/lista.txt")
    df = build_report_df(sample_results, config)
    values = dict(zip(df["Key"], df["Value"]))
    assert values["nb_descrizioni"] == 2
    assert values["nb_abbinate"] == 1
    assert values["nb_non_abbinate"] == 1
    assert values["threshold"] == 0.3
    assert values["catalog_0"] == "a.pdf"
    assert "version" in values
    assert "timestamp" in values


def test_export_xlsx(tmp_path: Path, sample_results: list[MatchResult]) -> None:
    out = export_xlsx(sample_results, Config(), tmp_path / "out.xlsx")
    xl = pd.ExcelFile(out, engine="openpyxl")
    assert xl.sheet_names == ["Abbinamenti", "REPORT"]
    xl.close()
    df = pd.read_excel(out, sheet_name="Abbinamenti", engine="openpyxl")
    assert df.iloc[0]["Codice Abbinato"] == "P000000001"


def test_print_report_console(sample_results: list[MatchResult], capsys: pytest.CaptureFixture) -> None:
    print_report_console(sample_results)
    out = capsys.readouterr().out
    assert "AbbinaCodici Report" in out
    assert "P000000001 (84%)" in out
    assert "non trovato" in out
