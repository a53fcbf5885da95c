"""Test dell'interfaccia a riga di comando."""

import json
from pathlib import Path

import pytest

from abbinacodici.cli import main


@pytest.fixture
def inputs(tmp_path: Path, make_xlsx) -> tuple[Path, Path]:
    catalog = make_xlsx(
        {
            "Codice": ["P000000001", "P000000002"],
            "Descrizione": ["Direttore Tecnico Cantiere", "Capo squadra elettricisti"],
        }
    )
    query = tmp_path / "lista.txt"
    query.write_text("CODICE A1 Direttore tecnico del cantiere\nCODICE A2 Zebra\n", encoding="utf-8")
    return catalog, query


def test_cli_run_writes_csv_and_xlsx(tmp_path: Path, inputs: tuple[Path, Path]) -> None:
    catalog, query = inputs
    out_csv = tmp_path / "risultati.csv"
    out_xlsx = tmp_path / "risultati.xlsx"
    exit_code = main(["run", "-k", str(catalog), "-q", str(query), "-o", str(out_csv), "--xlsx", str(out_xlsx)])
    assert exit_code == 0
    lines = out_csv.read_text(encoding="utf-8-sig").splitlines()
    assert len(lines) == 3
    assert lines[1].startswith('"Direttore tecnico del cantiere","P000000001"')
    assert out_xlsx.exists()


def test_cli_run_from_config(tmp_path: Path, inputs: tuple[Path, Path]) -> None:
    catalog, query = inputs
    config_path = tmp_path / "config.json"
    config_path.write_text(
        json.dumps({"catalog_files": [catalog.name], "query_file": query.name, "threshold": 0.95}),
        encoding="utf-8",
    )
    out_csv = tmp_path / "out.csv"
    assert main(["run", "-c", str(config_path), "-o", str(out_csv)]) == 0
    # soglia alta dal file config: nessun abbinamento
    assert '"P000000001"' not in out_csv.read_text(encoding="utf-8-sig")


def test_cli_threshold_overrides_config(tmp_path: Path, inputs: tuple[Path, Path]) -> None:
    catalog, query = inputs
    config_path = tmp_path / "config.json"
    config_path.write_text(
        json.dumps({"catalog_files": [catalog.name], "query_file": query.name, "threshold": 0.95}),
        encoding="utf-8",
    )
    out_csv = tmp_path / "out.csv"
    assert main(["run", "-c", str(config_path), "-t", "0.3", "-o", str(out_csv)]) == 0
    assert '"P000000001"' in out_csv.read_text(encoding="utf-8-sig")


def test_cli_dry_run(tmp_path: Path, inputs: tuple[Path, Path], capsys: pytest.CaptureFixture) -> None:
    catalog, query = inputs
    assert main(["run", "-k", str(catalog), "-q", str(query), "--dry-run"]) == 0
    out = capsys.readouterr().out
    assert "dry-run" in out
    assert not list(tmp_path.glob("*.csv"))


def test_cli_config_error_exit_code(capsys: pytest.CaptureFixture) -> None:
    assert main(["run", "--config", "/percorso/inesistente.json", "--dry-run"]) == 1
    assert "Errore:" in capsys.readouterr().err


def test_cli_missing_inputs(capsys: pytest.CaptureFixture) -> None:
    assert main(["run", "--dry-run"]) == 1
    assert "Caricare almeno" in capsys.readouterr().err


def test_cli_lookup(inputs: tuple[Path, Path], capsys: pytest.CaptureFixture) -> None:
    catalog, _query = inputs
    assert main(["lookup", "-k", str(catalog), "capo squadra"]) == 0
    out = capsys.readouterr().out
    assert "P000000002" in out
    assert "90%" in out


def test_cli_lookup_not_found(inputs: tuple[Path, Path], capsys: pytest.CaptureFixture) -> None:
    catalog, _query = inputs
    assert main(["lookup", "-k", str(catalog), "zebra"]) == 0
    assert "Nessuna corrispondenza trovata" in capsys.readouterr().out


def test_cli_codes(inputs: tuple[Path, Path], capsys: pytest.CaptureFixture) -> None:
    catalog, _query = inputs
    assert main(["codes", "-k", str(catalog)]) == 0
    out = capsys.readouterr().out
    assert "Codici estratti: 2" in out
    assert "P000000002\tCapo squadra elettricisti" in out
