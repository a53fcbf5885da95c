"""I/O fogli di calcolo: lettura della griglia di celle e salvataggio (Excel, ODS, CSV)."""

from __future__ import annotations

import csv
from pathlib import Path

import pandas as pd

from abbinacodici.config import DocumentReadError
from abbinacodici.normalize import safe_str

# Formati supportati
SUPPORTED_TABULAR_EXTENSIONS = (".xlsx", ".xls", ".ods", ".csv")

Grid = list[list[str]]


class ExcelFileError(DocumentReadError):
    """Errore di caricamento di un foglio di calcolo (file assente, foglio inesistente)."""


def is_tabular(path: str | Path) -> bool:
    return Path(path).suffix.lower() in SUPPORTED_TABULAR_EXTENSIONS


def _get_engine(path: Path) -> str | None:
    """Restituisce il motore pandas in base all'estensione, o None per auto."""
    suffix = path.suffix.lower()
    if suffix == ".xlsx":
        return "openpyxl"
    if suffix == ".xls":
        return "xlrd"
    if suffix == ".ods":
        return "odf"
    return None


def _is_csv(path: Path) -> bool:
    return path.suffix.lower() == ".csv"


def _detect_csv_delimiter(path: Path, encoding: str) -> str | None:
    try:
        with path.open("r", encoding=encoding, errors="replace") as f:
            sample_lines: list[str] = []
            for line in f:
                if line.strip() == "":
                    continue
                sample_lines.append(line)
                if len(sample_lines) >= 5:
                    break
    except OSError:
        return None
    if not sample_lines:
        return None
    sample = "".join(sample_lines)
    try:
        dialect = csv.Sniffer().sniff(sample, delimiters=[",", ";", "\t", "|"])
        return dialect.delimiter
    except csv.Error:
        first = sample_lines[0]
        counts = {d: first.count(d) for d in [",", ";", "\t", "|"]}
        best = max(counts, key=counts.get)
        return best if counts[best] > 0 else None


def _read_csv_raw(path: Path) -> pd.DataFrame:
    def _read(encoding: str, *, engine: str | None = None, on_bad_lines: str | None = None) -> pd.DataFrame:
        delimiter = _detect_csv_delimiter(path, encoding) or ","
        kwargs: dict[str, object] = {
            "dtype": str,
            "encoding": encoding,
            "header": None,
            "sep": delimiter,
            "engine": engine,
            "keep_default_na": False,
        }
        if on_bad_lines is not None:
            kwargs["on_bad_lines"] = on_bad_lines
        return pd.read_csv(path, **kwargs)

    try:
        return _read("utf-8-sig")
    except UnicodeDecodeError:
        try:
            return _read("latin-1")
        except Exception as e:
            raise ExcelFileError(f"Errore CSV {path}: {e}") from e
    except pd.errors.ParserError:
        # Righe con un numero di campi variabile: motore python, righe invalide ignorate.
        try:
            return _read("utf-8-sig", engine="python", on_bad_lines="warn")
        except Exception as e:
            raise ExcelFileError(f"Errore CSV {path}: {e}. Verificare il separatore.") from e
    except pd.errors.EmptyDataError:
        return pd.DataFrame()
    except Exception as e:
        raise ExcelFileError(f"Errore CSV {path}: {e}") from e


def _open_workbook(path: Path) -> pd.ExcelFile:
    try:
        engine = _get_engine(path)
        return pd.ExcelFile(path, engine=engine) if engine else pd.ExcelFile(path)
    except ImportError as e:
        ext = path.suffix.lower()
        if ext == ".xls":
            raise ExcelFileError("Formato .xls: installare xlrd") from e
        if ext == ".ods":
            raise ExcelFileError("Formato ODS: installare odfpy") from e
        raise ExcelFileError(f"Impossibile leggere {path}: {e}") from e
    except Exception as e:
        raise ExcelFileError(f"Impossibile leggere il file {path}: {e}") from e


def load_sheet_raw(filepath: str | Path) -> pd.DataFrame:
    """
    Carica il primo foglio senza intestazioni (tutte le celle, indici/colonne numerici).

    Args:
        filepath: Percorso del file.

    Returns:
        DataFrame con tutte le celle come testo.

    Raises:
        ExcelFileError: Se il file è assente, illeggibile o senza fogli.
    """
    path = Path(filepath)
    if not path.exists():
        raise ExcelFileError(f"File non trovato: {path}")

    if _is_csv(path):
        return _read_csv_raw(path)

    xl = _open_workbook(path)
    try:
        if not xl.sheet_names:
            raise ExcelFileError(f"Nessun foglio in {path}")
        sheet_name = str(xl.sheet_names[0])

        try:
            df = pd.read_excel(xl, sheet_name=sheet_name, dtype=str, header=None)
            return df  # type: ignore[return-value]
        except Exception as e:
            raise ExcelFileError(f"Errore foglio '{sheet_name}' in {path}: {e}") from e
    finally:
        xl.close()


def dataframe_to_grid(df: pd.DataFrame) -> Grid:
    """Converte un DataFrame senza intestazioni in griglia rettangolare di stringhe."""
    return [[safe_str(v) for v in row] for row in df.itertuples(index=False, name=None)]


def load_grid(filepath: str | Path) -> Grid:
    """
    Legge il primo foglio come griglia di celle.

    La riga 0 è la prima riga del foglio, intestazione compresa se presente.
    Le celle vuote diventano "".
    """
    return dataframe_to_grid(load_sheet_raw(filepath))


def save_xlsx(
    filepath: str | Path,
    dataframes: dict[str, pd.DataFrame],
    *,
    header: bool = True,
    index: bool = False,
) -> None:
    """
    Salva più DataFrame in un file xlsx (un foglio per DataFrame).

    Args:
        filepath: Percorso di uscita.
        dataframes: Dict {nome_foglio: DataFrame}.
    """
    with pd.ExcelWriter(filepath, engine="openpyxl") as writer:
        for sheet_name, df in dataframes.items():
            # Excel limita i nomi dei fogli a 31 caratteri
            safe_name = str(sheet_name)[:31]
            df.to_excel(writer, sheet_name=safe_name, index=index, header=header)
