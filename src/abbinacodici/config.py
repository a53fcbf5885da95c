"""Configurazione e caricamento del file config JSON."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

DEFAULT_THRESHOLD = 0.3
DEFAULT_Y_TOLERANCE = 2.0
DEFAULT_SAMPLE_ROWS = 10


class AbbinaCodiciError(Exception):
    """Eccezione di base per AbbinaCodici."""


class ConfigError(AbbinaCodiciError, ValueError):
    """Errore di validazione della configurazione."""


class ConfigFileError(AbbinaCodiciError):
    """Errore di caricamento del file di configurazione (file assente, JSON non valido)."""


class DocumentReadError(AbbinaCodiciError):
    """Un documento non può essere letto come testo o come griglia."""


@dataclass
class Config:
    """Configurazione principale di AbbinaCodici."""

    catalog_files: list[str] = field(default_factory=list)
    query_file: str = ""

    threshold: float = DEFAULT_THRESHOLD
    y_tolerance: float = DEFAULT_Y_TOLERANCE  # raggruppamento righe PDF
    sample_rows: int = DEFAULT_SAMPLE_ROWS  # righe campionate per le colonne
    workers: int = 1

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> Config:
        catalog_files = d.get("catalog_files", [])
        if isinstance(catalog_files, str):
            catalog_files = [catalog_files]
        if not isinstance(catalog_files, list):
            raise ConfigError(f"catalog_files deve essere una lista (got {type(catalog_files).__name__})")
        threshold = float(d.get("threshold", DEFAULT_THRESHOLD))
        y_tolerance = float(d.get("y_tolerance", DEFAULT_Y_TOLERANCE))
        sample_rows = int(d.get("sample_rows", DEFAULT_SAMPLE_ROWS))
        workers = int(d.get("workers", 1))

        if not 0 <= threshold <= 1:
            raise ConfigError(f"threshold deve essere tra 0 e 1 (got {threshold})")
        if y_tolerance < 0:
            raise ConfigError(f"y_tolerance deve essere >= 0 (got {y_tolerance})")
        if sample_rows < 1:
            raise ConfigError(f"sample_rows deve essere >= 1 (got {sample_rows})")
        if workers < 1:
            raise ConfigError(f"workers deve essere >= 1 (got {workers})")

        return cls(
            catalog_files=[str(p) for p in catalog_files],
            query_file=str(d.get("query_file", "") or ""),
            threshold=threshold,
            y_tolerance=y_tolerance,
            sample_rows=sample_rows,
            workers=workers,
        )

    @classmethod
    def load(cls, path: str | Path) -> Config:
        """
        Carica la configurazione da un file JSON.

        Raises:
            ConfigFileError: Se il file è assente o il JSON non è valido.
            ConfigError: Se la configurazione non è valida.
        """
        path = Path(path).resolve()
        if not path.exists():
            raise ConfigFileError(f"File di configurazione non trovato: {path}")

        try:
            with open(path, encoding="utf-8") as f:
                d = json.load(f)
        except json.JSONDecodeError as e:
            raise ConfigFileError(f"JSON non valido in {path}: {e}") from e
        except OSError as e:
            raise ConfigFileError(f"Impossibile leggere {path}: {e}") from e

        if not isinstance(d, dict):
            raise ConfigFileError(f"File di configurazione non valido: {path} deve contenere un oggetto JSON")

        config = cls.from_dict(d)
        config.resolve_paths(path.parent)
        return config

    def resolve_paths(self, base_dir: Path) -> None:
        """
        Risolve i percorsi relativi rispetto alla cartella di base (es. cartella del file config).

        Modifica catalog_files e query_file sul posto.
        """
        base = Path(base_dir)
        self.catalog_files = [
            p if Path(p).is_absolute() else str((base / p).resolve()) for p in self.catalog_files
        ]
        if self.query_file and not Path(self.query_file).is_absolute():
            self.query_file = str((base / self.query_file).resolve())
