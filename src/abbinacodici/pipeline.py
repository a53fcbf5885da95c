"""Pipeline completa: estrazione dei cataloghi, estrazione delle descrizioni, abbinamento."""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from pathlib import Path

from abbinacodici.catalog import extract_codes_from_grid, extract_codes_from_text
from abbinacodici.config import AbbinaCodiciError, Config
from abbinacodici.io_excel import is_tabular, load_grid
from abbinacodici.io_pdf import extract_pdf_text
from abbinacodici.matching.resolver import resolve_matches
from abbinacodici.matching.schema import CodeRecord, MatchResult
from abbinacodici.queries import (
    extract_descriptions_from_grid,
    extract_descriptions_from_text,
    is_text,
    read_text_file,
)

logger = logging.getLogger(__name__)

SEPARATOR = "━" * 40


class InputMissingError(AbbinaCodiciError):
    """Nessun file catalogo o nessun file descrizioni."""


class UnsupportedFormatError(AbbinaCodiciError):
    """Formato del file descrizioni non supportato."""


class NoCodesExtractedError(AbbinaCodiciError):
    """Nessun codice estratto dall'insieme dei cataloghi."""


class NoDescriptionsExtractedError(AbbinaCodiciError):
    """Nessuna descrizione estratta dal file descrizioni."""

    def __init__(self, message: str, codes: list[CodeRecord] | None = None) -> None:
        super().__init__(message)
        self.codes = codes or []


@dataclass
class PipelineResult:
    """Uscita di una esecuzione: codici estratti, descrizioni e abbinamenti."""

    codes: list[CodeRecord]
    descriptions: list[str]
    results: list[MatchResult]
    warnings: list[str] = field(default_factory=list)

    @property
    def matched_count(self) -> int:
        return sum(1 for r in self.results if r.matched)


def extract_catalog(path: str | Path, config: Config) -> list[CodeRecord] | None:
    """
    Estrae i codici da un catalogo (PDF o foglio di calcolo).

    Returns:
        Lista dei codici (eventualmente vuota), None se il formato non è supportato.

    Raises:
        DocumentReadError: Se il documento non è leggibile.
    """
    path = Path(path)
    suffix = path.suffix.lower()
    if suffix == ".pdf":
        text = extract_pdf_text(path, y_tolerance=config.y_tolerance)
        return extract_codes_from_text(text, path.name)
    if is_tabular(path):
        return extract_codes_from_grid(load_grid(path), path.name, sample_rows=config.sample_rows)
    return None


def extract_catalogs(config: Config) -> tuple[list[CodeRecord], list[str]]:
    """
    Estrae i codici da tutti i cataloghi, nell'ordine dei file.

    Con config.workers > 1 i documenti sono letti in parallelo; l'ordine del
    risultato resta quello dei file.

    Returns:
        (codici, avvisi)
    """
    files = config.catalog_files
    logger.info("STEP 1: elaborazione di %d file...", len(files))

    if config.workers > 1 and len(files) > 1:
        with ThreadPoolExecutor(max_workers=config.workers) as pool:
            extracted = list(pool.map(lambda f: extract_catalog(f, config), files))
    else:
        extracted = [extract_catalog(f, config) for f in files]

    codes: list[CodeRecord] = []
    warnings: list[str] = []
    for i, (path, found) in enumerate(zip(files, extracted), start=1):
        name = Path(path).name
        logger.info("File %d/%d: %s", i, len(files), name)
        if found is None:
            msg = f"Formato non supportato: {name}"
            logger.warning("  %s", msg)
            warnings.append(msg)
            continue
        if not found:
            msg = f"Nessun codice trovato in {name}"
            logger.warning("  %s", msg)
            warnings.append(msg)
        else:
            logger.info("  Estratti %d codici", len(found))
        codes.extend(found)
    return codes, warnings


def _unsupported_query(path: str | Path) -> UnsupportedFormatError:
    return UnsupportedFormatError(
        f"Formato file descrizioni non supportato: {Path(path).name}. "
        "Usare TXT o un foglio di calcolo (.xlsx, .xls, .ods, .csv)"
    )


def extract_queries(path: str | Path, config: Config) -> list[str]:
    """
    Estrae le descrizioni da abbinare da un file .txt o da un foglio di calcolo.

    Raises:
        UnsupportedFormatError: Se l'estensione non è né testo né tabellare.
        DocumentReadError: Se il documento non è leggibile.
    """
    path = Path(path)
    if is_tabular(path):
        logger.info("File tabellare rilevato per le descrizioni")
        return extract_descriptions_from_grid(load_grid(path), sample_rows=config.sample_rows)
    if is_text(path):
        logger.info("File TXT rilevato per le descrizioni")
        return extract_descriptions_from_text(read_text_file(path))
    raise _unsupported_query(path)


def run(config: Config) -> PipelineResult:
    """
    Esegue la pipeline completa.

    Raises:
        InputMissingError: Se mancano i cataloghi o il file descrizioni.
        UnsupportedFormatError: Se il file descrizioni non ha un formato supportato.
        DocumentReadError: Se un documento non è leggibile.
        NoCodesExtractedError: Se nessun catalogo produce codici.
        NoDescriptionsExtractedError: Se il file descrizioni non produce descrizioni.
    """
    if not config.catalog_files or not config.query_file:
        raise InputMissingError("Caricare almeno un file codici e un file descrizioni")
    if not (is_tabular(config.query_file) or is_text(config.query_file)):
        raise _unsupported_query(config.query_file)

    logger.info("INIZIO PROCESSO DI ESTRAZIONE E ABBINAMENTO")
    logger.info(SEPARATOR)

    codes, warnings = extract_catalogs(config)
    if not codes:
        raise NoCodesExtractedError("Nessun codice trovato nei file! Verificare il formato dei file.")
    logger.info("Totale codici estratti: %d", len(codes))

    logger.info(SEPARATOR)
    logger.info("STEP 2: estrazione descrizioni da %s", Path(config.query_file).name)
    descriptions = extract_queries(config.query_file, config)
    if not descriptions:
        raise NoDescriptionsExtractedError("Nessuna descrizione trovata nel file descrizioni!", codes=codes)
    logger.info("Trovate %d descrizioni da abbinare", len(descriptions))

    logger.info(SEPARATOR)
    logger.info("STEP 3: calcolo abbinamenti...")
    results = resolve_matches(codes, descriptions, threshold=config.threshold)

    outcome = PipelineResult(codes=codes, descriptions=descriptions, results=results, warnings=warnings)
    unmatched = len(results) - outcome.matched_count
    logger.info(SEPARATOR)
    logger.info("Abbinamenti trovati: %d/%d", outcome.matched_count, len(results))
    if unmatched:
        logger.warning("Non abbinati: %d", unmatched)
    return outcome
