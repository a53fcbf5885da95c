"""Interfaccia a riga di comando AbbinaCodici."""

from __future__ import annotations

import argparse
import logging
import sys

from abbinacodici import __version__
from abbinacodici.config import AbbinaCodiciError, Config
from abbinacodici.matching.resolver import lookup
from abbinacodici.matching.schema import to_percent
from abbinacodici.pipeline import InputMissingError, extract_catalogs, run
from abbinacodici.report import default_csv_name, export_csv, export_xlsx, print_report_console


def _build_config(args: argparse.Namespace) -> Config:
    """Config dal file (se indicato), poi sovrascritta dalle opzioni della riga di comando."""
    config = Config.load(args.config) if getattr(args, "config", None) else Config()
    overrides: dict[str, object] = {
        "catalog_files": args.catalog or config.catalog_files,
        "query_file": getattr(args, "query", None) or config.query_file,
        "threshold": args.threshold if args.threshold is not None else config.threshold,
        "y_tolerance": config.y_tolerance,
        "sample_rows": config.sample_rows,
        "workers": getattr(args, "workers", None) or config.workers,
    }
    return Config.from_dict(overrides)


def cmd_run(
    config: Config,
    output_path: str | None,
    *,
    xlsx_path: str | None = None,
    dry_run: bool = False,
) -> int:
    """Esegue la pipeline e scrive i risultati."""
    outcome = run(config)
    print_report_console(outcome.results)

    if dry_run:
        print("Modalità dry-run: nessun file scritto.")
        return 0

    csv_path = export_csv(outcome.results, output_path or default_csv_name())
    print(f"CSV scritto: {csv_path}")
    if xlsx_path:
        export_xlsx(outcome.results, config, xlsx_path)
        print(f"File xlsx scritto: {xlsx_path}")
    return 0


def cmd_codes(config: Config) -> int:
    """Elenca i codici estratti dai cataloghi."""
    if not config.catalog_files:
        raise InputMissingError("Caricare almeno un file codici")
    codes, _warnings = extract_catalogs(config)
    print(f"Codici estratti: {len(codes)}")
    for c in codes:
        print(f"  {c.code}\t{c.description}\t[{c.source}]")
    return 0


def cmd_lookup(config: Config, query: str) -> int:
    """Ricerca singola di una descrizione nei cataloghi."""
    if not config.catalog_files:
        raise InputMissingError("Caricare almeno un file codici")
    codes, _warnings = extract_catalogs(config)
    found = lookup(query, codes, threshold=config.threshold)
    if found is None:
        print("Nessuna corrispondenza trovata")
        return 0
    print(f"{found.code}\t{found.description}\t{to_percent(found.similarity)}%\t[{found.source}]")
    return 0


def _add_common(p: argparse.ArgumentParser) -> None:
    p.add_argument("--config", "-c", help="File config JSON")
    p.add_argument("--catalog", "-k", nargs="+", help="File con i codici (PDF o fogli di calcolo)")
    p.add_argument("--threshold", "-t", type=float, help="Soglia di accettazione (0-1)")


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="abbinacodici",
        description="Abbinamento di descrizioni ai codici di cataloghi PDF o Excel",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("--verbose", "-v", action="store_true", help="Log dettagliato")

    subparsers = parser.add_subparsers(dest="command", help="Comandi")

    p_run = subparsers.add_parser("run", help="Estrarre i codici e abbinare le descrizioni")
    _add_common(p_run)
    p_run.add_argument("--query", "-q", help="File con le descrizioni (TXT o foglio di calcolo)")
    p_run.add_argument("--output", "-o", help="File CSV di uscita (predefinito: abbinamenti_<data>.csv)")
    p_run.add_argument("--xlsx", help="File xlsx di uscita (fogli Abbinamenti e REPORT)")
    p_run.add_argument("--workers", "-w", type=int, help="Cataloghi letti in parallelo")
    p_run.add_argument("--dry-run", action="store_true", help="Non scrivere file di uscita")

    p_codes = subparsers.add_parser("codes", help="Elencare i codici estratti dai cataloghi")
    _add_common(p_codes)

    p_lookup = subparsers.add_parser("lookup", help="Cercare il codice di una singola descrizione")
    _add_common(p_lookup)
    p_lookup.add_argument("text", help="Descrizione da cercare")

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(message)s",
        datefmt="%H:%M:%S",
    )

    if args.command is None:
        parser.print_help()
        return 0

    try:
        config = _build_config(args)
        if args.command == "run":
            return cmd_run(config, args.output, xlsx_path=args.xlsx, dry_run=args.dry_run)
        if args.command == "codes":
            return cmd_codes(config)
        if args.command == "lookup":
            return cmd_lookup(config, args.text)
    except AbbinaCodiciError as e:
        print(f"Errore: {e}", file=sys.stderr)
        return 1

    parser.print_help()
    return 0


if __name__ == "__main__":
    sys.exit(main())
