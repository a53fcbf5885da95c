"""AbbinaCodici - Abbinamento di descrizioni libere ai codici di un catalogo (PDF o fogli di calcolo)."""

from abbinacodici.config import AbbinaCodiciError, ConfigError, ConfigFileError, DocumentReadError

__all__ = [
    "__version__",
    "AbbinaCodiciError",
    "ConfigError",
    "ConfigFileError",
    "DocumentReadError",
]

__version__ = "0.1.0"
