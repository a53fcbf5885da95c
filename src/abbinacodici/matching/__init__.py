"""Modulo di abbinamento."""

from abbinacodici.matching.resolver import lookup, resolve_matches
from abbinacodici.matching.schema import CodeRecord, LookupResult, MatchResult, to_percent

__all__ = ["CodeRecord", "LookupResult", "MatchResult", "lookup", "resolve_matches", "to_percent"]
