"""
Pathway Translator - Translation Package
"""

from pathway_translator.translation.atom_balance import AtomCheckResult, check_atom_balance, parse_formula
from pathway_translator.translation.driver import TranslationDriver, create_builder, resolve_level


__all__ = [
    "AtomCheckResult",
    "check_atom_balance",
    "parse_formula",
    "TranslationDriver",
    "create_builder",
    "resolve_level",
]
