"""
Pathway Translator - Cross-References Package
"""

from pathway_translator.xrefs.identifiers import (
    DatabaseContent,
    IdentifierDatabase,
    Qualifier,
    format_identifier,
    check_identifier,
    infer_qualifier,
    kegg_database_for,
    miriam_uri,
)
from pathway_translator.xrefs.cache import CrossReferenceCache, classify


__all__ = [
    "DatabaseContent",
    "IdentifierDatabase",
    "Qualifier",
    "format_identifier",
    "check_identifier",
    "infer_qualifier",
    "kegg_database_for",
    "miriam_uri",
    "CrossReferenceCache",
    "classify",
]
