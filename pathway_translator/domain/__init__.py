"""
Pathway Translator - Domain Package

Parsed KEGG pathway model consumed by the translation layer.
"""

from pathway_translator.domain.models import (
    EntryType,
    RelationType,
    ReactionType,
    Graphics,
    SubType,
    ReactionComponent,
    Entry,
    Reaction,
    Relation,
    Pathway,
)


__all__ = [
    "EntryType",
    "RelationType",
    "ReactionType",
    "Graphics",
    "SubType",
    "ReactionComponent",
    "Entry",
    "Reaction",
    "Relation",
    "Pathway",
]
