"""
Pathway Translator - Services Package

External collaborators of the translator: annotation sources and
species tables. The translation core only sees their interfaces.
"""

from pathway_translator.services.annotation import (
    AnnotationRecord,
    AnnotationSource,
    InMemoryAnnotationSource,
    CachingAnnotationSource,
)
from pathway_translator.services.kegg_client import KeggRestAnnotationSource
from pathway_translator.services.species import (
    SpeciesInfo,
    SpeciesTable,
    OfflineSpeciesTable,
)


__all__ = [
    # Annotation
    "AnnotationRecord",
    "AnnotationSource",
    "InMemoryAnnotationSource",
    "CachingAnnotationSource",
    "KeggRestAnnotationSource",
    
    # Species
    "SpeciesInfo",
    "SpeciesTable",
    "OfflineSpeciesTable",
]
