"""
Pathway Translator

Translates parsed KEGG pathways into an attributed graph or into a
BioPAX Level 2 / Level 3 model.

Usage:
    from pathway_translator import TranslationDriver, BioPAXLevel, BioPAXWriter
    
    model = TranslationDriver(BioPAXLevel.L3, annotation_source=source).translate(pathway)
    BioPAXWriter().write(model, "hsa00010.owl")
"""

from pathway_translator.biopax.model import BioPAXLevel, ReferenceKind, TargetModel
from pathway_translator.config import Settings, settings
from pathway_translator.context import TranslationContext
from pathway_translator.domain.models import Entry, EntryType, Pathway, Reaction, ReactionComponent, Relation, SubType
from pathway_translator.exceptions import (
    AnnotationLookupFailed,
    InvalidIdentifier,
    MissingMapping,
    NumberFormatFailure,
    TranslationCancelled,
    TranslatorError,
    UnsupportedLevel,
)
from pathway_translator.graph import AttributeGraph, AttributeMap, build_pathway_graph
from pathway_translator.io import BioPAXWriter, SIFWriter
from pathway_translator.logging_config import configure_logging
from pathway_translator.services import (
    AnnotationRecord,
    InMemoryAnnotationSource,
    KeggRestAnnotationSource,
    OfflineSpeciesTable,
)
from pathway_translator.translation import TranslationDriver


__version__ = "1.0.0"

__all__ = [
    "AnnotationLookupFailed",
    "AnnotationRecord",
    "AttributeGraph",
    "AttributeMap",
    "BioPAXLevel",
    "BioPAXWriter",
    "Entry",
    "EntryType",
    "InMemoryAnnotationSource",
    "InvalidIdentifier",
    "KeggRestAnnotationSource",
    "MissingMapping",
    "NumberFormatFailure",
    "OfflineSpeciesTable",
    "Pathway",
    "Reaction",
    "ReactionComponent",
    "ReferenceKind",
    "Relation",
    "SIFWriter",
    "Settings",
    "SubType",
    "TargetModel",
    "TranslationCancelled",
    "TranslationContext",
    "TranslationDriver",
    "TranslatorError",
    "UnsupportedLevel",
    "build_pathway_graph",
    "configure_logging",
    "settings",
]
