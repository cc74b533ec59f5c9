"""
Pathway Translator - BioPAX Package

Target model of both ontology levels. The builders live in
biopax.builders, biopax.level2 and biopax.level3.
"""

from pathway_translator.biopax.model import BioPAXElement, BioPAXLevel, ReferenceKind, TargetModel


__all__ = [
    "BioPAXElement",
    "BioPAXLevel",
    "ReferenceKind",
    "TargetModel",
]
