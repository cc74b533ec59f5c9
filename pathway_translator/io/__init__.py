"""
Pathway Translator - Output Package
"""

from pathway_translator.io.writers import BioPAXWriter, SIFWriter, interaction_triples


__all__ = [
    "BioPAXWriter",
    "SIFWriter",
    "interaction_triples",
]
