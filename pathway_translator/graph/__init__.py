"""
Pathway Translator - Graph Package

Attribute graph with descriptor-addressed typed maps.
"""

from pathway_translator.graph.attribute_graph import (
    AttributeGraph,
    AttributeMap,
    AttrType,
    MapScope,
    Node,
    Edge,
)
from pathway_translator.graph.builder import build_pathway_graph


__all__ = [
    "AttributeGraph",
    "AttributeMap",
    "AttrType",
    "MapScope",
    "Node",
    "Edge",
    "build_pathway_graph",
]
