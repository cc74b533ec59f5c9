"""
Attributed graph representation of a parsed pathway.

One node per entry, one edge per relation and one edge per
substrate -> product pair of every reaction.
"""

import re
from typing import Dict, Optional

from pathway_translator.domain.models import Entry, EntryType, Pathway
from pathway_translator.graph.attribute_graph import AttributeGraph, AttrType, Node
from pathway_translator.graph import descriptors as d


# Organism-prefixed gene ids ("hsa:3098") carry NCBI gene ids for most organisms
_GENE_ID = re.compile(r"^[a-z]{3,4}:(\d+)$")


def _entrez_ids(entry: Entry) -> Optional[str]:
    if entry.type not in (EntryType.GENE, EntryType.GENES):
        return None
    ids = []
    for token in entry.ids:
        match = _GENE_ID.match(token)
        if match:
            ids.append(match.group(1))
    return ",".join(ids) if ids else None


def build_pathway_graph(pathway: Pathway, logger=None) -> AttributeGraph:
    """Build the attributed graph model of a pathway."""
    graph = AttributeGraph(logger=logger)
    
    # Register maps up front so every descriptor exists even when unused
    graph.ensure_map(d.NODE_KEGG_ID, True, AttrType.STR)
    graph.ensure_map(d.NODE_LABEL, True, AttrType.STR)
    graph.ensure_map(d.NODE_TYPE, True, AttrType.STR)
    graph.ensure_map(d.NODE_GENE_ID, True, AttrType.STR)
    graph.ensure_map(d.EDGE_INTERACTION_TYPE, False, AttrType.STR)
    
    nodes: Dict[int, Node] = {}
    for entry in pathway.entries:
        node = graph.add_node()
        nodes[entry.id] = node
        
        graph.set_info(node, d.NODE_KEGG_ID, entry.name)
        graph.set_info(node, d.NODE_LABEL, entry.label)
        graph.set_info(node, d.NODE_TYPE, entry.real_type or entry.type.value)
        graph.set_info(node, d.NODE_GENE_ID, _entrez_ids(entry))
        graph.set_info(node, d.NODE_URL, entry.link)
        graph.set_info(node, d.NODE_IS_PATHWAY_REFERENCE, entry.type == EntryType.MAP)
        if entry.reactions:
            graph.set_info(node, d.NODE_REACTIONS, " ".join(entry.reactions))
        if entry.components:
            graph.set_info(node, d.NODE_COMPONENTS, ",".join(str(c) for c in entry.components))
        
        g = entry.graphics
        if g is not None:
            if g.x is not None and g.y is not None:
                graph.set_info(node, d.NODE_POSITION, (g.x, g.y))
            if g.width is not None and g.height is not None:
                graph.set_info(node, d.NODE_SIZE, (g.width, g.height))
            graph.set_info(node, d.NODE_COLOR, g.bgcolor)
    
    for relation in pathway.relations:
        source = nodes.get(relation.entry1)
        target = nodes.get(relation.entry2)
        if source is None or target is None:
            graph.log.warning("Relation references unknown entry", relation=relation.key())
            continue
        edge = graph.add_edge(source, target)
        graph.set_info(edge, d.EDGE_INTERACTION_TYPE, relation.type.value)
        if relation.subtypes:
            graph.set_info(edge, d.EDGE_SUBTYPES, ",".join(relation.subtype_names()))
    
    for reaction in pathway.reactions:
        for substrate in reaction.substrates:
            s_entry = pathway.resolve_component(substrate)
            if s_entry is None:
                continue
            for product in reaction.products:
                p_entry = pathway.resolve_component(product)
                if p_entry is None:
                    continue
                edge = graph.add_edge(nodes[s_entry.id], nodes[p_entry.id])
                graph.set_info(edge, d.EDGE_REACTION_ID, reaction.name)
                graph.set_info(edge, d.EDGE_REVERSIBLE, reaction.is_reversible)
    
    return graph
