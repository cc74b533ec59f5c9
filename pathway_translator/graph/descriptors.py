"""
Standard descriptors of pathway graphs and queries over them.

Presentation-layer collaborators (highlighting, search, layout) address
graph data exclusively through these descriptors.
"""

from typing import Dict, Iterable, Optional, Set

from pathway_translator.exceptions import MissingMapping
from pathway_translator.graph.attribute_graph import AttributeGraph, Node


# =============================================================================
# Descriptors
# =============================================================================

NODE_KEGG_ID = "keggIds"
NODE_GENE_ID = "entrezIds"
NODE_TYPE = "type"
NODE_LABEL = "label"
NODE_DESCRIPTION = "description"
NODE_NAME = "nodeName"
NODE_POSITION = "position"
NODE_SIZE = "size"
NODE_COLOR = "nodeColor"
NODE_URL = "nodeURL"
NODE_IS_PATHWAY_REFERENCE = "isPathwayReference"
NODE_COMPONENTS = "groupComponents"
NODE_REACTIONS = "reactions"

EDGE_INTERACTION_TYPE = "interactionType"
EDGE_SUBTYPES = "subtypes"
EDGE_REACTION_ID = "reactionId"
EDGE_REVERSIBLE = "reversible"

RNA_TYPE = "RNA"


# =============================================================================
# Queries
# =============================================================================

def gene_id_to_nodes(graph: AttributeGraph) -> Dict[int, Set[Node]]:
    """Map every NCBI gene id to the nodes carrying it."""
    return graph.build_index_by_multi_value(NODE_GENE_ID, parse=int)


def rna_to_nodes(graph: AttributeGraph) -> Dict[str, Set[Node]]:
    """Map upper-cased labels of RNA nodes to the nodes."""
    type_map = graph.get_map(NODE_TYPE)
    label_map = graph.get_map(NODE_LABEL)
    if type_map is None or label_map is None:
        missing = NODE_TYPE if type_map is None else NODE_LABEL
        graph.log.error(str(MissingMapping(missing)), descriptor=missing)
        return {}
    
    result: Dict[str, Set[Node]] = {}
    for node in graph.nodes():
        if type_map.get(node) != RNA_TYPE:
            continue
        label = label_map.get(node)
        if label is None:
            continue
        result.setdefault(str(label).upper().strip(), set()).add(node)
    return result


def contains_rna_nodes(graph: AttributeGraph) -> bool:
    type_map = graph.get_map(NODE_TYPE)
    if type_map is None:
        graph.log.error(str(MissingMapping(NODE_TYPE)), descriptor=NODE_TYPE)
        return False
    return any(type_map.get(n) == RNA_TYPE for n in graph.nodes())


def organism_abbreviation(graph: AttributeGraph) -> Optional[str]:
    """Organism prefix (e.g. "hsa" or "ko") of the first node with a KEGG id."""
    for node in graph.nodes():
        ids = graph.get_str_info(node, NODE_KEGG_ID)
        if not ids:
            continue
        ids = ids.lower().strip()
        if ":" in ids:
            return ids[:ids.index(":")]
    return None


def title_node(graph: AttributeGraph, pathway_id: str) -> Optional[Node]:
    """Node that references the given pathway, e.g. the title node of a map."""
    pathway_id = pathway_id.lower().strip()
    for node in graph.nodes():
        ids = (graph.get_str_info(node, NODE_KEGG_ID) or "").lower().strip()
        if ids.startswith("path:") and pathway_id in ids:
            return node
    return None


def search_nodes(
    graph: AttributeGraph,
    text: str,
    descriptors: Iterable[str] = (NODE_LABEL, NODE_KEGG_ID, NODE_DESCRIPTION),
) -> Set[Node]:
    """Nodes where any of the descriptors contains the text (case-insensitive)."""
    needle = text.lower().strip()
    if not needle:
        return set()
    
    hits: Set[Node] = set()
    for descriptor in descriptors:
        attribute_map = graph.get_map(descriptor)
        if attribute_map is None or not attribute_map.is_node_map:
            continue
        for node, value in attribute_map.items():
            if needle in str(value).lower():
                hits.add(node)
    return hits
