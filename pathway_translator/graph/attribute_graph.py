"""
Pathway Translator - Attribute Graph

Directed graph of nodes and edges with a registry of typed attribute maps.

Every map is addressed by a descriptor string (e.g. "keggIds", "entrezIds",
"type") and targets either nodes or edges. Consumers (highlighting, search,
layout) attach and query side-channel data through descriptors, without
any schema change to the graph itself.

Invariants:
- One map per descriptor per graph
- A map targets nodes or edges, never both
- Removing a descriptor removes the map and its registry entry together
"""

from enum import Enum
from typing import Any, Callable, Dict, Iterator, List, Optional, Set, Union

import structlog

from pathway_translator.exceptions import MissingMapping, NumberFormatFailure
from pathway_translator.utils.text import split_tokens


# =============================================================================
# Graph Elements
# =============================================================================

class Node:
    """A graph node. Compared by identity."""
    
    __slots__ = ("index", "graph")
    
    def __init__(self, index: int, graph: "AttributeGraph"):
        self.index = index
        self.graph = graph
    
    def __repr__(self) -> str:
        return f"Node({self.index})"


class Edge:
    """A directed edge. Self-loops and parallel edges are allowed."""
    
    __slots__ = ("index", "source", "target", "graph")
    
    def __init__(self, index: int, source: Node, target: Node, graph: "AttributeGraph"):
        self.index = index
        self.source = source
        self.target = target
        self.graph = graph
    
    def __repr__(self) -> str:
        return f"Edge({self.index}: {self.source.index}->{self.target.index})"


GraphElement = Union[Node, Edge]


# =============================================================================
# Attribute Maps
# =============================================================================

class MapScope(str, Enum):
    """Which kind of graph element a map annotates."""
    NODE = "node"
    EDGE = "edge"


class AttrType(str, Enum):
    """Value type stored in an attribute map."""
    INT = "int"
    FLOAT = "float"
    STR = "str"
    BOOL = "bool"
    REF = "ref"  # opaque object reference
    ANY = "any"


def _coerce(value: Any, value_type: AttrType) -> Any:
    if value is None or value_type in (AttrType.ANY, AttrType.REF):
        return value
    
    if value_type == AttrType.BOOL:
        if isinstance(value, bool):
            return value
        return str(value).strip().lower() == "true"
    
    if value_type == AttrType.INT:
        if isinstance(value, bool):
            raise NumberFormatFailure(value, "int")
        if isinstance(value, int):
            return value
        try:
            return int(str(value).strip())
        except ValueError:
            raise NumberFormatFailure(value, "int")
    
    if value_type == AttrType.FLOAT:
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return float(value)
        try:
            return float(str(value).strip())
        except ValueError:
            raise NumberFormatFailure(value, "float")
    
    return str(value)


class AttributeMap:
    """
    Mapping from graph elements of one scope to values of one type.
    
    Created and registered through AttributeGraph.ensure_map() or
    implicitly by AttributeGraph.set_info().
    """
    
    def __init__(self, descriptor: str, scope: MapScope, value_type: AttrType = AttrType.ANY):
        self.descriptor = descriptor
        self.scope = scope
        self.value_type = value_type
        self._values: Dict[GraphElement, Any] = {}
        self.disposed = False
    
    @property
    def is_node_map(self) -> bool:
        return self.scope == MapScope.NODE
    
    def accepts(self, element: GraphElement) -> bool:
        if self.scope == MapScope.NODE:
            return isinstance(element, Node)
        return isinstance(element, Edge)
    
    def get(self, element: GraphElement) -> Any:
        return self._values.get(element)
    
    def set(self, element: GraphElement, value: Any) -> None:
        """Set (or, with None, unset) the value of an element."""
        if self.disposed:
            raise RuntimeError(f"Map {self.descriptor!r} has been disposed")
        if not self.accepts(element):
            raise TypeError(
                f"Map {self.descriptor!r} holds {self.scope.value} values, got {element!r}"
            )
        if value is None:
            self._values.pop(element, None)
            return
        self._values[element] = _coerce(value, self.value_type)
    
    def discard(self, element: GraphElement) -> None:
        self._values.pop(element, None)
    
    def items(self):
        return self._values.items()
    
    def dispose(self) -> None:
        self._values.clear()
        self.disposed = True
    
    def __contains__(self, element: GraphElement) -> bool:
        return element in self._values
    
    def __len__(self) -> int:
        return len(self._values)
    
    def __repr__(self) -> str:
        return f"AttributeMap({self.descriptor!r}, {self.scope.value}, {self.value_type.value}, n={len(self)})"


# =============================================================================
# Graph
# =============================================================================

class AttributeGraph:
    """
    Graph with descriptor-addressed attribute maps.
    
    Not thread-safe: a graph belongs to the thread that builds it.
    
    Usage:
        graph = AttributeGraph()
        n = graph.add_node(keggIds="hsa:3098", type="gene")
        graph.get_info(n, "type")          # "gene"
        graph.reverse_lookup("type")       # {"gene": {n}}
    """
    
    def __init__(self, logger=None):
        self._nodes: List[Node] = []
        self._edges: List[Edge] = []
        self._next_node_index = 0
        self._next_edge_index = 0
        # descriptor -> map
        self._maps: Dict[str, AttributeMap] = {}
        self.log = logger or structlog.get_logger(__name__)
    
    # -------------------------------------------------------------------------
    # Topology
    # -------------------------------------------------------------------------
    
    def add_node(self, **attributes) -> Node:
        """Add a node and set the given descriptor=value attributes on it."""
        node = Node(self._next_node_index, self)
        self._next_node_index += 1
        self._nodes.append(node)
        for descriptor, value in attributes.items():
            self.set_info(node, descriptor, value)
        return node
    
    def add_edge(self, source: Node, target: Node, **attributes) -> Edge:
        """Add a directed edge between two nodes of this graph."""
        if source.graph is not self or target.graph is not self:
            raise ValueError("Both endpoints must belong to this graph")
        edge = Edge(self._next_edge_index, source, target, self)
        self._next_edge_index += 1
        self._edges.append(edge)
        for descriptor, value in attributes.items():
            self.set_info(edge, descriptor, value)
        return edge
    
    def remove_edge(self, edge: Edge) -> None:
        if edge in self._edges:
            self._edges.remove(edge)
        for m in self._maps.values():
            if m.scope == MapScope.EDGE:
                m.discard(edge)
    
    def remove_node(self, node: Node) -> None:
        """Remove a node, its incident edges and all of their attribute values."""
        for edge in [e for e in self._edges if node in (e.source, e.target)]:
            self.remove_edge(edge)
        if node in self._nodes:
            self._nodes.remove(node)
        for m in self._maps.values():
            if m.scope == MapScope.NODE:
                m.discard(node)
    
    def nodes(self) -> List[Node]:
        return list(self._nodes)
    
    def edges(self) -> List[Edge]:
        return list(self._edges)
    
    def out_edges(self, node: Node) -> List[Edge]:
        return [e for e in self._edges if e.source is node]
    
    def in_edges(self, node: Node) -> List[Edge]:
        return [e for e in self._edges if e.target is node]
    
    @property
    def node_count(self) -> int:
        return len(self._nodes)
    
    @property
    def edge_count(self) -> int:
        return len(self._edges)
    
    def _elements(self, scope: MapScope) -> List[GraphElement]:
        return self._nodes if scope == MapScope.NODE else self._edges
    
    # -------------------------------------------------------------------------
    # Map Registry
    # -------------------------------------------------------------------------
    
    def get_map(self, descriptor: str) -> Optional[AttributeMap]:
        """Map registered for the descriptor, or None."""
        return self._maps.get(descriptor)
    
    def require_map(self, descriptor: str) -> AttributeMap:
        """
        Map registered for the descriptor.
        
        Raises:
            MissingMapping: if no such map is registered
        """
        attribute_map = self._maps.get(descriptor)
        if attribute_map is None:
            raise MissingMapping(descriptor)
        return attribute_map
    
    def get_maps(self) -> List[AttributeMap]:
        return list(self._maps.values())
    
    def get_map_descriptors(self) -> Set[str]:
        return set(self._maps.keys())
    
    def descriptor_of(self, attribute_map: AttributeMap) -> Optional[str]:
        """Reverse lookup from a map instance to its registered descriptor."""
        for descriptor, m in self._maps.items():
            if m is attribute_map:
                return descriptor
        return None
    
    def ensure_map(
        self,
        descriptor: str,
        is_node_map: bool = True,
        value_type: AttrType = AttrType.ANY,
    ) -> AttributeMap:
        """
        Return the map for the descriptor, creating an empty one if needed.
        
        Calling this twice with the same descriptor returns the same instance.
        """
        attribute_map = self._maps.get(descriptor)
        if attribute_map is None:
            scope = MapScope.NODE if is_node_map else MapScope.EDGE
            attribute_map = AttributeMap(descriptor, scope, value_type)
            self._maps[descriptor] = attribute_map
            self.log.debug("Created attribute map", descriptor=descriptor, scope=scope.value)
        return attribute_map
    
    def add_map(self, attribute_map: AttributeMap) -> None:
        """Register an externally created map under its descriptor."""
        existing = self._maps.get(attribute_map.descriptor)
        if existing is not None and existing is not attribute_map:
            raise ValueError(f"Descriptor {attribute_map.descriptor!r} is already registered")
        self._maps[attribute_map.descriptor] = attribute_map
    
    def remove_map(self, descriptor_or_map: Union[str, AttributeMap]) -> None:
        """
        Remove a map and its registry entry. Removing twice is a no-op.
        """
        if isinstance(descriptor_or_map, AttributeMap):
            descriptor = self.descriptor_of(descriptor_or_map)
            if descriptor is None:
                # Not registered (anymore), still make sure it is released
                if not descriptor_or_map.disposed:
                    descriptor_or_map.dispose()
                return
        else:
            descriptor = descriptor_or_map
        
        attribute_map = self._maps.pop(descriptor, None)
        if attribute_map is None:
            self.log.debug("Map already removed", descriptor=descriptor)
            return
        attribute_map.dispose()
    
    def dispose(self) -> None:
        """Remove every registered map."""
        for descriptor in list(self._maps):
            self.remove_map(descriptor)
    
    # -------------------------------------------------------------------------
    # Attribute Access
    # -------------------------------------------------------------------------
    
    def get_info(self, element: GraphElement, descriptor: str) -> Any:
        """Value of the descriptor for the element, or None if unset or unmapped."""
        attribute_map = self._maps.get(descriptor)
        if attribute_map is None:
            # optional maps are looked up routinely
            self.log.debug("Could not find mapping", descriptor=descriptor)
            return None
        return attribute_map.get(element)
    
    def set_info(self, element: GraphElement, descriptor: str, value: Any) -> None:
        """
        Set a value, creating the map on first use.
        
        Maps created here store values as written. Only maps declared with
        a value type through ensure_map() coerce.
        Unsetting (value None) in a map that does not exist is a no-op.
        """
        attribute_map = self._maps.get(descriptor)
        if attribute_map is None and value is None:
            return
        if attribute_map is None:
            attribute_map = self.ensure_map(descriptor, is_node_map=isinstance(element, Node))
        attribute_map.set(element, value)
    
    def get_bool_info(self, element: GraphElement, descriptor: str) -> bool:
        """True only if the stored value is True (or the string "true")."""
        value = self.get_info(element, descriptor)
        if value is None:
            return False
        if isinstance(value, bool):
            return value
        return str(value).strip().lower() == "true"
    
    def get_str_info(self, element: GraphElement, descriptor: str) -> Optional[str]:
        value = self.get_info(element, descriptor)
        return str(value) if value is not None else None
    
    def get_int_info(self, element: GraphElement, descriptor: str) -> Optional[int]:
        value = self.get_info(element, descriptor)
        if value is None:
            return None
        try:
            return _coerce(value, AttrType.INT)
        except NumberFormatFailure as e:
            self.log.warning("Stored value is not an integer", descriptor=descriptor, error=str(e))
            return None
    
    # -------------------------------------------------------------------------
    # Reverse Lookups
    # -------------------------------------------------------------------------
    
    def reverse_lookup(self, descriptor: str) -> Dict[Any, Set[GraphElement]]:
        """
        Group elements by their value for the descriptor.
        
        Built fresh on every call. Missing map -> empty result.
        """
        try:
            attribute_map = self.require_map(descriptor)
        except MissingMapping as e:
            self.log.error(str(e), descriptor=descriptor)
            return {}
        
        grouping: Dict[Any, Set[GraphElement]] = {}
        for element in self._elements(attribute_map.scope):
            value = attribute_map.get(element)
            if value is None:
                continue
            try:
                grouping.setdefault(value, set()).add(element)
            except TypeError:
                self.log.warning(
                    "Skipping unhashable value in reverse lookup",
                    descriptor=descriptor,
                    element=repr(element),
                )
        return grouping
    
    def build_index_by_multi_value(
        self,
        descriptor: str,
        parse: Callable[[str], Any] = int,
    ) -> Dict[Any, Set[GraphElement]]:
        """
        Index elements by each single token of a delimited attribute value.
        
        Values like "3098,3099" or "3098 3099" are split on commas and
        whitespace; every token is parsed with `parse`. Tokens that fail
        to parse are skipped with a warning.
        """
        try:
            attribute_map = self.require_map(descriptor)
        except MissingMapping as e:
            self.log.error(str(e), descriptor=descriptor)
            return {}
        
        index: Dict[Any, Set[GraphElement]] = {}
        for element in self._elements(attribute_map.scope):
            value = attribute_map.get(element)
            if value is None:
                continue
            for token in split_tokens(str(value)):
                try:
                    key = parse(token)
                except (ValueError, TypeError):
                    self.log.warning(
                        "Could not parse token",
                        descriptor=descriptor,
                        token=token,
                        element=repr(element),
                    )
                    continue
                index.setdefault(key, set()).add(element)
        return index
    
    def __iter__(self) -> Iterator[Node]:
        return iter(list(self._nodes))
    
    def __len__(self) -> int:
        return len(self._nodes)
