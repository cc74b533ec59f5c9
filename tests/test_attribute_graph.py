"""
Pathway Translator - Attribute Graph Tests

Map registry, typed access and reverse lookups.
"""

import pytest

from pathway_translator.exceptions import MissingMapping, NumberFormatFailure
from pathway_translator.graph.attribute_graph import AttributeGraph, AttributeMap, AttrType, MapScope


class TestMapRegistry:
    """Tests for descriptor-addressed map registration."""

    def test_ensure_map_returns_same_instance(self):
        """Two calls with the same descriptor yield the same map."""
        graph = AttributeGraph()
        first = graph.ensure_map("keggIds", True, AttrType.STR)
        second = graph.ensure_map("keggIds", True, AttrType.STR)
        assert first is second
        assert graph.get_map_descriptors() == {"keggIds"}

    def test_remove_map_is_idempotent(self):
        """Removing a descriptor twice is a no-op the second time."""
        graph = AttributeGraph()
        graph.ensure_map("type")
        graph.remove_map("type")
        graph.remove_map("type")
        assert graph.get_map("type") is None
        assert "type" not in graph.get_map_descriptors()

    def test_remove_map_by_instance(self):
        """Removing by instance clears the registry entry and disposes the map."""
        graph = AttributeGraph()
        node = graph.add_node(label="HK1")
        label_map = graph.get_map("label")
        graph.remove_map(label_map)
        assert graph.get_map("label") is None
        assert label_map.disposed
        with pytest.raises(RuntimeError):
            label_map.set(node, "HK2")

    def test_descriptor_of(self):
        """Maps can be traced back to their descriptor."""
        graph = AttributeGraph()
        m = graph.ensure_map("size", True)
        assert graph.descriptor_of(m) == "size"
        assert graph.descriptor_of(AttributeMap("other", MapScope.NODE)) is None

    def test_add_map_rejects_second_map_for_descriptor(self):
        graph = AttributeGraph()
        graph.ensure_map("type")
        with pytest.raises(ValueError):
            graph.add_map(AttributeMap("type", MapScope.NODE))

    def test_require_map_raises(self):
        graph = AttributeGraph()
        with pytest.raises(MissingMapping):
            graph.require_map("entrezIds")

    def test_dispose_removes_all_maps(self):
        graph = AttributeGraph()
        graph.ensure_map("a")
        graph.ensure_map("b", False)
        graph.dispose()
        assert graph.get_maps() == []


class TestAttributeAccess:
    """Tests for get_info / set_info."""

    def test_set_info_creates_map_with_scope(self):
        """First write creates the map for the element's scope."""
        graph = AttributeGraph()
        a = graph.add_node()
        b = graph.add_node()
        edge = graph.add_edge(a, b, interactionType="PPrel")
        assert graph.get_map("interactionType").scope == MapScope.EDGE
        assert graph.get_info(edge, "interactionType") == "PPrel"

    def test_node_map_rejects_edges(self):
        """A map targets nodes or edges, never both."""
        graph = AttributeGraph()
        a = graph.add_node(type="gene")
        edge = graph.add_edge(a, a)
        with pytest.raises(TypeError):
            graph.set_info(edge, "type", "gene")

    def test_unset_without_map_is_noop(self):
        graph = AttributeGraph()
        node = graph.add_node()
        graph.set_info(node, "description", None)
        assert graph.get_map("description") is None

    def test_unset_removes_value(self):
        graph = AttributeGraph()
        node = graph.add_node(label="HK1")
        graph.set_info(node, "label", None)
        assert graph.get_info(node, "label") is None
        assert graph.get_map("label") is not None

    def test_get_info_for_missing_map(self):
        graph = AttributeGraph()
        node = graph.add_node()
        assert graph.get_info(node, "unknown") is None

    def test_bool_info(self):
        """Only True or the string "true" count as true."""
        graph = AttributeGraph()
        node = graph.add_node()
        other = graph.add_node()
        graph.ensure_map("flag", True, AttrType.ANY)
        graph.set_info(node, "flag", "TRUE")
        graph.set_info(other, "flag", "yes")
        assert graph.get_bool_info(node, "flag") is True
        assert graph.get_bool_info(other, "flag") is False
        assert graph.get_bool_info(node, "missing") is False

    def test_int_map_coerces_strings(self):
        graph = AttributeGraph()
        node = graph.add_node()
        graph.ensure_map("count", True, AttrType.INT)
        graph.set_info(node, "count", " 42 ")
        assert graph.get_info(node, "count") == 42

    def test_int_map_rejects_non_numbers(self):
        graph = AttributeGraph()
        node = graph.add_node()
        graph.ensure_map("count", True, AttrType.INT)
        with pytest.raises(NumberFormatFailure):
            graph.set_info(node, "count", "many")

    @pytest.mark.parametrize("first,second", [
        (True, "RNA"),
        (3, "gene"),
        (1, 1.5),
        ("gene", 7),
    ])
    def test_implicit_map_keeps_values_as_written(self, first, second):
        """A map created by set_info() does not take the type of its first value."""
        graph = AttributeGraph()
        a = graph.add_node()
        b = graph.add_node()
        graph.set_info(a, "value", first)
        graph.set_info(b, "value", second)
        assert graph.get_info(a, "value") == first
        assert graph.get_info(b, "value") == second
        assert type(graph.get_info(b, "value")) is type(second)

    def test_remove_node_drops_values_and_edges(self):
        graph = AttributeGraph()
        a = graph.add_node(label="A")
        b = graph.add_node(label="B")
        graph.add_edge(a, b, interactionType="PPrel")
        graph.remove_node(a)
        assert graph.node_count == 1
        assert graph.edge_count == 0
        assert a not in graph.get_map("label")


class TestReverseLookup:
    """Tests for value -> elements groupings."""

    def test_reverse_lookup_groups_nodes(self):
        """Three nodes of types RNA, gene and RNA group into two sets."""
        graph = AttributeGraph()
        first = graph.add_node(type="RNA")
        gene = graph.add_node(type="gene")
        second = graph.add_node(type="RNA")

        grouping = graph.reverse_lookup("type")
        assert grouping == {"RNA": {first, second}, "gene": {gene}}

    def test_reverse_lookup_is_fresh(self):
        """Mutating a returned grouping does not affect later calls."""
        graph = AttributeGraph()
        graph.add_node(type="gene")
        graph.reverse_lookup("type")["gene"].clear()
        assert len(graph.reverse_lookup("type")["gene"]) == 1

    def test_reverse_lookup_missing_map(self):
        graph = AttributeGraph()
        assert graph.reverse_lookup("type") == {}

    def test_reverse_lookup_skips_unhashable_values(self):
        """List values cannot be grouped; hashable values still are."""
        graph = AttributeGraph()
        graph.add_node(members=[1, 2])
        single = graph.add_node(members="3098")

        assert graph.reverse_lookup("members") == {"3098": {single}}

    def test_multi_value_index_skips_bad_tokens(self):
        """Comma and whitespace separated ids are indexed one by one."""
        graph = AttributeGraph()
        a = graph.add_node(entrezIds="3098,3099")
        b = graph.add_node(entrezIds="3099 abc")

        index = graph.build_index_by_multi_value("entrezIds")
        assert index[3098] == {a}
        assert index[3099] == {a, b}
        assert "abc" not in index
        assert len(index) == 2
