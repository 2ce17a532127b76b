"""Tests for tree node lookup on rendered elements."""

from types import SimpleNamespace

from elsource.resolvers.locator import extract_tree_node


class TestExtractTreeNode:
    def test_fixed_attachment_field(self):
        node = {"tag": 1}
        assert extract_tree_node({"_reactInternals": node}) is node

    def test_empty_node_at_fixed_field(self):
        node = {}
        assert extract_tree_node({"_reactInternals": node, "__reactFiber$x": {"tag": 5}}) is node

    def test_scalar_at_fixed_field_is_skipped(self):
        node = {"tag": 5}
        assert extract_tree_node({"_reactInternals": 0, "__reactFiber$x": node}) is node

    def test_fixed_fields_win_over_prefixed_keys(self):
        fixed = {"tag": 1}
        prefixed = {"tag": 5}
        element = {"__reactFiber$abc": prefixed, "_reactInternalFiber": fixed}
        assert extract_tree_node(element) is fixed

    def test_prefixed_key_with_random_suffix(self):
        node = {"tag": 5}
        assert extract_tree_node({"id": "x", "__reactFiber$k3j9xq": node}) is node

    def test_first_prefixed_key_in_natural_order(self):
        first = {"tag": 5}
        second = {"tag": 5}
        element = {"_reactFiber$b": first, "__reactFiber$a": second}
        assert extract_tree_node(element) is first

    def test_scalar_under_prefixed_key_is_skipped(self):
        node = {"tag": 5}
        element = {"__reactFiber$a": "stale", "__reactFiber$b": node}
        assert extract_tree_node(element) is node

    def test_attribute_object(self):
        node = SimpleNamespace(tag=5)
        element = SimpleNamespace(tagName="DIV", **{"__reactFiber$x1y2": node})
        assert extract_tree_node(element) is node

    def test_legacy_instance_field(self):
        node = SimpleNamespace(tag=0)
        assert extract_tree_node(SimpleNamespace(_reactInternalInstance=node)) is node

    def test_element_without_node(self):
        assert extract_tree_node({"tagName": "DIV", "__reactProps$abc": {}}) is None

    def test_none(self):
        assert extract_tree_node(None) is None
