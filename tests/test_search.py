# tests/test_search.py
"""
Tests for descendant search.
"""

import time

import pytest

from fakes import FakeNode
from uiauto_ax.config import TimeConfig
from uiauto_ax.element import Element
from uiauto_ax.exceptions import TimeoutError, ValidationError
from uiauto_ax.search import SearchEngine, matches


def synthetic_tree():
    window = Element("AXWindow", "Main")
    toolbar = Element("AXToolbar")
    ok = Element("AXButton", "OK")
    cancel = Element("AXButton", "Cancel", role_description="cancel button")
    field = Element("AXTextField", "Search", sub_role="AXSearchField")
    window.add_child(toolbar)
    toolbar.add_child(ok)
    toolbar.add_child(cancel)
    window.add_child(field)
    return window


class TestMatches:
    """Tests for the role/title predicate."""

    def test_role_is_case_insensitive(self):
        assert matches(Element("AXButton"), role="axbutton")

    def test_role_matches_subrole(self):
        assert matches(Element("AXTextField", sub_role="AXSearchField"), role="AXSearchField")

    def test_title_is_case_insensitive_substring(self):
        assert matches(Element("AXButton", "Save As..."), title="save")
        assert not matches(Element("AXButton", "Open"), title="save")

    def test_title_matches_role_description(self):
        assert matches(Element("AXButton", "", role_description="close button"), title="Close")

    def test_no_predicates_match_everything(self):
        assert matches(Element("AXGroup"))


class TestFindDescendants:
    """Tests for find_descendants on synthetic and provider trees."""

    def test_pre_order_including_root(self):
        """Should list the root first and children in provider order."""
        root = synthetic_tree()
        roles = [e.role for e in root.find_descendants()]
        assert roles == ["AXWindow", "AXToolbar", "AXButton", "AXButton", "AXTextField"]

    def test_role_results_are_subset_of_all(self):
        """Filtered results should be a subset of the unfiltered walk."""
        root = synthetic_tree()
        everything = root.find_descendants()
        buttons = root.find_descendants(role="AXButton")

        assert [b.title for b in buttons] == ["OK", "Cancel"]
        assert all(b in everything for b in buttons)
        assert all(matches(b, role="AXButton") for b in buttons)

    def test_role_and_title_combined(self):
        root = synthetic_tree()
        found = root.find_descendants(role="AXButton", title="cancel")
        assert [e.title for e in found] == ["Cancel"]

    def test_empty_role_is_rejected(self):
        with pytest.raises(ValidationError):
            synthetic_tree().find_descendants(role="")

    def test_loads_children_while_walking(self, root):
        """Provider-backed search should populate the tree lazily."""
        found = root.find_descendants(role="AXButton", title="OK")

        assert len(found) == 1
        assert found[0].title == "OK"
        assert found[0].parent.role == "AXToolbar"
        assert found[0].parent.parent is root

    def test_failing_subtree_is_skipped(self, engine, tree):
        """A node whose children cannot be built should not stop siblings."""
        root = engine.element_from_handle(tree["window"])
        searcher = SearchEngine()
        toolbar = Element("AXToolbar", has_children=True)

        def broken_load():
            raise RuntimeError("provider crashed")

        toolbar.load_children_if_needed = broken_load
        root.load_children_if_needed()
        root.children[0] = toolbar

        found = searcher.collect(root, role="AXTextField")
        assert [e.title for e in found] == ["Search"]

    def test_search_timeout_covers_whole_walk(self, engine, provider, tree):
        """A hanging provider should surface as TimeoutError near the bound."""
        tree["toolbar"].hang_on.add("children_of")
        root = engine.element_from_handle(tree["window"])

        start = time.monotonic()
        with pytest.raises(TimeoutError):
            engine.find_elements(root, role="AXButton", timeout=0.3)
        assert time.monotonic() - start < 2.0

    def test_search_timeout_comes_from_config(self, engine, tree):
        """Without an explicit timeout the ``search`` setting applies."""
        tree["toolbar"].hang_on.add("children_of")
        root = engine.element_from_handle(tree["window"])

        with TimeConfig.override(search=0.2):
            start = time.monotonic()
            with pytest.raises(TimeoutError):
                root.find_descendants(role="AXButton")
        assert time.monotonic() - start < 2.0

    def test_deep_tree_does_not_recurse(self):
        """Traversal should handle trees deeper than the recursion limit."""
        root = Element("AXGroup")
        node = root
        for _ in range(3000):
            child = Element("AXGroup")
            node.add_child(child)
            node = child
        node.add_child(Element("AXButton", "Deep"))

        found = SearchEngine().collect(root, role="AXButton")
        assert [e.title for e in found] == ["Deep"]


class TestHangingProvider:
    """A provider that never answers must not hang the caller."""

    def test_leaf_children_hang(self, engine, tree):
        for node in (tree["ok"], tree["cancel"]):
            node.children = [FakeNode("AXImage")]
            node.hang_on.add("children_of")
        root = engine.element_from_handle(tree["window"])

        with pytest.raises(TimeoutError):
            engine.find_elements(root, role="AXImage", timeout=0.3)
        assert engine.find_elements_or_empty(root, role="AXImage", timeout=0.3) == []

    def test_abandoned_load_does_not_block_later_reads(self, engine, root, tree):
        """A worker stuck inside a load holds the node lock; other loads give up after element_read."""
        tree["toolbar"].hang_on.add("children_of")
        with pytest.raises(TimeoutError):
            engine.find_elements(root, role="AXButton", timeout=0.2)
        tree["toolbar"].hang_on.discard("children_of")

        toolbar = root.children[0]
        assert toolbar.role == "AXToolbar"
        with TimeConfig.override(element_read=0.3):
            start = time.monotonic()
            assert toolbar.load_children_if_needed() is False
            elapsed = time.monotonic() - start
        assert elapsed < 2.0
        assert toolbar.children == []
