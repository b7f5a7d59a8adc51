"""Tests for the per-prototype prop index."""

from __future__ import annotations

import pytest

from fusion_index.index import PropIndex, is_prefix, is_suffix, paths_equal
from fusion_index.models import PropDefinition, PropSource


def _prop(
    path: tuple[str, ...],
    prototype: str = "X",
    start: int = 0,
    source: PropSource = PropSource.STYLEGUIDE,
) -> PropDefinition:
    return PropDefinition(prototype_name=prototype, prop_path=path, start=start, end=start + 1, source=source)


@pytest.fixture
def index() -> PropIndex:
    idx = PropIndex()
    idx.replace_file(
        "a.fusion",
        [
            _prop(("baz",), start=1),
            _prop(("bar", "baz"), start=2),
            _prop(("image",), start=3),
            _prop(("image", "src"), start=4),
            _prop(("image", "alt"), start=5),
            _prop(("title",), prototype="Y", start=6),
        ],
    )
    return idx


class TestPathHelpers:
    def test_paths_equal(self) -> None:
        assert paths_equal(["a", "b"], ("a", "b"))
        assert not paths_equal(["a"], ["a", "b"])

    @pytest.mark.parametrize(
        ("full", "candidate", "expected"),
        [
            (("a", "b", "c"), ("c",), True),
            (("a", "b", "c"), ("b", "c"), True),
            (("a", "b", "c"), ("a", "b", "c"), True),
            (("a", "b", "c"), ("a",), False),
            (("c",), ("b", "c"), False),
            (("a",), (), True),
        ],
    )
    def test_is_suffix(self, full: tuple[str, ...], candidate: tuple[str, ...], expected: bool) -> None:
        assert is_suffix(full, candidate) is expected

    @pytest.mark.parametrize(
        ("full", "candidate", "expected"),
        [
            (("a", "b", "c"), ("a",), True),
            (("a", "b", "c"), ("a", "b"), True),
            (("a", "b", "c"), ("b",), False),
            (("a",), ("a", "b"), False),
            (("a",), (), True),
        ],
    )
    def test_is_prefix(self, full: tuple[str, ...], candidate: tuple[str, ...], expected: bool) -> None:
        assert is_prefix(full, candidate) is expected


class TestResolve:
    def test_exact_match(self, index: PropIndex) -> None:
        prop = index.resolve("X", ["image", "src"])
        assert prop is not None
        assert prop.prop_path == ("image", "src")

    def test_every_stored_path_resolves_to_itself(self, index: PropIndex) -> None:
        for prop in index.get_props("X"):
            assert index.resolve("X", prop.prop_path) == prop

    def test_longest_suffix_wins(self, index: PropIndex) -> None:
        prop = index.resolve("X", ["foo", "bar", "baz"])
        assert prop is not None
        assert prop.prop_path == ("bar", "baz")

    def test_usage_with_props_prefix(self, index: PropIndex) -> None:
        prop = index.resolve("X", ["props", "foo", "bar", "baz"])
        assert prop is not None
        assert prop.prop_path == ("bar", "baz")

    def test_never_longer_than_usage(self, index: PropIndex) -> None:
        prop = index.resolve("X", ["src"])
        assert prop is None

    def test_shorter_suffix(self, index: PropIndex) -> None:
        prop = index.resolve("X", ["other", "baz"])
        assert prop is not None
        assert prop.prop_path == ("baz",)

    def test_tie_keeps_first_indexed(self) -> None:
        idx = PropIndex()
        idx.replace_file("a.fusion", [_prop(("v",), start=1), _prop(("v",), start=9)])
        prop = idx.resolve("X", ["w", "v"])
        assert prop is not None
        assert prop.start == 1

    def test_no_match(self, index: PropIndex) -> None:
        assert index.resolve("X", ["nothing"]) is None
        assert index.resolve("Unknown", ["baz"]) is None

    def test_scoped_to_prototype(self, index: PropIndex) -> None:
        assert index.resolve("X", ["title"]) is None
        assert index.resolve("Y", ["title"]) is not None


class TestChildren:
    def test_children_of_prefix(self, index: PropIndex) -> None:
        assert index.get_children("X", ["image"]) == {"src", "alt"}

    def test_top_level(self, index: PropIndex) -> None:
        assert index.get_children("X", []) == {"baz", "bar", "image"}

    def test_leaf_has_no_children(self, index: PropIndex) -> None:
        assert index.get_children("X", ["image", "src"]) == set()

    def test_unknown_prototype(self, index: PropIndex) -> None:
        assert index.get_children("Nope", []) == set()


class TestMutation:
    def test_index_prototype_filters_and_appends(self) -> None:
        idx = PropIndex()
        defs = [_prop(("a",)), _prop(("b",), prototype="Other")]
        idx.index_prototype("X", defs, "f.fusion")
        idx.index_prototype("X", defs, "f.fusion")
        assert [p.prop_path for p in idx.get_props("X")] == [("a",), ("a",)]
        assert idx.get_props("Other") == []

    def test_remove_by_uri(self, index: PropIndex) -> None:
        index.index_prototype("X", [_prop(("extra",))], "b.fusion")
        index.remove_by_uri("a.fusion")
        assert [p.prop_path for p in index.get_props("X")] == [("extra",)]
        assert index.get_props("Y") == []
        assert index.get_prototype_names() == ["X"]

    def test_remove_unknown_file_is_noop(self, index: PropIndex) -> None:
        before = index.get_props("X")
        index.remove_by_uri("missing.fusion")
        assert index.get_props("X") == before

    def test_replace_file_drops_previous_entries(self, index: PropIndex) -> None:
        index.replace_file("a.fusion", [_prop(("fresh",))])
        assert [p.prop_path for p in index.get_props("X")] == [("fresh",)]
        assert index.get_props("Y") == []

    def test_replace_file_keeps_other_files(self, index: PropIndex) -> None:
        index.replace_file("b.fusion", [_prop(("other",))])
        index.replace_file("b.fusion", [_prop(("other",))])
        paths = [p.prop_path for p in index.get_props("X")]
        assert paths.count(("other",)) == 1
        assert ("baz",) in paths

    def test_props_from_file(self, index: PropIndex) -> None:
        index.replace_file("b.fusion", [_prop(("other",), prototype="Y")])
        assert [p.prop_path for p in index.get_props_from_file("b.fusion")] == [("other",)]
        assert all(p.file_id == "b.fusion" for p in index.get_props_from_file("b.fusion"))

    def test_clear(self, index: PropIndex) -> None:
        index.clear()
        assert index.get_prototype_names() == []

    def test_returned_lists_are_snapshots(self, index: PropIndex) -> None:
        props = index.get_props("X")
        index.clear()
        assert len(props) == 5
