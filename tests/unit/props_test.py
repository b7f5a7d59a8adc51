"""Tests for merging styleguide and default props into one definition list."""

from __future__ import annotations

from fusion_index.core.props import parse_prop_definitions
from fusion_index.models import PropSource


def _entries(source: str) -> list[tuple[str, str, PropSource]]:
    return [(p.prototype_name, p.dotted_path, p.source) for p in parse_prop_definitions(source).props]


class TestParsePropDefinitions:
    def test_card(self, card_source: str) -> None:
        parsed = parse_prop_definitions(card_source)
        styleguide = [p.dotted_path for p in parsed.props if p.source is PropSource.STYLEGUIDE]
        defaults = [p.dotted_path for p in parsed.props if p.source is PropSource.DEFAULT]
        assert styleguide == ["title", "image", "image.src", "image.alt", "items", "items.0"]
        assert defaults == ["subtitle", "link.href", "renderer"]
        assert parsed.warnings == ()

    def test_styleguide_props_come_first(self, card_source: str) -> None:
        sources = [p.source for p in parse_prop_definitions(card_source).props]
        first_default = sources.index(PropSource.DEFAULT)
        assert all(s is PropSource.DEFAULT for s in sources[first_default:])

    def test_offsets_slice_to_last_segment_or_key(self, card_source: str) -> None:
        for prop in parse_prop_definitions(card_source).props:
            text = card_source[prop.start : prop.end]
            if prop.source is PropSource.STYLEGUIDE:
                assert text == prop.prop_path[-1]
            else:
                assert text == prop.dotted_path

    def test_default_only(self) -> None:
        assert _entries("prototype(X) { foo.bar = null }") == [("X", "foo.bar", PropSource.DEFAULT)]
        assert _entries("prototype(X) {\n  foo.bar = null\n}\n") == [("X", "foo.bar", PropSource.DEFAULT)]

    def test_duplicate_keys_are_all_indexed(self) -> None:
        source = "prototype(Foo:Bar) { @styleguide { props { a { b = 1 } a { b = 2 } } } }"
        parsed = parse_prop_definitions(source)
        assert [p.prop_path for p in parsed.props] == [("a",), ("a", "b"), ("a",), ("a", "b")]
        assert all(p.source is PropSource.STYLEGUIDE for p in parsed.props)
        [warning] = parsed.warnings
        assert warning.message == 'Duplicate prop "a" defined at the same level'
        second_a = source.index("a {", source.index("a {") + 1)
        assert (warning.line, warning.column) == (1, second_a + 1)

    def test_default_suppressed_by_styleguide(self, button_source: str) -> None:
        parsed = parse_prop_definitions(button_source)
        assert [(p.dotted_path, p.source) for p in parsed.props] == [
            ("label", PropSource.STYLEGUIDE),
            ("variant", PropSource.STYLEGUIDE),
            ("label", PropSource.STYLEGUIDE),
        ]

    def test_warning_is_document_relative(self, button_source: str) -> None:
        [warning] = parse_prop_definitions(button_source).warnings
        lines = button_source.split("\n")
        assert lines[warning.line - 1].strip() == "label = 'Again'"
        assert warning.column == lines[warning.line - 1].index("label") + 1

    def test_several_prototypes_in_one_file(self, card_source: str, button_source: str) -> None:
        parsed = parse_prop_definitions(card_source + "\n" + button_source)
        names = {p.prototype_name for p in parsed.props}
        assert names == {"Vendor.Site:Card", "Vendor.Site:Button"}
        assert len(parsed.warnings) == 1

    def test_prototype_without_body_yields_nothing(self) -> None:
        parsed = parse_prop_definitions("root = prototype(Foo)\n")
        assert parsed.props == ()
        assert parsed.warnings == ()

    def test_neutralize_hides_braces_in_strings(self) -> None:
        source = "prototype(X) {\n  label = '{'\n  size = 1\n}\n"
        assert _entries(source) == []
        parsed = parse_prop_definitions(source, neutralize=True)
        assert [p.dotted_path for p in parsed.props] == ["label", "size"]
        assert [source[p.start : p.end] for p in parsed.props] == ["label", "size"]
