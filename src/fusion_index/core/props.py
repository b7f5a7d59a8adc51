from fusion_index.core.defaults import parse_default_props
from fusion_index.core.prototypes import parse_prototype_blocks
from fusion_index.core.scanning import line_offsets, neutralize_content, offset_to_position
from fusion_index.core.styleguide import flatten_styleguide_tree, parse_styleguide_tree
from fusion_index.models import ParsedProps, PropDefinition, StyleguideWarning


def parse_prop_definitions(source: str, neutralize: bool = False) -> ParsedProps:
    """Parse the prop definitions of every prototype block in ``source``.

    Styleguide props come first for each prototype. A default assignment is
    kept only when no styleguide prop has the same dotted path.
    """
    text = neutralize_content(source) if neutralize else source
    offsets = line_offsets(text)
    props: list[PropDefinition] = []
    warnings: list[StyleguideWarning] = []

    for block in parse_prototype_blocks(text):
        body = text[block.body_start : block.body_end]

        tree = parse_styleguide_tree(body)
        styleguide_props = flatten_styleguide_tree(tree, block.name, body, block.body_start)
        warnings.extend(_to_document_warning(w, text, offsets, block.body_start) for w in tree.warnings)

        seen = {p.dotted_path for p in styleguide_props}
        props.extend(styleguide_props)
        props.extend(
            p for p in parse_default_props(body, block.name, block.body_start) if p.dotted_path not in seen
        )

    return ParsedProps(props=tuple(props), warnings=tuple(warnings))


def _to_document_warning(
    warning: StyleguideWarning, text: str, offsets: list[int], body_offset: int
) -> StyleguideWarning:
    """Re-anchor a body-relative warning onto the whole document."""
    base = offset_to_position(text, body_offset, offsets)
    line = base.line + warning.line
    column = warning.column + (base.column if warning.line == 1 else 0)
    return warning.model_copy(update={"line": line, "column": column})
