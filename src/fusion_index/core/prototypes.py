import re

from fusion_index.core.scanning import find_matching_brace
from fusion_index.models import PrototypeBlock, PrototypeDeclaration

PROTOTYPE_NAME_PATTERN = r"[A-Za-z0-9_.:-]+"

# prototype(Foo:Bar.Baz)
PROTOTYPE_RE = re.compile(rf"prototype\s*\(\s*({PROTOTYPE_NAME_PATTERN})\s*\)")

# prototype(Foo:Bar) {   or   prototype(Foo:Bar) < prototype(Parent) {
_PROTOTYPE_BLOCK_RE = re.compile(rf"prototype\s*\(\s*({PROTOTYPE_NAME_PATTERN})\s*\)(?:\s*<[^{{]*?)?\s*\{{")


def parse_prototypes(source: str) -> list[PrototypeDeclaration]:
    """Return every ``prototype(Name)`` occurrence, declarations and references alike."""
    return [
        PrototypeDeclaration(name=match.group(1), start=match.start(), end=match.end())
        for match in PROTOTYPE_RE.finditer(source)
    ]


def parse_prototype_blocks(source: str) -> list[PrototypeBlock]:
    """Return the prototypes that open a body, with the body's offset range.

    ``body_start`` is the offset right after the opening brace and ``body_end``
    the offset of its matching closing brace. Blocks without a matching brace
    are skipped.
    """
    blocks: list[PrototypeBlock] = []
    for match in _PROTOTYPE_BLOCK_RE.finditer(source):
        body_start = match.end()
        body_end = find_matching_brace(source, body_start - 1)
        if body_end == -1:
            continue
        blocks.append(PrototypeBlock(name=match.group(1), body_start=body_start, body_end=body_end))
    return blocks
