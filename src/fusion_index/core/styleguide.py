"""Parser for the ``@styleguide { props { ... } }`` documentation block.

The parser walks a prototype body line by line. Each line is cut into
segments at structural braces (braces outside strings and ``${...}``
expressions), so ``a { b = 1 }`` on one line reads the same as the
multi-line form. Segments are then classified as block close, block open
(``key [= value] {``) or leaf (``key = value``).
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field

from fusion_index.core.scanning import line_offsets
from fusion_index.models import PropDefinition, PropSource, StyleguideWarning

_OPEN_RE = re.compile(r"^\s*([^\s={]+)\s*(?:=[^{]*)?\{\s*$")
_LEAF_RE = re.compile(r"^\s*([^\s={]+)\s*=")
_PROPS_RE = re.compile(r"^\s*props\s*\{\s*$")
_DIRECTIVE_RE = re.compile(r"^\s*@")

DUPLICATE_PROP_MESSAGE = 'Duplicate prop "{key}" defined at the same level'


@dataclass
class StyleguideNode:
    """A prop in the styleguide tree. Line and column are 1-based, relative to the parsed body."""

    key: str
    line: int
    column: int
    children: dict[str, StyleguideNode] = field(default_factory=dict)
    # repeated occurrences of an existing key; they never replace the child
    shadowed: list[StyleguideNode] = field(default_factory=list)

    def add(self, node: StyleguideNode) -> bool:
        if node.key in self.children:
            self.shadowed.append(node)
            return False
        self.children[node.key] = node
        return True


@dataclass
class StyleguideTree:
    root: StyleguideNode
    warnings: list[StyleguideWarning] = field(default_factory=list)


@dataclass
class _Segment:
    column: int
    text: str
    # the structural brace that ends the segment, "" for plain text
    brace: str = ""


def _split_segments(line: str, eel_depth: int) -> tuple[list[_Segment], int]:
    """Cut a line at structural braces and return the segments plus the new EEL depth."""
    if eel_depth == 0 and line.lstrip().startswith("#"):
        return [], eel_depth

    segments: list[_Segment] = []
    start = 0
    quote: str | None = None
    i = 0
    length = end = len(line)

    def flush(stop: int, brace: str = "") -> None:
        text = line[start:stop]
        if text.strip():
            segments.append(_Segment(start, text, brace))

    while i < length:
        ch = line[i]
        if quote is not None:
            if ch == "\\":
                i += 2
                continue
            if ch == quote:
                quote = None
        elif ch in ("'", '"'):
            quote = ch
        elif line.startswith("${", i):
            eel_depth += 1
            i += 2
            continue
        elif eel_depth > 0:
            if ch == "{":
                eel_depth += 1
            elif ch == "}":
                eel_depth -= 1
        elif line.startswith("//", i):
            end = i
            break
        elif ch == "{":
            flush(i + 1, "{")
            start = i + 1
        elif ch == "}":
            flush(i)
            segments.append(_Segment(i, "}", "}"))
            start = i + 1
        i += 1

    flush(end)
    return segments, eel_depth


class _TreeBuilder:
    def __init__(self) -> None:
        self.tree = StyleguideTree(root=StyleguideNode(key="props", line=0, column=0))
        self.in_styleguide = False
        self.in_props = False
        self.done = False
        # None marks a block whose contents are not props, such as a directive
        self.stack: list[StyleguideNode | None] = []

    def feed(self, line_number: int, segment: _Segment) -> None:
        text = segment.text

        if not self.in_styleguide:
            if "@styleguide" in text:
                self.in_styleguide = True
            return

        if not self.in_props:
            if segment.brace == "{" and _PROPS_RE.match(text):
                self.in_props = True
                root = self.tree.root
                root.line = line_number
                root.column = segment.column + text.index("props") + 1
                self.stack.append(root)
            return

        if segment.brace == "}":
            self.stack.pop()
            if not self.stack:
                self.done = True
            return

        current = self.stack[-1]
        is_directive = _DIRECTIVE_RE.match(text) is not None

        if segment.brace == "{":
            open_match = _OPEN_RE.match(text)
            if open_match is None or is_directive or current is None:
                self.stack.append(None)
                return
            node = self._node(open_match, line_number, segment)
            self._attach(current, node)
            self.stack.append(node)
            return

        if is_directive or current is None:
            return

        leaf_match = _LEAF_RE.match(text)
        if leaf_match:
            self._attach(current, self._node(leaf_match, line_number, segment))

    def _node(self, match: re.Match[str], line_number: int, segment: _Segment) -> StyleguideNode:
        return StyleguideNode(key=match.group(1), line=line_number, column=segment.column + match.start(1) + 1)

    def _attach(self, parent: StyleguideNode, node: StyleguideNode) -> None:
        if parent.add(node):
            return
        self.tree.warnings.append(
            StyleguideWarning(
                message=DUPLICATE_PROP_MESSAGE.format(key=node.key),
                line=node.line,
                column=node.column,
                key=node.key,
            )
        )


def parse_styleguide_tree(body: str) -> StyleguideTree:
    """Build the props tree of one prototype body.

    Never fails: lines that fit no pattern are skipped. Bodies without a
    ``@styleguide`` block yield an empty root.
    """
    builder = _TreeBuilder()
    eel_depth = 0
    for index, line in enumerate(body.split("\n")):
        segments, next_depth = _split_segments(line, eel_depth)
        for segment in segments:
            builder.feed(index + 1, segment)
            if builder.done:
                return builder.tree
        eel_depth = next_depth
    return builder.tree


def flatten_styleguide_tree(
    tree: StyleguideTree,
    prototype_name: str,
    body: str,
    body_offset: int,
) -> list[PropDefinition]:
    """Turn the tree into path-qualified definitions with document offsets."""
    offsets = line_offsets(body)
    results: list[PropDefinition] = []

    def emit(node: StyleguideNode, path: tuple[str, ...]) -> None:
        start = body_offset + offsets[node.line - 1] + node.column - 1
        results.append(
            PropDefinition(
                prototype_name=prototype_name,
                prop_path=path,
                start=start,
                end=start + len(node.key),
                source=PropSource.STYLEGUIDE,
            )
        )
        walk(node, path)

    def walk(node: StyleguideNode, path: tuple[str, ...]) -> None:
        for key, child in node.children.items():
            emit(child, (*path, key))
        for duplicate in node.shadowed:
            emit(duplicate, (*path, duplicate.key))

    walk(tree.root, ())
    return results
