"""Locate prop usages such as ``props.foo.bar`` around a cursor offset."""

import re
from dataclasses import dataclass

from fusion_index.core.prototypes import PROTOTYPE_RE

_EXPRESSION_CHAR_RE = re.compile(r"[A-Za-z0-9_.$\[\]]")
_WORD_CHAR_RE = re.compile(r"[A-Za-z0-9_]")
_NON_SEGMENT_CHARS_RE = re.compile(r"[^A-Za-z0-9_]")

_PROPS_PREFIX = "props."


@dataclass(frozen=True)
class PropUsage:
    segments: tuple[str, ...]
    # path up to and including the segment under the cursor
    target_path: tuple[str, ...]
    # path whose children complete the expression being typed
    completion_prefix: tuple[str, ...]


def find_enclosing_prototype(source: str, offset: int) -> str | None:
    """Return the name of the innermost ``prototype(...)`` block containing ``offset``."""
    lines = source[:offset].split("\n")
    depth = 0
    for text in reversed(lines):
        for ch in reversed(text):
            if ch == "}":
                depth += 1
            elif ch == "{":
                depth -= 1
        if depth < 0:
            match = PROTOTYPE_RE.search(text)
            if match:
                return match.group(1)
    return None


def _expand(source: str, offset: int, pattern: re.Pattern[str]) -> tuple[int, int]:
    start = offset
    while start > 0 and pattern.match(source[start - 1]):
        start -= 1
    end = offset
    while end < len(source) and pattern.match(source[end]):
        end += 1
    return start, end


def parse_prop_usage(source: str, offset: int) -> PropUsage | None:
    """Read the ``props.`` expression at ``offset``, or None when there is none."""
    start, end = _expand(source, offset, _EXPRESSION_CHAR_RE)
    if start == end:
        return None
    expression = source[start:end]
    props_index = expression.find(_PROPS_PREFIX)
    if props_index == -1:
        return None

    path_start = start + props_index + len(_PROPS_PREFIX)
    raw_path = source[path_start:end]
    segments = _segments(raw_path)
    completion_prefix = segments if raw_path.endswith(".") else segments[:-1]

    _, word_end = _expand(source, offset, _WORD_CHAR_RE)
    if word_end <= path_start:
        target_path: tuple[str, ...] = ()
    else:
        target_path = _segments(source[path_start:word_end])

    return PropUsage(segments=segments, target_path=target_path, completion_prefix=completion_prefix)


def _segments(raw_path: str) -> tuple[str, ...]:
    cleaned = (_NON_SEGMENT_CHARS_RE.sub("", part) for part in raw_path.split("."))
    return tuple(part for part in cleaned if part)
