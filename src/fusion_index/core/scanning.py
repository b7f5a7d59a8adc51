"""Structural scanning helpers shared by the Fusion parsers.

Everything that counts braces or converts between offsets and line/column
positions lives here, so the parsers only deal with patterns.
"""

from bisect import bisect_right

from fusion_index.models import Position


def find_matching_brace(source: str, open_index: int) -> int:
    """Return the index of the ``}`` matching the ``{`` at ``open_index``, or -1.

    Raw characters are counted: braces inside strings, comments or ``${...}``
    take part in the nesting.
    """
    depth = 0
    for i in range(open_index, len(source)):
        ch = source[i]
        if ch == "{":
            depth += 1
        elif ch == "}":
            depth -= 1
            if depth == 0:
                return i
    return -1


def line_offsets(text: str) -> list[int]:
    offsets = [0]
    index = text.find("\n")
    while index != -1:
        offsets.append(index + 1)
        index = text.find("\n", index + 1)
    return offsets


def offset_to_position(text: str, offset: int, offsets: list[int] | None = None) -> Position:
    if offsets is None:
        offsets = line_offsets(text)
    offset = max(0, min(offset, len(text)))
    line = bisect_right(offsets, offset) - 1
    return Position(line=line, column=offset - offsets[line])


def position_to_offset(text: str, line: int, column: int, offsets: list[int] | None = None) -> int:
    if offsets is None:
        offsets = line_offsets(text)
    line = max(0, min(line, len(offsets) - 1))
    return min(offsets[line] + max(column, 0), len(text))


# ---------------------------------------------------------------------------
# Content neutralization
# ---------------------------------------------------------------------------


def neutralize_content(source: str) -> str:
    """Blank comments, string contents and EEL bodies with spaces.

    Newlines survive, so every offset in the result points at the same
    character position as in ``source``.
    """
    result = neutralize_multiline_comments(source)
    result = neutralize_line_comments(result)
    result = neutralize_strings(result)
    return neutralize_eel(result)


def _blank(ch: str) -> str:
    return "\n" if ch == "\n" else " "


def neutralize_multiline_comments(source: str) -> str:
    out: list[str] = []
    i = 0
    length = len(source)
    while i < length:
        if source.startswith("/*", i):
            out.append("  ")
            i += 2
            while i < length:
                if source.startswith("*/", i):
                    out.append("  ")
                    i += 2
                    break
                out.append(_blank(source[i]))
                i += 1
        else:
            out.append(source[i])
            i += 1
    return "".join(out)


def neutralize_line_comments(source: str) -> str:
    out: list[str] = []
    i = 0
    length = len(source)
    while i < length:
        if source.startswith("//", i):
            out.append("  ")
            i += 2
            while i < length and source[i] != "\n":
                out.append(" ")
                i += 1
        else:
            out.append(source[i])
            i += 1
    return "".join(out)


def neutralize_strings(source: str) -> str:
    """Blank string contents, keeping the quotes. Backslash escapes are honoured."""
    out: list[str] = []
    i = 0
    length = len(source)
    while i < length:
        ch = source[i]
        if ch not in ("'", '"'):
            out.append(ch)
            i += 1
            continue
        out.append(ch)
        i += 1
        while i < length:
            inner = source[i]
            if inner == "\\" and i + 1 < length:
                out.append(" " + _blank(source[i + 1]))
                i += 2
            elif inner == ch:
                out.append(ch)
                i += 1
                break
            else:
                out.append(_blank(inner))
                i += 1
    return "".join(out)


def neutralize_eel(source: str) -> str:
    """Blank ``${...}`` expressions including their delimiters and nested braces."""
    out: list[str] = []
    i = 0
    length = len(source)
    while i < length:
        if not source.startswith("${", i):
            out.append(source[i])
            i += 1
            continue
        out.append("  ")
        i += 2
        depth = 1
        while i < length and depth > 0:
            ch = source[i]
            if ch == "{":
                depth += 1
            elif ch == "}":
                depth -= 1
            out.append(_blank(ch))
            i += 1
    return "".join(out)
