import re

from fusion_index.models import PropDefinition, PropSource

# foo = null | foo.bar = [] | 0 = 'first'
_ASSIGNMENT_RE = re.compile(r"^[ \t]*([A-Za-z_][A-Za-z0-9_.]*|[0-9]+)\s*=")


def parse_default_props(body: str, prototype_name: str, body_offset: int) -> list[PropDefinition]:
    """Collect top-level ``key = value`` assignments of a prototype body.

    Only assignments at brace depth 0 count; anything inside a nested block
    belongs to that block. Depth is counted on raw characters.
    """
    results: list[PropDefinition] = []
    depth = 0
    line_start = 0

    for line in body.split("\n"):
        match = _ASSIGNMENT_RE.match(line)
        if match and depth == 0:
            key = match.group(1)
            start = body_offset + line_start + match.start(1)
            results.append(
                PropDefinition(
                    prototype_name=prototype_name,
                    prop_path=tuple(key.split(".")),
                    start=start,
                    end=start + len(key),
                    source=PropSource.DEFAULT,
                )
            )

        depth += line.count("{") - line.count("}")
        line_start += len(line) + 1

    return results
