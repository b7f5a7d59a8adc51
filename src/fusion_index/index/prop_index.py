import threading
from collections.abc import Iterable, Sequence

from fusion_index.models import IndexedProp, PropDefinition


def _to_indexed(definition: PropDefinition, file_id: str) -> IndexedProp:
    return IndexedProp(**definition.model_dump(), file_id=file_id)


def paths_equal(a: Sequence[str], b: Sequence[str]) -> bool:
    return tuple(a) == tuple(b)


def is_suffix(full: Sequence[str], candidate: Sequence[str]) -> bool:
    """True when ``candidate`` equals the trailing segments of ``full``."""
    if len(candidate) > len(full):
        return False
    return all(full[-i] == candidate[-i] for i in range(1, len(candidate) + 1))


def is_prefix(full: Sequence[str], candidate: Sequence[str]) -> bool:
    """True when ``candidate`` equals the leading segments of ``full``."""
    if len(candidate) > len(full):
        return False
    return all(full[i] == candidate[i] for i in range(len(candidate)))


class PropIndex:
    """Prop definitions grouped by prototype name.

    Lookups are scoped to one prototype. ``resolve`` prefers an exact path
    and otherwise falls back to the longest stored path that is a suffix of
    the usage, e.g. usage ``['foo', 'bar', 'baz']`` matches ``['baz']``,
    ``['bar', 'baz']`` or ``['foo', 'bar', 'baz']``.
    """

    def __init__(self) -> None:
        self._by_prototype: dict[str, tuple[IndexedProp, ...]] = {}
        self._lock = threading.Lock()

    def clear(self) -> None:
        with self._lock:
            self._by_prototype = {}

    def index_prototype(self, prototype_name: str, definitions: Iterable[PropDefinition], file_id: str) -> None:
        """Append the definitions belonging to ``prototype_name``.

        Existing entries are kept, including ones from the same file. Call
        ``remove_by_uri`` first to replace a file's entries, or use
        ``replace_file``.
        """
        new_props = tuple(_to_indexed(d, file_id) for d in definitions if d.prototype_name == prototype_name)
        with self._lock:
            by_prototype = dict(self._by_prototype)
            by_prototype[prototype_name] = by_prototype.get(prototype_name, ()) + new_props
            self._by_prototype = by_prototype

    def remove_by_uri(self, file_id: str) -> None:
        with self._lock:
            self._by_prototype = self._without_file(file_id)

    def replace_file(self, file_id: str, definitions: Iterable[PropDefinition]) -> None:
        """Drop every entry of ``file_id`` and insert ``definitions`` in one step."""
        grouped: dict[str, list[IndexedProp]] = {}
        for definition in definitions:
            grouped.setdefault(definition.prototype_name, []).append(_to_indexed(definition, file_id))

        with self._lock:
            by_prototype = self._without_file(file_id)
            for name, props in grouped.items():
                by_prototype[name] = by_prototype.get(name, ()) + tuple(props)
            self._by_prototype = by_prototype

    def _without_file(self, file_id: str) -> dict[str, tuple[IndexedProp, ...]]:
        by_prototype: dict[str, tuple[IndexedProp, ...]] = {}
        for name, props in self._by_prototype.items():
            kept = tuple(p for p in props if p.file_id != file_id)
            if kept:
                by_prototype[name] = kept
        return by_prototype

    def resolve(self, prototype_name: str, usage_path: Sequence[str]) -> IndexedProp | None:
        """Find the definition a usage path refers to.

        An exact match wins. Otherwise the longest definition whose path is a
        suffix of ``usage_path``; on equal length the first one indexed.
        """
        props = self._by_prototype.get(prototype_name, ())

        for prop in props:
            if paths_equal(usage_path, prop.prop_path):
                return prop

        best: IndexedProp | None = None
        for prop in props:
            if is_suffix(usage_path, prop.prop_path) and (best is None or len(prop.prop_path) > len(best.prop_path)):
                best = prop
        return best

    def get_children(self, prototype_name: str, usage_path: Sequence[str]) -> set[str]:
        """Return the segments that directly follow ``usage_path`` in any stored path."""
        depth = len(usage_path)
        return {
            prop.prop_path[depth]
            for prop in self._by_prototype.get(prototype_name, ())
            if len(prop.prop_path) > depth and is_prefix(prop.prop_path, usage_path)
        }

    def get_props(self, prototype_name: str) -> list[IndexedProp]:
        return list(self._by_prototype.get(prototype_name, ()))

    def get_props_from_file(self, file_id: str) -> list[IndexedProp]:
        return [p for props in self._by_prototype.values() for p in props if p.file_id == file_id]

    def get_prototype_names(self) -> list[str]:
        return list(self._by_prototype)
