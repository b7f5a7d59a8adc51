import threading

from fusion_index.core.prototypes import parse_prototypes
from fusion_index.core.scanning import line_offsets, neutralize_content, offset_to_position
from fusion_index.models import IndexedPrototype


class PrototypeIndex:
    """Global map of prototype names to the place they were last seen.

    Names are a single namespace: when two files mention the same name, the
    file indexed last wins. Every mutation publishes fresh dictionaries, so a
    reader holding the index never sees a half-applied file update.
    """

    def __init__(self) -> None:
        self._prototypes: dict[str, IndexedPrototype] = {}
        self._file_prototypes: dict[str, tuple[str, ...]] = {}
        self._lock = threading.Lock()

    def clear(self) -> None:
        with self._lock:
            self._prototypes = {}
            self._file_prototypes = {}

    def index(self, file_id: str, source: str, neutralize: bool = False) -> list[str]:
        """Replace everything ``file_id`` contributed with the declarations in ``source``."""
        text = neutralize_content(source) if neutralize else source
        offsets = line_offsets(text)
        entries: dict[str, IndexedPrototype] = {}
        for decl in parse_prototypes(text):
            entries[decl.name] = IndexedPrototype(
                name=decl.name,
                start=decl.start,
                end=decl.end,
                file_id=file_id,
                start_position=offset_to_position(text, decl.start, offsets),
                end_position=offset_to_position(text, decl.end, offsets),
            )

        with self._lock:
            prototypes = self._without_file(file_id)
            prototypes.update(entries)
            file_prototypes = dict(self._file_prototypes)
            file_prototypes[file_id] = tuple(entries)
            self._prototypes = prototypes
            self._file_prototypes = file_prototypes
        return list(entries)

    def remove_by_uri(self, file_id: str) -> None:
        with self._lock:
            if file_id not in self._file_prototypes:
                return
            prototypes = self._without_file(file_id)
            file_prototypes = dict(self._file_prototypes)
            del file_prototypes[file_id]
            self._prototypes = prototypes
            self._file_prototypes = file_prototypes

    def _without_file(self, file_id: str) -> dict[str, IndexedPrototype]:
        prototypes = dict(self._prototypes)
        for name in self._file_prototypes.get(file_id, ()):
            entry = prototypes.get(name)
            # the name may have been taken over by a file indexed later
            if entry is not None and entry.file_id == file_id:
                del prototypes[name]
        return prototypes

    def get(self, name: str) -> IndexedPrototype | None:
        return self._prototypes.get(name)

    def get_all_names(self) -> list[str]:
        return list(self._prototypes)

    def get_names_from_file(self, file_id: str) -> list[str]:
        return list(self._file_prototypes.get(file_id, ()))

    def __len__(self) -> int:
        return len(self._prototypes)
