from __future__ import annotations

import logging
import os
import threading
from pathlib import Path

from fusion_index.config import DEFAULT_PATTERN
from fusion_index.core.props import parse_prop_definitions
from fusion_index.core.scanning import line_offsets, offset_to_position, position_to_offset
from fusion_index.index.prop_index import PropIndex
from fusion_index.index.prototype_index import PrototypeIndex
from fusion_index.models import Diagnostic, ParsedProps, PropDefinition, StyleguideWarning

logger = logging.getLogger(__name__)


def normalize_file_id(path: str | Path) -> str:
    """Return the string form used to compare file identities."""
    return Path(os.path.normpath(path)).as_posix()


def read_source(file_id: str) -> str:
    """Read a file as UTF-8 text with its line endings untouched."""
    return Path(file_id).read_bytes().decode("utf-8", errors="replace")


class WorkspaceIndex:
    """Owns the prototype and prop indexes of one workspace and keeps them per-file current.

    ``index_file`` is a transaction per file: prototypes are always replaced,
    props and diagnostics are replaced unless a live edit produced no props
    at all, in which case the last good state stays in place.
    """

    def __init__(
        self,
        root: str | Path | None = None,
        pattern: str = DEFAULT_PATTERN,
        *,
        neutralize: bool = False,
        prototype_index: PrototypeIndex | None = None,
        prop_index: PropIndex | None = None,
    ) -> None:
        self.root = Path(normalize_file_id(root)) if root is not None else None
        self.pattern = pattern
        self.neutralize = neutralize
        self._prototype_index = prototype_index if prototype_index is not None else PrototypeIndex()
        self._prop_index = prop_index if prop_index is not None else PropIndex()
        self._files: dict[str, None] = {}
        self._diagnostics: dict[str, tuple[Diagnostic, ...]] = {}
        self._lock = threading.RLock()

    @property
    def prototype_index(self) -> PrototypeIndex:
        return self._prototype_index

    @property
    def prop_index(self) -> PropIndex:
        return self._prop_index

    @property
    def files(self) -> list[str]:
        return list(self._files)

    def discover_files(self) -> list[str]:
        if self.root is None:
            raise ValueError("Workspace root is not configured.")
        if not self.root.is_dir():
            raise ValueError(f"Workspace root is not a directory: {self.root}")
        return sorted(normalize_file_id(p) for p in self.root.glob(self.pattern) if p.is_file())

    def initialize(self) -> int:
        """Rebuild both indexes from the files under ``root``. Returns the number of files indexed."""
        with self._lock:
            self.clear()
            discovered = self.discover_files()
            logger.info("Discovered %d Fusion file(s) under %s", len(discovered), self.root)
            indexed = sum(1 for file_id in discovered if self.index_file(file_id))
            logger.info("Indexed %d of %d file(s)", indexed, len(discovered))
            return indexed

    def index_file(self, file_id: str | Path, source: str | None = None, live_edit: bool = False) -> bool:
        """(Re)index one file. Returns False when the prop index was left untouched."""
        key = normalize_file_id(file_id)
        if source is None:
            try:
                source = read_source(key)
            except OSError as exc:
                logger.warning("Failed to read %s: %s", key, exc)
                return False

        with self._lock:
            self._files[key] = None
            self._prototype_index.index(key, source, neutralize=self.neutralize)

            parsed = parse_prop_definitions(source, neutralize=self.neutralize)
            if live_edit and not parsed.props:
                logger.debug("Live edit of %s produced no props; keeping previous state", key)
                return False

            self._prop_index.replace_file(key, parsed.props)
            diagnostics = dict(self._diagnostics)
            diagnostics[key] = build_diagnostics(source, parsed)
            self._diagnostics = diagnostics

        logger.debug("Indexed %s: %d prop(s), %d warning(s)", key, len(parsed.props), len(parsed.warnings))
        return True

    def apply_changes(self, paths: set[Path]) -> dict[str, bool]:
        """Re-index changed files and drop deleted ones, as reported by a file watcher."""
        results: dict[str, bool] = {}
        for path in sorted(paths):
            key = normalize_file_id(path)
            if path.exists():
                results[key] = self.index_file(key)
            else:
                self.remove_file(key)
                results[key] = True
        return results

    def remove_file(self, file_id: str | Path) -> None:
        key = normalize_file_id(file_id)
        with self._lock:
            self._files.pop(key, None)
            self._prototype_index.remove_by_uri(key)
            self._prop_index.remove_by_uri(key)
            diagnostics = dict(self._diagnostics)
            diagnostics.pop(key, None)
            self._diagnostics = diagnostics

    def clear(self) -> None:
        with self._lock:
            self._files = {}
            self._prototype_index.clear()
            self._prop_index.clear()
            self._diagnostics = {}

    def get_diagnostics(self, file_id: str | Path) -> list[Diagnostic]:
        return list(self._diagnostics.get(normalize_file_id(file_id), ()))

    def all_diagnostics(self) -> dict[str, list[Diagnostic]]:
        return {key: list(diags) for key, diags in self._diagnostics.items() if diags}


def build_diagnostics(source: str, parsed: ParsedProps) -> tuple[Diagnostic, ...]:
    """Map styleguide warnings onto ranges of the document."""
    offsets = line_offsets(source)
    diagnostics: list[Diagnostic] = []
    for warning in parsed.warnings:
        offset = position_to_offset(source, warning.line - 1, warning.column - 1, offsets)
        target = _warning_target(warning, offset, parsed.props)
        if target is not None:
            start, end = target.start, target.end
        else:
            start, end = offset, min(offset + 1, len(source))
        diagnostics.append(
            Diagnostic(
                message=warning.message,
                start_offset=start,
                end_offset=end,
                start=offset_to_position(source, start, offsets),
                end=offset_to_position(source, end, offsets),
            )
        )
    return tuple(diagnostics)


def _warning_target(warning: StyleguideWarning, offset: int, props: tuple[PropDefinition, ...]) -> PropDefinition | None:
    candidates = [p for p in props if p.prop_path[-1] == warning.key]
    for prop in candidates:
        if prop.start == offset:
            return prop
    return max(candidates, key=lambda p: p.start, default=None)
