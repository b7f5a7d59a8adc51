from collections.abc import Sequence

from fusion_index.core.usage import find_enclosing_prototype, parse_prop_usage
from fusion_index.index.workspace import WorkspaceIndex, normalize_file_id
from fusion_index.models import Diagnostic, IndexedPrototype, IndexedProp


def split_path(path: str | Sequence[str] | None) -> tuple[str, ...]:
    """Turn ``"foo.bar"`` (or an already split path) into path segments."""
    if path is None:
        return ()
    if isinstance(path, str):
        return tuple(part for part in path.split(".") if part)
    return tuple(path)


def list_prototypes(workspace: WorkspaceIndex, file_id: str | None = None) -> list[IndexedPrototype]:
    index = workspace.prototype_index
    names = index.get_names_from_file(normalize_file_id(file_id)) if file_id else index.get_all_names()
    entries = (index.get(name) for name in sorted(names))
    return [entry for entry in entries if entry is not None]


def find_prototype(workspace: WorkspaceIndex, name: str) -> IndexedPrototype | None:
    return workspace.prototype_index.get(name)


def props_of(workspace: WorkspaceIndex, prototype_name: str) -> list[IndexedProp]:
    return workspace.prop_index.get_props(prototype_name)


def resolve_prop(workspace: WorkspaceIndex, prototype_name: str, path: str | Sequence[str]) -> IndexedProp | None:
    return workspace.prop_index.resolve(prototype_name, split_path(path))


def prop_children(workspace: WorkspaceIndex, prototype_name: str, path: str | Sequence[str] | None = None) -> list[str]:
    return sorted(workspace.prop_index.get_children(prototype_name, split_path(path)))


def definition_at(workspace: WorkspaceIndex, source: str, offset: int) -> IndexedProp | None:
    """Resolve the ``props.`` usage at ``offset`` within its enclosing prototype."""
    usage = parse_prop_usage(source, offset)
    if usage is None or not usage.target_path:
        return None
    prototype_name = find_enclosing_prototype(source, offset)
    if prototype_name is None:
        return None
    return workspace.prop_index.resolve(prototype_name, usage.target_path)


def completions_at(workspace: WorkspaceIndex, source: str, offset: int) -> list[str]:
    """Prop names that may follow the ``props.`` expression ending at ``offset``."""
    usage = parse_prop_usage(source, offset)
    if usage is None:
        return []
    prototype_name = find_enclosing_prototype(source, offset)
    if prototype_name is None:
        return []
    return sorted(workspace.prop_index.get_children(prototype_name, usage.completion_prefix))


def file_diagnostics(workspace: WorkspaceIndex, file_id: str | None = None) -> dict[str, list[Diagnostic]]:
    if file_id is not None:
        return {normalize_file_id(file_id): workspace.get_diagnostics(file_id)}
    return workspace.all_diagnostics()
