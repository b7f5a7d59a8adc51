from fusion_index.index.prop_index import PropIndex, is_prefix, is_suffix, paths_equal
from fusion_index.index.prototype_index import PrototypeIndex
from fusion_index.index.workspace import WorkspaceIndex, build_diagnostics, normalize_file_id, read_source

__all__ = [
    "PropIndex",
    "PrototypeIndex",
    "WorkspaceIndex",
    "build_diagnostics",
    "is_prefix",
    "is_suffix",
    "normalize_file_id",
    "paths_equal",
    "read_source",
]
