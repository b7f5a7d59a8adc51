"""Index Fusion prototypes and their props for editor tooling."""

__version__ = "0.1.0"
