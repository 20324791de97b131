from __future__ import annotations

from .registry_table import TableTypeRegistry, import_registry
from .repository_csv import CsvSeedRepository
from .repository_memory import InMemorySeedRepository
from .source_fs import FolderDefinitionSource, InMemoryDefinitionSource

__all__ = [
    "TableTypeRegistry",
    "import_registry",
    "CsvSeedRepository",
    "InMemorySeedRepository",
    "FolderDefinitionSource",
    "InMemoryDefinitionSource",
]
