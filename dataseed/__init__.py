"""Deterministic, idempotent data seed runner.

Step definitions (one JSON/YAML file per step) declare an order, a name, a
logical item type and a list of items. The runner validates them against the
recorded run state and executes only the steps that have not yet completed,
in ascending order, detecting content drift and out-of-order execution.
"""

from __future__ import annotations

from .infra.models import Codes, IgnoreSettings, KeyCode, Response, StepRecord, StepRecordStatus, StepStatus
from .infra.adapters import (
    CsvSeedRepository,
    FolderDefinitionSource,
    InMemoryDefinitionSource,
    InMemorySeedRepository,
    TableTypeRegistry,
)
from .orchestration.runner import DataSeedRunner

__all__ = [
    "__version__",
    "Codes",
    "IgnoreSettings",
    "KeyCode",
    "Response",
    "StepRecord",
    "StepRecordStatus",
    "StepStatus",
    "CsvSeedRepository",
    "FolderDefinitionSource",
    "InMemoryDefinitionSource",
    "InMemorySeedRepository",
    "TableTypeRegistry",
    "DataSeedRunner",
]
__version__ = "0.1.0"
