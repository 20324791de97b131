from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict

import yaml

YAML_SUFFIXES = (".yml", ".yaml")


def read_yaml(path: Path) -> Dict[str, Any]:
    return yaml.safe_load(path.read_text(encoding="utf-8")) or {}


def is_yaml_name(name: str) -> bool:
    return str(name or "").lower().endswith(YAML_SUFFIXES)


def loads_structured(text: str, source_name: str = "") -> Any:
    """Decode JSON or YAML text, chosen by the source name's suffix (JSON by default).

    Raises ValueError (json.JSONDecodeError) or yaml.YAMLError on syntax errors.
    """
    if is_yaml_name(source_name):
        return yaml.safe_load(text)
    return json.loads(text)
