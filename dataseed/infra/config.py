from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

import jsonschema

from ..utils.yamlio import read_yaml
from .errors import NotFoundError, ValidationError

# Repository kinds are intentionally strict. Any unknown kind is rejected.
ALLOWED_REPOSITORY_KINDS: Tuple[str, ...] = ("csv", "memory")

DEFAULT_PROFILE_NAME = "dataseed.yml"
DEFAULT_PATTERNS: Tuple[str, ...] = ("*.json",)


@dataclass(frozen=True)
class RepositorySpec:
    kind: str
    settings: Dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class RuntimeProfile:
    profile_name: str
    definitions_folder: Path
    patterns: Tuple[str, ...]
    repository: RepositorySpec
    registry_ref: str
    # Directory of the profile file; relative paths in settings resolve against it.
    base_dir: Path = Path(".")

    def resolve(self, p: str) -> Path:
        path = Path(str(p)).expanduser()
        if not path.is_absolute():
            path = self.base_dir / path
        return path.resolve()


def resolve_profile_path(cli_path: Optional[str] = None, cwd: Optional[Path] = None) -> Path:
    """Resolve the runtime profile YAML path.

    Precedence:
      1) CLI flag --profile
      2) DATASEED_PROFILE
      3) <cwd>/dataseed.yml
    """
    if cli_path and str(cli_path).strip():
        return Path(str(cli_path).strip()).expanduser().resolve()

    env_path = str(os.environ.get("DATASEED_PROFILE", "") or "").strip()
    if env_path:
        return Path(env_path).expanduser().resolve()

    return ((cwd or Path.cwd()) / DEFAULT_PROFILE_NAME).resolve()


def _profile_schema() -> Dict[str, Any]:
    return {
        "$schema": "https://json-schema.org/draft/2020-12/schema",
        "type": "object",
        "required": ["definitions", "repository", "registry"],
        "properties": {
            "profile_name": {"type": "string", "minLength": 1},
            "description": {"type": "string"},
            "definitions": {
                "type": "object",
                "required": ["folder"],
                "properties": {
                    "folder": {"type": "string", "minLength": 1},
                    "patterns": {"type": "array", "items": {"type": "string", "minLength": 1}, "minItems": 1},
                },
                "additionalProperties": False,
            },
            "repository": {
                "type": "object",
                "required": ["kind"],
                "properties": {
                    "kind": {"type": "string", "enum": list(ALLOWED_REPOSITORY_KINDS)},
                    "settings": {"type": "object"},
                },
                "additionalProperties": False,
            },
            "registry": {"type": "string", "pattern": r"^[A-Za-z_][\w.]*:[A-Za-z_]\w*$"},
        },
        "additionalProperties": False,
    }


def validate_profile_dict(data: Any) -> None:
    try:
        jsonschema.validate(instance=data, schema=_profile_schema())
    except jsonschema.ValidationError as e:
        where = "/".join(str(p) for p in e.absolute_path) or "$"
        raise ValidationError(f"runtime profile schema validation failed at {where}: {e.message}") from e


def parse_profile(data: Dict[str, Any], *, base_dir: Path, default_name: str = "default") -> RuntimeProfile:
    validate_profile_dict(data)

    defs = data["definitions"]
    repo = data["repository"]
    settings = repo.get("settings")
    if settings is None:
        settings = {}

    return RuntimeProfile(
        profile_name=str(data.get("profile_name") or default_name).strip(),
        definitions_folder=Path(str(defs["folder"])),
        patterns=tuple(defs.get("patterns") or DEFAULT_PATTERNS),
        repository=RepositorySpec(kind=str(repo["kind"]).strip(), settings=dict(settings)),
        registry_ref=str(data["registry"]).strip(),
        base_dir=base_dir,
    )


def load_runtime_profile(cli_path: Optional[str] = None, cwd: Optional[Path] = None) -> RuntimeProfile:
    """Load and validate a runtime profile.

    Environment overrides:
      - DATASEED_PROFILE (file path)
      - DATASEED_PROFILE_NAME (overrides the displayed profile name)
    """
    path = resolve_profile_path(cli_path, cwd)
    if not path.exists():
        raise NotFoundError(f"runtime profile not found: {path}")

    data = read_yaml(path)
    profile = parse_profile(data, base_dir=path.parent, default_name=path.stem)

    name_override = str(os.environ.get("DATASEED_PROFILE_NAME", "") or "").strip()
    if name_override:
        profile = RuntimeProfile(
            profile_name=name_override,
            definitions_folder=profile.definitions_folder,
            patterns=profile.patterns,
            repository=profile.repository,
            registry_ref=profile.registry_ref,
            base_dir=profile.base_dir,
        )
    return profile
