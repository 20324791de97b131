from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional

from ..orchestration.hashing import Sha256ContentHasher
from ..orchestration.runner import DataSeedRunner
from .adapters.registry_table import import_registry
from .adapters.repository_csv import CsvSeedRepository
from .adapters.repository_memory import InMemorySeedRepository
from .adapters.source_fs import FolderDefinitionSource
from .config import RuntimeProfile
from .contracts import ContentHasher, DefinitionSource, SeedRepository, TypeRegistry
from .errors import ValidationError

DEFAULT_STATE_DIR = ".dataseed-state"


@dataclass
class SeedInfraBundle:
    profile: RuntimeProfile
    source: DefinitionSource
    repository: SeedRepository
    registry: TypeRegistry
    hasher: ContentHasher

    def runner(self, echo: Optional[Callable[[str], None]] = print) -> DataSeedRunner:
        return DataSeedRunner(
            source=self.source,
            repository=self.repository,
            registry=self.registry,
            hasher=self.hasher,
            echo=echo,
        )

    def describe(self) -> Dict[str, Any]:
        def _d(x: Any) -> Dict[str, Any]:
            if hasattr(x, "describe") and callable(getattr(x, "describe")):
                return dict(getattr(x, "describe")())
            return {"class": x.__class__.__name__}

        return {
            "profile_name": self.profile.profile_name,
            "adapters": {
                "source": _d(self.source),
                "repository": _d(self.repository),
                "registry": _d(self.registry),
                "hasher": _d(self.hasher),
            },
        }


def build_repository(profile: RuntimeProfile) -> SeedRepository:
    spec = profile.repository
    if spec.kind == "memory":
        return InMemorySeedRepository()
    if spec.kind == "csv":
        state_dir = str(spec.settings.get("state_dir") or DEFAULT_STATE_DIR)
        return CsvSeedRepository(profile.resolve(state_dir))
    raise ValidationError(f"unsupported repository kind: {spec.kind!r}")


def build_seed_infra(
    profile: RuntimeProfile,
    *,
    registry: Optional[TypeRegistry] = None,
    hasher: Optional[ContentHasher] = None,
) -> SeedInfraBundle:
    """Wire the collaborators named by a runtime profile.

    `registry` overrides the profile's registry reference (useful for embedding hosts and tests).
    """
    return SeedInfraBundle(
        profile=profile,
        source=FolderDefinitionSource(profile.resolve(str(profile.definitions_folder)), profile.patterns),
        repository=build_repository(profile),
        registry=registry if registry is not None else import_registry(profile.registry_ref),
        hasher=hasher if hasher is not None else Sha256ContentHasher(),
    )
