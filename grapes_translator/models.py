"""Value objects for the Grapes data model and the build descriptors it is read from."""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path


class Scope(Enum):
    """Dependency scopes accepted by Grapes."""

    COMPILE = "compile"
    RUNTIME = "runtime"
    TEST = "test"
    PROVIDED = "provided"
    SYSTEM = "system"
    IMPORT = "import"


SUPPORTED_SCOPES: frozenset[str] = frozenset(s.value for s in Scope)

# Maven applies this scope when a dependency declares none.
DEFAULT_SCOPE = Scope.COMPILE.value

# Maven's type for a dependency or artifact that declares none.
DEFAULT_TYPE = "jar"


# ── Grapes records ───────────────────────────────────────────────────────


@dataclass(frozen=True)
class Module:
    """A build project as seen by Grapes. ``name`` is ``group:artifact``."""

    name: str
    version: str | None


@dataclass(frozen=True)
class Artifact:
    """A produced or consumed file.

    Equality and hashing only look at the identity fields; ``download_url``
    and ``size`` are informational.
    """

    group_id: str | None
    artifact_id: str | None
    version: str
    classifier: str | None
    type: str
    extension: str
    download_url: str | None = field(default=None, compare=False)
    size: str | None = field(default=None, compare=False)  # byte count, string-encoded

    @property
    def identity(self) -> tuple[str | None, ...]:
        return (
            self.group_id,
            self.artifact_id,
            self.version,
            self.classifier,
            self.type,
            self.extension,
        )

    @property
    def gavc(self) -> str:
        parts = [self.group_id or "", self.artifact_id or "", self.version]
        if self.classifier:
            parts.append(self.classifier)
        return ":".join(parts)


@dataclass(frozen=True)
class Dependency:
    """Edge from the translated module to ``target`` in a given scope."""

    target: Artifact
    scope: Scope


# ── Build descriptors ────────────────────────────────────────────────────


@dataclass(frozen=True)
class ArtifactDescriptor:
    """Raw artifact or dependency metadata as handed over by the build tool."""

    group_id: str | None
    artifact_id: str | None
    version: str | None = None
    version_range: str | None = None
    classifier: str | None = None
    type: str | None = DEFAULT_TYPE
    handler_extension: str | None = None
    scope: str | None = None
    file: Path | str | None = None
    download_url: str | None = None

    @property
    def coordinates(self) -> str:
        version = self.version or self.version_range or "?"
        return f"{self.group_id or ''}:{self.artifact_id or ''}:{version}"

    def with_(self, **changes) -> ArtifactDescriptor:
        return dataclasses.replace(self, **changes)


@dataclass(frozen=True)
class ProjectDescriptor:
    """A build project: coordinates, produced artifacts, dependencies and sub-projects."""

    group_id: str | None
    artifact_id: str | None
    version: str | None
    path: str | None = None  # e.g. "multi-module-project/subModule1"
    packaging: str = "jar"
    pom_file: Path | str | None = None
    artifact: ArtifactDescriptor | None = None
    attached_artifacts: tuple[ArtifactDescriptor, ...] = ()
    dependencies: tuple[ArtifactDescriptor, ...] = ()
    modules: tuple[ProjectDescriptor, ...] = ()

    @property
    def coordinates(self) -> str:
        return f"{self.group_id or ''}:{self.artifact_id or ''}:{self.version or '?'}"

    def with_(self, **changes) -> ProjectDescriptor:
        return dataclasses.replace(self, **changes)
