"""Report payload schemas: the normalized graph in Grapes JSON field names."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from grapes_translator.models import Artifact, Dependency
from grapes_translator.translator import TranslationReport


class ArtifactPayload(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    group_id: str | None = Field(alias="groupId")
    artifact_id: str | None = Field(alias="artifactId")
    version: str
    classifier: str | None = None
    type: str | None = None
    extension: str | None = None
    download_url: str | None = Field(default=None, alias="downloadUrl")
    size: str | None = None

    @classmethod
    def from_artifact(cls, artifact: Artifact) -> ArtifactPayload:
        return cls(
            group_id=artifact.group_id,
            artifact_id=artifact.artifact_id,
            version=artifact.version,
            classifier=artifact.classifier,
            type=artifact.type,
            extension=artifact.extension,
            download_url=artifact.download_url,
            size=artifact.size,
        )


class DependencyPayload(BaseModel):
    model_config = ConfigDict(frozen=True)

    target: ArtifactPayload
    scope: str

    @classmethod
    def from_dependency(cls, dependency: Dependency) -> DependencyPayload:
        return cls(
            target=ArtifactPayload.from_artifact(dependency.target),
            scope=dependency.scope.value,
        )


class ModulePayload(BaseModel):
    """A module with its artifacts, dependencies and sub-modules."""

    model_config = ConfigDict(frozen=True)

    name: str
    version: str | None
    artifacts: list[ArtifactPayload] = []
    dependencies: list[DependencyPayload] = []
    submodules: list[ModulePayload] = []


def to_payload(report: TranslationReport) -> ModulePayload:
    """Build the payload tree handed to the reporting pipeline.

    Render it with ``model_dump(by_alias=True)`` to get Grapes field names.
    """
    return ModulePayload(
        name=report.module.name,
        version=report.module.version,
        artifacts=[ArtifactPayload.from_artifact(a) for a in report.artifacts],
        dependencies=[DependencyPayload.from_dependency(d) for d in report.dependencies],
        submodules=[to_payload(sub) for sub in report.submodules],
    )
