"""Test doubles and descriptor builders for grapes_translator.

Usage::

    from grapes_translator.testing import project_descriptor, RecordingResolver

    project = project_descriptor(path="multi-module-project/subModule1")
    resolver = RecordingResolver({"org.acme:lib": ["1.0", "1.5"]})
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping

from grapes_translator.models import ArtifactDescriptor, ProjectDescriptor
from grapes_translator.versioning import RangeResolver

_ARTIFACT_DEFAULTS = {
    "group_id": "org.axway.grapes.test",
    "artifact_id": "simple-project",
    "version": "1.0.0-SNAPSHOT",
    "type": "jar",
}


def artifact_descriptor(**overrides) -> ArtifactDescriptor:
    """An :class:`ArtifactDescriptor` with test defaults, any field overridable."""
    return ArtifactDescriptor(**{**_ARTIFACT_DEFAULTS, **overrides})


def project_descriptor(**overrides) -> ProjectDescriptor:
    """A :class:`ProjectDescriptor` with test defaults, any field overridable.

    Unless ``artifact`` is given, the main artifact mirrors the project
    coordinates.
    """
    fields = {
        "group_id": _ARTIFACT_DEFAULTS["group_id"],
        "artifact_id": _ARTIFACT_DEFAULTS["artifact_id"],
        "version": _ARTIFACT_DEFAULTS["version"],
        "path": "simple-project",
        **overrides,
    }
    if "artifact" not in overrides:
        fields["artifact"] = artifact_descriptor(
            group_id=fields["group_id"],
            artifact_id=fields["artifact_id"],
            version=fields["version"],
            type=fields.get("packaging", "jar"),
        )
    return ProjectDescriptor(**fields)


def multi_module_project() -> ProjectDescriptor:
    """``multi-module-project`` with ``subModule1`` and ``subModule2/subSubModule21``."""
    root = "multi-module-project"
    sub_module1 = project_descriptor(artifact_id="subModule1", path=f"{root}/subModule1")
    sub_sub_module21 = project_descriptor(
        artifact_id="subSubModule21",
        path=f"{root}/subModule2/subSubModule21",
    )
    sub_module2 = project_descriptor(
        artifact_id="subModule2",
        path=f"{root}/subModule2",
        packaging="pom",
        artifact=None,
        modules=(sub_sub_module21,),
    )
    return project_descriptor(
        artifact_id=root,
        path=root,
        packaging="pom",
        artifact=None,
        modules=(sub_module1, sub_module2),
    )


class RecordingResolver(RangeResolver):
    """:class:`RangeResolver` that remembers every range it was asked to resolve."""

    def __init__(self, candidates: Mapping[str, Iterable[str]] | None = None) -> None:
        super().__init__(candidates)
        self._calls: list[tuple[str, str | None, str | None]] = []

    @property
    def calls(self) -> list[tuple[str, str | None, str | None]]:
        """Requests received, useful for assertions in tests."""
        return self._calls

    def resolve(
        self,
        version_range: str,
        group_id: str | None = None,
        artifact_id: str | None = None,
    ) -> str:
        self._calls.append((version_range, group_id, artifact_id))
        return super().resolve(version_range, group_id, artifact_id)
