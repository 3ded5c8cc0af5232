"""Grapes translator: build projects to Grapes modules, artifacts and dependencies.

Single-item builders raise :class:`TranslationError` subclasses.
:func:`translate_project` works on a whole project tree and turns each failing
item into a :class:`TranslationFailure`, so one bad dependency never hides
the rest of the report.
"""

from __future__ import annotations

from dataclasses import dataclass

import structlog

from grapes_translator.exceptions import TranslationError, TranslationFailedError, UnsupportedScopeError
from grapes_translator.models import (
    DEFAULT_SCOPE,
    SUPPORTED_SCOPES,
    Artifact,
    ArtifactDescriptor,
    Dependency,
    Module,
    ProjectDescriptor,
    Scope,
)
from grapes_translator.normalizer import SizeProbe, file_size, normalize_descriptor, pom_artifact
from grapes_translator.versioning import RangeResolver, VersionResolver

log = structlog.get_logger("grapes_translator.translator")


def build_module_key(group_id: str | None, artifact_id: str | None) -> str:
    """``"<group>:<name>"``; missing parts become empty segments.

    The separator is not escaped, so distinct pairs only map to distinct keys
    when neither part contains ``:`` (always true for Maven coordinates).
    """
    return f"{group_id or ''}:{artifact_id or ''}"


def build_module(project: ProjectDescriptor) -> Module:
    return Module(
        name=build_module_key(project.group_id, project.artifact_id),
        version=project.version,
    )


def build_edge(artifact: Artifact, scope: str | None) -> Dependency:
    """Pair *artifact* with *scope*.

    Raises :class:`UnsupportedScopeError` unless *scope* is exactly one of
    :data:`SUPPORTED_SCOPES`.
    """
    if scope not in SUPPORTED_SCOPES:
        raise UnsupportedScopeError(scope, artifact)
    return Dependency(target=artifact, scope=Scope(scope))


def build_dependency(
    descriptor: ArtifactDescriptor,
    *,
    resolver: VersionResolver | None = None,
    size_probe: SizeProbe = file_size,
) -> Dependency:
    """Normalize a dependency descriptor and attach its scope (``compile`` if unset)."""
    target = normalize_descriptor(descriptor, resolver=resolver, size_probe=size_probe)
    scope = descriptor.scope if descriptor.scope is not None else DEFAULT_SCOPE
    return build_edge(target, scope)


@dataclass(frozen=True)
class TranslationFailure:
    """One item that could not be translated."""

    kind: str  # missing_version | unresolvable_range | unsupported_scope
    module: str
    coordinates: str
    message: str
    scope: str | None = None


@dataclass(frozen=True)
class TranslationReport:
    """Translation of one project, with its sub-projects nested in ``submodules``."""

    module: Module
    artifacts: tuple[Artifact, ...] = ()
    dependencies: tuple[Dependency, ...] = ()
    failures: tuple[TranslationFailure, ...] = ()
    submodules: tuple[TranslationReport, ...] = ()

    def iter_reports(self):
        yield self
        for sub in self.submodules:
            yield from sub.iter_reports()

    def all_failures(self) -> list[TranslationFailure]:
        return [f for report in self.iter_reports() for f in report.failures]

    @property
    def ok(self) -> bool:
        return not self.all_failures()

    def summary(self) -> dict[str, int]:
        reports = list(self.iter_reports())
        return {
            "modules": len(reports),
            "artifacts": sum(len(r.artifacts) for r in reports),
            "dependencies": sum(len(r.dependencies) for r in reports),
            "failures": sum(len(r.failures) for r in reports),
        }

    def raise_for_failures(self) -> None:
        failures = self.all_failures()
        if failures:
            raise TranslationFailedError(failures)


def _failure(
    module: Module,
    coordinates: str,
    exc: TranslationError,
    scope: str | None = None,
) -> TranslationFailure:
    failure = TranslationFailure(
        kind=exc.kind,
        module=module.name,
        coordinates=coordinates,
        message=str(exc),
        scope=scope,
    )
    log.warning(
        "translator.item_failed",
        module=module.name,
        coordinates=coordinates,
        kind=exc.kind,
        error=str(exc),
    )
    return failure


def translate_project(
    project: ProjectDescriptor,
    *,
    resolver: VersionResolver | None = None,
    size_probe: SizeProbe = file_size,
) -> TranslationReport:
    """Translate *project* and its sub-projects.

    Artifacts are the main artifact (if any), the attached artifacts and the
    POM, in that order.  Items with the same identity are reported once,
    first occurrence wins.
    """
    resolver = resolver if resolver is not None else RangeResolver()
    module = build_module(project)
    failures: list[TranslationFailure] = []

    artifacts: dict[tuple, Artifact] = {}
    produced = [project.artifact] if project.artifact is not None else []
    produced.extend(project.attached_artifacts)
    for descriptor in produced:
        try:
            artifact = normalize_descriptor(descriptor, resolver=resolver, size_probe=size_probe)
        except TranslationError as exc:
            failures.append(_failure(module, descriptor.coordinates, exc))
            continue
        artifacts.setdefault(artifact.identity, artifact)

    try:
        pom = pom_artifact(project, size_probe=size_probe)
    except TranslationError as exc:
        failures.append(_failure(module, project.coordinates, exc))
    else:
        artifacts.setdefault(pom.identity, pom)

    dependencies: dict[tuple, Dependency] = {}
    for descriptor in project.dependencies:
        try:
            dependency = build_dependency(descriptor, resolver=resolver, size_probe=size_probe)
        except TranslationError as exc:
            failures.append(_failure(module, descriptor.coordinates, exc, descriptor.scope))
            continue
        prev = dependencies.get(dependency.target.identity)
        if prev is not None:
            log.debug(
                "translator.duplicate_dependency",
                module=module.name,
                target=dependency.target.gavc,
                kept_scope=prev.scope.value,
                dropped_scope=dependency.scope.value,
            )
            continue
        dependencies[dependency.target.identity] = dependency

    submodules = tuple(
        translate_project(sub, resolver=resolver, size_probe=size_probe)
        for sub in project.modules
    )

    report = TranslationReport(
        module=module,
        artifacts=tuple(artifacts.values()),
        dependencies=tuple(dependencies.values()),
        failures=tuple(failures),
        submodules=submodules,
    )
    log.info(
        "translator.project_translated",
        module=module.name,
        path=project.path,
        artifacts=len(report.artifacts),
        dependencies=len(report.dependencies),
        failures=len(report.failures),
    )
    return report
