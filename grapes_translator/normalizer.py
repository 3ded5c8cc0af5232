"""Artifact normalizer: build-tool artifact metadata to Grapes artifacts."""

from __future__ import annotations

import os
import stat
from pathlib import Path
from typing import Callable

import structlog

from grapes_translator.exceptions import MissingVersionError
from grapes_translator.models import DEFAULT_TYPE, Artifact, ArtifactDescriptor, ProjectDescriptor
from grapes_translator.versioning import RangeResolver, VersionResolver

log = structlog.get_logger("grapes_translator.normalizer")

SizeProbe = Callable[[Path | str | None], int | None]

POM_TYPE = "pom"
POM_EXTENSION = "xml"


def file_size(path: Path | str | None) -> int | None:
    """Return the byte size of *path*, or ``None`` if it is not a readable file.

    One ``stat`` call; errors are reported as ``None``, never raised.
    """
    if path is None:
        return None
    try:
        st = os.stat(path)
    except OSError as exc:
        log.debug("normalizer.size_unavailable", file=str(path), error=str(exc))
        return None
    if not stat.S_ISREG(st.st_mode) or not os.access(path, os.R_OK):
        log.debug("normalizer.size_unavailable", file=str(path), error="not a readable file")
        return None
    return st.st_size


def resolve_extension(declared_type: str | None, handler_extension: str | None) -> str:
    """The artifact handler's extension wins over the declared packaging type.

    A missing type counts as Maven's default, ``jar``.
    """
    if handler_extension is not None:
        return handler_extension
    return declared_type if declared_type is not None else DEFAULT_TYPE


def _size_as_string(path: Path | str | None, size_probe: SizeProbe) -> str | None:
    size = size_probe(path)
    return str(size) if size is not None else None


def normalize(
    group_id: str | None,
    artifact_id: str | None,
    version: str | None,
    version_range: str | None,
    classifier: str | None,
    declared_type: str | None,
    handler_extension: str | None,
    file: Path | str | None,
    *,
    download_url: str | None = None,
    resolver: VersionResolver | None = None,
    size_probe: SizeProbe = file_size,
) -> Artifact:
    """Build a Grapes :class:`Artifact`.

    The version is taken as given when present; otherwise *version_range* is
    handed to *resolver* (an empty :class:`RangeResolver` by default).  The
    resolver is never consulted for an explicit version.

    Raises :class:`MissingVersionError` when there is neither, and lets
    :class:`UnresolvableRangeError` from the resolver propagate.
    """
    if version is None:
        if version_range is None:
            raise MissingVersionError(group_id, artifact_id)
        resolver = resolver if resolver is not None else RangeResolver()
        version = resolver.resolve(version_range, group_id, artifact_id)
    if declared_type is None:
        declared_type = DEFAULT_TYPE

    return Artifact(
        group_id=group_id,
        artifact_id=artifact_id,
        version=version,
        classifier=classifier,
        type=declared_type,
        extension=resolve_extension(declared_type, handler_extension),
        download_url=download_url,
        size=_size_as_string(file, size_probe),
    )


def normalize_descriptor(
    descriptor: ArtifactDescriptor,
    *,
    resolver: VersionResolver | None = None,
    size_probe: SizeProbe = file_size,
) -> Artifact:
    """:func:`normalize` applied to an :class:`ArtifactDescriptor`."""
    return normalize(
        descriptor.group_id,
        descriptor.artifact_id,
        descriptor.version,
        descriptor.version_range,
        descriptor.classifier,
        descriptor.type,
        descriptor.handler_extension,
        descriptor.file,
        download_url=descriptor.download_url,
        resolver=resolver,
        size_probe=size_probe,
    )


def pom_artifact(project: ProjectDescriptor, *, size_probe: SizeProbe = file_size) -> Artifact:
    """Artifact for the project's own POM file (type ``pom``, extension ``xml``)."""
    if project.version is None:
        raise MissingVersionError(project.group_id, project.artifact_id)
    return Artifact(
        group_id=project.group_id,
        artifact_id=project.artifact_id,
        version=project.version,
        classifier=None,
        type=POM_TYPE,
        extension=POM_EXTENSION,
        size=_size_as_string(project.pom_file, size_probe),
    )
