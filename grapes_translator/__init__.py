"""Grapes translator: normalize build project metadata into the Grapes data model."""

from grapes_translator.exceptions import (
    InvalidVersionRangeError,
    MissingVersionError,
    TranslationError,
    TranslationFailedError,
    UnresolvableRangeError,
    UnsupportedScopeError,
)
from grapes_translator.models import (
    SUPPORTED_SCOPES,
    Artifact,
    ArtifactDescriptor,
    Dependency,
    Module,
    ProjectDescriptor,
    Scope,
)
from grapes_translator.normalizer import file_size, normalize, normalize_descriptor, pom_artifact
from grapes_translator.translator import (
    TranslationFailure,
    TranslationReport,
    build_dependency,
    build_edge,
    build_module,
    build_module_key,
    translate_project,
)
from grapes_translator.versioning import RangeResolver, VersionRange, resolve_version

__all__ = [
    "Artifact",
    "ArtifactDescriptor",
    "Dependency",
    "InvalidVersionRangeError",
    "MissingVersionError",
    "Module",
    "ProjectDescriptor",
    "RangeResolver",
    "SUPPORTED_SCOPES",
    "Scope",
    "TranslationError",
    "TranslationFailedError",
    "TranslationFailure",
    "TranslationReport",
    "UnresolvableRangeError",
    "UnsupportedScopeError",
    "VersionRange",
    "build_dependency",
    "build_edge",
    "build_module",
    "build_module_key",
    "file_size",
    "normalize",
    "normalize_descriptor",
    "pom_artifact",
    "resolve_version",
    "translate_project",
]
