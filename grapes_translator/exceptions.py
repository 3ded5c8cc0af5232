"""Custom exceptions for grapes-translator."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from grapes_translator.models import Artifact
    from grapes_translator.translator import TranslationFailure


class TranslationError(Exception):
    """Base exception for all translation errors."""

    kind = "translation_error"


class MissingVersionError(TranslationError):
    """Raised when neither a version nor a version range is available."""

    kind = "missing_version"

    def __init__(self, group_id: str | None, artifact_id: str | None):
        self.group_id = group_id
        self.artifact_id = artifact_id
        super().__init__(
            f"No version or version range for {group_id or ''}:{artifact_id or ''}"
        )


class UnresolvableRangeError(TranslationError):
    """Raised when a version range cannot be narrowed to one concrete version."""

    kind = "unresolvable_range"

    def __init__(self, version_range: str | None, reason: str):
        self.version_range = version_range
        self.reason = reason
        super().__init__(f"Cannot resolve version range '{version_range}': {reason}")


class InvalidVersionRangeError(UnresolvableRangeError):
    """Raised when a version range is not valid range syntax."""


class UnsupportedScopeError(TranslationError):
    """Raised when a dependency scope is outside the supported set."""

    kind = "unsupported_scope"

    def __init__(self, scope: str | None, artifact: Artifact | None = None):
        self.scope = scope
        self.artifact = artifact
        target = f" for {artifact.gavc}" if artifact is not None else ""
        super().__init__(f"Unsupported scope '{scope}'{target}")


class PomParseError(TranslationError):
    """Raised when a pom.xml cannot be read."""

    kind = "pom_parse_error"


class TranslationFailedError(TranslationError):
    """Raised on request when a batch translation collected failures."""

    kind = "translation_failed"

    def __init__(self, failures: list[TranslationFailure]):
        self.failures = failures
        details = "; ".join(f"{f.coordinates}: {f.message}" for f in failures)
        super().__init__(f"{len(failures)} item(s) failed to translate: {details}")
