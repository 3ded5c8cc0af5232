"""Tests for module/dependency building and project translation."""

from __future__ import annotations

import pytest
from structlog.testing import capture_logs

from grapes_translator.exceptions import TranslationFailedError, UnsupportedScopeError
from grapes_translator.models import SUPPORTED_SCOPES, Dependency, Module, Scope
from grapes_translator.testing import (
    RecordingResolver,
    artifact_descriptor,
    multi_module_project,
    project_descriptor,
)
from grapes_translator.translator import (
    build_dependency,
    build_edge,
    build_module,
    build_module_key,
    translate_project,
)

# ── Module identity ──────────────────────────────────────────────────────


class TestModuleKey:
    def test_format(self):
        assert build_module_key("org.acme", "lib") == "org.acme:lib"

    def test_missing_parts_become_empty(self):
        assert build_module_key(None, "lib") == ":lib"
        assert build_module_key("org.acme", None) == "org.acme:"
        assert build_module_key(None, None) == ":"

    def test_distinct_pairs_do_not_collide(self):
        pairs = [
            ("org.acme", "lib"),
            ("org.acme", "lib2"),
            ("org.acme.lib", "core"),
            ("org", "acme.lib"),
            ("com.acme", "lib"),
        ]
        keys = [build_module_key(g, a) for g, a in pairs]
        assert len(set(keys)) == len(pairs)

    def test_separator_is_not_escaped(self):
        assert build_module_key("a:b", "c") == build_module_key("a", "b:c") == "a:b:c"

    def test_build_module(self):
        module = build_module(project_descriptor(group_id="org.acme", artifact_id="app", version="2.1"))
        assert module == Module(name="org.acme:app", version="2.1")


# ── Dependency edges ─────────────────────────────────────────────────────


class TestBuildEdge:
    def test_supported_scope_set(self):
        assert SUPPORTED_SCOPES == {"compile", "runtime", "test", "provided", "system", "import"}

    @pytest.mark.parametrize("scope", sorted(SUPPORTED_SCOPES))
    def test_supported_scopes(self, acme_artifact, scope):
        edge = build_edge(acme_artifact, scope)
        assert edge == Dependency(target=acme_artifact, scope=Scope(scope))

    def test_compile(self, acme_artifact):
        assert build_edge(acme_artifact, "compile").scope is Scope.COMPILE

    @pytest.mark.parametrize("scope", ["bogus", "COMPILE", "", " compile", None])
    def test_unsupported_scope(self, acme_artifact, scope):
        with pytest.raises(UnsupportedScopeError) as exc_info:
            build_edge(acme_artifact, scope)
        assert exc_info.value.scope == scope
        assert exc_info.value.artifact is acme_artifact

    def test_error_message_has_context(self, acme_artifact):
        with pytest.raises(UnsupportedScopeError, match="'bogus' for org.acme:lib:1.2.3"):
            build_edge(acme_artifact, "bogus")


class TestBuildDependency:
    def test_default_scope_is_compile(self):
        dependency = build_dependency(artifact_descriptor(scope=None))
        assert dependency.scope is Scope.COMPILE

    def test_declared_scope(self):
        dependency = build_dependency(artifact_descriptor(scope="test"))
        assert dependency.scope is Scope.TEST
        assert dependency.target.artifact_id == "simple-project"

    def test_unsupported_scope(self):
        with pytest.raises(UnsupportedScopeError):
            build_dependency(artifact_descriptor(scope="bogus"))


# ── translate_project ────────────────────────────────────────────────────


class TestTranslateProject:
    def test_simple_project(self):
        report = translate_project(project_descriptor())
        assert report.module == Module("org.axway.grapes.test:simple-project", "1.0.0-SNAPSHOT")
        assert [(a.type, a.extension) for a in report.artifacts] == [("jar", "jar"), ("pom", "xml")]
        assert report.dependencies == ()
        assert report.ok

    def test_attached_artifacts(self):
        project = project_descriptor(
            attached_artifacts=(
                artifact_descriptor(classifier="sources"),
                artifact_descriptor(classifier="javadoc"),
            )
        )
        report = translate_project(project)
        assert [a.classifier for a in report.artifacts] == [None, "sources", "javadoc", None]

    def test_duplicate_artifacts_kept_once(self):
        project = project_descriptor(attached_artifacts=(artifact_descriptor(),))
        report = translate_project(project)
        assert len(report.artifacts) == 2

    def test_dependencies(self):
        project = project_descriptor(
            dependencies=(
                artifact_descriptor(group_id="org.acme", artifact_id="lib", version="1.2.3"),
                artifact_descriptor(group_id="junit", artifact_id="junit", version="4.13", scope="test"),
            )
        )
        report = translate_project(project)
        assert [(d.target.gavc, d.scope) for d in report.dependencies] == [
            ("org.acme:lib:1.2.3", Scope.COMPILE),
            ("junit:junit:4.13", Scope.TEST),
        ]

    def test_duplicate_dependency_first_wins(self):
        project = project_descriptor(
            dependencies=(
                artifact_descriptor(artifact_id="lib", scope="compile"),
                artifact_descriptor(artifact_id="lib", scope="test"),
            )
        )
        report = translate_project(project)
        assert len(report.dependencies) == 1
        assert report.dependencies[0].scope is Scope.COMPILE

    def test_failures_do_not_abort_siblings(self):
        project = project_descriptor(
            dependencies=(
                artifact_descriptor(artifact_id="first"),
                artifact_descriptor(artifact_id="bad-scope", scope="bogus"),
                artifact_descriptor(artifact_id="no-version", version=None),
                artifact_descriptor(artifact_id="bad-range", version=None, version_range="[1.0,)"),
                artifact_descriptor(artifact_id="last"),
            )
        )
        report = translate_project(project)

        assert [d.target.artifact_id for d in report.dependencies] == ["first", "last"]
        assert [f.kind for f in report.failures] == [
            "unsupported_scope",
            "missing_version",
            "unresolvable_range",
        ]
        bad_scope = report.failures[0]
        assert bad_scope.scope == "bogus"
        assert bad_scope.module == "org.axway.grapes.test:simple-project"
        assert "bad-scope" in bad_scope.coordinates
        assert not report.ok

    def test_failed_item_is_logged(self):
        project = project_descriptor(dependencies=(artifact_descriptor(scope="bogus"),))
        with capture_logs() as logs:
            translate_project(project)
        failed = [e for e in logs if e["event"] == "translator.item_failed"]
        assert len(failed) == 1
        assert failed[0]["log_level"] == "warning"
        assert failed[0]["kind"] == "unsupported_scope"

    def test_raise_for_failures(self):
        project = project_descriptor(dependencies=(artifact_descriptor(scope="bogus"),))
        report = translate_project(project)
        with pytest.raises(TranslationFailedError) as exc_info:
            report.raise_for_failures()
        assert len(exc_info.value.failures) == 1

    def test_raise_for_failures_noop_when_ok(self):
        translate_project(project_descriptor()).raise_for_failures()

    def test_missing_project_version(self):
        report = translate_project(project_descriptor(version=None, artifact=None))
        assert report.artifacts == ()
        assert [f.kind for f in report.failures] == ["missing_version"]

    def test_range_resolution_uses_resolver(self):
        resolver = RecordingResolver({"org.acme:lib": ["1.0", "1.5", "1.9", "2.0"]})
        project = project_descriptor(
            dependencies=(
                artifact_descriptor(group_id="org.acme", artifact_id="lib", version=None, version_range="[1.0,2.0)"),
                artifact_descriptor(group_id="org.acme", artifact_id="pinned", version="3.0"),
            )
        )
        report = translate_project(project, resolver=resolver)
        assert report.dependencies[0].target.version == "1.9"
        assert resolver.calls == [("[1.0,2.0)", "org.acme", "lib")]

    def test_size_probe_injected(self):
        report = translate_project(project_descriptor(), size_probe=lambda _: 7)
        assert {a.size for a in report.artifacts} == {"7"}


class TestMultiModuleProject:
    def test_submodules(self):
        report = translate_project(multi_module_project())
        assert report.module.name == "org.axway.grapes.test:multi-module-project"
        assert [s.module.name for s in report.submodules] == [
            "org.axway.grapes.test:subModule1",
            "org.axway.grapes.test:subModule2",
        ]
        nested = report.submodules[1].submodules
        assert [s.module.name for s in nested] == ["org.axway.grapes.test:subSubModule21"]

    def test_pom_only_modules_have_pom_artifact(self):
        report = translate_project(multi_module_project())
        assert [a.type for a in report.artifacts] == ["pom"]

    def test_summary(self):
        report = translate_project(multi_module_project())
        assert report.summary() == {
            "modules": 4,
            "artifacts": 6,
            "dependencies": 0,
            "failures": 0,
        }

    def test_failures_collected_across_tree(self):
        project = multi_module_project()
        broken = project.modules[0].with_(dependencies=(artifact_descriptor(scope="bogus"),))
        report = translate_project(project.with_(modules=(broken, project.modules[1])))
        assert not report.ok
        assert report.failures == ()
        assert [f.module for f in report.all_failures()] == ["org.axway.grapes.test:subModule1"]
