"""Read a Maven pom.xml into a :class:`ProjectDescriptor`."""

from __future__ import annotations

import re
import xml.etree.ElementTree as ET
from pathlib import Path

import structlog

from grapes_translator.exceptions import PomParseError
from grapes_translator.models import DEFAULT_TYPE, ArtifactDescriptor, ProjectDescriptor

log = structlog.get_logger("grapes_translator.pom")

_NS = "{http://maven.apache.org/POM/4.0.0}"

_PROP_RE = re.compile(r"\$\{([^}]+)\}")

# File extensions of Maven's stock artifact handlers whose type differs from the extension.
HANDLER_EXTENSIONS = {
    "test-jar": "jar",
    "maven-plugin": "jar",
    "ejb": "jar",
    "ejb-client": "jar",
    "java-source": "jar",
    "javadoc": "jar",
}


def _resolve_props(value: str | None, props: dict[str, str]) -> str | None:
    """Replace ${property} placeholders with values from <properties>."""
    if value is None:
        return None

    def _replace(m: re.Match) -> str:
        return props.get(m.group(1), m.group(0))  # keep original if not found

    return _PROP_RE.sub(_replace, value)


def _text(element: ET.Element | None) -> str | None:
    if element is None:
        return None
    return element.text.strip() if element.text else None


def _is_range(version: str) -> bool:
    return version.startswith(("[", "("))


class _Pom:
    """Namespace-agnostic accessors over a parsed POM root."""

    def __init__(self, root: ET.Element) -> None:
        self.root = root
        self.ns = _NS if root.tag.startswith(_NS) else ""

    def find(self, parent: ET.Element, path: str) -> ET.Element | None:
        return parent.find("/".join(f"{self.ns}{part}" for part in path.split("/")))

    def text(self, parent: ET.Element, path: str) -> str | None:
        return _text(self.find(parent, path))

    def children(self, parent: ET.Element, path: str, tag: str) -> list[ET.Element]:
        container = self.find(parent, path)
        if container is None:
            return []
        return container.findall(f"{self.ns}{tag}")

    def properties(self) -> dict[str, str]:
        props: dict[str, str] = {}
        props_el = self.find(self.root, "properties")
        if props_el is not None:
            for child in props_el:
                # Strip namespace from tag name
                tag = child.tag.split("}")[-1] if "}" in child.tag else child.tag
                if child.text:
                    props[tag] = child.text.strip()
        return props


def _dependency(pom: _Pom, dep_el: ET.Element, props: dict[str, str]) -> ArtifactDescriptor:
    version = _resolve_props(pom.text(dep_el, "version"), props)
    version_range = None
    if version is not None and _is_range(version):
        version, version_range = None, version
    dep_type = _resolve_props(pom.text(dep_el, "type"), props) or DEFAULT_TYPE
    return ArtifactDescriptor(
        group_id=_resolve_props(pom.text(dep_el, "groupId"), props),
        artifact_id=_resolve_props(pom.text(dep_el, "artifactId"), props),
        version=version,
        version_range=version_range,
        classifier=_resolve_props(pom.text(dep_el, "classifier"), props),
        type=dep_type,
        handler_extension=HANDLER_EXTENSIONS.get(dep_type),
        scope=_resolve_props(pom.text(dep_el, "scope"), props),
    )


def read_project(
    pom_path: Path | str,
    path: str | None = None,
    *,
    _visited: frozenset[Path] = frozenset(),
) -> ProjectDescriptor:
    """Parse *pom_path*; ``<modules>`` are read from ``<dir>/pom.xml`` when present.

    Only ``<dependencies>`` directly under ``<project>`` are read;
    ``<dependencyManagement>`` is not.  A module that leads back to a POM
    already being read raises :class:`PomParseError`.
    """
    pom_path = Path(pom_path)
    visited = _visited | {pom_path.resolve()}
    try:
        root = ET.fromstring(pom_path.read_text(encoding="utf-8", errors="replace"))
    except (OSError, ET.ParseError) as exc:
        raise PomParseError(f"Cannot read {pom_path}: {exc}") from exc

    pom = _Pom(root)
    group_id = pom.text(root, "groupId") or pom.text(root, "parent/groupId")
    artifact_id = pom.text(root, "artifactId")
    version = pom.text(root, "version") or pom.text(root, "parent/version")
    packaging = pom.text(root, "packaging") or DEFAULT_TYPE

    props = pom.properties()
    for key, value in (
        ("project.groupId", group_id),
        ("project.artifactId", artifact_id),
        ("project.version", version),
    ):
        if value is not None:
            props.setdefault(key, value)
    version = _resolve_props(version, props)

    dependencies = tuple(
        _dependency(pom, dep_el, props)
        for dep_el in pom.children(root, "dependencies", "dependency")
    )

    modules: list[ProjectDescriptor] = []
    base = path or pom_path.parent.name
    for module_el in pom.children(root, "modules", "module"):
        name = _text(module_el)
        if not name:
            continue
        module_pom = pom_path.parent / name / "pom.xml"
        if not module_pom.is_file():
            log.warning("pom.module_missing", module=name, pom=str(module_pom))
            continue
        if module_pom.resolve() in visited:
            raise PomParseError(f"Module cycle at {module_pom}")
        modules.append(read_project(module_pom, path=f"{base}/{name}", _visited=visited))

    artifact = None
    if packaging != "pom":
        artifact = ArtifactDescriptor(
            group_id=group_id,
            artifact_id=artifact_id,
            version=version,
            type=packaging,
            handler_extension=HANDLER_EXTENSIONS.get(packaging),
        )

    return ProjectDescriptor(
        group_id=group_id,
        artifact_id=artifact_id,
        version=version,
        path=base,
        packaging=packaging,
        pom_file=pom_path,
        artifact=artifact,
        dependencies=dependencies,
        modules=tuple(modules),
    )
