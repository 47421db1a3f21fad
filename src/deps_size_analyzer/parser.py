"""Parse Maven POM documents using lxml."""

from __future__ import annotations

import logging

from lxml import etree

from deps_size_analyzer.exceptions import PomEmptyError, PomParseError
from deps_size_analyzer.models import Dependency, DependencyScope, Project

logger = logging.getLogger(__name__)

_PROJECT = "/*[local-name()='project']"


def _text_first(node: etree._Element, xpath_expr: str) -> str | None:
    """Get text of the first matching element using namespace-agnostic XPath.

    Args:
        node: Root element to query under.
        xpath_expr: XPath expression (should use local-name()).

    Returns:
        Text content if found and non-empty, otherwise None.
    """
    found = node.xpath(xpath_expr)
    if not found:
        return None
    first = found[0]
    if isinstance(first, etree._Element):
        text = (first.text or "").strip()
        return text or None
    if isinstance(first, str):
        text = first.strip()
        return text or None
    return None


def _parse_xml(content: bytes, source: str) -> etree._Element:
    """Parse a POM document and return its root element.

    Raises:
        PomEmptyError: If the document is blank.
        PomParseError: If XML cannot be parsed.
    """
    if not content.strip():
        raise PomEmptyError(f"Downloaded {source} POM is empty")
    try:
        parser = etree.XMLParser(resolve_entities=False, no_network=True, recover=False)
        return etree.fromstring(content, parser=parser)
    except etree.XMLSyntaxError as exc:
        raise PomParseError(f"Can't parse {source} POM: {exc}") from exc


def _parse_properties(root: etree._Element) -> dict[str, str]:
    props: dict[str, str] = {}
    for n in root.xpath(f"{_PROJECT}/*[local-name()='properties']/*"):
        if not isinstance(n, etree._Element):
            continue
        key = etree.QName(n).localname
        val = (n.text or "").strip()
        if key and val:
            props[key] = val
    return props


def _parse_dependency(node: etree._Element, source: str) -> Dependency | None:
    group_id = _text_first(node, "./*[local-name()='groupId']")
    artifact_id = _text_first(node, "./*[local-name()='artifactId']")
    if group_id is None or artifact_id is None:
        logger.debug(f"Skipping a dependency without groupId/artifactId in {source}")
        return None

    raw_scope = _text_first(node, "./*[local-name()='scope']")
    scope = DependencyScope.parse(raw_scope)
    if scope is None:
        if raw_scope is not None:
            logger.debug(f"Unknown scope {raw_scope!r} of {group_id}:{artifact_id} in {source}")
        scope = DependencyScope.COMPILE

    return Dependency(
        group_id=group_id,
        artifact_id=artifact_id,
        version=_text_first(node, "./*[local-name()='version']"),
        scope=scope,
    )


def _parse_dependency_list(root: etree._Element, xpath_expr: str, source: str) -> list[Dependency]:
    """Parse the `<dependency>` children of a `<dependencies>` element.

    A `<dependencies>` element holding bare text instead of `<dependency>`
    elements (seen in some published POMs) yields an empty list.
    """
    deps: list[Dependency] = []
    for node in root.xpath(f"{xpath_expr}/*[local-name()='dependency']"):
        dep = _parse_dependency(node, source)
        if dep is not None:
            deps.append(dep)
    return deps


def _parse_parent(root: etree._Element) -> Dependency | None:
    parent_xpath = f"{_PROJECT}/*[local-name()='parent']"
    group_id = _text_first(root, f"{parent_xpath}/*[local-name()='groupId']")
    artifact_id = _text_first(root, f"{parent_xpath}/*[local-name()='artifactId']")
    if group_id is None or artifact_id is None:
        return None
    return Dependency(
        group_id=group_id,
        artifact_id=artifact_id,
        version=_text_first(root, f"{parent_xpath}/*[local-name()='version']"),
    )


def parse_pom(content: bytes | str, source: str = "<pom>") -> Project:
    """Parse a Maven POM document into a `Project`.

    Notes:
        - Namespace handling: uses `local-name()` XPath so it works with or without XML namespaces.
        - Versions are kept as declared; `${...}` placeholders are resolved later,
          once the parent chain has been flattened.

    Args:
        content: Raw POM document.
        source: Label (usually the coordinate) used in error messages.

    Raises:
        PomEmptyError: If the document is blank.
        PomParseError: If the XML is malformed or required fields are missing.

    Returns:
        The parsed project, parent reference included.
    """
    if isinstance(content, str):
        content = content.encode("utf-8")
    root = _parse_xml(content, source)

    artifact_id = _text_first(root, f"{_PROJECT}/*[local-name()='artifactId']")
    if artifact_id is None:
        raise PomParseError(f"Missing required <artifactId> in {source} POM")

    parent = _parse_parent(root)
    group_id = _text_first(root, f"{_PROJECT}/*[local-name()='groupId']")
    if group_id is None and parent is None:
        raise PomParseError(f"Missing required <groupId> (or parent <groupId>) in {source} POM")

    return Project(
        group_id=group_id,
        artifact_id=artifact_id,
        version=_text_first(root, f"{_PROJECT}/*[local-name()='version']"),
        parent=parent,
        properties=_parse_properties(root),
        dependencies=_parse_dependency_list(
            root, f"{_PROJECT}/*[local-name()='dependencies']", source
        ),
        dependency_management=_parse_dependency_list(
            root,
            f"{_PROJECT}/*[local-name()='dependencyManagement']/*[local-name()='dependencies']",
            source,
        ),
    )

