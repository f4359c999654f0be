"""Permission definition documents (XML).

Structure:
<permissionDefList>
  <permissionDef className="android.hardware.Camera"
                 target="android.hardware.Camera open(int)"
                 targetKind="Method" permissionRel="AllOf" conditional="true">
    <permission name="android.permission.CAMERA"/>
    <comment>...</comment>
  </permissionDef>
  <parametricSensDef className="android.content.ContentResolver"
                     target="android.database.Cursor query(...)"/>
</permissionDefList>

A null target omits the attribute; a null comment omits the element.
"""

from __future__ import annotations

import os
import tempfile
import xml.etree.ElementTree as ET
from collections.abc import Iterable
from dataclasses import dataclass, field
from pathlib import Path

from permminer.core.errors import DocumentError
from permminer.mining.models import (
    DefinitionSet,
    ParametricSensDef,
    PermissionDefinition,
    PermissionRel,
    TargetKind,
)

ROOT_TAG = "permissionDefList"
DEF_TAG = "permissionDef"
PARAMETRIC_TAG = "parametricSensDef"


@dataclass(frozen=True)
class DefinitionDocument:
    definitions: DefinitionSet = field(default_factory=DefinitionSet)
    parametric: tuple[ParametricSensDef, ...] = ()


def read_document(path: Path) -> DefinitionDocument:
    """Parse a definition document.

    Raises:
        DocumentError: File missing or not a valid definition document.
    """
    if not path.exists():
        raise DocumentError.not_found(str(path))
    try:
        root = ET.parse(path).getroot()
    except ET.ParseError as e:
        raise DocumentError.parse_error(str(path), str(e)) from e
    if root.tag != ROOT_TAG:
        raise DocumentError.parse_error(str(path), f"root element is <{root.tag}>, expected <{ROOT_TAG}>")

    try:
        definitions = DefinitionSet(_parse_definition(e) for e in root.findall(DEF_TAG))
        parametric = tuple(
            ParametricSensDef(class_name=_required(e, "className"), target=e.get("target"))
            for e in root.findall(PARAMETRIC_TAG)
        )
    except ValueError as e:
        raise DocumentError.parse_error(str(path), str(e)) from e
    return DefinitionDocument(definitions=definitions, parametric=parametric)


def load_definitions(path: Path) -> DefinitionSet:
    return read_document(path).definitions


def write_document(
    path: Path,
    definitions: Iterable[PermissionDefinition] = (),
    parametric: Iterable[ParametricSensDef] = (),
) -> None:
    """Serialize and atomically replace ``path``."""
    root = ET.Element(ROOT_TAG)
    for definition in definitions:
        root.append(_definition_element(definition))
    for sens in parametric:
        attrs = {"className": sens.class_name}
        if sens.target is not None:
            attrs["target"] = sens.target
        ET.SubElement(root, PARAMETRIC_TAG, attrs)
    ET.indent(root)

    path.parent.mkdir(parents=True, exist_ok=True)
    with tempfile.NamedTemporaryFile("wb", dir=path.parent, prefix=f".{path.name}.", delete=False) as tmp:
        ET.ElementTree(root).write(tmp, encoding="utf-8", xml_declaration=True)
        tmp_path = Path(tmp.name)
    try:
        os.replace(tmp_path, path)
    except OSError:
        tmp_path.unlink(missing_ok=True)
        raise


def _definition_element(definition: PermissionDefinition) -> ET.Element:
    attrs = {"className": definition.class_name}
    if definition.target is not None:
        attrs["target"] = definition.target
    attrs["targetKind"] = definition.target_kind.value
    attrs["permissionRel"] = definition.relation.value
    attrs["conditional"] = "true" if definition.conditional else "false"

    element = ET.Element(DEF_TAG, attrs)
    for permission in definition.permissions:
        ET.SubElement(element, "permission", {"name": permission})
    if definition.comment is not None:
        ET.SubElement(element, "comment").text = definition.comment
    return element


def _parse_definition(element: ET.Element) -> PermissionDefinition:
    comment_element = element.find("comment")
    comment = None
    if comment_element is not None:
        comment = comment_element.text or ""
    return PermissionDefinition(
        class_name=_required(element, "className"),
        target=element.get("target"),
        target_kind=TargetKind(_required(element, "targetKind")),
        permissions=tuple(sorted(_required(p, "name") for p in element.findall("permission"))),
        comment=comment,
        relation=PermissionRel(element.get("permissionRel", PermissionRel.ALL_OF.value)),
        conditional=element.get("conditional", "false").lower() == "true",
    )


def _required(element: ET.Element, attr: str) -> str:
    value = element.get(attr)
    if value is None:
        raise ValueError(f"<{element.tag}> is missing attribute '{attr}'")
    return value
