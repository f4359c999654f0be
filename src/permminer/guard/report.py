"""Guard report (XML) loader.

Structure:
<callbacks>
  <callback declaringClass="com.example.MainActivity"
            signature="void onClick(android.view.View)">
    <statement line="42" allGuarded="false">
      <uncheckedPermission>android.permission.CAMERA</uncheckedPermission>
    </statement>
  </callback>
</callbacks>
"""

from __future__ import annotations

import xml.etree.ElementTree as ET
from pathlib import Path

from permminer.core.errors import DocumentError
from permminer.guard.models import GuardReportEntry, GuardStatement


def load_report(path: Path) -> list[GuardReportEntry]:
    """Parse a guard report into callback entries.

    Raises:
        DocumentError: File missing or not a valid report.
    """
    if not path.exists():
        raise DocumentError.not_found(str(path))
    try:
        root = ET.parse(path).getroot()
    except ET.ParseError as e:
        raise DocumentError.parse_error(str(path), str(e)) from e
    if root.tag != "callbacks":
        raise DocumentError.parse_error(str(path), f"root element is <{root.tag}>, expected <callbacks>")

    entries: list[GuardReportEntry] = []
    try:
        for callback in root.findall("callback"):
            statements = tuple(
                sorted((_parse_statement(s) for s in callback.findall("statement")), key=lambda s: s.line)
            )
            entries.append(
                GuardReportEntry(
                    declaring_class=callback.get("declaringClass", ""),
                    signature=callback.get("signature", ""),
                    statements=statements,
                )
            )
    except ValueError as e:
        raise DocumentError.parse_error(str(path), str(e)) from e
    return entries


def _parse_statement(element: ET.Element) -> GuardStatement:
    line = element.get("line")
    if line is None:
        raise ValueError("<statement> is missing attribute 'line'")
    permissions = sorted({(p.text or "").strip() for p in element.findall("uncheckedPermission")} - {""})
    return GuardStatement(
        line=int(line),
        all_guarded=element.get("allGuarded", "false").lower() == "true",
        unchecked_permissions=tuple(permissions),
    )
