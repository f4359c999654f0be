"""Guard report fixtures."""

from pathlib import Path

import pytest

ACTIVITY_REPORT = """\
<callbacks>
  <callback declaringClass="com.example.MainActivity" signature="void onClick(android.view.View)">
    <statement line="7" allGuarded="false">
      <uncheckedPermission>android.permission.CAMERA</uncheckedPermission>
    </statement>
    <statement line="5" allGuarded="false">
      <uncheckedPermission>android.permission.CAMERA</uncheckedPermission>
      <uncheckedPermission>android.permission.RECORD_AUDIO</uncheckedPermission>
    </statement>
    <statement line="6" allGuarded="true"/>
  </callback>
  <callback declaringClass="com.example.MainActivity$Missing" signature="void run()">
    <statement line="1" allGuarded="false"/>
  </callback>
</callbacks>
"""


@pytest.fixture
def activity_report(tmp_path: Path) -> Path:
    """Report for MainActivity.onClick with unguarded lines 5 and 7."""
    path = tmp_path / "report.xml"
    path.write_text(ACTIVITY_REPORT)
    return path
