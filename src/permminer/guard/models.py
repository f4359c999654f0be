"""Guard report records and the diagnostics derived from them."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Literal

from permminer.codemodel.ranges import TextRange

ALERT_MESSAGE = "Permission guard required for: "


@dataclass(frozen=True, slots=True)
class GuardStatement:
    """One reported statement of a callback. ``line`` is 1-based."""

    line: int
    all_guarded: bool
    unchecked_permissions: tuple[str, ...] = ()


@dataclass(frozen=True)
class GuardReportEntry:
    """A callback method and its statements, in ascending line order."""

    declaring_class: str
    signature: str
    statements: tuple[GuardStatement, ...] = ()

    @property
    def owner_class_name(self) -> str:
        """Declaring class with inner classes dot-joined."""
        return self.declaring_class.replace("$", ".")

    @property
    def sub_signature(self) -> str:
        """Signature without its return type: ``name(T1,T2)``."""
        _, _, rest = self.signature.partition(" ")
        return "".join((rest or self.signature).split())

    def __str__(self) -> str:
        return f"{self.declaring_class}: {self.signature}"


@dataclass(frozen=True)
class GuardDiagnostic:
    """An unguarded statement that needs a permission check."""

    path: Path
    line: int  # 1-based
    text_range: TextRange
    permissions: tuple[str, ...]
    callback: str
    severity: Literal["warning", "error"] = "warning"

    @property
    def message(self) -> str:
        return ALERT_MESSAGE + "[" + ", ".join(self.permissions) + "]"

    @property
    def quick_fix_title(self) -> str:
        return f"Insert guards for {self.permissions[0]}" if self.permissions else "Insert guards"

    def to_dict(self) -> dict[str, Any]:
        return {
            "path": str(self.path),
            "line": self.line,
            "start": self.text_range.start,
            "end": self.text_range.end,
            "severity": self.severity,
            "message": self.message,
            "permissions": list(self.permissions),
            "quick_fix": self.quick_fix_title,
            "callback": self.callback,
        }
