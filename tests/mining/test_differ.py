"""Tests for the publishable delta."""

from permminer.mining.differ import diff_definitions, drop_covered_classes
from permminer.mining.models import DefinitionSet, PermissionDefinition, TargetKind

CAMERA = "android.permission.CAMERA"

CLASS_DEF = PermissionDefinition("android.hardware.Camera", None, TargetKind.CLASS, (CAMERA,))
OPEN_DEF = PermissionDefinition(
    "android.hardware.Camera", "android.hardware.Camera open(int)", TargetKind.METHOD, (CAMERA,)
)
URI_DEF = PermissionDefinition(
    "android.provider.ContactsContract", "CONTENT_URI", TargetKind.FIELD, ("android.permission.READ_CONTACTS",)
)
SIP_DEF = PermissionDefinition(
    "android.net.sip.SipManager", "void open()", TargetKind.METHOD, ("android.permission.USE_SIP",)
)


class TestDropCoveredClasses:
    """Class-level definitions announced by overrides."""

    def test_only_class_kind_dropped(self) -> None:
        mined = DefinitionSet([CLASS_DEF, OPEN_DEF])
        assert list(drop_covered_classes(mined, ["android.hardware.Camera"])) == [OPEN_DEF]


class TestDiffDefinitions:
    """delta and final sets."""

    def test_baseline_and_excluded_removed(self) -> None:
        mined = DefinitionSet([CLASS_DEF, OPEN_DEF, URI_DEF])
        result = diff_definitions(mined, baseline=[OPEN_DEF], excluded=[URI_DEF])
        assert list(result.delta) == [CLASS_DEF]
        assert result.final == result.delta

    def test_overrides_re_added_even_when_in_baseline(self) -> None:
        mined = DefinitionSet([OPEN_DEF, URI_DEF])
        result = diff_definitions(mined, baseline=[OPEN_DEF, SIP_DEF], excluded=[], overrides=[SIP_DEF, URI_DEF])
        assert list(result.delta) == [URI_DEF]
        assert list(result.final) == [URI_DEF, SIP_DEF]

    def test_covered_classes(self) -> None:
        mined = DefinitionSet([CLASS_DEF, OPEN_DEF])
        result = diff_definitions(mined, [], [], overrides=[OPEN_DEF], covered_classes=["android.hardware.Camera"])
        assert list(result.final) == [OPEN_DEF]

    def test_idempotent(self) -> None:
        mined = DefinitionSet([CLASS_DEF, OPEN_DEF, URI_DEF])
        first = diff_definitions(mined, [URI_DEF], [], overrides=[SIP_DEF])
        second = diff_definitions(mined, [URI_DEF], [], overrides=[SIP_DEF])
        assert first == second

    def test_publishing_final_as_baseline_leaves_only_overrides(self) -> None:
        mined = DefinitionSet([CLASS_DEF, OPEN_DEF])
        first = diff_definitions(mined, [], [], overrides=[SIP_DEF])
        second = diff_definitions(mined, first.final, [], overrides=[SIP_DEF])
        assert list(second.delta) == []
        assert list(second.final) == [SIP_DEF]

    def test_inputs_untouched(self) -> None:
        mined = DefinitionSet([CLASS_DEF, OPEN_DEF])
        diff_definitions(mined, [OPEN_DEF], [], covered_classes=["android.hardware.Camera"])
        assert list(mined) == [CLASS_DEF, OPEN_DEF]
