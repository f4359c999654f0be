"""Tests for definition synthesis."""

from pathlib import Path

import pytest

from permminer.codemodel import ClassElement, CodeModel
from permminer.mining.builder import (
    DefinitionBuilder,
    cleanup_signature,
    process_inner_classes,
)
from permminer.mining.models import ParametricSensDef, PermissionRel, TargetKind
from tests.conftest import build_model

CAMERA = "android.permission.CAMERA"


def _camera(model: CodeModel) -> ClassElement:
    cls = model.find_class("android.hardware.Camera")
    assert cls is not None
    return cls


class TestSignatures:
    """Name and signature helpers."""

    def test_process_inner_classes(self) -> None:
        assert process_inner_classes("android.provider.ContactsContract$Contacts") == (
            "android.provider.ContactsContract.Contacts"
        )

    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            ("java.util.List<java.util.List<T>> f(int , long)", "java.util.List f(int,long)"),
            ("void set(java.lang.String,int)", "void set(java.lang.String,int)"),
            ("java.util.Map<K, V> get()", "java.util.Map get()"),
        ],
    )
    def test_cleanup_signature(self, raw: str, expected: str) -> None:
        assert cleanup_signature(raw) == expected


class TestDefinitionBuilder:
    """Building definitions from elements."""

    def test_class_definition(self, camera_model: CodeModel) -> None:
        definition = DefinitionBuilder(camera_model).build(_camera(camera_model), [CAMERA])
        assert definition.class_name == "android.hardware.Camera"
        assert definition.target is None
        assert definition.target_kind is TargetKind.CLASS
        assert definition.relation is PermissionRel.ALL_OF
        assert definition.conditional

    def test_method_definition(self, camera_model: CodeModel) -> None:
        (open_method,) = camera_model.find_methods_by_name(_camera(camera_model), "open")
        definition = DefinitionBuilder(camera_model).build(open_method, [CAMERA])
        assert definition.target == "android.hardware.Camera open(int)"
        assert definition.target_kind is TargetKind.METHOD
        assert definition.permissions == (CAMERA,)

    def test_field_and_nested_class(self, camera_model: CodeModel) -> None:
        params = camera_model.find_class("android.hardware.Camera.Parameters")
        assert params is not None
        field = camera_model.find_field(params, "PARAMS_URI")
        assert field is not None
        definition = DefinitionBuilder(camera_model).build(field, ["android.permission.READ_CONTACTS"])
        assert definition.class_name == "android.hardware.Camera.Parameters"
        assert definition.target == "PARAMS_URI"
        assert definition.target_kind is TargetKind.FIELD

    def test_constructor_target(self, camera_model: CodeModel) -> None:
        (ctor,) = camera_model.constructors(_camera(camera_model))
        definition = DefinitionBuilder(camera_model).build(ctor, [CAMERA])
        assert definition.target == "void <init>()"

    def test_permissions_sorted_and_deduplicated(self, camera_model: CodeModel) -> None:
        definition = DefinitionBuilder(camera_model).build(_camera(camera_model), ["b.Y", "a.X", "b.Y"])
        assert definition.permissions == ("a.X", "b.Y")

    def test_identity_ignores_comment(self, camera_model: CodeModel) -> None:
        builder = DefinitionBuilder(camera_model)
        (open_method,) = camera_model.find_methods_by_name(_camera(camera_model), "open")
        with_comment = builder.build(open_method, [CAMERA])
        without_comment = builder.build(open_method, ["android.permission.READ_CONTACTS"])
        assert with_comment.comment is not None
        assert without_comment.comment is None
        assert with_comment != without_comment
        assert with_comment == builder.build(open_method, [CAMERA])

    def test_parametric(self, camera_model: CodeModel) -> None:
        (set_list,) = camera_model.find_methods_by_name(_camera(camera_model), "setList")
        sens = DefinitionBuilder(camera_model).build_parametric(set_list)
        assert sens == ParametricSensDef(
            class_name="android.hardware.Camera",
            target="void setList(java.util.List,java.lang.String[])",
        )


class TestEvidenceComment:
    """Doc comment excerpts around permission mentions."""

    def test_whole_doc_when_short(self, camera_model: CodeModel) -> None:
        (open_method,) = camera_model.find_methods_by_name(_camera(camera_model), "open")
        comment = DefinitionBuilder(camera_model).evidence_comment(open_method, [CAMERA])
        assert comment == (
            "\n"
            "    /**\n"
            "     * Creates a new Camera object.\n"
            "     * Requires {@link android.Manifest.permission#CAMERA} permission.\n"
            "     */\n"
        )

    def test_distant_mentions_give_separate_fragments(self) -> None:
        source = (
            "package p;\n"
            "/**\n"
            " * CAMERA one\n"
            " * filler\n"
            " * filler\n"
            " * CAMERA two\n"
            " */\n"
            "public class A {}\n"
        )
        model = build_model((Path("p/A.java"), source))
        cls = model.find_class("p.A")
        assert cls is not None
        comment = DefinitionBuilder(model, context_width=3).evidence_comment(cls, [CAMERA])
        assert comment == "\n * CAMERA one\n * CAMERA two\n"

    def test_no_mention_gives_none(self, camera_model: CodeModel) -> None:
        params = camera_model.find_class("android.hardware.Camera.Parameters")
        assert params is not None
        (set_method,) = camera_model.find_methods_by_name(params, "set")
        builder = DefinitionBuilder(camera_model)
        assert builder.evidence_comment(set_method, [CAMERA]) is None
        assert builder.evidence_comment(params, [CAMERA]) is None
