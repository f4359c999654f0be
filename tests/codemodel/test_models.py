"""Tests for the code model arena."""

from pathlib import Path

import pytest

from permminer.codemodel import (
    ClassElement,
    CodeModel,
    DocComment,
    FieldElement,
    MethodElement,
    SourceFile,
    TextRange,
    Visibility,
)

TEXT = "/** Outer doc. */\nclass Outer {\n  /** f doc */ int f;\n  void m(int a) {}\n  Outer() {}\n}\n"


def _hand_built_model() -> CodeModel:
    doc = DocComment("/** Outer doc. */", TextRange(0, 17))
    field_doc = DocComment("/** f doc */", TextRange(34, 46))
    outer = ClassElement(
        element_id=0,
        file_id=0,
        name="Outer",
        owner_id=None,
        visibility=Visibility.PACKAGE,
        text_range=TextRange(18, len(TEXT) - 1),
        doc_comment=doc,
        qualified_name="p.Outer",
        field_ids=(1,),
        method_ids=(2, 3),
    )
    f = FieldElement(1, 0, "f", 0, Visibility.PACKAGE, TextRange(47, 53), field_doc, type_name="int")
    m = MethodElement(2, 0, "m", 0, Visibility.PACKAGE, TextRange(56, 72), return_type="void", parameter_types=("int",))
    ctor = MethodElement(3, 0, "Outer", 0, Visibility.PACKAGE, TextRange(75, 85), is_constructor=True)
    source = SourceFile(
        file_id=0,
        path=Path("p/Outer.java"),
        text=TEXT,
        package="p",
        comment_ranges=(doc.text_range, field_doc.text_range),
        top_level_class_ids=(0,),
    )
    return CodeModel([source], [outer, f, m, ctor])


class TestCodeElement:
    """Element properties."""

    def test_full_range_includes_doc(self) -> None:
        model = _hand_built_model()
        outer = model.find_class("p.Outer")
        assert outer is not None
        assert outer.full_range.start == 0
        assert outer.doc_text == "/** Outer doc. */"
        assert not outer.is_public

    def test_sub_signatures(self) -> None:
        model = _hand_built_model()
        outer = model.find_class("p.Outer")
        assert outer is not None
        assert [m.sub_signature for m in model.methods(outer)] == ["m(int)", "<init>()"]


class TestCodeModel:
    """Arena lookups."""

    def test_ids_must_match_positions(self) -> None:
        stray = FieldElement(5, 0, "x", None, Visibility.PUBLIC, TextRange(0, 1))
        with pytest.raises(ValueError):
            CodeModel([], [stray])

    def test_members_in_source_order(self) -> None:
        model = _hand_built_model()
        outer = model.find_class("p.Outer")
        assert outer is not None
        assert [e.name for e in model.members(outer)] == ["f", "m", "Outer"]

    def test_member_lookups(self) -> None:
        model = _hand_built_model()
        outer = model.find_class("p.Outer")
        assert outer is not None
        assert model.find_field(outer, "f") is not None
        assert model.find_field(outer, "g") is None
        assert [m.name for m in model.find_methods_by_name(outer, "m")] == ["m"]
        assert model.find_methods_by_name(outer, "Outer") == []
        assert len(model.constructors(outer)) == 1
        assert model.find_method("p.Outer", "m( int )") is not None
        assert model.find_method("p.Missing", "m(int)") is None

    def test_owner_and_file(self) -> None:
        model = _hand_built_model()
        field = model.element(1)
        assert model.owner(field) == model.find_class("p.Outer")
        assert model.owner(model.element(0)) is None
        assert model.file_of(field).package == "p"

    def test_comment_lookups(self) -> None:
        model = _hand_built_model()
        assert model.files_with_comment_word("doc") == list(model.files)
        assert model.files_with_comment_word("missing") == []
        assert model.comment_texts_in(model.element(1)) == ["/** f doc */"]
        assert model.comment_texts_in(model.element(0)) == ["/** Outer doc. */", "/** f doc */"]

    def test_comment_texts_skip_nested_element(self) -> None:
        model = _hand_built_model()
        outer = model.element(0)
        assert model.comment_texts_in(outer, skip=[model.element(1)]) == ["/** Outer doc. */"]
