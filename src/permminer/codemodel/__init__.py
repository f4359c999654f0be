"""Immutable code model and the Java front-end that builds it."""

from permminer.codemodel.java import JavaModelBuilder
from permminer.codemodel.models import (
    ClassElement,
    CodeElement,
    CodeModel,
    DocComment,
    FieldElement,
    MethodElement,
    SourceFile,
    Visibility,
)
from permminer.codemodel.ranges import LineIndex, TextRange

__all__ = [
    "JavaModelBuilder",
    "ClassElement",
    "CodeElement",
    "CodeModel",
    "DocComment",
    "FieldElement",
    "MethodElement",
    "SourceFile",
    "Visibility",
    "LineIndex",
    "TextRange",
]
