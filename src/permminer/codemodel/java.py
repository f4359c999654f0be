"""Tree-sitter front-end that turns Java sources into a CodeModel.

Only declarations are modelled: types (class, interface, enum, record,
annotation), fields, methods and constructors, their javadoc, and the
top-level statements of method bodies. Types are canonicalized the way
compiled signatures spell them: generics erased, type variables erased
to ``java.lang.Object``, varargs as arrays, simple names qualified via
nested types, single-type imports, ``java.lang`` and the file's package.

Usage::

    model = JavaModelBuilder().build(Path("android-sdk/sources"))
    cls = model.find_class("android.hardware.Camera")
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import tree_sitter
import tree_sitter_java

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
from permminer.codemodel.ranges import TextRange
from permminer.core.errors import ModelError
from permminer.core.logging import get_logger

log = get_logger(__name__)

_COMMENT_TYPES = frozenset({"comment", "line_comment", "block_comment"})

_TYPE_DECLARATIONS = {
    "class_declaration": "class",
    "interface_declaration": "interface",
    "enum_declaration": "enum",
    "record_declaration": "record",
    "annotation_type_declaration": "annotation",
}

_FIELD_DECLARATIONS = frozenset({"field_declaration", "constant_declaration"})
_METHOD_DECLARATIONS = frozenset({"method_declaration", "annotation_type_element_declaration"})

_PRIMITIVES = frozenset(
    {"void", "boolean", "byte", "char", "short", "int", "long", "float", "double"}
)

_JAVA_LANG = frozenset(
    {
        "AutoCloseable",
        "Boolean",
        "Byte",
        "CharSequence",
        "Character",
        "Class",
        "ClassLoader",
        "Cloneable",
        "Comparable",
        "Deprecated",
        "Double",
        "Enum",
        "Error",
        "Exception",
        "Float",
        "IllegalArgumentException",
        "IllegalStateException",
        "Integer",
        "Iterable",
        "Long",
        "Math",
        "Number",
        "Object",
        "Override",
        "Runnable",
        "RuntimeException",
        "SecurityException",
        "Short",
        "String",
        "StringBuilder",
        "System",
        "Thread",
        "Throwable",
        "Void",
    }
)

_ANNOTATION_RE = re.compile(r"@[\w.]+(\([^()]*\))?")
_GENERIC_RE = re.compile(r"<[^<>]*>")


@dataclass
class _TypeScope:
    """Name resolution context for one point in a file."""

    package: str | None
    imports: dict[str, str]
    file_types: dict[str, str]
    type_vars: frozenset[str] = frozenset()

    def with_type_vars(self, names: Iterable[str]) -> _TypeScope:
        return _TypeScope(
            package=self.package,
            imports=self.imports,
            file_types=self.file_types,
            type_vars=self.type_vars | frozenset(names),
        )

    def resolve(self, name: str) -> str:
        if name in _PRIMITIVES:
            return name
        if name in self.type_vars:
            return "java.lang.Object"
        head, _, rest = name.partition(".")
        suffix = f".{rest}" if rest else ""
        if head in self.file_types:
            return self.file_types[head] + suffix
        if head in self.imports:
            return self.imports[head] + suffix
        if head in _JAVA_LANG and not rest:
            return f"java.lang.{head}"
        if rest and head[:1].islower():
            return name
        return f"{self.package}.{name}" if self.package else name


def canonical_type(raw: str, scope: _TypeScope, *, varargs: bool = False) -> str:
    """Erase and qualify a source type spelling."""
    text = _ANNOTATION_RE.sub("", raw)
    previous = None
    while previous != text:
        previous = text
        text = _GENERIC_RE.sub("", text)
    text = "".join(text.split())
    dims = 0
    if text.endswith("..."):
        text = text[:-3]
        dims += 1
    while text.endswith("[]"):
        text = text[:-2]
        dims += 1
    if varargs:
        dims += 1
    return scope.resolve(text) + "[]" * dims


class _OffsetMap:
    """Convert tree-sitter byte offsets to character offsets."""

    def __init__(self, content: bytes, text: str) -> None:
        self._table: list[int] | None = None
        if len(content) != len(text):
            table: list[int] = []
            for index, char in enumerate(text):
                table.extend([index] * len(char.encode("utf-8")))
            table.append(len(text))
            self._table = table

    def __call__(self, byte_offset: int) -> int:
        if self._table is None:
            return byte_offset
        return self._table[byte_offset]

    def span(self, node: Any) -> TextRange:
        return TextRange(self(node.start_byte), self(node.end_byte))


@dataclass
class _FileContext:
    file_id: int
    text: str
    offsets: _OffsetMap
    scope: _TypeScope
    top_level_ids: list[int] = field(default_factory=list)

    def node_text(self, node: Any) -> str:
        return self.offsets.span(node).substring(self.text)


@dataclass
class JavaModelBuilder:
    """Parse a Java source tree into an immutable CodeModel."""

    _parser: Any = field(default=None, repr=False)
    _elements: list[CodeElement | None] = field(default_factory=list, repr=False)

    def __post_init__(self) -> None:
        self._parser = tree_sitter.Parser()
        self._parser.language = tree_sitter.Language(tree_sitter_java.language())

    def build(self, root: Path) -> CodeModel:
        """Parse every ``*.java`` file under ``root``."""
        paths = sorted(p for p in root.rglob("*.java") if p.is_file())
        return self.build_from_sources((p, p.read_bytes()) for p in paths)

    def build_from_sources(self, sources: Iterable[tuple[Path, bytes]]) -> CodeModel:
        """Build a model from in-memory ``(path, content)`` pairs."""
        self._elements = []
        files: list[SourceFile] = []
        for path, content in sources:
            try:
                source = self._build_file(len(files), path, content)
            except ModelError as e:
                log.warning("source_file_skipped", path=str(path), error=e.message)
                continue
            files.append(source)

        elements = [e for e in self._elements if e is not None]
        if len(elements) != len(self._elements):
            raise ModelError.parse_failed("<arena>", "unfinished element slots")
        log.debug("code_model_built", files=len(files), elements=len(elements))
        return CodeModel(files, elements)

    # File level

    def _build_file(self, file_id: int, path: Path, content: bytes) -> SourceFile:
        try:
            text = content.decode("utf-8")
        except UnicodeDecodeError as e:
            raise ModelError.parse_failed(str(path), str(e)) from e

        tree = self._parser.parse(content)
        root = tree.root_node
        offsets = _OffsetMap(content, text)

        package = None
        imports: dict[str, str] = {}
        for child in root.named_children:
            if child.type == "package_declaration":
                package = _declaration_name(child)
            elif child.type == "import_declaration":
                imported = _declaration_name(child)
                is_static = any(c.type == "static" for c in child.children)
                is_wildcard = any(c.type == "asterisk" for c in child.children)
                if imported and not is_static and not is_wildcard:
                    imports[imported.rsplit(".", 1)[-1]] = imported

        file_types: dict[str, str] = {}
        for node in root.named_children:
            if node.type in _TYPE_DECLARATIONS:
                _collect_type_names(node, _qualify(package, None, node), file_types)

        ctx = _FileContext(
            file_id=file_id,
            text=text,
            offsets=offsets,
            scope=_TypeScope(package=package, imports=imports, file_types=file_types),
        )
        for node in root.named_children:
            if node.type in _TYPE_DECLARATIONS:
                ctx.top_level_ids.append(self._visit_type(ctx, node, owner=None, outer=None))

        comments = [offsets.span(n) for n in _walk(root) if n.type in _COMMENT_TYPES]
        return SourceFile(
            file_id=file_id,
            path=path,
            text=text,
            package=package,
            comment_ranges=tuple(comments),
            top_level_class_ids=tuple(ctx.top_level_ids),
        )

    # Declarations

    def _reserve(self) -> int:
        self._elements.append(None)
        return len(self._elements) - 1

    def _store(self, element: CodeElement) -> int:
        self._elements[element.element_id] = element
        return element.element_id

    def _visit_type(
        self,
        ctx: _FileContext,
        node: Any,
        owner: ClassElement | None,
        outer: str | None,
    ) -> int:
        element_id = self._reserve()
        name = _name(node)
        qualified_name = f"{outer}.{name}" if outer else _qualify(ctx.scope.package, None, node)
        kind = _TYPE_DECLARATIONS[node.type]
        scope = ctx.scope.with_type_vars(_type_parameters(node))
        outer_scope = ctx.scope
        ctx.scope = scope

        field_ids: list[int] = []
        method_ids: list[int] = []
        nested_ids: list[int] = []
        # Stand-in for member visibility rules until the real element is stored.
        shell = ClassElement(
            element_id=element_id,
            file_id=ctx.file_id,
            name=name,
            owner_id=owner.element_id if owner else None,
            visibility=Visibility.PUBLIC,
            text_range=ctx.offsets.span(node),
            qualified_name=qualified_name,
            kind=kind,
        )

        for member in _body_members(node):
            if member.type in _TYPE_DECLARATIONS:
                nested_ids.append(self._visit_type(ctx, member, owner=shell, outer=qualified_name))
            elif member.type in _FIELD_DECLARATIONS:
                field_ids.extend(self._visit_field(ctx, member, shell))
            elif member.type == "enum_constant":
                field_ids.append(self._visit_enum_constant(ctx, member, shell))
            elif member.type in _METHOD_DECLARATIONS or member.type == "constructor_declaration":
                method_ids.append(self._visit_method(ctx, member, shell))

        ctx.scope = outer_scope
        return self._store(
            ClassElement(
                element_id=element_id,
                file_id=ctx.file_id,
                name=name,
                owner_id=shell.owner_id,
                visibility=_visibility(node, implicit_public=_in_interface(owner)),
                text_range=shell.text_range,
                doc_comment=_doc_comment(ctx, node),
                qualified_name=qualified_name,
                kind=kind,
                field_ids=tuple(field_ids),
                method_ids=tuple(method_ids),
                nested_class_ids=tuple(nested_ids),
            )
        )

    def _visit_field(self, ctx: _FileContext, node: Any, owner: ClassElement) -> list[int]:
        type_node = node.child_by_field_name("type")
        base_type = ctx.node_text(type_node) if type_node is not None else "java.lang.Object"
        visibility = _visibility(node, implicit_public=_in_interface(owner))
        doc = _doc_comment(ctx, node)
        ids: list[int] = []
        for declarator in node.children_by_field_name("declarator"):
            dims = declarator.child_by_field_name("dimensions")
            raw_type = base_type + (ctx.node_text(dims) if dims is not None else "")
            element_id = self._reserve()
            ids.append(
                self._store(
                    FieldElement(
                        element_id=element_id,
                        file_id=ctx.file_id,
                        name=_name(declarator),
                        owner_id=owner.element_id,
                        visibility=visibility,
                        text_range=ctx.offsets.span(node),
                        doc_comment=doc,
                        type_name=canonical_type(raw_type, ctx.scope),
                    )
                )
            )
        return ids

    def _visit_enum_constant(self, ctx: _FileContext, node: Any, owner: ClassElement) -> int:
        element_id = self._reserve()
        return self._store(
            FieldElement(
                element_id=element_id,
                file_id=ctx.file_id,
                name=_name(node),
                owner_id=owner.element_id,
                visibility=Visibility.PUBLIC,
                text_range=ctx.offsets.span(node),
                doc_comment=_doc_comment(ctx, node),
                type_name=owner.qualified_name,
            )
        )

    def _visit_method(self, ctx: _FileContext, node: Any, owner: ClassElement) -> int:
        element_id = self._reserve()
        is_constructor = node.type == "constructor_declaration"
        scope = ctx.scope.with_type_vars(_type_parameters(node))

        return_type = None
        if not is_constructor:
            type_node = node.child_by_field_name("type")
            raw = ctx.node_text(type_node) if type_node is not None else "void"
            dims = node.child_by_field_name("dimensions")
            if dims is not None:
                raw += ctx.node_text(dims)
            return_type = canonical_type(raw, scope)

        params = node.child_by_field_name("parameters")
        parameter_types = tuple(_parameter_types(ctx, params, scope)) if params is not None else ()

        statements: tuple[TextRange, ...] = ()
        body = node.child_by_field_name("body")
        if body is not None:
            statements = tuple(
                ctx.offsets.span(child)
                for child in body.named_children
                if child.type not in _COMMENT_TYPES
            )

        return self._store(
            MethodElement(
                element_id=element_id,
                file_id=ctx.file_id,
                name=_name(node),
                owner_id=owner.element_id,
                visibility=_visibility(node, implicit_public=_in_interface(owner)),
                text_range=ctx.offsets.span(node),
                doc_comment=_doc_comment(ctx, node),
                return_type=return_type,
                parameter_types=parameter_types,
                is_constructor=is_constructor,
                statement_ranges=statements,
            )
        )


# Tree helpers


def _walk(node: Any) -> Iterable[Any]:
    stack = [node]
    while stack:
        current = stack.pop()
        yield current
        stack.extend(reversed(current.children))


def _name(node: Any) -> str:
    name_node = node.child_by_field_name("name")
    if name_node is None:
        return "<anonymous>"
    return str(name_node.text.decode("utf-8"))


def _declaration_name(node: Any) -> str | None:
    for child in node.named_children:
        if child.type in ("scoped_identifier", "identifier"):
            return str(child.text.decode("utf-8"))
    return None


def _qualify(package: str | None, outer: str | None, node: Any) -> str:
    name = _name(node)
    if outer:
        return f"{outer}.{name}"
    return f"{package}.{name}" if package else name


def _collect_type_names(node: Any, qualified_name: str, into: dict[str, str]) -> None:
    into.setdefault(_name(node), qualified_name)
    for member in _body_members(node):
        if member.type in _TYPE_DECLARATIONS:
            _collect_type_names(member, f"{qualified_name}.{_name(member)}", into)


def _body_members(node: Any) -> list[Any]:
    body = node.child_by_field_name("body")
    if body is None:
        return []
    members: list[Any] = []
    for child in body.named_children:
        if child.type == "enum_body_declarations":
            members.extend(child.named_children)
        else:
            members.append(child)
    return members


def _type_parameters(node: Any) -> list[str]:
    params = node.child_by_field_name("type_parameters")
    if params is None:
        return []
    names: list[str] = []
    for param in params.named_children:
        if param.type != "type_parameter":
            continue
        for child in param.named_children:
            if child.type in ("type_identifier", "identifier"):
                names.append(str(child.text.decode("utf-8")))
                break
    return names


def _modifier_tokens(node: Any) -> set[str]:
    for child in node.children:
        if child.type == "modifiers":
            return {c.type for c in child.children}
    return set()


def _visibility(node: Any, *, implicit_public: bool) -> Visibility:
    tokens = _modifier_tokens(node)
    if "public" in tokens:
        return Visibility.PUBLIC
    if "protected" in tokens:
        return Visibility.PROTECTED
    if "private" in tokens:
        return Visibility.PRIVATE
    return Visibility.PUBLIC if implicit_public else Visibility.PACKAGE


def _in_interface(owner: ClassElement | None) -> bool:
    return owner is not None and owner.kind in ("interface", "annotation")


def _doc_comment(ctx: _FileContext, node: Any) -> DocComment | None:
    prev = node.prev_named_sibling
    if prev is None or prev.type not in _COMMENT_TYPES:
        return None
    span = ctx.offsets.span(prev)
    text = span.substring(ctx.text)
    if not text.startswith("/**"):
        return None
    return DocComment(text=text, text_range=span)


def _parameter_types(ctx: _FileContext, params: Any, scope: _TypeScope) -> Iterable[str]:
    for param in params.named_children:
        if param.type == "formal_parameter":
            type_node = param.child_by_field_name("type")
            raw = ctx.node_text(type_node) if type_node is not None else "java.lang.Object"
            dims = param.child_by_field_name("dimensions")
            if dims is not None:
                raw += ctx.node_text(dims)
            yield canonical_type(raw, scope)
        elif param.type == "spread_parameter":
            type_node = next(
                (c for c in param.named_children if c.type not in ("modifiers", "variable_declarator")),
                None,
            )
            raw = ctx.node_text(type_node) if type_node is not None else "java.lang.Object"
            yield canonical_type(raw, scope, varargs=True)
