# Copyright 2026 Apiscribe Contributors
# SPDX-License-Identifier: Apache-2.0

"""Load Python source units without importing them.

Each file is parsed with :mod:`ast` for its declarations and scanned with
:mod:`tokenize` for comments. A declaration's attached comment block is the
contiguous run of ``#`` lines directly above it (above its decorators) plus
its docstring.
"""

from __future__ import annotations

import ast
import io
import logging
import tokenize
from pathlib import Path
from typing import Any

from apiscribe.source.declarations import (
    AliasDeclaration,
    ClassDeclaration,
    ConstantDeclaration,
    Declaration,
    FunctionDeclaration,
    ListTypeExpr,
    LiteralTypeExpr,
    MapTypeExpr,
    MemberDeclaration,
    NamedTypeExpr,
    OptionalTypeExpr,
    SourceUnit,
    TypeExpr,
    UnionTypeExpr,
)

logger = logging.getLogger(__name__)

# ###############
# Public Interface
# ###############

DEFAULT_PATTERN = "**/*.py"


class SourceLoadError(Exception):
    """Raised when a source unit cannot be read or parsed."""


def find_sources(
    root: Path,
    pattern: str = DEFAULT_PATTERN,
    ignore_paths: list[str] | None = None,
) -> list[str]:
    """Root-relative paths of the Python files under *root* matching *pattern*.

    Args:
        root: Directory to scan.
        pattern: Glob relative to *root*. ``./...`` is accepted as a synonym
            for every ``.py`` file below the root.
        ignore_paths: Root-relative path prefixes to skip.

    Returns:
        Sorted POSIX-style relative paths.

    Raises:
        SourceLoadError: If the root does not exist.
    """
    if not root.is_dir():
        raise SourceLoadError(f"Source directory not found: {root}")
    if pattern in ("./...", "...", ""):
        pattern = DEFAULT_PATTERN

    ignored = [p.strip("/") for p in (ignore_paths or []) if p.strip("/")]
    paths: list[str] = []
    for path in sorted(root.glob(pattern)):
        if not path.is_file() or path.suffix != ".py":
            continue
        rel = path.relative_to(root).as_posix()
        if any(rel == prefix or rel.startswith(prefix + "/") for prefix in ignored):
            logger.debug("Skipping ignored source %s", rel)
            continue
        paths.append(rel)
    return paths


def load_sources(
    root: Path,
    pattern: str = DEFAULT_PATTERN,
    ignore_paths: list[str] | None = None,
) -> list[SourceUnit]:
    """Load every Python file under *root* matching *pattern*.

    Arguments are those of :func:`find_sources`.

    Returns:
        Source units ordered by relative path.

    Raises:
        SourceLoadError: If the root does not exist, or a file cannot be read
            or contains a syntax error.
    """
    units: list[SourceUnit] = []
    for rel in find_sources(root, pattern, ignore_paths):
        path = root / rel
        try:
            text = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            raise SourceLoadError(f"Cannot read source file '{path}': {exc}") from exc
        units.append(parse_source(text, rel))
    logger.info("Loaded %d source unit(s) from %s", len(units), root)
    return units


def parse_source(text: str, path: str = "<string>.py") -> SourceUnit:
    """Parse Python source text into a :class:`SourceUnit`.

    Args:
        text: Python source code.
        path: Root-relative path used to derive the module name.

    Raises:
        SourceLoadError: If the text is not valid Python.
    """
    try:
        tree = ast.parse(text, filename=path)
    except SyntaxError as exc:
        raise SourceLoadError(f"Syntax error in '{path}' at line {exc.lineno}: {exc.msg}") from exc
    try:
        comments = _Comments.scan(text)
    except (tokenize.TokenError, SyntaxError) as exc:
        raise SourceLoadError(f"Cannot tokenize '{path}': {exc}") from exc

    module = _module_name(path)
    reader = _ModuleReader(comments, module.rsplit(".", 1)[-1])
    return reader.read(tree, path, module)


# ################
# Implementation
# ################

_SEQUENCE_NAMES = frozenset(
    {"list", "List", "Sequence", "MutableSequence", "Iterable", "set", "Set", "frozenset", "FrozenSet", "tuple", "Tuple"}
)
_MAPPING_NAMES = frozenset({"dict", "Dict", "Mapping", "MutableMapping", "OrderedDict", "defaultdict"})
_FIELD_CALLS = frozenset({"Field", "field"})


def _module_name(path: str) -> str:
    parts = list(Path(path).with_suffix("").parts)
    if len(parts) > 1 and parts[-1] == "__init__":
        parts.pop()
    return ".".join(parts) or "__main__"


class _Comments:
    """Comment lines of a module, split into standalone and trailing comments."""

    def __init__(self, standalone: dict[int, str], inline: dict[int, str]) -> None:
        self.standalone = standalone
        self.inline = inline

    @classmethod
    def scan(cls, text: str) -> _Comments:
        lines = text.splitlines()
        standalone: dict[int, str] = {}
        inline: dict[int, str] = {}
        for token in tokenize.generate_tokens(io.StringIO(text).readline):
            if token.type != tokenize.COMMENT:
                continue
            row, col = token.start
            prefix = lines[row - 1][:col] if row - 1 < len(lines) else ""
            if prefix.strip():
                inline[row] = token.string
            else:
                standalone[row] = token.string
        return cls(standalone, inline)

    def block_above(self, line: int) -> list[str]:
        """The contiguous comment lines ending right above *line*."""
        block: list[str] = []
        row = line - 1
        while row in self.standalone:
            block.append(self.standalone[row])
            row -= 1
        block.reverse()
        return block

    def inline_between(self, first: int, last: int) -> list[str]:
        return [self.inline[row] for row in range(first, last + 1) if row in self.inline]

    def blocks(self) -> list[list[str]]:
        """Every run of consecutive standalone comment lines."""
        result: list[list[str]] = []
        previous = -1
        for row in sorted(self.standalone):
            if row != previous + 1 or not result:
                result.append([])
            result[-1].append(self.standalone[row])
            previous = row
        return result


class _ModuleReader:
    """Collects the declarations of one parsed module."""

    def __init__(self, comments: _Comments, package: str) -> None:
        self._comments = comments
        self._package = package

    def read(self, tree: ast.Module, path: str, module: str) -> SourceUnit:
        blocks: list[list[str]] = []
        docstring = ast.get_docstring(tree)
        if docstring:
            blocks.append(docstring.splitlines())
        blocks.extend(self._comments.blocks())

        declarations: list[Declaration] = []
        imports: dict[str, str] = {}
        for stmt in tree.body:
            if isinstance(stmt, ast.ClassDef):
                cls = self._class(stmt)
                declarations.append(cls)
                declarations.extend(self._methods(stmt))
            elif isinstance(stmt, (ast.FunctionDef, ast.AsyncFunctionDef)):
                declarations.append(
                    FunctionDeclaration(name=stmt.name, doc=self._doc(stmt), line=stmt.lineno)
                )
            elif isinstance(stmt, (ast.Import, ast.ImportFrom)):
                imports.update(_import_names(stmt))
            else:
                alias = self._alias(stmt)
                if alias is not None:
                    declarations.append(alias)

        return SourceUnit(
            path=path,
            module=module,
            package=self._package,
            comment_blocks=blocks,
            declarations=declarations,
            imports=imports,
        )

    def _doc(self, node: ast.ClassDef | ast.FunctionDef | ast.AsyncFunctionDef) -> list[str]:
        first = min([node.lineno] + [d.lineno for d in node.decorator_list])
        lines = list(self._comments.block_above(first))
        docstring = ast.get_docstring(node)
        if docstring:
            lines.extend(docstring.splitlines())
        return lines

    def _class(self, node: ast.ClassDef) -> ClassDeclaration:
        bases = [name for name in (_dotted(b) for b in node.bases) if name]
        # Base classes precede the body, so they expand before own members.
        members = [
            MemberDeclaration(name=None, type=NamedTypeExpr(name=base), line=node.lineno) for base in bases
        ]
        constants: list[ConstantDeclaration] = []
        nested: list[ClassDeclaration] = []

        body = node.body
        for index, stmt in enumerate(body):
            following = body[index + 1] if index + 1 < len(body) else None
            if isinstance(stmt, ast.AnnAssign) and isinstance(stmt.target, ast.Name):
                member = self._member(stmt, following)
                if member is not None:
                    members.append(member)
            elif isinstance(stmt, ast.Assign):
                constant = self._constant(stmt)
                if constant is not None:
                    constants.append(constant)
            elif isinstance(stmt, ast.ClassDef):
                nested.append(self._class(stmt))

        return ClassDeclaration(
            name=node.name,
            doc=self._doc(node),
            bases=bases,
            members=members,
            constants=constants,
            nested=nested,
            line=node.lineno,
        )

    def _methods(self, node: ast.ClassDef) -> list[FunctionDeclaration]:
        return [
            FunctionDeclaration(name=stmt.name, doc=self._doc(stmt), owner=node.name, line=stmt.lineno)
            for stmt in node.body
            if isinstance(stmt, (ast.FunctionDef, ast.AsyncFunctionDef))
        ]

    def _member(self, stmt: ast.AnnAssign, following: ast.stmt | None) -> MemberDeclaration | None:
        name = stmt.target.id  # type: ignore[union-attr]
        annotation = stmt.annotation
        if _dotted(_subscript_base(annotation)).rsplit(".", 1)[-1] == "ClassVar":
            return None

        options: dict[str, Any] = {}
        has_default = stmt.value is not None
        if _dotted(_subscript_base(annotation)).rsplit(".", 1)[-1] == "Annotated":
            for meta in _subscript_args(annotation)[1:]:
                if _is_field_call(meta):
                    options.update(_field_options(meta))  # type: ignore[arg-type]
        if stmt.value is not None and _is_field_call(stmt.value):
            options.update(_field_options(stmt.value))  # type: ignore[arg-type]
            has_default = "default" in options or _has_keyword(stmt.value, "default_factory")  # type: ignore[arg-type]
        elif stmt.value is not None:
            literal = _literal(stmt.value)
            if literal is not _NO_LITERAL and literal is not None:
                options.setdefault("default", literal)
        if options.get("required"):
            has_default = False

        end = stmt.end_lineno or stmt.lineno
        doc = self._comments.block_above(stmt.lineno) + self._comments.inline_between(stmt.lineno, end)
        if (
            isinstance(following, ast.Expr)
            and isinstance(following.value, ast.Constant)
            and isinstance(following.value.value, str)
        ):
            doc.extend(following.value.value.strip().splitlines())

        return MemberDeclaration(
            name=name,
            type=_type_expr(annotation),
            doc=doc,
            options=options,
            has_default=has_default,
            line=stmt.lineno,
        )

    def _constant(self, stmt: ast.Assign) -> ConstantDeclaration | None:
        if len(stmt.targets) != 1 or not isinstance(stmt.targets[0], ast.Name):
            return None
        value = _literal(stmt.value)
        if not isinstance(value, (str, int, float, bool)):
            return None
        end = stmt.end_lineno or stmt.lineno
        doc = self._comments.block_above(stmt.lineno) + self._comments.inline_between(stmt.lineno, end)
        return ConstantDeclaration(name=stmt.targets[0].id, value=value, doc=doc, line=stmt.lineno)

    def _alias(self, stmt: ast.stmt) -> AliasDeclaration | None:
        type_alias = getattr(ast, "TypeAlias", None)
        if type_alias is not None and isinstance(stmt, type_alias):
            name, value, explicit = stmt.name.id, stmt.value, True  # type: ignore[attr-defined]
        elif (
            isinstance(stmt, ast.AnnAssign)
            and isinstance(stmt.target, ast.Name)
            and stmt.value is not None
            and _dotted(stmt.annotation).rsplit(".", 1)[-1] == "TypeAlias"
        ):
            name, value, explicit = stmt.target.id, stmt.value, True
        elif (
            isinstance(stmt, ast.Assign)
            and len(stmt.targets) == 1
            and isinstance(stmt.targets[0], ast.Name)
            and _is_type_like(stmt.value)
        ):
            name, value, explicit = stmt.targets[0].id, stmt.value, False
        else:
            return None
        end = stmt.end_lineno or stmt.lineno
        doc = self._comments.block_above(stmt.lineno) + self._comments.inline_between(stmt.lineno, end)
        return AliasDeclaration(
            name=name,
            target=_type_expr(value),
            doc=doc,
            explicit=explicit,
            line=stmt.lineno,
        )


def _import_names(stmt: ast.Import | ast.ImportFrom) -> dict[str, str]:
    names: dict[str, str] = {}
    if isinstance(stmt, ast.Import):
        for alias in stmt.names:
            last = alias.name.rsplit(".", 1)[-1]
            if alias.asname:
                names[alias.asname] = last
            else:
                head = alias.name.split(".", 1)[0]
                names[head] = head
        return names
    package = (stmt.module or "").rsplit(".", 1)[-1]
    for alias in stmt.names:
        if alias.name == "*":
            continue
        local = alias.asname or alias.name
        if alias.name[:1].isupper() and package:
            names[local] = f"{package}.{alias.name}"
        else:
            # Lower-case names are taken to be submodules.
            names[local] = alias.name
    return names


def _dotted(node: ast.expr | None) -> str:
    if isinstance(node, ast.Name):
        return node.id
    if isinstance(node, ast.Attribute):
        head = _dotted(node.value)
        return f"{head}.{node.attr}" if head else ""
    if isinstance(node, ast.Subscript):
        return _dotted(node.value)
    return ""


def _subscript_base(node: ast.expr) -> ast.expr | None:
    return node.value if isinstance(node, ast.Subscript) else None


def _subscript_args(node: ast.expr) -> list[ast.expr]:
    if not isinstance(node, ast.Subscript):
        return []
    inner = node.slice
    if isinstance(inner, ast.Tuple):
        return list(inner.elts)
    return [inner]


def _type_expr(node: ast.expr) -> TypeExpr:
    if isinstance(node, ast.Constant):
        if node.value is None:
            return NamedTypeExpr(name="None")
        if isinstance(node.value, str):
            try:
                parsed = ast.parse(node.value, mode="eval").body
            except SyntaxError:
                return NamedTypeExpr(name=node.value)
            return _type_expr(parsed)
    if isinstance(node, ast.BinOp) and isinstance(node.op, ast.BitOr):
        return _union([*_flatten_union(node)])
    if isinstance(node, ast.Subscript):
        base = _dotted(node.value).rsplit(".", 1)[-1]
        args = _subscript_args(node)
        if base == "Optional" and args:
            return _union([args[0], ast.Constant(value=None)])
        if base == "Union":
            return _union(args)
        if base == "Annotated" and args:
            return _type_expr(args[0])
        if base == "Literal":
            values = [v for v in (_literal(a) for a in args) if isinstance(v, (str, int, float, bool))]
            return LiteralTypeExpr(values=values)
        if base in _SEQUENCE_NAMES and args:
            return ListTypeExpr(element=_type_expr(args[0]))
        if base in _MAPPING_NAMES and len(args) == 2:
            return MapTypeExpr(key=_type_expr(args[0]), value=_type_expr(args[1]))
        return NamedTypeExpr(name=_dotted(node.value))
    name = _dotted(node)
    if name:
        return NamedTypeExpr(name=name)
    return NamedTypeExpr(name=ast.unparse(node))


def _flatten_union(node: ast.expr) -> list[ast.expr]:
    if isinstance(node, ast.BinOp) and isinstance(node.op, ast.BitOr):
        return _flatten_union(node.left) + _flatten_union(node.right)
    return [node]


def _union(nodes: list[ast.expr]) -> TypeExpr:
    options = [_type_expr(n) for n in nodes]
    present = [o for o in options if not (isinstance(o, NamedTypeExpr) and o.name == "None")]
    if not present:
        return NamedTypeExpr(name="None")
    inner: TypeExpr = present[0] if len(present) == 1 else UnionTypeExpr(options=present)
    if len(present) < len(options):
        return OptionalTypeExpr(inner=inner)
    return inner


def _is_type_like(node: ast.expr) -> bool:
    if isinstance(node, (ast.Name, ast.Attribute)):
        return _dotted(node).rsplit(".", 1)[-1][:1].isupper()
    if isinstance(node, ast.Subscript):
        return bool(_dotted(node.value))
    if isinstance(node, ast.BinOp) and isinstance(node.op, ast.BitOr):
        return all(_is_type_like(n) or (isinstance(n, ast.Constant) and n.value is None) for n in _flatten_union(node))
    return False


def _is_field_call(node: ast.expr) -> bool:
    return isinstance(node, ast.Call) and _dotted(node.func).rsplit(".", 1)[-1] in _FIELD_CALLS


def _has_keyword(call: ast.Call, name: str) -> bool:
    return any(kw.arg == name for kw in call.keywords)


def _field_options(call: ast.Call) -> dict[str, Any]:
    options: dict[str, Any] = {}
    if call.args:
        first = call.args[0]
        if isinstance(first, ast.Constant) and first.value is Ellipsis:
            options["required"] = True
        else:
            value = _literal(first)
            if value is not _NO_LITERAL:
                options["default"] = value
    for kw in call.keywords:
        if kw.arg is None:
            continue
        value = _literal(kw.value)
        if value is _NO_LITERAL:
            continue
        if kw.arg == "default" and value is Ellipsis:
            options["required"] = True
            continue
        options[kw.arg] = value
    return options


_NO_LITERAL = object()


def _literal(node: ast.expr) -> Any:
    try:
        return ast.literal_eval(node)
    except (ValueError, TypeError, SyntaxError, MemoryError, RecursionError):
        return _NO_LITERAL
