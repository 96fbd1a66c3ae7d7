# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Export conversion (first traversal).

Walks the top-level statements of each file once, in order:

- module markers (`goog.module`, `goog.provide`, `declareLegacyNamespace`)
  are dropped;
- `exports = {A, B: b}` is split into one `exports.X = ...` per property;
- assignments to an exported namespace become ES exports;
- `/** @typedef */ exports.T;` becomes `let T;` plus `export {T};`.

Every export matched here is registered in the rename tables, so the reference
rewriter later turns `a.b.Foo.bar` into `Foo.bar`.
"""

from __future__ import annotations

from dataclasses import replace
from typing import List, Mapping, Optional

from esmigrate.comments import NodeComments
from esmigrate.convert.rename import RenameTables
from esmigrate.convert.symbols import ExportedSymbol, SymbolRegistry
from esmigrate.jsdoc import is_typedef
from esmigrate.metadata import EXPORTS, MODULE_MARKERS, FileModule, ModuleIndex, legacy_call_name
from esmigrate.names import find_longest_prefix, matches_qualified_name, qualified_name, replace_prefix
from esmigrate.parser.ast import (
	NO_LOC,
	Assign,
	ClassDecl,
	Declarator,
	EmptyStmt,
	ExportDecl,
	ExportSpec,
	ExprStmt,
	FunctionDecl,
	GetProp,
	Name,
	ObjectLit,
	Script,
	Stmt,
	VarDecl,
)

EMPTY_MODULE_COMMENT = "// force this file to be an ES module (no imports or exports)"


def empty_module_marker() -> ExportDecl:
	return ExportDecl(loc=NO_LOC, comment=EMPTY_MODULE_COMMENT)


class ExportConverter:
	def __init__(
		self,
		index: ModuleIndex,
		registry: SymbolRegistry,
		tables: RenameTables,
		comments: Optional[NodeComments] = None,
	) -> None:
		self.index = index
		self.registry = registry
		self.tables = tables
		self.comments = comments or NodeComments()

	def convert_script(self, script: Script) -> Script:
		module = self.index.module_for_file(script.file)
		out: List[Stmt] = []
		if module is not None and not module.has_imports and not module.has_exports:
			out.append(empty_module_marker())
		for stmt in script.body:
			self._visit(stmt, script.file, module, out)
		return replace(script, body=tuple(out))

	def _visit(self, stmt: Stmt, file: str, module: Optional[FileModule], out: List[Stmt]) -> None:
		if isinstance(stmt, (VarDecl, ClassDecl, FunctionDecl)):
			self.registry.record_declaration(file, stmt)
			out.append(stmt)
			return
		if legacy_call_name(stmt) in MODULE_MARKERS:
			if self.comments.has_comment(stmt):
				out.append(self.comments.replace_with_comment(stmt, EmptyStmt(loc=stmt.loc)))
			return
		if module is None or not isinstance(stmt, ExprStmt):
			out.append(stmt)
			return

		symbols = module.exported_namespaces_to_local_names
		value = stmt.value
		if isinstance(value, Assign) and value.op == "=":
			if (
				matches_qualified_name(value.target, EXPORTS)
				and isinstance(value.value, ObjectLit)
				and EXPORTS not in symbols
			):
				for part in self._split_object_export(stmt):
					if not self._export_declaration_as(part, file, out):
						self._convert_assignment(part, file, symbols, out)
				return
			self._convert_assignment(stmt, file, symbols, out)
			return
		if isinstance(value, GetProp) and is_typedef(stmt.comment):
			self._convert_typedef(stmt, file, symbols, out)
			return
		out.append(stmt)

	def _split_object_export(self, stmt: ExprStmt) -> List[ExprStmt]:
		"""`exports = {A: x, B};` -> `exports.A = x; exports.B = B;`"""
		if not isinstance(stmt.value, Assign) or not isinstance(stmt.value.value, ObjectLit):
			raise AssertionError("object export must assign an object literal")
		loc = stmt.loc
		parts: List[ExprStmt] = []
		for prop in stmt.value.value.props:
			target = GetProp(loc=loc, value=Name(loc=loc, ident=EXPORTS), attr=prop.key)
			parts.append(ExprStmt(loc=loc, value=Assign(loc=loc, target=target, value=prop.value)))
		if parts:
			parts[0] = self.comments.move_comment(stmt, parts[0])
		return parts

	def _export_declaration_as(self, stmt: ExprStmt, file: str, out: List[Stmt]) -> bool:
		"""
		`exports.A = Foo;` split from an object literal, with `class Foo {}`
		above, becomes `export class Foo {}` plus `export {Foo as A};`.
		Returns False when the value is not a declaration of this file.
		"""
		assign = stmt.value
		if not isinstance(assign, Assign) or not isinstance(assign.target, GetProp):
			raise AssertionError("split export must assign to a property of exports")
		key = assign.target.attr
		rhs = assign.value
		if not isinstance(rhs, Name) or rhs.ident == key:
			return False
		decl = self.registry.lookup(ExportedSymbol.of(file, rhs.ident, rhs.ident))
		pos = _position_of(out, decl)
		if pos is None:
			return False
		export = ExportDecl(loc=decl.loc, declaration=self.comments.strip(decl))  # type: ignore[union-attr]
		out[pos] = self.comments.move_comment(decl, export)  # type: ignore[arg-type]
		alias = ExportDecl(loc=stmt.loc, specifiers=(ExportSpec(local=rhs.ident, exported=key),))
		out.append(self.comments.replace_with_comment(stmt, alias))
		exported_namespace = f"{EXPORTS}.{key}"
		self.tables.register_local_symbol(file, exported_namespace, exported_namespace, rhs.ident)
		return True

	def _convert_assignment(self, stmt: ExprStmt, file: str, symbols: Mapping[str, str], out: List[Stmt]) -> None:
		if not isinstance(stmt.value, Assign):
			raise AssertionError("export must be an assignment")
		exported_namespace = find_longest_prefix(qualified_name(stmt.value.target), symbols)
		if exported_namespace is None:
			out.append(stmt)
			return
		exported_symbol = symbols[exported_namespace]
		self.convert_export_assignment(stmt, exported_namespace, exported_symbol, file, out)
		self.tables.register_local_symbol(file, exported_namespace, exported_namespace, exported_symbol)

	def convert_export_assignment(
		self,
		stmt: Stmt,
		exported_namespace: str,
		exported_symbol: str,
		file: str,
		out: List[Stmt],
	) -> None:
		"""
		Convert one top-level export assignment, appending to (or, for a
		direct export, editing in place) the file's converted statement list.

		  exports = Foo;    (class Foo above)   ->  export class Foo {}
		  exports = Foo;    (let Foo above)     ->  export {Foo};
		  exports.A = f();                      ->  export const A = f();
		  a.b.Foo.x = 1;    (a.b.Foo exported)  ->  Foo.x = 1;
		"""
		if not isinstance(stmt, ExprStmt) or not isinstance(stmt.value, Assign):
			raise AssertionError(f"export assignment must be a top-level assignment statement, got {type(stmt).__name__}")
		assign = stmt.value
		rhs = assign.value

		if not matches_qualified_name(assign.target, exported_namespace):
			# A write below the exported namespace: keep it, spelled with the local name.
			target = replace_prefix(assign.target, exported_namespace, exported_symbol)
			out.append(replace(stmt, value=replace(assign, target=target)))
			return

		if isinstance(rhs, Name):
			symbol = ExportedSymbol.from_export_assignment(rhs, exported_namespace, exported_symbol, file)
			decl = self.registry.lookup(symbol)
			pos = _position_of(out, decl)
			if pos is not None:
				export = ExportDecl(loc=decl.loc, declaration=self.comments.strip(decl))  # type: ignore[union-attr]
				out[pos] = self.comments.move_comment(decl, export)  # type: ignore[arg-type]
				return

		if isinstance(rhs, Name) and rhs.ident == exported_symbol:
			export = ExportDecl(loc=stmt.loc, specifiers=(ExportSpec(local=rhs.ident, exported=rhs.ident),))
		else:
			declaration = VarDecl(loc=stmt.loc, kind="const", declarators=(Declarator(target=exported_symbol, value=rhs),))
			export = ExportDecl(loc=stmt.loc, declaration=declaration)
		out.append(self.comments.replace_with_comment(stmt, export))

	def _convert_typedef(self, stmt: ExprStmt, file: str, symbols: Mapping[str, str], out: List[Stmt]) -> None:
		name = qualified_name(stmt.value)
		exported_namespace = find_longest_prefix(name, symbols)
		if exported_namespace is None:
			out.append(stmt)
			return
		local = symbols[exported_namespace]
		if name == exported_namespace:
			decl = VarDecl(loc=stmt.loc, kind="let", declarators=(Declarator(target=local),))
			out.append(self.comments.replace_with_comment(stmt, decl))
			out.append(ExportDecl(loc=stmt.loc, specifiers=(ExportSpec(local=local, exported=local),)))
		else:
			# Typedef on a member of an exported value; the rewriter renames the prefix.
			out.append(stmt)
		self.tables.register_local_symbol(file, exported_namespace, exported_namespace, local)


def _position_of(stmts: List[Stmt], node: Optional[Stmt]) -> Optional[int]:
	if node is None:
		return None
	for i, stmt in enumerate(stmts):
		if stmt is node:
			return i
	return None


__all__ = ["EMPTY_MODULE_COMMENT", "ExportConverter", "empty_module_marker"]
