# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Reference rewriting (third traversal).

Every `Name`/`GetProp` chain whose qualified name starts with a key of the
file's value table is respelled with the registered local name; the walk
does not descend into a replaced chain. JSDoc type expressions get the same
treatment against the type table.
"""

from __future__ import annotations

from dataclasses import replace
from typing import Mapping, Optional, Tuple

from esmigrate.convert.rename import FrozenRenameTable
from esmigrate.jsdoc import rewrite_type_names
from esmigrate.names import find_longest_prefix, qualified_name, replace_prefix
from esmigrate.parser.ast import (
	ArrayLit,
	Assign,
	Binary,
	Call,
	ClassDecl,
	ClassExpr,
	Declarator,
	EmptyStmt,
	ExportDecl,
	Expr,
	ExprStmt,
	FunctionDecl,
	FunctionExpr,
	GetProp,
	IfStmt,
	ImportDecl,
	Index,
	MethodDef,
	Name,
	New,
	ObjectLit,
	Property,
	ReturnStmt,
	Script,
	Stmt,
	Ternary,
	ThrowStmt,
	Unary,
	VarDecl,
)


class ReferenceRewriter:
	def __init__(self, value_rewrite: FrozenRenameTable, type_rewrite: FrozenRenameTable) -> None:
		self.value_rewrite = value_rewrite
		self.type_rewrite = type_rewrite
		self._values: Mapping[str, str] = {}
		self._types: Mapping[str, str] = {}

	def rewrite_script(self, script: Script) -> Script:
		self._values = self.value_rewrite.row(script.file)
		self._types = self.type_rewrite.row(script.file)
		if not self._values and not self._types:
			return script
		return replace(
			script,
			body=self._stmts(script.body),
			trailing_comment=self._comment(script.trailing_comment),
		)

	# Type positions ------------------------------------------------------

	def _comment(self, comment: Optional[str]) -> Optional[str]:
		if not comment or not self._types:
			return comment
		return rewrite_type_names(comment, self._type_name)

	def _type_name(self, name: str) -> Optional[str]:
		prefix = find_longest_prefix(name, self._types)
		if prefix is None:
			return None
		return self._types[prefix] + name[len(prefix):]

	# Statements ----------------------------------------------------------

	def _stmts(self, stmts: Tuple[Stmt, ...]) -> Tuple[Stmt, ...]:
		return tuple(self._stmt(s) for s in stmts)

	def _stmt(self, stmt: Stmt) -> Stmt:
		comment = self._comment(stmt.comment)
		if isinstance(stmt, VarDecl):
			declarators = tuple(
				Declarator(target=d.target, value=self._expr(d.value) if d.value is not None else None)
				for d in stmt.declarators
			)
			return replace(stmt, declarators=declarators, comment=comment)
		if isinstance(stmt, FunctionDecl):
			return replace(stmt, body=self._stmts(stmt.body), comment=comment)
		if isinstance(stmt, ClassDecl):
			return replace(
				stmt,
				superclass=self._opt_expr(stmt.superclass),
				members=self._members(stmt.members),
				comment=comment,
			)
		if isinstance(stmt, ExprStmt):
			return replace(stmt, value=self._expr(stmt.value), comment=comment)
		if isinstance(stmt, ReturnStmt):
			return replace(stmt, value=self._opt_expr(stmt.value), comment=comment)
		if isinstance(stmt, ThrowStmt):
			return replace(stmt, value=self._expr(stmt.value), comment=comment)
		if isinstance(stmt, IfStmt):
			return replace(
				stmt,
				condition=self._expr(stmt.condition),
				then_body=self._stmts(stmt.then_body),
				else_body=self._stmts(stmt.else_body) if stmt.else_body is not None else None,
				comment=comment,
			)
		if isinstance(stmt, ExportDecl):
			declaration = self._stmt(stmt.declaration) if stmt.declaration is not None else None
			return replace(stmt, declaration=declaration, comment=comment)
		if isinstance(stmt, (ImportDecl, EmptyStmt)):
			return replace(stmt, comment=comment)
		raise AssertionError(f"unexpected statement {type(stmt).__name__}")

	def _members(self, members: Tuple[MethodDef, ...]) -> Tuple[MethodDef, ...]:
		return tuple(replace(m, body=self._stmts(m.body), comment=self._comment(m.comment)) for m in members)

	# Expressions ---------------------------------------------------------

	def _opt_expr(self, expr: Optional[Expr]) -> Optional[Expr]:
		return self._expr(expr) if expr is not None else None

	def _expr(self, expr: Expr) -> Expr:
		if isinstance(expr, (Name, GetProp)):
			prefix = find_longest_prefix(qualified_name(expr), self._values)
			if prefix is not None:
				return replace_prefix(expr, prefix, self._values[prefix])
			if isinstance(expr, GetProp):
				return replace(expr, value=self._expr(expr.value))
			return expr
		if isinstance(expr, Call):
			return replace(expr, func=self._expr(expr.func), args=tuple(self._expr(a) for a in expr.args))
		if isinstance(expr, New):
			return replace(expr, callee=self._expr(expr.callee), args=tuple(self._expr(a) for a in expr.args))
		if isinstance(expr, Assign):
			return replace(expr, target=self._expr(expr.target), value=self._expr(expr.value))
		if isinstance(expr, Binary):
			return replace(expr, left=self._expr(expr.left), right=self._expr(expr.right))
		if isinstance(expr, Unary):
			return replace(expr, operand=self._expr(expr.operand))
		if isinstance(expr, Ternary):
			return replace(
				expr,
				condition=self._expr(expr.condition),
				then_value=self._expr(expr.then_value),
				else_value=self._expr(expr.else_value),
			)
		if isinstance(expr, Index):
			return replace(expr, value=self._expr(expr.value), index=self._expr(expr.index))
		if isinstance(expr, ObjectLit):
			return replace(expr, props=tuple(self._prop(p) for p in expr.props))
		if isinstance(expr, ArrayLit):
			return replace(expr, elements=tuple(self._expr(e) for e in expr.elements))
		if isinstance(expr, FunctionExpr):
			return replace(expr, body=self._stmts(expr.body))
		if isinstance(expr, ClassExpr):
			return replace(expr, superclass=self._opt_expr(expr.superclass), members=self._members(expr.members))
		return expr

	def _prop(self, prop: Property) -> Property:
		value = self._expr(prop.value)
		# `{Foo}` stays shorthand only while the value still reads `Foo`.
		shorthand = prop.shorthand and isinstance(value, Name) and value.ident == prop.key
		return Property(key=prop.key, value=value, shorthand=shorthand)


__all__ = ["ReferenceRewriter"]
