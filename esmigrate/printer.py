# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
ES source printer.

Output is deterministic: two-space indentation, one statement per line,
comments on their own lines ahead of the node they are attached to, and
single-quoted module specifiers. Parentheses are emitted from operator
precedence, so trees built by the passes print correctly without tracking
the source grouping.
"""

from __future__ import annotations

import re
from typing import List, Optional, Tuple

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
	Literal,
	MethodDef,
	Name,
	New,
	ObjectLit,
	ObjectPattern,
	ReturnStmt,
	Script,
	Stmt,
	Ternary,
	This,
	ThrowStmt,
	Unary,
	VarDecl,
)

INDENT = "  "

_IDENT = re.compile(r"^[A-Za-z_$][A-Za-z0-9_$]*$")
_AMBIGUOUS_START = re.compile(r"^(?:\{|(?:function|class)\b)")

_PREC_ASSIGN = 2
_PREC_TERNARY = 3
_PREC_UNARY = 10
_PREC_POSTFIX = 11
_PREC_PRIMARY = 12

_BINARY_PREC = {
	"||": 4,
	"&&": 5,
	"==": 6,
	"!=": 6,
	"===": 6,
	"!==": 6,
	"<": 7,
	">": 7,
	"<=": 7,
	">=": 7,
	"instanceof": 7,
	"+": 8,
	"-": 8,
	"*": 9,
	"/": 9,
	"%": 9,
}


def print_script(script: Script) -> str:
	lines: List[str] = []
	for stmt in script.body:
		lines.extend(_stmt(stmt, 0))
	if script.trailing_comment:
		lines.extend(_comment_lines(script.trailing_comment, 0))
	return "\n".join(lines) + "\n" if lines else ""


def print_expr(expr: Expr) -> str:
	return _expr(expr, 0, 0)


def quote(text: str) -> str:
	escaped = text.replace("\\", "\\\\").replace("'", "\\'").replace("\n", "\\n")
	return f"'{escaped}'"


# Statements ----------------------------------------------------------------


def _comment_lines(comment: Optional[str], depth: int) -> List[str]:
	if not comment:
		return []
	pad = INDENT * depth
	lines = []
	for line in comment.splitlines():
		text = line.strip()
		# JSDoc continuation lines keep their one-space gutter.
		lines.append(f"{pad} {text}" if text.startswith("*") else f"{pad}{text}")
	return lines


def _block(body: Tuple[Stmt, ...], depth: int) -> List[str]:
	lines: List[str] = []
	for stmt in body:
		lines.extend(_stmt(stmt, depth))
	return lines


def _stmt(stmt: Stmt, depth: int) -> List[str]:
	lines = _comment_lines(stmt.comment, depth)
	lines.extend(_stmt_body(stmt, depth))
	return lines


def _stmt_body(stmt: Stmt, depth: int) -> List[str]:
	pad = INDENT * depth
	if isinstance(stmt, VarDecl):
		decls = ", ".join(_declarator(d, depth) for d in stmt.declarators)
		return [f"{pad}{stmt.kind} {decls};"]
	if isinstance(stmt, FunctionDecl):
		head = f"{pad}function {stmt.name}({', '.join(stmt.params)}) {{"
		return _braced(head, _block(stmt.body, depth + 1), pad)
	if isinstance(stmt, ClassDecl):
		head = f"{pad}class {stmt.name}{_extends(stmt.superclass, depth)} {{"
		return _braced(head, _members(stmt.members, depth + 1), pad)
	if isinstance(stmt, ExprStmt):
		text = _expr(stmt.value, 0, depth)
		if _AMBIGUOUS_START.match(text):
			text = f"({text})"
		return [f"{pad}{text};"]
	if isinstance(stmt, ReturnStmt):
		if stmt.value is None:
			return [f"{pad}return;"]
		return [f"{pad}return {_expr(stmt.value, 0, depth)};"]
	if isinstance(stmt, ThrowStmt):
		return [f"{pad}throw {_expr(stmt.value, 0, depth)};"]
	if isinstance(stmt, IfStmt):
		return _if(stmt, depth, pad)
	if isinstance(stmt, EmptyStmt):
		# A placeholder that only keeps a comment alive prints as that comment.
		return [] if stmt.comment else [f"{pad};"]
	if isinstance(stmt, ImportDecl):
		return [f"{pad}{_import(stmt)}"]
	if isinstance(stmt, ExportDecl):
		return _export(stmt, depth, pad)
	raise AssertionError(f"unexpected statement {type(stmt).__name__}")


def _if(stmt: IfStmt, depth: int, pad: str) -> List[str]:
	lines = [f"{pad}if ({_expr(stmt.condition, 0, depth)}) {{", *_block(stmt.then_body, depth + 1)]
	else_body = stmt.else_body
	if else_body is None:
		lines.append(f"{pad}}}")
		return lines
	if len(else_body) == 1 and isinstance(else_body[0], IfStmt) and not else_body[0].comment:
		chained = _if(else_body[0], depth, pad)
		lines.append(f"{pad}}} else {chained[0].lstrip()}")
		lines.extend(chained[1:])
		return lines
	lines.append(f"{pad}}} else {{")
	lines.extend(_block(else_body, depth + 1))
	lines.append(f"{pad}}}")
	return lines


def _declarator(decl: Declarator, depth: int) -> str:
	if isinstance(decl.target, ObjectPattern):
		parts = [p.key if p.key == p.local else f"{p.key}: {p.local}" for p in decl.target.props]
		target = "{" + ", ".join(parts) + "}"
	else:
		target = decl.target
	if decl.value is None:
		return target
	return f"{target} = {_expr(decl.value, _PREC_ASSIGN, depth)}"


def _extends(superclass: Optional[Expr], depth: int) -> str:
	if superclass is None:
		return ""
	return f" extends {_expr(superclass, _PREC_POSTFIX, depth)}"


def _braced(head: str, inner: List[str], pad: str) -> List[str]:
	"""`head` ends with `{`; an empty body closes on the same line."""
	if not inner:
		return [head + "}"]
	return [head, *inner, f"{pad}}}"]


def _members(members: Tuple[MethodDef, ...], depth: int) -> List[str]:
	pad = INDENT * depth
	lines: List[str] = []
	for member in members:
		lines.extend(_comment_lines(member.comment, depth))
		static = "static " if member.is_static else ""
		head = f"{pad}{static}{member.name}({', '.join(member.params)}) {{"
		lines.extend(_braced(head, _block(member.body, depth + 1), pad))
	return lines


def _import(stmt: ImportDecl) -> str:
	source = quote(stmt.source)
	if stmt.default is not None:
		return f"import {stmt.default} from {source};"
	if stmt.namespace is not None:
		return f"import * as {stmt.namespace} from {source};"
	if stmt.specifiers:
		specs = ", ".join(s.local if s.imported == s.local else f"{s.imported} as {s.local}" for s in stmt.specifiers)
		return f"import {{{specs}}} from {source};"
	return f"import {source};"


def _export(stmt: ExportDecl, depth: int, pad: str) -> List[str]:
	if stmt.declaration is None:
		specs = ", ".join(s.local if s.local == s.exported else f"{s.local} as {s.exported}" for s in stmt.specifiers)
		return [f"{pad}export {{{specs}}};"]
	decl = stmt.declaration
	lines = _comment_lines(decl.comment, depth)
	body = _stmt_body(decl, depth)
	body[0] = f"{pad}export {body[0][len(pad):]}"
	lines.extend(body)
	return lines


# Expressions ---------------------------------------------------------------


def _prec(expr: Expr) -> int:
	if isinstance(expr, Assign):
		return _PREC_ASSIGN
	if isinstance(expr, Ternary):
		return _PREC_TERNARY
	if isinstance(expr, Binary):
		return _BINARY_PREC[expr.op]
	if isinstance(expr, Unary):
		return _PREC_UNARY
	if isinstance(expr, (GetProp, Index, Call, New)):
		return _PREC_POSTFIX
	return _PREC_PRIMARY


def _expr(expr: Expr, min_prec: int, depth: int) -> str:
	text = _expr_text(expr, depth)
	if _prec(expr) < min_prec:
		return f"({text})"
	return text


def _expr_text(expr: Expr, depth: int) -> str:
	if isinstance(expr, Name):
		return expr.ident
	if isinstance(expr, This):
		return "this"
	if isinstance(expr, Literal):
		return expr.raw
	if isinstance(expr, GetProp):
		base = _expr(expr.value, _PREC_POSTFIX, depth)
		if isinstance(expr.value, Literal) and base.isdigit():
			# `1.x` lexes as a malformed number.
			base = f"({base})"
		return f"{base}.{expr.attr}"
	if isinstance(expr, Index):
		return f"{_expr(expr.value, _PREC_POSTFIX, depth)}[{_expr(expr.index, 0, depth)}]"
	if isinstance(expr, Call):
		return f"{_expr(expr.func, _PREC_POSTFIX, depth)}({_args(expr.args, depth)})"
	if isinstance(expr, New):
		return f"new {_expr(expr.callee, _PREC_POSTFIX, depth)}({_args(expr.args, depth)})"
	if isinstance(expr, Assign):
		return f"{_expr(expr.target, _PREC_POSTFIX, depth)} {expr.op} {_expr(expr.value, _PREC_ASSIGN, depth)}"
	if isinstance(expr, Ternary):
		return (
			f"{_expr(expr.condition, _PREC_TERNARY + 1, depth)} ? "
			f"{_expr(expr.then_value, _PREC_ASSIGN, depth)} : {_expr(expr.else_value, _PREC_ASSIGN, depth)}"
		)
	if isinstance(expr, Binary):
		prec = _BINARY_PREC[expr.op]
		return f"{_expr(expr.left, prec, depth)} {expr.op} {_expr(expr.right, prec + 1, depth)}"
	if isinstance(expr, Unary):
		operand = _expr(expr.operand, _PREC_UNARY, depth)
		if expr.op == "typeof" or (expr.op in ("+", "-") and operand.startswith(expr.op)):
			return f"{expr.op} {operand}"
		return f"{expr.op}{operand}"
	if isinstance(expr, ObjectLit):
		if not expr.props:
			return "{}"
		props = []
		for prop in expr.props:
			if prop.shorthand:
				props.append(prop.key)
			else:
				key = prop.key if _IDENT.match(prop.key) else quote(prop.key)
				props.append(f"{key}: {_expr(prop.value, _PREC_ASSIGN, depth)}")
		return "{" + ", ".join(props) + "}"
	if isinstance(expr, ArrayLit):
		return "[" + _args(expr.elements, depth) + "]"
	if isinstance(expr, FunctionExpr):
		head = f"function({', '.join(expr.params)}) {{"
		return "\n".join(_braced(head, _block(expr.body, depth + 1), INDENT * depth))
	if isinstance(expr, ClassExpr):
		head = f"class{_extends(expr.superclass, depth)} {{"
		return "\n".join(_braced(head, _members(expr.members, depth + 1), INDENT * depth))
	raise AssertionError(f"unexpected expression {type(expr).__name__}")


def _args(args: Tuple[Expr, ...], depth: int) -> str:
	return ", ".join(_expr(a, _PREC_ASSIGN, depth) for a in args)


__all__ = ["print_script", "print_expr", "quote", "INDENT"]
