# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
AST for the legacy JavaScript subset and the ES module statements the
conversion produces.

Nodes are frozen and hold tuples: passes never mutate a tree, they build new
statement lists (see `dataclasses.replace`). Statements and class members carry
their attached comment text in `comment` (raw source, including delimiters).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple, Union


@dataclass(frozen=True)
class Located:
	line: int
	column: int


NO_LOC = Located(line=0, column=0)


class Stmt:
	loc: Located
	comment: Optional[str]


class Expr:
	loc: Located


# Expressions ---------------------------------------------------------------


@dataclass(frozen=True)
class Name(Expr):
	loc: Located
	ident: str


@dataclass(frozen=True)
class This(Expr):
	loc: Located


@dataclass(frozen=True)
class GetProp(Expr):
	"""Dotted member access `value.attr`."""

	loc: Located
	value: Expr
	attr: str


@dataclass(frozen=True)
class Index(Expr):
	loc: Located
	value: Expr
	index: Expr


@dataclass(frozen=True)
class Literal(Expr):
	"""
	String/number/boolean/null literal.

	`raw` is the source spelling and is what the printer emits, so quoting and
	numeric formatting survive a round trip; `value` is the decoded value.
	"""

	loc: Located
	value: object
	raw: str


@dataclass(frozen=True)
class Call(Expr):
	loc: Located
	func: Expr
	args: Tuple[Expr, ...] = ()


@dataclass(frozen=True)
class New(Expr):
	loc: Located
	callee: Expr
	args: Tuple[Expr, ...] = ()


@dataclass(frozen=True)
class Assign(Expr):
	loc: Located
	target: Expr
	value: Expr
	op: str = "="


@dataclass(frozen=True)
class Binary(Expr):
	loc: Located
	op: str
	left: Expr
	right: Expr


@dataclass(frozen=True)
class Unary(Expr):
	loc: Located
	op: str
	operand: Expr


@dataclass(frozen=True)
class Ternary(Expr):
	loc: Located
	condition: Expr
	then_value: Expr
	else_value: Expr


@dataclass(frozen=True)
class Property:
	"""Object literal entry `key: value`; `shorthand` marks `{key}`."""

	key: str
	value: Expr
	shorthand: bool = False


@dataclass(frozen=True)
class ObjectLit(Expr):
	loc: Located
	props: Tuple[Property, ...] = ()


@dataclass(frozen=True)
class ArrayLit(Expr):
	loc: Located
	elements: Tuple[Expr, ...] = ()


@dataclass(frozen=True)
class FunctionExpr(Expr):
	loc: Located
	params: Tuple[str, ...]
	body: Tuple[Stmt, ...]


@dataclass(frozen=True)
class MethodDef:
	loc: Located
	name: str
	params: Tuple[str, ...]
	body: Tuple[Stmt, ...]
	is_static: bool = False
	comment: Optional[str] = None


@dataclass(frozen=True)
class ClassExpr(Expr):
	loc: Located
	superclass: Optional[Expr]
	members: Tuple[MethodDef, ...]


# Statements ----------------------------------------------------------------


@dataclass(frozen=True)
class PatternProp:
	"""One entry of an object pattern: `{key}` or `{key: local}`."""

	key: str
	local: str


@dataclass(frozen=True)
class ObjectPattern:
	props: Tuple[PatternProp, ...]


Binding = Union[str, ObjectPattern]


@dataclass(frozen=True)
class Declarator:
	target: Binding
	value: Optional[Expr] = None


@dataclass(frozen=True)
class VarDecl(Stmt):
	loc: Located
	kind: str  # "const", "let", "var"
	declarators: Tuple[Declarator, ...]
	comment: Optional[str] = None


@dataclass(frozen=True)
class FunctionDecl(Stmt):
	loc: Located
	name: str
	params: Tuple[str, ...]
	body: Tuple[Stmt, ...]
	comment: Optional[str] = None


@dataclass(frozen=True)
class ClassDecl(Stmt):
	loc: Located
	name: str
	superclass: Optional[Expr]
	members: Tuple[MethodDef, ...]
	comment: Optional[str] = None


@dataclass(frozen=True)
class ExprStmt(Stmt):
	loc: Located
	value: Expr
	comment: Optional[str] = None


@dataclass(frozen=True)
class ReturnStmt(Stmt):
	loc: Located
	value: Optional[Expr] = None
	comment: Optional[str] = None


@dataclass(frozen=True)
class ThrowStmt(Stmt):
	loc: Located
	value: Expr
	comment: Optional[str] = None


@dataclass(frozen=True)
class IfStmt(Stmt):
	loc: Located
	condition: Expr
	then_body: Tuple[Stmt, ...]
	# Either a block or a single chained `else if`.
	else_body: Optional[Tuple[Stmt, ...]] = None
	comment: Optional[str] = None


@dataclass(frozen=True)
class EmptyStmt(Stmt):
	"""Placeholder left behind when a commented statement is removed."""

	loc: Located
	comment: Optional[str] = None


@dataclass(frozen=True)
class ImportSpec:
	imported: str
	local: str


@dataclass(frozen=True)
class ImportDecl(Stmt):
	"""
	ES import. Exactly one binding form is used per declaration:

	  import 'src';                       (no bindings)
	  import local from 'src';            (default)
	  import * as local from 'src';       (namespace)
	  import {a, b as c} from 'src';      (specifiers)
	"""

	loc: Located
	source: str
	default: Optional[str] = None
	namespace: Optional[str] = None
	specifiers: Tuple[ImportSpec, ...] = ()
	comment: Optional[str] = None


@dataclass(frozen=True)
class ExportSpec:
	local: str
	exported: str


@dataclass(frozen=True)
class ExportDecl(Stmt):
	"""
	ES export: either an exported declaration (`export class Foo {}`) or a
	specifier list (`export {a, b as c}`; empty for the module marker).
	"""

	loc: Located
	declaration: Optional[Stmt] = None
	specifiers: Tuple[ExportSpec, ...] = ()
	comment: Optional[str] = None


@dataclass(frozen=True)
class Script:
	"""One source file: top-level statements plus comments after the last one."""

	file: str
	body: Tuple[Stmt, ...]
	trailing_comment: Optional[str] = None


__all__ = [
	"Located",
	"NO_LOC",
	"Stmt",
	"Expr",
	"Name",
	"This",
	"GetProp",
	"Index",
	"Literal",
	"Call",
	"New",
	"Assign",
	"Binary",
	"Unary",
	"Ternary",
	"Property",
	"ObjectLit",
	"ArrayLit",
	"FunctionExpr",
	"MethodDef",
	"ClassExpr",
	"PatternProp",
	"ObjectPattern",
	"Binding",
	"Declarator",
	"VarDecl",
	"FunctionDecl",
	"ClassDecl",
	"ExprStmt",
	"ReturnStmt",
	"ThrowStmt",
	"IfStmt",
	"EmptyStmt",
	"ImportSpec",
	"ImportDecl",
	"ExportSpec",
	"ExportDecl",
	"Script",
]
