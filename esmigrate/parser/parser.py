# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Parser adapter: lark parse tree -> esmigrate AST.

The grammar lives next to this file (`grammar.lark`). Comments are ignored by
the grammar but collected through a lexer callback; each comment is attached
to the first statement (or class member) that starts after it, which is what
the conversion passes expect of JSDoc blocks.
"""

from __future__ import annotations

import ast as pyast
from pathlib import Path
from typing import List, Optional, Tuple

from lark import Lark, Token, Tree

from .ast import (
	ArrayLit,
	Assign,
	Binary,
	Call,
	ClassDecl,
	ClassExpr,
	Declarator,
	EmptyStmt,
	Expr,
	ExprStmt,
	FunctionDecl,
	FunctionExpr,
	GetProp,
	IfStmt,
	Index,
	Literal,
	Located,
	MethodDef,
	NO_LOC,
	Name,
	New,
	ObjectLit,
	ObjectPattern,
	PatternProp,
	Property,
	ReturnStmt,
	Script,
	Stmt,
	Ternary,
	This,
	ThrowStmt,
	Unary,
	VarDecl,
)

_GRAMMAR_PATH = Path(__file__).with_name("grammar.lark")
_GRAMMAR_SRC = _GRAMMAR_PATH.read_text()


class ParseError(ValueError):
	"""
	User-facing parse error raised from the AST builder (not from the grammar).

	The driver converts this into a parser-phase diagnostic, the same way it
	handles lark's `UnexpectedInput`.
	"""

	def __init__(self, message: str, *, loc: Located) -> None:
		super().__init__(message)
		self.loc = loc


class _CommentCollector:
	"""Lexer callback target; reset before every parse."""

	def __init__(self) -> None:
		self.tokens: List[Token] = []

	def __call__(self, tok: Token) -> Token:
		self.tokens.append(tok)
		return tok


_COMMENTS = _CommentCollector()

_PARSER = Lark(
	_GRAMMAR_SRC,
	parser="lalr",
	lexer="basic",
	start="start",
	propagate_positions=True,
	maybe_placeholders=False,
	lexer_callbacks={"COMMENT": _COMMENTS},
)


class _CommentQueue:
	"""Source-ordered comments, handed out to statements as they are built."""

	def __init__(self, tokens: List[Token]) -> None:
		self._tokens = sorted(tokens, key=lambda t: t.start_pos)
		self._idx = 0

	def take_before(self, pos: int) -> Optional[str]:
		parts: List[str] = []
		while self._idx < len(self._tokens) and self._tokens[self._idx].end_pos <= pos:
			parts.append(self._tokens[self._idx].value)
			self._idx += 1
		return "\n".join(parts) if parts else None

	def rest(self) -> Optional[str]:
		parts = [t.value for t in self._tokens[self._idx:]]
		self._idx = len(self._tokens)
		return "\n".join(parts) if parts else None


def parse_script(source: str, file: str = "<memory>") -> Script:
	"""Parse one legacy source file. Raises lark `UnexpectedInput` or `ParseError`."""
	_COMMENTS.tokens = []
	tree = _PARSER.parse(source)
	builder = _ScriptBuilder(file, _CommentQueue(_COMMENTS.tokens))
	_COMMENTS.tokens = []
	return builder.build(tree)


def parse_expr(source: str) -> Expr:
	"""Parse a single expression (test helper); the source must be a valid statement."""
	script = parse_script(source.rstrip().rstrip(";") + ";")
	if len(script.body) != 1 or not isinstance(script.body[0], ExprStmt):
		raise ValueError(f"expected a single expression, got {source!r}")
	return script.body[0].value


class _ScriptBuilder:
	def __init__(self, file: str, comments: _CommentQueue) -> None:
		self.file = file
		self.comments = comments

	def build(self, tree: Tree) -> Script:
		body = tuple(self._build_stmt(child) for child in tree.children if isinstance(child, Tree))
		return Script(file=self.file, body=body, trailing_comment=self.comments.rest())

	# Statements ----------------------------------------------------------

	def _take_comment(self, tree: Tree) -> Optional[str]:
		if tree.meta.empty:
			return None
		return self.comments.take_before(tree.meta.start_pos)

	def _build_stmt(self, tree: Tree) -> Stmt:
		comment = self._take_comment(tree)
		loc = _loc(tree)
		kind = _name(tree)
		if kind == "var_decl":
			kind_tok = _subtree(tree, "var_kind").children[0]
			declarators = tuple(self._build_declarator(c) for c in _subtrees(tree, "declarator"))
			return VarDecl(loc=loc, kind=kind_tok.value, declarators=declarators, comment=comment)
		if kind == "function_decl":
			name_tok = _token(tree, "NAME")
			return FunctionDecl(
				loc=loc,
				name=name_tok.value,
				params=_params(tree),
				body=self._build_block(_subtree(tree, "block")),
				comment=comment,
			)
		if kind == "class_decl":
			name_tok = _token(tree, "NAME")
			superclass, members = self._build_class_parts(tree)
			return ClassDecl(loc=loc, name=name_tok.value, superclass=superclass, members=members, comment=comment)
		if kind == "return_stmt":
			value = self._build_expr(tree.children[0]) if tree.children else None
			return ReturnStmt(loc=loc, value=value, comment=comment)
		if kind == "throw_stmt":
			return ThrowStmt(loc=loc, value=self._build_expr(tree.children[0]), comment=comment)
		if kind == "if_stmt":
			return self._build_if(tree, loc, comment)
		if kind == "expr_stmt":
			return ExprStmt(loc=loc, value=self._build_expr(tree.children[0]), comment=comment)
		if kind == "empty_stmt":
			return EmptyStmt(loc=loc, comment=comment)
		raise AssertionError(f"unexpected statement node {kind!r} (grammar/builder out of sync)")

	def _build_if(self, tree: Tree, loc: Located, comment: Optional[str]) -> IfStmt:
		cond = self._build_expr(tree.children[0])
		then_body = self._build_block(tree.children[1])
		else_body: Optional[Tuple[Stmt, ...]] = None
		else_clause = _subtree_opt(tree, "else_clause")
		if else_clause is not None:
			target = else_clause.children[0]
			if _name(target) == "block":
				else_body = self._build_block(target)
			else:
				else_body = (self._build_stmt(target),)
		return IfStmt(loc=loc, condition=cond, then_body=then_body, else_body=else_body, comment=comment)

	def _build_block(self, tree: Tree) -> Tuple[Stmt, ...]:
		return tuple(self._build_stmt(c) for c in tree.children if isinstance(c, Tree))

	def _build_declarator(self, tree: Tree) -> Declarator:
		binding_node = tree.children[0]
		target = binding_node.children[0]
		if isinstance(target, Token):
			binding: object = target.value
		else:
			props = []
			for prop in _subtrees(target, "pattern_prop"):
				names = [t.value for t in prop.children if isinstance(t, Token)]
				props.append(PatternProp(key=names[0], local=names[-1]))
			binding = ObjectPattern(props=tuple(props))
		value = self._build_expr(tree.children[1]) if len(tree.children) > 1 else None
		return Declarator(target=binding, value=value)  # type: ignore[arg-type]

	def _build_class_parts(self, tree: Tree) -> Tuple[Optional[Expr], Tuple[MethodDef, ...]]:
		superclass = None
		extends = _subtree_opt(tree, "extends_clause")
		if extends is not None:
			superclass = _qualified_expr(extends.children[0])
		members = []
		for member in _subtrees(_subtree(tree, "class_body"), "class_member"):
			comment = self._take_comment(member)
			is_static = any(isinstance(c, Token) and c.type == "STATIC" for c in member.children)
			members.append(
				MethodDef(
					loc=_loc(member),
					name=_token(member, "NAME").value,
					params=_params(member),
					body=self._build_block(_subtree(member, "block")),
					is_static=is_static,
					comment=comment,
				)
			)
		return superclass, tuple(members)

	# Expressions ---------------------------------------------------------

	def _build_expr(self, node: object) -> Expr:
		if not isinstance(node, Tree):
			raise TypeError(f"Unexpected node type: {type(node)}")
		name = _name(node)
		loc = _loc(node)
		if name == "name":
			return Name(loc=loc, ident=node.children[0].value)
		if name == "this":
			return This(loc=loc)
		if name == "string":
			tok = node.children[0]
			return Literal(loc=loc, value=_decode_string(tok), raw=tok.value)
		if name == "number":
			tok = node.children[0]
			num: object = float(tok.value) if any(c in tok.value for c in ".eE") else int(tok.value)
			return Literal(loc=loc, value=num, raw=tok.value)
		if name in ("true", "false"):
			return Literal(loc=loc, value=name == "true", raw=name)
		if name == "null":
			return Literal(loc=loc, value=None, raw="null")
		if name == "getprop":
			return GetProp(loc=loc, value=self._build_expr(node.children[0]), attr=node.children[1].value)
		if name == "index":
			return Index(loc=loc, value=self._build_expr(node.children[0]), index=self._build_expr(node.children[1]))
		if name == "call":
			args_node = node.children[1] if len(node.children) > 1 else None
			return Call(loc=loc, func=self._build_expr(node.children[0]), args=self._build_args(args_node))
		if name == "new":
			callee = _qualified_expr(_subtree(node, "qualified"))
			return New(loc=loc, callee=callee, args=self._build_args(_subtree_opt(node, "args")))
		if name == "assign":
			target, op_node, value = node.children
			return Assign(loc=loc, target=self._build_expr(target), value=self._build_expr(value), op=op_node.children[0].value)
		if name == "ternary":
			cond, then_value, else_value = node.children
			return Ternary(
				loc=loc,
				condition=self._build_expr(cond),
				then_value=self._build_expr(then_value),
				else_value=self._build_expr(else_value),
			)
		if name == "binary":
			left, op_node, right = node.children
			return Binary(loc=loc, op=op_node.children[0].value, left=self._build_expr(left), right=self._build_expr(right))
		if name == "unary":
			op_node, operand = node.children
			return Unary(loc=loc, op=op_node.children[0].value, operand=self._build_expr(operand))
		if name == "object_lit":
			return ObjectLit(loc=loc, props=tuple(self._build_prop(p) for p in node.children if isinstance(p, Tree)))
		if name == "array_lit":
			return ArrayLit(loc=loc, elements=tuple(self._build_expr(c) for c in node.children if isinstance(c, Tree)))
		if name == "function_expr":
			return FunctionExpr(loc=loc, params=_params(node), body=self._build_block(_subtree(node, "block")))
		if name == "class_expr":
			superclass, members = self._build_class_parts(node)
			return ClassExpr(loc=loc, superclass=superclass, members=members)
		raise AssertionError(f"unexpected expression node {name!r} (grammar/builder out of sync)")

	def _build_args(self, node: Optional[Tree]) -> Tuple[Expr, ...]:
		if node is None:
			return ()
		return tuple(self._build_expr(c) for c in node.children if isinstance(c, Tree))

	def _build_prop(self, tree: Tree) -> Property:
		key_tok = tree.children[0]
		key = _decode_string(key_tok) if key_tok.type == "STRING" else key_tok.value
		if _name(tree) == "shorthand_prop":
			return Property(key=key, value=Name(loc=_loc_from_token(key_tok), ident=key), shorthand=True)
		return Property(key=key, value=self._build_expr(tree.children[1]))


def _decode_string(tok: Token) -> str:
	"""
	Decode a quoted STRING token. JavaScript escapes used by legacy module
	code (quotes, backslashes, \\n, \\t, \\xHH, \\uHHHH) read the same as
	Python's, so the literal evaluator is reused.
	"""
	try:
		value = pyast.literal_eval(tok.value)
	except (SyntaxError, ValueError) as err:
		raise ParseError(f"invalid string literal {tok.value}: {err}", loc=_loc_from_token(tok)) from err
	if not isinstance(value, str):
		raise ParseError(f"invalid string literal {tok.value}", loc=_loc_from_token(tok))
	return value


def _qualified_expr(tree: Tree) -> Expr:
	toks = [t for t in tree.children if isinstance(t, Token)]
	expr: Expr = Name(loc=_loc_from_token(toks[0]), ident=toks[0].value)
	for tok in toks[1:]:
		expr = GetProp(loc=_loc_from_token(toks[0]), value=expr, attr=tok.value)
	return expr


def _params(tree: Tree) -> Tuple[str, ...]:
	params = _subtree_opt(tree, "params")
	if params is None:
		return ()
	return tuple(t.value for t in params.children if isinstance(t, Token))


def _subtrees(tree: Tree, name: str) -> List[Tree]:
	return [c for c in tree.children if isinstance(c, Tree) and _name(c) == name]


def _subtree_opt(tree: Tree, name: str) -> Optional[Tree]:
	return next((c for c in tree.children if isinstance(c, Tree) and _name(c) == name), None)


def _subtree(tree: Tree, name: str) -> Tree:
	found = _subtree_opt(tree, name)
	if found is None:
		raise AssertionError(f"{_name(tree)} node missing {name} child")
	return found


def _token(tree: Tree, type_name: str) -> Token:
	tok = next((c for c in tree.children if isinstance(c, Token) and c.type == type_name), None)
	if tok is None:
		raise AssertionError(f"{_name(tree)} node missing {type_name} token")
	return tok


def _loc(tree: Tree) -> Located:
	meta = tree.meta
	if meta.empty:
		return NO_LOC
	return Located(line=meta.line, column=meta.column)


def _loc_from_token(token: Token) -> Located:
	return Located(line=token.line, column=token.column)


def _name(node: Tree | Token) -> str:
	if isinstance(node, Tree):
		data = node.data
		if isinstance(data, Token):
			return data.value
		return data
	if isinstance(node, Token):
		return node.type
	return str(node)


__all__ = ["ParseError", "parse_script", "parse_expr"]
