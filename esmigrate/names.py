# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Dotted-name helpers shared by the conversion passes.

`find_longest_prefix` is the single matching rule used everywhere a qualified
name is compared against namespaces: export recognition, import resolution
and reference rewriting all go through it.
"""

from __future__ import annotations

from typing import Iterable, Optional

from esmigrate.parser.ast import Expr, GetProp, Name


def find_longest_prefix(name: Optional[str], prefixes: Iterable[str]) -> Optional[str]:
	"""
	Return the longest `p` in `prefixes` with `name == p` or `name` starting
	with `p + "."`; None when nothing matches.

	Two distinct prefixes of the same length cannot both match on a dot
	boundary, so "longest" is unambiguous.
	"""
	if not name:
		return None
	best: Optional[str] = None
	for prefix in prefixes:
		if not prefix:
			continue
		if name == prefix or name.startswith(prefix + "."):
			if best is None or len(prefix) > len(best):
				best = prefix
	return best


def qualified_name(expr: Expr) -> Optional[str]:
	"""Dotted name of a `Name`/`GetProp` chain (`a.b.c`), or None for anything else."""
	if isinstance(expr, Name):
		return expr.ident
	if isinstance(expr, GetProp):
		base = qualified_name(expr.value)
		if base is None:
			return None
		return f"{base}.{expr.attr}"
	return None


def matches_qualified_name(expr: Expr, name: str) -> bool:
	return qualified_name(expr) == name


def last_step(name: str) -> str:
	"""`a.b.C` -> `C`."""
	return name.rsplit(".", 1)[-1]


def name_expr(dotted: str, like: Expr) -> Expr:
	"""Build a `Name`/`GetProp` chain for `dotted`, reusing the location of `like`."""
	parts = dotted.split(".")
	expr: Expr = Name(loc=like.loc, ident=parts[0])
	for part in parts[1:]:
		expr = GetProp(loc=like.loc, value=expr, attr=part)
	return expr


def replace_prefix(expr: Expr, prefix: str, replacement: str) -> Expr:
	"""
	Rebuild the qualified expression `expr` with its leading `prefix` replaced
	by `replacement` (itself possibly dotted).

	  replace_prefix(a.b.C.foo, "a.b.C", "C")  ->  C.foo
	"""
	full = qualified_name(expr)
	if full is None or not (full == prefix or full.startswith(prefix + ".")):
		raise AssertionError(f"{full!r} does not start with namespace {prefix!r}")
	suffix = full[len(prefix):]
	return name_expr(replacement + suffix, expr)


__all__ = [
	"find_longest_prefix",
	"qualified_name",
	"matches_qualified_name",
	"last_step",
	"name_expr",
	"replace_prefix",
]
