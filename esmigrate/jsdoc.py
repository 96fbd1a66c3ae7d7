# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Minimal JSDoc inspection.

Only what the conversion needs: recognizing `@typedef` blocks and locating
the `{...}` type expressions that follow block tags, which are the
type-position references rewritten against the type rename table.
"""

from __future__ import annotations

import re
from typing import Callable, Optional

_TAG_TYPE_START = re.compile(r"@[A-Za-z]+\s*\{")
_TYPE_NAME = re.compile(r"[A-Za-z_$][A-Za-z0-9_$]*(?:\.[A-Za-z_$][A-Za-z0-9_$]*)*")


def is_jsdoc(comment: Optional[str]) -> bool:
	return bool(comment) and "/**" in comment  # type: ignore[operator]


def is_typedef(comment: Optional[str]) -> bool:
	return is_jsdoc(comment) and "@typedef" in comment  # type: ignore[operator]


def rewrite_type_names(comment: str, rewrite: Callable[[str], Optional[str]]) -> str:
	"""
	Apply `rewrite` to every dotted name inside the `{...}` type expression of
	each JSDoc tag. `rewrite` returns the replacement or None to keep a name.
	Braces nest (record types), so each expression is scanned to its matching
	close brace.
	"""
	if not is_jsdoc(comment):
		return comment
	out: list[str] = []
	pos = 0
	for match in _TAG_TYPE_START.finditer(comment):
		start = match.end()
		if start < pos:
			continue
		end = _matching_brace(comment, start)
		if end is None:
			break
		out.append(comment[pos:start])
		out.append(_rewrite_names(comment[start:end], rewrite))
		pos = end
	out.append(comment[pos:])
	return "".join(out)


def _matching_brace(text: str, start: int) -> Optional[int]:
	depth = 1
	for i in range(start, len(text)):
		if text[i] == "{":
			depth += 1
		elif text[i] == "}":
			depth -= 1
			if depth == 0:
				return i
	return None


def _rewrite_names(type_expr: str, rewrite: Callable[[str], Optional[str]]) -> str:
	def _sub(match: re.Match) -> str:
		# Record field labels (`{name: T}`) are not type references.
		tail = type_expr[match.end():].lstrip()
		if tail.startswith(":"):
			return match.group(0)
		replacement = rewrite(match.group(0))
		return match.group(0) if replacement is None else replacement

	return _TYPE_NAME.sub(_sub, type_expr)


__all__ = ["is_jsdoc", "is_typedef", "rewrite_type_names"]
