# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Comment association for immutable statements.

Comments live on the statement they precede (`Stmt.comment`). Because nodes
are frozen, every operation returns the node that now carries the comment
instead of updating a side table.
"""

from __future__ import annotations

import dataclasses
from typing import Optional, TypeVar

from esmigrate.parser.ast import Stmt

S = TypeVar("S", bound=Stmt)


class NodeComments:
	def has_comment(self, node: Stmt) -> bool:
		return bool(getattr(node, "comment", None))

	def get_comment(self, node: Stmt) -> Optional[str]:
		return getattr(node, "comment", None)

	def attach(self, node: S, text: str) -> S:
		"""Add `text` after any comment already attached to `node`."""
		existing = self.get_comment(node)
		merged = f"{existing}\n{text}" if existing else text
		return dataclasses.replace(node, comment=merged)  # type: ignore[type-var]

	def move_comment(self, src: Stmt, dst: S) -> S:
		"""Return `dst` carrying the comment of `src` (ahead of its own)."""
		text = self.get_comment(src)
		if not text:
			return dst
		own = self.get_comment(dst)
		return dataclasses.replace(dst, comment=f"{text}\n{own}" if own else text)  # type: ignore[type-var]

	def strip(self, node: S) -> S:
		if not self.has_comment(node):
			return node
		return dataclasses.replace(node, comment=None)  # type: ignore[type-var]

	def replace_with_comment(self, node: Stmt, replacement: S) -> S:
		"""`replacement` takes the place of `node` and keeps its comment."""
		return self.move_comment(node, replacement)


__all__ = ["NodeComments"]
