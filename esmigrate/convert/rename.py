# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Rename tables: `(file, qualified legacy name) -> new local name`.

Two tables are kept because type positions can name a namespace that has no
value binding of its own. Tables are write-once per key: the first
registration wins and later writes for the same key are ignored, so every
lookup during the run sees one stable target. The export and import passes
write; `freeze()` hands the reference rewriter a read-only view.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Dict, Iterator, Mapping, Optional, Tuple


class RenameTable:
	def __init__(self) -> None:
		self._rows: Dict[str, Dict[str, str]] = {}

	def put(self, file: str, name: str, local: str) -> str:
		"""Register `name -> local` for `file`; returns the value now in effect."""
		row = self._rows.setdefault(file, {})
		return row.setdefault(name, local)

	def get(self, file: str, name: str) -> Optional[str]:
		return self._rows.get(file, {}).get(name)

	def contains(self, file: str, name: str) -> bool:
		return name in self._rows.get(file, {})

	def row(self, file: str) -> Mapping[str, str]:
		return MappingProxyType(self._rows.get(file, {}))

	def freeze(self) -> "FrozenRenameTable":
		return FrozenRenameTable(
			MappingProxyType({f: MappingProxyType(dict(row)) for f, row in self._rows.items()})
		)


@dataclass(frozen=True)
class FrozenRenameTable:
	"""Read-only rename table handed to the reference rewriting traversal."""

	rows: Mapping[str, Mapping[str, str]] = field(default_factory=lambda: MappingProxyType({}))

	def row(self, file: str) -> Mapping[str, str]:
		return self.rows.get(file, MappingProxyType({}))

	def get(self, file: str, name: str) -> Optional[str]:
		return self.row(file).get(name)

	def items(self) -> Iterator[Tuple[str, str, str]]:
		for file, row in self.rows.items():
			for name, local in row.items():
				yield file, name, local


class RenameTables:
	"""The value/type table pair written by the export and import passes."""

	def __init__(self) -> None:
		self.value_rewrite = RenameTable()
		self.type_rewrite = RenameTable()

	def register_local_symbol(self, file: str, full_name: str, namespace: str, local_name: str) -> None:
		"""
		Record that `full_name` now reads `local_name` in `file`. The type table
		also maps the bare `namespace`, so type references to the namespace
		resolve even when no value reference to it exists.
		"""
		self.value_rewrite.put(file, full_name, local_name)
		self.type_rewrite.put(file, full_name, local_name)
		self.type_rewrite.put(file, namespace, local_name)

	def freeze(self) -> Tuple[FrozenRenameTable, FrozenRenameTable]:
		return self.value_rewrite.freeze(), self.type_rewrite.freeze()


__all__ = ["RenameTable", "FrozenRenameTable", "RenameTables"]
