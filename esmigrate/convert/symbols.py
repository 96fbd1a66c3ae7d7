# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Exported-symbol identities and the registry of export-candidate declarations.

The registry answers one question for the export converter: "is the value
assigned to this export exactly a top-level declaration of the same file?"
When it is, the declaration itself becomes `export class Foo {}` instead of
being followed by a separate export statement.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Optional

from esmigrate.metadata import EXPORTS
from esmigrate.names import qualified_name
from esmigrate.parser.ast import ClassDecl, Expr, FunctionDecl, Stmt, VarDecl


@dataclass(frozen=True)
class ExportedSymbol:
	"""
	`(file, local_name, exported_name)` identity, used only as a map key.

	`local_name` is what the symbol is declared as (`Foo` in `class Foo {}`);
	`exported_name` is what importers see. A direct export has both equal.
	"""

	file: str
	local_name: str
	exported_name: str

	@classmethod
	def of(cls, file: str, local_name: str, exported_name: str) -> "ExportedSymbol":
		return cls(file=file, local_name=local_name, exported_name=exported_name)

	@classmethod
	def from_export_assignment(
		cls,
		rhs: Expr,
		exported_namespace: str,
		exported_symbol: str,
		file: str,
	) -> "ExportedSymbol":
		"""
		Identity of the value exported by `<exported_namespace> = rhs`:

		  exports = Foo          ->  (file, Foo, Foo)     default export
		  exports.Bar = Foo      ->  (file, Foo, Bar)     named export
		  a.b.Baz = Foo          ->  (file, Foo, <meta>)  provide form
		"""
		local_name = qualified_name(rhs) or exported_symbol
		if exported_namespace == EXPORTS:
			exported_name = local_name
		elif exported_namespace.startswith(EXPORTS + "."):
			exported_name = exported_namespace[len(EXPORTS) + 1:]
		else:
			exported_name = exported_symbol
		return cls(file=file, local_name=local_name, exported_name=exported_name)


def declared_name(stmt: Stmt) -> Optional[str]:
	"""Name of a top-level `class`/`function`/single-binding `const` declaration."""
	if isinstance(stmt, (ClassDecl, FunctionDecl)):
		return stmt.name
	if isinstance(stmt, VarDecl) and stmt.kind == "const" and len(stmt.declarators) == 1:
		target = stmt.declarators[0].target
		if isinstance(target, str):
			return target
	return None


@dataclass
class SymbolRegistry:
	"""Export-candidate declarations recorded during the export traversal."""

	_nodes: Dict[ExportedSymbol, Stmt] = field(default_factory=dict)

	def record(self, symbol: ExportedSymbol, node: Stmt) -> None:
		self._nodes[symbol] = node

	def record_declaration(self, file: str, stmt: Stmt) -> Optional[ExportedSymbol]:
		name = declared_name(stmt)
		if name is None:
			return None
		symbol = ExportedSymbol.of(file, name, name)
		self.record(symbol, stmt)
		return symbol

	def lookup(self, symbol: ExportedSymbol) -> Optional[Stmt]:
		return self._nodes.get(symbol)

	def __contains__(self, symbol: object) -> bool:
		return symbol in self._nodes

	def __len__(self) -> int:
		return len(self._nodes)


__all__ = ["ExportedSymbol", "SymbolRegistry", "declared_name"]
