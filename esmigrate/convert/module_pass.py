# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Whole-program module conversion.

Runs the export, import and reference traversals in that order, each over
every file (sorted by path) before the next one starts. The symbol registry
and the two rename tables are the only state shared between traversals; the
tables are frozen before references are rewritten.
"""

from __future__ import annotations

from typing import List, Optional, Sequence

from esmigrate.comments import NodeComments
from esmigrate.convert.exports import ExportConverter
from esmigrate.convert.imports import ImportConverter
from esmigrate.convert.references import ReferenceRewriter
from esmigrate.convert.rename import FrozenRenameTable, RenameTables
from esmigrate.convert.symbols import SymbolRegistry
from esmigrate.core.diagnostics import DiagnosticSink
from esmigrate.metadata import ModuleIndex
from esmigrate.parser.ast import Script


class ModuleConversionPass:
	def __init__(
		self,
		index: ModuleIndex,
		*,
		already_converted_prefix: str = "converted",
		diagnostics: Optional[DiagnosticSink] = None,
	) -> None:
		self.index = index
		self.already_converted_prefix = already_converted_prefix
		self.diagnostics = diagnostics if diagnostics is not None else DiagnosticSink("convert")
		self.comments = NodeComments()
		self.registry = SymbolRegistry()
		self.tables = RenameTables()
		self.value_rewrite: Optional[FrozenRenameTable] = None
		self.type_rewrite: Optional[FrozenRenameTable] = None

	def process(self, scripts: Sequence[Script]) -> List[Script]:
		"""Convert `scripts`; the result is ordered by file path."""
		if self.value_rewrite is not None:
			raise AssertionError("ModuleConversionPass.process may only run once")
		ordered = sorted(scripts, key=lambda s: s.file)

		exports = ExportConverter(self.index, self.registry, self.tables, self.comments)
		ordered = [exports.convert_script(s) for s in ordered]

		imports = ImportConverter(
			self.index,
			self.tables,
			self.diagnostics,
			already_converted_prefix=self.already_converted_prefix,
			comments=self.comments,
		)
		ordered = [imports.convert_script(s) for s in ordered]

		self.value_rewrite, self.type_rewrite = self.tables.freeze()
		rewriter = ReferenceRewriter(self.value_rewrite, self.type_rewrite)
		return [rewriter.rewrite_script(s) for s in ordered]


__all__ = ["ModuleConversionPass"]
