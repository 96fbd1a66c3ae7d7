# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Per-file module metadata.

The conversion passes only read `FileModule` records; this module also
provides the collector that derives them from parsed legacy files.

Legacy shapes recognized at top level:

  goog.module('a.b.Foo');            module namespace
  goog.provide('a.b.Foo');           provided namespace (repeatable)
  goog.require('x.y');               import (any binding form)
  exports = Foo;                     default export        exports -> Foo
  exports = {A, B: b};               named exports         exports.A -> A, ...
  exports.A = ...;                   named export          exports.A -> A
  a.b.Foo = ...;                     provide export        a.b.Foo -> Foo
  /** @typedef {T} */ exports.T;    typedef export (same naming rules)
"""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Dict, FrozenSet, Iterable, List, Mapping, Optional, Set, Tuple

from esmigrate.core.diagnostics import DiagnosticSink
from esmigrate.jsdoc import is_typedef
from esmigrate.names import last_step, qualified_name
from esmigrate.parser.ast import Assign, Call, ExprStmt, Literal, Name, ObjectLit, Script, Stmt, VarDecl
from esmigrate.paths import output_path_for

EXPORTS = "exports"

GOOG_MODULE = "goog.module"
GOOG_PROVIDE = "goog.provide"
GOOG_REQUIRE = "goog.require"
GOOG_DECLARE_LEGACY_NAMESPACE = "goog.module.declareLegacyNamespace"

MODULE_MARKERS = frozenset({GOOG_MODULE, GOOG_PROVIDE, GOOG_DECLARE_LEGACY_NAMESPACE})


@dataclass(frozen=True)
class FileModule:
	"""
	What one source file declares, exports and imports.

	`imported_namespaces_to_symbols` is keyed by the fully qualified namespace
	an importer may `goog.require` by name (the module namespace when it holds
	a single exported value, or `ns.Member` for a named member) and maps to the
	exported symbol(s) bound by that import. `namespace_children` maps a module
	namespace to the members reachable off it as a namespace object.
	"""

	file: str
	output_path: str
	namespaces: Tuple[str, ...] = ()
	is_goog_module: bool = False
	has_imports: bool = False
	has_exports: bool = False
	has_default_export: bool = False
	uses_legacy_form: bool = False
	exported_namespaces_to_local_names: Mapping[str, str] = field(default_factory=dict)
	imported_namespaces_to_symbols: Mapping[str, FrozenSet[str]] = field(default_factory=dict)
	namespace_children: Mapping[str, FrozenSet[str]] = field(default_factory=dict)

	@property
	def root_namespace(self) -> Optional[str]:
		return self.namespaces[0] if self.namespaces else None

	def exported_namespaces(self) -> Tuple[str, ...]:
		"""Namespaces importers can name: declared ones plus exported members."""
		seen: Dict[str, None] = dict.fromkeys(self.namespaces)
		seen.update(dict.fromkeys(self.imported_namespaces_to_symbols))
		return tuple(seen)


def legacy_call_name(stmt: Stmt) -> Optional[str]:
	"""Qualified callee of a top-level `callee(...);` statement, else None."""
	if isinstance(stmt, ExprStmt) and isinstance(stmt.value, Call):
		return qualified_name(stmt.value.func)
	return None


def legacy_call_namespace(call: Call) -> Optional[str]:
	"""The string argument of `goog.module('ns')` / `goog.require('ns')`."""
	if len(call.args) == 1 and isinstance(call.args[0], Literal) and isinstance(call.args[0].value, str):
		return call.args[0].value
	return None


def is_require_call(expr: object) -> bool:
	return isinstance(expr, Call) and qualified_name(expr.func) == GOOG_REQUIRE


class _ModuleBuilder:
	"""Mutable accumulator; frozen into a FileModule by `finish`."""

	def __init__(self, file: str, output_path: str, uses_legacy_form: bool) -> None:
		self.file = file
		self.output_path = output_path
		self.uses_legacy_form = uses_legacy_form
		self.namespaces: List[str] = []
		self.is_goog_module = False
		self.has_imports = False
		self.has_default_export = False
		self.exported: Dict[str, str] = {}
		self.symbols: Dict[str, Set[str]] = {}
		self.children: Dict[str, Set[str]] = {}

	def add_export(self, exported_namespace: str, local_name: str, importable_as: str) -> None:
		self.exported.setdefault(exported_namespace, local_name)
		self.symbols.setdefault(importable_as, set()).add(local_name)

	def add_child(self, namespace: str, child: str) -> None:
		self.children.setdefault(namespace, set()).add(child)

	def finish(self) -> FileModule:
		return FileModule(
			file=self.file,
			output_path=self.output_path,
			namespaces=tuple(self.namespaces),
			is_goog_module=self.is_goog_module,
			has_imports=self.has_imports,
			has_exports=bool(self.exported),
			has_default_export=self.has_default_export,
			uses_legacy_form=self.uses_legacy_form,
			exported_namespaces_to_local_names=MappingProxyType(dict(self.exported)),
			imported_namespaces_to_symbols=MappingProxyType({k: frozenset(v) for k, v in self.symbols.items()}),
			namespace_children=MappingProxyType({k: frozenset(v) for k, v in self.children.items()}),
		)


def collect_file_module(
	script: Script,
	*,
	output_ext: str = ".js",
	keep_legacy: Iterable[str] = (),
) -> FileModule:
	"""Derive the FileModule for one parsed file (top-level statements only)."""
	keep = set(keep_legacy)
	builder = _ModuleBuilder(script.file, output_path_for(script.file, output_ext), script.file in keep)

	for stmt in script.body:
		callee = legacy_call_name(stmt)
		if callee in (GOOG_MODULE, GOOG_PROVIDE):
			ns = legacy_call_namespace(stmt.value)  # type: ignore[attr-defined]
			if ns is not None:
				builder.namespaces.append(ns)
				builder.is_goog_module = builder.is_goog_module or callee == GOOG_MODULE
		elif callee == GOOG_REQUIRE:
			builder.has_imports = True
		elif isinstance(stmt, VarDecl) and any(is_require_call(d.value) for d in stmt.declarators):
			builder.has_imports = True

	if any(ns in keep for ns in builder.namespaces):
		builder.uses_legacy_form = True

	if builder.is_goog_module:
		_collect_goog_module_exports(script, builder)
	elif builder.namespaces:
		_collect_provide_exports(script, builder)
	return builder.finish()


def _export_targets(script: Script):
	"""Yield `(stmt, qualified lhs, rhs-or-None)` for top-level export candidates."""
	for stmt in script.body:
		if not isinstance(stmt, ExprStmt):
			continue
		value = stmt.value
		if isinstance(value, Assign) and value.op == "=":
			name = qualified_name(value.target)
			if name is not None:
				yield stmt, name, value.value
		elif is_typedef(stmt.comment):
			name = qualified_name(value)
			if name is not None:
				yield stmt, name, None


def _collect_goog_module_exports(script: Script, builder: _ModuleBuilder) -> None:
	ns = builder.namespaces[0]
	for _stmt, name, rhs in _export_targets(script):
		if name == EXPORTS and isinstance(rhs, ObjectLit):
			for prop in rhs.props:
				_add_named_module_export(builder, ns, prop.key)
		elif name == EXPORTS and rhs is not None:
			local = rhs.ident if isinstance(rhs, Name) else last_step(ns)
			builder.has_default_export = True
			builder.add_export(EXPORTS, local, ns)
		elif name.startswith(EXPORTS + ".") and name.count(".") == 1:
			_add_named_module_export(builder, ns, last_step(name))


def _add_named_module_export(builder: _ModuleBuilder, ns: str, member: str) -> None:
	builder.add_export(f"{EXPORTS}.{member}", member, f"{ns}.{member}")
	builder.add_child(ns, member)


def _collect_provide_exports(script: Script, builder: _ModuleBuilder) -> None:
	targets = list(_export_targets(script))
	declared = {name for _stmt, name, _rhs in targets}
	for ns in builder.namespaces:
		if ns in declared:
			builder.add_export(ns, last_step(ns), ns)
			continue
		# `ns` is only a container: its direct children are the exports.
		for _stmt, name, _rhs in targets:
			if name.startswith(ns + ".") and name.count(".") == ns.count(".") + 1:
				member = last_step(name)
				builder.add_export(name, member, name)
				builder.add_child(ns, member)


@dataclass
class ModuleIndex:
	"""File and namespace lookups over all FileModules of one run."""

	by_file: Dict[str, FileModule] = field(default_factory=dict)
	by_namespace: Dict[str, FileModule] = field(default_factory=dict)

	def module_for_file(self, file: str) -> Optional[FileModule]:
		return self.by_file.get(file)

	def module_for_namespace(self, namespace: str) -> Optional[FileModule]:
		return self.by_namespace.get(namespace)


def build_module_index(modules: Iterable[FileModule], diagnostics: Optional[DiagnosticSink] = None) -> ModuleIndex:
	"""
	Index modules by file and by every namespace they expose. A namespace
	declared by two files keeps the first (files are visited in the order
	given) and reports `E-NAMESPACE-DUPLICATE`.
	"""
	index = ModuleIndex()
	for module in modules:
		index.by_file[module.file] = module
		for ns in module.exported_namespaces():
			owner = index.by_namespace.get(ns)
			if owner is None:
				index.by_namespace[ns] = module
			elif owner.file != module.file and ns in module.namespaces and diagnostics is not None:
				diagnostics.report(
					None,
					"E-NAMESPACE-DUPLICATE",
					f"namespace {ns} is declared by both {owner.file} and {module.file}",
					file=module.file,
				)
	return index


__all__ = [
	"EXPORTS",
	"GOOG_MODULE",
	"GOOG_PROVIDE",
	"GOOG_REQUIRE",
	"GOOG_DECLARE_LEGACY_NAMESPACE",
	"MODULE_MARKERS",
	"FileModule",
	"ModuleIndex",
	"legacy_call_name",
	"legacy_call_namespace",
	"is_require_call",
	"collect_file_module",
	"build_module_index",
]
