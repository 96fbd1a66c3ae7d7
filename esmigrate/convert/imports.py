# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Import conversion (second traversal).

Recognized sites, top level only:

  const Foo = goog.require('a.b.Foo');        binding
  const {A, B: b} = goog.require('a.b');      destructuring
  goog.require('a.b.Foo');                    bare

Each site is parsed into a `ModuleImport` and replaced by one or two ES
imports. The shape depends on what the imported namespace is:

  already migrated (`<prefix>.x.y`)   path derived from the namespace
  legacy-kept module                  `goog:`-prefixed specifier
  exported symbol(s)                  import {Foo} from './Foo'
  namespace with members              import * as Foo from './Foo'
  nothing importable                  import './Foo'

Sites that cannot be converted are reported and left in place.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, replace
from enum import Enum
from typing import List, Optional, Tuple, Union

from esmigrate.comments import NodeComments
from esmigrate.convert.rename import RenameTables
from esmigrate.core.diagnostics import DiagnosticSink
from esmigrate.metadata import GOOG_REQUIRE, FileModule, ModuleIndex, is_require_call, legacy_call_name, legacy_call_namespace
from esmigrate.names import last_step
from esmigrate.parser.ast import ExprStmt, ImportDecl, ImportSpec, ObjectPattern, Script, Stmt, VarDecl
from esmigrate.paths import import_path, namespace_to_path

LEGACY_SCHEME = "goog:"


class ImportKind(Enum):
	BINDING = "binding"
	DESTRUCTURING = "destructuring"
	BARE = "bare"


@dataclass(frozen=True)
class ImportBinding:
	"""
	One name an import site introduces.

	`full_name` is how the file referred to the value before conversion,
	`namespace` the qualified namespace the binding resolves to and
	`imported_name` the member name for destructuring (`B` in `{B: b}`).
	"""

	full_name: str
	local_name: str
	imported_name: str
	namespace: str


@dataclass(frozen=True)
class ModuleImport:
	site: Stmt
	file: str
	kind: ImportKind
	base_namespace: str
	required_namespace: str
	bindings: Tuple[ImportBinding, ...]

	@property
	def is_destructuring(self) -> bool:
		return self.kind is ImportKind.DESTRUCTURING

	@property
	def namespace_suffix(self) -> str:
		return last_step(self.required_namespace)

	@property
	def local_names(self) -> Tuple[str, ...]:
		return tuple(b.local_name for b in self.bindings)

	def backup_name(self, local_name: str) -> str:
		"""Alias for a namespace import following a named import of the same module."""
		suffix = self.namespace_suffix
		return suffix + "Exports" if suffix == local_name else suffix

	def is_already_converted(self, prefix: str) -> bool:
		return bool(prefix) and self.required_namespace.startswith(prefix + ".")


@dataclass(frozen=True)
class ImportSiteError:
	site: Stmt
	code: str
	message: str


def parse_import_site(stmt: Stmt, file: str) -> Union[ModuleImport, ImportSiteError, None]:
	"""
	Build the `ModuleImport` for `stmt`; None when `stmt` is not an import
	site, `ImportSiteError` when it is one but malformed.
	"""
	if isinstance(stmt, VarDecl):
		last = stmt.declarators[-1]
		if not is_require_call(last.value):
			return None
		namespace = legacy_call_namespace(last.value)  # type: ignore[arg-type]
		if namespace is None:
			return None
		targets = [d.target for d in stmt.declarators]
		if len(targets) == 1 and isinstance(targets[0], ObjectPattern):
			props = targets[0].props
			if not props:
				return ImportSiteError(stmt, "E-IMPORT-ARITY", f"Destructuring import of {namespace} binds no names")
			bindings = tuple(
				ImportBinding(
					full_name=p.local,
					local_name=p.local,
					imported_name=p.key,
					namespace=f"{namespace}.{p.key}",
				)
				for p in props
			)
			return ModuleImport(
				site=stmt,
				file=file,
				kind=ImportKind.DESTRUCTURING,
				base_namespace=namespace,
				required_namespace=f"{namespace}.{props[0].key}",
				bindings=bindings,
			)
		if len(targets) != 1:
			got = ", ".join(_binding_text(t) for t in targets)
			return ImportSiteError(
				stmt,
				"E-IMPORT-ARITY",
				f"Non destructuring imports should have only one local name, got [{got}]",
			)
		local = targets[0]
		if not isinstance(local, str):
			raise AssertionError(f"single import target must be a name, got {type(local).__name__}")
		return ModuleImport(
			site=stmt,
			file=file,
			kind=ImportKind.BINDING,
			base_namespace=namespace,
			required_namespace=namespace,
			bindings=(ImportBinding(full_name=local, local_name=local, imported_name=last_step(namespace), namespace=namespace),),
		)
	if legacy_call_name(stmt) == GOOG_REQUIRE:
		if not isinstance(stmt, ExprStmt):
			raise AssertionError(f"bare require must be an expression statement, got {type(stmt).__name__}")
		namespace = legacy_call_namespace(stmt.value)  # type: ignore[arg-type]
		if namespace is None:
			return None
		suffix = last_step(namespace)
		return ModuleImport(
			site=stmt,
			file=file,
			kind=ImportKind.BARE,
			base_namespace=namespace,
			required_namespace=namespace,
			bindings=(ImportBinding(full_name=namespace, local_name=suffix, imported_name=suffix, namespace=namespace),),
		)
	return None


def _binding_text(target: object) -> str:
	if isinstance(target, ObjectPattern):
		return "{" + ", ".join(p.key if p.key == p.local else f"{p.key}: {p.local}" for p in target.props) + "}"
	return str(target)


class ImportConverter:
	def __init__(
		self,
		index: ModuleIndex,
		tables: RenameTables,
		diagnostics: DiagnosticSink,
		*,
		already_converted_prefix: str = "converted",
		comments: Optional[NodeComments] = None,
	) -> None:
		self.index = index
		self.tables = tables
		self.diagnostics = diagnostics
		self.already_converted_prefix = already_converted_prefix
		self.comments = comments or NodeComments()

	def convert_script(self, script: Script) -> Script:
		out: List[Stmt] = []
		for stmt in script.body:
			site = parse_import_site(stmt, script.file)
			if site is None:
				out.append(stmt)
			elif isinstance(site, ImportSiteError):
				self.diagnostics.report(stmt.loc, site.code, site.message, file=script.file)
				out.append(stmt)
			else:
				out.extend(self.convert_require(site))
		return replace(script, body=tuple(out))

	def target_module(self, imp: ModuleImport) -> Optional[FileModule]:
		return self.index.module_for_namespace(imp.required_namespace) or self.index.module_for_namespace(
			imp.base_namespace
		)

	def convert_require(self, imp: ModuleImport) -> List[Stmt]:
		"""ES import statement(s) replacing `imp.site`; the site itself when unresolved."""
		if imp.is_already_converted(self.already_converted_prefix):
			return [self._convert_already_converted(imp)]
		target = self.target_module(imp)
		if target is None:
			self.diagnostics.report(
				imp.site.loc,
				"E-IMPORT-UNRESOLVED",
				f"Module {imp.base_namespace} does not exist.",
				file=imp.file,
			)
			return [imp.site]
		if target.uses_legacy_form:
			return [self._convert_legacy_kept(imp, target)]
		return self._convert_module(imp, target)

	def _output_path(self, file: str) -> str:
		module = self.index.module_for_file(file)
		return module.output_path if module is not None else file

	def _convert_already_converted(self, imp: ModuleImport) -> Stmt:
		prefix = self.already_converted_prefix
		original_path = namespace_to_path(imp.required_namespace[len(prefix) + 1:])
		first = imp.bindings[0]
		if imp.namespace_suffix == first.local_name and first.full_name != imp.required_namespace:
			original_path = re.sub("/" + re.escape(first.local_name) + "$", "", original_path)
		source = import_path(self._output_path(imp.file), original_path)
		if imp.kind is ImportKind.DESTRUCTURING:
			decl = ImportDecl(
				loc=imp.site.loc,
				source=source,
				specifiers=tuple(ImportSpec(imported=b.imported_name, local=b.local_name) for b in imp.bindings),
			)
		elif imp.kind is ImportKind.BINDING:
			decl = ImportDecl(loc=imp.site.loc, source=source, namespace=first.local_name)
		else:
			decl = ImportDecl(loc=imp.site.loc, source=source)
		return self.comments.replace_with_comment(imp.site, decl)

	def _convert_legacy_kept(self, imp: ModuleImport, target: FileModule) -> Stmt:
		loc = imp.site.loc
		if imp.is_destructuring:
			decl = ImportDecl(
				loc=loc,
				source=LEGACY_SCHEME + imp.base_namespace,
				specifiers=tuple(ImportSpec(imported=b.imported_name, local=b.local_name) for b in imp.bindings),
			)
		elif target.has_default_export:
			decl = ImportDecl(loc=loc, source=LEGACY_SCHEME + imp.required_namespace, default=imp.bindings[0].local_name)
		else:
			decl = ImportDecl(loc=loc, source=LEGACY_SCHEME + imp.required_namespace, namespace=imp.bindings[0].local_name)
		for b in imp.bindings:
			self.tables.register_local_symbol(imp.file, b.full_name, b.namespace, b.local_name)
			self.tables.value_rewrite.put(imp.file, b.namespace, b.local_name)
		return self.comments.replace_with_comment(imp.site, decl)

	def _convert_module(self, imp: ModuleImport, target: FileModule) -> List[Stmt]:
		source = import_path(self._output_path(imp.file), target.output_path)
		symbols = target.imported_namespaces_to_symbols
		loc = imp.site.loc
		stmts: List[Stmt] = []

		if imp.is_destructuring:
			specs = []
			for b in imp.bindings:
				if b.namespace not in symbols:
					self.diagnostics.report(
						loc,
						"W-IMPORT-MEMBER",
						f"Module {imp.base_namespace} has no export named {b.imported_name}",
						file=imp.file,
						severity="warning",
					)
					continue
				specs.append(ImportSpec(imported=_pick_symbol(symbols[b.namespace], b.imported_name), local=b.local_name))
				self.tables.register_local_symbol(imp.file, b.full_name, b.namespace, b.local_name)
			if specs:
				stmts.append(ImportDecl(loc=loc, source=source, specifiers=tuple(specs)))
		else:
			binding = imp.bindings[0]
			local = binding.local_name
			exported = symbols.get(imp.required_namespace)
			if exported:
				symbol = _pick_symbol(exported, imp.namespace_suffix)
				stmts.append(ImportDecl(loc=loc, source=source, specifiers=(ImportSpec(imported=symbol, local=local),)))
				self.tables.register_local_symbol(imp.file, binding.full_name, imp.required_namespace, local)
				local = imp.backup_name(local)
			children = target.namespace_children.get(imp.required_namespace)
			if children:
				stmts.append(ImportDecl(loc=loc, source=source, namespace=local))
				for child in sorted(children):
					full_child = f"{binding.full_name}.{child}"
					if not self.tables.value_rewrite.contains(imp.file, full_child):
						self.tables.register_local_symbol(
							imp.file, full_child, f"{imp.required_namespace}.{child}", f"{local}.{child}"
						)

		if not stmts:
			stmts.append(ImportDecl(loc=loc, source=source))
		stmts[0] = self.comments.move_comment(imp.site, stmts[0])
		return stmts


def _pick_symbol(symbols: frozenset, preferred: str) -> str:
	if preferred in symbols:
		return preferred
	return sorted(symbols)[0]


__all__ = [
	"LEGACY_SCHEME",
	"ImportKind",
	"ImportBinding",
	"ModuleImport",
	"ImportSiteError",
	"ImportConverter",
	"parse_import_site",
]
