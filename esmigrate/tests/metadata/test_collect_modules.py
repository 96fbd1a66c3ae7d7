# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
from __future__ import annotations

from esmigrate.core.diagnostics import DiagnosticSink
from esmigrate.metadata import build_module_index, collect_file_module
from esmigrate.parser import parse_script


def _module(file: str, *lines: str, **kwargs):
	return collect_file_module(parse_script("\n".join(lines) + "\n", file), **kwargs)


def test_goog_module_default_and_named_exports() -> None:
	mod = _module(
		"a/b/Foo.js",
		"goog.module('a.b.Foo');",
		"const Bar = goog.require('a.Bar');",
		"class Foo {}",
		"exports = Foo;",
		"exports.SIZE = 3;",
	)
	assert mod.namespaces == ("a.b.Foo",)
	assert mod.is_goog_module
	assert mod.has_imports and mod.has_exports and mod.has_default_export
	assert mod.output_path == "a/b/Foo.js"
	assert dict(mod.exported_namespaces_to_local_names) == {"exports": "Foo", "exports.SIZE": "SIZE"}
	assert dict(mod.imported_namespaces_to_symbols) == {
		"a.b.Foo": frozenset({"Foo"}),
		"a.b.Foo.SIZE": frozenset({"SIZE"}),
	}
	assert dict(mod.namespace_children) == {"a.b.Foo": frozenset({"SIZE"})}


def test_default_export_of_expression_uses_namespace_suffix() -> None:
	mod = _module("m/make.js", "goog.module('m.make');", "exports = function() {};")
	assert dict(mod.exported_namespaces_to_local_names) == {"exports": "make"}


def test_object_literal_exports_are_named() -> None:
	mod = _module("m/objs.js", "goog.module('m.objs');", "exports = {A: 1, B};")
	assert not mod.has_default_export
	assert dict(mod.exported_namespaces_to_local_names) == {"exports.A": "A", "exports.B": "B"}
	assert mod.namespace_children["m.objs"] == frozenset({"A", "B"})


def test_provide_assigned_namespace_exports_its_last_step() -> None:
	mod = _module(
		"a/b/Foo.js",
		"goog.provide('a.b.Foo');",
		"a.b.Foo = class {};",
		"a.b.Foo.helper = 1;",
	)
	assert not mod.is_goog_module
	assert dict(mod.exported_namespaces_to_local_names) == {"a.b.Foo": "Foo"}
	assert dict(mod.namespace_children) == {}


def test_provide_container_exports_direct_children_only() -> None:
	mod = _module(
		"a/colors.js",
		"goog.provide('a.colors');",
		"a.colors.RED = 'red';",
		"a.colors.nested.deep = 1;",
		"/** @typedef {string} */",
		"a.colors.Name;",
	)
	assert dict(mod.exported_namespaces_to_local_names) == {"a.colors.RED": "RED", "a.colors.Name": "Name"}
	assert mod.namespace_children["a.colors"] == frozenset({"RED", "Name"})


def test_keep_legacy_by_namespace_or_file_and_output_ext() -> None:
	by_ns = _module("l/x.js", "goog.provide('l.x');", keep_legacy=("l.x",))
	by_file = _module("l/y.js", "goog.provide('l.y');", keep_legacy=("l/y.js",))
	other = _module("l/z.js", "goog.provide('l.z');", keep_legacy=("l.x",), output_ext=".ts")
	assert by_ns.uses_legacy_form and by_file.uses_legacy_form
	assert not other.uses_legacy_form
	assert other.output_path == "l/z.ts"


def test_plain_script_has_no_namespaces() -> None:
	mod = _module("plain.js", "var x = 1;")
	assert mod.namespaces == ()
	assert mod.root_namespace is None
	assert not mod.has_imports and not mod.has_exports


def test_index_resolves_members_and_reports_duplicates() -> None:
	first = _module("a/one.js", "goog.module('a.dup');", "exports.X = 1;")
	second = _module("a/two.js", "goog.module('a.dup');", "exports.Y = 2;")
	sink = DiagnosticSink("metadata")
	index = build_module_index([first, second], sink)
	assert index.module_for_namespace("a.dup") is first
	assert index.module_for_namespace("a.dup.X") is first
	assert index.module_for_namespace("a.dup.Y") is second
	assert index.module_for_file("a/two.js") is second
	assert [d.code for d in sink] == ["E-NAMESPACE-DUPLICATE"]
	assert sink.diagnostics[0].span.file == "a/two.js"
	assert sink.diagnostics[0].phase == "metadata"
