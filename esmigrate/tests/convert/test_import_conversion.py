# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
from __future__ import annotations

from esmigrate.convert.imports import ImportKind, ImportSiteError, ModuleImport, parse_import_site
from esmigrate.driver import ConvertOptions, convert_program
from esmigrate.parser import parse_script


def _src(*lines: str) -> str:
	return "\n".join(lines) + "\n"


FOO = _src(
	"goog.module('a.b.Foo');",
	"class Foo {}",
	"exports = Foo;",
)

UTIL = _src(
	"goog.module('a.util');",
	"exports.VERSION = 3;",
	"exports.helper = function(x) {",
	"  return x;",
	"};",
)

COLORS = _src(
	"goog.provide('a.colors');",
	"a.colors.RED = 'red';",
	"a.colors.BLUE = 'blue';",
)


def test_parse_import_site_shapes() -> None:
	binding, destructuring, bare, other = parse_script(
		_src(
			"const Foo = goog.require('a.b.Foo');",
			"const {A, B: b} = goog.require('a.lib');",
			"goog.require('a.side');",
			"const x = 1;",
		),
	).body
	imp = parse_import_site(binding, "m.js")
	assert isinstance(imp, ModuleImport)
	assert imp.kind is ImportKind.BINDING
	assert imp.required_namespace == "a.b.Foo"
	assert imp.local_names == ("Foo",)
	assert imp.backup_name("Foo") == "FooExports"
	assert imp.backup_name("F") == "Foo"

	imp = parse_import_site(destructuring, "m.js")
	assert isinstance(imp, ModuleImport)
	assert imp.is_destructuring
	assert imp.base_namespace == "a.lib"
	assert imp.required_namespace == "a.lib.A"
	assert [(b.imported_name, b.local_name, b.namespace) for b in imp.bindings] == [
		("A", "A", "a.lib.A"),
		("B", "b", "a.lib.B"),
	]

	imp = parse_import_site(bare, "m.js")
	assert isinstance(imp, ModuleImport)
	assert imp.kind is ImportKind.BARE
	assert imp.bindings[0].full_name == "a.side"
	assert imp.bindings[0].local_name == "side"

	assert parse_import_site(other, "m.js") is None


def test_parse_import_site_rejects_two_local_names() -> None:
	(site,) = parse_script("let a, b = goog.require('a.util');").body
	err = parse_import_site(site, "m.js")
	assert isinstance(err, ImportSiteError)
	assert err.code == "E-IMPORT-ARITY"
	assert err.message == "Non destructuring imports should have only one local name, got [a, b]"


def test_binding_import_of_default_export() -> None:
	main = _src(
		"goog.module('a.c.main');",
		"",
		"/** Foo import. */",
		"const Foo = goog.require('a.b.Foo');",
		"",
		"exports.make = function() {",
		"  return new Foo();",
		"};",
	)
	result = convert_program({"a/b/Foo.js": FOO, "a/c/main.js": main})
	assert result.diagnostics == []
	assert result.outputs["a/c/main.js"] == _src(
		"/** Foo import. */",
		"import {Foo} from '../b/Foo';",
		"export const make = function() {",
		"  return new Foo();",
		"};",
	)
	assert result.outputs["a/b/Foo.js"] == _src("export class Foo {}")


def test_destructuring_import_uses_named_specifiers() -> None:
	main = _src(
		"goog.module('a.main');",
		"const {VERSION, helper: help} = goog.require('a.util');",
		"exports.run = function() {",
		"  return help(VERSION);",
		"};",
	)
	result = convert_program({"a/util.js": UTIL, "a/main.js": main})
	assert result.diagnostics == []
	assert result.outputs["a/main.js"] == _src(
		"import {VERSION, helper as help} from './util';",
		"export const run = function() {",
		"  return help(VERSION);",
		"};",
	)


def test_namespace_object_import_keeps_child_references() -> None:
	main = _src(
		"goog.module('a.paint');",
		"const colors = goog.require('a.colors');",
		"exports.pick = function() {",
		"  return colors.RED;",
		"};",
	)
	result = convert_program({"a/colors.js": COLORS, "a/paint.js": main})
	assert result.diagnostics == []
	assert result.outputs["a/paint.js"] == _src(
		"import * as colors from './colors';",
		"export const pick = function() {",
		"  return colors.RED;",
		"};",
	)


def test_named_and_namespace_import_use_backup_alias() -> None:
	widget = _src(
		"goog.module('ui.Widget');",
		"class Widget {}",
		"exports = Widget;",
		"exports.SIZE = 4;",
	)
	main = _src(
		"goog.module('ui.main');",
		"const Widget = goog.require('ui.Widget');",
		"const w = new Widget(Widget.SIZE);",
	)
	result = convert_program({"ui/Widget.js": widget, "ui/main.js": main})
	assert result.diagnostics == []
	assert result.outputs["ui/Widget.js"] == _src("export class Widget {}", "export const SIZE = 4;")
	assert result.outputs["ui/main.js"] == _src(
		"import {Widget} from './Widget';",
		"import * as WidgetExports from './Widget';",
		"const w = new Widget(WidgetExports.SIZE);",
	)


def test_bare_require_of_exported_symbol_rewrites_qualified_references() -> None:
	main = _src(
		"goog.provide('a.app');",
		"goog.require('a.b.Foo');",
		"",
		"a.app.start = function() {",
		"  return new a.b.Foo();",
		"};",
	)
	result = convert_program({"a/b/Foo.js": FOO, "a/app.js": main})
	assert result.diagnostics == []
	assert result.outputs["a/app.js"] == _src(
		"import {Foo} from './b/Foo';",
		"export const start = function() {",
		"  return new Foo();",
		"};",
	)


def test_side_effect_only_import() -> None:
	side = _src("goog.provide('a.side');", "window.loaded = true;")
	main = _src("goog.module('a.boot');", "goog.require('a.side');")
	result = convert_program({"a/side.js": side, "a/boot.js": main})
	assert result.diagnostics == []
	assert result.outputs["a/boot.js"] == _src("import './side';")


def test_unresolved_require_reports_once_and_keeps_site() -> None:
	main = _src(
		"goog.module('a.main');",
		"const Missing = goog.require('no.such.Module');",
		"exports.X = Missing;",
	)
	result = convert_program({"a/main.js": main})
	assert len(result.diagnostics) == 1
	diag = result.diagnostics[0]
	assert diag.code == "E-IMPORT-UNRESOLVED"
	assert diag.message == "Module no.such.Module does not exist."
	assert diag.span.file == "a/main.js"
	assert diag.span.line == 2
	assert result.outputs["a/main.js"] == _src(
		"const Missing = goog.require('no.such.Module');",
		"export const X = Missing;",
	)


def test_arity_error_is_reported_and_site_kept() -> None:
	main = _src("goog.module('a.main');", "let a, b = goog.require('a.util');")
	result = convert_program({"a/util.js": UTIL, "a/main.js": main})
	assert [d.code for d in result.diagnostics] == ["E-IMPORT-ARITY"]
	assert result.outputs["a/main.js"] == _src("let a, b = goog.require('a.util');")


def test_already_converted_namespaces_infer_paths() -> None:
	main = _src(
		"goog.module('a.main');",
		"const {Bar} = goog.require('converted.x.y');",
		"const Y = goog.require('converted.x.y');",
		"goog.require('converted.x.z');",
		"exports.all = [Bar, Y];",
	)
	result = convert_program({"a/main.js": main})
	assert result.diagnostics == []
	assert result.outputs["a/main.js"] == _src(
		"import {Bar} from '../x/y';",
		"import * as Y from '../x/y';",
		"import '../x/z';",
		"export const all = [Bar, Y];",
	)


def test_custom_already_converted_prefix() -> None:
	main = _src("goog.module('a.main');", "const Y = goog.require('done.x.y');")
	result = convert_program({"a/main.js": main}, ConvertOptions(already_converted_prefix="done"))
	assert result.diagnostics == []
	assert result.outputs["a/main.js"] == _src("import * as Y from '../x/y';")


def test_legacy_kept_targets_use_goog_specifiers() -> None:
	legacy = _src(
		"goog.provide('legacy.Thing');",
		"legacy.Thing = function() {};",
	)
	main = _src(
		"goog.module('a.main');",
		"const Thing = goog.require('legacy.Thing');",
		"/** @type {legacy.Thing} */",
		"const t = new legacy.Thing();",
	)
	result = convert_program(
		{"legacy/Thing.js": legacy, "a/main.js": main},
		ConvertOptions(keep_legacy=("legacy.Thing",)),
	)
	assert result.diagnostics == []
	assert "legacy/Thing.js" not in result.outputs
	assert result.outputs["a/main.js"] == _src(
		"import * as Thing from 'goog:legacy.Thing';",
		"/** @type {Thing} */",
		"const t = new Thing();",
	)


def test_legacy_kept_goog_module_with_default_export() -> None:
	legacy = _src("goog.module('legacy.mod');", "class Mod {}", "exports = Mod;")
	main = _src(
		"goog.module('a.main');",
		"const Mod = goog.require('legacy.mod');",
		"const {Mod: M} = goog.require('legacy.mod');",
	)
	result = convert_program(
		{"legacy/mod.js": legacy, "a/main.js": main},
		ConvertOptions(keep_legacy=("legacy/mod.js",)),
	)
	assert result.diagnostics == []
	assert result.outputs["a/main.js"] == _src(
		"import Mod from 'goog:legacy.mod';",
		"import {Mod as M} from 'goog:legacy.mod';",
	)


def test_unknown_destructured_member_is_a_warning() -> None:
	main = _src("goog.module('a.main');", "const {VERSION, nope} = goog.require('a.util');")
	result = convert_program({"a/util.js": UTIL, "a/main.js": main})
	assert [(d.code, d.severity) for d in result.diagnostics] == [("W-IMPORT-MEMBER", "warning")]
	assert not result.has_errors()
	assert result.outputs["a/main.js"] == _src("import {VERSION} from './util';")
