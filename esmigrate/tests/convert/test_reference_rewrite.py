# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
from __future__ import annotations

from esmigrate.convert.references import ReferenceRewriter
from esmigrate.convert.rename import RenameTables
from esmigrate.driver import convert_program
from esmigrate.jsdoc import rewrite_type_names
from esmigrate.parser import parse_script
from esmigrate.printer import print_script


def _src(*lines: str) -> str:
	return "\n".join(lines) + "\n"


def _rewrite(source: str, *entries: tuple) -> str:
	tables = RenameTables()
	for full_name, namespace, local in entries:
		tables.register_local_symbol("m.js", full_name, namespace, local)
	value, types = tables.freeze()
	return print_script(ReferenceRewriter(value, types).rewrite_script(parse_script(source, "m.js")))


def test_longest_match_is_replaced_and_not_descended() -> None:
	out = _rewrite(
		"a.b.C.d.e();\na.b.x();\n",
		("a.b", "a.b", "ab"),
		("a.b.C", "a.b.C", "C"),
		("C.d", "C.d", "nope"),
	)
	assert out == "C.d.e();\nab.x();\n"


def test_rewrites_inside_nested_bodies() -> None:
	out = _rewrite(
		_src(
			"class Foo extends a.Base {",
			"  run() {",
			"    if (a.flag) {",
			"      throw new a.Err(a.flag ? [a.x] : {k: a.x});",
			"    }",
			"  }",
			"}",
		),
		("a", "a", "lib"),
	)
	assert out == _src(
		"class Foo extends lib.Base {",
		"  run() {",
		"    if (lib.flag) {",
		"      throw new lib.Err(lib.flag ? [lib.x] : {k: lib.x});",
		"    }",
		"  }",
		"}",
	)


def test_shorthand_property_expands_when_renamed() -> None:
	assert _rewrite("f({Foo});", ("Foo", "a.Foo", "Bar")) == "f({Foo: Bar});\n"
	assert _rewrite("f({Foo});", ("Foo", "a.Foo", "Foo")) == "f({Foo});\n"


def test_files_without_entries_are_untouched() -> None:
	tables = RenameTables()
	tables.register_local_symbol("other.js", "a", "a", "b")
	value, types = tables.freeze()
	script = parse_script("a.x();", "m.js")
	assert ReferenceRewriter(value, types).rewrite_script(script) is script


def test_type_names_rewritten_in_jsdoc_braces_only() -> None:
	comment = "/**\n * a.b.Foo is described here.\n * @param {!a.b.Foo|a.b.Other} x\n * @return {{foo: a.b.Foo}}\n */"
	out = rewrite_type_names(comment, lambda name: "Foo" if name == "a.b.Foo" else None)
	assert out == "/**\n * a.b.Foo is described here.\n * @param {!Foo|a.b.Other} x\n * @return {{foo: Foo}}\n */"


def test_jsdoc_types_follow_imports_across_files() -> None:
	foo = _src("goog.module('a.b.Foo');", "class Foo {}", "exports = Foo;")
	main = _src(
		"goog.module('a.main');",
		"const Foo = goog.require('a.b.Foo');",
		"",
		"/**",
		" * @param {a.b.Foo} foo",
		" * @return {Array<a.b.Foo>}",
		" */",
		"function wrap(foo) {",
		"  return [foo];",
		"}",
		"exports.wrap = wrap;",
	)
	result = convert_program({"a/b/Foo.js": foo, "a/main.js": main})
	assert result.diagnostics == []
	assert result.outputs["a/main.js"] == _src(
		"import {Foo} from './b/Foo';",
		"/**",
		" * @param {Foo} foo",
		" * @return {Array<Foo>}",
		" */",
		"export function wrap(foo) {",
		"  return [foo];",
		"}",
	)
	assert result.type_rewrite.get("a/main.js", "a.b.Foo") == "Foo"
