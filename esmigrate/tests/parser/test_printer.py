# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
from __future__ import annotations

from esmigrate.parser import parse_script
from esmigrate.parser.ast import (
	NO_LOC,
	Binary,
	ExportDecl,
	ExportSpec,
	ImportDecl,
	ImportSpec,
	Name,
	Script,
)
from esmigrate.printer import print_expr, print_script


def _roundtrip(src: str) -> str:
	return print_script(parse_script(src))


def test_prints_declarations_with_two_space_indent() -> None:
	src = "function f(a, b) {\n  if (a) {\n    return b;\n  }\n  return null;\n}\n"
	assert _roundtrip(src) == src


def test_parenthesizes_from_precedence() -> None:
	assert _roundtrip("const y = (a + b) * c;") == "const y = (a + b) * c;\n"
	assert _roundtrip("const z = a - (b - c);") == "const z = a - (b - c);\n"
	assert _roundtrip("const w = a - b - c;") == "const w = a - b - c;\n"


def test_built_tree_gets_parentheses() -> None:
	inner = Binary(loc=NO_LOC, op="||", left=Name(NO_LOC, "a"), right=Name(NO_LOC, "b"))
	outer = Binary(loc=NO_LOC, op="&&", left=inner, right=Name(NO_LOC, "c"))
	assert print_expr(outer) == "(a || b) && c"


def test_empty_bodies_close_on_same_line() -> None:
	assert _roundtrip("class Bar {}\nfunction noop() {}\n") == "class Bar {}\nfunction noop() {}\n"


def test_jsdoc_comment_lines_keep_gutter() -> None:
	src = "/**\n     * Doc.\n     * @param {number} x\n     */\nfunction f(x) {}\n"
	assert _roundtrip(src) == "/**\n * Doc.\n * @param {number} x\n */\nfunction f(x) {}\n"


def test_function_expression_statement_is_wrapped() -> None:
	assert _roundtrip("(function() { init(); })();") == "(function() {\n  init();\n}());\n"


def test_property_of_integer_literal_keeps_parentheses() -> None:
	assert _roundtrip("var s = (1).toString();") == "var s = (1).toString();\n"
	assert _roundtrip("(42).toFixed(2);") == "(42).toFixed(2);\n"
	assert _roundtrip("var t = (1.5).toFixed(1);") == "var t = 1.5.toFixed(1);\n"


def test_import_and_export_forms() -> None:
	script = Script(
		file="m.js",
		body=(
			ImportDecl(loc=NO_LOC, source="./side"),
			ImportDecl(loc=NO_LOC, source="goog:a.b", default="b"),
			ImportDecl(loc=NO_LOC, source="./ns", namespace="ns"),
			ImportDecl(loc=NO_LOC, source="./named", specifiers=(ImportSpec("A", "A"), ImportSpec("B", "c"))),
			ExportDecl(loc=NO_LOC, specifiers=(ExportSpec("A", "A"), ExportSpec("c", "B"))),
			ExportDecl(loc=NO_LOC, comment="// marker"),
		),
	)
	assert print_script(script) == "\n".join(
		[
			"import './side';",
			"import b from 'goog:a.b';",
			"import * as ns from './ns';",
			"import {A, B as c} from './named';",
			"export {A, c as B};",
			"// marker",
			"export {};",
			"",
		]
	)
