# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
from __future__ import annotations

import json
from pathlib import Path

import pytest

from esmigrate.driver import ConvertOptions, convert_program, load_options_json


def test_parse_error_is_reported_and_other_files_still_convert() -> None:
	result = convert_program(
		{
			"a/bad.js": "goog.module('a.bad');\nconst = 1;\n",
			"a/good.js": "goog.module('a.good');\nexports.X = 1;\n",
		}
	)
	assert [(d.code, d.phase, d.span.file, d.span.line) for d in result.diagnostics] == [
		("E-PARSE", "parser", "a/bad.js", 2),
	]
	assert result.has_errors()
	assert result.outputs == {"a/good.js": "export const X = 1;\n"}


def test_output_extension_applies_to_paths_and_specifiers() -> None:
	result = convert_program(
		{
			"a/Foo.js": "goog.module('a.Foo');\nclass Foo {}\nexports = Foo;\n",
			"a/main.js": "goog.module('a.main');\nconst Foo = goog.require('a.Foo');\n",
		},
		ConvertOptions(output_ext=".ts"),
	)
	assert sorted(result.outputs) == ["a/Foo.ts", "a/main.ts"]
	assert result.outputs["a/main.ts"] == "import {Foo} from './Foo';\n"


def test_conversion_is_independent_of_input_order() -> None:
	sources = {
		"z/Foo.js": "goog.module('z.Foo');\nclass Foo {}\nexports = Foo;\n",
		"a/main.js": "goog.module('a.main');\nconst Foo = goog.require('z.Foo');\nexports.f = new Foo();\n",
	}
	forward = convert_program(sources)
	backward = convert_program(dict(reversed(list(sources.items()))))
	assert forward.outputs == backward.outputs


def test_load_options_json(tmp_path: Path) -> None:
	config = tmp_path / "esmigrate.json"
	config.write_text(
		json.dumps(
			{
				"root": "src",
				"already_converted_prefix": "done",
				"keep_legacy": ["legacy.Thing"],
				"output_ext": ".ts",
			}
		)
	)
	options = load_options_json(config)
	assert options.root == tmp_path / "src"
	assert options.out_dir is None
	assert options.already_converted_prefix == "done"
	assert options.keep_legacy == ("legacy.Thing",)
	assert options.output_ext == ".ts"


@pytest.mark.parametrize(
	"payload, message",
	[
		([], "config must be a JSON object"),
		({"bogus": 1}, "unknown config key(s): bogus"),
		({"keep_legacy": "x"}, "config keep_legacy must be a list of strings"),
		({"output_ext": 3}, "config output_ext must be a string"),
	],
)
def test_load_options_json_rejects_bad_config(tmp_path: Path, payload: object, message: str) -> None:
	config = tmp_path / "esmigrate.json"
	config.write_text(json.dumps(payload))
	with pytest.raises(ValueError) as excinfo:
		load_options_json(config)
	assert str(excinfo.value) == message
