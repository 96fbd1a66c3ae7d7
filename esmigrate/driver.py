# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Library entry point: parse, collect metadata, convert and print a program.

`convert_program` takes every source of one run at once, since imports are
resolved against the namespaces declared anywhere in the program. Files that
fail to parse are reported and skipped; the rest are still converted.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Tuple

from lark.exceptions import UnexpectedInput

from esmigrate.convert.module_pass import ModuleConversionPass
from esmigrate.convert.rename import FrozenRenameTable
from esmigrate.core.diagnostics import Diagnostic, DiagnosticSink
from esmigrate.metadata import build_module_index, collect_file_module
from esmigrate.parser import ParseError, parse_script
from esmigrate.parser.ast import Located, Script
from esmigrate.printer import print_script


@dataclass(frozen=True)
class ConvertOptions:
	root: Optional[Path] = None
	out_dir: Optional[Path] = None
	already_converted_prefix: str = "converted"
	# Namespaces (or root-relative files) left in legacy form; importers use `goog:`.
	keep_legacy: Tuple[str, ...] = ()
	output_ext: str = ".js"


_PATH_KEYS = ("root", "out_dir")
_STR_KEYS = ("already_converted_prefix", "output_ext")


def load_options_json(path: Path, base: Optional[ConvertOptions] = None) -> ConvertOptions:
	"""
	Load options from a JSON config file, on top of `base`.

	Format (keys named like the ConvertOptions fields, all optional):
	{
	  "root": "src",
	  "out_dir": "out",
	  "already_converted_prefix": "converted",
	  "keep_legacy": ["goog.legacy.Thing"],
	  "output_ext": ".ts"
	}

	Relative `root`/`out_dir` are resolved against the config file's directory.
	"""
	obj = json.loads(path.read_text(encoding="utf-8"))
	if not isinstance(obj, dict):
		raise ValueError("config must be a JSON object")
	known = set(_PATH_KEYS) | set(_STR_KEYS) | {"keep_legacy"}
	unknown = sorted(set(obj) - known)
	if unknown:
		raise ValueError(f"unknown config key(s): {', '.join(unknown)}")

	changes: Dict[str, Any] = {}
	for key in _PATH_KEYS:
		if key in obj:
			if not isinstance(obj[key], str):
				raise ValueError(f"config {key} must be a string")
			changes[key] = path.parent / obj[key]
	for key in _STR_KEYS:
		if key in obj:
			if not isinstance(obj[key], str):
				raise ValueError(f"config {key} must be a string")
			changes[key] = obj[key]
	if "keep_legacy" in obj:
		keep = obj["keep_legacy"]
		if not isinstance(keep, list) or not all(isinstance(k, str) for k in keep):
			raise ValueError("config keep_legacy must be a list of strings")
		changes["keep_legacy"] = tuple(keep)
	return replace(base or ConvertOptions(), **changes)


@dataclass
class ConversionResult:
	# Root-relative output path -> ES module source.
	outputs: Dict[str, str] = field(default_factory=dict)
	diagnostics: List[Diagnostic] = field(default_factory=list)
	type_rewrite: FrozenRenameTable = field(default_factory=FrozenRenameTable)

	def has_errors(self) -> bool:
		return any(d.severity == "error" for d in self.diagnostics)


def parse_sources(sources: Mapping[str, str], diagnostics: DiagnosticSink) -> List[Script]:
	scripts: List[Script] = []
	for file in sorted(sources):
		try:
			scripts.append(parse_script(sources[file], file))
		except ParseError as err:
			diagnostics.report(err.loc, "E-PARSE", str(err), file=file)
		except UnexpectedInput as err:
			loc = Located(line=getattr(err, "line", 0), column=getattr(err, "column", 0))
			message = str(err).strip().splitlines()[0] if str(err).strip() else "syntax error"
			diagnostics.report(loc, "E-PARSE", message, file=file)
	return scripts


def convert_program(sources: Mapping[str, str], options: Optional[ConvertOptions] = None) -> ConversionResult:
	"""
	Convert a whole program. `sources` maps root-relative POSIX paths to file
	contents; the result maps output paths to converted sources. Files kept
	in legacy form contribute metadata but produce no output.
	"""
	options = options or ConvertOptions()
	parse_diags = DiagnosticSink("parser")
	meta_diags = DiagnosticSink("metadata")
	convert_diags = DiagnosticSink("convert")

	scripts = parse_sources(sources, parse_diags)
	modules = [
		collect_file_module(s, output_ext=options.output_ext, keep_legacy=options.keep_legacy) for s in scripts
	]
	index = build_module_index(modules, meta_diags)

	to_convert = [s for s in scripts if not index.by_file[s.file].uses_legacy_form]
	conversion = ModuleConversionPass(
		index,
		already_converted_prefix=options.already_converted_prefix,
		diagnostics=convert_diags,
	)
	converted = conversion.process(to_convert)

	result = ConversionResult(
		outputs={index.by_file[s.file].output_path: print_script(s) for s in converted},
		type_rewrite=conversion.type_rewrite or FrozenRenameTable(),
	)
	for sink in (parse_diags, meta_diags, convert_diags):
		result.diagnostics.extend(sink.diagnostics)
	return result


__all__ = [
	"ConvertOptions",
	"ConversionResult",
	"convert_program",
	"load_options_json",
	"parse_sources",
]
