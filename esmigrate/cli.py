# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Command line interface: `esmigrate FILE... [options]`.

Diagnostics go to stderr as `file:line:column: severity: message`, or as one
JSON payload on stdout with `--json`. Converted sources are written under
`--out-dir`, or printed to stdout behind a `// <output path>` banner.
"""

from __future__ import annotations

import argparse
import json
import sys
from dataclasses import replace
from pathlib import Path
from typing import Dict, List, Optional

from esmigrate.core.diagnostics import Diagnostic, DiagnosticSink
from esmigrate.driver import ConversionResult, ConvertOptions, convert_program, load_options_json


def _diag_to_json(diag: Diagnostic) -> dict:
	"""Render a Diagnostic to a structured JSON-friendly dict."""
	span = diag.span
	return {
		"phase": diag.phase,
		"code": diag.code,
		"message": diag.message,
		"severity": diag.severity,
		"file": span.file if span is not None else None,
		"line": span.line if span is not None else None,
		"column": span.column if span is not None else None,
		"notes": list(diag.notes or []),
	}


def _diag_to_text(diag: Diagnostic) -> str:
	span = diag.span
	file = span.file or "?"
	line = span.line if span.line is not None else "?"
	column = span.column if span.column is not None else "?"
	return f"{file}:{line}:{column}: {diag.severity}: {diag.message}"


def _relative_name(path: Path, root: Path) -> str:
	try:
		return path.resolve().relative_to(root.resolve()).as_posix()
	except ValueError:
		return path.as_posix()


def _build_parser() -> argparse.ArgumentParser:
	parser = argparse.ArgumentParser(
		prog="esmigrate",
		description="Convert goog.module/goog.provide sources into ES modules",
	)
	parser.add_argument("source", type=Path, nargs="+", help="Path(s) to the legacy source files of one program")
	parser.add_argument("--root", type=Path, help="Directory module paths are relative to (default: current directory)")
	parser.add_argument("--out-dir", type=Path, help="Write converted files under this directory instead of stdout")
	parser.add_argument(
		"--already-converted-prefix",
		help="Namespace prefix of modules that were converted earlier (default: converted)",
	)
	parser.add_argument(
		"--keep-legacy",
		dest="keep_legacy",
		action="append",
		help="Namespace or file left in legacy form; importers use goog: specifiers (repeatable)",
	)
	parser.add_argument("--output-ext", help="Extension of the converted files (default: .js)")
	parser.add_argument("--config", type=Path, help="JSON config file seeding the options above")
	parser.add_argument(
		"--json",
		action="store_true",
		help="Emit diagnostics and outputs as JSON (phase/code/message/severity/file/line/column)",
	)
	return parser


def _options_from_args(args: argparse.Namespace) -> ConvertOptions:
	options = ConvertOptions()
	if args.config is not None:
		options = load_options_json(args.config, options)
	changes: Dict[str, object] = {}
	if args.root is not None:
		changes["root"] = args.root
	if args.out_dir is not None:
		changes["out_dir"] = args.out_dir
	if args.already_converted_prefix is not None:
		changes["already_converted_prefix"] = args.already_converted_prefix
	if args.keep_legacy:
		changes["keep_legacy"] = tuple(options.keep_legacy) + tuple(args.keep_legacy)
	if args.output_ext is not None:
		changes["output_ext"] = args.output_ext
	return replace(options, **changes)  # type: ignore[arg-type]


def _emit_error(message: str, file: Optional[str], as_json: bool) -> int:
	if as_json:
		diag = {"phase": "driver", "code": None, "message": message, "severity": "error", "file": file, "line": None, "column": None, "notes": []}
		print(json.dumps({"exit_code": 1, "diagnostics": [diag], "outputs": {}}))
	else:
		print(f"{file or 'esmigrate'}:?:?: error: {message}", file=sys.stderr)
	return 1


def _write_outputs(result: ConversionResult, out_dir: Path) -> None:
	for rel, text in sorted(result.outputs.items()):
		target = out_dir / rel
		target.parent.mkdir(parents=True, exist_ok=True)
		target.write_text(text, encoding="utf-8")


def main(argv: List[str] | None = None) -> int:
	"""
	Convert the given files as one program.

	Exit code is 1 when any error diagnostic was reported (the files that did
	convert are still written), 0 otherwise.
	"""
	args = _build_parser().parse_args(argv)
	try:
		options = _options_from_args(args)
	except (OSError, ValueError) as err:
		return _emit_error(f"invalid config: {err}", str(args.config), args.json)

	root = options.root or Path.cwd()
	sources: Dict[str, str] = {}
	read_diags = DiagnosticSink("driver")
	for path in args.source:
		rel = _relative_name(path, root)
		try:
			sources[rel] = path.read_text(encoding="utf-8")
		except UnicodeDecodeError as err:
			read_diags.report(None, "E-DECODE", f"cannot decode source as UTF-8: {err.reason} at byte {err.start}", file=rel)
		except OSError as err:
			return _emit_error(f"cannot read source: {err.strerror or err}", str(path), args.json)

	result = convert_program(sources, options)
	result.diagnostics[:0] = read_diags.diagnostics
	exit_code = 1 if result.has_errors() else 0

	if options.out_dir is not None:
		_write_outputs(result, options.out_dir)

	if args.json:
		payload = {
			"exit_code": exit_code,
			"diagnostics": [_diag_to_json(d) for d in result.diagnostics],
			"outputs": {} if options.out_dir is not None else dict(sorted(result.outputs.items())),
		}
		print(json.dumps(payload))
		return exit_code

	for diag in result.diagnostics:
		print(_diag_to_text(diag), file=sys.stderr)
	if options.out_dir is None:
		for rel, text in sorted(result.outputs.items()):
			sys.stdout.write(f"// {rel}\n{text}")
	return exit_code


__all__ = ["main"]
