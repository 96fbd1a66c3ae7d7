# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Module specifier paths.

All paths handled here are root-relative POSIX paths (`a/b/Foo.js`); the
driver normalizes input paths before they reach the conversion passes.
"""

from __future__ import annotations

import posixpath
from pathlib import PurePosixPath


def strip_extension(path: str) -> str:
	p = PurePosixPath(path)
	if p.suffix:
		return str(p.with_suffix(""))
	return path


def import_path(from_file: str, to_file: str) -> str:
	"""
	Relative ES module specifier for importing `to_file` from `from_file`.

	The extension is dropped and sibling paths get an explicit `./`:

	  import_path("a/b/main.js", "a/c/Foo.js")  ->  "../c/Foo"
	"""
	from_dir = posixpath.dirname(from_file) or "."
	rel = posixpath.relpath(strip_extension(to_file), from_dir)
	if not rel.startswith("."):
		rel = "./" + rel
	return rel


def namespace_to_path(namespace: str) -> str:
	"""`a.b.Foo` -> `a/b/Foo`."""
	return namespace.replace(".", "/")


def output_path_for(source: str, output_ext: str) -> str:
	"""Root-relative output path for a root-relative source path."""
	if not output_ext:
		return source
	if not output_ext.startswith("."):
		output_ext = "." + output_ext
	return strip_extension(source) + output_ext


__all__ = ["strip_extension", "import_path", "namespace_to_path", "output_path_for"]
