# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Parser for the legacy JavaScript subset.

`parse_script(source, file)` returns an immutable `Script`; syntax errors
surface as lark `UnexpectedInput` (or `ParseError` for literal decoding) and
are turned into parser-phase diagnostics by the driver.
"""

from . import ast
from .parser import ParseError, parse_expr, parse_script

__all__ = ["ast", "ParseError", "parse_expr", "parse_script"]
