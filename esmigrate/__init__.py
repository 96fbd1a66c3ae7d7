"""
esmigrate: convert goog.module/goog.provide JavaScript into ES modules.

Packages:
  - core: Span/Diagnostic types shared across passes
  - parser: lark grammar and AST for the legacy JavaScript subset
  - convert: the export/import/reference conversion engine

Modules:
  - metadata: per-file module metadata and the namespace index
  - names, paths, comments, jsdoc: helpers used by the passes
  - printer: ES source printer
  - driver: `convert_program` library entry point
  - cli: the `esmigrate` command
"""

from .driver import ConversionResult, ConvertOptions, convert_program

__all__ = ["ConversionResult", "ConvertOptions", "convert_program"]
