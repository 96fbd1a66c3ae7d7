"""
esmigrate.convert: the module conversion engine.

Modules:
  - symbols: ExportedSymbol identities and the declaration registry
  - rename: write-once value/type rename tables
  - exports: export traversal (markers, export assignments, typedefs)
  - imports: import traversal (goog.require sites -> ES imports)
  - references: reference rewriting over values and JSDoc types
  - module_pass: runs the three traversals in order
"""

from .module_pass import ModuleConversionPass

__all__ = [
	"ModuleConversionPass",
	"exports",
	"imports",
	"module_pass",
	"references",
	"rename",
	"symbols",
]
