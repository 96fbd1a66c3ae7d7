# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Common diagnostic structure for the parser, metadata and conversion passes.

Diagnostics are data, not exceptions: passes report them into a
`DiagnosticSink` and keep going, and the driver decides how to surface them.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterator, List, Optional

from .span import Span


@dataclass
class Diagnostic:
	"""Represents a conversion diagnostic (error/warning/etc.)."""

	message: str
	code: str | None = None
	# Phase label ("parser", "metadata", "convert"); the sink stamps its own
	# phase when the caller does not pass one.
	phase: str | None = None
	severity: str = "error"
	span: Span = field(default_factory=Span)  # Source location (Span() denotes unknown).
	notes: list[str] = field(default_factory=list)

	def __post_init__(self) -> None:
		if self.span is None:  # type: ignore[unreachable]
			self.span = Span()


class DiagnosticSink:
	"""
	Accumulates diagnostics reported by a pass.

	`report` is the only entry point passes use. It never raises; callers
	inspect `has_errors()` once the run is complete.
	"""

	def __init__(self, phase: str | None = None) -> None:
		self.phase = phase
		self._diagnostics: List[Diagnostic] = []

	def report(
		self,
		loc: Any,
		code: str,
		message: str,
		*,
		file: Optional[str] = None,
		severity: str = "error",
		notes: Optional[list[str]] = None,
	) -> Diagnostic:
		diag = Diagnostic(
			message=message,
			code=code,
			phase=self.phase,
			severity=severity,
			span=Span.from_loc(loc, file=file),
			notes=list(notes or []),
		)
		self._diagnostics.append(diag)
		return diag

	def extend(self, diags: List[Diagnostic]) -> None:
		self._diagnostics.extend(diags)

	def has_errors(self) -> bool:
		return any(d.severity == "error" for d in self._diagnostics)

	@property
	def diagnostics(self) -> List[Diagnostic]:
		return list(self._diagnostics)

	def __iter__(self) -> Iterator[Diagnostic]:
		return iter(self._diagnostics)

	def __len__(self) -> int:
		return len(self._diagnostics)


__all__ = ["Diagnostic", "DiagnosticSink"]
