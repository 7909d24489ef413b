"""
This module holds the reporters the coordinator uses to emit body set snapshots.

A reporter receives three kinds of events from the simulation loop: the initial state,
a state after a step (at the configured cadence) and the final state. PrintReporter
writes them as plain text, one Body(...) line per body under an "Initial positions:",
"Step k" or "Final positions:" heading, optionally followed by a diagnostics line with
energy and momentum drift. NullReporter discards everything. Reporters are only ever
called on the coordinator rank and only between steps, so they always see a consistent
body set.
"""

from __future__ import annotations
import sys
from typing import TYPE_CHECKING, Optional, TextIO

from .constants import G as _G
from .diagnostics import Diagnostics

if TYPE_CHECKING:
    from .body_set import BodySet


_MOMENTUM_DRIFT_WARN = 1e-9


class Reporter:
	def initial(self, bodies: "BodySet") -> None:
		pass

	def step(self, step: int, bodies: "BodySet") -> None:
		pass

	def final(self, bodies: "BodySet") -> None:
		pass


class NullReporter(Reporter):
	pass


class PrintReporter(Reporter):

	def __init__(self, stream: Optional[TextIO] = None, diagnostics: bool = False, G: float = _G) -> None:
		self.stream = stream
		self.with_diagnostics = bool(diagnostics)
		self.G = float(G)
		self.diagnostics: Optional[Diagnostics] = None

	def _emit(self, header: str, bodies: "BodySet") -> None:
		out = self.stream if self.stream is not None else sys.stdout
		print(header, file=out)
		for body in bodies:
			print(repr(body), file=out)
		if self.diagnostics is not None:
			d = self.diagnostics.summary()
			print(
				f"  E={d['energy']:.9e} (K={d['kinetic']:.6e}, U={d['potential']:.6e}) "
				f"p=({d['px']:.9e}, {d['py']:.9e}) drift={d['momentum_drift']:.3e}",
				file=out,
			)
			if d["momentum_drift"] > _MOMENTUM_DRIFT_WARN:
				self.diagnostics.rate_limited_print(
					"momentum_drift",
					f"[warning] relative momentum drift {d['momentum_drift']:.3e} exceeds {_MOMENTUM_DRIFT_WARN:g}",
				)

	def initial(self, bodies: "BodySet") -> None:
		if self.with_diagnostics:
			# momentum drift is measured against the initial state
			self.diagnostics = Diagnostics(bodies, self.G)
		self._emit("Initial positions:", bodies)

	def step(self, step: int, bodies: "BodySet") -> None:
		self._emit(f"Step {step}", bodies)

	def final(self, bodies: "BodySet") -> None:
		self._emit("Final positions:", bodies)
